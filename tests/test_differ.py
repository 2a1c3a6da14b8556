"""Tests for the matcher/classifier."""

from __future__ import annotations

import dataclasses
import json
import time

import pytest
from conftest import FixedScoreFactory

from version_differ.exceptions import IOFailure
from version_differ.matching.comparer import NormalizedComparerFactory
from version_differ.matching.differ import classify_path, compare, run
from version_differ.matching.snapshot import PathFilter, Snapshot
from version_differ.matching.types import (
    AmbiguityReason,
    AmbiguousResult,
    DiffResult,
    MovedResult,
    UnchangedResult,
)

# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _compare(before_root, after_root, factory=None, **kwargs) -> DiffResult:
    before = Snapshot.build(before_root)
    after = Snapshot.build(after_root)
    return compare(before, after, factory or NormalizedComparerFactory(), **kwargs)


def _before_paths(result: DiffResult) -> list[str]:
    return (
        [r.path for r in result.unchanged]
        + [r.orig_path for r in result.moved]
        + [r.orig_path for r in result.ambiguous]
    )


class FailingFactory:
    """Raises IOFailure for one file name; every other comparer takes a moment to build."""

    def __init__(self, fail_on: str) -> None:
        self.fail_on = fail_on
        self.started: list[str] = []

    def new_comparer(self, path):
        if path.name == self.fail_on:
            raise IOFailure(f"cannot read {path}")
        self.started.append(path.name)
        time.sleep(0.05)
        return self


# ---------------------------------------------------------------------------
# Scenarios
# ---------------------------------------------------------------------------


class TestScenarios:
    def test_identical_file_unchanged(self, trees):
        before, after = trees({"a/X.txt": "hello world"}, {"a/X.txt": "hello world"})

        result = _compare(before, after)

        assert result.unchanged == (UnchangedResult(path="a/X.txt", similarity=1.0),)
        assert result.moved == ()
        assert result.ambiguous == ()
        assert result.new_files == ()

    def test_no_file_with_same_name(self, trees):
        before, after = trees({"a/X.txt": "hello"}, {"a/Other.txt": "hello"})

        result = _compare(before, after)

        assert result.ambiguous == (
            AmbiguousResult(
                orig_path="a/X.txt", candidates={}, reason=AmbiguityReason.NO_SAME_NAME
            ),
        )
        assert result.ambiguous[0].reason == "no file with same name"
        assert result.new_files == ("a/Other.txt",)

    def test_moved_file(self, trees):
        before, after = trees({"a/X.txt": "foo"}, {"b/X.txt": "foo"})

        result = _compare(before, after)

        assert result.moved == (
            MovedResult(orig_path="a/X.txt", new_path="b/X.txt", similarity=1.0),
        )
        assert result.new_files == ()

    def test_multiple_files_with_same_name(self, trees):
        before, after = trees(
            {"a/X.txt": "the quick brown fox"},
            {"b/X.txt": "the quick brown fox", "c/X.txt": "qqqq"},
        )

        result = _compare(before, after)

        assert len(result.ambiguous) == 1
        record = result.ambiguous[0]
        assert record.orig_path == "a/X.txt"
        assert record.reason == AmbiguityReason.MULTIPLE_SAME_NAME
        assert record.candidates == {"b/X.txt": 1.0, "c/X.txt": 0.0}
        assert result.new_files == ()

    def test_new_file(self, trees):
        before, after = trees(
            {"a/X.txt": "x content"},
            {"a/X.txt": "x content", "z/NewFile.txt": "brand new"},
        )

        result = _compare(before, after)

        assert result.new_files == ("z/NewFile.txt",)


# ---------------------------------------------------------------------------
# Branch details
# ---------------------------------------------------------------------------


class TestExactPathBranch:
    def test_rewritten_in_place_is_ambiguous_against_itself(self, trees):
        before, after = trees({"a/X.txt": "abcdefgh"}, {"a/X.txt": "zyxwvuts"})

        result = _compare(before, after)

        record = result.ambiguous[0]
        assert record.reason == AmbiguityReason.CHANGED_IN_PLACE
        assert record.reason == "significant change at same path"
        assert record.candidates == {"a/X.txt": 0.0}

    def test_exact_path_never_falls_through_to_basename_search(self, trees):
        """Known limitation: the identical copy elsewhere is reported as new."""
        before, after = trees(
            {"a/X.txt": "original body"},
            {"a/X.txt": "totally rewritten", "b/X.txt": "original body"},
        )

        result = _compare(before, after)

        assert [r.orig_path for r in result.ambiguous] == ["a/X.txt"]
        assert list(result.ambiguous[0].candidates) == ["a/X.txt"]
        assert result.new_files == ("b/X.txt",)

    def test_only_exact_path_scored(self, trees):
        before, after = trees({"a/X.txt": "x"}, {"a/X.txt": "x", "b/X.txt": "x"})
        factory = FixedScoreFactory(before, after, {("a/X.txt", "a/X.txt"): 0.9})

        _compare(before, after, factory)

        assert factory.calls == [("a/X.txt", "a/X.txt")]


class TestBasenameBranch:
    def test_single_candidate_low_score(self, trees):
        before, after = trees({"a/X.txt": "abcdefgh"}, {"b/X.txt": "zyxwvuts"})

        result = _compare(before, after)

        record = result.ambiguous[0]
        assert record.reason == AmbiguityReason.MOVED_AND_CHANGED
        assert record.candidates == {"b/X.txt": 0.0}
        assert result.new_files == ()

    def test_every_candidate_scored_even_when_all_poor(self, trees):
        before, after = trees(
            {"a/X.txt": "x"},
            {"b/X.txt": "x", "c/X.txt": "x", "d/X.txt": "x"},
        )
        factory = FixedScoreFactory(before, after, {}, default=0.1)

        result = _compare(before, after, factory)

        assert result.ambiguous[0].candidates == {
            "b/X.txt": 0.1,
            "c/X.txt": 0.1,
            "d/X.txt": 0.1,
        }
        assert len(factory.calls) == 3


class TestThreshold:
    def test_exact_boundary_is_unchanged(self, trees):
        """abcde/abcdx score exactly 0.75."""
        before, after = trees({"a/X.txt": "abcde"}, {"a/X.txt": "abcdx"})

        result = _compare(before, after)

        assert result.unchanged == (UnchangedResult(path="a/X.txt", similarity=0.75),)

    def test_exact_boundary_is_moved(self, trees):
        before, after = trees({"a/X.txt": "abcde"}, {"b/X.txt": "abcdx"})

        result = _compare(before, after)

        assert result.moved == (
            MovedResult(orig_path="a/X.txt", new_path="b/X.txt", similarity=0.75),
        )

    def test_just_below_boundary_is_ambiguous(self, trees):
        before, after = trees({"a/X.txt": "x", "a/Y.txt": "y"}, {"a/X.txt": "x", "b/Y.txt": "y"})
        factory = FixedScoreFactory(
            before,
            after,
            {("a/X.txt", "a/X.txt"): 0.7499, ("a/Y.txt", "b/Y.txt"): 0.7499},
        )

        result = _compare(before, after, factory)

        assert result.unchanged == ()
        assert result.moved == ()
        assert {r.reason for r in result.ambiguous} == {
            AmbiguityReason.CHANGED_IN_PLACE,
            AmbiguityReason.MOVED_AND_CHANGED,
        }

    def test_threshold_is_configurable(self, trees):
        before, after = trees({"a/X.txt": "x"}, {"a/X.txt": "x"})
        factory = FixedScoreFactory(before, after, {("a/X.txt", "a/X.txt"): 0.6})

        assert _compare(before, after, factory, threshold=0.5).unchanged
        assert not _compare(before, after, factory, threshold=0.75).unchanged


# ---------------------------------------------------------------------------
# Properties
# ---------------------------------------------------------------------------

MIXED_BEFORE = {
    "core/Same.java": "class Same { int a; }",
    "core/Edited.java": "class Edited { int a; int b; int c; int d; }",
    "core/Moved.java": "class Moved { void run() {} }",
    "core/Dup.java": "class Dup {}",
    "core/Gone.java": "class Gone {}",
    "core/Rewritten.java": "aaaaaaaaaaaaaaaa",
}

MIXED_AFTER = {
    "core/Same.java": "class Same { int a; }",
    "core/Edited.java": "class Edited { int a; int b; int c; int e; }",
    "api/Moved.java": "class Moved { void run() {} }",
    "api/Dup.java": "class Dup {}",
    "impl/Dup.java": "class Dup { int x; }",
    "core/Rewritten.java": "zzzzzzzzzzzzzzzz",
    "core/Fresh.java": "class Fresh {}",
    "docs/notes.txt": "notes",
}


class TestPartition:
    def test_every_before_path_classified_exactly_once(self, trees):
        before, after = trees(MIXED_BEFORE, MIXED_AFTER)

        result = _compare(before, after)

        paths = _before_paths(result)
        assert len(paths) == len(MIXED_BEFORE)
        assert set(paths) == set(MIXED_BEFORE)

    def test_new_files_are_exactly_unclaimed_after_paths(self, trees):
        before, after = trees(MIXED_BEFORE, MIXED_AFTER)

        result = _compare(before, after)

        claimed = {r.path for r in result.unchanged} | {r.new_path for r in result.moved}
        for r in result.ambiguous:
            claimed.update(r.candidates)
        assert set(result.new_files) == set(MIXED_AFTER) - claimed
        assert set(result.new_files) == {"core/Fresh.java", "docs/notes.txt"}

    def test_mixed_classification(self, trees):
        before, after = trees(MIXED_BEFORE, MIXED_AFTER)

        result = _compare(before, after)

        assert {r.path for r in result.unchanged} == {"core/Same.java", "core/Edited.java"}
        assert [(r.orig_path, r.new_path) for r in result.moved] == [
            ("core/Moved.java", "api/Moved.java")
        ]
        reasons = {r.orig_path: r.reason for r in result.ambiguous}
        assert reasons == {
            "core/Dup.java": AmbiguityReason.MULTIPLE_SAME_NAME,
            "core/Gone.java": AmbiguityReason.NO_SAME_NAME,
            "core/Rewritten.java": AmbiguityReason.CHANGED_IN_PLACE,
        }

    def test_thread_pool_matches_sequential(self, trees):
        before, after = trees(MIXED_BEFORE, MIXED_AFTER)

        sequential = _compare(before, after)
        threaded = _compare(before, after, workers=4)

        assert threaded == sequential

    def test_empty_snapshots(self, trees):
        before, after = trees({}, {})
        assert _compare(before, after) == DiffResult()


class TestResultValue:
    def test_records_are_frozen(self, trees):
        before, after = trees({"a/X.txt": "x"}, {"a/X.txt": "x"})
        record = _compare(before, after).unchanged[0]
        with pytest.raises(dataclasses.FrozenInstanceError):
            record.similarity = 0.0  # type: ignore[misc]

    def test_candidates_are_read_only(self):
        scores = {"b/X.txt": 0.5}
        record = AmbiguousResult("a/X.txt", scores, AmbiguityReason.MOVED_AND_CHANGED)
        scores["c/X.txt"] = 0.9

        with pytest.raises(TypeError):
            record.candidates["b/X.txt"] = 1.0  # type: ignore[index]
        assert record.candidates == {"b/X.txt": 0.5}

    def test_sorted_orders_for_presentation(self):
        result = DiffResult(
            unchanged=(UnchangedResult("b", 1.0), UnchangedResult("a", 1.0)),
            moved=(MovedResult("z", "y", 1.0), MovedResult("m", "n", 1.0)),
            new_files=("q", "c"),
        )
        ordered = result.sorted()
        assert [r.path for r in ordered.unchanged] == ["a", "b"]
        assert [r.orig_path for r in ordered.moved] == ["m", "z"]
        assert ordered.new_files == ("c", "q")

    def test_counts(self, trees):
        before, after = trees(MIXED_BEFORE, MIXED_AFTER)
        assert _compare(before, after).counts == {
            "unchanged": 2,
            "moved": 1,
            "ambiguous": 3,
            "new": 2,
        }


class TestFailures:
    def test_unreadable_before_file_aborts(self, trees):
        before, after = trees({"a/X.txt": "x", "a/Y.txt": "y"}, {"a/X.txt": "x"})
        before_snap = Snapshot.build(before)
        after_snap = Snapshot.build(after)
        (before / "a" / "Y.txt").unlink()

        with pytest.raises(IOFailure):
            compare(before_snap, after_snap, NormalizedComparerFactory())

    def test_unreadable_file_aborts_thread_pool(self, trees):
        before, after = trees({"a/X.txt": "x", "a/Y.txt": "y"}, {"a/Y.txt": "y"})
        before_snap = Snapshot.build(before)
        after_snap = Snapshot.build(after)
        (after / "a" / "Y.txt").unlink()

        with pytest.raises(IOFailure):
            compare(before_snap, after_snap, NormalizedComparerFactory(), workers=2)

    def test_failure_cancels_queued_paths(self, trees):
        before, after = trees({f"{i:03d}.txt": "x" for i in range(40)}, {})
        factory = FailingFactory(fail_on="000.txt")

        with pytest.raises(IOFailure):
            compare(Snapshot.build(before), Snapshot.build(after), factory, workers=2)

        assert len(factory.started) < 20

    def test_classify_path_requires_before_path(self, trees):
        from version_differ.exceptions import PathNotFound

        before, after = trees({"a/X.txt": "x"}, {})
        with pytest.raises(PathNotFound):
            classify_path(
                "missing.txt",
                Snapshot.build(before),
                Snapshot.build(after),
                NormalizedComparerFactory(),
            )


class TestRun:
    def test_run_uses_config(self, tmp_config):
        (tmp_config.before_root / "src").mkdir()
        (tmp_config.before_root / "src" / "A.java").write_text("import x;\nclass A {}\n")
        (tmp_config.before_root / "notes.txt").write_text("ignored")
        (tmp_config.after_root / "lib").mkdir()
        (tmp_config.after_root / "lib" / "A.java").write_text("import y;\nclass A {}\n")
        tmp_config.dialect = "java"
        tmp_config.path_filter = PathFilter(include=(r".*\.java",))

        result = run(tmp_config)

        assert result.moved == (MovedResult("src/A.java", "lib/A.java", 1.0),)
        assert result.ambiguous == ()

    def test_run_records_event(self, tmp_config, event_logger):
        (tmp_config.before_root / "A.txt").write_text("same")
        (tmp_config.after_root / "A.txt").write_text("same")

        run(tmp_config, event_logger=event_logger)

        log_files = list(tmp_config.log_dir.glob("*.jsonl"))
        entry = json.loads(log_files[0].read_text().splitlines()[-1])
        assert entry["event_type"] == "diff.run"
        assert entry["data"]["status"] == "success"
        assert entry["data"]["counts"]["unchanged"] == 1
        assert entry["duration_ms"] >= 0

    def test_run_records_failure(self, tmp_config, event_logger):
        tmp_config.after_root = tmp_config.after_root / "missing"

        with pytest.raises(IOFailure):
            run(tmp_config, event_logger=event_logger)

        log_files = list(tmp_config.log_dir.glob("*.jsonl"))
        entry = json.loads(log_files[0].read_text().splitlines()[-1])
        assert entry["data"]["status"] == "error"
        assert "not a directory" in entry["data"]["error"]
