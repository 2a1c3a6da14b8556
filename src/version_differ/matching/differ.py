"""Matcher/classifier -- decide which before-files correspond to which after-files."""

from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from pathlib import PurePosixPath
from typing import TYPE_CHECKING

from version_differ.matching.comparer import ComparerFactory, NormalizedComparerFactory
from version_differ.matching.snapshot import Snapshot
from version_differ.matching.types import (
    AmbiguityReason,
    AmbiguousResult,
    DiffResult,
    Found,
    MovedResult,
    Record,
    UnchangedResult,
)

if TYPE_CHECKING:
    from version_differ.config import DifferConfig
    from version_differ.logging.logger import EventLogger

logger = logging.getLogger(__name__)

DEFAULT_THRESHOLD = 0.75


def classify_path(
    path: str,
    before: Snapshot,
    after: Snapshot,
    comparer_factory: ComparerFactory,
    threshold: float = DEFAULT_THRESHOLD,
) -> Record:
    """Classify a single before-path against the after snapshot.

    1. Same relative path exists after: Unchanged when the score reaches the
       threshold, otherwise Ambiguous against that path only. An exact path
       match never falls through to the basename search.
    2. Otherwise look for files with the same basename anywhere after:
       one candidate is Moved (or Ambiguous if it scores below the
       threshold), none or several are Ambiguous with every candidate scored.
    """
    logger.debug("Comparing %s", path)
    comparer = comparer_factory.new_comparer(before.to_absolute(path))

    exact = after.try_resolve(path)
    if isinstance(exact, Found):
        similarity = comparer.similarity(exact.path)
        if similarity >= threshold:
            return UnchangedResult(path=path, similarity=similarity)
        return AmbiguousResult(
            orig_path=path,
            candidates={path: similarity},
            reason=AmbiguityReason.CHANGED_IN_PLACE,
        )

    contenders = after.find_by_basename(PurePosixPath(path).name)
    if len(contenders) == 1:
        new_path = contenders[0]
        similarity = comparer.similarity(after.to_absolute(new_path))
        if similarity >= threshold:
            return MovedResult(orig_path=path, new_path=new_path, similarity=similarity)
        return AmbiguousResult(
            orig_path=path,
            candidates={new_path: similarity},
            reason=AmbiguityReason.MOVED_AND_CHANGED,
        )

    if not contenders:
        return AmbiguousResult(orig_path=path, candidates={}, reason=AmbiguityReason.NO_SAME_NAME)

    candidates = {c: comparer.similarity(after.to_absolute(c)) for c in contenders}
    return AmbiguousResult(
        orig_path=path,
        candidates=candidates,
        reason=AmbiguityReason.MULTIPLE_SAME_NAME,
    )


def compare(
    before: Snapshot,
    after: Snapshot,
    comparer_factory: ComparerFactory,
    *,
    threshold: float = DEFAULT_THRESHOLD,
    workers: int = 1,
) -> DiffResult:
    """Classify every before-path and derive the new after-files.

    With ``workers > 1`` paths are classified on a thread pool. Each worker
    only reads the snapshots and returns its record; records are merged in
    before-snapshot order, so the result matches a sequential run. The first
    failure (e.g. an unreadable file) aborts the whole comparison and cancels
    paths still queued on the pool.

    Args:
        before: Snapshot of the original tree.
        after: Snapshot of the new tree.
        comparer_factory: Builds a comparer for each before-file.
        threshold: Minimum score for Unchanged/Moved.
        workers: Number of classification threads.

    Returns:
        Frozen DiffResult partitioning the before snapshot.
    """
    logger.info("Comparing %s and %s", before.base_dir, after.base_dir)

    def _classify(path: str) -> Record:
        return classify_path(path, before, after, comparer_factory, threshold)

    if workers > 1:
        with ThreadPoolExecutor(max_workers=workers) as pool:
            try:
                records = list(pool.map(_classify, before.paths))
            except Exception:
                pool.shutdown(cancel_futures=True)
                raise
    else:
        records = [_classify(path) for path in before.paths]

    result = DiffResult.from_records(records, after.list_all())
    logger.info(
        "Compared %d files: %d unchanged, %d moved, %d ambiguous, %d new",
        len(before),
        len(result.unchanged),
        len(result.moved),
        len(result.ambiguous),
        len(result.new_files),
    )
    return result


def run(config: DifferConfig, *, event_logger: EventLogger | None = None) -> DiffResult:
    """Build both snapshots from ``config`` and compare them.

    When an event logger is given the run is recorded as a ``diff.run``
    event with its duration, outcome and result counts.
    """
    config.validate()
    factory = NormalizedComparerFactory(config.build_normalizer())

    def _run() -> DiffResult:
        before = Snapshot.build(config.before_root, config.path_filter)
        after = Snapshot.build(config.after_root, config.path_filter)
        return compare(
            before,
            after,
            factory,
            threshold=config.similarity_threshold,
            workers=config.workers,
        )

    if event_logger is None:
        return _run()

    with event_logger.timed(
        "diff.run",
        before_root=str(config.before_root),
        after_root=str(config.after_root),
    ) as context:
        result = _run()
        context["counts"] = result.counts
    return result
