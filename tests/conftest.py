"""Shared fixtures for all test modules."""

from pathlib import Path

import pytest

from version_differ.config import DifferConfig
from version_differ.logging.logger import EventLogger


def write_tree(root: Path, files: dict[str, str]) -> Path:
    """Create ``files`` (relative path -> content) under ``root``."""
    root.mkdir(parents=True, exist_ok=True)
    for rel, content in files.items():
        path = root / rel
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


class FixedScoreComparer:
    def __init__(self, factory: "FixedScoreFactory", path: Path) -> None:
        self.factory = factory
        self.rel = path.resolve().relative_to(factory.before_root).as_posix()

    def similarity(self, other: Path) -> float:
        other_rel = other.resolve().relative_to(self.factory.after_root).as_posix()
        self.factory.calls.append((self.rel, other_rel))
        return self.factory.scores.get((self.rel, other_rel), self.factory.default)


class FixedScoreFactory:
    """Comparer factory returning preset scores keyed by (before, after) relative path."""

    def __init__(
        self,
        before_root: Path,
        after_root: Path,
        scores: dict[tuple[str, str], float],
        default: float = 0.0,
    ) -> None:
        self.before_root = before_root.resolve()
        self.after_root = after_root.resolve()
        self.scores = scores
        self.default = default
        self.calls: list[tuple[str, str]] = []

    def new_comparer(self, path: Path) -> FixedScoreComparer:
        return FixedScoreComparer(self, path)


@pytest.fixture
def trees(tmp_path):
    """Factory building a (before, after) pair of directory trees."""

    def _make(before: dict[str, str], after: dict[str, str]) -> tuple[Path, Path]:
        return (
            write_tree(tmp_path / "before", before),
            write_tree(tmp_path / "after", after),
        )

    return _make


@pytest.fixture
def tmp_config(tmp_path):
    """Config with empty before/after roots and a temp base_dir."""
    config = DifferConfig(
        before_root=write_tree(tmp_path / "before", {}),
        after_root=write_tree(tmp_path / "after", {}),
        base_dir=tmp_path / ".version-differ",
    )
    config.ensure_dirs()
    return config


@pytest.fixture
def event_logger(tmp_config):
    """EventLogger writing to temp dir."""
    return EventLogger(tmp_config.log_dir)
