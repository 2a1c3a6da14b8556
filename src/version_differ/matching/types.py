"""Data types for snapshot matching.

Frozen dataclasses for lookup results, per-file classification records
and the aggregate diff result. Records are produced once per before-path
and never mutated afterwards.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum
from pathlib import Path
from types import MappingProxyType


@dataclass(frozen=True, slots=True)
class Found:
    """A lookup that succeeded."""

    path: Path | str


@dataclass(frozen=True, slots=True)
class NotFound:
    """A lookup that found nothing. Absence is an expected outcome."""


NOT_FOUND = NotFound()

Lookup = Found | NotFound


class AmbiguityReason(StrEnum):
    CHANGED_IN_PLACE = "significant change at same path"
    MOVED_AND_CHANGED = "moved file significantly changed"
    NO_SAME_NAME = "no file with same name"
    MULTIPLE_SAME_NAME = "multiple files with same name"


@dataclass(frozen=True, slots=True)
class UnchangedResult:
    """Before-path still present at the same relative path."""

    path: str
    similarity: float


@dataclass(frozen=True, slots=True)
class MovedResult:
    """Before-path matched to exactly one same-named file elsewhere."""

    orig_path: str
    new_path: str
    similarity: float


@dataclass(frozen=True, slots=True)
class AmbiguousResult:
    """Before-path needing human judgement."""

    orig_path: str
    candidates: Mapping[str, float]  # after-path -> similarity, in lookup order
    reason: AmbiguityReason

    def __post_init__(self) -> None:
        # Read-only copy: the caller's dict cannot change a finished record
        object.__setattr__(self, "candidates", MappingProxyType(dict(self.candidates)))


Record = UnchangedResult | MovedResult | AmbiguousResult


@dataclass(frozen=True, slots=True)
class DiffResult:
    """Partitioned classification of a before/after snapshot pair."""

    unchanged: tuple[UnchangedResult, ...] = ()
    moved: tuple[MovedResult, ...] = ()
    ambiguous: tuple[AmbiguousResult, ...] = ()
    new_files: tuple[str, ...] = ()

    @classmethod
    def from_records(cls, records: list[Record], after_paths: frozenset[str]) -> DiffResult:
        """Freeze scan records into a result, deriving the new-file set.

        New files are the after paths claimed by no record: not an unchanged
        path, not a moved target and not a candidate of any ambiguous record.
        """
        unchanged = tuple(r for r in records if isinstance(r, UnchangedResult))
        moved = tuple(r for r in records if isinstance(r, MovedResult))
        ambiguous = tuple(r for r in records if isinstance(r, AmbiguousResult))

        claimed: set[str] = {r.path for r in unchanged}
        claimed.update(r.new_path for r in moved)
        for r in ambiguous:
            claimed.update(r.candidates)

        new_files = tuple(sorted(after_paths - claimed))
        return cls(unchanged=unchanged, moved=moved, ambiguous=ambiguous, new_files=new_files)

    @property
    def counts(self) -> dict[str, int]:
        return {
            "unchanged": len(self.unchanged),
            "moved": len(self.moved),
            "ambiguous": len(self.ambiguous),
            "new": len(self.new_files),
        }

    def sorted(self) -> DiffResult:
        """Copy ordered for presentation: by path, or by original path."""
        return DiffResult(
            unchanged=tuple(sorted(self.unchanged, key=lambda r: r.path)),
            moved=tuple(sorted(self.moved, key=lambda r: r.orig_path)),
            ambiguous=tuple(sorted(self.ambiguous, key=lambda r: r.orig_path)),
            new_files=tuple(sorted(self.new_files)),
        )


@dataclass(frozen=True, slots=True)
class RenameSuggestion:
    """An ambiguous record paired with its best-guess target, if any."""

    record: AmbiguousResult
    guess: Lookup = field(default=NOT_FOUND)
