"""Best-guess rename suggestions for ambiguous records.

Read-only secondary pass: it never turns an ambiguous record into a
moved or unchanged one, it only suggests a likely target for a human.
"""

from __future__ import annotations

from version_differ.matching.differ import DEFAULT_THRESHOLD
from version_differ.matching.types import (
    NOT_FOUND,
    AmbiguousResult,
    DiffResult,
    Found,
    Lookup,
    RenameSuggestion,
)


def best_guess(record: AmbiguousResult, threshold: float = DEFAULT_THRESHOLD) -> Lookup:
    """The single candidate scoring strictly above ``threshold``, if exactly one does."""
    close = [path for path, score in record.candidates.items() if score > threshold]
    if len(close) == 1:
        return Found(close[0])
    return NOT_FOUND


def rename_suggestions(
    result: DiffResult,
    threshold: float = DEFAULT_THRESHOLD,
) -> list[RenameSuggestion]:
    """Best guesses for every ambiguous record, ordered by original path."""
    records = sorted(result.ambiguous, key=lambda r: r.orig_path)
    return [RenameSuggestion(record=r, guess=best_guess(r, threshold)) for r in records]
