"""Snapshot matching -- reconcile two versions of a file tree.

Public API:
    Snapshot.build(root, path_filter=None) -> Snapshot
    compare(before, after, comparer_factory, threshold=, workers=) -> DiffResult
    best_guess(record, threshold=) -> Found | NotFound
    letter_pair_similarity(a, b) -> float
"""

from __future__ import annotations

from version_differ.matching.comparer import (
    ComparerFactory,
    FileComparer,
    NormalizedComparerFactory,
    NormalizedFileComparer,
    read_normalized_text,
)
from version_differ.matching.differ import DEFAULT_THRESHOLD, classify_path, compare, run
from version_differ.matching.normalizer import DIALECTS, ContentNormalizer, normalizer_for
from version_differ.matching.resolver import best_guess, rename_suggestions
from version_differ.matching.similarity import letter_pair_similarity, letter_pairs
from version_differ.matching.snapshot import PathFilter, Snapshot
from version_differ.matching.types import (
    NOT_FOUND,
    AmbiguityReason,
    AmbiguousResult,
    DiffResult,
    Found,
    Lookup,
    MovedResult,
    NotFound,
    RenameSuggestion,
    UnchangedResult,
)

__all__ = [
    "DEFAULT_THRESHOLD",
    "DIALECTS",
    "NOT_FOUND",
    "AmbiguityReason",
    "AmbiguousResult",
    "ComparerFactory",
    "ContentNormalizer",
    "DiffResult",
    "FileComparer",
    "Found",
    "Lookup",
    "MovedResult",
    "NormalizedComparerFactory",
    "NormalizedFileComparer",
    "NotFound",
    "PathFilter",
    "RenameSuggestion",
    "Snapshot",
    "UnchangedResult",
    "best_guess",
    "classify_path",
    "compare",
    "letter_pair_similarity",
    "letter_pairs",
    "normalizer_for",
    "read_normalized_text",
    "rename_suggestions",
    "run",
]
