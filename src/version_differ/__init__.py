"""version-differ: match files across two versions of a source tree."""

from version_differ.config import DifferConfig
from version_differ.exceptions import ConfigurationError, DifferError, IOFailure, PathNotFound
from version_differ.matching import (
    DiffResult,
    PathFilter,
    Snapshot,
    best_guess,
    compare,
    letter_pair_similarity,
    run,
)

__all__ = [
    "ConfigurationError",
    "DiffResult",
    "DifferConfig",
    "DifferError",
    "IOFailure",
    "PathFilter",
    "PathNotFound",
    "Snapshot",
    "best_guess",
    "compare",
    "letter_pair_similarity",
    "run",
]
