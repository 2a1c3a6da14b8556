"""File comparers -- read, normalize and score pairs of files.

A comparer is constructed with the first file and can then be scored
against any number of other files. 1.0 means identical, 0.0 means nothing
in common.
"""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from version_differ.exceptions import IOFailure
from version_differ.matching.normalizer import ContentNormalizer
from version_differ.matching.similarity import letter_pair_similarity

Scorer = Callable[[str, str], float]


class FileComparer(Protocol):
    def similarity(self, other: Path) -> float: ...


class ComparerFactory(Protocol):
    def new_comparer(self, path: Path) -> FileComparer: ...


def read_normalized_text(path: Path, normalizer: ContentNormalizer) -> str:
    """Read ``path`` as UTF-8 and return its normalized form.

    Undecodable bytes are replaced rather than rejected.

    Raises:
        IOFailure: if the file cannot be read.
    """
    try:
        with Path(path).open(encoding="utf-8", errors="replace") as f:
            text = f.read()
    except OSError as e:
        msg = f"Failed to read {path}: {e}"
        raise IOFailure(msg) from e
    return normalizer.normalize_text(text)


class NormalizedFileComparer:
    """Compares normalized content. The first file is read once, up front."""

    def __init__(self, path: Path, normalizer: ContentNormalizer, scorer: Scorer) -> None:
        self.path = path
        self.normalizer = normalizer
        self.scorer = scorer
        self.text = read_normalized_text(path, normalizer)

    def similarity(self, other: Path) -> float:
        return self.scorer(self.text, read_normalized_text(other, self.normalizer))


class NormalizedComparerFactory:
    """Builds ``NormalizedFileComparer`` instances sharing one normalizer."""

    def __init__(
        self,
        normalizer: ContentNormalizer | None = None,
        scorer: Scorer = letter_pair_similarity,
    ) -> None:
        self.normalizer = normalizer if normalizer is not None else ContentNormalizer()
        self.scorer = scorer

    def new_comparer(self, path: Path) -> NormalizedFileComparer:
        return NormalizedFileComparer(path, self.normalizer, self.scorer)
