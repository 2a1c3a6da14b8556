"""Snapshot index -- the files under one root, with a basename lookup.

Does the heavy lifting once at construction so later queries (list every
file, find all files with a given name) are cheap.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath

from version_differ.exceptions import ConfigurationError, IOFailure, PathNotFound
from version_differ.matching.types import NOT_FOUND, Found, Lookup

logger = logging.getLogger(__name__)


def _compile_all(patterns: Iterable[str], kind: str) -> tuple[re.Pattern[str], ...]:
    compiled = []
    for pattern in patterns:
        try:
            compiled.append(re.compile(pattern))
        except re.error as e:
            msg = f"Invalid {kind} pattern {pattern!r}: {e}"
            raise ConfigurationError(msg) from e
    return tuple(compiled)


@dataclass(frozen=True)
class PathFilter:
    """Accept/reject relative POSIX paths by regex.

    A path passes when it fully matches one of ``include`` (or ``include``
    is empty) and no ``exclude`` pattern is found anywhere in it.
    """

    include: tuple[str, ...] = ()
    exclude: tuple[str, ...] = ()
    _include_re: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)
    _exclude_re: tuple[re.Pattern[str], ...] = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "include", tuple(self.include))
        object.__setattr__(self, "exclude", tuple(self.exclude))
        object.__setattr__(self, "_include_re", _compile_all(self.include, "include"))
        object.__setattr__(self, "_exclude_re", _compile_all(self.exclude, "exclude"))

    def __call__(self, relative_path: str) -> bool:
        if self._include_re and not any(p.fullmatch(relative_path) for p in self._include_re):
            return False
        return not any(p.search(relative_path) for p in self._exclude_re)


class Snapshot:
    """Immutable set of relative file paths under ``base_dir``.

    Relative paths are POSIX strings (``"a/b/X.java"``) so results compare
    and sort the same on every platform.
    """

    def __init__(self, base_dir: Path, relative_paths: Iterable[str]) -> None:
        self.base_dir = base_dir
        self._paths: tuple[str, ...] = tuple(sorted(set(relative_paths)))
        self._path_set: frozenset[str] = frozenset(self._paths)
        by_name: dict[str, list[str]] = {}
        for rel in self._paths:
            by_name.setdefault(PurePosixPath(rel).name, []).append(rel)
        self._by_basename: dict[str, tuple[str, ...]] = {
            name: tuple(paths) for name, paths in by_name.items()
        }

    @classmethod
    def build(
        cls,
        root: Path | str,
        path_filter: Callable[[str], bool] | None = None,
    ) -> Snapshot:
        """Walk ``root`` recursively and index every accepted regular file.

        Raises:
            IOFailure: if ``root`` is missing or not a directory, or the walk fails.
        """
        base_dir = Path(root).resolve()
        if not base_dir.is_dir():
            msg = f"Snapshot root is not a directory: {base_dir}"
            raise IOFailure(msg)

        try:
            relative = [
                p.relative_to(base_dir).as_posix() for p in base_dir.rglob("*") if p.is_file()
            ]
        except OSError as e:
            msg = f"Failed to list files under {base_dir}: {e}"
            raise IOFailure(msg) from e

        if path_filter is not None:
            relative = [rel for rel in relative if path_filter(rel)]

        logger.info("Indexed %d files under %s", len(relative), base_dir)
        return cls(base_dir, relative)

    @property
    def paths(self) -> tuple[str, ...]:
        """All relative paths, sorted."""
        return self._paths

    def list_all(self) -> frozenset[str]:
        return self._path_set

    def find_by_basename(self, name: str) -> tuple[str, ...]:
        """Relative paths of every file named ``name``, possibly none."""
        return self._by_basename.get(name, ())

    def contains(self, relative_path: str) -> bool:
        return relative_path in self._path_set

    def try_resolve(self, relative_path: str) -> Lookup:
        """Absolute path of ``relative_path``, or ``NOT_FOUND`` if not in the snapshot."""
        if relative_path in self._path_set:
            return Found(self.base_dir / relative_path)
        return NOT_FOUND

    def to_absolute(self, relative_path: str) -> Path:
        """Absolute path of a relative path that must be in the snapshot.

        Raises:
            PathNotFound: if the path is not part of this snapshot.
        """
        if relative_path not in self._path_set:
            msg = f"No such file {relative_path!r} in snapshot {self.base_dir}"
            raise PathNotFound(msg)
        return self.base_dir / relative_path

    def __contains__(self, relative_path: object) -> bool:
        return relative_path in self._path_set

    def __len__(self) -> int:
        return len(self._paths)

    def __repr__(self) -> str:
        return f"Snapshot({str(self.base_dir)!r}, files={len(self)})"
