"""Content normalization -- strip boilerplate so similarity reflects real edits.

A normalizer drops a fixed leading boilerplate block (typically a license
header) and every "noise" line, such as imports, whose churn says nothing
about whether two files are the same file.
"""

from __future__ import annotations

import re
from collections.abc import Sequence

from version_differ.exceptions import ConfigurationError

APACHE_LICENSE_HEADER: tuple[str, ...] = (
    "/*",
    " * Licensed to the Apache Software Foundation (ASF) under one",
    " * or more contributor license agreements.  See the NOTICE file",
    " * distributed with this work for additional information",
    " * regarding copyright ownership.  The ASF licenses this file",
    " * to you under the Apache License, Version 2.0 (the",
    ' * "License"); you may not use this file except in compliance',
    " * with the License.  You may obtain a copy of the License at",
    " *",
    " *     http://www.apache.org/licenses/LICENSE-2.0",
    " *",
    " * Unless required by applicable law or agreed to in writing,",
    " * software distributed under the License is distributed on an",
    ' * "AS IS" BASIS, WITHOUT WARRANTIES OR CONDITIONS OF ANY',
    " * KIND, either express or implied.  See the License for the",
    " * specific language governing permissions and limitations",
    " * under the License.",
    " */",
)

# dialect name -> (boilerplate block, noise line pattern)
DIALECTS: dict[str, tuple[tuple[str, ...], str | None]] = {
    "plain": ((), None),
    "java": (APACHE_LICENSE_HEADER, r"import "),
    "python": ((), r"(import\s|from\s+\S+\s+import\s)"),
}


def _strip_lines(lines: Sequence[str]) -> list[str]:
    return [line.strip() for line in lines]


class ContentNormalizer:
    """Produce the comparable text form of a file's lines."""

    def __init__(
        self,
        boilerplate_block: Sequence[str] = (),
        noise_pattern: str | None = None,
    ) -> None:
        if isinstance(boilerplate_block, str):
            msg = "boilerplate_block must be a sequence of lines, not a string"
            raise ConfigurationError(msg)
        if not all(isinstance(line, str) for line in boilerplate_block):
            msg = "boilerplate_block lines must all be strings"
            raise ConfigurationError(msg)

        self.boilerplate_block: tuple[str, ...] = tuple(boilerplate_block)

        self.noise_pattern = noise_pattern
        self._noise: re.Pattern[str] | None = None
        if noise_pattern is not None:
            try:
                self._noise = re.compile(noise_pattern)
            except re.error as e:
                msg = f"Invalid noise line pattern {noise_pattern!r}: {e}"
                raise ConfigurationError(msg) from e

        # Header detection runs after noise removal, so compare against the
        # block with its own noise lines removed too.
        self._boilerplate_stripped = _strip_lines(
            [line for line in self.boilerplate_block if not self.is_noise(line)]
        )

    def starts_with_boilerplate(self, lines: Sequence[str]) -> bool:
        """Whether the first lines equal the boilerplate block, ignoring outer whitespace.

        ``lines`` are expected to be noise-free already.
        """
        size = len(self._boilerplate_stripped)
        if size == 0 or len(lines) < size:
            return False
        return _strip_lines(lines[:size]) == self._boilerplate_stripped

    def is_noise(self, line: str) -> bool:
        return self._noise is not None and self._noise.match(line) is not None

    def normalize(self, lines: Sequence[str]) -> str:
        """Drop noise lines and the boilerplate header, join the rest with newlines.

        Noise goes first so an import above the header cannot hide it.
        Surviving lines keep their original whitespace and order, blank
        lines included; stripping is only used to detect the header.
        """
        kept = [line for line in lines if not self.is_noise(line)]
        if self.starts_with_boilerplate(kept):
            kept = kept[len(self._boilerplate_stripped) :]
        return "\n".join(kept)

    def normalize_text(self, text: str) -> str:
        """Split on ``\\n``, ``\\r\\n`` and ``\\r`` only, then normalize.

        A trailing newline yields a trailing empty line, which survives the
        join, so the output is a fixed point of this method.
        """
        return self.normalize(text.replace("\r\n", "\n").replace("\r", "\n").split("\n"))


def normalizer_for(
    dialect: str,
    *,
    boilerplate_block: Sequence[str] | None = None,
    noise_pattern: str | None = None,
) -> ContentNormalizer:
    """Build a normalizer from a dialect preset, with optional overrides."""
    try:
        preset_block, preset_noise = DIALECTS[dialect]
    except KeyError:
        known = ", ".join(sorted(DIALECTS))
        msg = f"Unknown dialect {dialect!r} (known: {known})"
        raise ConfigurationError(msg) from None

    return ContentNormalizer(
        boilerplate_block=preset_block if boilerplate_block is None else boilerplate_block,
        noise_pattern=preset_noise if noise_pattern is None else noise_pattern,
    )
