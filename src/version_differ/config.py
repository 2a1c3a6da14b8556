"""Configuration management for version-differ."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError

from version_differ.exceptions import ConfigurationError
from version_differ.matching.normalizer import ContentNormalizer, normalizer_for
from version_differ.matching.snapshot import PathFilter


@dataclass
class DifferConfig:
    """Everything a comparison run needs: roots, filter, threshold and content dialect."""

    before_root: Path
    after_root: Path
    path_filter: PathFilter = field(default_factory=PathFilter)
    similarity_threshold: float = 0.75

    # Normalization: explicit block/pattern override the dialect preset
    dialect: str = "plain"
    boilerplate_block: tuple[str, ...] | None = None
    noise_line_pattern: str | None = None

    workers: int = 1
    base_dir: Path = field(default_factory=lambda: Path.home() / ".version-differ")

    @property
    def log_dir(self) -> Path:
        return self.base_dir / "logs"

    def ensure_dirs(self) -> None:
        """Create directory tree if it doesn't exist."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def validate(self) -> None:
        """Reject values the comparison cannot run with.

        Raises:
            ConfigurationError: on an out-of-range threshold or worker count,
                an unknown dialect or a malformed boilerplate/noise pattern.
        """
        if not 0.0 <= self.similarity_threshold <= 1.0:
            msg = f"similarity_threshold must be within [0, 1], got {self.similarity_threshold}"
            raise ConfigurationError(msg)
        if self.workers < 1:
            msg = f"workers must be at least 1, got {self.workers}"
            raise ConfigurationError(msg)
        self.build_normalizer()

    def build_normalizer(self) -> ContentNormalizer:
        return normalizer_for(
            self.dialect,
            boilerplate_block=self.boilerplate_block,
            noise_pattern=self.noise_line_pattern,
        )


class DifferConfigFile(BaseModel):
    """On-disk JSON form of DifferConfig. Every field is optional."""

    model_config = ConfigDict(extra="forbid")

    before_root: Path | None = None
    after_root: Path | None = None
    include: list[str] = []
    exclude: list[str] = []
    similarity_threshold: float | None = None
    dialect: str | None = None
    boilerplate_block: list[str] | None = None
    noise_line_pattern: str | None = None
    workers: int | None = None
    base_dir: Path | None = None


def load_config_file(path: Path | str) -> DifferConfigFile:
    """Read and validate a JSON config file.

    Raises:
        ConfigurationError: if the file is unreadable or fails validation.
    """
    try:
        raw = Path(path).read_text(encoding="utf-8")
    except OSError as e:
        msg = f"Failed to read config file {path}: {e}"
        raise ConfigurationError(msg) from e
    try:
        return DifferConfigFile.model_validate_json(raw)
    except ValidationError as e:
        msg = f"Invalid config file {path}: {e}"
        raise ConfigurationError(msg) from e


def build_config(file_config: DifferConfigFile | None = None, **overrides: object) -> DifferConfig:
    """Merge file values with explicit overrides (``None`` overrides are ignored).

    ``include``/``exclude`` overrides extend the file's patterns.

    Raises:
        ConfigurationError: if either root is missing after merging.
    """
    values = file_config.model_dump() if file_config is not None else {}
    include = list(values.pop("include", []) or [])
    exclude = list(values.pop("exclude", []) or [])
    include.extend(overrides.pop("include", None) or [])  # type: ignore[arg-type]
    exclude.extend(overrides.pop("exclude", None) or [])  # type: ignore[arg-type]

    for key, value in overrides.items():
        if value is not None:
            values[key] = value
    values = {k: v for k, v in values.items() if v is not None}

    for root in ("before_root", "after_root"):
        if root not in values:
            msg = f"{root} is required"
            raise ConfigurationError(msg)
        values[root] = Path(values[root])

    if "boilerplate_block" in values:
        values["boilerplate_block"] = tuple(values["boilerplate_block"])
    if "base_dir" in values:
        values["base_dir"] = Path(values["base_dir"])

    config = DifferConfig(path_filter=PathFilter(tuple(include), tuple(exclude)), **values)
    config.validate()
    return config
