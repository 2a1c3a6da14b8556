"""Custom exceptions for the comparison pipeline."""


class DifferError(Exception):
    """Base class for every error raised by version-differ."""


class IOFailure(DifferError):
    """A file or snapshot root could not be read. Aborts the whole run."""


class PathNotFound(DifferError, LookupError):
    """A path expected to exist in a snapshot was missing."""


class ConfigurationError(DifferError, ValueError):
    """Invalid configuration: bad pattern, boilerplate, threshold or config file."""
