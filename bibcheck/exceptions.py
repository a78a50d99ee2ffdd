"""Exception classes for bibcheck."""


class BibcheckError(Exception):
    """Base exception for bibcheck errors."""

    pass


class ConfigError(BibcheckError, ValueError):
    """Raised when configuration cannot be loaded or is invalid."""

    def __init__(self, message: str, path: str | None = None):
        """Initialize with message and optional config path."""
        self.path = path
        if path:
            message = f"{path}: {message}"
        super().__init__(message)
