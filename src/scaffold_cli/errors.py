"""Exception hierarchy for template scaffolding."""

from __future__ import annotations

from enum import Enum


class ScaffoldError(Exception):
    """Base exception for scaffolding errors."""
    pass


class DestinationErrorKind(str, Enum):
    """Why a destination path was rejected."""

    MISSING = "missing"
    EXISTS = "exists"


class DestinationError(ScaffoldError):
    """The project destination is unusable.

    Raised by the library instead of terminating the process. The CLI layer
    turns it into an exit status of 1.
    """

    def __init__(self, kind: DestinationErrorKind, message: str, path: str | None = None):
        self.kind = kind
        self.path = path
        super().__init__(message)


class MissingDestinationError(DestinationError):
    """No destination was supplied and none was entered at the prompt."""

    def __init__(self, name: str = "project directory"):
        self.name = name
        super().__init__(DestinationErrorKind.MISSING, f"Please specify the {name}")


class DestinationExistsError(DestinationError):
    """The destination already exists and would be overwritten."""

    def __init__(self, path: str):
        super().__init__(DestinationErrorKind.EXISTS, f"Error: {path} already exists", path=path)


class FetchError(ScaffoldError):
    """Fetching a remote template repository failed."""

    def __init__(self, message: str, source: str | None = None, code: str = "FETCH_FAILED"):
        self.source = source
        self.code = code
        super().__init__(message)


class InvalidSourceError(FetchError):
    """The source descriptor could not be parsed or names an unsupported host."""

    def __init__(self, source: str, reason: str = "could not parse source"):
        super().__init__(f"Invalid template source '{source}': {reason}", source=source, code="BAD_SRC")


class ConfigError(ScaffoldError):
    """Raised when scaffold configuration is invalid."""
