"""Exceptions raised by the feed pipeline."""

from enum import Enum


class FeedFilterError(Exception):
    """Base class for pipeline errors."""


class FetchErrorKind(str, Enum):
    NETWORK = "network"
    STATUS = "status"
    TIMEOUT = "timeout"


class ParseErrorKind(str, Enum):
    MALFORMED_XML = "malformed-xml"
    MISSING_REQUIRED_FIELD = "missing-required-field"
    UNEXPECTED_SCHEMA = "unexpected-schema"


class RenderErrorKind(str, Enum):
    UNKNOWN_TARGET = "unknown-target"
    INVALID_ENTRY = "invalid-entry"


class FetchError(FeedFilterError):
    """Raised when the source feed cannot be retrieved."""

    def __init__(
        self, kind: FetchErrorKind, message: str, status: int | None = None
    ):
        super().__init__(message)
        self.kind = kind
        self.status = status


class ParseError(FeedFilterError):
    """Raised when a document or entry cannot be read as Atom."""

    def __init__(self, kind: ParseErrorKind, message: str):
        super().__init__(message)
        self.kind = kind


class RenderError(FeedFilterError):
    """Raised when a feed violates an invariant the renderer relies on."""

    def __init__(self, kind: RenderErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
