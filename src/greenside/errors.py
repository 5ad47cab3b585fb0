"""Exception hierarchy for the editor core."""

from __future__ import annotations


class EditorError(Exception):
    """Base class for recoverable editor failures."""


class MalformedGeometryError(EditorError):
    """A geometry could not be parsed or normalized.

    Attributes:
        index: Position of the offending feature in its collection, if known.
    """

    def __init__(self, message: str, index: int | None = None) -> None:
        super().__init__(message)
        self.index = index


class GeolocationError(EditorError):
    """The position source is unavailable, denied the request, or timed out."""


class UnknownModeError(EditorError):
    """The drawing tool was asked to enter a mode it does not have."""
