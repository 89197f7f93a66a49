"""Error types shared across the Streetwise layers."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class StreetwiseError(Exception):
    """Base class for errors raised by the application."""


class InvalidDateError(StreetwiseError, ValueError):
    """Raised when a value cannot be interpreted as a calendar date."""


class InvalidGeometryError(StreetwiseError, ValueError):
    """Raised when a geometry payload is not a recognised shape."""


class PersistenceError(StreetwiseError):
    """Raised by store adapters when a read or write fails."""


class SubmissionErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    MISSING_TITLE = "missing_title"
    MISSING_LOCATION = "missing_location"
    INVALID_LATITUDE = "invalid_latitude"
    INVALID_LONGITUDE = "invalid_longitude"
    PERSISTENCE_FAILED = "persistence_failed"


_MESSAGES: dict[SubmissionErrorKind, str] = {
    SubmissionErrorKind.UNAUTHENTICATED: "You must be logged in to suggest a project",
    SubmissionErrorKind.MISSING_TITLE: "Title is required",
    SubmissionErrorKind.MISSING_LOCATION: (
        "Location is required. Click on the map to set a location."
    ),
    SubmissionErrorKind.INVALID_LATITUDE: "Invalid latitude value",
    SubmissionErrorKind.INVALID_LONGITUDE: "Invalid longitude value",
    SubmissionErrorKind.PERSISTENCE_FAILED: "Failed to create project. Please try again.",
}


@dataclass(frozen=True)
class SubmissionError:
    """Failure value returned by the suggestion validator and use case."""

    kind: SubmissionErrorKind
    message: str

    @classmethod
    def of(cls, kind: SubmissionErrorKind) -> "SubmissionError":
        return cls(kind=kind, message=_MESSAGES[kind])


__all__ = [
    "InvalidDateError",
    "InvalidGeometryError",
    "PersistenceError",
    "StreetwiseError",
    "SubmissionError",
    "SubmissionErrorKind",
]
