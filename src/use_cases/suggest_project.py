"""Use case for submitting community project suggestions."""
from __future__ import annotations

import math
from dataclasses import replace
from typing import Optional, Protocol, Union

from src.core.entities import (
    CurrentUser,
    NormalizedSuggestion,
    PointGeometry,
    Project,
    SuggestionInput,
)
from src.core.errors import SubmissionError, SubmissionErrorKind
from src.utils.logger import logger

ValidationResult = Union[NormalizedSuggestion, SubmissionError]
SubmissionResult = Union[Project, SubmissionError]


class ProjectWriter(Protocol):
    def create_project(self, suggestion: NormalizedSuggestion) -> Project:
        ...


class LocationDescriber(Protocol):
    def describe(self, latitude: float, longitude: float) -> tuple[Optional[str], Optional[str]]:
        ...


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


def validate_suggestion(
    data: SuggestionInput,
    current_user: Optional[CurrentUser],
) -> ValidationResult:
    """Validate and normalise a suggestion without touching the store.

    Checks run in a fixed order and the first failure is returned.
    """

    if current_user is None:
        return SubmissionError.of(SubmissionErrorKind.UNAUTHENTICATED)

    title = _clean(data.title)
    if title is None:
        return SubmissionError.of(SubmissionErrorKind.MISSING_TITLE)

    # A zero coordinate means the map was never clicked.
    if not data.latitude or not data.longitude:
        return SubmissionError.of(SubmissionErrorKind.MISSING_LOCATION)

    latitude = float(data.latitude)
    longitude = float(data.longitude)

    if not math.isfinite(latitude) or not -90 <= latitude <= 90:
        return SubmissionError.of(SubmissionErrorKind.INVALID_LATITUDE)
    if not math.isfinite(longitude) or not -180 <= longitude <= 180:
        return SubmissionError.of(SubmissionErrorKind.INVALID_LONGITUDE)

    return NormalizedSuggestion(
        title=title,
        geometry=PointGeometry(coordinates=(longitude, latitude)),
        created_by=current_user.id,
        description=_clean(data.description),
        category_id=_clean(data.category_id),
        location_name=_clean(data.location_name),
        affected_streets=_clean(data.affected_streets),
        neighborhood=_clean(data.neighborhood),
    )


class SuggestProjectUseCase:
    """Validate a suggestion, optionally enrich its place names and persist it."""

    def __init__(
        self,
        writer: ProjectWriter,
        location_describer: LocationDescriber | None = None,
    ) -> None:
        self._writer = writer
        self._location_describer = location_describer

    def execute(
        self,
        data: SuggestionInput,
        current_user: Optional[CurrentUser],
    ) -> SubmissionResult:
        result = validate_suggestion(data, current_user)
        if isinstance(result, SubmissionError):
            logger.info("Rejected suggestion: {}", result.kind.value)
            return result

        suggestion = self._fill_place_names(result)

        try:
            project = self._writer.create_project(suggestion)
        except Exception as exc:  # noqa: BLE001
            logger.error("Error creating project: {}", exc)
            return SubmissionError.of(SubmissionErrorKind.PERSISTENCE_FAILED)

        logger.info("Created suggestion {} by {}", project.id, suggestion.created_by)
        return project

    def _fill_place_names(self, suggestion: NormalizedSuggestion) -> NormalizedSuggestion:
        if self._location_describer is None:
            return suggestion
        if suggestion.location_name is not None and suggestion.neighborhood is not None:
            return suggestion

        longitude, latitude = suggestion.geometry.coordinates
        location_name, neighborhood = self._location_describer.describe(latitude, longitude)
        return replace(
            suggestion,
            location_name=suggestion.location_name or location_name,
            neighborhood=suggestion.neighborhood or neighborhood,
        )


__all__ = [
    "LocationDescriber",
    "ProjectWriter",
    "SubmissionResult",
    "SuggestProjectUseCase",
    "ValidationResult",
    "validate_suggestion",
]
