"""Use case for turning projects into map markers."""
from __future__ import annotations

from datetime import date
from typing import Mapping, Optional, Sequence

from src.core.entities import Category, MapMarker, Project
from src.core.labels import DEFAULT_MARKER_COLOR
from src.infrastructure.events.urgency import classify_urgency
from src.infrastructure.geo.geometry import representative_coordinate
from src.utils.logger import logger


class BuildMapMarkersUseCase:
    """Place one marker per visible project at its representative coordinate."""

    def execute(
        self,
        projects: Sequence[Project],
        categories_by_id: Mapping[str, Category],
        today: date,
        next_dates: Optional[Mapping[str, date]] = None,
    ) -> list[MapMarker]:
        markers: list[MapMarker] = []
        skipped = 0
        for project in projects:
            if project.is_hidden:
                continue

            coordinate = representative_coordinate(project.geometry)
            if coordinate is None:
                skipped += 1
                continue

            category = categories_by_id.get(project.category_id or "")
            next_date = (next_dates or {}).get(project.id)
            longitude, latitude = coordinate
            markers.append(
                MapMarker(
                    id=project.id,
                    latitude=latitude,
                    longitude=longitude,
                    title=project.title,
                    status=project.status,
                    source=project.source,
                    category_color=category.color if category else DEFAULT_MARKER_COLOR,
                    urgency_color=classify_urgency(next_date, today) if next_date else None,
                )
            )

        if skipped:
            logger.debug("Skipped {} projects without a usable geometry", skipped)
        return markers


__all__ = ["BuildMapMarkersUseCase"]
