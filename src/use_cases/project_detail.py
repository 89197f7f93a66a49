"""Use case for assembling a single project's detail view."""
from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Optional, Protocol

from src.core.entities import Category, Project, ProjectDate, ProjectDateWithUrgency, UrgencyColor
from src.infrastructure.events.urgency import classify_urgency
from src.utils.logger import logger


class ProjectReader(Protocol):
    def get_project(self, project_id: str) -> Optional[Project]:
        ...

    def get_category(self, category_id: str) -> Optional[Category]:
        ...

    def list_dates(self, project_id: str, *, on_or_after: Optional[date] = None) -> list[ProjectDate]:
        ...


@dataclass(frozen=True)
class ProjectDetail:
    project: Project
    category: Optional[Category]
    upcoming_dates: list[ProjectDateWithUrgency]

    @property
    def next_date(self) -> Optional[ProjectDate]:
        return self.upcoming_dates[0].project_date if self.upcoming_dates else None

    @property
    def urgency_color(self) -> Optional[UrgencyColor]:
        return self.upcoming_dates[0].urgency if self.upcoming_dates else None


class ProjectDetailUseCase:
    def __init__(self, reader: ProjectReader) -> None:
        self._reader = reader

    def execute(self, project_id: str, today: date) -> Optional[ProjectDetail]:
        """Return the project with its upcoming dates, or ``None`` if not visible."""
        project = self._reader.get_project(project_id)
        if project is None or project.is_hidden:
            logger.info("Project {} not found or hidden", project_id)
            return None

        category = None
        if project.category_id is not None:
            category = self._reader.get_category(project.category_id)

        dates = self._reader.list_dates(project_id, on_or_after=today)
        upcoming = [
            ProjectDateWithUrgency(project_date=item, urgency=classify_urgency(item.date, today))
            for item in sorted(dates, key=lambda item: item.date)
            if item.date >= today
        ]
        logger.debug("Project {} has {} upcoming dates", project_id, len(upcoming))
        return ProjectDetail(project=project, category=category, upcoming_dates=upcoming)


__all__ = ["ProjectDetail", "ProjectDetailUseCase", "ProjectReader"]
