"""pandas-backed project store used for local runs and tests."""
from __future__ import annotations

import json
import math
from datetime import date, datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any, Callable, Collection, Mapping, Optional
from uuid import uuid4

import pandas as pd

from src.core.entities import (
    Category,
    DateType,
    GeometryType,
    NormalizedSuggestion,
    Project,
    ProjectDate,
    ProjectSource,
    ProjectStatus,
)
from src.core.errors import InvalidGeometryError, PersistenceError
from src.core.labels import DEFAULT_MARKER_COLOR
from src.infrastructure.geo.geometry import (
    ensure_geometry_type,
    geometry_from_geojson,
    geometry_to_geojson,
    geometry_type_of,
)
from src.utils.logger import logger

PROJECT_COLUMNS: tuple[str, ...] = (
    "id",
    "title",
    "description",
    "source",
    "status",
    "category_id",
    "geometry",
    "geometry_type",
    "location_name",
    "affected_streets",
    "neighborhood",
    "external_id",
    "external_url",
    "vote_score",
    "comment_count",
    "follower_count",
    "created_by",
    "is_hidden",
    "created_at",
    "updated_at",
)
_COUNTER_COLUMNS = ("vote_score", "comment_count", "follower_count")
_TIMESTAMP_COLUMNS = ("created_at", "updated_at")
# (column, vocabulary, whether a value is required)
_ENUM_COLUMNS: tuple[tuple[str, type[Enum], bool], ...] = (
    ("source", ProjectSource, True),
    ("status", ProjectStatus, True),
    ("geometry_type", GeometryType, False),
)
CATEGORY_COLUMNS: tuple[str, ...] = ("id", "name", "slug", "color", "display_order", "description", "icon")
DATE_COLUMNS: tuple[str, ...] = ("id", "project_id", "date_type", "date", "title", "description", "url")


def _optional(value: Any) -> Any:
    """Turn pandas missing markers into ``None``."""
    if value is None or value is pd.NaT:
        return None
    if isinstance(value, float) and math.isnan(value):
        return None
    return value


def _optional_text(value: Any) -> Optional[str]:
    value = _optional(value)
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def _to_datetime(value: Any) -> Optional[datetime]:
    value = _optional(value)
    if value is None:
        return None
    if isinstance(value, pd.Timestamp):
        return value.to_pydatetime()
    return value


def _json_default(value: Any) -> Any:
    if isinstance(value, (pd.Timestamp, datetime, date)):
        return value.isoformat()
    if isinstance(value, Enum):
        return value.value
    if hasattr(value, "item"):
        return value.item()
    raise TypeError(f"Object of type {type(value).__name__} is not JSON serializable")


def _prepare_projects(frame: pd.DataFrame) -> pd.DataFrame:
    prepared = frame.copy()
    for column in PROJECT_COLUMNS:
        if column not in prepared.columns:
            prepared[column] = None

    for column in _COUNTER_COLUMNS:
        prepared[column] = pd.to_numeric(prepared[column], errors="coerce").fillna(0).astype(int)

    prepared["is_hidden"] = prepared["is_hidden"].map(lambda value: bool(_optional(value))).astype(bool)
    for column in _TIMESTAMP_COLUMNS:
        prepared[column] = pd.to_datetime(prepared[column], utc=True, errors="coerce", format="ISO8601")

    invalid = prepared["created_at"].isna()
    if invalid.any():
        logger.warning("Dropping {} project rows without a valid created_at", int(invalid.sum()))
        prepared = prepared[~invalid].copy()

    text_columns = [
        column
        for column in PROJECT_COLUMNS
        if column not in _COUNTER_COLUMNS + _TIMESTAMP_COLUMNS + ("is_hidden", "geometry")
    ]
    for column in text_columns:
        prepared[column] = prepared[column].map(_optional_text).astype(object)

    for column, vocabulary, required in _ENUM_COLUMNS:
        known = prepared[column].isin([member.value for member in vocabulary])
        if not required:
            known |= prepared[column].isna()
        if not known.all():
            logger.warning("Dropping {} project rows with an unknown {}", int((~known).sum()), column)
            prepared = prepared[known]

    return prepared.loc[:, list(PROJECT_COLUMNS)].reset_index(drop=True)


def _row_to_project(row: Mapping[str, Any]) -> Project:
    declared = _optional_text(row.get("geometry_type"))
    try:
        geometry = geometry_from_geojson(_optional(row.get("geometry")))
        if declared is not None:
            ensure_geometry_type(geometry, GeometryType(declared))
    except InvalidGeometryError as error:
        logger.warning("Ignoring geometry of project {}: {}", row.get("id"), error)
        geometry = None

    # An untagged row takes its type from the shape it stores.
    if declared is not None:
        geometry_type = GeometryType(declared)
    elif geometry is not None:
        geometry_type = geometry_type_of(geometry)
    else:
        geometry_type = GeometryType.POINT

    created_at = _to_datetime(row.get("created_at"))
    if created_at is None:
        raise PersistenceError(f"Project {row.get('id')} has no creation time")

    return Project(
        id=str(row["id"]),
        title=str(row["title"]),
        description=_optional_text(row.get("description")),
        source=ProjectSource(row["source"]),
        status=ProjectStatus(row["status"]),
        category_id=_optional_text(row.get("category_id")),
        geometry=geometry,
        geometry_type=geometry_type,
        location_name=_optional_text(row.get("location_name")),
        affected_streets=_optional_text(row.get("affected_streets")),
        neighborhood=_optional_text(row.get("neighborhood")),
        external_id=_optional_text(row.get("external_id")),
        external_url=_optional_text(row.get("external_url")),
        vote_score=int(row.get("vote_score") or 0),
        comment_count=int(row.get("comment_count") or 0),
        follower_count=int(row.get("follower_count") or 0),
        created_by=_optional_text(row.get("created_by")),
        is_hidden=bool(row.get("is_hidden")),
        created_at=created_at,
        updated_at=_to_datetime(row.get("updated_at")),
    )


class DataFrameProjectQuery:
    """Immutable query over a projects DataFrame."""

    def __init__(self, frame: pd.DataFrame) -> None:
        self._frame = frame

    def is_in(self, column: str, values: Collection[Any]) -> "DataFrameProjectQuery":
        normalized = [value.value if isinstance(value, Enum) else value for value in values]
        return DataFrameProjectQuery(self._frame[self._frame[column].isin(normalized)])

    def equals(self, column: str, value: Any) -> "DataFrameProjectQuery":
        if isinstance(value, Enum):
            value = value.value
        return DataFrameProjectQuery(self._frame[self._frame[column] == value])

    def order_by(self, column: str, *, descending: bool = False) -> "DataFrameProjectQuery":
        ordered = self._frame.sort_values(
            column, ascending=not descending, kind="mergesort", na_position="last"
        )
        return DataFrameProjectQuery(ordered)

    def slice(self, offset: int, limit: int) -> "DataFrameProjectQuery":
        start = max(0, offset)
        return DataFrameProjectQuery(self._frame.iloc[start : start + max(0, limit)])

    def count(self) -> int:
        return len(self._frame)

    def fetch(self) -> list[Project]:
        return [_row_to_project(row) for row in self._frame.to_dict(orient="records")]


class DataFrameProjectStore:
    """Project repository backed by in-memory DataFrames.

    When ``projects_path`` is given, newly created projects are written back to
    that JSON file.
    """

    def __init__(
        self,
        projects: pd.DataFrame,
        categories: pd.DataFrame | None = None,
        dates: pd.DataFrame | None = None,
        *,
        projects_path: Path | None = None,
        id_factory: Callable[[], str] | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._projects = _prepare_projects(projects)
        self._categories = self._prepare_categories(categories)
        self._dates = self._prepare_dates(dates)
        self._projects_path = projects_path
        self._id_factory = id_factory or (lambda: str(uuid4()))
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        logger.debug(
            "Store ready with {} projects, {} categories, {} dates",
            len(self._projects),
            len(self._categories),
            len(self._dates),
        )

    @classmethod
    def from_files(
        cls,
        projects_path: Path,
        categories_path: Path | None = None,
        dates_path: Path | None = None,
        *,
        persist: bool = False,
    ) -> "DataFrameProjectStore":
        logger.info("Loading projects from {}", projects_path)
        try:
            with projects_path.open("r", encoding="utf-8") as file:
                records = json.load(file)
        except FileNotFoundError:
            logger.warning("Projects file {} not found; starting empty.", projects_path)
            records = []
        except (OSError, json.JSONDecodeError) as error:
            raise PersistenceError(f"Could not read projects from {projects_path}") from error

        if not isinstance(records, list):
            raise PersistenceError("The projects file must contain a JSON list")

        categories = cls._read_csv(categories_path, CATEGORY_COLUMNS)
        dates = cls._read_csv(dates_path, DATE_COLUMNS)
        return cls(
            pd.DataFrame.from_records(records, columns=list(PROJECT_COLUMNS)),
            categories,
            dates,
            projects_path=projects_path if persist else None,
        )

    def query(self) -> DataFrameProjectQuery:
        return DataFrameProjectQuery(self._projects)

    def list_categories(self) -> list[Category]:
        ordered = self._categories.sort_values(["display_order", "name"], kind="mergesort")
        return [self._row_to_category(row) for row in ordered.to_dict(orient="records")]

    def get_category(self, category_id: str) -> Optional[Category]:
        matches = self._categories[self._categories["id"] == category_id]
        if matches.empty:
            return None
        return self._row_to_category(matches.iloc[0].to_dict())

    def list_neighborhoods(self) -> list[str]:
        visible = self._projects[~self._projects["is_hidden"]]
        values = {value for value in visible["neighborhood"] if value}
        return sorted(values)

    def get_project(self, project_id: str) -> Optional[Project]:
        matches = self._projects[self._projects["id"] == project_id]
        if matches.empty:
            return None
        return _row_to_project(matches.iloc[0].to_dict())

    def list_dates(self, project_id: str, *, on_or_after: Optional[date] = None) -> list[ProjectDate]:
        selected = self._dates[self._dates["project_id"] == project_id]
        if on_or_after is not None:
            selected = selected[selected["date"] >= on_or_after]
        selected = selected.sort_values("date", kind="mergesort")
        return [self._row_to_date(row) for row in selected.to_dict(orient="records")]

    def next_dates(self, on_or_after: date) -> dict[str, date]:
        """Earliest date on or after ``on_or_after`` for each project that has one."""
        upcoming = self._dates[self._dates["date"] >= on_or_after]
        if upcoming.empty:
            return {}
        earliest = upcoming.groupby("project_id")["date"].min()
        return {str(project_id): value for project_id, value in earliest.items()}

    def create_project(self, suggestion: NormalizedSuggestion) -> Project:
        now = pd.Timestamp(self._clock())
        record: dict[str, Any] = {
            "id": self._id_factory(),
            "title": suggestion.title,
            "description": suggestion.description,
            "source": suggestion.source.value,
            "status": suggestion.status.value,
            "category_id": suggestion.category_id,
            "geometry": geometry_to_geojson(suggestion.geometry),
            "geometry_type": suggestion.geometry_type.value,
            "location_name": suggestion.location_name,
            "affected_streets": suggestion.affected_streets,
            "neighborhood": suggestion.neighborhood,
            "external_id": None,
            "external_url": None,
            "vote_score": 0,
            "comment_count": 0,
            "follower_count": 0,
            "created_by": suggestion.created_by,
            "is_hidden": suggestion.is_hidden,
            "created_at": now,
            "updated_at": now,
        }
        row = _prepare_projects(pd.DataFrame.from_records([record], columns=list(PROJECT_COLUMNS)))
        updated = pd.concat([self._projects, row], ignore_index=True)

        if self._projects_path is not None:
            self._write(updated)

        self._projects = updated
        logger.debug("Inserted project {} ({})", record["id"], suggestion.title)
        return _row_to_project(row.iloc[0].to_dict())

    def _write(self, frame: pd.DataFrame) -> None:
        assert self._projects_path is not None
        records = [
            {key: _optional(value) for key, value in row.items()}
            for row in frame.to_dict(orient="records")
        ]
        try:
            with self._projects_path.open("w", encoding="utf-8") as file:
                json.dump(records, file, ensure_ascii=False, indent=2, default=_json_default)
        except OSError as error:
            raise PersistenceError(f"Could not write projects to {self._projects_path}") from error

    @staticmethod
    def _read_csv(path: Path | None, columns: tuple[str, ...]) -> pd.DataFrame:
        if path is None:
            return pd.DataFrame(columns=list(columns))
        logger.info("Loading reference data from {}", path)
        try:
            return pd.read_csv(path, dtype=str, keep_default_na=False)
        except FileNotFoundError:
            logger.warning("Reference data {} not found; using an empty table.", path)
            return pd.DataFrame(columns=list(columns))

    @staticmethod
    def _prepare_categories(frame: pd.DataFrame | None) -> pd.DataFrame:
        prepared = frame.copy() if frame is not None else pd.DataFrame(columns=list(CATEGORY_COLUMNS))
        for column in CATEGORY_COLUMNS:
            if column not in prepared.columns:
                prepared[column] = None
        prepared["display_order"] = (
            pd.to_numeric(prepared["display_order"], errors="coerce").fillna(0).astype(int)
        )
        return prepared.loc[:, list(CATEGORY_COLUMNS)].reset_index(drop=True)

    @staticmethod
    def _prepare_dates(frame: pd.DataFrame | None) -> pd.DataFrame:
        prepared = frame.copy() if frame is not None else pd.DataFrame(columns=list(DATE_COLUMNS))
        for column in DATE_COLUMNS:
            if column not in prepared.columns:
                prepared[column] = None
        parsed = pd.to_datetime(prepared["date"], errors="coerce")
        invalid = parsed.isna()
        if invalid.any():
            logger.warning("Dropping {} project dates with an invalid date", int(invalid.sum()))
        prepared = prepared[~invalid].copy()
        prepared["date"] = parsed[~invalid].dt.date
        return prepared.loc[:, list(DATE_COLUMNS)].reset_index(drop=True)

    @staticmethod
    def _row_to_category(row: Mapping[str, Any]) -> Category:
        return Category(
            id=str(row["id"]),
            name=str(row["name"]),
            slug=str(row["slug"]),
            color=_optional_text(row.get("color")) or DEFAULT_MARKER_COLOR,
            display_order=int(row.get("display_order") or 0),
            description=_optional_text(row.get("description")),
            icon=_optional_text(row.get("icon")),
        )

    @staticmethod
    def _row_to_date(row: Mapping[str, Any]) -> ProjectDate:
        raw_type = _optional_text(row.get("date_type")) or DateType.OTHER.value
        try:
            date_type = DateType(raw_type)
        except ValueError:
            logger.warning("Unknown date type {}; treating as other", raw_type)
            date_type = DateType.OTHER
        return ProjectDate(
            id=str(row["id"]),
            project_id=str(row["project_id"]),
            date_type=date_type,
            date=row["date"],
            title=str(row["title"]),
            description=_optional_text(row.get("description")),
            url=_optional_text(row.get("url")),
        )


__all__ = ["DataFrameProjectQuery", "DataFrameProjectStore", "PROJECT_COLUMNS"]
