"""Core entities for the Streetwise transportation project tracker."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Optional, Union


class ProjectSource(str, Enum):
    """Where a project record comes from."""

    OFFICIAL_SDOT = "official_sdot"
    OFFICIAL_WADOT = "official_wadot"
    USER_SUGGESTION = "user_suggestion"


class ProjectStatus(str, Enum):
    PROPOSED = "proposed"
    UNDER_REVIEW = "under_review"
    PLANNED = "planned"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    REJECTED = "rejected"
    ON_HOLD = "on_hold"


class DateType(str, Enum):
    PUBLIC_MEETING = "public_meeting"
    COMMENT_DEADLINE = "comment_deadline"
    CONSTRUCTION_START = "construction_start"
    CONSTRUCTION_END = "construction_end"
    COUNCIL_VOTE = "council_vote"
    FUNDING_DEADLINE = "funding_deadline"
    OTHER = "other"


class GeometryType(str, Enum):
    POINT = "point"
    LINE = "line"
    POLYGON = "polygon"


class UrgencyColor(str, Enum):
    """Derived classification of how soon a date occurs."""

    RED = "red"
    YELLOW = "yellow"
    GREEN = "green"
    GRAY = "gray"


class SortKey(str, Enum):
    NEWEST = "newest"
    OLDEST = "oldest"
    VOTES = "votes"
    COMMENTS = "comments"
    DEADLINE = "deadline"


class UserRole(str, Enum):
    USER = "user"
    MODERATOR = "moderator"
    ADMIN = "admin"


Coordinate = tuple[float, float]
"""A ``(longitude, latitude)`` pair in GeoJSON order."""


@dataclass(frozen=True)
class PointGeometry:
    coordinates: Coordinate


@dataclass(frozen=True)
class LineStringGeometry:
    coordinates: tuple[Coordinate, ...]


@dataclass(frozen=True)
class PolygonGeometry:
    """Polygon made of rings; the first ring is the outer boundary."""

    rings: tuple[tuple[Coordinate, ...], ...]


Geometry = Union[PointGeometry, LineStringGeometry, PolygonGeometry]


@dataclass(frozen=True)
class Category:
    """Reference data used for filtering and badge rendering."""

    id: str
    name: str
    slug: str
    color: str
    display_order: int = 0
    description: Optional[str] = None
    icon: Optional[str] = None


@dataclass(frozen=True)
class Project:
    """Domain entity representing a tracked transportation project.

    ``vote_score``, ``comment_count`` and ``follower_count`` are maintained by the
    backend store and are only ever displayed here.
    """

    id: str
    title: str
    source: ProjectSource
    status: ProjectStatus
    geometry: Optional[Geometry]
    geometry_type: GeometryType
    created_at: datetime
    description: Optional[str] = None
    category_id: Optional[str] = None
    location_name: Optional[str] = None
    affected_streets: Optional[str] = None
    neighborhood: Optional[str] = None
    external_id: Optional[str] = None
    external_url: Optional[str] = None
    vote_score: int = 0
    comment_count: int = 0
    follower_count: int = 0
    created_by: Optional[str] = None
    is_hidden: bool = False
    updated_at: Optional[datetime] = None


@dataclass(frozen=True)
class ProjectDate:
    """A dated milestone attached to exactly one project."""

    id: str
    project_id: str
    date_type: DateType
    date: date
    title: str
    description: Optional[str] = None
    url: Optional[str] = None


@dataclass(frozen=True)
class ProjectDateWithUrgency:
    project_date: ProjectDate
    urgency: UrgencyColor


@dataclass(frozen=True)
class CurrentUser:
    id: str
    email: str
    display_name: Optional[str] = None
    role: UserRole = UserRole.USER


@dataclass(frozen=True)
class FilterState:
    """Transient filter-and-sort state mirrored in the URL query string.

    Each dimension is OR-combined internally; dimensions are AND-combined.
    """

    categories: frozenset[str] = field(default_factory=frozenset)
    statuses: frozenset[ProjectStatus] = field(default_factory=frozenset)
    sources: frozenset[ProjectSource] = field(default_factory=frozenset)
    neighborhoods: frozenset[str] = field(default_factory=frozenset)
    sort: SortKey = SortKey.NEWEST
    page: int = 1

    @property
    def is_default(self) -> bool:
        return self == FilterState()

    @property
    def active_filter_count(self) -> int:
        return (
            len(self.categories)
            + len(self.statuses)
            + len(self.sources)
            + len(self.neighborhoods)
        )


@dataclass(frozen=True)
class SuggestionInput:
    """Raw form values submitted for a new project suggestion."""

    title: Optional[str]
    latitude: Optional[float]
    longitude: Optional[float]
    description: Optional[str] = None
    category_id: Optional[str] = None
    location_name: Optional[str] = None
    affected_streets: Optional[str] = None
    neighborhood: Optional[str] = None


@dataclass(frozen=True)
class NormalizedSuggestion:
    """Validated suggestion ready to be written to the store."""

    title: str
    geometry: PointGeometry
    created_by: str
    description: Optional[str] = None
    category_id: Optional[str] = None
    location_name: Optional[str] = None
    affected_streets: Optional[str] = None
    neighborhood: Optional[str] = None
    source: ProjectSource = ProjectSource.USER_SUGGESTION
    status: ProjectStatus = ProjectStatus.PROPOSED
    geometry_type: GeometryType = GeometryType.POINT
    is_hidden: bool = False


@dataclass(frozen=True)
class MapMarker:
    id: str
    latitude: float
    longitude: float
    title: str
    status: ProjectStatus
    source: ProjectSource
    category_color: str
    urgency_color: Optional[UrgencyColor] = None


__all__ = [
    "Category",
    "Coordinate",
    "CurrentUser",
    "DateType",
    "FilterState",
    "Geometry",
    "GeometryType",
    "LineStringGeometry",
    "MapMarker",
    "NormalizedSuggestion",
    "PointGeometry",
    "PolygonGeometry",
    "Project",
    "ProjectDate",
    "ProjectDateWithUrgency",
    "ProjectSource",
    "ProjectStatus",
    "SortKey",
    "SuggestionInput",
    "UrgencyColor",
    "UserRole",
]
