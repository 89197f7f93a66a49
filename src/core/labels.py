"""Display labels and colours for the domain enumerations."""
from __future__ import annotations

from typing import Mapping

from src.core.entities import DateType, ProjectSource, ProjectStatus, SortKey, UrgencyColor

DEFAULT_MARKER_COLOR = "#16a34a"

STATUS_LABELS: Mapping[ProjectStatus, str] = {
    ProjectStatus.PROPOSED: "Proposed",
    ProjectStatus.UNDER_REVIEW: "Under Review",
    ProjectStatus.PLANNED: "Planned",
    ProjectStatus.IN_PROGRESS: "In Progress",
    ProjectStatus.COMPLETED: "Completed",
    ProjectStatus.REJECTED: "Rejected",
    ProjectStatus.ON_HOLD: "On Hold",
}

# Badge colours as (background, text) hex pairs.
STATUS_COLORS: Mapping[ProjectStatus, tuple[str, str]] = {
    ProjectStatus.PROPOSED: ("#ede9fe", "#5b21b6"),
    ProjectStatus.UNDER_REVIEW: ("#fef3c7", "#92400e"),
    ProjectStatus.PLANNED: ("#dbeafe", "#1e40af"),
    ProjectStatus.IN_PROGRESS: ("#dcfce7", "#166534"),
    ProjectStatus.COMPLETED: ("#d1fae5", "#065f46"),
    ProjectStatus.REJECTED: ("#fee2e2", "#991b1b"),
    ProjectStatus.ON_HOLD: ("#f3f4f6", "#1f2937"),
}

SOURCE_LABELS: Mapping[ProjectSource, str] = {
    ProjectSource.OFFICIAL_SDOT: "SDOT Official",
    ProjectSource.OFFICIAL_WADOT: "WADOT Official",
    ProjectSource.USER_SUGGESTION: "Community Suggestion",
}

SOURCE_LONG_LABELS: Mapping[ProjectSource, str] = {
    ProjectSource.OFFICIAL_SDOT: "SDOT Official Project",
    ProjectSource.OFFICIAL_WADOT: "WADOT Official Project",
    ProjectSource.USER_SUGGESTION: "Community Suggestion",
}

DATE_TYPE_LABELS: Mapping[DateType, str] = {
    DateType.PUBLIC_MEETING: "Public Meeting",
    DateType.COMMENT_DEADLINE: "Comment Deadline",
    DateType.CONSTRUCTION_START: "Construction Start",
    DateType.CONSTRUCTION_END: "Construction End",
    DateType.COUNCIL_VOTE: "Council Vote",
    DateType.FUNDING_DEADLINE: "Funding Deadline",
    DateType.OTHER: "Event",
}

URGENCY_LABELS: Mapping[UrgencyColor, str] = {
    UrgencyColor.RED: "This week",
    UrgencyColor.YELLOW: "Next week",
    UrgencyColor.GREEN: "This month",
    UrgencyColor.GRAY: "Later",
}

# (background, text, border)
URGENCY_COLORS: Mapping[UrgencyColor, tuple[str, str, str]] = {
    UrgencyColor.RED: ("#fee2e2", "#991b1b", "#fca5a5"),
    UrgencyColor.YELLOW: ("#fef3c7", "#92400e", "#fcd34d"),
    UrgencyColor.GREEN: ("#dcfce7", "#166534", "#86efac"),
    UrgencyColor.GRAY: ("#f3f4f6", "#1f2937", "#d1d5db"),
}

SORT_LABELS: Mapping[SortKey, str] = {
    SortKey.NEWEST: "Newest",
    SortKey.OLDEST: "Oldest",
    SortKey.VOTES: "Most Votes",
    SortKey.COMMENTS: "Most Comments",
    SortKey.DEADLINE: "Nearest Deadline",
}


def status_label(status: ProjectStatus) -> str:
    return STATUS_LABELS[status]


def source_label(source: ProjectSource, *, long: bool = False) -> str:
    table = SOURCE_LONG_LABELS if long else SOURCE_LABELS
    return table[source]


def urgency_label(color: UrgencyColor) -> str:
    return URGENCY_LABELS[color]


def date_type_label(date_type: DateType) -> str:
    return DATE_TYPE_LABELS[date_type]


__all__ = [
    "DATE_TYPE_LABELS",
    "DEFAULT_MARKER_COLOR",
    "SORT_LABELS",
    "SOURCE_LABELS",
    "SOURCE_LONG_LABELS",
    "STATUS_COLORS",
    "STATUS_LABELS",
    "URGENCY_COLORS",
    "URGENCY_LABELS",
    "date_type_label",
    "source_label",
    "status_label",
    "urgency_label",
]
