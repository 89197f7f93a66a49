"""Tests for display formatting and label lookups."""
from __future__ import annotations

from datetime import date, datetime

import pytest

from src.core.entities import DateType, ProjectSource, ProjectStatus, SortKey, UrgencyColor
from src.core.labels import (
    SORT_LABELS,
    STATUS_COLORS,
    URGENCY_COLORS,
    date_type_label,
    source_label,
    status_label,
    urgency_label,
)
from src.utils.formatting import format_date, format_relative_time, get_initials, pluralize, truncate

TODAY = date(2024, 5, 1)


def test_format_date() -> None:
    assert format_date(date(2024, 5, 1)) == "May 1, 2024"
    assert format_date("2024-12-25") == "Dec 25, 2024"


@pytest.mark.parametrize(
    ("value", "expected"),
    [
        (date(2024, 5, 1), "Today"),
        (date(2024, 5, 2), "Tomorrow"),
        (date(2024, 4, 30), "Yesterday"),
        (date(2024, 5, 4), "In 3 days"),
        (date(2024, 4, 26), "5 days ago"),
        (date(2024, 5, 8), "May 8, 2024"),
    ],
)
def test_format_relative_time(value: date, expected: str) -> None:
    assert format_relative_time(value, TODAY) == expected


def test_relative_time_rounds_datetimes() -> None:
    assert format_relative_time(datetime(2024, 5, 2, 10), datetime(2024, 5, 1, 9)) == "Tomorrow"


def test_truncate() -> None:
    assert truncate("short", 10) == "short"
    assert truncate("a" * 20, 10) == "aaaaaaa..."


def test_initials() -> None:
    assert get_initials("Ada Lovelace") == "AL"
    assert get_initials("ada byron lovelace") == "AB"
    assert get_initials("  ") == "?"
    assert get_initials(None) == "?"


def test_pluralize() -> None:
    assert pluralize(1, "vote") == "vote"
    assert pluralize(0, "vote") == "votes"
    assert pluralize(2, "person", "people") == "people"


def test_every_enum_member_has_a_label() -> None:
    for status in ProjectStatus:
        assert status_label(status)
        assert status in STATUS_COLORS
    for color in UrgencyColor:
        assert urgency_label(color)
        assert color in URGENCY_COLORS
    for date_type in DateType:
        assert date_type_label(date_type)
    assert set(SORT_LABELS) == set(SortKey)


def test_source_labels() -> None:
    assert source_label(ProjectSource.OFFICIAL_SDOT) == "SDOT Official"
    assert source_label(ProjectSource.OFFICIAL_SDOT, long=True) == "SDOT Official Project"
    assert source_label(ProjectSource.USER_SUGGESTION) == "Community Suggestion"
    assert urgency_label(UrgencyColor.YELLOW) == "Next week"
