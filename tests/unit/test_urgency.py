"""Unit tests for the urgency classifier."""
from __future__ import annotations

from datetime import date, datetime, timedelta

import pytest

from src.core.entities import UrgencyColor
from src.core.errors import InvalidDateError
from src.infrastructure.events.urgency import (
    UrgencyClassifier,
    classify_urgency,
    end_of_month,
    end_of_week,
    to_calendar_date,
)

WEDNESDAY = date(2024, 5, 1)


def test_past_dates_are_gray() -> None:
    for offset in (1, 2, 30, 400):
        assert classify_urgency(WEDNESDAY - timedelta(days=offset), WEDNESDAY) is UrgencyColor.GRAY


def test_today_is_red() -> None:
    assert classify_urgency(WEDNESDAY, WEDNESDAY) is UrgencyColor.RED


@pytest.mark.parametrize(
    ("target", "expected"),
    [
        (date(2024, 5, 5), UrgencyColor.RED),  # closing Sunday
        (date(2024, 5, 6), UrgencyColor.YELLOW),  # following Monday
        (date(2024, 5, 12), UrgencyColor.YELLOW),
        (date(2024, 5, 13), UrgencyColor.GREEN),
        (date(2024, 5, 16), UrgencyColor.GREEN),
        (date(2024, 5, 31), UrgencyColor.GREEN),
        (date(2024, 6, 1), UrgencyColor.GRAY),
        (date(2024, 7, 1), UrgencyColor.GRAY),
    ],
)
def test_wednesday_buckets(target: date, expected: UrgencyColor) -> None:
    assert classify_urgency(target, WEDNESDAY) is expected


def test_week_that_crosses_month_end_stays_red_then_yellow() -> None:
    today = date(2024, 5, 29)

    assert classify_urgency(date(2024, 6, 1), today) is UrgencyColor.RED
    assert classify_urgency(date(2024, 6, 5), today) is UrgencyColor.YELLOW
    assert classify_urgency(date(2024, 6, 10), today) is UrgencyColor.GRAY


def test_sunday_reference_week_ends_today() -> None:
    sunday = date(2024, 5, 5)

    assert end_of_week(sunday) == sunday
    assert classify_urgency(date(2024, 5, 6), sunday) is UrgencyColor.YELLOW


def test_time_of_day_is_ignored() -> None:
    assert classify_urgency(datetime(2024, 5, 5, 23, 59), datetime(2024, 5, 1, 8, 0)) is UrgencyColor.RED
    assert classify_urgency(datetime(2024, 5, 1, 0, 0), datetime(2024, 5, 1, 23, 0)) is UrgencyColor.RED


def test_iso_strings_are_accepted() -> None:
    assert classify_urgency("2024-05-06", "2024-05-01") is UrgencyColor.YELLOW
    assert to_calendar_date("2024-05-06T10:30:00Z") == date(2024, 5, 6)


@pytest.mark.parametrize("value", ["not-a-date", "2024-13-45", "", 12345])
def test_invalid_dates_raise(value) -> None:
    with pytest.raises(InvalidDateError):
        classify_urgency(value, WEDNESDAY)


def test_invalid_date_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        to_calendar_date("yesterday")


def test_end_of_month_handles_leap_years() -> None:
    assert end_of_month(date(2024, 2, 10)) == date(2024, 2, 29)
    assert end_of_month(date(2023, 2, 10)) == date(2023, 2, 28)


def test_classifier_uses_injected_today() -> None:
    classifier = UrgencyClassifier(today_provider=lambda: WEDNESDAY)

    assert classifier.today() == WEDNESDAY
    assert classifier.classify(date(2024, 5, 5)) is UrgencyColor.RED
    assert classifier.classify(date(2024, 5, 5), today=date(2024, 5, 6)) is UrgencyColor.GRAY
