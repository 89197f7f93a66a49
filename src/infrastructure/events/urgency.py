"""Urgency classification for project milestones."""
from __future__ import annotations

import calendar
from datetime import date, datetime, timedelta
from typing import Callable, Union

from src.core.entities import UrgencyColor
from src.core.errors import InvalidDateError

DateLike = Union[date, datetime, str]


def to_calendar_date(value: DateLike) -> date:
    """Return the calendar date for ``value``, dropping any time of day.

    Strings must be ISO formatted (``2024-05-01`` or a full ISO timestamp).
    """

    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        text = value.strip()
        try:
            return date.fromisoformat(text)
        except ValueError:
            pass
        try:
            return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
        except ValueError as error:
            raise InvalidDateError(f"Cannot parse {value!r} as a calendar date") from error

    raise InvalidDateError(f"Unsupported date value of type {type(value).__name__}")


def end_of_week(day: date) -> date:
    """Sunday closing the Monday-started week that contains ``day``."""
    return day + timedelta(days=6 - day.weekday())


def end_of_month(day: date) -> date:
    last_day = calendar.monthrange(day.year, day.month)[1]
    return day.replace(day=last_day)


def classify_urgency(target_date: DateLike, today: DateLike) -> UrgencyColor:
    """Map ``target_date`` to an urgency bucket relative to ``today``.

    Boundaries are inclusive and belong to the more urgent bucket: a date on the
    closing Sunday of the current week is red, not yellow.
    """

    target = to_calendar_date(target_date)
    reference = to_calendar_date(today)

    if target < reference:
        return UrgencyColor.GRAY

    this_week_end = end_of_week(reference)
    next_week_end = this_week_end + timedelta(days=7)
    this_month_end = end_of_month(reference)

    if target <= this_week_end:
        return UrgencyColor.RED
    if target <= next_week_end:
        return UrgencyColor.YELLOW
    if target <= this_month_end:
        return UrgencyColor.GREEN
    return UrgencyColor.GRAY


class UrgencyClassifier:
    """Classify dates against a reference day supplied by ``today_provider``."""

    def __init__(self, today_provider: Callable[[], date] | None = None) -> None:
        self._today_provider = today_provider or date.today

    def today(self) -> date:
        return self._today_provider()

    def classify(self, target_date: DateLike, today: DateLike | None = None) -> UrgencyColor:
        reference = today if today is not None else self._today_provider()
        return classify_urgency(target_date, reference)


__all__ = [
    "UrgencyClassifier",
    "classify_urgency",
    "end_of_month",
    "end_of_week",
    "to_calendar_date",
]
