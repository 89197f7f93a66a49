"""Display formatting helpers shared by the web interface and scripts."""
from __future__ import annotations

from datetime import date, datetime
from typing import Optional, Union

from src.infrastructure.events.urgency import to_calendar_date

DateOrString = Union[date, datetime, str]


def format_date(value: DateOrString) -> str:
    """Format a date as ``May 1, 2024``."""
    day = to_calendar_date(value)
    return f"{day:%b} {day.day}, {day.year}"


def format_relative_time(value: DateOrString, now: DateOrString) -> str:
    """Describe ``value`` relative to ``now`` (``Today``, ``In 3 days``...).

    Differences of a week or more fall back to :func:`format_date`.
    """

    if isinstance(value, datetime) and isinstance(now, datetime):
        seconds = (value - now).total_seconds()
        diff_days = round(seconds / 86400)
    else:
        diff_days = (to_calendar_date(value) - to_calendar_date(now)).days

    if diff_days == 0:
        return "Today"
    if diff_days == 1:
        return "Tomorrow"
    if diff_days == -1:
        return "Yesterday"
    if 0 < diff_days < 7:
        return f"In {diff_days} days"
    if -7 < diff_days < 0:
        return f"{abs(diff_days)} days ago"
    return format_date(value)


def truncate(text: str, max_length: int) -> str:
    if len(text) <= max_length:
        return text
    return text[: max(0, max_length - 3)] + "..."


def get_initials(name: Optional[str]) -> str:
    if not name or not name.strip():
        return "?"
    return "".join(word[0] for word in name.split()).upper()[:2]


def pluralize(count: int, singular: str, plural: Optional[str] = None) -> str:
    return singular if count == 1 else (plural or f"{singular}s")


__all__ = ["format_date", "format_relative_time", "get_initials", "pluralize", "truncate"]
