"""Conversion between ``FilterState`` and URL query parameters."""
from __future__ import annotations

from dataclasses import replace
from enum import Enum
from typing import Any, Iterable, Mapping, Optional, Sequence, TypeVar
from urllib.parse import urlencode

from src.core.entities import FilterState, ProjectSource, ProjectStatus, SortKey
from src.utils.logger import logger

CATEGORY_PARAM = "category"
STATUS_PARAM = "status"
SOURCE_PARAM = "source"
NEIGHBORHOOD_PARAM = "neighborhood"
SORT_PARAM = "sort"
PAGE_PARAM = "page"

DEFAULT_SORT = SortKey.NEWEST

_E = TypeVar("_E", bound=Enum)
_T = TypeVar("_T")


def parse_filter_state(params: Any) -> FilterState:
    """Read a ``FilterState`` from multi-valued query parameters.

    ``params`` may be a plain mapping whose values are strings or lists of
    strings (``urllib.parse.parse_qs`` output) or any object exposing
    ``get_all(name)`` such as Streamlit's ``st.query_params``. Absent
    dimensions mean "no filter"; unknown status and source values are dropped.
    """

    categories = frozenset(_read_values(params, CATEGORY_PARAM))
    neighborhoods = frozenset(_read_values(params, NEIGHBORHOOD_PARAM))
    statuses = frozenset(_coerce_enums(ProjectStatus, _read_values(params, STATUS_PARAM)))
    sources = frozenset(_coerce_enums(ProjectSource, _read_values(params, SOURCE_PARAM)))

    sort_values = _read_values(params, SORT_PARAM)
    sort = _coerce_sort(sort_values[0] if sort_values else None)

    page_values = _read_values(params, PAGE_PARAM)
    page = _coerce_page(page_values[0] if page_values else None)

    return FilterState(
        categories=categories,
        statuses=statuses,
        sources=sources,
        neighborhoods=neighborhoods,
        sort=sort,
        page=page,
    )


def serialize_filter_state(state: FilterState) -> list[tuple[str, str]]:
    """Return query pairs for ``state`` in a stable order.

    Dimensions are emitted as category, status, source, neighborhood with the
    members of each sorted. ``sort`` is omitted when it is the default and
    ``page`` when it is the first page.
    """

    pairs: list[tuple[str, str]] = []
    pairs.extend((CATEGORY_PARAM, value) for value in sorted(state.categories))
    pairs.extend((STATUS_PARAM, value) for value in sorted(s.value for s in state.statuses))
    pairs.extend((SOURCE_PARAM, value) for value in sorted(s.value for s in state.sources))
    pairs.extend((NEIGHBORHOOD_PARAM, value) for value in sorted(state.neighborhoods))

    if state.sort is not DEFAULT_SORT:
        pairs.append((SORT_PARAM, state.sort.value))
    if state.page > 1:
        pairs.append((PAGE_PARAM, str(state.page)))

    return pairs


def to_query_string(state: FilterState) -> str:
    return urlencode(serialize_filter_state(state))


def to_query_dict(state: FilterState) -> dict[str, list[str]]:
    """Group serialized pairs by name, e.g. for ``st.query_params.from_dict``."""
    grouped: dict[str, list[str]] = {}
    for name, value in serialize_filter_state(state):
        grouped.setdefault(name, []).append(value)
    return grouped


def toggle_category(state: FilterState, slug: str) -> FilterState:
    return replace(state, categories=_toggle(state.categories, slug), page=1)


def toggle_status(state: FilterState, status: ProjectStatus) -> FilterState:
    return replace(state, statuses=_toggle(state.statuses, status), page=1)


def toggle_source(state: FilterState, source: ProjectSource) -> FilterState:
    return replace(state, sources=_toggle(state.sources, source), page=1)


def toggle_neighborhood(state: FilterState, neighborhood: str) -> FilterState:
    return replace(state, neighborhoods=_toggle(state.neighborhoods, neighborhood), page=1)


def with_sort(state: FilterState, sort: SortKey) -> FilterState:
    return replace(state, sort=sort, page=1)


def with_page(state: FilterState, page: int) -> FilterState:
    return replace(state, page=max(1, int(page)))


def clear_filters() -> FilterState:
    return FilterState()


def _toggle(values: frozenset[_T], item: _T) -> frozenset[_T]:
    if item in values:
        return values - {item}
    return values | {item}


def _read_values(params: Any, name: str) -> list[str]:
    if params is None:
        return []

    get_all = getattr(params, "get_all", None)
    if callable(get_all):
        raw: Any = get_all(name)
    elif isinstance(params, Mapping):
        raw = params.get(name)
    else:
        raise TypeError(f"Unsupported query parameter container: {type(params).__name__}")

    if raw is None:
        return []
    if isinstance(raw, str):
        raw = [raw]
    elif not isinstance(raw, (Sequence, set, frozenset)):
        raw = [raw]

    values: list[str] = []
    for item in raw:
        text = str(item).strip()
        if text:
            values.append(text)
    return values


def _coerce_enums(enum_type: type[_E], values: Iterable[str]) -> list[_E]:
    members: list[_E] = []
    for value in values:
        try:
            members.append(enum_type(value))
        except ValueError:
            logger.debug("Ignoring unknown {} filter value: {}", enum_type.__name__, value)
    return members


def _coerce_sort(value: Optional[str]) -> SortKey:
    if value is None:
        return DEFAULT_SORT
    try:
        return SortKey(value)
    except ValueError:
        logger.debug("Unknown sort key {}; using {}", value, DEFAULT_SORT.value)
        return DEFAULT_SORT


def _coerce_page(value: Optional[str]) -> int:
    if value is None:
        return 1
    try:
        page = int(value)
    except ValueError:
        return 1
    return page if page >= 1 else 1


__all__ = [
    "CATEGORY_PARAM",
    "DEFAULT_SORT",
    "NEIGHBORHOOD_PARAM",
    "PAGE_PARAM",
    "SORT_PARAM",
    "SOURCE_PARAM",
    "STATUS_PARAM",
    "clear_filters",
    "parse_filter_state",
    "serialize_filter_state",
    "to_query_dict",
    "to_query_string",
    "toggle_category",
    "toggle_neighborhood",
    "toggle_source",
    "toggle_status",
    "with_page",
    "with_sort",
]
