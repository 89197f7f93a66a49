"""Use case for listing projects according to a filter state."""
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Collection, Iterable, Mapping, Protocol

from src.core.entities import Category, FilterState, Project, ProjectSource, ProjectStatus, SortKey
from src.utils.logger import logger


class ProjectQuery(Protocol):
    """Chainable, immutable query over project rows.

    ``is_in`` with an empty collection matches no rows.
    """

    def is_in(self, column: str, values: Collection[Any]) -> "ProjectQuery":
        ...

    def equals(self, column: str, value: Any) -> "ProjectQuery":
        ...

    def order_by(self, column: str, *, descending: bool = False) -> "ProjectQuery":
        ...

    def slice(self, offset: int, limit: int) -> "ProjectQuery":
        ...

    def count(self) -> int:
        ...

    def fetch(self) -> list[Project]:
        ...


class ProjectCatalog(Protocol):
    def query(self) -> ProjectQuery:
        ...

    def list_categories(self) -> list[Category]:
        ...

    def list_neighborhoods(self) -> list[str]:
        ...


# Deadline ordering needs a precomputed next date per project; until the store
# provides one it falls back to newest first.
SORT_ORDER: Mapping[SortKey, tuple[str, bool]] = {
    SortKey.NEWEST: ("created_at", True),
    SortKey.OLDEST: ("created_at", False),
    SortKey.VOTES: ("vote_score", True),
    SortKey.COMMENTS: ("comment_count", True),
    SortKey.DEADLINE: ("created_at", True),
}


def resolve_category_ids(slugs: Iterable[str], categories: Iterable[Category]) -> set[str]:
    """Map category slugs to identifiers, skipping slugs with no match."""
    by_slug = {category.slug: category.id for category in categories}
    resolved: set[str] = set()
    for slug in slugs:
        category_id = by_slug.get(slug)
        if category_id is None:
            logger.debug("Category slug {} does not match any category", slug)
            continue
        resolved.add(category_id)
    return resolved


def apply_filters(
    query: ProjectQuery,
    state: FilterState,
    categories: Iterable[Category],
) -> ProjectQuery:
    """Restrict and order ``query`` according to ``state``.

    Dimensions combine with AND and the members of a dimension with OR. A
    non-empty category selection whose slugs resolve to no category matches
    nothing rather than being ignored.
    """

    if state.categories:
        category_ids = resolve_category_ids(state.categories, categories)
        query = query.is_in("category_id", sorted(category_ids))
    if state.statuses:
        query = query.is_in("status", sorted(_values(state.statuses)))
    if state.sources:
        query = query.is_in("source", sorted(_values(state.sources)))
    if state.neighborhoods:
        query = query.is_in("neighborhood", sorted(state.neighborhoods))

    column, descending = SORT_ORDER[state.sort]
    if state.sort is SortKey.DEADLINE:
        logger.debug("Deadline sort falls back to creation time")
    return query.order_by(column, descending=descending)


@dataclass(frozen=True)
class FilterOptions:
    """Choices offered by the listing filter controls."""

    categories: list[Category]
    statuses: list[ProjectStatus] = field(default_factory=lambda: list(ProjectStatus))
    sources: list[ProjectSource] = field(default_factory=lambda: list(ProjectSource))
    neighborhoods: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class ProjectListing:
    projects: list[Project]
    total: int
    page: int
    page_size: int
    categories_by_id: Mapping[str, Category]

    @property
    def page_count(self) -> int:
        if self.total == 0:
            return 1
        return (self.total + self.page_size - 1) // self.page_size


class ListProjectsUseCase:
    """Fetch one page of visible projects matching a filter state."""

    def __init__(self, catalog: ProjectCatalog, page_size: int = 24) -> None:
        if page_size < 1:
            raise ValueError("page_size must be a positive integer")
        self._catalog = catalog
        self._page_size = page_size

    def filter_options(self) -> FilterOptions:
        return FilterOptions(
            categories=self._catalog.list_categories(),
            neighborhoods=self._catalog.list_neighborhoods(),
        )

    def execute(self, state: FilterState, *, paginate: bool = True) -> ProjectListing:
        categories = self._catalog.list_categories()
        query = self._catalog.query().equals("is_hidden", False)
        query = apply_filters(query, state, categories)

        total = query.count()
        page = state.page
        if paginate:
            last_page = max(1, (total + self._page_size - 1) // self._page_size)
            if page > last_page:
                logger.debug("Page {} is past the last page; showing page {}", page, last_page)
                page = last_page
            query = query.slice((page - 1) * self._page_size, self._page_size)

        projects = query.fetch()
        logger.info(
            "Listed {} of {} projects (page {}, {} active filters)",
            len(projects),
            total,
            page,
            state.active_filter_count,
        )
        return ProjectListing(
            projects=projects,
            total=total,
            page=page,
            page_size=self._page_size,
            categories_by_id={category.id: category for category in categories},
        )


def _values(members: Iterable[Enum]) -> list[str]:
    return [member.value for member in members]


__all__ = [
    "FilterOptions",
    "ListProjectsUseCase",
    "ProjectCatalog",
    "ProjectListing",
    "ProjectQuery",
    "SORT_ORDER",
    "apply_filters",
    "resolve_category_ids",
]
