"""Tests for filtering, sorting and paginating the project listing."""
from __future__ import annotations

import pytest

pd = pytest.importorskip("pandas")

from src.core.entities import Category, FilterState, ProjectSource, ProjectStatus, SortKey
from src.infrastructure.storage.dataframe_store import DataFrameProjectStore
from src.use_cases.list_projects import ListProjectsUseCase, apply_filters, resolve_category_ids


class RecordingQuery:
    """Query double that records the calls made against it."""

    def __init__(self) -> None:
        self.calls: list[tuple] = []

    def is_in(self, column, values):
        self.calls.append(("is_in", column, list(values)))
        return self

    def equals(self, column, value):
        self.calls.append(("equals", column, value))
        return self

    def order_by(self, column, *, descending=False):
        self.calls.append(("order_by", column, descending))
        return self

    def slice(self, offset, limit):
        self.calls.append(("slice", offset, limit))
        return self

    def count(self):
        return 0

    def fetch(self):
        return []


CATEGORIES = [
    Category(id="cat-bike", name="Bike", slug="bike", color="#2563eb"),
    Category(id="cat-ped", name="Pedestrian", slug="pedestrian", color="#db2777"),
]


@pytest.fixture
def store(project_record, category_rows) -> DataFrameProjectStore:
    records = [
        project_record(
            f"p-{index}",
            status=status.value,
            vote_score=index * 10,
            comment_count=7 - index,
            category_id="cat-bike" if index % 2 else "cat-ped",
            neighborhood="Fremont" if index < 3 else "Ballard",
            source="user_suggestion" if index == 0 else "official_sdot",
            created_at=f"2024-01-0{index + 1}T12:00:00+00:00",
        )
        for index, status in enumerate(ProjectStatus)
    ]
    records.append(project_record("hidden", status="planned", is_hidden=True))
    return DataFrameProjectStore(pd.DataFrame(records), pd.DataFrame(category_rows))


def test_status_filter_returns_only_matching_projects(store) -> None:
    state = FilterState(statuses=frozenset({ProjectStatus.PLANNED, ProjectStatus.COMPLETED}))

    listing = ListProjectsUseCase(store).execute(state)

    assert {project.status for project in listing.projects} == {
        ProjectStatus.PLANNED,
        ProjectStatus.COMPLETED,
    }
    assert listing.total == 2


def test_hidden_projects_are_never_listed(store) -> None:
    listing = ListProjectsUseCase(store).execute(FilterState())

    assert "hidden" not in {project.id for project in listing.projects}
    assert listing.total == len(ProjectStatus)


def test_dimensions_combine_with_and(store) -> None:
    state = FilterState(
        categories=frozenset({"bike"}),
        neighborhoods=frozenset({"Fremont"}),
    )

    listing = ListProjectsUseCase(store).execute(state)

    assert [project.id for project in listing.projects] == ["p-1"]


def test_unknown_category_slug_matches_nothing(store) -> None:
    state = FilterState(categories=frozenset({"does-not-exist"}))

    listing = ListProjectsUseCase(store).execute(state)

    assert listing.projects == []
    assert listing.total == 0


def test_source_filter(store) -> None:
    state = FilterState(sources=frozenset({ProjectSource.USER_SUGGESTION}))

    listing = ListProjectsUseCase(store).execute(state)

    assert [project.id for project in listing.projects] == ["p-0"]


@pytest.mark.parametrize(
    ("sort", "expected_first"),
    [
        (SortKey.NEWEST, "p-6"),
        (SortKey.OLDEST, "p-0"),
        (SortKey.VOTES, "p-6"),
        (SortKey.COMMENTS, "p-0"),
        (SortKey.DEADLINE, "p-6"),
    ],
)
def test_sort_orders(store, sort: SortKey, expected_first: str) -> None:
    listing = ListProjectsUseCase(store).execute(FilterState(sort=sort))

    assert listing.projects[0].id == expected_first


def test_pagination_slices_results(store) -> None:
    use_case = ListProjectsUseCase(store, page_size=3)

    first = use_case.execute(FilterState(sort=SortKey.OLDEST))
    third = use_case.execute(FilterState(sort=SortKey.OLDEST, page=3))

    assert [project.id for project in first.projects] == ["p-0", "p-1", "p-2"]
    assert [project.id for project in third.projects] == ["p-6"]
    assert first.page_count == 3


def test_filter_options_list_neighborhoods_of_visible_projects(store) -> None:
    options = ListProjectsUseCase(store).filter_options()

    assert options.neighborhoods == ["Ballard", "Fremont"]
    assert [category.slug for category in options.categories] == ["pedestrian", "bike"]
    assert options.statuses == list(ProjectStatus)


def test_apply_filters_resolves_slugs_and_orders_dimensions() -> None:
    query = RecordingQuery()
    state = FilterState(
        categories=frozenset({"bike", "unknown"}),
        statuses=frozenset({ProjectStatus.PLANNED}),
        sources=frozenset({ProjectSource.OFFICIAL_SDOT}),
        neighborhoods=frozenset({"Fremont"}),
        sort=SortKey.VOTES,
    )

    apply_filters(query, state, CATEGORIES)

    assert query.calls == [
        ("is_in", "category_id", ["cat-bike"]),
        ("is_in", "status", ["planned"]),
        ("is_in", "source", ["official_sdot"]),
        ("is_in", "neighborhood", ["Fremont"]),
        ("order_by", "vote_score", True),
    ]


def test_apply_filters_skips_empty_dimensions() -> None:
    query = RecordingQuery()

    apply_filters(query, FilterState(), CATEGORIES)

    assert query.calls == [("order_by", "created_at", True)]


def test_unresolved_slugs_still_restrict_the_query() -> None:
    query = RecordingQuery()

    apply_filters(query, FilterState(categories=frozenset({"nope"})), CATEGORIES)

    assert query.calls[0] == ("is_in", "category_id", [])


def test_resolve_category_ids_skips_unknown_slugs() -> None:
    assert resolve_category_ids(["bike", "nope"], CATEGORIES) == {"cat-bike"}


def test_page_size_must_be_positive(store) -> None:
    with pytest.raises(ValueError):
        ListProjectsUseCase(store, page_size=0)


def test_page_past_the_end_shows_the_last_page(store) -> None:
    listing = ListProjectsUseCase(store, page_size=3).execute(FilterState(sort=SortKey.OLDEST, page=99))

    assert listing.page == 3
    assert [project.id for project in listing.projects] == ["p-6"]


def test_page_past_the_end_of_an_empty_listing_is_first_page(store) -> None:
    state = FilterState(categories=frozenset({"nope"}), page=4)

    listing = ListProjectsUseCase(store).execute(state)

    assert listing.page == 1
    assert listing.page_count == 1
