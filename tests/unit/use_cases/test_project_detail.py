"""Tests for the project detail use case."""
from __future__ import annotations

from datetime import date

import pytest

pd = pytest.importorskip("pandas")

from src.core.entities import UrgencyColor
from src.infrastructure.storage.dataframe_store import DataFrameProjectStore
from src.use_cases.project_detail import ProjectDetailUseCase

TODAY = date(2024, 5, 1)


@pytest.fixture
def use_case(project_record, category_rows) -> ProjectDetailUseCase:
    projects = pd.DataFrame(
        [
            project_record("a", category_id="cat-bike"),
            project_record("quiet"),
            project_record("secret", is_hidden=True),
        ]
    )
    dates = pd.DataFrame(
        [
            {"id": "d1", "project_id": "a", "date_type": "council_vote", "date": "2024-05-20", "title": "Vote"},
            {"id": "d2", "project_id": "a", "date_type": "public_meeting", "date": "2024-05-03", "title": "Meeting"},
            {"id": "d3", "project_id": "a", "date_type": "comment_deadline", "date": "2024-04-02", "title": "Closed"},
            {"id": "d4", "project_id": "secret", "date_type": "other", "date": "2024-05-02", "title": "Hidden"},
        ]
    )
    store = DataFrameProjectStore(projects, pd.DataFrame(category_rows), dates)
    return ProjectDetailUseCase(store)


def test_detail_includes_category_and_upcoming_dates(use_case) -> None:
    detail = use_case.execute("a", TODAY)

    assert detail is not None
    assert detail.category.slug == "bike"
    assert [item.project_date.id for item in detail.upcoming_dates] == ["d2", "d1"]
    assert [item.urgency for item in detail.upcoming_dates] == [UrgencyColor.RED, UrgencyColor.GREEN]
    assert detail.next_date.id == "d2"
    assert detail.urgency_color is UrgencyColor.RED


def test_project_without_dates_has_no_urgency(use_case) -> None:
    detail = use_case.execute("quiet", TODAY)

    assert detail.category is None
    assert detail.upcoming_dates == []
    assert detail.next_date is None
    assert detail.urgency_color is None


@pytest.mark.parametrize("project_id", ["secret", "unknown"])
def test_hidden_or_missing_projects_are_not_found(use_case, project_id: str) -> None:
    assert use_case.execute(project_id, TODAY) is None
