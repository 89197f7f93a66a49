"""Tests for the embedded Google Maps markup."""
from __future__ import annotations

from datetime import datetime, timezone

from src.core.entities import (
    Category,
    GeometryType,
    MapMarker,
    PointGeometry,
    Project,
    ProjectSource,
    ProjectStatus,
    UrgencyColor,
)
from src.interface.web.map_html import build_google_map_html, build_marker_points

CATEGORY = Category(id="cat-ped", name="Walk & Roll", slug="pedestrian", color="#db2777")
PROJECT = Project(
    id="p-1",
    title="Crosswalk <Pine>",
    source=ProjectSource.USER_SUGGESTION,
    status=ProjectStatus.PROPOSED,
    geometry=PointGeometry(coordinates=(-122.3, 47.6)),
    geometry_type=GeometryType.POINT,
    created_at=datetime(2024, 1, 1, tzinfo=timezone.utc),
    description="x" * 200,
    category_id="cat-ped",
    location_name="Pine & 3rd",
    vote_score=4,
    comment_count=2,
)
MARKER = MapMarker(
    id="p-1",
    latitude=47.6,
    longitude=-122.3,
    title=PROJECT.title,
    status=PROJECT.status,
    source=PROJECT.source,
    category_color="#db2777",
    urgency_color=UrgencyColor.YELLOW,
)


def test_marker_points_escape_and_truncate() -> None:
    [point] = build_marker_points([MARKER], {"p-1": PROJECT}, {"cat-ped": CATEGORY})

    assert point["title"] == "Crosswalk &lt;Pine&gt;"
    assert point["category"] == "Walk &amp; Roll"
    assert point["location"] == "Pine &amp; 3rd"
    assert len(point["description"]) == 150
    assert point["description"].endswith("...")
    assert (point["lat"], point["lng"]) == (47.6, -122.3)
    assert point["status"] == "Proposed"
    assert point["urgency"] == "Next week"
    assert point["link"] == "?view=detail&project=p-1"


def test_marker_points_without_project_details() -> None:
    [point] = build_marker_points([MARKER], {}, {})

    assert point["category"] == ""
    assert point["description"] == ""
    assert point["votes"] == 0


def test_map_html_wires_callback_and_center() -> None:
    points = build_marker_points([MARKER], {"p-1": PROJECT}, {"cat-ped": CATEGORY})

    markup = build_google_map_html(
        points, api_key="KEY", element_id="project-map", center=(47.6062, -122.3321), zoom=12
    )

    assert 'id="project-map"' in markup
    assert "function initMap_project_map()" in markup
    assert "key=KEY&callback=initMap_project_map" in markup
    assert "center: {lat: 47.6062, lng: -122.3321}" in markup
    assert "zoom: 12" in markup
    assert "if (false && !bounds.isEmpty())" in markup
