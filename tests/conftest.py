"""Pytest configuration for the project."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

for candidate in (ROOT, SRC):
    if str(candidate) not in sys.path:
        sys.path.insert(0, str(candidate))


@pytest.fixture
def project_record():
    """Return a factory for raw project rows as the store receives them."""

    def build(project_id: str, **overrides):
        record = {
            "id": project_id,
            "title": f"Project {project_id}",
            "description": None,
            "source": "official_sdot",
            "status": "planned",
            "category_id": None,
            "geometry": {"type": "Point", "coordinates": [-122.33, 47.60]},
            "geometry_type": "point",
            "location_name": None,
            "affected_streets": None,
            "neighborhood": None,
            "external_id": None,
            "external_url": None,
            "vote_score": 0,
            "comment_count": 0,
            "follower_count": 0,
            "created_by": None,
            "is_hidden": False,
            "created_at": "2024-01-01T12:00:00+00:00",
            "updated_at": None,
        }
        record.update(overrides)
        return record

    return build


@pytest.fixture
def category_rows():
    return [
        {"id": "cat-bike", "name": "Bike", "slug": "bike", "color": "#2563eb", "display_order": "2"},
        {"id": "cat-ped", "name": "Pedestrian", "slug": "pedestrian", "color": "#db2777", "display_order": "1"},
    ]
