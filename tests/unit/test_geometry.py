"""Unit tests for geometry parsing and representative coordinates."""
from __future__ import annotations

import pytest

from src.core.entities import GeometryType, LineStringGeometry, PointGeometry, PolygonGeometry
from src.core.errors import InvalidGeometryError
from src.infrastructure.geo.geometry import (
    ensure_geometry_type,
    geometry_from_geojson,
    geometry_to_geojson,
    geometry_type_of,
    representative_coordinate,
)


def test_point_returns_its_coordinate() -> None:
    geometry = geometry_from_geojson({"type": "Point", "coordinates": [-122.33, 47.60]})

    assert representative_coordinate(geometry) == (-122.33, 47.60)


def test_line_returns_middle_vertex() -> None:
    geometry = geometry_from_geojson({"type": "LineString", "coordinates": [[0, 0], [1, 1], [2, 2]]})

    assert representative_coordinate(geometry) == (1, 1)


def test_line_with_even_vertex_count_uses_upper_middle() -> None:
    geometry = LineStringGeometry(coordinates=((0, 0), (1, 1), (2, 2), (3, 3)))

    assert representative_coordinate(geometry) == (2, 2)


def test_polygon_returns_first_vertex_of_outer_ring() -> None:
    geometry = geometry_from_geojson(
        {
            "type": "Polygon",
            "coordinates": [
                [[5, 5], [6, 5], [6, 6], [5, 6], [5, 5]],
                [[5.2, 5.2], [5.4, 5.2], [5.4, 5.4], [5.2, 5.2]],
            ],
        }
    )

    assert representative_coordinate(geometry) == (5, 5)


def test_missing_or_empty_geometries_have_no_coordinate() -> None:
    assert representative_coordinate(None) is None
    assert representative_coordinate(LineStringGeometry(coordinates=())) is None
    assert representative_coordinate(PolygonGeometry(rings=())) is None
    assert representative_coordinate(PolygonGeometry(rings=((),))) is None


def test_geojson_text_is_decoded() -> None:
    geometry = geometry_from_geojson('{"type": "Point", "coordinates": [-122.3, 47.6, 12.0]}')

    assert geometry == PointGeometry(coordinates=(-122.3, 47.6))
    assert geometry_from_geojson("") is None
    assert geometry_from_geojson(None) is None


@pytest.mark.parametrize(
    "payload",
    [
        {"type": "MultiPoint", "coordinates": [[0, 0]]},
        {"type": "Point", "coordinates": [1]},
        {"type": "Point", "coordinates": ["a", "b"]},
        {"type": "LineString", "coordinates": "0,0 1,1"},
        "{not json",
        ["Point"],
    ],
)
def test_malformed_geometries_raise(payload) -> None:
    with pytest.raises(InvalidGeometryError):
        geometry_from_geojson(payload)


def test_geometry_type_tags() -> None:
    assert geometry_type_of(PointGeometry(coordinates=(0, 0))) is GeometryType.POINT
    assert geometry_type_of(LineStringGeometry(coordinates=())) is GeometryType.LINE
    assert geometry_type_of(PolygonGeometry(rings=())) is GeometryType.POLYGON


def test_declared_type_must_match_shape() -> None:
    line = LineStringGeometry(coordinates=((0, 0), (1, 1)))

    ensure_geometry_type(line, GeometryType.LINE)
    ensure_geometry_type(None, GeometryType.POLYGON)
    with pytest.raises(InvalidGeometryError):
        ensure_geometry_type(line, GeometryType.POINT)


def test_geojson_export_matches_input_shape() -> None:
    payload = {"type": "LineString", "coordinates": [[0.0, 0.0], [1.0, 1.0]]}

    assert geometry_to_geojson(geometry_from_geojson(payload)) == payload
