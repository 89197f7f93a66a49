"""Geometry parsing and marker placement helpers."""
from __future__ import annotations

import json
from typing import Any, Mapping, Optional, Sequence, Union

from src.core.entities import (
    Coordinate,
    Geometry,
    GeometryType,
    LineStringGeometry,
    PointGeometry,
    PolygonGeometry,
)
from src.core.errors import InvalidGeometryError
from src.utils.logger import logger

GeoJsonLike = Union[Mapping[str, Any], str, None]


def geometry_from_geojson(payload: GeoJsonLike) -> Optional[Geometry]:
    """Build a tagged geometry from a GeoJSON mapping or its JSON text.

    The backend returns geometries either as decoded objects or as JSON strings,
    so both are accepted. ``None`` and empty strings map to ``None``.
    """

    if payload is None:
        return None

    if isinstance(payload, str):
        if not payload.strip():
            return None
        try:
            payload = json.loads(payload)
        except json.JSONDecodeError as error:
            raise InvalidGeometryError(f"Geometry is not valid JSON: {error}") from error

    if not isinstance(payload, Mapping):
        raise InvalidGeometryError("Geometry must be a GeoJSON object")

    kind = payload.get("type")
    coordinates = payload.get("coordinates")

    if kind == "Point":
        return PointGeometry(coordinates=_parse_coordinate(coordinates))
    if kind == "LineString":
        return LineStringGeometry(coordinates=_parse_sequence(coordinates))
    if kind == "Polygon":
        if not isinstance(coordinates, Sequence) or isinstance(coordinates, str):
            raise InvalidGeometryError("Polygon coordinates must be a list of rings")
        return PolygonGeometry(rings=tuple(_parse_sequence(ring) for ring in coordinates))

    raise InvalidGeometryError(f"Unsupported geometry type: {kind!r}")


def geometry_to_geojson(geometry: Geometry) -> dict[str, Any]:
    if isinstance(geometry, PointGeometry):
        return {"type": "Point", "coordinates": list(geometry.coordinates)}
    if isinstance(geometry, LineStringGeometry):
        return {
            "type": "LineString",
            "coordinates": [list(coordinate) for coordinate in geometry.coordinates],
        }
    if isinstance(geometry, PolygonGeometry):
        return {
            "type": "Polygon",
            "coordinates": [
                [list(coordinate) for coordinate in ring] for ring in geometry.rings
            ],
        }
    raise InvalidGeometryError(f"Unsupported geometry: {geometry!r}")


def representative_coordinate(geometry: Optional[Geometry]) -> Optional[Coordinate]:
    """Return a single coordinate to stand in for ``geometry`` on a map.

    Lines use their middle vertex and polygons the first vertex of the outer
    ring. Neither is a true midpoint or centroid.
    """

    if geometry is None:
        return None

    if isinstance(geometry, PointGeometry):
        return geometry.coordinates
    if isinstance(geometry, LineStringGeometry):
        if not geometry.coordinates:
            return None
        return geometry.coordinates[len(geometry.coordinates) // 2]
    if isinstance(geometry, PolygonGeometry):
        if not geometry.rings or not geometry.rings[0]:
            return None
        return geometry.rings[0][0]

    raise InvalidGeometryError(f"Unsupported geometry: {geometry!r}")


def geometry_type_of(geometry: Geometry) -> GeometryType:
    if isinstance(geometry, PointGeometry):
        return GeometryType.POINT
    if isinstance(geometry, LineStringGeometry):
        return GeometryType.LINE
    if isinstance(geometry, PolygonGeometry):
        return GeometryType.POLYGON
    raise InvalidGeometryError(f"Unsupported geometry: {geometry!r}")


def ensure_geometry_type(geometry: Optional[Geometry], geometry_type: GeometryType) -> None:
    """Raise when ``geometry_type`` disagrees with the shape of ``geometry``."""
    if geometry is None:
        return

    actual = geometry_type_of(geometry)
    if actual is not geometry_type:
        msg = f"Geometry shape {actual.value} does not match declared type {geometry_type.value}"
        raise InvalidGeometryError(msg)


def _parse_coordinate(raw: Any) -> Coordinate:
    if not isinstance(raw, Sequence) or isinstance(raw, str) or len(raw) < 2:
        raise InvalidGeometryError(f"Invalid coordinate: {raw!r}")

    try:
        longitude = float(raw[0])
        latitude = float(raw[1])
    except (TypeError, ValueError) as error:
        raise InvalidGeometryError(f"Invalid coordinate: {raw!r}") from error

    if len(raw) > 2:
        logger.debug("Dropping extra ordinates from coordinate {}", raw)
    return (longitude, latitude)


def _parse_sequence(raw: Any) -> tuple[Coordinate, ...]:
    if not isinstance(raw, Sequence) or isinstance(raw, str):
        raise InvalidGeometryError(f"Invalid coordinate sequence: {raw!r}")
    return tuple(_parse_coordinate(item) for item in raw)


__all__ = [
    "ensure_geometry_type",
    "geometry_from_geojson",
    "geometry_to_geojson",
    "geometry_type_of",
    "representative_coordinate",
]
