"""Minimal GeoJSON geometry helpers used to derive parent points.

Galleries are stored as points, polygons or multipolygons; a merged parent
assignment only ever needs one representative point per ancestor.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Final

type Point = tuple[float, float]
type Ring = Sequence[Sequence[float]]
type GeoJSONGeometry = Mapping[str, Any]

_LABEL_KEYS: Final[tuple[tuple[str, str], ...]] = (
    ("lbl:longitude", "lbl:latitude"),
    ("geom:longitude", "geom:latitude"),
)


class UnsupportedGeometryError(ValueError):
    """Raised when no representative point can be derived from a geometry."""


def multipoint_geometry(points: Sequence[Point]) -> dict[str, Any]:
    return {"type": "MultiPoint", "coordinates": [[x, y] for x, y in points]}


def label_point(properties: Mapping[str, Any]) -> Point | None:
    """Return the label point recorded in a feature's properties, if any."""

    for lon_key, lat_key in _LABEL_KEYS:
        lon = properties.get(lon_key)
        lat = properties.get(lat_key)
        if isinstance(lon, int | float) and isinstance(lat, int | float):
            return float(lon), float(lat)
    return None


def representative_point(geometry: GeoJSONGeometry | None) -> Point:
    """Reduce a geometry to a single point (planar centroid for polygons)."""

    if not geometry:
        raise UnsupportedGeometryError("Missing geometry")

    geom_type = geometry.get("type")
    coords = geometry.get("coordinates")

    match geom_type:
        case "Point":
            return _as_point(coords)
        case "MultiPoint":
            points = [_as_point(c) for c in coords or ()]
            if not points:
                raise UnsupportedGeometryError("Empty MultiPoint")
            return (
                sum(p[0] for p in points) / len(points),
                sum(p[1] for p in points) / len(points),
            )
        case "Polygon":
            return _weighted_centroid([_ring_centroid(coords[0])] if coords else [])
        case "MultiPolygon":
            return _weighted_centroid([_ring_centroid(poly[0]) for poly in coords or () if poly])
        case _:
            raise UnsupportedGeometryError(f"Unsupported geometry type {geom_type!r}")


def _as_point(coords: Any) -> Point:
    try:
        return float(coords[0]), float(coords[1])
    except (TypeError, IndexError, ValueError) as exc:
        raise UnsupportedGeometryError(f"Invalid point coordinates {coords!r}") from exc


def _ring_centroid(ring: Ring) -> tuple[Point, float]:
    """Shoelace centroid of a linear ring, returned with its absolute area."""

    points = [_as_point(c) for c in ring]
    if len(points) < 3:
        raise UnsupportedGeometryError("Polygon ring needs at least three positions")

    area2 = 0.0
    cx = 0.0
    cy = 0.0
    for (x0, y0), (x1, y1) in zip(points, points[1:] + points[:1], strict=True):
        cross = x0 * y1 - x1 * y0
        area2 += cross
        cx += (x0 + x1) * cross
        cy += (y0 + y1) * cross

    if area2 == 0:
        # degenerate ring, fall back to the vertex mean
        xs = [p[0] for p in points]
        ys = [p[1] for p in points]
        return (sum(xs) / len(xs), sum(ys) / len(ys)), 0.0

    return (cx / (3 * area2), cy / (3 * area2)), abs(area2) / 2


def _weighted_centroid(parts: Sequence[tuple[Point, float]]) -> Point:
    if not parts:
        raise UnsupportedGeometryError("Empty polygon geometry")
    total = sum(area for _, area in parts)
    if total == 0:
        return parts[0][0]
    x = sum(point[0] * area for point, area in parts) / total
    y = sum(point[1] * area for point, area in parts) / total
    return x, y
