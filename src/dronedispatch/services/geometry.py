"""Planar geometry helpers used by the pathfinder and the geometry endpoints.

Positions are treated as points in the (lng, lat) plane. No geodesic
correction is applied; at the scale drones operate the flat approximation is
accepted.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Sequence

from ..config import Settings, settings
from ..models.domain import LngLat

ON_EDGE_TOLERANCE = 1e-12


@dataclass(frozen=True, slots=True)
class GeometryConfig:
    """Scale constants for stepping, closeness and search."""

    move_distance: float = 0.00015
    close_distance: float = 0.00015
    headings: tuple[float, ...] = tuple(i * 22.5 for i in range(16))
    heuristic_weight: float = 1.0001
    key_precision: int = 8
    max_iterations: int = 50_000

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "GeometryConfig":
        source = source or settings
        return cls(
            move_distance=source.move_distance,
            close_distance=source.close_distance,
            headings=tuple(source.compass_directions),
            heuristic_weight=source.heuristic_weight,
            key_precision=source.node_key_precision,
            max_iterations=source.max_path_iterations,
        )


DEFAULT_GEOMETRY = GeometryConfig()


def distance(a: LngLat, b: LngLat) -> float:
    """Euclidean distance in degrees."""

    return math.hypot(a.lng - b.lng, a.lat - b.lat)


def is_close(a: LngLat, b: LngLat, config: GeometryConfig = DEFAULT_GEOMETRY) -> bool:
    return distance(a, b) < config.close_distance


def next_position(start: LngLat, angle: float, config: GeometryConfig = DEFAULT_GEOMETRY) -> LngLat:
    """Move one step from ``start``; 0 degrees is east, angles grow counter-clockwise."""

    radians = math.radians(angle)
    return LngLat(
        lng=start.lng + config.move_distance * math.cos(radians),
        lat=start.lat + config.move_distance * math.sin(radians),
    )


def bounding_box(vertices: Sequence[LngLat]) -> tuple[float, float, float, float]:
    """Return (min_lng, min_lat, max_lng, max_lat)."""

    lngs = [vertex.lng for vertex in vertices]
    lats = [vertex.lat for vertex in vertices]
    return (min(lngs), min(lats), max(lngs), max(lats))


def _cross(o: LngLat, a: LngLat, b: LngLat) -> float:
    return (a.lng - o.lng) * (b.lat - o.lat) - (a.lat - o.lat) * (b.lng - o.lng)


def _on_segment(point: LngLat, a: LngLat, b: LngLat) -> bool:
    if abs(_cross(a, b, point)) > ON_EDGE_TOLERANCE:
        return False
    return (
        min(a.lng, b.lng) - ON_EDGE_TOLERANCE <= point.lng <= max(a.lng, b.lng) + ON_EDGE_TOLERANCE
        and min(a.lat, b.lat) - ON_EDGE_TOLERANCE <= point.lat <= max(a.lat, b.lat) + ON_EDGE_TOLERANCE
    )


def point_in_polygon(point: LngLat, vertices: Sequence[LngLat]) -> bool:
    """Return True when ``point`` is inside the polygon or on one of its edges."""

    if len(vertices) < 3:
        return False

    min_lng, min_lat, max_lng, max_lat = bounding_box(vertices)
    if point.lng < min_lng or point.lng > max_lng or point.lat < min_lat or point.lat > max_lat:
        return False

    inside = False
    count = len(vertices)
    for index in range(count):
        a = vertices[index]
        b = vertices[(index + 1) % count]
        if _on_segment(point, a, b):
            return True
        if (a.lat > point.lat) != (b.lat > point.lat):
            crossing_lng = a.lng + (point.lat - a.lat) * (b.lng - a.lng) / (b.lat - a.lat)
            if point.lng < crossing_lng:
                inside = not inside
    return inside


def _direction(p1: LngLat, p2: LngLat, p3: LngLat) -> float:
    return (p3.lng - p1.lng) * (p2.lat - p1.lat) - (p2.lng - p1.lng) * (p3.lat - p1.lat)


def segments_intersect(p1: LngLat, p2: LngLat, p3: LngLat, p4: LngLat) -> bool:
    """Strict crossing test; touching endpoints and collinear overlaps are not crossings."""

    d1 = _direction(p3, p4, p1)
    d2 = _direction(p3, p4, p2)
    d3 = _direction(p1, p2, p3)
    d4 = _direction(p1, p2, p4)
    return ((d1 > 0 > d2) or (d1 < 0 < d2)) and ((d3 > 0 > d4) or (d3 < 0 < d4))
