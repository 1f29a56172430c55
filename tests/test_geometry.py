import math

import numpy as np
import pytest
from shapely.geometry import Point, Polygon

from dronedispatch.models.domain import LngLat
from dronedispatch.services.geometry import (
    DEFAULT_GEOMETRY,
    GeometryConfig,
    distance,
    is_close,
    next_position,
    point_in_polygon,
    segments_intersect,
)

SQUARE = (LngLat(0.0, 0.0), LngLat(1.0, 0.0), LngLat(1.0, 1.0), LngLat(0.0, 1.0))
L_SHAPE = (
    LngLat(0.0, 0.0),
    LngLat(2.0, 0.0),
    LngLat(2.0, 1.0),
    LngLat(1.0, 1.0),
    LngLat(1.0, 2.0),
    LngLat(0.0, 2.0),
)


def test_distance_is_euclidean():
    assert distance(LngLat(0.0, 0.0), LngLat(3.0, 4.0)) == pytest.approx(5.0)


def test_is_close_is_strict_and_reflexive():
    origin = LngLat(-3.186, 55.944)
    assert is_close(origin, origin)
    assert is_close(LngLat(0.0, 0.0), LngLat(0.0001, 0.0))
    assert not is_close(LngLat(0.0, 0.0), LngLat(0.00015, 0.0))


def test_next_position_follows_compass_convention():
    start = LngLat(0.0, 0.0)
    east = next_position(start, 0.0)
    north = next_position(start, 90.0)
    assert east.lng == pytest.approx(0.00015)
    assert east.lat == pytest.approx(0.0, abs=1e-15)
    assert north.lng == pytest.approx(0.0, abs=1e-15)
    assert north.lat == pytest.approx(0.00015)


@pytest.mark.parametrize("heading", DEFAULT_GEOMETRY.headings)
def test_every_heading_moves_exactly_one_step(heading):
    start = LngLat(-3.1863, 55.9446)
    assert distance(start, next_position(start, heading)) == pytest.approx(0.00015, rel=1e-9)


def test_geometry_config_from_settings_uses_configured_headings():
    config = GeometryConfig.from_settings()
    assert len(config.headings) == 16
    assert config.move_distance == pytest.approx(0.00015)


def test_point_in_polygon_inside_outside_and_edges():
    assert point_in_polygon(LngLat(0.5, 0.5), SQUARE)
    assert not point_in_polygon(LngLat(1.5, 0.5), SQUARE)
    assert not point_in_polygon(LngLat(0.5, -0.1), SQUARE)
    assert point_in_polygon(LngLat(1.0, 0.5), SQUARE)
    assert point_in_polygon(LngLat(0.5, 0.0), SQUARE)
    assert point_in_polygon(LngLat(0.0, 0.0), SQUARE)


def test_point_in_polygon_tests_wrap_around_edge():
    # Closing edge (0, 1) -> (0, 0) is only implied by the vertex order.
    assert point_in_polygon(LngLat(0.0, 0.5), SQUARE)
    assert not point_in_polygon(LngLat(-0.5, 0.5), SQUARE)


def test_point_in_polygon_ignores_degenerate_polygons():
    assert not point_in_polygon(LngLat(0.0, 0.0), (LngLat(0.0, 0.0), LngLat(1.0, 1.0)))


def test_point_in_polygon_accepts_explicitly_closed_rings():
    closed = L_SHAPE + (L_SHAPE[0],)
    for point in (LngLat(0.5, 1.5), LngLat(1.5, 1.5), LngLat(1.5, 0.5), LngLat(1.0, 1.5)):
        assert point_in_polygon(point, closed) == point_in_polygon(point, L_SHAPE)


def test_point_in_polygon_is_invariant_under_vertex_rotation():
    points = [LngLat(0.5, 1.5), LngLat(1.5, 1.5), LngLat(1.5, 0.5), LngLat(2.0, 0.5), LngLat(-1.0, 1.0)]
    expected = [point_in_polygon(point, L_SHAPE) for point in points]
    for shift in range(1, len(L_SHAPE)):
        rotated = L_SHAPE[shift:] + L_SHAPE[:shift]
        assert [point_in_polygon(point, rotated) for point in points] == expected


def test_point_in_polygon_agrees_with_shapely():
    rng = np.random.default_rng(7)
    reference = Polygon([vertex.as_tuple() for vertex in L_SHAPE])
    for lng, lat in rng.uniform(-0.5, 2.5, size=(300, 2)):
        point = LngLat(float(lng), float(lat))
        assert point_in_polygon(point, L_SHAPE) == reference.covers(Point(point.lng, point.lat))


def test_segments_intersect_requires_a_proper_crossing():
    a, b = LngLat(0.0, 0.0), LngLat(1.0, 1.0)
    assert segments_intersect(a, b, LngLat(0.0, 1.0), LngLat(1.0, 0.0))
    # touching at an endpoint
    assert not segments_intersect(a, b, LngLat(1.0, 1.0), LngLat(2.0, 0.0))
    # collinear overlap
    assert not segments_intersect(a, b, LngLat(0.5, 0.5), LngLat(2.0, 2.0))
    # parallel
    assert not segments_intersect(a, b, LngLat(0.0, 1.0), LngLat(1.0, 2.0))
    # disjoint
    assert not segments_intersect(a, b, LngLat(2.0, 0.0), LngLat(3.0, -1.0))


def test_distance_after_step_sequence_matches_step_count():
    position = LngLat(0.0, 0.0)
    for _ in range(4):
        position = next_position(position, 45.0)
    assert distance(LngLat(0.0, 0.0), position) == pytest.approx(4 * 0.00015)
    assert math.isclose(position.lng, position.lat, rel_tol=1e-12)
