import numpy as np
import pytest

from dronedispatch.models.domain import LngLat
from dronedispatch.services.planning.clustering import median_bisection, split_destinations


def test_split_separates_geographic_clusters():
    positions = [LngLat(0.0, 0.0), LngLat(1.0, 1.0), LngLat(0.0001, 0.0), LngLat(1.0001, 1.0)]
    first, second = split_destinations(positions)
    assert {frozenset(first), frozenset(second)} == {frozenset({0, 2}), frozenset({1, 3})}


def test_split_of_identical_positions_falls_back_to_bisection():
    positions = [LngLat(-3.18, 55.94)] * 3
    first, second = split_destinations(positions)
    assert first and second
    assert sorted(first + second) == [0, 1, 2]


def test_split_requires_two_positions():
    with pytest.raises(ValueError):
        split_destinations([LngLat(0.0, 0.0)])


def test_median_bisection_cuts_along_wider_axis():
    coordinates = np.array([[0.0, 0.0], [0.0, 3.0], [0.1, 1.0], [0.1, 2.0]])
    first, second = median_bisection(coordinates)
    assert first == (0, 2)
    assert second == (1, 3)
