"""Split a delivery group into two geographic halves."""

from __future__ import annotations

import logging
from typing import Sequence

import numpy as np
from sklearn.cluster import KMeans

from ...models.domain import LngLat

logger = logging.getLogger(__name__)

Split = tuple[tuple[int, ...], tuple[int, ...]]


def median_bisection(coordinates: np.ndarray) -> Split:
    """Cut at the median of the wider coordinate axis; both halves are non-empty."""

    spans = coordinates.max(axis=0) - coordinates.min(axis=0)
    axis = int(np.argmax(spans))
    order = np.argsort(coordinates[:, axis], kind="stable")
    half = len(order) // 2
    first = tuple(sorted(int(index) for index in order[:half]))
    second = tuple(sorted(int(index) for index in order[half:]))
    return first, second


def split_destinations(positions: Sequence[LngLat], *, random_state: int = 42) -> Split:
    """Partition positions (by index) into two non-empty groups.

    Uses 2-means clustering; duplicate-only inputs or a one-sided labelling
    fall back to a median bisection.
    """

    if len(positions) < 2:
        raise ValueError("At least two positions are required to split a group")

    coordinates = np.array([position.as_tuple() for position in positions], dtype=float)
    if len(np.unique(coordinates, axis=0)) >= 2:
        kmeans = KMeans(n_clusters=2, random_state=random_state, n_init=10)
        labels = kmeans.fit_predict(coordinates)
        first = tuple(int(index) for index in np.flatnonzero(labels == 0))
        second = tuple(int(index) for index in np.flatnonzero(labels != 0))
        if first and second:
            return first, second
        logger.debug("K-Means produced a single cluster for %s positions", len(positions))

    return median_bisection(coordinates)
