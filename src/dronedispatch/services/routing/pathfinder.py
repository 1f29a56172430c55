"""A* pathfinding over fixed-length compass moves that avoids no-fly zones."""

from __future__ import annotations

import heapq
import itertools
import logging
from dataclasses import dataclass
from typing import Iterable, Sequence

from ...exceptions import NoPathFoundError
from ...models.domain import LngLat
from ..geometry import (
    GeometryConfig,
    bounding_box,
    distance,
    is_close,
    next_position,
    point_in_polygon,
    segments_intersect,
)

logger = logging.getLogger(__name__)

Route = tuple[LngLat, ...]


@dataclass(frozen=True, slots=True)
class Obstacle:
    vertices: tuple[LngLat, ...]
    bbox: tuple[float, float, float, float]


def prepare_obstacles(polygons: Iterable[Sequence[LngLat]]) -> tuple[Obstacle, ...]:
    obstacles: list[Obstacle] = []
    for polygon in polygons:
        vertices = tuple(polygon)
        if len(vertices) < 3:
            logger.warning("Ignoring degenerate no-fly polygon with %s vertices", len(vertices))
            continue
        obstacles.append(Obstacle(vertices=vertices, bbox=bounding_box(vertices)))
    return tuple(obstacles)


def move_is_blocked(start: LngLat, end: LngLat, obstacles: Sequence[Obstacle]) -> bool:
    """True when the move starts or ends inside an obstacle or crosses one of its edges.

    Every edge of the ring is tested, including the one that wraps from the
    last vertex back to the first.
    """

    seg_min_lng, seg_max_lng = min(start.lng, end.lng), max(start.lng, end.lng)
    seg_min_lat, seg_max_lat = min(start.lat, end.lat), max(start.lat, end.lat)
    for obstacle in obstacles:
        min_lng, min_lat, max_lng, max_lat = obstacle.bbox
        if seg_max_lng < min_lng or seg_min_lng > max_lng or seg_max_lat < min_lat or seg_min_lat > max_lat:
            continue
        vertices = obstacle.vertices
        if point_in_polygon(start, vertices) or point_in_polygon(end, vertices):
            return True
        count = len(vertices)
        for index in range(count):
            if segments_intersect(start, end, vertices[index], vertices[(index + 1) % count]):
                return True
    return False


class Pathfinder:
    """A* search bound to one set of no-fly polygons.

    Nodes live in an arena of parallel lists (position, parent index, cost);
    positions are identified by their coordinates rounded to
    ``config.key_precision`` digits. Superseded frontier entries stay in the
    heap and are dropped when popped because their node is already closed.
    """

    def __init__(self, polygons: Iterable[Sequence[LngLat]] = (), config: GeometryConfig | None = None) -> None:
        self.config = config or GeometryConfig.from_settings()
        self.obstacles = prepare_obstacles(polygons)

    def _key(self, position: LngLat) -> tuple[float, float]:
        precision = self.config.key_precision
        return (round(position.lng, precision), round(position.lat, precision))

    def _heuristic(self, position: LngLat, goal: LngLat) -> float:
        return distance(position, goal) / self.config.move_distance

    def find_path(self, start: LngLat, goal: LngLat) -> Route:
        config = self.config
        if is_close(start, goal, config):
            return (start,)

        positions: list[LngLat] = [start]
        parents: list[int] = [-1]
        costs: list[float] = [0.0]
        index_by_key: dict[tuple[float, float], int] = {self._key(start): 0}
        closed: set[int] = set()
        sequence = itertools.count()
        frontier: list[tuple[float, int, int]] = [
            (self._heuristic(start, goal) * config.heuristic_weight, next(sequence), 0)
        ]

        iterations = 0
        while frontier:
            _, _, node = heapq.heappop(frontier)
            if node in closed:
                continue
            iterations += 1
            if iterations > config.max_iterations:
                logger.warning("No path found after %s iterations (limit reached)", config.max_iterations)
                raise NoPathFoundError(start, goal, config.max_iterations)

            current = positions[node]
            if is_close(current, goal, config):
                logger.debug("Path found in %s iterations with %s moves", iterations, int(costs[node]))
                return self._reconstruct(node, positions, parents)
            closed.add(node)

            tentative = costs[node] + 1
            for heading in config.headings:
                candidate = next_position(current, heading, config)
                candidate_key = self._key(candidate)
                existing = index_by_key.get(candidate_key)
                if existing is not None and (existing in closed or costs[existing] <= tentative):
                    continue
                if move_is_blocked(current, candidate, self.obstacles):
                    continue
                if existing is None:
                    existing = len(positions)
                    positions.append(candidate)
                    parents.append(node)
                    costs.append(tentative)
                    index_by_key[candidate_key] = existing
                else:
                    parents[existing] = node
                    costs[existing] = tentative
                priority = tentative + self._heuristic(candidate, goal) * config.heuristic_weight
                heapq.heappush(frontier, (priority, next(sequence), existing))

        logger.warning("No path found - frontier exhausted after %s iterations", iterations)
        raise NoPathFoundError(start, goal, iterations)

    @staticmethod
    def _reconstruct(node: int, positions: list[LngLat], parents: list[int]) -> Route:
        path: list[LngLat] = []
        while node != -1:
            path.append(positions[node])
            node = parents[node]
        path.reverse()
        return tuple(path)


def find_path(
    start: LngLat,
    goal: LngLat,
    polygons: Iterable[Sequence[LngLat]] = (),
    config: GeometryConfig | None = None,
) -> Route:
    """Standalone entry point: route from ``start`` to within close distance of ``goal``."""

    return Pathfinder(polygons, config).find_path(start, goal)
