"""Allocate delivery batches to stationed drones and build their multi-stop tours."""

from __future__ import annotations

import logging
import threading
from collections import OrderedDict
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Sequence

from ...config import settings
from ...exceptions import NoPathFoundError, UndeliverableError
from ...models.domain import DeliveryRequest, FleetSnapshot, LngLat, StationedDrone
from ..geometry import GeometryConfig, distance, point_in_polygon
from ..routing.pathfinder import Pathfinder, Route
from .clustering import split_destinations
from .feasibility import aggregate_requirements, evaluate, meets_capability
from .models import DeliveryLeg, DronePlan, GroupOutcome, Infeasible, InfeasibleReason, PlanResult

logger = logging.getLogger(__name__)


class LegCache:
    """Routes computed during one planning call, shared by its worker threads."""

    def __init__(self, pathfinder: Pathfinder) -> None:
        self._pathfinder = pathfinder
        self._routes: dict[tuple[LngLat, LngLat], Route | NoPathFoundError] = {}
        self._lock = threading.Lock()

    def route(self, start: LngLat, goal: LngLat) -> Route:
        key = (start, goal)
        with self._lock:
            cached = self._routes.get(key)
        if cached is None:
            try:
                cached = self._pathfinder.find_path(start, goal)
            except NoPathFoundError as error:
                cached = error
            with self._lock:
                cached = self._routes.setdefault(key, cached)
        if isinstance(cached, NoPathFoundError):
            raise cached
        return cached

    def __len__(self) -> int:
        with self._lock:
            return len(self._routes)


def nearest_neighbour_order(origin: LngLat, deliveries: Sequence[DeliveryRequest]) -> list[DeliveryRequest]:
    remaining = list(deliveries)
    ordered: list[DeliveryRequest] = []
    position = origin
    while remaining:
        nearest = min(remaining, key=lambda delivery: distance(position, delivery.destination))
        remaining.remove(nearest)
        ordered.append(nearest)
        position = nearest.destination
    return ordered


class AllocationPlanner:
    """Greedy drone allocation with geographic splitting.

    A group of deliveries is first offered whole to every capable stationed
    drone; the cheapest feasible assignment wins. When none fits, the group is
    split in two and each half goes back on the work-list. Groups of one round
    are submitted to a thread pool together. Group planning is pure Python, so
    the pool interleaves groups rather than running them in parallel; the
    result does not depend on the worker count.
    """

    def __init__(
        self,
        snapshot: FleetSnapshot,
        geometry: GeometryConfig | None = None,
        *,
        max_workers: int | None = None,
        random_state: int = 42,
    ) -> None:
        self.snapshot = snapshot
        self.geometry = geometry or GeometryConfig.from_settings()
        self.max_workers = max_workers or settings.planner_max_workers
        self.random_state = random_state
        self.pathfinder = Pathfinder(snapshot.no_fly_polygons, self.geometry)

    def plan(self, requests: Sequence[DeliveryRequest]) -> PlanResult:
        if not requests:
            return PlanResult()
        self._check_destinations(requests)

        legs = LegCache(self.pathfinder)
        pending: list[tuple[int, ...]] = [tuple(range(len(requests)))]
        accepted: list[tuple[int, DronePlan]] = []
        rounds = 0

        with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
            while pending:
                rounds += 1
                future_to_group = {
                    executor.submit(self._plan_group, group, requests, legs): group for group in pending
                }
                pending = []
                for future in as_completed(future_to_group):
                    group = future_to_group[future]
                    outcome = future.result()
                    if outcome.plan is not None:
                        accepted.append((min(group), outcome.plan))
                    elif outcome.subgroups:
                        pending.extend(outcome.subgroups)
                    else:
                        raise UndeliverableError(
                            [requests[index].id for index in group],
                            outcome.failure or "no feasible drone",
                        )

        accepted.sort(key=lambda item: item[0])
        result = PlanResult.from_plans(tuple(plan for _, plan in accepted))
        logger.info(
            "Planned %s deliveries onto %s drone flights in %s rounds (%s legs computed, %s moves, cost %.2f)",
            len(requests),
            len(result.drone_plans),
            rounds,
            len(legs),
            result.total_moves,
            result.total_cost,
        )
        return result

    def _check_destinations(self, requests: Sequence[DeliveryRequest]) -> None:
        for request in requests:
            if request.destination is None:
                raise UndeliverableError([request.id], "destination is missing")
            for area in self.snapshot.restricted_areas:
                if point_in_polygon(request.destination, area.vertices):
                    raise UndeliverableError([request.id], f"destination is inside no-fly zone '{area.name}'")

    def _plan_group(
        self,
        group: tuple[int, ...],
        requests: Sequence[DeliveryRequest],
        legs: LegCache,
    ) -> GroupOutcome:
        deliveries = [requests[index] for index in group]
        plan, failure = self._assign(deliveries, legs)
        if plan is not None:
            return GroupOutcome(plan=plan)
        if len(group) == 1:
            return GroupOutcome(failure=failure)

        first, second = split_destinations(
            [delivery.destination for delivery in deliveries], random_state=self.random_state
        )
        logger.debug("Splitting group of %s deliveries into %s and %s", len(group), len(first), len(second))
        return GroupOutcome(
            subgroups=[
                tuple(group[index] for index in first),
                tuple(group[index] for index in second),
            ]
        )

    def _candidates_by_service_point(
        self, deliveries: Sequence[DeliveryRequest]
    ) -> OrderedDict[int, list[StationedDrone]]:
        requirements = aggregate_requirements(deliveries)
        grouped: OrderedDict[int, list[StationedDrone]] = OrderedDict()
        for stationed in self.snapshot.stationed_drones:
            if meets_capability(stationed.capability, requirements):
                grouped.setdefault(stationed.service_point.id, []).append(stationed)
        return grouped

    def _move_lower_bound(self, origin: LngLat, ordered: Sequence[DeliveryRequest]) -> float:
        """Moves the tour needs at least, whatever detours the pathfinder takes.

        Every leg may start and end up to one close distance away from its
        nominal points, so each straight-line hop is shortened by two of them.
        """

        slack = 2 * self.geometry.close_distance
        stops = [origin, *(delivery.destination for delivery in ordered), origin]
        return sum(
            max(0.0, distance(a, b) - slack) / self.geometry.move_distance for a, b in zip(stops, stops[1:])
        )

    def _build_tour(
        self, origin: LngLat, ordered: Sequence[DeliveryRequest], legs: LegCache
    ) -> tuple[list[Route], Route]:
        outbound: list[Route] = []
        position = origin
        for delivery in ordered:
            route = legs.route(position, delivery.destination)
            outbound.append(route)
            position = route[-1]
        return outbound, legs.route(position, origin)

    def _assign(
        self, deliveries: Sequence[DeliveryRequest], legs: LegCache
    ) -> tuple[DronePlan | None, str]:
        candidates = self._candidates_by_service_point(deliveries)
        if not candidates:
            return None, f"no drone meets the {InfeasibleReason.CAPABILITY.value} requirements"

        reasons: set[str] = set()
        best: tuple[tuple[float, int], DronePlan] | None = None
        for drones in candidates.values():
            available = [
                stationed
                for stationed in drones
                if all(stationed.is_available(delivery.dispatch_at) for delivery in deliveries)
            ]
            if not available:
                reasons.add(InfeasibleReason.AVAILABILITY.value)
                continue

            service_point = available[0].service_point
            ordered = nearest_neighbour_order(service_point.location, deliveries)
            budget = max(stationed.capability.max_moves for stationed in available)
            if self._move_lower_bound(service_point.location, ordered) > budget:
                reasons.add(InfeasibleReason.BATTERY.value)
                continue

            try:
                outbound, return_leg = self._build_tour(service_point.location, ordered, legs)
            except NoPathFoundError as error:
                logger.debug("Service point %s cannot reach the group: %s", service_point.id, error)
                reasons.add("no path")
                continue

            for stationed in available:
                result = evaluate(stationed, outbound, return_leg, ordered)
                if isinstance(result, Infeasible):
                    reasons.add(result.reason.value)
                    continue
                rank = (result.total_cost, result.total_moves)
                if best is None or rank < best[0]:
                    delivery_legs = [
                        DeliveryLeg(delivery_id=delivery.id, route=route)
                        for delivery, route in zip(ordered, outbound)
                    ]
                    delivery_legs.append(DeliveryLeg(delivery_id=None, route=return_leg))
                    best = (
                        rank,
                        DronePlan(
                            drone_id=stationed.id,
                            service_point_id=service_point.id,
                            legs=tuple(delivery_legs),
                            total_moves=result.total_moves,
                            total_cost=result.total_cost,
                        ),
                    )

        if best is not None:
            return best[1], ""
        return None, f"no feasible drone ({', '.join(sorted(reasons))})"
