"""Feasibility checks for a stationed drone flying a proposed set of legs."""

from __future__ import annotations

from typing import Iterable, Optional, Sequence

from ...models.domain import DeliveryRequest, DeliveryRequirements, DroneCapability, StationedDrone
from ..routing.pathfinder import Route
from .models import FeasibilityResult, Infeasible, InfeasibleReason


def aggregate_requirements(deliveries: Iterable[DeliveryRequest]) -> DeliveryRequirements:
    """Combine requirements of deliveries carried together on one flight.

    Capacities add up, cooling and heating are unions and the cost ceiling is
    the tightest one any delivery specifies.
    """

    capacity = 0.0
    cooling = False
    heating = False
    max_cost: Optional[float] = None
    for delivery in deliveries:
        requirements = delivery.requirements
        capacity += requirements.capacity
        cooling = cooling or requirements.cooling
        heating = heating or requirements.heating
        if requirements.max_cost is not None:
            max_cost = requirements.max_cost if max_cost is None else min(max_cost, requirements.max_cost)
    return DeliveryRequirements(capacity=capacity, cooling=cooling, heating=heating, max_cost=max_cost)


def meets_capability(capability: Optional[DroneCapability], requirements: DeliveryRequirements) -> bool:
    if capability is None:
        return False
    if capability.capacity < requirements.capacity:
        return False
    if requirements.cooling and not capability.cooling:
        return False
    if requirements.heating and not capability.heating:
        return False
    return True


def count_moves(legs: Sequence[Route], return_leg: Route) -> int:
    """Outbound legs share their endpoints with the next leg, so each counts ``len - 1``."""

    return sum(len(leg) - 1 for leg in legs) + len(return_leg)


def flight_cost(capability: DroneCapability, total_moves: int) -> float:
    return capability.cost_initial + capability.cost_final + total_moves * capability.cost_per_move


def evaluate(
    drone: StationedDrone,
    legs: Sequence[Route],
    return_leg: Route,
    deliveries: Sequence[DeliveryRequest],
) -> FeasibilityResult | Infeasible:
    capability = drone.capability
    requirements = aggregate_requirements(deliveries)
    if not meets_capability(capability, requirements):
        return Infeasible(
            InfeasibleReason.CAPABILITY,
            f"drone {drone.id} cannot carry capacity {requirements.capacity:g}"
            f" (cooling={requirements.cooling}, heating={requirements.heating})",
        )

    for delivery in deliveries:
        moment = delivery.dispatch_at
        if not drone.is_available(moment):
            return Infeasible(
                InfeasibleReason.AVAILABILITY,
                f"drone {drone.id} is not available at {moment:%A %H:%M:%S} for delivery {delivery.id}",
            )

    total_moves = count_moves(legs, return_leg)
    if total_moves > capability.max_moves:
        return Infeasible(
            InfeasibleReason.BATTERY,
            f"drone {drone.id} needs {total_moves} moves but has {capability.max_moves}",
        )

    total_cost = flight_cost(capability, total_moves)
    if requirements.max_cost is not None and total_cost > requirements.max_cost:
        return Infeasible(
            InfeasibleReason.COST,
            f"drone {drone.id} costs {total_cost:.2f} above limit {requirements.max_cost:.2f}",
        )

    return FeasibilityResult(total_moves=total_moves, total_cost=total_cost)
