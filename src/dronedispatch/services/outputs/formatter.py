"""Serializers for delivery plans."""

from __future__ import annotations

from ..planning.models import DronePlan, PlanResult


def _leg_to_json(delivery_id: int | None, route) -> dict:
    return {
        "deliveryId": delivery_id,
        "flightPath": [{"lng": position.lng, "lat": position.lat} for position in route],
    }


def drone_plan_to_json(plan: DronePlan) -> dict:
    return {
        "droneId": plan.drone_id,
        "deliveries": [_leg_to_json(leg.delivery_id, leg.route) for leg in plan.legs],
    }


def plan_result_to_json(result: PlanResult) -> dict:
    return {
        "totalCost": result.total_cost,
        "totalMoves": result.total_moves,
        "dronePaths": [drone_plan_to_json(plan) for plan in result.drone_plans],
    }
