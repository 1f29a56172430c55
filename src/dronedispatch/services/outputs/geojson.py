"""GeoJSON export of delivery plans."""

from __future__ import annotations

from typing import Any, Dict, List

from shapely.geometry import LineString, mapping

from ..planning.models import DronePlan, PlanResult


def flight_path_coordinates(plan: DronePlan) -> List[tuple[float, float]]:
    """Concatenate every leg of a plan, dropping points repeated at leg joins."""

    coordinates: List[tuple[float, float]] = []
    for leg in plan.legs:
        for position in leg.route:
            point = position.as_tuple()
            if not coordinates or coordinates[-1] != point:
                coordinates.append(point)
    return coordinates


def drone_plan_to_feature(plan: DronePlan) -> Dict[str, Any]:
    coordinates = flight_path_coordinates(plan)
    if len(coordinates) == 1:
        coordinates = coordinates * 2
    geometry = LineString(coordinates)
    return {
        "type": "Feature",
        "geometry": mapping(geometry),
        "properties": {
            "droneId": plan.drone_id,
            "servicePointId": plan.service_point_id,
            "deliveryIds": list(plan.delivery_ids),
            "totalMoves": plan.total_moves,
            "totalCost": plan.total_cost,
        },
    }


def plan_result_to_geojson(result: PlanResult) -> Dict[str, Any]:
    return {
        "type": "FeatureCollection",
        "features": [drone_plan_to_feature(plan) for plan in result.drone_plans],
    }
