"""Request validation turning loosely-typed payloads into domain values."""

from __future__ import annotations

import math
from typing import Optional, Sequence

from ..exceptions import InvalidRequestError
from ..models.domain import DeliveryRequest, DeliveryRequirements, LngLat, Region
from ..schemas.delivery import MedDispatchModel
from ..schemas.drones import QueryAttributeModel
from ..schemas.geometry import LngLatModel, RegionModel
from .drones.query import AttributeQuery


def _require(value, field_name: str):
    if value is None:
        raise InvalidRequestError(f"'{field_name}' is required")
    return value


def _check_number(value: float, field_name: str) -> None:
    if math.isnan(value) or math.isinf(value):
        raise InvalidRequestError(f"{field_name} must be a valid number")


def validate_position(position: Optional[LngLatModel], field_name: str) -> LngLat:
    _require(position, field_name)
    if position.lng is None:
        raise InvalidRequestError(f"{field_name}.lng is required")
    if position.lat is None:
        raise InvalidRequestError(f"{field_name}.lat is required")
    _check_number(position.lng, f"{field_name}.lng")
    _check_number(position.lat, f"{field_name}.lat")
    if not -180 <= position.lng <= 180:
        raise InvalidRequestError(f"{field_name}.lng must be between -180 and 180")
    if not -90 <= position.lat <= 90:
        raise InvalidRequestError(f"{field_name}.lat must be between -90 and 90")
    return LngLat(lng=position.lng, lat=position.lat)


def validate_angle(angle: Optional[float]) -> float:
    _require(angle, "angle")
    if math.isnan(angle) or math.isinf(angle):
        raise InvalidRequestError("'angle' must be a valid number")
    if angle < 0 or angle >= 360:
        raise InvalidRequestError("'angle' must be between 0 (inclusive) and 360 (exclusive)")
    return angle


def validate_region(region: Optional[RegionModel]) -> Region:
    """A region must be named and closed, with at least four vertices."""

    _require(region, "region")
    if region.name is None or not region.name.strip():
        raise InvalidRequestError("'region.name' is required and cannot be empty")
    if region.vertices is None or len(region.vertices) < 4:
        raise InvalidRequestError("'region.vertices' must contain at least 4 vertices to form a closed polygon")

    vertices: list[LngLat] = []
    for index, vertex in enumerate(region.vertices):
        if vertex is None:
            raise InvalidRequestError(f"'region.vertices[{index}]' cannot be null")
        vertices.append(validate_position(vertex, f"region.vertices[{index}]"))
    if vertices[0] != vertices[-1]:
        raise InvalidRequestError(
            "The first and last vertices in 'region.vertices' must be the same to form a closed polygon"
        )
    return Region(name=region.name, vertices=tuple(vertices))


def validate_dispatch(dispatch: Optional[MedDispatchModel], index: int) -> DeliveryRequest:
    prefix = f"dispatches[{index}]"
    _require(dispatch, prefix)
    _require(dispatch.id, f"{prefix}.id")
    requirements = _require(dispatch.requirements, f"{prefix}.requirements")
    capacity = _require(requirements.capacity, f"{prefix}.requirements.capacity")
    _check_number(capacity, f"{prefix}.requirements.capacity")
    if capacity < 0:
        raise InvalidRequestError(f"{prefix}.requirements.capacity must not be negative")
    if requirements.max_cost is not None:
        _check_number(requirements.max_cost, f"{prefix}.requirements.maxCost")
    if (dispatch.date is None) != (dispatch.time is None):
        raise InvalidRequestError(f"{prefix}.date and {prefix}.time must be given together")

    destination = None
    if dispatch.delivery is not None:
        destination = validate_position(dispatch.delivery, f"{prefix}.delivery")

    return DeliveryRequest(
        id=dispatch.id,
        date=dispatch.date,
        time=dispatch.time,
        destination=destination,
        requirements=DeliveryRequirements(
            capacity=capacity,
            cooling=bool(requirements.cooling),
            heating=bool(requirements.heating),
            max_cost=requirements.max_cost,
        ),
    )


def validate_dispatches(
    dispatches: Optional[Sequence[Optional[MedDispatchModel]]], *, require_destination: bool = False
) -> list[DeliveryRequest]:
    if dispatches is None:
        return []
    requests = [validate_dispatch(dispatch, index) for index, dispatch in enumerate(dispatches)]
    seen: set[int] = set()
    for index, request in enumerate(requests):
        if require_destination and request.destination is None:
            raise InvalidRequestError(f"'dispatches[{index}].delivery' is required")
        if request.id in seen:
            raise InvalidRequestError(f"Duplicate dispatch id {request.id}")
        seen.add(request.id)
    return requests


def validate_queries(queries: Optional[Sequence[Optional[QueryAttributeModel]]]) -> list[AttributeQuery]:
    if not queries:
        return []
    parsed: list[AttributeQuery] = []
    for index, item in enumerate(queries):
        prefix = f"queries[{index}]"
        _require(item, prefix)
        attribute = _require(item.attribute, f"{prefix}.attribute")
        operator = _require(item.operator, f"{prefix}.operator")
        value = _require(item.value, f"{prefix}.value")
        if isinstance(value, bool):
            value = "true" if value else "false"
        parsed.append(AttributeQuery(attribute=attribute.strip(), operator=operator.strip(), value=str(value)))
    return parsed
