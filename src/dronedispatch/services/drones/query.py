"""Attribute filters over the drone fleet."""

from __future__ import annotations

import logging
import math
import operator
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Sequence

from ...exceptions import DroneNotFoundError, InvalidRequestError
from ...models.domain import DeliveryRequest, Drone, FleetSnapshot
from ..planning.feasibility import aggregate_requirements, meets_capability

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class AttributeQuery:
    attribute: str
    operator: str
    value: str


@dataclass(frozen=True, slots=True)
class _Attribute:
    kind: type
    getter: Callable[[Drone], Any]


def _capability_field(name: str) -> Callable[[Drone], Any]:
    return lambda drone: getattr(drone.capability, name)


ATTRIBUTES: dict[str, _Attribute] = {
    "id": _Attribute(str, lambda drone: drone.id),
    "name": _Attribute(str, lambda drone: drone.name),
    "cooling": _Attribute(bool, _capability_field("cooling")),
    "heating": _Attribute(bool, _capability_field("heating")),
    "capacity": _Attribute(float, _capability_field("capacity")),
    "maxMoves": _Attribute(float, _capability_field("max_moves")),
    "costPerMove": _Attribute(float, _capability_field("cost_per_move")),
    "costInitial": _Attribute(float, _capability_field("cost_initial")),
    "costFinal": _Attribute(float, _capability_field("cost_final")),
}

OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "=": operator.eq,
    "!=": operator.ne,
    "<": operator.lt,
    ">": operator.gt,
}


def _parse_value(attribute: str, kind: type, raw: str) -> Any:
    text = str(raw).strip()
    if kind is bool:
        lowered = text.lower()
        if lowered not in {"true", "false"}:
            raise InvalidRequestError(f"Invalid boolean value '{raw}' for attribute '{attribute}'")
        return lowered == "true"
    if kind is float:
        try:
            value = float(text)
        except ValueError as exc:
            raise InvalidRequestError(f"Invalid numeric value '{raw}' for attribute '{attribute}'") from exc
        if not math.isfinite(value):
            raise InvalidRequestError(f"Invalid numeric value '{raw}' for attribute '{attribute}'")
        return value
    return text


def _build_predicate(query: AttributeQuery) -> Callable[[Drone], bool]:
    attribute = ATTRIBUTES.get(query.attribute)
    if attribute is None:
        raise InvalidRequestError(f"Unknown attribute '{query.attribute}'")
    compare = OPERATORS.get(query.operator)
    if compare is None:
        raise InvalidRequestError(f"Unsupported operator '{query.operator}'")
    if attribute.kind is not float and query.operator not in {"=", "!="}:
        raise InvalidRequestError(
            f"Operator '{query.operator}' is not supported for attribute '{query.attribute}'"
        )
    expected = _parse_value(query.attribute, attribute.kind, query.value)

    def predicate(drone: Drone) -> bool:
        if drone.capability is None and query.attribute not in {"id", "name"}:
            return False
        actual = attribute.getter(drone)
        if attribute.kind is float:
            actual = float(actual)
        return compare(actual, expected)

    return predicate


def _ids(drones: Iterable[Drone]) -> list[str]:
    return [drone.id for drone in drones]


def filter_by_cooling(snapshot: FleetSnapshot, state: bool) -> list[str]:
    return _ids(
        drone for drone in snapshot.drones if drone.capability is not None and drone.capability.cooling == state
    )


def get_by_id(snapshot: FleetSnapshot, drone_id: str) -> Drone:
    for drone in snapshot.drones:
        if drone.id == drone_id:
            return drone
    raise DroneNotFoundError(drone_id)


def query(snapshot: FleetSnapshot, queries: Sequence[AttributeQuery] | None) -> list[str]:
    """Ids of drones matching every query (logical AND)."""

    if not queries:
        return []
    predicates = [_build_predicate(item) for item in queries]
    return _ids(drone for drone in snapshot.drones if all(predicate(drone) for predicate in predicates))


def query_by_attribute(snapshot: FleetSnapshot, attribute: str, value: str) -> list[str]:
    return query(snapshot, [AttributeQuery(attribute=attribute, operator="=", value=value)])


def query_available_drones(snapshot: FleetSnapshot, dispatches: Sequence[DeliveryRequest] | None) -> list[str]:
    """Drones able to carry the whole batch and free at every dispatch moment.

    Requirements are aggregated across the batch; availability is checked per
    service point the drone is stationed at.
    """

    if not dispatches:
        return []
    requirements = aggregate_requirements(dispatches)
    moments = [dispatch.dispatch_at for dispatch in dispatches]
    matched: list[str] = []
    for stationed in snapshot.stationed_drones:
        if stationed.id in matched:
            continue
        if not meets_capability(stationed.capability, requirements):
            continue
        if all(stationed.is_available(moment) for moment in moments):
            matched.append(stationed.id)
    logger.debug("%s drones available for %s dispatches", len(matched), len(dispatches))
    return matched
