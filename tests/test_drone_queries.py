from datetime import date, time

import pytest

from dronedispatch.exceptions import DroneNotFoundError, InvalidRequestError
from dronedispatch.models.domain import (
    AvailabilityWindow,
    DeliveryRequest,
    DeliveryRequirements,
    Drone,
    DroneCapability,
    FleetSnapshot,
    LngLat,
    ServicePoint,
    StationedDrone,
)
from dronedispatch.services import drones as drone_queries
from dronedispatch.services.drones import AttributeQuery

APPLETON = ServicePoint(id=1, name="Appleton Tower", location=LngLat(-3.18635807889864, 55.9446806670849))
OCEAN = ServicePoint(id=2, name="Ocean Terminal", location=LngLat(-3.17732611501824, 55.9811862793337))


def _drone(drone_id: str, capacity: float, max_moves: int, cooling=False, heating=False) -> Drone:
    return Drone(
        id=drone_id,
        name=f"Drone {drone_id}",
        capability=DroneCapability(
            cooling=cooling,
            heating=heating,
            capacity=capacity,
            max_moves=max_moves,
            cost_per_move=0.01,
            cost_initial=4.3,
            cost_final=6.5,
        ),
    )


DRONES = (
    _drone("1", 4.0, 2000, cooling=True),
    _drone("2", 8.0, 1000, heating=True),
    _drone("3", 20.0, 4000),
    Drone(id="4", name="Drone 4", capability=None),
    _drone("5", 12.0, 1500, cooling=True, heating=True),
)

WEEKDAY_MORNING = tuple(AvailabilityWindow(day_of_week=day, start=time(0, 0), end=time(12, 0)) for day in range(5))
WEDNESDAY = (AvailabilityWindow(day_of_week=2, start=time(0, 0), end=time(23, 59, 59)),)

SNAPSHOT = FleetSnapshot(
    drones=DRONES,
    service_points=(APPLETON, OCEAN),
    stationed_drones=(
        StationedDrone(DRONES[0], APPLETON, WEEKDAY_MORNING),
        StationedDrone(DRONES[1], APPLETON, WEDNESDAY),
        StationedDrone(DRONES[2], OCEAN, WEEKDAY_MORNING),
        StationedDrone(DRONES[4], OCEAN, WEDNESDAY),
        StationedDrone(DRONES[4], APPLETON, WEEKDAY_MORNING),
    ),
)


def _dispatch(delivery_id: int, capacity: float, when: date | None = None, at: time | None = None, **flags):
    return DeliveryRequest(
        id=delivery_id,
        requirements=DeliveryRequirements(capacity=capacity, **flags),
        destination=LngLat(-3.186, 55.945),
        date=when,
        time=at,
    )


def test_filter_by_cooling_ignores_drones_without_capability():
    assert drone_queries.filter_by_cooling(SNAPSHOT, True) == ["1", "5"]
    assert drone_queries.filter_by_cooling(SNAPSHOT, False) == ["2", "3"]


def test_get_by_id_returns_first_match():
    duplicated = FleetSnapshot(drones=(Drone("8", "First", None), Drone("8", "Second", None)))
    assert drone_queries.get_by_id(duplicated, "8").name == "First"
    assert drone_queries.get_by_id(SNAPSHOT, "2").capability.heating is True


def test_get_by_id_raises_for_unknown_drone():
    with pytest.raises(DroneNotFoundError, match="'99'"):
        drone_queries.get_by_id(SNAPSHOT, "99")


@pytest.mark.parametrize(
    ("attribute", "value", "expected"),
    [
        ("capacity", "8", ["2"]),
        ("capacity", "8.0", ["2"]),
        ("cooling", "true", ["1", "5"]),
        ("heating", "TRUE", ["2", "5"]),
        ("maxMoves", "1500", ["5"]),
        ("id", "3", ["3"]),
        ("capacity", "99", []),
    ],
)
def test_query_by_attribute(attribute, value, expected):
    assert drone_queries.query_by_attribute(SNAPSHOT, attribute, value) == expected


def test_query_by_unknown_attribute_is_rejected():
    with pytest.raises(InvalidRequestError):
        drone_queries.query_by_attribute(SNAPSHOT, "colour", "red")


def test_query_combines_conditions_with_and():
    queries = [AttributeQuery("capacity", ">", "5"), AttributeQuery("heating", "=", "true")]
    assert drone_queries.query(SNAPSHOT, queries) == ["2", "5"]


def test_query_comparison_operators():
    assert drone_queries.query(SNAPSHOT, [AttributeQuery("capacity", "<", "10")]) == ["1", "2"]
    assert drone_queries.query(SNAPSHOT, [AttributeQuery("maxMoves", ">", "1500")]) == ["1", "3"]
    assert drone_queries.query(SNAPSHOT, [AttributeQuery("cooling", "!=", "true")]) == ["2", "3"]


def test_query_with_no_conditions_returns_nothing():
    assert drone_queries.query(SNAPSHOT, []) == []
    assert drone_queries.query(SNAPSHOT, None) == []


@pytest.mark.parametrize(
    "item",
    [
        AttributeQuery("cooling", "<", "true"),
        AttributeQuery("capacity", "=", "heavy"),
        AttributeQuery("capacity", ">=", "4"),
        AttributeQuery("cooling", "=", "maybe"),
    ],
)
def test_query_rejects_invalid_conditions(item):
    with pytest.raises(InvalidRequestError):
        drone_queries.query(SNAPSHOT, [item])


def test_available_drones_for_high_capacity():
    dispatches = [_dispatch(1, 15.0, date(2025, 1, 6), time(9, 0))]
    assert drone_queries.query_available_drones(SNAPSHOT, dispatches) == ["3"]


def test_available_drones_for_cooling_on_wednesday_evening():
    dispatches = [_dispatch(1, 2.0, date(2025, 1, 8), time(18, 0), cooling=True)]
    assert drone_queries.query_available_drones(SNAPSHOT, dispatches) == ["5"]


def test_available_drones_aggregate_capacity_and_times():
    dispatches = [
        _dispatch(1, 5.0, date(2025, 1, 6), time(9, 0)),
        _dispatch(2, 5.0, date(2025, 1, 7), time(11, 0)),
    ]
    assert drone_queries.query_available_drones(SNAPSHOT, dispatches) == ["3", "5"]


def test_available_drones_without_dispatch_time_only_checks_capability():
    assert drone_queries.query_available_drones(SNAPSHOT, [_dispatch(1, 1.0)]) == ["1", "2", "3", "5"]


def test_available_drones_for_empty_batch():
    assert drone_queries.query_available_drones(SNAPSHOT, []) == []
