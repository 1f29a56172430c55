import math
from datetime import date, time

import pytest

from dronedispatch.exceptions import InvalidRequestError
from dronedispatch.schemas.delivery import MedDispatchModel
from dronedispatch.schemas.drones import QueryAttributeModel
from dronedispatch.schemas.geometry import LngLatModel, RegionModel
from dronedispatch.services.validation import (
    validate_angle,
    validate_dispatches,
    validate_position,
    validate_queries,
    validate_region,
)

SQUARE = [
    {"lng": 0.0, "lat": 0.0},
    {"lng": 1.0, "lat": 0.0},
    {"lng": 1.0, "lat": 1.0},
    {"lng": 0.0, "lat": 1.0},
    {"lng": 0.0, "lat": 0.0},
]


def _dispatch(**overrides) -> MedDispatchModel:
    payload = {
        "id": 1,
        "date": "2025-01-06",
        "time": "09:30",
        "delivery": {"lng": -3.186, "lat": 55.945},
        "requirements": {"capacity": 2.0, "cooling": True},
    }
    payload.update(overrides)
    return MedDispatchModel.model_validate(payload)


def test_valid_position_converts_to_domain():
    position = validate_position(LngLatModel(lng=-3.19, lat=55.94), "position1")
    assert (position.lng, position.lat) == (-3.19, 55.94)


@pytest.mark.parametrize(
    ("model", "message"),
    [
        (None, "'position1' is required"),
        (LngLatModel(lat=55.9), "position1.lng is required"),
        (LngLatModel(lng=-3.1), "position1.lat is required"),
        (LngLatModel(lng=math.nan, lat=55.9), "position1.lng must be a valid number"),
        (LngLatModel(lng=181.0, lat=55.9), "position1.lng must be between -180 and 180"),
        (LngLatModel(lng=-3.1, lat=-90.5), "position1.lat must be between -90 and 90"),
    ],
)
def test_invalid_positions_name_the_field(model, message):
    with pytest.raises(InvalidRequestError) as excinfo:
        validate_position(model, "position1")
    assert str(excinfo.value) == message


def test_angle_range_is_half_open():
    assert validate_angle(0.0) == 0.0
    assert validate_angle(337.5) == 337.5
    for angle in (360.0, -22.5, None, math.inf):
        with pytest.raises(InvalidRequestError):
            validate_angle(angle)


def test_closed_region_is_accepted():
    region = validate_region(RegionModel.model_validate({"name": "central", "vertices": SQUARE}))
    assert region.name == "central"
    assert len(region.vertices) == 5


def test_open_region_is_rejected():
    model = RegionModel.model_validate({"name": "central", "vertices": SQUARE[:4] + [{"lng": 0.5, "lat": 0.5}]})
    with pytest.raises(InvalidRequestError, match="must be the same"):
        validate_region(model)


@pytest.mark.parametrize(
    "payload",
    [
        {"name": "", "vertices": SQUARE},
        {"name": "central", "vertices": SQUARE[:3]},
        {"name": "central", "vertices": None},
        {"name": "central", "vertices": SQUARE[:2] + [None] + SQUARE[3:]},
    ],
)
def test_incomplete_regions_are_rejected(payload):
    with pytest.raises(InvalidRequestError):
        validate_region(RegionModel.model_validate(payload))


def test_dispatch_converts_to_delivery_request():
    (request,) = validate_dispatches([_dispatch()])
    assert request.id == 1
    assert request.date == date(2025, 1, 6)
    assert request.time == time(9, 30)
    assert request.requirements.capacity == 2.0
    assert request.requirements.cooling is True
    assert request.requirements.max_cost is None
    assert request.destination.lat == 55.945


def test_missing_dispatch_list_is_empty():
    assert validate_dispatches(None) == []


def test_dispatch_needs_capacity():
    with pytest.raises(InvalidRequestError, match=r"dispatches\[0\]\.requirements\.capacity"):
        validate_dispatches([_dispatch(requirements={"cooling": True})])


def test_dispatch_capacity_cannot_be_negative():
    with pytest.raises(InvalidRequestError):
        validate_dispatches([_dispatch(requirements={"capacity": -1.0})])


def test_dispatch_date_without_time_is_rejected():
    with pytest.raises(InvalidRequestError, match="given together"):
        validate_dispatches([_dispatch(time=None)])


def test_destination_is_optional_unless_planning():
    (request,) = validate_dispatches([_dispatch(delivery=None)])
    assert request.destination is None
    with pytest.raises(InvalidRequestError, match=r"dispatches\[0\]\.delivery"):
        validate_dispatches([_dispatch(delivery=None)], require_destination=True)


def test_duplicate_dispatch_ids_are_rejected():
    with pytest.raises(InvalidRequestError, match="Duplicate"):
        validate_dispatches([_dispatch(), _dispatch()])


def test_queries_stringify_values():
    queries = validate_queries(
        [
            QueryAttributeModel(attribute=" cooling ", operator="=", value=True),
            QueryAttributeModel(attribute="capacity", operator=">", value=8),
        ]
    )
    assert [(item.attribute, item.operator, item.value) for item in queries] == [
        ("cooling", "=", "true"),
        ("capacity", ">", "8"),
    ]


def test_query_without_operator_is_rejected():
    with pytest.raises(InvalidRequestError, match=r"queries\[0\]\.operator"):
        validate_queries([QueryAttributeModel(attribute="capacity", value="4")])
