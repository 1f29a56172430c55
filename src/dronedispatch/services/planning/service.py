"""Delivery planning orchestration service."""

from __future__ import annotations

import logging
import time
from typing import Optional, Sequence

from ...data import reference_repository
from ...data.reference_repository import ReferenceDataRepository
from ...models.domain import LngLat
from ...schemas.delivery import MedDispatchModel
from ..outputs.formatter import plan_result_to_json
from ..outputs.geojson import plan_result_to_geojson
from ..routing.pathfinder import Pathfinder, Route
from ..validation import validate_dispatches
from .models import PlanResult
from .planner import AllocationPlanner

logger = logging.getLogger(__name__)


def calculate_delivery_plan(
    dispatches: Optional[Sequence[Optional[MedDispatchModel]]],
    repository: ReferenceDataRepository | None = None,
) -> PlanResult:
    requests = validate_dispatches(dispatches, require_destination=True)
    if not requests:
        return PlanResult()

    snapshot = (repository or reference_repository.get_repository()).snapshot()
    started = time.perf_counter()
    result = AllocationPlanner(snapshot).plan(requests)
    logger.info(
        "calcDeliveryPath: %s dispatches planned in %.2fs",
        len(requests),
        time.perf_counter() - started,
    )
    return result


def calculate_delivery_path(
    dispatches: Optional[Sequence[Optional[MedDispatchModel]]],
    repository: ReferenceDataRepository | None = None,
) -> dict:
    return plan_result_to_json(calculate_delivery_plan(dispatches, repository))


def calculate_delivery_geojson(
    dispatches: Optional[Sequence[Optional[MedDispatchModel]]],
    repository: ReferenceDataRepository | None = None,
) -> dict:
    return plan_result_to_geojson(calculate_delivery_plan(dispatches, repository))


def find_route(start: LngLat, goal: LngLat, repository: ReferenceDataRepository | None = None) -> Route:
    """Route between two points around the current restricted areas."""

    snapshot = (repository or reference_repository.get_repository()).snapshot()
    return Pathfinder(snapshot.no_fly_polygons).find_path(start, goal)
