"""Cached fleet reference data loaded from the upstream provider."""

from __future__ import annotations

import functools
import logging
import threading
import time as clock
from datetime import time
from typing import Any, Callable, Iterable, Optional, Protocol

from ..config import settings
from ..exceptions import UpstreamDataError
from ..models.domain import (
    AvailabilityWindow,
    Drone,
    DroneCapability,
    FleetSnapshot,
    Limits,
    LngLat,
    RestrictedArea,
    ServicePoint,
    StationedDrone,
)
from .ilp_client import IlpClient

logger = logging.getLogger(__name__)

DAYS_OF_WEEK = ("MONDAY", "TUESDAY", "WEDNESDAY", "THURSDAY", "FRIDAY", "SATURDAY", "SUNDAY")


class ReferenceSource(Protocol):
    def get_drones(self) -> list[dict[str, Any]]: ...

    def get_service_points(self) -> list[dict[str, Any]]: ...

    def get_restricted_areas(self) -> list[dict[str, Any]]: ...

    def get_drone_availability(self) -> list[dict[str, Any]]: ...


def _coerce_float(value: Any, default: float = 0.0) -> float:
    if value is None:
        return default
    return float(value)


def _coerce_optional_int(value: Any) -> Optional[int]:
    if value is None:
        return None
    return int(value)


def parse_position(raw: dict[str, Any]) -> LngLat:
    return LngLat(lng=float(raw["lng"]), lat=float(raw["lat"]))


def parse_drone(row: dict[str, Any]) -> Drone:
    raw_capability = row.get("capability")
    capability = None
    if raw_capability is not None:
        capability = DroneCapability(
            cooling=bool(raw_capability.get("cooling") or False),
            heating=bool(raw_capability.get("heating") or False),
            capacity=_coerce_float(raw_capability.get("capacity")),
            max_moves=int(raw_capability.get("maxMoves") or 0),
            cost_per_move=_coerce_float(raw_capability.get("costPerMove")),
            cost_initial=_coerce_float(raw_capability.get("costInitial")),
            cost_final=_coerce_float(raw_capability.get("costFinal")),
        )
    return Drone(id=str(row["id"]), name=str(row.get("name") or ""), capability=capability)


def parse_service_point(row: dict[str, Any]) -> ServicePoint:
    return ServicePoint(
        id=int(row["id"]),
        name=str(row.get("name") or ""),
        location=parse_position(row["location"]),
    )


def parse_restricted_area(row: dict[str, Any]) -> RestrictedArea:
    raw_limits = row.get("limits")
    limits = None
    if raw_limits is not None:
        limits = Limits(
            lower=_coerce_optional_int(raw_limits.get("lower")),
            upper=_coerce_optional_int(raw_limits.get("upper")),
        )
    vertices = tuple(parse_position(vertex) for vertex in row["vertices"])
    if len(vertices) < 3:
        raise ValueError(f"restricted area needs at least 3 vertices, got {len(vertices)}")
    return RestrictedArea(
        name=str(row.get("name") or ""),
        id=_coerce_optional_int(row.get("id")),
        vertices=vertices,
        limits=limits,
    )


def parse_availability_window(raw: dict[str, Any]) -> AvailabilityWindow:
    day = str(raw["dayOfWeek"]).strip().upper()
    if day not in DAYS_OF_WEEK:
        raise ValueError(f"unknown day of week '{raw['dayOfWeek']}'")
    return AvailabilityWindow(
        day_of_week=DAYS_OF_WEEK.index(day),
        start=time.fromisoformat(str(raw["from"])),
        end=time.fromisoformat(str(raw["until"])),
    )


def _parse_rows(rows: Iterable[dict[str, Any]], parser: Callable[[dict[str, Any]], Any], label: str) -> tuple:
    parsed = []
    for row in rows:
        try:
            parsed.append(parser(row))
        except (KeyError, ValueError, TypeError, AttributeError) as exc:
            logger.warning("Skipping invalid %s row: %s", label, exc)
    return tuple(parsed)


def build_stationed_drones(
    rows: Iterable[dict[str, Any]],
    drones: Iterable[Drone],
    service_points: Iterable[ServicePoint],
) -> tuple[StationedDrone, ...]:
    drones_by_id = {drone.id: drone for drone in drones}
    points_by_id = {point.id: point for point in service_points}
    stationed: list[StationedDrone] = []
    for row in rows:
        try:
            point_id = int(row["servicePointId"])
            entries = row.get("drones") or []
        except (KeyError, ValueError, TypeError) as exc:
            logger.warning("Skipping invalid availability row: %s", exc)
            continue
        service_point = points_by_id.get(point_id)
        if service_point is None:
            logger.warning("Availability references unknown service point %s", point_id)
            continue
        for entry in entries:
            try:
                drone_id = str(entry["id"])
                windows = tuple(parse_availability_window(raw) for raw in entry.get("availability") or [])
            except (KeyError, ValueError, TypeError, AttributeError) as exc:
                logger.warning("Skipping invalid availability entry at service point %s: %s", point_id, exc)
                continue
            drone = drones_by_id.get(drone_id)
            if drone is None:
                logger.warning("Availability references unknown drone '%s'", drone_id)
                continue
            stationed.append(StationedDrone(drone=drone, service_point=service_point, availability=windows))
    return tuple(stationed)


def load_snapshot(source: ReferenceSource) -> FleetSnapshot:
    """Fetch every reference collection and assemble an immutable snapshot."""

    drones = _parse_rows(source.get_drones(), parse_drone, "drone")
    service_points = _parse_rows(source.get_service_points(), parse_service_point, "service point")
    restricted_areas = _parse_rows(source.get_restricted_areas(), parse_restricted_area, "restricted area")
    stationed = build_stationed_drones(source.get_drone_availability(), drones, service_points)
    logger.info(
        "Loaded reference data: %s drones, %s service points, %s restricted areas, %s stationed drones",
        len(drones),
        len(service_points),
        len(restricted_areas),
        len(stationed),
    )
    return FleetSnapshot(
        drones=drones,
        service_points=service_points,
        restricted_areas=restricted_areas,
        stationed_drones=stationed,
    )


class ReferenceDataRepository:
    """Serves one immutable snapshot at a time.

    Readers holding a fresh snapshot take no lock. A stale or missing snapshot
    is reloaded by one caller under ``_reload_lock``; the others wait there,
    re-check freshness and reuse what it published. When a reload fails and an
    older snapshot exists, the older one keeps being served.
    """

    def __init__(
        self,
        source: ReferenceSource | None = None,
        ttl_seconds: float | None = None,
        monotonic: Callable[[], float] = clock.monotonic,
    ) -> None:
        self.source = source or IlpClient()
        self.ttl_seconds = ttl_seconds if ttl_seconds is not None else settings.reference_ttl_seconds
        self._monotonic = monotonic
        self._lock = threading.Lock()
        self._reload_lock = threading.Lock()
        self._current: Optional[tuple[FleetSnapshot, float]] = None

    def _is_fresh(self, entry: Optional[tuple[FleetSnapshot, float]]) -> bool:
        if entry is None:
            return False
        if self.ttl_seconds <= 0:
            return True
        return self._monotonic() - entry[1] < self.ttl_seconds

    def _publish(self, snapshot: FleetSnapshot) -> FleetSnapshot:
        with self._lock:
            self._current = (snapshot, self._monotonic())
        return snapshot

    def snapshot(self) -> FleetSnapshot:
        entry = self._current
        if self._is_fresh(entry):
            return entry[0]

        with self._reload_lock:
            entry = self._current
            if self._is_fresh(entry):
                return entry[0]
            try:
                fresh = load_snapshot(self.source)
            except UpstreamDataError as exc:
                if entry is None:
                    raise
                logger.warning("Reference data reload failed, serving stale snapshot: %s", exc)
                return entry[0]
            return self._publish(fresh)

    def refresh(self) -> FleetSnapshot:
        with self._reload_lock:
            return self._publish(load_snapshot(self.source))


@functools.lru_cache(maxsize=1)
def get_repository() -> ReferenceDataRepository:
    return ReferenceDataRepository()
