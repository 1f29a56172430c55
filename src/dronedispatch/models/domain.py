"""Domain models for fleet reference data and delivery requests."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime, time
from typing import Optional


@dataclass(frozen=True, slots=True)
class LngLat:
    """A position in degrees. Longitude first, matching the wire format."""

    lng: float
    lat: float

    def as_tuple(self) -> tuple[float, float]:
        return (self.lng, self.lat)


@dataclass(frozen=True, slots=True)
class Limits:
    lower: Optional[int] = None
    upper: Optional[int] = None


@dataclass(frozen=True, slots=True)
class Region:
    """Closed polygon ring; the first and last vertices are identical."""

    name: str
    vertices: tuple[LngLat, ...]


@dataclass(frozen=True, slots=True)
class RestrictedArea:
    """A named no-fly zone."""

    name: str
    id: Optional[int]
    vertices: tuple[LngLat, ...]
    limits: Optional[Limits] = None


@dataclass(frozen=True, slots=True)
class ServicePoint:
    """Base location where drones are stationed."""

    id: int
    name: str
    location: LngLat


@dataclass(frozen=True, slots=True)
class DroneCapability:
    cooling: bool = False
    heating: bool = False
    capacity: float = 0.0
    max_moves: int = 0
    cost_per_move: float = 0.0
    cost_initial: float = 0.0
    cost_final: float = 0.0


@dataclass(frozen=True, slots=True)
class Drone:
    """Drone record as published by the upstream provider."""

    id: str
    name: str
    capability: Optional[DroneCapability]


@dataclass(frozen=True, slots=True)
class AvailabilityWindow:
    """Weekly slot; ``day_of_week`` follows ``date.weekday()`` (Monday is 0)."""

    day_of_week: int
    start: time
    end: time

    def covers(self, moment: datetime) -> bool:
        if moment.weekday() != self.day_of_week:
            return False
        return self.start <= moment.time() <= self.end


@dataclass(frozen=True, slots=True)
class StationedDrone:
    """A drone bound to its home service point and its availability there."""

    drone: Drone
    service_point: ServicePoint
    availability: tuple[AvailabilityWindow, ...] = ()

    @property
    def id(self) -> str:
        return self.drone.id

    @property
    def capability(self) -> Optional[DroneCapability]:
        return self.drone.capability

    def is_available(self, moment: datetime | None) -> bool:
        if moment is None:
            return True
        return any(window.covers(moment) for window in self.availability)


@dataclass(frozen=True, slots=True)
class DeliveryRequirements:
    capacity: float
    cooling: bool = False
    heating: bool = False
    max_cost: Optional[float] = None


@dataclass(frozen=True, slots=True)
class DeliveryRequest:
    """Single medical dispatch record submitted for planning."""

    id: int
    requirements: DeliveryRequirements
    destination: Optional[LngLat] = None
    date: Optional[date] = None
    time: Optional[time] = None

    @property
    def dispatch_at(self) -> Optional[datetime]:
        if self.date is None or self.time is None:
            return None
        return datetime.combine(self.date, self.time)


@dataclass(frozen=True, slots=True)
class FleetSnapshot:
    """Immutable view of the reference data used by a planning call."""

    drones: tuple[Drone, ...] = ()
    service_points: tuple[ServicePoint, ...] = ()
    restricted_areas: tuple[RestrictedArea, ...] = ()
    stationed_drones: tuple[StationedDrone, ...] = ()
    loaded_at: datetime = field(default_factory=datetime.now)

    @property
    def no_fly_polygons(self) -> tuple[tuple[LngLat, ...], ...]:
        return tuple(area.vertices for area in self.restricted_areas)
