"""Planning domain models."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

from ...models.domain import LngLat


@dataclass(frozen=True, slots=True)
class DeliveryLeg:
    """One flight segment; ``delivery_id`` is None for the return to base."""

    delivery_id: Optional[int]
    route: tuple[LngLat, ...]


@dataclass(frozen=True, slots=True)
class DronePlan:
    drone_id: str
    service_point_id: int
    legs: tuple[DeliveryLeg, ...]
    total_moves: int
    total_cost: float

    @property
    def delivery_ids(self) -> tuple[int, ...]:
        return tuple(leg.delivery_id for leg in self.legs if leg.delivery_id is not None)


@dataclass(frozen=True, slots=True)
class PlanResult:
    drone_plans: tuple[DronePlan, ...] = ()
    total_cost: float = 0.0
    total_moves: int = 0

    @classmethod
    def from_plans(cls, plans: tuple[DronePlan, ...]) -> "PlanResult":
        return cls(
            drone_plans=plans,
            total_cost=sum(plan.total_cost for plan in plans),
            total_moves=sum(plan.total_moves for plan in plans),
        )


class InfeasibleReason(str, Enum):
    CAPABILITY = "capability"
    AVAILABILITY = "availability"
    BATTERY = "battery"
    COST = "cost"


@dataclass(frozen=True, slots=True)
class FeasibilityResult:
    total_moves: int
    total_cost: float


@dataclass(frozen=True, slots=True)
class Infeasible:
    reason: InfeasibleReason
    detail: str = ""


@dataclass(slots=True)
class GroupOutcome:
    """Result of planning one work-list group: a plan or the halves to retry."""

    plan: Optional[DronePlan] = None
    subgroups: list[tuple[int, ...]] = field(default_factory=list)
    failure: Optional[str] = None
