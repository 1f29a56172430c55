"""Delivery planning services."""

from .feasibility import evaluate
from .models import DeliveryLeg, DronePlan, FeasibilityResult, Infeasible, InfeasibleReason, PlanResult
from .planner import AllocationPlanner

__all__ = [
    "AllocationPlanner",
    "evaluate",
    "DeliveryLeg",
    "DronePlan",
    "PlanResult",
    "FeasibilityResult",
    "Infeasible",
    "InfeasibleReason",
]
