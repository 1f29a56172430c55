"""Error types raised by the planning core and the request layer."""

from __future__ import annotations

from typing import Sequence


class InvalidRequestError(ValueError):
    """Request payload failed validation; surfaced as HTTP 400."""


class DroneNotFoundError(LookupError):
    def __init__(self, drone_id: str) -> None:
        super().__init__(f"Drone with id '{drone_id}' not found")
        self.drone_id = drone_id


class NoPathFoundError(RuntimeError):
    """The pathfinder exhausted its frontier or iteration budget."""

    def __init__(self, start, goal, iterations: int) -> None:
        super().__init__(f"No path found from {start} to {goal} after {iterations} iterations")
        self.start = start
        self.goal = goal
        self.iterations = iterations


class UndeliverableError(RuntimeError):
    """At least one delivery in the batch cannot be served by any drone."""

    def __init__(self, delivery_ids: Sequence[int | None], reason: str) -> None:
        ids = ", ".join(str(delivery_id) for delivery_id in delivery_ids)
        super().__init__(f"Undeliverable: delivery {ids} - {reason}")
        self.delivery_ids = tuple(delivery_ids)
        self.reason = reason


class UpstreamDataError(ConnectionError):
    """Reference data could not be fetched from the upstream provider."""


DOMAIN_ERRORS = (
    InvalidRequestError,
    DroneNotFoundError,
    NoPathFoundError,
    UndeliverableError,
    UpstreamDataError,
)
