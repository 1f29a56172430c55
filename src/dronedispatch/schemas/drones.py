"""Pydantic models for drone reference endpoints."""

from __future__ import annotations

from typing import Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from ..models.domain import Drone, DroneCapability


class CapabilityModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    cooling: bool = False
    heating: bool = False
    capacity: float = 0.0
    max_moves: int = Field(default=0, alias="maxMoves")
    cost_per_move: float = Field(default=0.0, alias="costPerMove")
    cost_initial: float = Field(default=0.0, alias="costInitial")
    cost_final: float = Field(default=0.0, alias="costFinal")

    @classmethod
    def from_domain(cls, capability: DroneCapability) -> "CapabilityModel":
        return cls(
            cooling=capability.cooling,
            heating=capability.heating,
            capacity=capability.capacity,
            max_moves=capability.max_moves,
            cost_per_move=capability.cost_per_move,
            cost_initial=capability.cost_initial,
            cost_final=capability.cost_final,
        )


class DroneModel(BaseModel):
    id: str
    name: str
    capability: Optional[CapabilityModel] = None

    @classmethod
    def from_domain(cls, drone: Drone) -> "DroneModel":
        capability = CapabilityModel.from_domain(drone.capability) if drone.capability is not None else None
        return cls(id=drone.id, name=drone.name, capability=capability)


class QueryAttributeModel(BaseModel):
    attribute: Optional[str] = None
    operator: Optional[str] = None
    value: Optional[Union[bool, int, float, str]] = None
