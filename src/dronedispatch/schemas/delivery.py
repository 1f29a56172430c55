"""Pydantic models for delivery planning endpoints."""

from __future__ import annotations

import datetime as dt
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from .geometry import LngLatModel


class RequirementsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    capacity: Optional[float] = None
    cooling: Optional[bool] = False
    heating: Optional[bool] = False
    max_cost: Optional[float] = Field(default=None, alias="maxCost")


class MedDispatchModel(BaseModel):
    """One medical dispatch record; ``delivery`` is the destination."""

    id: Optional[int] = None
    date: Optional[dt.date] = None
    time: Optional[dt.time] = None
    delivery: Optional[LngLatModel] = None
    requirements: Optional[RequirementsModel] = None


class DeliveryLegModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    delivery_id: Optional[int] = Field(default=None, alias="deliveryId")
    flight_path: List[LngLatModel] = Field(default_factory=list, alias="flightPath")


class DronePathModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    drone_id: str = Field(alias="droneId")
    deliveries: List[DeliveryLegModel]


class DeliveryPathResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_cost: float = Field(alias="totalCost")
    total_moves: int = Field(alias="totalMoves")
    drone_paths: List[DronePathModel] = Field(alias="dronePaths")


class GeoJsonResponse(BaseModel):
    type: str = "FeatureCollection"
    features: List[Dict[str, Any]] = Field(default_factory=list)
