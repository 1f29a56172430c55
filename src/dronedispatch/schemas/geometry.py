"""Pydantic request/response models for geometry endpoints.

Fields are optional at the schema level so that missing values reach the
validation layer and produce field-specific messages.
"""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from ..models.domain import LngLat


class LngLatModel(BaseModel):
    lng: Optional[float] = None
    lat: Optional[float] = None

    @classmethod
    def from_domain(cls, position: LngLat) -> "LngLatModel":
        return cls(lng=position.lng, lat=position.lat)


class DistanceRequest(BaseModel):
    position1: Optional[LngLatModel] = None
    position2: Optional[LngLatModel] = None


class NextPositionRequest(BaseModel):
    start: Optional[LngLatModel] = None
    angle: Optional[float] = Field(default=None, description="Heading in degrees, 0 = east, counter-clockwise.")


class RegionModel(BaseModel):
    name: Optional[str] = None
    vertices: Optional[List[Optional[LngLatModel]]] = None


class RegionRequest(BaseModel):
    position: Optional[LngLatModel] = None
    region: Optional[RegionModel] = None


class FindPathRequest(BaseModel):
    start: Optional[LngLatModel] = None
    goal: Optional[LngLatModel] = None
