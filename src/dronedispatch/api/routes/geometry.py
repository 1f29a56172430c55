"""Geometry endpoints."""

from __future__ import annotations

import logging

from fastapi import APIRouter, HTTPException, status

from ...exceptions import DOMAIN_ERRORS
from ...schemas.geometry import DistanceRequest, LngLatModel, NextPositionRequest, RegionRequest
from ...services.geometry import GeometryConfig, distance, is_close, next_position, point_in_polygon
from ...services.validation import validate_angle, validate_position, validate_region

router = APIRouter(tags=["geometry"])


@router.post("/distanceTo", status_code=status.HTTP_200_OK)
def distance_to(payload: DistanceRequest) -> float:
    try:
        first = validate_position(payload.position1, "position1")
        second = validate_position(payload.position2, "position2")
        return distance(first, second)
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error calculating distance: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to calculate distance: {str(exc)}",
        ) from exc


@router.post("/isCloseTo", status_code=status.HTTP_200_OK)
def is_close_to(payload: DistanceRequest) -> bool:
    try:
        first = validate_position(payload.position1, "position1")
        second = validate_position(payload.position2, "position2")
        return is_close(first, second, GeometryConfig.from_settings())
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error comparing positions: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to compare positions: {str(exc)}",
        ) from exc


@router.post("/nextPosition", response_model=LngLatModel, status_code=status.HTTP_200_OK)
def next_position_endpoint(payload: NextPositionRequest) -> LngLatModel:
    try:
        start = validate_position(payload.start, "start")
        angle = validate_angle(payload.angle)
        return LngLatModel.from_domain(next_position(start, angle, GeometryConfig.from_settings()))
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error calculating next position: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to calculate next position: {str(exc)}",
        ) from exc


@router.post("/isInRegion", status_code=status.HTTP_200_OK)
def is_in_region(payload: RegionRequest) -> bool:
    """True when the position lies inside the region or on its boundary."""
    try:
        position = validate_position(payload.position, "position")
        region = validate_region(payload.region)
        return point_in_polygon(position, region.vertices)
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error checking region membership: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to check region membership: {str(exc)}",
        ) from exc
