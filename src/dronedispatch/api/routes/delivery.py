"""Delivery planning and pathfinding endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status

from ...exceptions import DOMAIN_ERRORS
from ...schemas.delivery import DeliveryPathResponse, GeoJsonResponse, MedDispatchModel
from ...schemas.geometry import FindPathRequest, LngLatModel
from ...services.planning import service as planning_service
from ...services.validation import validate_position

router = APIRouter(tags=["delivery"])


@router.post("/calcDeliveryPath", response_model=DeliveryPathResponse, status_code=status.HTTP_200_OK)
def calc_delivery_path(payload: Optional[List[Optional[MedDispatchModel]]] = None) -> dict:
    try:
        return planning_service.calculate_delivery_path(payload)
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error calculating delivery path: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to calculate delivery path: {str(exc)}",
        ) from exc


@router.post("/calcDeliveryPathAsGeoJson", response_model=GeoJsonResponse, status_code=status.HTTP_200_OK)
def calc_delivery_path_as_geojson(payload: Optional[List[Optional[MedDispatchModel]]] = None) -> dict:
    try:
        return planning_service.calculate_delivery_geojson(payload)
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error calculating delivery GeoJSON: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to calculate delivery GeoJSON: {str(exc)}",
        ) from exc


@router.post("/findPath", response_model=List[LngLatModel], status_code=status.HTTP_200_OK)
def find_path(payload: FindPathRequest) -> List[LngLatModel]:
    try:
        start = validate_position(payload.start, "start")
        goal = validate_position(payload.goal, "goal")
        route = planning_service.find_route(start, goal)
        return [LngLatModel.from_domain(position) for position in route]
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error finding path: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to find path: {str(exc)}",
        ) from exc
