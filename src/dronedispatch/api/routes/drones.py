"""Drone reference query endpoints."""

from __future__ import annotations

import logging
from typing import List, Optional

from fastapi import APIRouter, HTTPException, status

from ...data import reference_repository
from ...exceptions import DOMAIN_ERRORS
from ...schemas.delivery import MedDispatchModel
from ...schemas.drones import DroneModel, QueryAttributeModel
from ...services import drones as drone_queries
from ...services.validation import validate_dispatches, validate_queries

router = APIRouter(tags=["drones"])


def _snapshot():
    return reference_repository.get_repository().snapshot()


@router.get("/dronesWithCooling/{state}", response_model=List[str], status_code=status.HTTP_200_OK)
def drones_with_cooling(state: bool) -> List[str]:
    return drone_queries.filter_by_cooling(_snapshot(), state)


@router.get("/droneDetails/{drone_id}", response_model=DroneModel, status_code=status.HTTP_200_OK)
def drone_details(drone_id: str) -> DroneModel:
    return DroneModel.from_domain(drone_queries.get_by_id(_snapshot(), drone_id))


@router.get("/queryAsPath/{attribute}/{value}", response_model=List[str], status_code=status.HTTP_200_OK)
def query_as_path(attribute: str, value: str) -> List[str]:
    return drone_queries.query_by_attribute(_snapshot(), attribute, value)


@router.post("/query", response_model=List[str], status_code=status.HTTP_200_OK)
def query(payload: Optional[List[Optional[QueryAttributeModel]]] = None) -> List[str]:
    try:
        queries = validate_queries(payload)
        if not queries:
            return []
        return drone_queries.query(_snapshot(), queries)
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error querying drones: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to query drones: {str(exc)}",
        ) from exc


@router.post("/queryAvailableDrones", response_model=List[str], status_code=status.HTTP_200_OK)
def query_available_drones(payload: Optional[List[Optional[MedDispatchModel]]] = None) -> List[str]:
    try:
        dispatches = validate_dispatches(payload)
        if not dispatches:
            return []
        return drone_queries.query_available_drones(_snapshot(), dispatches)
    except DOMAIN_ERRORS:
        raise
    except Exception as exc:
        logging.exception(f"Error finding available drones: {exc}")
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail=f"Failed to find available drones: {str(exc)}",
        ) from exc
