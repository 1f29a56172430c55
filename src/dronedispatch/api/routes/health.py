"""Health endpoints."""

from __future__ import annotations

from fastapi import APIRouter, status

from ...data import reference_repository

router = APIRouter(tags=["health"])


@router.get("/health", status_code=status.HTTP_200_OK)
def health_root() -> dict:
    """Simple health check endpoint that doesn't require any dependencies."""
    return {"status": "ok"}


@router.get("/health/upstream", status_code=status.HTTP_200_OK)
def health_upstream() -> dict:
    """Report the reference data currently served, loading it if needed."""
    try:
        snapshot = reference_repository.get_repository().snapshot()
        return {
            "service": "upstream",
            "healthy": True,
            "drones": len(snapshot.drones),
            "service_points": len(snapshot.service_points),
            "restricted_areas": len(snapshot.restricted_areas),
            "stationed_drones": len(snapshot.stationed_drones),
            "loaded_at": snapshot.loaded_at.isoformat(),
        }
    except Exception as e:
        return {"service": "upstream", "healthy": False, "error": str(e)}
