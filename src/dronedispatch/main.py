"""FastAPI application entry point."""

from __future__ import annotations

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .api.routes import delivery, drones, geometry, health
from .config import settings
from .exceptions import (
    DroneNotFoundError,
    InvalidRequestError,
    NoPathFoundError,
    UndeliverableError,
    UpstreamDataError,
)

logger = logging.getLogger(__name__)


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content={"error": error, "message": message})


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvalidRequestError)
    async def invalid_request(_: Request, exc: InvalidRequestError) -> JSONResponse:
        return _error(status.HTTP_400_BAD_REQUEST, "Bad Request", str(exc))

    @app.exception_handler(RequestValidationError)
    async def malformed_body(_: Request, exc: RequestValidationError) -> JSONResponse:
        logger.debug("Rejected malformed request body: %s", exc.errors())
        return _error(
            status.HTTP_400_BAD_REQUEST,
            "Malformed JSON",
            "The JSON request body is malformed or invalid.",
        )

    @app.exception_handler(DroneNotFoundError)
    async def drone_not_found(_: Request, exc: DroneNotFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "Not Found", str(exc))

    @app.exception_handler(NoPathFoundError)
    async def no_path(_: Request, exc: NoPathFoundError) -> JSONResponse:
        return _error(status.HTTP_404_NOT_FOUND, "No Path Found", str(exc))

    @app.exception_handler(UndeliverableError)
    async def undeliverable(_: Request, exc: UndeliverableError) -> JSONResponse:
        logger.info("Rejected delivery batch: %s", exc)
        return _error(status.HTTP_422_UNPROCESSABLE_ENTITY, "Undeliverable", str(exc))

    @app.exception_handler(UpstreamDataError)
    async def upstream_unavailable(_: Request, exc: UpstreamDataError) -> JSONResponse:
        logger.warning("Upstream reference data unavailable: %s", exc)
        return _error(status.HTTP_503_SERVICE_UNAVAILABLE, "Service Unavailable", str(exc))


def create_app() -> FastAPI:
    app = FastAPI(title=settings.app_name)
    if settings.frontend_allowed_origins:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=list(settings.frontend_allowed_origins),
            allow_credentials=True,
            allow_methods=["*"],
            allow_headers=["*"],
        )
    register_exception_handlers(app)

    @app.get("/")
    def root():
        return {
            "service": settings.app_name,
            "status": "running",
            "api_prefix": settings.api_prefix,
            "health": f"{settings.api_prefix}/health",
            "docs": "/docs",
        }

    app.include_router(health.router, prefix=settings.api_prefix)
    app.include_router(geometry.router, prefix=settings.api_prefix)
    app.include_router(drones.router, prefix=settings.api_prefix)
    app.include_router(delivery.router, prefix=settings.api_prefix)
    return app


app = create_app()
