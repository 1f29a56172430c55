"""Application configuration and settings management."""

from typing import Any

import json
from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

COMPASS_DIRECTIONS: tuple[float, ...] = tuple(i * 22.5 for i in range(16))


class Settings(BaseSettings):
    """Runtime configuration loaded from environment variables or defaults."""

    model_config = SettingsConfigDict(
        env_prefix="DDP_",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    app_name: str = "Medical Drone Dispatch Planner API"
    api_prefix: str = "/api/v1"
    ilp_endpoint: str = Field(
        default="https://ilp-rest-2025-bvh6e9hschfagrgy.ukwest-01.azurewebsites.net/",
        description="Base URL of the upstream provider serving drones, service points and restricted areas.",
    )
    upstream_timeout_seconds: float = Field(default=15.0, gt=0.0)
    upstream_max_retries: int = Field(default=3, ge=0)
    upstream_backoff_seconds: float = Field(default=0.5, ge=0.0)
    reference_ttl_seconds: float = Field(
        default=300.0,
        ge=0.0,
        description="Seconds before cached reference data is reloaded from upstream (0 disables reloads).",
    )
    move_distance: float = Field(default=0.00015, gt=0.0, description="Length of a single drone move in degrees.")
    close_distance: float = Field(
        default=0.00015,
        gt=0.0,
        description="Two positions closer than this (in degrees) are considered the same place.",
    )
    compass_directions: tuple[float, ...] = Field(
        default=COMPASS_DIRECTIONS,
        description="Headings (degrees, 0 = east, counter-clockwise) the pathfinder may move along.",
    )
    max_path_iterations: int = Field(default=50_000, ge=1)
    node_key_precision: int = Field(
        default=8,
        ge=1,
        description="Decimal places used to merge pathfinder positions into one search node.",
    )
    heuristic_weight: float = Field(
        default=1.0001,
        ge=1.0,
        description="Multiplier applied to the A* heuristic. Values just above 1 break ties toward the goal.",
    )
    planner_max_workers: int = Field(
        default=4,
        ge=1,
        description="Threads planning split groups of one batch. Work interleaves under the GIL; it does not run in parallel.",
    )
    frontend_allowed_origins: tuple[str, ...] = Field(
        default=(
            "http://localhost:5173",
            "http://127.0.0.1:5173",
        ),
        description="Permitted web origins for browser clients (CORS).",
    )

    @field_validator("ilp_endpoint", mode="after")
    @classmethod
    def _ensure_trailing_slash(cls, value: str) -> str:
        return value if value.endswith("/") else f"{value}/"

    @field_validator("frontend_allowed_origins", mode="before")
    @classmethod
    def _parse_str_tuple_from_env(cls, value: Any) -> tuple[str, ...]:
        """Parse string tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return value
        if isinstance(value, list):
            return tuple(str(item) for item in value)
        if isinstance(value, str):
            # Try JSON first
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(str(item) for item in parsed)
            except (json.JSONDecodeError, TypeError):
                pass
            if "," in value:
                return tuple(item.strip() for item in value.split(",") if item.strip())
            if value.strip():
                return (value.strip(),)
        return tuple()

    @field_validator("compass_directions", mode="before")
    @classmethod
    def _parse_float_tuple_from_env(cls, value: Any) -> tuple[float, ...]:
        """Parse float tuple from environment variable (comma-separated or JSON array)."""
        if isinstance(value, tuple):
            return tuple(float(item) for item in value)
        if isinstance(value, list):
            return tuple(float(item) for item in value)
        if isinstance(value, str):
            try:
                parsed = json.loads(value)
                if isinstance(parsed, list):
                    return tuple(float(item) for item in parsed)
            except (json.JSONDecodeError, TypeError, ValueError):
                pass
            if "," in value:
                return tuple(float(item.strip()) for item in value.split(",") if item.strip())
            if value.strip():
                return (float(value.strip()),)
        return COMPASS_DIRECTIONS


settings = Settings()
