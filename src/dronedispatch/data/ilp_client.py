"""HTTP client for the upstream drone reference-data provider."""

from __future__ import annotations

import logging
import time
from typing import Any

import httpx

from ..config import settings
from ..exceptions import UpstreamDataError

logger = logging.getLogger(__name__)

DRONES_PATH = "drones"
SERVICE_POINTS_PATH = "service-points"
RESTRICTED_AREAS_PATH = "restricted-areas"
DRONE_AVAILABILITY_PATH = "drones-for-service-points"


class IlpClient:
    def __init__(
        self,
        base_url: str | None = None,
        timeout: float | None = None,
        max_retries: int | None = None,
        backoff_seconds: float | None = None,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.base_url = base_url or settings.ilp_endpoint
        if not self.base_url:
            raise ValueError("Upstream endpoint is not configured.")
        if not self.base_url.endswith("/"):
            self.base_url = f"{self.base_url}/"
        self.timeout = timeout if timeout is not None else settings.upstream_timeout_seconds
        self.max_retries = max_retries if max_retries is not None else settings.upstream_max_retries
        self.backoff_seconds = (
            backoff_seconds if backoff_seconds is not None else settings.upstream_backoff_seconds
        )
        self._transport = transport

    def _get_client(self) -> httpx.Client:
        return httpx.Client(
            base_url=self.base_url,
            timeout=httpx.Timeout(self.timeout, connect=10.0),
            transport=self._transport,
        )

    def _backoff(self, path: str, attempt: int, error: Exception) -> None:
        wait_time = self.backoff_seconds * (2 ** (attempt - 1))
        logger.debug(
            "Upstream request '%s' failed, retrying in %.1fs (attempt %s/%s): %s",
            path,
            wait_time,
            attempt,
            self.max_retries,
            error,
        )
        time.sleep(wait_time)

    def _get_json(self, path: str) -> list[dict[str, Any]]:
        """Fetch a JSON array, retrying transient failures with exponential backoff.

        Transport errors and 5xx responses are retried; 4xx responses
        and unusable payloads fail at once.
        """

        client = self._get_client()
        try:
            attempt = 0
            while True:
                try:
                    response = client.get(path)
                    response.raise_for_status()
                    payload = response.json()
                    if not isinstance(payload, list):
                        raise UpstreamDataError(f"Expected a JSON array from '{path}', got {type(payload).__name__}")
                    return payload
                except httpx.HTTPStatusError as error:
                    status = error.response.status_code
                    attempt += 1
                    if status < 500 or attempt > self.max_retries:
                        logger.warning("Upstream request '%s' failed with HTTP %s after %s attempts", path, status, attempt)
                        raise UpstreamDataError(
                            f"Upstream '{path}' responded with HTTP {status}"
                        ) from error
                    self._backoff(path, attempt, error)
                except (httpx.TimeoutException, httpx.NetworkError) as error:
                    attempt += 1
                    if attempt > self.max_retries:
                        logger.warning("Upstream request '%s' failed after %s attempts: %s", path, attempt, error)
                        raise UpstreamDataError(
                            f"Failed to reach upstream provider at {self.base_url}: {error}"
                        ) from error
                    self._backoff(path, attempt, error)
                except ValueError as error:
                    raise UpstreamDataError(f"Upstream '{path}' returned invalid JSON") from error
        finally:
            client.close()

    def get_drones(self) -> list[dict[str, Any]]:
        return self._get_json(DRONES_PATH)

    def get_service_points(self) -> list[dict[str, Any]]:
        return self._get_json(SERVICE_POINTS_PATH)

    def get_restricted_areas(self) -> list[dict[str, Any]]:
        return self._get_json(RESTRICTED_AREAS_PATH)

    def get_drone_availability(self) -> list[dict[str, Any]]:
        return self._get_json(DRONE_AVAILABILITY_PATH)
