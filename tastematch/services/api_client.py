"""HTTP data source for the same-origin REST/JSON backend. No cache, no retry."""

from __future__ import annotations

import time
from typing import Any, Optional

import httpx
import structlog

from tastematch.config import Settings
from tastematch.errors import ApiError
from tastematch.metrics import API_REQUEST_LATENCY

logger = structlog.get_logger()


class ApiDataSource:
    """Thin wrapper over ``httpx.AsyncClient`` that decodes JSON and raises ``ApiError``."""

    def __init__(self, settings: Settings, client: Optional[httpx.AsyncClient] = None):
        self._settings = settings
        self._client = client
        self._owns_client = client is None

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self._settings.api_base_url,
                timeout=httpx.Timeout(
                    self._settings.request_timeout_seconds,
                    connect=self._settings.connect_timeout_seconds,
                ),
            )
        return self._client

    async def query(
        self,
        path: str,
        method: str = "GET",
        params: Optional[dict[str, Any]] = None,
        json: Any = None,
    ) -> Any:
        client = self._get_client()
        start = time.time()
        try:
            response = await client.request(method, path, params=params, json=json)
        except httpx.HTTPError as e:
            API_REQUEST_LATENCY.labels(method=method, status="error").observe(time.time() - start)
            logger.warning("api_request_failed", method=method, path=path, error=str(e))
            raise ApiError(f"Request to {path} failed: {e}", path=path) from e

        API_REQUEST_LATENCY.labels(method=method, status=str(response.status_code)).observe(
            time.time() - start
        )

        if response.is_error:
            message = _error_message(response)
            logger.warning(
                "api_request_rejected",
                method=method,
                path=path,
                status=response.status_code,
                error=message,
            )
            raise ApiError(message, status_code=response.status_code, path=path)

        if not response.content:
            return None
        return response.json()

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "ApiDataSource":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()


def _error_message(response: httpx.Response) -> str:
    """Prefer the body's ``error`` field, fall back to the reason phrase."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return response.reason_phrase or f"API request failed with status {response.status_code}"
