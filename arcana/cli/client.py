"""
HTTP Client for the Arcana backend.

Provides the async HTTP transport used by the gateway. Every request
carries the API key as a bearer token and X-Frontend-ID: cli for log
routing on the backend.
"""

from typing import Any

import httpx

from arcana.core.config import get_app_config
from arcana.core.logging import get_logger, log_with_source

logger = get_logger(__name__)


def _redact(payload: Any) -> Any:
    """Drop the API key from a JSON body before it is logged."""
    if isinstance(payload, dict) and "api_key" in payload:
        return {**payload, "api_key": "****"}
    return payload


class APIClient:
    """
    HTTP client for backend API communication.

    Features:
    - Bearer authentication on every request
    - X-Frontend-ID header for log routing
    - Structured debug logging of requests and responses (shown with --verbose)

    Usage:
        client = APIClient(base_url="http://localhost:8000/arcana", api_key="sk-...")
        response = await client.request("GET", "/version")
        response = await client.request("POST", "/cli/execute", json={...})
    """

    def __init__(
        self,
        base_url: str,
        api_key: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        """
        Initialize the API client.

        Args:
            base_url: Backend API base URL.
            api_key: Sent as a bearer token when set.
            timeout: Request timeout in seconds. If None, reads from application.yaml.
            transport: Optional httpx transport, used by tests.
        """
        self.base_url = base_url.rstrip("/")
        self.api_key = api_key
        self.timeout = timeout if timeout is not None else get_app_config().application.timeouts.request
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "X-Frontend-ID": "cli",
        }
        if self.api_key:
            headers["Authorization"] = f"Bearer {self.api_key}"
        return headers

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """
        Make an HTTP request to the backend.

        Args:
            method: HTTP method (GET, POST, etc.)
            path: API path relative to the base URL (e.g., /cli/execute)
            **kwargs: Additional arguments for httpx

        Returns:
            httpx.Response

        Raises:
            httpx.HTTPError: On request failure
        """
        client = await self._get_client()

        log_with_source(
            logger,
            "cli",
            "debug",
            "API request",
            method=method,
            path=path,
            base_url=self.base_url,
            body=_redact(kwargs.get("json")),
        )

        try:
            response = await client.request(method, path, **kwargs)

            log_with_source(
                logger,
                "cli",
                "debug",
                "API response",
                method=method,
                path=path,
                status_code=response.status_code,
                body=response.text,
            )

            return response

        except httpx.HTTPError as e:
            log_with_source(
                logger,
                "cli",
                "warning",
                "API request failed",
                method=method,
                path=path,
                error=str(e),
            )
            raise
