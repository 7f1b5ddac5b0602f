"""Base API client for provider adapters.

Every provider call goes through ``BaseAPIClient._request``, which applies
the configured timeout and turns transport failures, timeouts and non-2xx
responses into ``ExternalServiceError``. Adapters catch that error and
return an absent result.
"""

import asyncio
from typing import Any

import httpx
import structlog

from pricelens.core.exceptions import ExternalServiceError

log = structlog.get_logger(__name__)


class BaseAPIClient:
    """Base API client with bounded requests.

    Provides HTTP requests with:
    - Lazy client initialization (created on first request)
    - A mandatory per-request timeout
    - Optional retry with exponential backoff (single attempt by default)
    - Proper resource cleanup

    Attributes:
        service: Short provider name used in logs and errors.
        base_url: Base URL for all requests.
        timeout: Request timeout in seconds.
        headers: Default headers for all requests.
        max_attempts: Attempts per request (1 = no retry).

    Example:
        client = BaseAPIClient(service="example", base_url="https://api.example.com")
        payload = await client.get_json("/endpoint")
        await client.close()
    """

    def __init__(
        self,
        service: str,
        base_url: str,
        timeout: float = 5.0,
        headers: dict[str, str] | None = None,
        max_attempts: int = 1,
    ) -> None:
        """Initialize BaseAPIClient.

        Args:
            service: Provider name, e.g. "dexscreener".
            base_url: Base URL for all requests.
            timeout: Request timeout in seconds (default: 5).
            headers: Default headers for all requests.
            max_attempts: Attempts per request (default: 1).
        """
        self.service = service
        self.base_url = base_url
        self.timeout = timeout
        self.headers = {"Accept": "application/json", **(headers or {})}
        self.max_attempts = max_attempts
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the httpx client (lazy initialization)."""
        if self._client is None:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers=self.headers,
            )
            log.debug("httpx_client_created", service=self.service, base_url=self.base_url)
        return self._client

    async def close(self) -> None:
        """Close the httpx client and release resources."""
        if self._client is not None:
            await self._client.aclose()
            self._client = None
            log.debug("httpx_client_closed", service=self.service)

    async def _request(
        self,
        method: str,
        path: str,
        **kwargs: Any,
    ) -> httpx.Response:
        """Make an HTTP request.

        Args:
            method: HTTP method (GET, POST).
            path: Request path (appended to base_url).
            **kwargs: Additional arguments passed to httpx.request.

        Returns:
            httpx.Response on success.

        Raises:
            ExternalServiceError: If the request fails on every attempt.
        """
        client = await self._get_client()
        last_error: Exception | None = None

        for attempt in range(self.max_attempts):
            try:
                response = await client.request(method, path, **kwargs)
                response.raise_for_status()
                return response

            except httpx.HTTPStatusError as e:
                status_code = e.response.status_code

                # 4xx errors (except 429) - no retry, fail immediately
                if 400 <= status_code < 500 and status_code != 429:
                    log.debug(
                        "request_client_error",
                        service=self.service,
                        path=path,
                        status_code=status_code,
                    )
                    raise ExternalServiceError(
                        service=self.service,
                        message=str(e),
                        status_code=status_code,
                    ) from e

                last_error = e
                log.warning(
                    "request_server_error",
                    service=self.service,
                    path=path,
                    status_code=status_code,
                    attempt=attempt + 1,
                )

            except (httpx.TimeoutException, httpx.RequestError) as e:
                last_error = e
                log.warning(
                    "request_connection_error",
                    service=self.service,
                    path=path,
                    error=str(e) or type(e).__name__,
                    attempt=attempt + 1,
                )

            # Exponential backoff: 1s, 2s, 4s (capped)
            if attempt < self.max_attempts - 1:
                await asyncio.sleep(min(2**attempt, 4))

        status_code = None
        if isinstance(last_error, httpx.HTTPStatusError):
            status_code = last_error.response.status_code
        raise ExternalServiceError(
            service=self.service,
            message=f"Request failed after {self.max_attempts} attempt(s): {last_error}",
            status_code=status_code,
        )

    async def get(self, path: str, **kwargs: Any) -> httpx.Response:
        """Make a GET request."""
        return await self._request("GET", path, **kwargs)

    async def get_json(self, path: str, **kwargs: Any) -> Any:
        """GET a path and decode the JSON body.

        Raises:
            ExternalServiceError: On request failure or an undecodable body.
        """
        response = await self.get(path, **kwargs)
        try:
            return response.json()
        except ValueError as e:
            raise ExternalServiceError(
                service=self.service,
                message=f"Malformed JSON body: {e}",
                status_code=response.status_code,
            ) from e
