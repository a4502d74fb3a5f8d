"""Frame.io REST API client with bearer authentication."""

from __future__ import annotations

import asyncio
import logging
from typing import TYPE_CHECKING, Any

import httpx

if TYPE_CHECKING:
    from frameio_sync.config import AppConfig

logger = logging.getLogger(__name__)

FRAMEIO_BASE_URL = "https://api.frame.io/v2"


class FrameioApiError(Exception):
    """Raised when the Frame.io API returns a non-2xx or unreadable response."""

    def __init__(self, status_code: int, message: str, method: str, path: str) -> None:
        super().__init__(f"Frame.io API error {status_code} on {method} {path}: {message}")
        self.status_code = status_code
        self.message = message
        self.method = method
        self.path = path


class FrameioTransportError(Exception):
    """Raised when a request to Frame.io fails before a response arrives."""

    def __init__(self, method: str, path: str, reason: str) -> None:
        super().__init__(f"Frame.io request {method} {path} failed: {reason}")
        self.method = method
        self.path = path
        self.reason = reason


class FrameioClient:
    """Authenticated async client for the Frame.io v2 API.

    This is the only network capability the sync components receive. A
    semaphore bounds how many requests are in flight at once so that a wide
    fan-out (one request per folder or per commented asset) stays polite
    towards the API rate limits.
    """

    def __init__(
        self,
        access_token: str,
        base_url: str = FRAMEIO_BASE_URL,
        timeout_seconds: float = 30.0,
        max_concurrency: int = 8,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialise the underlying httpx client.

        Args:
            access_token: OAuth2 bearer token for the connected account.
            base_url: Frame.io API base URL.
            timeout_seconds: Per-request timeout.
            max_concurrency: Maximum number of requests in flight.
            transport: Optional httpx transport (used by tests).
        """
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self._http = httpx.AsyncClient(
            base_url=base_url,
            headers={
                "Authorization": f"Bearer {access_token}",
                "Accept": "application/json",
            },
            timeout=timeout_seconds,
            transport=transport,
        )
        self._semaphore = asyncio.Semaphore(max_concurrency)

    async def __aenter__(self) -> FrameioClient:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._http.aclose()

    async def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        """Perform an authenticated GET request.

        Args:
            path: URL path relative to the base URL (must start with '/').
            params: Optional query string parameters.

        Returns:
            Parsed JSON response body.

        Raises:
            FrameioApiError: If the API returns a non-2xx status code.
            FrameioTransportError: If the request could not be completed.
        """
        return await self._request("GET", path, params=params)

    async def put(self, path: str, body: dict[str, Any]) -> Any:
        """Perform an authenticated PUT request with a JSON body.

        Args:
            path: URL path relative to the base URL (must start with '/').
            body: JSON-serializable request body.

        Returns:
            Parsed JSON response body.

        Raises:
            FrameioApiError: If the API returns a non-2xx status code.
            FrameioTransportError: If the request could not be completed.
        """
        return await self._request("PUT", path, json=body)

    async def _request(
        self,
        method: str,
        path: str,
        params: dict[str, Any] | None = None,
        json: dict[str, Any] | None = None,
    ) -> Any:
        async with self._semaphore:
            try:
                response = await self._http.request(method, path, params=params, json=json)
            except httpx.RequestError as exc:
                logger.error("[_request] transport failure; method:%s;path:%s", method, path)
                raise FrameioTransportError(method, path, str(exc)) from exc

        if response.is_error:
            detail = self._error_detail(response)
            logger.error(
                "[_request] api error; method:%s;path:%s;status:%d",
                method,
                path,
                response.status_code,
            )
            raise FrameioApiError(response.status_code, detail, method, path)

        logger.debug("[_request] ok; method:%s;path:%s", method, path)
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError as exc:
            logger.error("[_request] malformed body; method:%s;path:%s", method, path)
            raise FrameioApiError(
                response.status_code, "Response body is not valid JSON", method, path
            ) from exc

    @staticmethod
    def _error_detail(response: httpx.Response) -> str:
        """Pull a human-readable message out of an error response body."""
        try:
            body = response.json()
        except ValueError:
            return response.reason_phrase
        if isinstance(body, dict):
            for key in ("message", "error", "errors"):
                if body.get(key):
                    return str(body[key])
        return response.reason_phrase


def frameio_client_from_config(
    config: AppConfig, access_token: str | None = None
) -> FrameioClient:
    """Construct a FrameioClient from application configuration.

    Args:
        config: Application configuration instance.
        access_token: Token to use instead of the configured one, e.g. the
            bearer token forwarded by the host on an incoming request.

    Returns:
        Configured FrameioClient instance.
    """
    return FrameioClient(
        access_token=access_token or config.access_token,
        base_url=config.base_url,
        timeout_seconds=config.request_timeout_seconds,
        max_concurrency=config.max_concurrency,
    )
