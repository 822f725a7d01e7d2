"""TMDB remote client.

Thin async transport over The Movie Database v3 API. Builds request URLs
from a fixed base, attaches the credential, and returns decoded JSON.
Failures surface as NetworkError / HttpError / InvalidResponseError; this
client never retries and never touches cache state.

See: https://developer.themoviedb.org/reference/intro/getting-started
"""

from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from cinecache.config import Settings
from cinecache.core.exceptions import HttpError, InvalidResponseError, NetworkError

logger = structlog.get_logger(__name__)

DEFAULT_BASE_URL = "https://api.themoviedb.org/3"

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH", "DELETE"})


class TMDBClient:
    """Async client for the TMDB API.

    The credential is sent both as the ``api_key`` query parameter and as an
    ``Authorization: Bearer`` header, so either a v3 API key or a v4 read
    access token works.

    Usage:
        ```python
        async with TMDBClient(api_key) as client:
            popular = await client.fetch("/movie/popular", {"page": 1})
        ```
    """

    def __init__(
        self,
        api_key: str,
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 10.0,
        user_agent: str = "CineCache/0.1.0",
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            api_key: TMDB API key or bearer token
            base_url: API root, without trailing slash
            timeout: Transport timeout in seconds
            user_agent: User-Agent header value
            transport: Optional httpx transport (used by tests)
        """
        self._api_key = api_key
        self.base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._user_agent = user_agent
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> "TMDBClient":
        """Build a client from application settings."""
        return cls(
            settings.tmdb_api_key.get_secret_value(),
            base_url=settings.tmdb_base_url,
            timeout=settings.tmdb_timeout,
            user_agent=f"{settings.app_name}/{settings.app_version}",
            transport=transport,
        )

    async def __aenter__(self) -> "TMDBClient":
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self._timeout,
                transport=self._transport,
                headers={
                    "Authorization": f"Bearer {self._api_key}",
                    "Content-Type": "application/json",
                    "Accept": "application/json",
                    "User-Agent": self._user_agent,
                },
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    def build_query(self, query_params: Mapping[str, Any] | None) -> dict[str, Any]:
        """Merge the credential with caller parameters, dropping None values."""
        params: dict[str, Any] = {"api_key": self._api_key}
        for key, value in (query_params or {}).items():
            if value is not None:
                params[key] = value
        return params

    async def fetch(
        self,
        endpoint_path: str,
        query_params: Mapping[str, Any] | None = None,
        method: str = "GET",
        body: Any = None,
    ) -> Any:
        """Issue one request and return the decoded JSON payload.

        Args:
            endpoint_path: Path below the base URL (e.g., "/movie/popular")
            query_params: Query parameters; None values are omitted
            method: HTTP method
            body: JSON body for write methods

        Returns:
            Decoded JSON (dict or list)

        Raises:
            NetworkError: No response received (DNS, refused, timeout)
            HttpError: Non-2xx status
            InvalidResponseError: Body is not valid JSON
        """
        client = await self._get_client()
        method = method.upper()
        json_body = body if body is not None and method in _BODY_METHODS else None

        logger.debug("tmdb_request", method=method, endpoint=endpoint_path)

        try:
            response = await client.request(
                method,
                endpoint_path,
                params=self.build_query(query_params),
                json=json_body,
            )
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            logger.error(
                "tmdb_request_failed",
                status_code=e.response.status_code,
                endpoint=endpoint_path,
            )
            raise HttpError(e.response.status_code, endpoint_path) from e
        except httpx.RequestError as e:
            logger.error("tmdb_network_error", error=str(e), endpoint=endpoint_path)
            raise NetworkError(e, endpoint_path=endpoint_path) from e

        try:
            return response.json()
        except ValueError as e:
            logger.error("tmdb_invalid_json", endpoint=endpoint_path, error=str(e))
            raise InvalidResponseError(
                "Response body is not valid JSON", endpoint_path=endpoint_path
            ) from e
