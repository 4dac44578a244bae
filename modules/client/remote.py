"""
Remote Data Client.

Async HTTP client for the notes API. Unlike a plain HTTP client it
never raises on failure: every call returns a RemoteResult holding
either the response data or an error.
"""

from dataclasses import dataclass
from typing import Any

import httpx

from modules.backend.core.config import get_app_config, get_server_base_url
from modules.backend.core.logging import get_logger, log_with_source

logger = get_logger(__name__)

NETWORK_ERROR = "NETWORK_ERROR"
NOT_SIGNED_IN = "AUTH_NOT_SIGNED_IN"


@dataclass
class RemoteError:
    """Error reported by the backend, or raised by the transport."""

    code: str
    message: str
    status: int | None = None


@dataclass
class RemoteResult:
    """Outcome of a remote call: `data` on success, `error` on failure."""

    data: Any = None
    error: RemoteError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


class RemoteClient:
    """
    HTTP client for the notes API.

    Args:
        token: Bearer token from the identity provider; None when signed out
        base_url: Server URL. If None, reads from config/settings/application.yaml.
        timeout: Request timeout in seconds. If None, reads from application.yaml.
        transport: Optional httpx transport (e.g. ASGITransport for in-process use)
    """

    def __init__(
        self,
        token: str | None = None,
        base_url: str | None = None,
        timeout: float | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if base_url is None or timeout is None:
            config_base_url, config_timeout = get_server_base_url()
            base_url = base_url or config_base_url
            timeout = timeout if timeout is not None else config_timeout

        self.base_url = base_url.rstrip("/")
        self.api_prefix = get_app_config().application.api_prefix
        self.timeout = timeout
        self.token = token
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    @property
    def signed_in(self) -> bool:
        return self.token is not None

    def set_token(self, token: str | None) -> None:
        """Sign in (token) or out (None). Takes effect on the next request."""
        self.token = token

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                base_url=self.base_url,
                timeout=self.timeout,
                headers={"X-Frontend-ID": "client"},
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        if self._client and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    @staticmethod
    def _error_from_response(response: httpx.Response) -> RemoteError:
        try:
            error = response.json().get("error") or {}
        except ValueError:
            error = {}
        return RemoteError(
            code=error.get("code", f"HTTP_{response.status_code}"),
            message=error.get("message", response.reason_phrase),
            status=response.status_code,
        )

    async def request(self, method: str, path: str, **kwargs: Any) -> RemoteResult:
        """
        Call an API path (relative to the API prefix).

        Returns:
            RemoteResult with the envelope's `data`, or an error
        """
        if not self.signed_in:
            return RemoteResult(error=RemoteError(NOT_SIGNED_IN, "Not signed in"))

        url = f"{self.api_prefix}{path}"
        headers = {"Authorization": f"Bearer {self.token}"}
        log_with_source(logger, "client", "debug", "API request", method=method, path=url)

        try:
            response = await self._get_client().request(method, url, headers=headers, **kwargs)
        except httpx.HTTPError as e:
            log_with_source(
                logger, "client", "error", "API request failed",
                method=method, path=url, error=str(e),
            )
            return RemoteResult(error=RemoteError(NETWORK_ERROR, str(e)))

        if response.is_error:
            return RemoteResult(error=self._error_from_response(response))
        if response.status_code == 204 or not response.content:
            return RemoteResult()
        return RemoteResult(data=response.json().get("data"))

    async def get(self, path: str, **kwargs: Any) -> RemoteResult:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> RemoteResult:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> RemoteResult:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> RemoteResult:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> RemoteResult:
        return await self.request("DELETE", path, **kwargs)
