"""
Async HTTP Transport for scm-github.

Same contract as :class:`scm_github.transport.HTTPTransport`, using the httpx
async client so every outbound call suspends instead of blocking.
"""

import time
from typing import Any

import httpx

from scm_github.actions import RemoteAction
from scm_github.logging import log_http_request, log_http_response
from scm_github.transport import build_request_kwargs


class AsyncHTTPTransport:
    """Asynchronous "execute once" capability on top of ``httpx.AsyncClient``."""

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Initialize async HTTP transport.

        Args:
            base_url: GitHub API root (e.g., "https://api.github.com")
            timeout: Request timeout in seconds
            client: Preconfigured httpx async client (optional, mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
        )

    async def close(self) -> None:
        """Close the HTTP client."""
        await self._client.aclose()

    async def __aenter__(self) -> "AsyncHTTPTransport":
        return self

    async def __aexit__(self, *args: Any) -> None:
        await self.close()

    async def execute(
        self,
        action: RemoteAction,
        params: dict[str, Any],
        credential: str | None = None,
    ) -> dict[str, Any]:
        """
        Make one request for ``action``.

        Raises:
            httpx.HTTPStatusError: On a 4xx/5xx response
            httpx.TransportError: On network failures and timeouts
        """
        kwargs = build_request_kwargs(action, params, credential)
        log_http_request(
            kwargs["method"],
            f"{self.base_url}{kwargs['url']}",
            headers=kwargs["headers"],
            body=kwargs.get("json"),
        )

        started = time.monotonic()
        response = await self._client.request(**kwargs)
        elapsed_ms = (time.monotonic() - started) * 1000

        log_http_response(
            response.status_code,
            f"{self.base_url}{kwargs['url']}",
            elapsed_ms=elapsed_ms,
        )
        response.raise_for_status()

        if not response.content:
            return {}
        return response.json()
