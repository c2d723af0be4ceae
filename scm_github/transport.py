"""
HTTP Transport for scm-github.

Executes a single named GitHub action over HTTP. Retry, circuit breaking and
statistics are layered on top by the command executor; the transport itself
makes exactly one request per call and lets errors propagate unchanged.
"""

import time
from dataclasses import dataclass, field
from typing import Any

import httpx

from scm_github.actions import RemoteAction
from scm_github.logging import log_http_request, log_http_response

DEFAULT_HEADERS = {
    "Accept": "application/vnd.github+json",
    "Content-Type": "application/json",
    "User-Agent": "scm-github",
}


@dataclass
class RetryConfig:
    """Configuration for automatic retry behavior."""

    max_retries: int = 5
    min_timeout: float = 1.0  # First backoff interval in seconds
    backoff_factor: float = 2.0
    retry_on: list[int] = field(default_factory=lambda: [429, 500, 502, 503, 504])
    respect_retry_after: bool = True
    max_backoff: float = 60.0
    jitter: float = 0.1  # Jitter factor (0.1 = ±10%)


@dataclass
class BreakerConfig:
    """Configuration for the circuit breaker."""

    failure_threshold: int = 5  # Consecutive failing attempts before opening
    reset_timeout: float = 30.0  # Seconds the breaker stays open


def build_headers(credential: str | None) -> dict[str, str]:
    """Per-request headers. The credential is never stored on the transport."""
    headers = dict(DEFAULT_HEADERS)
    if credential:
        headers["Authorization"] = f"token {credential}"
    return headers


def build_request_kwargs(
    action: RemoteAction, params: dict[str, Any], credential: str | None
) -> dict[str, Any]:
    """Translate an action and its params into ``httpx`` request arguments."""
    method, path, remainder = action.build_request(params)
    kwargs: dict[str, Any] = {
        "method": method,
        "url": path,
        "headers": build_headers(credential),
    }
    if method == "GET":
        kwargs["params"] = remainder or None
    else:
        kwargs["json"] = remainder
    return kwargs


class HTTPTransport:
    """
    Synchronous "execute once" capability on top of ``httpx.Client``.

    Handles:
    - Path construction from the closed action set
    - Per-call credential headers
    - Request/response debug logging with credentials masked
    """

    def __init__(
        self,
        base_url: str = "https://api.github.com",
        timeout: float = 30.0,
        client: httpx.Client | None = None,
    ) -> None:
        """
        Initialize HTTP transport.

        Args:
            base_url: GitHub API root (e.g., "https://api.github.com")
            timeout: Request timeout in seconds
            client: Preconfigured httpx client (optional, mainly for tests)
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._client = client or httpx.Client(
            base_url=self.base_url,
            timeout=timeout,
        )

    def close(self) -> None:
        """Close the HTTP client."""
        self._client.close()

    def __enter__(self) -> "HTTPTransport":
        return self

    def __exit__(self, *args: Any) -> None:
        self.close()

    def execute(
        self,
        action: RemoteAction,
        params: dict[str, Any],
        credential: str | None = None,
    ) -> dict[str, Any]:
        """
        Make one request for ``action``.

        Args:
            action: The remote action to run
            params: Path placeholders plus query/body fields
            credential: OAuth token used for this request only

        Returns:
            Parsed JSON response

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
        response = self._client.request(**kwargs)
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
