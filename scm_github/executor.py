"""
Resilient command executor.

Every outbound GitHub call goes through :meth:`CommandExecutor.run_command`,
which wraps a single-shot ``execute(action, params, credential)`` callable
with retry, circuit breaking and statistics. The policy lives here only;
callers never retry on their own.
"""

import asyncio
import math
import random
import time
from collections.abc import Awaitable, Callable
from typing import Any

import httpx

from scm_github.actions import RemoteAction
from scm_github.breaker import CircuitBreaker, CommandStats
from scm_github.exceptions import CommandTimeoutError, UpstreamError
from scm_github.logging import get_logger
from scm_github.transport import RetryConfig
from scm_github.types.stats import StatsSnapshot

_logger = get_logger("executor")

SUCCESS = "success"
TIMEOUT = "timeout"
FAILURE = "failure"

ExecuteFn = Callable[[RemoteAction, dict[str, Any], str | None], dict[str, Any]]
AsyncExecuteFn = Callable[
    [RemoteAction, dict[str, Any], str | None], Awaitable[dict[str, Any]]
]


class _Outcome:
    """Classification of one failed attempt."""

    __slots__ = ("kind", "retryable", "trips_breaker", "retry_after")

    def __init__(
        self,
        kind: str,
        retryable: bool,
        trips_breaker: bool,
        retry_after: str | None = None,
    ) -> None:
        self.kind = kind
        self.retryable = retryable
        self.trips_breaker = trips_breaker
        self.retry_after = retry_after


class _ExecutorBase:
    """Policy shared by the sync and async executors."""

    def __init__(
        self,
        retry_config: RetryConfig | None = None,
        breaker: CircuitBreaker | None = None,
        stats: CommandStats | None = None,
    ) -> None:
        self.retry_config = retry_config or RetryConfig()
        self.breaker = breaker or CircuitBreaker()
        self._stats = stats or CommandStats()

    def stats(self) -> StatsSnapshot:
        """Momentary snapshot of the counters and breaker state."""
        return self._stats.snapshot(self.breaker.is_closed)

    def _prepare(
        self, action: "RemoteAction | str", params: dict[str, Any] | None
    ) -> tuple[RemoteAction, dict[str, Any]]:
        # Unknown actions and missing path params are programming errors:
        # raised before any attempt and never counted.
        resolved = RemoteAction.from_name(action)
        params = dict(params or {})
        resolved.build_request(params)
        return resolved, params

    def _classify(self, error: Exception) -> _Outcome:
        if isinstance(error, httpx.TimeoutException):
            return _Outcome(TIMEOUT, retryable=True, trips_breaker=True)

        if isinstance(error, httpx.HTTPStatusError):
            status = error.response.status_code
            if status in self.retry_config.retry_on:
                return _Outcome(
                    FAILURE,
                    retryable=True,
                    trips_breaker=True,
                    retry_after=error.response.headers.get("Retry-After"),
                )
            # GitHub answered with an explicit rejection, so it is reachable.
            return _Outcome(FAILURE, retryable=False, trips_breaker=False)

        if isinstance(error, httpx.TransportError):
            return _Outcome(FAILURE, retryable=True, trips_breaker=True)

        return _Outcome(FAILURE, retryable=False, trips_breaker=True)

    def _record_success(self, probe: bool) -> None:
        self._stats.record(SUCCESS)
        self.breaker.record_success(probe)

    def _record_failure(self, outcome: _Outcome, probe: bool) -> None:
        self._stats.record(outcome.kind)
        if outcome.trips_breaker:
            self.breaker.record_failure(probe)
        else:
            self.breaker.record_success(probe)

    def _should_retry(self, outcome: _Outcome, attempt: int) -> bool:
        if attempt >= self.retry_config.max_retries:
            return False
        return outcome.retryable

    def _get_backoff_time(self, attempt: int, retry_after: str | None) -> float:
        """
        Calculate backoff time for retry.

        Exponential backoff from ``min_timeout`` with jitter, respecting the
        Retry-After header if present. Both are capped at ``max_backoff``.
        """
        if retry_after and self.retry_config.respect_retry_after:
            try:
                requested = float(retry_after)
            except ValueError:
                requested = math.nan  # Fall through to exponential backoff
            if math.isfinite(requested):
                return min(max(requested, 0.0), self.retry_config.max_backoff)

        base_wait = self.retry_config.min_timeout * (
            self.retry_config.backoff_factor ** attempt
        )

        jitter_range = base_wait * self.retry_config.jitter
        wait_time = base_wait + random.uniform(-jitter_range, jitter_range)

        return min(wait_time, self.retry_config.max_backoff)

    def _raise_exhausted(
        self,
        action: RemoteAction,
        outcome: _Outcome,
        error: Exception,
        attempts: int,
    ) -> None:
        if outcome.kind == TIMEOUT:
            raise CommandTimeoutError(action.name, attempts) from error
        raise UpstreamError(action.name, error) from error

    def _log_retry(
        self, action: RemoteAction, attempt: int, wait_time: float, error: Exception
    ) -> None:
        _logger.info(
            "%s attempt %d failed (%s), retrying in %.2fs",
            action.name,
            attempt + 1,
            type(error).__name__,
            wait_time,
        )


class CommandExecutor(_ExecutorBase):
    """
    Synchronous retry + circuit breaker + statistics middleware.

    Example:
        ```python
        transport = HTTPTransport()
        executor = CommandExecutor(transport.execute)
        repo = executor.run_command(
            RemoteAction.GET_REPO, {"user": "octocat", "repo": "hello"}, token
        )
        ```
    """

    def __init__(
        self,
        execute: ExecuteFn,
        retry_config: RetryConfig | None = None,
        breaker: CircuitBreaker | None = None,
        stats: CommandStats | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        super().__init__(retry_config, breaker, stats)
        self._execute = execute
        self._sleep = sleep

    def run_command(
        self,
        action: "RemoteAction | str",
        params: dict[str, Any] | None = None,
        credential: str | None = None,
    ) -> dict[str, Any]:
        """
        Run ``action`` with retries under the circuit breaker.

        Args:
            action: A RemoteAction or the name of one
            params: Path placeholders plus query/body fields
            credential: OAuth token for this call only

        Returns:
            Parsed JSON response

        Raises:
            ValueError: Unknown action or missing path params
            BreakerOpenError: The breaker rejected an attempt
            CommandTimeoutError: Retries exhausted on timeouts
            UpstreamError: Any other remote error
        """
        resolved, params = self._prepare(action, params)

        for attempt in range(self.retry_config.max_retries + 1):
            probe = self.breaker.before_attempt(resolved.name)
            try:
                result = self._execute(resolved, params, credential)
            except Exception as error:
                outcome = self._classify(error)
                self._record_failure(outcome, probe)

                if not self._should_retry(outcome, attempt):
                    self._raise_exhausted(resolved, outcome, error, attempt + 1)

                wait_time = self._get_backoff_time(attempt, outcome.retry_after)
                self._log_retry(resolved, attempt, wait_time, error)
                self._sleep(wait_time)
                continue
            except BaseException:
                # Cancelled or interrupted mid-attempt: no outcome to record.
                if probe:
                    self.breaker.release_probe()
                raise

            self._record_success(probe)
            return result

        raise AssertionError("unreachable")  # pragma: no cover


class AsyncCommandExecutor(_ExecutorBase):
    """Asynchronous counterpart of :class:`CommandExecutor`."""

    def __init__(
        self,
        execute: AsyncExecuteFn,
        retry_config: RetryConfig | None = None,
        breaker: CircuitBreaker | None = None,
        stats: CommandStats | None = None,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        super().__init__(retry_config, breaker, stats)
        self._execute = execute
        self._sleep = sleep

    async def run_command(
        self,
        action: "RemoteAction | str",
        params: dict[str, Any] | None = None,
        credential: str | None = None,
    ) -> dict[str, Any]:
        """Run ``action`` with retries under the circuit breaker (see CommandExecutor)."""
        resolved, params = self._prepare(action, params)

        for attempt in range(self.retry_config.max_retries + 1):
            probe = self.breaker.before_attempt(resolved.name)
            try:
                result = await self._execute(resolved, params, credential)
            except Exception as error:
                outcome = self._classify(error)
                self._record_failure(outcome, probe)

                if not self._should_retry(outcome, attempt):
                    self._raise_exhausted(resolved, outcome, error, attempt + 1)

                wait_time = self._get_backoff_time(attempt, outcome.retry_after)
                self._log_retry(resolved, attempt, wait_time, error)
                await self._sleep(wait_time)
                continue
            except BaseException:
                # Cancelled or interrupted mid-attempt: no outcome to record.
                if probe:
                    self.breaker.release_probe()
                raise

            self._record_success(probe)
            return result

        raise AssertionError("unreachable")  # pragma: no cover
