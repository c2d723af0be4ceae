"""
Circuit breaker and command statistics.

Both objects are shared by every command an executor runs and may be touched
from several threads (sync facade) or tasks (async facade), so all state
changes happen under a ``threading.Lock``. The lock is never held while a
request is in flight.
"""

import threading
import time
from collections.abc import Callable

from scm_github.exceptions import BreakerOpenError
from scm_github.logging import log_breaker_transition
from scm_github.transport import BreakerConfig
from scm_github.types.stats import StatsSnapshot

CLOSED = "closed"
OPEN = "open"
HALF_OPEN = "half_open"


class CircuitBreaker:
    """
    Closed -> open after ``failure_threshold`` consecutive failing attempts.
    Open -> half-open once ``reset_timeout`` has elapsed; exactly one probe is
    admitted while half-open. Probe success closes the breaker, probe failure
    reopens it for another ``reset_timeout``.
    """

    def __init__(
        self,
        config: BreakerConfig | None = None,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.config = config or BreakerConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._state = CLOSED
        self._consecutive_failures = 0
        self._opened_at = 0.0
        self._probe_in_flight = False

    @property
    def state(self) -> str:
        with self._lock:
            return self._current_state()

    @property
    def is_closed(self) -> bool:
        return self.state == CLOSED

    def before_attempt(self, action: str) -> bool:
        """
        Admit or reject one attempt.

        Returns:
            True when the attempt is the single half-open probe; the caller
            must then report its outcome with ``probe=True`` or hand the slot
            back with :meth:`release_probe`.

        Raises:
            BreakerOpenError: While open, or while a half-open probe is running
        """
        with self._lock:
            state = self._current_state()

            if state == CLOSED:
                return False

            if state == HALF_OPEN and not self._probe_in_flight:
                self._transition(HALF_OPEN)
                self._probe_in_flight = True
                return True

            retry_in = max(
                0.0, self._opened_at + self.config.reset_timeout - self._clock()
            )
            raise BreakerOpenError(action, retry_in)

    def record_success(self, probe: bool = False) -> None:
        with self._lock:
            if probe:
                self._probe_in_flight = False
                self._consecutive_failures = 0
                self._transition(CLOSED)
            elif self._state == CLOSED:
                self._consecutive_failures = 0
            # Late successes from attempts admitted before the breaker
            # opened do not close it; only the probe can.

    def record_failure(self, probe: bool = False) -> None:
        with self._lock:
            if probe:
                self._probe_in_flight = False
                self._consecutive_failures += 1
                self._open()
            elif self._state == CLOSED:
                self._consecutive_failures += 1
                if self._consecutive_failures >= self.config.failure_threshold:
                    self._open()

    def release_probe(self) -> None:
        """Free the half-open slot of a probe that ended without an outcome."""
        with self._lock:
            self._probe_in_flight = False

    def reset(self) -> None:
        with self._lock:
            self._consecutive_failures = 0
            self._probe_in_flight = False
            if self._state != CLOSED:
                self._transition(CLOSED)

    def _open(self) -> None:
        self._opened_at = self._clock()
        self._transition(OPEN)

    def _current_state(self) -> str:
        # Open only lapses into half-open lazily, on the next look.
        if (
            self._state == OPEN
            and self._clock() - self._opened_at >= self.config.reset_timeout
        ):
            return HALF_OPEN
        return self._state

    def _transition(self, new_state: str) -> None:
        if new_state == self._state:
            return
        old_state, self._state = self._state, new_state
        log_breaker_transition(old_state, new_state, self._consecutive_failures)


class CommandStats:
    """Process-lifetime attempt counters."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self.total = 0
        self.timeouts = 0
        self.success = 0
        self.failure = 0

    def record(self, outcome: str) -> None:
        """Count one attempt with outcome ``success``, ``timeout`` or ``failure``."""
        with self._lock:
            self.total += 1
            if outcome == "success":
                self.success += 1
            elif outcome == "timeout":
                self.timeouts += 1
            else:
                self.failure += 1

    def snapshot(self, is_closed: bool) -> StatsSnapshot:
        with self._lock:
            return StatsSnapshot(
                total=self.total,
                timeouts=self.timeouts,
                success=self.success,
                failure=self.failure,
                is_closed=is_closed,
            )
