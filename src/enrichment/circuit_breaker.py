"""Circuit breaker guarding the enrichment oracle.

Same CLOSED → OPEN → HALF_OPEN → CLOSED state machine used for the other
external calls, split into explicit ``allow`` / ``record_*`` steps so the
caller decides what counts as a failure (exceptions and unusable
responses alike).

Usage:
    breaker = CircuitBreaker(failure_threshold=5, recovery_timeout=60.0)
    if not breaker.allow():
        raise CircuitOpenError(breaker.name)
    ...
    breaker.record_success()  # or breaker.record_failure()
"""

import enum
import logging
import time
from typing import Callable

logger = logging.getLogger(__name__)


class CircuitState(enum.Enum):
    """Circuit breaker states."""

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"


class CircuitOpenError(Exception):
    """Raised when the oracle is called through an open circuit."""


class CircuitBreaker:
    """Tracks consecutive oracle failures and short-circuits while open.

    - CLOSED: Calls allowed. Consecutive failures counted.
    - OPEN: Calls refused until recovery_timeout has elapsed since the
      last failure, then one probe is allowed (HALF_OPEN).
    - HALF_OPEN: Probe success → CLOSED, probe failure → OPEN.

    Args:
        failure_threshold: Consecutive failures before opening circuit.
        recovery_timeout: Seconds before attempting a recovery probe.
        name: Name used in log messages and errors.
        clock: Monotonic time source (injectable for tests).
    """

    def __init__(
        self,
        failure_threshold: int = 5,
        recovery_timeout: float = 60.0,
        name: str = "enrichment",
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._failure_threshold = failure_threshold
        self._recovery_timeout = recovery_timeout
        self._clock = clock
        self.name = name
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0
        self._opened_at = 0.0

    @property
    def state(self) -> CircuitState:
        """Current circuit state."""
        return self._state

    @property
    def consecutive_failures(self) -> int:
        """Number of consecutive failures."""
        return self._consecutive_failures

    def allow(self) -> bool:
        """Whether a call may go out now; may move OPEN → HALF_OPEN."""
        if self._state != CircuitState.OPEN:
            return True
        if self._clock() - self._opened_at < self._recovery_timeout:
            return False
        self._state = CircuitState.HALF_OPEN
        logger.info("Circuit breaker %s: OPEN → HALF_OPEN (recovery probe)", self.name)
        return True

    def record_success(self) -> None:
        if self._state == CircuitState.HALF_OPEN:
            logger.info("Circuit breaker %s: HALF_OPEN → CLOSED (probe succeeded)", self.name)
        self._state = CircuitState.CLOSED
        self._consecutive_failures = 0

    def record_failure(self) -> None:
        self._consecutive_failures += 1

        if self._state == CircuitState.HALF_OPEN:
            self._open()
            logger.warning("Circuit breaker %s: HALF_OPEN → OPEN (probe failed)", self.name)
        elif (
            self._state == CircuitState.CLOSED
            and self._consecutive_failures >= self._failure_threshold
        ):
            self._open()
            logger.warning(
                "Circuit breaker %s: CLOSED → OPEN after %d failures",
                self.name,
                self._consecutive_failures,
            )

    def _open(self) -> None:
        self._state = CircuitState.OPEN
        self._opened_at = self._clock()
