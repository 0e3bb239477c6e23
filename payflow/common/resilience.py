"""Circuit breaker guarding calls to one downstream provider.

The breaker counts failed calls (after transport-level retries) inside a
rolling window. Once `failure_threshold` failures land in the window it opens
and rejects calls until `cooldown_seconds` have passed; the next call is then
let through as a trial. A successful trial closes the breaker, a failed one
re-opens it.
"""

import threading
import time
from collections import deque
from typing import Callable

from payflow.common.logging import logger


CLOSED = "closed"
OPEN = "open"
HALF_OPEN = "half_open"


class CircuitBreaker:
    """Failure-window circuit breaker, safe to share across tasks and threads."""

    def __init__(
        self,
        name: str,
        failure_threshold: int = 5,
        window_seconds: float = 30.0,
        cooldown_seconds: float = 30.0,
        clock: Callable[[], float] = time.monotonic,
        on_open: Callable[[str], None] | None = None,
    ) -> None:
        self.name = name
        self.failure_threshold = failure_threshold
        self.window_seconds = window_seconds
        self.cooldown_seconds = cooldown_seconds
        self._clock = clock
        self._on_open = on_open
        self._lock = threading.Lock()
        self._failures: deque[float] = deque()
        self._state = CLOSED
        self._opened_at = 0.0

    @property
    def state(self) -> str:
        with self._lock:
            return self._state

    def allow_request(self) -> bool:
        """Return whether a call may proceed, moving OPEN -> HALF_OPEN after cooldown."""

        with self._lock:
            if self._state == CLOSED:
                return True
            now = self._clock()
            # One trial per cooldown; a trial that never reports back (cancelled)
            # is replaced after another cooldown.
            if now - self._opened_at < self.cooldown_seconds:
                return False
            if self._state == OPEN:
                logger.info("circuit_breaker_half_open provider=%s", self.name)
            self._state = HALF_OPEN
            self._opened_at = now
            return True

    def record_success(self) -> None:
        with self._lock:
            if self._state != CLOSED:
                logger.info("circuit_breaker_closed provider=%s", self.name)
            self._state = CLOSED
            self._failures.clear()

    def record_failure(self) -> None:
        with self._lock:
            now = self._clock()
            if self._state == HALF_OPEN:
                self._open(now)
                return
            self._failures.append(now)
            while self._failures and now - self._failures[0] > self.window_seconds:
                self._failures.popleft()
            if self._state == CLOSED and len(self._failures) >= self.failure_threshold:
                self._open(now)

    def _open(self, now: float) -> None:
        self._state = OPEN
        self._opened_at = now
        self._failures.clear()
        logger.warning(
            "circuit_breaker_opened provider=%s cooldown_s=%s",
            self.name,
            self.cooldown_seconds,
        )
        if self._on_open is not None:
            self._on_open(self.name)
