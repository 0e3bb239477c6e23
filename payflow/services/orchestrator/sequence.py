"""Process-wide local payment id sequence.

Ids are a correlation aid, not durable transaction ids: the counter lives in
memory and starts over when the process restarts.
"""

import threading


class SequenceCounter:
    """Atomic, strictly increasing integer sequence."""

    def __init__(self, start: int = 1) -> None:
        self._value = start
        self._lock = threading.Lock()

    def next(self) -> int:
        """Increment and return the new value."""

        with self._lock:
            self._value += 1
            return self._value

    @property
    def current(self) -> int:
        with self._lock:
            return self._value


payment_sequence = SequenceCounter()
