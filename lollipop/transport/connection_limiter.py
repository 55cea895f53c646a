"""Connection concurrency limiting logic."""

import threading
from contextlib import contextmanager
from typing import Iterator, Optional


class ConnectionLimiter:
    """Bounds the number of connections handled at the same time.

    ``acquire`` blocks until a slot is free and takes it under the same lock,
    so the live count never exceeds ``max_connections``. A limit of zero or
    less disables the bound while still tracking the count.
    """

    def __init__(self, max_connections: int) -> None:
        self._max_connections = max(0, max_connections)
        self._condition = threading.Condition()
        self._active = 0

    @property
    def max_connections(self) -> int:
        return self._max_connections

    @property
    def active(self) -> int:
        """Number of slots currently held."""
        with self._condition:
            return self._active

    def _has_capacity(self) -> bool:
        return not self._max_connections or self._active < self._max_connections

    def acquire(self, timeout: Optional[float] = None) -> bool:
        """Take a slot, waiting up to ``timeout`` seconds (forever if None).

        Returns ``False`` when the wait timed out without a slot.
        """
        with self._condition:
            if not self._condition.wait_for(self._has_capacity, timeout):
                return False
            self._active += 1
            return True

    def release(self) -> None:
        """Return a previously acquired slot."""
        with self._condition:
            if self._active > 0:
                self._active -= 1
            self._condition.notify()

    @contextmanager
    def slot(self) -> Iterator[None]:
        """Hold a slot for the duration of the block."""
        self.acquire()
        try:
            yield
        finally:
            self.release()
