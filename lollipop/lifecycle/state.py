"""Server lifecycle state management."""

import logging
import socket
import threading
import time
from typing import Optional

from lollipop.domain.connection_id import ConnectionLoggerAdapter

LIFECYCLE_LOGGER = ConnectionLoggerAdapter(logging.getLogger("lollipop.lifecycle"), {})

# How long aborted workers get to unwind once their sockets are shut down.
ABORT_JOIN_SECONDS = 1.0


class ServerLifecycle:
    """Tracks the stop flag and the workers still handling connections.

    Each worker is registered with the socket it serves so a shutdown that
    outlasts its grace period can unblock workers stuck on silent peers.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._stop_event = threading.Event()
        self._workers: dict[threading.Thread, Optional[socket.socket]] = {}

    def should_stop(self) -> bool:
        """Check if the server should stop accepting new connections."""
        return self._stop_event.is_set()

    def begin_shutdown(self) -> None:
        """Ask the accept loop to stop."""
        self._stop_event.set()
        LIFECYCLE_LOGGER.info("Beginning shutdown", extra={"event": "shutdown_started"})

    def register_worker(
        self, thread: threading.Thread, client_socket: Optional[socket.socket] = None
    ) -> None:
        with self._lock:
            self._workers[thread] = client_socket

    def cleanup_worker(self, thread: threading.Thread) -> None:
        with self._lock:
            self._workers.pop(thread, None)

    def has_worker(self, thread: threading.Thread) -> bool:
        with self._lock:
            return thread in self._workers

    def active_worker_count(self) -> int:
        """Return the number of currently tracked worker threads."""
        with self._lock:
            return len(self._workers)

    def _live_workers(self) -> list[threading.Thread]:
        with self._lock:
            self._workers = {
                thread: sock
                for thread, sock in self._workers.items()
                if thread.is_alive()
            }
            return list(self._workers)

    def abort_connections(self) -> int:
        """Shut down every registered client socket in both directions.

        Blocked reads and writes on those sockets return at once. Workers
        deregister before closing their socket, so only open sockets are
        touched here.
        """
        aborted = 0
        with self._lock:
            for client_socket in self._workers.values():
                if client_socket is None:
                    continue
                try:
                    client_socket.shutdown(socket.SHUT_RDWR)
                except OSError:
                    continue
                aborted += 1
        LIFECYCLE_LOGGER.warning(
            "Aborted open client connections",
            extra={"event": "connections_aborted", "aborted_connections": aborted},
        )
        return aborted

    def _join_until(self, deadline: float) -> bool:
        while True:
            active_workers = self._live_workers()
            if not active_workers:
                return True
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                return False
            for worker in active_workers:
                worker.join(timeout=min(0.1, remaining))
                if time.monotonic() >= deadline:
                    break

    def wait_for_workers(self, timeout: float) -> bool:
        """Wait for all worker threads to complete within the timeout.

        Workers still running when the timeout expires have their sockets
        aborted and get a short final join. Returns ``True`` only when every
        worker finished inside the grace period.
        """
        if self._join_until(time.monotonic() + timeout):
            return True
        LIFECYCLE_LOGGER.warning(
            "Shutdown timeout exceeded",
            extra={
                "event": "shutdown_timeout",
                "remaining_workers": len(self._live_workers()),
            },
        )
        self.abort_connections()
        self._join_until(time.monotonic() + ABORT_JOIN_SECONDS)
        return False
