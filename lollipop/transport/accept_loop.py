"""Main connection acceptance loop."""

import logging
import socket
import threading
from typing import Optional

from lollipop.bootstrap.config import ACCEPT_POLL_SECONDS, ServerConfig
from lollipop.bootstrap.socket_factory import create_server_socket
from lollipop.domain.connection_id import ConnectionLoggerAdapter, format_client
from lollipop.lifecycle.state import ServerLifecycle
from lollipop.transport.connection_limiter import ConnectionLimiter
from lollipop.transport.context import WorkerContext
from lollipop.transport.worker import handle_client

ACCEPT_LOGGER = ConnectionLoggerAdapter(
    logging.getLogger("lollipop.transport.accept"), {}
)


def _admit(
    client_socket: socket.socket, client: str, context: WorkerContext
) -> bool:
    """Take an admission slot, polling so a pending shutdown is noticed."""
    limiter = context.connection_limiter
    lifecycle = context.lifecycle
    if limiter is None:
        return True
    while not limiter.acquire(timeout=ACCEPT_POLL_SECONDS):
        if lifecycle is not None and lifecycle.should_stop():
            ACCEPT_LOGGER.info(
                "Queued connection dropped by shutdown",
                extra={"event": "admission_cancelled", "client": client},
            )
            client_socket.close()
            return False
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Connection admitted",
            extra={
                "event": "connection_admitted",
                "client": client,
                "active_connections": limiter.active,
                "max_connections": limiter.max_connections,
            },
        )
    return True


def dispatch_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> Optional[threading.Thread]:
    """Wait for a free slot, then hand the connection to its own thread.

    Returns ``None`` when shutdown began while the connection was queued.
    """
    client = format_client(client_address)
    if ACCEPT_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ACCEPT_LOGGER.debug(
            "Client connection accepted",
            extra={"event": "client_accepted", "client": client},
        )
    if not _admit(client_socket, client, context):
        return None

    thread = threading.Thread(
        target=handle_client,
        args=(client_socket, client_address, context),
        daemon=False,
    )
    lifecycle = context.lifecycle
    if lifecycle is not None:
        lifecycle.register_worker(thread, client_socket)
    try:
        thread.start()
    except RuntimeError:
        if lifecycle is not None:
            lifecycle.cleanup_worker(thread)
        if context.connection_limiter is not None:
            context.connection_limiter.release()
        client_socket.close()
        raise
    return thread


def run_server(config: ServerConfig, lifecycle: ServerLifecycle) -> None:
    """Accept connections until the lifecycle asks the server to stop."""
    server_socket = create_server_socket(config)

    ACCEPT_LOGGER.info(
        "Server listening for connections",
        extra={
            "event": "server_listening",
            "host": config.host,
            "port": config.port,
            "directory": config.directory,
            "max_connections": config.max_connections,
        },
    )

    context = WorkerContext(
        config=config,
        connection_limiter=ConnectionLimiter(config.max_connections),
        lifecycle=lifecycle,
    )

    try:
        while not lifecycle.should_stop():
            try:
                client_socket, client_address = server_socket.accept()
            except socket.timeout:
                continue
            except OSError as error:
                if lifecycle.should_stop():
                    break
                ACCEPT_LOGGER.error(
                    "Socket accept failed",
                    extra={
                        "event": "accept_error",
                        "error_type": type(error).__name__,
                        "error": str(error),
                    },
                )
                continue

            try:
                dispatch_client(client_socket, client_address, context)
            except RuntimeError as error:
                ACCEPT_LOGGER.error(
                    "Failed to start worker thread",
                    extra={
                        "event": "dispatch_error",
                        "error_type": type(error).__name__,
                        "error": str(error),
                    },
                )
    finally:
        server_socket.close()
        ACCEPT_LOGGER.info(
            "Waiting for active connections to complete",
            extra={
                "event": "shutdown_waiting",
                "grace_seconds": config.shutdown_grace_seconds,
            },
        )
        lifecycle.wait_for_workers(config.shutdown_grace_seconds)
        ACCEPT_LOGGER.info("Server shutdown complete", extra={"event": "server_stopped"})
