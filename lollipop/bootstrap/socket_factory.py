"""Listening socket creation."""

import logging
import socket
import sys

from lollipop.bootstrap.config import ACCEPT_POLL_SECONDS, ServerConfig
from lollipop.domain.connection_id import ConnectionLoggerAdapter

SOCKET_LOGGER = ConnectionLoggerAdapter(logging.getLogger("lollipop.socket"), {})


def create_server_socket(config: ServerConfig) -> socket.socket:
    """Bind the listening socket, exiting the process when binding fails."""
    try:
        server_socket = socket.create_server((config.host, config.port))
    except OSError as error:
        SOCKET_LOGGER.critical(
            "Failed to bind listening socket",
            extra={
                "event": "bind_failed",
                "host": config.host,
                "port": config.port,
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )
        sys.exit(1)
    # Only the listener polls; accepted sockets stay blocking.
    server_socket.settimeout(ACCEPT_POLL_SECONDS)
    return server_socket
