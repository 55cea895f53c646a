"""Worker thread logic for handling individual client connections."""

import logging
import socket
import threading

from lollipop.domain.connection_id import (
    ConnectionLoggerAdapter,
    bind_connection,
    unbind_connection,
)
from lollipop.pipeline.io import receive_request, send_response
from lollipop.pipeline.parser import decode_request
from lollipop.pipeline.router import route_request
from lollipop.transport.context import WorkerContext

WORKER_LOGGER = ConnectionLoggerAdapter(
    logging.getLogger("lollipop.transport.worker"), {}
)


def _serve(client_socket: socket.socket, context: WorkerContext) -> None:
    config = context.config
    data = receive_request(client_socket, config.buffer_size)
    WORKER_LOGGER.debug(
        "Request received", extra={"event": "request_received", "bytes_in": len(data)}
    )

    response = route_request(decode_request(data), config.directory)
    payload = response.to_bytes(lossy=config.lossy_bodies)
    written = send_response(client_socket, payload)
    WORKER_LOGGER.info(
        "Response sent",
        extra={
            "event": "response_sent",
            "status": response.status_line,
            "bytes_out": written,
        },
    )


def _close_socket(client_socket: socket.socket) -> None:
    try:
        client_socket.shutdown(socket.SHUT_WR)
    except OSError:
        pass
    client_socket.close()
    WORKER_LOGGER.debug("Socket closed", extra={"event": "socket_closed"})


def handle_client(
    client_socket: socket.socket,
    client_address: tuple[str, int],
    context: WorkerContext,
) -> None:
    """Serve one request on ``client_socket`` and release everything it holds.

    The admission slot taken by the acceptor is returned here on every path.
    """
    current_thread = threading.current_thread()
    lifecycle = context.lifecycle
    bind_connection(client_address)

    try:
        if context.config.socket_timeout > 0:
            client_socket.settimeout(context.config.socket_timeout)
        _serve(client_socket, context)
    except OSError as error:
        WORKER_LOGGER.error(
            "Error handling client connection",
            extra={
                "event": "connection_error",
                "error_type": type(error).__name__,
                "error": str(error),
            },
        )
    except Exception as error:  # pylint: disable=broad-except
        WORKER_LOGGER.error(
            "Unexpected error in worker",
            extra={
                "event": "worker_error",
                "error_type": type(error).__name__,
                "error": str(error),
            },
            exc_info=True,
        )
    finally:
        if context.connection_limiter is not None:
            context.connection_limiter.release()
        if lifecycle is not None:
            lifecycle.cleanup_worker(current_thread)
        _close_socket(client_socket)
        unbind_connection()
