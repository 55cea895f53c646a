"""Socket input/output for a single request/response exchange."""

import logging
import socket

from lollipop.domain.connection_id import ConnectionLoggerAdapter

IO_LOGGER = ConnectionLoggerAdapter(logging.getLogger("lollipop.io"), {})


def receive_request(client_socket: socket.socket, buffer_size: int) -> bytes:
    """Read until the peer stops sending or ``buffer_size`` bytes arrive.

    Anything beyond ``buffer_size`` is left unread on the socket.
    """
    buffer = bytearray(buffer_size)
    view = memoryview(buffer)
    total_read = 0
    while total_read < buffer_size:
        bytes_read = client_socket.recv_into(view[total_read:])
        if bytes_read == 0:
            break
        total_read += bytes_read
    if total_read >= buffer_size:
        IO_LOGGER.debug(
            "Request truncated at buffer size",
            extra={"event": "request_truncated", "bytes_in": total_read},
        )
    return bytes(buffer[:total_read])


def send_response(client_socket: socket.socket, payload: bytes) -> int:
    """Write ``payload`` tolerating partial writes; return bytes written.

    A send that makes no progress ends the loop early.
    """
    view = memoryview(payload)
    written = 0
    while written < len(payload):
        sent = client_socket.send(view[written:])
        if sent == 0:
            IO_LOGGER.warning(
                "Connection stopped accepting data",
                extra={
                    "event": "response_incomplete",
                    "bytes_out": written,
                },
            )
            break
        written += sent
    return written
