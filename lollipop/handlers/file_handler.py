"""File serving handlers."""

import logging
from pathlib import Path

from lollipop.bootstrap.config import FALLBACK_DOCUMENT, INDEX_DOCUMENT
from lollipop.domain.connection_id import ConnectionLoggerAdapter
from lollipop.domain.http_types import HttpResponse
from lollipop.domain.response_builders import (
    builtin_not_found_response,
    content_type_for_path,
    ok_response,
)

FILE_LOGGER = ConnectionLoggerAdapter(logging.getLogger("lollipop.handlers.file"), {})


def document_path(directory: str, request_path: str) -> str:
    """Join the served directory and a request path without normalizing it."""
    return f"{directory}{request_path}"


def _read_document(file_path: str) -> HttpResponse:
    content = Path(file_path).read_bytes()
    if FILE_LOGGER.logger.isEnabledFor(logging.DEBUG):
        FILE_LOGGER.debug(
            "File read complete",
            extra={
                "event": "file_read_complete",
                "path": file_path,
                "bytes_out": len(content),
            },
        )
    return ok_response(content_type_for_path(file_path), content)


def resolve_file(file_path: str, directory: str) -> HttpResponse:
    """Serve ``file_path``, falling back to the directory's 404 document.

    Any read failure on the requested file triggers exactly one read of
    ``<directory>/404.html``. If that also fails a built-in payload is
    returned. Every outcome reports ``200 OK``.
    """
    try:
        return _read_document(file_path)
    except OSError as error:
        FILE_LOGGER.info(
            "File read failed, serving fallback document",
            extra={
                "event": "file_read_failed",
                "path": file_path,
                "error_type": type(error).__name__,
            },
        )

    fallback_path = f"{directory}/{FALLBACK_DOCUMENT}"
    try:
        return _read_document(fallback_path)
    except OSError as error:
        FILE_LOGGER.warning(
            "Fallback document unreadable, serving built-in payload",
            extra={
                "event": "fallback_read_failed",
                "path": fallback_path,
                "error_type": type(error).__name__,
            },
        )
    return builtin_not_found_response()


def index_response(directory: str) -> HttpResponse:
    """Serve the directory's index document."""
    return resolve_file(f"{directory}/{INDEX_DOCUMENT}", directory)
