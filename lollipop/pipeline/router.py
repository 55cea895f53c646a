"""Request routing logic."""

import logging

from lollipop.domain.connection_id import ConnectionLoggerAdapter
from lollipop.domain.http_types import HttpResponse
from lollipop.domain.response_builders import about_response, internal_error_response
from lollipop.handlers.file_handler import document_path, index_response, resolve_file
from lollipop.pipeline.parser import first_request_line, parse_request_line

ROUTER_LOGGER = ConnectionLoggerAdapter(
    logging.getLogger("lollipop.pipeline.router"), {}
)

INDEX_PREFIX = "GET / "
ABOUT_PREFIX = "GET /about "


def _log_route(route: str) -> None:
    if ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ROUTER_LOGGER.debug(
            "Route matched", extra={"event": "route_matched", "route": route}
        )


def route_request(text: str, directory: str) -> HttpResponse:
    """Route decoded request text to the index, About page or a file."""
    line = first_request_line(text)
    if line is None:
        ROUTER_LOGGER.warning(
            "Empty request received", extra={"event": "empty_request"}
        )
        return internal_error_response()

    if line.startswith(INDEX_PREFIX):
        _log_route("/")
        return index_response(directory)

    if line.startswith(ABOUT_PREFIX):
        _log_route("/about")
        return about_response()

    request_line = parse_request_line(line)
    if ROUTER_LOGGER.logger.isEnabledFor(logging.DEBUG):
        ROUTER_LOGGER.debug(
            "Request line parsed",
            extra={
                "event": "request_line_parsed",
                "method": request_line.method,
                "path": request_line.path,
            },
        )
    _log_route("file")
    return resolve_file(document_path(directory, request_line.path), directory)
