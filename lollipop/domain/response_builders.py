"""Pure HTTP response builders."""

from lollipop.domain.http_types import HttpResponse

ABOUT_PAGE = (
    b"<html><head><title>About</title></head><body>"
    b"<h1>About Us</h1><p>This server is powered by Python.</p>"
    b"</body></html>"
)
BUILTIN_NOT_FOUND_BODY = b"404 Not Found"
INTERNAL_ERROR_BODY = b"500 Internal Server Error"

CONTENT_TYPES = (
    (".css", "text/css"),
    (".js", "application/javascript"),
)
DEFAULT_CONTENT_TYPE = "text/html"


def content_type_for_path(file_path: str) -> str:
    """Infer a Content-Type purely from the file suffix."""
    for suffix, content_type in CONTENT_TYPES:
        if file_path.endswith(suffix):
            return content_type
    return DEFAULT_CONTENT_TYPE


def ok_response(content_type: str, body: bytes) -> HttpResponse:
    """Return a 200 OK response carrying a single Content-Type header."""
    return HttpResponse("HTTP/1.1 200 OK", {"Content-Type": content_type}, body)


def about_response() -> HttpResponse:
    """Return the in-memory About page."""
    return ok_response(DEFAULT_CONTENT_TYPE, ABOUT_PAGE)


def builtin_not_found_response() -> HttpResponse:
    """Terminal payload used when even the fallback document is unreadable.

    The status line stays ``200 OK`` to match the fallback document path.
    """
    return ok_response(DEFAULT_CONTENT_TYPE, BUILTIN_NOT_FOUND_BODY)


def internal_error_response() -> HttpResponse:
    """Return the fixed 500 response used for empty requests."""
    return HttpResponse("HTTP/1.1 500 Internal Server Error", {}, INTERNAL_ERROR_BODY)
