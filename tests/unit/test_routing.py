"""Unit tests for request line routing."""

from pathlib import Path
from unittest.mock import patch

import pytest

from lollipop.domain.response_builders import ABOUT_PAGE
from lollipop.pipeline.router import route_request
from tests.utils.site import FALLBACK_HTML, INDEX_HTML, SCRIPT


def test_empty_request_yields_internal_error(site_dir: Path):
    """No line at all produces the fixed 500 response."""

    response = route_request("", str(site_dir))
    assert response.to_bytes() == (
        b"HTTP/1.1 500 Internal Server Error\r\n\r\n500 Internal Server Error"
    )


def test_index_request_serves_index(site_dir: Path):
    """``GET / `` maps to index.html."""

    response = route_request("GET / HTTP/1.1\r\nHost: x\r\n\r\n", str(site_dir))
    assert response.status_line == "HTTP/1.1 200 OK"
    assert response.body == INDEX_HTML


def test_about_request_never_touches_filesystem(tmp_path: Path):
    """The About page is served even when the directory is empty."""

    with patch("lollipop.handlers.file_handler.Path.read_bytes") as read_bytes:
        response = route_request("GET /about HTTP/1.1\r\n\r\n", str(tmp_path))
    read_bytes.assert_not_called()
    assert response.status_line == "HTTP/1.1 200 OK"
    assert response.headers == {"Content-Type": "text/html"}
    assert response.body == ABOUT_PAGE


def test_other_paths_resolve_against_directory(site_dir: Path):
    """Any other line maps its second token onto the directory."""

    response = route_request("GET /app.js HTTP/1.1", str(site_dir))
    assert response.headers == {"Content-Type": "application/javascript"}
    assert response.body == SCRIPT


@pytest.mark.parametrize(
    "text",
    [
        "GET /about?x=1 HTTP/1.1",
        "GET /aboutus HTTP/1.1",
        "DELETE /missing HTTP/1.1",
        "\r\nGET / HTTP/1.1",
        "GET",
    ],
)
def test_unmatched_lines_fall_back(site_dir: Path, text: str):
    """Lines that match no document end on the fallback file with 200 OK."""

    response = route_request(text, str(site_dir))
    assert response.status_line == "HTTP/1.1 200 OK"
    assert response.body == FALLBACK_HTML


def test_only_first_line_is_inspected(site_dir: Path):
    """Later lines never influence routing."""

    text = "GET /app.js HTTP/1.1\r\nGET /about HTTP/1.1\r\n\r\n"
    assert route_request(text, str(site_dir)).body == SCRIPT
