"""Request line extraction."""

from typing import Optional

from lollipop.domain.http_types import RequestLine


def decode_request(data: bytes) -> str:
    """Decode raw request bytes, replacing invalid UTF-8 sequences."""
    return data.decode("utf-8", errors="replace")


def first_request_line(text: str) -> Optional[str]:
    """Return the first line of ``text`` or None when nothing was received."""
    if not text:
        return None
    line, newline, _ = text.partition("\n")
    if newline and line.endswith("\r"):
        line = line[:-1]
    return line


def parse_request_line(line: str) -> RequestLine:
    """Split a request line into method and path tokens.

    Only whitespace splitting is applied; a missing path defaults to ``/``.
    """
    tokens = line.split()
    method = tokens[0] if tokens else ""
    path = tokens[1] if len(tokens) > 1 else "/"
    return RequestLine(raw=line, method=method, path=path)
