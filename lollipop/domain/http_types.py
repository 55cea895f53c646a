"""Shared HTTP type definitions to avoid circular imports."""

from dataclasses import dataclass, field


@dataclass
class RequestLine:
    """Method and path tokens taken from the first line of a request."""

    raw: str
    method: str
    path: str


@dataclass
class HttpResponse:
    """Represents an HTTP response to be sent to a client."""

    status_line: str
    headers: dict[str, str] = field(default_factory=dict)
    body: bytes = b""

    def to_bytes(self, lossy: bool = False) -> bytes:
        """Serialize the status line, headers and body for the wire."""
        lines = [self.status_line]
        lines.extend(f"{name}: {value}" for name, value in self.headers.items())
        payload = "\r\n".join(lines).encode() + b"\r\n\r\n" + self.body
        if lossy:
            return payload.decode("utf-8", errors="replace").encode("utf-8")
        return payload
