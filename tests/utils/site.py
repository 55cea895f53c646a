"""Documents written into the served directory for tests."""

from pathlib import Path

INDEX_HTML = b"<html><body><h1>Index</h1></body></html>"
FALLBACK_HTML = b"<html><body><h1>Missing</h1></body></html>"
STYLESHEET = b"body { color: red; }"
SCRIPT = b"console.log('hi');"
BINARY_BLOB = bytes([0x89, 0x50, 0x4E, 0x47, 0xFF, 0xFE, 0x00, 0x80, 0xC3])


def populate_site(directory: Path) -> Path:
    """Write the documents the server expects into ``directory``."""

    (directory / "index.html").write_bytes(INDEX_HTML)
    (directory / "404.html").write_bytes(FALLBACK_HTML)
    (directory / "style.css").write_bytes(STYLESHEET)
    (directory / "app.js").write_bytes(SCRIPT)
    (directory / "blob.png").write_bytes(BINARY_BLOB)
    return directory
