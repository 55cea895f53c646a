"""Server configuration and CLI argument parsing."""

import argparse
import os
from dataclasses import dataclass


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    return int(value) if value is not None else default


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.lower() in {"1", "true", "yes", "on"}


def _env_str(name: str, default: str) -> str:
    value = os.getenv(name)
    return value if value else default


DEFAULT_HOST = _env_str("LOLLIPOP_HOST", "127.0.0.1")
DEFAULT_PORT = _env_int("LOLLIPOP_PORT", 8080)
DEFAULT_DIRECTORY = _env_str("LOLLIPOP_DIRECTORY", "public")
DEFAULT_MAX_CONNECTIONS = _env_int("LOLLIPOP_MAX_CONNECTIONS", 8)
DEFAULT_BUFFER_SIZE = _env_int("LOLLIPOP_BUFFER_SIZE", 8192)
DEFAULT_SOCKET_TIMEOUT = _env_int("LOLLIPOP_SOCKET_TIMEOUT", 0)
DEFAULT_SHUTDOWN_GRACE_SECONDS = _env_int("LOLLIPOP_SHUTDOWN_GRACE_SECONDS", 5)
DEFAULT_LOSSY_BODIES = _env_bool("LOLLIPOP_LOSSY_BODIES", False)

INDEX_DOCUMENT = "index.html"
FALLBACK_DOCUMENT = "404.html"
ACCEPT_POLL_SECONDS = 0.5


@dataclass
class ServerConfig:
    """Runtime settings for the acceptor and its workers."""

    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    directory: str = DEFAULT_DIRECTORY
    max_connections: int = DEFAULT_MAX_CONNECTIONS
    buffer_size: int = DEFAULT_BUFFER_SIZE
    socket_timeout: int = DEFAULT_SOCKET_TIMEOUT
    shutdown_grace_seconds: int = DEFAULT_SHUTDOWN_GRACE_SECONDS
    lossy_bodies: bool = DEFAULT_LOSSY_BODIES

    @classmethod
    def from_args(cls, args: argparse.Namespace) -> "ServerConfig":
        """Build a config from parsed CLI arguments."""
        return cls(
            host=args.host,
            port=args.port,
            directory=args.directory,
            max_connections=args.max_connections,
            buffer_size=args.buffer_size,
            socket_timeout=args.socket_timeout,
            shutdown_grace_seconds=args.shutdown_grace_seconds,
            lossy_bodies=args.lossy_bodies,
        )


def _positive_int(value: str) -> int:
    number = int(value)
    if number <= 0:
        raise argparse.ArgumentTypeError(f"expected a positive integer, got {value}")
    return number


def parse_cli_args(argv: list[str]) -> argparse.Namespace:
    """Return parsed CLI arguments for server configuration."""
    parser = argparse.ArgumentParser(description="Static file HTTP server")
    parser.add_argument("--directory", default=DEFAULT_DIRECTORY)
    parser.add_argument("--host", default=DEFAULT_HOST)
    parser.add_argument("--port", type=int, default=DEFAULT_PORT)
    default_log_level = os.getenv("LOLLIPOP_LOG_LEVEL", "INFO").upper()
    default_destination = os.getenv("LOLLIPOP_LOG_DESTINATION", "stdout")
    default_log_format = os.getenv("LOLLIPOP_LOG_FORMAT", "json").lower()
    parser.add_argument(
        "--log-level",
        default=default_log_level,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        type=str.upper,
    )
    parser.add_argument(
        "--log-destination",
        default=default_destination,
        help="stdout or a file path",
    )
    parser.add_argument(
        "--log-format",
        default=default_log_format,
        choices=["json", "text"],
        type=str.lower,
    )
    parser.add_argument(
        "--max-connections",
        type=int,
        default=DEFAULT_MAX_CONNECTIONS,
        help="Maximum concurrently handled connections (0 for unlimited)",
    )
    parser.add_argument(
        "--buffer-size",
        type=_positive_int,
        default=DEFAULT_BUFFER_SIZE,
        help="Bytes read from a connection before the request is truncated",
    )
    parser.add_argument(
        "--socket-timeout",
        type=int,
        default=DEFAULT_SOCKET_TIMEOUT,
        help="Per-connection socket timeout in seconds (0 disables)",
    )
    parser.add_argument(
        "--shutdown-grace-seconds",
        type=int,
        default=DEFAULT_SHUTDOWN_GRACE_SECONDS,
        help="Grace period in seconds for in-flight connections on shutdown",
    )
    parser.add_argument(
        "--lossy-bodies",
        action=argparse.BooleanOptionalAction,
        default=DEFAULT_LOSSY_BODIES,
        help="Round-trip responses through lossy UTF-8 decoding",
    )
    return parser.parse_args(argv)
