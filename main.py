"""Static file HTTP server entrypoint."""

import logging
import signal
import sys

from lollipop.bootstrap.config import ServerConfig, parse_cli_args
from lollipop.bootstrap.logging_setup import configure_logging
from lollipop.domain.connection_id import ConnectionLoggerAdapter
from lollipop.lifecycle.state import ServerLifecycle
from lollipop.transport.accept_loop import run_server

SERVER_LOGGER = ConnectionLoggerAdapter(logging.getLogger("lollipop.server"), {})


def main() -> None:
    """Start the HTTP server and spawn worker threads per connection."""
    args = parse_cli_args(sys.argv[1:])
    configure_logging(
        args.log_level, args.log_destination, use_json=args.log_format == "json"
    )

    config = ServerConfig.from_args(args)
    lifecycle = ServerLifecycle()

    def shutdown_handler(signum: int, _frame) -> None:
        SERVER_LOGGER.info(
            "Received shutdown signal",
            extra={"event": "signal_received", "signal": signum},
        )
        lifecycle.begin_shutdown()

    signal.signal(signal.SIGTERM, shutdown_handler)
    signal.signal(signal.SIGINT, shutdown_handler)

    SERVER_LOGGER.info(
        "Starting HTTP server",
        extra={
            "event": "server_starting",
            "host": config.host,
            "port": config.port,
            "directory": config.directory,
            "destination": args.log_destination,
            "log_level": args.log_level,
            "max_connections": config.max_connections,
        },
    )
    run_server(config, lifecycle)


if __name__ == "__main__":
    main()
