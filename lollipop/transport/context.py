"""Context object shared across worker threads."""

from dataclasses import dataclass
from typing import Optional

from lollipop.bootstrap.config import ServerConfig
from lollipop.lifecycle.state import ServerLifecycle
from lollipop.transport.connection_limiter import ConnectionLimiter


@dataclass
class WorkerContext:
    """Dependencies shared across handler threads."""

    config: ServerConfig
    connection_limiter: Optional[ConnectionLimiter] = None
    lifecycle: Optional[ServerLifecycle] = None
