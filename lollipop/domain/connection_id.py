"""Connection tags carried through a worker's context into its log records.

A worker binds a tag when it takes over a socket. Every record logged through
a :class:`ConnectionLoggerAdapter` on that thread then carries the
``connection_id`` and the peer ``client`` without call sites passing them.
"""

import contextvars
import logging
import uuid
from dataclasses import dataclass
from typing import Any, MutableMapping, Optional

LOGGER_PREFIX = "lollipop."
NO_CONNECTION = "-"


@dataclass(frozen=True)
class ConnectionTag:
    connection_id: str
    client: str


_current_tag: contextvars.ContextVar[Optional[ConnectionTag]] = contextvars.ContextVar(
    "connection_tag", default=None
)


def format_client(client_address: tuple[str, int]) -> str:
    """Render a peer address as ``host:port``."""
    return f"{client_address[0]}:{client_address[1]}"


def bind_connection(client_address: tuple[str, int]) -> ConnectionTag:
    """Tag the current context with a fresh uuid4 and the peer address."""
    tag = ConnectionTag(str(uuid.uuid4()), format_client(client_address))
    _current_tag.set(tag)
    return tag


def current_connection() -> Optional[ConnectionTag]:
    return _current_tag.get()


def unbind_connection() -> None:
    _current_tag.set(None)


class ConnectionLoggerAdapter(logging.LoggerAdapter):
    """Adds the bound connection and the component name to every record.

    Values passed explicitly in ``extra`` win over the bound tag, so the
    acceptor can still name a client before any worker owns it.
    """

    def process(
        self, msg: str, kwargs: MutableMapping[str, Any]
    ) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(self.extra or {})
        extra.update(kwargs.get("extra") or {})

        tag = current_connection()
        if tag is None:
            extra.setdefault("connection_id", NO_CONNECTION)
        else:
            extra.setdefault("connection_id", tag.connection_id)
            extra.setdefault("client", tag.client)
        extra["component"] = self.logger.name.removeprefix(LOGGER_PREFIX)

        kwargs["extra"] = extra
        return msg, kwargs
