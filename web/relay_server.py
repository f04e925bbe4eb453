#!/usr/bin/env python3
"""WebSocket relay: one listener, one independent handler per connection."""

from __future__ import annotations

import asyncio
import dataclasses
import enum
import logging
import uuid
from dataclasses import dataclass, field
from typing import Any, Optional

#websocket
import websockets
from websockets.exceptions import ConnectionClosed

from core.config import ServerConfig
from core.lifecycle import LifecycleLogger
from core.relay import RelayTransform, echo_transform

logger = logging.getLogger("relay")

CLOSE_NORMAL = 1000
CLOSE_INTERNAL_ERROR = 1011


class BindError(RuntimeError):
    """The listener could not bind its endpoint. Fatal at startup."""

    def __init__(self, config: ServerConfig, cause: OSError) -> None:
        super().__init__(f"cannot bind {config.bind_address}:{config.port}: {cause}")
        self.config = config
        self.cause = cause


class SessionState(enum.Enum):
    OPEN = "open"
    CLOSED = "closed"


def _new_session_id() -> str:
    return uuid.uuid4().hex[:12]


def _format_peer(remote_address: Any) -> Optional[str]:
    if not remote_address:
        return None
    if isinstance(remote_address, (tuple, list)) and len(remote_address) >= 2:
        return f"{remote_address[0]}:{remote_address[1]}"
    return str(remote_address)


@dataclass
class Session:
    """One accepted connection. Only its own handler ever touches it."""

    connection: Any
    remote_address: Any = None
    session_id: str = field(default_factory=_new_session_id)
    state: SessionState = SessionState.OPEN

    @property
    def peer(self) -> Optional[str]:
        return _format_peer(self.remote_address)

    @property
    def is_open(self) -> bool:
        return self.state is SessionState.OPEN


class SessionHandler:
    """Runs the OPEN -> CLOSED loop for a single session."""

    def __init__(
        self,
        session: Session,
        transform: RelayTransform = echo_transform,
        lifecycle: Optional[LifecycleLogger] = None,
    ) -> None:
        self.session = session
        self.transform = transform
        self.lifecycle = lifecycle or LifecycleLogger()

    async def run(self) -> None:
        session = self.session
        connection = session.connection
        close_code = CLOSE_NORMAL
        try:
            while True:
                try:
                    message = await connection.recv()
                except ConnectionClosed as exc:
                    logger.debug({"evt": "ws_connection_closed", "session": session.session_id,
                                  "code": getattr(exc.rcvd, "code", None)})
                    break
                self.lifecycle.message_received(session, message)
                response = self.transform(message)
                try:
                    await connection.send(response)
                except ConnectionClosed:
                    break
        except Exception as exc:
            close_code = CLOSE_INTERNAL_ERROR
            self.lifecycle.session_error(session, exc)
        finally:
            await self._release(close_code)

    async def _release(self, close_code: int) -> None:
        session = self.session
        connection = session.connection
        session.state = SessionState.CLOSED
        try:
            await connection.close(code=close_code)
        except (ConnectionClosed, OSError) as exc:
            logger.debug({"evt": "ws_close_failed", "session": session.session_id, "error": str(exc)})
        self.lifecycle.client_disconnected(
            session,
            code=getattr(connection, "close_code", None),
            reason=getattr(connection, "close_reason", None) or None,
        )


class RelayServer:
    """Connection listener bound to a single endpoint.

    ``start`` binds and returns immediately; each accepted connection is
    served by its own task so a slow or failing session never holds up the
    accept loop or any other session.
    """

    def __init__(
        self,
        config: ServerConfig,
        transform: RelayTransform = echo_transform,
        lifecycle: Optional[LifecycleLogger] = None,
    ) -> None:
        self.config = config
        self.transform = transform
        self.lifecycle = lifecycle or LifecycleLogger()
        self._server = None

    @property
    def is_serving(self) -> bool:
        return self._server is not None

    @property
    def port(self) -> int:
        if self._server is None:
            return self.config.port
        return self._bound_port(self._server)

    @property
    def endpoint(self) -> ServerConfig:
        """Config with the port actually bound (differs when port 0 was requested)."""
        return dataclasses.replace(self.config, port=self.port)

    @property
    def url(self) -> str:
        return self.endpoint.url

    async def start(self) -> None:
        if self._server is not None:
            return
        try:
            self._server = await websockets.serve(
                self._accept,
                self.config.bind_address,
                self.config.port,
            )
        except OSError as exc:
            logger.error({"evt": "ws_server_error", "host": self.config.bind_address,
                          "port": self.config.port, "error": str(exc)})
            raise BindError(self.config, exc) from exc
        self.lifecycle.server_listening(self.endpoint)

    async def serve_forever(self) -> None:
        await self.start()
        try:
            await asyncio.Future()  # run until cancelled
        finally:
            await self.close()

    async def close(self) -> None:
        server, self._server = self._server, None
        if server is None:
            return
        endpoint = dataclasses.replace(self.config, port=self._bound_port(server))
        server.close()
        await server.wait_closed()
        self.lifecycle.server_stopped(endpoint)

    async def __aenter__(self) -> "RelayServer":
        await self.start()
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.close()

    def _bound_port(self, server) -> int:
        for sock in server.sockets or ():
            return sock.getsockname()[1]
        return self.config.port

    async def _accept(self, connection) -> None:
        session = Session(
            connection=connection,
            remote_address=getattr(connection, "remote_address", None),
        )
        self.lifecycle.client_connected(session)
        await SessionHandler(session, self.transform, self.lifecycle).run()


__all__ = [
    "BindError",
    "RelayServer",
    "Session",
    "SessionHandler",
    "SessionState",
]
