"""Observability sink for listener and session lifecycle events."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Dict, Optional

from .config import ServerConfig
from .relay import Payload

if TYPE_CHECKING:
    from web.relay_server import Session


def _describe_payload(payload: Payload) -> Dict[str, Any]:
    if isinstance(payload, str):
        return {"kind": "text", "raw": payload, "size": len(payload)}
    return {"kind": "binary", "raw": repr(bytes(payload)), "size": len(payload)}


class LifecycleLogger:
    """Writes one structured log record per lifecycle event.

    Passive: nothing here feeds back into the listener or a session handler.
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.logger = logger or logging.getLogger("relay")

    # Listener ------------------------------------------------------------
    def server_listening(self, config: ServerConfig) -> None:
        self.logger.info({
            "evt": "ws_server",
            "status": "listening",
            "url": config.url,
            "host": config.bind_address,
            "port": config.port,
        })

    def server_stopped(self, config: ServerConfig) -> None:
        self.logger.info({"evt": "ws_server", "status": "stopped", "url": config.url})

    # Sessions ------------------------------------------------------------
    def client_connected(self, session: "Session") -> None:
        self.logger.info({
            "evt": "ws_client_connected",
            "session": session.session_id,
            "peer": session.peer,
        })

    def message_received(self, session: "Session", payload: Payload) -> None:
        record = {"evt": "ws_message_received", "session": session.session_id}
        record.update(_describe_payload(payload))
        self.logger.info(record)

    def client_disconnected(
        self,
        session: "Session",
        code: Optional[int] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.logger.info({
            "evt": "ws_client_disconnected",
            "session": session.session_id,
            "code": code,
            "reason": reason,
        })

    def session_error(self, session: "Session", exc: BaseException) -> None:
        self.logger.warning({
            "evt": "ws_session_error",
            "session": session.session_id,
            "error": str(exc),
            "type": type(exc).__name__,
        })


__all__ = ["LifecycleLogger"]
