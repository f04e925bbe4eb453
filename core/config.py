"""Startup configuration: the relay endpoint and the log level."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Callable, Mapping, Optional

from .network import resolve_bind_address

DEFAULT_PORT = 8080
DEFAULT_LOG_LEVEL = "INFO"


@dataclass(frozen=True)
class ServerConfig:
    """Bind endpoint of the relay, fixed for the lifetime of the process."""

    bind_address: str
    port: int = DEFAULT_PORT

    @property
    def url(self) -> str:
        return f"ws://{self.bind_address}:{self.port}"


def load_server_config(resolver: Callable[[], str] = resolve_bind_address) -> ServerConfig:
    """Resolve the bind address once; the port is always ``DEFAULT_PORT``."""
    return ServerConfig(bind_address=resolver(), port=DEFAULT_PORT)


def load_log_level(environ: Optional[Mapping[str, str]] = None) -> int:
    env = os.environ if environ is None else environ
    name = env.get("LOG_LEVEL", DEFAULT_LOG_LEVEL).strip().upper()
    level = logging.getLevelName(name)
    # getLevelName returns "Level X" for unknown names
    return level if isinstance(level, int) else logging.INFO


__all__ = [
    "DEFAULT_PORT",
    "ServerConfig",
    "load_log_level",
    "load_server_config",
]
