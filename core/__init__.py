"""Core package: configuration, address resolution, relay policy and lifecycle logging."""

from .config import ServerConfig
from .lifecycle import LifecycleLogger
from .network import resolve_bind_address
from .relay import echo_transform

__all__ = [
    "LifecycleLogger",
    "ServerConfig",
    "echo_transform",
    "resolve_bind_address",
]
