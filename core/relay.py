"""Relay transforms map one inbound frame to the frame sent back."""

from __future__ import annotations

from typing import Protocol, Union

Payload = Union[str, bytes]

ECHO_PREFIX = "Server echo: "
_ECHO_PREFIX_BYTES = ECHO_PREFIX.encode("utf-8")


class RelayTransform(Protocol):
    """Deterministic function of the inbound payload."""

    def __call__(self, payload: Payload) -> Payload: ...


def echo_transform(payload: Payload) -> Payload:
    """Prefix the payload with ``ECHO_PREFIX``, keeping its frame type."""
    if isinstance(payload, (bytes, bytearray, memoryview)):
        return _ECHO_PREFIX_BYTES + bytes(payload)
    return ECHO_PREFIX + payload


__all__ = ["ECHO_PREFIX", "Payload", "RelayTransform", "echo_transform"]
