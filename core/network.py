"""Resolve the address the relay binds to and advertises."""

from __future__ import annotations

import ipaddress
import logging
import socket
from typing import Any, Mapping, Optional, Sequence

import psutil

LOOPBACK_DEFAULT = "localhost"

logger = logging.getLogger("relay")


def _is_candidate(entry: Any) -> bool:
    if entry.family != socket.AF_INET:
        return False
    try:
        return not ipaddress.ip_address(entry.address).is_loopback
    except ValueError:
        return False


def resolve_bind_address(
    interfaces: Optional[Mapping[str, Sequence[Any]]] = None,
) -> str:
    """Return the first non-loopback IPv4 address, or the loopback default.

    ``interfaces`` follows the shape of ``psutil.net_if_addrs()``: interface
    name mapped to a list of entries carrying ``family`` and ``address``.
    Interfaces are scanned in the order the host enumerates them.
    """
    if interfaces is None:
        try:
            interfaces = psutil.net_if_addrs()
        except OSError as exc:
            logger.warning({"evt": "network_enum_failed", "error": str(exc)})
            interfaces = {}

    for name, entries in interfaces.items():
        for entry in entries:
            if _is_candidate(entry):
                logger.debug({"evt": "network_ip", "iface": name, "ip": entry.address})
                return entry.address

    logger.debug({"evt": "network_ip", "iface": None, "ip": LOOPBACK_DEFAULT})
    return LOOPBACK_DEFAULT


__all__ = ["LOOPBACK_DEFAULT", "resolve_bind_address"]
