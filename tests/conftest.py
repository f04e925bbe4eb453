"""Shared pytest fixtures and async helpers for relay tests."""

from __future__ import annotations

import asyncio
import logging
import time
from typing import Any, Dict, List

import pytest

from core.config import ServerConfig
from core.lifecycle import LifecycleLogger


@pytest.fixture
def lifecycle(caplog) -> LifecycleLogger:
    """Lifecycle sink whose records land in ``caplog``."""
    caplog.set_level(logging.DEBUG, logger="relay")
    return LifecycleLogger()


@pytest.fixture
def local_config() -> ServerConfig:
    """Loopback endpoint on an ephemeral port."""
    return ServerConfig(bind_address="127.0.0.1", port=0)


def relay_records(caplog) -> List[Dict[str, Any]]:
    """Structured relay log records, oldest first."""
    return [r.msg for r in caplog.records if r.name.startswith("relay") and isinstance(r.msg, dict)]


async def wait_for_record(caplog, evt: str, timeout: float = 5.0, **match: Any) -> Dict[str, Any]:
    """Poll ``caplog`` until a record with ``evt`` (and every ``match`` field) is logged."""
    deadline = time.monotonic() + timeout
    while time.monotonic() < deadline:
        for record in relay_records(caplog):
            if record.get("evt") == evt and all(record.get(k) == v for k, v in match.items()):
                return record
        await asyncio.sleep(0.01)
    seen = [r.get("evt") for r in relay_records(caplog)]
    raise AssertionError(f"no {evt!r} record within {timeout}s; saw {seen}")
