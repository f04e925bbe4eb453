#!/usr/bin/env python3
"""Project entry point. Resolves the endpoint and runs the relay until interrupted."""

from __future__ import annotations

import asyncio
import logging
import sys

from core.config import ServerConfig, load_log_level, load_server_config
from web.relay_server import BindError, RelayServer

logger = logging.getLogger("relay")

EXIT_BIND_FAILED = 1


def configure_logging(level: int) -> None:
    logging.basicConfig(
        level=level,
        format='%(asctime)s %(levelname)s %(message)s',
    )


async def run_relay(config: ServerConfig) -> None:
    """Bind, then serve until cancelled. ``BindError`` escapes before anything is served."""
    await RelayServer(config).serve_forever()


def main() -> int:
    configure_logging(load_log_level())
    logger.info({"evt": "startup", "component": "relay"})

    config = load_server_config()
    try:
        asyncio.run(run_relay(config))
    except BindError as exc:
        logger.error({"evt": "startup_failed", "error": str(exc)})
        return EXIT_BIND_FAILED
    except KeyboardInterrupt:
        logger.info({"evt": "shutdown", "reason": "interrupt"})
    return 0


def cli() -> None:
    sys.exit(main())


if __name__ == "__main__":
    cli()
