# src/mungori/main.py
"""Main entry point for the Mungori community client."""

from __future__ import annotations

import asyncio
import logging

from mungori.app import CommunityApp
from mungori.core.settings import Settings, settings
from mungori.services.notifications import Notifier
from mungori.store import build_store

logger = logging.getLogger(__name__)


def configure_logging(config: Settings | None = None) -> None:
    config = config or settings
    logging.basicConfig(
        level=config.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(config: Settings | None = None, notifier: Notifier | None = None) -> CommunityApp:
    """Set up logging and build the coordinator with the configured store strategy."""
    config = config or settings
    configure_logging(config)
    return CommunityApp(build_store(config), notifier)


async def _run() -> None:
    app = create_app()
    try:
        await app.start()
        mode = "demo" if app.demo_mode else "remote"
        logger.info("%s ready in %s mode", settings.app_name, mode)
    finally:
        await app.aclose()


if __name__ == "__main__":
    asyncio.run(_run())
