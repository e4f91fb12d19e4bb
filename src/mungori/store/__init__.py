# src/mungori/store/__init__.py
"""Store strategies for the community client."""

import logging

from mungori.core.settings import Settings, settings

from .base import (
    CONVERSATIONS,
    MARKET_ITEM_IMAGES,
    MARKET_ITEMS,
    MESSAGES,
    POSTS,
    ObjectExistsError,
    Row,
    RowNotFoundError,
    Store,
    StoreDisabledError,
    StoreError,
)
from .memory import MemoryStore
from .remote import RemoteStore, load_remote_config

logger = logging.getLogger(__name__)


def build_store(config: Settings | None = None) -> Store:
    """Pick the store strategy once, at startup."""
    config = config or settings
    if config.remote_store_configured:
        logger.info("Using remote store at %s", config.supabase_url)
        return RemoteStore(load_remote_config(config))
    logger.info("Remote store not configured; running on the built-in seed dataset")
    return MemoryStore()


__all__ = [
    "CONVERSATIONS",
    "MARKET_ITEMS",
    "MARKET_ITEM_IMAGES",
    "MESSAGES",
    "POSTS",
    "MemoryStore",
    "ObjectExistsError",
    "RemoteStore",
    "Row",
    "RowNotFoundError",
    "Store",
    "StoreDisabledError",
    "StoreError",
    "build_store",
]
