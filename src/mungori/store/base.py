# src/mungori/store/base.py
"""Store contract shared by the remote client and the in-memory stand-in.

The store is a thin CRUD surface: row queries with an equality filter and a
timestamp ordering, row inserts, patches and deletes, plus a binary object
bucket. Nothing here is transactional across calls.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any, Protocol

Row = dict[str, Any]

POSTS = "posts"
MARKET_ITEMS = "market_items"
MARKET_ITEM_IMAGES = "market_item_images"
CONVERSATIONS = "conversations"
MESSAGES = "messages"


class StoreError(RuntimeError):
    """Base exception raised for store failures."""


class StoreDisabledError(StoreError):
    """Raised when the remote store is used without credentials."""


class RowNotFoundError(StoreError):
    """Raised when an update targets a row that does not exist."""


class ObjectExistsError(StoreError):
    """Raised when an upload would overwrite an existing object."""


class Store(Protocol):
    """Async CRUD and object-storage interface."""

    remote: bool

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[Row]: ...

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Row]: ...

    async def update(self, table: str, row_id: str, patch: Mapping[str, Any]) -> Row: ...

    async def delete(self, table: str, row_id: str) -> None: ...

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
    ) -> None: ...

    async def remove(self, bucket: str, paths: Sequence[str]) -> None: ...

    def get_public_url(self, bucket: str, path: str) -> str: ...

    async def aclose(self) -> None: ...
