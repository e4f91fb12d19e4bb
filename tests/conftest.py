# tests/conftest.py
from __future__ import annotations

from collections.abc import Mapping, Sequence
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from mungori.services.images import ImagePipeline
from mungori.services.notifications import Notifier
from mungori.store.base import MARKET_ITEM_IMAGES, MARKET_ITEMS, POSTS, Row, StoreError
from mungori.store.memory import MemoryStore

FIXED_NOW = datetime(2026, 3, 1, 12, 0, tzinfo=UTC)
TEST_BUCKET = "test-images"


class FlakyStore:
    """Store wrapper whose operations can be told to fail.

    Behaves like a remote store (``remote = True``) on top of an in-memory
    one, recording every call so tests can check what reached the "network".
    """

    def __init__(self, inner: MemoryStore, *, remote: bool = True) -> None:
        self.inner = inner
        self.remote = remote
        self.calls: list[tuple[str, str]] = []
        self._failing: set[str] = set()
        self._budget: dict[str, int] = {}

    def fail(self, *operations: str) -> None:
        """Make every listed operation raise ``StoreError`` from now on."""
        self._failing.update(operations)

    def fail_after(self, operation: str, successes: int) -> None:
        """Let ``operation`` succeed ``successes`` times, then fail."""
        self._budget[operation] = successes

    def heal(self) -> None:
        self._failing.clear()
        self._budget.clear()

    def count(self, operation: str) -> int:
        return sum(1 for name, _ in self.calls if name == operation)

    def _check(self, operation: str, target: str) -> None:
        self.calls.append((operation, target))
        if operation in self._failing:
            raise StoreError(f"simulated {operation} failure on {target}")
        if operation in self._budget:
            if self._budget[operation] <= 0:
                raise StoreError(f"simulated {operation} failure on {target}")
            self._budget[operation] -= 1

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[Row]:
        self._check("select", table)
        return await self.inner.select(
            table, filters=filters, order_by=order_by, descending=descending
        )

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Row]:
        self._check("insert", table)
        return await self.inner.insert(table, rows)

    async def update(self, table: str, row_id: str, patch: Mapping[str, Any]) -> Row:
        self._check("update", table)
        return await self.inner.update(table, row_id, patch)

    async def delete(self, table: str, row_id: str) -> None:
        self._check("delete", table)
        await self.inner.delete(table, row_id)

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
    ) -> None:
        self._check("upload", bucket)
        await self.inner.upload(bucket, path, data, content_type=content_type)

    async def remove(self, bucket: str, paths: Sequence[str]) -> None:
        self._check("remove", bucket)
        await self.inner.remove(bucket, paths)

    def get_public_url(self, bucket: str, path: str) -> str:
        return self.inner.get_public_url(bucket, path)

    async def aclose(self) -> None:
        await self.inner.aclose()


def _post_row(row_id: str, *, likes: int = 0, minutes_ago: int = 0, content: str | None = None) -> Row:
    """Build a raw ``posts`` row."""
    return {
        "id": row_id,
        "content": content or f"post {row_id}",
        "category": "chitchat",
        "likes": likes,
        "comments": 0,
        "created_at": (FIXED_NOW - timedelta(minutes=minutes_ago)).isoformat(),
    }


def _market_row(row_id: str, *, item_type: str = "sell", price: str | None = "1,000 KRW", minutes_ago: int = 0) -> Row:
    """Build a raw ``market_items`` row."""
    return {
        "id": row_id,
        "title": f"item {row_id}",
        "description": "still works",
        "category": "household",
        "type": item_type,
        "price": price,
        "status": "available",
        "likes": 0,
        "created_at": (FIXED_NOW - timedelta(minutes=minutes_ago)).isoformat(),
    }


@pytest.fixture()
def fixed_now() -> datetime:
    return FIXED_NOW


@pytest.fixture()
def post_row():
    """Factory for raw ``posts`` rows."""
    return _post_row


@pytest.fixture()
def market_row():
    """Factory for raw ``market_items`` rows."""
    return _market_row


@pytest.fixture()
def notifier() -> Notifier:
    """Return a fresh notifier."""
    return Notifier()


@pytest.fixture()
def memory_store() -> MemoryStore:
    """Return an in-memory store loaded with the built-in seed dataset."""
    return MemoryStore()


@pytest.fixture()
def remote_store() -> FlakyStore:
    """Return a store that behaves like a healthy remote one until told otherwise."""
    inner = MemoryStore(
        {
            POSTS: [_post_row("p1", likes=3, minutes_ago=30), _post_row("p2", likes=0, minutes_ago=5)],
            MARKET_ITEMS: [
                _market_row("m1", minutes_ago=20),
                _market_row("m2", item_type="free", price=None, minutes_ago=10),
            ],
            MARKET_ITEM_IMAGES: [],
        }
    )
    return FlakyStore(inner)


@pytest.fixture()
def flaky_store() -> FlakyStore:
    """Return a remote-behaving store over the built-in seed dataset."""
    return FlakyStore(MemoryStore())


@pytest.fixture()
def pipeline(remote_store: FlakyStore) -> ImagePipeline:
    """Return an image pipeline over the flaky store with small limits."""
    return ImagePipeline(remote_store, bucket=TEST_BUCKET, max_images=5, max_bytes=1024)
