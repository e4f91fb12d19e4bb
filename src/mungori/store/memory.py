# src/mungori/store/memory.py
"""In-process store used when no remote store is configured.

Ids and timestamps are synthesised locally: ids come from a millisecond clock
forced to increase strictly, so two rows created in the same millisecond still
get distinct ids.
"""

from __future__ import annotations

import copy
import time
from collections import defaultdict
from collections.abc import Mapping, Sequence
from typing import Any

from mungori.core.clock import parse_timestamp, utcnow

from .base import CONVERSATIONS, ObjectExistsError, Row, RowNotFoundError
from .seed import seed_rows

# Tables whose rows carry a server-maintained ``updated_at`` column.
_UPDATED_AT_TABLES = frozenset({CONVERSATIONS})


class MemoryStore:
    """Store that keeps every table and bucket in memory."""

    remote = False

    def __init__(
        self,
        tables: Mapping[str, Sequence[Mapping[str, Any]]] | None = None,
        *,
        seeded: bool = True,
        public_base_url: str = "memory://storage",
    ) -> None:
        self._tables: dict[str, list[Row]] = defaultdict(list)
        self._objects: dict[str, dict[str, bytes]] = defaultdict(dict)
        self._last_id = 0
        self.public_base_url = public_base_url.rstrip("/")

        initial = seed_rows() if seeded and tables is None else (tables or {})
        for table, rows in initial.items():
            self._tables[table] = [dict(row) for row in rows]

    def _next_id(self) -> str:
        candidate = time.time_ns() // 1_000_000
        if candidate <= self._last_id:
            candidate = self._last_id + 1
        self._last_id = candidate
        return str(candidate)

    def _find(self, table: str, row_id: str) -> Row | None:
        for row in self._tables[table]:
            if str(row.get("id")) == str(row_id):
                return row
        return None

    async def select(
        self,
        table: str,
        *,
        filters: Mapping[str, Any] | None = None,
        order_by: str = "created_at",
        descending: bool = True,
    ) -> list[Row]:
        rows = [
            row
            for row in self._tables[table]
            if all(str(row.get(column)) == str(value) for column, value in (filters or {}).items())
        ]

        def sort_key(row: Row) -> Any:
            value = row.get(order_by)
            if order_by.endswith("_at") and value is not None:
                return parse_timestamp(value)
            return value

        rows.sort(key=sort_key, reverse=descending)
        return copy.deepcopy(rows)

    async def insert(self, table: str, rows: Sequence[Mapping[str, Any]]) -> list[Row]:
        inserted: list[Row] = []
        for payload in rows:
            row = dict(payload)
            now = utcnow().isoformat()
            row.setdefault("id", self._next_id())
            row.setdefault("created_at", now)
            if table in _UPDATED_AT_TABLES:
                row.setdefault("updated_at", now)
            self._tables[table].append(row)
            inserted.append(copy.deepcopy(row))
        return inserted

    async def update(self, table: str, row_id: str, patch: Mapping[str, Any]) -> Row:
        row = self._find(table, row_id)
        if row is None:
            raise RowNotFoundError(f"No row {row_id} in {table}")
        row.update(copy.deepcopy(dict(patch)))
        return copy.deepcopy(row)

    async def delete(self, table: str, row_id: str) -> None:
        self._tables[table] = [
            row for row in self._tables[table] if str(row.get("id")) != str(row_id)
        ]

    async def upload(
        self,
        bucket: str,
        path: str,
        data: bytes,
        *,
        content_type: str = "application/octet-stream",
    ) -> None:
        if path in self._objects[bucket]:
            raise ObjectExistsError(f"{bucket}/{path} already exists")
        self._objects[bucket][path] = bytes(data)

    async def remove(self, bucket: str, paths: Sequence[str]) -> None:
        for path in paths:
            self._objects[bucket].pop(path, None)

    def get_public_url(self, bucket: str, path: str) -> str:
        return f"{self.public_base_url}/{bucket}/{path}"

    def objects(self, bucket: str) -> dict[str, bytes]:
        """Return a snapshot of the objects stored in ``bucket``."""
        return dict(self._objects[bucket])

    def rows(self, table: str) -> list[Row]:
        """Return a snapshot of ``table`` in insertion order."""
        return copy.deepcopy(self._tables[table])

    async def aclose(self) -> None:
        return None
