# src/mungori/viewmodels/base.py
"""Generic list view-model over one store table.

A list view-model mirrors the rows of one table in memory, newest first, and
pairs each row with client-only state. Mutations apply locally first and then
go to the store:

* ``create`` waits for the store and prepends the returned row.
* ``update`` merges locally, then reconciles with the row the store returns;
  a failure keeps the local merge.
* ``delete`` (deletable lists only) removes locally only after the store and
  any dependents agreed.
* ``toggle_like`` is fire-and-forget: the new counter is sent but the reply is
  never read, so the local counter can drift from the stored one.

State goes ``LOADING`` → ``POPULATED`` or ``FALLBACK`` and never back.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar, Generic, TypeVar

from pydantic import BaseModel, ValidationError

from mungori.schemas.common import Draft, StoredRecord
from mungori.services.notifications import Notifier
from mungori.store.base import Row, Store, StoreError
from mungori.store.seed import SEED_LIKED_IDS, seed_table
from mungori.utils.timeago import format_relative_time

# Configure logger for this module
logger = logging.getLogger(__name__)

RecordT = TypeVar("RecordT", bound=StoredRecord)

# Anything a read can raise on an unreachable store or a malformed reply.
LOAD_ERRORS: tuple[type[Exception], ...] = (StoreError, ValidationError, ValueError, TypeError)


class ListState(StrEnum):
    LOADING = "loading"
    POPULATED = "populated"
    FALLBACK = "fallback"


@dataclass
class ListEntry(Generic[RecordT]):
    """A stored record plus client-only state that is never persisted."""

    stored: RecordT
    liked: bool = False

    @property
    def id(self) -> str:
        return self.stored.id

    def display_time(self, now: datetime | None = None) -> str:
        """Relative creation time, computed fresh on every call."""
        return format_relative_time(self.stored.created_at, now)


Listener = Callable[["ListViewModel[Any]"], None]


def _patch_dict(changes: Mapping[str, Any] | BaseModel) -> dict[str, Any]:
    if isinstance(changes, BaseModel):
        to_changes = getattr(changes, "changes", None)
        if callable(to_changes):
            return to_changes()
        return changes.model_dump(mode="json", exclude_unset=True)
    return dict(changes)


class ListViewModel(Generic[RecordT]):
    """Ordered, most-recent-first mirror of one table."""

    table: ClassVar[str]
    record_type: ClassVar[type[StoredRecord]]
    noun: ClassVar[str] = "item"
    plural: ClassVar[str] = "items"
    created_verb: ClassVar[str] = "published"

    def __init__(self, store: Store, notifier: Notifier | None = None) -> None:
        self.store = store
        self.notifier = notifier or Notifier()
        self.state = ListState.LOADING
        self._entries: list[ListEntry[RecordT]] = []
        self._listeners: list[Listener] = []
        self._pending: set[asyncio.Task[None]] = set()

    # --- read side --------------------------------------------------------------
    @property
    def entries(self) -> list[ListEntry[RecordT]]:
        return list(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[ListEntry[RecordT]]:
        return iter(list(self._entries))

    def get(self, row_id: str) -> ListEntry[RecordT] | None:
        for entry in self._entries:
            if entry.id == str(row_id):
                return entry
        return None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` after every local change; returns an unsubscribe hook."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _changed(self) -> None:
        for listener in list(self._listeners):
            listener(self)

    # --- helpers ----------------------------------------------------------------
    def _to_record(self, row: Mapping[str, Any]) -> RecordT:
        return self.record_type.model_validate(dict(row))  # type: ignore[return-value]

    def _to_entries(self, rows: list[Row], liked_ids: frozenset[str]) -> list[ListEntry[RecordT]]:
        entries = []
        for row in rows:
            record = self._to_record(row)
            entries.append(ListEntry(stored=record, liked=record.id in liked_ids))
        return entries

    def _merge(self, record: RecordT, changes: Mapping[str, Any]) -> RecordT:
        return self._to_record({**record.to_row(), **changes})

    def _prepare_patch(self, entry: ListEntry[RecordT], changes: dict[str, Any]) -> dict[str, Any]:
        """Hook for subclasses to normalise a patch against the current record."""
        return changes

    def _demo_suffix(self) -> str:
        return "" if self.store.remote else " (demo mode)"

    # --- operations -------------------------------------------------------------
    async def load(self) -> list[ListEntry[RecordT]]:
        """Fetch every row newest first; fall back to the seed rows on failure."""
        liked_ids = frozenset() if self.store.remote else SEED_LIKED_IDS.get(self.table, frozenset())
        try:
            rows = await self.store.select(self.table, order_by="created_at", descending=True)
            entries = self._to_entries(rows, liked_ids)
        except LOAD_ERRORS as exc:
            logger.warning("Loading %s failed, using seed data: %s", self.table, exc)
            entries = self._to_entries(
                seed_table(self.table), SEED_LIKED_IDS.get(self.table, frozenset())
            )
            self.state = ListState.FALLBACK
            self.notifier.warning(f"load {self.plural}", f"Could not load {self.plural}; showing sample data")
        else:
            self.state = ListState.POPULATED

        self._entries = entries
        self._changed()
        return self.entries

    async def create(self, draft: Draft) -> ListEntry[RecordT] | None:
        """Store ``draft`` and put the new record at the head of the list.

        Returns None without notifying when a required field is blank.
        """
        if not draft.is_complete():
            return None

        action = f"create {self.noun}"
        try:
            rows = await self.store.insert(self.table, [self._insert_row(draft)])
            if not rows:
                raise StoreError(f"Insert into {self.table} returned no rows")
            record = self._to_record(rows[0])
        except (StoreError, ValidationError) as exc:
            logger.error("Creating %s failed: %s", self.noun, exc)
            self.notifier.error(action, f"Failed to create the {self.noun}")
            return None

        entry: ListEntry[RecordT] = ListEntry(stored=record)
        self._entries.insert(0, entry)
        self._changed()
        self.notifier.success(action, f"The {self.noun} was {self.created_verb}{self._demo_suffix()}")
        return entry

    def _insert_row(self, draft: Draft) -> dict[str, Any]:
        return draft.to_insert_row()  # type: ignore[attr-defined]

    async def update(
        self, row_id: str, changes: Mapping[str, Any] | BaseModel
    ) -> ListEntry[RecordT] | None:
        """Merge ``changes`` into one record, then persist and reconcile.

        Returns None when ``row_id`` is unknown. A store failure keeps the
        optimistic merge and emits an error notification.
        """
        entry = self.get(row_id)
        if entry is None:
            return None

        patch = self._prepare_patch(entry, _patch_dict(changes))
        if not patch:
            return entry

        action = f"update {self.noun}"
        entry.stored = self._merge(entry.stored, patch)
        self._changed()

        try:
            row = await self.store.update(self.table, entry.id, patch)
            canonical = self._to_record(row)
        except (StoreError, ValidationError) as exc:
            logger.error("Updating %s %s failed: %s", self.noun, entry.id, exc)
            self.notifier.error(action, f"Failed to update the {self.noun}")
            return entry

        entry.stored = canonical
        self._changed()
        self.notifier.success(action, f"The {self.noun} was updated")
        return entry

    # --- fire-and-forget writes ---------------------------------------------------
    def _fire_and_forget(self, description: str, factory: Callable[[], Awaitable[Any]]) -> None:
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; %s not sent", description)
            return
        task = loop.create_task(self._send_quietly(description, factory))
        self._pending.add(task)
        task.add_done_callback(self._pending.discard)

    async def _send_quietly(self, description: str, factory: Callable[[], Awaitable[Any]]) -> None:
        try:
            await factory()
        except StoreError as exc:
            logger.debug("Dropped %s: %s", description, exc)

    async def drain(self) -> None:
        """Wait for every fire-and-forget write issued so far."""
        while self._pending:
            await asyncio.gather(*list(self._pending), return_exceptions=True)


class DeletableListViewModel(ListViewModel[RecordT]):
    """List whose records can be deleted by the user."""

    delete_errors: ClassVar[tuple[type[Exception], ...]] = (StoreError,)

    async def _delete_dependents(self, entry: ListEntry[RecordT]) -> None:
        """Hook: delete records owned by ``entry`` before the entry itself."""

    async def delete(self, row_id: str) -> bool:
        """Delete dependents, then the row, then the local entry.

        Any failing step abandons the delete and leaves the entry in place.
        """
        entry = self.get(row_id)
        if entry is None:
            return False

        action = f"delete {self.noun}"
        try:
            await self._delete_dependents(entry)
            await self.store.delete(self.table, entry.id)
        except self.delete_errors as exc:
            logger.error("Deleting %s %s failed: %s", self.noun, entry.id, exc)
            self.notifier.error(action, f"Failed to delete the {self.noun}")
            return False

        self._entries = [item for item in self._entries if item.id != entry.id]
        self._changed()
        self.notifier.success(action, f"The {self.noun} was deleted")
        return True


class LikeableListViewModel(DeletableListViewModel[RecordT]):
    """Deletable list whose records carry a ``likes`` counter."""

    def toggle_like(self, row_id: str) -> ListEntry[RecordT] | None:
        """Flip the liked flag and move the counter by one, right now.

        The new counter is sent to the store without waiting for, or reading,
        the reply.
        """
        entry = self.get(row_id)
        if entry is None:
            return None

        liked = not entry.liked
        current = entry.stored.likes  # type: ignore[attr-defined]
        likes = current + 1 if liked else max(0, current - 1)
        entry.stored = entry.stored.model_copy(update={"likes": likes})
        entry.liked = liked
        self._changed()

        record_id = entry.id
        self._fire_and_forget(
            f"like counter of {self.noun} {record_id}",
            lambda: self.store.update(self.table, record_id, {"likes": likes}),
        )
        return entry
