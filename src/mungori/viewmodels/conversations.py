# src/mungori/viewmodels/conversations.py
"""Inbox view-model: conversations and their messages."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass, field
from typing import Any

from pydantic import ValidationError

from mungori.core.clock import utcnow
from mungori.schemas.message import Conversation, ConversationDraft, Message, MessageSender
from mungori.services.notifications import Notifier
from mungori.store.base import CONVERSATIONS, MESSAGES, Store, StoreError
from mungori.store.seed import seed_table

from .base import LOAD_ERRORS, ListEntry, ListViewModel

# Configure logger for this module
logger = logging.getLogger(__name__)


@dataclass
class ConversationThread:
    """An opened conversation together with its messages, oldest first."""

    conversation: Conversation
    messages: list[Message] = field(default_factory=list)


class ConversationsViewModel(ListViewModel[Conversation]):
    """Conversations newest first.

    ``unread`` only ever goes from true to false, and only through
    :meth:`open`; ``update`` never touches it. Conversations have no delete
    path.
    """

    table = CONVERSATIONS
    record_type = Conversation
    noun = "conversation"
    plural = "conversations"
    created_verb = "started"

    def __init__(self, store: Store, notifier: Notifier | None = None) -> None:
        super().__init__(store, notifier)
        self._messages: dict[str, list[Message]] = {}

    @property
    def unread_count(self) -> int:
        return sum(1 for entry in self._entries if entry.stored.unread)

    def messages(self, conversation_id: str) -> list[Message]:
        return list(self._messages.get(str(conversation_id), []))

    async def load_messages(self, conversation_id: str) -> list[Message]:
        """Fetch the messages of one conversation in creation order."""
        conversation_id = str(conversation_id)
        try:
            rows = await self.store.select(
                MESSAGES,
                filters={"conversation_id": conversation_id},
                order_by="created_at",
                descending=False,
            )
            messages = [Message.model_validate(row) for row in rows]
        except LOAD_ERRORS as exc:
            logger.warning("Loading messages of %s failed: %s", conversation_id, exc)
            self.notifier.warning("load messages", "Could not load the messages; showing sample data")
            seeded = [
                Message.model_validate(row)
                for row in seed_table(MESSAGES)
                if row["conversation_id"] == conversation_id
            ]
            messages = sorted(seeded, key=lambda message: message.created_at)

        self._messages[conversation_id] = messages
        return list(messages)

    async def open(self, conversation_id: str) -> ConversationThread | None:
        """Mark a conversation read and return it with its history."""
        entry = self.get(conversation_id)
        if entry is None:
            return None

        if entry.stored.unread:
            entry.stored = entry.stored.model_copy(update={"unread": False})
            self._changed()
            try:
                await self.store.update(self.table, entry.id, {"unread": False})
            except StoreError as exc:
                logger.warning("Persisting read flag of %s failed: %s", entry.id, exc)
                self.notifier.warning("mark as read", "Could not sync the read status")

        messages = await self.load_messages(entry.id)
        return ConversationThread(conversation=entry.stored, messages=messages)

    async def send(self, conversation_id: str, text: str) -> Message | None:
        """Append a message from this device to a conversation.

        The message shows up immediately; a store failure leaves it in place
        and emits an error notification.
        """
        entry = self.get(conversation_id)
        if entry is None or not text.strip():
            return None

        now = utcnow()
        pending = Message(
            id=f"local-{time.time_ns() // 1_000_000}",
            conversation_id=entry.id,
            content=text,
            sender=MessageSender.ME,
            created_at=now,
        )
        thread = self._messages.setdefault(entry.id, [])
        thread.append(pending)
        entry.stored = entry.stored.model_copy(update={"last_message": text, "updated_at": now})
        self._changed()

        try:
            rows = await self.store.insert(
                MESSAGES,
                [{"conversation_id": entry.id, "content": text, "sender_type": MessageSender.ME.value}],
            )
            stored = Message.model_validate(rows[0]) if rows else pending
            await self.store.update(
                self.table,
                entry.id,
                {"last_message": text, "updated_at": now.isoformat()},
            )
        except (StoreError, ValidationError) as exc:
            logger.error("Sending message to %s failed: %s", entry.id, exc)
            self.notifier.error("send message", "Failed to send the message")
            return pending

        current = self._messages.get(entry.id, [])
        if pending in current:
            current[current.index(pending)] = stored
        return stored

    def _prepare_patch(self, entry: ListEntry[Conversation], changes: dict[str, Any]) -> dict[str, Any]:
        # The read flag only changes through open().
        if "unread" in changes:
            logger.debug("Ignoring unread change for conversation %s", entry.id)
            changes.pop("unread")
        return changes

    async def create(self, draft: ConversationDraft) -> ListEntry[Conversation] | None:
        """Start a conversation and send its first message."""
        entry = await super().create(draft)
        if entry is not None:
            await self.send(entry.id, draft.content)
        return entry
