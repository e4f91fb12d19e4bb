# src/mungori/schemas/message.py
"""Inbox schemas."""

from datetime import datetime
from enum import StrEnum
from typing import Any, ClassVar

from pydantic import Field, field_validator

from .common import Draft, StoredRecord


class MessageSender(StrEnum):
    ME = "me"
    OTHER = "other"


class Conversation(StoredRecord):
    """Anonymous conversation; the nickname is display-only, not an identity."""

    nickname: str
    last_message: str = ""
    unread: bool = False
    updated_at: datetime


class Message(StoredRecord):
    """Append-only message inside one conversation."""

    conversation_id: str
    content: str
    sender: MessageSender = Field(alias="sender_type")

    @field_validator("conversation_id", mode="before")
    @classmethod
    def _stringify_owner(cls, value: Any) -> Any:
        return str(value) if value is not None else value


class ConversationDraft(Draft):
    """First message of a new conversation, e.g. about a listing."""

    required_fields: ClassVar[tuple[str, ...]] = ("nickname", "content")

    nickname: str = ""
    content: str = ""

    def to_insert_row(self) -> dict[str, Any]:
        return {"nickname": self.nickname, "last_message": self.content, "unread": False}
