# src/mungori/schemas/__init__.py
"""Pydantic schemas for the Mungori community client."""

from .common import Draft, StoredRecord
from .market import (
    ItemStatus,
    ItemType,
    MarketCategory,
    MarketItem,
    MarketItemDraft,
    MarketItemImage,
    MarketItemPatch,
    PendingFile,
)
from .message import Conversation, ConversationDraft, Message, MessageSender
from .post import Post, PostCategory, PostDraft

__all__ = [
    "Conversation",
    "ConversationDraft",
    "Draft",
    "ItemStatus",
    "ItemType",
    "MarketCategory",
    "MarketItem",
    "MarketItemDraft",
    "MarketItemImage",
    "MarketItemPatch",
    "Message",
    "MessageSender",
    "PendingFile",
    "Post",
    "PostCategory",
    "PostDraft",
    "StoredRecord",
]
