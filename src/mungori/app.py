# src/mungori/app.py
"""Top-level coordinator for the three tabs of the community app."""

from __future__ import annotations

import asyncio
import logging
from enum import StrEnum

from mungori.schemas.message import Message
from mungori.services.notifications import Notifier
from mungori.store.base import Store
from mungori.viewmodels.conversations import ConversationsViewModel, ConversationThread
from mungori.viewmodels.market import MarketViewModel
from mungori.viewmodels.posts import PostsViewModel
from mungori.viewmodels.unread import UnreadCounter

# Configure logger for this module
logger = logging.getLogger(__name__)


class Tab(StrEnum):
    COMMUNITY = "community"
    MARKET = "market"
    MESSAGES = "messages"


class CommunityApp:
    """Owns the view-models, the active tab, the unread badge and the open thread.

    The selected conversation is held here and handed to the inbox view-model
    explicitly; nothing else keeps a "current conversation" around.
    """

    def __init__(self, store: Store, notifier: Notifier | None = None) -> None:
        self.store = store
        self.notifier = notifier or Notifier()
        self.posts = PostsViewModel(store, self.notifier)
        self.market = MarketViewModel(store, self.notifier)
        self.conversations = ConversationsViewModel(store, self.notifier)
        self.active_tab = Tab.COMMUNITY
        self.unread_messages = 0
        self.selected_conversation: ConversationThread | None = None
        self._unread = UnreadCounter(self.conversations, self._set_unread)

    def _set_unread(self, count: int) -> None:
        self.unread_messages = count

    @property
    def demo_mode(self) -> bool:
        return not self.store.remote

    async def start(self) -> None:
        """Load every list; each one ends populated or on its fallback data."""
        await asyncio.gather(
            self.posts.load(),
            self.market.load(),
            self.conversations.load(),
        )
        logger.info(
            "Loaded %d posts, %d listings, %d conversations (%d unread)",
            len(self.posts),
            len(self.market),
            len(self.conversations),
            self.unread_messages,
        )

    def select_tab(self, tab: Tab | str) -> Tab:
        self.active_tab = Tab(tab)
        if self.active_tab != Tab.MESSAGES:
            self.selected_conversation = None
        return self.active_tab

    async def open_conversation(self, conversation_id: str) -> ConversationThread | None:
        thread = await self.conversations.open(conversation_id)
        if thread is not None:
            self.active_tab = Tab.MESSAGES
            self.selected_conversation = thread
        return thread

    def close_conversation(self) -> None:
        self.selected_conversation = None

    async def send_message(self, text: str) -> Message | None:
        """Send ``text`` to the selected conversation, if any."""
        thread = self.selected_conversation
        if thread is None:
            return None
        message = await self.conversations.send(thread.conversation.id, text)
        if message is not None:
            entry = self.conversations.get(thread.conversation.id)
            self.selected_conversation = ConversationThread(
                conversation=entry.stored if entry else thread.conversation,
                messages=self.conversations.messages(thread.conversation.id),
            )
        return message

    async def aclose(self) -> None:
        """Let pending fire-and-forget writes finish, then close the store."""
        await asyncio.gather(self.posts.drain(), self.market.drain())
        self._unread.detach()
        await self.store.aclose()
