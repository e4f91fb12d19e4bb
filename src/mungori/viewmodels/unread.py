# src/mungori/viewmodels/unread.py
"""Unread badge: the number of conversations flagged unread."""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

from .conversations import ConversationsViewModel


class UnreadCounter:
    """Republishes the unread count every time the conversations change."""

    def __init__(
        self,
        conversations: ConversationsViewModel,
        callback: Callable[[int], Any],
    ) -> None:
        self._callback = callback
        self.count = conversations.unread_count
        self._unsubscribe = conversations.subscribe(self._recompute)
        callback(self.count)

    def _recompute(self, conversations: Any) -> None:
        self.count = conversations.unread_count
        self._callback(self.count)

    def detach(self) -> None:
        """Stop listening to the conversations list."""
        self._unsubscribe()
