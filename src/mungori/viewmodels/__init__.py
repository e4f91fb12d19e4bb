# src/mungori/viewmodels/__init__.py
"""View-models mirroring store tables for the three app tabs."""

from .base import (
    DeletableListViewModel,
    LikeableListViewModel,
    ListEntry,
    ListState,
    ListViewModel,
)
from .conversations import ConversationsViewModel, ConversationThread
from .market import ListingFilter, MarketViewModel
from .posts import PostsViewModel
from .unread import UnreadCounter

__all__ = [
    "ConversationThread",
    "ConversationsViewModel",
    "DeletableListViewModel",
    "LikeableListViewModel",
    "ListEntry",
    "ListState",
    "ListViewModel",
    "ListingFilter",
    "MarketViewModel",
    "PostsViewModel",
    "UnreadCounter",
]
