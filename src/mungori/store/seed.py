# src/mungori/store/seed.py
"""Built-in seed dataset.

Used as the whole dataset when no remote store is configured and as the
fallback list when a remote load fails. Timestamps are relative to the moment
the rows are built so the "time ago" labels stay believable.
"""

from __future__ import annotations

from datetime import datetime, timedelta

from mungori.core.clock import utcnow

from .base import CONVERSATIONS, MARKET_ITEMS, MESSAGES, POSTS, Row

# Entries shown as already liked on a fresh device.
SEED_LIKED_IDS: dict[str, frozenset[str]] = {
    POSTS: frozenset({"3"}),
    MARKET_ITEMS: frozenset({"2"}),
}


def _ago(now: datetime, **delta: float) -> str:
    return (now - timedelta(**delta)).isoformat()


def _posts(now: datetime) -> list[Row]:
    return [
        {
            "id": "1",
            "content": "New here. Any tips for taking meeting notes? I keep missing things.",
            "category": "question",
            "likes": 12,
            "comments": 8,
            "created_at": _ago(now, minutes=5),
        },
        {
            "id": "2",
            "content": "What does everyone do at lunch? I always eat alone and go for a walk...",
            "category": "chitchat",
            "likes": 24,
            "comments": 15,
            "created_at": _ago(now, minutes=32),
        },
        {
            "id": "3",
            "content": "How is the mood on the dev team? Thinking about a transfer and want honest opinions.",
            "category": "concern",
            "likes": 45,
            "comments": 23,
            "created_at": _ago(now, hours=1),
        },
    ]


def _market_items(now: datetime) -> list[Row]:
    return [
        {
            "id": "1",
            "title": "Giving away a React textbook",
            "description": "Handing over my React book. Good condition.",
            "category": "books",
            "type": "free",
            "price": None,
            "status": "available",
            "likes": 8,
            "created_at": _ago(now, minutes=10),
        },
        {
            "id": "2",
            "title": "Mechanical keyboard for sale",
            "description": "Cherry blue switches, almost new.",
            "category": "electronics",
            "type": "sell",
            "price": "50,000 KRW",
            "status": "available",
            "likes": 15,
            "created_at": _ago(now, minutes=45),
        },
    ]


def _conversations(now: datetime) -> list[Row]:
    return [
        {
            "id": "1",
            "nickname": "Anonymous colleague A",
            "last_message": "Sure, see you at lunch tomorrow!",
            "unread": True,
            "created_at": _ago(now, hours=2),
            "updated_at": _ago(now, minutes=10),
        },
        {
            "id": "2",
            "nickname": "Anonymous colleague B",
            "last_message": "How much is it?",
            "unread": True,
            "created_at": _ago(now, hours=3),
            "updated_at": _ago(now, hours=1),
        },
        {
            "id": "3",
            "nickname": "Anonymous colleague C",
            "last_message": "Thank you!",
            "unread": False,
            "created_at": _ago(now, days=1, hours=1),
            "updated_at": _ago(now, days=1),
        },
    ]


def _messages(now: datetime) -> list[Row]:
    threads = {
        "1": [
            ("me", "Hi! Is the React book still available?", 30),
            ("other", "Yes it is! When can you pick it up?", 25),
            ("me", "Would lunch tomorrow work?", 23),
            ("other", "Sure, see you at lunch tomorrow!", 10),
        ],
        "2": [
            ("other", "Are you still selling the keyboard?", 125),
            ("me", "Yes, still have it!", 120),
            ("other", "How much is it?", 60),
        ],
        "3": [
            ("other", "Your meeting-notes tips really helped!", 1500),
            ("me", "Glad they were useful ^^", 1490),
            ("other", "Thank you!", 1440),
        ],
    }
    rows: list[Row] = []
    for conversation_id, lines in threads.items():
        for index, (sender, content, minutes_ago) in enumerate(lines, start=1):
            rows.append(
                {
                    "id": f"{conversation_id}-{index}",
                    "conversation_id": conversation_id,
                    "content": content,
                    "sender_type": sender,
                    "created_at": _ago(now, minutes=minutes_ago),
                }
            )
    return rows


def seed_rows(now: datetime | None = None) -> dict[str, list[Row]]:
    """Return a fresh copy of every seed table keyed by table name."""
    now = now or utcnow()
    return {
        POSTS: _posts(now),
        MARKET_ITEMS: _market_items(now),
        CONVERSATIONS: _conversations(now),
        MESSAGES: _messages(now),
    }


def seed_table(table: str, now: datetime | None = None) -> list[Row]:
    """Return the seed rows for one table, newest first."""
    rows = seed_rows(now).get(table, [])
    return sorted(rows, key=lambda row: row["created_at"], reverse=True)
