# src/mungori/services/notifications.py
"""Transient user-visible notifications.

Every user-visible failure or confirmation surfaces here as a short message
naming the affected action. Nothing blocks and nothing is retried.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum

from mungori.core.clock import utcnow

# Configure logger for this module
logger = logging.getLogger(__name__)


class NotificationLevel(StrEnum):
    SUCCESS = "success"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


_LOG_LEVELS = {
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    """A single transient message shown to the user."""

    level: NotificationLevel
    action: str
    message: str
    created_at: datetime = field(default_factory=utcnow)


Listener = Callable[[Notification], None]


class Notifier:
    """Collects notifications and fans them out to listeners."""

    def __init__(self) -> None:
        self._history: list[Notification] = []
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener`` and return a callable that removes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def notify(self, level: NotificationLevel, action: str, message: str) -> Notification:
        notification = Notification(level=level, action=action, message=message)
        self._history.append(notification)
        logger.log(_LOG_LEVELS[level], "[%s] %s", action, message)
        for listener in list(self._listeners):
            try:
                listener(notification)
            except Exception:  # pragma: no cover - listener failure
                logger.exception("Notification listener failed for %s", action)
        return notification

    def success(self, action: str, message: str) -> Notification:
        return self.notify(NotificationLevel.SUCCESS, action, message)

    def info(self, action: str, message: str) -> Notification:
        return self.notify(NotificationLevel.INFO, action, message)

    def warning(self, action: str, message: str) -> Notification:
        return self.notify(NotificationLevel.WARNING, action, message)

    def error(self, action: str, message: str) -> Notification:
        return self.notify(NotificationLevel.ERROR, action, message)

    @property
    def history(self) -> list[Notification]:
        return list(self._history)

    def of_level(self, level: NotificationLevel) -> list[Notification]:
        """Return past notifications with the given level."""
        return [item for item in self._history if item.level == level]

    def clear(self) -> None:
        self._history.clear()
