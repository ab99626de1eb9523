from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from enum import StrEnum
from typing import Callable

logger = logging.getLogger(__name__)


class NotificationLevel(StrEnum):
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    message: str
    level: NotificationLevel
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Notifier:
    """Holds the single transient message shown to the user.

    A new message replaces the current one; a message disappears once its
    display duration has elapsed.
    """

    def __init__(
        self, display_seconds: float, clock: Callable[[], datetime] = _utcnow
    ) -> None:
        self.display_seconds = display_seconds
        self._clock = clock
        self._current: Notification | None = None

    def notify(
        self, message: str, level: NotificationLevel = NotificationLevel.INFO
    ) -> Notification:
        notification = Notification(
            message=message,
            level=level,
            expires_at=self._clock() + timedelta(seconds=self.display_seconds),
        )
        self._current = notification
        if level == NotificationLevel.ERROR:
            logger.warning("User notified of error: %s", message)
        return notification

    def info(self, message: str) -> Notification:
        return self.notify(message, NotificationLevel.INFO)

    def warning(self, message: str) -> Notification:
        return self.notify(message, NotificationLevel.WARNING)

    def error(self, message: str) -> Notification:
        return self.notify(message, NotificationLevel.ERROR)

    def current(self) -> Notification | None:
        if self._current is not None and self._clock() >= self._current.expires_at:
            self._current = None
        return self._current
