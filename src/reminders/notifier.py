"""Notifier collaborators: the engine decides, these deliver."""

from datetime import datetime
from typing import Protocol

import structlog

logger = structlog.get_logger()


class Notifier(Protocol):
    """Delivery side of reminders. Delivery guarantees are the notifier's concern."""

    def schedule_at(self, reminder_id: str, title: str, body: str, when: datetime) -> None: ...

    def send_now(self, title: str, body: str) -> None: ...

    def cancel(self, reminder_id: str) -> None: ...


class LogNotifier:
    """Writes notification requests to the structured log instead of delivering them."""

    def schedule_at(self, reminder_id: str, title: str, body: str, when: datetime) -> None:
        logger.info(
            "notification_scheduled",
            reminder_id=reminder_id,
            title=title,
            body=body,
            at=when.isoformat(),
        )

    def send_now(self, title: str, body: str) -> None:
        logger.info("notification_sent", title=title, body=body)

    def cancel(self, reminder_id: str) -> None:
        logger.info("notification_cancelled", reminder_id=reminder_id)
