"""Trigger evaluation: decides which active reminders fire for a purchase."""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

import structlog

from observability import metrics
from shared_types import ReminderFrequency

from .models import HistoryEntry, PurchaseEvent, Reminder
from .schedule import next_reminder_date
from .store import RuleStore

logger = structlog.get_logger()

Matcher = Callable[[Reminder, PurchaseEvent, datetime], bool]


def _same(value: Optional[str], wanted: Optional[str]) -> bool:
    # None on the rule side never matches
    return wanted is not None and value == wanted


def _similar_purchase(reminder: Reminder, event: PurchaseEvent, now: datetime) -> bool:
    return _same(event.category, reminder.trigger.category) or _same(
        event.merchant_name, reminder.trigger.merchant_name
    )


def _same_merchant(reminder: Reminder, event: PurchaseEvent, now: datetime) -> bool:
    return _same(event.merchant_name, reminder.trigger.merchant_name)


def _same_category(reminder: Reminder, event: PurchaseEvent, now: datetime) -> bool:
    return _same(event.category, reminder.trigger.category)


def _is_due(reminder: Reminder, event: PurchaseEvent, now: datetime) -> bool:
    return reminder.next_reminder_date is not None and now >= reminder.next_reminder_date


MATCHERS: dict[ReminderFrequency, Matcher] = {
    ReminderFrequency.BEFORE_SIMILAR_PURCHASE: _similar_purchase,
    ReminderFrequency.BEFORE_MERCHANT: _same_merchant,
    ReminderFrequency.BEFORE_CATEGORY: _same_category,
    ReminderFrequency.ONCE: _is_due,
    ReminderFrequency.WEEKLY: _is_due,
    ReminderFrequency.MONTHLY: _is_due,
}


def matches(reminder: Reminder, event: PurchaseEvent, now: datetime) -> bool:
    """Whether an active reminder should fire for this purchase at `now`."""
    if not reminder.is_active:
        return False
    return MATCHERS[reminder.frequency](reminder, event, now)


def apply_fire(reminder: Reminder, event: PurchaseEvent, now: datetime) -> HistoryEntry:
    """Post-fire transition. Never deactivates the reminder."""
    entry = HistoryEntry(
        reminder_id=reminder.id,
        triggered_at=now,
        trigger_context=event.describe(),
    )
    reminder.last_triggered_at = now
    reminder.reminder_count += 1
    reminder.next_reminder_date = next_reminder_date(reminder.frequency, now)
    return entry


@dataclass(frozen=True)
class FiredReminder:
    reminder: Reminder
    history: HistoryEntry


class TriggerEvaluator:
    """Scans active reminders in creation order and fires every match.

    All matches for one purchase are applied inside a single store batch, so
    concurrent purchases cannot both see a reminder in its pre-fire state.
    """

    def __init__(self, store: RuleStore):
        self.store = store

    def evaluate(self, event: PurchaseEvent) -> list[FiredReminder]:
        fired: list[FiredReminder] = []
        with metrics.timer("evaluate"):
            with self.store.batch() as batch:
                for reminder in batch.state.reminders:
                    if not matches(reminder, event, batch.now):
                        continue
                    entry = apply_fire(reminder, event, batch.now)
                    batch.record_fire(reminder, entry)
                    fired.append(FiredReminder(reminder.model_copy(deep=True), entry))
                    metrics.counter("reminder_fired")
                    logger.info(
                        "reminder_fired",
                        reminder_id=reminder.id,
                        frequency=str(reminder.frequency),
                        reminder_count=reminder.reminder_count,
                        merchant=event.merchant_name,
                    )

        logger.debug("purchase_evaluated", purchase_id=event.id, fired=len(fired))
        return fired
