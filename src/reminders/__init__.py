"""Spending-issue tracking and reminder-trigger engine."""

from .errors import (
    NotFoundError,
    NotificationError,
    PersistenceError,
    ReminderError,
    ValidationError,
)
from .evaluator import FiredReminder, TriggerEvaluator, matches
from .models import HistoryEntry, Issue, PurchaseEvent, Reminder, ReminderStats, Trigger
from .notifier import LogNotifier, Notifier
from .persistence import InMemoryPersistence, Persistence, SqlitePersistence
from .schedule import next_reminder_date
from .service import ReminderService
from .stats import compute_stats, risk_score
from .store import RuleStore
from .suggestions import suggest_reminder

__all__ = [
    "FiredReminder",
    "HistoryEntry",
    "InMemoryPersistence",
    "Issue",
    "LogNotifier",
    "NotFoundError",
    "NotificationError",
    "Notifier",
    "Persistence",
    "PersistenceError",
    "PurchaseEvent",
    "Reminder",
    "ReminderError",
    "ReminderService",
    "ReminderStats",
    "RuleStore",
    "SqlitePersistence",
    "Trigger",
    "TriggerEvaluator",
    "ValidationError",
    "compute_stats",
    "matches",
    "next_reminder_date",
    "risk_score",
    "suggest_reminder",
]
