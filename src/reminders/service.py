"""ReminderService: the engine's entry point for host applications."""

from datetime import datetime
from typing import Callable, Optional

import structlog

from observability import log_run_summary
from shared_types import IssueType

from .evaluator import FiredReminder, TriggerEvaluator
from .models import HistoryEntry, Issue, PurchaseEvent, Reminder, ReminderStats
from .notifier import LogNotifier, Notifier
from .persistence import Persistence
from .stats import DEFAULT_SAVINGS_PER_PROBLEM, risk_score
from .store import RuleStore, StatsListener
from .suggestions import suggest_reminder

logger = structlog.get_logger()


class ReminderService:
    """Issue tracking, rule suggestion and trigger evaluation over one RuleStore."""

    def __init__(self, store: RuleStore, auto_add_suggestions: bool = True):
        self.store = store
        self.evaluator = TriggerEvaluator(store)
        self.auto_add_suggestions = auto_add_suggestions

    @classmethod
    def create(
        cls,
        persistence: Persistence,
        notifier: Optional[Notifier] = None,
        *,
        clock: Callable[[], datetime] = datetime.now,
        effect_timeout: float = 5.0,
        savings_per_problem: float = DEFAULT_SAVINGS_PER_PROBLEM,
        reset_counters_on_toggle: bool = True,
        auto_add_suggestions: bool = True,
    ) -> "ReminderService":
        store = RuleStore(
            persistence,
            notifier=notifier if notifier is not None else LogNotifier(),
            effect_timeout=effect_timeout,
            clock=clock,
            savings_per_problem=savings_per_problem,
            reset_counters_on_toggle=reset_counters_on_toggle,
        )
        return cls(store, auto_add_suggestions=auto_add_suggestions)

    def mark_issue(
        self,
        purchase_id: str,
        issue_type: IssueType,
        description: str,
        severity: int = 3,
    ) -> tuple[Issue, Optional[Reminder]]:
        """Record an issue and, if enabled, store the suggested reminder with it."""
        issue = Issue(
            purchase_id=purchase_id,
            issue_type=IssueType(issue_type),
            description=description,
            severity=severity,
        )
        reminder = None
        with self.store.batch():
            issue = self.store.add_issue(issue)
            if self.auto_add_suggestions:
                reminder = self.store.add_reminder(suggest_reminder(issue))
        return issue, reminder

    def suggest_for(self, issue: Issue) -> Reminder:
        return suggest_reminder(issue)

    def evaluate(self, event: PurchaseEvent) -> list[FiredReminder]:
        return self.evaluator.evaluate(event)

    def risk_score(self, event: PurchaseEvent) -> float:
        return risk_score(event)

    # Store pass-throughs

    def resolve_issue(self, issue_id: str, note: Optional[str] = None) -> Issue:
        return self.store.resolve_issue(issue_id, note)

    def delete_issue(self, issue_id: str) -> bool:
        return self.store.delete_issue(issue_id)

    def add_reminder(self, reminder: Reminder) -> Reminder:
        return self.store.add_reminder(reminder)

    def toggle_reminder(self, reminder_id: str) -> Reminder:
        return self.store.toggle_reminder(reminder_id)

    def delete_reminder(self, reminder_id: str) -> bool:
        return self.store.delete_reminder(reminder_id)

    def list_issues(self) -> list[Issue]:
        return self.store.list_issues()

    def list_reminders(self) -> list[Reminder]:
        return self.store.list_reminders()

    def list_history(self, reminder_id: Optional[str] = None) -> list[HistoryEntry]:
        return self.store.list_history(reminder_id)

    def current_stats(self) -> ReminderStats:
        return self.store.current_stats()

    def subscribe(self, listener: StatsListener) -> Callable[[], None]:
        return self.store.subscribe(listener)

    def close(self) -> None:
        self.store.close()
        log_run_summary()
