"""Rule store: sole owner of issues, reminders and firing history.

Every mutation runs under one re-entrant lock: mutate, recompute stats, snapshot
the dirty collections, and enqueue persistence/notifier calls. The calls are
awaited (with a timeout) only after the lock is released, so a slow disk or
notifier never blocks other writers and never rolls back in-memory state.
"""

import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Optional

import structlog
from pydantic import TypeAdapter
from pydantic import ValidationError as ModelValidationError

from observability import metrics

from .effects import NOTIFICATION, PERSISTENCE, PendingEffect, SideEffectRunner
from .errors import NotFoundError, ValidationError
from .models import (
    MAX_SEVERITY,
    MIN_SEVERITY,
    HistoryEntry,
    Issue,
    Reminder,
    ReminderStats,
    resolution_problem,
    schedule_problem,
)
from .notifier import Notifier
from .persistence import Persistence
from .schedule import next_reminder_date
from .stats import DEFAULT_SAVINGS_PER_PROBLEM, compute_stats

logger = structlog.get_logger()

ISSUES_KEY = "spending_issues"
REMINDERS_KEY = "spending_reminders"
HISTORY_KEY = "reminder_history"

_ADAPTERS: dict[str, TypeAdapter] = {
    ISSUES_KEY: TypeAdapter(list[Issue]),
    REMINDERS_KEY: TypeAdapter(list[Reminder]),
    HISTORY_KEY: TypeAdapter(list[HistoryEntry]),
}

StatsListener = Callable[[ReminderStats], None]


@dataclass
class RuleState:
    issues: list[Issue] = field(default_factory=list)
    reminders: list[Reminder] = field(default_factory=list)
    history: list[HistoryEntry] = field(default_factory=list)

    def find_issue(self, issue_id: str) -> Optional[Issue]:
        return next((i for i in self.issues if i.id == issue_id), None)

    def find_reminder(self, reminder_id: str) -> Optional[Reminder]:
        return next((r for r in self.reminders if r.id == reminder_id), None)

    def collection(self, key: str) -> list:
        return {ISSUES_KEY: self.issues, REMINDERS_KEY: self.reminders, HISTORY_KEY: self.history}[key]


class StoreBatch:
    """Exclusive, mutable view of the store for the duration of one batch."""

    def __init__(self, state: RuleState, now: datetime):
        self.state = state
        self.now = now
        self.dirty: list[str] = []
        self.notifications: list[tuple[str, tuple]] = []

    @property
    def changed(self) -> bool:
        return bool(self.dirty)

    def mark(self, key: str) -> None:
        if key not in self.dirty:
            self.dirty.append(key)

    def notify(self, method: str, *args: Any) -> None:
        """Queue a notifier call to run after the batch commits."""
        self.notifications.append((method, args))

    def record_fire(self, reminder: Reminder, entry: HistoryEntry) -> None:
        self.state.history.append(entry)
        self.mark(HISTORY_KEY)
        self.mark(REMINDERS_KEY)
        self.notify("send_now", reminder.title, reminder.message)


class RuleStore:
    """In-memory truth for issues, reminders and history, persisted through a collaborator."""

    def __init__(
        self,
        persistence: Persistence,
        notifier: Optional[Notifier] = None,
        runner: Optional[SideEffectRunner] = None,
        clock: Callable[[], datetime] = datetime.now,
        savings_per_problem: float = DEFAULT_SAVINGS_PER_PROBLEM,
        reset_counters_on_toggle: bool = True,
        effect_timeout: float = 5.0,
    ):
        self._persistence = persistence
        self._notifier = notifier
        self._owns_runner = runner is None
        self._runner = runner or SideEffectRunner(timeout=effect_timeout)
        self._clock = clock
        self.savings_per_problem = savings_per_problem
        self.reset_counters_on_toggle = reset_counters_on_toggle

        self._lock = threading.RLock()
        self._batch: Optional[StoreBatch] = None
        self._listeners: list[StatsListener] = []

        self._state = RuleState(
            issues=self._load(ISSUES_KEY),
            reminders=self._load(REMINDERS_KEY),
            history=self._load(HISTORY_KEY),
        )
        self._stats = self._compute_stats(self._clock())
        logger.debug(
            "rule_store_loaded",
            issues=len(self._state.issues),
            reminders=len(self._state.reminders),
            history=len(self._state.history),
        )

    # --- loading / committing ---

    def _load(self, key: str) -> list:
        try:
            data = self._persistence.load(key)
        except Exception as e:
            metrics.counter("persistence_failed")
            logger.warning("persistence_load_failed", key=key, error=str(e))
            return []
        if not data:
            return []
        try:
            return _ADAPTERS[key].validate_json(data)
        except ModelValidationError as e:
            metrics.counter("persistence_failed")
            logger.warning("persistence_decode_failed", key=key, errors=e.error_count())
            return []

    def _compute_stats(self, now: datetime) -> ReminderStats:
        return compute_stats(
            self._state.issues,
            self._state.reminders,
            self._state.history,
            now=now,
            savings_per_problem=self.savings_per_problem,
        )

    @contextmanager
    def batch(self):
        """Hold the store lock across several mutations; commit once at the end.

        Nested batches join the outermost one.
        """
        self._lock.acquire()
        if self._batch is not None:
            try:
                yield self._batch
            finally:
                self._lock.release()
            return

        batch = self._batch = StoreBatch(self._state, self._clock())
        pending: list[PendingEffect] = []
        stats = None
        try:
            yield batch
        finally:
            self._batch = None
            try:
                if batch.changed:
                    pending = self._commit(batch)
                    stats = self._stats
            finally:
                self._lock.release()
            self._runner.wait(pending)
            if stats is not None:
                self._emit(stats)

    def _commit(self, batch: StoreBatch) -> list[PendingEffect]:
        """Recompute stats and enqueue side effects. Caller holds the lock."""
        self._stats = self._compute_stats(batch.now)
        pending = []
        for key in batch.dirty:
            blob = _ADAPTERS[key].dump_json(self._state.collection(key))
            pending.append(
                self._runner.submit(PERSISTENCE, "save", self._persistence.save, key, blob, key=key)
            )
        if self._notifier is not None:
            for method, args in batch.notifications:
                pending.append(
                    self._runner.submit(NOTIFICATION, method, getattr(self._notifier, method), *args)
                )
        return pending

    def _emit(self, stats: ReminderStats) -> None:
        for listener in list(self._listeners):
            try:
                listener(stats)
            except Exception as e:
                logger.warning("state_listener_failed", error=str(e))

    def subscribe(self, listener: StatsListener) -> Callable[[], None]:
        """Call listener(stats) after every committed mutation. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def close(self) -> None:
        if self._owns_runner:
            self._runner.close()

    # --- issues ---

    def add_issue(self, issue: Issue) -> Issue:
        if not MIN_SEVERITY <= issue.severity <= MAX_SEVERITY:
            raise ValidationError(
                f"severity must be in [{MIN_SEVERITY}, {MAX_SEVERITY}], got {issue.severity}"
            )
        problem = resolution_problem(issue)
        if problem:
            raise ValidationError(problem)

        stored = issue.model_copy(deep=True)
        with self.batch() as batch:
            if batch.state.find_issue(stored.id) is not None:
                raise ValidationError(f"duplicate issue id: {stored.id}")
            batch.state.issues.append(stored)
            batch.mark(ISSUES_KEY)
            logger.info("issue_added", issue_id=stored.id, issue_type=str(stored.issue_type))
            return stored.model_copy(deep=True)

    def resolve_issue(self, issue_id: str, note: Optional[str] = None) -> Issue:
        with self.batch() as batch:
            issue = batch.state.find_issue(issue_id)
            if issue is None:
                raise NotFoundError("issue", issue_id)
            issue.is_resolved = True
            issue.resolved_at = batch.now
            issue.resolved_note = note
            batch.mark(ISSUES_KEY)
            logger.info("issue_resolved", issue_id=issue_id)
            return issue.model_copy(deep=True)

    def delete_issue(self, issue_id: str) -> bool:
        """Remove an issue. Returns False (no error) if it was already gone."""
        with self.batch() as batch:
            before = len(batch.state.issues)
            batch.state.issues[:] = [i for i in batch.state.issues if i.id != issue_id]
            if len(batch.state.issues) == before:
                return False
            batch.mark(ISSUES_KEY)
            logger.info("issue_deleted", issue_id=issue_id)
            return True

    # --- reminders ---

    def add_reminder(self, reminder: Reminder) -> Reminder:
        """Store a reminder, dating it if time-driven and undated.

        Raises ValidationError for a broken schedule or a duplicate id. Building
        such a Reminder directly already fails with pydantic's ValidationError;
        both are ValueError subclasses.
        """
        problem = schedule_problem(reminder)
        if problem:
            raise ValidationError(problem)

        stored = reminder.model_copy(deep=True)
        with self.batch() as batch:
            if batch.state.find_reminder(stored.id) is not None:
                raise ValidationError(f"duplicate reminder id: {stored.id}")
            if stored.frequency.is_time_driven and stored.next_reminder_date is None:
                stored.next_reminder_date = next_reminder_date(stored.frequency, batch.now)
            batch.state.reminders.append(stored)
            batch.mark(REMINDERS_KEY)
            if stored.is_active and stored.next_reminder_date is not None:
                batch.notify(
                    "schedule_at", stored.id, stored.title, stored.message, stored.next_reminder_date
                )
            logger.info(
                "reminder_added",
                reminder_id=stored.id,
                frequency=str(stored.frequency),
                next_reminder_date=stored.next_reminder_date.isoformat()
                if stored.next_reminder_date
                else None,
            )
            return stored.model_copy(deep=True)

    def toggle_reminder(self, reminder_id: str) -> Reminder:
        """Flip is_active.

        With reset_counters_on_toggle the rule starts over: count, last fire and
        next date return to their initial values.
        """
        with self.batch() as batch:
            reminder = batch.state.find_reminder(reminder_id)
            if reminder is None:
                raise NotFoundError("reminder", reminder_id)
            reminder.is_active = not reminder.is_active
            if self.reset_counters_on_toggle:
                reminder.reminder_count = 0
                reminder.last_triggered_at = None
                reminder.next_reminder_date = next_reminder_date(reminder.frequency, batch.now)
            batch.mark(REMINDERS_KEY)

            if not reminder.is_active:
                batch.notify("cancel", reminder.id)
            elif reminder.next_reminder_date is not None:
                batch.notify(
                    "schedule_at",
                    reminder.id,
                    reminder.title,
                    reminder.message,
                    reminder.next_reminder_date,
                )
            logger.info("reminder_toggled", reminder_id=reminder_id, is_active=reminder.is_active)
            return reminder.model_copy(deep=True)

    def delete_reminder(self, reminder_id: str) -> bool:
        """Remove a reminder and cancel its scheduled notification. Idempotent."""
        with self.batch() as batch:
            before = len(batch.state.reminders)
            batch.state.reminders[:] = [r for r in batch.state.reminders if r.id != reminder_id]
            if len(batch.state.reminders) == before:
                return False
            batch.mark(REMINDERS_KEY)
            batch.notify("cancel", reminder_id)
            logger.info("reminder_deleted", reminder_id=reminder_id)
            return True

    # --- history ---

    def append_history(self, entry: HistoryEntry) -> HistoryEntry:
        with self.batch() as batch:
            batch.state.history.append(entry)
            batch.mark(HISTORY_KEY)
            return entry

    # --- queries ---

    def get_issue(self, issue_id: str) -> Issue:
        with self._lock:
            issue = self._state.find_issue(issue_id)
            if issue is None:
                raise NotFoundError("issue", issue_id)
            return issue.model_copy(deep=True)

    def get_reminder(self, reminder_id: str) -> Reminder:
        with self._lock:
            reminder = self._state.find_reminder(reminder_id)
            if reminder is None:
                raise NotFoundError("reminder", reminder_id)
            return reminder.model_copy(deep=True)

    def list_issues(self) -> list[Issue]:
        with self._lock:
            return [i.model_copy(deep=True) for i in self._state.issues]

    def list_reminders(self) -> list[Reminder]:
        with self._lock:
            return [r.model_copy(deep=True) for r in self._state.reminders]

    def list_history(self, reminder_id: Optional[str] = None) -> list[HistoryEntry]:
        with self._lock:
            return [h for h in self._state.history if reminder_id is None or h.reminder_id == reminder_id]

    def issues_for_purchase(self, purchase_id: str) -> list[Issue]:
        return [i for i in self.list_issues() if i.purchase_id == purchase_id]

    def unresolved_issues(self) -> list[Issue]:
        return [i for i in self.list_issues() if not i.is_resolved]

    def active_reminders(self) -> list[Reminder]:
        return [r for r in self.list_reminders() if r.is_active]

    def current_stats(self) -> ReminderStats:
        """Stats recomputed now from a consistent snapshot."""
        with self._lock:
            return self._compute_stats(self._clock())
