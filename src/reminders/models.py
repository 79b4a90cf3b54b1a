"""Data models for spending issues, reminder rules and their firing history."""

import uuid
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from shared_types import IssueType, ReminderFrequency

MIN_SEVERITY = 1
MAX_SEVERITY = 5


def _new_id() -> str:
    return uuid.uuid4().hex


def clamp_severity(value: int) -> int:
    """Clamp a severity into [MIN_SEVERITY, MAX_SEVERITY]."""
    return max(MIN_SEVERITY, min(MAX_SEVERITY, int(value)))


class Issue(BaseModel):
    """A problem the user flagged on a past purchase."""

    id: str = Field(default_factory=_new_id)
    purchase_id: str
    issue_type: IssueType
    description: str = ""
    created_at: datetime = Field(default_factory=datetime.now)
    severity: int = 3
    is_resolved: bool = False
    resolved_at: Optional[datetime] = None
    resolved_note: Optional[str] = None

    @field_validator("severity")
    @classmethod
    def clamp(cls, v: int) -> int:
        return clamp_severity(v)

    @model_validator(mode="after")
    def check_resolution(self):
        problem = resolution_problem(self)
        if problem:
            raise ValueError(problem)
        return self


def resolution_problem(issue: Issue) -> Optional[str]:
    """Describe a broken resolution invariant, or None if consistent."""
    if issue.is_resolved and issue.resolved_at is None:
        return "resolved issue needs resolved_at"
    if not issue.is_resolved and (issue.resolved_at is not None or issue.resolved_note is not None):
        return "unresolved issue cannot carry resolved_at/resolved_note"
    return None


class Trigger(BaseModel):
    """Match condition for a reminder. None means "don't care"."""

    merchant_name: Optional[str] = None
    category: Optional[str] = None
    amount_threshold: Optional[float] = None
    # Reserved for time-window matching; not consulted by the evaluator.
    time_of_day: Optional[str] = None
    day_of_week: Optional[int] = Field(default=None, ge=1, le=7)
    day_of_month: Optional[int] = Field(default=None, ge=1, le=31)

    def is_empty(self) -> bool:
        return all(v is None for v in self.model_dump().values())


class Reminder(BaseModel):
    """A standing rule that produces a notification when its condition matches."""

    id: str = Field(default_factory=_new_id)
    title: str
    message: str
    issue_type: IssueType
    frequency: ReminderFrequency
    trigger: Trigger = Field(default_factory=Trigger)
    is_active: bool = True
    created_at: datetime = Field(default_factory=datetime.now)
    next_reminder_date: Optional[datetime] = None
    reminder_count: int = Field(default=0, ge=0)
    last_triggered_at: Optional[datetime] = None

    @model_validator(mode="after")
    def check_schedule(self):
        problem = schedule_problem(self)
        if problem:
            raise ValueError(problem)
        return self


def schedule_problem(reminder: Reminder) -> Optional[str]:
    """Describe a broken scheduling invariant, or None if consistent."""
    if reminder.reminder_count < 0:
        return "reminder_count cannot be negative"
    if not reminder.frequency.is_time_driven and reminder.next_reminder_date is not None:
        return f"{reminder.frequency} reminders cannot have a next_reminder_date"
    return None


class HistoryEntry(BaseModel):
    """Immutable record of one reminder firing."""

    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=_new_id)
    reminder_id: str
    triggered_at: datetime = Field(default_factory=datetime.now)
    trigger_context: str = ""
    was_acted_upon: bool = False
    user_response: Optional[str] = None


class PurchaseEvent(BaseModel):
    """A newly recorded purchase, as reported by the host application."""

    id: str = Field(default_factory=_new_id)
    merchant_name: str
    category: str
    amount: float = 0.0
    timestamp: datetime = Field(default_factory=datetime.now)
    emotion: Optional[str] = None
    description: str = ""

    def describe(self) -> str:
        return f"New spending record: {self.merchant_name}"


class ReminderStats(BaseModel):
    """Derived counters; always recomputed from the store, never mutated."""

    model_config = ConfigDict(frozen=True)

    total_reminders: int = 0
    active_reminders: int = 0
    triggered_today: int = 0
    problems_solved: int = 0
    money_saved: float = 0.0
    total_issues: int = 0
