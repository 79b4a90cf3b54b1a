"""Stats aggregation over the rule store's collections."""

from datetime import datetime
from typing import Iterable

from .models import HistoryEntry, Issue, PurchaseEvent, Reminder, ReminderStats

# Flat estimate per resolved problem, not derived from real amounts.
DEFAULT_SAVINGS_PER_PROBLEM = 50.0

RISKY_CATEGORIES = {"Entertainment", "Shopping"}
REGRET_EMOTIONS = {"regret", "sad"}


def compute_stats(
    issues: Iterable[Issue],
    reminders: Iterable[Reminder],
    history: Iterable[HistoryEntry],
    now: datetime,
    savings_per_problem: float = DEFAULT_SAVINGS_PER_PROBLEM,
) -> ReminderStats:
    """Recompute every counter from scratch."""
    issues = list(issues)
    reminders = list(reminders)
    today = now.date()

    problems_solved = sum(1 for i in issues if i.is_resolved)
    return ReminderStats(
        total_reminders=len(reminders),
        active_reminders=sum(1 for r in reminders if r.is_active),
        triggered_today=sum(1 for h in history if h.triggered_at.date() == today),
        problems_solved=problems_solved,
        money_saved=problems_solved * savings_per_problem,
        total_issues=len(issues),
    )


def risk_score(event: PurchaseEvent) -> float:
    """Heuristic 0-5 risk of a purchase turning into an issue."""
    score = 0.0
    if event.amount > 100:
        score += 1.0
    if event.amount > 500:
        score += 1.0
    if event.category in RISKY_CATEGORIES:
        score += 0.5
    if event.emotion and event.emotion.lower() in REGRET_EMOTIONS:
        score += 1.0
    return min(5.0, score)
