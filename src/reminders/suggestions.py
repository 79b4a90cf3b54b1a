"""Reminder suggestions: maps a freshly flagged issue to a candidate rule."""

from typing import NamedTuple

from shared_types import IssueType, ReminderFrequency

from .models import Issue, Reminder, Trigger


class SuggestionPolicy(NamedTuple):
    frequency: ReminderFrequency
    title: str
    message: str


SUGGESTION_POLICIES: dict[IssueType, SuggestionPolicy] = {
    IssueType.OVER_BUDGET: SuggestionPolicy(
        ReminderFrequency.BEFORE_CATEGORY,
        "Budget Reminder",
        "Notice: Last spending in this category exceeded budget",
    ),
    IssueType.UNNECESSARY_PURCHASE: SuggestionPolicy(
        ReminderFrequency.BEFORE_SIMILAR_PURCHASE,
        "Spending Reminder",
        "Reminder: This type of spending was previously marked as unnecessary",
    ),
    IssueType.IMPULSE_SPENDING: SuggestionPolicy(
        ReminderFrequency.BEFORE_MERCHANT,
        "Impulse Spending Reminder",
        "Slow down! Previous impulse spending occurred here",
    ),
    IssueType.SUBSCRIPTION_FORGOTTEN: SuggestionPolicy(
        ReminderFrequency.MONTHLY,
        "Subscription Check",
        "Remember to check if this subscription is still needed",
    ),
}

FALLBACK_POLICY = SuggestionPolicy(
    ReminderFrequency.ONCE,
    "Spending Reminder",
    "Notice: There was a previous issue here",
)


def policy_for(issue_type: IssueType) -> SuggestionPolicy:
    return SUGGESTION_POLICIES.get(issue_type, FALLBACK_POLICY)


def suggest_reminder(issue: Issue) -> Reminder:
    """Propose a reminder for a new issue.

    The trigger is left empty; callers may fill in merchant or
    category before saving. The store computes next_reminder_date on add.
    """
    policy = policy_for(issue.issue_type)
    return Reminder(
        title=policy.title,
        message=policy.message,
        issue_type=issue.issue_type,
        frequency=policy.frequency,
        trigger=Trigger(),
    )
