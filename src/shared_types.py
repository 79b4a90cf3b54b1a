"""Shared enums and types for spendwatch."""

from enum import StrEnum


class IssueType(StrEnum):
    OVER_BUDGET = "over_budget"
    UNNECESSARY_PURCHASE = "unnecessary"
    DUPLICATE_CHARGE = "duplicate"
    WRONG_CATEGORY = "wrong_category"
    SUSPICIOUS_CHARGE = "suspicious"
    SUBSCRIPTION_FORGOTTEN = "subscription"
    IMPULSE_SPENDING = "impulse"
    PRICE_INCREASED = "price_increase"

    @property
    def display_name(self) -> str:
        return _ISSUE_LABELS[self][0]

    @property
    def emoji(self) -> str:
        return _ISSUE_LABELS[self][1]


_ISSUE_LABELS = {
    IssueType.OVER_BUDGET: ("Over Budget", "💸"),
    IssueType.UNNECESSARY_PURCHASE: ("Unnecessary Purchase", "🤔"),
    IssueType.DUPLICATE_CHARGE: ("Duplicate Charge", "🔄"),
    IssueType.WRONG_CATEGORY: ("Wrong Category", "🏷️"),
    IssueType.SUSPICIOUS_CHARGE: ("Suspicious Charge", "⚠️"),
    IssueType.SUBSCRIPTION_FORGOTTEN: ("Forgotten Subscription", "📱"),
    IssueType.IMPULSE_SPENDING: ("Impulse Spending", "⚡"),
    IssueType.PRICE_INCREASED: ("Price Increased", "📈"),
}


class ReminderFrequency(StrEnum):
    ONCE = "once"
    BEFORE_SIMILAR_PURCHASE = "before_similar"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
    BEFORE_MERCHANT = "before_merchant"
    BEFORE_CATEGORY = "before_category"

    @property
    def is_time_driven(self) -> bool:
        """Time-driven frequencies fire on a date; the rest fire on purchases."""
        return self in TIME_DRIVEN_FREQUENCIES

    @property
    def display_name(self) -> str:
        return _FREQUENCY_LABELS[self]


TIME_DRIVEN_FREQUENCIES = frozenset(
    {ReminderFrequency.ONCE, ReminderFrequency.WEEKLY, ReminderFrequency.MONTHLY}
)

_FREQUENCY_LABELS = {
    ReminderFrequency.ONCE: "One-time Reminder",
    ReminderFrequency.BEFORE_SIMILAR_PURCHASE: "Before Similar Purchase",
    ReminderFrequency.WEEKLY: "Weekly Reminder",
    ReminderFrequency.MONTHLY: "Monthly Reminder",
    ReminderFrequency.BEFORE_MERCHANT: "Before Merchant Purchase",
    ReminderFrequency.BEFORE_CATEGORY: "Before Category Purchase",
}
