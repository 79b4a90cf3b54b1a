"""Tests for reminder data models."""

from datetime import datetime

import pytest
from pydantic import ValidationError as ModelValidationError

from reminders.errors import ValidationError as ReminderValidationError
from reminders.models import HistoryEntry, Issue, PurchaseEvent, Reminder, Trigger, clamp_severity
from shared_types import IssueType, ReminderFrequency


@pytest.mark.parametrize("raw,expected", [(-1, 1), (0, 1), (1, 1), (3, 3), (5, 5), (9, 5)])
def test_severity_is_clamped(raw, expected):
    issue = Issue(purchase_id="p1", issue_type=IssueType.OVER_BUDGET, severity=raw)
    assert issue.severity == expected
    assert clamp_severity(raw) == expected


@pytest.mark.parametrize("raw,expected", [("9", 5), ("0", 1), ("4", 4), (9.0, 5), (-2.0, 1)])
def test_severity_is_clamped_after_coercion(raw, expected):
    issue = Issue(purchase_id="p1", issue_type=IssueType.DUPLICATE_CHARGE, severity=raw)
    assert issue.severity == expected
    assert isinstance(issue.severity, int)


def test_issue_defaults():
    issue = Issue(purchase_id="p1", issue_type="impulse", description="late night order")
    assert issue.issue_type is IssueType.IMPULSE_SPENDING
    assert issue.severity == 3
    assert not issue.is_resolved
    assert issue.resolved_at is None and issue.resolved_note is None
    assert issue.id


def test_issue_resolution_invariant():
    with pytest.raises(ModelValidationError):
        Issue(purchase_id="p1", issue_type=IssueType.OVER_BUDGET, is_resolved=True)
    with pytest.raises(ModelValidationError):
        Issue(purchase_id="p1", issue_type=IssueType.OVER_BUDGET, resolved_note="done")

    ok = Issue(
        purchase_id="p1",
        issue_type=IssueType.OVER_BUDGET,
        is_resolved=True,
        resolved_at=datetime(2024, 1, 1),
    )
    assert ok.resolved_note is None


def test_behavior_driven_reminder_rejects_next_date():
    with pytest.raises(ModelValidationError):
        Reminder(
            title="t",
            message="m",
            issue_type=IssueType.IMPULSE_SPENDING,
            frequency=ReminderFrequency.BEFORE_MERCHANT,
            next_reminder_date=datetime(2024, 1, 1),
        )


def test_time_driven_reminder_accepts_next_date():
    r = Reminder(
        title="t",
        message="m",
        issue_type=IssueType.SUBSCRIPTION_FORGOTTEN,
        frequency=ReminderFrequency.MONTHLY,
        next_reminder_date=datetime(2024, 1, 1),
    )
    assert r.is_active
    assert r.reminder_count == 0
    assert r.trigger.is_empty()


def test_trigger_day_bounds():
    with pytest.raises(ModelValidationError):
        Trigger(day_of_week=8)
    assert not Trigger(category="Coffee").is_empty()


def test_history_entry_is_frozen():
    entry = HistoryEntry(reminder_id="r1", trigger_context="ctx")
    assert entry.was_acted_upon is False
    with pytest.raises(ModelValidationError):
        entry.trigger_context = "changed"


def test_purchase_describe():
    event = PurchaseEvent(merchant_name="Blue Bottle", category="Coffee", amount=6.5)
    assert event.describe() == "New spending record: Blue Bottle"


def test_enum_labels():
    assert IssueType.SUBSCRIPTION_FORGOTTEN.display_name == "Forgotten Subscription"
    assert IssueType("price_increase") is IssueType.PRICE_INCREASED
    assert ReminderFrequency.WEEKLY.is_time_driven
    assert not ReminderFrequency.BEFORE_SIMILAR_PURCHASE.is_time_driven
    assert ReminderFrequency.BEFORE_CATEGORY.display_name == "Before Category Purchase"


def test_schedule_errors_share_value_error_base(store):
    fields = dict(
        title="t",
        message="m",
        issue_type=IssueType.IMPULSE_SPENDING,
        frequency=ReminderFrequency.BEFORE_MERCHANT,
    )
    with pytest.raises(ValueError):
        Reminder(**fields, next_reminder_date=datetime(2024, 1, 1))

    rule = Reminder(**fields)
    rule.next_reminder_date = datetime(2024, 1, 1)
    with pytest.raises(ValueError) as excinfo:
        store.add_reminder(rule)
    assert isinstance(excinfo.value, ReminderValidationError)
