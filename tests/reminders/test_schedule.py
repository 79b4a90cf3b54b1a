"""Tests for next-reminder-date calculation."""

from datetime import datetime, timedelta

import pytest

from reminders.schedule import add_months, next_reminder_date
from shared_types import ReminderFrequency

BASE = datetime(2024, 3, 15, 9, 30)


def test_once_has_no_next_date():
    assert next_reminder_date(ReminderFrequency.ONCE, BASE) is None


def test_weekly_adds_seven_days():
    assert next_reminder_date(ReminderFrequency.WEEKLY, BASE) == BASE + timedelta(days=7)


def test_monthly_adds_calendar_month():
    assert next_reminder_date(ReminderFrequency.MONTHLY, BASE) == datetime(2024, 4, 15, 9, 30)


@pytest.mark.parametrize(
    "start,expected",
    [
        (datetime(2024, 1, 31), datetime(2024, 2, 29)),
        (datetime(2023, 1, 31), datetime(2023, 2, 28)),
        (datetime(2024, 3, 31), datetime(2024, 4, 30)),
        (datetime(2024, 12, 15), datetime(2025, 1, 15)),
    ],
)
def test_monthly_clamps_day(start, expected):
    assert add_months(start, 1) == expected


@pytest.mark.parametrize(
    "frequency",
    [
        ReminderFrequency.BEFORE_SIMILAR_PURCHASE,
        ReminderFrequency.BEFORE_MERCHANT,
        ReminderFrequency.BEFORE_CATEGORY,
    ],
)
def test_behavior_driven_never_scheduled(frequency):
    assert next_reminder_date(frequency, BASE) is None


def test_accepts_raw_value():
    assert next_reminder_date("weekly", BASE) == BASE + timedelta(days=7)
