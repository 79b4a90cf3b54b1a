"""Next-reminder-date calculation for time-driven frequencies."""

import calendar
from datetime import datetime, timedelta
from typing import Optional

from shared_types import ReminderFrequency


def add_months(value: datetime, months: int) -> datetime:
    """Add calendar months, clamping the day to the target month's length."""
    month_index = value.month - 1 + months
    year = value.year + month_index // 12
    month = month_index % 12 + 1
    day = min(value.day, calendar.monthrange(year, month)[1])
    return value.replace(year=year, month=month, day=day)


_STEPS = {
    ReminderFrequency.WEEKLY: lambda d: d + timedelta(days=7),
    ReminderFrequency.MONTHLY: lambda d: add_months(d, 1),
}


def next_reminder_date(frequency: ReminderFrequency, from_: datetime) -> Optional[datetime]:
    """Next date a reminder should fire, or None.

    `once` never reschedules, and behavior-driven frequencies have no date.
    """
    step = _STEPS.get(ReminderFrequency(frequency))
    return step(from_) if step else None
