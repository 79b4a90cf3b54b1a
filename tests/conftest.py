"""Shared test fixtures for spendwatch."""

import sys
from datetime import datetime, timedelta
from pathlib import Path

import pytest

# Add src to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from reminders.effects import SideEffectRunner  # noqa: E402
from reminders.persistence import InMemoryPersistence  # noqa: E402
from reminders.store import RuleStore  # noqa: E402


class FakeClock:
    """Settable clock; call it to read the time."""

    def __init__(self, now: datetime):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> datetime:
        self.now = self.now + timedelta(**kwargs)
        return self.now


class RecordingNotifier:
    """Notifier that records every call in order."""

    def __init__(self):
        self.calls: list[tuple] = []

    def schedule_at(self, reminder_id, title, body, when):
        self.calls.append(("schedule_at", reminder_id, title, body, when))

    def send_now(self, title, body):
        self.calls.append(("send_now", title, body))

    def cancel(self, reminder_id):
        self.calls.append(("cancel", reminder_id))

    def of(self, method: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == method]


@pytest.fixture
def clock():
    return FakeClock(datetime(2024, 3, 15, 12, 0, 0))


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def persistence():
    return InMemoryPersistence()


@pytest.fixture
def runner():
    r = SideEffectRunner(timeout=2.0)
    yield r
    r.close()


@pytest.fixture
def store(persistence, notifier, runner, clock):
    return RuleStore(persistence, notifier=notifier, runner=runner, clock=clock)
