"""Tests for the side-effect runner."""

import threading
import time

import pytest

from observability import metrics
from reminders.effects import NOTIFICATION, PERSISTENCE, SideEffectRunner


def test_successful_effects_run_in_order():
    runner = SideEffectRunner(timeout=1.0)
    seen = []
    pending = [runner.submit(PERSISTENCE, "save", seen.append, i) for i in range(5)]
    assert runner.wait(pending) == 0
    assert seen == [0, 1, 2, 3, 4]
    runner.close()


def test_failure_is_counted_not_raised():
    metrics.reset()
    runner = SideEffectRunner(timeout=1.0)

    def boom():
        raise RuntimeError("offline")

    assert runner.wait([runner.submit(NOTIFICATION, "send_now", boom)]) == 1
    assert metrics.get("notification_failed") == 1
    runner.close()


def test_timeout_is_logged_and_counted():
    metrics.reset()
    release = threading.Event()
    runner = SideEffectRunner(timeout=0.05)

    pending = [runner.submit(PERSISTENCE, "save", release.wait, 5)]
    assert runner.wait(pending) == 1
    assert metrics.get("side_effect_timeout") == 1
    assert metrics.get("persistence_failed") == 1

    release.set()
    runner.close()


def test_close_does_not_wait_for_hung_effect():
    metrics.reset()
    release = threading.Event()
    runner = SideEffectRunner(timeout=0.1)
    runner.wait([runner.submit(NOTIFICATION, "send_now", release.wait, 5)])

    started = time.monotonic()
    runner.close()
    elapsed = time.monotonic() - started

    assert elapsed < 1.0
    assert metrics.get("side_effect_abandoned") == 1
    release.set()


def test_close_is_idempotent_and_rejects_new_work():
    runner = SideEffectRunner(timeout=1.0)
    runner.close()
    runner.close()
    with pytest.raises(RuntimeError):
        runner.submit(PERSISTENCE, "save", print)
