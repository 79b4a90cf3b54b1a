"""Best-effort side effects (persistence writes, notifications) with a bounded wait."""

import queue
import threading
from concurrent.futures import Future
from concurrent.futures import TimeoutError as FuturesTimeout
from dataclasses import dataclass, field
from typing import Any, Callable

import structlog

from observability import metrics

from .errors import NotificationError, PersistenceError, ReminderError

logger = structlog.get_logger()

PERSISTENCE = "persistence"
NOTIFICATION = "notification"

_ERROR_TYPES = {
    PERSISTENCE: PersistenceError,
    NOTIFICATION: NotificationError,
}

_STOP = object()


@dataclass
class PendingEffect:
    kind: str
    name: str
    future: Future
    context: dict[str, Any] = field(default_factory=dict)


class SideEffectRunner:
    """Runs side effects on a single worker so they complete in submission order.

    Failures and timeouts are logged and counted, never raised. The worker is a
    daemon thread: an effect that hangs past close() is abandoned, not joined.
    """

    def __init__(self, timeout: float = 5.0):
        self.timeout = timeout
        self._queue: queue.SimpleQueue = queue.SimpleQueue()
        self._closed = False
        self._worker = threading.Thread(
            target=self._run, name="spendwatch-effects", daemon=True
        )
        self._worker.start()

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            future, fn, args = item
            if not future.set_running_or_notify_cancel():
                continue
            try:
                future.set_result(fn(*args))
            except BaseException as e:
                future.set_exception(e)

    def submit(self, kind: str, name: str, fn: Callable[..., Any], *args, **context) -> PendingEffect:
        if self._closed:
            raise RuntimeError("side-effect runner is closed")
        future: Future = Future()
        self._queue.put((future, fn, args))
        return PendingEffect(kind, name, future, context)

    def wait(self, pending: list[PendingEffect]) -> int:
        """Wait for each effect up to the timeout. Returns the number that failed."""
        failures = 0
        for effect in pending:
            try:
                effect.future.result(timeout=self.timeout)
            except FuturesTimeout:
                failures += 1
                metrics.counter("side_effect_timeout")
                metrics.counter(f"{effect.kind}_failed")
                logger.warning(
                    "side_effect_timeout",
                    kind=effect.kind,
                    effect=effect.name,
                    timeout=self.timeout,
                    **effect.context,
                )
            except Exception as e:
                failures += 1
                err = e if isinstance(e, ReminderError) else _ERROR_TYPES.get(effect.kind, ReminderError)(str(e))
                metrics.counter(f"{effect.kind}_failed")
                logger.warning(
                    f"{effect.kind}_failed",
                    effect=effect.name,
                    error=str(err),
                    error_type=type(err).__name__,
                    **effect.context,
                )
        return failures

    def close(self) -> None:
        """Stop the worker, waiting at most `timeout` for in-flight effects."""
        if self._closed:
            return
        self._closed = True
        self._queue.put(_STOP)
        self._worker.join(self.timeout)
        if self._worker.is_alive():
            metrics.counter("side_effect_abandoned")
            logger.warning("side_effect_abandoned", timeout=self.timeout)
