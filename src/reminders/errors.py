"""Error taxonomy for the reminder engine."""


class ReminderError(Exception):
    """Base exception for reminder engine errors."""


class ValidationError(ReminderError, ValueError):
    """Raised when an Issue or Reminder violates a field invariant."""


class NotFoundError(ReminderError, LookupError):
    """Raised when an operation references an unknown id."""

    def __init__(self, kind: str, item_id: str):
        super().__init__(f"{kind} not found: {item_id}")
        self.kind = kind
        self.item_id = item_id


class PersistenceError(ReminderError):
    """Load/save failure in the persistence collaborator."""


class NotificationError(ReminderError):
    """Delivery failure in the notifier collaborator."""
