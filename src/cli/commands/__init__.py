"""CLI command modules."""

from .init import init
from .issues import issue
from .purchases import history, purchase, stats
from .reminders import reminder

__all__ = [
    "history",
    "init",
    "issue",
    "purchase",
    "reminder",
    "stats",
]
