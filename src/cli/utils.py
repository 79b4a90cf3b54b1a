"""Shared CLI utilities."""

import sys
from datetime import datetime
from typing import Optional

import structlog
from rich.console import Console

from cli.config_models import SpendwatchConfig

console = Console()
logger = structlog.get_logger()


class ConsoleNotifier:
    """Prints notifications to the terminal; the CLI has no OS alert center."""

    def __init__(self, out: Console = console):
        self.out = out

    def schedule_at(self, reminder_id: str, title: str, body: str, when: datetime) -> None:
        self.out.print(f"[dim]Scheduled[/] {title} for {when:%Y-%m-%d %H:%M}")

    def send_now(self, title: str, body: str) -> None:
        self.out.print(f"[bold yellow]🔔 {title}[/]\n   {body}")

    def cancel(self, reminder_id: str) -> None:
        self.out.print(f"[dim]Cancelled notification {reminder_id[:8]}[/]")


def get_service(config: Optional[SpendwatchConfig] = None):
    """Build a ReminderService backed by the configured SQLite database."""
    from cli.config import load_config_model
    from reminders import PersistenceError, ReminderService, SqlitePersistence

    if config is None:
        config = load_config_model()

    try:
        persistence = SqlitePersistence(config.paths.db_path)
    except PersistenceError as e:
        console.print(f"[red]Storage error:[/] {e}")
        sys.exit(1)

    return ReminderService.create(
        persistence,
        ConsoleNotifier(),
        effect_timeout=config.effects.timeout_seconds,
        savings_per_problem=config.reminders.savings_per_problem,
        reset_counters_on_toggle=config.reminders.reset_counters_on_toggle,
        auto_add_suggestions=config.reminders.auto_add_suggestions,
    )


def short_id(item_id: str) -> str:
    return item_id[:8]


def resolve_id(item_id: str, candidates: list[str]) -> str:
    """Expand a unique id prefix to the full id. Unknown prefixes pass through."""
    matching = [c for c in candidates if c.startswith(item_id)]
    if len(matching) == 1:
        return matching[0]
    if len(matching) > 1:
        console.print(f"[red]Ambiguous id prefix:[/] {item_id}")
        sys.exit(1)
    return item_id


def fmt_date(value: Optional[datetime]) -> str:
    return value.strftime("%Y-%m-%d %H:%M") if value else "-"
