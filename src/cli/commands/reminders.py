"""Reminder rule CLI commands."""

import click
from rich.table import Table

from cli.utils import console, fmt_date, get_service, resolve_id, short_id
from reminders import NotFoundError, Reminder, Trigger
from shared_types import IssueType, ReminderFrequency


@click.group()
def reminder():
    """Manage reminder rules."""
    pass


@reminder.command("add")
@click.option("--title", required=True)
@click.option("--message", required=True)
@click.option(
    "-t",
    "--type",
    "issue_type",
    required=True,
    type=click.Choice([t.value for t in IssueType]),
    help="Issue type this rule guards against",
)
@click.option(
    "-f",
    "--frequency",
    required=True,
    type=click.Choice([f.value for f in ReminderFrequency]),
)
@click.option("--merchant", default=None, help="Merchant name to match")
@click.option("--category", default=None, help="Category to match")
@click.option("--amount", "amount_threshold", default=None, type=float, help="Amount threshold")
def reminder_add(title, message, issue_type, frequency, merchant, category, amount_threshold):
    """Create a reminder rule."""
    rule = Reminder(
        title=title,
        message=message,
        issue_type=IssueType(issue_type),
        frequency=ReminderFrequency(frequency),
        trigger=Trigger(merchant_name=merchant, category=category, amount_threshold=amount_threshold),
    )
    service = get_service()
    try:
        stored = service.add_reminder(rule)
    finally:
        service.close()
    console.print(f"[green]Added[/] {stored.title} [dim]{short_id(stored.id)}[/]")


@reminder.command("list")
@click.option("--active", is_flag=True, help="Only active rules")
def reminder_list(active: bool):
    """List reminder rules."""
    service = get_service()
    try:
        rules = service.store.active_reminders() if active else service.list_reminders()
    finally:
        service.close()

    if not rules:
        console.print("[yellow]No reminders found.[/]")
        return

    table = Table(show_header=True, title="Reminders")
    table.add_column("ID", style="dim", width=8)
    table.add_column("Title", style="cyan", max_width=30)
    table.add_column("Frequency", style="green")
    table.add_column("Condition")
    table.add_column("Fired", justify="right")
    table.add_column("Next")
    table.add_column("Active")

    for r in rules:
        condition = ", ".join(
            part
            for part in (r.trigger.merchant_name, r.trigger.category)
            if part
        ) or "-"
        table.add_row(
            short_id(r.id),
            r.title,
            r.frequency.display_name,
            condition,
            str(r.reminder_count),
            fmt_date(r.next_reminder_date),
            "[green]yes[/]" if r.is_active else "[dim]no[/]",
        )

    console.print(table)


@reminder.command("toggle")
@click.argument("reminder_id")
def reminder_toggle(reminder_id: str):
    """Activate or deactivate a rule."""
    service = get_service()
    try:
        full_id = resolve_id(reminder_id, [r.id for r in service.list_reminders()])
        updated = service.toggle_reminder(full_id)
    except NotFoundError:
        console.print(f"[red]Reminder not found:[/] {reminder_id}")
        raise SystemExit(1)
    finally:
        service.close()
    state = "active" if updated.is_active else "inactive"
    console.print(f"{updated.title} is now [bold]{state}[/]")


@reminder.command("delete")
@click.argument("reminder_id")
def reminder_delete(reminder_id: str):
    """Delete a rule and cancel its pending notification."""
    service = get_service()
    try:
        full_id = resolve_id(reminder_id, [r.id for r in service.list_reminders()])
        removed = service.delete_reminder(full_id)
    finally:
        service.close()
    if removed:
        console.print(f"[green]Deleted[/] {short_id(full_id)}")
    else:
        console.print(f"[yellow]Nothing to delete:[/] {reminder_id}")
