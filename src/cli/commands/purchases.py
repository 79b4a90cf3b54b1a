"""Purchase evaluation, history and stats commands."""

import click
from rich.table import Table

from cli.utils import console, fmt_date, get_service, resolve_id, short_id
from reminders import PurchaseEvent


@click.command()
@click.argument("merchant")
@click.argument("category")
@click.argument("amount", type=float)
@click.option("--emotion", default=None, help="How the purchase felt (e.g. regret)")
def purchase(merchant: str, category: str, amount: float, emotion: str):
    """Report a new purchase and fire any matching reminders."""
    event = PurchaseEvent(merchant_name=merchant, category=category, amount=amount, emotion=emotion)
    service = get_service()
    try:
        fired = service.evaluate(event)
        risk = service.risk_score(event)
    finally:
        service.close()

    if not fired:
        console.print("[green]No reminders fired.[/]")
    else:
        console.print(f"[bold]{len(fired)} reminder(s) fired[/]")
    console.print(f"[dim]Risk score: {risk:.1f}/5[/]")


@click.command()
@click.option("--reminder", "reminder_id", default=None, help="Only this reminder's firings")
@click.option("-n", "--limit", default=20, help="Max entries to show")
def history(reminder_id: str, limit: int):
    """Show reminder firing history, newest first."""
    service = get_service()
    try:
        titles = {r.id: r.title for r in service.list_reminders()}
        if reminder_id:
            reminder_id = resolve_id(reminder_id, list(titles))
        entries = service.list_history(reminder_id)
    finally:
        service.close()

    if not entries:
        console.print("[yellow]No reminders have fired yet.[/]")
        return

    table = Table(show_header=True, title="History")
    table.add_column("When", style="cyan")
    table.add_column("Reminder")
    table.add_column("Context", max_width=40)

    for h in reversed(entries[-limit:]):
        title = titles.get(h.reminder_id, f"[dim]deleted {short_id(h.reminder_id)}[/]")
        table.add_row(fmt_date(h.triggered_at), title, h.trigger_context)

    console.print(table)


@click.command()
def stats():
    """Show reminder statistics."""
    service = get_service()
    try:
        s = service.current_stats()
    finally:
        service.close()

    console.print(f"\n[bold]Reminders:[/] {s.active_reminders} active / {s.total_reminders} total")
    console.print(f"[bold]Triggered today:[/] {s.triggered_today}")
    console.print(f"[bold]Problems solved:[/] {s.problems_solved} / {s.total_issues}")
    console.print(f"[bold]Estimated savings:[/] ${s.money_saved:,.2f}")
