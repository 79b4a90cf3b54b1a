"""Issue CLI commands."""

import click
from rich.table import Table

from cli.utils import console, get_service, resolve_id, short_id
from reminders import NotFoundError
from shared_types import IssueType


@click.group()
def issue():
    """Flag and resolve problems with past purchases."""
    pass


@issue.command("add")
@click.argument("purchase_id")
@click.option(
    "-t",
    "--type",
    "issue_type",
    required=True,
    type=click.Choice([t.value for t in IssueType]),
    help="Issue type",
)
@click.option("-d", "--description", default="", help="What went wrong")
@click.option("-s", "--severity", default=3, type=int, help="1-5, clamped")
def issue_add(purchase_id: str, issue_type: str, description: str, severity: int):
    """Flag an issue on a purchase and store the suggested reminder."""
    service = get_service()
    try:
        new_issue, reminder = service.mark_issue(
            purchase_id, IssueType(issue_type), description, severity=severity
        )
    finally:
        service.close()

    kind = new_issue.issue_type
    console.print(
        f"[green]Flagged[/] {kind.emoji} {kind.display_name} "
        f"(severity {new_issue.severity}) [dim]{short_id(new_issue.id)}[/]"
    )
    if reminder:
        console.print(
            f"  Suggested reminder: [cyan]{reminder.title}[/] "
            f"({reminder.frequency.display_name}) [dim]{short_id(reminder.id)}[/]"
        )


@issue.command("list")
@click.option("--unresolved", is_flag=True, help="Only unresolved issues")
@click.option("--purchase", "purchase_id", default=None, help="Only issues on this purchase")
def issue_list(unresolved: bool, purchase_id: str):
    """List flagged issues."""
    service = get_service()
    try:
        if purchase_id:
            issues = service.store.issues_for_purchase(purchase_id)
            if unresolved:
                issues = [i for i in issues if not i.is_resolved]
        elif unresolved:
            issues = service.store.unresolved_issues()
        else:
            issues = service.list_issues()
    finally:
        service.close()

    if not issues:
        console.print("[yellow]No issues found.[/]")
        return

    table = Table(show_header=True, title="Issues")
    table.add_column("ID", style="dim", width=8)
    table.add_column("Date", style="cyan", width=10)
    table.add_column("Type", style="green")
    table.add_column("Sev", justify="right")
    table.add_column("Description", max_width=40)
    table.add_column("Status")

    for i in issues:
        status = "[green]resolved[/]" if i.is_resolved else "[yellow]open[/]"
        table.add_row(
            short_id(i.id),
            i.created_at.strftime("%Y-%m-%d"),
            i.issue_type.display_name,
            str(i.severity),
            i.description[:40],
            status,
        )

    console.print(table)


@issue.command("resolve")
@click.argument("issue_id")
@click.option("-n", "--note", default=None, help="Resolution note")
def issue_resolve(issue_id: str, note: str):
    """Mark an issue as resolved."""
    service = get_service()
    try:
        full_id = resolve_id(issue_id, [i.id for i in service.list_issues()])
        service.resolve_issue(full_id, note)
    except NotFoundError:
        console.print(f"[red]Issue not found:[/] {issue_id}")
        raise SystemExit(1)
    finally:
        service.close()
    console.print(f"[green]Resolved[/] {short_id(full_id)}")


@issue.command("delete")
@click.argument("issue_id")
def issue_delete(issue_id: str):
    """Delete an issue record."""
    service = get_service()
    try:
        full_id = resolve_id(issue_id, [i.id for i in service.list_issues()])
        removed = service.delete_issue(full_id)
    finally:
        service.close()
    if removed:
        console.print(f"[green]Deleted[/] {short_id(full_id)}")
    else:
        console.print(f"[yellow]Nothing to delete:[/] {issue_id}")
