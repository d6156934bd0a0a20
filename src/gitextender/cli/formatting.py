"""Rich formatting helpers for the GitExtender CLI.

Provides functions that format SDK data structures for terminal display.
Rich auto-detects TTY and degrades gracefully when piped (no ANSI codes).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from rich.console import Console
from rich.markup import escape
from rich.table import Table

if TYPE_CHECKING:
    from gitextender.models.branch import BranchRecord, MergeStatus
    from gitextender.models.stats import RepositoryStats
    from gitextender.operations.bulk import BulkDeleteResult

_CATEGORY_STYLES = {
    "feature": "cyan",
    "bugfix": "yellow",
    "hotfix": "red",
}


def get_console() -> Console:
    """Create a Rich Console that auto-detects TTY for graceful pipe degradation."""
    return Console(stderr=False)


def _status_cell(status: MergeStatus | None) -> str:
    if status is None:
        return "[dim]-[/dim]"
    if status.is_merged:
        return "[green]merged[/green]"
    ahead = status.commits_ahead or 0
    behind = status.commits_behind or 0
    return f"[red]unmerged[/red] [dim]+{ahead}/-{behind}[/dim]"


def format_branches(
    records: list[BranchRecord], targets: list[str], console: Console
) -> None:
    """Display branches with one merge column per target."""
    if not records:
        console.print("[dim]No feature, bugfix or hotfix branches.[/dim]")
        return

    table = Table(show_header=True, header_style="bold", box=None, pad_edge=False)
    table.add_column("Branch")
    table.add_column("Type")
    table.add_column("Author", style="dim")
    table.add_column("Updated", style="dim")
    for target in targets:
        table.add_column(escape(target))

    for record in records:
        style = _CATEGORY_STYLES.get(record.category.value, "")
        table.add_row(
            escape(record.name),
            f"[{style}]{record.category.value}[/{style}]" if style else record.category.value,
            escape(record.author),
            record.last_updated.strftime("%Y-%m-%d %H:%M"),
            *(_status_cell(record.status_for(t)) for t in targets),
        )

    console.print(table)
    merged = sum(1 for r in records if r.is_fully_merged)
    console.print(f"[dim]{len(records)} branches, {merged} merged into every target[/dim]")


def format_bulk_delete(result: BulkDeleteResult, console: Console) -> None:
    """Display the outcome of a bulk deletion."""
    if result.deleted:
        console.print(f"[green]Deleted {len(result.deleted)} branch(es):[/green]")
        for name in result.deleted:
            console.print(f"  {escape(name)}")
    for name, message in result.failed.items():
        console.print(f"[red]Failed[/red] {escape(name)}: {escape(message)}")


def format_stats(stats: RepositoryStats, console: Console) -> None:
    """Display the repository summary."""
    if stats.is_empty:
        console.print("[dim]No repository statistics available.[/dim]")
        return

    if stats.description:
        console.print(escape(stats.description))
        console.print()

    rows = [
        ("Stars", stats.stars),
        ("Forks", stats.forks),
        ("Open issues", stats.open_issues),
        ("Commits (4 weeks)", stats.total_commits),
        ("Language", stats.language),
        ("License", stats.license),
        ("Visibility", stats.visibility),
        ("Default branch", stats.default_branch),
    ]
    for label, value in rows:
        if value is not None:
            console.print(f"  {label + ':':<19}{escape(str(value))}")

    if stats.pull_requests is not None:
        prs = stats.pull_requests
        console.print(
            f"  {'Pull requests:':<19}"
            f"[green]{prs.open} open[/green]  "
            f"[magenta]{prs.merged} merged[/magenta]  "
            f"[red]{prs.closed} closed[/red]"
        )
    if stats.topics:
        console.print(f"  {'Topics:':<19}{escape(', '.join(stats.topics))}")

    if stats.contributors:
        console.print()
        console.print("[bold]Top contributors:[/bold]")
        for c in stats.contributors:
            console.print(f"  {escape(c.login)} [dim]({c.contributions})[/dim]")

    if stats.releases:
        console.print()
        console.print("[bold]Recent releases:[/bold]")
        for r in stats.releases:
            date = r.published_at.strftime("%Y-%m-%d") if r.published_at else "unpublished"
            console.print(f"  [yellow]{escape(r.tag_name)}[/yellow] [dim]{date}[/dim]")


def format_error(message: str, console: Console) -> None:
    """Display an error message."""
    console.print(f"[red]Error:[/red] {escape(message)}", highlight=False)
