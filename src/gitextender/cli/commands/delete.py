"""gitextender delete -- delete branches from the repository."""

from __future__ import annotations

import click
from rich.markup import escape

from gitextender.cli.formatting import format_bulk_delete


@click.command()
@click.argument("url")
@click.argument("names", nargs=-1, required=True)
@click.option("-y", "--yes", is_flag=True, help="Do not ask for confirmation.")
@click.option(
    "--merged-only",
    is_flag=True,
    help="Refuse to delete branches not merged into every target.",
)
@click.pass_context
def delete(
    ctx: click.Context,
    url: str,
    names: tuple[str, ...],
    yes: bool,
    merged_only: bool,
) -> None:
    """Delete NAMES from the repository at URL.

    Requires a token. Each deletion is attempted even if an earlier one
    fails; the command exits with status 1 if any deletion failed.
    """
    from gitextender.cli import _dashboard_session

    with _dashboard_session(ctx, url) as (dashboard, console):
        to_delete = list(names)
        if merged_only:
            merged = {r.name for r in dashboard.reconcile() if r.is_fully_merged}
            refused = [n for n in to_delete if n not in merged]
            for name in refused:
                console.print(
                    f"[yellow]Skipping {escape(name)}: not merged into every target.[/yellow]"
                )
            to_delete = [n for n in to_delete if n in merged]

        if not to_delete:
            console.print("Nothing to delete.")
            return

        if not yes and not click.confirm(
            f"Delete {len(to_delete)} branch(es) from {dashboard.handle.full_name}?",
            default=False,
        ):
            console.print("[yellow]Cancelled.[/yellow] Nothing was deleted.")
            return

        result = dashboard.bulk_delete(to_delete)
        format_bulk_delete(result, console)
        if not result.ok:
            raise SystemExit(1)
