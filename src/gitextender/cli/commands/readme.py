"""gitextender readme -- print the repository README."""

from __future__ import annotations

import click


@click.command()
@click.argument("url")
@click.pass_context
def readme(ctx: click.Context, url: str) -> None:
    """Print the raw README of URL."""
    from gitextender.cli import _dashboard_session

    with _dashboard_session(ctx, url) as (dashboard, console):
        text = dashboard.readme()
        if text is None:
            console.print("[dim]No README found.[/dim]")
            return
        click.echo(text)
