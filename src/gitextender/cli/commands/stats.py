"""gitextender stats -- show the repository summary."""

from __future__ import annotations

import click

from gitextender.cli.formatting import format_stats


@click.command()
@click.argument("url")
@click.pass_context
def stats(ctx: click.Context, url: str) -> None:
    """Show stars, pull requests, contributors and releases for URL."""
    from gitextender.cli import _dashboard_session

    with _dashboard_session(ctx, url) as (dashboard, console):
        format_stats(dashboard.stats(), console)
