"""gitextender branches -- show merge status of every qualifying branch."""

from __future__ import annotations

import json

import click

from gitextender.cli.formatting import format_branches


@click.command()
@click.argument("url")
@click.option(
    "--category",
    type=click.Choice(["feature", "bugfix", "hotfix"], case_sensitive=False),
    default=None,
    help="Only show branches of this category.",
)
@click.option(
    "--merged",
    "merged_filter",
    type=click.Choice(["all-merged", "any-merged", "all-unmerged"], case_sensitive=False),
    default=None,
    help="Filter by merge state across targets.",
)
@click.option("--json", "as_json", is_flag=True, help="Print JSON instead of a table.")
@click.pass_context
def branches(
    ctx: click.Context,
    url: str,
    category: str | None,
    merged_filter: str | None,
    as_json: bool,
) -> None:
    """Reconcile URL and list branches with their merge status.

    URL is a repository URL or OWNER/NAME.
    """
    from gitextender.cli import _dashboard_session
    from gitextender.models.branch import BranchCategory
    from gitextender.operations.bulk import MergeFilter, filter_branches

    with _dashboard_session(ctx, url) as (dashboard, console):
        records = filter_branches(
            dashboard.reconcile(),
            category=BranchCategory(category.lower()) if category else None,
            merged=MergeFilter(merged_filter.lower()) if merged_filter else None,
        )
        if as_json:
            payload = [r.model_dump(mode="json", exclude={"selected"}) for r in records]
            click.echo(json.dumps(payload, indent=2))
        else:
            format_branches(records, dashboard.targets, console)
