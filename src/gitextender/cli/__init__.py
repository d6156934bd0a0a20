"""GitExtender CLI -- terminal interface for the branch dashboard.

This module is NEVER imported from gitextender/__init__.py.
It is only loaded via the ``gitextender`` entry point defined in pyproject.toml.
"""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import TYPE_CHECKING

try:
    import click
except ImportError:
    raise ImportError(
        "CLI dependencies not installed. Install with: pip install gitextender[cli]"
    ) from None

from gitextender.cli.formatting import format_error, get_console

if TYPE_CHECKING:
    from collections.abc import Iterator

    from rich.console import Console

    from gitextender.dashboard import Dashboard


@click.group()
@click.option(
    "--token",
    default=None,
    envvar="GITEXTENDER_TOKEN",
    help="Provider access token (anonymous if omitted).",
)
@click.option(
    "--api-url",
    default=None,
    envvar="GITEXTENDER_API_URL",
    help="Provider API base URL.",
)
@click.option(
    "--dev",
    "development",
    default="Development",
    envvar="GITEXTENDER_DEV_BRANCH",
    show_default=True,
    help="Development target branch.",
)
@click.option(
    "--quality",
    default="Quality",
    envvar="GITEXTENDER_QUALITY_BRANCH",
    show_default=True,
    help="Quality target branch.",
)
@click.option(
    "--prod",
    "production",
    default="Production",
    envvar="GITEXTENDER_PROD_BRANCH",
    show_default=True,
    help="Production target branch.",
)
@click.option(
    "--max-concurrency",
    default=16,
    type=click.IntRange(min=0),
    show_default=True,
    help="Maximum concurrent provider requests (0 = unlimited).",
)
@click.option("-v", "--verbose", is_flag=True, help="Enable debug logging.")
@click.pass_context
def cli(
    ctx: click.Context,
    token: str | None,
    api_url: str | None,
    development: str,
    quality: str,
    production: str,
    max_concurrency: int,
    verbose: bool,
) -> None:
    """GitExtender: merge status of feature, bugfix and hotfix branches."""
    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        )
    ctx.ensure_object(dict)
    ctx.obj["token"] = token
    ctx.obj["api_url"] = api_url
    ctx.obj["targets"] = (development, quality, production)
    ctx.obj["max_concurrency"] = max_concurrency or None


def _get_dashboard(ctx: click.Context, url: str) -> "Dashboard":  # noqa: F821 (forward ref)
    """Build a Dashboard for *url* from the options on the Click context.

    Tests may place a ``client_factory`` in ``ctx.obj`` to bypass the network.
    """
    from gitextender.dashboard import Dashboard
    from gitextender.models.config import ProviderConfig
    from gitextender.models.repository import TargetBranches

    obj = ctx.obj
    development, quality, production = obj["targets"]
    config_fields: dict = {"max_concurrency": obj["max_concurrency"]}
    if obj.get("api_url"):
        config_fields["base_url"] = obj["api_url"]

    return Dashboard.connect(
        url,
        token=obj.get("token"),
        targets=TargetBranches(
            development=development, quality=quality, production=production
        ),
        config=ProviderConfig(**config_fields),
        client_factory=obj.get("client_factory"),
    )


@contextmanager
def _dashboard_session(
    ctx: click.Context, url: str
) -> Iterator[tuple[Dashboard, Console]]:
    """Context manager that yields (dashboard, console) and formats failures.

    Any exception escaping the ``with`` block is printed as a CLI error
    and converted to exit status 1.
    """
    console = get_console()
    try:
        yield _get_dashboard(ctx, url), console
    except (SystemExit, click.Abort, click.ClickException):
        raise
    except Exception as e:
        format_error(str(e), console)
        raise SystemExit(1) from None


# Register subcommands after cli group is defined
from gitextender.cli.commands.branches import branches  # noqa: E402
from gitextender.cli.commands.delete import delete  # noqa: E402
from gitextender.cli.commands.stats import stats  # noqa: E402
from gitextender.cli.commands.readme import readme  # noqa: E402

cli.add_command(branches)
cli.add_command(delete)
cli.add_command(stats)
cli.add_command(readme)
