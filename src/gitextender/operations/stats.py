"""Repository summary: stats panel and README.

Both fetches are best-effort. A failure is logged and yields an empty
RepositoryStats / None rather than an error.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from gitextender.exceptions import ProviderError
from gitextender.models.stats import (
    PullRequestCounts,
    RepoContributor,
    RepoRelease,
    RepositoryStats,
)

if TYPE_CHECKING:
    from gitextender.models.repository import RepositoryHandle
    from gitextender.provider.protocols import StatsProviderClient

logger = logging.getLogger(__name__)

# Participation stats are weekly; the summary covers the last four weeks.
_RECENT_WEEKS = 4


def count_pull_requests(pulls: list[dict[str, Any]]) -> PullRequestCounts:
    """Split PRs into open, closed without merge, and merged."""
    counts = PullRequestCounts()
    for pr in pulls:
        if pr.get("merged_at"):
            counts.merged += 1
        elif pr.get("state") == "open":
            counts.open += 1
        elif pr.get("state") == "closed":
            counts.closed += 1
    return counts


def recent_commit_total(participation: dict[str, Any]) -> int:
    weeks = participation.get("all") or []
    return sum(weeks[-_RECENT_WEEKS:])


async def fetch_repository_stats(
    client: StatsProviderClient, repo: RepositoryHandle
) -> RepositoryStats:
    """Aggregate metadata, PRs, contributors, activity and releases."""
    owner, name = repo.owner, repo.name
    try:
        data = await client.get_repository(owner, name)
        pulls = await client.list_pull_requests(owner, name, state="all", per_page=100)
        contributors = await client.list_contributors(owner, name, per_page=10)
        participation = await client.get_participation(owner, name)
        releases = await client.list_releases(owner, name, per_page=5)

        license_info = data.get("license") or {}
        return RepositoryStats(
            description=data.get("description"),
            stars=data.get("stargazers_count"),
            forks=data.get("forks_count"),
            open_issues=data.get("open_issues_count"),
            last_updated=data.get("updated_at"),
            created_at=data.get("created_at"),
            language=data.get("language"),
            topics=data.get("topics") or [],
            license=license_info.get("name"),
            visibility=data.get("visibility"),
            default_branch=data.get("default_branch"),
            pull_requests=count_pull_requests(pulls),
            contributors=[
                RepoContributor(
                    login=c["login"],
                    avatar_url=c.get("avatar_url"),
                    contributions=c.get("contributions", 0),
                )
                for c in contributors
            ],
            total_commits=recent_commit_total(participation),
            releases=[
                RepoRelease(
                    name=r.get("name"),
                    tag_name=r["tag_name"],
                    published_at=r.get("published_at"),
                    url=r.get("html_url"),
                )
                for r in releases
            ],
        )
    except (ProviderError, AttributeError, KeyError, TypeError, ValueError) as exc:
        logger.warning("Could not fetch stats for %s: %s", repo, exc)
        return RepositoryStats()


async def fetch_readme(client: StatsProviderClient, repo: RepositoryHandle) -> str | None:
    """Raw README text, or None when missing or unreachable."""
    try:
        return await client.get_readme(repo.owner, repo.name)
    except ProviderError as exc:
        logger.warning("Could not fetch README for %s: %s", repo, exc)
        return None
