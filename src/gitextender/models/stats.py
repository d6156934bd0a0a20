"""Repository statistics models for the dashboard summary panel."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from pydantic import BaseModel


class RepoContributor(BaseModel):
    login: str
    avatar_url: Optional[str] = None
    contributions: int = 0


class RepoRelease(BaseModel):
    name: Optional[str] = None
    tag_name: str
    published_at: Optional[datetime] = None
    url: Optional[str] = None


class PullRequestCounts(BaseModel):
    """PR counts; closed excludes merged PRs."""

    open: int = 0
    closed: int = 0
    merged: int = 0


class RepositoryStats(BaseModel):
    """Best-effort repository summary. Every field may be missing."""

    description: Optional[str] = None
    stars: Optional[int] = None
    forks: Optional[int] = None
    open_issues: Optional[int] = None
    total_commits: Optional[int] = None  # Last 4 weeks
    last_updated: Optional[datetime] = None
    pull_requests: Optional[PullRequestCounts] = None
    contributors: list[RepoContributor] = []
    language: Optional[str] = None
    topics: list[str] = []
    releases: list[RepoRelease] = []
    license: Optional[str] = None
    visibility: Optional[str] = None
    default_branch: Optional[str] = None
    created_at: Optional[datetime] = None

    @property
    def is_empty(self) -> bool:
        return self == RepositoryStats()
