"""In-memory provider used by engine, dashboard and CLI tests.

FakeProvider implements ProviderClient and StatsProviderClient against a
small dict-based repository model, records every call, and can be told to
fail specific calls.
"""

from __future__ import annotations

import asyncio
from datetime import datetime, timezone
from typing import Any

from gitextender.exceptions import ProviderError
from gitextender.models.branch import BranchRef, CommitDetail
from gitextender.provider.protocols import BranchPage, CompareStatus, ComparisonResult

_MIRROR = {
    CompareStatus.AHEAD: CompareStatus.BEHIND,
    CompareStatus.BEHIND: CompareStatus.AHEAD,
    CompareStatus.IDENTICAL: CompareStatus.IDENTICAL,
    CompareStatus.DIVERGED: CompareStatus.DIVERGED,
}


def ts(day: int, hour: int = 12) -> datetime:
    """UTC timestamp in January 2024."""
    return datetime(2024, 1, day, hour, 0, tzinfo=timezone.utc)


class FakeProvider:
    """Dict-backed provider.

    ``branches`` maps name -> tip SHA in listing order. Comparisons not
    configured with :meth:`set_compare` default to the mirror of the
    opposite direction if that was configured, else diverged +1/-1.

    Failures are registered with :meth:`fail` keyed by method name and,
    optionally, the call arguments (after owner/repo).
    """

    def __init__(
        self,
        branches: dict[str, str] | None = None,
        *,
        page_size: int = 100,
        delay: float = 0.0,
    ) -> None:
        self.branches: dict[str, str] = dict(branches or {})
        self.commits: dict[str, CommitDetail] = {}
        self.comparisons: dict[tuple[str, str], ComparisonResult] = {}
        self.histories: dict[str, list[str]] = {}
        self.failures: dict[tuple, Exception] = {}
        self.calls: list[tuple] = []
        self.deleted: list[str] = []
        self.page_size = page_size
        self.delay = delay
        self.in_flight = 0
        self.max_in_flight = 0
        self.closed = False

        self.repository: dict[str, Any] = {}
        self.pulls: list[dict[str, Any]] = []
        self.contributors: list[dict[str, Any]] = []
        self.participation: dict[str, Any] = {}
        self.releases: list[dict[str, Any]] = []
        self.readme: str | None = None

    # -- setup helpers -------------------------------------------------

    def add_branch(
        self,
        name: str,
        sha: str,
        *,
        author: str = "Ada",
        when: datetime | None = None,
    ) -> None:
        self.branches[name] = sha
        self.commits[sha] = CommitDetail(
            sha=sha,
            author=author,
            author_login=author.lower(),
            author_avatar=f"https://avatars.example/{author.lower()}",
            timestamp=when or ts(1),
        )

    def set_compare(
        self,
        base: str,
        head: str,
        *,
        ahead: int = 0,
        behind: int = 0,
        status: str = "identical",
    ) -> None:
        self.comparisons[(base, head)] = ComparisonResult(
            ahead_by=ahead, behind_by=behind, status=status
        )

    def fail(self, method: str, *args: str, exc: Exception | None = None) -> None:
        self.failures[(method, *args)] = exc or ProviderError(f"{method} failed")

    def calls_to(self, method: str) -> list[tuple]:
        return [c[1:] for c in self.calls if c[0] == method]

    # -- plumbing ------------------------------------------------------

    async def _enter(self, method: str, *args: Any) -> None:
        self.calls.append((method, *args))
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delay)
        finally:
            self.in_flight -= 1
        for key in ((method, *args), (method,)):
            if key in self.failures:
                raise self.failures[key]

    # -- ProviderClient ------------------------------------------------

    async def list_branches(self, owner: str, repo: str, page: int = 1) -> BranchPage:
        await self._enter("list_branches", page)
        names = list(self.branches)
        start = (page - 1) * self.page_size
        chunk = names[start:start + self.page_size]
        return BranchPage(
            branches=[BranchRef(name=n, sha=self.branches[n]) for n in chunk],
            has_next=start + self.page_size < len(names),
        )

    async def get_commit(self, owner: str, repo: str, sha: str) -> CommitDetail:
        await self._enter("get_commit", sha)
        if sha not in self.commits:
            raise ProviderError(f"No commit {sha}", status_code=422)
        return self.commits[sha]

    async def get_branch(self, owner: str, repo: str, name: str) -> BranchRef | None:
        await self._enter("get_branch", name)
        sha = self.branches.get(name)
        return BranchRef(name=name, sha=sha) if sha is not None else None

    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> ComparisonResult:
        await self._enter("compare", base, head)
        if (base, head) in self.comparisons:
            return self.comparisons[(base, head)]
        mirror = self.comparisons.get((head, base))
        if mirror is not None:
            return ComparisonResult(
                ahead_by=mirror.behind_by,
                behind_by=mirror.ahead_by,
                status=_MIRROR[mirror.status],
            )
        return ComparisonResult(ahead_by=1, behind_by=1, status="diverged")

    async def list_commits(
        self, owner: str, repo: str, ref: str, page: int = 1
    ) -> list[str]:
        await self._enter("list_commits", ref)
        history = self.histories.get(ref)
        if history is None:
            sha = self.branches.get(ref)
            history = [sha] if sha else []
        return history[: self.page_size]

    async def delete_branch(self, owner: str, repo: str, name: str) -> None:
        await self._enter("delete_branch", name)
        if name not in self.branches:
            raise ProviderError(f"Reference does not exist: {name}", status_code=422)
        del self.branches[name]
        self.deleted.append(name)

    async def aclose(self) -> None:
        self.closed = True

    # -- StatsProviderClient -------------------------------------------

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        await self._enter("get_repository")
        return self.repository

    async def list_pull_requests(
        self, owner: str, repo: str, *, state: str = "all", per_page: int = 100
    ) -> list[dict[str, Any]]:
        await self._enter("list_pull_requests")
        return self.pulls

    async def list_contributors(
        self, owner: str, repo: str, *, per_page: int = 10
    ) -> list[dict[str, Any]]:
        await self._enter("list_contributors")
        return self.contributors

    async def get_participation(self, owner: str, repo: str) -> dict[str, Any]:
        await self._enter("get_participation")
        return self.participation

    async def list_releases(
        self, owner: str, repo: str, *, per_page: int = 5
    ) -> list[dict[str, Any]]:
        await self._enter("list_releases")
        return self.releases

    async def get_readme(self, owner: str, repo: str) -> str | None:
        await self._enter("get_readme")
        return self.readme
