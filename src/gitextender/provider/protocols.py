"""Provider client protocols.

Defines the pluggable interface the reconciliation core consumes.
The built-in GitHubClient implements both protocols.
"""

from __future__ import annotations

import enum
from typing import Any, Protocol, runtime_checkable

from pydantic import BaseModel, Field

from gitextender.models.branch import BranchRef, CommitDetail


class CompareStatus(str, enum.Enum):
    """Relationship of ``head`` to ``base`` in a three-dot comparison."""

    AHEAD = "ahead"
    BEHIND = "behind"
    IDENTICAL = "identical"
    DIVERGED = "diverged"

    def __str__(self) -> str:
        return self.value


class ComparisonResult(BaseModel):
    """Outcome of ``base...head``: commits unique to each side plus status."""

    ahead_by: int = Field(ge=0)
    behind_by: int = Field(ge=0)
    status: CompareStatus

    def __str__(self) -> str:
        return f"{self.status.value} +{self.ahead_by}/-{self.behind_by}"


class BranchPage(BaseModel):
    """One page of the branch listing."""

    branches: list[BranchRef] = []
    has_next: bool = False


@runtime_checkable
class ProviderClient(Protocol):
    """Protocol for the provider REST surface used by reconciliation.

    All methods raise ProviderError on failure. ``get_branch`` returns
    None for a missing branch; that is an expected outcome, not an error.
    """

    async def list_branches(self, owner: str, repo: str, page: int = 1) -> BranchPage:
        ...

    async def get_commit(self, owner: str, repo: str, sha: str) -> CommitDetail:
        ...

    async def get_branch(self, owner: str, repo: str, name: str) -> BranchRef | None:
        ...

    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> ComparisonResult:
        ...

    async def list_commits(
        self, owner: str, repo: str, ref: str, page: int = 1
    ) -> list[str]:
        """Return commit SHAs from *ref*'s history, newest first."""
        ...

    async def delete_branch(self, owner: str, repo: str, name: str) -> None:
        ...

    async def aclose(self) -> None:
        """Release underlying resources."""
        ...


@runtime_checkable
class StatsProviderClient(Protocol):
    """Read-only endpoints behind the repository summary panel.

    Methods return the provider's decoded JSON unchanged.
    """

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        ...

    async def list_pull_requests(
        self, owner: str, repo: str, *, state: str = "all", per_page: int = 100
    ) -> list[dict[str, Any]]:
        ...

    async def list_contributors(
        self, owner: str, repo: str, *, per_page: int = 10
    ) -> list[dict[str, Any]]:
        ...

    async def get_participation(self, owner: str, repo: str) -> dict[str, Any]:
        ...

    async def list_releases(
        self, owner: str, repo: str, *, per_page: int = 5
    ) -> list[dict[str, Any]]:
        ...

    async def get_readme(self, owner: str, repo: str) -> str | None:
        ...
