"""Branch domain models for GitExtender.

BranchRef is what the provider's branch listing returns.
CommitDetail carries tip-commit metadata.
MergeStatus and BranchRecord are the reconciliation output.
"""

from __future__ import annotations

import enum
from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, Field, field_validator


def utcnow() -> datetime:
    """Timezone-aware current time in UTC."""
    return datetime.now(timezone.utc)


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class BranchCategory(str, enum.Enum):
    """Naming-convention category of a branch."""

    FEATURE = "feature"
    BUGFIX = "bugfix"
    HOTFIX = "hotfix"
    OTHER = "other"

    @property
    def is_qualifying(self) -> bool:
        """Only feature, bugfix and hotfix branches are reconciled."""
        return self is not BranchCategory.OTHER

    def __str__(self) -> str:
        return self.value


class BranchRef(BaseModel):
    """A branch name and the SHA of its tip commit."""

    name: str
    sha: str

    def __str__(self) -> str:
        return f"{self.name}@{self.sha[:8]}"


class CommitDetail(BaseModel):
    """Tip-commit metadata shown next to a branch."""

    sha: str
    author: str = "Unknown"
    author_login: Optional[str] = None
    author_avatar: Optional[str] = None
    timestamp: datetime = Field(default_factory=utcnow)

    @field_validator("timestamp")
    @classmethod
    def _normalize_timestamp(cls, value: datetime) -> datetime:
        return _as_utc(value)


class MergeStatus(BaseModel):
    """Merge state of one branch relative to one target branch.

    ``commits_ahead`` / ``commits_behind`` come from the provider's
    three-dot comparison. ``last_merge_date`` is stamped with the time
    the merge was detected, not the historical merge time.

    ``degraded`` is True when the status is a conservative default
    produced because a provider call failed, rather than a determination.
    """

    target: str
    is_merged: bool = False
    commits_ahead: Optional[int] = Field(default=None, ge=0)
    commits_behind: Optional[int] = Field(default=None, ge=0)
    last_merge_date: Optional[datetime] = None
    degraded: bool = False

    @classmethod
    def unmerged(cls, target: str, *, degraded: bool = False) -> MergeStatus:
        """Unmerged with zero ahead/behind."""
        return cls(
            target=target,
            is_merged=False,
            commits_ahead=0,
            commits_behind=0,
            degraded=degraded,
        )

    @classmethod
    def merged(
        cls,
        target: str,
        *,
        at: datetime,
        commits_ahead: int = 0,
        commits_behind: int = 0,
    ) -> MergeStatus:
        return cls(
            target=target,
            is_merged=True,
            commits_ahead=commits_ahead,
            commits_behind=commits_behind,
            last_merge_date=at,
        )

    def __str__(self) -> str:
        state = "merged" if self.is_merged else "unmerged"
        return (
            f"{self.target}: {state} "
            f"(+{self.commits_ahead or 0}/-{self.commits_behind or 0})"
        )


class BranchRecord(BaseModel):
    """One qualifying branch with its merge status against every target.

    ``statuses`` holds exactly one entry per configured target, in target
    order. ``selected`` is caller-owned UI state.
    """

    name: str
    category: BranchCategory
    last_updated: datetime
    author: str = "Unknown"
    author_avatar: Optional[str] = None
    statuses: list[MergeStatus] = []
    selected: bool = False

    @field_validator("last_updated")
    @classmethod
    def _normalize_last_updated(cls, value: datetime) -> datetime:
        return _as_utc(value)

    @property
    def id(self) -> str:
        return self.name

    def status_for(self, target: str) -> MergeStatus | None:
        """Return the status for *target*, or None if it is not configured."""
        for status in self.statuses:
            if status.target == target:
                return status
        return None

    @property
    def is_fully_merged(self) -> bool:
        """True when the branch is merged into every configured target."""
        return bool(self.statuses) and all(s.is_merged for s in self.statuses)

    def __repr__(self) -> str:
        merged = sum(1 for s in self.statuses if s.is_merged)
        return (
            f"BranchRecord({self.name} {self.category.value} "
            f"merged={merged}/{len(self.statuses)})"
        )

    def __str__(self) -> str:
        return f"{self.category.value} {self.name}"
