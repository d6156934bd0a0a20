"""Branch filtering and bulk actions over reconciliation output.

Deletion is a direct provider call: failures surface verbatim and are
never degraded. Bulk deletion runs sequentially and collects per-branch
outcomes so one failure does not stop the rest.
"""

from __future__ import annotations

import enum
import logging
from typing import TYPE_CHECKING, Iterable

from pydantic import BaseModel

from gitextender.exceptions import ConfigurationError, GitExtenderError

if TYPE_CHECKING:
    from gitextender.models.branch import BranchCategory, BranchRecord
    from gitextender.models.repository import RepositoryHandle
    from gitextender.provider.protocols import ProviderClient

logger = logging.getLogger(__name__)


class MergeFilter(str, enum.Enum):
    """Merge-state filters offered by the branch table."""

    ALL_MERGED = "all-merged"
    ANY_MERGED = "any-merged"
    ALL_UNMERGED = "all-unmerged"

    def __str__(self) -> str:
        return self.value


def filter_branches(
    records: Iterable[BranchRecord],
    *,
    category: BranchCategory | None = None,
    merged: MergeFilter | None = None,
) -> list[BranchRecord]:
    """Filter records by category and merge state, preserving order."""
    result: list[BranchRecord] = []
    for record in records:
        if category is not None and record.category != category:
            continue
        if merged is not None:
            any_merged = any(s.is_merged for s in record.statuses)
            if merged is MergeFilter.ALL_MERGED and not record.is_fully_merged:
                continue
            if merged is MergeFilter.ANY_MERGED and not any_merged:
                continue
            if merged is MergeFilter.ALL_UNMERGED and any_merged:
                continue
        result.append(record)
    return result


def select_fully_merged(records: Iterable[BranchRecord]) -> list[BranchRecord]:
    """Mark and return the records merged into every target."""
    selected = []
    for record in records:
        record.selected = record.is_fully_merged
        if record.selected:
            selected.append(record)
    return selected


class BulkDeleteResult(BaseModel):
    deleted: list[str] = []
    failed: dict[str, str] = {}  # branch name -> error message

    @property
    def ok(self) -> bool:
        return not self.failed

    def __str__(self) -> str:
        return f"{len(self.deleted)} deleted, {len(self.failed)} failed"


async def delete_branch(
    client: ProviderClient, repo: RepositoryHandle, name: str
) -> None:
    """Delete one branch.

    Raises:
        ConfigurationError: If the handle carries no token.
        ProviderError: If the provider rejects the deletion.
    """
    if not repo.token:
        raise ConfigurationError("Repository token is required to delete branches")
    await client.delete_branch(repo.owner, repo.name, name)
    logger.info("Deleted branch %s from %s", name, repo)


async def bulk_delete(
    client: ProviderClient, repo: RepositoryHandle, names: Iterable[str]
) -> BulkDeleteResult:
    """Delete branches one by one, recording each outcome.

    Raises:
        ConfigurationError: If the handle carries no token (before any call).
    """
    if not repo.token:
        raise ConfigurationError("Repository token is required to delete branches")

    result = BulkDeleteResult()
    for name in names:
        try:
            await delete_branch(client, repo, name)
        except GitExtenderError as exc:
            logger.warning("Failed to delete branch %s: %s", name, exc)
            result.failed[name] = str(exc)
        else:
            result.deleted.append(name)
    return result
