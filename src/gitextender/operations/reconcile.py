"""Reconciliation: enumerate, classify, and resolve merge status.

Produces one BranchRecord per qualifying branch with a MergeStatus per
configured target, sorted by tip-commit time, newest first. Only a
failed enumeration aborts the call; every other failure degrades the
single data point it affects.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from datetime import datetime
from typing import TYPE_CHECKING, Awaitable, Callable, TypeVar

from gitextender.models.branch import BranchRecord, CommitDetail, utcnow
from gitextender.operations.classify import classify
from gitextender.operations.compare import MergeComparator
from gitextender.operations.listing import list_all_branches

if TYPE_CHECKING:
    from gitextender.models.branch import BranchCategory, BranchRef
    from gitextender.models.repository import RepositoryHandle
    from gitextender.provider.protocols import ProviderClient

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ReconciliationEngine:
    """Compute the merge status of every qualifying branch of a repository.

    Args:
        client: Provider client shared by every call in a reconciliation.
        comparator: Per-pair resolver. Defaults to a MergeComparator over
            ``client`` with the default strategy chain.
        max_concurrency: Upper bound on in-flight units of work (one tip
            commit lookup or one pair comparison). None disables the cap.
        clock: Source of "now" for degraded timestamps and merge stamps.
    """

    def __init__(
        self,
        client: ProviderClient,
        *,
        comparator: MergeComparator | None = None,
        max_concurrency: int | None = 16,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1 or None")
        self._client = client
        self._clock = clock
        self._comparator = comparator or MergeComparator(client, clock=clock)
        self._max_concurrency = max_concurrency

    async def reconcile(self, repo: RepositoryHandle) -> list[BranchRecord]:
        """Run one full reconciliation pass.

        Raises:
            ProviderError: If the branch listing cannot be fetched completely.
        """
        branches = await list_all_branches(self._client, repo.owner, repo.name)

        qualifying: list[tuple[BranchRef, BranchCategory]] = []
        for branch in branches:
            category = classify(branch.name)
            if category.is_qualifying:
                qualifying.append((branch, category))

        targets = repo.targets.as_list()
        logger.info(
            "Reconciling %d of %d branches in %s against %s",
            len(qualifying), len(branches), repo, ", ".join(targets),
        )

        limiter = (
            asyncio.Semaphore(self._max_concurrency)
            if self._max_concurrency is not None
            else None
        )
        records = await asyncio.gather(
            *(
                self._reconcile_branch(repo, branch, category, targets, limiter)
                for branch, category in qualifying
            )
        )
        return sorted(records, key=lambda r: r.last_updated, reverse=True)

    async def _reconcile_branch(
        self,
        repo: RepositoryHandle,
        branch: BranchRef,
        category: BranchCategory,
        targets: list[str],
        limiter: asyncio.Semaphore | None,
    ) -> BranchRecord:
        detail, statuses = await asyncio.gather(
            self._limited(limiter, lambda: self._tip_commit(repo, branch)),
            asyncio.gather(
                *(
                    self._limited(
                        limiter,
                        lambda target=target: self._comparator.compare(
                            repo, branch.name, target
                        ),
                    )
                    for target in targets
                )
            ),
        )
        return BranchRecord(
            name=branch.name,
            category=category,
            last_updated=detail.timestamp,
            author=detail.author,
            author_avatar=detail.author_avatar,
            statuses=list(statuses),
        )

    async def _tip_commit(self, repo: RepositoryHandle, branch: BranchRef) -> CommitDetail:
        try:
            return await self._client.get_commit(repo.owner, repo.name, branch.sha)
        except Exception:
            logger.warning(
                "Tip commit lookup failed for %s; using defaults", branch.name,
                exc_info=True,
            )
            return CommitDetail(sha=branch.sha, timestamp=self._clock())

    @staticmethod
    async def _limited(
        limiter: asyncio.Semaphore | None,
        factory: Callable[[], Awaitable[T]],
    ) -> T:
        async with limiter if limiter is not None else contextlib.nullcontext():
            return await factory()


async def reconcile(
    client: ProviderClient,
    repo: RepositoryHandle,
    *,
    max_concurrency: int | None = 16,
) -> list[BranchRecord]:
    """Convenience wrapper: one pass with a default engine."""
    engine = ReconciliationEngine(client, max_concurrency=max_concurrency)
    return await engine.reconcile(repo)

