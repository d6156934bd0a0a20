"""Merge-status comparison for one (source, target) branch pair.

The provider offers no authoritative "is merged" answer, so the status is
resolved by an ordered chain of strategies. Each strategy receives the
shared :class:`ComparisonContext` and returns either a definite
:class:`MergeStatus` or :data:`INCONCLUSIVE`; the first definite result
wins.

Default chain:

1. ``check_target_exists`` -- missing target is unmerged, zero counts.
2. ``forward_compare`` -- ``target...source``; merged when nothing is
   ahead and not diverged, or when identical.
3. ``reverse_compare`` -- when (2) said unmerged, ``source...target``
   reporting ``ahead`` with commits means target contains source.
4. ``sha_ancestry`` -- only when the call in (2) failed: equal tips, or
   the source tip inside the first page of target's history. A tip
   outside that page is unmerged, estimated one commit behind.

Any exception escaping a strategy becomes an unmerged, degraded status
for that pair alone.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import TYPE_CHECKING, Awaitable, Callable, Final, Sequence, Union

from gitextender.exceptions import ProviderError
from gitextender.models.branch import BranchRef, MergeStatus, utcnow
from gitextender.provider.protocols import CompareStatus, ComparisonResult

if TYPE_CHECKING:
    from gitextender.models.repository import RepositoryHandle
    from gitextender.provider.protocols import ProviderClient

logger = logging.getLogger(__name__)


class _Inconclusive:
    """Sentinel: the strategy could not decide; try the next one."""

    def __repr__(self) -> str:
        return "INCONCLUSIVE"


INCONCLUSIVE: Final = _Inconclusive()

StrategyResult = Union[MergeStatus, _Inconclusive]


@dataclass
class ComparisonContext:
    """State shared by the strategies of one comparison.

    ``forward`` / ``forward_error`` record the outcome of the forward
    compare call so later strategies can tell "inconclusive" apart from
    "the call itself failed".
    """

    client: ProviderClient
    repo: RepositoryHandle
    source: str
    target: str
    now: datetime
    target_ref: BranchRef | None = None
    forward: ComparisonResult | None = None
    forward_error: ProviderError | None = None
    provisional: MergeStatus | None = None

    @property
    def owner(self) -> str:
        return self.repo.owner

    @property
    def name(self) -> str:
        return self.repo.name


Strategy = Callable[[ComparisonContext], Awaitable[StrategyResult]]


def is_merged_forward(result: ComparisonResult) -> bool:
    """Primary merge rule for a ``target...source`` comparison."""
    if result.status is CompareStatus.IDENTICAL:
        return True
    return result.ahead_by == 0 and result.status is not CompareStatus.DIVERGED


# ---------------------------------------------------------------------------
# Strategies
# ---------------------------------------------------------------------------


async def check_target_exists(ctx: ComparisonContext) -> StrategyResult:
    target_ref = await ctx.client.get_branch(ctx.owner, ctx.name, ctx.target)
    if target_ref is None:
        logger.debug("Target %s does not exist in %s", ctx.target, ctx.repo)
        return MergeStatus.unmerged(ctx.target)
    ctx.target_ref = target_ref
    return INCONCLUSIVE


async def forward_compare(ctx: ComparisonContext) -> StrategyResult:
    try:
        result = await ctx.client.compare(ctx.owner, ctx.name, ctx.target, ctx.source)
    except ProviderError as exc:
        logger.warning(
            "Compare %s...%s failed, falling back to SHA ancestry: %s",
            ctx.target, ctx.source, exc,
        )
        ctx.forward_error = exc
        return INCONCLUSIVE

    ctx.forward = result
    if is_merged_forward(result):
        return MergeStatus.merged(
            ctx.target,
            at=ctx.now,
            commits_ahead=result.ahead_by,
            commits_behind=result.behind_by,
        )

    ctx.provisional = MergeStatus(
        target=ctx.target,
        is_merged=False,
        commits_ahead=result.ahead_by,
        commits_behind=result.behind_by,
    )
    return INCONCLUSIVE


async def reverse_compare(ctx: ComparisonContext) -> StrategyResult:
    if ctx.forward is None or ctx.provisional is None:
        return INCONCLUSIVE

    try:
        reverse = await ctx.client.compare(ctx.owner, ctx.name, ctx.source, ctx.target)
    except ProviderError as exc:
        logger.warning("Reverse compare %s...%s failed: %s", ctx.source, ctx.target, exc)
        return ctx.provisional

    if reverse.status is CompareStatus.AHEAD and reverse.ahead_by > 0:
        logger.debug(
            "%s contains %s (reverse %s); treating as merged",
            ctx.target, ctx.source, reverse,
        )
        return MergeStatus.merged(ctx.target, at=ctx.now)
    return ctx.provisional


async def sha_ancestry(ctx: ComparisonContext) -> StrategyResult:
    if ctx.forward_error is None:
        return INCONCLUSIVE

    try:
        source_ref = await ctx.client.get_branch(ctx.owner, ctx.name, ctx.source)
        target_ref = ctx.target_ref or await ctx.client.get_branch(
            ctx.owner, ctx.name, ctx.target
        )
        if source_ref is None or target_ref is None:
            return MergeStatus.unmerged(ctx.target, degraded=True)
        if source_ref.sha == target_ref.sha:
            return MergeStatus.merged(ctx.target, at=ctx.now)

        # Bounded to one page of target history.
        history = await ctx.client.list_commits(ctx.owner, ctx.name, ctx.target, page=1)
    except ProviderError as exc:
        logger.warning(
            "SHA ancestry check %s -> %s failed: %s", ctx.source, ctx.target, exc
        )
        return MergeStatus.unmerged(ctx.target, degraded=True)

    if source_ref.sha in history:
        return MergeStatus.merged(ctx.target, at=ctx.now)
    # Tip not in the page: estimate one commit behind.
    return MergeStatus(
        target=ctx.target, is_merged=False, commits_ahead=0, commits_behind=1
    )


DEFAULT_STRATEGIES: tuple[Strategy, ...] = (
    check_target_exists,
    forward_compare,
    reverse_compare,
    sha_ancestry,
)


# ---------------------------------------------------------------------------
# Comparator
# ---------------------------------------------------------------------------


class MergeComparator:
    """Resolve the MergeStatus of a source branch against a target branch.

    Never raises for provider or parsing failures: the worst case is an
    unmerged, degraded status for the pair.
    """

    def __init__(
        self,
        client: ProviderClient,
        *,
        strategies: Sequence[Strategy] | None = None,
        clock: Callable[[], datetime] = utcnow,
    ) -> None:
        self._client = client
        self._strategies = tuple(strategies) if strategies is not None else DEFAULT_STRATEGIES
        self._clock = clock

    @property
    def strategies(self) -> tuple[Strategy, ...]:
        return self._strategies

    async def compare(
        self, repo: RepositoryHandle, source: str, target: str
    ) -> MergeStatus:
        ctx = ComparisonContext(
            client=self._client,
            repo=repo,
            source=source,
            target=target,
            now=self._clock(),
        )
        try:
            for strategy in self._strategies:
                result = await strategy(ctx)
                if result is not INCONCLUSIVE:
                    logger.debug(
                        "%s -> %s resolved by %s: %s",
                        source, target, getattr(strategy, "__name__", strategy), result,
                    )
                    return result
        except Exception:
            logger.warning(
                "Merge status for %s -> %s could not be determined",
                source, target, exc_info=True,
            )
            return MergeStatus.unmerged(target, degraded=True)

        logger.warning("No strategy resolved %s -> %s", source, target)
        return MergeStatus.unmerged(target, degraded=True)
