"""Dashboard -- the public SDK entry point for GitExtender.

Ties a resolved repository handle to a provider client and exposes
reconciliation, branch deletion and the repository summary. Users
interact with ``Dashboard.connect()``, ``d.reconcile()``,
``d.delete_branch()``, etc.

Every method has an ``a``-prefixed coroutine twin; the plain methods run
it with ``asyncio.run`` and must not be called from a running loop.
A fresh provider client is opened per call and closed afterwards.
"""

from __future__ import annotations

import asyncio
import logging
import os
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Callable

from gitextender.exceptions import UnsupportedProviderError
from gitextender.models.config import ProviderConfig
from gitextender.models.repository import RepositoryHandle, TargetBranches, parse_repo_url
from gitextender.operations import bulk
from gitextender.operations import stats as summary
from gitextender.operations.reconcile import ReconciliationEngine
from gitextender.provider.github import GitHubClient

if TYPE_CHECKING:
    from collections.abc import AsyncIterator, Iterable

    from gitextender.models.branch import BranchRecord
    from gitextender.models.stats import RepositoryStats
    from gitextender.operations.bulk import BulkDeleteResult

logger = logging.getLogger(__name__)

ClientFactory = Callable[[RepositoryHandle, ProviderConfig], "GitHubClient"]


def _github_factory(handle: RepositoryHandle, config: ProviderConfig) -> GitHubClient:
    return GitHubClient(token=handle.token, config=config)


class Dashboard:
    """Branch merge-status dashboard for one repository.

    ``branches`` holds the latest reconciliation result; each pass
    replaces it wholesale, and successful deletions remove entries.
    """

    def __init__(
        self,
        handle: RepositoryHandle,
        *,
        config: ProviderConfig | None = None,
        client_factory: ClientFactory | None = None,
    ) -> None:
        self._handle = handle
        self._config = config or ProviderConfig()
        self._client_factory = client_factory or _github_factory
        self.branches: list[BranchRecord] = []

    @classmethod
    def connect(
        cls,
        url: str,
        *,
        token: str | None = None,
        targets: TargetBranches | None = None,
        config: ProviderConfig | None = None,
        client_factory: ClientFactory | None = None,
    ) -> Dashboard:
        """Resolve *url* into a handle and build a dashboard for it.

        Args:
            url: Repository URL or ``owner/name``.
            token: Bearer token. Falls back to GITEXTENDER_TOKEN env var,
                then anonymous access.
            targets: Target branches. Defaults to Development/Quality/Production.
            config: Provider transport settings.
            client_factory: Builds the provider client for each call.

        Raises:
            ConfigurationError: If the URL cannot be resolved.
        """
        handle = parse_repo_url(
            url,
            token=token or os.environ.get("GITEXTENDER_TOKEN"),
            targets=targets,
        )
        return cls(handle, config=config, client_factory=client_factory)

    @property
    def handle(self) -> RepositoryHandle:
        return self._handle

    @property
    def targets(self) -> list[str]:
        return self._handle.targets.as_list()

    def with_targets(self, targets: TargetBranches) -> Dashboard:
        """Return a dashboard for the same repository with new targets."""
        handle = self._handle.model_copy(update={"targets": targets})
        return Dashboard(handle, config=self._config, client_factory=self._client_factory)

    @asynccontextmanager
    async def _client(self) -> AsyncIterator[GitHubClient]:
        if self._handle.provider != "github":
            raise UnsupportedProviderError(self._handle.provider)
        client = self._client_factory(self._handle, self._config)
        try:
            yield client
        finally:
            await client.aclose()

    # ------------------------------------------------------------------
    # Reconciliation
    # ------------------------------------------------------------------

    async def areconcile(self) -> list[BranchRecord]:
        """Recompute every qualifying branch's merge status.

        Raises:
            ProviderError: If the branch listing fails.
            UnsupportedProviderError: If the provider has no client.
        """
        async with self._client() as client:
            engine = ReconciliationEngine(
                client, max_concurrency=self._config.max_concurrency
            )
            self.branches = await engine.reconcile(self._handle)
        return self.branches

    def reconcile(self) -> list[BranchRecord]:
        return asyncio.run(self.areconcile())

    # ------------------------------------------------------------------
    # Deletion
    # ------------------------------------------------------------------

    async def adelete_branch(self, name: str) -> None:
        """Delete *name* from the repository. Errors propagate unchanged."""
        async with self._client() as client:
            await bulk.delete_branch(client, self._handle, name)
        self._forget(name)

    def delete_branch(self, name: str) -> None:
        asyncio.run(self.adelete_branch(name))

    async def abulk_delete(self, names: Iterable[str]) -> BulkDeleteResult:
        async with self._client() as client:
            result = await bulk.bulk_delete(client, self._handle, names)
        for name in result.deleted:
            self._forget(name)
        return result

    def bulk_delete(self, names: Iterable[str]) -> BulkDeleteResult:
        return asyncio.run(self.abulk_delete(list(names)))

    def _forget(self, name: str) -> None:
        self.branches = [b for b in self.branches if b.name != name]

    @property
    def selected_branches(self) -> list[BranchRecord]:
        return [b for b in self.branches if b.selected]

    # ------------------------------------------------------------------
    # Repository summary
    # ------------------------------------------------------------------

    async def astats(self) -> RepositoryStats:
        async with self._client() as client:
            return await summary.fetch_repository_stats(client, self._handle)

    def stats(self) -> RepositoryStats:
        return asyncio.run(self.astats())

    async def areadme(self) -> str | None:
        async with self._client() as client:
            return await summary.fetch_readme(client, self._handle)

    def readme(self) -> str | None:
        return asyncio.run(self.areadme())

    def __repr__(self) -> str:
        return f"Dashboard({self._handle!r} branches={len(self.branches)})"
