"""Branch listing.

Follows the provider's page-based pagination until an empty page or a
missing next-page signal. All-or-nothing: any failed page aborts.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from gitextender.models.branch import BranchRef
    from gitextender.provider.protocols import ProviderClient

logger = logging.getLogger(__name__)


async def list_all_branches(
    client: ProviderClient, owner: str, repo: str
) -> list[BranchRef]:
    """Return every branch of ``owner/repo``, fully materialized.

    Raises:
        ProviderError: If any page request fails. No partial list is returned.
    """
    branches: list[BranchRef] = []
    page = 1
    while True:
        result = await client.list_branches(owner, repo, page=page)
        if not result.branches:
            break
        branches.extend(result.branches)
        if not result.has_next:
            break
        page += 1

    logger.debug("Enumerated %d branches in %s/%s (%d pages)", len(branches), owner, repo, page)
    return branches
