"""Provider client infrastructure for GitExtender.

Provides the async GitHub REST client and the pluggable provider protocols
the reconciliation core is written against.
"""

from gitextender.provider.github import GitHubClient
from gitextender.provider.protocols import (
    BranchPage,
    CompareStatus,
    ComparisonResult,
    ProviderClient,
    StatsProviderClient,
)

__all__ = [
    "GitHubClient",
    "ProviderClient",
    "StatsProviderClient",
    "BranchPage",
    "CompareStatus",
    "ComparisonResult",
]
