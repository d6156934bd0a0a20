"""GitExtender: branch merge-status dashboard for hosted Git repositories.

Classifies a repository's branches by naming convention and works out
whether each feature, bugfix and hotfix branch has reached the
development, quality and production branches.
"""

from gitextender._version import __version__

# Core entry point
from gitextender.dashboard import Dashboard

# Branch and repository models
from gitextender.models.branch import (
    BranchCategory,
    BranchRecord,
    BranchRef,
    CommitDetail,
    MergeStatus,
)
from gitextender.models.repository import (
    RepositoryHandle,
    TargetBranches,
    parse_repo_url,
)
from gitextender.models.stats import (
    PullRequestCounts,
    RepoContributor,
    RepoRelease,
    RepositoryStats,
)

# Configuration
from gitextender.models.config import ProviderConfig

# Provider clients and protocols
from gitextender.provider import (
    BranchPage,
    CompareStatus,
    ComparisonResult,
    GitHubClient,
    ProviderClient,
    StatsProviderClient,
)

# Operations
from gitextender.operations.classify import classify, is_qualifying
from gitextender.operations.listing import list_all_branches
from gitextender.operations.compare import (
    DEFAULT_STRATEGIES,
    INCONCLUSIVE,
    ComparisonContext,
    MergeComparator,
)
from gitextender.operations.reconcile import ReconciliationEngine, reconcile
from gitextender.operations.bulk import (
    BulkDeleteResult,
    MergeFilter,
    bulk_delete,
    delete_branch,
    filter_branches,
    select_fully_merged,
)
from gitextender.operations.stats import fetch_readme, fetch_repository_stats

# Exceptions
from gitextender.exceptions import (
    ConfigurationError,
    GitExtenderError,
    ProviderAuthError,
    ProviderError,
    ProviderNotFoundError,
    ProviderRateLimitError,
    UnsupportedProviderError,
)

__all__ = [
    "__version__",
    # Core
    "Dashboard",
    # Models
    "BranchCategory",
    "BranchRecord",
    "BranchRef",
    "CommitDetail",
    "MergeStatus",
    "RepositoryHandle",
    "TargetBranches",
    "parse_repo_url",
    "PullRequestCounts",
    "RepoContributor",
    "RepoRelease",
    "RepositoryStats",
    "ProviderConfig",
    # Provider
    "BranchPage",
    "CompareStatus",
    "ComparisonResult",
    "GitHubClient",
    "ProviderClient",
    "StatsProviderClient",
    # Operations
    "classify",
    "is_qualifying",
    "list_all_branches",
    "DEFAULT_STRATEGIES",
    "INCONCLUSIVE",
    "ComparisonContext",
    "MergeComparator",
    "ReconciliationEngine",
    "reconcile",
    "BulkDeleteResult",
    "MergeFilter",
    "bulk_delete",
    "delete_branch",
    "filter_branches",
    "select_fully_merged",
    "fetch_readme",
    "fetch_repository_stats",
    # Exceptions
    "GitExtenderError",
    "ConfigurationError",
    "UnsupportedProviderError",
    "ProviderError",
    "ProviderAuthError",
    "ProviderNotFoundError",
    "ProviderRateLimitError",
]
