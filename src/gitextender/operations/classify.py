"""Branch classification by naming convention.

Maps a branch name to feature/bugfix/hotfix/other using prefix rules.
Only non-``other`` branches take part in reconciliation.
"""

from __future__ import annotations

from gitextender.models.branch import BranchCategory

# Matched against the lower-cased name.
_LOWERCASE_PREFIXES: tuple[tuple[BranchCategory, tuple[str, ...]], ...] = (
    (BranchCategory.FEATURE, ("feature/", "feat/", "features/")),
    (BranchCategory.BUGFIX, ("bugfix/", "bug/", "fix/")),
    (BranchCategory.HOTFIX, ("hotfix/",)),
)

# Matched against the name as given.
_EXACT_PREFIXES: dict[BranchCategory, tuple[str, ...]] = {
    BranchCategory.FEATURE: ("Feature/", "FEATURE/"),
    BranchCategory.BUGFIX: ("BugFix/", "bugFix/", "Bug/", "Fix/", "BUGFIX/"),
    BranchCategory.HOTFIX: ("HotFix/", "hotFix/", "HOTFIX/"),
}


def classify(branch_name: str) -> BranchCategory:
    """Return the category for *branch_name*.

    Categories are checked in order feature, bugfix, hotfix; the first
    matching prefix wins. Names matching nothing are ``other``.
    """
    lower_name = branch_name.lower()
    for category, prefixes in _LOWERCASE_PREFIXES:
        if lower_name.startswith(prefixes) or branch_name.startswith(
            _EXACT_PREFIXES[category]
        ):
            return category
    return BranchCategory.OTHER


def is_qualifying(branch_name: str) -> bool:
    """True if the branch is carried into reconciliation output."""
    return classify(branch_name).is_qualifying
