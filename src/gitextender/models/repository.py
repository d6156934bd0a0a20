"""Repository handle models for GitExtender.

RepositoryHandle identifies the repository a dashboard works against:
owner, name, provider, credential, and the three configured targets.
"""

from __future__ import annotations

import re
from typing import Literal, Optional

from pydantic import BaseModel, ValidationError, ValidationInfo, field_validator

from gitextender.exceptions import ConfigurationError

GitProvider = Literal["github", "gitlab", "bitbucket"]

_SCHEME_PREFIX = re.compile(r"^(https?://)?(www\.)?")


class TargetBranches(BaseModel):
    """The three environment branches merge status is evaluated against."""

    model_config = {"frozen": True}

    development: str = "Development"
    quality: str = "Quality"
    production: str = "Production"

    @field_validator("development", "quality", "production")
    @classmethod
    def _not_blank(cls, value: str, info: ValidationInfo) -> str:
        value = value.strip()
        if not value:
            raise ConfigurationError(f"Target branch {info.field_name} cannot be empty")
        return value

    def as_list(self) -> list[str]:
        """Targets in role order: development, quality, production."""
        return [self.development, self.quality, self.production]


class RepositoryHandle(BaseModel):
    """Resolved repository identity plus credential and targets.

    A blank owner or name, or one containing '/', raises ConfigurationError
    at construction. :meth:`create` also turns pydantic's ValidationError
    (missing or mistyped fields) into ConfigurationError.
    """

    model_config = {"frozen": True}

    owner: str
    name: str
    provider: GitProvider = "github"
    token: Optional[str] = None
    targets: TargetBranches = TargetBranches()

    @field_validator("owner", "name")
    @classmethod
    def _valid_segment(cls, value: str, info: ValidationInfo) -> str:
        value = value.strip()
        if not value:
            raise ConfigurationError(f"Repository {info.field_name} must not be empty")
        if "/" in value:
            raise ConfigurationError(
                f"Repository {info.field_name} must not contain '/': {value}"
            )
        return value

    @classmethod
    def create(cls, **kwargs) -> RepositoryHandle:
        try:
            return cls(**kwargs)
        except ValidationError as exc:
            raise ConfigurationError(f"Invalid repository handle: {exc}") from exc

    @property
    def full_name(self) -> str:
        return f"{self.owner}/{self.name}"

    def __repr__(self) -> str:
        auth = "token" if self.token else "anonymous"
        return f"RepositoryHandle({self.provider}:{self.full_name} {auth})"

    def __str__(self) -> str:
        return self.full_name


def detect_provider(url: str) -> GitProvider:
    if "gitlab" in url:
        return "gitlab"
    if "bitbucket" in url:
        return "bitbucket"
    return "github"


def parse_repo_url(
    url: str,
    *,
    token: str | None = None,
    targets: TargetBranches | None = None,
) -> RepositoryHandle:
    """Resolve a repository URL (or ``owner/name``) into a handle.

    Accepts ``https://github.com/owner/name``, ``github.com/owner/name.git``
    and bare ``owner/name``. The last two path segments are taken as owner
    and name.

    Raises:
        ConfigurationError: If the URL is empty or owner/name cannot be found.
    """
    url = (url or "").strip()
    if not url:
        raise ConfigurationError("Repository URL is required")

    provider = detect_provider(url)
    path = url.removesuffix(".git").rstrip("/")
    path = _SCHEME_PREFIX.sub("", path)
    parts = [p for p in path.split("/") if p]
    if len(parts) < 2:
        raise ConfigurationError(f"Invalid repository URL format: {url}")

    return RepositoryHandle.create(
        owner=parts[-2],
        name=parts[-1],
        provider=provider,
        token=token or None,
        targets=targets or TargetBranches(),
    )
