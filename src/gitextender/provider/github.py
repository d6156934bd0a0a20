"""GitHub REST client built on httpx.AsyncClient with tenacity retry.

Implements the ProviderClient and StatsProviderClient protocols against
the GitHub REST API (``X-GitHub-Api-Version: 2022-11-28``).
"""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

import httpx
import tenacity

from gitextender.exceptions import (
    ProviderAuthError,
    ProviderError,
    ProviderNotFoundError,
    ProviderRateLimitError,
)
from gitextender.models.branch import BranchRef, CommitDetail
from gitextender.models.config import ProviderConfig
from gitextender.provider.protocols import BranchPage, ComparisonResult

logger = logging.getLogger(__name__)

_RETRYABLE_STATUS_CODES = {429, 500, 502, 503, 504}
_RAW_MEDIA_TYPE = "application/vnd.github.raw"


def _is_retryable(exc: BaseException) -> bool:
    """Check if an exception is retryable.

    Retryable: rate limits, 5xx, connection errors.
    Not retryable: auth failures, 404, other client errors.
    """
    if isinstance(exc, ProviderAuthError):
        return False
    if isinstance(exc, ProviderRateLimitError):
        return True
    if isinstance(exc, ProviderError):
        if exc.status_code is not None:
            return exc.status_code in _RETRYABLE_STATUS_CODES
        return isinstance(exc.__cause__, (httpx.ConnectError, httpx.ConnectTimeout))
    return False


def _segment(value: str) -> str:
    """Percent-encode a single path segment, including '/'."""
    return quote(value, safe="")


def _error_message(response: httpx.Response) -> str:
    try:
        data = response.json()
    except ValueError:
        return response.text[:200]
    if isinstance(data, dict) and data.get("message"):
        return str(data["message"])
    return response.text[:200]


def _parse_retry_after(response: httpx.Response) -> float | None:
    raw = response.headers.get("Retry-After")
    if raw is None:
        return None
    try:
        return float(raw)
    except (ValueError, TypeError):
        return None


class GitHubClient:
    """Async httpx client for the GitHub REST API.

    The bearer token is passed through unmodified on every request; with
    no token, requests are anonymous. Retries (exponential backoff on
    429/5xx/connect errors) happen only when ``config.max_retries > 1``.

    Usage::

        async with GitHubClient(token="ghp_...") as client:
            page = await client.list_branches("octocat", "hello-world")
    """

    def __init__(
        self,
        token: str | None = None,
        config: ProviderConfig | None = None,
        *,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the client.

        Args:
            token: Bearer token. None for anonymous access.
            config: Transport settings. Defaults to ProviderConfig().
            transport: Optional httpx transport (tests use httpx.MockTransport).
        """
        self._config = config or ProviderConfig()
        headers = {
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": self._config.api_version,
        }
        if token:
            headers["Authorization"] = f"Bearer {token}"
        self._client = httpx.AsyncClient(
            base_url=self._config.base_url.rstrip("/"),
            timeout=self._config.timeout,
            headers=headers,
            transport=transport,
        )

    @property
    def config(self) -> ProviderConfig:
        return self._config

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response | None:
        """Send a request with retry.

        Uses tenacity.AsyncRetrying programmatically so max_retries is
        configurable per-instance.

        Returns:
            The successful response, or None for a 404 when
            ``allow_not_found`` is set.

        Raises:
            ProviderAuthError: On 401/403 (no retry).
            ProviderRateLimitError: On 429, or 403 with an exhausted quota.
            ProviderNotFoundError: On 404 unless ``allow_not_found``.
            ProviderError: On any other failure.
        """
        retryer = tenacity.AsyncRetrying(
            retry=tenacity.retry_if_exception(_is_retryable),
            wait=(
                tenacity.wait_exponential(multiplier=1, min=1, max=30)
                + tenacity.wait_random(0, 2)
            ),
            stop=tenacity.stop_after_attempt(self._config.max_retries),
            before_sleep=tenacity.before_sleep_log(logger, logging.WARNING),
            reraise=True,
        )
        return await retryer(
            self._send,
            method,
            path,
            params=params,
            headers=headers,
            allow_not_found=allow_not_found,
        )

    async def _send(
        self,
        method: str,
        path: str,
        *,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        allow_not_found: bool = False,
    ) -> httpx.Response | None:
        """Execute a single request (no retry) and map failures."""
        try:
            response = await self._client.request(
                method, path, params=params, headers=headers
            )
        except httpx.HTTPError as exc:
            raise ProviderError(f"{method} {path} failed: {exc}", url=path) from exc

        status = response.status_code
        if status == 404 and allow_not_found:
            return None
        if status < 400:
            return response

        message = f"{method} {path}: HTTP {status} - {_error_message(response)}"
        if status == 429 or (
            status == 403 and response.headers.get("X-RateLimit-Remaining") == "0"
        ):
            raise ProviderRateLimitError(
                message,
                retry_after=_parse_retry_after(response),
                status_code=status,
                url=path,
            )
        if status in (401, 403):
            raise ProviderAuthError(message, status_code=status, url=path)
        if status == 404:
            raise ProviderNotFoundError(message, status_code=status, url=path)
        raise ProviderError(message, status_code=status, url=path)

    @staticmethod
    def _json(response: httpx.Response) -> Any:
        try:
            return response.json()
        except ValueError as exc:
            raise ProviderError(
                f"Malformed JSON from {response.request.url.path}: {exc}",
                status_code=response.status_code,
            ) from exc

    @staticmethod
    def _repo_path(owner: str, repo: str) -> str:
        return f"/repos/{_segment(owner)}/{_segment(repo)}"

    # ------------------------------------------------------------------
    # Branches and commits
    # ------------------------------------------------------------------

    async def list_branches(self, owner: str, repo: str, page: int = 1) -> BranchPage:
        """Fetch one page of branches at the configured page size.

        ``has_next`` reflects the ``rel="next"`` entry of the Link header.
        """
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/branches",
            params={"per_page": self._config.per_page, "page": page},
        )
        data = self._json(response)
        try:
            branches = [
                BranchRef(name=item["name"], sha=item["commit"]["sha"]) for item in data
            ]
        except (KeyError, TypeError) as exc:
            raise ProviderError(f"Unexpected branch listing format: {exc}") from exc
        return BranchPage(branches=branches, has_next="next" in response.links)

    async def get_branch(self, owner: str, repo: str, name: str) -> BranchRef | None:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/branches/{_segment(name)}",
            allow_not_found=True,
        )
        if response is None:
            return None
        data = self._json(response)
        try:
            return BranchRef(name=data.get("name", name), sha=data["commit"]["sha"])
        except (KeyError, TypeError, AttributeError) as exc:
            raise ProviderError(f"Unexpected branch format for {name}: {exc}") from exc

    async def get_commit(self, owner: str, repo: str, sha: str) -> CommitDetail:
        """Fetch tip-commit metadata.

        Timestamp prefers the committer date, then the author date. Author
        prefers the git author name, then the account login.
        """
        response = await self._request(
            "GET", f"{self._repo_path(owner, repo)}/commits/{_segment(sha)}"
        )
        data = self._json(response)
        commit = data.get("commit") or {}
        git_author = commit.get("author") or {}
        git_committer = commit.get("committer") or {}
        account = data.get("author") or {}

        fields: dict[str, Any] = {
            "sha": data.get("sha", sha),
            "author": git_author.get("name") or account.get("login") or "Unknown",
            "author_login": account.get("login"),
            "author_avatar": account.get("avatar_url"),
        }
        timestamp = git_committer.get("date") or git_author.get("date")
        if timestamp:
            fields["timestamp"] = timestamp
        return CommitDetail(**fields)

    async def compare(
        self, owner: str, repo: str, base: str, head: str
    ) -> ComparisonResult:
        """Three-dot compare ``base...head``."""
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/compare/{_segment(base)}...{_segment(head)}",
        )
        data = self._json(response)
        try:
            return ComparisonResult(
                ahead_by=data["ahead_by"],
                behind_by=data["behind_by"],
                status=data["status"],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ProviderError(f"Unexpected compare format: {exc}") from exc

    async def list_commits(
        self, owner: str, repo: str, ref: str, page: int = 1
    ) -> list[str]:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/commits",
            params={"sha": ref, "per_page": self._config.per_page, "page": page},
        )
        data = self._json(response)
        try:
            return [item["sha"] for item in data]
        except (KeyError, TypeError) as exc:
            raise ProviderError(f"Unexpected commit listing format: {exc}") from exc

    async def delete_branch(self, owner: str, repo: str, name: str) -> None:
        await self._request(
            "DELETE",
            f"{self._repo_path(owner, repo)}/git/refs/heads/{_segment(name)}",
        )

    # ------------------------------------------------------------------
    # Repository summary
    # ------------------------------------------------------------------

    async def get_repository(self, owner: str, repo: str) -> dict[str, Any]:
        response = await self._request("GET", self._repo_path(owner, repo))
        return self._json(response)

    async def list_pull_requests(
        self, owner: str, repo: str, *, state: str = "all", per_page: int = 100
    ) -> list[dict[str, Any]]:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/pulls",
            params={"state": state, "per_page": per_page},
        )
        return self._json(response)

    async def list_contributors(
        self, owner: str, repo: str, *, per_page: int = 10
    ) -> list[dict[str, Any]]:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/contributors",
            params={"per_page": per_page},
        )
        return self._json(response)

    async def get_participation(self, owner: str, repo: str) -> dict[str, Any]:
        """Weekly commit counts. Empty while GitHub is still computing (202)."""
        response = await self._request(
            "GET", f"{self._repo_path(owner, repo)}/stats/participation"
        )
        if response.status_code == 202 or not response.content:
            return {}
        return self._json(response)

    async def list_releases(
        self, owner: str, repo: str, *, per_page: int = 5
    ) -> list[dict[str, Any]]:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/releases",
            params={"per_page": per_page},
        )
        return self._json(response)

    async def get_readme(self, owner: str, repo: str) -> str | None:
        response = await self._request(
            "GET",
            f"{self._repo_path(owner, repo)}/readme",
            headers={"Accept": _RAW_MEDIA_TYPE},
            allow_not_found=True,
        )
        if response is None:
            return None
        return response.text

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    async def aclose(self) -> None:
        """Close the underlying httpx client."""
        await self._client.aclose()

    async def __aenter__(self) -> GitHubClient:
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.aclose()
