"""GitExtender exception hierarchy.

All GitExtender-specific exceptions inherit from GitExtenderError.
"""

from __future__ import annotations


class GitExtenderError(Exception):
    """Base exception for all GitExtender errors."""


class ConfigurationError(GitExtenderError):
    """Raised when a repository handle or client setting is invalid.

    Raised before any provider call is made: malformed repository URLs,
    empty owner/name, or an action that needs a credential that is missing.
    """


class UnsupportedProviderError(ConfigurationError):
    """Raised when an operation is requested for a provider with no client."""

    def __init__(self, provider: str) -> None:
        self.provider = provider
        super().__init__(f"Provider not supported yet: {provider}")


class ProviderError(GitExtenderError):
    """A call to the hosted Git provider failed.

    Attributes:
        status_code: HTTP status of the failed response, or None when the
            request never produced one (connection errors, timeouts).
        url: The request path, when known.
    """

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        url: str | None = None,
    ) -> None:
        self.status_code = status_code
        self.url = url
        super().__init__(message)


class ProviderAuthError(ProviderError):
    """Authentication or authorization failed (401/403)."""


class ProviderNotFoundError(ProviderError):
    """The requested resource does not exist (404)."""


class ProviderRateLimitError(ProviderError):
    """Rate limited by the provider.

    Attributes:
        retry_after: Seconds to wait before retrying (from Retry-After header),
            or None if not provided.
    """

    def __init__(
        self,
        message: str = "Rate limited",
        *,
        retry_after: float | None = None,
        status_code: int | None = 429,
        url: str | None = None,
    ) -> None:
        self.retry_after = retry_after
        if retry_after is not None:
            message = f"{message} (retry after {retry_after}s)"
        super().__init__(message, status_code=status_code, url=url)
