"""Exceptions raised by the GitHub API client."""

from __future__ import annotations


class GithubError(Exception):
    """Base exception for GitHub API failures."""


class GithubConfigurationError(GithubError):
    """Raised when the client is misconfigured."""


class GithubNotFoundError(GithubError):
    """Raised when the requested resource does not exist or is not visible."""


class GithubRateLimitError(GithubError):
    """Raised when the upstream service enforces a rate limit."""

    def __init__(self, message: str, retry_after: int | float | None = None):
        super().__init__(message)
        self.retry_after = retry_after


class GithubRetryableError(GithubError):
    """Raised for transient issues where retrying later may succeed."""


class GithubSecondaryRateLimitError(GithubRateLimitError):
    """
    Raised when GitHub's secondary rate limit (abuse detection) is triggered.

    These require longer backoff (typically 60s+) compared to primary rate limits.
    """

    pass
