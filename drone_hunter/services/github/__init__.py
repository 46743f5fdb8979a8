from .exceptions import (
    GithubConfigurationError,
    GithubError,
    GithubNotFoundError,
    GithubRateLimitError,
    GithubRetryableError,
    GithubSecondaryRateLimitError,
)
from .github_client import GitHubClient, get_github_client

__all__ = [
    "GitHubClient",
    "get_github_client",
    "GithubError",
    "GithubConfigurationError",
    "GithubNotFoundError",
    "GithubRateLimitError",
    "GithubRetryableError",
    "GithubSecondaryRateLimitError",
]
