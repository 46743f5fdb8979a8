from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Callable, Dict, Iterator, List, Optional

import httpx

from drone_hunter.config import Settings, settings as default_settings
from drone_hunter.services.github.exceptions import (
    GithubConfigurationError,
    GithubNotFoundError,
    GithubRateLimitError,
    GithubRetryableError,
    GithubSecondaryRateLimitError,
)

API_PREVIEW_HEADERS = {
    "Accept": "application/vnd.github+json",
}

PER_PAGE = 100

logger = logging.getLogger(__name__)


class GitHubClient:
    def __init__(
        self,
        token: str | None = None,
        api_url: str | None = None,
        timeout: float = 120,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        """
        Initialize GitHubClient.

        Args:
            token: GitHub token; anonymous access is used when omitted
            api_url: GitHub API URL (defaults to api.github.com)
            timeout: Request timeout in seconds
            transport: Custom httpx transport (tests use httpx.MockTransport)
        """
        self._token = token
        self._api_url = (api_url or default_settings.GITHUB_API_URL).rstrip("/")
        if transport is None:
            transport = httpx.HTTPTransport(retries=3)
        self._rest = httpx.Client(
            base_url=self._api_url, timeout=timeout, transport=transport
        )

        if not self._token:
            logger.warning(
                "No GitHub token configured, using anonymous access (60 requests/hour)"
            )

    def _headers(self) -> Dict[str, str]:
        headers = {
            "X-GitHub-Api-Version": "2022-11-28",
        }
        if self._token:
            headers["Authorization"] = f"Bearer {self._token}"
        headers.update(API_PREVIEW_HEADERS)
        return headers

    def _handle_response(self, response: httpx.Response) -> httpx.Response:
        if response.status_code in {403, 429}:
            text_lower = response.text.lower()
            if "secondary rate limit" in text_lower:
                self._handle_secondary_rate_limit(response)
            elif "rate limit" in text_lower or response.status_code == 429:
                self._handle_rate_limit(response)
        if response.status_code == 404:
            raise GithubNotFoundError(f"Not found: {response.request.url}")
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as exc:
            raise GithubRetryableError(str(exc)) from exc
        return response

    def _handle_rate_limit(self, response: httpx.Response) -> None:
        reset_header = response.headers.get("X-RateLimit-Reset")
        retry_after_header = response.headers.get("Retry-After")
        wait_seconds = 60.0

        if retry_after_header:
            try:
                wait_seconds = float(retry_after_header)
            except ValueError:
                pass
        elif reset_header:
            try:
                reset_epoch = float(reset_header)
                now_epoch = datetime.now(timezone.utc).timestamp()
                wait_seconds = max(reset_epoch - now_epoch, 1.0)
            except ValueError:
                pass

        raise GithubRateLimitError(
            "GitHub rate limit reached", retry_after=wait_seconds
        )

    def _handle_secondary_rate_limit(self, response: httpx.Response) -> None:
        """
        Handle GitHub secondary rate limit (abuse detection).

        Secondary rate limits require longer backoff (typically 60s+).
        """
        retry_after_header = response.headers.get("Retry-After")
        wait_seconds = 120.0  # Default 2 minutes for secondary

        if retry_after_header:
            try:
                wait_seconds = max(float(retry_after_header), 60.0)
            except ValueError:
                pass

        logger.warning(
            f"GitHub secondary rate limit (abuse detection) hit, "
            f"retry after {wait_seconds}s"
        )

        raise GithubSecondaryRateLimitError(
            "GitHub secondary rate limit (abuse detection) hit",
            retry_after=wait_seconds,
        )

    def _send(self, request_func: Callable[[], httpx.Response]) -> httpx.Response:
        """Execute request. Rate limit errors are raised to caller."""
        try:
            response = request_func()
        except httpx.RequestError as exc:
            raise GithubRetryableError(str(exc)) from exc
        return self._handle_response(response)

    def _rest_request(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        def _do_request():
            return self._rest.request(method, path, headers=self._headers(), **kwargs)

        response = self._send(_do_request)
        return response.json()

    def _paginate(
        self, path: str, params: Optional[Dict[str, Any]] = None
    ) -> Iterator[Dict[str, Any]]:
        url = path
        query = {"per_page": PER_PAGE, **(params or {})}
        while url:

            def _do_request():
                return self._rest.get(url, headers=self._headers(), params=query)

            response = self._send(_do_request)
            items = response.json()
            if isinstance(items, list):
                yield from items
            else:
                yield items
                break
            url = None
            link_header = response.headers.get("Link")
            if link_header:
                for part in link_header.split(","):
                    segment = part.strip()
                    if segment.endswith('rel="next"'):
                        url = segment[segment.find("<") + 1 : segment.find(">")]
                        query = None  # GitHub link already contains query params
                        break

    def list_repositories(self, owner: str) -> List[Dict[str, Any]]:
        """
        List every repository of a user or organization.

        Args:
            owner: Account login

        Returns:
            Raw repository payloads in API listing order
        """
        return list(self._paginate(f"/users/{owner}/repos", params={"type": "owner"}))

    def list_branches(self, full_name: str) -> List[Dict[str, Any]]:
        """List branches of a repository (name and tip commit)."""
        return list(self._paginate(f"/repos/{full_name}/branches"))

    def get_tree(self, full_name: str, sha: str) -> Dict[str, Any]:
        """
        Get a git tree, not recursively expanded.

        Args:
            full_name: Repository full name (owner/repo)
            sha: Tree or commit SHA
        """
        return self._rest_request("GET", f"/repos/{full_name}/git/trees/{sha}")

    def get_blob(self, full_name: str, sha: str) -> Dict[str, Any]:
        """Get a git blob; content is returned base64-encoded by GitHub."""
        return self._rest_request("GET", f"/repos/{full_name}/git/blobs/{sha}")

    def close(self) -> None:
        self._rest.close()

    def __enter__(self) -> "GitHubClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


def get_github_client(settings: Settings | None = None) -> GitHubClient:
    """
    Get a GitHub client using the configured tokens.

    Only the first token is used; there is no rotation.

    Raises:
        GithubConfigurationError: If GITHUB_API_URL is not an http(s) URL.
    """
    settings = settings or default_settings
    try:
        api_url = httpx.URL(settings.GITHUB_API_URL)
    except httpx.InvalidURL as exc:
        raise GithubConfigurationError(
            f"Invalid GITHUB_API_URL: {settings.GITHUB_API_URL!r}"
        ) from exc
    if api_url.scheme not in {"http", "https"} or not api_url.host:
        raise GithubConfigurationError(
            f"Invalid GITHUB_API_URL: {settings.GITHUB_API_URL!r}"
        )

    tokens = [t.strip() for t in settings.GITHUB_TOKENS if t and t.strip()]

    return GitHubClient(
        token=tokens[0] if tokens else None,
        api_url=settings.GITHUB_API_URL,
        timeout=settings.GITHUB_TIMEOUT_SECONDS,
    )
