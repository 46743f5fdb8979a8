"""Tests for the GitHub REST client against a mocked transport."""

import httpx
import pytest

from drone_hunter.config import Settings
from drone_hunter.services.github.exceptions import (
    GithubConfigurationError,
    GithubNotFoundError,
    GithubRateLimitError,
    GithubRetryableError,
    GithubSecondaryRateLimitError,
)
from drone_hunter.services.github.github_client import GitHubClient, get_github_client

API_URL = "https://api.github.test"


def make_client(handler, token="test-token"):
    return GitHubClient(
        token=token, api_url=API_URL, transport=httpx.MockTransport(handler)
    )


class TestPagination:
    def test_follows_next_link(self):
        seen = []

        def handler(request):
            seen.append(request.url)
            if request.url.params.get("page") == "2":
                return httpx.Response(200, json=[{"full_name": "acme/b"}])
            return httpx.Response(
                200,
                json=[{"full_name": "acme/a"}],
                headers={
                    "Link": (
                        f'<{API_URL}/users/acme/repos?per_page=100&page=2>; rel="next", '
                        f'<{API_URL}/users/acme/repos?per_page=100&page=2>; rel="last"'
                    )
                },
            )

        with make_client(handler) as client:
            repos = client.list_repositories("acme")

        assert [r["full_name"] for r in repos] == ["acme/a", "acme/b"]
        assert len(seen) == 2
        assert seen[0].path == "/users/acme/repos"
        assert seen[0].params["per_page"] == "100"

    def test_branches_single_page(self):
        def handler(request):
            assert request.url.path == "/repos/acme/infra/branches"
            return httpx.Response(200, json=[{"name": "main", "commit": {"sha": "abc"}}])

        with make_client(handler) as client:
            assert client.list_branches("acme/infra") == [
                {"name": "main", "commit": {"sha": "abc"}}
            ]


class TestGitObjects:
    def test_get_tree(self):
        def handler(request):
            assert request.url.path == "/repos/acme/infra/git/trees/abc"
            assert "recursive" not in request.url.params
            return httpx.Response(200, json={"sha": "abc", "tree": []})

        with make_client(handler) as client:
            assert client.get_tree("acme/infra", "abc") == {"sha": "abc", "tree": []}

    def test_get_blob(self):
        def handler(request):
            assert request.url.path == "/repos/acme/infra/git/blobs/d1"
            return httpx.Response(
                200, json={"sha": "d1", "encoding": "base64", "content": "aGVsbG8="}
            )

        with make_client(handler) as client:
            assert client.get_blob("acme/infra", "d1")["content"] == "aGVsbG8="


class TestHeaders:
    def test_bearer_token(self):
        def handler(request):
            assert request.headers["Authorization"] == "Bearer test-token"
            assert request.headers["Accept"] == "application/vnd.github+json"
            return httpx.Response(200, json=[])

        with make_client(handler) as client:
            client.list_branches("acme/infra")

    def test_anonymous_access(self, caplog):
        def handler(request):
            assert "Authorization" not in request.headers
            return httpx.Response(200, json=[])

        with caplog.at_level("WARNING"):
            with make_client(handler, token=None) as client:
                client.list_branches("acme/infra")

        assert "anonymous access" in caplog.text


class TestErrors:
    def test_rate_limit(self):
        def handler(request):
            return httpx.Response(
                403, text="API rate limit exceeded", headers={"Retry-After": "30"}
            )

        with make_client(handler) as client:
            with pytest.raises(GithubRateLimitError) as excinfo:
                client.list_repositories("acme")

        assert excinfo.value.retry_after == 30.0

    def test_secondary_rate_limit(self):
        def handler(request):
            return httpx.Response(
                403,
                text="You have exceeded a secondary rate limit",
                headers={"Retry-After": "30"},
            )

        with make_client(handler) as client:
            with pytest.raises(GithubSecondaryRateLimitError) as excinfo:
                client.get_tree("acme/infra", "abc")

        assert excinfo.value.retry_after == 60.0

    def test_not_found(self):
        with make_client(lambda request: httpx.Response(404, json={})) as client:
            with pytest.raises(GithubNotFoundError):
                client.get_blob("acme/infra", "missing")

    def test_server_error(self):
        with make_client(lambda request: httpx.Response(502, text="bad gateway")) as client:
            with pytest.raises(GithubRetryableError):
                client.get_tree("acme/infra", "abc")

    def test_transport_error(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with make_client(handler) as client:
            with pytest.raises(GithubRetryableError):
                client.list_branches("acme/infra")


def test_get_github_client_uses_first_token():
    settings = Settings(GITHUB_TOKENS=[" ", " tok-1 ", "tok-2"], GITHUB_API_URL=API_URL)

    client = get_github_client(settings)

    assert client._token == "tok-1"
    assert client._api_url == API_URL
    client.close()


@pytest.mark.parametrize("api_url", ["api.github.com", "ftp://api.github.com", ""])
def test_get_github_client_rejects_malformed_url(api_url):
    with pytest.raises(GithubConfigurationError):
        get_github_client(Settings(GITHUB_API_URL=api_url))
