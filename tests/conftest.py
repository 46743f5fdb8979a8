import base64
from collections import Counter
from typing import Any, Dict, List, Optional

import pytest

from drone_hunter.cache import MemoizingCache, MemoryCacheStore
from drone_hunter.hunter import DroneHunter
from drone_hunter.models import HunterConfig
from drone_hunter.services.github.exceptions import GithubNotFoundError


class FakeGitHubClient:
    """In-memory stand-in for GitHubClient that counts every call."""

    def __init__(self):
        self.repositories: Dict[str, List[Dict[str, Any]]] = {}
        self.branches: Dict[str, List[Dict[str, Any]]] = {}
        self.trees: Dict[tuple, Dict[str, Any]] = {}
        self.blobs: Dict[tuple, Dict[str, Any]] = {}
        self.calls: Counter = Counter()

    def add_repository(
        self,
        full_name: str,
        default_branch: str = "main",
        archived: bool = False,
        branches: Optional[Dict[str, str]] = None,
    ) -> None:
        owner = full_name.split("/", 1)[0]
        self.repositories.setdefault(owner, []).append(
            {
                "id": len(self.repositories) + 1,
                "full_name": full_name,
                "default_branch": default_branch,
                "archived": archived,
                "private": False,
            }
        )
        if branches is None:
            branches = {default_branch: f"{full_name}-tip"}
        self.branches[full_name] = [
            {"name": name, "commit": {"sha": sha, "url": "https://example.invalid"}}
            for name, sha in branches.items()
        ]

    def add_tree(self, full_name: str, sha: str, entries: Dict[str, str]) -> None:
        self.trees[(full_name, sha)] = {
            "sha": sha,
            "truncated": False,
            "tree": [
                {"path": path, "mode": "100644", "type": "blob", "sha": blob_sha}
                for path, blob_sha in entries.items()
            ],
        }

    def add_blob(
        self, full_name: str, sha: str, content: bytes, encoding: str = "base64"
    ) -> None:
        raw = base64.b64encode(content) if encoding == "base64" else content
        raw = raw.decode()
        self.blobs[(full_name, sha)] = {
            "sha": sha,
            "size": len(content),
            "encoding": encoding,
            "content": raw,
        }

    def list_repositories(self, owner):
        self.calls["list_repositories"] += 1
        return list(self.repositories.get(owner, []))

    def list_branches(self, full_name):
        self.calls["list_branches"] += 1
        return list(self.branches.get(full_name, []))

    def get_tree(self, full_name, sha):
        self.calls["get_tree"] += 1
        try:
            return self.trees[(full_name, sha)]
        except KeyError:
            raise GithubNotFoundError(f"tree {full_name}@{sha}") from None

    def get_blob(self, full_name, sha):
        self.calls["get_blob"] += 1
        try:
            return self.blobs[(full_name, sha)]
        except KeyError:
            raise GithubNotFoundError(f"blob {full_name}@{sha}") from None

    @property
    def total_calls(self) -> int:
        return sum(self.calls.values())


@pytest.fixture
def client():
    return FakeGitHubClient()


@pytest.fixture
def acme_client(client):
    """acme/infra on main@abc with one dronefile and one readme."""
    client.add_repository("acme/infra", default_branch="main", branches={"main": "abc"})
    client.add_tree("acme/infra", "abc", {"drone.yml": "d1", "readme.md": "d2"})
    client.add_blob("acme/infra", "d1", b"kind: pipeline\n")
    client.add_blob("acme/infra", "d2", b"# infra\n")
    return client


@pytest.fixture
def store():
    return MemoryCacheStore()


@pytest.fixture
def make_hunter(store):
    def _make(client, owners=("acme",), **config) -> DroneHunter:
        return DroneHunter(
            client,
            MemoizingCache(store),
            HunterConfig(owners=frozenset(owners), **config),
        )

    return _make
