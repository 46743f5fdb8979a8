"""
Hierarchical resolution of dronefiles.

account -> repositories -> branches -> default-branch tree -> matching blobs

Each level asks the level above for its inputs and memoizes its own remote
fetches under a stable key, so re-running a crawl against a warm cache issues
no API calls.
"""

from __future__ import annotations

import logging
from functools import partial
from typing import Any, Dict, List, Optional, Protocol

from drone_hunter.cache import MemoizingCache, build_cache_store
from drone_hunter.exceptions import InvalidResolverInputError
from drone_hunter.hunter.aggregation import flatten_blobs, merge_maps
from drone_hunter.hunter.decoder import decode_blob
from drone_hunter.hunter.filters import filter_entries
from drone_hunter.models import (
    Blob,
    Branch,
    DiscoveryRecord,
    HunterConfig,
    Repository,
    TreeEntry,
)

logger = logging.getLogger(__name__)


class RepositoryAPI(Protocol):
    """Read-only remote operations the hunter depends on."""

    def list_repositories(self, owner: str) -> List[Dict[str, Any]]: ...

    def list_branches(self, full_name: str) -> List[Dict[str, Any]]: ...

    def get_tree(self, full_name: str, sha: str) -> Dict[str, Any]: ...

    def get_blob(self, full_name: str, sha: str) -> Dict[str, Any]: ...


class DroneHunter:
    def __init__(
        self,
        client: RepositoryAPI,
        cache: MemoizingCache,
        config: HunterConfig,
    ) -> None:
        self._client = client
        self._cache = cache
        self._config = config

    @classmethod
    def from_settings(
        cls,
        settings,
        client: RepositoryAPI,
        config: Optional[HunterConfig] = None,
        cache_backend: Optional[str] = None,
    ) -> "DroneHunter":
        """Wire a hunter from application settings."""
        store = build_cache_store(settings, backend=cache_backend)
        return cls(client, MemoizingCache(store), config or settings.hunter_config())

    # ------------------------------------------------------------------
    # Repositories
    # ------------------------------------------------------------------

    def repositories_for(self, owner: str) -> List[Repository]:
        """All repositories of one account, archived ones included."""
        if not isinstance(owner, str) or not owner:
            raise InvalidResolverInputError(
                f"Account must be a non-empty string, got {owner!r}"
            )

        payload = self._cache.get_or_compute(
            f"repositories/{owner}",
            partial(self._client.list_repositories, owner),
        )
        return [Repository.model_validate(item) for item in payload]

    def repositories(self) -> List[Repository]:
        """Repositories of every configured account, minus archived ones unless included."""
        repos: List[Repository] = []
        for owner in sorted(self._config.owners):
            repos.extend(self.repositories_for(owner))

        if self._config.include_archived:
            return repos

        kept = []
        for repo in repos:
            if repo.archived:
                logger.debug(f"Skipping archived repository {repo.full_name}")
                continue
            kept.append(repo)
        return kept

    # ------------------------------------------------------------------
    # Branches
    # ------------------------------------------------------------------

    def branches_for(self, full_name: str) -> List[Branch]:
        if not isinstance(full_name, str) or not full_name:
            raise InvalidResolverInputError(
                f"Repository name must be a non-empty string, got {full_name!r}"
            )

        payload = self._cache.get_or_compute(
            f"branches/{full_name}",
            partial(self._client.list_branches, full_name),
        )
        return [Branch.from_api(item) for item in payload]

    def branches_for_repository(self, repo: Repository) -> List[Branch]:
        if not isinstance(repo, Repository):
            raise InvalidResolverInputError(f"Expected a Repository, got {repo!r}")
        return self.branches_for(repo.full_name)

    def branches(self) -> List[Branch]:
        """Branches of every repository; names may repeat across repositories."""
        branches: List[Branch] = []
        for repo in self.repositories():
            branches.extend(self.branches_for_repository(repo))
        return branches

    # ------------------------------------------------------------------
    # Trees
    # ------------------------------------------------------------------

    def _default_branch_tip(self, repo: Repository) -> Optional[str]:
        for branch in self.branches_for_repository(repo):
            if branch.name == repo.default_branch:
                return branch.commit_sha
        return None

    def tree_for(self, repo: Repository) -> Optional[Dict[str, List[TreeEntry]]]:
        """
        Top-level tree of the repository's default branch.

        Returns:
            ``{full_name: entries}``, or None when the default branch is missing
        """
        tip = self._default_branch_tip(repo)
        if tip is None:
            logger.info(
                f"Skipping {repo.full_name}: default branch "
                f"{repo.default_branch!r} not found"
            )
            return None

        full_name = repo.full_name
        payload = self._cache.get_or_compute(
            f"tree/{full_name}/{tip}",
            partial(self._client.get_tree, full_name, tip),
        )
        if payload.get("truncated"):
            logger.warning(f"Tree {full_name}@{tip} was truncated by the API")

        entries = [TreeEntry.model_validate(item) for item in payload.get("tree", [])]
        return {full_name: entries}

    def trees(self) -> Dict[str, List[TreeEntry]]:
        return merge_maps(self.tree_for(repo) for repo in self.repositories())

    # ------------------------------------------------------------------
    # Blobs
    # ------------------------------------------------------------------

    def blob_for(self, full_name: str, sha: str) -> Blob:
        payload = self._cache.get_or_compute(
            f"blob/{full_name}/{sha}",
            partial(self._client.get_blob, full_name, sha),
        )
        return Blob.model_validate(payload)

    def _matched_blobs(
        self, full_name: str, entries: List[TreeEntry]
    ) -> Optional[Dict[str, Dict[str, Blob]]]:
        matched = {
            entry.path: self.blob_for(full_name, entry.sha)
            for entry in filter_entries(entries, self._config.match)
        }
        if not matched:
            return None
        return {full_name: matched}

    def blobs(self) -> Dict[str, Dict[str, Blob]]:
        """Matching blobs per repository; repositories without matches are omitted."""
        return merge_maps(
            self._matched_blobs(full_name, entries)
            for full_name, entries in self.trees().items()
        )

    # ------------------------------------------------------------------
    # Dronefiles
    # ------------------------------------------------------------------

    def dronefiles(self) -> List[DiscoveryRecord]:
        """
        Decode every matched blob into a DiscoveryRecord.

        Raises:
            UnsupportedEncodingError: If any blob is not base64; the whole run
                is aborted.
        """
        records = list(flatten_blobs(self.blobs(), decode_blob))
        logger.info(
            f"Found {len(records)} dronefile(s), "
            f"{self._cache.misses} fetched, {self._cache.hits} from cache"
        )
        return records
