"""Helpers for combining per-repository resolver results."""

from typing import Callable, Dict, Iterable, Iterator, Mapping, Optional, TypeVar

from drone_hunter.models import Blob, DiscoveryRecord

K = TypeVar("K")
V = TypeVar("V")


def merge_maps(maps: Iterable[Optional[Mapping[K, V]]]) -> Dict[K, V]:
    """
    Merge mappings in order, skipping None and empty ones.

    Later mappings overwrite earlier ones on key collision. Returns an empty
    dict when nothing was merged.
    """
    merged: Dict[K, V] = {}
    for mapping in maps:
        if mapping:
            merged.update(mapping)
    return merged


def flatten_blobs(
    blobs_by_repo: Mapping[str, Mapping[str, Blob]],
    decode: Callable[[Blob, str, str], bytes],
) -> Iterator[DiscoveryRecord]:
    """Yield one DiscoveryRecord per (repository, path, blob)."""
    for repository, blobs in blobs_by_repo.items():
        for path, blob in blobs.items():
            yield DiscoveryRecord(
                repository=repository,
                path=path,
                sha=blob.sha,
                content=decode(blob, repository, path),
            )
