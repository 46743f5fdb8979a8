"""Select tree entries that look like dronefiles."""

from typing import Iterable, Iterator

from drone_hunter.models import MatchPatterns, TreeEntry

BLOB_TYPE = "blob"


def matches(entry: TreeEntry, patterns: MatchPatterns) -> bool:
    """
    True when the entry's full path satisfies both the suffix and the basename pattern.

    Both are searched anywhere in the path, not only in its last segment.
    """
    return bool(
        patterns.suffix.search(entry.path) and patterns.basename.search(entry.path)
    )


def filter_entries(
    entries: Iterable[TreeEntry], patterns: MatchPatterns
) -> Iterator[TreeEntry]:
    """Yield matching blob entries in tree order; subtrees and submodules are skipped."""
    for entry in entries:
        if entry.type == BLOB_TYPE and matches(entry, patterns):
            yield entry
