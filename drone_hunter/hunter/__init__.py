from .aggregation import flatten_blobs, merge_maps
from .decoder import decode_blob
from .filters import filter_entries, matches
from .resolvers import DroneHunter, RepositoryAPI

__all__ = [
    "DroneHunter",
    "RepositoryAPI",
    "decode_blob",
    "filter_entries",
    "flatten_blobs",
    "matches",
    "merge_maps",
]
