"""Find Drone CI pipeline files across the repositories of GitHub accounts."""

from .exceptions import (
    DroneHunterConfigurationError,
    DroneHunterError,
    InvalidResolverInputError,
    UnsupportedEncodingError,
)
from .hunter import DroneHunter
from .models import (
    Blob,
    Branch,
    DiscoveryRecord,
    HunterConfig,
    MatchPatterns,
    Repository,
    TreeEntry,
)

__version__ = "1.0.0"

__all__ = [
    "Blob",
    "Branch",
    "DiscoveryRecord",
    "DroneHunter",
    "DroneHunterConfigurationError",
    "DroneHunterError",
    "HunterConfig",
    "InvalidResolverInputError",
    "MatchPatterns",
    "Repository",
    "TreeEntry",
    "UnsupportedEncodingError",
]
