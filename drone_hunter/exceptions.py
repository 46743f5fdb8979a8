"""Errors raised while hunting for dronefiles."""

from __future__ import annotations

from typing import Optional


class DroneHunterError(Exception):
    """Base exception for discovery failures."""


class DroneHunterConfigurationError(DroneHunterError):
    """Raised when required configuration is missing or invalid."""


class InvalidResolverInputError(DroneHunterError, TypeError):
    """Raised when a resolver is handed an argument it cannot resolve."""


class UnsupportedEncodingError(DroneHunterError, ValueError):
    """Raised when a blob uses an encoding other than base64."""

    def __init__(
        self,
        encoding: Optional[str],
        repository: Optional[str] = None,
        path: Optional[str] = None,
    ):
        location = f" ({repository}:{path})" if repository and path else ""
        super().__init__(f"Unsupported blob encoding {encoding!r}{location}")
        self.encoding = encoding
        self.repository = repository
        self.path = path
