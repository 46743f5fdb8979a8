from typing import Iterable, List, Optional

from pydantic_settings import BaseSettings

from drone_hunter.models import HunterConfig, MatchPatterns


class Settings(BaseSettings):
    # Application
    ENV: str = "dev"  # Environment: "dev", "staging", "prod"

    # GitHub
    GITHUB_API_URL: str = "https://api.github.com"
    GITHUB_TOKENS: List[str] = []
    GITHUB_TIMEOUT_SECONDS: float = 120.0

    # Crawl
    GITHUB_OWNERS: List[str] = []  # Accounts (users or organizations) to crawl
    INCLUDE_ARCHIVED: bool = False
    MATCH_BASENAME: str = "drone"
    MATCH_SUFFIX: str = r"[.]ya?ml$"

    # Cache
    CACHE_BACKEND: str = "file"  # "file" (persistent), "redis" or "memory"
    CACHE_DIR: str = "drone-hunter.cache"
    CACHE_KEY_PREFIX: str = "drone_hunter:"
    REDIS_URL: str = "redis://localhost:6379/0"

    def hunter_config(
        self,
        owners: Optional[Iterable[str]] = None,
        include_archived: Optional[bool] = None,
        basename: Optional[str] = None,
        suffix: Optional[str] = None,
    ) -> HunterConfig:
        """Build the crawl configuration, letting explicit arguments win over settings."""
        return HunterConfig(
            owners=frozenset(owners if owners else self.GITHUB_OWNERS),
            include_archived=(
                self.INCLUDE_ARCHIVED if include_archived is None else include_archived
            ),
            match=MatchPatterns(
                basename=self.MATCH_BASENAME if basename is None else basename,
                suffix=self.MATCH_SUFFIX if suffix is None else suffix,
            ),
        )

    class Config:
        env_file = ".env"
        case_sensitive = True


settings = Settings()
