import re
from typing import Any, Dict, FrozenSet, Optional

from pydantic import BaseModel, ConfigDict, Field


class Repository(BaseModel):
    """Repository as listed for an account."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    full_name: str = Field(..., description="Full repository name (owner/repo)")
    default_branch: Optional[str] = None
    archived: bool = False


class Branch(BaseModel):
    """Branch name and the commit SHA at its tip."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str
    commit_sha: str

    @classmethod
    def from_api(cls, payload: Dict[str, Any]) -> "Branch":
        return cls(name=payload["name"], commit_sha=payload["commit"]["sha"])


class TreeEntry(BaseModel):
    """A single entry of a (non-recursive) git tree."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    path: str
    sha: str
    type: str = "blob"  # "blob", "tree" or "commit" (submodule)
    mode: Optional[str] = None


class Blob(BaseModel):
    """Raw git blob as returned by the API, still encoded."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sha: str
    encoding: Optional[str] = None
    content: str = ""
    size: Optional[int] = None


class DiscoveryRecord(BaseModel):
    """A matched dronefile together with where it was found."""

    model_config = ConfigDict(frozen=True)

    repository: str
    path: str
    sha: str
    content: bytes

    def as_dict(self) -> Dict[str, str]:
        """Serializable form; content is rendered as UTF-8 text."""
        return {
            "repository": self.repository,
            "path": self.path,
            "sha": self.sha,
            "content": self.content.decode("utf-8", errors="replace"),
        }


class MatchPatterns(BaseModel):
    """Patterns a tree entry path must satisfy to be treated as a dronefile."""

    model_config = ConfigDict(frozen=True)

    basename: re.Pattern = Field(
        default=re.compile("drone"), description="Searched anywhere in the full path"
    )
    suffix: re.Pattern = Field(
        default=re.compile(r"[.]ya?ml$"), description="File extension"
    )


class HunterConfig(BaseModel):
    """Crawl configuration, built once at startup."""

    model_config = ConfigDict(frozen=True)

    owners: FrozenSet[str] = frozenset()
    include_archived: bool = False
    match: MatchPatterns = Field(default_factory=MatchPatterns)
