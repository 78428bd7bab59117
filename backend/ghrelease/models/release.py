"""
ghrelease — Typed release data model.

Every workflow step works against these models.
No raw GitHub JSON dicts leak across boundaries.
"""

from __future__ import annotations

import enum
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class UpdatePolicy(str, enum.Enum):
    """What to do when a release with the same tag already exists."""

    FAIL_ON_EXISTING = "fail"
    OVERWRITE = "overwrite"
    APPEND_ASSETS = "append"


class ReleaseTarget(BaseModel):
    """Identifies the remote release being addressed."""

    model_config = ConfigDict(frozen=True)

    owner: str = Field(min_length=1, max_length=100)
    repository: str = Field(min_length=1, max_length=100)
    tag: str = Field(min_length=1, max_length=255)
    target_commitish: str = Field(default="master", min_length=1)

    @property
    def repo_path(self) -> str:
        return f"/repos/{self.owner}/{self.repository}"


class ReleaseDraft(BaseModel):
    """User-supplied content for a new or replaced release."""

    title: str = Field(min_length=1, max_length=255)
    body: str = ""
    draft: bool = False
    prerelease: bool = False

    def to_payload(self, target: ReleaseTarget) -> dict[str, Any]:
        """Serialise to the create-release JSON body."""
        return {
            "tag_name": target.tag,
            "target_commitish": target.target_commitish,
            "name": self.title,
            "body": self.body,
            "draft": self.draft,
            "prerelease": self.prerelease,
        }

    @classmethod
    def from_payload(cls, payload: dict[str, Any]) -> ReleaseDraft:
        return cls(
            title=payload["name"],
            body=payload.get("body") or "",
            draft=bool(payload.get("draft", False)),
            prerelease=bool(payload.get("prerelease", False)),
        )


class RemoteRelease(BaseModel):
    """
    A release as it exists on GitHub.

    Parsed from API responses; never modified locally, only re-fetched.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    url: str
    upload_url: str
    tag_name: str
    html_url: str = ""
    name: str | None = None
    draft: bool = False
    prerelease: bool = False


class ReleaseSummary(BaseModel):
    """One entry of the repository's release list."""

    model_config = ConfigDict(extra="ignore")

    tag_name: str
    created_at: str | None = None


class GitObject(BaseModel):
    model_config = ConfigDict(extra="ignore")

    sha: str
    type: str = "commit"


class TagReference(BaseModel):
    """Result of a git ref lookup (`/git/ref/tags/{tag}`)."""

    model_config = ConfigDict(extra="ignore")

    ref: str = ""
    object: GitObject


class Asset(BaseModel):
    """A local file to attach to a release."""

    name: str = Field(min_length=1, max_length=255)
    path: Path
    media_type: str | None = None


class CommitRange(BaseModel):
    """Exclusive-lower / inclusive-upper pair of commits for a changelog query."""

    model_config = ConfigDict(frozen=True)

    from_commit: str = ""
    to_commit: str = "HEAD"

    @property
    def revision_spec(self) -> str:
        """Argument for `git rev-list`. An empty lower bound renders as `..to`, which git reads as `to..to`."""
        return f"{self.from_commit}..{self.to_commit}"
