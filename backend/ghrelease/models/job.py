"""
ghrelease — Publish result contracts.

Every publish run returns a PublishResult with full traceability:
final state, timings, and one outcome per uploaded asset.
"""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from ghrelease.models.release import RemoteRelease


class PublishState(str, enum.Enum):
    CHECKING = "CHECKING"
    FOUND_FAIL = "FOUND_FAIL"
    FOUND_OVERWRITE = "FOUND_OVERWRITE"
    FOUND_APPEND = "FOUND_APPEND"
    NOT_FOUND_CREATE = "NOT_FOUND_CREATE"
    DONE = "DONE"
    ERROR = "ERROR"


TERMINAL_STATES = frozenset({PublishState.DONE, PublishState.ERROR})


class StepTiming(BaseModel):
    step: str
    duration_ms: int
    status: str = "ok"  # ok | skipped | failed
    detail: str = ""


class UploadOutcome(BaseModel):
    name: str
    status_code: int
    media_type: str
    ok: bool
    browser_download_url: str | None = None
    error: str | None = None  # response body excerpt for non-2xx


class PublishResult(BaseModel):
    """Complete output contract for one publish run."""

    release: RemoteRelease
    state: PublishState = PublishState.DONE
    created: bool = False
    deleted_previous: bool = False
    outcomes: list[UploadOutcome] = Field(default_factory=list)
    timings: list[StepTiming] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def failed_uploads(self) -> list[UploadOutcome]:
        return [o for o in self.outcomes if not o.ok]
