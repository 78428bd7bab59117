"""ghrelease data models — typed contracts for the whole publish workflow."""

from ghrelease.models.release import (
    Asset,
    CommitRange,
    GitObject,
    ReleaseDraft,
    ReleaseSummary,
    ReleaseTarget,
    RemoteRelease,
    TagReference,
    UpdatePolicy,
)
from ghrelease.models.job import (
    PublishResult,
    PublishState,
    StepTiming,
    UploadOutcome,
)

__all__ = [
    "Asset",
    "CommitRange",
    "GitObject",
    "ReleaseDraft",
    "ReleaseSummary",
    "ReleaseTarget",
    "RemoteRelease",
    "TagReference",
    "UpdatePolicy",
    "PublishResult",
    "PublishState",
    "StepTiming",
    "UploadOutcome",
]
