"""relpub data models — typed contracts for the entire pipeline."""

from relpub.models.artifact import (
    VersionSpec,
    ArtifactFile,
    RepackedArtifact,
)
from relpub.models.publish import (
    PublishState,
    OutcomeStatus,
    UploadTask,
    UploadOutcome,
    BatchResult,
    StepTiming,
    PublishResult,
)

__all__ = [
    "VersionSpec",
    "ArtifactFile",
    "RepackedArtifact",
    "PublishState",
    "OutcomeStatus",
    "UploadTask",
    "UploadOutcome",
    "BatchResult",
    "StepTiming",
    "PublishResult",
]
