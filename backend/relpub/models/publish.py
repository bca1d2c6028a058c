"""
relpub — Upload and publish-run output contracts.

Every run returns a PublishResult with full traceability:
state, per-step timings, per-task outcomes and the reduced batch counts.
"""

from __future__ import annotations

import enum
from pathlib import Path

from pydantic import BaseModel, Field


class PublishState(str, enum.Enum):
    RECEIVED = "RECEIVED"
    CONFIGURED = "CONFIGURED"
    DISCOVERED = "DISCOVERED"
    REPACKED = "REPACKED"
    UPLOADED = "UPLOADED"
    DELIVERED = "DELIVERED"
    FAILED = "FAILED"


class OutcomeStatus(str, enum.Enum):
    SUCCESS = "success"
    FAILURE = "failure"


class UploadTask(BaseModel):
    local_path: Path
    remote_key: str = Field(min_length=1)


class UploadOutcome(BaseModel):
    status: OutcomeStatus
    local_path: Path
    remote_key: str
    reason: str | None = None
    duration_ms: int = 0
    worker: int = 0

    @property
    def ok(self) -> bool:
        return self.status == OutcomeStatus.SUCCESS

    @classmethod
    def success(cls, task: UploadTask, **kwargs) -> UploadOutcome:
        return cls(
            status=OutcomeStatus.SUCCESS,
            local_path=task.local_path,
            remote_key=task.remote_key,
            **kwargs,
        )

    @classmethod
    def failure(cls, task: UploadTask, reason: str, **kwargs) -> UploadOutcome:
        return cls(
            status=OutcomeStatus.FAILURE,
            local_path=task.local_path,
            remote_key=task.remote_key,
            reason=reason,
            **kwargs,
        )


class BatchResult(BaseModel):
    succeeded: int = 0
    failed: int = 0

    @property
    def total(self) -> int:
        return self.succeeded + self.failed

    @property
    def ok(self) -> bool:
        return self.failed == 0

    @classmethod
    def from_outcomes(cls, outcomes: list[UploadOutcome]) -> BatchResult:
        succeeded = sum(1 for o in outcomes if o.ok)
        return cls(succeeded=succeeded, failed=len(outcomes) - succeeded)


class StepTiming(BaseModel):
    step: str
    duration_ms: int
    status: str = "ok"  # ok | skipped | failed
    detail: str = ""


class PublishResult(BaseModel):
    """Complete output contract for every publish run."""

    run_id: str
    state: PublishState
    batch: BatchResult = Field(default_factory=BatchResult)
    files: list[str] = Field(default_factory=list)
    outcomes: list[UploadOutcome] = Field(default_factory=list)
    timings: list[StepTiming] = Field(default_factory=list)
    warnings: list[str] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.batch.ok

    def failure_message(self) -> str:
        return f"{self.batch.failed} files failed to upload."
