"""
relpub — Publish orchestrator.

Runs one publish as a state machine:

  RECEIVED → CONFIGURED → DISCOVERED | REPACKED → UPLOADED → DELIVERED

Each step is timed, logged, and recorded in the PublishResult. Fatal
errors (configuration, version, repack I/O) move the run to FAILED and
propagate; upload failures are only counted.
"""

from __future__ import annotations

import time
import uuid
from pathlib import Path

from relpub.core.config import PublishConfig
from relpub.errors import ConfigurationError
from relpub.models.publish import (
    BatchResult,
    PublishResult,
    PublishState,
    StepTiming,
    UploadOutcome,
)
from relpub.pipeline.dispatch import UploadDispatcher, build_tasks
from relpub.pipeline.repack import RepackEngine, discover_files
from relpub.pipeline.version import parse_version
from relpub.storage.client import ObjectStoreClient
from relpub.utils.logging import logger

_SEPARATORS = "/\\"


def normalize_local_folder(value: str) -> str:
    """
    Strip trailing separators. An empty result is fatal.

    A leading separator is kept so absolute folders stay absolute. This
    departs from the strip-both-ends rule of the first release and follows
    the later one: stripping it would turn /home/runner/dist into a path
    relative to the working directory. A value made only of separators
    ('/', '//') still normalizes to empty.
    """
    folder = (value or "").strip()
    if not folder.strip(_SEPARATORS):
        raise ConfigurationError("local-folder is empty")
    return folder.rstrip(_SEPARATORS)


def normalize_remote_dir(value: str) -> str:
    """Strip leading '/' and end a non-empty prefix with exactly one '/'."""
    remote_dir = (value or "").lstrip("/")
    if remote_dir:
        remote_dir = remote_dir.rstrip("/") + "/"
    return remote_dir


class PublishContext:
    """Mutable context passed through pipeline steps."""

    def __init__(self):
        self.folder: str = ""
        self.remote_dir: str = ""
        self.files: list[Path] = []
        self.outcomes: list[UploadOutcome] = []
        self.warnings: list[str] = []


class PublishOrchestrator:
    def __init__(self, config: PublishConfig, client: ObjectStoreClient):
        self.run_id = uuid.uuid4().hex[:12]
        self.config = config
        self.client = client
        self.state = PublishState.RECEIVED
        self.ctx = PublishContext()
        self.timings: list[StepTiming] = []

    def _record_step(self, name: str, start: float, status: str = "ok", detail: str = ""):
        ms = int((time.perf_counter() - start) * 1000)
        self.timings.append(StepTiming(step=name, duration_ms=ms, status=status, detail=detail))
        symbol = "✓" if status == "ok" else ("⊘" if status == "skipped" else "✗")
        logger.info("  %s %s — %dms %s", symbol, name, ms, detail)

    async def run(self) -> PublishResult:
        """Execute the full publish. Returns a PublishResult; fatal errors raise."""
        logger.info("=" * 60)
        logger.info("[%s] Publish starting (bucket=%s)", self.run_id, self.config.store.bucket)
        logger.info("=" * 60)
        start = time.perf_counter()

        try:
            self._step_configure()
            if self.config.repack_version:
                self._step_repack()
            else:
                self._step_discover()
            batch = await self._step_upload()
        except Exception:
            self.state = PublishState.FAILED
            raise

        self.state = PublishState.DELIVERED if batch.ok else PublishState.FAILED

        total_ms = int((time.perf_counter() - start) * 1000)
        logger.info("=" * 60)
        logger.info(
            "[%s] Publish complete — %d succeeded, %d failed, %dms",
            self.run_id, batch.succeeded, batch.failed, total_ms,
        )
        logger.info("=" * 60)

        return PublishResult(
            run_id=self.run_id,
            state=self.state,
            batch=batch,
            files=[str(p) for p in self.ctx.files],
            outcomes=self.ctx.outcomes,
            timings=self.timings,
            warnings=self.ctx.warnings,
        )

    def _step_configure(self):
        t = time.perf_counter()
        try:
            self.ctx.folder = normalize_local_folder(self.config.local_folder)
        except ConfigurationError as exc:
            self._record_step("configure", t, "failed", exc.message)
            raise
        self.ctx.remote_dir = normalize_remote_dir(self.config.remote_dir)
        logger.debug("Local folder: %s", self.ctx.folder)
        logger.debug("Remote dir: %s", self.ctx.remote_dir or "(bucket root)")
        logger.debug("File pattern: %s", self.config.file_pattern)
        self.state = PublishState.CONFIGURED
        self._record_step("configure", t)

    def _step_discover(self):
        t = time.perf_counter()
        self.ctx.files = discover_files(self.ctx.folder, self.config.file_pattern)
        logger.debug("Found files: %s", [str(p) for p in self.ctx.files])
        self.state = PublishState.DISCOVERED
        self._record_step("discover", t, detail=f"{len(self.ctx.files)} files")

    def _step_repack(self):
        t = time.perf_counter()
        try:
            engine = RepackEngine(parse_version(self.config.repack_version), run_id=self.run_id)
            artifacts = engine.run(self.ctx.folder, self.config.file_pattern)
        except Exception as exc:
            self._record_step("repack", t, "failed", str(exc))
            raise
        self.ctx.files = [a.archive_path for a in artifacts]
        self.ctx.warnings.extend(engine.warnings)
        self.state = PublishState.REPACKED
        self._record_step(
            "repack", t,
            detail=f"version={engine.version} files={len(artifacts)} warnings={len(engine.warnings)}",
        )

    async def _step_upload(self) -> BatchResult:
        t = time.perf_counter()
        tasks = build_tasks(self.ctx.files, self.ctx.remote_dir)
        if not tasks:
            self.state = PublishState.UPLOADED
            self._record_step("upload", t, "skipped", "no files")
            return BatchResult()

        dispatcher = UploadDispatcher(
            self.client, timeout=self.config.store.timeout, run_id=self.run_id,
        )
        self.ctx.outcomes = await dispatcher.upload(tasks, self.config.concurrency)
        batch = BatchResult.from_outcomes(self.ctx.outcomes)
        self.state = PublishState.UPLOADED
        self._record_step(
            "upload", t,
            "ok" if batch.ok else "failed",
            f"{batch.succeeded}/{batch.total} uploaded",
        )
        return batch
