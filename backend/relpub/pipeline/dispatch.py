"""
relpub — Bounded-concurrency upload dispatcher.

A fixed pool of worker coroutines drains one shared asyncio.Queue. Each
worker claims the next task with get_nowait(), uploads it, records exactly
one UploadOutcome and loops until the queue is empty. Workers never wait on
each other, and a failed upload is recorded as a FAILURE outcome instead of
propagating, so one bad transfer cannot cancel its siblings.
"""

from __future__ import annotations

import asyncio
import posixpath
import time
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from relpub.core.config import DEFAULT_CONCURRENCY, DEFAULT_UPLOAD_TIMEOUT
from relpub.errors import ConfigurationError, UploadError
from relpub.models.publish import UploadOutcome, UploadTask
from relpub.storage.client import ObjectStoreClient
from relpub.utils.logging import logger, step_timer


def build_remote_key(remote_dir: str, path: str | Path) -> str:
    """Flat namespace: the remote key is the prefix plus the file's base name."""
    return posixpath.join(remote_dir, Path(path).name)


def build_tasks(paths: list[Path], remote_dir: str) -> list[UploadTask]:
    return [UploadTask(local_path=p, remote_key=build_remote_key(remote_dir, p)) for p in paths]


class UploadDispatcher:
    def __init__(
        self,
        client: ObjectStoreClient,
        timeout: float = DEFAULT_UPLOAD_TIMEOUT,
        run_id: str | None = None,
    ):
        self.client = client
        self.timeout = timeout
        self.run_id = run_id
        self.worker_stats: list[int] = []  # tasks handled per worker, last run

    async def upload(
        self,
        tasks: list[UploadTask],
        concurrency: int = DEFAULT_CONCURRENCY,
    ) -> list[UploadOutcome]:
        """Upload every task. Returns one outcome per task, in completion order."""
        if concurrency < 1:
            raise ConfigurationError(f"concurrency must be at least 1, got {concurrency}")

        queue: asyncio.Queue[UploadTask] = asyncio.Queue()
        for task in tasks:
            queue.put_nowait(task)

        outcomes: list[UploadOutcome] = []
        self.worker_stats = [0] * concurrency

        # One thread per worker, so the pool never caps below concurrency.
        executor = ThreadPoolExecutor(max_workers=concurrency, thread_name_prefix="relpub-upload")
        try:
            with step_timer(f"Upload {len(tasks)} files ({concurrency} workers)", self.run_id):
                await asyncio.gather(*(
                    self._worker(index, queue, outcomes, executor)
                    for index in range(concurrency)
                ))
        finally:
            executor.shutdown(wait=False)

        failed = sum(1 for o in outcomes if not o.ok)
        logger.info("  Uploaded %d/%d files", len(outcomes) - failed, len(outcomes))
        return outcomes

    async def _worker(
        self,
        index: int,
        queue: asyncio.Queue[UploadTask],
        outcomes: list[UploadOutcome],
        executor: ThreadPoolExecutor,
    ) -> None:
        while True:
            try:
                task = queue.get_nowait()
            except asyncio.QueueEmpty:
                logger.debug("  worker %d finished after %d tasks", index, self.worker_stats[index])
                return
            outcomes.append(await self._upload_one(index, task, executor))
            self.worker_stats[index] += 1
            queue.task_done()

    async def _upload_one(
        self,
        index: int,
        task: UploadTask,
        executor: ThreadPoolExecutor,
    ) -> UploadOutcome:
        loop = asyncio.get_running_loop()
        start = time.perf_counter()
        try:
            await asyncio.wait_for(
                loop.run_in_executor(executor, self.client.put, task.remote_key, task.local_path),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            reason = f"timed out after {self.timeout:g}s"
        except UploadError as exc:
            reason = exc.reason
        except Exception as exc:
            reason = str(exc) or type(exc).__name__
        else:
            ms = int((time.perf_counter() - start) * 1000)
            logger.info("Uploaded: %s to %s", task.local_path, task.remote_key)
            return UploadOutcome.success(task, duration_ms=ms, worker=index)

        ms = int((time.perf_counter() - start) * 1000)
        logger.error("Failed to upload %s: %s", task.local_path, reason)
        return UploadOutcome.failure(task, reason, duration_ms=ms, worker=index)
