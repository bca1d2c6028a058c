"""
relpub — Pipeline step logger with duration tracking.
"""

from __future__ import annotations

import logging
import time
from contextlib import contextmanager
from typing import Generator

logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)-7s | %(message)s",
    datefmt="%H:%M:%S",
)

logger = logging.getLogger("relpub")


def set_debug(enabled: bool) -> None:
    """Switch the relpub logger between INFO and DEBUG."""
    logger.setLevel(logging.DEBUG if enabled else logging.INFO)


@contextmanager
def step_timer(step_name: str, run_id: str | None = None) -> Generator[None, None, None]:
    """
    Log the start and duration of a publish step.

    With a run_id every line is tagged "[run_id]" like the orchestrator's
    banner lines. A step left by an exception logs a warning instead.
    """
    tag = f"[{run_id}] " if run_id else ""
    logger.info("%s▶ %s — started", tag, step_name)
    start = time.perf_counter()
    try:
        yield
    except BaseException:
        elapsed_ms = (time.perf_counter() - start) * 1000
        logger.warning("%s✘ %s — aborted after %.0f ms", tag, step_name, elapsed_ms)
        raise
    elapsed_ms = (time.perf_counter() - start) * 1000
    logger.info("%s✔ %s — completed in %.0f ms", tag, step_name, elapsed_ms)
