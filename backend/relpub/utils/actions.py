"""
relpub — GitHub Actions host integration.

Outputs go to the file named by $GITHUB_OUTPUT; outside a runner they are
only logged. Failures are reported with the ::error:: workflow command so
they show up as annotations.
"""

import os
import sys

from relpub.utils.logging import logger


def set_output(name: str, value: str) -> None:
    output_path = os.getenv("GITHUB_OUTPUT")
    if not output_path:
        logger.info("Output %s=%s", name, value)
        return
    with open(output_path, "a", encoding="utf-8") as fh:
        fh.write(f"{name}={value}\n")


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def set_failed(message: str) -> None:
    """Report a run failure to the host. The caller sets the exit code."""
    print(f"::error::{_escape_data(str(message))}", file=sys.stdout, flush=True)
