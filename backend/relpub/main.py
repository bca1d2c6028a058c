"""
relpub — Command-line / CI entry point.

Every option can also come from a GitHub Actions input (INPUT_<NAME>)
or a RELPUB_<NAME> environment variable; flags given here win.

  relpub --local-folder dist --remote-dir releases/1.2.3 --repack-version 1.2.3
  relpub --list-rules

Exit status is 0 when every file was uploaded, 1 otherwise.
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from relpub import __version__
from relpub.core.config import load_config
from relpub.errors import PublisherError
from relpub.naming.rules import list_rules
from relpub.pipeline.orchestrator import PublishOrchestrator
from relpub.storage.client import OSSClient
from relpub.utils.actions import set_failed, set_output
from relpub.utils.logging import logger, set_debug

OPTIONS: list[tuple[str, str]] = [
    ("region", "OSS region, e.g. oss-cn-hangzhou"),
    ("access-key-id", "access key id"),
    ("access-key-secret", "access key secret"),
    ("bucket", "destination bucket"),
    ("endpoint", "explicit endpoint URL (overrides the region endpoint)"),
    ("local-folder", "directory holding the build outputs"),
    ("remote-dir", "destination prefix inside the bucket"),
    ("file-pattern", "glob pattern relative to local-folder (default: *)"),
    ("repack-version", "rename and zip artifacts for this x.y.z[-w] version"),
    ("concurrency", "number of parallel uploads (default: 10)"),
    ("timeout", "per-upload timeout in seconds (default: 300)"),
]

FLAG_OPTIONS: list[tuple[str, str]] = [
    ("secure", "use https (true/1)"),
    ("debug", "verbose diagnostic output (true/1)"),
]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="relpub",
        description="Repack release artifacts and upload them to an object store.",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    for name, help_text in OPTIONS:
        parser.add_argument(f"--{name}", dest=name.replace("-", "_"), default=None, help=help_text)
    for name, help_text in FLAG_OPTIONS:
        parser.add_argument(
            f"--{name}", dest=name, nargs="?", const="true", default=None, help=help_text,
        )
    parser.add_argument(
        "--list-rules", action="store_true", help="print the artifact naming table and exit",
    )
    return parser


def _print_rules() -> None:
    width = max(len(rule.source_pattern) for rule in list_rules())
    for rule in list_rules():
        print(f"{rule.source_pattern:<{width}}  →  {rule.canonical_suffix}")


def main(argv: list[str] | None = None) -> int:
    args = build_parser().parse_args(argv)
    if args.list_rules:
        _print_rules()
        return 0

    names = [name for name, _ in OPTIONS + FLAG_OPTIONS]
    overrides = {name: getattr(args, name.replace("-", "_")) for name in names}

    try:
        config = load_config(overrides)
        set_debug(config.debug)
        client = OSSClient.from_config(config.store)
        result = asyncio.run(PublishOrchestrator(config, client).run())
    except PublisherError as exc:
        logger.error("%s: %s", exc.code, exc.message)
        if exc.suggestion:
            logger.info("  Hint: %s", exc.suggestion)
        set_failed(exc.message)
        return 1
    except Exception as exc:
        logger.exception("Publish failed")
        set_failed(str(exc))
        return 1

    if not result.ok:
        set_failed(result.failure_message())
        return 1

    set_output("upload-status", "success")
    return 0


if __name__ == "__main__":
    sys.exit(main())
