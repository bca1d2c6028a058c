"""
relpub — Repack step.

Renames every recognised build output to its canonical name and wraps it
in a single-entry zip alongside the renamed file. Files without a naming
rule are passed through untouched.

Files are processed one at a time in discovery order. Any filesystem error
aborts the whole step: a half-renamed source tree is not safe to continue
from, unlike a failed upload.
"""

from __future__ import annotations

from pathlib import Path

from relpub.errors import RepackIOError
from relpub.models.artifact import RepackedArtifact, VersionSpec
from relpub.naming.rules import NamingRule
from relpub.pipeline.archive import zip_single_file
from relpub.pipeline.classify import classify
from relpub.pipeline.version import parse_version
from relpub.utils.logging import logger, step_timer


def discover_files(directory: str | Path, file_pattern: str = "*") -> list[Path]:
    """Glob directory/file_pattern, files only, in a stable sorted order."""
    base = Path(directory)
    return sorted(p for p in base.glob(file_pattern) if p.is_file())


class RepackEngine:
    """Sequential rename + archive over one directory scan."""

    def __init__(
        self,
        version: VersionSpec,
        rules: list[NamingRule] | None = None,
        run_id: str | None = None,
    ):
        self.version = version
        self.rules = rules
        self.run_id = run_id
        self.warnings: list[str] = []

    def repack_file(self, path: Path) -> RepackedArtifact:
        result = classify(path, self.version, self.rules)
        if not result.matched:
            message = f"No mapping found for {path}. Skipping."
            logger.warning("  %s", message)
            self.warnings.append(message)
            return RepackedArtifact.passthrough(result.artifact)

        renamed = path.with_name(result.new_name)
        archive = path.with_name(f"{result.new_base_name}.zip")
        try:
            path.rename(renamed)
            logger.debug("  Renamed: %s to %s", path, renamed)
            zip_single_file(renamed, archive)
            logger.debug("  Zipped: %s to %s", renamed, archive)
        except OSError as exc:
            raise RepackIOError(str(path), exc) from exc

        return RepackedArtifact(
            source=result.artifact,
            renamed_path=renamed,
            archive_path=archive,
        )

    def run(self, directory: str | Path, file_pattern: str = "*") -> list[RepackedArtifact]:
        with step_timer("Repack artifacts", self.run_id):
            logger.debug("Repacking files using version: %s", self.version)
            files = discover_files(directory, file_pattern)
            artifacts = [self.repack_file(path) for path in files]
            logger.info(
                "  Repacked %d of %d files (%d passed through)",
                sum(1 for a in artifacts if a.repacked),
                len(artifacts),
                sum(1 for a in artifacts if not a.repacked),
            )
            return artifacts


def repack(directory: str | Path, file_pattern: str, version_string: str) -> list[Path]:
    """Repack everything under directory and return the paths to upload."""
    engine = RepackEngine(parse_version(version_string))
    return [a.archive_path for a in engine.run(directory, file_pattern)]
