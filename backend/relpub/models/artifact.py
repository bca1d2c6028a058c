"""
relpub — Typed artifact contracts for the repack stage.

VersionSpec is parsed once per run; ArtifactFile and RepackedArtifact are
created per discovered file and handed from stage to stage.
"""

from __future__ import annotations

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field


class VersionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    major: int = Field(ge=0)
    minor: int = Field(ge=0)
    patch: int = Field(ge=0)
    suffix: str | None = Field(default=None, min_length=1)

    @property
    def core(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def __str__(self) -> str:
        return f"{self.core}-{self.suffix}" if self.suffix else self.core


class ArtifactFile(BaseModel):
    """A discovered build output. Only the base name drives classification."""

    model_config = ConfigDict(frozen=True)

    original_path: Path
    base_name: str
    extension: str = ""  # includes the leading dot, "" when absent
    logical_prefix: str = ""

    @property
    def stem(self) -> str:
        if self.extension:
            return self.base_name[: -len(self.extension)]
        return self.base_name

    @classmethod
    def from_path(cls, path: str | Path, logical_prefix: str = "") -> ArtifactFile:
        p = Path(path)
        return cls(
            original_path=p,
            base_name=p.name,
            extension=p.suffix,
            logical_prefix=logical_prefix,
        )


class RepackedArtifact(BaseModel):
    """
    Result of repacking one artifact.

    archive_path is what gets uploaded. For pass-through files it is the
    original path and renamed_path stays None.
    """

    source: ArtifactFile
    renamed_path: Path | None = None
    archive_path: Path

    @property
    def repacked(self) -> bool:
        return self.renamed_path is not None

    @classmethod
    def passthrough(cls, artifact: ArtifactFile) -> RepackedArtifact:
        return cls(source=artifact, archive_path=artifact.original_path)
