"""relpub — Single-entry zip archives for repacked artifacts."""

from __future__ import annotations

import zipfile
from pathlib import Path


def zip_single_file(source: Path, archive_path: Path) -> Path:
    """Write archive_path holding only source, stored under its base name."""
    with zipfile.ZipFile(archive_path, "w", compression=zipfile.ZIP_DEFLATED) as zf:
        zf.write(source, arcname=source.name)
    return archive_path
