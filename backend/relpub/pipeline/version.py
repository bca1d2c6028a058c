"""relpub — Release version parsing."""

from __future__ import annotations

import re

from relpub.errors import InvalidVersionFormatError
from relpub.models.artifact import VersionSpec

VERSION_RE = re.compile(r"^(\d+)\.(\d+)\.(\d+)(?:-(.*))?$")


def parse_version(value: str) -> VersionSpec:
    """
    Parse 'major.minor.patch[-suffix]' into a VersionSpec.

    Raises InvalidVersionFormatError naming the input when it does not match.
    An empty suffix ('1.2.3-') is treated as no suffix.
    """
    match = VERSION_RE.match(value.strip()) if value else None
    if not match:
        raise InvalidVersionFormatError(value)
    major, minor, patch, suffix = match.groups()
    return VersionSpec(
        major=int(major),
        minor=int(minor),
        patch=int(patch),
        suffix=suffix or None,
    )
