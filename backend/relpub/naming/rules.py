"""
relpub — Naming rule table.

Maps a fragment of a build output's file name to the canonical
platform/arch suffix used for published artifacts. Rules are tried in
declaration order and the first match wins, so multi-token patterns must
come before anything shorter they contain.
"""

from __future__ import annotations

import re

from pydantic import BaseModel, Field, PrivateAttr


def compile_pattern(source_pattern: str) -> re.Pattern[str]:
    """
    Turn a rule pattern into a case-insensitive regex.

    '.' matches a literal dot and '-' matches any run of '-' or '_',
    including none, so 'x64-setup.exe' also matches 'x64_setup.exe'
    and 'x64setup.exe'.
    """
    parts = (re.escape(part) for part in source_pattern.split("-"))
    return re.compile("[-_]*".join(parts), re.IGNORECASE)


class NamingRule(BaseModel):
    source_pattern: str = Field(min_length=1)
    canonical_suffix: str = Field(min_length=1)
    _matcher: re.Pattern[str] = PrivateAttr()

    def model_post_init(self, __context) -> None:
        self._matcher = compile_pattern(self.source_pattern)

    @property
    def matcher(self) -> re.Pattern[str]:
        return self._matcher

    def search(self, base_name: str) -> re.Match[str] | None:
        return self._matcher.search(base_name)

    @property
    def canonical_stem(self) -> str:
        """Canonical suffix without its own extension."""
        stem, dot, _ = self.canonical_suffix.rpartition(".")
        return stem if dot else self.canonical_suffix


NAMING_RULES: list[NamingRule] = [
    NamingRule(source_pattern="x86-setup.exe", canonical_suffix="windows-386.exe"),
    NamingRule(source_pattern="x64-setup.exe", canonical_suffix="windows-amd64.exe"),
    NamingRule(source_pattern="arm64-setup.exe", canonical_suffix="windows-arm64.exe"),
    NamingRule(source_pattern="setup-x86.exe", canonical_suffix="windows-386.exe"),
    NamingRule(source_pattern="setup-x64.exe", canonical_suffix="windows-amd64.exe"),
    NamingRule(source_pattern="setup-arm64.exe", canonical_suffix="windows-arm64.exe"),
    NamingRule(source_pattern="x64.dmg", canonical_suffix="mac-amd64.dmg"),
    NamingRule(source_pattern="aarch64.dmg", canonical_suffix="mac-arm64.dmg"),
    NamingRule(source_pattern="amd64.deb", canonical_suffix="deb-linux-amd64.deb"),
    NamingRule(source_pattern="arm64.deb", canonical_suffix="deb-linux-arm64.deb"),
    NamingRule(source_pattern="-1.x86_64.rpm", canonical_suffix="rpm-linux-amd64.rpm"),
    NamingRule(source_pattern="-1.aarch64.rpm", canonical_suffix="rpm-linux-arm64.rpm"),
]


def list_rules() -> list[NamingRule]:
    return list(NAMING_RULES)
