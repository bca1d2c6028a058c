"""
relpub — Artifact classification.

Matches a discovered file against the naming rule table and computes the
canonical name it is published under:

  <prefix>-<major>.<minor>.<patch>[-<suffix>]-<canonical suffix stem><original ext>

The original extension is kept even when the rule's canonical suffix names
a different one. Only the base name is inspected; directories are ignored.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path

from relpub.models.artifact import ArtifactFile, VersionSpec
from relpub.naming.rules import NAMING_RULES, NamingRule

PREFIX_RE = re.compile(r"^(.*?)[-_]*\d+\.\d+\.\d+.*[-_]")


@dataclass(frozen=True)
class Classification:
    artifact: ArtifactFile
    rule: NamingRule | None = None
    new_name: str | None = None

    @property
    def matched(self) -> bool:
        return self.rule is not None

    @property
    def new_base_name(self) -> str | None:
        """Canonical name without the extension; also the archive stem."""
        if self.new_name is None:
            return None
        ext = self.artifact.extension
        return self.new_name[: -len(ext)] if ext else self.new_name


def find_rule(base_name: str, rules: list[NamingRule] | None = None) -> tuple[NamingRule, re.Match[str]] | None:
    """Return the first rule matching base_name along with its match."""
    for rule in NAMING_RULES if rules is None else rules:
        match = rule.search(base_name)
        if match:
            return rule, match
    return None


def derive_logical_prefix(stem: str, rule_match: re.Match[str] | None = None) -> str:
    """
    Extract the part of a file name that survives renaming.

    A name already carrying a version ('app-1.2.3-x64-setup') keeps what
    precedes the version. Otherwise the prefix is everything before the
    first '_', taken from the text ahead of the matched platform token
    so that 'app-setup-x64' yields 'app'.
    """
    match = PREFIX_RE.match(stem)
    if match:
        return match.group(1)

    head = stem
    if rule_match is not None:
        head = stem[: rule_match.start()].rstrip("-_") or stem
    return head.split("_")[0]


def canonical_base_name(prefix: str, version: VersionSpec, rule: NamingRule) -> str:
    return f"{prefix}-{version}-{rule.canonical_stem}"


def classify(
    path: str | Path,
    version: VersionSpec,
    rules: list[NamingRule] | None = None,
) -> Classification:
    artifact = ArtifactFile.from_path(path)
    found = find_rule(artifact.base_name, rules)
    if found is None:
        return Classification(artifact=artifact)

    rule, rule_match = found
    prefix = derive_logical_prefix(artifact.stem, rule_match)
    artifact = artifact.model_copy(update={"logical_prefix": prefix})
    new_name = canonical_base_name(prefix, version, rule) + artifact.extension
    return Classification(artifact=artifact, rule=rule, new_name=new_name)
