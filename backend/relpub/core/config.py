"""
relpub — Publisher configuration.

Loads .env automatically, then reads every option from (highest first)
explicit overrides, GitHub Actions inputs (INPUT_<NAME>) and RELPUB_<NAME>
environment variables.
"""

import os
import re
from dataclasses import dataclass
from typing import Mapping

from dotenv import find_dotenv, load_dotenv

from relpub.errors import ConfigurationError

load_dotenv(find_dotenv(usecwd=True))

DEFAULT_FILE_PATTERN = "*"
DEFAULT_CONCURRENCY = 10
DEFAULT_UPLOAD_TIMEOUT = 300.0

REQUIRED_INPUTS = ["region", "access-key-id", "access-key-secret", "bucket"]

_TRUTHY_RE = re.compile(r"^\s*(true|1)\s*$", re.IGNORECASE)


@dataclass(frozen=True)
class StoreConfig:
    """Object store location and credentials."""
    region: str
    access_key_id: str
    access_key_secret: str
    bucket: str
    secure: bool = False
    endpoint: str | None = None
    timeout: float = DEFAULT_UPLOAD_TIMEOUT

    @property
    def region_id(self) -> str:
        """Region without the oss- prefix, e.g. cn-hangzhou."""
        return self.region[4:] if self.region.startswith("oss-") else self.region

    @property
    def endpoint_url(self) -> str:
        if self.endpoint:
            return self.endpoint
        scheme = "https" if self.secure else "http"
        return f"{scheme}://oss-{self.region_id}.aliyuncs.com"


@dataclass(frozen=True)
class PublishConfig:
    """Top-level publish run configuration."""
    store: StoreConfig
    local_folder: str
    remote_dir: str = ""
    file_pattern: str = DEFAULT_FILE_PATTERN
    repack_version: str | None = None
    concurrency: int = DEFAULT_CONCURRENCY
    debug: bool = False


def parse_bool(value: str | None) -> bool:
    """Accept 'true' or '1' (any case, surrounding blanks allowed)."""
    return bool(value) and _TRUTHY_RE.match(value) is not None


def get_input(
    name: str,
    overrides: Mapping[str, str | None] | None = None,
    environ: Mapping[str, str] | None = None,
) -> str:
    """Return the trimmed value of an input, or "" when it is not set."""
    env = os.environ if environ is None else environ
    if overrides and overrides.get(name) is not None:
        return str(overrides[name]).strip()

    env_names = (
        f"INPUT_{name.upper()}",
        f"INPUT_{name.upper().replace('-', '_')}",
        f"RELPUB_{name.upper().replace('-', '_')}",
    )
    for env_name in env_names:
        value = env.get(env_name)
        if value:
            return value.strip()
    return ""


def _parse_number(name: str, raw: str, default, cast):
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        raise ConfigurationError(f"Input '{name}' must be a number, got: {raw}")
    if value <= 0:
        raise ConfigurationError(f"Input '{name}' must be positive, got: {raw}")
    return value


def load_config(
    overrides: Mapping[str, str | None] | None = None,
    environ: Mapping[str, str] | None = None,
) -> PublishConfig:
    def read(name: str) -> str:
        return get_input(name, overrides, environ)

    missing = [name for name in REQUIRED_INPUTS if not read(name)]
    if missing:
        raise ConfigurationError(
            f"Missing required inputs: {', '.join(missing)}",
            missing=missing,
        )

    store = StoreConfig(
        region=read("region"),
        access_key_id=read("access-key-id"),
        access_key_secret=read("access-key-secret"),
        bucket=read("bucket"),
        secure=parse_bool(read("secure")),
        endpoint=read("endpoint") or None,
        timeout=_parse_number("timeout", read("timeout"), DEFAULT_UPLOAD_TIMEOUT, float),
    )
    return PublishConfig(
        store=store,
        local_folder=read("local-folder"),
        remote_dir=read("remote-dir"),
        file_pattern=read("file-pattern") or DEFAULT_FILE_PATTERN,
        repack_version=read("repack-version") or None,
        concurrency=_parse_number("concurrency", read("concurrency"), DEFAULT_CONCURRENCY, int),
        debug=parse_bool(read("debug")),
    )
