"""Shared test configuration and fixtures for the relpub test suite."""

import sys
import threading
import time
from pathlib import Path

import pytest

# Add backend to Python path so imports work
backend_dir = str(Path(__file__).parent.parent / "backend")
if backend_dir not in sys.path:
    sys.path.insert(0, backend_dir)

from relpub.core.config import PublishConfig, StoreConfig  # noqa: E402
from relpub.errors import UploadError  # noqa: E402


class FakeStore:
    """In-memory object store. Records puts and peak concurrency."""

    def __init__(self, fail_keys=(), delay: float = 0.0, error: Exception | None = None):
        self.fail_keys = set(fail_keys)
        self.delay = delay
        self.error = error
        self.objects: dict[str, bytes] = {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self._lock = threading.Lock()

    def put(self, key: str, local_path: Path) -> None:
        with self._lock:
            self.calls.append(key)
            self.in_flight += 1
            self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                time.sleep(self.delay)
            if key in self.fail_keys:
                if self.error is not None:
                    raise self.error
                raise UploadError(key, "AccessDenied: bucket policy rejects this key")
            data = Path(local_path).read_bytes()
            with self._lock:
                self.objects[key] = data
        finally:
            with self._lock:
                self.in_flight -= 1


@pytest.fixture(scope="session")
def project_root():
    return Path(__file__).parent.parent


@pytest.fixture
def fake_store():
    return FakeStore()


@pytest.fixture
def store_config():
    return StoreConfig(
        region="oss-cn-hangzhou",
        access_key_id="AKIDEXAMPLE",
        access_key_secret="secret",
        bucket="releases",
        secure=True,
    )


@pytest.fixture
def make_config(store_config):
    def _make(local_folder, **kwargs) -> PublishConfig:
        return PublishConfig(store=store_config, local_folder=str(local_folder), **kwargs)
    return _make


@pytest.fixture
def build_dir(tmp_path):
    """A dist/ folder with one file per supported platform plus a checksum file."""
    dist = tmp_path / "dist"
    dist.mkdir()
    for name in (
        "app-setup-x64.exe",
        "app_amd64.deb",
        "app-1.0.0-1.x86_64.rpm",
        "app-aarch64.dmg",
        "SHA256SUMS.txt",
    ):
        (dist / name).write_bytes(name.encode() * 8)
    return dist
