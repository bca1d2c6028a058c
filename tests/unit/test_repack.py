"""Unit tests for the repack step (rename + single-entry zip)."""

import os
import zipfile
from pathlib import Path

import pytest

from relpub.errors import InvalidVersionFormatError, RepackIOError
from relpub.pipeline.archive import zip_single_file
from relpub.pipeline.repack import RepackEngine, discover_files, repack
from relpub.pipeline.version import parse_version


class TestDiscoverFiles:
    def test_files_only_sorted(self, tmp_path):
        (tmp_path / "b.deb").write_bytes(b"b")
        (tmp_path / "a.exe").write_bytes(b"a")
        (tmp_path / "sub").mkdir()
        files = discover_files(tmp_path, "*")
        assert [f.name for f in files] == ["a.exe", "b.deb"]

    def test_pattern_filters(self, tmp_path):
        (tmp_path / "a.exe").write_bytes(b"a")
        (tmp_path / "b.deb").write_bytes(b"b")
        assert [f.name for f in discover_files(tmp_path, "*.deb")] == ["b.deb"]

    def test_recursive_pattern(self, tmp_path):
        (tmp_path / "linux").mkdir()
        (tmp_path / "linux" / "app_amd64.deb").write_bytes(b"d")
        files = discover_files(tmp_path, "**/*.deb")
        assert [f.name for f in files] == ["app_amd64.deb"]

    def test_missing_directory_is_empty(self, tmp_path):
        assert discover_files(tmp_path / "nope", "*") == []


class TestZipSingleFile:
    def test_single_entry(self, tmp_path):
        src = tmp_path / "app-1.0.0-windows-amd64.exe"
        src.write_bytes(b"MZ" + b"\0" * 64)
        archive = zip_single_file(src, tmp_path / "app-1.0.0-windows-amd64.zip")
        with zipfile.ZipFile(archive) as zf:
            assert zf.namelist() == ["app-1.0.0-windows-amd64.exe"]
            assert zf.read("app-1.0.0-windows-amd64.exe") == src.read_bytes()
            assert zf.getinfo("app-1.0.0-windows-amd64.exe").compress_type == zipfile.ZIP_DEFLATED


class TestRepack:
    def test_scenario_windows_installer(self, tmp_path):
        (tmp_path / "app-setup-x64.exe").write_bytes(b"installer")
        result = repack(tmp_path, "*", "1.2.3")
        assert result == [tmp_path / "app-1.2.3-windows-amd64.zip"]
        assert not (tmp_path / "app-setup-x64.exe").exists()
        assert (tmp_path / "app-1.2.3-windows-amd64.exe").read_bytes() == b"installer"
        with zipfile.ZipFile(result[0]) as zf:
            assert zf.namelist() == ["app-1.2.3-windows-amd64.exe"]

    def test_scenario_deb_with_suffix(self, tmp_path):
        (tmp_path / "app_amd64.deb").write_bytes(b"deb")
        result = repack(tmp_path, "*", "2.0.0-beta")
        assert (tmp_path / "app-2.0.0-beta-deb-linux-amd64.deb").exists()
        assert result == [tmp_path / "app-2.0.0-beta-deb-linux-amd64.zip"]

    def test_one_result_per_file_in_discovery_order(self, build_dir):
        files = discover_files(build_dir, "*")
        result = repack(build_dir, "*", "1.2.3")
        assert len(result) == len(files)
        by_source = dict(zip([f.name for f in files], [r.name for r in result]))
        assert by_source == {
            "SHA256SUMS.txt": "SHA256SUMS.txt",
            "app-1.0.0-1.x86_64.rpm": "app-1.2.3-rpm-linux-amd64.zip",
            "app-aarch64.dmg": "app-1.2.3-mac-arm64.zip",
            "app-setup-x64.exe": "app-1.2.3-windows-amd64.zip",
            "app_amd64.deb": "app-1.2.3-deb-linux-amd64.zip",
        }

    def test_unmatched_passes_through_with_warning(self, tmp_path, caplog):
        notes = tmp_path / "NOTES.md"
        notes.write_text("release notes")
        engine = RepackEngine(parse_version("1.0.0"))
        artifacts = engine.run(tmp_path, "*")
        assert len(artifacts) == 1
        assert not artifacts[0].repacked
        assert artifacts[0].archive_path == notes
        assert notes.exists()
        assert len(engine.warnings) == 1
        assert "NOTES.md" in engine.warnings[0]
        assert "No mapping found" in caplog.text
        assert not list(tmp_path.glob("*.zip"))

    def test_invalid_version_touches_nothing(self, tmp_path):
        (tmp_path / "app-setup-x64.exe").write_bytes(b"x")
        with pytest.raises(InvalidVersionFormatError):
            repack(tmp_path, "*", "1.2")
        assert (tmp_path / "app-setup-x64.exe").exists()

    def test_empty_directory(self, tmp_path):
        assert repack(tmp_path, "*", "1.0.0") == []

    def test_rename_failure_is_fatal(self, tmp_path, monkeypatch):
        (tmp_path / "app_amd64.deb").write_bytes(b"a")
        (tmp_path / "app_arm64.deb").write_bytes(b"b")

        def broken_rename(self, target):
            raise PermissionError(13, "Permission denied")

        monkeypatch.setattr(Path, "rename", broken_rename)
        with pytest.raises(RepackIOError) as exc_info:
            repack(tmp_path, "*", "1.0.0")
        assert "app_amd64.deb" in exc_info.value.path
        assert "Permission denied" in exc_info.value.message

    def test_archive_failure_is_fatal(self, tmp_path, monkeypatch):
        (tmp_path / "app_amd64.deb").write_bytes(b"a")

        def broken_zip(source, archive_path):
            raise OSError(28, "No space left on device")

        monkeypatch.setattr("relpub.pipeline.repack.zip_single_file", broken_zip)
        with pytest.raises(RepackIOError, match="No space left"):
            repack(tmp_path, "*", "1.0.0")

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_read_only_directory(self, tmp_path):
        if hasattr(os, "geteuid") and os.geteuid() == 0:
            pytest.skip("root ignores directory permissions")
        (tmp_path / "app_amd64.deb").write_bytes(b"a")
        tmp_path.chmod(0o555)
        try:
            with pytest.raises(RepackIOError):
                repack(tmp_path, "*", "1.0.0")
        finally:
            tmp_path.chmod(0o755)
