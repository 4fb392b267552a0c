"""Tests for directory sizing and cleanup helpers."""

import os

import pytest

from tarbench import file_utils
from tarbench.file_utils import file_size, remove_path, source_size_bytes


@pytest.fixture
def fake_du(monkeypatch):
    """Record the disk usage command and answer with canned output."""
    calls = []

    def _install(output, installed=()):
        monkeypatch.setattr(file_utils, "which", lambda tool: f"/usr/bin/{tool}" if tool in installed else None)

        def fake_capture(argv):
            calls.append(list(argv))
            return output

        monkeypatch.setattr(file_utils, "capture", fake_capture)
        return calls

    return _install


class TestSourceSizeBytes:
    """gdu is used when installed, otherwise plain du in bytes."""

    def test_prefers_gdu(self, fake_du):
        calls = fake_du("123456 /data/src\n", installed=("gdu",))

        assert source_size_bytes("/data/src") == 123456
        assert calls == [["gdu", "-n", "-p", "--no-prefix", "--show-apparent-size", "/data/src"]]

    def test_falls_back_to_du(self, fake_du):
        calls = fake_du("4096\t/data/src\n")

        assert source_size_bytes("/data/src") == 4096
        assert calls == [["du", "-sb", "/data/src"]]

    def test_first_line_wins(self, fake_du):
        fake_du("2048\t/data/src\n999\t/data/src/other\n")

        assert source_size_bytes("/data/src") == 2048

    def test_empty_output_rejected(self, fake_du):
        fake_du("  \n")

        with pytest.raises(ValueError, match="no disk usage"):
            source_size_bytes("/data/src")


class TestFileSize:
    def test_reports_bytes(self, tmp_path):
        path = tmp_path / "archive.tar.gz"
        path.write_bytes(b"x" * 321)

        assert file_size(path) == 321


class TestRemovePath:
    def test_file(self, tmp_path):
        path = tmp_path / "archive.tar.zst"
        path.write_text("data")

        remove_path(path)

        assert not path.exists()

    def test_directory_tree(self, tmp_path):
        tree = tmp_path / "tmp_extract_zstd"
        (tree / "nested").mkdir(parents=True)
        (tree / "nested" / "file.txt").write_text("data")

        remove_path(str(tree))

        assert not tree.exists()

    def test_symlink_removed_target_kept(self, tmp_path):
        target = tmp_path / "real"
        target.mkdir()
        (target / "keep.txt").write_text("data")
        link = tmp_path / "link"
        os.symlink(target, link)

        remove_path(link)

        assert not os.path.lexists(link)
        assert (target / "keep.txt").exists()

    def test_missing_path_ignored(self, tmp_path):
        remove_path(tmp_path / "never-created")
