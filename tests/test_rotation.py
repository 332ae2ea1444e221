"""Tests for file writers and size-based rotation"""

import gzip
import json
import os
import zipfile

import pytest

from universal_logger.core.log_entry import LogRecord
from universal_logger.writers.file_writer import FileWriter, RotatingFileWriter
from universal_logger.writers.rotation import RotationManager


def make_record(message, padding=0):
    metadata = {"padding": "x" * padding} if padding else {}
    return LogRecord.create("info", message, metadata=metadata)


class TestRotationManager:
    """Test backup shifting."""

    def test_no_rotation_below_limit(self, tmp_path):
        log_file = tmp_path / "app.log"
        log_file.write_text("small")
        assert RotationManager().before_write(log_file, max_size=100) is False

    def test_no_rotation_for_missing_file(self, tmp_path):
        assert RotationManager().before_write(tmp_path / "app.log", max_size=1) is False

    def test_rotation_at_limit(self, tmp_path):
        log_file = tmp_path / "app.log"
        log_file.write_text("x" * 100)

        assert RotationManager().before_write(log_file, max_size=100) is True
        assert not log_file.exists()
        assert (tmp_path / "app.log.1").read_text() == "x" * 100

    def test_disabled(self, tmp_path):
        log_file = tmp_path / "app.log"
        log_file.write_text("x" * 100)
        assert RotationManager(enabled=False).before_write(log_file, max_size=10) is False

    def test_backups_shift_and_oldest_is_dropped(self, tmp_path):
        log_file = tmp_path / "app.log"
        rotation = RotationManager(backup_count=2)
        for generation in ("first", "second", "third"):
            log_file.write_text(generation)
            rotation.rotate(log_file)

        assert (tmp_path / "app.log.1").read_text() == "third"
        assert (tmp_path / "app.log.2").read_text() == "second"
        assert not (tmp_path / "app.log.3").exists()

    def test_zero_backups_discards_file(self, tmp_path):
        log_file = tmp_path / "app.log"
        log_file.write_text("old")
        RotationManager(backup_count=0).rotate(log_file)

        assert not log_file.exists()
        assert list(tmp_path.iterdir()) == []

    def test_gzip_backups(self, tmp_path):
        log_file = tmp_path / "app.log"
        rotation = RotationManager(backup_count=3, compress=True)
        log_file.write_text("first")
        rotation.rotate(log_file)
        log_file.write_text("second")
        rotation.rotate(log_file)

        with gzip.open(tmp_path / "app.log.1.gz", "rt") as f:
            assert f.read() == "second"
        with gzip.open(tmp_path / "app.log.2.gz", "rt") as f:
            assert f.read() == "first"
        assert not log_file.exists()

    def test_zip_backups(self, tmp_path):
        log_file = tmp_path / "app.log"
        log_file.write_text("content")
        RotationManager(compress=True, compress_format="zip").rotate(log_file)

        with zipfile.ZipFile(tmp_path / "app.log.1.zip") as archive:
            assert archive.read("app.log") == b"content"

    def test_backup_path(self, tmp_path):
        rotation = RotationManager(compress=True)
        assert rotation.backup_path(tmp_path / "app.log", 3).name == "app.log.3.gz"


class TestFileWriter:
    """Test plain JSON-lines appends."""

    def test_appends_json_lines(self, tmp_path):
        writer = FileWriter(tmp_path / "app.log")
        writer.write(make_record("one"))
        writer.write(make_record("two"))

        lines = (tmp_path / "app.log").read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["one", "two"]

    def test_creates_parent_directories(self, tmp_path):
        writer = FileWriter(tmp_path / "a" / "b" / "app.log")
        writer.write(make_record("hello"))
        assert (tmp_path / "a" / "b" / "app.log").exists()

    @pytest.mark.skipif(os.name == "nt", reason="POSIX permissions")
    def test_permission_mode(self, tmp_path):
        writer = FileWriter(tmp_path / "app.log", permission_mode=0o600)
        writer.write(make_record("secret"))
        assert (tmp_path / "app.log").stat().st_mode & 0o777 == 0o600

    def test_recreates_removed_file(self, tmp_path):
        log_file = tmp_path / "app.log"
        writer = FileWriter(log_file)
        writer.write(make_record("one"))
        log_file.unlink()
        writer.write(make_record("two"))

        assert json.loads(log_file.read_text(encoding="utf-8"))["message"] == "two"

    def test_non_ascii(self, tmp_path):
        writer = FileWriter(tmp_path / "app.log")
        writer.write(make_record("héllo wörld"))
        assert "héllo wörld" in (tmp_path / "app.log").read_text(encoding="utf-8")


class TestRotatingFileWriter:
    """Test rotation driven by appends."""

    def test_overshoot_by_one_record(self, tmp_path):
        log_file = tmp_path / "app.log"
        writer = RotatingFileWriter(log_file, max_bytes=100, backup_count=3)
        record = make_record("big", padding=150)
        writer.write(record)

        # The size check runs before the append, so the first record lands whole
        assert log_file.stat().st_size > 100
        assert not (tmp_path / "app.log.1").exists()

        writer.write(record)
        assert (tmp_path / "app.log.1").exists()
        assert len(log_file.read_text(encoding="utf-8").splitlines()) == 1

    def test_backup_count_never_exceeded(self, tmp_path):
        log_file = tmp_path / "app.log"
        writer = RotatingFileWriter(log_file, max_bytes=100, backup_count=3)
        for i in range(10):
            writer.write(make_record(f"message {i}", padding=150))

        backups = sorted(p.name for p in tmp_path.iterdir() if p.name != "app.log")
        assert backups == ["app.log.1", "app.log.2", "app.log.3"]
        newest_backup = json.loads((tmp_path / "app.log.1").read_text(encoding="utf-8"))
        assert newest_backup["message"] == "message 8"
        assert json.loads(log_file.read_text(encoding="utf-8"))["message"] == "message 9"

    def test_write_batch_in_order(self, tmp_path):
        log_file = tmp_path / "app.log"
        writer = RotatingFileWriter(log_file, max_bytes=10 * 1024)
        writer.write_batch([make_record("a"), make_record("b"), make_record("c")])

        lines = log_file.read_text(encoding="utf-8").splitlines()
        assert [json.loads(line)["message"] for line in lines] == ["a", "b", "c"]
