#!/usr/bin/env python3
"""
Tests for file helpers and logging setup
"""

import logging

import pytest

from ribotyper.core.file_utils import atomic_write, check_file_exists, ensure_dir, safe_open
from ribotyper.core.logging_config import LoggingManager
from ribotyper.exceptions import FileOperationError


class TestFileHelpers:

    def test_check_file_exists(self, tmp_path):
        path = tmp_path / "hits.tblout"
        assert not check_file_exists(str(path))

        path.write_text("x")
        assert check_file_exists(str(path))
        assert not check_file_exists(str(path), min_size=10)
        assert not check_file_exists(str(tmp_path))

    def test_ensure_dir(self, tmp_path):
        target = tmp_path / "a" / "b"
        assert ensure_dir(str(target)) == str(target)
        assert target.is_dir()

    def test_safe_open_creates_parent(self, tmp_path):
        path = tmp_path / "out" / "run.short.out"
        with safe_open(str(path), 'w') as f:
            f.write("1 seq1\n")
        assert path.read_text() == "1 seq1\n"

    def test_safe_open_missing_file(self, tmp_path):
        with pytest.raises(FileOperationError) as exc_info:
            with safe_open(str(tmp_path / "missing.tblout")):
                pass
        assert exc_info.value.details['mode'] == 'r'

    def test_atomic_write_replaces_on_success(self, tmp_path):
        path = tmp_path / "run.long.out"
        path.write_text("old\n")
        with atomic_write(str(path)) as f:
            f.write("new\n")

        assert path.read_text() == "new\n"
        assert [p.name for p in tmp_path.iterdir()] == ["run.long.out"]

    def test_atomic_write_keeps_old_file_on_error(self, tmp_path):
        path = tmp_path / "run.long.out"
        path.write_text("old\n")
        with pytest.raises(RuntimeError):
            with atomic_write(str(path)) as f:
                f.write("partial")
                raise RuntimeError("stop")

        assert path.read_text() == "old\n"
        assert [p.name for p in tmp_path.iterdir()] == ["run.long.out"]

    def test_atomic_write_rejects_read_mode(self, tmp_path):
        with pytest.raises(ValueError):
            with atomic_write(str(tmp_path / "x"), mode='r'):
                pass


class TestLoggingManager:

    @pytest.fixture(autouse=True)
    def restore_root_logger(self):
        root = logging.getLogger()
        handlers, level = root.handlers[:], root.level
        yield
        for handler in root.handlers:
            if handler not in handlers:
                handler.close()
        root.handlers[:] = handlers
        root.setLevel(level)

    def test_level_from_config(self):
        LoggingManager.configure(config={'logging': {'level': 'warning'}})
        assert logging.getLogger().level == logging.WARNING

    def test_verbose_wins(self):
        LoggingManager.configure(verbose=True, config={'logging': {'level': 'ERROR'}})
        assert logging.getLogger().level == logging.DEBUG

    def test_log_dir_names_file(self, tmp_path):
        LoggingManager.configure(log_dir=str(tmp_path / "logs"), component="ribotyper")
        logging.getLogger("ribotyper.tests").info("hello")

        files = list((tmp_path / "logs").glob("ribotyper_*.log"))
        assert len(files) == 1
        for handler in logging.getLogger().handlers:
            handler.flush()
        assert "hello" in files[0].read_text()
