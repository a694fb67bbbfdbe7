# tests/test_logging.py
"""Tests for session-based logging setup."""

from __future__ import annotations

import logging

import pytest


@pytest.fixture
def restore_package_logger():
    package_logger = logging.getLogger("apidescriber")
    yield package_logger
    for handler in package_logger.handlers[:]:
        package_logger.removeHandler(handler)
        handler.close()
    for f in package_logger.filters[:]:
        package_logger.removeFilter(f)
    package_logger.setLevel(logging.NOTSET)
    package_logger.propagate = True


class TestSetupLogging:
    """setup_logging() creates a session file and tags records."""

    def test_creates_session_file(self, tmp_path, restore_package_logger):
        from apidescriber.utils.logging import get_current_log_file, get_session_id, setup_logging

        log_file = setup_logging(level="DEBUG", log_dir=tmp_path)
        assert log_file.parent == tmp_path
        assert log_file.exists()
        assert get_current_log_file() == log_file
        assert get_session_id() in log_file.name

    def test_records_carry_session_id(self, tmp_path, restore_package_logger):
        from apidescriber.utils.logging import get_session_id, setup_logging

        log_file = setup_logging(level="DEBUG", log_dir=tmp_path)
        logging.getLogger("apidescriber.model.registry").debug("registered something")
        for handler in restore_package_logger.handlers:
            handler.flush()
        text = log_file.read_text(encoding="utf-8")
        assert "registered something" in text
        assert get_session_id() in text

    def test_level_from_config(self, tmp_path, monkeypatch, restore_package_logger):
        from apidescriber.utils.logging import setup_logging

        monkeypatch.setenv("APIDESCRIBER_LOG_LEVEL", "warning")
        setup_logging(log_dir=tmp_path)
        assert restore_package_logger.level == logging.WARNING

    def test_repeated_setup_replaces_handlers(self, tmp_path, restore_package_logger):
        from apidescriber.utils.logging import setup_logging

        setup_logging(log_dir=tmp_path, console_output=True)
        setup_logging(log_dir=tmp_path, console_output=True)
        assert len(restore_package_logger.handlers) == 2
        assert len(restore_package_logger.filters) == 1

    def test_quiet_suppresses_console(self, tmp_path, restore_package_logger):
        from apidescriber.utils.logging import setup_logging

        setup_logging(log_dir=tmp_path, console_output=True, quiet=True)
        assert len(restore_package_logger.handlers) == 1
        assert isinstance(restore_package_logger.handlers[0], logging.FileHandler)
