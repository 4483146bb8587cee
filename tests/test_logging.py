# tests/test_logging.py
"""Tests for recordschema session logging."""

import logging

from recordschema.utils.logging import (
    ROOT_LOGGER_NAME,
    get_current_log_file,
    get_logger,
    get_session_id,
    setup_logging,
)


class TestGetLogger:
    """Logger naming under the package namespace."""

    def test_prefixes_foreign_names(self):
        """Foreign names are nested under recordschema."""
        assert get_logger("plugins.money").name == "recordschema.plugins.money"

    def test_keeps_package_names(self):
        """Package names are used as is."""
        assert get_logger("recordschema.walker").name == "recordschema.walker"
        assert get_logger(ROOT_LOGGER_NAME).name == ROOT_LOGGER_NAME

    def test_library_is_silent_by_default(self):
        """The package logger carries a NullHandler."""
        root = logging.getLogger(ROOT_LOGGER_NAME)
        assert any(isinstance(h, logging.NullHandler) for h in root.handlers)


class TestSetupLogging:
    """Session log files."""

    def test_writes_session_file(self, tmp_path):
        """Records land in the session file with the session id."""
        log_file = setup_logging(level="DEBUG", log_dir=tmp_path)
        get_logger("recordschema.walker").debug("hello from the walker")
        assert log_file.parent == tmp_path
        assert log_file == get_current_log_file()
        assert get_session_id() in log_file.name
        text = log_file.read_text(encoding="utf-8")
        assert "hello from the walker" in text
        assert get_session_id() in text

    def test_default_directory_follows_home_dir(self, tmp_path, monkeypatch):
        """Logs go under home_dir/logs by default."""
        monkeypatch.delenv("RECORDSCHEMA_LOG_DIR", raising=False)
        log_file = setup_logging()
        assert log_file.parent == tmp_path / "home" / "logs"

    def test_log_dir_env_var(self, tmp_path, monkeypatch):
        """RECORDSCHEMA_LOG_DIR overrides the directory."""
        monkeypatch.setenv("RECORDSCHEMA_LOG_DIR", str(tmp_path / "custom"))
        assert setup_logging().parent == tmp_path / "custom"

    def test_level_from_config(self, tmp_path, monkeypatch):
        """The level defaults to the configured log_level."""
        monkeypatch.setenv("RECORDSCHEMA_LOG_LEVEL", "ERROR")
        setup_logging(log_dir=tmp_path)
        assert logging.getLogger(ROOT_LOGGER_NAME).level == logging.ERROR

    def test_latest_symlink(self, tmp_path):
        """recordschema.log points at the latest session."""
        log_file = setup_logging(log_dir=tmp_path)
        link = tmp_path / "recordschema.log"
        if link.is_symlink():
            assert link.resolve() == log_file.resolve()

    def test_repeated_setup_replaces_handlers(self, tmp_path):
        """A second setup replaces the previous handlers."""
        setup_logging(log_dir=tmp_path)
        setup_logging(log_dir=tmp_path, console_output=True)
        handlers = logging.getLogger(ROOT_LOGGER_NAME).handlers
        assert len(handlers) == 2
