"""Tests for logging setup."""

import logging
from logging.handlers import RotatingFileHandler

import pytest

from depth_tongue_tracker.config import LOG_DIR_ENV
from depth_tongue_tracker.logger import LOGGER_NAME, get_log_directory, get_logger, log_throttled, setup_logging


@pytest.fixture(autouse=True)
def reset_logging():
    yield
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def test_file_logging(tmp_path):
    logger = setup_logging(debug=True, log_dir=tmp_path, log_filename="test.log")
    get_logger("Scanner").debug("hello from scanner")

    for handler in logger.handlers:
        handler.flush()

    assert logger.level == logging.DEBUG
    assert any(isinstance(h, RotatingFileHandler) for h in logger.handlers)
    assert "hello from scanner" in (tmp_path / "test.log").read_text(encoding="utf-8")


def test_setup_does_not_stack_handlers():
    setup_logging(log_to_file=False)
    logger = setup_logging(log_to_file=False)
    assert len(logger.handlers) == 1
    assert logger.level == logging.INFO


def test_child_logger_name():
    assert get_logger("Pipeline").name == f"{LOGGER_NAME}.Pipeline"
    assert get_logger().name == LOGGER_NAME


def test_log_directory_from_appdata(tmp_path, monkeypatch):
    monkeypatch.delenv(LOG_DIR_ENV, raising=False)
    monkeypatch.setenv("APPDATA", str(tmp_path))
    assert get_log_directory() == tmp_path / "DepthTongueTracker" / "logs"
    assert (tmp_path / "DepthTongueTracker" / "logs").is_dir()


def test_log_directory_override(tmp_path, monkeypatch):
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path / "custom"))
    monkeypatch.setenv("APPDATA", str(tmp_path / "appdata"))
    assert get_log_directory() == tmp_path / "custom"


class TestLogThrottled:

    def test_first_and_every_interval(self, caplog):
        logger = get_logger("Throttle")
        with caplog.at_level(logging.WARNING, logger=LOGGER_NAME):
            written = [log_throttled(logger, logging.WARNING, n, "frame skipped", interval=3) for n in range(1, 8)]

        assert written == [True, False, True, False, False, True, False]
        assert [r.getMessage() for r in caplog.records] == [
            "frame skipped (1 so far)",
            "frame skipped (3 so far)",
            "frame skipped (6 so far)",
        ]

    def test_zero_interval_logs_only_first(self):
        logger = get_logger("Throttle")
        assert log_throttled(logger, logging.DEBUG, 1, "x", interval=0)
        assert not log_throttled(logger, logging.DEBUG, 2, "x", interval=0)
