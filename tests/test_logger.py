"""
Tests for logging setup.
"""

import logging

import pytest

from gazedwell.utils.logger import get_logger, setup_logger


@pytest.fixture
def logger_name(request):
    name = f"gazedwell_test_{request.node.name}"
    yield name
    logger = logging.getLogger(name)
    for handler in logger.handlers:
        handler.close()
    logger.handlers.clear()


class TestSetupLogger:
    """Tests for setup_logger."""

    def test_console_only_by_default(self, logger_name, tmp_path):
        logger = setup_logger(logger_name, "INFO", tmp_path / "app.log")

        assert logger.level == logging.INFO
        assert len(logger.handlers) == 1
        assert not logger.propagate
        assert not (tmp_path / "app.log").exists()

    def test_file_logging(self, logger_name, tmp_path):
        log_file = tmp_path / "logs" / "app.log"

        logger = setup_logger(logger_name, "DEBUG", log_file, enable_file_logging=True)
        logger.debug("tick")
        for handler in logger.handlers:
            handler.flush()

        assert "tick" in log_file.read_text(encoding="utf-8")

    def test_repeat_setup_updates_level(self, logger_name):
        setup_logger(logger_name, "WARNING")
        logger = setup_logger(logger_name, "DEBUG")

        assert len(logger.handlers) == 1
        assert logger.handlers[0].level == logging.DEBUG

    def test_unknown_level_falls_back(self, logger_name):
        assert setup_logger(logger_name, "LOUD").level == logging.WARNING

    def test_child_logger(self, logger_name):
        parent = setup_logger(logger_name, "INFO")

        assert get_logger(f"{logger_name}.vision").parent is parent
