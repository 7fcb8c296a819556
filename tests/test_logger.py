"""
Tests for the package logger.
"""

import logging

from audioviewer.logger import LOGGER_NAME, configure_logging, get_default_logger, setup_logger


class TestLogger:

    def test_default_logger_is_package_logger(self):
        logger = get_default_logger()
        assert logger.name == LOGGER_NAME
        assert logger.propagate is False

    def test_configure_logging_sets_level_in_place(self):
        """Test that reconfiguring keeps the logger object modules already hold."""
        logger = get_default_logger()

        configure_logging("DEBUG")
        assert logger.level == logging.DEBUG
        assert get_default_logger() is logger

        configure_logging("INFO")
        assert logger.level == logging.INFO

    def test_single_handler_after_repeated_setup(self):
        setup_logger(LOGGER_NAME, "INFO")
        logger = setup_logger(LOGGER_NAME, "WARNING")

        assert len(logger.handlers) == 1
        assert logger.level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self):
        logger = setup_logger("audioviewer.test", "LOUD")
        assert logger.level == logging.INFO
