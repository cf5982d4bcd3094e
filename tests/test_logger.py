"""Tests for logger module."""

import logging
from unittest.mock import patch

from bloz.util import logger as logger_module
from bloz.util.logger import (
    DATE_FORMAT,
    LOG_FORMAT,
    ColorFormatter,
    get_log_filepath,
    get_logger,
    handle_exception,
    setup_logger,
    should_use_color,
)


def make_record(level, msg):
    return logging.LogRecord(
        name="test",
        level=level,
        pathname="test.py",
        lineno=10,
        msg=msg,
        args=(),
        exc_info=None,
        func="test_func",
    )


class TestShouldUseColor:
    """Tests for should_use_color function."""

    @patch('sys.stderr.isatty')
    def test_should_use_color_tty(self, mock_isatty):
        mock_isatty.return_value = True
        assert should_use_color() is True

    @patch('sys.stderr.isatty')
    def test_should_use_color_no_tty(self, mock_isatty):
        mock_isatty.return_value = False
        assert should_use_color() is False

    @patch('sys.stderr.isatty')
    def test_should_use_color_exception(self, mock_isatty):
        """Errors while probing the terminal disable colors."""
        mock_isatty.side_effect = Exception("Error")
        assert should_use_color() is False


class TestColorFormatter:
    def test_levels_are_wrapped_in_their_color(self):
        formatter = ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT)

        debug = formatter.format(make_record(logging.DEBUG, "Debug message"))
        error = formatter.format(make_record(logging.ERROR, "Error message"))

        assert debug.startswith("\033[36m") and debug.endswith("\033[0m")
        assert error.startswith("\033[31m")
        assert "Error message" in error

    def test_unknown_level_is_left_plain(self):
        formatter = ColorFormatter("%(message)s")
        record = make_record(logging.INFO, "custom")
        record.levelname = "NOTICE"

        assert formatter.format(record) == "custom"


class TestSetupLogger:
    def test_setup_logger_configures_handlers_once(self):
        first = setup_logger("bloz_test_logger_1")
        handler_count = len(first.handlers)
        second = setup_logger("bloz_test_logger_1")

        assert first is second
        assert handler_count == 2
        assert len(second.handlers) == handler_count
        assert first.level == logging.DEBUG
        assert first.propagate is False

    def test_get_logger_returns_configured_logger(self):
        logger = get_logger("bloz_test_logger_2")

        assert isinstance(logger, logging.Logger)
        assert len(logger.handlers) > 0

    def test_log_file_is_shared_by_all_loggers(self):
        path = get_log_filepath()

        assert path == get_log_filepath()
        assert path.parent == logger_module.LOGS_DIR
        assert path.suffix == ".log"


class TestHandleException:
    def test_keyboard_interrupt_goes_to_default_hook(self):
        with patch("sys.__excepthook__") as default_hook:
            handle_exception(KeyboardInterrupt, KeyboardInterrupt(), None)

        default_hook.assert_called_once()

    def test_other_exceptions_are_logged(self):
        error = ValueError("boom")
        with patch.object(logging.Logger, "error") as log_error:
            handle_exception(ValueError, error, None)

        log_error.assert_called_once()
        assert log_error.call_args.kwargs["exc_info"] == (ValueError, error, None)


def test_noisy_library_loggers_are_silenced():
    for name in logger_module.NOISY_LOGGERS:
        assert logging.getLogger(name).level == logging.ERROR
