"""Tests for logger module."""

import logging
from logging.handlers import RotatingFileHandler
from unittest.mock import patch

from stickerguard.util import logger as logger_module
from stickerguard.util.logger import (
    DATE_FORMAT,
    LOG_FORMAT,
    ColorFormatter,
    PromptToolkitHandler,
    get_logger,
    handle_exception,
    setup_logger,
    should_use_color,
)


def _record(level, msg="message"):
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

    @patch("sys.stderr.isatty")
    def test_should_use_color_tty(self, mock_isatty):
        mock_isatty.return_value = True
        assert should_use_color() is True

    @patch("sys.stderr.isatty")
    def test_should_use_color_no_tty(self, mock_isatty):
        mock_isatty.return_value = False
        assert should_use_color() is False

    @patch("sys.stderr.isatty")
    def test_should_use_color_exception(self, mock_isatty):
        """Test color returns False on exception."""
        mock_isatty.side_effect = Exception("Error")
        assert should_use_color() is False


class TestColorFormatter:
    """Tests for ColorFormatter class."""

    def test_error_is_wrapped_in_red(self):
        formatted = ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT).format(_record(logging.ERROR, "Error message"))

        assert formatted.startswith("\033[31m")
        assert formatted.endswith("\033[0m")
        assert "Error message" in formatted

    def test_unmapped_level_is_left_plain(self):
        formatted = ColorFormatter(LOG_FORMAT, datefmt=DATE_FORMAT).format(_record(5, "Trace message"))

        assert "\033[" not in formatted
        assert "Trace message" in formatted


class TestPromptToolkitHandler:
    def test_emit_prints_through_prompt_toolkit(self):
        handler = PromptToolkitHandler(formatter=logging.Formatter("%(message)s"))
        with patch.object(logger_module, "print_formatted_text") as mock_print:
            handler.emit(_record(logging.INFO, "hello"))

        mock_print.assert_called_once()

    def test_emit_errors_are_handled(self):
        handler = PromptToolkitHandler(formatter=logging.Formatter("%(message)s"))
        with patch.object(logger_module, "print_formatted_text", side_effect=OSError("closed")), \
                patch.object(handler, "handleError") as mock_handle_error:
            handler.emit(_record(logging.INFO, "hello"))

        mock_handle_error.assert_called_once()


class TestSetupLogger:
    """Tests for setup_logger function."""

    def test_logger_has_console_and_rotating_file_handlers(self):
        logger = setup_logger("test_stickerguard_handlers")

        assert logger.level == logging.DEBUG
        assert logger.propagate is False
        assert any(isinstance(h, PromptToolkitHandler) for h in logger.handlers)
        file_handlers = [h for h in logger.handlers if isinstance(h, RotatingFileHandler)]
        assert len(file_handlers) == 1
        assert file_handlers[0].maxBytes == logger_module.LOG_MAX_BYTES

    def test_setup_is_idempotent(self):
        first = setup_logger("test_stickerguard_idempotent")
        handler_count = len(first.handlers)

        second = get_logger("test_stickerguard_idempotent")

        assert second is first
        assert len(second.handlers) == handler_count

    def test_all_loggers_share_one_file(self):
        assert logger_module.get_log_filepath() == logger_module.get_log_filepath()
        assert logger_module.get_log_filepath().parent == logger_module.LOGS_DIR


class TestHandleException:
    def test_keyboard_interrupt_goes_to_default_hook(self):
        with patch("sys.__excepthook__") as default_hook:
            handle_exception(KeyboardInterrupt, KeyboardInterrupt(), None)

        default_hook.assert_called_once()

    def test_other_exceptions_are_logged_critical(self):
        with patch.object(logger_module, "get_logger") as mock_get_logger:
            exc = ValueError("bad")
            handle_exception(ValueError, exc, None)

        mock_get_logger.assert_called_once_with("uncaught")
        mock_get_logger.return_value.critical.assert_called_once()


def test_noisy_libraries_are_silenced():
    for name in ("discord", "discord.gateway", "aiohttp"):
        assert logging.getLogger(name).level == logging.ERROR
