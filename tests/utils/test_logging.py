"""Unit tests for the logging module."""

import logging
import os
import unittest
from unittest.mock import MagicMock, patch

from efecos.utils.logging import (
    Colors,
    EfecosLogger,
    LogLevel,
    ProgressTracker,
    SimpleFormatter,
    Symbols,
    log_debug,
    log_detail,
    log_error,
    log_info,
    log_progress,
    log_success,
    log_warning,
    setup_logging,
    suppress_third_party_logs,
)


def _record(level, msg, args=()):
    return logging.LogRecord(
        name="efecos.test",
        level=level,
        pathname="",
        lineno=0,
        msg=msg,
        args=args,
        exc_info=None,
    )


class TestFormatter(unittest.TestCase):
    def test_level_colours(self):
        formatter = SimpleFormatter()
        info = formatter.format(_record(logging.INFO, "Loaded %d logs", (4,)))
        self.assertTrue(info.startswith(Colors.CYAN))
        self.assertIn("Loaded 4 logs", info)
        self.assertTrue(info.endswith(Colors.RESET))

        error = formatter.format(_record(logging.ERROR, "boom"))
        self.assertTrue(error.startswith(Colors.RED))

    def test_level_values(self):
        self.assertEqual(
            [level.value for level in LogLevel], [0, 1, 2, 3]
        )


class TestEfecosLogger(unittest.TestCase):
    def setUp(self):
        os.environ.pop("EFECOS_EFFECTIVE_LOG_LEVEL", None)
        EfecosLogger.set_level(LogLevel.NORMAL)

    def tearDown(self):
        os.environ.pop("EFECOS_EFFECTIVE_LOG_LEVEL", None)
        EfecosLogger.set_level(LogLevel.NORMAL)

    def test_get_logger_is_cached(self):
        logger = EfecosLogger.get_logger("efecos.test.cached")
        self.assertIs(logger, EfecosLogger.get_logger("efecos.test.cached"))

    def test_levels_follow_verbosity(self):
        logger = EfecosLogger.get_logger("efecos.test.levels")
        EfecosLogger.set_level(LogLevel.QUIET)
        self.assertEqual(logger.level, logging.ERROR)
        EfecosLogger.set_level(LogLevel.DEBUG)
        self.assertEqual(logger.level, logging.DEBUG)
        self.assertEqual(EfecosLogger.get_level(), LogLevel.DEBUG)

    def test_effective_level_env_wins(self):
        os.environ["EFECOS_EFFECTIVE_LOG_LEVEL"] = "debug"
        logger = EfecosLogger.get_logger("efecos.test.env")
        self.assertEqual(logger.level, logging.DEBUG)

    def test_invalid_effective_level_ignored(self):
        os.environ["EFECOS_EFFECTIVE_LOG_LEVEL"] = "chatty"
        logger = EfecosLogger.get_logger("efecos.test.invalid")
        self.assertEqual(logger.level, logging.INFO)

    @patch("logging.Logger.info")
    def test_detail_requires_verbose(self, mock_info):
        EfecosLogger.detail("hidden")
        mock_info.assert_not_called()

        EfecosLogger.set_level(LogLevel.VERBOSE)
        EfecosLogger.detail("shown")
        mock_info.assert_called_once_with("   shown")

    @patch("logging.Logger.debug")
    def test_debug_requires_debug(self, mock_debug):
        EfecosLogger.set_level(LogLevel.VERBOSE)
        EfecosLogger.debug("hidden")
        mock_debug.assert_not_called()

        EfecosLogger.set_level(LogLevel.DEBUG)
        EfecosLogger.debug("shown")
        mock_debug.assert_called_once_with("shown")

    @patch("logging.Logger.info")
    def test_quiet_silences_progress(self, mock_info):
        EfecosLogger.set_level(LogLevel.QUIET)
        EfecosLogger.progress("working")
        EfecosLogger.success("done")
        EfecosLogger.info("fyi")
        mock_info.assert_not_called()

    @patch("logging.Logger.error")
    def test_errors_always_logged(self, mock_error):
        EfecosLogger.set_level(LogLevel.QUIET)
        EfecosLogger.error("Fleet data not found")
        message = mock_error.call_args[0][0]
        self.assertIn(Symbols.CROSS, message)
        self.assertIn(Colors.RED, message)


class TestSetup(unittest.TestCase):
    def tearDown(self):
        os.environ.pop("EFECOS_EFFECTIVE_LOG_LEVEL", None)
        EfecosLogger.set_level(LogLevel.NORMAL)

    @patch.dict(os.environ, {}, clear=True)
    def test_defaults_to_normal(self):
        setup_logging()
        self.assertEqual(EfecosLogger.get_level(), LogLevel.NORMAL)
        self.assertEqual(os.environ["EFECOS_EFFECTIVE_LOG_LEVEL"], "NORMAL")

    @patch.dict(os.environ, {"EFECOS_LOG_LEVEL": "verbose"}, clear=True)
    def test_reads_env(self):
        setup_logging()
        self.assertEqual(EfecosLogger.get_level(), LogLevel.VERBOSE)

    @patch.dict(os.environ, {"EFECOS_LOG_LEVEL": "loud"}, clear=True)
    def test_unknown_env_value_falls_back(self):
        setup_logging()
        self.assertEqual(EfecosLogger.get_level(), LogLevel.NORMAL)

    def test_quiet_root_level(self):
        setup_logging(LogLevel.QUIET)
        self.assertEqual(logging.getLogger().level, logging.ERROR)

    def test_single_console_handler(self):
        setup_logging(LogLevel.NORMAL)
        setup_logging(LogLevel.DEBUG)
        formatters = [
            h.formatter
            for h in logging.getLogger().handlers
            if isinstance(h.formatter, SimpleFormatter)
        ]
        self.assertEqual(len(formatters), 1)

    def test_third_party_loggers_quietened(self):
        suppress_third_party_logs()
        self.assertEqual(logging.getLogger("openpyxl").level, logging.WARNING)


class TestProgressTracker(unittest.TestCase):
    def tearDown(self):
        EfecosLogger.set_level(LogLevel.NORMAL)

    @patch("efecos.utils.logging.tqdm")
    def test_advance_and_close(self, mock_tqdm):
        pbar = MagicMock()
        mock_tqdm.return_value = pbar

        tracker = ProgressTracker(["Load Data", "Compute Analytics"])
        self.assertEqual(mock_tqdm.call_args.kwargs["total"], 2)

        tracker.advance("Loaded 3 fuel logs")
        tracker.advance("Skipped export", status="warning")
        self.assertEqual(tracker.current, 2)
        self.assertEqual(pbar.update.call_count, 2)
        self.assertIn(Symbols.WARNING, pbar.write.call_args[0][0])

        tracker.close()
        pbar.close.assert_called_once()

    @patch("efecos.utils.logging.tqdm")
    def test_quiet_has_no_bar(self, mock_tqdm):
        EfecosLogger.set_level(LogLevel.QUIET)
        tracker = ProgressTracker(["only"])
        tracker.advance("ignored")
        tracker.close()
        mock_tqdm.assert_not_called()
        self.assertIsNone(tracker.pbar)
        self.assertEqual(tracker.current, 1)


class TestHelpers(unittest.TestCase):
    def test_helpers_delegate(self):
        cases = [
            (log_progress, "progress", ("msg", Symbols.GEAR)),
            (log_success, "success", ("msg", Symbols.CHECK)),
            (log_info, "info", ("msg", Symbols.INFO)),
            (log_detail, "detail", ("msg", "  ")),
            (log_debug, "debug", ("msg", "efecos.debug")),
            (log_warning, "warning", ("msg", Symbols.WARNING)),
            (log_error, "error", ("msg", Symbols.CROSS)),
        ]
        for helper, method, expected in cases:
            with self.subTest(method=method):
                with patch.object(EfecosLogger, method) as mocked:
                    helper("msg")
                    mocked.assert_called_once_with(*expected)


if __name__ == "__main__":
    unittest.main()
