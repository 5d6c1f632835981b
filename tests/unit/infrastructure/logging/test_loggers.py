"""Unit tests for logger implementations."""

# pyright: reportPrivateUsage=false

from io import StringIO
import unittest

from rich.console import Console

from survey_mapper.application.ports.services import LoggerPort
from survey_mapper.infrastructure.logging import (
    ConsoleLogger,
    LogContext,
    LogLevel,
    NullLogger,
)


class TestLoggerPort(unittest.TestCase):
    """Logger implementations comply with LoggerPort."""

    def test_console_logger_implements_loggerport(self):
        self.assertIsInstance(ConsoleLogger(), LoggerPort)

    def test_null_logger_implements_loggerport(self):
        self.assertIsInstance(NullLogger(), LoggerPort)

    def test_loggerport_has_required_methods(self):
        required_methods = {
            "info",
            "success",
            "warning",
            "error",
            "debug",
            "log_run_start",
            "log_stale_response",
        }
        protocol_methods = {
            name for name in dir(LoggerPort) if not name.startswith("_")
        }
        self.assertTrue(required_methods.issubset(protocol_methods))


class TestConsoleLogger(unittest.TestCase):
    def setUp(self):
        self.buffer = StringIO()
        self.console = Console(file=self.buffer, width=100)
        self.logger = ConsoleLogger(console=self.console, verbosity=LogLevel.DEBUG)

    def test_initialization(self):
        logger = ConsoleLogger()
        self.assertEqual(logger.verbosity, 0)
        self.assertIsNone(logger._context)
        self.assertEqual(logger.get_stats()["runs_started"], 0)

    def test_info_logging(self):
        self.logger.info("Test message")
        self.assertIn("Test message", self.buffer.getvalue())

    def test_success_logging(self):
        self.logger.success("Saved")
        output = self.buffer.getvalue()
        self.assertIn("Saved", output)
        self.assertIn("✓", output)

    def test_warning_and_error_are_counted(self):
        self.logger.warning("Careful")
        self.logger.error("Broken")
        stats = self.logger.get_stats()
        self.assertEqual(stats["warnings"], 1)
        self.assertEqual(stats["errors"], 1)
        self.assertIn("Careful", self.buffer.getvalue())
        self.assertIn("Broken", self.buffer.getvalue())

    def test_verbose_hidden_at_normal_level(self):
        logger = ConsoleLogger(console=self.console, verbosity=LogLevel.NORMAL)
        logger.verbose("Hidden detail")
        logger.debug("Hidden debug")
        self.assertEqual(self.buffer.getvalue(), "")

    def test_run_lifecycle(self):
        self.logger.log_run_start(3, 1200, 40, 0.8)
        self.assertEqual(self.logger._context.request_id, 3)
        self.logger.log_run_complete(3, 5, 2)

        output = self.buffer.getvalue()
        self.assertIn("1,200 terms", output)
        self.assertIn("80.0%", output)
        self.assertIn("5 suggestions", output)
        self.assertIn("2 terms left unmapped", output)
        self.assertIsNone(self.logger._context)
        stats = self.logger.get_stats()
        self.assertEqual(stats["runs_completed"], 1)
        self.assertEqual(stats["suggestions"], 5)

    def test_stale_response(self):
        self.logger.log_stale_response(1, 2)
        self.assertIn("Discarding response for request 1", self.buffer.getvalue())
        self.assertEqual(self.logger.get_stats()["stale_responses"], 1)

    def test_mapping_change(self):
        self.logger.log_mapping_change("created", ("a", "b"))
        output = self.buffer.getvalue()
        self.assertIn("Mappings created: 2 mappings", output)
        self.assertEqual(self.logger.get_stats()["mapping_changes"], 1)

    def test_context_prefix(self):
        self.logger.set_context(request_id=4, term_kind="specialty")
        self.logger.info("Scoring")
        self.assertIn("[#4:specialty]", self.buffer.getvalue())

    def test_set_context_ignores_unknown_fields(self):
        self.logger.set_context(unknown="value", source_id="mgma")
        self.assertEqual(self.logger._context.source_id, "mgma")
        self.assertFalse(hasattr(self.logger._context, "unknown"))

    def test_final_stats(self):
        self.logger.log_run_complete(1, 3, 0)
        self.logger.log_stale_response(0, 1)
        self.logger.log_final_stats()
        output = self.buffer.getvalue()
        self.assertIn("Mapping Statistics", output)
        self.assertIn("Stale responses discarded: 1", output)

    def test_reset_stats(self):
        self.logger.error("x")
        self.logger.reset_stats()
        self.assertEqual(self.logger.get_stats()["errors"], 0)


class TestLogContext(unittest.TestCase):
    def test_elapsed_ms_is_non_negative(self):
        context = LogContext(request_id=1)
        self.assertGreaterEqual(context.elapsed_ms(), 0)


class TestNullLogger(unittest.TestCase):
    def test_all_methods_are_silent(self):
        logger = NullLogger()
        logger.info("x")
        logger.success("x")
        logger.warning("x")
        logger.error("x")
        logger.debug("x")
        logger.verbose("x")
        logger.log_run_start(1, 2, 3, 0.5)
        logger.log_run_complete(1, 0, 0)
        logger.log_stale_response(1, 2)
        self.assertIsNone(logger.log_mapping_change("created", ()))


if __name__ == "__main__":
    unittest.main()
