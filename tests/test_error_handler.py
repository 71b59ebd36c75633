"""Tests for error taxonomy and error tracking."""

import unittest
from datetime import datetime, timedelta

from catpoint_security.services.error_handler import (
    ErrorHandler, ErrorSeverity, ErrorRecord, with_error_handling,
    SecurityServiceError, InvalidInputError, SensorNotFoundError,
    ClassifierError, RepositoryError
)
from catpoint_security.models.security import Sensor, SensorType


class TestErrorTaxonomy(unittest.TestCase):
    """Test the exception hierarchy."""

    def test_hierarchy(self):
        self.assertTrue(issubclass(InvalidInputError, SecurityServiceError))
        self.assertTrue(issubclass(InvalidInputError, ValueError))
        self.assertTrue(issubclass(SensorNotFoundError, InvalidInputError))
        self.assertTrue(issubclass(ClassifierError, SecurityServiceError))
        self.assertTrue(issubclass(RepositoryError, SecurityServiceError))

    def test_sensor_not_found_message(self):
        sensor = Sensor("Garage", SensorType.DOOR)
        error = SensorNotFoundError(sensor)

        self.assertIs(error.sensor, sensor)
        self.assertIn("sensor not found", str(error))
        self.assertIn("Garage", str(error))


class TestErrorHandler(unittest.TestCase):
    """Test error handler functionality."""

    def setUp(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler(max_error_history=5)

    def test_register_component(self):
        self.error_handler.register_component("repository")
        self.assertEqual(self.error_handler.get_error_stats()["component_error_counts"],
                         {"repository": 0})

    def test_handle_error_records_and_counts(self):
        record = self.error_handler.handle_error("repository", RuntimeError("boom"), ErrorSeverity.HIGH)

        self.assertIsInstance(record, ErrorRecord)
        self.assertEqual(record.error_type, "RuntimeError")
        self.assertEqual(record.severity, ErrorSeverity.HIGH)
        stats = self.error_handler.get_error_stats()
        self.assertEqual(stats["total_errors"], 1)
        self.assertEqual(stats["component_error_counts"]["repository"], 1)

    def test_history_is_bounded(self):
        for i in range(8):
            self.error_handler.handle_error("c", RuntimeError(str(i)))

        self.assertEqual(len(self.error_handler.error_records), 5)
        self.assertEqual(str(self.error_handler.error_records[-1].error), "7")
        self.assertEqual(self.error_handler.component_error_counts["c"], 8)

    def test_reset_error_counts(self):
        self.error_handler.handle_error("a", RuntimeError())
        self.error_handler.handle_error("b", RuntimeError())

        self.error_handler.reset_error_counts("a")
        self.assertEqual(self.error_handler.component_error_counts, {"a": 0, "b": 1})

        self.error_handler.reset_error_counts()
        self.assertEqual(self.error_handler.component_error_counts, {"a": 0, "b": 0})

    def test_error_summary_window(self):
        self.error_handler.handle_error("a", RuntimeError(), ErrorSeverity.LOW)
        old = self.error_handler.handle_error("b", RuntimeError(), ErrorSeverity.CRITICAL)
        old.timestamp = datetime.now() - timedelta(hours=48)

        summary = self.error_handler.get_error_summary(hours=24)

        self.assertEqual(summary["total_errors"], 1)
        self.assertEqual(summary["component_counts"], {"a": 1})
        self.assertEqual(summary["severity_counts"]["low"], 1)
        self.assertEqual(summary["severity_counts"]["critical"], 0)


class TestWithErrorHandling(unittest.TestCase):
    """Test the recording decorator."""

    def setUp(self):
        """Set up test fixtures."""
        self.error_handler = ErrorHandler()

    def test_records_and_reraises(self):
        @with_error_handling("camera", ErrorSeverity.HIGH, error_handler=self.error_handler)
        def failing():
            raise ClassifierError("no cascade")

        with self.assertRaises(ClassifierError):
            failing()

        record = self.error_handler.error_records[0]
        self.assertEqual(record.component_name, "camera")
        self.assertEqual(record.severity, ErrorSeverity.HIGH)

    def test_invalid_input_not_recorded(self):
        @with_error_handling("engine", error_handler=self.error_handler)
        def bad_call():
            raise InvalidInputError("sensor must not be None")

        with self.assertRaises(InvalidInputError):
            bad_call()

        self.assertEqual(self.error_handler.error_records, [])

    def test_return_value_passes_through(self):
        @with_error_handling("engine", error_handler=self.error_handler)
        def ok(value):
            return value * 2

        self.assertEqual(ok(21), 42)
        self.assertEqual(ok.__name__, "ok")


if __name__ == '__main__':
    unittest.main()
