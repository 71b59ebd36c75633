"""Tests for building a security service from configuration."""

import os
import shutil
import tempfile
import unittest
from unittest.mock import patch

from catpoint_security.application import (
    build_security_service, create_repository, create_image_service
)
from catpoint_security.config_manager import ConfigManager
from catpoint_security.models.config import SystemConfig
from catpoint_security.models.security import Sensor, SensorType, AlarmStatus, ArmingStatus
from catpoint_security.services.error_handler import InvalidInputError
from catpoint_security.services.image_service import FakeImageService
from catpoint_security.services.repository import (
    InMemorySecurityRepository, SqliteSecurityRepository
)


class TestApplicationWiring(unittest.TestCase):
    """Test cases for application wiring."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.config_manager = ConfigManager(os.path.join(self.test_dir, "config.json"))

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_default_wiring(self):
        service = build_security_service(self.config_manager)

        self.assertIsInstance(service.security_repository, InMemorySecurityRepository)
        self.assertIsInstance(service.image_service, FakeImageService)
        self.assertEqual(service.confidence_threshold, 50.0)
        self.assertEqual(service.get_alarm_status(), AlarmStatus.NO_ALARM)
        self.assertEqual(service.get_arming_status(), ArmingStatus.DISARMED)

    def test_sqlite_wiring_persists_between_builds(self):
        db_path = os.path.join(self.test_dir, "data", "security.db")
        self.config_manager.update_config(repository_backend="sqlite", database_path=db_path)

        service = build_security_service(self.config_manager)
        self.assertIsInstance(service.security_repository, SqliteSecurityRepository)
        sensor = Sensor("Back Door", SensorType.DOOR)
        service.add_sensor(sensor)
        service.set_arming_status(ArmingStatus.ARMED_AWAY)
        service.change_sensor_activation_status(sensor, True)

        reopened = build_security_service(self.config_manager)
        self.assertEqual(reopened.get_alarm_status(), AlarmStatus.ALARM)
        self.assertEqual(reopened.get_arming_status(), ArmingStatus.ARMED_AWAY)
        self.assertEqual([s.active for s in reopened.get_sensors()], [True])

    def test_threshold_follows_config_updates(self):
        service = build_security_service(self.config_manager)

        self.config_manager.update_config(confidence_threshold=72.5)

        self.assertEqual(service.confidence_threshold, 72.5)

    def test_invalid_config_rejected(self):
        self.config_manager.update_config(confidence_threshold=250.0)

        with self.assertRaises(InvalidInputError):
            build_security_service(self.config_manager)

    @patch("catpoint_security.application.setup_logging")
    def test_configure_logging_uses_config(self, mock_setup_logging):
        log_dir = os.path.join(self.test_dir, "logs")
        self.config_manager.update_config(log_level="DEBUG", log_dir=log_dir)

        build_security_service(self.config_manager, configure_logging=True)

        mock_setup_logging.assert_called_once_with("DEBUG", log_dir)

    @patch("catpoint_security.application.setup_logging")
    def test_logging_left_alone_by_default(self, mock_setup_logging):
        build_security_service(self.config_manager)
        mock_setup_logging.assert_not_called()

    def test_factories_reject_unknown_names(self):
        with self.assertRaises(InvalidInputError):
            create_repository(SystemConfig(repository_backend="redis"))
        with self.assertRaises(InvalidInputError):
            create_image_service(SystemConfig(image_service="rekognition"))

    def test_seeded_fake_service(self):
        first = create_image_service(SystemConfig(fake_image_seed=3))
        second = create_image_service(SystemConfig(fake_image_seed=3))

        self.assertEqual(
            [first.image_contains_cat(object(), 50.0) for _ in range(10)],
            [second.image_contains_cat(object(), 50.0) for _ in range(10)]
        )


if __name__ == '__main__':
    unittest.main()
