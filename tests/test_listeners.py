"""Tests for the status listener registry."""

import unittest
from unittest.mock import Mock

from catpoint_security.models.security import AlarmStatus
from catpoint_security.services.interfaces import StatusListener
from catpoint_security.services.listeners import StatusListenerRegistry


class RecordingListener(StatusListener):
    """Listener that remembers every event it receives."""

    def __init__(self):
        self.events = []

    def on_status_changed(self, alarm_status):
        self.events.append(("status", alarm_status))

    def on_cat_detected(self, cat_present):
        self.events.append(("cat", cat_present))

    def on_sensor_status_changed(self):
        self.events.append(("sensor",))


class TestStatusListenerRegistry(unittest.TestCase):
    """Test cases for StatusListenerRegistry."""

    def setUp(self):
        """Set up test fixtures."""
        self.registry = StatusListenerRegistry()
        self.listener = RecordingListener()

    def test_add_is_idempotent(self):
        self.registry.add(self.listener)
        self.registry.add(self.listener)

        self.assertEqual(len(self.registry), 1)
        self.registry.notify_sensor_status_changed()
        self.assertEqual(self.listener.events, [("sensor",)])

    def test_remove_unknown_is_noop(self):
        self.registry.remove(self.listener)
        self.assertEqual(len(self.registry), 0)

    def test_removed_listener_not_notified(self):
        self.registry.add(self.listener)
        self.registry.remove(self.listener)

        self.registry.notify_status_changed(AlarmStatus.ALARM)

        self.assertNotIn(self.listener, self.registry)
        self.assertEqual(self.listener.events, [])

    def test_events_delivered_with_payload(self):
        self.registry.add(self.listener)

        self.registry.notify_status_changed(AlarmStatus.PENDING_ALARM)
        self.registry.notify_cat_detected(True)
        self.registry.notify_sensor_status_changed()

        self.assertEqual(self.listener.events, [
            ("status", AlarmStatus.PENDING_ALARM),
            ("cat", True),
            ("sensor",)
        ])

    def test_failing_listener_does_not_block_others(self):
        failing = Mock(spec=StatusListener)
        failing.on_status_changed.side_effect = RuntimeError("display unplugged")
        self.registry.add(failing)
        self.registry.add(self.listener)

        with self.assertLogs("catpoint.listeners", level="ERROR"):
            self.registry.notify_status_changed(AlarmStatus.ALARM)

        failing.on_status_changed.assert_called_once_with(AlarmStatus.ALARM)
        self.assertEqual(self.listener.events, [("status", AlarmStatus.ALARM)])

    def test_listener_may_unsubscribe_during_delivery(self):
        registry = self.registry

        class SelfRemoving(RecordingListener):
            def on_cat_detected(self, cat_present):
                super().on_cat_detected(cat_present)
                registry.remove(self)

        one_shot = SelfRemoving()
        registry.add(one_shot)
        registry.add(self.listener)

        registry.notify_cat_detected(False)
        registry.notify_cat_detected(True)

        self.assertEqual(one_shot.events, [("cat", False)])
        self.assertEqual(self.listener.events, [("cat", False), ("cat", True)])


if __name__ == '__main__':
    unittest.main()
