"""Security service: the alarm decision engine.

Receives sensor, arming and camera events, decides how the alarm status
changes, writes the result to the repository and notifies listeners.
"""

import threading
import time
from typing import Any, Set

from ..models.security import Sensor, AlarmStatus, ArmingStatus
from ..config.defaults import DEFAULT_CONFIG
from .interfaces import SecurityRepositoryInterface, ImageServiceInterface, StatusListener
from .listeners import StatusListenerRegistry
from .error_handler import (
    global_error_handler, ErrorSeverity, with_error_handling,
    InvalidInputError, SensorNotFoundError
)
from ..logging_config import get_logger, log_performance

logger = get_logger("security_service")

COMPONENT_NAME = "security_service"
IMAGE_SERVICE_COMPONENT = "image_service"


class SecurityService:
    """Alarm state machine over a repository and an image classifier.

    All state-changing operations are serialized on one re-entrant lock.
    The classifier runs outside the lock; only the resulting cat-detection
    update is applied under it.
    """

    def __init__(self,
                 security_repository: SecurityRepositoryInterface,
                 image_service: ImageServiceInterface,
                 confidence_threshold: float = DEFAULT_CONFIG["confidence_threshold"]):
        self.security_repository = security_repository
        self.image_service = image_service
        self.confidence_threshold = confidence_threshold
        self.status_listeners = StatusListenerRegistry()

        self._cat_detected = False
        self._lock = threading.RLock()

        global_error_handler.register_component(COMPONENT_NAME)
        global_error_handler.register_component(IMAGE_SERVICE_COMPONENT)

    # Arming

    @with_error_handling(COMPONENT_NAME, ErrorSeverity.HIGH)
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Change the arming mode.

        Disarming always clears the alarm. Arming resets every sensor to
        inactive, and arming at home while a cat is in view raises the alarm.
        """
        if not isinstance(arming_status, ArmingStatus):
            raise InvalidInputError(f"unknown arming status: {arming_status!r}")

        with self._lock:
            if arming_status == ArmingStatus.DISARMED:
                self._set_alarm_status(AlarmStatus.NO_ALARM)
            else:
                if arming_status == ArmingStatus.ARMED_HOME and self._cat_detected:
                    self._set_alarm_status(AlarmStatus.ALARM)

                # Snapshot so the reset is stable while sensors are added or removed
                for sensor in sorted(self.security_repository.get_sensors()):
                    self._change_sensor_activation_status(sensor, False, sensor.active)

            self.security_repository.set_arming_status(arming_status)

        logger.info(f"Arming status set to {arming_status.value}")

    # Sensors

    @with_error_handling(COMPONENT_NAME, ErrorSeverity.HIGH)
    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> None:
        """Activate or deactivate a sensor and update the alarm status if necessary."""
        if sensor is None:
            raise InvalidInputError("sensor must not be None")
        if not isinstance(sensor, Sensor):
            raise InvalidInputError(f"expected a Sensor, got {type(sensor).__name__}")
        if not isinstance(active, bool):
            raise InvalidInputError(f"active must be a bool, got {active!r}")

        with self._lock:
            stored = self._find_stored_sensor(sensor)
            # Rule choice uses the stored flag, not the caller's copy
            self._change_sensor_activation_status(sensor, active, stored.active)

    def _find_stored_sensor(self, sensor: Sensor) -> Sensor:
        for stored in self.security_repository.get_sensors():
            if stored == sensor:
                return stored
        raise SensorNotFoundError(sensor)

    def _change_sensor_activation_status(self, sensor: Sensor, active: bool,
                                         was_active: bool) -> None:
        if active:
            self._handle_sensor_activated(was_active)
        elif was_active:
            self._handle_sensor_deactivated(sensor)

        sensor.active = active
        self.security_repository.update_sensor(sensor)
        logger.debug(f"Sensor {sensor.name} ({sensor.sensor_type.value}) active={active}")

        self.status_listeners.notify_sensor_status_changed()

    def _handle_sensor_activated(self, was_active: bool) -> None:
        if self.security_repository.get_arming_status() == ArmingStatus.DISARMED:
            return

        alarm_status = self.security_repository.get_alarm_status()

        # A fresh activation on a quiet system goes to pending first...
        if alarm_status == AlarmStatus.NO_ALARM and not was_active:
            self._set_alarm_status(AlarmStatus.PENDING_ALARM)
            alarm_status = AlarmStatus.PENDING_ALARM

        # ...and is re-evaluated straight away, so it escalates in the same call
        if alarm_status != AlarmStatus.ALARM:
            self._set_alarm_status(AlarmStatus.ALARM)

    def _handle_sensor_deactivated(self, sensor: Sensor) -> None:
        # An ALARM is never reduced by a sensor going quiet
        if self.security_repository.get_alarm_status() != AlarmStatus.PENDING_ALARM:
            return

        # The sensor itself is skipped: its flag is not written yet
        others_inactive = all(
            not other.active
            for other in self.security_repository.get_sensors()
            if other != sensor
        )
        if others_inactive:
            self._set_alarm_status(AlarmStatus.NO_ALARM)

    def _all_sensors_inactive(self) -> bool:
        return all(not sensor.active for sensor in self.security_repository.get_sensors())

    # Camera

    def process_image(self, image: Any) -> bool:
        """Classify a camera image and apply the result. Returns the cat flag."""
        if image is None:
            raise InvalidInputError("image must not be None")

        start_time = time.time()
        cat_present = bool(self._classify(image))
        log_performance("Camera image processed", {
            "duration_ms": round((time.time() - start_time) * 1000, 2),
            "cat_present": cat_present
        })

        self.cat_detected(cat_present)
        return cat_present

    @with_error_handling(IMAGE_SERVICE_COMPONENT, ErrorSeverity.MEDIUM)
    def _classify(self, image: Any) -> bool:
        return self.image_service.image_contains_cat(image, self.confidence_threshold)

    @with_error_handling(COMPONENT_NAME, ErrorSeverity.HIGH)
    def cat_detected(self, cat_present: bool) -> None:
        """Update the alarm status from whether the camera currently shows a cat."""
        if not isinstance(cat_present, bool):
            raise InvalidInputError(f"cat_present must be a bool, got {cat_present!r}")

        with self._lock:
            self._cat_detected = cat_present

            if cat_present and self.security_repository.get_arming_status() == ArmingStatus.ARMED_HOME:
                self._set_alarm_status(AlarmStatus.ALARM)
            elif not cat_present and self._all_sensors_inactive():
                self._set_alarm_status(AlarmStatus.NO_ALARM)

            self.status_listeners.notify_cat_detected(cat_present)

    def is_cat_detected(self) -> bool:
        return self._cat_detected

    def set_confidence_threshold(self, threshold: float) -> None:
        """Set the classifier confidence threshold (percent, clamped to 0-100)."""
        self.confidence_threshold = max(0.0, min(100.0, float(threshold)))
        logger.info(f"Cat confidence threshold set to {self.confidence_threshold}")

    # Alarm status

    @with_error_handling(COMPONENT_NAME, ErrorSeverity.HIGH)
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Change the alarm status of the system and notify all listeners."""
        if not isinstance(alarm_status, AlarmStatus):
            raise InvalidInputError(f"unknown alarm status: {alarm_status!r}")

        with self._lock:
            self._set_alarm_status(alarm_status)

    def _set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self.security_repository.set_alarm_status(alarm_status)
        logger.info(f"Alarm status set to {alarm_status.value}")
        self.status_listeners.notify_status_changed(alarm_status)

    # Listeners

    def add_status_listener(self, listener: StatusListener) -> None:
        if listener is None:
            raise InvalidInputError("listener must not be None")
        self.status_listeners.add(listener)

    def remove_status_listener(self, listener: StatusListener) -> None:
        self.status_listeners.remove(listener)

    def listener_count(self) -> int:
        return len(self.status_listeners)

    # Pass-through accessors

    def get_alarm_status(self) -> AlarmStatus:
        return self.security_repository.get_alarm_status()

    def get_arming_status(self) -> ArmingStatus:
        return self.security_repository.get_arming_status()

    def get_sensors(self) -> Set[Sensor]:
        return self.security_repository.get_sensors()

    @with_error_handling(COMPONENT_NAME, ErrorSeverity.MEDIUM)
    def add_sensor(self, sensor: Sensor) -> None:
        if sensor is None:
            raise InvalidInputError("sensor must not be None")
        with self._lock:
            self.security_repository.add_sensor(sensor)
        logger.info(f"Sensor added: {sensor.name} ({sensor.sensor_type.value})")

    @with_error_handling(COMPONENT_NAME, ErrorSeverity.MEDIUM)
    def remove_sensor(self, sensor: Sensor) -> None:
        if sensor is None:
            raise InvalidInputError("sensor must not be None")
        with self._lock:
            self.security_repository.remove_sensor(sensor)
        logger.info(f"Sensor removed: {sensor.name} ({sensor.sensor_type.value})")
