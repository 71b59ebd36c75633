"""Service interfaces and abstract base classes."""

from abc import ABC, abstractmethod
from typing import Any, Set

from ..models.security import Sensor, AlarmStatus, ArmingStatus


class SecurityRepositoryInterface(ABC):
    """Interface for the store holding sensors and the two status values."""

    @abstractmethod
    def get_sensors(self) -> Set[Sensor]:
        """Get all known sensors."""
        pass

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        """Add a sensor."""
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        """Remove a sensor."""
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Persist the current state of a sensor."""
        pass

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        """Get the stored alarm status."""
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Store the alarm status."""
        pass

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        """Get the stored arming status."""
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Store the arming status."""
        pass


class ImageServiceInterface(ABC):
    """Interface for the cat image classifier."""

    @abstractmethod
    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        """Return True if the image shows a cat with at least the given confidence (0-100)."""
        pass


class StatusListener(ABC):
    """Observer of security system changes."""

    @abstractmethod
    def on_status_changed(self, alarm_status: AlarmStatus) -> None:
        """Called after the alarm status has been written."""
        pass

    @abstractmethod
    def on_cat_detected(self, cat_present: bool) -> None:
        """Called after every image has been classified."""
        pass

    @abstractmethod
    def on_sensor_status_changed(self) -> None:
        """Called after any sensor activation change."""
        pass
