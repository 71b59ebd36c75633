"""Security system data models."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict


class SensorType(Enum):
    """Kinds of sensor the system knows about."""
    DOOR = "DOOR"
    WINDOW = "WINDOW"
    MOTION = "MOTION"


class AlarmStatus(Enum):
    """System-wide alarm severity."""
    NO_ALARM = "NO_ALARM"
    PENDING_ALARM = "PENDING_ALARM"
    ALARM = "ALARM"

    @property
    def description(self) -> str:
        return _ALARM_DESCRIPTIONS[self]


class ArmingStatus(Enum):
    """Operating mode selected by the user."""
    DISARMED = "DISARMED"
    ARMED_HOME = "ARMED_HOME"
    ARMED_AWAY = "ARMED_AWAY"

    @property
    def description(self) -> str:
        return _ARMING_DESCRIPTIONS[self]


_ALARM_DESCRIPTIONS = {
    AlarmStatus.NO_ALARM: "Cool and Good",
    AlarmStatus.PENDING_ALARM: "I'm in Danger...",
    AlarmStatus.ALARM: "Awooga!",
}

_ARMING_DESCRIPTIONS = {
    ArmingStatus.DISARMED: "Disarmed",
    ArmingStatus.ARMED_HOME: "Armed - At Home",
    ArmingStatus.ARMED_AWAY: "Armed - Away",
}


@dataclass(unsafe_hash=True)
class Sensor:
    """A door, window or motion sensor.

    Identity is the (name, sensor_type) pair. The active flag is excluded
    from equality and hashing so a set of sensors never holds two entries
    that differ only in activation state.
    """
    name: str
    sensor_type: SensorType
    active: bool = field(default=False, compare=False)

    @property
    def key(self) -> tuple:
        return (self.name, self.sensor_type.value)

    def __lt__(self, other: "Sensor") -> bool:
        if not isinstance(other, Sensor):
            return NotImplemented
        return self.key < other.key

    def to_dict(self) -> Dict[str, Any]:
        return {
            "name": self.name,
            "sensor_type": self.sensor_type.value,
            "active": self.active,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Sensor":
        return cls(
            name=data["name"],
            sensor_type=SensorType(data["sensor_type"]),
            active=bool(data.get("active", False)),
        )
