"""Data models for the CatPoint security system."""

from .security import Sensor, SensorType, AlarmStatus, ArmingStatus
from .config import SystemConfig

__all__ = ['Sensor', 'SensorType', 'AlarmStatus', 'ArmingStatus', 'SystemConfig']
