"""
CatPoint Security

The decision core of a home security monitor: sensors, an arming mode and a
camera cat-detection signal go in, an alarm status and listener
notifications come out.
"""

__version__ = "1.0.0"
__author__ = "CatPoint Security"

from .config_manager import ConfigManager
from .models import (
    Sensor,
    SensorType,
    AlarmStatus,
    ArmingStatus,
    SystemConfig
)
from .services import (
    SecurityRepositoryInterface,
    ImageServiceInterface,
    StatusListener,
    SecurityService,
    InMemorySecurityRepository,
    SqliteSecurityRepository,
    FakeImageService,
    OpenCVImageService
)
from .application import build_security_service

__all__ = [
    # Core management
    'ConfigManager',
    'build_security_service',

    # Data models
    'Sensor',
    'SensorType',
    'AlarmStatus',
    'ArmingStatus',
    'SystemConfig',

    # Services
    'SecurityRepositoryInterface',
    'ImageServiceInterface',
    'StatusListener',
    'SecurityService',
    'InMemorySecurityRepository',
    'SqliteSecurityRepository',
    'FakeImageService',
    'OpenCVImageService'
]
