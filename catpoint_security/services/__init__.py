"""Services for the security system."""

from .interfaces import (
    SecurityRepositoryInterface,
    ImageServiceInterface,
    StatusListener
)
from .security_service import SecurityService
from .listeners import StatusListenerRegistry
from .repository import InMemorySecurityRepository, SqliteSecurityRepository
from .image_service import FakeImageService, OpenCVImageService

__all__ = [
    'SecurityRepositoryInterface',
    'ImageServiceInterface',
    'StatusListener',
    'SecurityService',
    'StatusListenerRegistry',
    'InMemorySecurityRepository',
    'SqliteSecurityRepository',
    'FakeImageService',
    'OpenCVImageService'
]
