"""Builds a ready-to-use security service from configuration."""

from typing import Optional

from .config_manager import ConfigManager
from .models.config import SystemConfig
from .services.interfaces import SecurityRepositoryInterface, ImageServiceInterface
from .services.repository import InMemorySecurityRepository, SqliteSecurityRepository
from .services.image_service import FakeImageService, OpenCVImageService
from .services.security_service import SecurityService
from .services.error_handler import InvalidInputError
from .logging_config import get_logger, setup_logging

logger = get_logger("application")


def create_repository(config: SystemConfig) -> SecurityRepositoryInterface:
    """Create the repository selected by ``repository_backend``."""
    if config.repository_backend == "memory":
        return InMemorySecurityRepository()
    if config.repository_backend == "sqlite":
        return SqliteSecurityRepository(config.database_path)
    raise InvalidInputError(f"unknown repository backend: {config.repository_backend!r}")


def create_image_service(config: SystemConfig) -> ImageServiceInterface:
    """Create the classifier selected by ``image_service``."""
    if config.image_service == "fake":
        return FakeImageService(seed=config.fake_image_seed)
    if config.image_service == "opencv":
        return OpenCVImageService(cascade_path=config.cascade_path)
    raise InvalidInputError(f"unknown image service: {config.image_service!r}")


def build_security_service(config_manager: Optional[ConfigManager] = None,
                           configure_logging: bool = False) -> SecurityService:
    """Wire repository, classifier and engine together.

    Later changes to ``confidence_threshold`` in the config manager are
    pushed to the returned service. With ``configure_logging`` the root
    logger is set up from ``log_level`` and ``log_dir`` first.
    """
    config_manager = config_manager or ConfigManager()
    config = config_manager.get_config()

    if not config_manager.validate_config():
        raise InvalidInputError(f"invalid configuration in {config_manager.config_path}")

    if configure_logging:
        setup_logging(config.log_level, config.log_dir)

    service = SecurityService(
        security_repository=create_repository(config),
        image_service=create_image_service(config),
        confidence_threshold=config.confidence_threshold
    )

    def _sync_threshold(new_config: SystemConfig) -> None:
        service.set_confidence_threshold(new_config.confidence_threshold)

    config_manager.register_change_callback(_sync_threshold)

    logger.info(f"Security service ready (repository={config.repository_backend}, "
                f"image_service={config.image_service})")
    return service
