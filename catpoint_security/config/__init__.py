"""Configuration components for the security system."""

from .defaults import (
    DEFAULT_CONFIG,
    DEFAULT_PATHS,
    CLASSIFIER_SETTINGS,
    VALID_IMAGE_SERVICES,
    VALID_REPOSITORY_BACKENDS,
    VALID_LOG_LEVELS
)

__all__ = [
    'DEFAULT_CONFIG',
    'DEFAULT_PATHS',
    'CLASSIFIER_SETTINGS',
    'VALID_IMAGE_SERVICES',
    'VALID_REPOSITORY_BACKENDS',
    'VALID_LOG_LEVELS'
]
