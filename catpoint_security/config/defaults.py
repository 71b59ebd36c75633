"""Default configuration values and constants."""

from typing import Dict, Any

# File paths
DEFAULT_PATHS = {
    "config_file": "config.json",
    "database_file": "data/security.db"
}

# Default system configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    # Cat detection settings
    "confidence_threshold": 50.0,
    "image_service": "fake",
    "cascade_path": None,
    "fake_image_seed": None,

    # Storage settings
    "repository_backend": "memory",
    "database_path": DEFAULT_PATHS["database_file"],

    # Logging settings
    "log_level": "INFO",
    "log_dir": None
}

VALID_IMAGE_SERVICES = ("fake", "opencv")
VALID_REPOSITORY_BACKENDS = ("memory", "sqlite")
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Haar cascade classifier settings
CLASSIFIER_SETTINGS = {
    "cascade_file": "haarcascade_frontalcatface.xml",
    "fallback_cascade_file": "haarcascade_frontalcatface_extended.xml",
    "scale_factor": 1.1,
    "min_neighbors": 3,
    "min_size": (30, 30)
}
