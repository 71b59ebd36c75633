"""Configuration data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SystemConfig:
    """System configuration settings."""
    # Cat detection settings
    confidence_threshold: float = 50.0  # Percent, 0-100
    image_service: str = "fake"  # fake, opencv
    cascade_path: Optional[str] = None
    fake_image_seed: Optional[int] = None

    # Storage settings
    repository_backend: str = "memory"  # memory, sqlite
    database_path: str = "data/security.db"

    # Logging settings
    log_level: str = "INFO"
    log_dir: Optional[str] = None
