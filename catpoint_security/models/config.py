"""Configuration data models."""

from dataclasses import dataclass
from typing import Optional


@dataclass
class SystemConfig:
    """System configuration settings."""
    # Persistence
    database_path: str = "data/security.db"

    # Image service settings
    image_service: str = "opencv"  # opencv, fake
    cascade_path: Optional[str] = None  # None uses the cascade bundled with OpenCV
    scale_factor: float = 1.1
    min_neighbors: int = 3
    min_detection_size: int = 30  # Minimum cat box edge in pixels
    fake_seed: Optional[int] = None

    # Listener settings
    history_size: int = 100

    # Logging
    log_level: str = "INFO"
    log_dir: str = "logs"
