"""Default configuration values and constants."""

from typing import Dict, Any

# Default system configuration
DEFAULT_CONFIG: Dict[str, Any] = {
    # Persistence
    "database_path": "data/security.db",

    # Image service settings
    "image_service": "opencv",
    "cascade_path": None,
    "scale_factor": 1.1,
    "min_neighbors": 3,
    "min_detection_size": 30,
    "fake_seed": None,

    # Listener settings
    "history_size": 100,

    # Logging
    "log_level": "INFO",
    "log_dir": "logs"
}

# System constants
SYSTEM_CONSTANTS = {
    "CAT_CONFIDENCE_THRESHOLD": 50.0,  # Percent, passed to every image service call
    "LOG_ROTATION_SIZE_MB": 10,
    "LOG_BACKUP_COUNT": 5,
    "MAX_ERROR_HISTORY": 500
}

# File paths and directories
DEFAULT_PATHS = {
    "config_file": "catpoint.json"
}

# Haar cascades shipped with OpenCV, tried in order
CASCADE_FILES = (
    "haarcascade_frontalcatface_extended.xml",
    "haarcascade_frontalcatface.xml"
)

IMAGE_SERVICES = ("opencv", "fake")
