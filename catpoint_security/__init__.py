"""
CatPoint Security

Alarm decision engine for a home security controller: combines the arming
mode, sensor activity and camera cat detection into an alarm status and
notifies registered listeners.
"""

__version__ = "1.0.0"
__author__ = "CatPoint Security"

# Import core components
from .config_manager import ConfigManager
from .models import (
    AlarmStatus,
    ArmingStatus,
    Sensor,
    SensorType,
    SystemConfig
)
from .services import (
    SecurityRepositoryInterface,
    ImageServiceInterface,
    StatusListener,
    SecurityService
)
from . import utils

__all__ = [
    # Core management
    'ConfigManager',
    'SecurityService',

    # Data models
    'AlarmStatus',
    'ArmingStatus',
    'Sensor',
    'SensorType',
    'SystemConfig',

    # Service interfaces
    'SecurityRepositoryInterface',
    'ImageServiceInterface',
    'StatusListener',

    # Utilities
    'utils'
]
