"""Data models for the CatPoint security system."""

from .security import AlarmStatus, ArmingStatus, Sensor, SensorType
from .config import SystemConfig

__all__ = ['AlarmStatus', 'ArmingStatus', 'Sensor', 'SensorType', 'SystemConfig']
