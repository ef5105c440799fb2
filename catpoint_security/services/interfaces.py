"""Service interfaces and abstract base classes."""

from abc import ABC, abstractmethod
from typing import Set

import numpy as np

from ..models.security import AlarmStatus, ArmingStatus, Sensor

NDArray = np.ndarray


class SecurityRepositoryInterface(ABC):
    """Interface for the store holding sensors and system statuses."""

    @abstractmethod
    def get_arming_status(self) -> ArmingStatus:
        """Get the persisted arming status."""
        pass

    @abstractmethod
    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Persist a new arming status."""
        pass

    @abstractmethod
    def get_alarm_status(self) -> AlarmStatus:
        """Get the persisted alarm status."""
        pass

    @abstractmethod
    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Persist a new alarm status."""
        pass

    @abstractmethod
    def get_sensors(self) -> Set[Sensor]:
        """Get all known sensors."""
        pass

    @abstractmethod
    def add_sensor(self, sensor: Sensor) -> None:
        """Add a sensor."""
        pass

    @abstractmethod
    def remove_sensor(self, sensor: Sensor) -> None:
        """Remove a sensor."""
        pass

    @abstractmethod
    def update_sensor(self, sensor: Sensor) -> None:
        """Store the current state of a sensor."""
        pass


class ImageServiceInterface(ABC):
    """Interface for visual cat recognition."""

    @abstractmethod
    def image_contains_cat(self, frame: NDArray, confidence_threshold: float) -> bool:
        """Return True if a cat is seen with at least ``confidence_threshold`` percent."""
        pass


class StatusListener(ABC):
    """Observer notified of security status changes."""

    @abstractmethod
    def notify(self, alarm_status: AlarmStatus) -> None:
        """Called after the alarm status has been set."""
        pass

    @abstractmethod
    def cat_detected(self, cat: bool) -> None:
        """Called after every processed frame with the detector verdict."""
        pass

    @abstractmethod
    def sensor_status_changed(self) -> None:
        """Called when the sensor list or sensor states may have changed."""
        pass
