"""Security service: the alarm decision engine."""

from typing import Set

from ..config.defaults import SYSTEM_CONSTANTS
from ..models.security import AlarmStatus, ArmingStatus, Sensor
from ..logging_config import get_logger, log_audit
from .interfaces import (
    ImageServiceInterface,
    NDArray,
    SecurityRepositoryInterface,
    StatusListener
)

logger = get_logger("security_service")

CAT_CONFIDENCE_THRESHOLD = SYSTEM_CONSTANTS["CAT_CONFIDENCE_THRESHOLD"]


class SecurityService:
    """Receives information about changes to the security system.

    Forwards updates to the repository and decides every change of alarm
    status. All operations are synchronous; listeners have been notified by
    the time a call returns.
    """

    def __init__(self, security_repository: SecurityRepositoryInterface,
                 image_service: ImageServiceInterface):
        self.security_repository = security_repository
        self.image_service = image_service
        self._status_listeners: Set[StatusListener] = set()
        self._cat_detected = False

    @property
    def cat_detected(self) -> bool:
        """Verdict of the most recently processed frame."""
        return self._cat_detected

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        """Set the arming status, updating the alarm status when required.

        Arming into any mode resets every sensor to inactive before the new
        arming status is stored.
        """
        logger.info(f"Arming status change requested: {arming_status.name}")

        if self._cat_detected and arming_status == ArmingStatus.ARMED_HOME:
            self.set_alarm_status(AlarmStatus.ALARM)

        if arming_status == ArmingStatus.DISARMED:
            self.set_alarm_status(AlarmStatus.NO_ALARM)
        else:
            for sensor in list(self.get_sensors()):
                self.change_sensor_activation_status(sensor, False)

        self.security_repository.set_arming_status(arming_status)
        log_audit("Arming status set", {"arming_status": arming_status.name})

        for listener in list(self._status_listeners):
            listener.sensor_status_changed()

    def change_sensor_activation_status(self, sensor: Sensor, active: bool) -> Sensor:
        """Change a sensor's activation flag and update the alarm status.

        Returns the sensor record as stored. While the alarm is fully
        triggered nothing is changed and ``sensor`` is returned as given.
        """
        if not isinstance(active, bool):
            raise TypeError(f"active must be a bool, got {type(active).__name__}")

        if self.security_repository.get_alarm_status() == AlarmStatus.ALARM:
            logger.debug(f"Alarm active, ignoring change of sensor {sensor.name}")
            return sensor

        if active and not sensor.active:
            self._handle_sensor_activated()
        elif not active and sensor.active:
            self._handle_sensor_deactivated()

        updated = sensor.with_active(active)
        self.security_repository.update_sensor(updated)
        logger.debug(f"Sensor {updated.name} is now {'active' if active else 'inactive'}")
        return updated

    def process_image(self, frame: NDArray) -> None:
        """Run the image service on a captured frame and react to its verdict."""
        self._handle_cat_detected(
            bool(self.image_service.image_contains_cat(frame, CAT_CONFIDENCE_THRESHOLD))
        )

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        """Change the alarm status of the system and notify all listeners."""
        self.security_repository.set_alarm_status(alarm_status)
        log_audit("Alarm status set", {"alarm_status": alarm_status.name})

        for listener in list(self._status_listeners):
            listener.notify(alarm_status)

    def add_status_listener(self, status_listener: StatusListener) -> None:
        self._status_listeners.add(status_listener)

    def get_alarm_status(self) -> AlarmStatus:
        return self.security_repository.get_alarm_status()

    def get_arming_status(self) -> ArmingStatus:
        return self.security_repository.get_arming_status()

    def get_sensors(self) -> Set[Sensor]:
        return self.security_repository.get_sensors()

    def add_sensor(self, sensor: Sensor) -> None:
        self.security_repository.add_sensor(sensor)

    def remove_sensor(self, sensor: Sensor) -> None:
        self.security_repository.remove_sensor(sensor)

    def _handle_sensor_activated(self) -> None:
        if self.security_repository.get_arming_status() == ArmingStatus.DISARMED:
            return

        alarm_status = self.security_repository.get_alarm_status()
        if alarm_status == AlarmStatus.NO_ALARM:
            self.set_alarm_status(AlarmStatus.PENDING_ALARM)
        elif alarm_status == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(AlarmStatus.ALARM)

    def _handle_sensor_deactivated(self) -> None:
        alarm_status = self.security_repository.get_alarm_status()
        if alarm_status == AlarmStatus.PENDING_ALARM:
            self.set_alarm_status(AlarmStatus.NO_ALARM)
        elif alarm_status == AlarmStatus.ALARM:
            self.set_alarm_status(AlarmStatus.PENDING_ALARM)

    def _handle_cat_detected(self, cat: bool) -> None:
        self._cat_detected = cat
        logger.debug(f"Image service verdict: cat={'yes' if cat else 'no'}")

        if cat and self.security_repository.get_arming_status() == ArmingStatus.ARMED_HOME:
            self.set_alarm_status(AlarmStatus.ALARM)
        elif not cat and self._all_sensors_inactive():
            self.set_alarm_status(AlarmStatus.NO_ALARM)

        for listener in list(self._status_listeners):
            listener.cat_detected(cat)

    def _all_sensors_inactive(self) -> bool:
        return not any(sensor.active for sensor in self.get_sensors())
