"""Security data models."""

from dataclasses import dataclass, field, replace
from enum import Enum


class SensorType(Enum):
    """Kinds of sensor that can be attached to the system."""
    DOOR = "door"
    WINDOW = "window"
    MOTION = "motion"


class ArmingStatus(Enum):
    """Operator-selected arming mode."""
    DISARMED = "disarmed"
    ARMED_HOME = "armed_home"
    ARMED_AWAY = "armed_away"

    @property
    def description(self) -> str:
        return _ARMING_DESCRIPTIONS[self]


class AlarmStatus(Enum):
    """Current threat-response state of the system."""
    NO_ALARM = "no_alarm"
    PENDING_ALARM = "pending_alarm"
    ALARM = "alarm"

    @property
    def description(self) -> str:
        return _ALARM_DESCRIPTIONS[self]


_ARMING_DESCRIPTIONS = {
    ArmingStatus.DISARMED: "Disarmed",
    ArmingStatus.ARMED_HOME: "Armed - At Home",
    ArmingStatus.ARMED_AWAY: "Armed - Away",
}

_ALARM_DESCRIPTIONS = {
    AlarmStatus.NO_ALARM: "Cool and Good",
    AlarmStatus.PENDING_ALARM: "I'm in Danger...",
    AlarmStatus.ALARM: "Awooga!",
}


@dataclass(frozen=True)
class Sensor:
    """A binary contact or presence device.

    Sensors are value records identified by ``name``: two records with the
    same name compare equal whatever their type or activation flag.
    """
    name: str
    sensor_type: SensorType = field(compare=False)
    active: bool = field(default=False, compare=False)

    def with_active(self, active: bool) -> "Sensor":
        """Return a copy of this sensor with a new activation flag."""
        return replace(self, active=active)
