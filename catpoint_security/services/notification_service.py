"""Status listener that records and logs security events."""

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Deque, List, Optional

from ..models.security import AlarmStatus
from ..logging_config import get_logger
from ..utils import format_timestamp
from .interfaces import StatusListener

logger = get_logger("notification_service")

ALARM_EVENT = "alarm"
CAT_EVENT = "cat"
SENSORS_EVENT = "sensors"


@dataclass
class StatusEvent:
    """A single notification received from the security service."""
    event_type: str  # "alarm", "cat", "sensors"
    value: Any = None
    timestamp: datetime = field(default_factory=datetime.now)

    def describe(self) -> str:
        """Human readable one-line description."""
        stamp = format_timestamp(self.timestamp)
        if self.event_type == ALARM_EVENT:
            return f"{stamp} alarm status: {self.value.name} ({self.value.description})"
        if self.event_type == CAT_EVENT:
            return f"{stamp} cat detected: {'yes' if self.value else 'no'}"
        return f"{stamp} sensors changed"


class StatusHistoryListener(StatusListener):
    """Keeps a bounded history of status notifications."""

    def __init__(self, max_events: int = 100):
        self.max_events = max(1, max_events)
        self._events: Deque[StatusEvent] = deque(maxlen=self.max_events)

    def notify(self, alarm_status: AlarmStatus) -> None:
        self._record(StatusEvent(ALARM_EVENT, alarm_status))
        if alarm_status == AlarmStatus.ALARM:
            logger.warning("ALARM triggered")
        else:
            logger.info(f"Alarm status changed to {alarm_status.name}")

    def cat_detected(self, cat: bool) -> None:
        self._record(StatusEvent(CAT_EVENT, cat))
        logger.info(f"Cat detection: {'cat seen' if cat else 'no cat'}")

    def sensor_status_changed(self) -> None:
        self._record(StatusEvent(SENSORS_EVENT))
        logger.debug("Sensor status changed")

    def get_events(self, event_type: Optional[str] = None) -> List[StatusEvent]:
        """Events oldest first, optionally only those of one type."""
        if event_type is None:
            return list(self._events)
        return [event for event in self._events if event.event_type == event_type]

    def latest(self, event_type: Optional[str] = None) -> Optional[StatusEvent]:
        events = self.get_events(event_type)
        return events[-1] if events else None

    def clear(self) -> None:
        self._events.clear()

    def _record(self, event: StatusEvent) -> None:
        self._events.append(event)
