"""Error tracking for the security system's collaborators."""

import functools
import traceback
from datetime import datetime
from typing import Dict, List, Optional, Any
from dataclasses import dataclass, field
from enum import Enum

from ..config.defaults import SYSTEM_CONSTANTS
from ..logging_config import get_logger

logger = get_logger("error_handler")


class RepositoryError(Exception):
    """Raised when the security repository cannot read or write its store."""


class ErrorSeverity(Enum):
    """Error severity levels."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class ComponentStatus(Enum):
    """Component status levels."""
    HEALTHY = "healthy"
    DEGRADED = "degraded"
    FAILED = "failed"
    UNKNOWN = "unknown"


@dataclass
class ErrorRecord:
    """Record of an error occurrence."""
    component_name: str
    error: Exception
    severity: ErrorSeverity
    timestamp: datetime = field(default_factory=datetime.now)
    traceback_str: str = ""

    @property
    def error_type(self) -> str:
        return type(self.error).__name__


class ErrorHandler:
    """Central registry of component errors and component health."""

    def __init__(self, max_error_history: int = SYSTEM_CONSTANTS["MAX_ERROR_HISTORY"]):
        self.max_error_history = max_error_history
        self.error_records: List[ErrorRecord] = []
        self.component_error_counts: Dict[str, int] = {}
        self.component_status: Dict[str, ComponentStatus] = {}

    def register_component(self, component_name: str) -> None:
        """Register a component for error tracking."""
        self.component_error_counts.setdefault(component_name, 0)
        self.component_status.setdefault(component_name, ComponentStatus.HEALTHY)
        logger.debug(f"Component registered: {component_name}")

    def handle_error(self, component_name: str, error: Exception,
                     severity: ErrorSeverity) -> ErrorRecord:
        """Record an error raised by a component and update its status."""
        error_record = ErrorRecord(
            component_name=component_name,
            error=error,
            severity=severity,
            traceback_str=traceback.format_exc()
        )

        self.error_records.append(error_record)
        if len(self.error_records) > self.max_error_history:
            self.error_records = self.error_records[-self.max_error_history:]

        self.component_error_counts[component_name] = \
            self.component_error_counts.get(component_name, 0) + 1

        if severity == ErrorSeverity.CRITICAL:
            self.component_status[component_name] = ComponentStatus.FAILED
        elif severity == ErrorSeverity.HIGH:
            self.component_status[component_name] = ComponentStatus.DEGRADED
        else:
            self.component_status.setdefault(component_name, ComponentStatus.HEALTHY)

        logger.error(f"Error in {component_name}: {error} (Severity: {severity.value})")
        return error_record

    def get_component_health(self) -> Dict[str, ComponentStatus]:
        """Get health status of all known components."""
        return dict(self.component_status)

    def get_last_error(self, component_name: str) -> Optional[ErrorRecord]:
        """Most recent recorded error of a component, if still in history."""
        for record in reversed(self.error_records):
            if record.component_name == component_name:
                return record
        return None

    def reset_error_counts(self, component_name: Optional[str] = None) -> None:
        """Reset error counts for a component or all components."""
        names = [component_name] if component_name else list(self.component_error_counts)
        for name in names:
            if name in self.component_error_counts:
                self.component_error_counts[name] = 0
                self.component_status[name] = ComponentStatus.HEALTHY


# Create global error handler instance
global_error_handler = ErrorHandler()


def with_error_handling(component_name: str, severity: ErrorSeverity = ErrorSeverity.MEDIUM,
                        default: Any = None, error_handler: Optional[ErrorHandler] = None):
    """Decorator that records exceptions and returns ``default`` instead.

    Critical errors are recorded and re-raised.
    """
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            handler = error_handler or global_error_handler
            try:
                return func(*args, **kwargs)
            except Exception as e:
                handler.handle_error(component_name, e, severity)
                if severity == ErrorSeverity.CRITICAL:
                    raise
                return default
        return wrapper
    return decorator
