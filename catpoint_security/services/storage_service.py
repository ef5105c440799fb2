"""SQLite-backed security repository."""

import os
import sqlite3
from typing import Any, Dict, Set, Type, TypeVar

from ..models.security import AlarmStatus, ArmingStatus, Sensor, SensorType
from .interfaces import SecurityRepositoryInterface
from ..utils import ensure_directory_exists
from .error_handler import global_error_handler, ErrorSeverity, RepositoryError
from ..logging_config import get_logger

logger = get_logger("storage_service")

COMPONENT_NAME = "storage_service"

ARMING_STATUS_KEY = "arming_status"
ALARM_STATUS_KEY = "alarm_status"

E = TypeVar("E", ArmingStatus, AlarmStatus)


class SqliteSecurityRepository(SecurityRepositoryInterface):
    """Stores sensors and system statuses in a single SQLite file."""

    def __init__(self, database_path: str = "data/security.db"):
        """
        Initialize the repository, creating the database when missing.

        Args:
            database_path: Path to SQLite database file
        """
        self.database_path = database_path

        global_error_handler.register_component(COMPONENT_NAME)

        self._initialize_database()

    def get_arming_status(self) -> ArmingStatus:
        return self._read_status(ARMING_STATUS_KEY, ArmingStatus, ArmingStatus.DISARMED)

    def set_arming_status(self, arming_status: ArmingStatus) -> None:
        self._write_status(ARMING_STATUS_KEY, arming_status)

    def get_alarm_status(self) -> AlarmStatus:
        return self._read_status(ALARM_STATUS_KEY, AlarmStatus, AlarmStatus.NO_ALARM)

    def set_alarm_status(self, alarm_status: AlarmStatus) -> None:
        self._write_status(ALARM_STATUS_KEY, alarm_status)

    def get_sensors(self) -> Set[Sensor]:
        rows = self._execute(
            "SELECT name, sensor_type, active FROM sensors ORDER BY name",
            fetch=True
        )
        return {self._row_to_sensor(row) for row in rows}

    def get_sensor(self, name: str) -> Sensor:
        """Get a single sensor by name, raising KeyError when unknown."""
        rows = self._execute(
            "SELECT name, sensor_type, active FROM sensors WHERE name = ?",
            (name,),
            fetch=True
        )
        if not rows:
            raise KeyError(name)
        return self._row_to_sensor(rows[0])

    def add_sensor(self, sensor: Sensor) -> None:
        self._execute(
            "INSERT OR REPLACE INTO sensors (name, sensor_type, active) VALUES (?, ?, ?)",
            (sensor.name, sensor.sensor_type.value, int(sensor.active))
        )
        logger.info(f"Sensor added: {sensor.name} ({sensor.sensor_type.value})")

    def remove_sensor(self, sensor: Sensor) -> None:
        self._execute("DELETE FROM sensors WHERE name = ?", (sensor.name,))
        logger.info(f"Sensor removed: {sensor.name}")

    def update_sensor(self, sensor: Sensor) -> None:
        # Unknown sensors are stored rather than dropped
        self._execute(
            """
            INSERT INTO sensors (name, sensor_type, active) VALUES (?, ?, ?)
            ON CONFLICT(name) DO UPDATE SET
                sensor_type = excluded.sensor_type,
                active = excluded.active
            """,
            (sensor.name, sensor.sensor_type.value, int(sensor.active))
        )

    def get_storage_info(self) -> Dict[str, Any]:
        """Get repository information."""
        return {
            "database_path": self.database_path,
            "database_exists": os.path.exists(self.database_path),
            "sensor_count": len(self.get_sensors()),
            "arming_status": self.get_arming_status().name,
            "alarm_status": self.get_alarm_status().name
        }

    def _initialize_database(self) -> None:
        """Create tables and seed default statuses."""
        directory = os.path.dirname(self.database_path)
        if directory:
            ensure_directory_exists(directory)

        try:
            with sqlite3.connect(self.database_path) as conn:
                cursor = conn.cursor()

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS sensors (
                        name TEXT PRIMARY KEY,
                        sensor_type TEXT NOT NULL,
                        active INTEGER NOT NULL DEFAULT 0
                    )
                """)

                cursor.execute("""
                    CREATE TABLE IF NOT EXISTS settings (
                        key TEXT PRIMARY KEY,
                        value TEXT NOT NULL
                    )
                """)

                cursor.executemany(
                    "INSERT OR IGNORE INTO settings (key, value) VALUES (?, ?)",
                    [
                        (ARMING_STATUS_KEY, ArmingStatus.DISARMED.name),
                        (ALARM_STATUS_KEY, AlarmStatus.NO_ALARM.name)
                    ]
                )

                conn.commit()
        except sqlite3.Error as e:
            global_error_handler.handle_error(COMPONENT_NAME, e, ErrorSeverity.CRITICAL)
            raise RepositoryError(f"Failed to initialize database {self.database_path}: {e}") from e

        logger.info(f"Security repository initialized: {self.database_path}")

    def _read_status(self, key: str, enum_type: Type[E], default: E) -> E:
        rows = self._execute("SELECT value FROM settings WHERE key = ?", (key,), fetch=True)
        if not rows:
            return default

        try:
            return enum_type[rows[0][0]]
        except KeyError:
            logger.error(f"Unknown stored {key} value {rows[0][0]!r}, using {default.name}")
            return default

    def _write_status(self, key: str, status: Any) -> None:
        self._execute(
            "INSERT OR REPLACE INTO settings (key, value) VALUES (?, ?)",
            (key, status.name)
        )
        logger.debug(f"Stored {key}={status.name}")

    def _row_to_sensor(self, row) -> Sensor:
        name, sensor_type, active = row
        return Sensor(name=name, sensor_type=SensorType(sensor_type), active=bool(active))

    def _execute(self, sql: str, params: tuple = (), fetch: bool = False):
        """Run one statement in its own connection."""
        try:
            with sqlite3.connect(self.database_path) as conn:
                cursor = conn.cursor()
                cursor.execute(sql, params)
                if fetch:
                    return cursor.fetchall()
                conn.commit()
                return None
        except sqlite3.Error as e:
            global_error_handler.handle_error(COMPONENT_NAME, e, ErrorSeverity.HIGH)
            raise RepositoryError(f"Database operation failed: {e}") from e
