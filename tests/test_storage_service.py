"""Unit tests for the SQLite security repository."""

import unittest
import tempfile
import shutil
import os
import sqlite3
import sys

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.models.security import AlarmStatus, ArmingStatus, Sensor, SensorType
from catpoint_security.services.error_handler import RepositoryError
from catpoint_security.services.storage_service import SqliteSecurityRepository


class TestSqliteSecurityRepository(unittest.TestCase):
    """Test cases for SqliteSecurityRepository."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.database_path = os.path.join(self.test_dir, "storage", "security.db")
        self.repository = SqliteSecurityRepository(self.database_path)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_initialization(self):
        """Database file and tables are created."""
        self.assertTrue(os.path.exists(self.database_path))

        with sqlite3.connect(self.database_path) as conn:
            cursor = conn.cursor()
            cursor.execute("SELECT name FROM sqlite_master WHERE type='table' ORDER BY name")
            tables = [row[0] for row in cursor.fetchall()]
        self.assertIn("sensors", tables)
        self.assertIn("settings", tables)

    def test_default_statuses(self):
        """A fresh repository is disarmed with no alarm."""
        self.assertEqual(self.repository.get_arming_status(), ArmingStatus.DISARMED)
        self.assertEqual(self.repository.get_alarm_status(), AlarmStatus.NO_ALARM)
        self.assertEqual(self.repository.get_sensors(), set())

    def test_statuses_persist(self):
        """Statuses survive reopening the database."""
        self.repository.set_arming_status(ArmingStatus.ARMED_AWAY)
        self.repository.set_alarm_status(AlarmStatus.PENDING_ALARM)

        reopened = SqliteSecurityRepository(self.database_path)

        self.assertEqual(reopened.get_arming_status(), ArmingStatus.ARMED_AWAY)
        self.assertEqual(reopened.get_alarm_status(), AlarmStatus.PENDING_ALARM)

    def test_add_and_get_sensors(self):
        """Added sensors are returned with type and state."""
        door = Sensor("door", SensorType.DOOR)
        motion = Sensor("hall", SensorType.MOTION, active=True)
        self.repository.add_sensor(door)
        self.repository.add_sensor(motion)

        sensors = {s.name: s for s in self.repository.get_sensors()}

        self.assertEqual(set(sensors), {"door", "hall"})
        self.assertEqual(sensors["hall"].sensor_type, SensorType.MOTION)
        self.assertTrue(sensors["hall"].active)
        self.assertFalse(sensors["door"].active)

    def test_update_sensor(self):
        """Updating a sensor stores its new activation flag."""
        door = Sensor("door", SensorType.DOOR)
        self.repository.add_sensor(door)

        self.repository.update_sensor(door.with_active(True))

        self.assertTrue(self.repository.get_sensor("door").active)
        self.assertEqual(len(self.repository.get_sensors()), 1)

    def test_update_unknown_sensor_inserts_it(self):
        """Updating a sensor the store has never seen adds it."""
        self.repository.update_sensor(Sensor("garage", SensorType.DOOR, active=True))

        self.assertTrue(self.repository.get_sensor("garage").active)

    def test_remove_sensor(self):
        """Removing is by name."""
        self.repository.add_sensor(Sensor("door", SensorType.DOOR))
        self.repository.add_sensor(Sensor("window", SensorType.WINDOW))

        self.repository.remove_sensor(Sensor("door", SensorType.MOTION, active=True))

        self.assertEqual({s.name for s in self.repository.get_sensors()}, {"window"})

    def test_get_unknown_sensor(self):
        """Unknown sensor names raise KeyError."""
        with self.assertRaises(KeyError):
            self.repository.get_sensor("nope")

    def test_corrupt_status_falls_back_to_default(self):
        """Unknown stored values read as the default status."""
        with sqlite3.connect(self.database_path) as conn:
            conn.execute("UPDATE settings SET value = 'BOGUS' WHERE key = 'alarm_status'")
            conn.commit()

        self.assertEqual(self.repository.get_alarm_status(), AlarmStatus.NO_ALARM)

    def test_storage_info(self):
        """Storage info reports counts and statuses."""
        self.repository.add_sensor(Sensor("door", SensorType.DOOR))

        info = self.repository.get_storage_info()

        self.assertEqual(info["database_path"], self.database_path)
        self.assertTrue(info["database_exists"])
        self.assertEqual(info["sensor_count"], 1)
        self.assertEqual(info["arming_status"], "DISARMED")
        self.assertEqual(info["alarm_status"], "NO_ALARM")

    def test_database_failure_raises_repository_error(self):
        """SQLite failures surface as RepositoryError."""
        with sqlite3.connect(self.database_path) as conn:
            conn.execute("DROP TABLE sensors")
            conn.commit()

        with self.assertRaises(RepositoryError):
            self.repository.get_sensors()

    def test_unopenable_database(self):
        """A database path that cannot be opened fails at construction."""
        blocker = os.path.join(self.test_dir, "blocker")
        with open(blocker, "w") as f:
            f.write("not a directory")

        with self.assertRaises((RepositoryError, OSError)):
            SqliteSecurityRepository(os.path.join(blocker, "security.db"))


if __name__ == '__main__':
    unittest.main()
