"""Unit tests for configuration manager."""

import unittest
import tempfile
import shutil
import os
import json
import sys
from unittest.mock import Mock

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from catpoint_security.config_manager import ConfigManager
from catpoint_security.models.config import SystemConfig


class TestConfigManager(unittest.TestCase):
    """Test cases for ConfigManager."""

    def setUp(self):
        """Set up test fixtures."""
        self.test_dir = tempfile.mkdtemp()
        self.config_path = os.path.join(self.test_dir, "conf", "catpoint.json")
        self.config_manager = ConfigManager(self.config_path)

    def tearDown(self):
        """Clean up test fixtures."""
        shutil.rmtree(self.test_dir, ignore_errors=True)

    def test_default_config_creation(self):
        """A missing config file is created with defaults."""
        self.assertTrue(os.path.exists(self.config_path))

        config = self.config_manager.get_config()
        self.assertIsInstance(config, SystemConfig)
        self.assertEqual(config.image_service, "opencv")
        self.assertEqual(config.history_size, 100)

        with open(self.config_path, 'r') as f:
            saved = json.load(f)
        self.assertEqual(saved["database_path"], "data/security.db")

    def test_update_config_persists(self):
        """Updated values are saved and reloaded."""
        self.config_manager.update_config(image_service="fake", fake_seed=42)

        reloaded = ConfigManager(self.config_path).get_config()
        self.assertEqual(reloaded.image_service, "fake")
        self.assertEqual(reloaded.fake_seed, 42)

    def test_update_ignores_unknown_keys(self):
        """Unknown keys do not become config attributes."""
        self.config_manager.update_config(camera_resolution=(640, 480))
        self.assertFalse(hasattr(self.config_manager.get_config(), "camera_resolution"))

    def test_load_ignores_unknown_keys(self):
        """Unknown keys in the file are dropped on load."""
        with open(self.config_path, 'w') as f:
            json.dump({"min_neighbors": 6, "web_port": 5000}, f)

        config = ConfigManager(self.config_path).get_config()

        self.assertEqual(config.min_neighbors, 6)
        self.assertEqual(config.scale_factor, 1.1)

    def test_corrupt_file_falls_back_to_defaults(self):
        """Unreadable JSON gives the default configuration."""
        with open(self.config_path, 'w') as f:
            f.write("{not json")

        config = ConfigManager(self.config_path).get_config()

        self.assertEqual(config, SystemConfig())

    def test_validate_config(self):
        """Validation accepts defaults and rejects bad values."""
        self.assertTrue(self.config_manager.validate_config())

        invalid = [
            {"database_path": ""},
            {"image_service": "aws"},
            {"scale_factor": 1.0},
            {"min_neighbors": -1},
            {"min_detection_size": 0},
            {"fake_seed": "abc"},
            {"history_size": 0},
            {"log_level": "LOUD"},
        ]
        for change in invalid:
            with self.subTest(change=change):
                self.config_manager.reset_to_defaults()
                self.config_manager.update_config(**change)
                self.assertFalse(self.config_manager.validate_config())

    def test_validate_rejects_wrong_types(self):
        """Values of the wrong type make the config invalid without raising."""
        wrong_types = [
            {"scale_factor": "fast"},
            {"min_neighbors": "3"},
            {"min_neighbors": 2.5},
            {"min_detection_size": None},
            {"history_size": "lots"},
            {"history_size": True},
            {"fake_seed": 1.5},
            {"log_level": 10},
            {"database_path": 5},
            {"log_dir": None},
            {"cascade_path": ["a.xml"]},
        ]
        for change in wrong_types:
            with self.subTest(change=change):
                with open(self.config_path, 'w') as f:
                    json.dump(change, f)
                self.assertFalse(ConfigManager(self.config_path).validate_config())

    def test_validate_accepts_integer_scale_factor(self):
        """Whole numbers are valid where floats are expected."""
        self.config_manager.update_config(scale_factor=2)
        self.assertTrue(self.config_manager.validate_config())

    def test_change_callbacks(self):
        """Callbacks receive the new config until unregistered."""
        callback = Mock()
        self.config_manager.register_change_callback(callback)

        self.config_manager.update_config(history_size=5)
        callback.assert_called_once()
        self.assertEqual(callback.call_args[0][0].history_size, 5)

        self.config_manager.unregister_change_callback(callback)
        self.config_manager.update_config(history_size=6)
        callback.assert_called_once()

    def test_failing_callback_does_not_stop_update(self):
        """A raising callback is logged and the update still applies."""
        self.config_manager.register_change_callback(Mock(side_effect=RuntimeError("boom")))
        other = Mock()
        self.config_manager.register_change_callback(other)

        self.config_manager.update_config(log_level="DEBUG")

        other.assert_called_once()
        self.assertEqual(self.config_manager.get_config().log_level, "DEBUG")

    def test_reset_to_defaults(self):
        """Reset restores and saves the defaults."""
        self.config_manager.update_config(min_neighbors=9)
        self.config_manager.reset_to_defaults()

        self.assertEqual(ConfigManager(self.config_path).get_config().min_neighbors, 3)


if __name__ == '__main__':
    unittest.main()
