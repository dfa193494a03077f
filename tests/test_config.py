"""Unit tests for configuration loading."""

import json
import shutil
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from wrapedit.config import ConfigLoader, EditorConfig, load_config, validate_setting
from wrapedit.constants import EditorConstants


class TestConfigLoader(unittest.TestCase):
    """Test reading config.json and environment overrides."""

    def setUp(self):
        self.temp_dir = tempfile.mkdtemp()
        self.loader = ConfigLoader(Path(self.temp_dir))

    def tearDown(self):
        shutil.rmtree(self.temp_dir)

    def write_settings(self, data):
        with open(self.loader.config_file, 'w', encoding='utf-8') as f:
            json.dump(data, f)

    def test_defaults_without_file(self):
        config = self.loader.load(environ={})
        self.assertEqual(config, EditorConfig())
        self.assertIsNone(config.max_line_length)
        self.assertEqual(config.poll_timeout, EditorConstants.POLL_TIMEOUT)
        self.assertEqual(config.status_rows, 1)

    def test_file_settings_applied(self):
        self.write_settings({"max_line_length": 4096, "poll_timeout": 0.5, "status_rows": 0})
        config = self.loader.load(environ={})
        self.assertEqual(config.max_line_length, 4096)
        self.assertEqual(config.poll_timeout, 0.5)
        self.assertEqual(config.status_rows, 0)

    def test_invalid_values_fall_back(self):
        self.write_settings({"max_line_length": -3, "poll_timeout": "fast", "status_rows": True})
        config = self.loader.load(environ={})
        self.assertEqual(config, EditorConfig())

    def test_unknown_keys_ignored(self):
        self.write_settings({"font_name": "Courier", "max_line_length": 10})
        config = self.loader.load(environ={})
        self.assertEqual(config.max_line_length, 10)
        self.assertFalse(hasattr(config, "font_name"))

    def test_corrupted_file_ignored(self):
        with open(self.loader.config_file, 'w', encoding='utf-8') as f:
            f.write("{ invalid json }")
        config = self.loader.load(environ={})
        self.assertEqual(config, EditorConfig())

    def test_non_dict_file_ignored(self):
        self.write_settings(["max_line_length", 5])
        config = self.loader.load(environ={})
        self.assertEqual(config, EditorConfig())

    def test_environment_overrides_file(self):
        self.write_settings({"max_line_length": 100, "poll_timeout": 0.5})
        config = self.loader.load(environ={
            "WRAPEDIT_MAX_LINE_LENGTH": "200",
            "WRAPEDIT_POLL_TIMEOUT": "0.05",
        })
        self.assertEqual(config.max_line_length, 200)
        self.assertEqual(config.poll_timeout, 0.05)

    def test_environment_can_remove_limit(self):
        self.write_settings({"max_line_length": 100})
        for value in ("", "none", "0"):
            config = self.loader.load(environ={"WRAPEDIT_MAX_LINE_LENGTH": value})
            self.assertIsNone(config.max_line_length)

    def test_invalid_environment_ignored(self):
        config = self.loader.load(environ={
            "WRAPEDIT_MAX_LINE_LENGTH": "lots",
            "WRAPEDIT_POLL_TIMEOUT": "soon",
        })
        self.assertEqual(config, EditorConfig())

    def test_load_config_uses_platform_directory(self):
        with patch('wrapedit.config.platformdirs.user_config_dir', return_value=self.temp_dir) as mock_dir:
            self.write_settings({"status_rows": 2})
            config = load_config(environ={})
        mock_dir.assert_called_once_with("wrapedit")
        self.assertEqual(config.status_rows, 2)


class TestValidateSetting(unittest.TestCase):

    def test_max_line_length(self):
        self.assertTrue(validate_setting("max_line_length", None))
        self.assertTrue(validate_setting("max_line_length", 1))
        self.assertFalse(validate_setting("max_line_length", 0))
        self.assertFalse(validate_setting("max_line_length", 1.5))

    def test_poll_timeout(self):
        self.assertTrue(validate_setting("poll_timeout", 0.1))
        self.assertTrue(validate_setting("poll_timeout", 1))
        self.assertFalse(validate_setting("poll_timeout", 0))
        self.assertFalse(validate_setting("poll_timeout", 60))

    def test_status_rows(self):
        self.assertTrue(validate_setting("status_rows", 0))
        self.assertFalse(validate_setting("status_rows", 4))

    def test_unknown(self):
        self.assertFalse(validate_setting("theme", "dark"))


if __name__ == '__main__':
    unittest.main()
