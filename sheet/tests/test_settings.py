# test_settings.py
import logging
import os
import tempfile
import unittest
from unittest.mock import patch

from sheet.settings import (
    DEFAULTS_PATH,
    LoggingCfg,
    configure_logging,
    load_settings,
    new_inventory,
)


def _write(text: str) -> str:
    fd, path = tempfile.mkstemp(suffix=".yaml")
    with os.fdopen(fd, "w", encoding="utf-8") as f:
        f.write(text)
    return path


class TestLoadSettings(unittest.TestCase):
    def test_bundled_defaults(self):
        cfg = load_settings(DEFAULTS_PATH)
        self.assertEqual(cfg.inventory.max_slots, 50)
        self.assertFalse(cfg.inventory.unlimited_slots)
        self.assertEqual(cfg.catalog.path, "satchel/data/catalog.yaml")
        self.assertEqual(cfg.logging.level, "INFO")

    def test_missing_file_uses_defaults(self):
        cfg = load_settings("/nonexistent/settings.yaml")
        self.assertEqual(cfg.inventory.max_slots, 50)
        self.assertFalse(cfg.inventory.unlimited_quantity)

    def test_partial_overrides(self):
        path = _write("inventory:\n  max_slots: 12\n  unlimited_quantity: 'yes'\nlogging:\n  level: debug\n")
        self.addCleanup(os.remove, path)
        cfg = load_settings(path)
        self.assertEqual(cfg.inventory.max_slots, 12)
        self.assertTrue(cfg.inventory.unlimited_quantity)
        self.assertFalse(cfg.inventory.unlimited_slots)
        self.assertEqual(cfg.logging.level, "DEBUG")

    def test_non_mapping_raises(self):
        path = _write("- just\n- a list\n")
        self.addCleanup(os.remove, path)
        with self.assertRaises(ValueError):
            load_settings(path)

    def test_new_inventory_uses_config(self):
        path = _write("inventory:\n  max_slots: 7\n  unlimited_slots: true\n")
        self.addCleanup(os.remove, path)
        state = new_inventory(load_settings(path).inventory)
        self.assertEqual(state.max_slots, 7)
        self.assertTrue(state.unlimited_slots)
        self.assertEqual(state.entries, ())


class TestConfigureLogging(unittest.TestCase):
    def test_passes_level_and_format(self):
        with patch("sheet.settings.logging.basicConfig") as basic:
            configure_logging(LoggingCfg(level="WARNING", format="%(message)s"))
        basic.assert_called_once_with(level=logging.WARNING, format="%(message)s")

    def test_unknown_level_falls_back_to_info(self):
        with patch("sheet.settings.logging.basicConfig") as basic:
            configure_logging(LoggingCfg(level="CHATTY"))
        self.assertEqual(basic.call_args.kwargs["level"], logging.INFO)


if __name__ == "__main__":
    unittest.main()
