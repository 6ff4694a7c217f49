import logging
import unittest
from pathlib import Path

from confswipe.config import load_settings


class TestSettings(unittest.TestCase):
    def test_defaults(self) -> None:
        s = load_settings({})
        self.assertTrue(s.source.endswith("events.csv"))
        self.assertEqual(s.state_path, Path.home() / ".confswipe" / "selection.json")
        self.assertEqual(s.log_level, logging.WARNING)

    def test_environment_overrides(self) -> None:
        s = load_settings(
            {
                "CONFSWIPE_SOURCE": "https://example.com/sheet.csv",
                "CONFSWIPE_STATE": "/tmp/sel.json",
                "CONFSWIPE_LOG_LEVEL": "debug",
            }
        )
        self.assertEqual(s.source, "https://example.com/sheet.csv")
        self.assertEqual(s.state_path, Path("/tmp/sel.json"))
        self.assertEqual(s.log_level, logging.DEBUG)

    def test_unknown_level_falls_back(self) -> None:
        self.assertEqual(load_settings({"CONFSWIPE_LOG_LEVEL": "chatty"}).log_level, logging.WARNING)


if __name__ == "__main__":
    unittest.main()
