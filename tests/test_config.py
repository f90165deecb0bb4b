import os
import sys
import tempfile

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fxsessions.config.schema import Config, config_from_dict, load_config
from fxsessions.sessions.registry import InvalidWindowError

import unittest


def _write_yaml(text: str) -> str:
    fd, path = tempfile.mkstemp(suffix=".yaml")
    with os.fdopen(fd, "w", encoding="utf-8") as fh:
        fh.write(text)
    return path


class TestLoadConfig(unittest.TestCase):
    def test_missing_file_gives_defaults(self) -> None:
        cfg = load_config(os.path.join(tempfile.gettempdir(), "does-not-exist-fxsessions.yaml"))
        self.assertEqual(cfg.offset_hours, 0.0)
        self.assertAlmostEqual(cfg.warning_hours, 0.25)
        self.assertEqual(cfg.calendar.range, "thisWeek")
        self.assertEqual(len(cfg.sessions), 4)

    def test_yaml_overrides(self) -> None:
        path = _write_yaml(
            "display:\n"
            "  timezone: IST\n"
            "status:\n"
            "  warning_minutes: 30\n"
            "calendar:\n"
            "  range: nextMonth\n"
            "  impact: high\n"
        )
        try:
            cfg = load_config(path)
        finally:
            os.remove(path)
        self.assertEqual(cfg.offset_hours, 5.5)
        self.assertAlmostEqual(cfg.warning_hours, 0.5)
        self.assertEqual(cfg.calendar.range, "nextMonth")
        self.assertEqual(cfg.calendar.impact, "high")
        self.assertEqual(cfg.calendar.events_file, "data/events.json")

    def test_explicit_offset_wins(self) -> None:
        cfg = config_from_dict({"display": {"timezone": "JST", "offset": -3.5}})
        self.assertEqual(cfg.offset_hours, -3.5)

    def test_adjust_dst_flag(self) -> None:
        self.assertFalse(Config().status.adjust_dst)
        cfg = config_from_dict({"status": {"adjust_dst": True}})
        self.assertTrue(cfg.status.adjust_dst)
        self.assertAlmostEqual(cfg.warning_hours, 0.25)

    def test_unknown_timezone(self) -> None:
        cfg = config_from_dict({"display": {"timezone": "Mars"}})
        with self.assertRaises(ValueError):
            cfg.offset_hours

    def test_custom_sessions(self) -> None:
        path = _write_yaml(
            "sessions:\n"
            "  - name: Frankfurt\n"
            "    main:\n"
            "      key: frankfurt_session\n"
            "      range: [6, 15]\n"
        )
        try:
            cfg = load_config(path)
        finally:
            os.remove(path)
        self.assertEqual([g.name for g in cfg.sessions], ["Frankfurt"])
        self.assertEqual(cfg.sessions[0].main.duration, 9)

    def test_invalid_session_is_fatal(self) -> None:
        with self.assertRaises(InvalidWindowError):
            config_from_dict({"sessions": [{"name": "Bad", "main": {"key": "bad", "range": [8, 8]}}]})

    def test_dataclass_defaults(self) -> None:
        cfg = Config()
        self.assertEqual(cfg.display.timezone, "UTC")
        self.assertEqual(cfg.sessions[0].name, "Sydney")


if __name__ == '__main__':
    unittest.main()
