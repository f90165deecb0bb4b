import os
import sys

CURRENT_DIR = os.path.dirname(__file__)
PROJECT_ROOT = os.path.abspath(os.path.join(CURRENT_DIR, os.pardir))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)

from fxsessions.sessions.registry import TimeWindow, WindowCategory, default_registry
from fxsessions.sessions.timeline import (
    SLIVER_EPSILON_HOURS,
    build_timeline,
    event_position_percent,
    local_range_label,
    now_line_percent,
    project,
)
from fxsessions.utils.timeutils import normalize_hour

import unittest


LONDON = TimeWindow(id="london_session", name="London", start_utc=7, end_utc=16, session="London")
SYDNEY = TimeWindow(id="sydney_session", name="Sydney", start_utc=21, end_utc=30, session="Sydney")


def pct(hours: float) -> float:
    return hours / 24 * 100


class TestProject(unittest.TestCase):
    def test_london_in_tokyo_splits_at_midnight(self) -> None:
        blocks = project(LONDON, 9)
        self.assertEqual(len(blocks), 2)
        first, second = blocks
        self.assertAlmostEqual(first.left_percent, pct(16))
        self.assertAlmostEqual(first.width_percent, pct(8))
        self.assertAlmostEqual(second.left_percent, 0.0)
        self.assertAlmostEqual(second.width_percent, pct(1))
        self.assertEqual([b.key for b in blocks], ["london_session_1", "london_session_2"])
        self.assertEqual([b.segment for b in blocks], [1, 2])

    def test_single_block_in_utc(self) -> None:
        blocks = project(LONDON, 0)
        self.assertEqual(len(blocks), 1)
        self.assertAlmostEqual(blocks[0].left_percent, pct(7))
        self.assertAlmostEqual(blocks[0].width_percent, pct(9))
        self.assertEqual(blocks[0].y_level, 0)
        self.assertEqual(blocks[0].session, "London")

    def test_wrapping_window_in_utc(self) -> None:
        first, second = project(SYDNEY, 0)
        self.assertAlmostEqual(first.left_percent, pct(21))
        self.assertAlmostEqual(first.width_percent, pct(3))
        self.assertAlmostEqual(second.width_percent, pct(6))

    def test_wrapping_window_landing_on_midnight(self) -> None:
        blocks = project(SYDNEY, 3)
        self.assertEqual(len(blocks), 1)
        self.assertAlmostEqual(blocks[0].left_percent, 0.0)
        self.assertAlmostEqual(blocks[0].width_percent, pct(9))

    def test_negative_offset(self) -> None:
        first, second = project(LONDON, -8)
        self.assertAlmostEqual(first.left_percent, pct(23))
        self.assertAlmostEqual(first.width_percent, pct(1))
        self.assertAlmostEqual(second.width_percent, pct(8))

    def test_out_of_range_offset_wraps(self) -> None:
        self.assertEqual(project(LONDON, 33), project(LONDON, 9))

    def test_widths_cover_duration(self) -> None:
        windows = [w for g in default_registry() for w in g.windows]
        for window in windows:
            for half_hours in range(-28, 29):
                offset = half_hours / 2
                blocks = project(window, offset)
                self.assertIn(len(blocks), (1, 2))
                total = sum(b.width_percent for b in blocks)
                self.assertAlmostEqual(total, pct(window.duration), places=6)
                for b in blocks:
                    self.assertGreaterEqual(b.left_percent, 0.0)
                    self.assertLessEqual(b.right_percent, 100.0 + 1e-9)

    def test_deterministic(self) -> None:
        self.assertEqual(project(SYDNEY, 5.5), project(SYDNEY, 5.5))


class TestSliverBlock(unittest.TestCase):
    def test_residual_equal_to_epsilon_is_dropped(self) -> None:
        window = TimeWindow(id="w", name="W", start_utc=20, end_utc=24.5)
        self.assertEqual(len(project(window, 0, epsilon=0.5)), 1)
        self.assertEqual(len(project(window, 0, epsilon=0.25)), 2)

    def test_default_epsilon(self) -> None:
        self.assertEqual(SLIVER_EPSILON_HOURS, 0.001)
        tiny = TimeWindow(id="tiny", name="Tiny", start_utc=20, end_utc=24.0005)
        self.assertEqual(len(project(tiny, 0)), 1)
        small = TimeWindow(id="small", name="Small", start_utc=20, end_utc=24.002)
        self.assertEqual(len(project(small, 0)), 2)


class TestHourWrapping(unittest.TestCase):
    def test_tiny_negative_hour_wraps_to_zero(self) -> None:
        self.assertEqual(normalize_hour(-1e-16), 0.0)
        self.assertEqual(normalize_hour(24.0), 0.0)
        self.assertAlmostEqual(normalize_hour(-1), 23.0)

    def test_start_a_hair_before_local_midnight(self) -> None:
        blocks = project(LONDON, -7.000000000000001)
        self.assertEqual(len(blocks), 1)
        self.assertAlmostEqual(blocks[0].left_percent, 0.0)
        self.assertAlmostEqual(blocks[0].width_percent, pct(9))
        self.assertEqual(blocks[0].segment, 1)

    def test_now_line_stays_below_full_width(self) -> None:
        self.assertEqual(now_line_percent(-1e-17, 0), 0.0)


class TestTimeline(unittest.TestCase):
    def test_layers(self) -> None:
        blocks = build_timeline(default_registry(), 0, layers={WindowCategory.KILLZONE})
        self.assertEqual(
            {b.window_id for b in blocks},
            {"london_killzone", "ny_am_killzone", "ny_pm_killzone"},
        )
        self.assertTrue(all(b.y_level == 2 for b in blocks))

    def test_all_layers(self) -> None:
        blocks = build_timeline(default_registry(), 0)
        # Sydney and Tokyo wrap past UTC midnight, everything else fits
        self.assertEqual(len(blocks), 11)
        self.assertEqual({b.y_level for b in blocks if b.window_id.endswith("overlap")}, {1})

    def test_now_line(self) -> None:
        self.assertAlmostEqual(now_line_percent(12, 0), 50.0)
        self.assertAlmostEqual(now_line_percent(23, 2), pct(1))

    def test_event_position(self) -> None:
        self.assertAlmostEqual(event_position_percent("12:00", 5.5), pct(17.5))
        self.assertIsNone(event_position_percent("Tentative", 0))
        self.assertIsNone(event_position_percent(None, 0))

    def test_local_range_label(self) -> None:
        self.assertEqual(local_range_label(LONDON, 5.5), "12:30 - 21:30")
        self.assertEqual(local_range_label(SYDNEY, 0), "21:00 - 06:00")


if __name__ == '__main__':
    unittest.main()
