from __future__ import annotations

import unittest

import numpy as np

from svgchart import ConfigurationError
from svgchart.scales import AxisRange
from svgchart.timeparse import to_epoch_seconds
from svgchart.timescale import (
    NOMINAL_MONTH_SECONDS,
    compute_ticks,
    format_time_labels,
    parse_time_division,
)


DAY = 24 * 60 * 60


def _days(ticks) -> list[str]:
    return format_time_labels(ticks, "%Y-%m-%d")


class TimeDivisionParsingTests(unittest.TestCase):
    def test_amount_and_unit(self) -> None:
        division = parse_time_division("2 weeks")
        self.assertEqual((division.amount, division.unit), (2, "week"))
        self.assertEqual(parse_time_division("1 Month").unit, "month")
        self.assertEqual(parse_time_division("6hours").unit, "hour")

    def test_unit_defaults_to_days(self) -> None:
        division = parse_time_division("3")
        self.assertEqual((division.amount, division.unit), (3, "day"))

    def test_bad_specs_rejected(self) -> None:
        for spec in ("", "fortnight", "2 eons", "0 days", "-1 day", "1.5 days"):
            with self.subTest(spec=spec):
                with self.assertRaises(ConfigurationError):
                    parse_time_division(spec)


class CalendarTickTests(unittest.TestCase):
    def test_month_steps_clamp_to_month_end(self) -> None:
        ticks = compute_ticks("1 month", to_epoch_seconds("2024-01-31"), to_epoch_seconds("2024-05-15"))
        labels = _days(ticks)
        self.assertEqual(labels, ["2024-01-31", "2024-02-29", "2024-03-31", "2024-04-30", "2024-05-31"])
        self.assertNotIn("2024-03-02", labels)

    def test_month_overflow_carries_into_next_year(self) -> None:
        ticks = compute_ticks("11 months", to_epoch_seconds("2024-03-15"), to_epoch_seconds("2025-02-15"))
        self.assertEqual(_days(ticks), ["2024-03-15", "2025-02-15"])

    def test_year_steps_from_leap_day(self) -> None:
        ticks = compute_ticks("1 year", to_epoch_seconds("2024-02-29"), to_epoch_seconds("2026-01-01"))
        self.assertEqual(_days(ticks), ["2024-02-29", "2025-02-28", "2026-02-28"])

    def test_calendar_ticks_record_nominal_step(self) -> None:
        ticks = compute_ticks("2 months", to_epoch_seconds("2024-01-01"), to_epoch_seconds("2024-12-31"))
        self.assertAlmostEqual(ticks.step, NOMINAL_MONTH_SECONDS * 2)
        self.assertAlmostEqual(ticks.step, 365.25 / 12 * DAY * 2)
        self.assertTrue(np.all(np.diff(ticks.values) > 0))

    def test_single_instant_yields_one_tick(self) -> None:
        start = to_epoch_seconds("2024-06-01")
        self.assertEqual(compute_ticks("1 year", start, start).tolist(), [start])


class FixedTickTests(unittest.TestCase):
    def test_tick_just_past_maximum_is_kept_within_slack(self) -> None:
        ticks = compute_ticks("10 days", 0, 100 * DAY - 50_000)
        self.assertEqual(len(ticks), 11)
        self.assertEqual(ticks.tolist()[-1], 100 * DAY)
        self.assertEqual(ticks.step, 10 * DAY)

    def test_tick_beyond_slack_is_dropped(self) -> None:
        ticks = compute_ticks("10 days", 0, 100 * DAY - DAY - 1)
        self.assertEqual(ticks.tolist()[-1], 90 * DAY)

    def test_fixed_units_produce_integer_ticks(self) -> None:
        ticks = compute_ticks("6 hours", 0, DAY)
        self.assertEqual(ticks.tolist(), [0, 21600, 43200, 64800, 86400])
        self.assertEqual(ticks.values.dtype, np.int64)
        self.assertEqual(format_time_labels(ticks, "%H:%M"), ["00:00", "06:00", "12:00", "18:00", "00:00"])

    def test_falls_back_to_axis_range_step(self) -> None:
        axis = AxisRange(minimum=0.0, maximum=10.0, step_size=2.5, division_count=4, top_pad=0.5)
        self.assertEqual(compute_ticks(axis, 0.0, 10.0).tolist(), [0.0, 2.5, 5.0, 7.5, 10.0])

    def test_invalid_numeric_step_or_bounds_rejected(self) -> None:
        with self.assertRaises(ConfigurationError):
            compute_ticks(0, 0, 10)
        with self.assertRaises(ConfigurationError):
            compute_ticks(None, 0, 10)
        with self.assertRaises(ConfigurationError):
            compute_ticks("1 day", 10 * DAY, 0)


if __name__ == "__main__":
    unittest.main()
