from __future__ import annotations

import datetime as dt
from decimal import Decimal
import unittest

import numpy as np

from svgchart import ParseError, PlotDataError
from svgchart.adapters.normalize import (
    normalize_frame,
    normalize_pairs,
    normalize_time_series,
    normalize_values,
    normalize_xy,
)
from svgchart.timeparse import from_epoch_seconds, to_epoch_seconds


class NormalizeTests(unittest.TestCase):
    def test_normalize_decimal_and_mask(self) -> None:
        data = [Decimal("1.5"), Decimal("2.25"), None, Decimal("3.5")]
        series = normalize_xy(y=data)
        self.assertEqual(series.x.tolist(), [0.0, 1.0, 2.0, 3.0])
        self.assertTrue(np.array_equal(series.mask, np.asarray([True, True, False, True])))

    def test_flat_pairs_split_into_x_and_y(self) -> None:
        series = normalize_pairs([0.1, 18, 8.55, 15.1234, 9.09876765, 4])
        self.assertEqual(series.x.tolist(), [0.1, 8.55, 9.09876765])
        self.assertEqual(series.y.tolist(), [18.0, 15.1234, 4.0])
        self.assertEqual(len(series), 3)

    def test_odd_flat_pairs_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_pairs([1, 2, 3])

    def test_short_annotations_are_padded(self) -> None:
        series = normalize_pairs([1, 1, 5, 5, 10, 10], descriptions=["first"], shapes=["one", "two"])
        self.assertEqual(series.descriptions, ("first", None, None))
        self.assertEqual(series.shapes, ("one", "two", None))

    def test_long_annotations_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_pairs([1, 1], descriptions=["a", "b"])

    def test_non_numeric_values_rejected(self) -> None:
        with self.assertRaises(PlotDataError):
            normalize_values([1, "two", 3])
        with self.assertRaises(PlotDataError):
            normalize_values([[1, 2], [3, 4]])

    def test_time_series_uses_template(self) -> None:
        series = normalize_time_series(["6/17/72", 11, "1/11/72", 7], template="%m/%d/%y")
        self.assertEqual(series.x.dtype, np.int64)
        self.assertEqual(from_epoch_seconds(series.x[0]).date(), dt.date(1972, 6, 17))
        self.assertEqual(series.y.tolist(), [11.0, 7.0])

    def test_time_series_rejects_unparseable_time(self) -> None:
        with self.assertRaises(ParseError):
            normalize_time_series(["not a date", 1])

    def test_normalize_torch_tensor(self) -> None:
        try:
            import torch
        except ImportError:
            self.skipTest("torch is not installed")

        series = normalize_xy(y=torch.tensor([1, 2, 3], dtype=torch.int64))
        self.assertEqual(series.y.dtype, np.float64)
        self.assertEqual(series.y.tolist(), [1.0, 2.0, 3.0])

    def test_normalize_pandas_series_with_missing_values(self) -> None:
        try:
            import pandas as pd
        except ImportError:
            self.skipTest("pandas is not installed")

        series = normalize_values(pd.Series([1, None, 3], dtype="Int64"))
        self.assertEqual(series.mask.tolist(), [True, False, True])
        self.assertEqual(series.values[series.mask].tolist(), [1.0, 3.0])

    def test_normalize_frame_reads_annotation_columns(self) -> None:
        try:
            import pandas as pd
        except ImportError:
            self.skipTest("pandas is not installed")

        df = pd.DataFrame(
            {
                "when": [1, 5, 10],
                "value": [1.0, 5.0, 10.0],
                "note": ["first", None, "third"],
                "marker": ["star", "star", None],
            }
        )
        series = normalize_frame(df, x="when", y="value", descriptions="note", shapes="marker")
        self.assertEqual(series.x.tolist(), [1.0, 5.0, 10.0])
        self.assertEqual(series.descriptions, ("first", None, "third"))
        self.assertEqual(series.shapes, ("star", "star", None))

        with self.assertRaises(PlotDataError):
            normalize_frame(df, x="missing", y="value")
        with self.assertRaises(PlotDataError):
            normalize_frame({"x": [1], "y": [2]})


class EpochSecondsTests(unittest.TestCase):
    def test_datetime_like_inputs(self) -> None:
        self.assertEqual(to_epoch_seconds(dt.datetime(1970, 1, 2)), 86400)
        self.assertEqual(to_epoch_seconds(dt.date(1970, 1, 3)), 172800)
        self.assertEqual(to_epoch_seconds(np.datetime64("1970-01-02")), 86400)
        aware = dt.datetime(1970, 1, 1, 1, 0, tzinfo=dt.timezone(dt.timedelta(hours=1)))
        self.assertEqual(to_epoch_seconds(aware), 0)

    def test_integers_pass_through(self) -> None:
        self.assertEqual(to_epoch_seconds(1234), 1234)
        self.assertEqual(to_epoch_seconds(np.int64(-60)), -60)
        self.assertEqual(to_epoch_seconds(60.0), 60)

    def test_strings(self) -> None:
        self.assertEqual(to_epoch_seconds("1970-01-01T01:00:00"), 3600)
        self.assertEqual(to_epoch_seconds("02/01/70", "%d/%m/%y"), 86400)

    def test_unparseable_inputs(self) -> None:
        for raw in ("not a date", "", object(), True, 1.5, float("nan")):
            with self.subTest(raw=raw):
                with self.assertRaises(ParseError):
                    to_epoch_seconds(raw)
        with self.assertRaises(ParseError):
            to_epoch_seconds("2024-01-31", "%d/%m/%Y")


if __name__ == "__main__":
    unittest.main()
