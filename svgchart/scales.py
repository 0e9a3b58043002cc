from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
import logging
import math
from typing import Any

import numpy as np

from svgchart.errors import ConfigurationError, PlotDataError
from svgchart.series import PlotSeries, SeriesData


LOGGER = logging.getLogger(__name__)

DEFAULT_DIVISION_COUNT = 10
DEFAULT_ZERO_RANGE_PAD = 10.0
TOP_PAD_RATIO = 1.0 / 20.0
MAX_TICK_DECIMALS = 6


@dataclass(frozen=True)
class ScaleOverrides:
    min_value: float | None = None
    max_value: float | None = None
    scale_divisions: float | None = None
    division_count: int | None = None
    scale_integers: bool = False
    include_zero: bool = False
    sum_series: bool = False
    zero_range_pad: float = DEFAULT_ZERO_RANGE_PAD

    def __post_init__(self) -> None:
        if self.scale_divisions is not None:
            _require_positive("scale_divisions", self.scale_divisions)
        if self.division_count is not None:
            try:
                whole = int(self.division_count) == self.division_count
            except (TypeError, ValueError, OverflowError):
                whole = False
            if isinstance(self.division_count, bool) or not whole:
                raise ConfigurationError(f"division_count must be an integer, got {self.division_count!r}")
            _require_positive("division_count", self.division_count)
        _require_positive("zero_range_pad", self.zero_range_pad)
        if self.min_value is not None and self.max_value is not None and self.max_value < self.min_value:
            raise ConfigurationError(f"max_value {self.max_value!r} is below min_value {self.min_value!r}")


def _require_positive(name: str, value: Any) -> None:
    try:
        positive = value > 0
    except TypeError:
        positive = False
    if isinstance(value, bool) or not positive:
        raise ConfigurationError(f"{name} must be a number > 0, got {value!r}")


@dataclass(frozen=True)
class AxisRange:
    minimum: float
    maximum: float
    step_size: float
    division_count: int
    top_pad: float

    @property
    def span(self) -> float:
        return self.maximum - self.minimum

    @property
    def scale_maximum(self) -> float:
        return self.maximum + self.top_pad


@dataclass(frozen=True)
class TickSet:
    values: np.ndarray
    step: float

    def __len__(self) -> int:
        return int(self.values.size)

    def tolist(self) -> list[float]:
        return self.values.tolist()


def compute_axis_range(values: Any, overrides: ScaleOverrides | None = None) -> AxisRange:
    opts = overrides or ScaleOverrides()
    flat = _collect_values(values, sum_series=opts.sum_series)

    if flat.size == 0 and (opts.min_value is None or opts.max_value is None):
        raise PlotDataError("cannot compute an axis range without finite values")

    if opts.min_value is not None:
        minimum = float(opts.min_value)
    else:
        minimum = float(np.min(flat))
        if opts.include_zero and minimum > 0:
            minimum = 0.0
    maximum = float(opts.max_value) if opts.max_value is not None else float(np.max(flat))

    if maximum < minimum:
        raise ConfigurationError(f"axis maximum {maximum!r} is below minimum {minimum!r}")

    if flat.size and (float(np.min(flat)) < minimum or float(np.max(flat)) > maximum):
        LOGGER.warning(
            "axis range [%s, %s] does not cover data [%s, %s]; points will render outside the plot area",
            minimum,
            maximum,
            float(np.min(flat)),
            float(np.max(flat)),
        )

    span = maximum - minimum
    top_pad = opts.zero_range_pad if span == 0 else span * TOP_PAD_RATIO
    scale_span = span + top_pad

    if opts.scale_divisions is not None:
        step = float(opts.scale_divisions)
    else:
        step = scale_span / float(opts.division_count or DEFAULT_DIVISION_COUNT)

    if opts.scale_integers:
        step = float(max(1, math.floor(step + 0.5)))

    divisions = max(1, math.ceil(scale_span / step - 1e-9))
    LOGGER.debug(
        "axis range min=%s max=%s top_pad=%s step=%s divisions=%s",
        minimum,
        maximum,
        top_pad,
        step,
        divisions,
    )
    return AxisRange(minimum=minimum, maximum=maximum, step_size=step, division_count=divisions, top_pad=top_pad)


def numeric_ticks(axis_range: AxisRange) -> TickSet:
    step = axis_range.step_size
    ticks = axis_range.minimum + np.arange(axis_range.division_count + 1, dtype=np.float64) * step
    # Normalize floating-point drift so values like -4.44e-16 become 0.
    ticks[np.isclose(ticks, 0.0, rtol=0.0, atol=step * 1e-9)] = 0.0
    return TickSet(values=ticks, step=step)


def tick_decimals(step: float) -> int:
    """Fraction digits needed so labels one ``step`` apart read differently."""
    if not (np.isfinite(step) and step > 0):
        return 0
    text = np.format_float_positional(float(step), precision=MAX_TICK_DECIMALS, trim="-")
    fraction = text.partition(".")[2]
    if not fraction and step < 1:
        return MAX_TICK_DECIMALS
    return len(fraction)


def format_tick(value: float, *, decimals: int = 0) -> str:
    if not np.isfinite(value):
        return str(value)
    out = np.format_float_positional(float(value), precision=decimals, unique=False, trim="-")
    return "0" if out == "-0" else out


def format_ticks_for_axis(ticks: TickSet) -> list[str]:
    decimals = tick_decimals(ticks.step)
    return [format_tick(v, decimals=decimals) for v in ticks.tolist()]


def _collect_values(values: Any, *, sum_series: bool) -> np.ndarray:
    series = _as_series(values)
    if sum_series and len(series) > 1:
        width = max(s.size for s in series)
        totals = np.zeros(width, dtype=np.float64)
        for s in series:
            totals[: s.size] += np.where(np.isfinite(s), s, 0.0)
        return totals
    if not series:
        return np.empty(0, dtype=np.float64)
    flat = np.concatenate(series)
    return flat[np.isfinite(flat)]


def _as_series(values: Any) -> list[np.ndarray]:
    if isinstance(values, SeriesData):
        return [values.values]
    if isinstance(values, PlotSeries):
        return [np.where(values.mask, values.y, np.nan)]
    if isinstance(values, np.ndarray):
        arr = values.astype(np.float64, copy=False)
        if arr.ndim <= 1:
            return [arr.reshape(-1)]
        if arr.ndim == 2:
            return [row for row in arr]
        raise PlotDataError("axis values must be 1-D or 2-D")
    if isinstance(values, (str, bytes)) or not isinstance(values, Sequence):
        raise PlotDataError(f"unsupported axis values type: {type(values)!r}")

    items = list(values)
    if items and all(_is_series_like(item) for item in items):
        return [s for item in items for s in _as_series(item)]
    try:
        return [np.asarray([np.nan if v is None else v for v in items], dtype=np.float64)]
    except (TypeError, ValueError) as exc:
        raise PlotDataError("axis values must be numeric") from exc


def _is_series_like(item: Any) -> bool:
    if isinstance(item, (SeriesData, PlotSeries, np.ndarray)):
        return True
    return isinstance(item, Sequence) and not isinstance(item, (str, bytes))
