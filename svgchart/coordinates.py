from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, get_args

from svgchart.errors import ConfigurationError
from svgchart.scales import AxisRange


StackMode = Literal["none", "side"]

STACK_MODES: tuple[str, ...] = get_args(StackMode)
MAX_BAR_GAP = 10.0


@dataclass(frozen=True)
class BarLayout:
    """Per-category sizing for bar charts.

    ``category_thickness`` is the pixel extent of one category across the value
    axis, ``step_span`` the pixel extent of one axis step along it.
    """

    category_thickness: float
    step_span: float
    stack: StackMode = "none"
    bar_gap: bool = True

    def __post_init__(self) -> None:
        if not self.category_thickness > 0:
            raise ConfigurationError("category_thickness must be > 0")
        if not self.step_span > 0:
            raise ConfigurationError("step_span must be > 0")
        if self.stack not in STACK_MODES:
            raise ConfigurationError(f"unknown stack mode: {self.stack!r}")

    @property
    def gap(self) -> float:
        if not self.bar_gap:
            return 0.0
        if self.category_thickness < MAX_BAR_GAP:
            return self.category_thickness / 2.0
        return MAX_BAR_GAP

    def bar_thickness(self, series_count: int) -> float:
        thickness = self.category_thickness - self.gap
        if self.stack == "side":
            thickness /= series_count
        return thickness


@dataclass(frozen=True)
class BarGeometry:
    offset: float
    length: float
    position: float
    thickness: float

    @property
    def end(self) -> float:
        return self.offset + self.length


@dataclass(frozen=True)
class PointGeometry:
    x: float
    y: float


def map_to_geometry(
    value: float,
    axis_range: AxisRange,
    layout: BarLayout,
    *,
    series_index: int,
    series_count: int,
    category_index: int = 0,
) -> BarGeometry:
    if series_count < 1:
        raise ConfigurationError("series_count must be >= 1")
    if not 0 <= series_index < series_count:
        raise ConfigurationError(f"series_index {series_index} outside [0, {series_count})")

    value = float(value)
    minimum = axis_range.minimum
    unit = layout.step_span / float(axis_range.step_size)

    # value  min  length          offset
    #  +ve   +ve  |value| - min   |min|
    #  +ve   -ve  |value|         |min|
    #  -ve   -ve  |value|         |min| + value
    length = (abs(value) - max(0.0, minimum)) * unit
    offset = (abs(minimum) + min(0.0, value)) * unit

    thickness = layout.bar_thickness(series_count)
    position = layout.category_thickness * category_index + layout.gap / 2.0
    if layout.stack == "side":
        position += thickness * series_index
    return BarGeometry(offset=offset, length=length, position=position, thickness=thickness)


def value_from_geometry(geometry: BarGeometry, axis_range: AxisRange, step_span: float) -> float:
    unit = float(axis_range.step_size) / step_span
    offset = geometry.offset * unit
    length = geometry.length * unit
    minimum = axis_range.minimum
    if minimum >= 0:
        return offset + length
    if offset < abs(minimum) - 1e-9 * max(1.0, abs(minimum)):
        return offset - abs(minimum)
    return length


def map_point(
    x: float,
    y: float,
    x_range: AxisRange,
    y_range: AxisRange,
    *,
    x_span: float,
    y_span: float,
    height: float,
) -> PointGeometry:
    """Map a data point into plot-area pixels with the y axis pointing down.

    ``x_span``/``y_span`` are the pixels per axis step.
    """
    px = (float(x) - x_range.minimum) / x_range.step_size * x_span
    py = float(height) - (float(y) - y_range.minimum) / y_range.step_size * y_span
    return PointGeometry(x=px, y=py)


def step_span_for(axis_range: AxisRange, extent: float) -> float:
    if not extent > 0:
        raise ConfigurationError("drawing extent must be > 0")
    return float(extent) / axis_range.division_count
