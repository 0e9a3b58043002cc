from __future__ import annotations

from collections.abc import Sequence
import dataclasses
from dataclasses import dataclass
import logging
from typing import Any

import numpy as np

from svgchart.adapters import normalize_values
from svgchart.coordinates import BarGeometry, BarLayout, PointGeometry, StackMode, map_point, map_to_geometry, step_span_for
from svgchart.errors import PlotDataError
from svgchart.labels import BarLabelConfig, PopupConfig, format_bar_label, format_popup
from svgchart.scales import AxisRange, ScaleOverrides, TickSet, compute_axis_range, format_ticks_for_axis, numeric_ticks
from svgchart.series import PlotSeries, SeriesData, TimeSeriesData
from svgchart.shapes import Primitive, ShapeCriteria, default_shape_criteria
from svgchart.timeparse import to_epoch_seconds
from svgchart.timescale import DEFAULT_TIME_FORMAT, TimeDivision, compute_ticks, format_time_labels


LOGGER = logging.getLogger(__name__)

DATAPOINT_TEXT_GAP = 5.0


@dataclass(frozen=True)
class BarElement:
    field: str
    series_index: int
    value: float
    geometry: BarGeometry
    css_class: str
    text: str
    text_anchor: tuple[float, float]


@dataclass(frozen=True)
class BarChartLayout:
    axis_range: AxisRange
    ticks: TickSet
    tick_labels: list[str]
    field_labels: list[str]
    bars: list[BarElement]


@dataclass(frozen=True)
class PointElement:
    series_index: int
    x: float
    y: float
    geometry: PointGeometry
    primitives: list[Primitive]
    popup: str


@dataclass(frozen=True)
class PlotLayout:
    x_range: AxisRange
    y_range: AxisRange
    x_ticks: TickSet
    y_ticks: TickSet
    x_labels: list[str]
    y_labels: list[str]
    points: list[PointElement]
    lines: list[list[PointGeometry]]


def layout_horizontal_bars(
    fields: Sequence[str],
    series: Sequence[Any],
    *,
    width: float,
    height: float,
    overrides: ScaleOverrides | None = None,
    stack: StackMode = "none",
    bar_gap: bool = True,
    label_config: BarLabelConfig | None = None,
) -> BarChartLayout:
    if not fields:
        raise PlotDataError("at least one field is required")
    if not series:
        raise PlotDataError("at least one data series is required")

    datasets = [s if isinstance(s, SeriesData) else normalize_values(s) for s in series]
    for idx, ds in enumerate(datasets):
        if ds.values.size != len(fields):
            raise PlotDataError(f"series {idx} has {ds.values.size} values for {len(fields)} fields")

    axis_range = compute_axis_range(datasets, overrides or ScaleOverrides(include_zero=True))
    ticks = numeric_ticks(axis_range)
    layout = BarLayout(
        category_thickness=float(height) / len(fields),
        step_span=step_span_for(axis_range, width),
        stack=stack,
        bar_gap=bar_gap,
    )
    cfg = label_config or BarLabelConfig()

    bars: list[BarElement] = []
    for field_index, field in enumerate(fields):
        # Fields are laid out bottom-up: the first field sits in the lowest row.
        category_index = len(fields) - 1 - field_index
        for series_index, ds in enumerate(datasets):
            if not ds.mask[field_index]:
                continue
            value = float(ds.values[field_index])
            geometry = map_to_geometry(
                value,
                axis_range,
                layout,
                series_index=series_index,
                series_count=len(datasets),
                category_index=category_index,
            )
            total = float(np.sum(ds.values[ds.mask]))
            text = format_bar_label(value, total, cfg) if cfg.show_actual_values or cfg.show_percent else ""
            anchor = (
                geometry.end + DATAPOINT_TEXT_GAP,
                geometry.position + geometry.thickness / 2.0 + cfg.font_size / 2.0,
            )
            bars.append(
                BarElement(
                    field=str(field),
                    series_index=series_index,
                    value=value,
                    geometry=geometry,
                    css_class=f"fill{series_index + 1}",
                    text=text,
                    text_anchor=anchor,
                )
            )

    return BarChartLayout(
        axis_range=axis_range,
        ticks=ticks,
        tick_labels=format_ticks_for_axis(ticks),
        field_labels=[str(f) for f in fields],
        bars=bars,
    )


def layout_plot(
    series: Sequence[PlotSeries],
    *,
    width: float,
    height: float,
    x_overrides: ScaleOverrides | None = None,
    y_overrides: ScaleOverrides | None = None,
    shape_criteria: ShapeCriteria | None = None,
    popups: PopupConfig | None = None,
    show_lines: bool = True,
) -> PlotLayout:
    _require_series(series)
    x_range = compute_axis_range([_masked(s.x, s.mask) for s in series], x_overrides)
    x_ticks = numeric_ticks(x_range)
    return _layout_points(
        series,
        width=width,
        height=height,
        x_range=x_range,
        x_ticks=x_ticks,
        x_labels=format_ticks_for_axis(x_ticks),
        y_overrides=y_overrides,
        shape_criteria=shape_criteria,
        popups=popups or PopupConfig(),
        time_format=None,
        show_lines=show_lines,
    )


def layout_time_series(
    series: Sequence[TimeSeriesData],
    *,
    width: float,
    height: float,
    timescale_divisions: str | TimeDivision | None = None,
    x_label_format: str = DEFAULT_TIME_FORMAT,
    min_time: Any = None,
    max_time: Any = None,
    scale_x_integers: bool = False,
    y_overrides: ScaleOverrides | None = None,
    shape_criteria: ShapeCriteria | None = None,
    popups: PopupConfig | None = None,
    show_lines: bool = True,
) -> PlotLayout:
    _require_series(series)
    popup_cfg = popups or PopupConfig()
    x_overrides = ScaleOverrides(
        min_value=None if min_time is None else to_epoch_seconds(min_time),
        max_value=None if max_time is None else to_epoch_seconds(max_time),
        scale_integers=scale_x_integers,
    )
    x_range = compute_axis_range([_masked(s.x, s.mask) for s in series], x_overrides)
    x_ticks = compute_ticks(
        timescale_divisions if timescale_divisions is not None else x_range,
        x_range.minimum,
        x_range.maximum,
    )
    # Pixel mapping follows the tick step; calendar ticks use their nominal length.
    x_axis = dataclasses.replace(
        x_range,
        step_size=x_ticks.step,
        division_count=max(1, len(x_ticks) - 1),
    )
    return _layout_points(
        series,
        width=width,
        height=height,
        x_range=x_axis,
        x_ticks=x_ticks,
        x_labels=format_time_labels(x_ticks, x_label_format),
        y_overrides=y_overrides,
        shape_criteria=shape_criteria,
        popups=popup_cfg,
        time_format=popup_cfg.popup_format,
        show_lines=show_lines,
    )


def _layout_points(
    series: Sequence[PlotSeries],
    *,
    width: float,
    height: float,
    x_range: AxisRange,
    x_ticks: TickSet,
    x_labels: list[str],
    y_overrides: ScaleOverrides | None,
    shape_criteria: ShapeCriteria | None,
    popups: PopupConfig,
    time_format: str | None,
    show_lines: bool,
) -> PlotLayout:
    criteria = shape_criteria if shape_criteria is not None else default_shape_criteria()
    y_range = compute_axis_range([_masked(s.y, s.mask) for s in series], y_overrides)
    y_ticks = numeric_ticks(y_range)
    x_span = step_span_for(x_range, width)
    y_span = step_span_for(y_range, height)

    points: list[PointElement] = []
    lines: list[list[PointGeometry]] = []
    for series_index, s in enumerate(series):
        mapped: list[tuple[float, PointGeometry]] = []
        for i in np.flatnonzero(s.mask).tolist():
            x = s.x[i].item()
            y = s.y[i].item()
            geometry = map_point(x, y, x_range, y_range, x_span=x_span, y_span=y_span, height=height)
            primitives = criteria.dispatch(
                geometry.x,
                geometry.y,
                series_index,
                s.shapes[i],
                radius=popups.popup_radius,
            )
            popup = format_popup(
                (x, y),
                s.descriptions[i],
                round_popups=popups.round_popups,
                time_format=time_format,
            )
            points.append(
                PointElement(series_index=series_index, x=x, y=y, geometry=geometry, primitives=primitives, popup=popup)
            )
            mapped.append((x, geometry))
        if show_lines and len(mapped) > 1:
            lines.append([g for _, g in sorted(mapped, key=lambda item: item[0])])

    LOGGER.debug("laid out %d points across %d series", len(points), len(series))
    return PlotLayout(
        x_range=x_range,
        y_range=y_range,
        x_ticks=x_ticks,
        y_ticks=y_ticks,
        x_labels=x_labels,
        y_labels=format_ticks_for_axis(y_ticks),
        points=points,
        lines=lines,
    )


def _require_series(series: Sequence[PlotSeries]) -> None:
    if not series:
        raise PlotDataError("at least one data series is required")
    for s in series:
        if not isinstance(s, PlotSeries):
            raise PlotDataError(f"expected a normalized plot series, got {type(s).__name__}")


def _masked(values: np.ndarray, mask: np.ndarray) -> np.ndarray:
    return np.where(mask, values.astype(np.float64), np.nan)
