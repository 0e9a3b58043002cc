from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np

from svgchart.errors import PlotDataError
from svgchart.series import PlotSeries, SeriesData, TimeSeriesData
from svgchart.timeparse import to_epoch_seconds


try:
    import pandas as pd
except ImportError:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]

try:
    import torch
except ImportError:  # pragma: no cover - optional dependency
    torch = None  # type: ignore[assignment]


def normalize_values(values: Any, *, title: str | None = None) -> SeriesData:
    if values is None:
        raise PlotDataError("values input is required")
    arr = _to_float_array(values, label="values")
    if arr.size == 0:
        raise PlotDataError("empty series")
    return SeriesData(values=arr, mask=np.isfinite(arr), title=title)


def normalize_xy(
    y: Any = None,
    *,
    x: Any = None,
    descriptions: Sequence[str | None] | None = None,
    shapes: Sequence[str | None] | None = None,
    title: str | None = None,
) -> PlotSeries:
    if y is None:
        raise PlotDataError("y input is required")

    y_arr = _to_float_array(y, label="y")
    if y_arr.size == 0:
        raise PlotDataError("empty series")
    x_arr = np.arange(y_arr.size, dtype=np.float64) if x is None else _to_float_array(x, label="x")
    return _build_plot_series(PlotSeries, x_arr, y_arr, descriptions, shapes, title)


def normalize_pairs(
    flat: Sequence[Any],
    *,
    descriptions: Sequence[str | None] | None = None,
    shapes: Sequence[str | None] | None = None,
    title: str | None = None,
) -> PlotSeries:
    """Split a flat ``[x0, y0, x1, y1, ...]`` list into a plot series."""
    x_raw, y_raw = _split_pairs(flat)
    x_arr = _to_float_array(x_raw, label="x")
    y_arr = _to_float_array(y_raw, label="y")
    return _build_plot_series(PlotSeries, x_arr, y_arr, descriptions, shapes, title)


def normalize_frame(
    frame: Any,
    *,
    x: str = "x",
    y: str = "y",
    descriptions: str | None = None,
    shapes: str | None = None,
    title: str | None = None,
) -> PlotSeries:
    """Read a plot series from DataFrame columns.

    ``descriptions`` and ``shapes`` name optional annotation columns; missing
    cells in them mean "no description" and "default shape".
    """
    if pd is None:
        raise PlotDataError("pandas is required to normalize a DataFrame")
    if not isinstance(frame, pd.DataFrame):
        raise PlotDataError(f"expected a pandas DataFrame, got {type(frame).__name__}")
    x_arr = _to_float_array(_frame_column(frame, x), label="x")
    y_arr = _to_float_array(_frame_column(frame, y), label="y")
    return _build_plot_series(
        PlotSeries,
        x_arr,
        y_arr,
        _frame_annotations(frame, descriptions),
        _frame_annotations(frame, shapes),
        title,
    )


def normalize_time_series(
    flat: Sequence[Any],
    *,
    template: str | None = None,
    descriptions: Sequence[str | None] | None = None,
    shapes: Sequence[str | None] | None = None,
    title: str | None = None,
) -> TimeSeriesData:
    """Like ``normalize_pairs`` but every x is converted to epoch seconds first."""
    x_raw, y_raw = _split_pairs(flat)
    x_arr = np.asarray([to_epoch_seconds(v, template) for v in x_raw], dtype=np.int64)
    y_arr = _to_float_array(y_raw, label="y")
    return _build_plot_series(TimeSeriesData, x_arr, y_arr, descriptions, shapes, title)


def pad_annotations(values: Sequence[str | None] | None, count: int, *, label: str) -> tuple[str | None, ...]:
    if values is None:
        return (None,) * count
    if isinstance(values, (str, bytes)):
        raise PlotDataError(f"{label} must be a sequence of strings")
    items = list(values)
    if len(items) > count:
        raise PlotDataError(f"{label} has {len(items)} entries for {count} points")
    return tuple(items) + (None,) * (count - len(items))


def _build_plot_series(
    cls: type[PlotSeries],
    x_arr: np.ndarray,
    y_arr: np.ndarray,
    descriptions: Sequence[str | None] | None,
    shapes: Sequence[str | None] | None,
    title: str | None,
) -> PlotSeries:
    if x_arr.shape != y_arr.shape:
        raise PlotDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
    if y_arr.size == 0:
        raise PlotDataError("empty series")

    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    if not np.any(mask):
        raise PlotDataError("series contains no finite points")

    count = int(y_arr.size)
    return cls(
        x=x_arr,
        y=y_arr,
        mask=mask,
        descriptions=pad_annotations(descriptions, count, label="descriptions"),
        shapes=pad_annotations(shapes, count, label="shapes"),
        title=title,
    )


def _split_pairs(flat: Sequence[Any]) -> tuple[list[Any], list[Any]]:
    if isinstance(flat, (str, bytes)) or not isinstance(flat, (Sequence, np.ndarray)):
        raise PlotDataError(f"unsupported pair input type: {type(flat)!r}")
    items = list(flat)
    if not items:
        raise PlotDataError("empty series")
    if len(items) % 2 != 0:
        raise PlotDataError("data must contain x,y pairs")
    return items[0::2], items[1::2]


def _frame_column(frame: Any, column: str) -> Any:
    if column not in frame.columns:
        raise PlotDataError(f"column not found: {column}")
    return frame[column]


def _frame_annotations(frame: Any, column: str | None) -> list[str | None] | None:
    if column is None:
        return None
    return [None if pd.isna(v) else str(v) for v in _frame_column(frame, column).tolist()]


def _to_float_array(value: Any, *, label: str) -> np.ndarray:
    """Coerce one numeric column to float64; missing entries become NaN."""
    if torch is not None and isinstance(value, torch.Tensor):
        value = value.detach().cpu().to(torch.float64).numpy()
    elif pd is not None and isinstance(value, pd.Series):
        value = value.to_numpy(dtype=object)
    elif isinstance(value, (str, bytes)) or not isinstance(value, (Sequence, np.ndarray)):
        raise PlotDataError(f"unsupported {label} input type: {type(value)!r}")

    try:
        arr = value if isinstance(value, np.ndarray) else np.asarray(value, dtype=object)
    except ValueError as exc:
        raise PlotDataError(f"{label} must be 1-D") from exc
    if arr.ndim != 1:
        raise PlotDataError(f"{label} must be 1-D")
    if arr.dtype.kind in "biuf":
        return arr.astype(np.float64)

    out = np.full(arr.size, np.nan, dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        if raw is None or (pd is not None and raw is pd.NA):
            continue
        try:
            out[i] = float(raw)
        except (TypeError, ValueError) as exc:
            raise PlotDataError(f"{label} contains non-numeric value at index {i}: {raw!r}") from exc
    return out
