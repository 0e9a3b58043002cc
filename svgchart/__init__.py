from svgchart.adapters import normalize_frame, normalize_pairs, normalize_time_series, normalize_values, normalize_xy
from svgchart.charts import (
    BarChartLayout,
    BarElement,
    PlotLayout,
    PointElement,
    layout_horizontal_bars,
    layout_plot,
    layout_time_series,
)
from svgchart.coordinates import BarGeometry, BarLayout, PointGeometry, map_point, map_to_geometry, value_from_geometry
from svgchart.errors import ChartError, ConfigurationError, ParseError, PlotDataError
from svgchart.labels import BarLabelConfig, PopupConfig, format_bar_label, format_percent, format_popup
from svgchart.scales import AxisRange, ScaleOverrides, TickSet, compute_axis_range, format_ticks_for_axis, numeric_ticks
from svgchart.shapes import (
    Circle,
    Line,
    Polygon,
    Rect,
    ShapeCriteria,
    ShapeRule,
    configure_shape_criteria,
    dispatch_shape,
    reset_shape_criteria,
)
from svgchart.timeparse import to_epoch_seconds
from svgchart.timescale import TimeDivision, compute_ticks, parse_time_division

__all__ = [
    "AxisRange",
    "BarChartLayout",
    "BarElement",
    "BarGeometry",
    "BarLabelConfig",
    "BarLayout",
    "ChartError",
    "Circle",
    "ConfigurationError",
    "Line",
    "ParseError",
    "PlotDataError",
    "PlotLayout",
    "PointElement",
    "PointGeometry",
    "Polygon",
    "PopupConfig",
    "Rect",
    "ScaleOverrides",
    "ShapeCriteria",
    "ShapeRule",
    "TickSet",
    "TimeDivision",
    "compute_axis_range",
    "compute_ticks",
    "configure_shape_criteria",
    "dispatch_shape",
    "format_bar_label",
    "format_percent",
    "format_popup",
    "format_ticks_for_axis",
    "layout_horizontal_bars",
    "layout_plot",
    "layout_time_series",
    "map_point",
    "map_to_geometry",
    "normalize_frame",
    "normalize_pairs",
    "normalize_time_series",
    "normalize_values",
    "normalize_xy",
    "numeric_ticks",
    "parse_time_division",
    "reset_shape_criteria",
    "to_epoch_seconds",
    "value_from_geometry",
]
