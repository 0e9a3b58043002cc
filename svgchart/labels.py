from __future__ import annotations

from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

import numpy as np

from svgchart.errors import ConfigurationError, PlotDataError
from svgchart.shapes import DEFAULT_POPUP_RADIUS
from svgchart.timeparse import from_epoch_seconds
from svgchart.timescale import DEFAULT_TIME_FORMAT


DEFAULT_NUMBER_FORMAT = "%.2f"


@dataclass(frozen=True)
class PopupConfig:
    round_popups: bool = True
    popup_radius: float = DEFAULT_POPUP_RADIUS
    popup_format: str = DEFAULT_TIME_FORMAT

    def __post_init__(self) -> None:
        if not self.popup_radius > 0:
            raise ConfigurationError("popup_radius must be > 0")


@dataclass(frozen=True)
class BarLabelConfig:
    number_format: str = DEFAULT_NUMBER_FORMAT
    show_actual_values: bool = True
    show_percent: bool = False
    font_size: float = 12.0

    def __post_init__(self) -> None:
        try:
            self.number_format % 1.0
        except (TypeError, ValueError) as exc:
            raise ConfigurationError(f"invalid number_format {self.number_format!r}") from exc


def truncate_popup_value(value: float) -> int:
    """Drop everything below 1/100, then floor-divide by 100.

    Not a rounding: 8.55 becomes 8 and -0.5 becomes -1.
    """
    return int(float(value) * 100) // 100


def format_popup(
    value: Any,
    description: str | None = None,
    *,
    round_popups: bool = True,
    time_format: str | None = None,
) -> str:
    if isinstance(value, (tuple, list)):
        if len(value) != 2:
            raise PlotDataError(f"popup value must be a scalar or an (x, y) pair, got {value!r}")
        x, y = value
        if time_format is not None:
            parts = [from_epoch_seconds(x).strftime(time_format), _popup_number(y, round_popups), description]
            return ", ".join(p for p in parts if p is not None)
        parts = [_popup_number(x, round_popups), _popup_number(y, round_popups), description]
        return "(" + ", ".join(p for p in parts if p is not None) + ")"

    parts = [_popup_number(value, round_popups), description]
    return ", ".join(p for p in parts if p is not None)


def format_percent(value: float, total: float) -> int:
    if total == 0:
        raise PlotDataError("cannot compute a percentage of a zero total")
    percent = Decimal(repr(100.0 * float(value) / float(total)))
    return int(percent.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def format_bar_label(value: float, total: float, config: BarLabelConfig | None = None) -> str:
    cfg = config or BarLabelConfig()
    out = ""
    if cfg.show_actual_values:
        out += cfg.number_format % _plain(value)
    if cfg.show_percent:
        out += f" ({format_percent(value, total)}%)"
    return out


def _popup_number(value: Any, round_popups: bool) -> str | None:
    if value is None:
        return None
    if round_popups:
        return str(truncate_popup_value(value))
    plain = _plain(value)
    # Ingestion stores values as floats; print whole numbers the way they were given.
    if isinstance(plain, float) and plain.is_integer():
        return str(int(plain))
    return str(plain)


def _plain(value: Any) -> Any:
    if isinstance(value, np.generic):
        return value.item()
    return value
