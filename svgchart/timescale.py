from __future__ import annotations

from dataclasses import dataclass
import logging
import re
from typing import Literal

import numpy as np
from dateutil.relativedelta import relativedelta

from svgchart.errors import ConfigurationError
from svgchart.scales import AxisRange, TickSet
from svgchart.timeparse import from_epoch_seconds, to_epoch_seconds


LOGGER = logging.getLogger(__name__)

TimeUnit = Literal["second", "minute", "hour", "day", "week", "month", "year"]

DEFAULT_TIME_FORMAT = "%Y-%m-%d %H:%M:%S"
DEFAULT_TIME_UNIT: TimeUnit = "day"

SECONDS_PER_DAY = 24 * 60 * 60
FIXED_UNIT_SECONDS: dict[str, int] = {
    "second": 1,
    "minute": 60,
    "hour": 60 * 60,
    "day": SECONDS_PER_DAY,
    "week": 7 * SECONDS_PER_DAY,
}
NOMINAL_MONTH_SECONDS = 365.25 / 12 * SECONDS_PER_DAY
NOMINAL_YEAR_SECONDS = 365.25 * SECONDS_PER_DAY

_DIVISION_RE = re.compile(
    r"\s*(?P<amount>\d+)\s*(?P<unit>second|minute|hour|day|week|month|year)?s?\s*",
    re.IGNORECASE,
)


@dataclass(frozen=True)
class TimeDivision:
    amount: int
    unit: TimeUnit

    @property
    def is_calendar(self) -> bool:
        return self.unit in ("month", "year")

    @property
    def nominal_seconds(self) -> float:
        if self.unit == "month":
            return NOMINAL_MONTH_SECONDS * self.amount
        if self.unit == "year":
            return NOMINAL_YEAR_SECONDS * self.amount
        return float(FIXED_UNIT_SECONDS[self.unit] * self.amount)


def parse_time_division(spec: str) -> TimeDivision:
    """Parse ``"<amount> <unit>"`` such as ``"2 weeks"``; the unit defaults to days."""
    if not isinstance(spec, str):
        raise ConfigurationError(f"time division must be a string, got {spec!r}")
    match = _DIVISION_RE.fullmatch(spec)
    if match is None:
        raise ConfigurationError(f"unparseable time division: {spec!r}")
    amount = int(match.group("amount"))
    if amount == 0:
        raise ConfigurationError(f"time division amount must be > 0: {spec!r}")
    unit = (match.group("unit") or DEFAULT_TIME_UNIT).lower()
    return TimeDivision(amount=amount, unit=unit)  # type: ignore[arg-type]


def compute_ticks(
    division: str | TimeDivision | AxisRange | float | None,
    min_instant: float,
    max_instant: float,
) -> TickSet:
    if max_instant < min_instant:
        raise ConfigurationError(f"max instant {max_instant!r} is before min instant {min_instant!r}")

    if isinstance(division, str):
        division = parse_time_division(division)

    if isinstance(division, TimeDivision):
        if division.is_calendar:
            return calendar_ticks(int(min_instant), int(max_instant), division)
        step = FIXED_UNIT_SECONDS[division.unit] * division.amount
        return fixed_ticks(int(min_instant), int(max_instant), step)

    if isinstance(division, AxisRange):
        step = division.step_size
    elif division is None:
        raise ConfigurationError("a time division or numeric step is required")
    else:
        step = division
    if not step > 0:
        raise ConfigurationError(f"tick step must be > 0, got {step!r}")
    return fixed_ticks(min_instant, max_instant, step)


def fixed_ticks(min_instant: float, max_instant: float, step: float) -> TickSet:
    if not step > 0:
        raise ConfigurationError(f"tick step must be > 0, got {step!r}")
    # Slack of step/10 lets a tick just past the maximum still be labeled.
    limit = max_instant + step / 10
    count = int(np.floor((limit - min_instant) / step)) + 1
    integral = all(float(v).is_integer() for v in (min_instant, step))
    if integral:
        values = int(min_instant) + np.arange(count, dtype=np.int64) * int(step)
    else:
        values = min_instant + np.arange(count, dtype=np.float64) * step
    values = values[values <= limit]
    LOGGER.debug("fixed ticks: %d from %s step %s", values.size, min_instant, step)
    return TickSet(values=values, step=float(step))


def calendar_ticks(min_instant: int, max_instant: int, division: TimeDivision) -> TickSet:
    """Step whole months or years from ``min_instant``.

    The k-th tick is ``min_instant`` plus ``k * amount`` units, so a start on
    the 31st lands on each month's last day instead of drifting.
    """
    if not division.is_calendar:
        raise ConfigurationError(f"{division.unit} is not a calendar unit")
    start = from_epoch_seconds(min_instant)
    ticks: list[int] = []
    k = 0
    while True:
        current = to_epoch_seconds(start + _calendar_delta(division, k))
        ticks.append(current)
        if current >= max_instant:
            break
        k += 1
    LOGGER.debug("calendar ticks: %d %s steps from %s", len(ticks), division.unit, start.isoformat())
    return TickSet(values=np.asarray(ticks, dtype=np.int64), step=division.nominal_seconds)


def format_time_labels(ticks: TickSet, fmt: str = DEFAULT_TIME_FORMAT) -> list[str]:
    return [from_epoch_seconds(v).strftime(fmt) for v in ticks.values.tolist()]


def _calendar_delta(division: TimeDivision, k: int) -> relativedelta:
    if division.unit == "month":
        return relativedelta(months=division.amount * k)
    return relativedelta(years=division.amount * k)
