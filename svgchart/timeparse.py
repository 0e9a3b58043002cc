from __future__ import annotations

import datetime as dt
from typing import Any

import numpy as np
from dateutil import parser as date_parser

from svgchart.errors import ParseError


_EPOCH = dt.datetime(1970, 1, 1, tzinfo=dt.timezone.utc)


def to_epoch_seconds(raw: Any, template: str | None = None) -> int:
    """Normalize a temporal value to integer seconds since the Unix epoch.

    Accepts ``datetime``/``date`` objects (naive values are read as UTC),
    ``numpy.datetime64``, integer epoch seconds, and strings. Strings are read
    with ``template`` via ``strptime`` when one is given, otherwise with
    dateutil's lenient parser.
    """
    if isinstance(raw, bool):
        raise ParseError(f"Can not parse time {raw!r}")
    if isinstance(raw, dt.datetime):
        return _datetime_to_seconds(raw)
    if isinstance(raw, dt.date):
        return _datetime_to_seconds(dt.datetime(raw.year, raw.month, raw.day))
    if isinstance(raw, np.datetime64):
        if np.isnat(raw):
            raise ParseError("Can not parse time NaT")
        return int(raw.astype("datetime64[s]").astype(np.int64))
    if isinstance(raw, (int, np.integer)):
        return int(raw)
    if isinstance(raw, (float, np.floating)):
        if not np.isfinite(raw) or not float(raw).is_integer():
            raise ParseError(f"Can not parse time {raw!r}")
        return int(raw)
    if isinstance(raw, str):
        return _datetime_to_seconds(_parse_string(raw, template))
    raise ParseError(f"Can not parse time {raw!r}")


def from_epoch_seconds(value: float) -> dt.datetime:
    return _EPOCH + dt.timedelta(seconds=float(value))


def _parse_string(raw: str, template: str | None) -> dt.datetime:
    text = raw.strip()
    if not text:
        raise ParseError("Can not parse empty time string")
    try:
        if template is not None:
            return dt.datetime.strptime(text, template)
        return date_parser.parse(text)
    except (ValueError, OverflowError) as exc:
        raise ParseError(f"Can not parse time {raw!r}") from exc


def _datetime_to_seconds(value: dt.datetime) -> int:
    if value.tzinfo is None:
        value = value.replace(tzinfo=dt.timezone.utc)
    return int((value - _EPOCH).total_seconds())
