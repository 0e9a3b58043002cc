from __future__ import annotations

from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True)
class SeriesData:
    values: np.ndarray
    mask: np.ndarray
    title: str | None = None


@dataclass(frozen=True)
class PlotSeries:
    x: np.ndarray
    y: np.ndarray
    mask: np.ndarray
    descriptions: tuple[str | None, ...]
    shapes: tuple[str | None, ...]
    title: str | None = None

    def __len__(self) -> int:
        return int(self.x.size)


@dataclass(frozen=True)
class TimeSeriesData(PlotSeries):
    """Plot series whose x values are integer epoch seconds."""
