from __future__ import annotations


class ChartError(Exception):
    pass


class ConfigurationError(ChartError, ValueError):
    """Invalid scale, division, layout or shape-rule settings."""


class ParseError(ChartError, ValueError):
    """Temporal input that cannot be normalized to epoch seconds."""


class PlotDataError(ChartError, ValueError):
    pass
