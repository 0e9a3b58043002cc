from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
import logging
import re
from typing import Literal, Union

from svgchart.errors import ConfigurationError


LOGGER = logging.getLogger(__name__)

ShapeMode = Literal["REPLACE", "OVERLAY"]

DEFAULT_POPUP_RADIUS = 10.0


def _fmt(value: float) -> str:
    v = float(value)
    if v.is_integer():
        return str(int(v))
    return repr(v)


@dataclass(frozen=True)
class Circle:
    cx: float
    cy: float
    r: float
    css_class: str | None = None

    kind = "circle"

    def attributes(self) -> dict[str, str]:
        return _with_class({"cx": _fmt(self.cx), "cy": _fmt(self.cy), "r": _fmt(self.r)}, self.css_class)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    css_class: str | None = None

    kind = "rect"

    def attributes(self) -> dict[str, str]:
        attrs = {"x": _fmt(self.x), "y": _fmt(self.y), "width": _fmt(self.width), "height": _fmt(self.height)}
        return _with_class(attrs, self.css_class)


@dataclass(frozen=True)
class Line:
    x1: float
    y1: float
    x2: float
    y2: float
    css_class: str | None = None

    kind = "line"

    def attributes(self) -> dict[str, str]:
        attrs = {"x1": _fmt(self.x1), "y1": _fmt(self.y1), "x2": _fmt(self.x2), "y2": _fmt(self.y2)}
        return _with_class(attrs, self.css_class)


@dataclass(frozen=True)
class Polygon:
    points: tuple[tuple[float, float], ...]
    css_class: str | None = None

    kind = "polygon"

    def __post_init__(self) -> None:
        object.__setattr__(self, "points", tuple((float(x), float(y)) for x, y in self.points))
        if len(self.points) < 3:
            raise ConfigurationError("polygon needs at least 3 points")

    def attributes(self) -> dict[str, str]:
        points = " ".join(f"{_fmt(x)},{_fmt(y)}" for x, y in self.points)
        return _with_class({"points": points}, self.css_class)


Primitive = Union[Circle, Rect, Line, Polygon]
PRIMITIVE_TYPES = (Circle, Rect, Line, Polygon)
ShapeBuilder = Callable[[float, float, int], Primitive]


def as_element(primitive: Primitive) -> tuple[str, dict[str, str]]:
    return primitive.kind, primitive.attributes()


def _with_class(attrs: dict[str, str], css_class: str | None) -> dict[str, str]:
    if css_class is not None:
        attrs["class"] = css_class
    return attrs


@dataclass(frozen=True)
class ShapeRule:
    pattern: re.Pattern[str] | str
    builder: ShapeBuilder
    mode: ShapeMode = "REPLACE"

    def __post_init__(self) -> None:
        pattern = self.pattern
        if isinstance(pattern, str):
            try:
                pattern = re.compile(pattern)
            except re.error as exc:
                raise ConfigurationError(f"invalid shape pattern {self.pattern!r}: {exc}") from exc
            object.__setattr__(self, "pattern", pattern)
        elif not isinstance(pattern, re.Pattern):
            raise ConfigurationError(f"shape pattern must be a string or compiled regex, got {pattern!r}")
        if not callable(self.builder):
            raise ConfigurationError("shape builder must be callable")
        if self.mode not in ("REPLACE", "OVERLAY"):
            raise ConfigurationError(f"unknown shape mode: {self.mode!r}")

    @classmethod
    def coerce(cls, rule: ShapeRule | tuple) -> ShapeRule:
        if isinstance(rule, ShapeRule):
            return rule
        if isinstance(rule, tuple) and len(rule) in (2, 3):
            return cls(*rule)
        raise ConfigurationError(f"shape rule must be a ShapeRule or (pattern, builder[, mode]) tuple: {rule!r}")

    def matches(self, label: str) -> bool:
        return self.pattern.search(label) is not None

    def build(self, x: float, y: float, series_index: int) -> Primitive:
        primitive = self.builder(x, y, series_index)
        if not isinstance(primitive, PRIMITIVE_TYPES):
            raise ConfigurationError(
                f"shape builder for {self.pattern.pattern!r} returned {type(primitive).__name__}, expected a primitive"
            )
        return primitive


@dataclass
class ShapeCriteria:
    """Ordered shape rules for one render session.

    The first matching REPLACE rule supplies the base shape; every matching
    OVERLAY rule adds a shape on top of it.
    """

    rules: list[ShapeRule] = field(default_factory=list)

    def __post_init__(self) -> None:
        self.rules = [ShapeRule.coerce(r) for r in self.rules]

    def configure(self, rules: Iterable[ShapeRule | tuple]) -> None:
        self.rules = [ShapeRule.coerce(r) for r in rules]
        LOGGER.debug("configured %d shape rules", len(self.rules))

    def reset(self) -> None:
        self.rules = []

    def dispatch(
        self,
        x: float,
        y: float,
        series_index: int,
        label: str | None = None,
        *,
        radius: float = DEFAULT_POPUP_RADIUS,
    ) -> list[Primitive]:
        if label is None:
            return [default_shape(x, y, series_index, radius=radius)]

        base: Primitive | None = None
        overlays: list[Primitive] = []
        for rule in self.rules:
            if rule.mode == "REPLACE":
                if base is None and rule.matches(label):
                    base = rule.build(x, y, series_index)
            elif rule.matches(label):
                overlays.append(rule.build(x, y, series_index))

        if base is None:
            base = default_shape(x, y, series_index, radius=radius)
        return [base, *overlays]


def default_shape(x: float, y: float, series_index: int, *, radius: float = DEFAULT_POPUP_RADIUS) -> Circle:
    return Circle(cx=x, cy=y, r=radius, css_class=f"dataPoint{series_index + 1}")


_DEFAULT_CRITERIA = ShapeCriteria()


def default_shape_criteria() -> ShapeCriteria:
    return _DEFAULT_CRITERIA


def configure_shape_criteria(rules: Iterable[ShapeRule | tuple]) -> None:
    _DEFAULT_CRITERIA.configure(rules)


def reset_shape_criteria() -> None:
    _DEFAULT_CRITERIA.reset()


def dispatch_shape(
    x: float,
    y: float,
    series_index: int,
    label: str | None = None,
    *,
    radius: float = DEFAULT_POPUP_RADIUS,
) -> list[Primitive]:
    return _DEFAULT_CRITERIA.dispatch(x, y, series_index, label, radius=radius)
