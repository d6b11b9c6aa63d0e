from __future__ import annotations

import math
from typing import Callable, Iterable, Optional, Tuple

import numpy as np
from pydantic import BaseModel, Field

GRID_LINES = 5
RANGE_PAD_FRACTION = 0.08
COLOR_SATURATION = 85
COLOR_LIGHTNESS = 65


class LegendItem(BaseModel):
    label: str
    color: str
    hue: int = 0


class TextLabel(BaseModel):
    text: str
    x: float
    y: float
    anchor: str = "start"   # "start" | "middle" | "end"


def scale_linear(domain_min: float, domain_max: float,
                 range_min: float, range_max: float) -> Callable[[float], float]:
    """Map [domain_min, domain_max] onto [range_min, range_max]; a zero-width domain counts as width 1."""
    span = (domain_max - domain_min) or 1
    extent = range_max - range_min

    def scale(value: float) -> float:
        return range_min + ((value - domain_min) / span) * extent

    return scale


def finite_or_none(value) -> Optional[float]:
    if value is None or isinstance(value, bool):
        return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def nice_min_max(values: Iterable[Optional[float]]) -> Tuple[float, float]:
    """
    Y-axis range for a set of readings.

    Absent and non-finite values are ignored. With no readings the range is
    (0, 1); a flat series is widened by 1 either side. The result is padded
    by 8% of its span so points never sit on the frame.
    """
    finite = [v for v in (finite_or_none(v) for v in values) if v is not None]
    if not finite:
        return 0.0, 1.0
    arr = np.asarray(finite, dtype=float)
    lo, hi = float(arr.min()), float(arr.max())
    if lo == hi:
        lo, hi = lo - 1, hi + 1
    pad = (hi - lo) * RANGE_PAD_FRACTION
    return lo - pad, hi + pad


def hash_hue(label: str) -> int:
    """Stable hue in [0, 360) from the label's UTF-16 code units."""
    h = 0
    data = label.encode("utf-16-le")
    for i in range(0, len(data), 2):
        h = (h * 31 + (data[i] | data[i + 1] << 8)) & 0xFFFFFFFF
    return h % 360


def hash_to_color(label: str) -> str:
    return f"hsl({hash_hue(label)} {COLOR_SATURATION}% {COLOR_LIGHTNESS}%)"


def legend_item(label: str) -> LegendItem:
    return LegendItem(label=label, color=hash_to_color(label), hue=hash_hue(label))


def grid_positions(height: float, pad: float, lines: int = GRID_LINES) -> list[float]:
    """Y pixel positions of the horizontal grid, top to bottom."""
    return [pad + (height - 2 * pad) * (i / lines) for i in range(lines + 1)]


class Frame(BaseModel):
    """Canvas size and inner plotting box shared by every chart type."""
    width: int
    height: int
    pad: float
    grid_lines: list[float] = Field(default_factory=list)

    @property
    def left(self) -> float:
        return self.pad

    @property
    def right(self) -> float:
        return self.width - self.pad

    @property
    def top(self) -> float:
        return self.pad

    @property
    def bottom(self) -> float:
        return self.height - self.pad
