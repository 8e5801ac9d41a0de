"""Typed geometry models for frame sizing."""

from __future__ import annotations

import math
import numbers
import re
from dataclasses import dataclass
from typing import Any, Mapping


_SIZE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*[xX×]\s*(\d+(?:\.\d+)?)\s*$")


def _is_real(value: Any) -> bool:
    return isinstance(value, numbers.Real) and not isinstance(value, bool) and math.isfinite(value)


@dataclass(frozen=True)
class FrameSize:
    width: float
    height: float

    def __post_init__(self) -> None:
        if not (_is_real(self.width) and _is_real(self.height)):
            raise ValueError(f"Frame size must be numeric: {self.width!r}x{self.height!r}")
        if self.width <= 0 or self.height <= 0:
            raise ValueError(f"Frame size must be positive: {self.width}x{self.height}")

    @property
    def ratio(self) -> float:
        return self.width / self.height

    def as_tuple(self) -> tuple[float, float]:
        return (self.width, self.height)

    def __str__(self) -> str:
        return f"{self.width:g}x{self.height:g}"

    @classmethod
    def coerce(cls, value: Any) -> FrameSize:
        """Build a frame size from a ``FrameSize``, ``[w, h]`` pair, or ``{"width", "height"}`` mapping."""
        if isinstance(value, FrameSize):
            return value
        if isinstance(value, Mapping):
            if "width" not in value or "height" not in value:
                raise ValueError(f"Frame mapping needs width and height: {value!r}")
            return cls(value["width"], value["height"])
        if isinstance(value, (list, tuple)) and len(value) == 2:
            return cls(value[0], value[1])
        raise ValueError(f"Not a frame size: {value!r}")

    @classmethod
    def parse(cls, text: str) -> FrameSize:
        match = _SIZE_RE.match(text)
        if not match:
            raise ValueError(f"Expected WIDTHxHEIGHT, got {text!r}")
        w, h = (float(g) if "." in g else int(g) for g in match.groups())
        return cls(w, h)


@dataclass(frozen=True)
class ResizePlan:
    """Target size computed by a dimension policy; may hold fractional values."""

    width: float
    height: float

    @property
    def pixel_size(self) -> tuple[int, int]:
        # Surfaces truncate fractional sizes, never below one pixel.
        return (max(1, int(self.width)), max(1, int(self.height)))

    def matches(self, width: float, height: float) -> bool:
        return self.width == width and self.height == height
