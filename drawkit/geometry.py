"""Points, sizes and scales used by the views and the waveform code."""

from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Union

Number = Union[int, float]


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


@dataclass(frozen=True)
class Scale:
    """Horizontal and vertical zoom factors."""

    horizontal: float = 1.0
    vertical: float = 1.0


@dataclass(frozen=True)
class Point:
    """A 2-D point or vector."""

    x: Number = 0
    y: Number = 0

    def __add__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        if not isinstance(other, Point):
            return NotImplemented
        return Point(self.x - other.x, self.y - other.y)

    def __neg__(self) -> Point:
        return Point(-self.x, -self.y)

    def __mul__(self, other: Scale | Number) -> Point:
        if isinstance(other, Scale):
            return Point(self.x * other.horizontal, self.y * other.vertical)
        if isinstance(other, (int, float)):
            return Point(self.x * other, self.y * other)
        return NotImplemented

    __rmul__ = __mul__

    def __truediv__(self, other: Scale | Number) -> Point:
        if isinstance(other, Scale):
            return Point(self.x / other.horizontal, self.y / other.vertical)
        if isinstance(other, (int, float)):
            return Point(self.x / other, self.y / other)
        return NotImplemented

    def __floordiv__(self, other: int) -> Point:
        """Integer division truncating toward zero."""
        if not isinstance(other, int):
            return NotImplemented
        return Point(int(self.x / other), int(self.y / other))

    def magnitude(self) -> float:
        """Euclidean length."""
        return math.hypot(self.x, self.y)

    def rounded(self) -> Point:
        """Coordinates rounded to integers, halves away from zero."""
        return Point(_round_half_away(self.x), _round_half_away(self.y))

    def floored(self) -> Point:
        """Coordinates rounded down to integers."""
        return Point(math.floor(self.x), math.floor(self.y))

    def as_float(self) -> Point:
        return Point(float(self.x), float(self.y))


@dataclass(frozen=True)
class Size:
    """A width and a height."""

    width: Number = 0
    height: Number = 0

    def __add__(self, other: Size | Number) -> Size:
        if isinstance(other, Size):
            return Size(self.width + other.width, self.height + other.height)
        if isinstance(other, (int, float)):
            return Size(self.width + other, self.height + other)
        return NotImplemented

    def __sub__(self, other: Size) -> Size:
        if not isinstance(other, Size):
            return NotImplemented
        return Size(self.width - other.width, self.height - other.height)

    def __mul__(self, other: Scale | Number) -> Size:
        if isinstance(other, Scale):
            return Size(
                self.width * other.horizontal, self.height * other.vertical)
        if isinstance(other, (int, float)):
            return Size(self.width * other, self.height * other)
        return NotImplemented

    def __truediv__(self, other: Size | Number) -> Size:
        if isinstance(other, Size):
            return Size(self.width / other.width, self.height / other.height)
        if isinstance(other, (int, float)):
            return Size(self.width / other, self.height / other)
        return NotImplemented

    def __floordiv__(self, other: int) -> Size:
        """Integer division truncating toward zero."""
        if not isinstance(other, int):
            return NotImplemented
        return Size(int(self.width / other), int(self.height / other))

    def to_point(self) -> Point:
        """The size as a point (width, height)."""
        return Point(self.width, self.height)

    def has_area(self) -> bool:
        return self.width > 0 and self.height > 0

    def as_float(self) -> Size:
        return Size(float(self.width), float(self.height))

    def floored(self) -> Size:
        return Size(math.floor(self.width), math.floor(self.height))


def get_maximum_view_position(view_size: Size, virtual_size: Size) -> Point:
    """Largest scroll position that keeps the view inside the virtual area."""
    difference = (virtual_size - view_size).to_point()
    return Point(max(0, difference.x), max(0, difference.y))