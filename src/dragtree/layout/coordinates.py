"""Coordinate types for tree layout.

Layout space uses ``x`` for breadth (sibling order) and ``y`` for depth.
The depth axis is rendered horizontally, so screen space is layout space
with the axes swapped.
"""

from __future__ import annotations

import math
from dataclasses import dataclass


@dataclass(frozen=True)
class Point:
    """Immutable 2D point in layout space.

    Example:
        >>> p1 = Point(10, 20)
        >>> p2 = Point(5, 5)
        >>> p1 + p2
        Point(x=15, y=25)
    """

    x: float
    y: float

    def __add__(self, other: Point) -> Point:
        """Add two points coordinate-wise."""
        return Point(self.x + other.x, self.y + other.y)

    def __sub__(self, other: Point) -> Point:
        """Subtract two points coordinate-wise.

        Example:
            >>> Point(5, 10) - Point(2, 3)
            Point(x=3, y=7)
        """
        return Point(self.x - other.x, self.y - other.y)

    def distance_to(self, other: Point) -> float:
        """Euclidean distance.

        Example:
            >>> Point(0, 0).distance_to(Point(3, 4))
            5.0
        """
        return math.hypot(self.x - other.x, self.y - other.y)

    def swapped(self) -> Point:
        """Convert between layout space and screen space.

        Example:
            >>> Point(1, 2).swapped()
            Point(x=2, y=1)
        """
        return Point(self.y, self.x)


@dataclass(frozen=True)
class ExtentBox:
    """Bounding box for viewport fitting, in screen space.

    Attributes:
        x: Left edge (always 0; depth starts at the left)
        y: Top edge (breadth minimum minus the margin)
        width: Depth extent
        height: Breadth extent plus the margin
    """

    x: float
    y: float
    width: float
    height: float

    def as_viewbox(self) -> tuple[float, float, float, float]:
        """Return (min-x, min-y, width, height) for an SVG viewBox."""
        return (self.x, self.y, self.width, self.height)

    def contains(self, point: Point) -> bool:
        """True if a screen-space point lies inside the box."""
        return (
            self.x <= point.x <= self.x + self.width
            and self.y <= point.y <= self.y + self.height
        )
