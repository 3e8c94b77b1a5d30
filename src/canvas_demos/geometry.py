"""
Geometry value types - points, triangles and colors.

All of these are small immutable values, built per recursive call
and thrown away on return.
"""

import random
from typing import NamedTuple, Optional, Tuple


class Point(NamedTuple):
    """A position in surface space."""
    x: float
    y: float


class Color(NamedTuple):
    """An opaque RGB color, 8 bits per channel."""
    r: int
    g: int
    b: int

    @classmethod
    def of(cls, r: int, g: int, b: int) -> "Color":
        """Build a color, rejecting channels outside 0-255."""
        for channel in (r, g, b):
            if not 0 <= channel <= 255:
                raise ValueError(f"color channel out of range: {channel}")
        return cls(int(r), int(g), int(b))


class Triangle(NamedTuple):
    """Three ordered points. Order is the drawn edge sequence P0->P1->P2->close."""
    p0: Point
    p1: Point
    p2: Point

    @classmethod
    def from_points(cls, points) -> "Triangle":
        """Build from any sequence of exactly three (x, y) pairs."""
        points = list(points)
        if len(points) != 3:
            raise ValueError(f"a triangle needs exactly 3 points, got {len(points)}")
        return cls(*(Point(float(x), float(y)) for x, y in points))


def midpoint(a: Point, b: Point) -> Point:
    """Midpoint of the segment a-b."""
    return Point((a.x + b.x) / 2.0, (a.y + b.y) / 2.0)


def edge_midpoints(triangle: Triangle) -> Tuple[Point, Point, Point]:
    """M0 = mid(P0,P1), M1 = mid(P1,P2), M2 = mid(P2,P0)."""
    p0, p1, p2 = triangle
    return midpoint(p0, p1), midpoint(p1, p2), midpoint(p2, p0)


def subdivide(triangle: Triangle) -> Tuple[Triangle, Tuple[Triangle, Triangle, Triangle]]:
    """
    Split a triangle into its inner midpoint triangle and three corners.

    Corners pair each original vertex with its two adjacent midpoints and
    come back in recursion order: (P0, M0, M2), (M0, P1, M1), (M2, M1, P2).
    """
    p0, p1, p2 = triangle
    m0, m1, m2 = edge_midpoints(triangle)
    inner = Triangle(m0, m1, m2)
    corners = (
        Triangle(p0, m0, m2),
        Triangle(m0, p1, m1),
        Triangle(m2, m1, p2),
    )
    return inner, corners


def random_color(rng: Optional[random.Random] = None) -> Color:
    """Each channel independently uniform over 0-255 inclusive."""
    rng = rng or random
    return Color(rng.randint(0, 255), rng.randint(0, 255), rng.randint(0, 255))
