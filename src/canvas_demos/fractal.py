"""
Fractal Renderer - recursive midpoint subdivision of a triangle.

Each level outlines and fills the inner midpoint triangle, then recurses
into the three corner triangles, each with its own random color.
"""

import logging
import random
from typing import Optional

from .geometry import Color, Triangle, random_color, subdivide
from .surface import DrawingSurface


logger = logging.getLogger(__name__)


class FractalRenderer:
    """Draws a midpoint-subdivision triangle fractal onto a surface."""

    def __init__(self, rng: Optional[random.Random] = None):
        # Injected so tests can seed it
        self.rng = rng or random.Random()

    def draw_outline(self, surface: DrawingSurface, triangle: Triangle) -> None:
        """Stroke a closed triangle outline (same path sequence as each level)."""
        p0, p1, p2 = triangle
        surface.move_to(p0.x, p0.y)
        surface.begin_path()
        surface.line_to(p1.x, p1.y)
        surface.line_to(p2.x, p2.y)
        surface.line_to(p0.x, p0.y)
        surface.close_path()
        surface.stroke()

    def render(self, surface: DrawingSurface, depth: int, triangle: Triangle, color: Color) -> None:
        """
        Draw the fractal for `triangle` down to `depth` levels.

        depth 0 draws nothing. The caller draws the outer outline, if wanted,
        before the first call.
        """
        if depth < 0:
            raise ValueError(f"depth must be >= 0, got {depth}")
        if depth == 0:
            return

        inner, corners = subdivide(triangle)

        self.draw_outline(surface, inner)
        surface.set_fill_color(color.r, color.g, color.b)
        surface.fill()

        # One fresh color per corner, drawn in corner order
        colors = [random_color(self.rng) for _ in corners]
        for corner, corner_color in zip(corners, colors):
            self.render(surface, depth - 1, corner, corner_color)


def draw_fractal(
    surface: DrawingSurface,
    triangle: Triangle,
    depth: int,
    color: Color,
    rng: Optional[random.Random] = None,
) -> FractalRenderer:
    """Outline the outer triangle, then render the fractal inside it."""
    renderer = FractalRenderer(rng)
    renderer.draw_outline(surface, triangle)
    renderer.render(surface, depth, triangle, color)
    logger.info("[Fractal] Rendered depth %d (%d filled regions)", depth, (3 ** depth - 1) // 2)
    return renderer
