"""
Drawing Surface - canvas-style 2D target for the demos.

The renderers only talk to DrawingSurface. PilSurface backs it with a
Pillow image (saved to disk or collected into a GIF); RecordingSurface
keeps the call log instead of pixels, for tests and debugging.
"""

from abc import ABC, abstractmethod
from typing import Any, List, Optional, Tuple
import logging

from PIL import Image, ImageDraw

from .errors import SurfaceUnavailable


logger = logging.getLogger(__name__)

# Reference canvas size
WIDTH = 600
HEIGHT = 600

# Colors
BLACK = (0, 0, 0)
WHITE = (255, 255, 255)


class DrawingSurface(ABC):
    """Abstract canvas-like drawing target."""

    @abstractmethod
    def move_to(self, x: float, y: float) -> None:
        """Start a new subpath at (x, y)."""
        pass

    @abstractmethod
    def begin_path(self) -> None:
        """Discard the current path."""
        pass

    @abstractmethod
    def line_to(self, x: float, y: float) -> None:
        """Extend the current subpath to (x, y)."""
        pass

    @abstractmethod
    def close_path(self) -> None:
        """Close the current subpath back to its start."""
        pass

    @abstractmethod
    def stroke(self) -> None:
        """Outline the current path."""
        pass

    @abstractmethod
    def set_fill_color(self, r: int, g: int, b: int) -> None:
        """Set the color used by fill()."""
        pass

    @abstractmethod
    def fill(self) -> None:
        """Fill the current path."""
        pass

    @abstractmethod
    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        """Erase a rectangle back to the background."""
        pass

    @abstractmethod
    def draw_image_region(
        self,
        image: Any,
        sx: float, sy: float, sw: float, sh: float,
        dx: float, dy: float, dw: float, dh: float,
    ) -> None:
        """Blit the source rectangle of image into the destination rectangle."""
        pass


class PilSurface(DrawingSurface):
    """
    Pillow-backed surface.

    Follows the HTML canvas path model:
    - begin_path() drops every subpath
    - line_to() with no open subpath acts like move_to()
    - stroke()/fill() act on all subpaths and leave the path in place
    """

    def __init__(
        self,
        width: int = WIDTH,
        height: int = HEIGHT,
        background: Tuple[int, ...] = WHITE,
        stroke_color: Tuple[int, int, int] = BLACK,
        line_width: int = 1,
    ):
        self.width = width
        self.height = height
        self.background = tuple(background) if len(background) == 4 else tuple(background) + (255,)
        self.stroke_color = tuple(stroke_color)
        self.line_width = line_width
        self.fill_color: Tuple[int, int, int] = BLACK
        self._image = Image.new("RGBA", (width, height), self.background)
        self._draw = ImageDraw.Draw(self._image)
        # Each subpath: [points, closed]
        self._subpaths: List[List[Any]] = []

    @property
    def image(self) -> Image.Image:
        """The backing image (live, not a copy)."""
        return self._image

    def snapshot(self) -> Image.Image:
        """Copy of the current pixels."""
        return self._image.copy()

    def save(self, path: str) -> None:
        """Save current image to file."""
        self._image.save(path)

    # --- path ops ---

    def move_to(self, x: float, y: float) -> None:
        self._subpaths.append([[(x, y)], False])

    def begin_path(self) -> None:
        self._subpaths = []

    def line_to(self, x: float, y: float) -> None:
        if not self._subpaths or self._subpaths[-1][1]:
            # Canvas: lineTo on an empty path only sets the start point
            if not self._subpaths:
                self.move_to(x, y)
                return
            start = self._subpaths[-1][0][0]
            self._subpaths.append([[start], False])
        self._subpaths[-1][0].append((x, y))

    def close_path(self) -> None:
        if self._subpaths:
            self._subpaths[-1][1] = True

    def stroke(self) -> None:
        for points, closed in self._subpaths:
            if len(points) < 2:
                continue
            outline = list(points)
            if closed:
                outline.append(points[0])
            self._draw.line(outline, fill=self.stroke_color, width=self.line_width)

    def set_fill_color(self, r: int, g: int, b: int) -> None:
        self.fill_color = (int(r), int(g), int(b))

    def fill(self) -> None:
        for points, _closed in self._subpaths:
            if len(points) < 3:
                continue
            self._draw.polygon(points, fill=self.fill_color)

    # --- pixel ops ---

    def clear_rect(self, x: float, y: float, w: float, h: float) -> None:
        if w <= 0 or h <= 0:
            return
        self._draw.rectangle([x, y, x + w - 1, y + h - 1], fill=self.background)

    def draw_image_region(
        self,
        image: Image.Image,
        sx: float, sy: float, sw: float, sh: float,
        dx: float, dy: float, dw: float, dh: float,
    ) -> None:
        region = image.crop((int(sx), int(sy), int(sx + sw), int(sy + sh)))
        if (int(dw), int(dh)) != region.size:
            region = region.resize((int(dw), int(dh)))
        if region.mode != "RGBA":
            region = region.convert("RGBA")
        self._image.alpha_composite(region, dest=(int(dx), int(dy)))


class RecordingSurface(DrawingSurface):
    """Surface that records each call as (name, args) instead of drawing."""

    def __init__(self):
        self.calls: List[Tuple[str, tuple]] = []

    def names(self) -> List[str]:
        return [name for name, _ in self.calls]

    def count(self, name: str) -> int:
        return sum(1 for n, _ in self.calls if n == name)

    def clear(self) -> None:
        self.calls.clear()

    def move_to(self, x, y):
        self.calls.append(("move_to", (x, y)))

    def begin_path(self):
        self.calls.append(("begin_path", ()))

    def line_to(self, x, y):
        self.calls.append(("line_to", (x, y)))

    def close_path(self):
        self.calls.append(("close_path", ()))

    def stroke(self):
        self.calls.append(("stroke", ()))

    def set_fill_color(self, r, g, b):
        self.calls.append(("set_fill_color", (r, g, b)))

    def fill(self):
        self.calls.append(("fill", ()))

    def clear_rect(self, x, y, w, h):
        self.calls.append(("clear_rect", (x, y, w, h)))

    def draw_image_region(self, image, sx, sy, sw, sh, dx, dy, dw, dh):
        self.calls.append(("draw_image_region", (image, sx, sy, sw, sh, dx, dy, dw, dh)))


def get_surface(
    width: int = WIDTH,
    height: int = HEIGHT,
    background: Optional[Tuple[int, ...]] = None,
) -> PilSurface:
    """Acquire a drawing surface. Raises SurfaceUnavailable on failure."""
    if width <= 0 or height <= 0:
        raise SurfaceUnavailable(f"invalid surface size {width}x{height}")
    try:
        surface = PilSurface(width, height, background=background or WHITE)
    except (ValueError, TypeError, MemoryError) as e:
        raise SurfaceUnavailable(f"could not create {width}x{height} surface: {e}") from e
    logger.debug("[Surface] Created %dx%d surface", width, height)
    return surface
