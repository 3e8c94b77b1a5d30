"""
Canvas Demos - a triangle fractal and a sprite-sheet animation.

Two independent renderers over one canvas-style drawing surface:
recursive midpoint subdivision with random colors, and a timer-driven
frame cycle through a sprite atlas.
"""

__version__ = "0.1.0"

from .errors import CanvasDemoError, FrameNotFound, SurfaceUnavailable, AssetLoadFailed
from .geometry import Point, Triangle, Color, midpoint, edge_midpoints, subdivide, random_color
from .surface import DrawingSurface, PilSurface, RecordingSurface, get_surface
from .timer import CancelHandle, AsyncioScheduler, ManualScheduler
from .assets import FrameRect, FrameAtlas, ImageReady, load_atlas, load_image, load_image_async
from .fractal import FractalRenderer, draw_fractal
from .animator import SpriteAnimator, AnimatorState
from .config import CanvasConfig, FractalConfig, SpriteConfig, DemoConfig, ConfigManager, get_config_manager

__all__ = [
    "CanvasDemoError",
    "FrameNotFound",
    "SurfaceUnavailable",
    "AssetLoadFailed",
    "Point",
    "Triangle",
    "Color",
    "midpoint",
    "edge_midpoints",
    "subdivide",
    "random_color",
    "DrawingSurface",
    "PilSurface",
    "RecordingSurface",
    "get_surface",
    "CancelHandle",
    "AsyncioScheduler",
    "ManualScheduler",
    "FrameRect",
    "FrameAtlas",
    "ImageReady",
    "load_atlas",
    "load_image",
    "load_image_async",
    "FractalRenderer",
    "draw_fractal",
    "SpriteAnimator",
    "AnimatorState",
    "CanvasConfig",
    "FractalConfig",
    "SpriteConfig",
    "DemoConfig",
    "ConfigManager",
    "get_config_manager",
]
