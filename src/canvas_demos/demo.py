"""
Demo scenes - wire assets, surface and renderers together.

Assets are always loaded before the surface is drawn on, so a failed
startup never leaves a half-drawn frame behind.
"""

import asyncio
import logging
import random
from pathlib import Path
from typing import List, Optional, Tuple

from PIL import Image

from .animator import SpriteAnimator
from .assets import FrameAtlas, load_atlas, load_image, load_image_async
from .config import DemoConfig
from .fractal import draw_fractal
from .geometry import Color, Triangle
from .surface import PilSurface, get_surface
from .timer import AsyncioScheduler, ManualScheduler


logger = logging.getLogger(__name__)


def _resolve(path: str, base_dir: Optional[Path]) -> Path:
    p = Path(path)
    if base_dir is not None and not p.is_absolute():
        p = Path(base_dir) / p
    return p


def _new_surface(config: DemoConfig) -> PilSurface:
    canvas = config.canvas
    return get_surface(canvas.width, canvas.height, tuple(canvas.background))


def render_fractal_scene(config: DemoConfig, base_dir: Optional[Path] = None) -> PilSurface:
    """
    Draw the fractal scene and return the surface.

    Order: optional backdrop at the origin, outer outline, fractal.
    """
    cfg = config.fractal
    backdrop = load_image(_resolve(cfg.backdrop, base_dir)) if cfg.backdrop else None

    surface = _new_surface(config)
    if backdrop is not None:
        w, h = backdrop.size
        surface.draw_image_region(backdrop, 0, 0, w, h, 0, 0, w, h)

    rng = random.Random(cfg.seed)
    draw_fractal(
        surface,
        Triangle.from_points(cfg.triangle),
        cfg.depth,
        Color.of(*cfg.color),
        rng=rng,
    )
    return surface


def load_sprite_assets(config: DemoConfig, base_dir: Optional[Path] = None) -> Tuple[Image.Image, FrameAtlas]:
    """Load the sprite sheet and its atlas. Raises AssetLoadFailed."""
    cfg = config.sprite
    atlas = load_atlas(_resolve(cfg.atlas, base_dir))
    image = load_image(_resolve(cfg.image, base_dir))
    return image, atlas


def render_sprite_frames(
    config: DemoConfig,
    ticks: int,
    image: Image.Image,
    atlas: FrameAtlas,
) -> List[Image.Image]:
    """
    Run the animation on a virtual clock and capture the surface after each tick.

    FrameNotFound from a tick propagates to the caller.
    """
    cfg = config.sprite
    surface = _new_surface(config)
    scheduler = ManualScheduler()
    animator = SpriteAnimator(scheduler, clear_rect=tuple(cfg.clear_rect))

    frames: List[Image.Image] = []
    with animator.start(
        surface, image, atlas, cfg.frame_pattern, cfg.frame_count, tuple(cfg.dest), cfg.interval_ms,
    ):
        for _ in range(ticks):
            scheduler.advance(cfg.interval_ms)
            frames.append(surface.snapshot())
    return frames


def save_gif(frames: List[Image.Image], path: Path, interval_ms: float) -> None:
    """Write captured frames as a looping GIF."""
    if not frames:
        raise ValueError("no frames to save")
    first, *rest = [f.convert("RGB") for f in frames]
    first.save(
        path,
        save_all=True,
        append_images=rest,
        duration=int(interval_ms),
        loop=0,
    )
    logger.info("[Sprite] Saved %d frames to %s", len(frames), path)


async def run_sprite_realtime(
    config: DemoConfig,
    duration_s: float,
    base_dir: Optional[Path] = None,
) -> PilSurface:
    """
    Run the animation on the event loop for duration_s seconds.

    Stops early on the first tick error and re-raises it once the
    interval is cancelled.
    """
    cfg = config.sprite
    atlas = load_atlas(_resolve(cfg.atlas, base_dir))
    image = await load_image_async(_resolve(cfg.image, base_dir))
    surface = _new_surface(config)

    failed = asyncio.Event()
    errors: List[BaseException] = []

    def on_error(error: BaseException) -> None:
        logger.error("[Sprite] Tick failed: %s", error)
        errors.append(error)
        failed.set()

    animator = SpriteAnimator(AsyncioScheduler(on_error=on_error), clear_rect=tuple(cfg.clear_rect))
    with animator.start(
        surface, image, atlas, cfg.frame_pattern, cfg.frame_count, tuple(cfg.dest), cfg.interval_ms,
    ):
        try:
            await asyncio.wait_for(failed.wait(), timeout=duration_s)
        except asyncio.TimeoutError:
            pass

    if errors:
        raise errors[0]
    logger.info("[Sprite] Ran %d ticks in %.2fs", animator.ticks, duration_s)
    return surface
