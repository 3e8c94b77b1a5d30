"""
Sprite Animator - cycles named atlas frames on a fixed interval.

Each tick advances the frame index, resolves the frame name
("Run ({}).png" -> "Run (3).png"), clears the sprite region and blits
the frame's source rectangle at the destination point, unscaled.

A frame missing from the atlas raises FrameNotFound out of the tick.
The index has already advanced by then, nothing is drawn, and the
interval keeps running: the last good frame stays on screen.
"""

import logging
from enum import Enum
from typing import Any, Optional, Tuple

from .assets import FrameAtlas, FrameRect
from .geometry import Point
from .surface import DrawingSurface
from .timer import CancelHandle


logger = logging.getLogger(__name__)

# Clear region (x, y, w, h) sized to the reference sprite bounding box
DEFAULT_CLEAR_RECT: Tuple[float, float, float, float] = (0.0, 0.0, 600.0, 600.0)


class AnimatorState(Enum):
    IDLE = "idle"
    RUNNING = "running"


class SpriteAnimator:
    """
    Timer-driven frame animation from a sprite sheet.

    IDLE -> start() -> RUNNING -> handle.cancel() / stop() -> IDLE.
    """

    def __init__(self, scheduler, clear_rect: Tuple[float, float, float, float] = DEFAULT_CLEAR_RECT):
        """
        Args:
            scheduler: anything with schedule(interval_ms, callback) -> CancelHandle
            clear_rect: region erased before each frame is drawn
        """
        self.scheduler = scheduler
        self.clear_rect = tuple(clear_rect)
        self.state = AnimatorState.IDLE
        self.current_index: Optional[int] = None
        self.ticks = 0
        self._surface: Optional[DrawingSurface] = None
        self._image: Any = None
        self._atlas: Optional[FrameAtlas] = None
        self._pattern = ""
        self._frame_count = 0
        self._dest = Point(0.0, 0.0)
        self._timer: Optional[CancelHandle] = None
        self._handle: Optional[CancelHandle] = None

    @property
    def running(self) -> bool:
        return self.state is AnimatorState.RUNNING

    def start(
        self,
        surface: DrawingSurface,
        image: Any,
        atlas: FrameAtlas,
        frame_name_pattern: str,
        frame_count: int,
        dest: Tuple[float, float],
        interval_ms: float,
    ) -> CancelHandle:
        """Begin the periodic redraw. The first frame is drawn one interval from now."""
        if self.running:
            raise RuntimeError("animator is already running")
        if frame_count < 1:
            raise ValueError(f"frame_count must be >= 1, got {frame_count}")
        if interval_ms <= 0:
            raise ValueError(f"interval_ms must be positive, got {interval_ms}")

        dest = Point(float(dest[0]), float(dest[1]))
        # Nothing is touched if the scheduler refuses
        timer = self.scheduler.schedule(interval_ms, self.tick)

        self._timer = timer
        self._surface = surface
        self._image = image
        self._atlas = atlas
        self._pattern = frame_name_pattern
        self._frame_count = frame_count
        self._dest = dest
        # Last index, so the first tick wraps to frame 0
        self.current_index = frame_count - 1
        self.ticks = 0
        self.state = AnimatorState.RUNNING
        self._handle = CancelHandle(self._cancel)
        logger.info(
            "[Sprite] Started %d-frame animation '%s' every %sms at (%s, %s)",
            frame_count, frame_name_pattern, interval_ms, self._dest.x, self._dest.y,
        )
        return self._handle

    def stop(self) -> None:
        """Cancel the running animation, if any."""
        if self._handle is not None:
            self._handle.cancel()

    def _cancel(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None
        self.state = AnimatorState.IDLE
        self.current_index = None
        self._handle = None
        logger.info("[Sprite] Stopped after %d ticks", self.ticks)

    def frame_name(self, index: int) -> str:
        """Atlas name of 0-based frame index (atlas names are 1-based)."""
        return self._pattern.format(index + 1)

    def tick(self) -> FrameRect:
        """Advance one frame and draw it. Returns the drawn source rect."""
        if not self.running:
            raise RuntimeError("animator is not running")

        self.current_index = (self.current_index + 1) % self._frame_count
        self.ticks += 1
        name = self.frame_name(self.current_index)
        rect = self._atlas[name]  # FrameNotFound propagates with the index advanced

        surface = self._surface
        surface.clear_rect(*self.clear_rect)
        surface.draw_image_region(
            self._image,
            rect.x, rect.y, rect.w, rect.h,
            self._dest.x, self._dest.y, rect.w, rect.h,
        )
        return rect
