"""
Error types for the canvas demos.

None of these are retried: the demos do no I/O of their own beyond the
one-time asset load, so every failure is surfaced to the caller.
"""

from typing import Optional


class CanvasDemoError(Exception):
    """Base class for all demo failures."""
    pass


class FrameNotFound(CanvasDemoError, KeyError):
    """A frame name resolved by the animator is missing from the atlas."""

    def __init__(self, frame_name: str):
        super().__init__(f"frame not found in atlas: {frame_name!r}")
        self.frame_name = frame_name

    def __str__(self) -> str:
        # KeyError would repr() the message
        return str(self.args[0])


class SurfaceUnavailable(CanvasDemoError):
    """The host could not hand back a usable drawing surface."""
    pass


class AssetLoadFailed(CanvasDemoError):
    """An image or atlas document could not be fetched or decoded."""

    def __init__(self, message: str, path: Optional[str] = None):
        super().__init__(message)
        self.path = path
