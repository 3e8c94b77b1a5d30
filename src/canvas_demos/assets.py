"""
Assets - sprite sheet images and frame atlases.

Atlas documents are the JSON that sprite packers emit. Three shapes
are accepted:

    {"frames": {"Run (1).png": {"frame": {"x": 0, "y": 0, "w": 10, "h": 10}}}}
    {"frames": [{"filename": "Run (1).png", "frame": {...}}]}
    {"Run (1).png": {"x": 0, "y": 0, "w": 10, "h": 10}}

Image decode can be awaited through ImageReady, a result cell that
settles exactly once.
"""

import asyncio
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from collections.abc import Mapping
from typing import Any, Dict, Iterator, Optional, Union

from PIL import Image, UnidentifiedImageError

from .errors import AssetLoadFailed, FrameNotFound


logger = logging.getLogger(__name__)

PathLike = Union[str, Path]


@dataclass(frozen=True)
class FrameRect:
    """Source rectangle of one frame inside the sprite sheet."""
    x: int
    y: int
    w: int
    h: int

    def __post_init__(self):
        for name in ("x", "y", "w", "h"):
            value = getattr(self, name)
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                raise ValueError(f"frame {name} must be a non-negative int, got {value!r}")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FrameRect":
        return cls(int(data["x"]), int(data["y"]), int(data["w"]), int(data["h"]))

    def to_dict(self) -> Dict[str, int]:
        return {"x": self.x, "y": self.y, "w": self.w, "h": self.h}


class FrameAtlas(Mapping):
    """Read-only frame-name -> FrameRect mapping. Misses raise FrameNotFound."""

    def __init__(self, frames: Mapping[str, FrameRect]):
        self._frames: Dict[str, FrameRect] = dict(frames)
        for name, rect in self._frames.items():
            if rect.w == 0 or rect.h == 0:
                raise ValueError(f"frame {name!r} has zero size {rect.w}x{rect.h}")

    def __getitem__(self, name: str) -> FrameRect:
        try:
            return self._frames[name]
        except KeyError:
            raise FrameNotFound(name) from None

    def __iter__(self) -> Iterator[str]:
        return iter(self._frames)

    def __len__(self) -> int:
        return len(self._frames)

    def __repr__(self) -> str:
        return f"FrameAtlas({len(self._frames)} frames)"

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "FrameAtlas":
        """
        Build from a parsed atlas document.

        Raises:
            ValueError / KeyError / TypeError on malformed documents
        """
        if not isinstance(data, Mapping):
            raise TypeError(f"atlas document must be an object, got {type(data).__name__}")

        frames_section = data.get("frames", data)
        frames: Dict[str, FrameRect] = {}

        if isinstance(frames_section, list):
            # Array export: [{"filename": ..., "frame": {...}}, ...]
            for entry in frames_section:
                name = entry["filename"]
                if name in frames:
                    raise ValueError(f"duplicate frame name: {name!r}")
                frames[name] = FrameRect.from_dict(entry.get("frame", entry))
        elif isinstance(frames_section, Mapping):
            for name, entry in frames_section.items():
                if name == "meta":
                    continue
                frames[name] = FrameRect.from_dict(entry.get("frame", entry))
        else:
            raise TypeError("atlas 'frames' must be an object or a list")

        return cls(frames)


def _reject_duplicate_keys(pairs):
    """object_pairs_hook for json.load: repeated keys are an error, not last-wins."""
    obj = {}
    for key, value in pairs:
        if key in obj:
            raise ValueError(f"duplicate key: {key!r}")
        obj[key] = value
    return obj


def load_atlas(path: PathLike) -> FrameAtlas:
    """Read and parse an atlas JSON file. Raises AssetLoadFailed."""
    path = Path(path)
    try:
        with open(path, "r") as f:
            data = json.load(f, object_pairs_hook=_reject_duplicate_keys)
    except (OSError, ValueError) as e:
        raise AssetLoadFailed(f"could not read atlas {path}: {e}", path=str(path)) from e

    try:
        atlas = FrameAtlas.from_dict(data)
    except (KeyError, ValueError, TypeError, AttributeError) as e:
        raise AssetLoadFailed(f"malformed atlas {path}: {e}", path=str(path)) from e

    logger.info("[Assets] Loaded atlas %s (%d frames)", path.name, len(atlas))
    return atlas


def load_image(path: PathLike) -> Image.Image:
    """Open and fully decode an image. Raises AssetLoadFailed."""
    path = Path(path)
    try:
        with Image.open(path) as im:
            im.load()
            image = im.convert("RGBA")
    except (OSError, UnidentifiedImageError, Image.DecompressionBombError) as e:
        raise AssetLoadFailed(f"could not load image {path}: {e}", path=str(path)) from e

    logger.info("[Assets] Loaded image %s (%dx%d)", path.name, image.width, image.height)
    return image


class ImageReady:
    """
    Single-assignment result cell for an image load.

    The first resolve() or fail() wins; later calls return False and
    change nothing. Must be settled from the loop's thread.
    """

    def __init__(self, loop: Optional[asyncio.AbstractEventLoop] = None):
        loop = loop or asyncio.get_running_loop()
        self._future: asyncio.Future = loop.create_future()

    @property
    def settled(self) -> bool:
        return self._future.done()

    def resolve(self, image: Image.Image) -> bool:
        if self._future.done():
            logger.debug("[Assets] Ignoring second resolution of image-ready cell")
            return False
        self._future.set_result(image)
        return True

    def fail(self, error: BaseException) -> bool:
        if self._future.done():
            logger.debug("[Assets] Ignoring late failure of image-ready cell: %s", error)
            return False
        self._future.set_exception(error)
        return True

    async def wait(self) -> Image.Image:
        """Wait for the image. Re-raises the failure if the load failed."""
        return await asyncio.shield(self._future)


async def load_image_async(path: PathLike) -> Image.Image:
    """Decode an image off the event loop and wait for it to be ready."""
    loop = asyncio.get_running_loop()
    ready = ImageReady(loop)

    def _decode():
        try:
            image = load_image(path)
        except Exception as e:
            # Forward every failure so the waiter never hangs
            loop.call_soon_threadsafe(ready.fail, e)
        else:
            loop.call_soon_threadsafe(ready.resolve, image)

    loop.run_in_executor(None, _decode)
    return await ready.wait()
