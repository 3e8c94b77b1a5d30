"""
Shared test fixtures for the canvas-demos test suite.

Local fixtures in individual test files override these (pytest convention).
"""

import json
import random

import pytest
from PIL import Image

from canvas_demos.assets import FrameAtlas, FrameRect
from canvas_demos.geometry import Color, Triangle
from canvas_demos.surface import RecordingSurface


FRAME_SIZE = 10
FRAME_COUNT = 8

# One distinct opaque color per frame, frame i at x = i * FRAME_SIZE
FRAME_COLORS = [
    (255, 0, 0), (0, 255, 0), (0, 0, 255), (255, 255, 0),
    (255, 0, 255), (0, 255, 255), (128, 64, 0), (0, 64, 128),
]


# ---------------------------------------------------------------------------
# Geometry
# ---------------------------------------------------------------------------

@pytest.fixture
def big_triangle():
    """The reference outer triangle."""
    return Triangle.from_points([(300.0, 0.0), (0.0, 600.0), (600.0, 600.0)])


@pytest.fixture
def yellow():
    return Color(255, 255, 0)


@pytest.fixture
def rng():
    """Seeded random source so color draws are reproducible."""
    return random.Random(1234)


# ---------------------------------------------------------------------------
# Surfaces
# ---------------------------------------------------------------------------

@pytest.fixture
def recording():
    return RecordingSurface()


# ---------------------------------------------------------------------------
# Sprite sheet + atlas
# ---------------------------------------------------------------------------

def make_run_atlas(count: int = FRAME_COUNT) -> FrameAtlas:
    """Atlas with "Run (1).png" .. "Run (count).png" laid out left to right."""
    return FrameAtlas({
        f"Run ({i + 1}).png": FrameRect(i * FRAME_SIZE, 0, FRAME_SIZE, FRAME_SIZE)
        for i in range(count)
    })


def make_sheet(count: int = FRAME_COUNT) -> Image.Image:
    """Sprite sheet whose frame i is a solid FRAME_COLORS[i] square."""
    sheet = Image.new("RGBA", (count * FRAME_SIZE, FRAME_SIZE), (0, 0, 0, 0))
    for i in range(count):
        block = Image.new("RGBA", (FRAME_SIZE, FRAME_SIZE), FRAME_COLORS[i % len(FRAME_COLORS)] + (255,))
        sheet.paste(block, (i * FRAME_SIZE, 0))
    return sheet


@pytest.fixture
def run_atlas():
    return make_run_atlas()


@pytest.fixture
def sheet():
    return make_sheet()


@pytest.fixture
def sprite_files(tmp_path):
    """Sprite sheet PNG + TexturePacker-style atlas JSON on disk."""
    image_path = tmp_path / "rhb.png"
    atlas_path = tmp_path / "rhb.json"
    make_sheet().save(image_path)
    doc = {
        "frames": {
            name: {"frame": rect.to_dict(), "rotated": False, "trimmed": False}
            for name, rect in make_run_atlas().items()
        },
        "meta": {"image": "rhb.png", "size": {"w": FRAME_COUNT * FRAME_SIZE, "h": FRAME_SIZE}},
    }
    atlas_path.write_text(json.dumps(doc))
    return image_path, atlas_path
