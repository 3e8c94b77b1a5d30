"""
canvas-demos command line.

    canvas-demos fractal --out fractal.png --depth 7 --seed 1
    canvas-demos sprite --image rhb.png --atlas rhb.json --out run.gif --ticks 16
    canvas-demos sprite --image rhb.png --atlas rhb.json --out last.png --realtime 2
"""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import List, Optional

from .config import DEFAULT_CONFIG_PATH, DemoConfig, get_config_manager
from .demo import (
    load_sprite_assets,
    render_fractal_scene,
    render_sprite_frames,
    run_sprite_realtime,
    save_gif,
)
from .errors import CanvasDemoError


logger = logging.getLogger("canvas_demos")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="canvas-demos", description="Triangle fractal and sprite animation demos")
    parser.add_argument("--config", type=Path, default=DEFAULT_CONFIG_PATH,
                        help="YAML or JSON config file (default: %(default)s, defaults used if missing)")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    fractal = sub.add_parser("fractal", help="Render the triangle fractal to an image")
    fractal.add_argument("--out", type=Path, required=True, help="Output image path")
    fractal.add_argument("--depth", type=int, help="Recursion depth (default 7)")
    fractal.add_argument("--seed", type=int, help="Seed for the random colors")
    fractal.add_argument("--backdrop", help="Image drawn at the origin first")

    sprite = sub.add_parser("sprite", help="Play the sprite animation")
    sprite.add_argument("--image", help="Sprite sheet image")
    sprite.add_argument("--atlas", help="Atlas JSON")
    sprite.add_argument("--out", type=Path, required=True, help="Output GIF (or last frame with --realtime)")
    sprite.add_argument("--ticks", type=int, default=16, help="Frames to capture (default 16)")
    sprite.add_argument("--realtime", type=float, metavar="SECONDS",
                        help="Run on the wall clock for SECONDS and save the last frame")
    return parser


def _load_config(path: Path) -> DemoConfig:
    # Fresh copy each run; overrides below mutate it
    return get_config_manager(path).reload()


def _run_fractal(args, config: DemoConfig) -> None:
    if args.depth is not None:
        config.fractal.depth = args.depth
    if args.seed is not None:
        config.fractal.seed = args.seed
    if args.backdrop:
        config.fractal.backdrop = args.backdrop
    valid, error = config.validate()
    if not valid:
        raise ValueError(error)

    surface = render_fractal_scene(config)
    surface.save(str(args.out))
    logger.info("[Fractal] Saved %s", args.out)


def _run_sprite(args, config: DemoConfig) -> None:
    if args.image:
        config.sprite.image = args.image
    if args.atlas:
        config.sprite.atlas = args.atlas
    valid, error = config.validate()
    if not valid:
        raise ValueError(error)

    if args.realtime is not None:
        surface = asyncio.run(run_sprite_realtime(config, args.realtime))
        surface.save(str(args.out))
        logger.info("[Sprite] Saved last frame to %s", args.out)
        return

    image, atlas = load_sprite_assets(config)
    frames = render_sprite_frames(config, args.ticks, image, atlas)
    save_gif(frames, args.out, config.sprite.interval_ms)


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point. Returns the process exit code."""
    args = _build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    config = _load_config(args.config)
    try:
        if args.command == "fractal":
            _run_fractal(args, config)
        else:
            _run_sprite(args, config)
    except CanvasDemoError as e:
        logger.error("%s", e)
        return 1
    except (ValueError, OSError) as e:
        logger.error("Failed: %s", e)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
