"""
Configuration - demo scene settings.

Defaults reproduce the reference scenes: a 600x600 canvas, a depth-7
fractal in the big triangle (300,0) (0,600) (600,600) starting from
yellow, and an 8-frame "Run (n).png" cycle at (300,300) every 50ms.

Loaded from YAML or JSON by file suffix; a broken or invalid file falls
back to defaults with a warning.
"""

import json
import logging
import yaml
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Tuple, Optional, Dict, Any, List


logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("canvas_demos.yaml")


@dataclass
class CanvasConfig:
    """Drawing surface settings."""
    width: int = 600
    height: int = 600
    background: List[int] = field(default_factory=lambda: [255, 255, 255])


@dataclass
class FractalConfig:
    """Fractal scene settings."""
    depth: int = 7
    triangle: List[List[float]] = field(default_factory=lambda: [
        [300.0, 0.0],
        [0.0, 600.0],
        [600.0, 600.0],
    ])
    color: List[int] = field(default_factory=lambda: [255, 255, 0])
    seed: Optional[int] = None      # None = unseeded colors
    backdrop: Optional[str] = None  # Image drawn at the origin before the fractal

    def validate(self) -> Tuple[bool, Optional[str]]:
        if self.depth < 0:
            return False, "depth must be >= 0"
        if len(self.triangle) != 3 or any(len(p) != 2 for p in self.triangle):
            return False, "triangle must be 3 [x, y] points"
        if len(self.color) != 3 or not all(0 <= c <= 255 for c in self.color):
            return False, "color must be 3 channels in 0-255"
        return True, None


@dataclass
class SpriteConfig:
    """Sprite animation scene settings."""
    image: str = "rhb.png"
    atlas: str = "rhb.json"
    frame_pattern: str = "Run ({}).png"
    frame_count: int = 8
    dest: List[float] = field(default_factory=lambda: [300.0, 300.0])
    interval_ms: float = 50.0
    clear_rect: List[float] = field(default_factory=lambda: [0.0, 0.0, 600.0, 600.0])

    def validate(self) -> Tuple[bool, Optional[str]]:
        if self.frame_count < 1:
            return False, "frame_count must be >= 1"
        if self.interval_ms <= 0:
            return False, "interval_ms must be positive"
        if "{" not in self.frame_pattern:
            return False, "frame_pattern needs a {} placeholder for the frame number"
        if len(self.dest) != 2:
            return False, "dest must be [x, y]"
        if len(self.clear_rect) != 4:
            return False, "clear_rect must be [x, y, w, h]"
        return True, None


@dataclass
class DemoConfig:
    """Complete configuration for both demos."""
    canvas: CanvasConfig = field(default_factory=CanvasConfig)
    fractal: FractalConfig = field(default_factory=FractalConfig)
    sprite: SpriteConfig = field(default_factory=SpriteConfig)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "canvas": asdict(self.canvas),
            "fractal": asdict(self.fractal),
            "sprite": asdict(self.sprite),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "DemoConfig":
        """Create from dictionary. Missing sections use defaults."""
        data = data or {}
        return cls(
            canvas=CanvasConfig(**data.get("canvas", {})),
            fractal=FractalConfig(**data.get("fractal", {})),
            sprite=SpriteConfig(**data.get("sprite", {})),
        )

    def validate(self) -> Tuple[bool, Optional[str]]:
        """Validate entire configuration."""
        if self.canvas.width <= 0 or self.canvas.height <= 0:
            return False, "canvas width and height must be positive"
        if len(self.canvas.background) not in (3, 4):
            return False, "canvas background must be RGB or RGBA"

        valid, error = self.fractal.validate()
        if not valid:
            return False, f"Fractal: {error}"

        valid, error = self.sprite.validate()
        if not valid:
            return False, f"Sprite: {error}"

        return True, None


class ConfigManager:
    """Manages configuration loading and saving."""

    def __init__(self, config_path: Optional[Path] = None):
        """
        Args:
            config_path: Path to config file (default: canvas_demos.yaml in current dir)
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        self.config_path = Path(config_path)
        self._config: Optional[DemoConfig] = None

    def _is_yaml(self) -> bool:
        return self.config_path.suffix in (".yaml", ".yml")

    def load(self, force_reload: bool = False) -> DemoConfig:
        """Load configuration from file or return defaults."""
        if self._config is not None and not force_reload:
            return self._config

        if self.config_path.exists():
            try:
                with open(self.config_path, "r") as f:
                    data = yaml.safe_load(f) if self._is_yaml() else json.load(f)

                self._config = DemoConfig.from_dict(data)

                valid, error = self._config.validate()
                if not valid:
                    logger.warning("[Config] Invalid config, using defaults: %s", error)
                    self._config = DemoConfig()
            except Exception as e:
                logger.warning("[Config] Error loading config, using defaults: %s", e)
                self._config = DemoConfig()
        else:
            self._config = DemoConfig()

        return self._config

    def save(self, config: Optional[DemoConfig] = None) -> bool:
        """Save configuration to file. Returns True if saved."""
        if config is None:
            config = self._config or self.load()

        valid, error = config.validate()
        if not valid:
            logger.error("[Config] Cannot save invalid config: %s", error)
            return False

        try:
            data = config.to_dict()
            with open(self.config_path, "w") as f:
                if self._is_yaml():
                    yaml.dump(data, f, default_flow_style=False, sort_keys=False)
                else:
                    json.dump(data, f, indent=2)
            self._config = config
            return True
        except OSError as e:
            logger.error("[Config] Error saving config: %s", e)
            return False

    def reload(self) -> DemoConfig:
        """Force reload configuration from file."""
        self._config = None
        return self.load()


# Global config manager instance
_config_manager: Optional[ConfigManager] = None


def get_config_manager(config_path: Optional[Path] = None) -> ConfigManager:
    """Get global config manager instance, rebinding it when a different path is given."""
    global _config_manager
    if _config_manager is None or (
        config_path is not None and Path(config_path) != _config_manager.config_path
    ):
        _config_manager = ConfigManager(config_path)
    return _config_manager
