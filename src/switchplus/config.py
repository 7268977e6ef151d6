from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from platformdirs import user_data_dir

logger = logging.getLogger(__name__)

APP_NAME = "switchplus"

# Environment variable override (useful for tests and power users)
ENV_DATA_DIR = "SWITCHPLUS_DATA_DIR"


@dataclass
class ShellConfig:
    """Host shell configuration.

    - grid_w / grid_h: playfield size in grid cells shared by both games.
    - data_dir: where the JSON store lives. None means the platform data dir.
    - hard_mode: whether daily runs stack the universal difficulty patch.
    """

    grid_w: int = 32
    grid_h: int = 18
    data_dir: Optional[Path] = None
    hard_mode: bool = False

    def __post_init__(self) -> None:
        if self.grid_w <= 0 or self.grid_h <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {self.grid_w}x{self.grid_h}")

    def resolve_data_dir(self) -> Path:
        if self.data_dir is not None:
            return Path(self.data_dir)
        override = os.getenv(ENV_DATA_DIR)
        if override:
            return Path(override)
        return Path(user_data_dir(appname=APP_NAME))

    @classmethod
    def from_json(cls, path: Path) -> "ShellConfig":
        """Load configuration from JSON file. Missing fields fallback to defaults."""
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")
        with path.open("r", encoding="utf-8") as f:
            raw = json.load(f)
        cfg = cls()
        if "grid_w" in raw:
            cfg.grid_w = int(raw["grid_w"])
        if "grid_h" in raw:
            cfg.grid_h = int(raw["grid_h"])
        if raw.get("data_dir"):
            cfg.data_dir = Path(raw["data_dir"])
        if "hard_mode" in raw:
            cfg.hard_mode = bool(raw["hard_mode"])
        cfg.__post_init__()
        logger.debug("Loaded shell config from %s: %r", path, cfg)
        return cfg
