from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

logger = logging.getLogger(__name__)

SNAKE = "snake"
PONG = "pong"

Patch = Dict[str, Any]
PatchFn = Callable[[Any], Patch]


@dataclass(frozen=True)
class Modifier:
    """Immutable description of one day's rule change.

    Attributes:
        id: Stable identifier; also the key into MODIFIER_PATCHES.
        game: Which game the modifier targets ('snake' or 'pong').
        name: Display name.
        description: Player-facing summary.
    """

    id: str
    game: str
    name: str
    description: str


# Order defines which day maps to which modifier. Append only.
MODIFIER_CATALOG: List[Modifier] = [
    Modifier("snake_fast", SNAKE, "Lightning Snake", "Snake moves 50% faster"),
    Modifier("pong_strong_ai", PONG, "Pro AI", "AI paddle is faster and ball starts faster"),
    Modifier("snake_small_grid", SNAKE, "Claustrophobia", "Playfield is smaller"),
    Modifier("pong_reverse", PONG, "Inverted Pong", "Up is Down, Down is Up"),
    Modifier("snake_growth", SNAKE, "Growth Spurt", "Apples grow your snake by 3 segments instead of 1"),
    Modifier("pong_tiny_paddle", PONG, "Sniper Pong", "Your paddle is 50% smaller"),
]


def _shrink_grid(rules: Any) -> Patch:
    return {
        "grid_w": math.floor(rules.grid_w * 0.7),
        "grid_h": math.floor(rules.grid_h * 0.7),
    }


MODIFIER_PATCHES: Dict[str, PatchFn] = {
    "snake_fast": lambda rules: {"tick_interval": 0.05},
    "pong_strong_ai": lambda rules: {"ai_speed_mult": 1.5, "ball_base_speed": 40},
    "snake_small_grid": _shrink_grid,
    "pong_reverse": lambda rules: {"controls_inverted": True},
    "snake_growth": lambda rules: {"growth_per_apple": 3},
    "pong_tiny_paddle": lambda rules: {"player_paddle_height_mult": 0.5},
}


def _hard_snake(rules: Any) -> Patch:
    return {"tick_interval": (getattr(rules, "tick_interval", None) or 0.1) * 0.8}


def _hard_pong(rules: Any) -> Patch:
    return {"ai_speed_mult": (getattr(rules, "ai_speed_mult", None) or 1.0) * 1.25}


HARD_MODE_PATCHES: Dict[str, PatchFn] = {
    SNAKE: _hard_snake,
    PONG: _hard_pong,
}


def get_modifier(modifier_id: str) -> Optional[Modifier]:
    for modifier in MODIFIER_CATALOG:
        if modifier.id == modifier_id:
            return modifier
    return None


def patch_for(modifier_id: str, rules: Any) -> Patch:
    """Compute the patch a modifier would apply to ``rules`` without mutating it.

    Unknown ids yield an empty patch.
    """
    fn = MODIFIER_PATCHES.get(modifier_id)
    if fn is None:
        logger.warning("No patch registered for modifier '%s'", modifier_id)
        return {}
    return fn(rules)


def apply_patch(rules: Any, patch: Patch) -> None:
    """Set each patched field on ``rules``; names the rules object lacks are skipped."""
    for name, value in patch.items():
        if not hasattr(rules, name):
            logger.warning("Ignoring patch field '%s' unknown to %s", name, type(rules).__name__)
            continue
        setattr(rules, name, value)
