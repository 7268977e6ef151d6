from __future__ import annotations

import math
from dataclasses import dataclass

MAX_LEVEL = 20

BASE_REQUIREMENT = 10
GROWTH = 1.5
QUANTUM = 5


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def requirement(level: int) -> float:
    """XP needed to advance from ``level`` to ``level + 1``.

    10 * 1.5^(level-1), rounded to the nearest multiple of 5 (halves round up),
    so levels 1, 2, 3 need 10, 15, 25. Infinite at the level cap.
    """
    if level >= MAX_LEVEL:
        return math.inf
    raw = BASE_REQUIREMENT * (GROWTH ** (level - 1))
    return _round_half_up(raw / QUANTUM) * QUANTUM


@dataclass(frozen=True)
class XPProgress:
    current: int
    required: int
    percentage: float


def progress_for(level: int, xp: int) -> XPProgress:
    """Progress bar readout for the current level; a full bar at the cap."""
    if level >= MAX_LEVEL:
        return XPProgress(current=1, required=1, percentage=1.0)
    required = int(requirement(level))
    return XPProgress(current=xp, required=required, percentage=min(1.0, xp / required))
