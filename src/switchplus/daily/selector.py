from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence

from .modifiers import (
    HARD_MODE_PATCHES,
    MODIFIER_CATALOG,
    Modifier,
    apply_patch,
    patch_for,
)

logger = logging.getLogger(__name__)

MS_PER_DAY = 86_400_000


def daily_seed(now_ms: int) -> int:
    """Days elapsed since the Unix epoch; changes exactly at each UTC midnight."""
    return int(now_ms // MS_PER_DAY)


@dataclass
class DailyState:
    """Session flags for the daily challenge.

    ``is_active`` marks the next run as daily-flavored. It is consumed by the
    game that ends the run, so at most one run counts per activation.
    """

    is_active: bool = False
    is_hard_mode: bool = False

    def consume(self) -> bool:
        """Clear the active flag and report whether it was set."""
        was_active = self.is_active
        self.is_active = False
        return was_active


class DailyModifierSelector:
    """Picks today's modifier from a fixed catalog and applies it to game rules.

    The clock returns Unix time in seconds, so tests can pin any day.
    """

    def __init__(
        self,
        state: Optional[DailyState] = None,
        catalog: Optional[Sequence[Modifier]] = None,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self.state = state or DailyState()
        self.catalog: List[Modifier] = list(catalog if catalog is not None else MODIFIER_CATALOG)
        if not self.catalog:
            raise ValueError("Modifier catalog must not be empty")
        self._clock = clock

    def get_daily_seed(self) -> int:
        return daily_seed(int(self._clock() * 1000))

    def select_modifier(self) -> Modifier:
        seed = self.get_daily_seed()
        return self.catalog[seed % len(self.catalog)]

    def activate(self, hard_mode: Optional[bool] = None) -> Modifier:
        """Flag the next run as today's challenge and return the modifier it will use."""
        self.state.is_active = True
        if hard_mode is not None:
            self.state.is_hard_mode = hard_mode
        modifier = self.select_modifier()
        logger.info("Daily challenge activated: %s (hard=%s)", modifier.name, self.state.is_hard_mode)
        return modifier

    def deactivate(self) -> None:
        self.state.is_active = False

    def apply_to_game(self, rules: Any, game_id: str) -> Optional[Modifier]:
        """Patch ``rules`` with today's modifier if the daily is active and targets ``game_id``.

        Must run before any per-run random state is derived from the rules.
        Returns the applied modifier, or None when nothing was applied.
        """
        if not self.state.is_active:
            return None

        modifier = self.select_modifier()
        if modifier.game != game_id:
            logger.debug("Daily modifier %s targets %s, not %s", modifier.id, modifier.game, game_id)
            return None

        logger.info("Applying daily modifier: %s", modifier.name)
        apply_patch(rules, patch_for(modifier.id, rules))

        if self.state.is_hard_mode:
            hard = HARD_MODE_PATCHES.get(game_id)
            if hard is not None:
                logger.info("Hard mode active; applying universal difficulty patch for %s", game_id)
                apply_patch(rules, hard(rules))
        return modifier
