from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Dict, Mapping, Optional

from .ledger import ProgressionLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class UnlockCondition:
    condition_id: str
    description: str
    reward_feature_id: Optional[str] = None


UNLOCK_CATALOG: Dict[str, UnlockCondition] = {
    "snake_score_15": UnlockCondition(
        "snake_score_15",
        "Score 150+ in Snake (Eat 15 apples)",
        "Retro Hacker",
    ),
    "pong_flawless": UnlockCondition(
        "pong_flawless",
        "Win a game of Pong 5-0 without the AI scoring",
        "Neon Sunset",
    ),
}


def _stat(stats: Mapping[str, Any], key: str) -> int:
    return int(stats.get(key, 0) or 0)


CONDITION_PREDICATES: Dict[str, Callable[[Mapping[str, Any]], bool]] = {
    # 10 points per apple, so 150 is fifteen apples
    "snake_score_15": lambda s: _stat(s, "score") >= 150,
    "pong_flawless": lambda s: _stat(s, "player_score") >= 5 and _stat(s, "ai_score") == 0,
}


class UnlockRegistry:
    """Evaluates achievement conditions against finished runs.

    Earned condition ids are stored in the ledger's unlocked set alongside
    cosmetic rewards, which is what makes every grant happen at most once.
    """

    def __init__(
        self,
        ledger: ProgressionLedger,
        catalog: Optional[Dict[str, UnlockCondition]] = None,
        predicates: Optional[Dict[str, Callable[[Mapping[str, Any]], bool]]] = None,
    ) -> None:
        self._ledger = ledger
        self.catalog = dict(catalog if catalog is not None else UNLOCK_CATALOG)
        self._predicates = dict(predicates if predicates is not None else CONDITION_PREDICATES)

    def is_earned(self, condition_id: str) -> bool:
        return self._ledger.has_unlocked(condition_id)

    def check_condition(self, condition_id: str, stats: Mapping[str, Any]) -> bool:
        """Grant ``condition_id`` if its predicate holds for ``stats``.

        Returns True only when this call granted it.
        """
        if self._ledger.has_unlocked(condition_id):
            return False
        predicate = self._predicates.get(condition_id)
        if predicate is None or condition_id not in self.catalog:
            logger.warning("Unknown unlock condition '%s'; ignoring", condition_id)
            return False
        if not predicate(stats):
            return False
        self._grant(condition_id)
        return True

    def _grant(self, condition_id: str) -> None:
        entry = self.catalog[condition_id]
        self._ledger.unlock_feature(condition_id)
        if entry.reward_feature_id:
            self._ledger.unlock_feature(entry.reward_feature_id)
        logger.info("Unlocked achievement %s; reward: %s", condition_id, entry.reward_feature_id)
