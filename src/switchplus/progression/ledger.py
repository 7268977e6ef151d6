from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, field
from datetime import date
from typing import Any, Callable, Dict, List, Optional

from ..errors import StorageError
from ..events import EventBus, EventType
from ..storage import PROGRESS_KEY, KeyValueStore
from .xp_curve import MAX_LEVEL, XPProgress, progress_for, requirement

logger = logging.getLogger(__name__)

DEFAULT_FEATURES = ("Neon (Default)", "Classic Grey")

# Reaching these levels grants the named cosmetic.
LEVEL_UNLOCKS: Dict[int, str] = {
    5: "Animal Crossing",
    10: "Pokemon (Pikachu/Eevee)",
}


@dataclass
class ProgressState:
    """Persistent progression snapshot.

    ``unlocked_features`` and ``daily_completion_dates`` are kept as ordered,
    duplicate-free lists so the JSON form is stable.
    """

    xp: int = 0
    level: int = 1
    unlocked_features: List[str] = field(default_factory=lambda: list(DEFAULT_FEATURES))
    daily_completion_dates: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "ProgressState":
        """Merge a stored snapshot over defaults. Missing keys keep their default."""
        state = cls()
        if "xp" in d:
            state.xp = max(0, int(d["xp"]))
        if "level" in d:
            state.level = max(1, min(MAX_LEVEL, int(d["level"])))
        if "unlocked_features" in d:
            state.unlocked_features = _dedupe(_string_list(d, "unlocked_features"))
        if "daily_completion_dates" in d:
            state.daily_completion_dates = _dedupe(_string_list(d, "daily_completion_dates"))
        _carry_levels(state)
        return state


def _string_list(d: Dict[str, Any], key: str) -> List[str]:
    value = d[key]
    if not isinstance(value, list):
        raise TypeError(f"'{key}' must be a list, got {type(value).__name__}")
    return [str(item) for item in value]


def _dedupe(items) -> List[str]:
    out: List[str] = []
    for item in items:
        if item not in out:
            out.append(item)
    return out


def _carry_levels(state: ProgressState) -> bool:
    """Spend XP on level-ups until ``xp < requirement(level)``; zero XP at the cap.

    Returns True when at least one level was gained.
    """
    leveled_up = False
    required = requirement(state.level)
    while state.xp >= required and state.level < MAX_LEVEL:
        state.xp -= int(required)
        state.level += 1
        leveled_up = True
        required = requirement(state.level)
    # No overflow carry past the cap
    if state.level >= MAX_LEVEL:
        state.xp = 0
    return leveled_up


class ProgressionLedger:
    """Owns XP, level, unlocked features and daily completions; persists on every mutation.

    Persistence faults never propagate: a failed load starts from defaults and a
    failed save keeps the in-memory state.
    """

    def __init__(
        self,
        store: KeyValueStore,
        bus: Optional[EventBus] = None,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._store = store
        self._bus = bus or EventBus()
        self._today = today
        self.state = self._load()

    @property
    def bus(self) -> EventBus:
        return self._bus

    @property
    def level(self) -> int:
        return self.state.level

    @property
    def xp(self) -> int:
        return self.state.xp

    @property
    def xp_progress(self) -> XPProgress:
        return progress_for(self.state.level, self.state.xp)

    def _load(self) -> ProgressState:
        try:
            raw = self._store.get(PROGRESS_KEY)
            if raw:
                data = json.loads(raw)
                if not isinstance(data, dict):
                    raise ValueError("progress snapshot is not an object")
                state = ProgressState.from_dict(data)
                logger.debug("Loaded progress: level=%d xp=%d", state.level, state.xp)
                return state
        except (StorageError, OSError, ArithmeticError, ValueError, TypeError):
            # Non-finite numbers (Infinity, 1e999) surface as OverflowError from int()
            logger.exception("Could not load progress; using defaults")
        return ProgressState()

    def save(self) -> None:
        try:
            self._store.set(PROGRESS_KEY, json.dumps(self.state.to_dict()))
            logger.debug("Saved progress: level=%d xp=%d", self.state.level, self.state.xp)
        except (StorageError, OSError):
            logger.exception("Could not save progress")

    def add_xp(self, amount: int, reason: str = "Played a game") -> None:
        if amount < 0:
            raise ValueError("XP amount cannot be negative")
        if self.state.level >= MAX_LEVEL:
            logger.debug("At level cap; ignoring %d XP (%s)", amount, reason)
            return

        self.state.xp += amount
        leveled_up = _carry_levels(self.state)
        self.save()

        self._bus.emit(EventType.XP_ADDED, {"amount": amount, "reason": reason})
        if leveled_up:
            logger.info("Level up: now level %d (%s)", self.state.level, reason)
            self._bus.emit(EventType.LEVEL_UP, {"level": self.state.level})
            self._check_level_unlocks()

    def _check_level_unlocks(self) -> None:
        for lvl in range(2, self.state.level + 1):
            feature = LEVEL_UNLOCKS.get(lvl)
            if feature and not self.has_unlocked(feature):
                self.unlock_feature(feature)

    def has_unlocked(self, feature_id: str) -> bool:
        return feature_id in self.state.unlocked_features

    def unlock_feature(self, feature_id: str) -> bool:
        """Grant ``feature_id``. Returns True only on the call that actually added it."""
        if self.has_unlocked(feature_id):
            return False
        self.state.unlocked_features.append(feature_id)
        self.save()
        logger.info("Unlocked feature '%s'", feature_id)
        self._bus.emit(EventType.FEATURE_UNLOCKED, {"feature_id": feature_id})
        return True

    def _today_str(self) -> str:
        return self._today().isoformat()

    def mark_daily_completed(self) -> None:
        today = self._today_str()
        if today not in self.state.daily_completion_dates:
            self.state.daily_completion_dates.append(today)
            self.save()
            logger.info("Daily challenge completed for %s", today)

    def is_daily_completed(self) -> bool:
        return self._today_str() in self.state.daily_completion_dates

    def reset(self) -> None:
        """Reset in-memory and persisted progress (for tests or debug)."""
        self.state = ProgressState()
        self.save()
