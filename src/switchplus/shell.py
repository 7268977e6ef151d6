from __future__ import annotations

import logging
import random
from collections import deque
from typing import Any, Deque, Dict, List, Optional

from .config import ShellConfig
from .daily.modifiers import PONG, SNAKE
from .daily.selector import DailyModifierSelector, DailyState
from .events import EventBus, EventType
from .games.base import GameSession
from .games.pong import PongGame
from .games.snake import SnakeGame
from .progression.ledger import ProgressionLedger
from .progression.unlocks import UnlockRegistry
from .storage import JsonFileStore, KeyValueStore
from .themes import SettingsApp

logger = logging.getLogger(__name__)

DAILY = "daily"
SETTINGS = "settings"
TILES: List[str] = [SNAKE, PONG, DAILY, SETTINGS]

TOAST_SECONDS = 3.0
CLOSE_ACTIONS = ("home", "b")


class Shell:
    """Host loop: tile selection, app routing, and toast notifications.

    Exactly one app is active at a time. Closing an app mid-run discards it
    without awarding anything.
    """

    def __init__(
        self,
        config: ShellConfig,
        store: KeyValueStore,
        bus: Optional[EventBus] = None,
        daily: Optional[DailyModifierSelector] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.config = config
        self.bus = bus or EventBus()
        self.ledger = ProgressionLedger(store, self.bus)
        self.unlocks = UnlockRegistry(self.ledger)
        self.daily = daily or DailyModifierSelector(DailyState(is_hard_mode=config.hard_mode))
        self.apps: Dict[str, GameSession] = {
            SNAKE: SnakeGame(config.grid_w, config.grid_h, self.ledger, self.unlocks, self.daily, rng=rng),
            PONG: PongGame(config.grid_w, config.grid_h, self.ledger, self.unlocks, self.daily),
            SETTINGS: SettingsApp(self.ledger, store, self.bus),
        }
        self.selected_tile = 0
        self.active_app: Optional[str] = None

        self.toasts: Deque[str] = deque()
        self.current_toast: Optional[str] = None
        self._toast_timer = 0.0
        self.bus.subscribe(EventType.FEATURE_UNLOCKED, self._on_unlocked)
        self.bus.subscribe(EventType.LEVEL_UP, self._on_level_up)

    @classmethod
    def from_config(cls, config: ShellConfig, **kwargs: Any) -> "Shell":
        store = JsonFileStore(config.resolve_data_dir())
        return cls(config, store, **kwargs)

    def _on_unlocked(self, payload: Dict[str, Any]) -> None:
        self.toasts.append(f"Achievement Unlocked! {payload['feature_id']}")

    def _on_level_up(self, payload: Dict[str, Any]) -> None:
        self.toasts.append(f"Level Up! You are now Level {payload['level']}!")

    @property
    def app(self) -> Optional[GameSession]:
        if self.active_app is None:
            return None
        return self.apps[self.active_app]

    def launch(self, tile: str) -> str:
        """Open ``tile`` and return the name of the app that became active."""
        if tile not in TILES:
            raise ValueError(f"Unknown tile: {tile}")
        if tile == DAILY:
            modifier = self.daily.activate()
            target = modifier.game
        else:
            self.daily.deactivate()
            target = tile
        app = self.apps[target]
        app.reset()
        self.active_app = target
        logger.info("Launched %s%s", target, " (daily)" if tile == DAILY else "")
        return target

    def close(self) -> None:
        if self.active_app is not None:
            logger.info("Closed %s", self.active_app)
        self.active_app = None

    def handle_input(self, action: str) -> None:
        if self.active_app is not None:
            if action in CLOSE_ACTIONS:
                self.close()
            else:
                self.apps[self.active_app].handle_input(action)
            return

        if action == "left":
            self.selected_tile = max(0, self.selected_tile - 1)
        elif action == "right":
            self.selected_tile = min(len(TILES) - 1, self.selected_tile + 1)
        elif action == "a":
            self.launch(TILES[self.selected_tile])

    def update(self, dt: float) -> None:
        app = self.app
        if app is not None:
            app.update(dt)
        self._update_toasts(dt)

    def _update_toasts(self, dt: float) -> None:
        if self.current_toast is None and self.toasts:
            self.current_toast = self.toasts.popleft()
            self._toast_timer = TOAST_SECONDS
        if self.current_toast is not None:
            self._toast_timer -= dt
            if self._toast_timer <= 0:
                self.current_toast = None

    def status(self) -> Dict[str, Any]:
        progress = self.ledger.xp_progress
        modifier = self.daily.select_modifier()
        return {
            "level": self.ledger.level,
            "xp": progress.current,
            "xp_required": progress.required,
            "unlocked": list(self.ledger.state.unlocked_features),
            "daily": {
                "id": modifier.id,
                "game": modifier.game,
                "name": modifier.name,
                "description": modifier.description,
                "completed": self.ledger.is_daily_completed(),
            },
        }
