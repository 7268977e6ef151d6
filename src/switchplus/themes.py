from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import List, Optional

from .errors import StorageError
from .events import EventBus, EventType
from .games.base import InputAction, parse_action
from .progression.ledger import ProgressionLedger
from .storage import ACTIVE_THEME_KEY, KeyValueStore

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Theme:
    """Controller colour pair. ``name`` doubles as the unlock feature id."""

    name: str
    left_color: str
    right_color: str


THEMES: List[Theme] = [
    Theme("Neon (Default)", "#00c3e3", "#ff4554"),
    Theme("Classic Grey", "#888888", "#888888"),
    Theme("Animal Crossing", "#7eedba", "#06b0d9"),
    Theme("Pokemon (Pikachu/Eevee)", "#eac83c", "#d6a058"),
    Theme("Retro Hacker", "#10b981", "#10b981"),
    Theme("Neon Sunset", "#f43f5e", "#f59e0b"),
]

DEFAULT_THEME = THEMES[0]


def theme_by_name(name: str) -> Optional[Theme]:
    for theme in THEMES:
        if theme.name == name:
            return theme
    return None


class SettingsApp:
    """Theme picker. Locked themes can be browsed but not applied."""

    def __init__(self, ledger: ProgressionLedger, store: KeyValueStore, bus: Optional[EventBus] = None) -> None:
        self._ledger = ledger
        self._store = store
        self._bus = bus or ledger.bus
        self.themes = list(THEMES)
        self.selected_index = 0
        self.game_over = False

    def reset(self) -> None:
        self.selected_index = 0

    @property
    def selected(self) -> Theme:
        return self.themes[self.selected_index]

    def is_unlocked(self, theme: Theme) -> bool:
        return self._ledger.has_unlocked(theme.name)

    def handle_input(self, action: str) -> None:
        act = parse_action(action)
        if act is InputAction.UP:
            self.selected_index = max(0, self.selected_index - 1)
        elif act is InputAction.DOWN:
            self.selected_index = min(len(self.themes) - 1, self.selected_index + 1)
        elif act is InputAction.A:
            self.apply_selected()

    def apply_selected(self) -> bool:
        theme = self.selected
        if not self.is_unlocked(theme):
            logger.debug("Theme '%s' is locked", theme.name)
            return False
        try:
            self._store.set(ACTIVE_THEME_KEY, theme.name)
        except (StorageError, OSError):
            logger.exception("Could not save active theme")
        logger.info("Applied theme '%s'", theme.name)
        self._bus.emit(EventType.THEME_CHANGED, {"theme": theme})
        return True

    def update(self, dt: float) -> None:
        # Static until input
        pass

    def active_theme(self) -> Theme:
        try:
            name = self._store.get(ACTIVE_THEME_KEY)
        except (StorageError, OSError):
            logger.exception("Could not read active theme")
            return DEFAULT_THEME
        if name is None:
            return DEFAULT_THEME
        return theme_by_name(name) or DEFAULT_THEME
