from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Protocol


class InputAction(str, Enum):
    """Logical buttons a game receives from the shell.

    Members compare equal to their string values, so games accept either.
    """

    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"
    A = "a"


def parse_action(action: Any) -> Optional[InputAction]:
    """Return the InputAction for ``action`` or None if it is not one."""
    try:
        return InputAction(action)
    except ValueError:
        return None


@dataclass(frozen=True)
class GameOutcome:
    """What a finished run reported to the progression ledger."""

    game: str
    xp_awarded: int
    daily: bool
    stats: Dict[str, Any] = field(default_factory=dict)


class GameSession(Protocol):
    """Contract every app driven by the shell satisfies."""

    def reset(self) -> None:
        ...

    def handle_input(self, action: str) -> None:
        ...

    def update(self, dt: float) -> None:
        ...
