from __future__ import annotations

import logging
import math
import random
from dataclasses import dataclass
from typing import List, Optional, Tuple

from ..daily.modifiers import SNAKE
from ..daily.selector import DailyModifierSelector
from ..progression.ledger import ProgressionLedger
from ..progression.unlocks import UnlockRegistry
from .base import GameOutcome, InputAction, parse_action

logger = logging.getLogger(__name__)

Cell = Tuple[int, int]
Vector = Tuple[int, int]

POINTS_PER_APPLE = 10
DAILY_XP_MULTIPLIER = 1.5
UNLOCK_CONDITION = "snake_score_15"


@dataclass
class SnakeRules:
    """Per-run configuration that daily modifiers may patch."""

    grid_w: int
    grid_h: int
    tick_interval: float = 0.1
    growth_per_apple: int = 1


@dataclass(frozen=True)
class SnakeSnapshot:
    grid_w: int
    grid_h: int
    body: Tuple[Cell, ...]
    food: Cell
    score: int
    game_over: bool


class SnakeGame:
    """Grid snake driven by accumulated delta time.

    The base grid size is kept separately so a shrinking modifier from one run
    never compounds into the next.
    """

    def __init__(
        self,
        grid_w: int,
        grid_h: int,
        ledger: ProgressionLedger,
        unlocks: UnlockRegistry,
        daily: DailyModifierSelector,
        rng: Optional[random.Random] = None,
    ) -> None:
        if grid_w <= 0 or grid_h <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {grid_w}x{grid_h}")
        self.base_grid_w = grid_w
        self.base_grid_h = grid_h
        self._ledger = ledger
        self._unlocks = unlocks
        self._daily = daily
        self._rng = rng or random.Random()
        self.last_outcome: Optional[GameOutcome] = None
        self.reset()

    @property
    def grid_w(self) -> int:
        return self.rules.grid_w

    @property
    def grid_h(self) -> int:
        return self.rules.grid_h

    def reset(self) -> None:
        self.rules = SnakeRules(grid_w=self.base_grid_w, grid_h=self.base_grid_h)
        # Before food placement, so a resized grid bounds the spawn
        self.applied_modifier = self._daily.apply_to_game(self.rules, SNAKE)

        cx, cy = self.rules.grid_w // 2, self.rules.grid_h // 2
        self.snake: List[Cell] = [(cx, cy), (cx - 1, cy), (cx - 2, cy)]
        self.direction: Vector = (1, 0)
        self.next_direction: Vector = (1, 0)
        self.score = 0
        self.game_over = False
        self.timer = 0.0
        self.spawn_food()
        logger.debug("Snake reset on %dx%d grid", self.rules.grid_w, self.rules.grid_h)

    def spawn_food(self) -> None:
        # May land on the snake body; the next spawn happens only when eaten.
        self.food: Cell = (self._rng.randrange(self.rules.grid_w), self._rng.randrange(self.rules.grid_h))

    def handle_input(self, action: str) -> None:
        act = parse_action(action)
        if act is None:
            return
        dx, dy = self.direction
        if act is InputAction.UP and dy == 0:
            self.next_direction = (0, -1)
        elif act is InputAction.DOWN and dy == 0:
            self.next_direction = (0, 1)
        elif act is InputAction.LEFT and dx == 0:
            self.next_direction = (-1, 0)
        elif act is InputAction.RIGHT and dx == 0:
            self.next_direction = (1, 0)
        elif act is InputAction.A and self.game_over:
            self.reset()

    def update(self, dt: float) -> None:
        if self.game_over:
            return
        self.timer += dt
        if self.timer > self.rules.tick_interval:
            self.timer = 0.0
            self._step()

    def _step(self) -> None:
        self.direction = self.next_direction
        hx, hy = self.snake[0]
        head = (hx + self.direction[0], hy + self.direction[1])

        if not (0 <= head[0] < self.rules.grid_w and 0 <= head[1] < self.rules.grid_h):
            logger.debug("Snake hit the wall at %s", head)
            self._trigger_game_over()
            return
        # Tail has not moved yet this tick, so it still counts
        if head in self.snake:
            logger.debug("Snake hit itself at %s", head)
            self._trigger_game_over()
            return

        self.snake.insert(0, head)
        if head == self.food:
            self.score += POINTS_PER_APPLE
            self.spawn_food()
            # Duplicated tail cells unfold one per tick as the snake advances
            for _ in range(1, self.rules.growth_per_apple):
                self.snake.append(self.snake[-1])
        else:
            self.snake.pop()

    def _trigger_game_over(self) -> None:
        self.game_over = True
        daily = self._daily.state.consume()

        xp = float(self.score)
        if daily:
            xp *= DAILY_XP_MULTIPLIER
        xp_awarded = math.floor(xp)

        self._ledger.add_xp(xp_awarded, "Played Snake")
        if daily:
            self._ledger.mark_daily_completed()
        stats = {"score": self.score}
        self._unlocks.check_condition(UNLOCK_CONDITION, stats)

        self.last_outcome = GameOutcome(game=SNAKE, xp_awarded=xp_awarded, daily=daily, stats=stats)
        logger.info("Snake over: score=%d xp=%d daily=%s", self.score, xp_awarded, daily)

    def snapshot(self) -> SnakeSnapshot:
        return SnakeSnapshot(
            grid_w=self.rules.grid_w,
            grid_h=self.rules.grid_h,
            body=tuple(self.snake),
            food=self.food,
            score=self.score,
            game_over=self.game_over,
        )
