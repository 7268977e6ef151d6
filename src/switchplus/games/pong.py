from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from ..daily.modifiers import PONG
from ..daily.selector import DailyModifierSelector
from ..progression.ledger import ProgressionLedger
from ..progression.unlocks import UnlockRegistry
from .base import GameOutcome, InputAction, parse_action

logger = logging.getLogger(__name__)

WINNING_SCORE = 5
PADDLE_HALF_HEIGHT = 3.0
PADDLE_STEP = 3.0
PADDLE_X = 2.0
AI_PURSUIT_SPEED = 15.0
AI_DEAD_ZONE = 2.0
BALL_START_VELOCITY = 0.5

PARTICIPATION_XP = 5
WIN_BONUS_XP = 20
MARGIN_XP = 5
DAILY_XP_MULTIPLIER = 1.5
UNLOCK_CONDITION = "pong_flawless"


@dataclass
class PongRules:
    """Per-run configuration that daily modifiers may patch."""

    ai_speed_mult: float = 1.0
    ball_base_speed: float = 30.0
    controls_inverted: bool = False
    player_paddle_height_mult: float = 1.0


@dataclass
class Ball:
    x: float
    y: float
    dx: float
    dy: float


@dataclass(frozen=True)
class PongSnapshot:
    ball_x: float
    ball_y: float
    player_y: float
    ai_y: float
    player_half_height: float
    player_score: int
    ai_score: int
    game_over: bool


class PongGame:
    """Player paddle on the left, AI paddle on the right; first to five wins."""

    def __init__(
        self,
        grid_w: int,
        grid_h: int,
        ledger: ProgressionLedger,
        unlocks: UnlockRegistry,
        daily: DailyModifierSelector,
    ) -> None:
        if grid_w <= 0 or grid_h <= 0:
            raise ValueError(f"Grid dimensions must be positive, got {grid_w}x{grid_h}")
        self.grid_w = grid_w
        self.grid_h = grid_h
        self._ledger = ledger
        self._unlocks = unlocks
        self._daily = daily
        self.last_outcome: Optional[GameOutcome] = None
        self.reset()

    def _centered_ball(self, dx: float) -> Ball:
        return Ball(x=self.grid_w / 2, y=self.grid_h / 2, dx=dx, dy=BALL_START_VELOCITY)

    def reset(self) -> None:
        self.ball = self._centered_ball(BALL_START_VELOCITY)
        self.player_y = self.grid_h / 2
        self.ai_y = self.grid_h / 2
        self.player_score = 0
        self.ai_score = 0
        self.game_over = False

        self.rules = PongRules()
        self.applied_modifier = self._daily.apply_to_game(self.rules, PONG)
        logger.debug("Pong reset with rules %r", self.rules)

    @property
    def player_half_height(self) -> float:
        return PADDLE_HALF_HEIGHT * self.rules.player_paddle_height_mult

    def handle_input(self, action: str) -> None:
        act = parse_action(action)
        if act is None:
            return
        up, down = InputAction.UP, InputAction.DOWN
        if self.rules.controls_inverted:
            up, down = down, up

        if act is up:
            self.player_y = max(PADDLE_HALF_HEIGHT, self.player_y - PADDLE_STEP)
        elif act is down:
            self.player_y = min(self.grid_h - PADDLE_HALF_HEIGHT, self.player_y + PADDLE_STEP)
        elif act is InputAction.A and self.game_over:
            self.reset()

    def update(self, dt: float) -> None:
        if self.game_over:
            return
        ball = self.ball
        speed = self.rules.ball_base_speed
        ball.x += ball.dx * speed * dt
        ball.y += ball.dy * speed * dt

        if ball.y < 0 or ball.y > self.grid_h:
            ball.dy = -ball.dy

        self._move_ai(dt)
        self._collide_paddles()
        self._check_scoring()

        if self.player_score >= WINNING_SCORE or self.ai_score >= WINNING_SCORE:
            self.game_over = True
            self._handle_game_over()

    def _move_ai(self, dt: float) -> None:
        step = AI_PURSUIT_SPEED * self.rules.ai_speed_mult * dt
        if self.ai_y < self.ball.y - AI_DEAD_ZONE:
            self.ai_y += step
        if self.ai_y > self.ball.y + AI_DEAD_ZONE:
            self.ai_y -= step

    def _collide_paddles(self) -> None:
        ball = self.ball
        half = self.player_half_height
        if ball.x < PADDLE_X and self.player_y - half <= ball.y <= self.player_y + half:
            ball.dx = -ball.dx
            ball.x = PADDLE_X
        right_x = self.grid_w - PADDLE_X
        if ball.x > right_x and self.ai_y - PADDLE_HALF_HEIGHT <= ball.y <= self.ai_y + PADDLE_HALF_HEIGHT:
            ball.dx = -ball.dx
            ball.x = right_x

    def _check_scoring(self) -> None:
        # Serve heads toward the side that just scored
        if self.ball.x < 0:
            self.ai_score += 1
            self.ball = self._centered_ball(BALL_START_VELOCITY)
            logger.debug("AI scores: %d-%d", self.player_score, self.ai_score)
        if self.ball.x > self.grid_w:
            self.player_score += 1
            self.ball = self._centered_ball(-BALL_START_VELOCITY)
            logger.debug("Player scores: %d-%d", self.player_score, self.ai_score)

    def _handle_game_over(self) -> None:
        daily = self._daily.state.consume()

        xp = float(PARTICIPATION_XP)
        if self.player_score > self.ai_score:
            xp += WIN_BONUS_XP
            xp += (self.player_score - self.ai_score) * MARGIN_XP
        if daily:
            xp *= DAILY_XP_MULTIPLIER
        xp_awarded = math.floor(xp)

        self._ledger.add_xp(xp_awarded, "Finished a game of Pong")
        if daily:
            self._ledger.mark_daily_completed()
        stats = {"player_score": self.player_score, "ai_score": self.ai_score}
        self._unlocks.check_condition(UNLOCK_CONDITION, stats)

        self.last_outcome = GameOutcome(game=PONG, xp_awarded=xp_awarded, daily=daily, stats=stats)
        logger.info("Pong over: %d-%d xp=%d daily=%s", self.player_score, self.ai_score, xp_awarded, daily)

    def snapshot(self) -> PongSnapshot:
        return PongSnapshot(
            ball_x=self.ball.x,
            ball_y=self.ball.y,
            player_y=self.player_y,
            ai_y=self.ai_y,
            player_half_height=self.player_half_height,
            player_score=self.player_score,
            ai_score=self.ai_score,
            game_over=self.game_over,
        )
