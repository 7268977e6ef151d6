from __future__ import annotations

import random

import pytest

from switchplus.games.snake import SnakeGame

TICK = 0.11


@pytest.fixture()
def make_snake(ledger, unlocks, make_selector):
    def _make(selector=None, grid=(32, 18), seed=7):
        return SnakeGame(
            grid[0], grid[1], ledger, unlocks, selector or make_selector(0), rng=random.Random(seed)
        )

    return _make


def test_reset_layout(make_snake):
    game = make_snake()
    assert game.snake == [(16, 9), (15, 9), (14, 9)]
    assert game.direction == (1, 0)
    assert game.score == 0
    assert game.game_over is False
    assert 0 <= game.food[0] < 32 and 0 <= game.food[1] < 18
    assert game.rules.tick_interval == 0.1
    assert game.rules.growth_per_apple == 1


def test_no_step_until_interval_exceeded(make_snake):
    game = make_snake()
    game.food = (0, 0)
    game.update(0.05)
    game.update(0.05)
    assert game.snake[0] == (16, 9)
    game.update(0.01)
    assert game.snake[0] == (17, 9)
    assert len(game.snake) == 3
    assert game.timer == 0.0


def test_eating_scores_and_grows(make_snake):
    game = make_snake()
    game.food = (17, 9)
    game.update(TICK)
    assert game.score == 10
    assert game.snake == [(17, 9), (16, 9), (15, 9), (14, 9)]


def test_growth_modifier_unfolds_over_following_ticks(make_snake, make_selector):
    # Catalog entry 4 is "Growth Spurt"
    game = make_snake(selector=make_selector(4, active=True))
    assert game.rules.growth_per_apple == 3
    game.food = (17, 9)

    game.update(TICK)
    assert game.score == 10
    assert len(game.snake) == 6
    assert len(set(game.snake)) == 4

    game.food = (0, 0)
    game.update(TICK)
    assert len(set(game.snake)) == 5
    game.update(TICK)
    assert len(set(game.snake)) == 6
    assert len(game.snake) == 6


def test_input_only_orthogonal_and_applied_on_tick(make_snake):
    game = make_snake()
    game.food = (0, 0)
    game.handle_input("left")  # reversal rejected
    assert game.next_direction == (1, 0)

    game.handle_input("up")
    assert game.direction == (1, 0)
    assert game.next_direction == (0, -1)

    game.update(TICK)
    assert game.direction == (0, -1)
    assert game.snake[0] == (16, 8)


def test_invalid_actions_ignored(make_snake):
    game = make_snake()
    game.handle_input("jump")
    game.handle_input(None)
    assert game.next_direction == (1, 0)


def test_wall_collision_ends_run_and_freezes(make_snake, ledger):
    game = make_snake()
    game.snake = [(31, 9), (30, 9), (29, 9)]
    game.food = (0, 0)

    game.update(TICK)
    assert game.game_over is True
    frozen = game.snapshot()

    game.update(TICK)
    game.update(5.0)
    assert game.snapshot() == frozen
    assert game.last_outcome.xp_awarded == 0


def test_self_collision_counts_current_tail(make_snake):
    game = make_snake()
    game.food = (0, 0)
    # Moving right from (5, 5) lands on the tail at (6, 5)
    game.snake = [(5, 5), (5, 6), (6, 6), (6, 5)]
    game.update(TICK)
    assert game.game_over is True


def test_self_collision_on_duplicated_segments_awards_once(make_snake, ledger):
    game = make_snake()
    game.food = (0, 0)
    game.score = 30
    game.snake = [(5, 5), (5, 6), (6, 6), (6, 5), (6, 5), (6, 5)]
    game.update(TICK)
    assert game.game_over is True
    assert ledger.level == 3
    assert ledger.xp == 5


def test_game_over_awards_score_as_xp_and_checks_unlock(make_snake, ledger):
    game = make_snake()
    game.snake = [(31, 9), (30, 9), (29, 9)]
    game.food = (0, 0)
    game.score = 150
    game.update(TICK)

    # 10 + 15 + 25 + 35 + 50 reaches level 6 with 15 left
    assert ledger.level == 6
    assert ledger.xp == 15
    assert ledger.has_unlocked("snake_score_15")
    assert ledger.has_unlocked("Retro Hacker")
    assert game.last_outcome.daily is False
    assert not ledger.is_daily_completed()


def test_daily_run_multiplies_xp_and_consumes_flag(make_snake, make_selector, ledger):
    selector = make_selector(0, active=True)
    game = make_snake(selector=selector)
    assert game.rules.tick_interval == pytest.approx(0.05)
    game.snake = [(31, 9), (30, 9), (29, 9)]
    game.food = (0, 0)
    game.score = 30

    game.update(0.06)
    assert game.game_over
    assert game.last_outcome.xp_awarded == 45
    assert game.last_outcome.daily is True
    assert selector.state.is_active is False
    assert ledger.is_daily_completed()

    game.handle_input("a")
    assert game.game_over is False
    assert game.rules.tick_interval == 0.1


def test_small_grid_does_not_compound_across_resets(make_snake, make_selector):
    selector = make_selector(2, active=True)
    game = make_snake(selector=selector)
    assert (game.grid_w, game.grid_h) == (22, 12)
    assert game.snake[0] == (11, 6)
    assert 0 <= game.food[0] < 22 and 0 <= game.food[1] < 12

    game.reset()  # still active: shrink from base, not from 22x12
    assert (game.grid_w, game.grid_h) == (22, 12)

    selector.deactivate()
    game.reset()
    assert (game.grid_w, game.grid_h) == (32, 18)


def test_restart_only_after_game_over(make_snake):
    game = make_snake()
    game.food = (0, 0)
    game.update(TICK)
    game.handle_input("a")
    assert game.snake[0] == (17, 9)


def test_invalid_grid_rejected(ledger, unlocks, make_selector):
    with pytest.raises(ValueError):
        SnakeGame(0, 10, ledger, unlocks, make_selector(0))
