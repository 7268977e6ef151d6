from __future__ import annotations

import argparse
import json
import random
import sys
from pathlib import Path

from . import __version__
from .config import ShellConfig
from .daily.modifiers import PONG, SNAKE
from .games.pong import PongGame
from .games.snake import SnakeGame
from .logging_config import configure_logging
from .shell import DAILY, Shell

FRAME_DT = 1.0 / 60.0


def _snake_pilot(game: SnakeGame) -> str:
    """Steer greedily toward the food; the game itself rejects reversals."""
    hx, hy = game.snake[0]
    fx, fy = game.food
    if fx != hx:
        return "right" if fx > hx else "left"
    return "down" if fy > hy else "up"


def _pong_pilot(game: PongGame) -> str:
    target = game.ball.y
    want_up = target < game.player_y
    if game.rules.controls_inverted:
        want_up = not want_up
    return "up" if want_up else "down"


def _simulate(shell: Shell, game_id: str, daily: bool, seconds: float) -> dict:
    launched = shell.launch(DAILY if daily else game_id)
    game = shell.app
    elapsed = 0.0
    while elapsed < seconds and not getattr(game, "game_over", False):
        if isinstance(game, SnakeGame):
            shell.handle_input(_snake_pilot(game))
        elif isinstance(game, PongGame):
            shell.handle_input(_pong_pilot(game))
        shell.update(FRAME_DT)
        elapsed += FRAME_DT
    outcome = getattr(game, "last_outcome", None) if getattr(game, "game_over", False) else None
    shell.close()
    return {
        "game": launched,
        "finished": outcome is not None,
        "seconds": round(elapsed, 3),
        "outcome": None if outcome is None else {
            "xp_awarded": outcome.xp_awarded,
            "daily": outcome.daily,
            "stats": outcome.stats,
        },
        "status": shell.status(),
    }


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="switchplus",
        description="switchplus arcade core - headless runner",
    )
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument("--data-dir", type=Path, default=None, help="Directory for the save file")
    parser.add_argument("--config", type=Path, default=None, help="JSON shell config")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="Increase log verbosity (-v, -vv)")
    sub = parser.add_subparsers(dest="command", required=True)

    sub.add_parser("status", help="Print level, XP, unlocks and today's modifier")
    sub.add_parser("daily", help="Print today's daily modifier")
    sim = sub.add_parser("simulate", help="Play one headless run with an auto-pilot")
    sim.add_argument("game", choices=[SNAKE, PONG])
    sim.add_argument("--daily", action="store_true", help="Play today's daily challenge instead")
    sim.add_argument("--hard", action="store_true", help="Stack hard mode on the daily challenge")
    sim.add_argument("--seconds", type=float, default=120.0, help="Give up after N simulated seconds")
    sim.add_argument("--seed", type=int, default=None, help="Seed for food placement")

    args = parser.parse_args(argv)
    configure_logging(verbosity=args.verbose)

    config = ShellConfig.from_json(args.config) if args.config else ShellConfig()
    if args.data_dir is not None:
        config.data_dir = args.data_dir
    if getattr(args, "hard", False):
        config.hard_mode = True

    rng = random.Random(args.seed) if getattr(args, "seed", None) is not None else None
    shell = Shell.from_config(config, rng=rng)

    if args.command == "status":
        print(json.dumps(shell.status(), indent=2, sort_keys=True))
    elif args.command == "daily":
        print(json.dumps(shell.status()["daily"], indent=2, sort_keys=True))
    else:
        result = _simulate(shell, args.game, args.daily, args.seconds)
        print(json.dumps(result, indent=2, sort_keys=True))
    return 0


if __name__ == "__main__":
    sys.exit(main())
