from .base import GameOutcome, GameSession, InputAction
from .pong import PongGame
from .snake import SnakeGame

__all__ = ["GameOutcome", "GameSession", "InputAction", "PongGame", "SnakeGame"]
