"""snaks: snake game engine, session and server."""

from snaks.achievements import Achievement, AchievementError, AchievementLedger
from snaks.difficulty import Difficulty, DifficultyKind
from snaks.engine import GameEngine, GameEvent, GameStatus, Stats
from snaks.grid import Grid, Position
from snaks.session import GameSession
from snaks.snake import Direction, Snake

__all__ = [
    "Achievement",
    "AchievementError",
    "AchievementLedger",
    "Difficulty",
    "DifficultyKind",
    "Direction",
    "GameEngine",
    "GameEvent",
    "GameSession",
    "GameStatus",
    "Grid",
    "Position",
    "Snake",
    "Stats",
]
