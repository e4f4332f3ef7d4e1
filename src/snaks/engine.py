"""Step-based game engine composing grid, snake, and food logic."""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass

import numpy as np

from snaks.food import FoodSpawner
from snaks.grid import CellType, Grid, Position
from snaks.snake import Direction, Snake

logger = logging.getLogger(__name__)


class GameStatus(enum.Enum):
    """Game lifecycle. FAIL and WIN are terminal."""

    PLAY = "play"
    FAIL = "fail"
    WIN = "win"


class GameEvent(enum.Enum):
    """Notable transitions reported through :meth:`GameEngine.last_event`."""

    GAME_START = "game_start"
    FOOD_EAT = "food_eat"
    FAIL = "fail"
    WIN = "win"


@dataclass(frozen=True)
class Stats:
    """Score (snake length minus one) and current status."""

    score: int = 0
    status: GameStatus = GameStatus.PLAY

    def to_dict(self) -> dict:
        return {"score": self.score, "status": self.status.value}


class GameEngine:
    """Single-snake, step-based game engine on a wrapping grid.

    The engine owns the grid, snake, food, direction and stats. It is not
    thread-safe; callers sharing it across tasks must serialize access.
    """

    def __init__(
        self,
        width: int = 20,
        height: int = 10,
        seed: int | None = None,
    ) -> None:
        self.grid = Grid(width=width, height=height)
        self.rng = np.random.default_rng(seed)

        self.snake = Snake(Position(width // 2, height // 2))
        self.grid.set(self.snake.head, CellType.SNAKE)

        self._direction = Direction.RIGHT
        self._stats = Stats()
        self._event: GameEvent | None = GameEvent.GAME_START
        self.tick = 0

        self.food = FoodSpawner(self.grid, rng=self.rng)
        self._update_food()

    # -- inbound --------------------------------------------------------

    def rotate_to(self, direction: Direction) -> None:
        """Set the direction for the next step.

        A reversal into the neck is ignored once the snake has a body. The
        last accepted call before :meth:`step` wins.
        """
        if self._stats.score > 0 and direction is self._direction.opposite:
            return
        self._direction = direction

    def step(self) -> dict:
        """Advance the game by one tick.

        Returns the full game state as a serializable dict.
        """
        if self._stats.status is not GameStatus.PLAY:
            return self.get_state()

        self.tick += 1
        nxt = self.snake.head.wrapping_add(
            self._direction.shift(self.grid.size), self.grid.size,
        )

        if self.snake.occupies(nxt):
            self._finish(GameStatus.FAIL, GameEvent.FAIL)
        elif nxt == self.food.position:
            self.snake.grow_to(nxt)
            self.grid.set(nxt, CellType.SNAKE)
            self._stats = Stats(score=self._stats.score + 1)
            self._event = GameEvent.FOOD_EAT
            self._update_food()
        else:
            vacated = self.snake.move_to(nxt)
            self.grid.set(nxt, CellType.SNAKE)
            self.grid.set(vacated, CellType.EMPTY)

        return self.get_state()

    def place_food(self, pos: Position) -> None:
        """Force the food onto *pos*. Intended for tests and debugging."""
        if self._stats.status is not GameStatus.PLAY:
            raise ValueError("Food can only be placed while playing.")
        if not self.grid.contains(pos):
            raise ValueError(f"{pos} is outside the grid.")
        if self.snake.occupies(pos):
            raise ValueError(f"{pos} is occupied by the snake.")
        self.food.place(pos)

    def acknowledge(self, event: GameEvent) -> bool:
        """Clear the last event if it is still *event*. Returns True if cleared."""
        if self._event is event:
            self._event = None
            return True
        return False

    # -- outbound -------------------------------------------------------

    @property
    def size(self) -> Position:
        return self.grid.size

    @property
    def direction(self) -> Direction:
        return self._direction

    def head(self) -> Position:
        return self.snake.head

    def snake_cells(self) -> list[Position]:
        """Return the snake body, head last."""
        return self.snake.cells()

    def food_cell(self) -> Position:
        return self.food.position

    def stats(self) -> Stats:
        return self._stats

    def last_event(self) -> GameEvent | None:
        return self._event

    @property
    def game_over(self) -> bool:
        return self._stats.status is not GameStatus.PLAY

    def get_state(self) -> dict:
        """Return the full, serializable game state."""
        return {
            "tick": self.tick,
            **self._stats.to_dict(),
            "event": self._event.value if self._event else None,
            "direction": self._direction.value,
            "size": [self.grid.width, self.grid.height],
            "snake": self.snake.to_dict(),
            "food": self.food.to_dict(),
        }

    # -- internals ------------------------------------------------------

    def _update_food(self) -> None:
        # A full board cannot take food; this is the only way to win.
        if self.food.spawn() is None:
            self._finish(GameStatus.WIN, GameEvent.WIN)

    def _finish(self, status: GameStatus, event: GameEvent) -> None:
        self._stats = Stats(score=self._stats.score, status=status)
        self._event = event
        logger.info(
            "Game ended (%s) at tick %d with score %d.",
            status.value, self.tick, self._stats.score,
        )
