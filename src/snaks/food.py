"""Food placement logic."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

import numpy as np

from snaks.grid import CellType, Position

if TYPE_CHECKING:
    from snaks.grid import Grid

logger = logging.getLogger(__name__)


class FoodSpawner:
    """Places the single food cell on the grid.

    Uses a seeded NumPy RNG for deterministic, reproducible placement.
    Placement is rejection sampling: draw a uniform cell, retry while it
    is covered by the snake.
    """

    def __init__(
        self,
        grid: Grid,
        rng: np.random.Generator | None = None,
    ) -> None:
        self.grid = grid
        self.rng = rng if rng is not None else np.random.default_rng()
        # Stale until the first successful spawn.
        self.position = Position(0, 0)

    def can_place(self) -> bool:
        """Return False when the snake covers every cell."""
        return self.grid.occupied_count(CellType.SNAKE) < self.grid.area

    def spawn(self) -> Position | None:
        """Move the food to a random free cell.

        Returns the new position, or ``None`` if the grid is full, in which
        case the previous position is kept.
        """
        if not self.can_place():
            logger.info("No free cells left for food placement.")
            return None

        while True:
            pos = Position(
                int(self.rng.integers(self.grid.width)),
                int(self.rng.integers(self.grid.height)),
            )
            if self.grid.get(pos) != CellType.SNAKE:
                break

        self.place(pos)
        return pos

    def place(self, pos: Position) -> None:
        """Put the food on *pos*, clearing the previous food cell."""
        if self.grid.get(self.position) == CellType.FOOD:
            self.grid.set(self.position, CellType.EMPTY)
        self.grid.set(pos, CellType.FOOD)
        self.position = pos

    def to_dict(self) -> dict:
        """Serialize food state to a dictionary."""
        return {
            "position": self.position.to_list(),
        }
