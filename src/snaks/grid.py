"""Grid primitives: positions, wraparound arithmetic, and cell occupancy."""

from __future__ import annotations

import enum
from dataclasses import dataclass

import numpy as np


@dataclass(frozen=True, order=True)
class Position:
    """An ``(x, y)`` pair of non-negative coordinates.

    Zero based when used as a cell, one based when used as a size.
    ``(0, 0)`` is the top-left cell.
    """

    x: int
    y: int

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Coordinates must be non-negative.")

    def wrapping_add(self, delta: Position, bound: Position) -> Position:
        """Add *delta* and wrap the result inside the *bound* rectangle."""
        return Position(
            (self.x + delta.x) % bound.x,
            (self.y + delta.y) % bound.y,
        )

    def area(self) -> int:
        """Return ``x * y``."""
        return self.x * self.y

    def to_list(self) -> list[int]:
        return [self.x, self.y]


class CellType(enum.IntEnum):
    """Integer codes stored in the grid array."""

    EMPTY = 0
    SNAKE = 1
    FOOD = 2


class Grid:
    """NumPy-backed game grid of ``width`` x ``height`` cells.

    Cell states are stored as integers for O(1) collision checks. The
    array is indexed ``[y, x]`` so rows follow the vertical axis.
    """

    def __init__(self, width: int = 20, height: int = 10) -> None:
        if width < 1 or height < 1:
            raise ValueError("Grid dimensions must be at least 1x1.")
        self.width = width
        self.height = height
        self.cells = np.zeros((height, width), dtype=np.int8)

    @property
    def size(self) -> Position:
        return Position(self.width, self.height)

    @property
    def area(self) -> int:
        return self.width * self.height

    def clear(self) -> None:
        """Reset all cells to empty."""
        self.cells[:] = CellType.EMPTY

    def contains(self, pos: Position) -> bool:
        """Check whether a position lies within the grid."""
        return pos.x < self.width and pos.y < self.height

    def get(self, pos: Position) -> CellType:
        """Return the cell type at the given position."""
        return CellType(self.cells[pos.y, pos.x])

    def set(self, pos: Position, cell_type: CellType) -> None:
        """Set the cell type at the given position."""
        self.cells[pos.y, pos.x] = cell_type

    def occupied_count(self, cell_type: CellType = CellType.SNAKE) -> int:
        """Count the cells holding *cell_type*."""
        return int(np.count_nonzero(self.cells == cell_type))
