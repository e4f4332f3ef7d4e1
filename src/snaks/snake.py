"""Snake representation and movement logic."""

from __future__ import annotations

import enum
from collections import deque

from snaks.grid import Position


class Direction(enum.Enum):
    """Cardinal movement directions."""

    LEFT = "left"
    RIGHT = "right"
    UP = "up"
    DOWN = "down"

    @property
    def opposite(self) -> Direction:
        return _OPPOSITES[self]

    def shift(self, size: Position) -> Position:
        """Return the unsigned one-cell delta inside a grid of *size*.

        A step towards the origin is encoded as ``size - 1`` so that
        :meth:`Position.wrapping_add` never sees a negative value.
        """
        if self is Direction.LEFT:
            return Position(size.x - 1, 0)
        if self is Direction.RIGHT:
            return Position(1, 0)
        if self is Direction.UP:
            return Position(0, size.y - 1)
        return Position(0, 1)


# Pairs that would cause an instant 180° reversal.
_OPPOSITES: dict[Direction, Direction] = {
    Direction.UP: Direction.DOWN,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
    Direction.RIGHT: Direction.LEFT,
}


class Snake:
    """A snake represented as an ordered deque of body segments.

    The head is ``body[-1]`` (most recently added); the tail is
    ``body[0]`` and is dropped on a non-growing move.
    """

    def __init__(self, start: Position) -> None:
        self.body: deque[Position] = deque([start])
        self._cells: set[Position] = {start}

    def __len__(self) -> int:
        return len(self.body)

    @property
    def head(self) -> Position:
        """Return the head position."""
        return self.body[-1]

    @property
    def tail(self) -> Position:
        return self.body[0]

    def occupies(self, pos: Position) -> bool:
        """Check whether the snake occupies a given cell."""
        return pos in self._cells

    def grow_to(self, pos: Position) -> None:
        """Push a new head without dropping the tail."""
        self.body.append(pos)
        self._cells.add(pos)

    def move_to(self, pos: Position) -> Position:
        """Push a new head and drop the tail. Returns the vacated cell."""
        self.grow_to(pos)
        vacated = self.body.popleft()
        self._cells.discard(vacated)
        return vacated

    def cells(self) -> list[Position]:
        """Return the body from tail to head."""
        return list(self.body)

    def to_dict(self) -> dict:
        """Serialize snake state to a dictionary."""
        return {
            "body": [p.to_list() for p in self.body],
            "length": len(self.body),
        }
