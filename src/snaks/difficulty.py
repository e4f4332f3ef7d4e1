"""Difficulty levels mapping to snake tick rates."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class DifficultyKind(enum.Enum):
    """Difficulty levels with their tick rate in steps per second."""

    EASY = "easy"
    NORMAL = "normal"
    MEDIUM = "medium"
    HARD = "hard"
    IMPOSSIBLE = "impossible"
    SECRET = "secret"

    @property
    def fps(self) -> int:
        return _FPS[self]

    @property
    def tick_interval(self) -> float:
        """Seconds between two snake steps."""
        return 1.0 / self.fps

    @property
    def label(self) -> str:
        return self.value.capitalize()

    def next(self) -> DifficultyKind:
        """Following selectable kind, cycling back to EASY."""
        if self is DifficultyKind.SECRET:
            return DifficultyKind.EASY
        i = SELECTABLE.index(self)
        return SELECTABLE[(i + 1) % len(SELECTABLE)]

    def prev(self) -> DifficultyKind:
        """Preceding selectable kind, cycling back to IMPOSSIBLE."""
        if self is DifficultyKind.SECRET:
            return DifficultyKind.IMPOSSIBLE
        i = SELECTABLE.index(self)
        return SELECTABLE[(i - 1) % len(SELECTABLE)]

    @classmethod
    def parse(cls, text: str) -> DifficultyKind:
        """Case-insensitive lookup by name."""
        try:
            return cls(text.strip().lower())
        except ValueError:
            raise ValueError(f"Unknown difficulty: {text!r}.") from None


_FPS: dict[DifficultyKind, int] = {
    DifficultyKind.EASY: 5,
    DifficultyKind.NORMAL: 10,
    DifficultyKind.MEDIUM: 15,
    DifficultyKind.HARD: 30,
    DifficultyKind.IMPOSSIBLE: 60,
    DifficultyKind.SECRET: 100,
}

# SECRET is reachable only by explicit selection.
SELECTABLE: list[DifficultyKind] = [
    DifficultyKind.EASY,
    DifficultyKind.NORMAL,
    DifficultyKind.MEDIUM,
    DifficultyKind.HARD,
    DifficultyKind.IMPOSSIBLE,
]

DEFAULT_DIFFICULTY = DifficultyKind.NORMAL


@dataclass
class Difficulty:
    """Difficulty selector holding the committed and the pending kind."""

    kind: DifficultyKind = DEFAULT_DIFFICULTY
    prev: DifficultyKind = DEFAULT_DIFFICULTY

    @property
    def changed(self) -> bool:
        return self.kind is not self.prev

    @property
    def tick_interval(self) -> float:
        return self.prev.tick_interval

    def select(self, kind: DifficultyKind) -> None:
        self.kind = kind

    def select_next(self) -> None:
        self.kind = self.kind.next()

    def select_prev(self) -> None:
        self.kind = self.kind.prev()

    def undo(self) -> None:
        """Drop the pending selection."""
        self.kind = self.prev

    def submit(self) -> bool:
        """Commit the pending kind. Returns True if it differed."""
        changed = self.changed
        self.prev = self.kind
        return changed
