"""Game configuration with JSON persistence."""

from __future__ import annotations

import json
import logging
from dataclasses import asdict, dataclass, replace
from pathlib import Path

from snaks.difficulty import DEFAULT_DIFFICULTY, DifficultyKind

logger = logging.getLogger(__name__)

MAX_GRID_SIZE = 200


@dataclass(frozen=True)
class GameConfig:
    """Settings for a game session.

    ``data_dir`` of ``None`` means the default ledger location.
    """

    grid_width: int = 20
    grid_height: int = 10
    difficulty: str = DEFAULT_DIFFICULTY.value
    username: str = "player"
    data_dir: str | None = None
    seed: int | None = None

    def __post_init__(self) -> None:
        if not 1 <= self.grid_width <= MAX_GRID_SIZE:
            raise ValueError(f"grid_width must be between 1 and {MAX_GRID_SIZE}.")
        if not 1 <= self.grid_height <= MAX_GRID_SIZE:
            raise ValueError(f"grid_height must be between 1 and {MAX_GRID_SIZE}.")
        if not self.username or "," in self.username:
            raise ValueError("username must be non-empty and contain no commas.")
        DifficultyKind.parse(self.difficulty)

    @property
    def difficulty_kind(self) -> DifficultyKind:
        return DifficultyKind.parse(self.difficulty)

    def with_overrides(self, **overrides) -> GameConfig:
        """Return a copy with the non-``None`` *overrides* applied."""
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    def to_dict(self) -> dict:
        return asdict(self)

    def save(self, path: str | Path) -> None:
        """Write config to a JSON file."""
        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        p.write_text(json.dumps(self.to_dict(), indent=2))
        logger.info("Config saved to %s", p)

    @classmethod
    def load(cls, path: str | Path) -> GameConfig:
        """Load config from a JSON file."""
        raw = json.loads(Path(path).read_text())
        return cls(**raw)
