"""Headless random-policy simulation for throughput and sanity checks."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import numpy as np

from snaks.engine import GameEngine, GameStatus
from snaks.snake import Direction

logger = logging.getLogger(__name__)

_DIRECTIONS = list(Direction)


@dataclass
class SimulationResult:
    """Aggregate outcome of a batch of simulated games."""

    total_games: int
    wins: int
    fails: int
    unfinished: int
    total_steps: int
    best_score: int
    mean_score: float
    wall_time_seconds: float
    steps_per_second: float

    def summary(self) -> str:
        return (
            f"Simulation: {self.total_games} games "
            f"({self.wins} won, {self.fails} failed, {self.unfinished} unfinished), "
            f"{self.total_steps} steps in {self.wall_time_seconds:.2f}s | "
            f"best {self.best_score}, mean {self.mean_score:.2f}, "
            f"{self.steps_per_second:.1f} steps/s"
        )


def simulate_games(
    *,
    num_games: int = 100,
    grid_width: int = 20,
    grid_height: int = 10,
    max_steps: int = 1_000,
    seed: int | None = 42,
) -> SimulationResult:
    """Play *num_games* games picking a random direction every step."""
    if num_games < 1:
        raise ValueError("num_games must be at least 1.")
    rng = np.random.default_rng(seed)

    outcomes = {status: 0 for status in GameStatus}
    scores: list[int] = []
    total_steps = 0
    start = time.perf_counter()

    for _ in range(num_games):
        engine = GameEngine(
            width=grid_width,
            height=grid_height,
            seed=int(rng.integers(2**31)),
        )
        for _ in range(max_steps):
            if engine.game_over:
                break
            engine.rotate_to(_DIRECTIONS[int(rng.integers(len(_DIRECTIONS)))])
            engine.step()
            total_steps += 1
        stats = engine.stats()
        outcomes[stats.status] += 1
        scores.append(stats.score)

    elapsed = time.perf_counter() - start
    result = SimulationResult(
        total_games=num_games,
        wins=outcomes[GameStatus.WIN],
        fails=outcomes[GameStatus.FAIL],
        unfinished=outcomes[GameStatus.PLAY],
        total_steps=total_steps,
        best_score=max(scores),
        mean_score=float(np.mean(scores)),
        wall_time_seconds=elapsed,
        steps_per_second=total_steps / max(elapsed, 1e-9),
    )
    logger.info(result.summary())
    return result
