"""Headless game session: the driving state around a :class:`GameEngine`."""

from __future__ import annotations

import enum
import logging

import numpy as np

from snaks.achievements import Achievement, AchievementError, AchievementLedger
from snaks.config import GameConfig
from snaks.difficulty import Difficulty, DifficultyKind
from snaks.engine import GameEngine, GameEvent, GameStatus
from snaks.snake import Direction

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    PLAY = "play"
    SELECT_DIFFICULTY = "select_difficulty"


class GameSession:
    """Owns one engine plus pause, difficulty selection and the ledger.

    The caller drives it: feed :meth:`rotate` from input and call
    :meth:`tick` every ``tick_interval`` seconds. Ledger failures never
    propagate out of :meth:`tick`; they are exposed as :attr:`notice`
    until dismissed.
    """

    def __init__(
        self,
        config: GameConfig | None = None,
        ledger: AchievementLedger | None = None,
    ) -> None:
        self.config = config if config is not None else GameConfig()
        self.ledger = ledger
        kind = self.config.difficulty_kind
        self.difficulty = Difficulty(kind=kind, prev=kind)
        self.state = SessionState.PLAY
        self.paused = False
        self.notice: str | None = None
        self._was_paused = False
        self._seeds = np.random.default_rng(self.config.seed)
        self.engine = self._new_engine()

        if self.ledger is not None:
            try:
                self.ledger.read()
            except AchievementError as exc:
                self._set_notice(exc)

    @property
    def username(self) -> str:
        return self.config.username

    @property
    def tick_interval(self) -> float:
        return self.difficulty.tick_interval

    @property
    def selecting_difficulty(self) -> bool:
        return self.state is SessionState.SELECT_DIFFICULTY

    @property
    def game_ended(self) -> bool:
        return self.engine.stats().status is not GameStatus.PLAY

    # -- gameplay -------------------------------------------------------

    def rotate(self, direction: Direction) -> None:
        if self.selecting_difficulty or self.paused or self.game_ended:
            return
        self.engine.rotate_to(direction)

    def tick(self) -> dict:
        """Advance the game one step unless paused, then handle events."""
        if not (self.paused or self.selecting_difficulty):
            self.engine.step()
        self._consume_events()
        return self.snapshot()

    def toggle_pause(self) -> None:
        if self.selecting_difficulty or self.game_ended:
            return
        self.paused = not self.paused

    def restart(self) -> None:
        """Start a fresh game; stats are not carried over."""
        self.engine = self._new_engine()
        self.difficulty.undo()
        self.paused = False
        self.state = SessionState.PLAY
        logger.info(
            "Session for '%s' restarted on %s.",
            self.username, self.difficulty.prev.value,
        )

    # -- difficulty selection -------------------------------------------

    def begin_difficulty_selection(self) -> None:
        if self.selecting_difficulty:
            return
        self._was_paused = self.paused
        self.paused = True
        self.state = SessionState.SELECT_DIFFICULTY

    def select_difficulty(self, kind: DifficultyKind) -> None:
        if self.selecting_difficulty:
            self.difficulty.select(kind)

    def select_next_difficulty(self) -> None:
        if self.selecting_difficulty:
            self.difficulty.select_next()

    def select_prev_difficulty(self) -> None:
        if self.selecting_difficulty:
            self.difficulty.select_prev()

    def undo_difficulty(self) -> None:
        """Leave selection, restoring the committed kind and pause state."""
        if not self.selecting_difficulty:
            return
        self.difficulty.undo()
        self.paused = self._was_paused
        self.state = SessionState.PLAY

    def submit_difficulty(self) -> None:
        """Commit the selection; a changed difficulty restarts the game."""
        if not self.selecting_difficulty:
            return
        if self.difficulty.submit():
            self.restart()
            return
        self.paused = False
        self.state = SessionState.PLAY

    # -- notices --------------------------------------------------------

    def dismiss_notice(self) -> None:
        self.notice = None

    def snapshot(self) -> dict:
        """Engine state plus session metadata, JSON-serializable."""
        best = None
        if self.ledger is not None:
            entry = self.ledger.best(self.username, self.difficulty.prev)
            best = entry.score if entry else None
        return {
            **self.engine.get_state(),
            "session": {
                "username": self.username,
                "paused": self.paused,
                "state": self.state.value,
                "difficulty": self.difficulty.prev.value,
                "pending_difficulty": self.difficulty.kind.value,
                "fps": self.difficulty.prev.fps,
                "best": best,
                "notice": self.notice,
            },
        }

    # -- internals ------------------------------------------------------

    def _new_engine(self) -> GameEngine:
        return GameEngine(
            width=self.config.grid_width,
            height=self.config.grid_height,
            seed=int(self._seeds.integers(2**31)),
        )

    def _consume_events(self) -> None:
        event = self.engine.last_event()
        # The board-filling move reports WIN in place of FOOD_EAT.
        if event not in (GameEvent.FOOD_EAT, GameEvent.WIN):
            return
        if self.ledger is not None and self.engine.stats().score > 0:
            self._record_score()
        self.engine.acknowledge(event)

    def _record_score(self) -> None:
        achievement = Achievement(
            username=self.username,
            difficulty=self.difficulty.prev,
            score=self.engine.stats().score,
        )
        try:
            self.ledger.record(achievement)
        except AchievementError as exc:
            self._set_notice(exc)

    def _set_notice(self, exc: Exception) -> None:
        logger.warning("Achievement ledger error: %s", exc)
        self.notice = str(exc)
