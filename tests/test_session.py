"""Tests for the headless game session."""

import pytest

from snaks.achievements import AchievementLedger
from snaks.config import GameConfig
from snaks.difficulty import DifficultyKind
from snaks.engine import GameEvent, GameStatus
from snaks.grid import Position
from snaks.session import GameSession, SessionState
from snaks.snake import Direction


@pytest.fixture()
def ledger(tmp_path):
    return AchievementLedger(tmp_path / "achievements.csv")


@pytest.fixture()
def session(ledger):
    cfg = GameConfig(grid_width=10, grid_height=10, username="alice", seed=1)
    return GameSession(cfg, ledger=ledger)


class TestSessionGameplay:
    def test_tick_steps_engine(self, session):
        session.engine.place_food(Position(0, 0))
        state = session.tick()
        assert session.engine.head() == Position(6, 5)
        assert state["tick"] == 1
        assert state["session"]["username"] == "alice"

    def test_food_eat_recorded_and_acknowledged(self, session, ledger):
        session.engine.place_food(Position(6, 5))
        session.tick()
        assert session.engine.stats().score == 1
        assert session.engine.last_event() is None
        assert ledger.best("alice", DifficultyKind.NORMAL).score == 1
        assert session.snapshot()["session"]["best"] == 1

    def test_other_events_not_consumed(self, session):
        session.engine.place_food(Position(0, 0))
        session.tick()
        assert session.engine.last_event() is GameEvent.GAME_START

    def test_restart_resets_stats(self, session):
        session.engine.place_food(Position(6, 5))
        session.tick()
        session.restart()
        assert session.engine.stats().score == 0
        assert session.engine.snake_cells() == [Position(5, 5)]

    def test_restart_drops_pending_difficulty(self, session):
        session.begin_difficulty_selection()
        session.select_difficulty(DifficultyKind.HARD)
        session.restart()
        assert session.difficulty.kind is DifficultyKind.NORMAL
        assert session.snapshot()["session"]["pending_difficulty"] == "normal"
        assert session.state is SessionState.PLAY

    def test_winning_move_recorded(self, ledger):
        cfg = GameConfig(grid_width=2, grid_height=1, username="alice", seed=0)
        session = GameSession(cfg, ledger=ledger)
        state = session.tick()
        assert state["status"] == "win"
        assert session.engine.stats().score == 1
        assert session.engine.last_event() is None
        assert ledger.best("alice", DifficultyKind.NORMAL).score == 1
        assert state["session"]["best"] == 1

    def test_single_cell_win_not_recorded(self, ledger):
        cfg = GameConfig(grid_width=1, grid_height=1, username="alice", seed=0)
        session = GameSession(cfg, ledger=ledger)
        session.tick()
        assert session.engine.last_event() is None
        assert ledger.best("alice", DifficultyKind.NORMAL) is None

    def test_rotate_forwards_to_engine(self, session):
        session.rotate(Direction.UP)
        assert session.engine.direction is Direction.UP


class TestSessionPause:
    def test_paused_tick_does_not_move(self, session):
        session.toggle_pause()
        session.tick()
        assert session.engine.tick == 0

    def test_rotate_ignored_while_paused(self, session):
        session.toggle_pause()
        session.rotate(Direction.UP)
        assert session.engine.direction is Direction.RIGHT

    def test_pause_ignored_after_game_end(self, ledger):
        session = GameSession(GameConfig(grid_width=1, grid_height=1), ledger=ledger)
        assert session.engine.stats().status is GameStatus.WIN
        session.toggle_pause()
        assert not session.paused
        session.rotate(Direction.UP)
        assert session.engine.direction is Direction.RIGHT


class TestSessionDifficulty:
    def test_selection_pauses(self, session):
        session.begin_difficulty_selection()
        assert session.state is SessionState.SELECT_DIFFICULTY
        assert session.paused
        session.tick()
        assert session.engine.tick == 0

    def test_submit_changed_restarts(self, session):
        session.engine.place_food(Position(6, 5))
        session.tick()
        session.begin_difficulty_selection()
        session.select_next_difficulty()
        session.submit_difficulty()
        assert session.difficulty.prev is DifficultyKind.MEDIUM
        assert session.tick_interval == pytest.approx(1 / 15)
        assert session.engine.stats().score == 0
        assert not session.paused
        assert session.state is SessionState.PLAY

    def test_submit_unchanged_resumes(self, session):
        session.toggle_pause()
        session.begin_difficulty_selection()
        session.submit_difficulty()
        assert not session.paused
        assert session.difficulty.prev is DifficultyKind.NORMAL

    def test_undo_restores_pause_state(self, session):
        session.begin_difficulty_selection()
        session.select_prev_difficulty()
        session.undo_difficulty()
        assert session.difficulty.kind is DifficultyKind.NORMAL
        assert not session.paused
        assert session.state is SessionState.PLAY

    def test_select_outside_selection_ignored(self, session):
        session.select_difficulty(DifficultyKind.SECRET)
        assert session.difficulty.kind is DifficultyKind.NORMAL


class TestSessionNotices:
    def test_ledger_error_becomes_notice(self, tmp_path):
        blocker = tmp_path / "file"
        blocker.write_text("")
        ledger = AchievementLedger(blocker / "achievements.csv")
        session = GameSession(GameConfig(grid_width=10, grid_height=10), ledger=ledger)
        assert session.notice is not None

        session.dismiss_notice()
        session.engine.place_food(Position(6, 5))
        session.tick()
        # Write failure is reported, not raised.
        assert session.notice is not None
        assert session.engine.stats().score == 1

    def test_no_ledger(self):
        session = GameSession(GameConfig(grid_width=10, grid_height=10))
        session.engine.place_food(Position(6, 5))
        session.tick()
        assert session.engine.last_event() is None
        assert session.snapshot()["session"]["best"] is None
