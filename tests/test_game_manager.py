"""Session manager lifecycle: reaping ended and abandoned sessions."""

from __future__ import annotations

import asyncio

import pytest

from snaks.server.game_manager import SessionManager
from snaks.server.models import SessionStatus


async def _wait_until_finished(manager, game_id, attempts=100) -> None:
    for _ in range(attempts):
        game = manager.get_game(game_id)
        if game is None or game.status == SessionStatus.FINISHED:
            return
        await asyncio.sleep(0.02)


class TestSessionReaping:
    @pytest.mark.asyncio
    async def test_ended_session_frees_active_slot(self, tmp_path):
        manager = SessionManager(
            ledger_path=tmp_path / "achievements.csv", max_active_sessions=1,
        )
        # A 1x1 board is won before the first tick.
        first = manager.create_game(grid_width=1, grid_height=1)
        assert first.session.game_ended

        second = manager.create_game()
        assert first.status == SessionStatus.FINISHED
        assert second.status == SessionStatus.ACTIVE
        assert [g.game_id for g in manager.list_games()] == [second.game_id]
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_cap_still_applies_to_live_sessions(self, tmp_path):
        manager = SessionManager(
            ledger_path=tmp_path / "achievements.csv", max_active_sessions=1,
        )
        manager.create_game()
        with pytest.raises(ValueError, match="Too many active sessions"):
            manager.create_game()
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_unwatched_ended_session_finishes_on_tick(self, tmp_path):
        manager = SessionManager(ledger_path=tmp_path / "achievements.csv")
        game = manager.create_game(grid_width=1, grid_height=1, difficulty="secret")

        await _wait_until_finished(manager, game.game_id)

        assert game.status == SessionStatus.FINISHED
        assert game.finished_at is not None
        assert manager.list_games() == []
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_idle_session_times_out(self, tmp_path):
        manager = SessionManager(
            ledger_path=tmp_path / "achievements.csv", idle_timeout=0.05,
        )
        game = manager.create_game(difficulty="secret")

        await _wait_until_finished(manager, game.game_id)

        assert game.status == SessionStatus.FINISHED
        assert not game.session.game_ended
        await manager.cleanup()

    @pytest.mark.asyncio
    async def test_finished_sessions_pruned_from_registry(self, tmp_path):
        manager = SessionManager(
            ledger_path=tmp_path / "achievements.csv", max_finished_sessions=2,
        )
        game_ids = [
            manager.create_game(grid_width=1, grid_height=1, difficulty="secret").game_id
            for _ in range(5)
        ]

        for _ in range(100):
            await asyncio.sleep(0.02)
            retained = [gid for gid in game_ids if manager.get_game(gid) is not None]
            if len(retained) <= 2:
                break

        retained = [gid for gid in game_ids if manager.get_game(gid) is not None]
        assert len(retained) <= 2
        await manager.cleanup()

    def test_negative_idle_timeout_rejected(self, tmp_path):
        with pytest.raises(ValueError, match="idle_timeout"):
            SessionManager(ledger_path=tmp_path / "achievements.csv", idle_timeout=-1)
