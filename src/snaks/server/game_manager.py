"""In-memory session registry, lifecycle management, and async tick loops."""

from __future__ import annotations

import asyncio
import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from pathlib import Path

from starlette.websockets import WebSocket, WebSocketState

from snaks.achievements import AchievementLedger
from snaks.config import GameConfig
from snaks.session import GameSession
from snaks.server.models import GameSummary, SessionStatus

logger = logging.getLogger(__name__)

_MAX_ACTIVE_SESSIONS = 100
_MAX_FINISHED_SESSIONS = 100
_IDLE_TIMEOUT_SECONDS = 60.0


@dataclass
class SessionInstance:
    """All server-side state for one hosted session."""

    game_id: str
    session: GameSession
    status: SessionStatus = SessionStatus.ACTIVE
    players: list[WebSocket] = field(default_factory=list)
    spectators: list[WebSocket] = field(default_factory=list)
    created_at: float = field(default_factory=time.monotonic)
    finished_at: float | None = None
    last_seen: float = field(default_factory=time.monotonic)
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    _task: asyncio.Task | None = field(default=None, repr=False)

    def summary(self) -> GameSummary:
        stats = self.session.engine.stats()
        return GameSummary(
            game_id=self.game_id,
            status=self.status,
            username=self.session.username,
            difficulty=self.session.difficulty.prev.value,
            fps=self.session.difficulty.prev.fps,
            score=stats.score,
            game_status=stats.status.value,
            paused=self.session.paused,
        )


class SessionManager:
    """Central registry managing all hosted sessions.

    Every engine access for a session, whether from a tick loop or from a
    request handler, happens under that session's lock.
    """

    def __init__(
        self,
        ledger_path: str | Path | None = None,
        max_active_sessions: int = _MAX_ACTIVE_SESSIONS,
        max_finished_sessions: int = _MAX_FINISHED_SESSIONS,
        idle_timeout: float = _IDLE_TIMEOUT_SECONDS,
    ) -> None:
        if max_active_sessions < 1:
            raise ValueError("max_active_sessions must be >= 1.")
        if max_finished_sessions < 0:
            raise ValueError("max_finished_sessions must be >= 0.")
        if idle_timeout < 0:
            raise ValueError("idle_timeout must be >= 0.")
        self.ledger = AchievementLedger(ledger_path)
        self._games: dict[str, SessionInstance] = {}
        self._max_active = max_active_sessions
        self._max_finished = max_finished_sessions
        self._idle_timeout = idle_timeout

    def create_game(
        self,
        grid_width: int = 20,
        grid_height: int = 10,
        difficulty: str = "normal",
        username: str = "player",
        seed: int | None = None,
    ) -> SessionInstance:
        """Create a session and start its tick loop."""
        self._reap_stale_games()
        active = sum(
            1 for g in self._games.values() if g.status == SessionStatus.ACTIVE
        )
        if active >= self._max_active:
            raise ValueError("Too many active sessions. Try again later.")

        config = GameConfig(
            grid_width=grid_width,
            grid_height=grid_height,
            difficulty=difficulty,
            username=username,
            seed=seed,
        )
        game_id = uuid.uuid4().hex[:12]
        instance = SessionInstance(
            game_id=game_id,
            session=GameSession(config, ledger=self.ledger),
        )
        self._games[game_id] = instance
        instance._task = asyncio.create_task(self._tick_loop(instance))
        logger.info(
            "Session %s created for '%s' (%dx%d, %s).",
            game_id, username, grid_width, grid_height, difficulty,
        )
        return instance

    def get_game(self, game_id: str) -> SessionInstance | None:
        return self._games.get(game_id)

    def require_game(self, game_id: str) -> SessionInstance:
        game = self._games.get(game_id)
        if game is None:
            raise KeyError(f"Game {game_id} not found.")
        return game

    def list_games(self) -> list[GameSummary]:
        """Return summaries of active sessions."""
        return [
            g.summary() for g in self._games.values()
            if g.status == SessionStatus.ACTIVE
        ]

    async def close_game(self, game_id: str) -> None:
        """Stop a session's tick loop and disconnect its clients."""
        game = self.require_game(game_id)
        self._mark_finished(game)
        task = game._task
        if task is not None and not task.done():
            task.cancel()
            await asyncio.gather(task, return_exceptions=True)
        await self._close_connections(game)
        self._prune_finished_games()

    async def _tick_loop(self, game: SessionInstance) -> None:
        """Step the session at its difficulty's rate, broadcasting state."""
        try:
            while game.status == SessionStatus.ACTIVE:
                await asyncio.sleep(game.session.tick_interval)
                async with game.lock:
                    state = game.session.tick()
                now = time.monotonic()
                if game.players or game.spectators:
                    game.last_seen = now
                elif self._is_stale(game, now):
                    logger.info("Session %s has no clients; finishing.", game.game_id)
                    self._mark_finished(game)
                    break
                await self._broadcast(game, state)
            self._prune_finished_games()
        except asyncio.CancelledError:
            logger.info("Tick loop cancelled for session %s.", game.game_id)
        except Exception:
            logger.exception("Tick loop error in session %s.", game.game_id)
            self._mark_finished(game)
            await self._close_connections(game)

    def _is_stale(self, game: SessionInstance, now: float) -> bool:
        """An unwatched session is stale once its game ended or it idled out."""
        if game.players or game.spectators:
            return False
        if game.session.game_ended:
            return True
        return now - game.last_seen >= self._idle_timeout

    def _reap_stale_games(self) -> None:
        """Finish stale sessions so they stop counting against the cap."""
        now = time.monotonic()
        reaped = 0
        for game in self._games.values():
            if game.status != SessionStatus.ACTIVE or not self._is_stale(game, now):
                continue
            self._mark_finished(game)
            if game._task is not None and not game._task.done():
                game._task.cancel()
            reaped += 1
        if reaped:
            logger.info("Reaped %d stale sessions.", reaped)
            self._prune_finished_games()

    def _mark_finished(self, game: SessionInstance) -> None:
        """Transition a session to finished exactly once."""
        if game.status != SessionStatus.FINISHED:
            game.status = SessionStatus.FINISHED
            game.finished_at = time.monotonic()

    async def _close_connections(self, game: SessionInstance) -> None:
        for ws in [*game.players, *game.spectators]:
            try:
                if ws.client_state == WebSocketState.CONNECTED:
                    await ws.close(code=1000, reason="Game finished.")
            except Exception:
                logger.warning("Failed closing socket in session %s.", game.game_id)
        game.players.clear()
        game.spectators.clear()

    def _prune_finished_games(self) -> None:
        """Bound retained finished sessions to avoid unbounded registry growth."""
        finished = [
            g for g in self._games.values() if g.status == SessionStatus.FINISHED
        ]
        overflow = len(finished) - self._max_finished
        if overflow <= 0:
            return

        finished.sort(
            key=lambda g: g.finished_at if g.finished_at is not None else g.created_at,
        )
        for stale in finished[:overflow]:
            self._games.pop(stale.game_id, None)
        logger.info(
            "Pruned %d finished sessions (retaining up to %d).",
            overflow, self._max_finished,
        )

    async def _broadcast(self, game: SessionInstance, state: dict) -> None:
        """Send state to every connected player and spectator."""
        payload = json.dumps(state, separators=(",", ":"))
        for sockets in (game.players, game.spectators):
            dead: list[WebSocket] = []
            # Snapshot: disconnect handlers may mutate the live list.
            for ws in list(sockets):
                try:
                    if ws.client_state == WebSocketState.CONNECTED:
                        await ws.send_text(payload)
                except Exception:
                    dead.append(ws)
            for ws in dead:
                if ws in sockets:
                    sockets.remove(ws)

    async def cleanup(self) -> None:
        """Cancel all running tick loops."""
        tasks = [
            g._task for g in self._games.values()
            if g._task and not g._task.done()
        ]
        for task in tasks:
            task.cancel()
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)
        logger.info("SessionManager cleanup complete.")
