"""REST API route handlers for sessions and the achievement ledger."""

from __future__ import annotations

from fastapi import APIRouter, HTTPException, Request

from snaks.achievements import AchievementError
from snaks.difficulty import DifficultyKind
from snaks.server.game_manager import SessionInstance, SessionManager
from snaks.server.models import (
    AchievementModel,
    CreateGameRequest,
    DifficultyRequest,
    GameSummary,
)

router = APIRouter(prefix="/games", tags=["games"])
achievements_router = APIRouter(prefix="/achievements", tags=["achievements"])


def _get_manager(request: Request) -> SessionManager:
    return request.app.state.game_manager


def _require(request: Request, game_id: str) -> SessionInstance:
    try:
        return _get_manager(request).require_game(game_id)
    except KeyError as exc:
        raise HTTPException(status_code=404, detail="Game not found.") from exc


@router.post("", status_code=201)
async def create_game(body: CreateGameRequest, request: Request) -> GameSummary:
    """Create a session and start ticking it."""
    manager = _get_manager(request)
    try:
        game = manager.create_game(
            grid_width=body.grid_width,
            grid_height=body.grid_height,
            difficulty=body.difficulty,
            username=body.username,
            seed=body.seed,
        )
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    return game.summary()


@router.get("")
async def list_games(request: Request) -> list[GameSummary]:
    """List active sessions."""
    return _get_manager(request).list_games()


@router.get("/{game_id}")
async def get_game(game_id: str, request: Request) -> dict:
    """Get session metadata and the full game state."""
    game = _require(request, game_id)
    async with game.lock:
        return {
            **game.summary().model_dump(mode="json"),
            "state": game.session.snapshot(),
        }


@router.post("/{game_id}/pause")
async def toggle_pause(game_id: str, request: Request) -> GameSummary:
    game = _require(request, game_id)
    async with game.lock:
        game.session.toggle_pause()
        return game.summary()


@router.post("/{game_id}/restart")
async def restart(game_id: str, request: Request) -> GameSummary:
    game = _require(request, game_id)
    async with game.lock:
        game.session.restart()
        return game.summary()


@router.post("/{game_id}/difficulty")
async def change_difficulty(
    game_id: str, body: DifficultyRequest, request: Request,
) -> GameSummary:
    """Switch difficulty; a different level restarts the game."""
    game = _require(request, game_id)
    try:
        kind = DifficultyKind.parse(body.difficulty)
    except ValueError as exc:
        raise HTTPException(status_code=422, detail=str(exc)) from exc
    async with game.lock:
        session = game.session
        session.begin_difficulty_selection()
        session.select_difficulty(kind)
        session.submit_difficulty()
        return game.summary()


@router.delete("/{game_id}", status_code=204)
async def close_game(game_id: str, request: Request) -> None:
    _require(request, game_id)
    await _get_manager(request).close_game(game_id)


@achievements_router.get("")
async def list_achievements(
    request: Request, username: str | None = None,
) -> list[AchievementModel]:
    """Return ledger rows, optionally for a single user."""
    ledger = _get_manager(request).ledger
    try:
        entries = ledger.read()
    except AchievementError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return [
        AchievementModel(**a.to_dict()) for a in entries
        if username is None or a.username == username
    ]
