"""WebSocket handlers for real-time play and spectating."""

from __future__ import annotations

import json
import logging

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from snaks.server.game_manager import SessionInstance, SessionManager
from snaks.server.models import SessionStatus
from snaks.session import GameSession
from snaks.snake import Direction

logger = logging.getLogger(__name__)

ws_router = APIRouter()

_COMMANDS = {
    "pause": GameSession.toggle_pause,
    "restart": GameSession.restart,
    "dismiss": GameSession.dismiss_notice,
}


def _get_manager(ws: WebSocket) -> SessionManager:
    return ws.app.state.game_manager


async def _send_snapshot(websocket: WebSocket, game: SessionInstance) -> None:
    async with game.lock:
        state = game.session.snapshot()
    await websocket.send_text(json.dumps(state, separators=(",", ":")))


async def _handle_message(game: SessionInstance, raw: str) -> None:
    try:
        msg = json.loads(raw)
    except json.JSONDecodeError:
        return
    if not isinstance(msg, dict):
        return

    direction = None
    direction_str = msg.get("direction")
    if isinstance(direction_str, str):
        try:
            direction = Direction(direction_str.lower())
        except ValueError:
            return

    command_str = msg.get("command")
    command = _COMMANDS.get(command_str) if isinstance(command_str, str) else None

    async with game.lock:
        if game.status != SessionStatus.ACTIVE:
            return
        if direction is not None:
            game.session.rotate(direction)
        if command is not None:
            command(game.session)


@ws_router.websocket("/games/{game_id}/play")
async def play(websocket: WebSocket, game_id: str) -> None:
    """Player WebSocket: send directions and commands, receive state each tick."""
    game = _get_manager(websocket).get_game(game_id)
    if game is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    game.players.append(websocket)
    logger.info("Player connected to session %s.", game_id)

    # Initial snapshot so the client gets immediate feedback.
    await _send_snapshot(websocket, game)

    try:
        while True:
            await _handle_message(game, await websocket.receive_text())
    except WebSocketDisconnect:
        logger.info("Player disconnected from session %s.", game_id)
    finally:
        if websocket in game.players:
            game.players.remove(websocket)


@ws_router.websocket("/games/{game_id}/spectate")
async def spectate(websocket: WebSocket, game_id: str) -> None:
    """Spectator WebSocket: receive-only state stream."""
    game = _get_manager(websocket).get_game(game_id)
    if game is None:
        await websocket.close(code=4004, reason="Game not found.")
        return

    await websocket.accept()
    game.spectators.append(websocket)
    logger.info("Spectator connected to session %s.", game_id)

    await _send_snapshot(websocket, game)

    try:
        while True:
            await websocket.receive_text()
    except WebSocketDisconnect:
        logger.info("Spectator disconnected from session %s.", game_id)
    finally:
        if websocket in game.spectators:
            game.spectators.remove(websocket)
