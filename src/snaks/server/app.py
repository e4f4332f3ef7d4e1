"""FastAPI application factory."""

from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI

from snaks.server.game_manager import SessionManager
from snaks.server.routes import achievements_router, router
from snaks.server.websocket import ws_router


@asynccontextmanager
async def _lifespan(app: FastAPI):
    if getattr(app.state, "game_manager", None) is None:
        app.state.game_manager = SessionManager()
    yield
    await app.state.game_manager.cleanup()


def create_app(game_manager: SessionManager | None = None) -> FastAPI:
    """Build and return the FastAPI application.

    A *game_manager* can be supplied to control where the ledger lives;
    otherwise one is created on startup.
    """
    app = FastAPI(title="snaks API", version="0.1.0", lifespan=_lifespan)
    if game_manager is not None:
        app.state.game_manager = game_manager
    app.include_router(router)
    app.include_router(achievements_router)
    app.include_router(ws_router)
    return app
