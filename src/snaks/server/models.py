"""Pydantic models for API request/response schemas."""

from __future__ import annotations

import enum

from pydantic import BaseModel, Field

from snaks.config import MAX_GRID_SIZE


class SessionStatus(str, enum.Enum):
    """Lifecycle states for a hosted session."""

    ACTIVE = "active"
    FINISHED = "finished"


class CreateGameRequest(BaseModel):
    """Request body for POST /games."""

    grid_width: int = Field(default=20, ge=1, le=MAX_GRID_SIZE)
    grid_height: int = Field(default=10, ge=1, le=MAX_GRID_SIZE)
    difficulty: str = "normal"
    username: str = Field(default="player", min_length=1, max_length=32)
    seed: int | None = None


class DifficultyRequest(BaseModel):
    """Request body for POST /games/{game_id}/difficulty."""

    difficulty: str


class GameSummary(BaseModel):
    """Compact session info for list endpoints."""

    game_id: str
    status: SessionStatus
    username: str
    difficulty: str
    fps: int
    score: int
    game_status: str
    paused: bool


class AchievementModel(BaseModel):
    """One ledger row."""

    username: str
    difficulty: str
    score: int


class ErrorResponse(BaseModel):
    """Standard error envelope."""

    detail: str
