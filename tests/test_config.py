"""Tests for the game configuration dataclass."""

import json

import pytest

from snaks.config import GameConfig
from snaks.difficulty import DifficultyKind


class TestGameConfig:
    def test_defaults(self):
        cfg = GameConfig()
        assert cfg.grid_width == 20
        assert cfg.grid_height == 10
        assert cfg.difficulty_kind is DifficultyKind.NORMAL
        assert cfg.username == "player"

    def test_invalid_grid(self):
        with pytest.raises(ValueError, match="grid_width"):
            GameConfig(grid_width=0)
        with pytest.raises(ValueError, match="grid_height"):
            GameConfig(grid_height=500)

    def test_invalid_difficulty(self):
        with pytest.raises(ValueError, match="Unknown difficulty"):
            GameConfig(difficulty="nightmare")

    def test_invalid_username(self):
        with pytest.raises(ValueError, match="username"):
            GameConfig(username="a,b")

    def test_with_overrides_skips_none(self):
        cfg = GameConfig().with_overrides(grid_width=8, username=None)
        assert cfg.grid_width == 8
        assert cfg.username == "player"

    def test_save_and_load(self, tmp_path):
        cfg = GameConfig(grid_width=15, difficulty="hard", seed=7)
        path = tmp_path / "config.json"
        cfg.save(path)
        assert json.loads(path.read_text())["difficulty"] == "hard"
        assert GameConfig.load(path) == cfg
