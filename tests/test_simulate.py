"""Tests for the headless simulation utilities."""

import pytest

from snaks.simulate import SimulationResult, simulate_games


class TestSimulationResult:
    def test_summary_format(self):
        result = SimulationResult(
            total_games=10,
            wins=1,
            fails=8,
            unfinished=1,
            total_steps=500,
            best_score=7,
            mean_score=2.5,
            wall_time_seconds=1.5,
            steps_per_second=333.3,
        )
        summary = result.summary()
        assert "10 games" in summary
        assert "1 won" in summary
        assert "8 failed" in summary
        assert "steps/s" in summary


class TestSimulateGames:
    def test_outcomes_add_up(self):
        result = simulate_games(
            num_games=5, grid_width=6, grid_height=4, max_steps=100,
        )
        assert result.total_games == 5
        assert result.wins + result.fails + result.unfinished == 5
        assert result.total_steps > 0
        assert result.best_score >= result.mean_score >= 0

    def test_deterministic_for_seed(self):
        a = simulate_games(num_games=3, grid_width=6, grid_height=4, seed=7)
        b = simulate_games(num_games=3, grid_width=6, grid_height=4, seed=7)
        assert (a.wins, a.fails, a.total_steps, a.best_score) == (
            b.wins, b.fails, b.total_steps, b.best_score,
        )

    def test_single_cell_grid_wins_immediately(self):
        result = simulate_games(num_games=2, grid_width=1, grid_height=1)
        assert result.wins == 2
        assert result.total_steps == 0

    def test_invalid_game_count(self):
        with pytest.raises(ValueError, match="at least 1"):
            simulate_games(num_games=0)
