"""Test the text renderer and the terminal entry points."""

import json
from pathlib import Path
from types import SimpleNamespace

import pytest

from src.generator import Cell, Puzzle
from src.main import load_config, play_interactive, run_simulation
from src.session import GameConfig
from src.utils.grid_visualizer import glyph, parse_choice, render_grid, render_options, render_puzzle


DEFAULT_CONFIG = Path(__file__).resolve().parent.parent / "configs" / "default.yaml"


def sample_puzzle():
    solution = [
        ["circle", "star", "square", "cross"],
        ["star", "square", "cross", "circle"],
        ["square", "cross", "circle", "star"],
        ["cross", "circle", "star", "square"],
    ]
    grid = [[None] * 4 for _ in range(4)]
    grid[0][0] = "circle"
    grid[1][2] = "cross"
    return Puzzle(
        grid=grid,
        grid_size=4,
        hint_count=2,
        hidden_cell=Cell(3, 3),
        correct_answer="square",
        answer_options=["star", "square", "circle", "cross"],
        solution=solution,
    )


class TestRendering:
    """Text rendering of puzzles."""

    def test_render_grid_marks_hidden_cell(self):
        """Hints show glyphs, empty cells dots, the hidden cell a '?'."""
        puzzle = sample_puzzle()
        lines = render_grid(puzzle.grid, puzzle.hidden_cell).split("\n")
        assert lines[0] == "● . . ."
        assert lines[1] == ". . ✚ ."
        assert lines[3] == ". . . ?"

    def test_render_after_reveal(self):
        """Once revealed, the hidden cell shows its symbol."""
        puzzle = sample_puzzle()
        puzzle.reveal()
        assert render_grid(puzzle.grid, puzzle.hidden_cell).split("\n")[3] == ". . . ■"

    def test_render_options_numbered(self):
        """Options are numbered from 1."""
        text = render_options(["star", "square"])
        assert text == "[1] ★ star  [2] ■ square"

    def test_render_puzzle(self):
        """The full render contains grid and options."""
        text = render_puzzle(sample_puzzle())
        assert "?" in text
        assert "[4] ✚ cross" in text

    def test_unknown_symbol_glyph(self):
        """Unknown symbols fall back to their first letter."""
        assert glyph("octagon") == "O"
        assert glyph(None) == "."


class TestParseChoice:
    """Player input parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("1", "star"),
        (" 4 ", "cross"),
        ("Square", "square"),
        ("5", None),
        ("0", None),
        ("hexagon", None),
        ("", None),
    ])
    def test_parse(self, raw, expected):
        """Numbers and names map to options; anything else to None."""
        assert parse_choice(raw, ["star", "square", "circle", "cross"]) == expected


class TestSimulation:
    """Automated play-throughs."""

    def test_perfect_player(self):
        """A perfect bot finishes with full marks."""
        session = run_simulation(GameConfig(total_levels=20, seed=1), accuracy=1.0, seed=2)
        result = session.get_result()

        assert result.state == "complete"
        assert result.total_questions == 20
        assert result.correct_answers == 20
        assert result.final_score == 200
        assert result.accuracy == 100

    def test_hopeless_player(self):
        """A bot that is always wrong ends at a clamped zero."""
        session = run_simulation(GameConfig(total_levels=10, seed=1), accuracy=0.0, seed=2)
        result = session.get_result()

        assert result.score == -50
        assert result.final_score == 0
        assert result.accuracy == 0
        assert not any(o.timed_out for o in result.history)

    def test_slow_player_times_out(self):
        """Thinking past the limit turns every answer into a timeout."""
        session = run_simulation(GameConfig(total_levels=5, seed=1), accuracy=1.0, think_time=30)
        result = session.get_result()

        assert result.state == "complete"
        assert all(o.timed_out for o in result.history)
        assert result.correct_answers == 0

    def test_full_default_game(self):
        """The default 100-level game completes."""
        session = run_simulation(GameConfig(seed=5), accuracy=0.7, seed=5)
        result = session.get_result()

        assert result.state == "complete"
        assert result.total_questions == 100
        assert result.correct_answers <= result.total_questions

    def test_invalid_accuracy(self):
        """Accuracy must be a probability."""
        with pytest.raises(ValueError):
            run_simulation(GameConfig(), accuracy=1.5)


class TestInteractive:
    """Terminal play with scripted input and a scripted clock."""

    @pytest.fixture
    def terminal(self, monkeypatch):
        """Feed answers to input() and (start, end) readings to time.monotonic()."""

        def script(answers, readings):
            answers, readings = iter(answers), iter(readings)
            monkeypatch.setattr("builtins.input", lambda prompt="": next(answers))
            monkeypatch.setattr("src.main.time", SimpleNamespace(monotonic=lambda: next(readings)))

        return script

    def test_late_answer_not_applied_to_next_puzzle(self, terminal):
        """An answer typed after a timeout is dropped, even with no settle delay."""
        config = GameConfig(seed=1, correct_settle_delay=0, wrong_settle_delay=0)
        terminal(["x", "1", "q"], [0, 3.5, 0, 100, 0, 0])

        session = play_interactive(config)

        assert len(session.history) == 1
        assert session.history[0].timed_out is True
        assert session.level == 2
        assert session.current_puzzle.level == 2
        assert session.state == "active"
        assert session.time_remaining == config.time_limit

    def test_answer_then_quit(self, terminal):
        """A prompt answer is scored and the next puzzle loads."""
        terminal(["2", "q"], [0, 1, 0, 0])

        session = play_interactive(GameConfig(seed=1))

        assert len(session.history) == 1
        assert session.history[0].timed_out is False
        assert session.level == 2
        assert session.state == "active"

    def test_play_again(self, terminal):
        """Answering yes after the last level restarts the game."""
        terminal(["1", "y", "q"], [0, 1, 0, 0])

        session = play_interactive(GameConfig(seed=1, total_levels=1))

        assert session.level == 1
        assert session.history == []
        assert session.total_questions == 1
        assert session.state == "active"

    def test_decline_play_again(self, terminal):
        """Any other reply ends on the completed game."""
        terminal(["1", "n"], [0, 1])

        session = play_interactive(GameConfig(seed=1, total_levels=1))

        assert session.is_complete
        assert len(session.history) == 1


class TestLoadConfig:
    """YAML configuration loading."""

    def test_load(self, tmp_path):
        """Values from YAML override the defaults."""
        path = tmp_path / "config.yaml"
        path.write_text("total_levels: 12\ntime_limit: 10\nseed: 3\n")

        config = load_config(str(path))

        assert config.total_levels == 12
        assert config.time_limit == 10
        assert config.points_per_correct == 10

    def test_empty_file_uses_defaults(self, tmp_path):
        """An empty file gives the default config."""
        path = tmp_path / "empty.yaml"
        path.write_text("")
        assert load_config(str(path)) == GameConfig()

    def test_missing_file(self):
        """A missing file is reported."""
        with pytest.raises(FileNotFoundError):
            load_config("does/not/exist.yaml")

    def test_shipped_default_config(self):
        """configs/default.yaml matches the built-in defaults."""
        assert load_config(str(DEFAULT_CONFIG)) == GameConfig()

    def test_result_json_round_trip(self, tmp_path):
        """Saved results load back as JSON with the config embedded."""
        session = run_simulation(GameConfig(total_levels=2, seed=1), accuracy=1.0)
        path = tmp_path / "r.json"
        session.save_result(path)
        data = json.loads(path.read_text())
        assert data["config"]["total_levels"] == 2
