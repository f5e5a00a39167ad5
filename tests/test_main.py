"""
Tests for the command-line interface.
"""

import json
import logging

import pytest

from filtern.commands import Confirm, MoveCursor, ToggleCursorRegion
from filtern.main import create_parser, main, parse_commands


@pytest.fixture(autouse=True)
def reset_logging():
    """Drop handlers installed by setup_logging between tests."""
    yield
    logging.getLogger("filtern").handlers.clear()


class TestParseCommands:
    """Tests for the command script parser."""

    def test_words_and_repeats(self):
        commands = parse_commands("swap, confirm, right*2, up")

        assert commands == [
            ToggleCursorRegion(),
            Confirm(),
            MoveCursor(1, 0),
            MoveCursor(1, 0),
            MoveCursor(0, 1),
        ]

    def test_empty_script(self):
        assert parse_commands("") == []

    def test_unknown_word(self):
        with pytest.raises(ValueError, match="unknown command"):
            parse_commands("jump")

    def test_bad_repeat(self):
        with pytest.raises(ValueError):
            parse_commands("left*0")


class TestMain:
    """Tests for the entry point."""

    def test_parser_defaults(self):
        args = create_parser().parse_args([])
        assert args.level == 1
        assert args.ticks == 30
        assert args.boundary_mode is None
        assert args.catch_up is None

    def test_list_levels(self, capsys):
        assert main(["--list-levels", "--log-level", "WARNING"]) == 0

        out = capsys.readouterr().out
        assert "Level 1/9: Need Some Space" in out
        assert "Level 9/9: Off By One" in out

    def test_solves_level_two(self, capsys, tmp_path):
        state_path = tmp_path / "state.json"

        code = main([
            "--level", "2",
            "--commands", "swap,confirm,right*6,up*5,confirm",
            "--no-progress",
            "--log-level", "WARNING",
            "--save-state", str(state_path),
        ])

        assert code == 0
        assert "Solved!" in capsys.readouterr().out
        state = json.loads(state_path.read_text())
        assert state["step_count"] == 6
        assert state["frame"]["run_state"] == "solved"

    def test_reports_rejected_confirm(self, capsys):
        main([
            "--level", "2",
            "--commands", "swap,confirm,right*2,up*5,confirm",
            "--ticks", "3",
            "--no-progress",
            "--log-level", "WARNING",
        ])

        out = capsys.readouterr().out
        assert "rejected_digit" in out
        assert "Not solved." in out

    def test_bad_config(self, capsys):
        assert main(["--pool-columns", "0", "--log-level", "WARNING"]) == 1
        assert "Configuration error" in capsys.readouterr().err

    def test_bad_command_script(self, capsys):
        assert main(["--commands", "fly", "--log-level", "WARNING"]) == 1

    @pytest.mark.parametrize("level", ["0", "10"])
    def test_level_out_of_range(self, capsys, level):
        assert main(["--level", level, "--log-level", "WARNING"]) == 1
        assert "level must be in [1, 9]" in capsys.readouterr().err

    def test_save_frames_includes_start(self, tmp_path):
        frames_dir = tmp_path / "frames"

        main([
            "--save-frames", str(frames_dir),
            "--no-progress",
            "--log-level", "WARNING",
        ])

        names = sorted(p.name for p in frames_dir.glob("*.png"))
        assert names[0] == "frame_000000_tick0000.png"
        # start, run toggle, four ticks and the solve
        assert len(names) == 7
