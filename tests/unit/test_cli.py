"""Tests for the analyze_replay command line script."""

import importlib.util
import json

import pytest


@pytest.fixture
def cli(project_root):
    path = project_root / "scripts" / "analyze_replay.py"
    loader_spec = importlib.util.spec_from_file_location("analyze_replay", path)
    module = importlib.util.module_from_spec(loader_spec)
    loader_spec.loader.exec_module(module)
    return module


class TestAnalyzeReplay:
    """Tests for the CLI entry point."""

    def test_prints_summary_json(self, cli, singles_log, temp_dir, capsys):
        """A valid log prints the summary as JSON."""
        log_file = temp_dir / "battle.log"
        log_file.write_text(singles_log, encoding="utf-8")

        assert cli.main([str(log_file)]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["player1"]["name"] == "Player1"
        assert data["winner"] == "player2"
        assert len(data["turns"]) == 5

    def test_basic_mode(self, cli, singles_log, temp_dir, capsys):
        log_file = temp_dir / "battle.log"
        log_file.write_text(singles_log, encoding="utf-8")

        assert cli.main([str(log_file), "--basic"]) == 0

        data = json.loads(capsys.readouterr().out)
        assert data["turns"][0]["actions"][0]["impact"] is None

    def test_writes_timeline(self, cli, singles_log, temp_dir, capsys):
        """--timeline-csv writes one line per turn plus a header."""
        log_file = temp_dir / "battle.log"
        log_file.write_text(singles_log, encoding="utf-8")
        csv_path = temp_dir / "out" / "timeline.csv"

        assert cli.main([str(log_file), "--timeline-csv", str(csv_path)]) == 0
        assert len(csv_path.read_text().splitlines()) == 6

    def test_missing_file(self, cli, temp_dir, capsys):
        """A missing log exits with status 1 and prints nothing."""
        assert cli.main([str(temp_dir / "nope.log")]) == 1
        assert capsys.readouterr().out == ""

    def test_log_too_large(self, cli, singles_log, temp_dir, capsys):
        """Logs over the configured limit fail cleanly."""
        log_file = temp_dir / "battle.log"
        log_file.write_text(singles_log, encoding="utf-8")

        assert cli.main([str(log_file), "--set", "parser.max_log_bytes=10"]) == 1
        assert capsys.readouterr().out == ""
