from __future__ import annotations

from pathlib import Path

from korotus.engine.game import initialize_game
from korotus.engine.serialize import snapshot
from korotus.services.telemetry import TelemetryService


def test_games_sharing_a_file_are_read_back_separately(tmp_path: Path) -> None:
    telemetry = TelemetryService(tmp_path / "t.jsonl")
    first = telemetry.begin_game(snapshot(initialize_game(seed=1)))
    telemetry.log_move({"type": "resolve"}, [], {"round": 2})
    telemetry.end_game(snapshot(initialize_game(seed=1)))

    second = telemetry.begin_game(snapshot(initialize_game(seed=2)))
    telemetry.end_game(snapshot(initialize_game(seed=2)), abandoned=True)

    assert first != second
    assert [r["type"] for r in telemetry.read_game(first)] == ["game_started", "move", "game_ended"]
    assert [r["type"] for r in telemetry.read_game(second)] == ["game_started", "game_abandoned"]
    assert telemetry.read_game(first)[0]["payload"]["seed"] == 1
    assert telemetry.read_game(second)[-1]["payload"]["moves"] == 0


def test_end_without_begin_writes_nothing(tmp_path: Path) -> None:
    telemetry = TelemetryService(tmp_path / "t.jsonl")
    telemetry.end_game(snapshot(initialize_game(seed=1)))
    assert not (tmp_path / "t.jsonl").exists()
    assert telemetry.read_game("missing") == []
