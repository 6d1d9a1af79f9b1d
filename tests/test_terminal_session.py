from __future__ import annotations

import json
import shutil
from dataclasses import replace
from pathlib import Path

import pytest

from korotus.client.terminal import main as main_mod
from korotus.client.terminal.render import HELP_TEXT
from korotus.client.terminal.session import CommandError, Session, parse_command
from korotus.engine.actions import AttackerPlayAction, DefenderPlayAction, ResolveRoundAction
from korotus.engine.game import initialize_game
from korotus.paths import get_paths
from korotus.services.schema import SchemaError, SchemaService
from korotus.services.telemetry import TelemetryService


def test_parse_command() -> None:
    assert parse_command("up 3") == DefenderPlayAction(card_index=3, face_up=True)
    assert parse_command("  DOWN 0 ") == DefenderPlayAction(card_index=0, face_up=False)
    assert parse_command("attack 1 2") == AttackerPlayAction(card_index=1, target_index=2)
    assert parse_command("resolve") == ResolveRoundAction()
    assert parse_command("undo") == "undo"

    for bad in ("", "up", "attack 1", "up x", "shuffle"):
        with pytest.raises(CommandError):
            parse_command(bad)


def _session(tmp_path: Path, schema_dir: Path | None = None) -> Session:
    telemetry = TelemetryService(tmp_path / "telemetry.jsonl")
    schemas = SchemaService(schema_dir or get_paths().schema_dir)
    return Session(state=initialize_game(seed=12), telemetry=telemetry, schemas=schemas)


def _records(tmp_path: Path) -> list[dict]:
    path = tmp_path / "telemetry.jsonl"
    if not path.exists():
        return []
    return [json.loads(line) for line in path.read_text(encoding="utf-8").splitlines()]


def _tightened_schemas(tmp_path: Path, prop: str, maximum: int) -> Path:
    """Copy the shipped schemas with one view property capped, so a real view fails."""
    out = tmp_path / "schemas"
    shutil.copytree(get_paths().schema_dir, out)
    view_path = out / "game_view.schema.json"
    schema = json.loads(view_path.read_text(encoding="utf-8"))
    schema["properties"][prop]["maximum"] = maximum
    view_path.write_text(json.dumps(schema), encoding="utf-8")
    return out


def test_invalid_move_keeps_state(tmp_path: Path) -> None:
    session = _session(tmp_path)
    before = session.state
    out = session.handle("down 99")
    assert out == "Invalid move: Invalid card index."
    assert session.state is before
    assert session.handle("undo") == "Cannot undo: No moves to undo"


def test_move_then_undo(tmp_path: Path) -> None:
    session = _session(tmp_path)
    session.start()
    before = session.state

    out = session.handle("down 0")
    assert "Table: 0:" in out
    assert len(session.state.defender_cards) == 1

    session.handle("undo")
    assert session.state is before

    session.handle("quit")
    assert session.finished

    records = _records(tmp_path)
    assert [r["type"] for r in records] == ["game_started", "move", "undo", "game_abandoned"]
    assert records[1]["payload"]["action"] == {"type": "defend", "card_index": 0, "face_up": False}


def test_telemetry_records_carry_validated_views_and_snapshots(tmp_path: Path) -> None:
    session = _session(tmp_path)
    session.start()
    session.handle("down 0")
    session.handle("undo")
    session.handle("quit")

    records = _records(tmp_path)
    game_ids = {r["game"] for r in records}
    assert len(game_ids) == 1
    assert session.telemetry.read_game(game_ids.pop()) == records

    schemas = SchemaService(get_paths().schema_dir)
    header, move, undo, closing = records
    assert header["payload"]["seed"] == 12
    schemas.validate_snapshot_dict(header["payload"]["snapshot"])
    schemas.validate_view_dict(move["payload"]["view"])
    assert len(move["payload"]["view"]["defender_cards"]) == 1
    schemas.validate_view_dict(undo["payload"]["view"])
    assert undo["payload"]["view"]["defender_cards"] == []
    schemas.validate_snapshot_dict(closing["payload"]["snapshot"])
    assert closing["payload"]["moves"] == 1
    assert closing["payload"]["undos"] == 1
    assert session.telemetry.game_id is None


def test_schema_invalid_view_is_rejected_at_start(tmp_path: Path) -> None:
    session = _session(tmp_path, _tightened_schemas(tmp_path, "deck_count", 0))
    with pytest.raises(SchemaError, match="deck_count"):
        session.start()
    assert _records(tmp_path) == []


def test_schema_invalid_view_is_rejected_before_state_changes(tmp_path: Path) -> None:
    session = _session(tmp_path, _tightened_schemas(tmp_path, "round", 1))
    session.start()
    session.handle("down 0")
    session.handle("attack 0 0")
    before = session.state

    # resolving moves to round 2, which the capped schema refuses
    with pytest.raises(SchemaError, match="round"):
        session.handle("resolve")
    assert session.state is before
    assert len(session.history) == 2
    assert [r["type"] for r in _records(tmp_path)] == ["game_started", "move", "move"]


def test_attacker_prompt_names_blind_pick(tmp_path: Path) -> None:
    session = _session(tmp_path)
    assert "attacks blind" not in session.start()

    out = session.handle("down 0")
    assert "Player 2 attacks blind: card 0-9 from your hidden hand, open slots 0" in out

    out = session.handle("attack 0 0")
    assert "attacks blind" not in out
    assert "picked blind" in HELP_TEXT


def test_disabled_telemetry_writes_nothing(tmp_path: Path) -> None:
    telemetry = TelemetryService(tmp_path / "telemetry.jsonl", enabled=False)
    schemas = SchemaService(get_paths().schema_dir)
    session = Session(state=initialize_game(seed=12), telemetry=telemetry, schemas=schemas)
    session.start()
    session.handle("down 0")
    assert not (tmp_path / "telemetry.jsonl").exists()


def test_main_refuses_broken_schemas(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    schema_dir = tmp_path / "schemas"
    shutil.copytree(get_paths().schema_dir, schema_dir)
    (schema_dir / "game_view.schema.json").write_text(json.dumps({"type": 5}), encoding="utf-8")
    paths = replace(get_paths(), schema_dir=schema_dir, userdata_dir=tmp_path / "home")
    monkeypatch.setattr(main_mod, "get_paths", lambda: paths)

    with pytest.raises(SystemExit) as exc:
        main_mod.main(["--seed", "3"])
    assert exc.value.code == 2
    assert not (tmp_path / "home").exists()


def test_main_plays_until_input_ends(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("KOROTUS_HOME", str(tmp_path))
    lines = iter(["down 0", "view"])

    def fake_input(prompt: str) -> str:
        try:
            return next(lines)
        except StopIteration:
            raise EOFError from None

    monkeypatch.setattr("builtins.input", fake_input)
    assert main_mod.main(["--seed", "3"]) == 0
    assert [r["type"] for r in _records(tmp_path)] == ["game_started", "move", "game_abandoned"]
