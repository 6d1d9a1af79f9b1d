from __future__ import annotations

import json
from pathlib import Path

from jsonschema import Draft202012Validator
from jsonschema.exceptions import SchemaError as InvalidSchema

from korotus.engine.game import GameState
from korotus.engine.serialize import snapshot, view_to_dict
from korotus.engine.view import GameStateView


class SchemaError(RuntimeError):
    pass


def _load_json(path: Path) -> object:
    try:
        return json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError as e:
        raise SchemaError(f"Missing schema file: {path}") from e
    except json.JSONDecodeError as e:
        raise SchemaError(f"Invalid JSON in {path}: {e}") from e


def validate_json(instance: object, schema: object, *, context: str) -> None:
    validator = Draft202012Validator(schema)
    errors = sorted(validator.iter_errors(instance), key=lambda e: [str(p) for p in e.path])
    if errors:
        lines = [f"Schema validation failed for {context}:"]
        for err in errors[:10]:
            loc = "/".join(str(p) for p in err.absolute_path)
            lines.append(f"- {loc}: {err.message}")
        raise SchemaError("\n".join(lines))


class SchemaService:
    """Checks serialized views and snapshots against the shipped JSON Schemas."""

    def __init__(self, schema_dir: Path) -> None:
        self._schema_dir = schema_dir
        self._cache: dict[str, object] = {}

    def _schema(self, name: str) -> object:
        if name not in self._cache:
            self._cache[name] = _load_json(self._schema_dir / name)
        return self._cache[name]

    def validate_view_dict(self, raw: object) -> None:
        validate_json(raw, self._schema("game_view.schema.json"), context="game view")

    def validate_snapshot_dict(self, raw: object) -> None:
        validate_json(raw, self._schema("game_state.schema.json"), context="game snapshot")

    def view_dict(self, view: GameStateView) -> dict[str, object]:
        out = view_to_dict(view)
        self.validate_view_dict(out)
        return out

    def snapshot_dict(self, state: GameState) -> dict[str, object]:
        out = snapshot(state)
        self.validate_snapshot_dict(out)
        return out

    def validate_all(self) -> None:
        # Schemas themselves must be valid 2020-12 documents
        for name in ("game_view.schema.json", "game_state.schema.json"):
            try:
                Draft202012Validator.check_schema(self._schema(name))
            except InvalidSchema as e:
                raise SchemaError(f"Invalid schema {name}: {e.message}") from e
