from __future__ import annotations

import json
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Mapping


@dataclass
class TelemetryService:
    """Appends game events to a JSON-lines file, one record per line.

    Records written between `begin_game` and `end_game` carry that game's id,
    so several sessions can share one file and `read_game` can pull a single
    game back out. The header holds the opening snapshot (seed and config
    included); the closing record holds the final one plus move counts.
    """

    path: Path
    enabled: bool = True
    game_id: str | None = None
    moves: int = 0
    undos: int = 0

    def log(self, event_type: str, payload: Mapping[str, object]) -> None:
        if not self.enabled:
            return
        self.path.parent.mkdir(parents=True, exist_ok=True)
        rec: dict[str, object] = {
            "ts": datetime.now(tz=timezone.utc).isoformat(),
            "type": event_type,
            "payload": dict(payload),
        }
        if self.game_id is not None:
            rec["game"] = self.game_id
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(rec, ensure_ascii=False) + "\n")

    def begin_game(self, opening: Mapping[str, object]) -> str:
        self.game_id = uuid.uuid4().hex
        self.moves = 0
        self.undos = 0
        self.log(
            "game_started",
            {"seed": opening.get("seed"), "config": opening.get("config"), "snapshot": dict(opening)},
        )
        return self.game_id

    def log_move(
        self,
        action: Mapping[str, object],
        events: list[dict[str, object]],
        view: Mapping[str, object],
    ) -> None:
        self.moves += 1
        self.log("move", {"n": self.moves, "action": dict(action), "events": events, "view": dict(view)})

    def log_undo(self, view: Mapping[str, object]) -> None:
        self.undos += 1
        self.log("undo", {"round": view.get("round"), "view": dict(view)})

    def end_game(self, final: Mapping[str, object], *, abandoned: bool = False) -> None:
        if self.game_id is None:
            return
        self.log(
            "game_abandoned" if abandoned else "game_ended",
            {
                "round": final.get("round"),
                "winner": final.get("winner"),
                "moves": self.moves,
                "undos": self.undos,
                "snapshot": dict(final),
            },
        )
        self.game_id = None

    def read_game(self, game_id: str) -> list[dict[str, object]]:
        if not self.path.exists():
            return []
        out = []
        with self.path.open(encoding="utf-8") as f:
            for line in f:
                rec = json.loads(line)
                if rec.get("game") == game_id:
                    out.append(rec)
        return out
