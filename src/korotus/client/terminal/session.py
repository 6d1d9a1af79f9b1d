from __future__ import annotations

from dataclasses import dataclass, field

from korotus.engine.actions import Action, AttackerPlayAction, DefenderPlayAction, ResolveRoundAction
from korotus.engine.game import GameState, step
from korotus.engine.serialize import action_to_dict, view_from_dict
from korotus.engine.view import project_view
from korotus.logging_utils import get_logger
from korotus.services.history import GameHistory, HistoryError
from korotus.services.schema import SchemaService
from korotus.services.telemetry import TelemetryService

from .render import HELP_TEXT, render_view

logger = get_logger(__name__)


class CommandError(ValueError):
    pass


def _int_arg(raw: str, name: str) -> int:
    try:
        return int(raw)
    except ValueError as e:
        raise CommandError(f"{name} must be a number, got {raw!r}") from e


def parse_command(line: str) -> Action | str:
    """Turn a typed line into an engine action, or a session keyword
    ("undo", "view", "help", "quit")."""
    words = line.strip().lower().split()
    if not words:
        raise CommandError("Type a command (try 'help').")
    cmd, args = words[0], words[1:]

    if cmd in ("up", "down"):
        if len(args) != 1:
            raise CommandError(f"Usage: {cmd} N")
        return DefenderPlayAction(card_index=_int_arg(args[0], "N"), face_up=cmd == "up")
    if cmd == "attack":
        if len(args) != 2:
            raise CommandError("Usage: attack N T")
        return AttackerPlayAction(
            card_index=_int_arg(args[0], "N"),
            target_index=_int_arg(args[1], "T"),
        )
    if cmd == "resolve":
        return ResolveRoundAction()
    if cmd in ("undo", "view", "help", "quit"):
        return cmd
    raise CommandError(f"Unknown command: {cmd}")


@dataclass
class Session:
    """One hot-seat game.

    Every view shown or recorded is schema-checked before the state moves on.
    A `SchemaError` escapes `start`/`handle` and leaves `state` as it was.
    """

    state: GameState
    telemetry: TelemetryService
    schemas: SchemaService
    history: GameHistory = field(default_factory=GameHistory)
    finished: bool = False

    def _view(self, state: GameState) -> dict[str, object]:
        return self.schemas.view_dict(project_view(state))

    def start(self) -> str:
        raw = self._view(self.state)
        self.telemetry.begin_game(self.schemas.snapshot_dict(self.state))
        return render_view(view_from_dict(raw))

    def close(self) -> None:
        """Record an unfinished game as abandoned; nothing to do once it ended."""
        if not self.finished and not self.state.game_over:
            self.telemetry.end_game(self.schemas.snapshot_dict(self.state), abandoned=True)
        self.finished = True

    def handle(self, line: str) -> str:
        try:
            cmd = parse_command(line)
        except CommandError as e:
            return str(e)

        if cmd == "quit":
            self.close()
            return "Bye."
        if cmd == "help":
            return HELP_TEXT
        if cmd == "view":
            return render_view(view_from_dict(self._view(self.state)))
        if cmd == "undo":
            try:
                previous = self.history.peek()
            except HistoryError as e:
                return f"Cannot undo: {e}"
            raw = self._view(previous)
            self.state = self.history.undo()
            self.telemetry.log_undo(raw)
            return render_view(view_from_dict(raw))

        assert not isinstance(cmd, str)
        result = step(self.state, cmd)
        if not result.ok:
            logger.info("Invalid move %s: %s", cmd, result.error)
            return f"Invalid move: {result.error}"

        raw = self._view(result.state)
        final = self.schemas.snapshot_dict(result.state) if result.state.game_over else None
        self.history.push(self.state)
        self.state = result.state
        self.telemetry.log_move(action_to_dict(cmd), result.events, raw)
        if final is not None:
            self.telemetry.end_game(final)
        return render_view(view_from_dict(raw))
