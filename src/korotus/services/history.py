from __future__ import annotations

from dataclasses import dataclass, field

from korotus.engine.game import GameState


class HistoryError(RuntimeError):
    pass


@dataclass
class GameHistory:
    """Undo stack of earlier snapshots.

    Snapshots are immutable, so they are kept by reference.
    """

    _states: list[GameState] = field(default_factory=list)

    def push(self, state: GameState) -> None:
        self._states.append(state)

    def undo(self) -> GameState:
        if not self._states:
            raise HistoryError("No moves to undo")
        return self._states.pop()

    def peek(self) -> GameState:
        if not self._states:
            raise HistoryError("No moves to undo")
        return self._states[-1]

    @property
    def can_undo(self) -> bool:
        return bool(self._states)

    def clear(self) -> None:
        self._states.clear()

    def __len__(self) -> int:
        return len(self._states)
