from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class DefenderPlayAction:
    card_index: int
    face_up: bool = False


@dataclass(frozen=True)
class AttackerPlayAction:
    card_index: int
    target_index: int


@dataclass(frozen=True)
class ResolveRoundAction:
    pass


Action = DefenderPlayAction | AttackerPlayAction | ResolveRoundAction
