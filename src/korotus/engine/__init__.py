"""Deterministic, headless rules engine for Korotus.

IMPORTANT: This package does no I/O beyond logging and must never import the client.
"""

from .actions import AttackerPlayAction, DefenderPlayAction, ResolveRoundAction
from .errors import (
    InsufficientCards,
    InvalidIndex,
    InvalidTarget,
    MoveError,
    PositionTaken,
    SequenceError,
)
from .game import (
    GameConfig,
    GameState,
    StepResult,
    initialize_game,
    play_attacker_card,
    play_defender_card,
    resolve_round,
    step,
)
from .rules import defender_beats
from .types import Card, PlayerId, Suit
from .view import GameStateView, project_view

__all__ = [
    "AttackerPlayAction",
    "Card",
    "DefenderPlayAction",
    "GameConfig",
    "GameState",
    "GameStateView",
    "InsufficientCards",
    "InvalidIndex",
    "InvalidTarget",
    "MoveError",
    "PlayerId",
    "PositionTaken",
    "ResolveRoundAction",
    "SequenceError",
    "StepResult",
    "Suit",
    "defender_beats",
    "initialize_game",
    "play_attacker_card",
    "play_defender_card",
    "project_view",
    "resolve_round",
    "step",
]
