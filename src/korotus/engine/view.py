from __future__ import annotations

from dataclasses import dataclass

from .game import GameState, face_down_remaining
from .types import Card, PlayerId


@dataclass(frozen=True)
class GameStateView:
    """What a presentation layer may see of a game.

    Only the current defender's hand is included; the other player's hand is
    reduced to a count.
    """

    trump_card: Card
    current_defender: PlayerId
    defender_cards: tuple[Card, ...]
    attacker_cards: tuple[Card | None, ...]
    player_hand: tuple[Card, ...]
    opponent_card_count: int
    deck_count: int
    game_over: bool
    winner: PlayerId | None
    discarded_count: int = 0
    round: int = 1
    face_down_remaining: int = 0


def project_view(state: GameState) -> GameStateView:
    return GameStateView(
        trump_card=state.trump_card,
        current_defender=state.current_defender,
        defender_cards=state.defender_cards,
        attacker_cards=state.attacker_cards,
        player_hand=state.defender_hand(),
        opponent_card_count=len(state.attacker_hand()),
        deck_count=len(state.deck),
        game_over=state.game_over,
        winner=state.winner,
        discarded_count=len(state.discarded),
        round=state.round,
        face_down_remaining=face_down_remaining(state),
    )
