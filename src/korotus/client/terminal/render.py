from __future__ import annotations

from korotus.engine.rules import sort_cards
from korotus.engine.types import Card, other_player
from korotus.engine.view import GameStateView


def _slot(c: Card | None) -> str:
    return str(c) if c is not None else "__"


def render_hand(view: GameStateView) -> str:
    # Indices refer to the engine's hand order; display order is sorted.
    indexed = {c: i for i, c in enumerate(view.player_hand)}
    parts = [f"[{indexed[c]}] {c}" for c in sort_cards(view.player_hand, view.trump_card)]
    return "  ".join(parts) if parts else "(empty)"


def open_slots(view: GameStateView) -> list[int]:
    return [
        i
        for i in range(len(view.defender_cards))
        if i >= len(view.attacker_cards) or view.attacker_cards[i] is None
    ]


def render_attack_prompt(view: GameStateView) -> str:
    # The attacker's hand is hidden from the view, so cards are named by position only.
    slots = open_slots(view)
    if view.game_over or not slots or view.opponent_card_count == 0:
        return ""
    targets = ", ".join(str(i) for i in slots)
    return (
        f"Player {other_player(view.current_defender)} attacks blind:"
        f" card 0-{view.opponent_card_count - 1} from your hidden hand, open slots {targets}"
    )


def render_view(view: GameStateView) -> str:
    lines = [
        f"Round {view.round} | Trump: {view.trump_card} | Deck: {view.deck_count}"
        f" | Out of play: {view.discarded_count}",
        f"Player {view.current_defender} defends; opponent holds {view.opponent_card_count} cards",
    ]
    if view.defender_cards:
        table = []
        for i, d in enumerate(view.defender_cards):
            a = view.attacker_cards[i] if i < len(view.attacker_cards) else None
            table.append(f"{i}: {d} / {_slot(a)}")
        lines.append("Table: " + " | ".join(table))
    else:
        lines.append("Table: (empty)")
    if view.face_down_remaining:
        lines.append(f"Defender owes {view.face_down_remaining} face-down card(s)")
    attack = render_attack_prompt(view)
    if attack:
        lines.append(attack)
    lines.append("Hand: " + render_hand(view))
    if view.game_over:
        lines.append(f"Game over! Player {view.winner} wins!")
    return "\n".join(lines)


HELP_TEXT = """Commands:
  up N         defender plays hand card N face-up (first card of the round)
  down N       defender plays hand card N face-down
  attack N T   attacker plays card N of their own hand against table slot T;
               only the defender's hand is shown, so N is picked blind
               from 0 to (opponent card count - 1)
  resolve      end the round and compare cards
  undo         take back the last accepted command
  view         show the table again
  help         show this text
  quit         leave the game"""
