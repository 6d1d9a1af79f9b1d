from __future__ import annotations

from typing import Iterable

from .types import Card

_DISPLAY_SUIT_ORDER = ("hearts", "diamonds", "spades", "clubs")


def defender_beats(defender_card: Card, attacker_card: Card, trump_card: Card) -> bool:
    """Return True if the defender's card holds against the attacker's.

    Checks run in a fixed priority order; reordering them changes the game:

    1. a defender card sharing the trump's value always wins, whatever the suits
    2. trump suit beats non-trump (either way round)
    3. same suit: strictly higher value wins
    4. different non-trump suits: the attacker wins
    """
    if defender_card.value == trump_card.value:
        return True

    defender_trump = defender_card.suit == trump_card.suit
    attacker_trump = attacker_card.suit == trump_card.suit
    if defender_trump and not attacker_trump:
        return True
    if attacker_trump and not defender_trump:
        return False

    if defender_card.suit == attacker_card.suit:
        # equal values cannot happen with a unique deck; treat as a loss
        return defender_card.value > attacker_card.value

    return False


def sort_cards(cards: Iterable[Card], trump_card: Card | None = None) -> list[Card]:
    """Display order: trump suit first, then fixed suit order, high values first."""

    def key(c: Card) -> tuple[int, int, int]:
        is_trump = 0 if trump_card is not None and c.suit == trump_card.suit else 1
        return (is_trump, _DISPLAY_SUIT_ORDER.index(c.suit), -c.value)

    return sorted(cards, key=key)
