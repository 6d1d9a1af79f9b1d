from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

Suit = Literal["hearts", "spades", "diamonds", "clubs"]
PlayerId = Literal[1, 2]

SUITS: tuple[Suit, ...] = ("hearts", "spades", "diamonds", "clubs")
MIN_VALUE = 1
MAX_VALUE = 10

SUIT_SYMBOLS: dict[str, str] = {
    "hearts": "♥",
    "spades": "♠",
    "diamonds": "♦",
    "clubs": "♣",
}


@dataclass(frozen=True)
class Card:
    suit: Suit
    value: int

    def __post_init__(self) -> None:
        if self.suit not in SUITS:
            raise ValueError(f"Invalid suit: {self.suit}")
        # bool is an int subclass; True would pass as the ace
        if isinstance(self.value, bool) or not isinstance(self.value, int):
            raise ValueError(f"Invalid value: {self.value!r}")
        if not MIN_VALUE <= self.value <= MAX_VALUE:
            raise ValueError(f"Invalid value: {self.value}")

    @property
    def id(self) -> str:
        return f"{self.suit}-{self.value}"

    def __str__(self) -> str:
        return f"{self.value}{SUIT_SYMBOLS[self.suit]}"


def full_deck() -> list[Card]:
    """All suit x value combinations, suits in canonical order."""
    return [Card(suit=s, value=v) for s in SUITS for v in range(MIN_VALUE, MAX_VALUE + 1)]


def other_player(player: PlayerId) -> PlayerId:
    return 2 if player == 1 else 1
