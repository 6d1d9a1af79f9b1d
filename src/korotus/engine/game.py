from __future__ import annotations

import random
from dataclasses import dataclass, field, replace
from typing import Iterable

from korotus.logging_utils import get_logger

from .actions import Action, AttackerPlayAction, DefenderPlayAction, ResolveRoundAction
from .errors import (
    InsufficientCards,
    InvalidIndex,
    InvalidTarget,
    MoveError,
    PositionTaken,
    SequenceError,
)
from .rules import defender_beats
from .types import Card, PlayerId, full_deck, other_player

logger = get_logger(__name__)

Event = dict[str, object]


@dataclass(frozen=True)
class GameConfig:
    hand_size: int = 10
    # Cap the face-down requirement at the cards left in hand, so a face-up
    # play never fails for lack of cards.
    cap_face_down: bool = False


@dataclass(frozen=True)
class GameState:
    """Immutable snapshot of a game in progress.

    Every operation in this module returns a new snapshot; callers may keep
    old ones around (undo, replays) without copying.
    """

    deck: tuple[Card, ...]
    player1_hand: tuple[Card, ...]
    player2_hand: tuple[Card, ...]
    trump_card: Card
    current_defender: PlayerId = 1
    defender_cards: tuple[Card, ...] = ()
    attacker_cards: tuple[Card | None, ...] = ()
    game_over: bool = False
    winner: PlayerId | None = None
    face_up: bool = False
    discarded: tuple[Card, ...] = ()
    round: int = 1
    seed: int | None = None
    config: GameConfig = field(default_factory=GameConfig)

    @property
    def current_attacker(self) -> PlayerId:
        return other_player(self.current_defender)

    def hand(self, player: PlayerId) -> tuple[Card, ...]:
        return self.player1_hand if player == 1 else self.player2_hand

    def defender_hand(self) -> tuple[Card, ...]:
        return self.hand(self.current_defender)

    def attacker_hand(self) -> tuple[Card, ...]:
        return self.hand(self.current_attacker)

    def all_cards(self) -> list[Card]:
        """Every card in every zone. Always 40 cards for a well-formed state."""
        out = list(self.deck) + list(self.player1_hand) + list(self.player2_hand)
        out.append(self.trump_card)
        out.extend(self.defender_cards)
        out.extend(c for c in self.attacker_cards if c is not None)
        out.extend(self.discarded)
        return out


@dataclass
class StepResult:
    ok: bool
    state: GameState
    events: list[Event] = field(default_factory=list)
    error: str | None = None


def _shuffle(rng: random.Random, items: list[Card]) -> None:
    # Fisher-Yates, walking backwards
    for i in range(len(items) - 1, 0, -1):
        j = rng.randrange(i + 1)
        items[i], items[j] = items[j], items[i]


def _with_hand(state: GameState, player: PlayerId, cards: Iterable[Card]) -> GameState:
    if player == 1:
        return replace(state, player1_hand=tuple(cards))
    return replace(state, player2_hand=tuple(cards))


def _without(cards: tuple[Card, ...], index: int) -> tuple[Card, ...]:
    return cards[:index] + cards[index + 1 :]


def initialize_game(
    seed: int | None = None,
    *,
    rng: random.Random | None = None,
    config: GameConfig | None = None,
) -> GameState:
    """Shuffle a fresh 40-card deck, deal both hands and turn up the trump.

    Pass `seed` (or a ready `rng`) for a reproducible deal. Only `seed` is
    recorded on the state: a game dealt from an injected `rng` has
    `seed=None` and cannot be rebuilt with `replay`, so keep a snapshot of
    it instead.
    """
    cfg = config or GameConfig()
    deck = full_deck()
    max_hand = (len(deck) - 1) // 2
    if cfg.hand_size < 1 or cfg.hand_size > max_hand:
        raise ValueError(f"Hand size must be between 1 and {max_hand}.")

    if rng is None:
        rng = random.Random(seed)
    _shuffle(rng, deck)

    p1: list[Card] = []
    p2: list[Card] = []
    for _ in range(cfg.hand_size):
        p1.append(deck.pop())
        p2.append(deck.pop())
    trump = deck.pop()

    logger.debug("New game (seed=%s): trump %s, %d cards left in deck", seed, trump, len(deck))
    return GameState(
        deck=tuple(deck),
        player1_hand=tuple(p1),
        player2_hand=tuple(p2),
        trump_card=trump,
        seed=seed,
        config=cfg,
    )


def play_defender_card(state: GameState, card_index: int, is_face_up: bool = False) -> GameState:
    hand = state.defender_hand()
    if card_index < 0 or card_index >= len(hand):
        raise InvalidIndex("Invalid card index.")

    if is_face_up and state.defender_cards:
        raise SequenceError("Face-up card can only be played first.")

    card = hand[card_index]
    remaining = _without(hand, card_index)
    if is_face_up:
        needed = card.value
        if state.config.cap_face_down:
            needed = min(needed, len(remaining))
        if len(remaining) < needed:
            raise InsufficientCards(
                f"Need {needed} more cards for face-down plays, only {len(remaining)} left."
            )

    new_state = _with_hand(state, state.current_defender, remaining)
    logger.debug(
        "Player %d defends with %s (%s)",
        state.current_defender,
        card,
        "face-up" if is_face_up else "face-down",
    )
    return replace(
        new_state,
        defender_cards=state.defender_cards + (card,),
        face_up=state.face_up or is_face_up,
    )


def play_attacker_card(state: GameState, card_index: int, target_index: int) -> GameState:
    hand = state.attacker_hand()
    if card_index < 0 or card_index >= len(hand):
        raise InvalidIndex("Invalid card index.")

    if target_index < 0 or target_index >= len(state.defender_cards):
        raise InvalidTarget("Invalid target position.")

    if target_index < len(state.attacker_cards) and state.attacker_cards[target_index] is not None:
        raise PositionTaken("Position already attacked.")

    card = hand[card_index]
    slots = list(state.attacker_cards)
    while len(slots) <= target_index:
        slots.append(None)
    slots[target_index] = card

    new_state = _with_hand(state, state.current_attacker, _without(hand, card_index))
    logger.debug("Player %d attacks slot %d with %s", state.current_attacker, target_index, card)
    return replace(new_state, attacker_cards=tuple(slots))


def round_outcomes(state: GameState) -> list[PlayerId]:
    """Who takes the cards of each defender slot if the round ended now."""
    out: list[PlayerId] = []
    for i, defender_card in enumerate(state.defender_cards):
        attacker_card = state.attacker_cards[i] if i < len(state.attacker_cards) else None
        if attacker_card is None or defender_beats(defender_card, attacker_card, state.trump_card):
            out.append(state.current_defender)
        else:
            out.append(state.current_attacker)
    return out


def resolve_round(state: GameState) -> GameState:
    hands: dict[PlayerId, list[Card]] = {1: list(state.player1_hand), 2: list(state.player2_hand)}
    for i, taker in enumerate(round_outcomes(state)):
        hands[taker].append(state.defender_cards[i])
        attacker_card = state.attacker_cards[i] if i < len(state.attacker_cards) else None
        if attacker_card is not None:
            hands[taker].append(attacker_card)

    deck = state.deck
    trump = state.trump_card
    discarded = state.discarded
    if deck:
        # the old trump leaves play for good
        discarded = discarded + (trump,)
        trump = deck[-1]
        deck = deck[:-1]

    game_over = False
    winner: PlayerId | None = None
    if not hands[1]:
        game_over, winner = True, 2
    elif not hands[2]:
        game_over, winner = True, 1

    logger.debug(
        "Round %d resolved: hands %d/%d, trump %s",
        state.round,
        len(hands[1]),
        len(hands[2]),
        trump,
    )
    if game_over:
        logger.info("Game over after round %d: player %d wins", state.round, winner)

    return replace(
        state,
        deck=deck,
        player1_hand=tuple(hands[1]),
        player2_hand=tuple(hands[2]),
        trump_card=trump,
        current_defender=other_player(state.current_defender),
        defender_cards=(),
        attacker_cards=(),
        game_over=game_over,
        winner=winner,
        face_up=False,
        discarded=discarded,
        round=state.round + 1,
    )


def valid_targets(state: GameState) -> list[int]:
    """Defender slots the attacker may still answer."""
    out: list[int] = []
    for i in range(len(state.defender_cards)):
        if i < len(state.attacker_cards) and state.attacker_cards[i] is not None:
            continue
        out.append(i)
    return out


def face_down_remaining(state: GameState) -> int:
    """Face-down cards the defender still owes after this round's face-up card."""
    if not state.face_up or not state.defender_cards:
        return 0
    played_face_down = len(state.defender_cards) - 1
    owed = state.defender_cards[0].value - played_face_down
    return max(0, min(owed, len(state.defender_hand())))


def step(state: GameState, action: Action) -> StepResult:
    """Apply a single action, reporting a disallowed move instead of raising.

    On failure the returned state is the very object passed in.
    """
    if state.game_over:
        return StepResult(ok=False, state=state, error="Game is already over.")

    try:
        if isinstance(action, DefenderPlayAction):
            new_state = play_defender_card(state, action.card_index, action.face_up)
            events: list[Event] = [
                {
                    "type": "CARD_PLAYED",
                    "role": "defender",
                    "player": state.current_defender,
                    "card_id": new_state.defender_cards[-1].id,
                    "face_up": action.face_up,
                }
            ]
            return StepResult(ok=True, state=new_state, events=events)

        if isinstance(action, AttackerPlayAction):
            new_state = play_attacker_card(state, action.card_index, action.target_index)
            played = new_state.attacker_cards[action.target_index]
            assert played is not None
            events = [
                {
                    "type": "CARD_PLAYED",
                    "role": "attacker",
                    "player": state.current_attacker,
                    "card_id": played.id,
                    "target_index": action.target_index,
                }
            ]
            return StepResult(ok=True, state=new_state, events=events)
    except MoveError as e:
        logger.debug("Rejected %s: %s", action, e)
        return StepResult(ok=False, state=state, error=str(e))

    if isinstance(action, ResolveRoundAction):
        outcomes = round_outcomes(state)
        new_state = resolve_round(state)
        events = [
            {
                "type": "ROUND_RESOLVED",
                "round": state.round,
                "slot_winners": list(outcomes),
                "next_defender": new_state.current_defender,
            }
        ]
        if new_state.trump_card != state.trump_card:
            events.append({"type": "TRUMP_CHANGED", "card_id": new_state.trump_card.id})
        if new_state.game_over:
            events.append({"type": "GAME_ENDED", "winner": new_state.winner})
        return StepResult(ok=True, state=new_state, events=events)

    return StepResult(ok=False, state=state, error="Unknown action.")


def replay(
    seed: int,
    actions: Iterable[Action],
    config: GameConfig | None = None,
) -> GameState:
    if seed is None:
        raise ValueError("Replay needs the seed the game was dealt with.")
    state = initialize_game(seed, config=config)
    for a in actions:
        state = step(state, a).state
        if state.game_over:
            break
    return state
