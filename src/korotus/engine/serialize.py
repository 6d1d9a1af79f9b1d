from __future__ import annotations

from typing import Mapping

from .actions import Action, AttackerPlayAction, DefenderPlayAction, ResolveRoundAction
from .game import GameConfig, GameState
from .types import Card, PlayerId
from .view import GameStateView


def _require_int(obj: Mapping[str, object], key: str) -> int:
    v = obj.get(key)
    if not isinstance(v, int) or isinstance(v, bool):
        raise ValueError(f"Expected int for {key}")
    return v


def _require_bool(obj: Mapping[str, object], key: str) -> bool:
    v = obj.get(key)
    if not isinstance(v, bool):
        raise ValueError(f"Expected bool for {key}")
    return v


def _require_list(obj: Mapping[str, object], key: str) -> list[object]:
    v = obj.get(key)
    if not isinstance(v, list):
        raise ValueError(f"Expected list for {key}")
    return v


def _player(v: object, key: str) -> PlayerId:
    if v == 1:
        return 1
    if v == 2:
        return 2
    raise ValueError(f"Expected player id 1 or 2 for {key}")


def _optional_player(obj: Mapping[str, object], key: str) -> PlayerId | None:
    v = obj.get(key)
    if v is None:
        return None
    return _player(v, key)


def card_to_dict(c: Card) -> dict[str, object]:
    return {"suit": c.suit, "value": c.value, "id": c.id}


def card_from_dict(d: object) -> Card:
    if not isinstance(d, Mapping):
        raise ValueError("Card must be an object")
    suit = d.get("suit")
    if not isinstance(suit, str):
        raise ValueError("Expected string for suit")
    # Card validates suit and value range
    return Card(suit=suit, value=_require_int(d, "value"))  # type: ignore[arg-type]


def _slot_to_dict(c: Card | None) -> dict[str, object] | None:
    if c is None:
        return None
    return card_to_dict(c)


def _cards(raw: list[object]) -> tuple[Card, ...]:
    return tuple(card_from_dict(c) for c in raw)


def _slots(raw: list[object]) -> tuple[Card | None, ...]:
    return tuple(None if c is None else card_from_dict(c) for c in raw)


def action_to_dict(a: Action) -> dict[str, object]:
    if isinstance(a, DefenderPlayAction):
        return {"type": "defend", "card_index": a.card_index, "face_up": a.face_up}
    if isinstance(a, AttackerPlayAction):
        return {"type": "attack", "card_index": a.card_index, "target_index": a.target_index}
    if isinstance(a, ResolveRoundAction):
        return {"type": "resolve"}
    # should be unreachable
    return {"type": "unknown"}


def action_from_dict(d: Mapping[str, object]) -> Action:
    t = d.get("type")
    if t == "defend":
        return DefenderPlayAction(card_index=_require_int(d, "card_index"), face_up=_require_bool(d, "face_up"))
    if t == "attack":
        return AttackerPlayAction(
            card_index=_require_int(d, "card_index"),
            target_index=_require_int(d, "target_index"),
        )
    if t == "resolve":
        return ResolveRoundAction()
    raise ValueError(f"Unknown action type: {t}")


def view_to_dict(v: GameStateView) -> dict[str, object]:
    return {
        "trump_card": card_to_dict(v.trump_card),
        "current_defender": v.current_defender,
        "defender_cards": [card_to_dict(c) for c in v.defender_cards],
        "attacker_cards": [_slot_to_dict(c) for c in v.attacker_cards],
        "player_hand": [card_to_dict(c) for c in v.player_hand],
        "opponent_card_count": v.opponent_card_count,
        "deck_count": v.deck_count,
        "discarded_count": v.discarded_count,
        "round": v.round,
        "face_down_remaining": v.face_down_remaining,
        "game_over": v.game_over,
        "winner": v.winner,
    }


def view_from_dict(d: Mapping[str, object]) -> GameStateView:
    return GameStateView(
        trump_card=card_from_dict(d.get("trump_card")),
        current_defender=_player(d.get("current_defender"), "current_defender"),
        defender_cards=_cards(_require_list(d, "defender_cards")),
        attacker_cards=_slots(_require_list(d, "attacker_cards")),
        player_hand=_cards(_require_list(d, "player_hand")),
        opponent_card_count=_require_int(d, "opponent_card_count"),
        deck_count=_require_int(d, "deck_count"),
        game_over=_require_bool(d, "game_over"),
        winner=_optional_player(d, "winner"),
        discarded_count=_require_int(d, "discarded_count"),
        round=_require_int(d, "round"),
        face_down_remaining=_require_int(d, "face_down_remaining"),
    )


def snapshot(state: GameState) -> dict[str, object]:
    """Return a JSON-serializable snapshot of the full state, hidden hands included.

    Meant for the owning process (saving, debugging, replay checks); hand the
    presentation layer a view instead.
    """
    return {
        "seed": state.seed,
        "config": {"hand_size": state.config.hand_size, "cap_face_down": state.config.cap_face_down},
        "round": state.round,
        "current_defender": state.current_defender,
        "trump_card": card_to_dict(state.trump_card),
        "deck": [card_to_dict(c) for c in state.deck],
        "player1_hand": [card_to_dict(c) for c in state.player1_hand],
        "player2_hand": [card_to_dict(c) for c in state.player2_hand],
        "defender_cards": [card_to_dict(c) for c in state.defender_cards],
        "attacker_cards": [_slot_to_dict(c) for c in state.attacker_cards],
        "face_up": state.face_up,
        "discarded": [card_to_dict(c) for c in state.discarded],
        "game_over": state.game_over,
        "winner": state.winner,
    }


def state_from_snapshot(d: Mapping[str, object]) -> GameState:
    raw_cfg = d.get("config", {})
    if not isinstance(raw_cfg, Mapping):
        raise ValueError("Expected object for config")
    cfg = GameConfig(
        hand_size=_require_int(raw_cfg, "hand_size"),
        cap_face_down=_require_bool(raw_cfg, "cap_face_down"),
    )
    seed = d.get("seed")
    if seed is not None and (not isinstance(seed, int) or isinstance(seed, bool)):
        raise ValueError("Expected int or null for seed")
    return GameState(
        deck=_cards(_require_list(d, "deck")),
        player1_hand=_cards(_require_list(d, "player1_hand")),
        player2_hand=_cards(_require_list(d, "player2_hand")),
        trump_card=card_from_dict(d.get("trump_card")),
        current_defender=_player(d.get("current_defender"), "current_defender"),
        defender_cards=_cards(_require_list(d, "defender_cards")),
        attacker_cards=_slots(_require_list(d, "attacker_cards")),
        game_over=_require_bool(d, "game_over"),
        winner=_optional_player(d, "winner"),
        face_up=_require_bool(d, "face_up"),
        discarded=_cards(_require_list(d, "discarded")),
        round=_require_int(d, "round"),
        seed=seed,
        config=cfg,
    )
