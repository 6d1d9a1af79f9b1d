from __future__ import annotations

import json

from korotus.engine.game import initialize_game, play_attacker_card, play_defender_card, resolve_round
from korotus.engine.serialize import view_to_dict
from korotus.engine.view import project_view


def test_view_shows_only_defenders_hand() -> None:
    state = initialize_game(seed=8)
    view = project_view(state)

    assert view.player_hand == state.player1_hand
    assert view.opponent_card_count == len(state.player2_hand)
    assert view.deck_count == len(state.deck)
    assert view.trump_card == state.trump_card
    assert view.current_defender == 1

    text = json.dumps(view_to_dict(view))
    for hidden in state.player2_hand:
        assert f'"{hidden.id}"' not in text


def test_view_follows_defender_role() -> None:
    state = resolve_round(initialize_game(seed=8))
    view = project_view(state)
    assert view.current_defender == 2
    assert view.player_hand == state.player2_hand
    assert view.opponent_card_count == len(state.player1_hand)
    assert view.discarded_count == 1
    assert view.round == 2


def test_view_reports_table_and_follow_up_count() -> None:
    state = initialize_game(seed=8)
    idx = next(i for i, c in enumerate(state.player1_hand) if c.value <= 9)
    state = play_defender_card(state, idx, is_face_up=True)
    state = play_attacker_card(state, 0, 0)
    view = project_view(state)

    assert view.defender_cards == state.defender_cards
    assert view.attacker_cards == state.attacker_cards
    assert view.face_down_remaining == state.defender_cards[0].value
    assert view.opponent_card_count == 9
