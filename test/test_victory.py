"""
Tests for capital-based victory evaluation.
"""

import random

from conquest.engine import DRAW
from conquest.engine.actions import attack, end_turn
from conquest.engine.events import CAPITAL_FALLEN, DRAW as DRAW_EVENT, VICTORY
from conquest.engine.reducer import apply_action
from conquest.engine.state import Troops
from conquest.engine.victory import capital_standing, evaluate_victory


def _duel(make_state, line_map, red_capital=Troops(peon=2)):
    return make_state(
        line_map,
        {
            "A": (1, Troops(peon=5)),
            "D": (1, Troops(peon=5)),
            "E": (2, red_capital),
        },
        {1: "A", 2: "E"},
    )


def test_capturing_capital_wins(make_state, line_map):
    state = _duel(make_state, line_map)
    state, events = apply_action(state, attack(1, "D", "E", {"attack": [6, 1]}), line_map, random.Random(0))
    assert state.winner == 1
    assert not state.get_player(2).is_alive
    types = [e.type for e in events]
    assert CAPITAL_FALLEN in types
    assert VICTORY in types
    texts = [entry.text for entry in state.logs]
    assert "A capital has fallen!" in texts
    assert "Player Blue wins!" in texts


def test_capital_owned_by_enemy_counts_as_fallen(make_state, line_map):
    state = _duel(make_state, line_map)
    state.territories["E"].owner = 1
    assert not capital_standing(state, state.get_player(2))
    evaluate_victory(state)
    assert state.winner == 1


def test_mutual_elimination_is_draw(make_state, line_map):
    state = _duel(make_state, line_map)
    for tid in ("A", "E"):
        state.territories[tid].troops = Troops()
        state.territories[tid].normalize()
    events = evaluate_victory(state)
    assert state.winner == DRAW
    assert [e.type for e in events][-1] == DRAW_EVENT
    assert state.logs[-1].text == "All capitals have fallen. Draw!"


def test_no_winner_while_both_capitals_stand(make_state, line_map):
    state = _duel(make_state, line_map)
    assert evaluate_victory(state) == []
    assert state.winner is None


def test_result_is_sticky(make_state, line_map):
    state = _duel(make_state, line_map)
    state.winner = 1
    state.territories["A"].troops = Troops()
    state.territories["A"].normalize()
    assert evaluate_victory(state) == []
    assert state.winner == 1

    after, events = apply_action(state, end_turn(1), line_map, random.Random(0))
    assert events[0].type == "action_rejected"
    assert after.winner == 1
    assert after.logs[-1].text == "Game is over."


def test_no_evaluation_during_setup(fresh_state):
    assert evaluate_victory(fresh_state) == []
    assert fresh_state.winner is None
