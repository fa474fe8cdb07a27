"""
Tests for turn and round scheduling.
"""

from conquest.engine.events import ROUND_STARTED, TURN_ENDED
from conquest.engine.state import Troops
from conquest.engine.turns import end_turn, next_active_index
from conquest.engine.utils import default_players


def test_next_index_cycles_and_counts_rounds():
    players = default_players(False)
    assert next_active_index(players, 0, 5) == (1, 0)
    assert next_active_index(players, 1, 5) == (0, 1)


def test_dead_player_skipped_after_setup():
    players = default_players(False)
    players[1].is_alive = False
    assert next_active_index(players, 0, 5) == (0, 1)


def test_dead_player_not_skipped_during_setup():
    players = default_players(False)
    players[1].is_alive = False
    assert next_active_index(players, 0, 1) == (1, 0)


def test_all_dead_terminates():
    players = default_players(False)
    for p in players:
        p.is_alive = False
    index, _ = next_active_index(players, 0, 10)
    assert index in (0, 1)


def _state(make_state, line_map, rest=None):
    return make_state(
        line_map,
        {"A": (1, Troops(peon=5)), "E": (2, Troops(peon=5))},
        {1: "A", 2: "E"},
        rest=rest,
    )


def test_end_turn_advances_counters(make_state, line_map):
    state = _state(make_state, line_map)
    rounds, events = end_turn(state)
    assert rounds == 0
    assert state.current_player_index == 1
    assert state.turn_count == 3
    assert state.round_count == 2
    assert [e.type for e in events] == [TURN_ENDED]

    rounds, events = end_turn(state)
    assert rounds == 1
    assert state.current_player_index == 0
    assert state.round_count == 3
    assert [e.type for e in events] == [TURN_ENDED, ROUND_STARTED]


def test_incoming_player_rest_decrements(make_state, line_map):
    state = _state(make_state, line_map, rest={1: 1, 2: 2})
    end_turn(state)
    assert state.players[1].rest == 1
    # outgoing player's counter untouched
    assert state.players[0].rest == 1
    end_turn(state)
    assert state.players[0].rest == 0


def test_end_turn_clears_processing(make_state, line_map):
    state = _state(make_state, line_map)
    state.is_processing = True
    end_turn(state)
    assert state.is_processing is False
