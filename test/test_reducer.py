"""
Tests for the action reducer: dispatch, rejection, turn cost and catastrophe scheduling.
"""

import random

from conquest.engine import RELOCATE_REST
from conquest.engine.actions import (
    attack,
    end_turn,
    fuse,
    move_unit,
    place_capital,
    recruit,
    relocate_capital,
    resolve_catastrophe,
    select_node,
)
from conquest.engine.events import (
    ACTION_REJECTED,
    CATASTROPHE_ANNOUNCED,
    COMBAT_RESOLVED,
    TERRITORY_NEUTRALIZED,
)
from conquest.engine.reducer import apply_action, replay_from_actions
from conquest.engine.state import Troops
from conquest.engine.utils import initialize_game_state


def _without_logs(state):
    data = state.to_dict()
    data.pop("logs")
    return data


def test_setup_then_decisive_attack(fresh_state, two_node_map):
    rng = random.Random(0)
    state, _ = apply_action(fresh_state, place_capital(1, "A"), two_node_map, rng)
    assert state.turn_count == 1 and state.in_setup
    state, _ = apply_action(state, place_capital(2, "B"), two_node_map, rng)
    assert state.turn_count == 2
    assert not state.in_setup
    assert state.current_player.id == 1

    state.territories["B"].troops = Troops(peon=4)
    state, events = apply_action(state, attack(1, "A", "B", {"attack": [6, 2]}), two_node_map, rng)

    combats = [e for e in events if e.type == COMBAT_RESOLVED]
    assert len(combats) == 1
    assert combats[0].payload["damage_dealt"] == 4
    assert TERRITORY_NEUTRALIZED in [e.type for e in events]
    assert state.territories["B"].owner is None
    assert state.territories["A"].troops.to_dict() == {"peon": 5, "horse": 1, "tank": 0}
    texts = [entry.text for entry in state.logs]
    assert "Combat at B: 6 (Att) vs 2 (Def)" in texts
    assert "Hit! Defender took 4 damage." in texts
    assert "Defender neutralized!" in texts
    assert state.winner == 1


def test_rejection_only_adds_error_log(main_state, line_map):
    before = _without_logs(main_state)
    log_count = len(main_state.logs)
    state, events = apply_action(main_state, recruit(2), line_map, random.Random(0))
    assert events[0].type == ACTION_REJECTED
    assert _without_logs(state) == before
    assert len(state.logs) == log_count + 1
    assert state.logs[-1].category == "error"


def test_apply_action_does_not_mutate_input(main_state, line_map):
    before = main_state.to_dict()
    apply_action(main_state, move_unit(1, "B", "C", "peon"), line_map, random.Random(0))
    assert main_state.to_dict() == before


def test_only_capitals_during_setup(fresh_state, two_node_map):
    state, events = apply_action(fresh_state, recruit(1), two_node_map, random.Random(0))
    assert events[0].type == ACTION_REJECTED
    assert state.logs[-1].text == "Establish your capital first: pick an unowned node."


def test_move_into_enemy_resolves_as_attack(make_state, line_map):
    state = make_state(
        line_map,
        {"A": (1, Troops(peon=5)), "D": (1, Troops(peon=3)), "E": (2, Troops(peon=5))},
        {1: "A", 2: "E"},
    )
    state, events = apply_action(state, move_unit(1, "D", "E", "peon"), line_map, random.Random(0))
    assert COMBAT_RESOLVED in [e.type for e in events]
    assert state.territories["E"].owner in (2, None)


def test_attack_on_unowned_node_rejected(main_state, line_map):
    state, events = apply_action(main_state, attack(1, "B", "C"), line_map, random.Random(0))
    assert events[0].type == ACTION_REJECTED
    assert state.territories["C"].owner is None


def test_costly_action_hands_over_turn(main_state, line_map):
    state, _ = apply_action(main_state, recruit(1), line_map, random.Random(0))
    assert state.current_player.id == 2
    assert state.get_player(1).rest == 1


def test_select_node_costs_no_turn(main_state, line_map):
    state, _ = apply_action(main_state, select_node(1, "B"), line_map, random.Random(0))
    assert state.selected_node == "B"
    assert state.current_player.id == 1
    state, _ = apply_action(state, select_node(1, "B"), line_map, random.Random(0))
    assert state.selected_node is None


def test_fuse_defaults_to_selected_node(main_state, line_map):
    rng = random.Random(0)
    state, _ = apply_action(main_state, select_node(1, "A"), line_map, rng)
    state, events = apply_action(state, fuse(1, "peon_to_horse"), line_map, rng)
    assert events[0].type == "units_fused"
    assert state.territories["A"].troops == Troops(horse=2)


def test_relocation_costs_two_skipped_turns(main_state, line_map):
    rng = random.Random(0)
    main_state.territories["B"].troops = Troops(tank=1)
    state, _ = apply_action(main_state, relocate_capital(1, "B"), line_map, rng)
    assert state.get_player(1).capital == "B"
    assert state.get_player(1).rest == RELOCATE_REST

    skipped = 0
    for _ in range(3):
        state, _ = apply_action(state, end_turn(2), line_map, rng)
        assert state.current_player.id == 1
        state, events = apply_action(state, recruit(1), line_map, rng)
        if events[0].type == ACTION_REJECTED:
            skipped += 1
            state, _ = apply_action(state, end_turn(1), line_map, rng)
        else:
            break
    assert skipped == 2
    assert state.territories["B"].troops.peon == 1


def test_catastrophe_announced_then_blocks_until_resolved(main_state, line_map):
    rng = random.Random(0)
    main_state.round_count = 5
    main_state.current_player_index = 1
    state, events = apply_action(main_state, end_turn(2), line_map, rng)
    assert state.round_count == 6
    assert state.pending_catastrophe == 6
    assert CATASTROPHE_ANNOUNCED in [e.type for e in events]

    state, events = apply_action(state, recruit(1), line_map, rng)
    assert events[0].type == ACTION_REJECTED

    state, events = apply_action(
        state,
        resolve_catastrophe({1: {"plague": 2, "prosperity": 2}, 2: {"plague": 2, "prosperity": 2}}),
        line_map,
        rng,
    )
    assert state.pending_catastrophe is None
    assert any(entry.text == "Catastrophe Event (Round 6)" for entry in state.logs)

    state, events = apply_action(state, recruit(1), line_map, rng)
    assert events[0].type != ACTION_REJECTED


def test_replay_is_deterministic(line_map):
    initial = initialize_game_state(line_map, vs_ai=False)
    actions = [
        place_capital(1, "A"),
        place_capital(2, "C"),
        move_unit(1, "A", "B", "horse"),
        end_turn(2),
        attack(1, "B", "C"),
        end_turn(2),
    ]
    first = replay_from_actions(initial, actions, line_map, seed=99)
    second = replay_from_actions(initial, actions, line_map, seed=99)
    assert first.to_dict()["territories"] == second.to_dict()["territories"]
    assert [e.text for e in first.logs] == [e.text for e in second.logs]
