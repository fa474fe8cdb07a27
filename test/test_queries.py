"""
Tests for read-only UI queries.
"""

from conquest.engine.actions import recruit
from conquest.engine.queries import (
    get_available_action_types,
    get_fusion_options,
    get_game_summary,
    get_move_targets,
    get_player_stats,
    resolve_drag,
    validate_action,
)
from conquest.engine.state import Troops


def test_validate_action_does_not_apply(main_state, line_map):
    result = validate_action(main_state, recruit(1), line_map)
    assert result.valid
    assert main_state.territories["A"].troops.peon == 5

    result = validate_action(main_state, recruit(2), line_map)
    assert not result.valid
    assert "Not your turn" in result.error


def test_available_actions_by_phase(fresh_state, main_state):
    assert get_available_action_types(fresh_state) == ["place_capital"]
    assert "move_unit" in get_available_action_types(main_state)
    main_state.players[0].rest = 1
    assert get_available_action_types(main_state) == ["select_node", "end_turn"]
    main_state.pending_catastrophe = 6
    assert get_available_action_types(main_state) == []


def test_move_targets(main_state, line_map):
    main_state.territories["C"].owner = 2
    main_state.territories["C"].troops = Troops(peon=1)
    assert get_move_targets(main_state, line_map, "B") == {"A": "move", "C": "attack"}
    assert get_move_targets(main_state, line_map, "D") == {}


def test_resolve_drag(main_state, line_map):
    single = resolve_drag(main_state, line_map, 1, "B", "C")
    assert single.action.type == "move_unit"
    assert single.action.payload["tier"] == "peon"

    ambiguous = resolve_drag(main_state, line_map, 1, "A", "B")
    assert ambiguous.action is None
    assert ambiguous.tier_choices == ["peon", "horse"]

    assert resolve_drag(main_state, line_map, 1, "A", "C").error

    main_state.territories["C"].owner = 2
    main_state.territories["C"].troops = Troops(peon=1)
    assert resolve_drag(main_state, line_map, 1, "B", "C").action.type == "attack"


def test_fusion_options(main_state):
    assert get_fusion_options(main_state, "A") == ["peon_to_horse"]
    main_state.territories["A"].troops = Troops(peon=10, horse=2)
    assert get_fusion_options(main_state, "A") == ["peon_to_horse", "horse_to_tank", "peon_to_tank"]


def test_player_stats_and_summary(main_state):
    stats = get_player_stats(main_state, 1)
    assert stats["territories"] == 2
    assert stats["total_power"] == 12
    assert stats["capital_power"] == 10
    assert stats["can_relocate_to"] == []

    summary = get_game_summary(main_state)
    assert summary["phase"] == "main"
    assert summary["current_player"] == 1
    assert len(summary["players"]) == 2
