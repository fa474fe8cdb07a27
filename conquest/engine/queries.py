"""
Query functions for UI integration.
These functions help the UI understand what actions are available
without mutating game state.
"""

import random
from dataclasses import dataclass, field
from typing import Any

from conquest.engine import FUSION_RECIPES, RELOCATE_MIN_POWER
from conquest.engine.actions import Action, attack, move_unit
from conquest.engine.definitions import MapDefinition
from conquest.engine.events import ACTION_REJECTED
from conquest.engine.reducer import PHASE_ALLOWED_ACTIONS, TURN_COST_ACTIONS, apply_action, current_phase
from conquest.engine.state import GameState


@dataclass
class ValidationResult:
    """Result of action validation."""
    valid: bool
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {"valid": self.valid, "error": self.error}


@dataclass
class DragResolution:
    """
    What a drag from one node to another means for a human player.
    action is set when the intent is unambiguous (attack, or a single movable
    tier); otherwise tier_choices lists the tiers to offer in a menu.
    """
    action: Action | None = None
    tier_choices: list[str] = field(default_factory=list)
    error: str | None = None


# ===== Action Validation =====

def validate_action(
    state: GameState,
    action: Action,
    map_def: MapDefinition,
) -> ValidationResult:
    """
    Validate an action without applying it.
    Runs the reducer on the given state with a throwaway random source and
    reports whether it was rejected.
    """
    _, events = apply_action(state, action, map_def, random.Random(0))
    for event in events:
        if event.type == ACTION_REJECTED:
            return ValidationResult(False, event.payload["reason"])
    return ValidationResult(True)


def get_available_action_types(state: GameState) -> list[str]:
    """Action types the active player may submit right now."""
    if state.winner is not None or state.pending_catastrophe is not None:
        return []
    allowed = list(PHASE_ALLOWED_ACTIONS.get(current_phase(state), []))
    player = state.current_player
    if not player.is_alive or player.rest > 0:
        allowed = [a for a in allowed if a not in TURN_COST_ACTIONS]
    return allowed


# ===== Territory queries =====

def get_owned_territories(state: GameState, player_id: int) -> list[str]:
    return [tid for tid, t in state.territories.items() if t.owner == player_id]


def get_movable_tiers(state: GameState, territory_id: str) -> list[str]:
    territory = state.territories.get(territory_id)
    if territory is None:
        return []
    return territory.troops.available_tiers()


def get_move_targets(
    state: GameState,
    map_def: MapDefinition,
    territory_id: str,
) -> dict[str, str]:
    """
    Neighbours of an owned node and what advancing there would do.
    Returns neighbor_id -> "move" | "attack".
    """
    territory = state.territories.get(territory_id)
    if territory is None or territory.owner is None or territory.power <= 0:
        return {}
    targets = {}
    for neighbor_id in map_def.neighbors(territory_id):
        neighbor = state.territories[neighbor_id]
        if neighbor.owner is not None and neighbor.owner != territory.owner:
            targets[neighbor_id] = "attack"
        else:
            targets[neighbor_id] = "move"
    return targets


def get_fusion_options(state: GameState, territory_id: str) -> list[str]:
    """Recipes with enough input units on the territory."""
    territory = state.territories.get(territory_id)
    if territory is None:
        return []
    return [
        recipe for recipe, (tier, count, _) in FUSION_RECIPES.items()
        if territory.troops.get(tier) >= count
    ]


def resolve_drag(
    state: GameState,
    map_def: MapDefinition,
    player_id: int,
    from_id: str,
    to_id: str,
) -> DragResolution:
    """
    Translate a human drag gesture into an intent.
    Enemy target -> attack. Otherwise a move; when more than one tier could
    move, the caller must ask which one (the AI always takes the lowest).
    """
    source = state.territories.get(from_id)
    target = state.territories.get(to_id)
    if source is None or target is None or from_id == to_id:
        return DragResolution(error="Invalid drag")
    if not map_def.is_adjacent(from_id, to_id):
        return DragResolution(error=f"{to_id} is not adjacent to {from_id}")
    if target.owner is not None and target.owner != player_id:
        return DragResolution(action=attack(player_id, from_id, to_id))
    tiers = source.troops.available_tiers()
    if len(tiers) == 1:
        return DragResolution(action=move_unit(player_id, from_id, to_id, tiers[0]))
    if not tiers:
        return DragResolution(error=f"No troops in {from_id}")
    return DragResolution(tier_choices=tiers)


# ===== Summaries =====

def get_player_stats(state: GameState, player_id: int) -> dict[str, Any]:
    """Territory count, total power and capital status for one player."""
    player = state.get_player(player_id)
    if player is None:
        return {}
    owned = get_owned_territories(state, player_id)
    capital = state.territories.get(player.capital) if player.capital else None
    return {
        "player_id": player_id,
        "name": player.name,
        "territories": len(owned),
        "total_power": sum(state.territories[tid].power for tid in owned),
        "capital": player.capital,
        "capital_power": capital.power if capital else 0,
        "can_relocate_to": [
            tid for tid in owned
            if state.territories[tid].power >= RELOCATE_MIN_POWER and tid != player.capital
        ],
        "rest": player.rest,
        "is_alive": player.is_alive,
    }


def get_game_summary(state: GameState) -> dict[str, Any]:
    return {
        "phase": current_phase(state),
        "turn_count": state.turn_count,
        "round_count": state.round_count,
        "current_player": state.current_player.id,
        "winner": state.winner,
        "pending_catastrophe": state.pending_catastrophe,
        "is_processing": state.is_processing,
        "players": [get_player_stats(state, p.id) for p in state.players],
        "available_actions": get_available_action_types(state),
    }
