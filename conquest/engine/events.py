"""
Game events for UI hooks, sound cues and logging.
Events describe what happened during action processing.
"""

from dataclasses import dataclass
from typing import Any


@dataclass
class GameEvent:
    """Base event class. All events have a type and payload."""
    type: str
    payload: dict[str, Any]

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type, "payload": self.payload}


# ===== Event Type Constants =====

# Turn events
TURN_ENDED = "turn_ended"
ROUND_STARTED = "round_started"
PLAYER_RESTED = "player_rested"

# Setup / capital events
CAPITAL_PLACED = "capital_placed"
CAPITAL_RELOCATED = "capital_relocated"
CAPITAL_FALLEN = "capital_fallen"

# Unit events
UNIT_MOVED = "unit_moved"
UNITS_RECRUITED = "units_recruited"
UNITS_FUSED = "units_fused"

# Combat events
COMBAT_RESOLVED = "combat_resolved"
TERRITORY_NEUTRALIZED = "territory_neutralized"

# Catastrophe events
CATASTROPHE_ANNOUNCED = "catastrophe_announced"
CATASTROPHE_RESOLVED = "catastrophe_resolved"

# UI events
NODE_SELECTED = "node_selected"

# Rejection
ACTION_REJECTED = "action_rejected"

# Victory events
VICTORY = "victory"
DRAW = "draw"


# ===== Event Factory Functions =====

def turn_ended(turn_count: int, round_count: int, next_player: int) -> GameEvent:
    return GameEvent(TURN_ENDED, {
        "turn_count": turn_count,
        "round_count": round_count,
        "next_player": next_player,
    })


def round_started(round_count: int) -> GameEvent:
    return GameEvent(ROUND_STARTED, {"round_count": round_count})


def player_rested(player: int, rest_remaining: int) -> GameEvent:
    return GameEvent(PLAYER_RESTED, {
        "player": player,
        "rest_remaining": rest_remaining,
    })


def capital_placed(player: int, territory: str) -> GameEvent:
    return GameEvent(CAPITAL_PLACED, {"player": player, "territory": territory})


def capital_relocated(player: int, old_capital: str | None, new_capital: str) -> GameEvent:
    return GameEvent(CAPITAL_RELOCATED, {
        "player": player,
        "old_capital": old_capital,
        "new_capital": new_capital,
    })


def capital_fallen(player: int, capital: str | None) -> GameEvent:
    return GameEvent(CAPITAL_FALLEN, {"player": player, "capital": capital})


def unit_moved(player: int, from_territory: str, to_territory: str, tier: str) -> GameEvent:
    return GameEvent(UNIT_MOVED, {
        "player": player,
        "from_territory": from_territory,
        "to_territory": to_territory,
        "tier": tier,
    })


def units_recruited(player: int, territory: str, count: int) -> GameEvent:
    return GameEvent(UNITS_RECRUITED, {
        "player": player,
        "territory": territory,
        "count": count,
    })


def units_fused(player: int, territory: str, recipe: str) -> GameEvent:
    return GameEvent(UNITS_FUSED, {
        "player": player,
        "territory": territory,
        "recipe": recipe,
    })


def combat_resolved(
    location: str,
    attacker_name: str,
    defender_name: str,
    attacker_roll: int,
    defender_roll: int,
    damage_dealt: int,
    is_counter: bool,
) -> GameEvent:
    """
    One dice exchange of a combat.

    is_counter is True for the defender's counter-roll against the attacker;
    damage_dealt is 0 when the exchange was blocked.
    """
    return GameEvent(COMBAT_RESOLVED, {
        "location": location,
        "attacker_name": attacker_name,
        "defender_name": defender_name,
        "attacker_roll": attacker_roll,
        "defender_roll": defender_roll,
        "damage_dealt": damage_dealt,
        "is_counter": is_counter,
    })


def territory_neutralized(territory: str, old_owner: int | None) -> GameEvent:
    return GameEvent(TERRITORY_NEUTRALIZED, {
        "territory": territory,
        "old_owner": old_owner,
    })


def catastrophe_announced(round_count: int) -> GameEvent:
    return GameEvent(CATASTROPHE_ANNOUNCED, {"round": round_count})


def catastrophe_resolved(round_count: int, details: list[dict[str, Any]]) -> GameEvent:
    """
    Emitted once the catastrophe dice have landed.

    details: [{"player_id", "player_name", "type": "plague"|"prosperity"|"neutral", "amount"}]
    """
    return GameEvent(CATASTROPHE_RESOLVED, {
        "round": round_count,
        "details": details,
    })


def node_selected(player: int | None, territory: str | None) -> GameEvent:
    return GameEvent(NODE_SELECTED, {"player": player, "territory": territory})


def action_rejected(action_type: str, player: int | None, reason: str) -> GameEvent:
    return GameEvent(ACTION_REJECTED, {
        "action_type": action_type,
        "player": player,
        "reason": reason,
    })


def victory(winner: int, survivors: list[int]) -> GameEvent:
    return GameEvent(VICTORY, {"winner": winner, "survivors": survivors})


def draw() -> GameEvent:
    return GameEvent(DRAW, {"winner": "draw"})
