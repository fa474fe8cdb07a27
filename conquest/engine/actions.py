"""
Action definitions for the game.
Actions are immutable, deterministic instructions (intents) produced by
human input or the AI and applied by the reducer.
"""

from dataclasses import dataclass


class ActionRejected(ValueError):
    """An intent that breaks a game rule. The reducer turns it into an error log entry."""


@dataclass
class Action:
    """Base action class. All actions have a type, player, and payload."""
    type: str  # e.g., "place_capital", "move_unit", "attack", "recruit", "end_turn"
    player: int | None  # player id performing the action; None for system actions
    payload: dict  # Action-specific data


def place_capital(player: int, territory_id: str) -> Action:
    """
    Claim an unowned node as capital. Only legal during setup.
    Example: place_capital(1, "E")
    """
    return Action(
        type="place_capital",
        player=player,
        payload={"territory_id": territory_id},
    )


def move_unit(
    player: int,
    territory_from: str,
    territory_to: str,
    tier: str,  # "peon", "horse" or "tank"
) -> Action:
    """
    Move one unit of the given tier to an adjacent territory.
    If the destination is held by an opponent the move resolves as an attack.
    """
    return Action(
        type="move_unit",
        player=player,
        payload={
            "from": territory_from,
            "to": territory_to,
            "tier": tier,
        },
    )


def attack(
    player: int,
    territory_from: str,
    territory_to: str,
    # "attack" -> [attacker_roll, defender_roll], "counter" -> [attacker_roll, defender_roll]
    dice_rolls: dict[str, list[int]] | None = None,
) -> Action:
    """
    Attack an adjacent enemy territory.

    dice_rolls is optional; when given the reducer uses these rolls instead of
    drawing from its random source (deterministic replay).

    Example: attack(1, "A", "B", {"attack": [6, 2], "counter": [3, 4]})
    """
    payload = {
        "from": territory_from,
        "to": territory_to,
    }
    if dice_rolls:
        payload["dice_rolls"] = dice_rolls
    return Action(type="attack", player=player, payload=payload)


def recruit(player: int) -> Action:
    """Add one peon to the player's capital."""
    return Action(type="recruit", player=player, payload={})


def fuse(player: int, recipe: str, territory_id: str | None = None) -> Action:
    """
    Fuse units on a territory. recipe is one of FUSION_RECIPES.
    territory_id defaults to the currently selected node.
    """
    return Action(
        type="fuse",
        player=player,
        payload={"recipe": recipe, "territory_id": territory_id},
    )


def relocate_capital(player: int, territory_id: str | None = None) -> Action:
    """
    Move the player's capital to an owned territory with 10+ power.
    territory_id defaults to the currently selected node.
    """
    return Action(
        type="relocate_capital",
        player=player,
        payload={"territory_id": territory_id},
    )


def select_node(player: int | None, territory_id: str | None) -> Action:
    """Set (or clear, with None) the UI selection pointer. Costs no turn."""
    return Action(
        type="select_node",
        player=player,
        payload={"territory_id": territory_id},
    )


def end_turn(player: int) -> Action:
    """Pass the turn (also used for resting turns)."""
    return Action(type="end_turn", player=player, payload={})


def resolve_catastrophe(
    # player_id -> {"plague": int, "prosperity": int}
    rolls: dict[int, dict[str, int]] | None = None,
) -> Action:
    """
    System action: roll the pending catastrophe.
    rolls may fix the 2d6 totals per player for deterministic replay.
    """
    payload = {}
    if rolls:
        payload["rolls"] = rolls
    return Action(type="resolve_catastrophe", player=None, payload=payload)
