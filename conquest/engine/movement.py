"""
Territory and unit rules: capital claims, unit moves, recruiting, fusion
and capital relocation.
Each function mutates the working copy handed to it by the reducer and
raises ActionRejected before touching anything when a rule is broken.
"""

from conquest.engine import (
    FUSION_RECIPES,
    RELOCATE_MIN_POWER,
    STARTING_TROOPS,
    UNIT_TIERS,
)
from conquest.engine.actions import ActionRejected
from conquest.engine.definitions import MapDefinition
from conquest.engine.events import (
    GameEvent,
    capital_placed,
    capital_relocated,
    unit_moved,
    units_fused,
    units_recruited,
)
from conquest.engine.state import GameState, PlayerState, TerritoryState, Troops


def _territory(state: GameState, territory_id: str | None) -> TerritoryState:
    if not territory_id or territory_id not in state.territories:
        raise ActionRejected(f"Invalid territory: {territory_id}")
    return state.territories[territory_id]


def _player(state: GameState, player_id: int) -> PlayerState:
    player = state.get_player(player_id)
    if player is None:
        raise ActionRejected(f"Unknown player: {player_id}")
    return player


def is_enemy_territory(territory: TerritoryState, player_id: int) -> bool:
    return territory.owner is not None and territory.owner != player_id


def claim_capital(state: GameState, player_id: int, territory_id: str) -> list[GameEvent]:
    """Setup: claim an unowned node as capital and garrison it with the starting stack."""
    player = _player(state, player_id)
    territory = _territory(state, territory_id)
    if territory.owner is not None:
        raise ActionRejected("Node occupied!")

    territory.owner = player_id
    territory.troops = Troops(**STARTING_TROOPS)
    player.capital = territory_id
    state.add_log(f"{player.name} selected Capital {territory_id}")
    return [capital_placed(player_id, territory_id)]


def validate_advance(
    state: GameState,
    map_def: MapDefinition,
    player_id: int,
    from_id: str,
    to_id: str,
) -> tuple[TerritoryState, TerritoryState]:
    """
    Common checks for a move or attack from one node to another.
    Returns (source, destination).
    """
    source = _territory(state, from_id)
    destination = _territory(state, to_id)
    if from_id == to_id:
        raise ActionRejected("Source and destination are the same territory")
    if source.owner != player_id:
        raise ActionRejected(f"You do not control {from_id}")
    if source.power <= 0:
        raise ActionRejected(f"No troops in {from_id}")
    if not map_def.is_adjacent(from_id, to_id):
        raise ActionRejected(f"{to_id} is not adjacent to {from_id}")
    return source, destination


def move_unit(
    state: GameState,
    map_def: MapDefinition,
    player_id: int,
    from_id: str,
    to_id: str,
    tier: str,
) -> list[GameEvent]:
    """Move one unit of a tier into an unowned or friendly neighbour."""
    player = _player(state, player_id)
    source, destination = validate_advance(state, map_def, player_id, from_id, to_id)
    if tier not in UNIT_TIERS:
        raise ActionRejected(f"Unknown unit type: {tier}")
    if source.troops.get(tier) <= 0:
        raise ActionRejected(f"No {tier} available in {from_id}")
    if is_enemy_territory(destination, player_id):
        raise ActionRejected(f"{to_id} is held by the enemy; attack instead")

    source.troops.add(tier, -1)
    source.normalize()
    if destination.owner is None:
        destination.owner = player_id
    destination.troops.add(tier, 1)
    state.add_log(f"{player.name} moved {tier} to {to_id}")
    return [unit_moved(player_id, from_id, to_id, tier)]


def recruit_at_capital(state: GameState, player_id: int) -> list[GameEvent]:
    """Add one peon to the player's capital while they still hold it."""
    player = _player(state, player_id)
    if not player.capital:
        raise ActionRejected("No capital to recruit at")
    capital = _territory(state, player.capital)
    if capital.owner != player_id:
        raise ActionRejected("Capital lost; cannot recruit")

    capital.troops.add("peon", 1)
    state.add_log(f"{player.name} recruited reinforcement at {player.capital}")
    return [units_recruited(player_id, player.capital, 1)]


def fuse_units(
    state: GameState,
    player_id: int,
    territory_id: str | None,
    recipe: str,
) -> list[GameEvent]:
    """
    Apply a fusion recipe on an owned territory.
    Recipes: 5 peon -> 1 horse, 2 horse -> 1 tank, 10 peon -> 1 tank.
    """
    if recipe not in FUSION_RECIPES:
        raise ActionRejected(f"Unknown fusion recipe: {recipe}")
    territory = _territory(state, territory_id)
    if territory.owner != player_id:
        raise ActionRejected(f"You do not control {territory_id}")

    input_tier, input_count, output_tier = FUSION_RECIPES[recipe]
    if territory.troops.get(input_tier) < input_count:
        raise ActionRejected("Insufficient troops for fusion.")

    territory.troops.add(input_tier, -input_count)
    territory.troops.add(output_tier, 1)
    state.add_log("Fusion successful.")
    return [units_fused(player_id, territory.id, recipe)]


def relocate_capital(
    state: GameState,
    player_id: int,
    territory_id: str | None,
) -> list[GameEvent]:
    """
    Move the capital to an owned territory with at least 10 power that is not
    another living player's capital.
    """
    player = _player(state, player_id)
    territory = _territory(state, territory_id)
    taken = any(
        p.capital == territory.id and p.id != player_id and p.is_alive
        for p in state.players
    )
    if taken:
        raise ActionRejected("Cannot move capital to an enemy capital site.")
    if territory.owner != player_id or territory.power < RELOCATE_MIN_POWER:
        raise ActionRejected(f"Need {RELOCATE_MIN_POWER}+ Power to move Capital.")

    old_capital = player.capital
    player.capital = territory.id
    state.add_log("Capital moved to " + territory.id)
    return [capital_relocated(player_id, old_capital, territory.id)]
