"""
Utility functions for the game engine.
"""

from conquest.config import (
    DEFAULT_CATASTROPHE_INTERVAL,
    MAX_CATASTROPHE_INTERVAL,
    MIN_CATASTROPHE_INTERVAL,
)
from conquest.engine.definitions import MapDefinition
from conquest.engine.state import GameState, PlayerState, TerritoryState

PLAYER_COLORS = {
    1: "#3b82f6",  # blue
    2: "#f43f5e",  # rose
}

WELCOME_MESSAGE = "Welcome. Phase 1: Establish Capital."


def default_players(vs_ai: bool) -> list[PlayerState]:
    """Player Blue (human) against Player Red, or against The Machine (AI)."""
    return [
        PlayerState(id=1, name="Player Blue", color=PLAYER_COLORS[1], is_ai=False),
        PlayerState(
            id=2,
            name="The Machine" if vs_ai else "Player Red",
            color=PLAYER_COLORS[2],
            is_ai=vs_ai,
        ),
    ]


def validate_catastrophe_interval(interval: int) -> int:
    if not MIN_CATASTROPHE_INTERVAL <= interval <= MAX_CATASTROPHE_INTERVAL:
        raise ValueError(
            f"catastrophe_interval must be between {MIN_CATASTROPHE_INTERVAL} "
            f"and {MAX_CATASTROPHE_INTERVAL}, got {interval}"
        )
    return interval


def initialize_game_state(
    map_def: MapDefinition,
    vs_ai: bool = True,
    catastrophe_interval: int = DEFAULT_CATASTROPHE_INTERVAL,
    players: list[PlayerState] | None = None,
) -> GameState:
    """
    Create the initial game state: every node unowned and empty, setup phase.

    Args:
        map_def: Map topology
        vs_ai: Player 2 is AI-controlled
        catastrophe_interval: Rounds between catastrophes (3..15)
        players: Override the default two players
    """
    territories = {
        node_id: TerritoryState(id=node_id) for node_id in map_def.nodes
    }
    state = GameState(
        territories=territories,
        players=players if players is not None else default_players(vs_ai),
        catastrophe_interval=validate_catastrophe_interval(catastrophe_interval),
        map_id=map_def.id,
    )
    state.add_log(WELCOME_MESSAGE)
    return state


def print_game_state(state: GameState, verbose: bool = False):
    """
    Pretty-print the current game state.

    Args:
        state: Current game state
        verbose: If True, list empty territories too
    """
    player = state.current_player
    phase = "setup" if state.in_setup else "main"
    print(f"\n{'='*60}")
    print(
        f"Turn {state.turn_count} | Round {state.round_count} | {player.name} | Phase: {phase}")
    print(f"{'='*60}")

    for territory_id, territory in state.territories.items():
        if territory.owner is None and not verbose:
            continue
        owner = state.get_player(territory.owner) if territory.owner else None
        owner_str = owner.name if owner else "neutral"
        capital = " [CAPITAL]" if any(
            p.capital == territory_id and p.is_alive for p in state.players) else ""
        t = territory.troops
        print(f"  {territory_id}: {owner_str}{capital} - "
              f"peon {t.peon}, horse {t.horse}, tank {t.tank} (power {t.power})")

    print(f"\n{'Players':.<40}")
    for p in state.players:
        status = "alive" if p.is_alive else "eliminated"
        print(f"  {p.name}: capital={p.capital or '-'}, rest={p.rest}, {status}")
    if state.winner is not None:
        print(f"\n*** WINNER: {state.winner} ***")
    print()
