import random

import pytest

from conquest.engine.definitions import map_from_edges
from conquest.engine.session import GameSession
from conquest.engine.state import GameState, TerritoryState, Troops
from conquest.engine.utils import default_players, initialize_game_state


@pytest.fixture
def two_node_map():
    """A - B."""
    return map_from_edges([("A", "B")])


@pytest.fixture
def line_map():
    """A - B - C - D - E."""
    return map_from_edges([("A", "B"), ("B", "C"), ("C", "D"), ("D", "E")])


@pytest.fixture
def rng():
    return random.Random(1234)


def make_main_state(map_def, holdings, capitals, rest=None, vs_ai=False):
    """
    Build a main-phase state directly.
    holdings: node -> (owner, Troops); capitals: player id -> node.
    """
    players = default_players(vs_ai)
    for p in players:
        p.capital = capitals.get(p.id)
        p.rest = (rest or {}).get(p.id, 0)
    territories = {node: TerritoryState(id=node) for node in map_def.nodes}
    for node, (owner, troops) in holdings.items():
        territories[node].owner = owner
        territories[node].troops = troops
    return GameState(
        territories=territories,
        players=players,
        turn_count=2,
        round_count=2,
        current_player_index=0,
        map_id=map_def.id,
    )


@pytest.fixture
def main_state(line_map):
    """Blue holds A (capital) and B, Red holds E (capital); Blue to act."""
    return make_main_state(
        line_map,
        {
            "A": (1, Troops(peon=5, horse=1)),
            "B": (1, Troops(peon=2)),
            "E": (2, Troops(peon=5, horse=1)),
        },
        {1: "A", 2: "E"},
    )


@pytest.fixture
def fresh_state(two_node_map):
    return initialize_game_state(two_node_map, vs_ai=False)


@pytest.fixture
def instant_session(line_map):
    """Session vs the AI with no pacing delays."""
    return GameSession.new_game(
        line_map,
        vs_ai=True,
        seed=7,
        ai_delay=0,
        ai_setup_delay=0,
        catastrophe_delay=0,
    )


@pytest.fixture
def make_state():
    return make_main_state
