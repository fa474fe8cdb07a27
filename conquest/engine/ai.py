"""
Heuristic AI opponent.
Chooses one action per turn through the same intents a human uses.
All randomness comes from the injected random source.
"""

import logging
import random
from dataclasses import dataclass

from conquest.engine.actions import (
    Action,
    attack,
    end_turn,
    move_unit,
    place_capital,
    recruit,
)
from conquest.engine.definitions import MapDefinition
from conquest.engine.state import GameState

logger = logging.getLogger(__name__)

# Candidate scores
SCORE_EXPAND = 10
SCORE_ATTACK = 8
SCORE_REINFORCE = 3

# Attack only when own power exceeds enemy power by more than this margin
ATTACK_MARGIN = 2
# A reinforcing move is only proposed when rng.random() exceeds this
REINFORCE_THRESHOLD = 0.7
# Recruit at the capital while its power is below this
CAPITAL_MIN_POWER = 5


@dataclass
class Candidate:
    """Best move found during the neighbour scan."""
    from_territory: str
    to_territory: str
    score: int
    kind: str  # "move" or "attack"


def choose_setup_capital(state: GameState, rng: random.Random) -> str | None:
    """Pick a uniformly random unowned node, or None if the board is full."""
    available = [tid for tid, t in state.territories.items() if t.owner is None]
    if not available:
        return None
    return rng.choice(available)


def find_best_candidate(
    state: GameState,
    map_def: MapDefinition,
    player_id: int,
    rng: random.Random,
) -> Candidate | None:
    """
    Scan owned territories with troops and score each neighbour:
    expand into unowned (10), attack a clearly weaker enemy (8), reinforce an
    owned neighbour (3, only proposed 30% of the time).
    The first candidate with the strictly highest score wins.
    """
    best: Candidate | None = None
    best_score = -1
    for tid, territory in state.territories.items():
        if territory.owner != player_id or territory.power < 1:
            continue
        for neighbor_id in map_def.neighbors(tid):
            neighbor = state.territories[neighbor_id]
            if neighbor.owner is None:
                if SCORE_EXPAND > best_score:
                    best = Candidate(tid, neighbor_id, SCORE_EXPAND, "move")
                    best_score = SCORE_EXPAND
            elif neighbor.owner != player_id:
                if territory.power > neighbor.power + ATTACK_MARGIN:
                    if SCORE_ATTACK > best_score:
                        best = Candidate(tid, neighbor_id, SCORE_ATTACK, "attack")
                        best_score = SCORE_ATTACK
            else:
                if SCORE_REINFORCE > best_score and rng.random() > REINFORCE_THRESHOLD:
                    best = Candidate(tid, neighbor_id, SCORE_REINFORCE, "move")
                    best_score = SCORE_REINFORCE
    return best


def choose_action(
    state: GameState,
    map_def: MapDefinition,
    rng: random.Random,
) -> Action:
    """
    Decide the active AI player's action.

    Setup: claim a random unowned node.
    Main, in priority order: pass if eliminated, resting or capital lost;
    recruit if the capital is weak; otherwise the best scored move/attack;
    recruit when nothing scores.
    """
    player = state.current_player

    if state.in_setup:
        pick = choose_setup_capital(state, rng)
        if pick is None:
            return end_turn(player.id)
        return place_capital(player.id, pick)

    if not player.is_alive:
        return end_turn(player.id)

    if player.rest > 0:
        logger.debug("AI player %s resting (%s)", player.id, player.rest)
        return end_turn(player.id)

    capital = state.territories.get(player.capital) if player.capital else None
    if capital is None or capital.owner != player.id:
        return end_turn(player.id)

    if capital.power < CAPITAL_MIN_POWER:
        return recruit(player.id)

    best = find_best_candidate(state, map_def, player.id, rng)
    if best is None:
        logger.debug("AI player %s idle; recruiting", player.id)
        return recruit(player.id)

    if best.kind == "attack":
        return attack(player.id, best.from_territory, best.to_territory)

    tier = state.territories[best.from_territory].troops.lowest_tier()
    return move_unit(player.id, best.from_territory, best.to_territory, tier)
