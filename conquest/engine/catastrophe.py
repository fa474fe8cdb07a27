"""
Catastrophe events.
Every `catastrophe_interval` rounds each living player who still holds their
capital rolls 2d6 plague against 2d6 prosperity.
Plague strips power one point at a time from random holdings; prosperity adds
peons to the capital.
"""

import logging
import random
from typing import Any

from conquest.engine.combat import apply_damage, roll_dice
from conquest.engine.events import GameEvent, catastrophe_resolved
from conquest.engine.state import GameState

logger = logging.getLogger(__name__)

# Upper bound on single-point plague hits per player
MAX_PLAGUE_ITERATIONS = 50


def is_catastrophe_round(round_count: int, interval: int) -> bool:
    """Round r triggers when r > 1 and (r - 1) is a multiple of the interval."""
    return round_count > 1 and (round_count - 1) % interval == 0


def catastrophe_round_reached(old_round: int, new_round: int, interval: int) -> int | None:
    """Return the last catastrophe round in (old_round, new_round], if any."""
    for round_count in range(new_round, old_round, -1):
        if is_catastrophe_round(round_count, interval):
            return round_count
    return None


def _player_rolls(
    rolls: dict[Any, dict[str, int]] | None,
    player_id: int,
    rng: random.Random,
) -> tuple[int, int]:
    """(plague, prosperity) from supplied rolls, keyed by player id or its str, else 2d6 each."""
    if rolls:
        fixed = rolls.get(player_id) or rolls.get(str(player_id))
        if fixed:
            return int(fixed["plague"]), int(fixed["prosperity"])
    return sum(roll_dice(rng, 2)), sum(roll_dice(rng, 2))


def apply_plague(state: GameState, player_id: int, loss: int, rng: random.Random) -> int:
    """
    Remove `loss` power from a player's holdings, one point at a time, each
    point hitting a uniformly random territory with positive power.
    Returns the number of points applied.
    """
    applied = 0
    attempts = 0
    while loss > 0 and attempts < MAX_PLAGUE_ITERATIONS:
        holdings = [
            t for t in state.territories.values()
            if t.owner == player_id and t.power > 0
        ]
        if not holdings:
            break
        target = rng.choice(holdings)
        target.troops = apply_damage(target.troops, 1)
        target.normalize()
        loss -= 1
        applied += 1
        attempts += 1
    if loss > 0 and attempts >= MAX_PLAGUE_ITERATIONS:
        logger.warning("Plague for player %s stopped at iteration cap", player_id)
    return applied


def run_catastrophe(
    state: GameState,
    rng: random.Random,
    rolls: dict[Any, dict[str, int]] | None = None,
) -> list[GameEvent]:
    """
    Roll and apply the catastrophe for every eligible player.
    Mutates state; returns a single catastrophe_resolved event with per-player details.
    """
    round_count = state.pending_catastrophe or state.round_count
    state.add_log(f"Catastrophe Event (Round {round_count})", "event")
    details: list[dict[str, Any]] = []

    for player in state.players:
        if not player.is_alive or not player.capital:
            continue
        capital = state.territories.get(player.capital)
        if capital is None or capital.owner != player.id:
            continue

        plague, prosperity = _player_rolls(rolls, player.id, rng)
        if plague > prosperity:
            loss = plague - prosperity
            state.add_log(f"{player.name}: Plague! Losing {loss} power.", "event")
            apply_plague(state, player.id, loss, rng)
            details.append({
                "player_id": player.id,
                "player_name": player.name,
                "type": "plague",
                "amount": loss,
            })
        elif prosperity > plague:
            gain = prosperity - plague
            state.add_log(f"{player.name}: Prosperity! +{gain} Peons in Capital.", "event")
            capital.troops.add("peon", gain)
            details.append({
                "player_id": player.id,
                "player_name": player.name,
                "type": "prosperity",
                "amount": gain,
            })
        else:
            state.add_log(f"{player.name}: No change.", "event")
            details.append({
                "player_id": player.id,
                "player_name": player.name,
                "type": "neutral",
                "amount": 0,
            })

    logger.info("Catastrophe round %s resolved: %s", round_count, details)
    return [catastrophe_resolved(round_count, details)]
