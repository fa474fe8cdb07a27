"""
Victory evaluation.
A player whose capital is missing, captured or emptied is eliminated.
The last player standing wins; if nobody is left the match is a draw.
"""

import logging

from conquest.engine import DRAW
from conquest.engine.events import GameEvent, capital_fallen, draw, victory
from conquest.engine.state import GameState, PlayerState

logger = logging.getLogger(__name__)


def capital_standing(state: GameState, player: PlayerState) -> bool:
    """True if the player still owns a capital with positive power."""
    if not player.capital:
        return False
    capital = state.territories.get(player.capital)
    if capital is None:
        return False
    return capital.owner == player.id and capital.power > 0


def evaluate_victory(state: GameState) -> list[GameEvent]:
    """
    Eliminate players with fallen capitals and set the winner.
    No-op during setup and once a winner is set (the result is sticky).
    Mutates state; returns events.
    """
    events: list[GameEvent] = []
    if state.in_setup or state.winner is not None:
        return events

    fallen = False
    for player in state.players:
        if not player.is_alive:
            continue
        if capital_standing(state, player):
            continue
        events.append(capital_fallen(player.id, player.capital))
        player.is_alive = False
        player.capital = None
        fallen = True
        logger.info("Player %s eliminated (capital fell)", player.id)

    if fallen:
        state.add_log("A capital has fallen!", "event")

    survivors = [p for p in state.players if p.is_alive]
    if len(survivors) == 1:
        state.winner = survivors[0].id
        state.add_log(f"{survivors[0].name} wins!", "event")
        events.append(victory(survivors[0].id, [survivors[0].id]))
    elif not survivors:
        state.winner = DRAW
        state.add_log("All capitals have fallen. Draw!", "event")
        events.append(draw())

    return events
