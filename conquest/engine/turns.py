"""
Turn and round scheduling.
The active index advances circularly; wrapping back to the first player
starts a new round. After setup, dead players are skipped.
"""

from conquest.engine import SETUP_TURNS
from conquest.engine.events import GameEvent, round_started, turn_ended
from conquest.engine.state import GameState, PlayerState


def next_active_index(
    players: list[PlayerState],
    index: int,
    turn_count: int,
) -> tuple[int, int]:
    """
    Compute the next active player index.

    Args:
        players: Players in turn order
        index: Current active index
        turn_count: Turn counter before this turn ends

    Returns:
        (next_index, rounds_advanced). Dead players are skipped once
        turn_count >= SETUP_TURNS, for at most len(players) extra steps so an
        all-dead table cannot loop forever.
    """
    count = len(players)
    next_index = (index + 1) % count
    rounds = 1 if next_index == 0 else 0

    if turn_count >= SETUP_TURNS:
        steps = 0
        while not players[next_index].is_alive and steps < count:
            next_index = (next_index + 1) % count
            if next_index == 0:
                rounds += 1
            steps += 1

    return next_index, rounds


def end_turn(state: GameState) -> tuple[int, list[GameEvent]]:
    """
    Advance to the next player's turn.
    The incoming player's rest counter drops by one as their turn starts.
    Returns (rounds_advanced, events).
    """
    events: list[GameEvent] = []
    next_index, rounds = next_active_index(
        state.players, state.current_player_index, state.turn_count
    )
    state.current_player_index = next_index
    state.round_count += rounds
    state.turn_count += 1
    state.is_processing = False

    incoming = state.players[next_index]
    if incoming.rest > 0:
        incoming.rest -= 1

    events.append(turn_ended(state.turn_count, state.round_count, incoming.id))
    if rounds:
        events.append(round_started(state.round_count))
    return rounds, events


def is_resting(player: PlayerState) -> bool:
    return player.rest > 0
