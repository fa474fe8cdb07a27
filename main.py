"""
Main entry point for the Capital Conquest game engine.
Demonstrates core functionality with a simple simulated scenario.
"""

import random

from conquest.engine.actions import (
    attack,
    end_turn,
    fuse,
    move_unit,
    place_capital,
    recruit,
    relocate_capital,
    resolve_catastrophe,
)
from conquest.engine.ai import choose_action
from conquest.engine.definitions import load_map
from conquest.engine.reducer import apply_action, replay_from_actions
from conquest.engine.utils import initialize_game_state, print_game_state


def print_events(events):
    for e in events:
        if e.type in ("turn_ended", "round_started"):
            continue
        print(f"  {e.type}: {e.payload}")


def main():
    print("Capital Conquest - Turn-Based Territory Engine")
    print("=" * 60)

    map_def = load_map()
    rng = random.Random(42)
    # AI choices draw from their own source so the replay below only needs the engine seed
    ai_rng = random.Random(7)
    state = initialize_game_state(map_def, vs_ai=False, catastrophe_interval=3)
    actions = []

    def step(action):
        nonlocal state
        actions.append(action)
        state, events = apply_action(state, action, map_def, rng)
        print_events(events)
        return events

    print("\n[INITIAL STATE]")
    print_game_state(state)

    # ===== SCENARIO 1: Capital placement =====
    print("\n[SCENARIO 1: Establish capitals]")
    step(place_capital(1, "E"))
    step(place_capital(2, "I"))
    print_game_state(state)

    # ===== SCENARIO 2: Illegal move is refused =====
    print("\n[SCENARIO 2: Rejected move]")
    step(move_unit(1, "E", "I", "tank"))
    print(f"Last log: {state.logs[-1].text}")

    # ===== SCENARIO 3: Recruiting and fusion =====
    print("\n[SCENARIO 3: Recruiting and fusion]")
    step(recruit(1))
    step(recruit(2))
    step(fuse(1, "peon_to_horse", "E"))
    step(end_turn(2))
    e = state.territories["E"]
    print(f"E: {e.troops.to_dict()} (power {e.power})")

    # ===== SCENARIO 4: Combat with fixed dice =====
    print("\n[SCENARIO 4: Combat]")
    # Blue sends a peon to G (next to Red's capital); Red plays the AI's choices
    for _ in range(6):
        if state.winner is not None:
            break
        if state.pending_catastrophe is not None:
            step(resolve_catastrophe())
            continue
        if state.current_player.id == 1:
            if state.territories["G"].owner is None and state.territories["E"].troops.peon > 0:
                step(move_unit(1, "E", "G", "peon"))
            else:
                step(end_turn(1))
        else:
            step(choose_action(state, map_def, ai_rng))
    print_game_state(state)

    neighbors = map_def.neighbors("I")
    owned = [n for n in neighbors if state.territories[n].owner == 1]
    if owned and state.current_player.id == 1 and state.pending_catastrophe is None:
        step(attack(1, owned[0], "I", {"attack": [6, 1], "counter": [3, 3]}))
    else:
        print("Blue has no foothold next to I yet; skipping attack.")

    # ===== SCENARIO 5: Catastrophe with fixed rolls =====
    print("\n[SCENARIO 5: Catastrophe]")
    while state.pending_catastrophe is None and state.winner is None and state.round_count < 20:
        step(end_turn(state.current_player.id))
    if state.pending_catastrophe is not None:
        step(resolve_catastrophe({1: {"plague": 3, "prosperity": 9}, 2: {"plague": 10, "prosperity": 4}}))
    for entry in state.logs[-4:]:
        print(f"  [{entry.category}] {entry.text}")

    # ===== SCENARIO 6: Relocation rules =====
    print("\n[SCENARIO 6: Capital relocation]")
    if state.winner is None and state.current_player.id == 1:
        step(relocate_capital(1, "F"))
        print(f"Last log: {state.logs[-1].text}")

    # ===== SCENARIO 7: Deterministic replay =====
    print("\n[SCENARIO 7: Replay]")
    fresh = initialize_game_state(map_def, vs_ai=False, catastrophe_interval=3)
    replayed = replay_from_actions(fresh, actions, map_def, seed=42)
    same = replayed.to_dict()["territories"] == state.to_dict()["territories"]
    print(f"Replayed {len(actions)} actions; same board: {same}")

    print("\n[FINAL STATE]")
    print_game_state(state)


if __name__ == "__main__":
    main()
