"""
Combat resolution system.
One die per side: the attacker strikes first; a defender left standing
counter-rolls against the attacker.
Damage is absorbed with downgrade cascading: a destroyed horse becomes
5 peons and a destroyed tank becomes 2 horses before damage continues.
"""

import random
from dataclasses import dataclass, field
from copy import deepcopy

from conquest.engine import DICE_SIDES
from conquest.engine.state import Troops

# Downgrade chain: destroyed tier -> (replacement tier, replacement count)
DOWNGRADES = {
    "horse": ("peon", 5),
    "tank": ("horse", 2),
}


def roll_die(rng: random.Random) -> int:
    """Uniform roll 1..DICE_SIDES."""
    return rng.randint(1, DICE_SIDES)


def roll_dice(rng: random.Random, count: int) -> list[int]:
    return [roll_die(rng) for _ in range(count)]


def apply_damage(troops: Troops, damage: int) -> Troops:
    """
    Apply damage to a troop stack and return the new stack (input untouched).

    Peons absorb one point each. When peons run out a horse is broken into
    5 peons, and when horses run out a tank is broken into 2 horses; breaking
    a unit spends no damage. Stops when damage or power is exhausted.
    A stack left with power 0 is zeroed exactly.
    """
    result = deepcopy(troops)
    remaining = max(0, damage)
    while remaining > 0 and result.power > 0:
        if result.peon > 0:
            result.peon -= 1
            remaining -= 1
        elif result.horse > 0:
            tier, count = DOWNGRADES["horse"]
            result.horse -= 1
            result.add(tier, count)
        elif result.tank > 0:
            tier, count = DOWNGRADES["tank"]
            result.tank -= 1
            result.add(tier, count)
    if result.power <= 0:
        result.clear()
    return result


@dataclass
class Exchange:
    """A single roll-off between attacker and defender."""
    attacker_roll: int
    defender_roll: int
    damage: int  # damage dealt by the striking side (0 when blocked)
    is_counter: bool = False


@dataclass
class CombatResult:
    """Outcome of resolve_combat: both stacks after the fight plus the rolls."""
    attacker: Troops
    defender: Troops
    strike: Exchange
    counter: Exchange | None = None
    defender_neutralized: bool = False
    exchanges: list[Exchange] = field(default_factory=list)


def _rolls_for(dice: dict[str, list[int]] | None, key: str, rng: random.Random) -> tuple[int, int]:
    """Take [attacker, defender] rolls from dice[key] if given, otherwise roll."""
    if dice and key in dice:
        rolls = list(dice[key])
        if len(rolls) != 2:
            raise ValueError(f"dice_rolls['{key}'] must be [attacker_roll, defender_roll]")
        for r in rolls:
            if not 1 <= int(r) <= DICE_SIDES:
                raise ValueError(f"Invalid die roll: {r}")
        return int(rolls[0]), int(rolls[1])
    return roll_die(rng), roll_die(rng)


def resolve_combat(
    attacker: Troops,
    defender: Troops,
    rng: random.Random,
    dice: dict[str, list[int]] | None = None,
) -> CombatResult:
    """
    Resolve one attack.

    Args:
        attacker: Attacking territory's stack
        defender: Defending territory's stack
        rng: Random source for rolls not supplied in dice
        dice: Optional {"attack": [a, d], "counter": [a, d]}

    Returns:
        CombatResult with new stacks (inputs are not mutated).
    """
    new_attacker = deepcopy(attacker)
    new_defender = deepcopy(defender)

    att_roll, def_roll = _rolls_for(dice, "attack", rng)
    strike_damage = att_roll - def_roll if att_roll > def_roll else 0
    if strike_damage:
        new_defender = apply_damage(new_defender, strike_damage)
    strike = Exchange(att_roll, def_roll, strike_damage)
    result = CombatResult(
        attacker=new_attacker,
        defender=new_defender,
        strike=strike,
        exchanges=[strike],
    )

    if new_defender.power > 0:
        att_roll, def_roll = _rolls_for(dice, "counter", rng)
        counter_damage = def_roll - att_roll if def_roll > att_roll else 0
        if counter_damage:
            result.attacker = apply_damage(new_attacker, counter_damage)
        result.counter = Exchange(att_roll, def_roll, counter_damage, is_counter=True)
        result.exchanges.append(result.counter)
    else:
        result.defender_neutralized = True

    return result
