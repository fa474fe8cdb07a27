"""
Tests for combat resolution and damage absorption.
"""

import random

import pytest

from conquest.engine.combat import apply_damage, resolve_combat, roll_die
from conquest.engine.state import Troops


def test_peons_absorb_one_point_each():
    result = apply_damage(Troops(peon=3), 2)
    assert result.to_dict() == {"peon": 1, "horse": 0, "tank": 0}


def test_horse_breaks_into_peons_without_spending_damage():
    result = apply_damage(Troops(horse=1), 2)
    assert result.to_dict() == {"peon": 3, "horse": 0, "tank": 0}
    assert result.power == 3


def test_tank_cascades_through_horses_to_peons():
    result = apply_damage(Troops(tank=1), 1)
    assert result.to_dict() == {"peon": 4, "horse": 1, "tank": 0}
    assert result.power == 9


def test_overkill_zeroes_the_stack():
    result = apply_damage(Troops(peon=1, horse=1), 10)
    assert result.to_dict() == {"peon": 0, "horse": 0, "tank": 0}
    assert result.power == 0


@pytest.mark.parametrize("damage", [0, -3])
def test_no_damage_leaves_stack_unchanged(damage):
    troops = Troops(peon=2, horse=1)
    assert apply_damage(troops, damage) == troops


def test_apply_damage_does_not_mutate_input():
    troops = Troops(horse=2)
    apply_damage(troops, 3)
    assert troops == Troops(horse=2)


def test_counts_never_negative():
    rng = random.Random(5)
    for _ in range(200):
        troops = Troops(rng.randint(0, 6), rng.randint(0, 3), rng.randint(0, 2))
        result = apply_damage(troops, rng.randint(0, 40))
        assert min(result.peon, result.horse, result.tank) >= 0
        assert result.power <= troops.power


def test_roll_die_in_range():
    rng = random.Random(0)
    rolls = {roll_die(rng) for _ in range(500)}
    assert rolls == {1, 2, 3, 4, 5, 6}


def test_strike_neutralizes_defender_without_counter():
    rng = random.Random(0)
    result = resolve_combat(Troops(peon=5), Troops(peon=4), rng, {"attack": [6, 2]})
    assert result.strike.damage == 4
    assert result.defender_neutralized
    assert result.counter is None
    assert result.attacker == Troops(peon=5)
    assert result.defender.power == 0


def test_blocked_strike_then_counter_hits_attacker():
    rng = random.Random(0)
    result = resolve_combat(
        Troops(peon=5),
        Troops(peon=4),
        rng,
        {"attack": [2, 5], "counter": [1, 4]},
    )
    assert result.strike.damage == 0
    assert result.counter is not None
    assert result.counter.is_counter
    assert result.counter.damage == 3
    assert result.attacker == Troops(peon=2)
    assert result.defender == Troops(peon=4)
    assert not result.defender_neutralized


def test_ties_favor_defender_on_strike_and_attacker_on_counter():
    rng = random.Random(0)
    result = resolve_combat(
        Troops(peon=5),
        Troops(peon=4),
        rng,
        {"attack": [4, 4], "counter": [4, 4]},
    )
    assert result.strike.damage == 0
    assert result.counter.damage == 0
    assert len(result.exchanges) == 2


def test_partial_strike_leaves_survivor_who_counters():
    rng = random.Random(0)
    result = resolve_combat(
        Troops(peon=3),
        Troops(horse=1),
        rng,
        {"attack": [5, 3], "counter": [2, 3]},
    )
    assert result.defender == Troops(peon=3)
    assert result.attacker == Troops(peon=2)


def test_invalid_supplied_die_raises():
    with pytest.raises(ValueError):
        resolve_combat(Troops(peon=1), Troops(peon=1), random.Random(0), {"attack": [7, 1]})


def test_resolve_combat_does_not_mutate_inputs():
    attacker = Troops(peon=2)
    defender = Troops(peon=2)
    resolve_combat(attacker, defender, random.Random(0), {"attack": [1, 6], "counter": [1, 6]})
    assert attacker == Troops(peon=2)
    assert defender == Troops(peon=2)
