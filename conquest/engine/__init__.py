"""
Capital Conquest Turn-Based Game Engine
Core rules without rendering, audio or input wiring.
"""

DICE_SIDES = 6

# Unit tiers, lowest first. Power weight per unit.
UNIT_TIERS = ("peon", "horse", "tank")
TIER_POWER = {"peon": 1, "horse": 5, "tank": 10}

# Stack granted when a capital is claimed during setup.
STARTING_TROOPS = {"peon": 5, "horse": 1, "tank": 0}

# Fusion recipes: recipe_id -> (input tier, input count, output tier)
FUSION_RECIPES = {
    "peon_to_horse": ("peon", 5, "horse"),
    "horse_to_tank": ("horse", 2, "tank"),
    "peon_to_tank": ("peon", 10, "tank"),
}

# Rest counter charged by actions
ACTION_REST = 1
RELOCATE_REST = 3
RELOCATE_MIN_POWER = 10

# Number of turns in the setup phase (one capital claim per player)
SETUP_TURNS = 2

DRAW = "draw"
