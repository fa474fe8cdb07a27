"""
Single place for default game/setup configuration.
Environment variables override the pacing delays and the default map
(set CONQUEST_AI_DELAY=0 and CONQUEST_CATASTROPHE_DELAY=0 for instant play).
"""
import os


def _float_env(name: str, default: float) -> float:
    raw = os.environ.get(name)
    if raw is None or raw == "":
        return default
    try:
        return max(0.0, float(raw))
    except ValueError:
        return default


# Map id from data/maps/<id>/map.json. Default for new games.
DEFAULT_MAP_ID = os.environ.get("CONQUEST_MAP_ID") or "classic"

# Catastrophe fires every N rounds. Bounds apply to new games.
DEFAULT_CATASTROPHE_INTERVAL = 5
MIN_CATASTROPHE_INTERVAL = 3
MAX_CATASTROPHE_INTERVAL = 15

# Pacing delays in seconds (presentation only; rules never depend on them)
AI_SETUP_DELAY = _float_env("CONQUEST_AI_SETUP_DELAY", _float_env("CONQUEST_AI_DELAY", 1.5))
AI_DELAY = _float_env("CONQUEST_AI_DELAY", 1.0)
CATASTROPHE_DELAY = _float_env("CONQUEST_CATASTROPHE_DELAY", 0.5)
