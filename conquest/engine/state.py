"""
Game state representation.
The reducer never mutates the state it is given; it works on a deep copy.
Includes dict serialization for the renderer/API snapshot.
"""

import time
from dataclasses import dataclass, field
from copy import deepcopy
from typing import Any

from conquest.engine import TIER_POWER, UNIT_TIERS, SETUP_TURNS


@dataclass
class Troops:
    """Troop stack of a territory: counts per unit tier."""
    peon: int = 0
    horse: int = 0
    tank: int = 0

    @property
    def power(self) -> int:
        return (
            self.peon * TIER_POWER["peon"]
            + self.horse * TIER_POWER["horse"]
            + self.tank * TIER_POWER["tank"]
        )

    def get(self, tier: str) -> int:
        if tier not in UNIT_TIERS:
            raise KeyError(f"Unknown unit tier: {tier}")
        return getattr(self, tier)

    def add(self, tier: str, count: int) -> None:
        """Add (or with a negative count, remove) units of a tier. Counts never go below 0."""
        current = self.get(tier)
        if current + count < 0:
            raise ValueError(f"Cannot remove {-count} {tier} from stack of {current}")
        setattr(self, tier, current + count)

    def clear(self) -> None:
        self.peon = 0
        self.horse = 0
        self.tank = 0

    def lowest_tier(self) -> str | None:
        """Lowest tier with at least one unit (peon > horse > tank)."""
        for tier in UNIT_TIERS:
            if self.get(tier) > 0:
                return tier
        return None

    def available_tiers(self) -> list[str]:
        return [tier for tier in UNIT_TIERS if self.get(tier) > 0]

    def to_dict(self) -> dict[str, int]:
        return {"peon": self.peon, "horse": self.horse, "tank": self.tank}


@dataclass
class TerritoryState:
    """State of a single territory (one per map node)."""
    id: str
    owner: int | None = None  # player id or None if unowned
    troops: Troops = field(default_factory=Troops)

    @property
    def power(self) -> int:
        return self.troops.power

    def normalize(self) -> None:
        """Re-establish the ownership invariant: owner is None iff power is 0."""
        if self.troops.power <= 0:
            self.troops.clear()
            self.owner = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "owner": self.owner,
            "troops": self.troops.to_dict(),
            "power": self.power,
        }


@dataclass
class PlayerState:
    """A player and their capital/cooldown bookkeeping."""
    id: int
    name: str
    color: str
    is_ai: bool = False
    capital: str | None = None
    rest: int = 0  # turns remaining before the player may act again
    is_alive: bool = True

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "color": self.color,
            "is_ai": self.is_ai,
            "capital": self.capital,
            "rest": self.rest,
            "is_alive": self.is_alive,
        }


@dataclass
class LogEntry:
    """A line of the in-game log shown to players."""
    id: str
    text: str
    category: str  # "info", "combat", "event", "error"
    timestamp: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "text": self.text,
            "category": self.category,
            "timestamp": self.timestamp,
        }


@dataclass
class GameState:
    """Complete game state."""
    territories: dict[str, TerritoryState]  # node_id -> TerritoryState, in map order
    players: list[PlayerState]
    turn_count: int = 0
    round_count: int = 1
    current_player_index: int = 0
    catastrophe_interval: int = 5
    logs: list[LogEntry] = field(default_factory=list)
    # Winning player id, "draw", or None while the match is ongoing
    winner: int | str | None = None
    # UI-only selection pointer
    selected_node: str | None = None
    # Set while an automated action (AI think time, catastrophe roll) is in flight
    is_processing: bool = False
    # Round whose catastrophe has been announced but not yet rolled
    pending_catastrophe: int | None = None
    map_id: str | None = None
    log_counter: int = 0

    def copy(self) -> "GameState":
        """Return a deep copy of this game state."""
        return deepcopy(self)

    @property
    def current_player(self) -> PlayerState:
        return self.players[self.current_player_index]

    @property
    def in_setup(self) -> bool:
        return self.turn_count < SETUP_TURNS

    def get_player(self, player_id: int) -> PlayerState | None:
        for player in self.players:
            if player.id == player_id:
                return player
        return None

    def add_log(self, text: str, category: str = "info") -> LogEntry:
        """Append a log entry with a generated id."""
        self.log_counter += 1
        entry = LogEntry(
            id=f"log_{self.log_counter:04d}",
            text=text,
            category=category,
            timestamp=time.time(),
        )
        self.logs.append(entry)
        return entry

    # ===== Serialization =====

    def to_dict(self) -> dict[str, Any]:
        """Read-only snapshot for renderers and the API."""
        return {
            "territories": {
                tid: ts.to_dict() for tid, ts in self.territories.items()
            },
            "players": [p.to_dict() for p in self.players],
            "turn_count": self.turn_count,
            "round_count": self.round_count,
            "current_player_index": self.current_player_index,
            "catastrophe_interval": self.catastrophe_interval,
            "logs": [entry.to_dict() for entry in self.logs],
            "winner": self.winner,
            "selected_node": self.selected_node,
            "is_processing": self.is_processing,
            "pending_catastrophe": self.pending_catastrophe,
            "map_id": self.map_id,
            "phase": "setup" if self.in_setup else "main",
        }
