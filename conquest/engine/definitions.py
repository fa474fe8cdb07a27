"""
Static map definitions.
All map data lives under data/maps/<map_id>/: map.json (nodes with raw positions, edges)
and optional manifest.json (display_name).
The engine treats a loaded map as a read-only graph.
"""

import json
from dataclasses import dataclass, field
from pathlib import Path

DATA_DIR = Path(__file__).parent.parent / "data"
MAPS_DIR = DATA_DIR / "maps"


def _default_map_id() -> str:
    """Single place for default: conquest.config.DEFAULT_MAP_ID."""
    from conquest.config import DEFAULT_MAP_ID
    return DEFAULT_MAP_ID


def _map_dir(map_id: str) -> Path:
    return MAPS_DIR / map_id


@dataclass
class MapDefinition:
    """Immutable node graph: node ids (in board order) and undirected edges."""
    id: str
    display_name: str
    nodes: list[str]
    edges: list[tuple[str, str]]
    # node_id -> (x, y) in map units; renderers only
    positions: dict[str, tuple[float, float]] = field(default_factory=dict)
    _adjacency: dict[str, list[str]] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self):
        adjacency: dict[str, list[str]] = {node: [] for node in self.nodes}
        for a, b in self.edges:
            if a not in adjacency or b not in adjacency:
                raise ValueError(f"Edge {a}-{b} references unknown node")
            if b not in adjacency[a]:
                adjacency[a].append(b)
            if a not in adjacency[b]:
                adjacency[b].append(a)
        self._adjacency = adjacency

    def neighbors(self, node_id: str) -> list[str]:
        """Neighbours of a node, in edge-list order."""
        return list(self._adjacency.get(node_id, []))

    def is_adjacent(self, a: str, b: str) -> bool:
        return b in self._adjacency.get(a, [])

    def has_node(self, node_id: str) -> bool:
        return node_id in self._adjacency

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "display_name": self.display_name,
            "nodes": list(self.nodes),
            "edges": [list(e) for e in self.edges],
            "positions": {k: list(v) for k, v in self.positions.items()},
        }


def map_from_edges(
    edges: list[tuple[str, str]],
    nodes: list[str] | None = None,
    map_id: str = "custom",
) -> MapDefinition:
    """
    Build a map from an edge list. Node order is the order of first appearance
    unless nodes is given (needed for isolated nodes).
    Example: map_from_edges([("A", "B")])
    """
    if nodes is None:
        nodes = []
        for a, b in edges:
            for n in (a, b):
                if n not in nodes:
                    nodes.append(n)
    return MapDefinition(
        id=map_id,
        display_name=map_id,
        nodes=list(nodes),
        edges=[(a, b) for a, b in edges],
    )


def list_maps() -> list[dict]:
    """Return [{ id, display_name }, ...] for all maps (subdirs of data/maps/ with map.json)."""
    out = []
    if not MAPS_DIR.exists():
        return out
    for d in sorted(MAPS_DIR.iterdir()):
        if not d.is_dir() or not (d / "map.json").exists():
            continue
        map_id = d.name
        manifest_path = d / "manifest.json"
        if manifest_path.exists():
            try:
                with open(manifest_path, "r") as f:
                    m = json.load(f)
                out.append({
                    "id": m.get("id", map_id),
                    "display_name": m.get("display_name", map_id),
                })
            except (json.JSONDecodeError, OSError):
                out.append({"id": map_id, "display_name": map_id})
        else:
            out.append({"id": map_id, "display_name": map_id})
    return out


def load_map(
    map_id: str | None = None,
    data_dir: Path | str | None = None,
) -> MapDefinition:
    """
    Load a map definition.

    Args:
        map_id: Use data/maps/<map_id>/ (default: conquest.config.DEFAULT_MAP_ID).
        data_dir: Directory containing map.json; takes precedence over map_id.

    Raises FileNotFoundError if the map does not exist.
    """
    if data_dir is not None:
        map_dir = Path(data_dir)
    else:
        map_dir = _map_dir(map_id or _default_map_id())

    map_path = map_dir / "map.json"
    if not map_path.exists():
        raise FileNotFoundError(f"Map not found: {map_dir.name}")
    with open(map_path, "r") as f:
        data = json.load(f)

    raw_nodes = data.get("nodes") or {}
    if isinstance(raw_nodes, dict):
        nodes = list(raw_nodes.keys())
        positions = {
            node: (float(pos[0]), float(pos[1]))
            for node, pos in raw_nodes.items()
            if isinstance(pos, list) and len(pos) == 2
        }
    else:
        nodes = [str(n) for n in raw_nodes]
        positions = {}

    display_name = data.get("display_name", data.get("id", map_dir.name))
    manifest_path = map_dir / "manifest.json"
    if manifest_path.exists():
        try:
            with open(manifest_path, "r") as f:
                display_name = json.load(f).get("display_name", display_name)
        except (json.JSONDecodeError, OSError):
            pass

    return MapDefinition(
        id=data.get("id", map_dir.name),
        display_name=display_name,
        nodes=nodes,
        edges=[(str(a), str(b)) for a, b in data.get("edges", [])],
        positions=positions,
    )
