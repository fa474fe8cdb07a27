"""
FastAPI backend for Capital Conquest.
Provides REST API endpoints for match state and player intents.
Matches live in memory for the lifetime of the process.
"""

import logging
import uuid
from typing import Any, Literal

from fastapi import BackgroundTasks, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from conquest.config import (
    DEFAULT_CATASTROPHE_INTERVAL,
    DEFAULT_MAP_ID,
    MAX_CATASTROPHE_INTERVAL,
    MIN_CATASTROPHE_INTERVAL,
)
from conquest.engine.actions import (
    Action,
    attack,
    end_turn,
    fuse,
    move_unit,
    place_capital,
    recruit,
    relocate_capital,
    select_node,
)
from conquest.engine.definitions import MapDefinition, list_maps, load_map
from conquest.engine.events import ACTION_REJECTED, GameEvent
from conquest.engine.queries import get_game_summary, resolve_drag
from conquest.engine.session import GameSession

logger = logging.getLogger(__name__)

app = FastAPI(
    title="Capital Conquest API",
    description="Backend API for Capital Conquest - a two-player territory game",
    version="1.0.0",
)

# CORS configuration for frontend
CORS_ORIGINS = ["http://localhost:5173", "http://localhost:5174", "http://localhost:3000"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    expose_headers=["*"],
)


@app.middleware("http")
async def log_requests(request, call_next):
    """Log method and path so 500s can be traced to the failing endpoint."""
    method = getattr(request, "method", "?")
    url = getattr(request, "url", None)
    path = url.path if url else "?"
    try:
        response = await call_next(request)
        if response.status_code >= 500:
            logger.error("[500] %s %s", method, path)
        return response
    except Exception:
        logger.exception("[500] %s %s (exception)", method, path)
        raise


@app.exception_handler(Exception)
async def unhandled_exception_handler(request, exc):
    """Return 500 with CORS headers so the frontend can read the error."""
    origin = request.headers.get("origin")
    allow_origin = origin if origin in CORS_ORIGINS else CORS_ORIGINS[0]
    return JSONResponse(
        status_code=500,
        content={"detail": str(exc)},
        headers={
            "Access-Control-Allow-Origin": allow_origin,
            "Access-Control-Allow-Credentials": "true",
        },
    )


# In-memory matches; key = game_id
games: dict[str, GameSession] = {}

# Loaded maps; key = map_id
map_cache: dict[str, MapDefinition] = {}


# ===== Pydantic Models =====

class CreateGameRequest(BaseModel):
    vs_ai: bool = True
    catastrophe_interval: int = Field(
        DEFAULT_CATASTROPHE_INTERVAL,
        ge=MIN_CATASTROPHE_INTERVAL,
        le=MAX_CATASTROPHE_INTERVAL,
    )
    """Map id from GET /maps. Omitted = conquest.config.DEFAULT_MAP_ID."""
    map_id: str | None = None
    seed: int | None = None


class CapitalRequest(BaseModel):
    territory_id: str


class MoveRequest(BaseModel):
    from_territory: str
    to_territory: str
    """Omitted = the only movable tier; 400 with the choices when there are several."""
    tier: Literal["peon", "horse", "tank"] | None = None


class AttackRequest(BaseModel):
    from_territory: str
    to_territory: str


class FuseRequest(BaseModel):
    recipe: Literal["peon_to_horse", "horse_to_tank", "peon_to_tank"]
    territory_id: str | None = None


class RelocateCapitalRequest(BaseModel):
    territory_id: str | None = None


class SelectRequest(BaseModel):
    territory_id: str | None = None


# ===== Helpers =====

def get_map(map_id: str) -> MapDefinition:
    """Load a map once and cache it; raise 404 if it does not exist."""
    if map_id not in map_cache:
        try:
            map_cache[map_id] = load_map(map_id)
        except FileNotFoundError:
            raise HTTPException(status_code=404, detail=f"Map {map_id} not found")
    return map_cache[map_id]


def get_session(game_id: str) -> GameSession:
    session = games.get(game_id)
    if session is None:
        raise HTTPException(status_code=404, detail=f"Game {game_id} not found")
    return session


def state_for_response(session: GameSession) -> dict[str, Any]:
    """State dict including the computed summary for the UI."""
    state = session.state
    out = state.to_dict()
    out["summary"] = get_game_summary(state)
    return out


def _submit(
    session: GameSession,
    action: Action,
    background_tasks: BackgroundTasks,
) -> dict[str, Any]:
    """
    Apply a human intent. Rejections become 400 with the rejection reason
    (the reason is also in the game log). AI turns and catastrophes run in
    the background afterwards; clients poll GET /games/{id}.
    """
    events: list[GameEvent] = session.submit(action, automate=False)
    for event in events:
        if event.type == ACTION_REJECTED:
            raise HTTPException(status_code=400, detail=event.payload["reason"])
    background_tasks.add_task(session.run_automation)
    return {
        "state": state_for_response(session),
        "events": [e.to_dict() for e in events],
    }


# ===== API Endpoints =====

@app.get("/")
def root():
    return {"message": "Capital Conquest API", "version": "1.0.0"}


@app.get("/maps")
def get_maps():
    """List available maps."""
    return {"maps": list_maps()}


@app.get("/maps/{map_id}")
def get_map_definition(map_id: str):
    """Nodes, edges and positions of a map."""
    return get_map(map_id).to_dict()


@app.post("/games")
def create_game(request: CreateGameRequest, background_tasks: BackgroundTasks):
    """Start a new match (player vs AI or player vs player)."""
    map_def = get_map(request.map_id or DEFAULT_MAP_ID)
    session = GameSession.new_game(
        map_def,
        vs_ai=request.vs_ai,
        catastrophe_interval=request.catastrophe_interval,
        seed=request.seed,
    )
    game_id = str(uuid.uuid4())
    games[game_id] = session
    logger.info("Created game %s (vs_ai=%s, map=%s)", game_id, request.vs_ai, map_def.id)
    background_tasks.add_task(session.run_automation)
    return {"game_id": game_id, "state": state_for_response(session)}


@app.get("/games/{game_id}")
def get_game_state(game_id: str):
    return {"game_id": game_id, "state": state_for_response(get_session(game_id))}


@app.get("/games/{game_id}/available-actions")
def get_available_actions(game_id: str):
    """Available action types for the current player."""
    summary = get_game_summary(get_session(game_id).state)
    return {
        "current_player": summary["current_player"],
        "available_actions": summary["available_actions"],
    }


@app.post("/games/{game_id}/capital")
def do_place_capital(game_id: str, request: CapitalRequest, background_tasks: BackgroundTasks):
    """Claim an unowned node as capital (setup phase)."""
    session = get_session(game_id)
    action = place_capital(session.state.current_player.id, request.territory_id)
    return _submit(session, action, background_tasks)


@app.post("/games/{game_id}/move")
def do_move(game_id: str, request: MoveRequest, background_tasks: BackgroundTasks):
    """Move one unit to an adjacent node; an enemy-held target resolves as an attack."""
    session = get_session(game_id)
    state = session.state
    player_id = state.current_player.id
    if request.tier is not None:
        action = move_unit(player_id, request.from_territory, request.to_territory, request.tier)
        return _submit(session, action, background_tasks)
    resolution = resolve_drag(
        state, session.map_def, player_id, request.from_territory, request.to_territory
    )
    action = resolution.action
    if resolution.error:
        # Let the engine reject it so the reason lands in the game log
        source = state.territories.get(request.from_territory)
        lowest = source.troops.lowest_tier() if source else None
        action = move_unit(player_id, request.from_territory, request.to_territory, lowest or "peon")
    if action is None:
        raise HTTPException(
            status_code=400,
            detail={"message": "Choose a unit type", "tier_choices": resolution.tier_choices},
        )
    return _submit(session, action, background_tasks)


@app.post("/games/{game_id}/attack")
def do_attack(game_id: str, request: AttackRequest, background_tasks: BackgroundTasks):
    session = get_session(game_id)
    action = attack(session.state.current_player.id, request.from_territory, request.to_territory)
    return _submit(session, action, background_tasks)


@app.post("/games/{game_id}/recruit")
def do_recruit(game_id: str, background_tasks: BackgroundTasks):
    """Recruit one peon at the current player's capital."""
    session = get_session(game_id)
    return _submit(session, recruit(session.state.current_player.id), background_tasks)


@app.post("/games/{game_id}/fuse")
def do_fuse(game_id: str, request: FuseRequest, background_tasks: BackgroundTasks):
    """Fuse units on a territory (default: the selected node)."""
    session = get_session(game_id)
    action = fuse(session.state.current_player.id, request.recipe, request.territory_id)
    return _submit(session, action, background_tasks)


@app.post("/games/{game_id}/relocate-capital")
def do_relocate_capital(
    game_id: str,
    request: RelocateCapitalRequest,
    background_tasks: BackgroundTasks,
):
    """Move the capital (default: to the selected node). Costs 3 turns of rest."""
    session = get_session(game_id)
    action = relocate_capital(session.state.current_player.id, request.territory_id)
    return _submit(session, action, background_tasks)


@app.post("/games/{game_id}/select")
def do_select(game_id: str, request: SelectRequest, background_tasks: BackgroundTasks):
    """Set or clear the selected node. Costs no turn."""
    session = get_session(game_id)
    action = select_node(session.state.current_player.id, request.territory_id)
    return _submit(session, action, background_tasks)


@app.post("/games/{game_id}/end-turn")
def do_end_turn(game_id: str, background_tasks: BackgroundTasks):
    """Pass the turn."""
    session = get_session(game_id)
    return _submit(session, end_turn(session.state.current_player.id), background_tasks)


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
