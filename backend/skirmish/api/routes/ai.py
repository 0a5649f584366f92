"""
AI Routes

REST API endpoints for the MinMax agent:
- Describe the available agent
- Run a one-off search on a snapshot
- Play a full AI vs AI match
"""

from fastapi import APIRouter, HTTPException, Path, Body
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any
import logging
import time

from ...core import (
    GameState, StateSnapshot, SearchTreeNode, GameConfig,
    Difficulty, MapLayout, play_ai_game
)
from ...core.game_state import finite_or_none
from ...ai import AlphaBetaSearch

logger = logging.getLogger(__name__)

router = APIRouter()

# Largest unpruned tree /move will search
MAX_SEARCH_TREE = 250_000
MAX_SNAPSHOT_UNITS = 16


# =============================================================================
# Pydantic Models
# =============================================================================

class AIAgentInfo(BaseModel):
    """Information about an AI agent"""
    name: str
    type: str
    description: str
    parameters: Dict[str, Any]
    strengths: List[str]


class UnitModel(BaseModel):
    """A unit in a search request"""
    id: int = Field(..., ge=0)
    player: str = Field(..., description="MAX (footmen) or MIN (archers)")
    x: int
    y: int
    health: int = 100
    attack_range: int = 1


class SnapshotModel(BaseModel):
    """A full turn snapshot"""
    x_extent: int = Field(..., ge=1, le=64)
    y_extent: int = Field(..., ge=1, le=64)
    units: List[UnitModel] = Field(default_factory=list, max_length=MAX_SNAPSHOT_UNITS)
    obstacles: List[List[int]] = Field(default_factory=list)
    turn_number: int = Field(default=0, ge=0)
    player_to_move: str = Field(default="MAX")


class SearchRequest(BaseModel):
    """Request for a MinMax move on an arbitrary snapshot"""
    snapshot: SnapshotModel
    depth: int = Field(default=2, ge=1, le=6, description="Plies to search")

    class Config:
        json_schema_extra = {
            "example": {
                "snapshot": {
                    "x_extent": 10,
                    "y_extent": 10,
                    "units": [
                        {"id": 0, "player": "MAX", "x": 1, "y": 1},
                        {"id": 1, "player": "MIN", "x": 8, "y": 8}
                    ],
                    "obstacles": [],
                    "player_to_move": "MAX"
                },
                "depth": 1
            }
        }


class SearchResponse(BaseModel):
    """Response with the agent's chosen joint move"""
    player: str
    moves: Dict[str, str]
    value: Optional[float]
    root_utility: Optional[float]
    nodes_searched: int
    nodes_pruned: int
    time_taken: float


class MatchRequest(BaseModel):
    """Configuration for an AI vs AI match"""
    difficulty: str = Field(default="easy", description="Game difficulty")
    layout: str = Field(default="scattered", description="Obstacle layout")
    seed: Optional[int] = Field(default=None)
    max_depth: int = Field(default=1, ge=1, le=3, description="Footman search depth")
    min_depth: int = Field(default=1, ge=1, le=3, description="Archer search depth")
    max_turns: Optional[int] = Field(default=None, ge=1, le=100)


class MatchResult(BaseModel):
    """Result of an AI vs AI match"""
    winner: str
    victory_condition: str
    total_turns: int
    moves: List[Dict[str, Any]]


# =============================================================================
# Available Agents
# =============================================================================

AGENT_INFO = {
    "minmax": AIAgentInfo(
        name="MinMax Agent",
        type="minmax",
        description="Hand-coded game tree search with Alpha-Beta pruning over joint moves",
        parameters={
            "depth": "Plies to search (1-6)",
        },
        strengths=[
            "Optimal play within search depth",
            "Deterministic and explainable decisions",
            "No training required",
        ]
    ),
}


# =============================================================================
# API Endpoints
# =============================================================================

@router.get("/agents", response_model=List[AIAgentInfo])
async def list_agents():
    """
    List all available AI agents with their configurations.
    """
    return list(AGENT_INFO.values())


@router.get("/agents/{agent_type}", response_model=AIAgentInfo)
async def get_agent_info(agent_type: str = Path(..., description="Agent type")):
    """
    Get detailed information about a specific AI agent.
    """
    if agent_type not in AGENT_INFO:
        raise HTTPException(status_code=404, detail=f"Agent type '{agent_type}' not found")

    return AGENT_INFO[agent_type]


@router.post("/move", response_model=SearchResponse)
async def get_minmax_move(request: SearchRequest = Body(...)):
    """
    Run one Alpha-Beta search on a snapshot.

    The snapshot is validated first: units and obstacles must be on the
    map and may not share cells. Searches whose unpruned tree would exceed
    MAX_SEARCH_TREE nodes are refused.
    """
    try:
        snapshot = StateSnapshot.from_dict(request.snapshot.model_dump())
        snapshot.validate()
    except (KeyError, IndexError, ValueError) as e:
        raise HTTPException(status_code=400, detail=f"Invalid snapshot: {e}")

    state = GameState.from_snapshot(snapshot)
    tree_size = AlphaBetaSearch.full_tree_size(state, request.depth)
    if tree_size > MAX_SEARCH_TREE:
        raise HTTPException(
            status_code=400,
            detail=f"Search too large: {tree_size} nodes at depth {request.depth}, limit {MAX_SEARCH_TREE}"
        )

    searcher = AlphaBetaSearch()

    start_time = time.time()
    best, value = searcher.search_with_value(SearchTreeNode.root(state), request.depth)
    time_taken = time.time() - start_time

    logger.info("Search at depth %d: %s (%d nodes)",
                request.depth, best.describe_move(), searcher.nodes_searched)

    return SearchResponse(
        player=state.player.name,
        moves={str(uid): d.name for uid, d in sorted(best.joint_move.items())},
        value=finite_or_none(value),
        root_utility=finite_or_none(state.utility()),
        nodes_searched=searcher.nodes_searched,
        nodes_pruned=searcher.nodes_pruned,
        time_taken=time_taken
    )


@router.post("/match", response_model=MatchResult)
async def run_match(request: MatchRequest = Body(default_factory=MatchRequest)):
    """
    Play MinMax footmen against MinMax archers to the end.
    """
    try:
        difficulty = Difficulty[request.difficulty.upper()]
        layout = MapLayout(request.layout.lower())
    except (KeyError, ValueError):
        raise HTTPException(
            status_code=400,
            detail=f"Unknown difficulty or layout: {request.difficulty}/{request.layout}"
        )

    config = GameConfig.from_difficulty(difficulty, seed=request.seed, layout=layout)
    if request.max_turns is not None:
        config.max_turns = request.max_turns

    results = play_ai_game(config, max_depth=request.max_depth, min_depth=request.min_depth)

    return MatchResult(
        winner=results["winner"],
        victory_condition=results["victory_condition"],
        total_turns=results["turns"],
        moves=results["moves"]
    )
