"""
Game Routes

REST API endpoints for game management:
- Create/list/get/delete games
- Submit joint moves
- Let the MinMax agent move
- Get move history
"""

from fastapi import APIRouter, HTTPException, Query, Path, Body
from pydantic import BaseModel, Field
from typing import Dict, List, Optional, Any
from enum import Enum
import uuid

from ...core import (
    SkirmishEngine, GameConfig, Player, Direction, Difficulty, MapLayout
)
from ...core.game_state import finite_or_none
from ...ai import MinMaxAgent

router = APIRouter()


# =============================================================================
# Pydantic Models for Request/Response
# =============================================================================

class DifficultyLevel(str, Enum):
    """Difficulty levels for API"""
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"
    EXPERT = "expert"


class LayoutType(str, Enum):
    """Obstacle layouts for API"""
    OPEN = "open"
    SCATTERED = "scattered"
    WALLS = "walls"


class SideChoice(str, Enum):
    """Which side a human controls"""
    MAX = "max"
    MIN = "min"
    NONE = "none"


class CreateGameRequest(BaseModel):
    """Request model for creating a new game"""
    difficulty: DifficultyLevel = DifficultyLevel.MEDIUM
    layout: LayoutType = Field(default=LayoutType.SCATTERED, description="Obstacle layout")
    seed: Optional[int] = Field(default=None, description="Random seed for the map")
    width: Optional[int] = Field(default=None, ge=4, le=32, description="Override map width")
    height: Optional[int] = Field(default=None, ge=4, le=32, description="Override map height")
    max_turns: Optional[int] = Field(default=None, ge=1, description="Override max turns")
    search_depth: Optional[int] = Field(default=None, ge=1, le=6, description="Override AI search depth")
    human_player: SideChoice = Field(default=SideChoice.MIN, description="Side played through /moves")

    class Config:
        json_schema_extra = {
            "example": {
                "difficulty": "medium",
                "layout": "scattered",
                "seed": 42,
                "human_player": "min"
            }
        }


class MovesRequest(BaseModel):
    """Request model for a joint move: unit id -> direction"""
    moves: Dict[int, str] = Field(default_factory=dict, description="Unit id to direction")

    class Config:
        json_schema_extra = {
            "example": {
                "moves": {"2": "north", "3": "west"}
            }
        }


class UnitResponse(BaseModel):
    """Response model for a unit"""
    id: int
    player: str
    x: int
    y: int
    health: int
    attack_range: int


class GameStateResponse(BaseModel):
    """Response model for game state"""
    game_id: str
    turn_number: int
    current_player: str
    human_player: str
    x_extent: int
    y_extent: int
    units: List[UnitResponse]
    obstacles: List[List[int]]
    board: List[str]
    utility: Optional[float]
    max_turns: int
    game_over: bool
    winner: Optional[str] = None
    victory_condition: Optional[str] = None


class MoveResultResponse(BaseModel):
    """Response model for a joint move result"""
    success: bool
    message: str
    applied: Dict[str, str]
    rejected: Dict[str, str]
    game_state: GameStateResponse


# =============================================================================
# Game Storage (In-Memory for now)
# =============================================================================

games_store: Dict[str, Dict] = {}


def get_difficulty_enum(level: DifficultyLevel) -> Difficulty:
    """Convert API difficulty to game enum"""
    mapping = {
        DifficultyLevel.EASY: Difficulty.EASY,
        DifficultyLevel.MEDIUM: Difficulty.MEDIUM,
        DifficultyLevel.HARD: Difficulty.HARD,
        DifficultyLevel.EXPERT: Difficulty.EXPERT
    }
    return mapping.get(level, Difficulty.MEDIUM)


def build_config(request: CreateGameRequest) -> GameConfig:
    """Difficulty preset plus any explicit overrides"""
    config = GameConfig.from_difficulty(
        get_difficulty_enum(request.difficulty),
        seed=request.seed,
        layout=MapLayout(request.layout.value)
    )
    if request.width is not None:
        config.width = request.width
    if request.height is not None:
        config.height = request.height
    if request.max_turns is not None:
        config.max_turns = request.max_turns
    if request.search_depth is not None:
        config.search_depth = request.search_depth
    return config


def parse_moves(raw: Dict[int, str]) -> Dict[int, Direction]:
    """Convert direction names to Direction, 400 on unknown names"""
    moves = {}
    for unit_id, name in raw.items():
        try:
            moves[unit_id] = Direction[name.upper()]
        except KeyError:
            raise HTTPException(status_code=400, detail=f"Invalid direction: {name}")
    return moves


def side_name(player: Optional[Player]) -> str:
    return player.name if player else "NONE"


def get_engine(game_id: str) -> SkirmishEngine:
    if game_id not in games_store:
        raise HTTPException(status_code=404, detail="Game not found")
    return games_store[game_id]["engine"]


def game_state_to_response(engine: SkirmishEngine, game_id: str) -> GameStateResponse:
    """Convert game engine state to API response"""
    snapshot = engine.get_snapshot()
    state = engine.get_state()

    return GameStateResponse(
        game_id=game_id,
        turn_number=snapshot.turn_number,
        current_player=snapshot.player_to_move.name,
        human_player=side_name(games_store[game_id]["human_player"]),
        x_extent=snapshot.x_extent,
        y_extent=snapshot.y_extent,
        units=[UnitResponse(**u.to_dict()) for u in snapshot.units],
        obstacles=[[p.x, p.y] for p in snapshot.obstacles],
        board=state.render().split("\n"),
        utility=finite_or_none(state.utility()),
        max_turns=engine.config.max_turns,
        game_over=engine.is_game_over(),
        winner=engine.winner.name if engine.winner else None,
        victory_condition=engine.victory_condition.name if engine.victory_condition else None
    )


def result_to_response(engine: SkirmishEngine, game_id: str, result) -> MoveResultResponse:
    return MoveResultResponse(
        success=result.success,
        message=result.message,
        applied={str(uid): d.name for uid, d in result.applied.items()},
        rejected={str(uid): reason for uid, reason in result.rejected.items()},
        game_state=game_state_to_response(engine, game_id)
    )


# =============================================================================
# API Endpoints
# =============================================================================

@router.post("/", response_model=GameStateResponse)
async def create_new_game(request: CreateGameRequest = Body(default_factory=CreateGameRequest)):
    """
    Create a new game session.

    Returns the initial game state.
    """
    config = build_config(request)
    engine = SkirmishEngine(config)
    try:
        engine.initialize_game()
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    # Generate game ID
    game_id = str(uuid.uuid4())

    human = None if request.human_player == SideChoice.NONE \
        else Player[request.human_player.name]
    games_store[game_id] = {
        "engine": engine,
        "human_player": human,
        "agents": {},
    }

    return game_state_to_response(engine, game_id)


@router.get("/", response_model=List[Dict[str, Any]])
async def list_games(
    active_only: bool = Query(default=True, description="Only return active games")
):
    """
    List all game sessions.
    """
    games = []
    for game_id, game_data in games_store.items():
        engine = game_data["engine"]
        is_active = not engine.is_game_over()

        if active_only and not is_active:
            continue

        games.append({
            "game_id": game_id,
            "turn_number": engine.turn_number,
            "current_player": engine.current_player.name,
            "human_player": side_name(game_data["human_player"]),
            "is_active": is_active
        })

    return games


@router.get("/{game_id}", response_model=GameStateResponse)
async def get_game(game_id: str = Path(..., description="Game ID")):
    """
    Get the current state of a game.
    """
    engine = get_engine(game_id)
    return game_state_to_response(engine, game_id)


@router.post("/{game_id}/moves", response_model=MoveResultResponse)
async def submit_moves(
    game_id: str = Path(..., description="Game ID"),
    request: MovesRequest = Body(...)
):
    """
    Submit a joint move for the side to move.

    Moves that are blocked or name another side's unit are reported as
    rejected; the turn passes either way.
    """
    engine = get_engine(game_id)

    # Check if game is over
    if engine.is_game_over():
        raise HTTPException(status_code=400, detail="Game is already over")

    moves = parse_moves(request.moves)
    result = engine.perform_moves(moves)

    return result_to_response(engine, game_id, result)


@router.post("/{game_id}/ai-move", response_model=MoveResultResponse)
async def execute_ai_move(
    game_id: str = Path(..., description="Game ID"),
    search_depth: Optional[int] = Query(default=None, ge=1, le=6, description="Override search depth")
):
    """
    Let the MinMax agent move for the side to move.

    Returns the agent's joint move and updated game state.
    """
    engine = get_engine(game_id)
    game_data = games_store[game_id]

    # Check if game is over
    if engine.is_game_over():
        raise HTTPException(status_code=400, detail="Game is already over")

    # Check if it's AI's turn
    player = engine.current_player
    if game_data["human_player"] == player:
        raise HTTPException(status_code=400, detail="Not AI's turn")

    depth = search_depth or engine.config.search_depth
    agent = game_data["agents"].get(player)
    if agent is None or agent.max_depth != depth:
        agent = MinMaxAgent(player=player, max_depth=depth)
        game_data["agents"][player] = agent

    moves = agent.middle_step(engine.get_snapshot())
    result = engine.perform_moves(moves)

    response = result_to_response(engine, game_id, result)
    response.message = f"AI (minmax, depth {depth}): {result.message}"
    return response


@router.delete("/{game_id}")
async def delete_game(game_id: str = Path(..., description="Game ID")):
    """
    Delete a game session.
    """
    get_engine(game_id)
    del games_store[game_id]

    return {"message": "Game deleted", "game_id": game_id}


@router.get("/{game_id}/history", response_model=List[Dict[str, Any]])
async def get_game_history(game_id: str = Path(..., description="Game ID")):
    """
    Get the move history of a game.
    """
    engine = get_engine(game_id)

    history = []
    for i, entry in enumerate(engine.get_history()):
        entry["index"] = i
        history.append(entry)

    return history
