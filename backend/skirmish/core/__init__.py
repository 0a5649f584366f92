# =============================================================================
# Core Game Module
# =============================================================================
"""
Core game components including:
- Game state representation and utility
- Move generation
- Map layouts
- Host simulation and victory conditions
"""

from .enums import (
    Player, Direction, CARDINAL_DIRECTIONS, NUM_PLAYERS,
    VictoryCondition, MapLayout, Difficulty
)
from .data_structures import (
    Position, UnitSnapshot, StateSnapshot, GameConfig, MoveResult
)
from .game_state import GameState
from .move_generator import SearchTreeNode, MoveGenerator, generate_children
from .map_layout import MapLayoutGenerator, generate_layout
from .game_engine import SkirmishEngine, GameEvent, GameEventType, create_game, play_ai_game

__all__ = [
    # Enums
    "Player", "Direction", "CARDINAL_DIRECTIONS", "NUM_PLAYERS",
    "VictoryCondition", "MapLayout", "Difficulty",
    # Data structures
    "Position", "UnitSnapshot", "StateSnapshot", "GameConfig", "MoveResult",
    # Core classes
    "GameState", "SearchTreeNode", "MoveGenerator", "generate_children",
    "MapLayoutGenerator", "generate_layout",
    "SkirmishEngine", "GameEvent", "GameEventType",
    # Convenience functions
    "create_game", "play_ai_game",
]
