# =============================================================================
# Grid Skirmish - Enumerations
# =============================================================================
"""
All enumeration types used throughout the game.
These define the discrete values for game elements.
"""

from enum import Enum, auto
from typing import Tuple


class Player(Enum):
    """
    The two opposing sides of a skirmish.

    The value doubles as the player number used by the host simulation.
    """
    MAX = 0     # Footmen - hunt the archers, maximize utility
    MIN = 1     # Archers - evade the footmen, minimize utility

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def opponent(self) -> 'Player':
        """Return the opposing side"""
        if self == Player.MAX:
            return Player.MIN
        return Player.MAX

    @property
    def is_maximizer(self) -> bool:
        """Whether this side maximizes the utility"""
        return self == Player.MAX

    @property
    def unit_name(self) -> str:
        """Name of the units this side controls"""
        return "footman" if self == Player.MAX else "archer"

    @property
    def symbol(self) -> str:
        """Return ASCII symbol for board display"""
        return "F" if self == Player.MAX else "A"


NUM_PLAYERS = len(Player)


class Direction(Enum):
    """
    Primitive move directions.
    Screen coordinates: x grows to the east, y grows to the south.
    """
    NORTH = auto()
    EAST = auto()
    WEST = auto()
    SOUTH = auto()

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def offset(self) -> Tuple[int, int]:
        """(dx, dy) applied to a position moving in this direction"""
        offsets = {
            Direction.NORTH: (0, -1),
            Direction.EAST: (1, 0),
            Direction.WEST: (-1, 0),
            Direction.SOUTH: (0, 1),
        }
        return offsets[self]

    @property
    def x_component(self) -> int:
        return self.offset[0]

    @property
    def y_component(self) -> int:
        return self.offset[1]

    @property
    def symbol(self) -> str:
        """Arrow used when printing moves"""
        symbols = {
            Direction.NORTH: "^",
            Direction.EAST: ">",
            Direction.WEST: "<",
            Direction.SOUTH: "v",
        }
        return symbols[self]


# Generation order matters: ties in the search keep the earliest direction.
CARDINAL_DIRECTIONS: Tuple[Direction, ...] = (
    Direction.NORTH,
    Direction.EAST,
    Direction.WEST,
    Direction.SOUTH,
)


class VictoryCondition(Enum):
    """
    Ways a skirmish can end.
    """
    TARGET_ENGAGED = auto()         # A footman got an archer within attack range
    SURVIVED_TIME_LIMIT = auto()    # The archers evaded until the turn limit

    def __str__(self) -> str:
        return self.name.lower().replace("_", " ")

    @property
    def winner(self) -> Player:
        """Which side wins under this condition"""
        if self == VictoryCondition.TARGET_ENGAGED:
            return Player.MAX
        return Player.MIN


class MapLayout(Enum):
    """
    Obstacle arrangements produced by the map layout generator.
    """
    OPEN = "open"               # No obstacles
    SCATTERED = "scattered"     # Random single-cell obstacles
    WALLS = "walls"             # Short wall segments with gaps

    def __str__(self) -> str:
        return self.value


class Difficulty(Enum):
    """
    Difficulty presets affecting map size and how deep the AI searches.
    """
    EASY = 1
    MEDIUM = 2
    HARD = 3
    EXPERT = 4

    def __str__(self) -> str:
        return self.name.lower()

    @property
    def search_depth(self) -> int:
        """Ply budget handed to the MinMax agent"""
        depths = {
            Difficulty.EASY: 1,
            Difficulty.MEDIUM: 2,
            Difficulty.HARD: 3,
            Difficulty.EXPERT: 4,
        }
        return depths.get(self, 2)

    @property
    def map_size(self) -> Tuple[int, int]:
        """(width, height) of generated maps"""
        sizes = {
            Difficulty.EASY: (8, 8),
            Difficulty.MEDIUM: (10, 10),
            Difficulty.HARD: (12, 12),
            Difficulty.EXPERT: (16, 16),
        }
        return sizes.get(self, (10, 10))

    @property
    def max_turns(self) -> int:
        """Turns the archers must survive"""
        turns = {
            Difficulty.EASY: 30,
            Difficulty.MEDIUM: 40,
            Difficulty.HARD: 50,
            Difficulty.EXPERT: 60,
        }
        return turns.get(self, 40)

    @property
    def obstacle_density(self) -> float:
        """Fraction of free cells turned into obstacles"""
        densities = {
            Difficulty.EASY: 0.0,
            Difficulty.MEDIUM: 0.05,
            Difficulty.HARD: 0.08,
            Difficulty.EXPERT: 0.1,
        }
        return densities.get(self, 0.05)
