# =============================================================================
# Grid Skirmish - Core Data Structures
# =============================================================================
"""
Core data structures for representing game elements.
These are the fundamental building blocks shared by the host simulation
and the search.
"""

from dataclasses import dataclass, field
from typing import Dict, List, NamedTuple, Optional, Any

from .enums import Player, Direction, Difficulty, MapLayout


# =============================================================================
# Position
# =============================================================================

class Position(NamedTuple):
    """An integer grid cell. Immutable, so copies may share it."""
    x: int
    y: int

    def translate(self, direction: Direction) -> 'Position':
        """Position one step away in the given direction"""
        dx, dy = direction.offset
        return Position(self.x + dx, self.y + dy)

    def chebyshev(self, other: 'Position') -> int:
        """Chebyshev (king-move) distance to another position"""
        return max(abs(self.x - other.x), abs(self.y - other.y))


# =============================================================================
# Unit Snapshot
# =============================================================================

@dataclass
class UnitSnapshot:
    """
    A single unit as reported by the host simulation.

    Attributes:
        id: Identifier, unique and stable for the whole game
        player: Side the unit belongs to
        x, y: Current grid position
        health: Current hit points
        attack_range: Chebyshev range of the unit's attack
    """
    id: int
    player: Player
    x: int
    y: int
    health: int = 100
    attack_range: int = 1

    @property
    def position(self) -> Position:
        return Position(self.x, self.y)

    def clone(self) -> 'UnitSnapshot':
        """Create a copy of this unit"""
        return UnitSnapshot(
            id=self.id,
            player=self.player,
            x=self.x,
            y=self.y,
            health=self.health,
            attack_range=self.attack_range
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "id": self.id,
            "player": self.player.name,
            "x": self.x,
            "y": self.y,
            "health": self.health,
            "attack_range": self.attack_range,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'UnitSnapshot':
        return cls(
            id=int(data["id"]),
            player=Player[data["player"].upper()],
            x=int(data["x"]),
            y=int(data["y"]),
            health=int(data.get("health", 100)),
            attack_range=int(data.get("attack_range", 1)),
        )


# =============================================================================
# State Snapshot (ingress from the host simulation)
# =============================================================================

@dataclass
class StateSnapshot:
    """
    Everything the search needs to know about one turn of the host game.

    The search copies out of the snapshot once and never mutates it.
    """
    x_extent: int
    y_extent: int
    units: List[UnitSnapshot] = field(default_factory=list)
    obstacles: List[Position] = field(default_factory=list)
    turn_number: int = 0
    player_to_move: Player = Player.MAX

    def units_of(self, player: Player) -> List[UnitSnapshot]:
        """Units belonging to one side, ascending by id"""
        return sorted(
            (u for u in self.units if u.player == player),
            key=lambda u: u.id
        )

    def validate(self):
        """
        Check the snapshot is well formed.

        Raises:
            ValueError: on non-positive extents, duplicate unit ids,
                out-of-bounds positions or two things sharing a cell
        """
        if self.x_extent <= 0 or self.y_extent <= 0:
            raise ValueError(
                f"Map extents must be positive, got {self.x_extent}x{self.y_extent}"
            )

        seen_ids = set()
        occupied: Dict[Position, str] = {}

        for unit in self.units:
            if unit.id in seen_ids:
                raise ValueError(f"Duplicate unit id {unit.id}")
            seen_ids.add(unit.id)
            self._claim(occupied, unit.position, f"unit {unit.id}")

        for obstacle in self.obstacles:
            self._claim(occupied, Position(*obstacle), "an obstacle")

    def _claim(self, occupied: Dict[Position, str], pos: Position, label: str):
        if not (0 <= pos.x < self.x_extent and 0 <= pos.y < self.y_extent):
            raise ValueError(
                f"{label.capitalize()} at ({pos.x}, {pos.y}) is outside the "
                f"{self.x_extent}x{self.y_extent} map"
            )
        if pos in occupied:
            raise ValueError(
                f"{label.capitalize()} at ({pos.x}, {pos.y}) overlaps {occupied[pos]}"
            )
        occupied[pos] = label

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "x_extent": self.x_extent,
            "y_extent": self.y_extent,
            "units": [u.to_dict() for u in self.units],
            "obstacles": [[p[0], p[1]] for p in self.obstacles],
            "turn_number": self.turn_number,
            "player_to_move": self.player_to_move.name,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StateSnapshot':
        return cls(
            x_extent=int(data["x_extent"]),
            y_extent=int(data["y_extent"]),
            units=[UnitSnapshot.from_dict(u) for u in data.get("units", [])],
            obstacles=[Position(int(p[0]), int(p[1])) for p in data.get("obstacles", [])],
            turn_number=int(data.get("turn_number", 0)),
            player_to_move=Player[data.get("player_to_move", "MAX").upper()],
        )


# =============================================================================
# Game Configuration
# =============================================================================

@dataclass
class GameConfig:
    """
    Configuration settings for a game instance.
    """
    # Map
    width: int = 10
    height: int = 10
    layout: MapLayout = MapLayout.SCATTERED
    obstacle_density: float = 0.05

    # Teams
    footmen: int = 2
    archers: int = 2
    footman_health: int = 160
    footman_range: int = 1
    archer_health: int = 50
    archer_range: int = 8

    # Game flow
    max_turns: int = 40
    search_depth: int = 2

    # Random seed for reproducibility
    seed: Optional[int] = None

    @classmethod
    def from_difficulty(
        cls,
        difficulty: Difficulty,
        seed: Optional[int] = None,
        layout: MapLayout = MapLayout.SCATTERED
    ) -> 'GameConfig':
        """Build a configuration from a difficulty preset"""
        width, height = difficulty.map_size
        return cls(
            width=width,
            height=height,
            layout=layout,
            obstacle_density=difficulty.obstacle_density,
            max_turns=difficulty.max_turns,
            search_depth=difficulty.search_depth,
            seed=seed,
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "width": self.width,
            "height": self.height,
            "layout": self.layout.value,
            "obstacle_density": self.obstacle_density,
            "footmen": self.footmen,
            "archers": self.archers,
            "footman_health": self.footman_health,
            "footman_range": self.footman_range,
            "archer_health": self.archer_health,
            "archer_range": self.archer_range,
            "max_turns": self.max_turns,
            "search_depth": self.search_depth,
            "seed": self.seed,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'GameConfig':
        kwargs = dict(data)
        if "layout" in kwargs:
            kwargs["layout"] = MapLayout(kwargs["layout"])
        return cls(**kwargs)


# =============================================================================
# Move Result
# =============================================================================

@dataclass
class MoveResult:
    """
    Result of applying one joint move in the host simulation.
    """
    player: Player
    requested: Dict[int, Direction]
    applied: Dict[int, Direction] = field(default_factory=dict)
    rejected: Dict[int, str] = field(default_factory=dict)
    turn_number: int = 0
    message: str = ""

    @property
    def success(self) -> bool:
        """At least one unit moved, or nothing was asked for"""
        return bool(self.applied) or not self.requested

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "player": self.player.name,
            "requested": {str(uid): d.name for uid, d in self.requested.items()},
            "applied": {str(uid): d.name for uid, d in self.applied.items()},
            "rejected": {str(uid): reason for uid, reason in self.rejected.items()},
            "turn_number": self.turn_number,
            "message": self.message,
            "success": self.success,
        }
