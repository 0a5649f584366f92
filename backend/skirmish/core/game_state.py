# =============================================================================
# Grid Skirmish - Game State
# =============================================================================
"""
The abstract game state searched by the MinMax agent.

A GameState is a value snapshot of one ply: where every footman and archer
stands, where the obstacles are, and which side moves next. It scores itself
with a positional utility and derives independent child states for the
search. Nothing in here mutates a state after construction.
"""

import math
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Dict, FrozenSet, Mapping, Optional, Any
import numpy as np

from .enums import Player, Direction
from .data_structures import Position, StateSnapshot, UnitSnapshot


# Feature weights of the utility function
TARGET_WEIGHT = 100.0
CORNER_WEIGHT = 100.0
OBSTACLE_WEIGHT = 1.0

# Cell codes used by GameState.to_array()
CELL_EMPTY = 0
CELL_OBSTACLE = 1
CELL_FOOTMAN = 2
CELL_ARCHER = 3


def inverse_square(distance: int) -> float:
    """distance ** -2, saturating to +inf at zero like IEEE pow()"""
    if distance == 0:
        return math.inf
    return 1.0 / (distance * distance)


def finite_or_none(value: float) -> Optional[float]:
    """JSON has no infinity; report saturated utilities as null"""
    return value if math.isfinite(value) else None


@lru_cache(maxsize=64)
def obstacle_mask(obstacles: FrozenSet[Position], x_extent: int, y_extent: int) -> np.ndarray:
    """
    Read-only (y, x) boolean grid of obstacle cells.

    Obstacles never change during a search, so every state sharing the same
    obstacle set shares one mask.
    """
    mask = np.zeros((y_extent, x_extent), dtype=bool)
    for x, y in obstacles:
        if 0 <= x < x_extent and 0 <= y < y_extent:
            mask[y, x] = True
    mask.setflags(write=False)
    return mask


@dataclass
class GameState:
    """
    Snapshot of unit positions, obstacles and turn bookkeeping.

    Player.MAX owns the footmen (max_units) and Player.MIN owns the archers
    (min_units). Each state owns its own dictionaries; positions are
    immutable tuples so copying the dictionaries is a full copy.
    """

    # ==========================================================================
    # Map
    # ==========================================================================
    x_extent: int
    y_extent: int
    obstacles: FrozenSet[Position] = field(default_factory=frozenset)

    # ==========================================================================
    # Units
    # ==========================================================================
    max_units: Dict[int, Position] = field(default_factory=dict)
    min_units: Dict[int, Position] = field(default_factory=dict)
    unit_health: Dict[int, int] = field(default_factory=dict)
    unit_attack_range: Dict[int, int] = field(default_factory=dict)

    # ==========================================================================
    # Turn Bookkeeping
    # ==========================================================================
    to_move: Player = Player.MAX
    turn_number: int = 0

    # ==========================================================================
    # Construction
    # ==========================================================================

    @classmethod
    def from_snapshot(cls, snapshot: StateSnapshot) -> 'GameState':
        """Copy everything the search needs out of a host snapshot"""
        max_units = {}
        min_units = {}
        for unit in snapshot.units:
            roster = max_units if unit.player == Player.MAX else min_units
            roster[unit.id] = Position(unit.x, unit.y)

        return cls(
            x_extent=snapshot.x_extent,
            y_extent=snapshot.y_extent,
            obstacles=frozenset(Position(*p) for p in snapshot.obstacles),
            max_units=max_units,
            min_units=min_units,
            unit_health={u.id: u.health for u in snapshot.units},
            unit_attack_range={u.id: u.attack_range for u in snapshot.units},
            to_move=snapshot.player_to_move,
            turn_number=snapshot.turn_number,
        )

    def to_snapshot(self) -> StateSnapshot:
        """Inverse of from_snapshot"""
        units = []
        for player in Player:
            for unit_id, pos in sorted(self.units_of(player).items()):
                units.append(UnitSnapshot(
                    id=unit_id,
                    player=player,
                    x=pos.x,
                    y=pos.y,
                    health=self.unit_health.get(unit_id, 0),
                    attack_range=self.unit_attack_range.get(unit_id, 0),
                ))
        return StateSnapshot(
            x_extent=self.x_extent,
            y_extent=self.y_extent,
            units=units,
            obstacles=sorted(self.obstacles),
            turn_number=self.turn_number,
            player_to_move=self.to_move,
        )

    # ==========================================================================
    # Player Access
    # ==========================================================================

    @property
    def player(self) -> Player:
        """The side whose units move this ply"""
        return self.to_move

    def units_of(self, player: Player) -> Dict[int, Position]:
        """Units controlled by a side"""
        if player == Player.MAX:
            return self.max_units
        return self.min_units

    def unit_position(self, unit_id: int) -> Optional[Position]:
        """Position of a unit from either side, None if it is gone"""
        if unit_id in self.max_units:
            return self.max_units[unit_id]
        return self.min_units.get(unit_id)

    # ==========================================================================
    # Geometry
    # ==========================================================================

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.x_extent and 0 <= y < self.y_extent

    def is_occupied_by_unit(self, x: int, y: int) -> bool:
        pos = Position(x, y)
        return pos in self.max_units.values() or pos in self.min_units.values()

    def position_available(self, x: int, y: int) -> bool:
        """In bounds, no unit standing there, and not an obstacle"""
        return (
            self.in_bounds(x, y)
            and not self.is_occupied_by_unit(x, y)
            and Position(x, y) not in self.obstacles
        )

    def distance(self, unit_a: int, unit_b: int) -> int:
        """
        Chebyshev distance between two units.
        Returns 0 when either unit is no longer on the map.
        """
        pos_a = self.unit_position(unit_a)
        pos_b = self.unit_position(unit_b)
        if pos_a is None or pos_b is None:
            return 0
        return pos_a.chebyshev(pos_b)

    def nearest_target(self, footman_id: int) -> Optional[int]:
        """
        The archer closest to a footman.
        Ties keep the lowest archer id; None when there are no archers.
        """
        footman = self.max_units.get(footman_id)
        if footman is None:
            return None

        closest = None
        best = None
        for archer_id in sorted(self.min_units):
            d = footman.chebyshev(self.min_units[archer_id])
            if best is None or d < best:
                closest = archer_id
                best = d
        return closest

    def nearest_corner(self, pos: Position) -> Position:
        """Snap each axis to 0 or extent - 1, whichever is closer (half rounds up)"""
        return Position(
            self._snap_to_edge(pos.x, self.x_extent),
            self._snap_to_edge(pos.y, self.y_extent),
        )

    @staticmethod
    def _snap_to_edge(value: int, extent: int) -> int:
        edge = extent - 1
        if edge <= 0:
            return 0
        return int(math.floor(value / edge + 0.5)) * edge

    # ==========================================================================
    # Utility
    # ==========================================================================

    def utility(self) -> float:
        """
        Weighted sum of three positional features, from the footmen's view.

        - target proximity: footmen close to their nearest archer
        - cornering: archers pinned close to a map corner
        - obstacle interference: obstacles between a footman and its target
        """
        return (
            TARGET_WEIGHT * self.target_proximity()
            + CORNER_WEIGHT * self.cornering()
            + OBSTACLE_WEIGHT * self.obstacle_interference()
        )

    def target_proximity(self) -> float:
        total = 0.0
        for footman_id, footman in self.max_units.items():
            target = self.nearest_target(footman_id)
            if target is None:
                continue
            total += inverse_square(footman.chebyshev(self.min_units[target]))
        return total

    def cornering(self) -> float:
        total = 0.0
        for archer in self.min_units.values():
            total += inverse_square(archer.chebyshev(self.nearest_corner(archer)))
        return total

    def obstacle_interference(self) -> float:
        """Minus the obstacle density of each footman-to-target rectangle"""
        if not self.obstacles:
            return 0.0

        mask = obstacle_mask(self.obstacles, self.x_extent, self.y_extent)
        total = 0.0
        for footman_id, footman in self.max_units.items():
            target = self.nearest_target(footman_id)
            if target is None:
                continue
            archer = self.min_units[target]
            x_min, x_max = min(footman.x, archer.x), max(footman.x, archer.x)
            y_min, y_max = min(footman.y, archer.y), max(footman.y, archer.y)

            blocked = int(mask[y_min:y_max + 1, x_min:x_max + 1].sum())
            area = (x_max - x_min + 1) * (y_max - y_min + 1)
            total -= blocked / area
        return total

    # ==========================================================================
    # Derivation (for AI Search)
    # ==========================================================================

    def clone(self) -> 'GameState':
        """
        Create an independent copy of the state.
        The obstacle set is frozen and shared.
        """
        return GameState(
            x_extent=self.x_extent,
            y_extent=self.y_extent,
            obstacles=self.obstacles,
            max_units=dict(self.max_units),
            min_units=dict(self.min_units),
            unit_health=dict(self.unit_health),
            unit_attack_range=dict(self.unit_attack_range),
            to_move=self.to_move,
            turn_number=self.turn_number,
        )

    def derive_child(self, joint_move: Mapping[int, Direction]) -> 'GameState':
        """
        Apply a joint move of the side to move and hand the turn over.

        Legality is the caller's business: moves are translated as given.
        """
        child = self.clone()
        roster = child.units_of(self.to_move)
        for unit_id, direction in joint_move.items():
            roster[unit_id] = roster[unit_id].translate(direction)
        child.to_move = self.to_move.opponent
        child.turn_number = self.turn_number + 1
        return child

    # ==========================================================================
    # Encoding
    # ==========================================================================

    def to_array(self) -> np.ndarray:
        """
        Encode the board as a (y_extent, x_extent) int8 grid of CELL_* codes.
        """
        grid = np.zeros((self.y_extent, self.x_extent), dtype=np.int8)
        grid[obstacle_mask(self.obstacles, self.x_extent, self.y_extent)] = CELL_OBSTACLE
        for pos in self.max_units.values():
            grid[pos.y, pos.x] = CELL_FOOTMAN
        for pos in self.min_units.values():
            grid[pos.y, pos.x] = CELL_ARCHER
        return grid

    def render(self) -> str:
        """ASCII board, one row per line"""
        symbols = {
            CELL_EMPTY: ".",
            CELL_OBSTACLE: "#",
            CELL_FOOTMAN: Player.MAX.symbol,
            CELL_ARCHER: Player.MIN.symbol,
        }
        return "\n".join(
            " ".join(symbols[int(cell)] for cell in row)
            for row in self.to_array()
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert state to dictionary for JSON serialization"""
        return {
            "x_extent": self.x_extent,
            "y_extent": self.y_extent,
            "obstacles": [[p.x, p.y] for p in sorted(self.obstacles)],
            "max_units": {str(uid): [p.x, p.y] for uid, p in sorted(self.max_units.items())},
            "min_units": {str(uid): [p.x, p.y] for uid, p in sorted(self.min_units.items())},
            "unit_health": {str(uid): hp for uid, hp in sorted(self.unit_health.items())},
            "to_move": self.to_move.name,
            "turn_number": self.turn_number,
            "utility": finite_or_none(self.utility()),
        }

    def __str__(self) -> str:
        """Human-readable summary of the state"""
        return "\n".join([
            f"=== Turn {self.turn_number} | {self.to_move.name} to move ===",
            self.render(),
            f"Utility: {self.utility():.3f}",
        ])
