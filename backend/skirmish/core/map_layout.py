# =============================================================================
# Grid Skirmish - Map Layout Generator
# =============================================================================
"""
Generates skirmish maps: unit starting positions and obstacle fields.
Footmen start in the top-left quadrant, archers in the bottom-right.
"""

import random
from typing import List, Optional, Set

from .enums import Player, MapLayout
from .data_structures import Position, UnitSnapshot, StateSnapshot, GameConfig


class MapLayoutGenerator:
    """
    Generates starting snapshots for the host simulation.

    Supports layout types:
    - open: no obstacles
    - scattered: random single-cell obstacles
    - walls: short horizontal and vertical wall segments
    """

    def __init__(self, seed: Optional[int] = None):
        """Initialize the generator with optional seed for reproducibility"""
        self.seed = seed
        self.rng = random.Random(seed)

    def generate(self, config: GameConfig) -> StateSnapshot:
        """
        Generate the opening snapshot of a game.

        Args:
            config: Map size, team sizes, layout and unit attributes

        Returns:
            Snapshot with MAX to move on turn 0
        """
        if config.width < 4 or config.height < 4:
            raise ValueError("Maps must be at least 4x4")

        units = self._place_units(config)
        occupied = {u.position for u in units}

        generators = {
            MapLayout.OPEN: self._generate_open,
            MapLayout.SCATTERED: self._generate_scattered,
            MapLayout.WALLS: self._generate_walls,
        }
        obstacles = generators[config.layout](config, occupied)

        return StateSnapshot(
            x_extent=config.width,
            y_extent=config.height,
            units=units,
            obstacles=sorted(obstacles),
            turn_number=0,
            player_to_move=Player.MAX,
        )

    # ==========================================================================
    # Units
    # ==========================================================================

    def _place_units(self, config: GameConfig) -> List[UnitSnapshot]:
        """Footmen fill the top-left quadrant, archers the bottom-right"""
        half_w, half_h = config.width // 2, config.height // 2
        quadrant_size = half_w * half_h
        if config.footmen > quadrant_size or config.archers > quadrant_size:
            raise ValueError("Too many units for the map size")

        top_left = [Position(x, y) for y in range(half_h) for x in range(half_w)]
        bottom_right = [
            Position(x, y)
            for y in range(config.height - 1, config.height - 1 - half_h, -1)
            for x in range(config.width - 1, config.width - 1 - half_w, -1)
        ]

        units = []
        next_id = 0
        for pos in self._spread(top_left, config.footmen):
            units.append(UnitSnapshot(
                id=next_id,
                player=Player.MAX,
                x=pos.x,
                y=pos.y,
                health=config.footman_health,
                attack_range=config.footman_range,
            ))
            next_id += 1
        # Archers start off the corner cell while the quadrant has room
        for pos in self._spread(bottom_right[1:] + bottom_right[:1], config.archers):
            units.append(UnitSnapshot(
                id=next_id,
                player=Player.MIN,
                x=pos.x,
                y=pos.y,
                health=config.archer_health,
                attack_range=config.archer_range,
            ))
            next_id += 1
        return units

    def _spread(self, cells: List[Position], count: int) -> List[Position]:
        """Pick count cells from the front of the list with a little jitter"""
        window = cells[:count * 2]
        picked = self.rng.sample(window, count) if len(window) > count else window[:count]
        return sorted(picked, key=lambda p: cells.index(p))

    # ==========================================================================
    # Obstacles
    # ==========================================================================

    def _free_cells(self, config: GameConfig, occupied: Set[Position]) -> List[Position]:
        """Cells away from every unit's immediate neighbourhood"""
        free = []
        for y in range(config.height):
            for x in range(config.width):
                pos = Position(x, y)
                if all(pos.chebyshev(u) > 1 for u in occupied):
                    free.append(pos)
        return free

    def _generate_open(self, config: GameConfig, occupied: Set[Position]) -> Set[Position]:
        return set()

    def _generate_scattered(self, config: GameConfig, occupied: Set[Position]) -> Set[Position]:
        """Random single-cell obstacles"""
        free = self._free_cells(config, occupied)
        count = int(len(free) * config.obstacle_density)
        return set(self.rng.sample(free, min(count, len(free))))

    def _generate_walls(self, config: GameConfig, occupied: Set[Position]) -> Set[Position]:
        """Short wall segments, each at most a third of the map long"""
        free = set(self._free_cells(config, occupied))
        budget = int(len(free) * config.obstacle_density)
        obstacles: Set[Position] = set()

        attempts = 0
        while len(obstacles) < budget and attempts < 50:
            attempts += 1
            candidates = sorted(free - obstacles)
            if not candidates:
                break
            start = self.rng.choice(candidates)
            horizontal = self.rng.random() < 0.5
            length = self.rng.randint(2, max(2, min(config.width, config.height) // 3))

            for step in range(length):
                cell = Position(start.x + step, start.y) if horizontal \
                    else Position(start.x, start.y + step)
                if cell not in free or len(obstacles) >= budget:
                    break
                obstacles.add(cell)

        return obstacles


def generate_layout(config: GameConfig) -> StateSnapshot:
    """Generate an opening snapshot using the config's seed"""
    return MapLayoutGenerator(seed=config.seed).generate(config)
