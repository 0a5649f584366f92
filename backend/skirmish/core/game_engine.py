# =============================================================================
# Grid Skirmish - Game Engine
# =============================================================================
"""
Host simulation that drives a skirmish.
Applies joint moves, advances turns, and checks victory conditions.
"""

import logging
import time
from typing import Callable, Dict, List, Mapping, Optional, Tuple
from dataclasses import dataclass, field
from enum import Enum, auto

from .enums import Player, Direction, VictoryCondition, Difficulty, MapLayout
from .data_structures import Position, StateSnapshot, GameConfig, MoveResult
from .game_state import GameState
from .map_layout import generate_layout

logger = logging.getLogger(__name__)


class GameEventType(Enum):
    """Types of events that can be emitted by the game engine"""
    GAME_STARTED = auto()
    MOVES_APPLIED = auto()
    MOVE_REJECTED = auto()
    VICTORY = auto()


@dataclass
class GameEvent:
    """Represents a game event for logging and UI updates"""
    event_type: GameEventType
    turn: int
    player: Optional[Player] = None
    result: Optional[MoveResult] = None
    message: str = ""
    timestamp: float = field(default_factory=time.time)


class SkirmishEngine:
    """
    Main game engine class.

    Responsibilities:
    - Hold the live snapshot of the game
    - Validate and apply joint moves for the side to move
    - Manage turn flow
    - Check victory conditions
    - Emit events for UI/logging

    Example usage:
        engine = SkirmishEngine()
        engine.initialize_game()

        while not engine.is_game_over():
            moves = agent.middle_step(engine.get_snapshot())
            engine.perform_moves(moves)
    """

    def __init__(self, config: Optional[GameConfig] = None):
        """Initialize the game engine with optional custom configuration"""
        self.config = config or GameConfig()
        self.snapshot: Optional[StateSnapshot] = None

        self.winner: Optional[Player] = None
        self.victory_condition: Optional[VictoryCondition] = None

        # Event system
        self.event_listeners: Dict[GameEventType, List[Callable[[GameEvent], None]]] = {}
        self.event_history: List[GameEvent] = []
        self.move_history: List[MoveResult] = []

    # =========================================================================
    # Game Initialization
    # =========================================================================

    def initialize_game(self, snapshot: Optional[StateSnapshot] = None) -> StateSnapshot:
        """
        Start a new game.

        Args:
            snapshot: Explicit opening position; generated from the config
                when omitted

        Returns:
            The opening snapshot
        """
        if snapshot is None:
            snapshot = generate_layout(self.config)
        snapshot.validate()

        self.snapshot = snapshot
        self.winner = None
        self.victory_condition = None
        self.event_history = []
        self.move_history = []

        self._emit_event(GameEvent(
            event_type=GameEventType.GAME_STARTED,
            turn=snapshot.turn_number,
            player=snapshot.player_to_move,
            message=f"{len(snapshot.units)} units on a "
                    f"{snapshot.x_extent}x{snapshot.y_extent} map",
        ))
        logger.info("Game started: %dx%d, %d units, %d obstacles",
                    snapshot.x_extent, snapshot.y_extent,
                    len(snapshot.units), len(snapshot.obstacles))

        self._check_victory()
        return snapshot

    # =========================================================================
    # State Access
    # =========================================================================

    @property
    def current_player(self) -> Player:
        return self._require_snapshot().player_to_move

    @property
    def turn_number(self) -> int:
        return self._require_snapshot().turn_number

    def get_snapshot(self) -> StateSnapshot:
        """Copy of the live snapshot, safe to hand to an agent"""
        snapshot = self._require_snapshot()
        return StateSnapshot(
            x_extent=snapshot.x_extent,
            y_extent=snapshot.y_extent,
            units=[u.clone() for u in snapshot.units],
            obstacles=list(snapshot.obstacles),
            turn_number=snapshot.turn_number,
            player_to_move=snapshot.player_to_move,
        )

    def get_state(self) -> GameState:
        """The live position as a search state"""
        return GameState.from_snapshot(self._require_snapshot())

    def _require_snapshot(self) -> StateSnapshot:
        if self.snapshot is None:
            raise RuntimeError("Game has not been initialized")
        return self.snapshot

    # =========================================================================
    # Moves
    # =========================================================================

    def perform_moves(self, moves: Mapping[int, Direction]) -> MoveResult:
        """
        Apply a joint move for the side to move, then hand the turn over.

        Moves are applied in unit id order; a move into a cell that is
        blocked, off the map, or already claimed this turn is rejected and
        that unit stays put. Units missing from the mapping stay put.
        """
        snapshot = self._require_snapshot()
        if self.is_game_over():
            raise RuntimeError("Game is already over")

        player = snapshot.player_to_move
        result = MoveResult(player=player, requested=dict(moves))

        units = {u.id: u for u in snapshot.units}
        occupied = {u.position for u in snapshot.units}
        occupied.update(Position(*p) for p in snapshot.obstacles)

        for unit_id in sorted(moves):
            direction = moves[unit_id]
            unit = units.get(unit_id)
            if unit is None or unit.player != player:
                result.rejected[unit_id] = f"unit {unit_id} is not a {player.unit_name}"
                continue

            dest = unit.position.translate(direction)
            if not (0 <= dest.x < snapshot.x_extent and 0 <= dest.y < snapshot.y_extent):
                result.rejected[unit_id] = f"{direction} leaves the map"
                continue
            if dest in occupied:
                result.rejected[unit_id] = f"({dest.x}, {dest.y}) is blocked"
                continue

            occupied.discard(unit.position)
            occupied.add(dest)
            unit.x, unit.y = dest.x, dest.y
            result.applied[unit_id] = direction

        snapshot.turn_number += 1
        snapshot.player_to_move = player.opponent
        result.turn_number = snapshot.turn_number
        result.message = self._describe(result)
        self.move_history.append(result)

        for unit_id, reason in result.rejected.items():
            logger.debug("Rejected move for unit %d: %s", unit_id, reason)
            self._emit_event(GameEvent(
                event_type=GameEventType.MOVE_REJECTED,
                turn=snapshot.turn_number,
                player=player,
                result=result,
                message=reason,
            ))
        self._emit_event(GameEvent(
            event_type=GameEventType.MOVES_APPLIED,
            turn=snapshot.turn_number,
            player=player,
            result=result,
            message=result.message,
        ))
        logger.debug("Turn %d: %s", snapshot.turn_number, result.message)

        self._check_victory()
        return result

    def _describe(self, result: MoveResult) -> str:
        if not result.applied:
            return f"{result.player.name} held position"
        moved = ", ".join(f"{uid} {d}" for uid, d in sorted(result.applied.items()))
        return f"{result.player.name} moved {moved}"

    # =========================================================================
    # Victory
    # =========================================================================

    def check_victory_conditions(self) -> Optional[Tuple[Player, VictoryCondition]]:
        """
        Returns (winner, condition) or None if the game continues.
        """
        snapshot = self._require_snapshot()
        footmen = snapshot.units_of(Player.MAX)
        archers = snapshot.units_of(Player.MIN)

        for footman in footmen:
            for archer in archers:
                if footman.position.chebyshev(archer.position) <= footman.attack_range:
                    return (Player.MAX, VictoryCondition.TARGET_ENGAGED)

        if snapshot.turn_number >= self.config.max_turns:
            return (Player.MIN, VictoryCondition.SURVIVED_TIME_LIMIT)

        return None

    def _check_victory(self):
        outcome = self.check_victory_conditions()
        if outcome is None:
            return
        self.winner, self.victory_condition = outcome
        self._emit_event(GameEvent(
            event_type=GameEventType.VICTORY,
            turn=self.turn_number,
            player=self.winner,
            message=f"{self.winner.name} wins: {self.victory_condition}",
        ))
        logger.info("%s wins on turn %d (%s)",
                    self.winner.name, self.turn_number, self.victory_condition)

    def is_game_over(self) -> bool:
        return self.winner is not None

    def get_winner(self) -> Optional[Player]:
        return self.winner

    # =========================================================================
    # Event System
    # =========================================================================

    def add_event_listener(self, event_type: GameEventType,
                           callback: Callable[[GameEvent], None]):
        """Register a callback for a type of event"""
        self.event_listeners.setdefault(event_type, []).append(callback)

    def _emit_event(self, event: GameEvent):
        self.event_history.append(event)
        for callback in self.event_listeners.get(event.event_type, []):
            callback(event)

    def get_history(self) -> List[Dict]:
        """Applied moves, oldest first"""
        return [r.to_dict() for r in self.move_history]

    # =========================================================================
    # Serialization
    # =========================================================================

    def to_dict(self) -> dict:
        """Serialize game engine state to dictionary"""
        return {
            "config": self.config.to_dict(),
            "snapshot": self.snapshot.to_dict() if self.snapshot else None,
            "winner": self.winner.name if self.winner else None,
            "victory_condition": self.victory_condition.name if self.victory_condition else None,
            "moves_played": len(self.move_history),
        }


# =============================================================================
# Convenience Functions
# =============================================================================

def create_game(
    difficulty: Difficulty = Difficulty.MEDIUM,
    seed: Optional[int] = None,
    layout: MapLayout = MapLayout.SCATTERED,
    config: Optional[GameConfig] = None
) -> SkirmishEngine:
    """
    Create and initialize a new game.

    Args:
        difficulty: Preset used when no explicit config is given
        seed: Random seed for the map layout
        layout: Obstacle layout type
        config: Explicit configuration, overrides difficulty/seed/layout

    Returns:
        Initialized SkirmishEngine
    """
    if config is None:
        config = GameConfig.from_difficulty(difficulty, seed=seed, layout=layout)
    engine = SkirmishEngine(config)
    engine.initialize_game()
    return engine


def play_ai_game(
    config: Optional[GameConfig] = None,
    max_depth: Optional[int] = None,
    min_depth: Optional[int] = None,
    on_turn: Optional[Callable[[SkirmishEngine, MoveResult], None]] = None
) -> Dict:
    """
    Play MinMax footmen against MinMax archers.

    Returns:
        Game results dictionary
    """
    from ..ai.minmax_agent import MinMaxAgent

    config = config or GameConfig()
    engine = SkirmishEngine(config)
    engine.initialize_game()

    agents = {
        Player.MAX: MinMaxAgent(Player.MAX, max_depth=max_depth or config.search_depth),
        Player.MIN: MinMaxAgent(Player.MIN, max_depth=min_depth or config.search_depth),
    }
    first_step = {player: True for player in Player}

    while not engine.is_game_over():
        player = engine.current_player
        agent = agents[player]
        snapshot = engine.get_snapshot()
        if first_step[player]:
            moves = agent.initial_step(snapshot)
            first_step[player] = False
        else:
            moves = agent.middle_step(snapshot)

        result = engine.perform_moves(moves)
        if on_turn is not None:
            on_turn(engine, result)

    final = engine.get_snapshot()
    for agent in agents.values():
        agent.terminal_step(final)

    return {
        "winner": engine.winner.name,
        "victory_condition": engine.victory_condition.name,
        "turns": engine.turn_number,
        "moves": engine.get_history(),
    }
