# =============================================================================
# Grid Skirmish - Move Generation
# =============================================================================
"""
Expands a GameState into the search tree nodes reachable in one ply.

Moves of one joint move are resolved simultaneously: every destination is
checked against the occupancy of the parent state, never against where a
teammate moves in the same ply.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Mapping

from .enums import Direction, CARDINAL_DIRECTIONS
from .game_state import GameState


@dataclass(frozen=True)
class SearchTreeNode:
    """
    A joint move paired with the state it produces.

    The root of a search has an empty joint move and the current state.
    Units absent from the joint move stay where they are.
    """
    state: GameState
    joint_move: Mapping[int, Direction] = field(default_factory=dict)

    @classmethod
    def root(cls, state: GameState) -> 'SearchTreeNode':
        return cls(state=state)

    def utility(self) -> float:
        return self.state.utility()

    def describe_move(self) -> str:
        """e.g. '1:east 2:south', or 'hold' for an empty joint move"""
        if not self.joint_move:
            return "hold"
        return " ".join(
            f"{unit_id}:{direction}"
            for unit_id, direction in sorted(self.joint_move.items())
        )


class MoveGenerator:
    """
    Enumerates the children of a state for the side to move.

    The lead unit (lowest id) is paired with every other unit of the
    roster; each pairing tries the 4 x 4 cardinal direction combinations.
    A lone unit gets one child per direction.
    """

    def __init__(self, directions=CARDINAL_DIRECTIONS):
        self.directions = tuple(directions)

    def destination_available(self, state: GameState, unit_id: int,
                              direction: Direction) -> bool:
        """Whether a unit of the side to move may step in a direction"""
        pos = state.units_of(state.player).get(unit_id)
        if pos is None:
            return False
        dest = pos.translate(direction)
        return state.position_available(dest.x, dest.y)

    def legal_directions(self, state: GameState, unit_id: int) -> List[Direction]:
        return [d for d in self.directions
                if self.destination_available(state, unit_id, d)]

    def generate(self, state: GameState) -> List[SearchTreeNode]:
        """
        All children of a state, in deterministic generation order.

        Returns an empty list when the side to move has no units, or when
        none of its units has anywhere to go.
        """
        roster = sorted(state.units_of(state.player))
        if not roster:
            return []

        lead, others = roster[0], roster[1:]
        children: List[SearchTreeNode] = []

        for lead_dir in self.directions:
            if not others:
                children.append(self._child(state, {lead: lead_dir}))
                continue
            for other in others:
                for other_dir in self.directions:
                    children.append(
                        self._child(state, {lead: lead_dir, other: other_dir})
                    )

        if not any(child.joint_move for child in children):
            return []
        return children

    def _child(self, state: GameState,
               attempts: Dict[int, Direction]) -> SearchTreeNode:
        joint_move = {
            unit_id: direction
            for unit_id, direction in attempts.items()
            if self.destination_available(state, unit_id, direction)
        }
        return SearchTreeNode(state=state.derive_child(joint_move),
                              joint_move=joint_move)


_DEFAULT_GENERATOR = MoveGenerator()


def generate_children(state: GameState) -> List[SearchTreeNode]:
    """Children of a state using the cardinal move generator"""
    return _DEFAULT_GENERATOR.generate(state)
