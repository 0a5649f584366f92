# =============================================================================
# Grid Skirmish - MinMax AI Agent
# =============================================================================
"""
Hand-coded MinMax algorithm with Alpha-Beta pruning.

Key Features:
1. Alpha-Beta Pruning - Cuts subtrees that cannot change the decision
2. Move Ordering - Children are visited in ascending utility order
3. Joint Moves - Every node moves a pair of units at once

Both sides score positions with the same utility: the footmen maximize it
and the archers minimize it. Nothing is negated between plies.
"""

import logging
import time
from typing import Dict, List, Optional, Tuple
from dataclasses import dataclass, field

from ..core import (
    GameState, StateSnapshot, SearchTreeNode, MoveGenerator,
    Player, Direction, Difficulty
)
from ..core.game_state import finite_or_none

logger = logging.getLogger(__name__)


# =============================================================================
# Move Ordering
# =============================================================================

class MoveOrderer:
    """
    Orders children before the search visits them.

    Children are stable-sorted ascending by the utility of the state they
    produce, for both sides, so ties keep generation order.
    """

    def order_children(self, children: List[SearchTreeNode]) -> List[SearchTreeNode]:
        return sorted(children, key=lambda child: child.state.utility())


# =============================================================================
# Alpha-Beta Search
# =============================================================================

class AlphaBetaSearch:
    """
    Depth-limited MinMax with Alpha-Beta pruning over SearchTreeNodes.

    A node is terminal when the depth budget is spent or it has no
    children; terminal nodes are valued with their state's utility.
    The search is deterministic: same node and depth, same answer.

    Example usage:
        searcher = AlphaBetaSearch()
        best = searcher.search(SearchTreeNode.root(state), depth=2)
        moves = best.joint_move
    """

    # Constants
    INF = float('inf')
    NEG_INF = float('-inf')

    def __init__(
        self,
        generator: Optional[MoveGenerator] = None,
        orderer: Optional[MoveOrderer] = None
    ):
        self.generator = generator or MoveGenerator()
        self.orderer = orderer or MoveOrderer()

        # Search counters
        self.nodes_searched = 0
        self.nodes_pruned = 0

    def reset_stats(self):
        self.nodes_searched = 0
        self.nodes_pruned = 0

    @staticmethod
    def max_branching(roster_size: int) -> int:
        """Upper bound on children for a side with roster_size units"""
        if roster_size <= 0:
            return 0
        if roster_size == 1:
            return 4
        return 16 * (roster_size - 1)

    @classmethod
    def full_tree_size(cls, state: GameState, depth: int) -> int:
        """
        Nodes in the unpruned tree of the given depth, counting the root.
        Obstacles and blocked moves are ignored, so this is an upper bound.
        """
        branching = {
            player: cls.max_branching(len(state.units_of(player)))
            for player in Player
        }
        total = level = 1
        player = state.player
        for _ in range(depth):
            level *= branching[player]
            if level == 0:
                break
            total += level
            player = player.opponent
        return total

    def search(
        self,
        node: SearchTreeNode,
        depth: int,
        alpha: float = NEG_INF,
        beta: float = INF
    ) -> SearchTreeNode:
        """
        Find the best child of a node.

        Args:
            node: Root of the search; its state's side is to move
            depth: Plies to look ahead
            alpha: Best value the maximizer can already guarantee
            beta: Best value the minimizer can already guarantee

        Returns:
            The best root-level child, or the node itself when it is terminal
        """
        best, _ = self._alpha_beta(node, depth, alpha, beta)
        return best

    def search_with_value(
        self,
        node: SearchTreeNode,
        depth: int,
        alpha: float = NEG_INF,
        beta: float = INF
    ) -> Tuple[SearchTreeNode, float]:
        """Like search(), also returning the backed-up utility"""
        return self._alpha_beta(node, depth, alpha, beta)

    def _alpha_beta(
        self,
        node: SearchTreeNode,
        depth: int,
        alpha: float,
        beta: float
    ) -> Tuple[SearchTreeNode, float]:
        """
        The core MinMax recursion.

        Returns:
            (best child of node, its backed-up value)
        """
        self.nodes_searched += 1

        if depth <= 0:
            return node, node.state.utility()

        children = self.generator.generate(node.state)
        if not children:
            return node, node.state.utility()

        ordered = self.orderer.order_children(children)
        best_child: Optional[SearchTreeNode] = None

        if node.state.player.is_maximizer:
            best_value = self.NEG_INF
            for child in ordered:
                _, value = self._alpha_beta(child, depth - 1, alpha, beta)
                if best_child is None or value > best_value:
                    best_child = child
                    best_value = value

                alpha = max(alpha, best_value)
                if beta <= alpha:
                    self.nodes_pruned += 1
                    break
        else:
            best_value = self.INF
            for child in ordered:
                _, value = self._alpha_beta(child, depth - 1, alpha, beta)
                if best_child is None or value < best_value:
                    best_child = child
                    best_value = value

                beta = min(beta, best_value)
                if beta <= alpha:
                    self.nodes_pruned += 1
                    break

        return best_child, best_value


# =============================================================================
# MinMax Agent
# =============================================================================

@dataclass
class SearchStats:
    """Statistics for one search"""
    turn_number: int = 0
    nodes_searched: int = 0
    nodes_pruned: int = 0
    depth: int = 0
    time_ms: float = 0.0
    best_move: Dict[int, Direction] = field(default_factory=dict)
    best_score: float = 0.0


class MinMaxAgent:
    """
    MinMax AI agent with Alpha-Beta pruning.

    Plays one side for a whole game. Each turn the host hands over a
    StateSnapshot and gets back the joint move of the best root child.

    Example usage:
        agent = MinMaxAgent(player=Player.MAX, max_depth=2)
        moves = agent.middle_step(engine.get_snapshot())
        engine.perform_moves(moves)
    """

    def __init__(self, player: Player = Player.MAX, max_depth: int = 2):
        """
        Initialize the MinMax agent.

        Args:
            player: Which side this agent controls
            max_depth: Plies to search each turn, at least 1

        Raises:
            ValueError: if max_depth is not positive
        """
        if max_depth < 1:
            raise ValueError(f"Search depth must be positive, got {max_depth}")

        self.player = player
        self.max_depth = max_depth
        self.searcher = AlphaBetaSearch()

        # Statistics history
        self.search_history: List[SearchStats] = []

    # =========================================================================
    # Search
    # =========================================================================

    def get_best_moves(self, state: GameState) -> Dict[int, Direction]:
        """
        Run the search from a state and return the chosen joint move.

        Units absent from the result stay put; an empty result means the
        side has nothing to move.
        """
        start = time.time()
        self.searcher.reset_stats()

        best, value = self.searcher.search_with_value(
            SearchTreeNode.root(state), self.max_depth
        )

        stats = SearchStats(
            turn_number=state.turn_number,
            nodes_searched=self.searcher.nodes_searched,
            nodes_pruned=self.searcher.nodes_pruned,
            depth=self.max_depth,
            time_ms=(time.time() - start) * 1000,
            best_move=dict(best.joint_move),
            best_score=value,
        )
        self.search_history.append(stats)

        logger.debug(
            "%s turn %d: %s (value %.3f, %d nodes, %d cutoffs, %.1f ms)",
            self.player.name, state.turn_number, best.describe_move(), value,
            stats.nodes_searched, stats.nodes_pruned, stats.time_ms
        )
        return dict(best.joint_move)

    # =========================================================================
    # Host Lifecycle
    # =========================================================================

    def initial_step(self, snapshot: StateSnapshot) -> Dict[int, Direction]:
        """First turn of a game; plays like any other turn"""
        self.search_history.clear()
        return self.middle_step(snapshot)

    def middle_step(self, snapshot: StateSnapshot) -> Dict[int, Direction]:
        """
        Choose moves for this agent's units.

        Raises:
            ValueError: if the snapshot has the other side to move
        """
        if snapshot.player_to_move != self.player:
            raise ValueError(
                f"Agent plays {self.player.name} but {snapshot.player_to_move.name} is to move"
            )
        return self.get_best_moves(GameState.from_snapshot(snapshot))

    def terminal_step(self, snapshot: StateSnapshot):
        """Game over; log a summary of this agent's searches"""
        total_nodes = sum(s.nodes_searched for s in self.search_history)
        logger.info(
            "%s agent finished at turn %d after %d searches (%d nodes)",
            self.player.name, snapshot.turn_number,
            len(self.search_history), total_nodes
        )

    # =========================================================================
    # Statistics
    # =========================================================================

    def get_search_stats(self) -> Dict:
        """Get statistics from the most recent search"""
        if not self.search_history:
            return {}

        latest = self.search_history[-1]
        return {
            "turn_number": latest.turn_number,
            "nodes_searched": latest.nodes_searched,
            "nodes_pruned": latest.nodes_pruned,
            "depth": latest.depth,
            "time_ms": latest.time_ms,
            "best_move": {str(uid): d.name for uid, d in latest.best_move.items()},
            "best_score": finite_or_none(latest.best_score),
        }

    def get_search_history(self) -> List[Dict]:
        """Get statistics from every search this game"""
        return [
            {
                "turn": s.turn_number,
                "nodes": s.nodes_searched,
                "pruned": s.nodes_pruned,
                "time_ms": s.time_ms,
                "score": finite_or_none(s.best_score),
            }
            for s in self.search_history
        ]


# =============================================================================
# Convenience Functions
# =============================================================================

def create_minmax_agent(
    player: Player,
    difficulty: Difficulty = Difficulty.MEDIUM
) -> MinMaxAgent:
    """
    Create a MinMax agent with difficulty-appropriate settings.

    Args:
        player: Which side the agent controls
        difficulty: Game difficulty (sets the search depth)

    Returns:
        Configured MinMaxAgent instance
    """
    return MinMaxAgent(player=player, max_depth=difficulty.search_depth)
