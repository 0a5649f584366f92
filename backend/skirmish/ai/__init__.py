# =============================================================================
# AI Module
# =============================================================================
"""
AI agents for Grid Skirmish.

Contains:
- MinMaxAgent: Hand-coded MinMax with Alpha-Beta pruning
"""

from .minmax_agent import (
    MinMaxAgent,
    create_minmax_agent,
    AlphaBetaSearch,
    MoveOrderer,
    SearchStats,
)

__all__ = [
    "MinMaxAgent",
    "create_minmax_agent",
    "AlphaBetaSearch",
    "MoveOrderer",
    "SearchStats",
]
