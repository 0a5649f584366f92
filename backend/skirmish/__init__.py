# =============================================================================
# Grid Skirmish - Backend Package
# =============================================================================
"""
Grid Skirmish Backend

A turn-based skirmish on a grid: footmen hunt archers across an obstacle
field, with a MinMax agent using Alpha-Beta pruning on each side.
"""

__version__ = "0.1.0"
