"""
Minesweeper board inference engine

Infers, from the visible state of a mine-laying grid puzzle:
- Proven mines and proven safe cells (constraint building and propagation
  with subset elimination)
- Exact mine probabilities for small independent components (enumeration)
- Estimated probabilities for large components (constraint density averaging)
- A uniform probability for unconstrained cells from the remaining mine budget
"""

from .grid import BoardMeta, Cell, CellState, Grid
from .constraints import Constraint, build_constraints, propagate_constraints
from .components import Component, decompose_components
from .probability import (
    ENUMERATION_LIMIT,
    budget_probability,
    component_probabilities,
    density_estimates,
    enumerate_component,
)
from .solver import AnalysisResult, AnalysisStats, BoardAnalyzer, analyze_board
from .display import (
    DisplayMode,
    efficiency_move,
    filter_efficient,
    format_probability_grid,
    select_cells,
)
from .engine import Minesweeper

__version__ = "1.0.0"

__all__ = [
    # Grid model
    "BoardMeta",
    "Cell",
    "CellState",
    "Grid",
    # Inference pipeline
    "Constraint",
    "build_constraints",
    "propagate_constraints",
    "Component",
    "decompose_components",
    "ENUMERATION_LIMIT",
    "enumerate_component",
    "density_estimates",
    "component_probabilities",
    "budget_probability",
    "AnalysisResult",
    "AnalysisStats",
    "BoardAnalyzer",
    "analyze_board",
    # Consumer helpers
    "DisplayMode",
    "efficiency_move",
    "filter_efficient",
    "format_probability_grid",
    "select_cells",
    # Simulation
    "Minesweeper",
]
