"""Board inference engine: proven mines, proven safe cells and mine probabilities."""

import logging
from dataclasses import asdict, dataclass, field
from typing import Any, Dict, FrozenSet, List, Optional, Tuple

from .components import decompose_components
from .constraints import build_constraints, propagate_constraints
from .grid import BoardMeta, Cell, Grid, cell_sort_key
from .probability import (
    ENUMERATION_LIMIT,
    METHOD_CONTRADICTION,
    METHOD_DENSITY,
    METHOD_ENUMERATION,
    apply_budget,
    budget_probability,
    component_probabilities,
)

logger = logging.getLogger(__name__)


@dataclass
class AnalysisStats:
    """Counters describing one inference pass (for analysis and debugging)."""

    numbered_cells: int = 0
    constraints_built: int = 0
    builder_conflicts: int = 0
    propagation_passes: int = 0
    derived_constraints: int = 0
    dropped_constraints: int = 0
    propagation_conflicts: int = 0
    surviving_constraints: int = 0
    components: int = 0
    enumerated_components: int = 0
    density_components: int = 0
    contradictory_components: int = 0
    largest_component: int = 0
    budget_cells: int = 0
    budget_probability: Optional[float] = None

    def as_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class AnalysisResult:
    """
    Everything the engine concluded about one grid snapshot.

    Attributes:
        known_mines: Cells proven to be mines.
        known_safe: Cells proven safe.
        probabilities: Mine probability in [0, 1] per cell the engine has an
            opinion about: knowns (1.0 / 0.0), every cell of a solved
            component and, with board metadata, the unconstrained cells.
        stats: Counters for this pass.
        steps: Stage snapshots, filled only when step recording is enabled.
    """

    known_mines: FrozenSet[Cell]
    known_safe: FrozenSet[Cell]
    probabilities: Dict[Cell, float]
    stats: AnalysisStats = field(default_factory=AnalysisStats)
    steps: List[Dict[str, Any]] = field(default_factory=list)

    def probability_at(self, row: int, col: int) -> Optional[float]:
        """Probability for the cell at (row, col), or None if there is no entry."""
        for cell, probability in self.probabilities.items():
            if cell.row == row and cell.col == col:
                return probability
        return None

    def safest_cells(self) -> List[Tuple[Cell, float]]:
        """All undecided entries sharing the lowest probability, row-major."""
        candidates = [
            (cell, p)
            for cell, p in self.probabilities.items()
            if cell not in self.known_mines and cell not in self.known_safe
        ]
        if not candidates:
            return []
        lowest = min(p for _, p in candidates)
        return sorted(
            [(cell, p) for cell, p in candidates if p == lowest],
            key=lambda t: cell_sort_key(t[0]),
        )


class BoardAnalyzer:
    """
    Runs the inference pipeline on grid snapshots.

    The pipeline is:
    1. Build constraints from numbered cells (trivial cases resolve directly).
    2. Propagate: normalization, saturation and subset elimination to a fixpoint.
    3. Decompose the surviving constraints into independent components.
    4. Solve each component exactly by enumeration, or by the density
       heuristic when it exceeds the enumeration limit.
    5. Assert known mines / safe cells at 1 / 0.
    6. Spread the remaining mine budget over unconstrained cells when the
       board metadata is known.

    The analyzer holds configuration only; every call starts from scratch.
    """

    def __init__(
        self,
        enumeration_limit: int = ENUMERATION_LIMIT,
        record_steps: bool = False,
    ) -> None:
        """
        Initialize an analyzer.

        Args:
            enumeration_limit: Largest component size solved by exhaustive
                enumeration; larger components use the density heuristic.
            record_steps: If True, attach a snapshot of every pipeline stage
                to the result (for replay and debugging).

        Raises:
            ValueError: If enumeration_limit is negative.
        """
        if enumeration_limit < 0:
            raise ValueError("enumeration_limit must be non-negative.")
        self.enumeration_limit = enumeration_limit
        self.record_steps = record_steps

    def _record_step(
        self,
        steps: List[Dict[str, Any]],
        stage: str,
        known_mines: FrozenSet[Cell],
        known_safe: FrozenSet[Cell],
        **extra: Any,
    ) -> None:
        """Record a stage snapshot for replay functionality."""
        if not self.record_steps:
            return
        step: Dict[str, Any] = {
            "stage": stage,
            "step_number": len(steps),
            "known_mines": sorted(c.coord for c in known_mines),
            "known_safe": sorted(c.coord for c in known_safe),
        }
        step.update(extra)
        steps.append(step)

    def analyze(
        self,
        grid: Grid,
        meta: Optional[BoardMeta] = None,
        flagged_count: Optional[int] = None,
    ) -> Optional[AnalysisResult]:
        """
        Analyze one grid snapshot.

        Args:
            grid: Normalized grid from the acquisition side.
            meta: Optional board dimensions and mine total, enabling the
                budget correction for unconstrained cells.
            flagged_count: Number of flagged cells; derived from the grid
                when omitted.

        Returns:
            AnalysisResult, or None when the grid holds no cells.
        """
        if grid.is_empty:
            logger.debug("Empty grid, nothing to analyze.")
            return None

        if flagged_count is None:
            flagged_count = grid.flagged_count

        stats = AnalysisStats()
        steps: List[Dict[str, Any]] = []

        # 1) Constraint construction
        built = build_constraints(grid)
        stats.numbered_cells = built.numbered_cells
        stats.constraints_built = len(built.constraints)
        stats.builder_conflicts = built.conflicts
        logger.debug(
            "Built %d constraints from %d numbered cells (%d mines, %d safe resolved).",
            len(built.constraints),
            built.numbered_cells,
            len(built.known_mines),
            len(built.known_safe),
        )
        self._record_step(
            steps,
            "build",
            frozenset(built.known_mines),
            frozenset(built.known_safe),
            constraints=len(built.constraints),
        )

        # 2) Propagation
        propagated = propagate_constraints(
            built.constraints, built.known_mines, built.known_safe
        )
        known_mines = frozenset(propagated.known_mines)
        known_safe = frozenset(propagated.known_safe)
        stats.propagation_passes = propagated.passes
        stats.derived_constraints = propagated.derived_constraints
        stats.dropped_constraints = propagated.dropped_constraints
        stats.propagation_conflicts = propagated.conflicts
        stats.surviving_constraints = len(propagated.constraints)
        logger.debug(
            "Propagation finished after %d passes: %d mines, %d safe, %d constraints left.",
            propagated.passes,
            len(known_mines),
            len(known_safe),
            len(propagated.constraints),
        )
        self._record_step(
            steps,
            "propagate",
            known_mines,
            known_safe,
            constraints=len(propagated.constraints),
            passes=propagated.passes,
        )

        # 3-4) Components and per-component probabilities
        probabilities: Dict[Cell, float] = {}
        components = decompose_components(propagated.constraints)
        stats.components = len(components)

        for component in components:
            stats.largest_component = max(stats.largest_component, len(component))
            component_probs, method = component_probabilities(
                component, self.enumeration_limit
            )
            if method == METHOD_ENUMERATION:
                stats.enumerated_components += 1
            elif method == METHOD_DENSITY:
                stats.density_components += 1
            elif method == METHOD_CONTRADICTION:
                stats.contradictory_components += 1
                logger.debug(
                    "Skipping contradictory component of %d cells.", len(component)
                )

            if component_probs:
                probabilities.update(component_probs)

        self._record_step(
            steps,
            "components",
            known_mines,
            known_safe,
            components=[len(c) for c in components],
        )

        # 5) Knowns override any component estimate
        for cell in known_safe:
            probabilities[cell] = 0.0
        for cell in known_mines:
            probabilities[cell] = 1.0

        # 6) Global budget for unconstrained cells
        base = budget_probability(meta, flagged_count, len(known_mines), len(known_safe))
        stats.budget_probability = base
        stats.budget_cells = apply_budget(
            probabilities, grid.undetermined_cells(), base
        )
        self._record_step(
            steps,
            "budget",
            known_mines,
            known_safe,
            budget_probability=base,
            budget_cells=stats.budget_cells,
        )

        return AnalysisResult(
            known_mines=known_mines,
            known_safe=known_safe,
            probabilities=probabilities,
            stats=stats,
            steps=steps,
        )


def analyze_board(
    grid: Grid,
    meta: Optional[BoardMeta] = None,
    flagged_count: Optional[int] = None,
    *,
    enumeration_limit: int = ENUMERATION_LIMIT,
    record_steps: bool = False,
) -> Optional[AnalysisResult]:
    """
    Analyze a grid snapshot with a one-off BoardAnalyzer.

    See BoardAnalyzer.analyze for the arguments and the result.
    """
    analyzer = BoardAnalyzer(
        enumeration_limit=enumeration_limit, record_steps=record_steps
    )
    return analyzer.analyze(grid, meta=meta, flagged_count=flagged_count)
