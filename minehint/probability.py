"""Per-component mine probabilities and the global mine-budget correction."""

from dataclasses import dataclass, field
from typing import Dict, Iterable, List, MutableMapping, Optional, Tuple

from .components import Component
from .grid import BoardMeta, Cell

# Largest component solved by exhaustive enumeration (2**15 leaves at most).
ENUMERATION_LIMIT: int = 15

METHOD_ENUMERATION = "enumeration"
METHOD_DENSITY = "density"
METHOD_CONTRADICTION = "contradiction"


@dataclass
class EnumerationResult:
    """
    Outcome of enumerating one component.

    Attributes:
        cells: Component cells, aligned with mine_counts.
        total: Number of assignments satisfying every constraint.
        mine_counts: Per cell, the number of valid assignments placing a mine there.
    """

    cells: Tuple[Cell, ...]
    total: int = 0
    mine_counts: List[int] = field(default_factory=list)

    def probabilities(self) -> Optional[Dict[Cell, float]]:
        """Return mine_count / total per cell, or None if no assignment is valid."""
        if self.total == 0:
            return None
        return {
            cell: count / self.total
            for cell, count in zip(self.cells, self.mine_counts)
        }


def enumerate_component(component: Component) -> EnumerationResult:
    """
    Count all mine/safe assignments of a component consistent with its constraints.

    Depth-first over the cells in order. Each constraint keeps the mines it
    still needs and the cells it still has undecided; a branch is cut as soon
    as a constraint needs a negative number of mines or more mines than it
    has cells left.

    Args:
        component: Component to enumerate. Its size is not checked here;
            callers bound it with ENUMERATION_LIMIT.

    Returns:
        EnumerationResult with the valid-assignment count and per-cell mine counts.
    """
    cells = component.cells
    n = len(cells)
    index = {cell: i for i, cell in enumerate(cells)}

    constraints_by_cell: List[List[int]] = [[] for _ in range(n)]
    remaining_counts: List[int] = []
    remaining_cells: List[int] = []
    for k, constraint in enumerate(component.constraints):
        remaining_counts.append(constraint.count)
        remaining_cells.append(len(constraint.cells))
        for cell in constraint.cells:
            constraints_by_cell[index[cell]].append(k)

    result = EnumerationResult(cells=cells, mine_counts=[0] * n)
    assignment: List[bool] = [False] * n

    def dfs(i: int) -> None:
        if i == n:
            if all(count == 0 for count in remaining_counts):
                result.total += 1
                for j in range(n):
                    if assignment[j]:
                        result.mine_counts[j] += 1
            return

        affected = constraints_by_cell[i]
        for is_mine in (False, True):
            valid = True
            for k in affected:
                remaining_cells[k] -= 1
                if is_mine:
                    remaining_counts[k] -= 1
                if remaining_counts[k] < 0 or remaining_counts[k] > remaining_cells[k]:
                    valid = False

            if valid:
                assignment[i] = is_mine
                dfs(i + 1)
                assignment[i] = False

            for k in affected:
                remaining_cells[k] += 1
                if is_mine:
                    remaining_counts[k] += 1

    dfs(0)
    return result


def density_estimates(component: Component) -> Dict[Cell, float]:
    """
    Approximate probabilities for a component too large to enumerate.

    Each constraint contributes its density count / size to its cells. The
    first density a cell sees is stored as is; every later one is averaged
    with the stored value, (stored + density) / 2.
    """
    estimates: Dict[Cell, float] = {}
    for constraint in component.constraints:
        density = constraint.density
        for cell in constraint.cells:
            previous = estimates.get(cell)
            if previous is None:
                estimates[cell] = density
            else:
                estimates[cell] = (previous + density) / 2
    return estimates


def component_probabilities(
    component: Component, enumeration_limit: int = ENUMERATION_LIMIT
) -> Tuple[Optional[Dict[Cell, float]], str]:
    """
    Probabilities for one component, exact when it is small enough.

    Returns:
        (probabilities, method). probabilities is None when enumeration found
        the component contradictory; method is one of "enumeration",
        "density" or "contradiction".
    """
    if len(component) > enumeration_limit:
        return density_estimates(component), METHOD_DENSITY

    probabilities = enumerate_component(component).probabilities()
    if probabilities is None:
        return None, METHOD_CONTRADICTION
    return probabilities, METHOD_ENUMERATION


def budget_probability(
    meta: Optional[BoardMeta],
    flagged_count: int,
    known_mines_count: int,
    known_safe_count: int,
) -> Optional[float]:
    """
    Uniform mine probability for cells outside every constraint.

    remaining_mines = max(total_mines - flagged - known_mines, 0)
    remaining_unknown = max(total_cells - flagged - known_mines - known_safe, 0)

    Returns:
        min(1, remaining_mines / remaining_unknown), or None when no meta is
        available or nothing is left unknown.
    """
    if meta is None:
        return None

    remaining_mines = max(meta.total_mines - flagged_count - known_mines_count, 0)
    remaining_unknown = max(
        meta.total_cells - flagged_count - known_mines_count - known_safe_count, 0
    )
    if remaining_unknown == 0:
        return None
    return min(1.0, remaining_mines / remaining_unknown)


def apply_budget(
    probabilities: MutableMapping[Cell, float],
    candidates: Iterable[Cell],
    probability: Optional[float],
) -> int:
    """
    Give every candidate cell without an entry the budget probability.

    Returns:
        Number of cells that received the budget probability.
    """
    if probability is None:
        return 0

    assigned = 0
    for cell in candidates:
        if cell in probabilities:
            continue
        probabilities[cell] = probability
        assigned += 1
    return assigned
