"""Partition surviving constraints into independent connected components."""

from dataclasses import dataclass
from typing import Dict, List, Sequence, Set, Tuple

from .constraints import Constraint
from .grid import Cell, cell_sort_key


@dataclass(frozen=True)
class Component:
    """
    A maximal group of undetermined cells linked through shared constraints.

    Attributes:
        cells: Member cells in row-major order.
        constraints: Every constraint whose cells lie in this component,
            in the order they appeared in the pool.
    """

    cells: Tuple[Cell, ...]
    constraints: Tuple[Constraint, ...]

    def __len__(self) -> int:
        return len(self.cells)


def decompose_components(constraints: Sequence[Constraint]) -> List[Component]:
    """
    Group constraints into connected components via depth-first search.

    Two cells are linked when some constraint contains both; a constraint
    therefore always falls entirely inside one component.

    Args:
        constraints: Surviving constraints after propagation.

    Returns:
        Components in order of their first constraint in the pool.
    """
    cell_to_constraints: Dict[Cell, List[int]] = {}
    for idx, constraint in enumerate(constraints):
        for cell in constraint.cells:
            cell_to_constraints.setdefault(cell, []).append(idx)

    components: List[Component] = []
    seen_cells: Set[Cell] = set()

    for constraint in constraints:
        start_cells = [c for c in constraint.sorted_cells() if c not in seen_cells]
        if not start_cells:
            continue

        stack: List[Cell] = start_cells[:1]
        seen_cells.add(start_cells[0])
        member_cells: List[Cell] = []
        member_constraints: Set[int] = set()

        while stack:
            cell = stack.pop()
            member_cells.append(cell)

            for idx in cell_to_constraints[cell]:
                if idx in member_constraints:
                    continue
                member_constraints.add(idx)
                for nbr in constraints[idx].sorted_cells():
                    if nbr not in seen_cells:
                        seen_cells.add(nbr)
                        stack.append(nbr)

        components.append(
            Component(
                cells=tuple(sorted(member_cells, key=cell_sort_key)),
                constraints=tuple(constraints[i] for i in sorted(member_constraints)),
            )
        )

    return components
