"""Constraint construction from numbered cells and fixpoint propagation."""

from dataclasses import dataclass, field
from typing import AbstractSet, Dict, FrozenSet, Iterable, List, Set, Tuple

from .grid import Cell, Grid, cell_sort_key


@dataclass(frozen=True)
class Constraint:
    """
    "Exactly `count` of these cells are mines."

    Equality is by cell set and count, so two constraints built from
    different numbered cells over the same neighbors compare equal.
    """

    cells: FrozenSet[Cell]
    count: int

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def density(self) -> float:
        """Fraction of the cells that are mines; 0.0 for an empty constraint."""
        if not self.cells:
            return 0.0
        return self.count / len(self.cells)

    @property
    def is_valid(self) -> bool:
        return 0 <= self.count <= len(self.cells)

    @property
    def is_all_safe(self) -> bool:
        return bool(self.cells) and self.count == 0

    @property
    def is_all_mines(self) -> bool:
        return self.count > 0 and self.count == len(self.cells)

    def sorted_cells(self) -> List[Cell]:
        return sorted(self.cells, key=cell_sort_key)

    def normalized(
        self, known_mines: AbstractSet[Cell], known_safe: AbstractSet[Cell]
    ) -> "Constraint":
        """
        Remove decided cells: safe cells drop out, mine cells drop out and
        each one lowers the count.
        """
        mines_inside = len(self.cells & known_mines)
        remaining = self.cells - known_mines - known_safe
        if mines_inside == 0 and len(remaining) == len(self.cells):
            return self
        return Constraint(frozenset(remaining), self.count - mines_inside)

    def is_subset_of(self, other: "Constraint") -> bool:
        """True if this constraint's cells form a proper subset of other's."""
        return len(self.cells) < len(other.cells) and self.cells < other.cells

    def minus(self, other: "Constraint") -> "Constraint":
        """Constraint over self.cells \\ other.cells holding the difference in count."""
        return Constraint(self.cells - other.cells, self.count - other.count)

    def __repr__(self) -> str:
        coords = ",".join(f"{c.row}:{c.col}" for c in self.sorted_cells())
        return f"Constraint({{{coords}}}, count={self.count})"


@dataclass
class BuildResult:
    """Output of the constraint builder."""

    constraints: List[Constraint] = field(default_factory=list)
    known_mines: Set[Cell] = field(default_factory=set)
    known_safe: Set[Cell] = field(default_factory=set)
    numbered_cells: int = 0
    skipped_cells: int = 0
    conflicts: int = 0


@dataclass
class PropagationResult:
    """Output of the constraint propagator."""

    constraints: List[Constraint]
    known_mines: Set[Cell]
    known_safe: Set[Cell]
    passes: int = 0
    derived_constraints: int = 0
    dropped_constraints: int = 0
    conflicts: int = 0


def _classify(
    cells: Iterable[Cell], target: Set[Cell], other: Set[Cell]
) -> Tuple[bool, int]:
    """
    Add cells to `target` unless they already sit in `other`.

    Returns:
        (progress, conflicts): whether any cell was newly added, and how many
        cells were refused because the opposite set already held them.
    """
    progress = False
    conflicts = 0
    for cell in cells:
        if cell in target:
            continue
        if cell in other:
            conflicts += 1
            continue
        target.add(cell)
        progress = True
    return progress, conflicts


def build_constraints(grid: Grid) -> BuildResult:
    """
    Emit one constraint per informative numbered cell.

    For every OPEN_NUMBER cell the closed/unknown neighbors are collected and
    the number is reduced by the flagged neighbors. Trivial cases resolve
    straight into the knowledge sets:
    - remaining == 0: all closed neighbors are safe.
    - remaining == len(closed): all closed neighbors are mines.
    Cells with no closed neighbor, an over-flagged count (remaining < 0) or
    more remaining mines than closed neighbors are skipped as uninformative.

    Args:
        grid: Snapshot to scan.

    Returns:
        A BuildResult holding the constraints and the immediate knowledge.
    """
    result = BuildResult()

    for cell in grid.numbered_cells():
        result.numbered_cells += 1
        assert cell.number is not None

        closed: List[Cell] = []
        flagged_count = 0
        for nbr in grid.neighbors(cell):
            if nbr.is_undetermined:
                closed.append(nbr)
            elif nbr.is_flagged:
                flagged_count += 1

        if not closed:
            continue

        remaining = cell.number - flagged_count
        if remaining < 0 or remaining > len(closed):
            result.skipped_cells += 1
            continue

        if remaining == 0:
            _, conflicts = _classify(closed, result.known_safe, result.known_mines)
            result.conflicts += conflicts
        elif remaining == len(closed):
            _, conflicts = _classify(closed, result.known_mines, result.known_safe)
            result.conflicts += conflicts
        else:
            result.constraints.append(Constraint(frozenset(closed), remaining))

    return result


def normalize_constraints(
    constraints: Iterable[Constraint],
    known_mines: AbstractSet[Cell],
    known_safe: AbstractSet[Cell],
) -> Tuple[List[Constraint], int]:
    """
    Apply the knowledge sets to every constraint.

    Empty results are dropped, invalid ones (count < 0 or count > size) are
    dropped and counted, and duplicates collapse onto their first occurrence.

    Returns:
        (constraints, dropped_invalid_count)
    """
    out: List[Constraint] = []
    seen: Set[Constraint] = set()
    dropped = 0

    for constraint in constraints:
        reduced = constraint.normalized(known_mines, known_safe)
        if not reduced.cells:
            continue
        if not reduced.is_valid:
            dropped += 1
            continue
        if reduced in seen:
            continue
        seen.add(reduced)
        out.append(reduced)

    return out, dropped


def _saturate(
    constraints: Iterable[Constraint],
    known_mines: Set[Cell],
    known_safe: Set[Cell],
) -> Tuple[bool, int]:
    """Promote all-zero and fully-saturated constraints into knowledge."""
    progress = False
    conflicts = 0

    for constraint in constraints:
        if constraint.is_all_safe:
            changed, refused = _classify(constraint.cells, known_safe, known_mines)
        elif constraint.is_all_mines:
            changed, refused = _classify(constraint.cells, known_mines, known_safe)
        else:
            continue
        progress = progress or changed
        conflicts += refused

    return progress, conflicts


def _eliminate_subsets(constraints: List[Constraint]) -> int:
    """
    Derive B \\ A constraints for every pair with A a proper subset of B.

    New constraints are appended to `constraints` in place.

    Returns:
        Number of constraints added.
    """
    # Candidate supersets of A must contain A's first cell.
    by_cell: Dict[Cell, List[Constraint]] = {}
    for constraint in constraints:
        for cell in constraint.cells:
            by_cell.setdefault(cell, []).append(constraint)

    existing: Set[Constraint] = set(constraints)
    added = 0

    for a in list(constraints):
        anchor = min(a.cells, key=cell_sort_key)
        for b in by_cell.get(anchor, ()):
            if a is b or not a.is_subset_of(b):
                continue
            derived = b.minus(a)
            if not derived.cells or not derived.is_valid:
                continue
            if derived in existing:
                continue
            existing.add(derived)
            constraints.append(derived)
            added += 1

    return added


def propagate_constraints(
    constraints: Iterable[Constraint],
    known_mines: AbstractSet[Cell],
    known_safe: AbstractSet[Cell],
) -> PropagationResult:
    """
    Run normalization, saturation and subset elimination to a fixpoint.

    The input sets are not mutated; the returned knowledge sets are
    supersets of them. Each pass either grows the knowledge or adds a
    constraint over a strictly smaller cell set, so the loop terminates.

    Args:
        constraints: Initial constraint pool.
        known_mines: Cells already proven to be mines.
        known_safe: Cells already proven safe.

    Returns:
        PropagationResult with the surviving (minimal, valid, deduplicated)
        constraints and the final knowledge sets.
    """
    mines: Set[Cell] = set(known_mines)
    safe: Set[Cell] = set(known_safe)
    pool: List[Constraint] = list(constraints)

    result = PropagationResult(constraints=[], known_mines=mines, known_safe=safe)

    progress = True
    while progress:
        result.passes += 1

        pool, dropped = normalize_constraints(pool, mines, safe)
        result.dropped_constraints += dropped

        progress, conflicts = _saturate(pool, mines, safe)
        result.conflicts += conflicts

        pool, dropped = normalize_constraints(pool, mines, safe)
        result.dropped_constraints += dropped

        added = _eliminate_subsets(pool)
        if added:
            result.derived_constraints += added
            progress = True

    result.constraints = pool
    return result
