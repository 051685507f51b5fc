from minehint.components import decompose_components
from minehint.constraints import Constraint
from minehint.grid import Cell, CellState


def _cells(n: int, row: int = 0):
    return [Cell(row, c, CellState.CLOSED) for c in range(n)]


def test_disjoint_constraints_form_separate_components():
    cells = _cells(5)
    first = Constraint(frozenset(cells[:2]), 1)
    second = Constraint(frozenset(cells[3:]), 1)

    components = decompose_components([first, second])

    assert len(components) == 2
    assert components[0].cells == (cells[0], cells[1])
    assert components[0].constraints == (first,)
    assert components[1].cells == (cells[3], cells[4])
    assert components[1].constraints == (second,)


def test_chained_constraints_merge_into_one_component():
    cells = _cells(6)
    pool = [
        Constraint(frozenset(cells[0:2]), 1),
        Constraint(frozenset(cells[4:6]), 1),
        Constraint(frozenset(cells[1:3]), 1),
        Constraint(frozenset(cells[2:5]), 1),
    ]

    components = decompose_components(pool)

    assert len(components) == 1
    assert components[0].cells == tuple(cells)
    assert components[0].constraints == tuple(pool)
    assert len(components[0]) == 6


def test_every_cell_and_constraint_lands_in_exactly_one_component():
    top = _cells(4, row=0)
    bottom = _cells(4, row=5)
    pool = [
        Constraint(frozenset(top[:3]), 1),
        Constraint(frozenset(bottom[1:]), 2),
        Constraint(frozenset(top[2:]), 1),
        Constraint(frozenset(bottom[:2]), 1),
    ]

    components = decompose_components(pool)

    seen_cells = [cell for comp in components for cell in comp.cells]
    seen_constraints = [c for comp in components for c in comp.constraints]
    assert len(seen_cells) == len(set(seen_cells)) == 8
    assert sorted(seen_constraints, key=pool.index) == pool
    for comp in components:
        members = set(comp.cells)
        assert all(c.cells <= members for c in comp.constraints)


def test_no_constraints_no_components():
    assert decompose_components([]) == []
