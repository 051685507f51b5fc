import itertools

import pytest

import minehint.probability as probability
from minehint.components import Component
from minehint.constraints import Constraint
from minehint.grid import BoardMeta, Cell, CellState
from minehint.probability import (
    METHOD_CONTRADICTION,
    METHOD_DENSITY,
    METHOD_ENUMERATION,
    apply_budget,
    budget_probability,
    component_probabilities,
    density_estimates,
    enumerate_component,
)


def _cells(n: int):
    return [Cell(r, c, CellState.CLOSED) for r in range(4) for c in range(8)][:n]


def _component(cells, *constraints):
    return Component(cells=tuple(cells), constraints=tuple(constraints))


def test_one_of_three_cells():
    x, y, z = _cells(3)
    component = _component([x, y, z], Constraint(frozenset([x, y, z]), 1))

    enumerated = enumerate_component(component)
    probs, method = component_probabilities(component)

    assert enumerated.total == 3
    assert enumerated.mine_counts == [1, 1, 1]
    assert method == METHOD_ENUMERATION
    assert probs == pytest.approx({x: 1 / 3, y: 1 / 3, z: 1 / 3})


def test_enumeration_matches_brute_force():
    cells = _cells(6)
    constraints = (
        Constraint(frozenset(cells[0:3]), 1),
        Constraint(frozenset(cells[1:5]), 2),
        Constraint(frozenset(cells[3:6]), 1),
    )
    component = _component(cells, *constraints)

    total = 0
    counts = [0] * len(cells)
    for bits in itertools.product((0, 1), repeat=len(cells)):
        assignment = dict(zip(cells, bits))
        if all(sum(assignment[c] for c in con.cells) == con.count for con in constraints):
            total += 1
            for i, bit in enumerate(bits):
                counts[i] += bit

    enumerated = enumerate_component(component)

    assert enumerated.total == total
    assert enumerated.mine_counts == counts


def test_contradictory_component_has_no_probabilities():
    a, b = _cells(2)
    component = _component(
        [a, b],
        Constraint(frozenset([a, b]), 1),
        Constraint(frozenset([a]), 1),
        Constraint(frozenset([b]), 1),
    )

    probs, method = component_probabilities(component)

    assert probs is None
    assert method == METHOD_CONTRADICTION


def test_large_component_uses_density_average(monkeypatch):
    cells = _cells(20)
    first = Constraint(frozenset(cells[0:12]), 3)
    second = Constraint(frozenset(cells[8:20]), 6)
    component = _component(cells, first, second)

    def fail(_component):
        raise AssertionError("enumeration must not run for oversized components")

    monkeypatch.setattr(probability, "enumerate_component", fail)
    probs, method = component_probabilities(component)

    assert method == METHOD_DENSITY
    for cell in cells[0:8]:
        assert probs[cell] == pytest.approx(0.25)
    for cell in cells[8:12]:
        assert probs[cell] == pytest.approx(0.375)
    for cell in cells[12:20]:
        assert probs[cell] == pytest.approx(0.5)


def test_density_averages_pairwise_in_constraint_order():
    x, a, b, c, d, e, f = _cells(7)
    component = _component(
        [x, a, b, c, d, e, f],
        Constraint(frozenset([x, a]), 1),
        Constraint(frozenset([x, b, c, d, e]), 1),
        Constraint(frozenset([x, f]), 1),
    )

    estimates = density_estimates(component)

    # ((0.5 + 0.2) / 2 + 0.5) / 2, not the plain mean of the three densities.
    assert estimates[x] == pytest.approx(0.425)
    assert estimates[b] == pytest.approx(0.2)


@pytest.mark.parametrize("size, method", [(15, METHOD_ENUMERATION), (16, METHOD_DENSITY)])
def test_enumeration_limit_boundary(size, method):
    cells = _cells(size)
    component = _component(cells, Constraint(frozenset(cells), 1))

    probs, used = component_probabilities(component)

    assert used == method
    assert probs[cells[0]] == pytest.approx(1 / size)


def test_custom_enumeration_limit():
    cells = _cells(3)
    component = _component(cells, Constraint(frozenset(cells), 1))

    _, method = component_probabilities(component, enumeration_limit=2)

    assert method == METHOD_DENSITY


def test_budget_spreads_remaining_mines():
    meta = BoardMeta(width=10, height=5, total_mines=10)

    assert budget_probability(meta, 5, 3, 12) == pytest.approx(2 / 30)


def test_budget_without_meta_or_unknowns():
    meta = BoardMeta(width=2, height=2, total_mines=1)

    assert budget_probability(None, 0, 0, 0) is None
    assert budget_probability(meta, 0, 1, 3) is None


def test_budget_is_clamped():
    meta = BoardMeta(width=3, height=3, total_mines=8)

    assert budget_probability(meta, 0, 0, 7) == 1.0
    assert budget_probability(meta, 4, 4, 0) == 0.0


def test_apply_budget_only_fills_missing_entries():
    a, b, c = _cells(3)
    probs = {a: 0.5}

    assigned = apply_budget(probs, [a, b, c], 0.1)

    assert assigned == 2
    assert probs == {a: 0.5, b: 0.1, c: 0.1}
    assert apply_budget(probs, [a, b, c], None) == 0
