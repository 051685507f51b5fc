import pytest

from minehint.grid import BoardMeta, Cell, CellState, Grid


def test_from_text_classifies_every_encoding():
    grid = Grid.from_text(
        """
        1.-
        F?3
        """
    )

    assert grid.cell(0, 0) == Cell(0, 0, CellState.OPEN_NUMBER, 1)
    assert grid.cell(0, 1).state is CellState.CLOSED
    assert grid.cell(0, 2).state is CellState.OPEN_BLANK
    assert grid.cell(1, 0).state is CellState.FLAGGED
    assert grid.cell(1, 1).state is CellState.UNKNOWN
    assert grid.cell(1, 2).number == 3
    assert (grid.height, grid.width) == (2, 3)
    assert len(grid) == 6


def test_from_text_rejects_unknown_characters():
    with pytest.raises(ValueError):
        Grid.from_text("1Z")


def test_gap_cells_are_absent_and_never_neighbors():
    grid = Grid.from_text("1x.\n...")

    assert grid.cell(0, 1) is None
    center = grid.cell(1, 1)
    coords = sorted(n.coord for n in grid.neighbors(center))
    assert coords == [(0, 0), (0, 2), (1, 0), (1, 2)]


def test_neighbor_counts_on_full_rectangle():
    grid = Grid.from_text("...\n...\n...")

    assert len(grid.neighbors(grid.cell(0, 0))) == 3
    assert len(grid.neighbors(grid.cell(0, 1))) == 5
    assert len(grid.neighbors(grid.cell(1, 1))) == 8


def test_duplicate_coordinates_rejected():
    with pytest.raises(ValueError):
        Grid([[Cell(0, 0, CellState.CLOSED), Cell(0, 0, CellState.FLAGGED)]])


@pytest.mark.parametrize(
    "state, number",
    [
        (CellState.OPEN_NUMBER, None),
        (CellState.OPEN_NUMBER, 9),
        (CellState.OPEN_NUMBER, -1),
        (CellState.CLOSED, 1),
    ],
)
def test_invalid_cells_rejected(state, number):
    with pytest.raises(ValueError):
        Cell(0, 0, state, number)


def test_handle_is_ignored_by_equality():
    a = Cell(2, 3, CellState.CLOSED, handle="cell_3_2")
    b = Cell(2, 3, CellState.CLOSED, handle=object())

    assert a == b
    assert hash(a) == hash(b)
    assert a.handle == "cell_3_2"


def test_queries_and_counts():
    grid = Grid.from_text("F.1\n?F-")

    assert grid.flagged_count == 2
    assert [c.coord for c in grid.undetermined_cells()] == [(0, 1), (1, 0)]
    assert [c.coord for c in grid.numbered_cells()] == [(0, 2)]
    assert [c.coord for c in grid][:3] == [(0, 0), (0, 1), (0, 2)]
    assert grid.cell(0, 2) in grid
    assert Cell(0, 2, CellState.CLOSED) not in grid


def test_to_text_keeps_gaps_and_states():
    text = "1x.\nF?-\n.23"
    assert Grid.from_text(text).to_text() == text


def test_from_states_accepts_chars_pairs_and_gaps():
    grid = Grid.from_states(
        [
            ["1", (CellState.CLOSED, None), None],
            [(CellState.OPEN_NUMBER, 2), "x", "F"],
        ]
    )

    assert grid.cell(0, 0).number == 1
    assert grid.cell(0, 1).state is CellState.CLOSED
    assert grid.cell(0, 2) is None
    assert grid.cell(1, 0).number == 2
    assert grid.cell(1, 1) is None
    assert grid.cell(1, 2).is_flagged


def test_empty_grid():
    grid = Grid.from_text("")

    assert grid.is_empty
    assert (grid.height, grid.width) == (0, 0)
    assert list(grid.cells()) == []


def test_board_meta_validation():
    meta = BoardMeta(width=10, height=5, total_mines=10)
    assert meta.total_cells == 50

    with pytest.raises(ValueError):
        BoardMeta(width=0, height=5, total_mines=1)
    with pytest.raises(ValueError):
        BoardMeta(width=2, height=2, total_mines=5)
    with pytest.raises(ValueError):
        BoardMeta(width=2, height=2, total_mines=-1)
