import pytest

from minehint.display import (
    DisplayMode,
    efficiency_move,
    filter_efficient,
    format_probability_grid,
    probability_color,
    select_cells,
)
from minehint.grid import Grid
from minehint.solver import analyze_board


def _picked(selection):
    return [(cell.coord, label) for cell, _, label in selection]


def test_mines_and_safe_modes():
    mined = analyze_board(Grid.from_text("1.\nxx"))
    assert _picked(select_cells(mined, DisplayMode.MINES)) == [((0, 1), "M")]
    assert select_cells(mined, DisplayMode.SAFE) == []

    safe = analyze_board(Grid.from_text("0.\n.x"))
    assert _picked(select_cells(safe, DisplayMode.SAFE)) == [((0, 1), "✓"), ((1, 0), "✓")]


def test_probabilities_mode_and_efficiency_filter():
    result = analyze_board(Grid.from_text("11x\n..."))

    full = select_cells(result, DisplayMode.PROBABILITIES)
    assert _picked(full) == [((1, 0), "50%"), ((1, 1), "50%"), ((1, 2), "0%")]

    efficient = select_cells(result, DisplayMode.PROBABILITIES, efficiency_mode=True)
    assert _picked(efficient) == [((1, 2), "0%")]


def test_efficiency_move_prefers_proven_safe_cells():
    result = analyze_board(Grid.from_text("11x\n..."))

    assert _picked(efficiency_move(result)) == [((1, 2), "✓")]


def test_efficiency_move_falls_back_to_lowest_probability():
    result = analyze_board(Grid.from_text("x.x\n.1."))

    assert _picked(select_cells(result, DisplayMode.EFFICIENCY_MOVE)) == [((0, 1), "33%")]


def test_efficiency_move_without_entries():
    result = analyze_board(Grid.from_text("1F\n--"))

    assert efficiency_move(result) == []


def test_filter_efficient_thresholds():
    result = analyze_board(Grid.from_text("x.x\n.1."))

    assert filter_efficient(result.probabilities) == {}
    assert len(filter_efficient(result.probabilities, low=0.4, high=0.9)) == 3

    with pytest.raises(ValueError):
        filter_efficient(result.probabilities, low=0.9, high=0.1)
    with pytest.raises(ValueError):
        filter_efficient(result.probabilities, low=-0.1)


def test_probability_color_gradient():
    assert probability_color(0.0) == (0, 255, 0, 0.55)
    assert probability_color(1.0) == (255, 0, 0, 0.55)
    assert probability_color(2.0, alpha=1.0) == (255, 0, 0, 1.0)


def test_format_probability_grid():
    grid = Grid.from_text("11x\n...")
    result = analyze_board(grid)

    text = format_probability_grid(grid, result)
    lines = text.splitlines()

    assert len(lines) == 4
    assert "50%" in lines[3] and "S" in lines[3]
    assert "1" in lines[2]

    bare = format_probability_grid(grid, None)
    assert "?" in bare.splitlines()[3]
