"""Consumer-side selection and formatting of analysis results."""

from enum import Enum
from typing import Dict, List, Mapping, Optional, Tuple

from .grid import Cell, Grid, cell_sort_key
from .solver import AnalysisResult

MINE_LABEL = "M"
SAFE_LABEL = "✓"

# Efficiency mode keeps only near-certain probabilities.
EFFICIENCY_LOW: float = 0.1
EFFICIENCY_HIGH: float = 0.9

Selection = List[Tuple[Cell, float, str]]


class DisplayMode(Enum):
    """The result sets a front end can ask for."""

    MINES = "mines"
    SAFE = "safe"
    PROBABILITIES = "probabilities"
    EFFICIENCY_MOVE = "efficiency"


def percent_label(probability: float) -> str:
    return f"{round(probability * 100)}%"


def filter_efficient(
    probabilities: Mapping[Cell, float],
    low: float = EFFICIENCY_LOW,
    high: float = EFFICIENCY_HIGH,
) -> Dict[Cell, float]:
    """
    Keep only entries at or below `low` or at or above `high`.

    Raises:
        ValueError: If the thresholds are outside [0, 1] or low > high.
    """
    if not (0.0 <= low <= high <= 1.0):
        raise ValueError("Thresholds must satisfy 0 <= low <= high <= 1.")
    return {cell: p for cell, p in probabilities.items() if p <= low or p >= high}


def efficiency_move(result: AnalysisResult) -> Selection:
    """
    Suggest what to open next.

    Every proven-safe cell when there is one; otherwise the single entry
    with the lowest mine probability (row-major on ties); otherwise nothing.
    """
    if result.known_safe:
        return [
            (cell, 0.0, SAFE_LABEL)
            for cell in sorted(result.known_safe, key=cell_sort_key)
        ]

    best: Optional[Tuple[Cell, float]] = None
    for cell in sorted(result.probabilities, key=cell_sort_key):
        p = result.probabilities[cell]
        if best is None or p < best[1]:
            best = (cell, p)

    if best is None:
        return []
    return [(best[0], best[1], percent_label(best[1]))]


def select_cells(
    result: AnalysisResult,
    mode: DisplayMode,
    efficiency_mode: bool = False,
) -> Selection:
    """
    Pick the (cell, probability, label) triples a front end should show.

    Args:
        result: Engine output.
        mode: Which result set to show.
        efficiency_mode: In PROBABILITIES mode, hide uncertain entries.

    Returns:
        Row-major list of (cell, probability, label).
    """
    if mode is DisplayMode.MINES:
        return [
            (cell, 1.0, MINE_LABEL)
            for cell in sorted(result.known_mines, key=cell_sort_key)
        ]

    if mode is DisplayMode.SAFE:
        return [
            (cell, 0.0, SAFE_LABEL)
            for cell in sorted(result.known_safe, key=cell_sort_key)
        ]

    if mode is DisplayMode.PROBABILITIES:
        probabilities: Mapping[Cell, float] = result.probabilities
        if efficiency_mode:
            probabilities = filter_efficient(probabilities)
        return [
            (cell, probabilities[cell], percent_label(probabilities[cell]))
            for cell in sorted(probabilities, key=cell_sort_key)
        ]

    return efficiency_move(result)


def probability_color(probability: float, alpha: float = 0.55) -> Tuple[int, int, int, float]:
    """Red/green RGBA gradient: green for safe, red for mine."""
    clamped = min(1.0, max(0.0, probability))
    red = round(255 * clamped)
    green = round(255 * (1 - clamped))
    return (red, green, 0, alpha)


def format_probability_grid(grid: Grid, result: Optional[AnalysisResult]) -> str:
    """
    Render the grid with the engine's conclusions as a text table.

    Known mines show as '*', known safe cells as 'S', other undetermined
    cells as their probability in percent ('?' without an entry); opened
    and flagged cells keep their text encoding.
    """
    lines: List[str] = []
    header = " ".join(f"{c:>4d}" for c in range(grid.width))
    lines.append("     " + header)
    lines.append("     " + "-" * (5 * grid.width - 1))

    for r in range(grid.height):
        row_cells: List[str] = []
        for c in range(grid.width):
            cell = grid.cell(r, c)
            if cell is None:
                token = ""
            elif result is not None and cell in result.known_mines:
                token = "*"
            elif result is not None and cell in result.known_safe:
                token = "S"
            elif cell.is_undetermined:
                p = result.probabilities.get(cell) if result is not None else None
                token = percent_label(p) if p is not None else "?"
            else:
                token = cell.to_char()
            row_cells.append(f"{token:>4s}")
        lines.append(f"{r:3d} |" + " ".join(row_cells))

    return "\n".join(lines)
