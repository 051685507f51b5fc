"""Grid model: immutable cell snapshots, board metadata and neighbor lookup."""

from dataclasses import dataclass, field
from enum import Enum
from typing import (
    Any,
    Dict,
    Iterable,
    Iterator,
    List,
    Optional,
    Sequence,
    Tuple,
    Union,
)

from .utils import NEIGHBOR_OFFSETS


class CellState(Enum):
    """Visible state of a cell as classified by the grid-acquisition side."""

    CLOSED = "closed"
    FLAGGED = "flagged"
    OPEN_NUMBER = "open_number"
    OPEN_BLANK = "open_blank"
    UNKNOWN = "unknown"


# Text encoding used by Grid.from_text / Grid.to_text.
_CHAR_TO_STATE: Dict[str, CellState] = {
    ".": CellState.CLOSED,
    "F": CellState.FLAGGED,
    "?": CellState.UNKNOWN,
    "-": CellState.OPEN_BLANK,
}
_STATE_TO_CHAR: Dict[CellState, str] = {v: k for k, v in _CHAR_TO_STATE.items()}
GAP_CHAR = "x"

StateSpec = Union[str, Tuple[CellState, Optional[int]]]


@dataclass(frozen=True)
class Cell:
    """
    Immutable snapshot of one grid cell.

    Attributes:
        row: Row coordinate.
        col: Column coordinate.
        state: Visible state.
        number: Revealed number (0..8) when state is OPEN_NUMBER, else None.
        handle: Opaque identity supplied by the caller (e.g. an element id).
            It is carried through untouched and ignored by equality/hashing.
    """

    row: int
    col: int
    state: CellState
    number: Optional[int] = None
    handle: Any = field(default=None, compare=False, hash=False)

    def __post_init__(self) -> None:
        if self.state is CellState.OPEN_NUMBER:
            if self.number is None or not 0 <= self.number <= 8:
                raise ValueError(
                    f"OPEN_NUMBER cell at ({self.row}, {self.col}) needs a number in 0..8."
                )
        elif self.number is not None:
            raise ValueError(
                f"Cell at ({self.row}, {self.col}) in state {self.state.name} "
                "cannot carry a number."
            )

    @property
    def coord(self) -> Tuple[int, int]:
        return (self.row, self.col)

    @property
    def is_undetermined(self) -> bool:
        """True for cells that may still hide a mine (CLOSED or UNKNOWN)."""
        return self.state in (CellState.CLOSED, CellState.UNKNOWN)

    @property
    def is_flagged(self) -> bool:
        return self.state is CellState.FLAGGED

    @property
    def is_numbered(self) -> bool:
        return self.state is CellState.OPEN_NUMBER

    def to_char(self) -> str:
        """Single-character text encoding of this cell."""
        if self.state is CellState.OPEN_NUMBER:
            return str(self.number)
        return _STATE_TO_CHAR[self.state]

    @classmethod
    def from_char(cls, row: int, col: int, char: str, handle: Any = None) -> "Cell":
        """
        Build a cell from its text encoding.

        Raises:
            ValueError: If the character is not a known cell encoding.
        """
        if char.isdigit():
            return cls(row, col, CellState.OPEN_NUMBER, int(char), handle=handle)
        state = _CHAR_TO_STATE.get(char)
        if state is None:
            raise ValueError(f"Unrecognized cell character {char!r} at ({row}, {col}).")
        return cls(row, col, state, handle=handle)


def cell_sort_key(cell: Cell) -> Tuple[int, int]:
    """Row-major ordering key used wherever deterministic output matters."""
    return (cell.row, cell.col)


@dataclass(frozen=True)
class BoardMeta:
    """Board-level facts supplied alongside the grid (dimensions and mine total)."""

    width: int
    height: int
    total_mines: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Board width and height must be positive.")
        if not 0 <= self.total_mines <= self.width * self.height:
            raise ValueError("total_mines must be between 0 and width * height.")

    @property
    def total_cells(self) -> int:
        return self.width * self.height


class Grid:
    """
    Ordered rows of cell snapshots with coordinate lookup.

    Rows may be ragged and may contain gaps; a missing coordinate simply
    has no cell and is never reported as a neighbor.
    """

    def __init__(self, rows: Iterable[Iterable[Cell]]) -> None:
        """
        Build a grid from rows of cells.

        Args:
            rows: Rows of cells, each cell carrying its own (row, col).

        Raises:
            ValueError: If two cells share a coordinate.
        """
        self.rows: Tuple[Tuple[Cell, ...], ...] = tuple(tuple(r) for r in rows)
        self._index: Dict[Tuple[int, int], Cell] = {}

        for row in self.rows:
            for cell in row:
                if cell.coord in self._index:
                    raise ValueError(f"Duplicate cell at coordinate {cell.coord}.")
                self._index[cell.coord] = cell

        if self._index:
            self.height: int = max(r for r, _ in self._index) + 1
            self.width: int = max(c for _, c in self._index) + 1
        else:
            self.height = 0
            self.width = 0

    # -------------------------------------------------------------------------
    # Construction helpers
    # -------------------------------------------------------------------------

    @classmethod
    def from_text(cls, text: str) -> "Grid":
        """
        Parse a grid from its text encoding.

        One line per row, one character per cell:
        '.' closed, 'F' flagged, '?' unknown, '-' open blank,
        '0'..'8' open number, 'x' gap. Blank lines are ignored.
        """
        lines = [line.strip() for line in text.strip().splitlines()]
        lines = [line for line in lines if line]

        rows: List[List[Cell]] = []
        for r, line in enumerate(lines):
            rows.append(
                [
                    Cell.from_char(r, c, ch)
                    for c, ch in enumerate(line)
                    if ch != GAP_CHAR
                ]
            )
        return cls(rows)

    @classmethod
    def from_states(cls, rows: Sequence[Sequence[Optional[StateSpec]]]) -> "Grid":
        """
        Build a grid from nested lists of state specs.

        Each entry is either a text-encoding character, a (state, number)
        pair, or None for a gap.
        """
        out: List[List[Cell]] = []
        for r, spec_row in enumerate(rows):
            cells: List[Cell] = []
            for c, spec in enumerate(spec_row):
                if spec is None:
                    continue
                if isinstance(spec, str):
                    if spec == GAP_CHAR:
                        continue
                    cells.append(Cell.from_char(r, c, spec))
                else:
                    state, number = spec
                    cells.append(Cell(r, c, state, number))
            out.append(cells)
        return cls(out)

    def to_text(self) -> str:
        """Render the grid in the encoding accepted by from_text."""
        lines: List[str] = []
        for r in range(self.height):
            chars: List[str] = []
            for c in range(self.width):
                cell = self._index.get((r, c))
                chars.append(cell.to_char() if cell is not None else GAP_CHAR)
            lines.append("".join(chars))
        return "\n".join(lines)

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def __len__(self) -> int:
        return len(self._index)

    def __iter__(self) -> Iterator[Cell]:
        return self.cells()

    def __contains__(self, cell: object) -> bool:
        return isinstance(cell, Cell) and self._index.get(cell.coord) == cell

    @property
    def is_empty(self) -> bool:
        return not self._index

    def cell(self, row: int, col: int) -> Optional[Cell]:
        """Return the cell at (row, col), or None if there is none."""
        return self._index.get((row, col))

    def cells(self) -> Iterator[Cell]:
        """Iterate over all cells in row-major coordinate order."""
        for coord in sorted(self._index):
            yield self._index[coord]

    def neighbors(self, cell: Cell) -> List[Cell]:
        """Return the up to 8 existing neighbors of a cell."""
        out: List[Cell] = []
        for dr, dc in NEIGHBOR_OFFSETS:
            nbr = self._index.get((cell.row + dr, cell.col + dc))
            if nbr is not None:
                out.append(nbr)
        return out

    def numbered_cells(self) -> List[Cell]:
        return [c for c in self.cells() if c.is_numbered]

    def undetermined_cells(self) -> List[Cell]:
        """Cells still closed or of unknown state."""
        return [c for c in self.cells() if c.is_undetermined]

    @property
    def flagged_count(self) -> int:
        return sum(1 for c in self._index.values() if c.is_flagged)

    def __repr__(self) -> str:
        return f"Grid(height={self.height}, width={self.width}, cells={len(self)})"
