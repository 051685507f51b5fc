"""Simulated Minesweeper game that produces grid snapshots for the inference engine."""

import random
from collections import deque
from typing import Deque, Dict, FrozenSet, List, Optional, Set, Tuple

from .grid import BoardMeta, Cell, CellState, Grid
from .utils import get_neighborhoods

MINES_GENERATION_ALGORITHMS = ("safe_first_action_rule", "safe_neighborhood_rule")


class Minesweeper:
    """
    Game engine with first-click safety.

    Stands in for the grid-acquisition side in demos, tests and benchmarks:
    snapshot() returns exactly what a player could see.
    """

    def __init__(
        self,
        height: int,
        width: int,
        mines_count: int,
        mines_generation_algorithm: str = "safe_neighborhood_rule",
        seed: Optional[int] = None,
    ) -> None:
        """
        Initialize a game.

        Args:
            height: Number of rows, must be > 0.
            width: Number of columns, must be > 0.
            mines_count: Total number of mines, must be >= 0.
            mines_generation_algorithm: "safe_first_action_rule" keeps only
                the first revealed cell mine-free; "safe_neighborhood_rule"
                keeps its whole neighborhood mine-free.
            seed: Optional seed for reproducible mine placement.

        Raises:
            ValueError: If dimensions are invalid, the algorithm is unknown,
                or the mines cannot fit outside the safe zone.
        """
        if width <= 0 or height <= 0:
            raise ValueError("Width and height must be positive.")
        if mines_count < 0:
            raise ValueError("mines_count must be non-negative.")
        if mines_generation_algorithm not in MINES_GENERATION_ALGORITHMS:
            raise ValueError(
                'mines_generation_algorithm must be "safe_first_action_rule" '
                'or "safe_neighborhood_rule".'
            )

        reserved = 1 if mines_generation_algorithm == "safe_first_action_rule" else 9
        if mines_count > max(width * height - reserved, 0):
            raise ValueError(
                f"Cannot place {mines_count} mines while honoring {mines_generation_algorithm}."
            )

        self.height: int = height
        self.width: int = width
        self.mines_count: int = mines_count
        self.mines_generation_algorithm: str = mines_generation_algorithm
        self._rng = random.Random(seed)

        self.mines: Set[Tuple[int, int]] = set()
        self.numbers: Dict[Tuple[int, int], int] = {}
        self.revealed: Set[Tuple[int, int]] = set()
        self.flagged: Set[Tuple[int, int]] = set()
        self.first_move: bool = True
        self.game_over: bool = False

        self._neighborhoods: Dict[
            Tuple[int, int], Tuple[Tuple[int, int], ...]
        ] = get_neighborhoods(height, width)

    @property
    def meta(self) -> BoardMeta:
        return BoardMeta(width=self.width, height=self.height, total_mines=self.mines_count)

    @property
    def unrevealed_safe_count(self) -> int:
        return self.width * self.height - self.mines_count - len(self.revealed)

    def neighbors(self, row: int, col: int) -> Tuple[Tuple[int, int], ...]:
        """Return precomputed neighbor coordinates for a cell."""
        return self._neighborhoods[(row, col)]

    def is_mine(self, row: int, col: int) -> bool:
        return (row, col) in self.mines

    def _check_bounds(self, row: int, col: int) -> None:
        if not (0 <= row < self.height and 0 <= col < self.width):
            raise ValueError("Cell coordinates are outside the board.")

    def place_mines(self, first_row: int, first_col: int) -> None:
        """
        Place mines uniformly outside the safe zone of the first move.

        Raises:
            ValueError: If mines were already placed.
        """
        if not self.first_move:
            raise ValueError("Mines are already placed.")

        safe: Set[Tuple[int, int]] = {(first_row, first_col)}
        if self.mines_generation_algorithm == "safe_neighborhood_rule":
            safe |= set(self.neighbors(first_row, first_col))

        eligible: List[Tuple[int, int]] = [
            (r, c)
            for r in range(self.height)
            for c in range(self.width)
            if (r, c) not in safe
        ]

        self.mines = set(self._rng.sample(eligible, self.mines_count))
        self.numbers = {
            (r, c): sum(1 for nb in self.neighbors(r, c) if nb in self.mines)
            for r in range(self.height)
            for c in range(self.width)
            if (r, c) not in self.mines
        }
        self.first_move = False

    def flood_fill(self, row: int, col: int) -> List[Tuple[int, int]]:
        """Reveal the region opened from (row, col); zero cells spread to neighbors."""
        frontier: Deque[Tuple[int, int]] = deque([(row, col)])
        visited: Set[Tuple[int, int]] = {(row, col)}
        opened: List[Tuple[int, int]] = []

        while frontier:
            cur = frontier.popleft()
            if cur in self.revealed or cur in self.flagged:
                continue

            self.revealed.add(cur)
            opened.append(cur)

            if self.numbers[cur] == 0:
                for nb in self.neighbors(*cur):
                    if nb in visited or nb in self.revealed:
                        continue
                    visited.add(nb)
                    frontier.append(nb)

        return opened

    def reveal(self, row: int, col: int) -> Tuple[int, Dict[str, object]]:
        """
        Reveal a cell.

        Returns:
            (status, payload) where status is -1 for a mine hit, 0 for a
            non-terminal reveal or no-op, 1 once every safe cell is open.
            Payload holds "revealed_cells" for 0/1 and "all_mines" for -1.

        Raises:
            ValueError: If coordinates are out of bounds.
        """
        self._check_bounds(row, col)

        if self.game_over or (row, col) in self.revealed or (row, col) in self.flagged:
            return 0, {}

        if self.first_move:
            self.place_mines(row, col)

        if (row, col) in self.mines:
            self.game_over = True
            all_mines: FrozenSet[Tuple[int, int]] = frozenset(self.mines)
            return -1, {"all_mines": all_mines}

        opened = self.flood_fill(row, col)
        if self.unrevealed_safe_count == 0:
            self.game_over = True
            return 1, {"revealed_cells": opened}
        return 0, {"revealed_cells": opened}

    def flag(self, row: int, col: int) -> None:
        """Toggle a flag on an unrevealed cell."""
        self._check_bounds(row, col)
        if (row, col) in self.revealed:
            return
        if (row, col) in self.flagged:
            self.flagged.remove((row, col))
        else:
            self.flagged.add((row, col))

    def snapshot(self) -> Grid:
        """Return the player-visible board as a Grid."""
        rows: List[List[Cell]] = []
        for r in range(self.height):
            row: List[Cell] = []
            for c in range(self.width):
                if (r, c) in self.revealed:
                    row.append(Cell(r, c, CellState.OPEN_NUMBER, self.numbers[(r, c)]))
                elif (r, c) in self.flagged:
                    row.append(Cell(r, c, CellState.FLAGGED))
                else:
                    row.append(Cell(r, c, CellState.CLOSED))
            rows.append(row)
        return Grid(rows)
