"""Command line: analyze a text-encoded board (python -m minehint)."""

import argparse
import sys
from typing import List, Optional, Tuple

from .display import DisplayMode, format_probability_grid, select_cells
from .engine import Minesweeper
from .grid import BoardMeta, Grid
from .probability import ENUMERATION_LIMIT
from .solver import BoardAnalyzer


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="minehint",
        description=(
            "Infer mines, safe cells and mine probabilities from a board. "
            "Encoding: '.' closed, 'F' flag, '?' unknown, '-' open blank, "
            "'0'-'8' open number, 'x' no cell."
        ),
    )
    parser.add_argument(
        "board",
        nargs="?",
        help="Path to a text board; reads stdin when omitted or '-'",
    )
    parser.add_argument(
        "--mines",
        type=int,
        default=None,
        help="Total mine count, enables the budget probability for unconstrained cells",
    )
    parser.add_argument(
        "--mode",
        choices=[m.value for m in DisplayMode],
        default=None,
        help="Print only one result set instead of the full probability grid",
    )
    parser.add_argument(
        "--efficiency",
        action="store_true",
        help="In probabilities mode, show only near-certain entries",
    )
    parser.add_argument(
        "--enumeration-limit",
        type=int,
        default=ENUMERATION_LIMIT,
        help="Largest component solved exactly (default: %(default)s)",
    )
    parser.add_argument(
        "--random",
        metavar="HxWxM",
        default=None,
        help="Analyze a freshly opened simulated game instead, e.g. 16x16x40",
    )
    parser.add_argument("--seed", type=int, default=None, help="Seed for --random")
    parser.add_argument(
        "--stats", action="store_true", help="Print the analysis counters"
    )
    return parser


def _load_board(args: argparse.Namespace) -> Tuple[Grid, Optional[BoardMeta]]:
    if args.random:
        try:
            h, w, m = (int(part) for part in args.random.lower().split("x"))
        except ValueError:
            raise SystemExit("--random expects HxWxM, e.g. 16x16x40") from None
        game = Minesweeper(h, w, m, seed=args.seed)
        game.reveal(h // 2, w // 2)
        return game.snapshot(), game.meta

    if args.board in (None, "-"):
        text = sys.stdin.read()
    else:
        with open(args.board, encoding="utf-8") as f:
            text = f.read()

    grid = Grid.from_text(text)
    meta = None
    if args.mines is not None and not grid.is_empty:
        meta = BoardMeta(width=grid.width, height=grid.height, total_mines=args.mines)
    return grid, meta


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    try:
        grid, meta = _load_board(args)
        analyzer = BoardAnalyzer(enumeration_limit=args.enumeration_limit)
    except ValueError as exc:
        print(f"Invalid input: {exc}", file=sys.stderr)
        return 2

    result = analyzer.analyze(grid, meta=meta)
    if result is None:
        print("No cells recognized, nothing to analyze.")
        return 1

    if args.mode is None:
        print(format_probability_grid(grid, result))
    else:
        selection = select_cells(result, DisplayMode(args.mode), efficiency_mode=args.efficiency)
        for cell, _, label in selection:
            print(f"({cell.row}, {cell.col}) {label}")

    if args.stats:
        print()
        for key, value in result.stats.as_dict().items():
            print(f"{key}: {value}")

    return 0


if __name__ == "__main__":
    sys.exit(main())
