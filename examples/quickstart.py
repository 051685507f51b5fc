"""
Quickstart example for the Minesweeper board inference engine.

This script demonstrates basic usage of the engine.
"""

from minehint import (
    BoardMeta,
    DisplayMode,
    Grid,
    Minesweeper,
    analyze_board,
    format_probability_grid,
    select_cells,
)
from minehint.analysis import run_many_calibration_tests


def main():
    print("=" * 60)
    print("Minesweeper Board Inference - Quickstart Example")
    print("=" * 60)

    # Example 1: Analyze a hand-written board
    print("\n1. Analyzing a text board...")
    print("-" * 60)

    grid = Grid.from_text(
        """
        .....
        .211.
        .1-1.
        .111.
        .....
        """
    )
    result = analyze_board(grid, meta=BoardMeta(width=5, height=5, total_mines=3))
    assert result is not None

    print(format_probability_grid(grid, result))
    print(f"Proven mines: {sorted(c.coord for c in result.known_mines)}")
    print(f"Proven safe:  {sorted(c.coord for c in result.known_safe)}")

    # Example 2: Analyze a simulated game after the first click
    print("\n2. Analyzing an Intermediate game (16x16, 40 mines) after the first click...")
    print("-" * 60)

    game = Minesweeper(16, 16, 40, seed=7)
    game.reveal(8, 8)
    result = analyze_board(game.snapshot(), meta=game.meta)
    assert result is not None

    for key, value in result.stats.as_dict().items():
        print(f"{key}: {value}")

    print("\nSuggested next move:")
    for cell, _, label in select_cells(result, DisplayMode.EFFICIENCY_MOVE):
        print(f"  ({cell.row}, {cell.col}) {label}")

    # Example 3: Calibration over many games
    print("\n3. Calibration over 20 Beginner games...")
    print("-" * 60)

    summary = run_many_calibration_tests(9, 9, 10, runs=20, seed=1)
    print(f"Win rate: {summary['win_rate']*100:.1f}%")
    print(f"Average guesses per game: {summary['avg_guesses']:.1f}")
    print(f"Brier score: {summary['brier_score']:.4f} over {summary['samples']} predictions")
    print(f"Soundness violations: {summary['soundness_violations']}")

    print("\n" + "=" * 60)
    print("Done! See README.md for more detailed usage instructions.")
    print("=" * 60)


if __name__ == "__main__":
    main()
