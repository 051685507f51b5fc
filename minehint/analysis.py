"""Calibration and benchmarking of the inference engine on simulated games."""

import random
from typing import Any, Dict, List, Optional, Tuple

import matplotlib.pyplot as plt
import numpy as np

from .engine import Minesweeper
from .grid import cell_sort_key
from .solver import BoardAnalyzer


def run_calibration_test(
    height: int,
    width: int,
    mines_count: int,
    *,
    mines_generation_algorithm: str = "safe_neighborhood_rule",
    enumeration_limit: int = 15,
    use_meta: bool = True,
    max_moves: Optional[int] = None,
    seed: Optional[int] = None,
) -> Dict[str, Any]:
    """
    Play one simulated game guided by the engine and collect its predictions.

    Each turn the visible board is analyzed; proven mines are flagged, proven
    safe cells are opened, and when none exist the lowest-probability cell is
    opened as a guess. Every undecided probability entry is recorded together
    with the ground truth.

    Args:
        height: Board rows.
        width: Board columns.
        mines_count: Total number of mines.
        mines_generation_algorithm: Mine placement rule for the simulated game.
        enumeration_limit: Forwarded to BoardAnalyzer.
        use_meta: If True, pass board metadata so the budget correction runs.
        max_moves: Upper bound on turns; defaults to the number of cells.
        seed: Seed for mine placement and fallback picks.

    Returns:
        Dict with "status" (-1 loss, 1 win, 0 unfinished), "moves", "guesses",
        "predictions" (list of (probability, is_mine)), "soundness_violations"
        and summed "stats" counters.
    """
    game = Minesweeper(
        height,
        width,
        mines_count,
        mines_generation_algorithm=mines_generation_algorithm,
        seed=seed,
    )
    analyzer = BoardAnalyzer(enumeration_limit=enumeration_limit)
    rng = random.Random(seed)
    limit = max_moves if max_moves is not None else height * width

    predictions: List[Tuple[float, int]] = []
    stats_totals: Dict[str, float] = {}
    soundness_violations = 0
    guesses = 0
    moves = 0

    status, _ = game.reveal(height // 2, width // 2)

    while status == 0 and moves < limit:
        moves += 1
        grid = game.snapshot()
        result = analyzer.analyze(grid, meta=game.meta if use_meta else None)
        if result is None:
            raise RuntimeError("Simulated game produced an empty grid.")

        for key, value in result.stats.as_dict().items():
            if isinstance(value, (int, float)) and not isinstance(value, bool):
                stats_totals[key] = stats_totals.get(key, 0.0) + float(value)

        for cell in result.known_mines:
            if not game.is_mine(cell.row, cell.col):
                soundness_violations += 1
        for cell in result.known_safe:
            if game.is_mine(cell.row, cell.col):
                soundness_violations += 1

        for cell, p in result.probabilities.items():
            if cell in result.known_mines or cell in result.known_safe:
                continue
            predictions.append((p, int(game.is_mine(cell.row, cell.col))))

        for cell in result.known_mines:
            if (cell.row, cell.col) not in game.flagged:
                game.flag(cell.row, cell.col)

        if result.known_safe:
            targets = sorted(result.known_safe, key=cell_sort_key)
        else:
            guesses += 1
            safest = result.safest_cells()
            if safest:
                targets = [safest[0][0]]
            else:
                closed = [
                    c for c in grid.undetermined_cells() if c not in result.known_mines
                ]
                if not closed:
                    break
                targets = [rng.choice(closed)]

        for cell in targets:
            status, _ = game.reveal(cell.row, cell.col)
            if status != 0:
                break

    return {
        "status": status,
        "moves": moves,
        "guesses": guesses,
        "predictions": predictions,
        "soundness_violations": soundness_violations,
        "stats": stats_totals,
    }


def run_many_calibration_tests(
    height: int,
    width: int,
    mines_count: int,
    runs: int,
    *,
    bins: int = 10,
    seed: Optional[int] = None,
    **kwargs: Any,
) -> Dict[str, Any]:
    """
    Run several calibration games and aggregate the predictions.

    Args:
        height: Board rows.
        width: Board columns.
        mines_count: Total number of mines.
        runs: Number of games, must be positive.
        bins: Number of equal-width probability bins for the reliability table.
        seed: Base seed; game i uses seed + i.
        **kwargs: Forwarded to run_calibration_test.

    Returns:
        Dict with "win_rate", "avg_moves", "avg_guesses", "brier_score",
        "soundness_violations", "samples", and per-bin arrays "bin_edges",
        "bin_predicted", "bin_observed", "bin_counts".

    Raises:
        ValueError: If runs or bins is not positive.
    """
    if runs <= 0:
        raise ValueError("runs must be positive.")
    if bins <= 0:
        raise ValueError("bins must be positive.")

    wins = 0
    moves = 0
    guesses = 0
    violations = 0
    predicted: List[float] = []
    observed: List[int] = []

    for i in range(runs):
        game_seed = None if seed is None else seed + i
        out = run_calibration_test(height, width, mines_count, seed=game_seed, **kwargs)
        if out["status"] == 1:
            wins += 1
        moves += out["moves"]
        guesses += out["guesses"]
        violations += out["soundness_violations"]
        for p, y in out["predictions"]:
            predicted.append(p)
            observed.append(y)

    p_arr = np.asarray(predicted, dtype=float)
    y_arr = np.asarray(observed, dtype=float)

    bin_edges = np.linspace(0.0, 1.0, bins + 1)
    bin_predicted = np.full(bins, np.nan)
    bin_observed = np.full(bins, np.nan)
    bin_counts = np.zeros(bins, dtype=int)

    if p_arr.size:
        brier_score = float(np.mean((p_arr - y_arr) ** 2))
        idx = np.clip(np.digitize(p_arr, bin_edges[1:-1]), 0, bins - 1)
        for b in range(bins):
            mask = idx == b
            bin_counts[b] = int(mask.sum())
            if bin_counts[b]:
                bin_predicted[b] = float(p_arr[mask].mean())
                bin_observed[b] = float(y_arr[mask].mean())
    else:
        brier_score = float("nan")

    return {
        "win_rate": wins / runs,
        "avg_moves": moves / runs,
        "avg_guesses": guesses / runs,
        "brier_score": brier_score,
        "soundness_violations": violations,
        "samples": int(p_arr.size),
        "bin_edges": bin_edges,
        "bin_predicted": bin_predicted,
        "bin_observed": bin_observed,
        "bin_counts": bin_counts,
    }


def plot_calibration(summary: Dict[str, Any], *, show: bool = True) -> Any:
    """
    Draw a reliability diagram from run_many_calibration_tests output.

    Returns:
        The matplotlib Figure.
    """
    edges = summary["bin_edges"]
    centers = (edges[:-1] + edges[1:]) / 2
    observed = summary["bin_observed"]
    counts = summary["bin_counts"]
    mask = counts > 0

    fig, (ax_rel, ax_hist) = plt.subplots(2, 1, figsize=(6, 7), sharex=True)  # type: ignore[misc]

    ax_rel.plot([0, 1], [0, 1], linestyle="--", color="gray", label="perfect")  # type: ignore[misc]
    ax_rel.plot(centers[mask], observed[mask], marker="o", label="engine")  # type: ignore[misc]
    ax_rel.set_ylabel("Observed mine frequency")  # type: ignore[misc]
    ax_rel.set_title(f"Calibration (Brier score {summary['brier_score']:.4f})")  # type: ignore[misc]
    ax_rel.set_ylim(0.0, 1.0)  # type: ignore[misc]
    ax_rel.legend()  # type: ignore[misc]

    ax_hist.bar(centers, counts, width=edges[1] - edges[0], edgecolor="black")  # type: ignore[misc]
    ax_hist.set_xlabel("Predicted mine probability")  # type: ignore[misc]
    ax_hist.set_ylabel("Samples")  # type: ignore[misc]

    fig.tight_layout()
    if show:
        plt.show()  # type: ignore[misc]
    return fig


def run_difficulty_level_analysis(
    runs: int, *, seed: Optional[int] = None, show: bool = True
) -> Dict[str, Dict[str, Any]]:
    """
    Run calibration games on the standard difficulty levels and plot win rates.

    Standard difficulty levels:
        - Beginner: 9x9, 10 mines
        - Intermediate: 16x16, 40 mines
        - Expert: 16x30, 99 mines
    """
    levels: Dict[str, Tuple[int, int, int]] = {
        "beginner": (9, 9, 10),
        "intermediate": (16, 16, 40),
        "expert": (16, 30, 99),
    }

    results: Dict[str, Dict[str, Any]] = {}
    for level, (h, w, m) in levels.items():
        results[level] = run_many_calibration_tests(h, w, m, runs, seed=seed)

    level_names = list(levels.keys())
    x = np.arange(len(level_names))
    bar_w = 0.4

    plt.figure()  # type: ignore[misc]
    plt.bar(x - bar_w / 2, [results[n]["win_rate"] for n in level_names], width=bar_w, label="win rate")  # type: ignore[misc]
    plt.bar(x + bar_w / 2, [results[n]["brier_score"] for n in level_names], width=bar_w, label="Brier score")  # type: ignore[misc]
    plt.xticks(x, level_names)  # type: ignore[misc]
    plt.ylim(0.0, 1.0)  # type: ignore[misc]
    plt.title("Engine-guided play by difficulty level")  # type: ignore[misc]
    plt.legend()  # type: ignore[misc]
    plt.tight_layout()
    if show:
        plt.show()  # type: ignore[misc]

    return results
