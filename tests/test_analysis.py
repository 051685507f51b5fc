import math

import matplotlib.pyplot as plt
import numpy as np
import pytest

from minehint.analysis import (
    plot_calibration,
    run_calibration_test,
    run_many_calibration_tests,
)


def test_calibration_game_is_sound():
    out = run_calibration_test(9, 9, 10, seed=5)

    assert out["status"] in (-1, 0, 1)
    assert out["soundness_violations"] == 0
    assert all(0.0 <= p <= 1.0 and y in (0, 1) for p, y in out["predictions"])
    if out["moves"]:
        assert out["stats"]["numbered_cells"] > 0


def test_calibration_game_respects_move_limit():
    out = run_calibration_test(16, 16, 40, max_moves=1, seed=2)

    assert out["moves"] <= 1


def test_many_games_summary():
    summary = run_many_calibration_tests(9, 9, 10, runs=3, bins=5, seed=0)

    assert 0.0 <= summary["win_rate"] <= 1.0
    assert summary["soundness_violations"] == 0
    assert len(summary["bin_edges"]) == 6
    assert summary["bin_counts"].sum() == summary["samples"]
    if summary["samples"]:
        assert 0.0 <= summary["brier_score"] <= 1.0
    else:
        assert math.isnan(summary["brier_score"])
    filled = summary["bin_counts"] > 0
    assert np.all(summary["bin_observed"][filled] >= 0.0)


def test_many_games_validation():
    with pytest.raises(ValueError):
        run_many_calibration_tests(9, 9, 10, runs=0)
    with pytest.raises(ValueError):
        run_many_calibration_tests(9, 9, 10, runs=1, bins=0)


def test_plot_calibration_returns_figure():
    summary = run_many_calibration_tests(9, 9, 10, runs=2, seed=1)

    fig = plot_calibration(summary, show=False)

    assert len(fig.axes) == 2
    plt.close(fig)
