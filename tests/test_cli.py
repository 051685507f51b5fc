import pytest

from minehint.__main__ import main


def _board(tmp_path, text):
    path = tmp_path / "board.txt"
    path.write_text(text, encoding="utf-8")
    return str(path)


def test_prints_probability_grid(tmp_path, capsys):
    code = main([_board(tmp_path, "11x\n...")])

    out = capsys.readouterr().out
    assert code == 0
    assert "50%" in out
    assert "S" in out


def test_mode_selection(tmp_path, capsys):
    code = main([_board(tmp_path, "1.\nxx"), "--mode", "mines"])

    assert code == 0
    assert capsys.readouterr().out.strip() == "(0, 1) M"


def test_mines_option_enables_budget(tmp_path, capsys):
    board = _board(tmp_path, "1..\n...\n...")

    main([board, "--mode", "probabilities", "--mines", "2"])

    assert "(2, 2) 22%" in capsys.readouterr().out


def test_random_game_with_stats(capsys):
    code = main(["--random", "9x9x10", "--seed", "1", "--stats"])

    out = capsys.readouterr().out
    assert code == 0
    assert "components:" in out
    assert "budget_probability:" in out


def test_empty_board(tmp_path, capsys):
    code = main([_board(tmp_path, "xx\nxx")])

    assert code == 1
    assert "nothing to analyze" in capsys.readouterr().out


@pytest.mark.parametrize(
    "text, extra",
    [
        ("1Z", []),
        ("1.", ["--mines", "5"]),
        ("1.", ["--enumeration-limit", "-1"]),
    ],
)
def test_invalid_input_exit_code(tmp_path, capsys, text, extra):
    code = main([_board(tmp_path, text)] + extra)

    assert code == 2
    assert "Invalid input" in capsys.readouterr().err


def test_malformed_random_spec():
    with pytest.raises(SystemExit):
        main(["--random", "9by9"])
