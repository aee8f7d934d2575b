"""
Tests for the terminal driver.
"""

import cli_driver
from session import Session


def test_render_session(near_terminal_grid):
    text = cli_driver.render_session(Session(grid=near_terminal_grid, score=36))

    assert "Score: 36" in text
    assert "Status: IN_PROGRESS" in text
    assert "2\t2\t16\t8" in text


def test_render_empty_cells_as_dots():
    grid = [[2, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0], [0, 0, 0, 0]]
    text = cli_driver.render_session(Session(grid=grid))
    assert "2\t.\t.\t." in text


def test_quit_and_invalid_input(monkeypatch, capsys):
    keys = iter(["x", "q"])
    monkeypatch.setattr("builtins.input", lambda prompt: next(keys))

    cli_driver.main()

    out = capsys.readouterr().out
    assert "Invalid input. Use W, A, S, D." in out
    assert "Quitting game." in out
    assert "--- Final Board State ---" in out


def test_plays_until_game_over(monkeypatch, capsys, near_terminal_grid):
    monkeypatch.setattr(cli_driver, "Session", lambda: Session(grid=near_terminal_grid))
    monkeypatch.setattr("builtins.input", lambda prompt: "a")

    cli_driver.main()

    out = capsys.readouterr().out
    assert "GAME OVER!" in out
    assert "Game Over" in out
    assert "I scored 4 in 2048!" in out
