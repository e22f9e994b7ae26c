"""
Unit tests for flag toggling
"""

from minisweeper.board import empty_board
from minisweeper.flags import remaining_mines, toggle_flag


def test_toggle_places_and_removes_flag():
    board = empty_board(3, 3, 1)

    assert toggle_flag(board, 1, 1) == 1
    assert board.cell(1, 1).is_flagged
    assert toggle_flag(board, 1, 1) == -1
    assert not board.cell(1, 1).is_flagged


def test_revealed_cell_cannot_be_flagged():
    board = empty_board(3, 3, 1)
    board.cell(0, 0).is_revealed = True

    assert toggle_flag(board, 0, 0) == 0
    assert not board.cell(0, 0).is_flagged


def test_out_of_bounds_is_ignored():
    board = empty_board(3, 3, 1)

    assert toggle_flag(board, 3, 0) == 0
    assert toggle_flag(board, -1, 0) == 0


def test_remaining_mines_can_go_negative():
    assert remaining_mines(10, 3) == 7
    assert remaining_mines(10, 12) == -2
