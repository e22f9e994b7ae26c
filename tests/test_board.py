"""
Unit tests for board generation
Tests mine placement, the first-click safe zone and neighbour counts
"""

import random

import pytest

from minisweeper.board import (
    BoardConfigurationError, count_neighbor_mines, empty_board, generate_board, neighbors,
)
from minisweeper.types import MINE, Difficulty


def mine_positions(board):
    return {(cell.row, cell.col) for row in board.cells for cell in row if cell.is_mine}


class TestNeighbors:

    def test_interior_cell_has_eight_neighbors(self):
        assert len(list(neighbors(4, 4, 8, 8))) == 8

    def test_corner_cell_has_three_neighbors(self):
        assert sorted(neighbors(0, 0, 8, 8)) == [(0, 1), (1, 0), (1, 1)]

    def test_edge_cell_has_five_neighbors(self):
        assert len(list(neighbors(0, 3, 8, 8))) == 5


class TestEmptyBoard:

    def test_empty_board_has_no_mines(self):
        board = empty_board(3, 4, 2)

        assert board.rows == 3
        assert board.cols == 4
        assert board.mine_count == 2
        assert board.mines == []
        assert board.generated is False
        assert all(not cell.is_mine for row in board.cells for cell in row)
        assert board.cell(2, 3).row == 2
        assert board.cell(2, 3).col == 3


class TestGenerateBoard:

    @pytest.mark.parametrize("difficulty", list(Difficulty))
    def test_exact_mine_count(self, difficulty):
        board = generate_board(difficulty.rows, difficulty.cols, difficulty.mine_count, 0, 0,
                               random.Random(7))

        assert len(board.mines) == difficulty.mine_count
        assert mine_positions(board) == set(board.mines)
        assert board.generated is True

    def test_scenario_center_click_on_eight_by_eight(self):
        """8x8 board, 10 mines, first reveal at (4, 4)"""
        for seed in range(50):
            board = generate_board(8, 8, 10, 4, 4, random.Random(seed))

            assert len(board.mines) == 10
            for row, col in board.mines:
                assert not (3 <= row <= 5 and 3 <= col <= 5), f"Mine at {(row, col)} with seed {seed}"

    def test_safe_zone_in_corner(self):
        for seed in range(20):
            board = generate_board(5, 5, 21, 0, 0, random.Random(seed))

            safe = {(0, 0), (0, 1), (1, 0), (1, 1)}
            assert not safe & set(board.mines)
            assert len(board.mines) == 21

    def test_values_match_neighbor_mines(self, rng):
        board = generate_board(16, 16, 60, 8, 8, rng)

        for row in board.cells:
            for cell in row:
                if cell.is_mine:
                    assert cell.value == MINE
                else:
                    expected = sum(1 for r, c in neighbors(cell.row, cell.col, 16, 16)
                                   if (r, c) in set(board.mines))
                    assert cell.value == expected
                    assert 0 <= cell.value <= 8

    def test_count_neighbor_mines(self):
        board = empty_board(3, 3, 2)
        board.cells[0][0].value = MINE
        board.cells[2][2].value = MINE

        assert count_neighbor_mines(board.cells, 1, 1, 3, 3) == 2
        assert count_neighbor_mines(board.cells, 0, 2, 3, 3) == 0

    def test_same_seed_same_board(self):
        first = generate_board(12, 12, 30, 5, 5, random.Random(99))
        second = generate_board(12, 12, 30, 5, 5, random.Random(99))

        assert first.mines == second.mines

    def test_board_can_be_completely_filled_outside_safe_zone(self):
        board = generate_board(4, 4, 12, 0, 0, random.Random(1))

        assert len(board.mines) == 12

    def test_too_many_mines_raises(self):
        with pytest.raises(BoardConfigurationError):
            generate_board(3, 3, 1, 1, 1)

    def test_negative_mine_count_raises(self):
        with pytest.raises(BoardConfigurationError):
            generate_board(8, 8, -1, 1, 1)

    def test_safe_cell_out_of_bounds_raises(self):
        with pytest.raises(BoardConfigurationError):
            generate_board(8, 8, 10, 8, 0)

    def test_configuration_error_is_value_error(self):
        assert issubclass(BoardConfigurationError, ValueError)
