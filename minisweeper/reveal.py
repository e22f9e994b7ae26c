"""Reveal logic: flood fill and end-of-game mine display."""
from typing import List, Optional

from minisweeper.board import neighbors
from minisweeper.types import Board, Position


def flood_reveal(board: Board, row: int, col: int) -> List[Position]:
    """Reveal a safe cell, cascading through zero-valued neighbours.

    Uses an explicit stack so large open areas do not hit the recursion
    limit. Cells are marked revealed before their neighbours are pushed,
    so shared neighbours are visited once. Flagged cells and mines are
    never revealed. Returns the newly revealed positions.
    """
    revealed: List[Position] = []
    start = board.cell(row, col)
    if start.is_revealed or start.is_flagged or start.is_mine:
        return revealed

    start.is_revealed = True
    stack = [(row, col)]
    while stack:
        current_row, current_col = stack.pop()
        revealed.append((current_row, current_col))
        if board.cell(current_row, current_col).value != 0:
            continue
        for new_row, new_col in neighbors(current_row, current_col, board.rows, board.cols):
            neighbor = board.cell(new_row, new_col)
            if neighbor.is_revealed or neighbor.is_flagged or neighbor.is_mine:
                continue
            neighbor.is_revealed = True
            stack.append((new_row, new_col))

    board.revealed_count += len(revealed)
    return revealed


def reveal_mines(board: Board, exploded: Optional[Position] = None) -> List[Position]:
    """Show every unflagged mine after a loss."""
    if exploded is not None:
        board.exploded = exploded
    shown = []
    for row, col in board.mines:
        cell = board.cell(row, col)
        if cell.is_revealed or cell.is_flagged:
            continue
        cell.is_revealed = True
        shown.append((row, col))
    return shown


def flag_mines(board: Board) -> int:
    """Flag every remaining mine after a win. Returns the number of flags added."""
    added = 0
    for row, col in board.mines:
        cell = board.cell(row, col)
        if not cell.is_flagged:
            cell.is_flagged = True
            added += 1
    return added


def is_cleared(board: Board) -> bool:
    return board.revealed_count == board.safe_cell_total
