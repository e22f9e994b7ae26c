"""Flag toggling and the remaining-mine counter."""
from minisweeper.types import Board


def toggle_flag(board: Board, row: int, col: int) -> int:
    """Flip the flag on an unrevealed cell.

    Returns the change in flag count: 1 when a flag was placed, -1 when one
    was removed and 0 when the cell could not be flagged.
    """
    if not board.in_bounds(row, col):
        return 0
    cell = board.cell(row, col)
    if cell.is_revealed:
        return 0
    cell.is_flagged = not cell.is_flagged
    return 1 if cell.is_flagged else -1


def remaining_mines(mine_count: int, flag_count: int) -> int:
    # Over-flagging shows a negative counter.
    return mine_count - flag_count
