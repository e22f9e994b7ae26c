"""Board generation: mine placement and neighbour counts."""
import random
from typing import Iterator, List, Optional

from minisweeper.types import MINE, Board, Cell, Position


class BoardConfigurationError(ValueError):
    """Raised when a board cannot be built from the requested parameters."""


def neighbors(row: int, col: int, rows: int, cols: int) -> Iterator[Position]:
    """Yield the in-bounds positions surrounding (row, col)."""
    for dr in [-1, 0, 1]:
        for dc in [-1, 0, 1]:
            if dr == 0 and dc == 0:
                continue
            new_row = row + dr
            new_col = col + dc
            if 0 <= new_row < rows and 0 <= new_col < cols:
                yield new_row, new_col


def count_neighbor_mines(cells: List[List[Cell]], row: int, col: int, rows: int, cols: int) -> int:
    """Count the number of mines in neighboring cells."""
    count = 0
    for new_row, new_col in neighbors(row, col, rows, cols):
        if cells[new_row][new_col].is_mine:
            count += 1
    return count


def empty_board(rows: int, cols: int, mine_count: int) -> Board:
    """Create a board with no mines placed yet."""
    cells = [[Cell(row=row, col=col) for col in range(cols)] for row in range(rows)]
    return Board(rows=rows, cols=cols, mine_count=mine_count, cells=cells)


def generate_board(rows: int, cols: int, mine_count: int, safe_row: int, safe_col: int,
                   rng: Optional[random.Random] = None) -> Board:
    """Create a board with mines placed outside the 3x3 zone around the safe cell.

    Mines are sampled uniformly from the remaining positions. Raises
    BoardConfigurationError if the safe cell is off the board or there is not
    enough room left for ``mine_count`` mines.
    """
    if not (0 <= safe_row < rows and 0 <= safe_col < cols):
        raise BoardConfigurationError(f"Safe cell ({safe_row}, {safe_col}) is outside a {rows}x{cols} board")

    safe_zone = {(safe_row, safe_col)}
    safe_zone.update(neighbors(safe_row, safe_col, rows, cols))
    candidates = [(row, col) for row in range(rows) for col in range(cols) if (row, col) not in safe_zone]

    if mine_count < 0 or mine_count > len(candidates):
        raise BoardConfigurationError(
            f"Cannot place {mine_count} mines on a {rows}x{cols} board with a 3x3 safe zone "
            f"({len(candidates)} positions available)"
        )

    rng = rng or random.Random()
    board = empty_board(rows, cols, mine_count)
    board.mines = sorted(rng.sample(candidates, mine_count))
    for row, col in board.mines:
        board.cells[row][col].value = MINE

    for row in range(rows):
        for col in range(cols):
            if not board.cells[row][col].is_mine:
                board.cells[row][col].value = count_neighbor_mines(board.cells, row, col, rows, cols)

    board.generated = True
    return board
