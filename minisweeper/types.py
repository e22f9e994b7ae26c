"""Type definitions for Minisweeper."""
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import List, Optional, Tuple

MINE = -1

Position = Tuple[int, int]


@dataclass
class Cell:
    """Represents a single cell on the minesweeper board."""
    row: int
    col: int
    value: int = 0  # MINE or number of neighbouring mines
    is_revealed: bool = False
    is_flagged: bool = False

    @property
    def is_mine(self) -> bool:
        return self.value == MINE


@dataclass
class Board:
    """Represents the game board."""
    rows: int
    cols: int
    mine_count: int
    cells: List[List[Cell]]
    mines: List[Position] = field(default_factory=list)
    exploded: Optional[Position] = None
    revealed_count: int = 0
    generated: bool = False

    @property
    def safe_cell_total(self) -> int:
        return self.rows * self.cols - self.mine_count

    def in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[row][col]


class Difficulty(str, Enum):
    """Board presets offered by the mini app."""
    EASY = 'easy'
    MEDIUM = 'medium'
    HARD = 'hard'

    @property
    def rows(self) -> int:
        return _PRESETS[self][0]

    @property
    def cols(self) -> int:
        return _PRESETS[self][1]

    @property
    def mine_count(self) -> int:
        return _PRESETS[self][2]

    @classmethod
    def values(cls) -> List[str]:
        return [d.value for d in cls]


# rows, cols, mines
_PRESETS = {
    Difficulty.EASY: (8, 8, 10),
    Difficulty.MEDIUM: (12, 12, 30),
    Difficulty.HARD: (16, 16, 60),
}


class GameStatus(str, Enum):
    """Possible game states."""
    NOT_STARTED = 'NOT_STARTED'
    IN_PROGRESS = 'IN_PROGRESS'
    WON = 'WON'
    LOST = 'LOST'


@dataclass
class Player:
    """Identity supplied by the hosting platform."""
    user_fid: int
    username: str


@dataclass
class MoveRequest:
    """Request to make a move."""
    row: int
    col: int
    action: str  # 'reveal' or 'flag'


@dataclass
class NewGameRequest:
    """Request to start a game workflow."""
    difficulty: Difficulty
    player: Optional[Player] = None


@dataclass
class ScoreSubmission:
    """Completion time emitted when a session is won."""
    user_fid: int
    username: str
    difficulty: Difficulty
    time: int


@dataclass
class ScoreResult:
    is_new_best: bool


@dataclass
class ScoreEntry:
    """One leaderboard row."""
    user_fid: int
    username: str
    time: int
    created_at: Optional[datetime] = None


@dataclass
class GameSnapshot:
    """Render-ready view of a session."""
    id: str
    difficulty: Difficulty
    status: GameStatus
    rows: int
    cols: int
    mine_count: int
    flag_count: int
    remaining_mines: int
    elapsed: int
    cells: List[List[str]]
    player: Optional[Player] = None
    notice: Optional[str] = None
