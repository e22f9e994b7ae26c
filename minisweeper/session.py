"""Game session state machine."""
import logging
import random
from dataclasses import dataclass
from typing import Callable, List, Optional

from minisweeper import flags, reveal
from minisweeper.board import empty_board, generate_board
from minisweeper.timer import SessionTimer
from minisweeper.types import (
    Board, Difficulty, GameSnapshot, GameStatus, Player, ScoreSubmission,
)

logger = logging.getLogger(__name__)

TERMINAL = (GameStatus.WON, GameStatus.LOST)


@dataclass
class SessionEvent:
    kind: str  # 'changed', 'tick', 'won', 'lost' or 'score'
    session: 'GameSession'
    submission: Optional[ScoreSubmission] = None


Listener = Callable[[SessionEvent], None]


class GameSession:
    """One player's game of minesweeper.

    The board is laid out lazily on the first reveal so that the first click
    and its neighbours are always safe. All actions are synchronous; the
    timer is the only thing that runs on its own, and it is stopped exactly
    once per game, on the first terminal transition or on reset.
    """

    def __init__(self, difficulty: Difficulty = Difficulty.EASY, player: Optional[Player] = None,
                 rng: Optional[random.Random] = None, clock: Optional[Callable[[], float]] = None,
                 tick: bool = False, tick_interval: float = 1.0):
        self.player = player
        self._rng = rng or random.Random()
        self._clock = clock
        self._tick = tick
        self._tick_interval = tick_interval
        self._listeners: List[Listener] = []
        self.timer: Optional[SessionTimer] = None
        self.reset(difficulty)

    def reset(self, difficulty: Optional[Difficulty] = None) -> None:
        """Throw away the current board and return to NOT_STARTED."""
        if difficulty is not None:
            self.difficulty = Difficulty(difficulty)
        if self.timer is not None:
            self.timer.stop()
        self.board: Board = empty_board(self.difficulty.rows, self.difficulty.cols, self.difficulty.mine_count)
        self.status = GameStatus.NOT_STARTED
        self.flag_count = 0
        self.timer = SessionTimer(clock=self._clock, on_tick=self._on_tick if self._tick else None,
                                  interval=self._tick_interval)
        self._emit('changed')

    @property
    def elapsed(self) -> int:
        return self.timer.elapsed

    @property
    def remaining_mines(self) -> int:
        return flags.remaining_mines(self.board.mine_count, self.flag_count)

    @property
    def is_over(self) -> bool:
        return self.status in TERMINAL

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register for state-change notifications. Returns an unsubscribe callable."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)
        return unsubscribe

    def reveal(self, row: int, col: int) -> None:
        if self.is_over or not self.board.in_bounds(row, col):
            return
        cell = self.board.cell(row, col)
        if cell.is_revealed or cell.is_flagged:
            return

        if self.status == GameStatus.NOT_STARTED:
            self._lay_mines(row, col)
            self.status = GameStatus.IN_PROGRESS
            self.timer.start()
            cell = self.board.cell(row, col)

        if cell.is_mine:
            self._lose(row, col)
            return

        reveal.flood_reveal(self.board, row, col)
        if reveal.is_cleared(self.board):
            self._win()
            return
        self._emit('changed')

    def toggle_flag(self, row: int, col: int) -> None:
        if self.is_over:
            return
        delta = flags.toggle_flag(self.board, row, col)
        if delta:
            self.flag_count += delta
            self._emit('changed')

    def snapshot(self, game_id: str = '') -> GameSnapshot:
        return GameSnapshot(
            id=game_id,
            difficulty=self.difficulty,
            status=self.status,
            rows=self.board.rows,
            cols=self.board.cols,
            mine_count=self.board.mine_count,
            flag_count=self.flag_count,
            remaining_mines=self.remaining_mines,
            elapsed=self.elapsed,
            cells=[[self._cell_token(cell) for cell in row] for row in self.board.cells],
            player=self.player,
        )

    def _cell_token(self, cell) -> str:
        if cell.is_flagged:
            if self.status == GameStatus.LOST:
                # After a loss every mine is shown, flagged ones included.
                return 'flagged_mine' if cell.is_mine else 'wrong_flag'
            return 'flag'
        if not cell.is_revealed:
            return 'hidden'
        if cell.is_mine:
            return 'exploded' if self.board.exploded == (cell.row, cell.col) else 'mine'
        return str(cell.value)

    def _lay_mines(self, row: int, col: int) -> None:
        board = generate_board(self.board.rows, self.board.cols, self.board.mine_count, row, col, self._rng)
        # Flags placed before the first reveal carry over.
        for old_row, new_row in zip(self.board.cells, board.cells):
            for old_cell, new_cell in zip(old_row, new_row):
                new_cell.is_flagged = old_cell.is_flagged
        self.board = board

    def _lose(self, row: int, col: int) -> None:
        self.status = GameStatus.LOST
        self.timer.stop()
        reveal.reveal_mines(self.board, exploded=(row, col))
        logger.debug(f"Session lost at ({row}, {col}) after {self.elapsed}s")
        self._emit('lost')

    def _win(self) -> None:
        self.status = GameStatus.WON
        self.timer.stop()
        self.flag_count += reveal.flag_mines(self.board)
        logger.debug(f"Session won in {self.elapsed}s")
        self._emit('won')
        if self.player is not None:
            submission = ScoreSubmission(
                user_fid=self.player.user_fid,
                username=self.player.username,
                difficulty=self.difficulty,
                time=max(self.elapsed, 1),
            )
            self._emit('score', submission)

    def _on_tick(self, elapsed: int) -> None:
        if not self.is_over:
            self._emit('tick')

    def _emit(self, kind: str, submission: Optional[ScoreSubmission] = None) -> None:
        event = SessionEvent(kind=kind, session=self, submission=submission)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as error:
                logger.error(f"Session listener failed on {kind} event: {error}")
