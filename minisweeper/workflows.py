"""Temporal workflows for Minesweeper game."""
import asyncio
from datetime import timedelta
from typing import List, Optional

from temporalio import workflow
from temporalio.common import RetryPolicy

with workflow.unsafe.imports_passed_through():
    from minisweeper.activities import ScoreActivities
    from minisweeper.session import GameSession, SessionEvent
    from minisweeper.types import Difficulty, GameSnapshot, MoveRequest, NewGameRequest


@workflow.defn
class MinesweeperWorkflow:
    """Workflow that owns the GameSession of a single game."""

    def __init__(self):
        self.game_id: str = ""
        self.session: Optional[GameSession] = None
        self.notice: Optional[str] = None
        self.last_activity_time: float = 0
        self.should_close: bool = False
        self._submissions: List[asyncio.Task] = []
        self._round: int = 0

    @workflow.run
    async def run(self, game_id: str, request: NewGameRequest) -> None:
        """Main workflow entry point."""
        # Store game_id immediately so queries can access it during initialization
        self.game_id = game_id
        self.last_activity_time = workflow.time()

        # Workflow-provided randomness and time keep replays deterministic
        self.session = GameSession(
            request.difficulty,
            player=request.player,
            rng=workflow.random(),
            clock=workflow.time,
        )
        self.session.subscribe(self._on_session_event)

        # Auto-close workflow after 24 hours of inactivity
        inactivity_timeout = timedelta(hours=24)
        check_interval = timedelta(minutes=1)

        while not self.should_close:
            try:
                await workflow.wait_condition(
                    lambda: self.should_close or
                    (workflow.time() - self.last_activity_time) >= inactivity_timeout.total_seconds(),
                    timeout=check_interval.total_seconds(),
                )
            except asyncio.TimeoutError:
                pass

            if (workflow.time() - self.last_activity_time) >= inactivity_timeout.total_seconds():
                workflow.logger.info(f"Game {game_id} auto-closing due to 24 hours of inactivity")
                break

        # Let in-flight score submissions finish before the workflow completes
        if self._submissions:
            await asyncio.gather(*self._submissions, return_exceptions=True)

        workflow.logger.info(f"Minesweeper workflow {game_id} completed")

    @workflow.update
    async def make_move_update(self, move_request: MoveRequest) -> GameSnapshot:
        """Apply a reveal or flag and return the updated state."""
        await workflow.wait_condition(lambda: self.session is not None)
        self.last_activity_time = workflow.time()

        if move_request.action == 'reveal':
            self.session.reveal(move_request.row, move_request.col)
        elif move_request.action == 'flag':
            self.session.toggle_flag(move_request.row, move_request.col)
        else:
            workflow.logger.warning(f"Ignoring unknown action {move_request.action!r}")

        return self._snapshot()

    @workflow.update
    async def restart_game_update(self, difficulty: Difficulty) -> GameSnapshot:
        """Start over, optionally on a different difficulty."""
        await workflow.wait_condition(lambda: self.session is not None)
        self.last_activity_time = workflow.time()
        self.notice = None
        self._round += 1
        self.session.reset(difficulty)
        return self._snapshot()

    @workflow.signal
    def close_game_signal(self) -> None:
        """Signal to close the game."""
        self.should_close = True

    @workflow.query
    def get_game_state_query(self) -> Optional[GameSnapshot]:
        """Query to get the current game state."""
        if self.session is None:
            return None
        return self._snapshot()

    def _snapshot(self) -> GameSnapshot:
        snapshot = self.session.snapshot(self.game_id)
        snapshot.notice = self.notice
        return snapshot

    def _on_session_event(self, event: SessionEvent) -> None:
        if event.kind != 'score':
            return
        # Fire and forget: the game is already over whatever the outcome.
        handle = workflow.start_activity_method(
            ScoreActivities.submit_score,
            event.submission,
            start_to_close_timeout=timedelta(seconds=30),
            retry_policy=RetryPolicy(maximum_attempts=1),
        )
        round_ = self._round
        handle.add_done_callback(lambda done: self._on_submission_done(done, round_))
        self._submissions.append(handle)

    def _on_submission_done(self, handle: asyncio.Task, round_: int) -> None:
        if handle.cancelled():
            return
        error = handle.exception()
        if error is not None:
            workflow.logger.error(f"Failed to submit score for game {self.game_id}: {error}")
        # Outcomes of an earlier round must not show up on a restarted board.
        if round_ != self._round:
            return
        if error is not None:
            self.notice = 'Score could not be saved'
            return
        self.notice = 'New best score!' if handle.result().is_new_best else 'Score saved'
