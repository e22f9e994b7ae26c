"""Temporal activities for score submission."""
import asyncio

from temporalio import activity

from minisweeper.leaderboard import LeaderboardStore
from minisweeper.types import ScoreResult, ScoreSubmission


class ScoreActivities:
    """Activities that talk to the leaderboard database."""

    def __init__(self, store: LeaderboardStore):
        self._store = store

    @activity.defn
    async def submit_score(self, submission: ScoreSubmission) -> ScoreResult:
        """Save a winning time for the player."""
        result = await asyncio.to_thread(
            self._store.submit_score,
            submission.user_fid,
            submission.username,
            submission.difficulty,
            submission.time,
        )
        activity.logger.info(
            f"Score {submission.time}s on {submission.difficulty.value} for {submission.user_fid}"
            f" (new best: {result.is_new_best})"
        )
        return result
