"""Temporal worker for Minesweeper game."""
import asyncio
import logging

from temporalio.worker import Worker

from minisweeper import config
from minisweeper.activities import ScoreActivities
from minisweeper.client_provider import get_temporal_client
from minisweeper.leaderboard import LeaderboardStore
from minisweeper.workflows import MinesweeperWorkflow

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


async def main():
    """Start the Temporal worker."""
    store = LeaderboardStore(config.DATABASE_URL)
    store.init()
    scores = ScoreActivities(store)

    # Connect to Temporal server
    client = await get_temporal_client()

    worker = Worker(
        client,
        task_queue=config.TASK_QUEUE,
        workflows=[MinesweeperWorkflow],
        activities=[scores.submit_score],
    )

    logger.info("Worker started, connected to Temporal")
    logger.info(f"Listening on task queue: {config.TASK_QUEUE}")

    await worker.run()


if __name__ == "__main__":
    asyncio.run(main())
