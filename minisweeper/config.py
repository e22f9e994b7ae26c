"""Environment-driven settings."""
import os

PORT = int(os.getenv("PORT", 3001))
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///local.db")
APP_URL = os.getenv("APP_URL")
TASK_QUEUE = os.getenv("TASK_QUEUE", "minesweeper-task-queue")

TEMPORAL_ADDRESS = os.getenv("TEMPORAL_ADDRESS", "localhost:7233")
TEMPORAL_NAMESPACE = os.getenv("TEMPORAL_NAMESPACE", "default")
TEMPORAL_PROFILE = os.getenv("TEMPORAL_PROFILE")

# Signed domain association issued by the hosting platform.
MANIFEST_HEADER = os.getenv("MANIFEST_HEADER", "")
MANIFEST_PAYLOAD = os.getenv("MANIFEST_PAYLOAD", "")
MANIFEST_SIGNATURE = os.getenv("MANIFEST_SIGNATURE", "")

LEADERBOARD_SIZE = 10
