"""Best-time-per-player leaderboard backed by SQLAlchemy."""
import logging
from typing import Dict, List

from sqlalchemy import (
    CheckConstraint, Column, DateTime, Index, Integer, String, UniqueConstraint,
    create_engine, func, select, update,
)
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from minisweeper.config import LEADERBOARD_SIZE
from minisweeper.types import Difficulty, ScoreEntry, ScoreResult

logger = logging.getLogger(__name__)

Base = declarative_base()


class Score(Base):
    __tablename__ = "scores"
    __table_args__ = (
        CheckConstraint("difficulty IN ('easy', 'medium', 'hard')", name="ck_scores_difficulty"),
        UniqueConstraint("user_fid", "difficulty", name="uq_scores_user_difficulty"),
        Index("idx_scores_difficulty_time", "difficulty", "time"),
        Index("idx_scores_user_fid", "user_fid"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    user_fid = Column(Integer, nullable=False)
    username = Column(String, nullable=False)
    difficulty = Column(String, nullable=False)
    time = Column(Integer, nullable=False)  # best time in seconds
    created_at = Column(DateTime, server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<Score {self.username} ({self.user_fid}): {self.time}s on {self.difficulty}>"


class LeaderboardStore:
    """Keeps one row per (player, difficulty) holding that player's best time."""

    def __init__(self, database_url: str):
        if database_url in ("sqlite://", "sqlite:///:memory:"):
            # One shared connection, otherwise every checkout sees an empty database.
            self.engine = create_engine(database_url, poolclass=StaticPool,
                                        connect_args={"check_same_thread": False})
        else:
            self.engine = create_engine(database_url)
        self._sessions = sessionmaker(bind=self.engine, expire_on_commit=False)

    def init(self) -> None:
        """Create the scores table and its indexes if they are missing."""
        Base.metadata.create_all(self.engine)
        logger.info("Leaderboard database initialized")

    def submit_score(self, user_fid: int, username: str, difficulty, time_seconds: int) -> ScoreResult:
        """Record a completion time, keeping it only if it beats the stored best.

        The check and the write happen in a single statement: a conditional
        UPDATE that only matches a slower stored time, or an INSERT guarded by
        the (user_fid, difficulty) unique constraint. Ties are not a new best.
        """
        difficulty = Difficulty(difficulty).value
        if self._improve(user_fid, username, difficulty, time_seconds):
            return ScoreResult(is_new_best=True)

        try:
            with self._sessions.begin() as session:
                session.add(Score(user_fid=user_fid, username=username, difficulty=difficulty, time=time_seconds))
        except IntegrityError:
            # A row already exists, possibly inserted by a concurrent submission.
            return ScoreResult(is_new_best=self._improve(user_fid, username, difficulty, time_seconds))

        logger.info(f"First {difficulty} score for {user_fid}: {time_seconds}s")
        return ScoreResult(is_new_best=True)

    def _improve(self, user_fid: int, username: str, difficulty: str, time_seconds: int) -> bool:
        statement = (
            update(Score)
            .where(Score.user_fid == user_fid, Score.difficulty == difficulty, Score.time > time_seconds)
            .values(time=time_seconds, username=username, created_at=func.now())
            .execution_options(synchronize_session=False)
        )
        with self._sessions.begin() as session:
            improved = session.execute(statement).rowcount == 1
        if improved:
            logger.info(f"New {difficulty} best for {user_fid}: {time_seconds}s")
        return improved

    def top_scores(self, difficulty, limit: int = LEADERBOARD_SIZE) -> List[ScoreEntry]:
        """Fastest times for a difficulty, ties in insertion order."""
        statement = (
            select(Score)
            .where(Score.difficulty == Difficulty(difficulty).value)
            .order_by(Score.time.asc(), Score.id.asc())
            .limit(limit)
        )
        with self._sessions() as session:
            return [
                ScoreEntry(user_fid=score.user_fid, username=score.username, time=score.time,
                           created_at=score.created_at)
                for score in session.scalars(statement)
            ]

    def user_scores(self, user_fid: int) -> Dict[str, int]:
        statement = select(Score.difficulty, Score.time).where(Score.user_fid == user_fid)
        with self._sessions() as session:
            return {difficulty: time for difficulty, time in session.execute(statement)}
