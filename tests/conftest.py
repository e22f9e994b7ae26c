"""Shared fixtures for the Minisweeper tests."""

import random

import pytest

from minisweeper.leaderboard import LeaderboardStore
from minisweeper.session import GameSession
from minisweeper.types import Difficulty, GameStatus, Player


class FakeClock:
    """Manually advanced replacement for time.monotonic"""

    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float):
        self.now += seconds


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def player():
    return Player(user_fid=42, username="alice")


@pytest.fixture
def session(rng, clock, player):
    return GameSession(Difficulty.EASY, player=player, rng=rng, clock=clock)


@pytest.fixture
def store():
    store = LeaderboardStore("sqlite://")
    store.init()
    return store


def reveal_all_safe(session):
    """Reveal every non-mine cell of an already generated board"""
    for row in session.board.cells:
        for cell in row:
            if not cell.is_mine:
                session.reveal(cell.row, cell.col)


def started_session(clock, player=None, row=4, col=4):
    """Return an easy session whose first reveal left the game in progress"""
    for seed in range(100):
        session = GameSession(Difficulty.EASY, player=player, rng=random.Random(seed), clock=clock)
        session.reveal(row, col)
        if session.status == GameStatus.IN_PROGRESS:
            return session
    pytest.fail("No seed produced an unfinished first reveal")
