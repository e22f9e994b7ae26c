"""Tap versus long-press disambiguation for touch input.

Used by UI hosts that turn raw pointer events into reveal and flag actions;
the game engine itself only sees the resulting reveal/toggle_flag calls.
"""
import asyncio
from enum import Enum
from typing import Any, Callable, Optional

from minisweeper.types import Position

LONG_PRESS_DURATION = 0.5

Scheduler = Callable[[float, Callable[[], None]], Any]


class GestureState(str, Enum):
    IDLE = 'idle'
    PENDING = 'pending'
    FIRED = 'fired'
    CANCELED = 'canceled'


def _call_later(delay: float, callback: Callable[[], None]) -> asyncio.TimerHandle:
    return asyncio.get_running_loop().call_later(delay, callback)


class LongPressGesture:
    """Decides whether a press is a tap (reveal) or a long press (flag).

    Each press starts a new gesture. The deferred long-press action and the
    release race each other; whichever arrives first moves the gesture out
    of PENDING, so only one of ``on_tap`` and ``on_long_press`` ever runs for
    a given press.
    """

    def __init__(self, on_tap: Callable[[int, int], None], on_long_press: Callable[[int, int], None],
                 schedule: Optional[Scheduler] = None, duration: float = LONG_PRESS_DURATION):
        self._on_tap = on_tap
        self._on_long_press = on_long_press
        self._schedule = schedule or _call_later
        self._duration = duration
        self._handle = None
        self._generation = 0
        self.state = GestureState.IDLE
        self.position: Optional[Position] = None

    def press(self, row: int, col: int) -> None:
        self._cancel_pending()
        self._generation += 1
        generation = self._generation
        self.position = (row, col)
        self.state = GestureState.PENDING
        self._handle = self._schedule(self._duration, lambda: self._fire(generation))

    def release(self) -> None:
        if self.state != GestureState.PENDING:
            return
        self._cancel_pending()
        self.state = GestureState.CANCELED
        self._on_tap(*self.position)

    def move(self) -> None:
        if self.state != GestureState.PENDING:
            return
        self._cancel_pending()
        self.state = GestureState.CANCELED

    def _fire(self, generation: int) -> None:
        # A stale timer from an earlier press must not act on this one.
        if generation != self._generation or self.state != GestureState.PENDING:
            return
        self._handle = None
        self.state = GestureState.FIRED
        self._on_long_press(*self.position)

    def _cancel_pending(self) -> None:
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None
        if self.state == GestureState.PENDING:
            self.state = GestureState.CANCELED
