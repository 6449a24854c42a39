"""
activity.py - Best-effort state change notifications for a game

An ActivityChannel carries the result of every move from the engine to a
single observer (for instance a streaming HTTP handler). Sends never block:
when the buffer is full the state is dropped, and observers are expected to
re-read the full game state instead of relying on every event. Once a
terminal state has been sent the channel is closed for good.
"""

import threading
from collections import deque
from typing import Deque, Iterator, Optional

from connectn.debug import debug
from connectn.utils import DEFAULT_ACTIVITY_CAPACITY, State


class ActivityChannel:
    """Bounded, non-blocking-on-send, close-once queue of game states."""

    def __init__(self, capacity: int = DEFAULT_ACTIVITY_CAPACITY):
        if capacity < 1:
            raise ValueError(f"capacity must be positive, got {capacity}")
        self.capacity = capacity
        self._items: Deque[State] = deque()
        self._closed = False
        self._dropped = 0
        self._cond = threading.Condition(threading.Lock())

    @property
    def closed(self) -> bool:
        with self._cond:
            return self._closed

    @property
    def dropped(self) -> int:
        """Number of states dropped because the buffer was full."""
        with self._cond:
            return self._dropped

    @property
    def exhausted(self) -> bool:
        """True once the channel is closed and every buffered state was read."""
        with self._cond:
            return self._closed and not self._items

    def __len__(self) -> int:
        with self._cond:
            return len(self._items)

    def notify(self, state: State) -> bool:
        """
        Offer a state to the observer.

        A terminal state closes the channel after being offered. Offers on a
        closed channel are ignored.

        Args:
            state: The state resulting from a move

        Returns:
            True if the state was buffered, False if it was dropped
        """
        with self._cond:
            if self._closed:
                return False

            delivered = len(self._items) < self.capacity
            if delivered:
                self._items.append(state)
            else:
                self._dropped += 1
                debug.debug(f"Activity buffer full, dropping {state}", "activity")

            if state.is_terminal():
                self._closed = True
                debug.debug(f"Activity channel closed on {state}", "activity")
            self._cond.notify_all()
            return delivered

    def close(self) -> None:
        """Close the channel; buffered states can still be read."""
        with self._cond:
            if not self._closed:
                self._closed = True
                self._cond.notify_all()

    def get(self, timeout: Optional[float] = None) -> Optional[State]:
        """
        Wait for the next state.

        Args:
            timeout: Seconds to wait, None to wait until a state arrives or
                the channel is closed

        Returns:
            The next state, or None at end of stream or on timeout
        """
        with self._cond:
            self._cond.wait_for(lambda: self._items or self._closed, timeout=timeout)
            if self._items:
                return self._items.popleft()
            return None

    def __iter__(self) -> Iterator[State]:
        """Yield states until the channel is closed and drained."""
        while True:
            state = self.get()
            if state is None:
                return
            yield state
