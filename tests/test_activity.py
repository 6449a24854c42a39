"""Tests for the ActivityChannel notification queue."""

import threading
import time

import pytest

from connectn.game.activity import ActivityChannel
from connectn.utils import State


def test_notify_then_get():
    channel = ActivityChannel(4)
    assert channel.notify(State.EMPTY)
    assert channel.get(timeout=0) == State.EMPTY
    assert channel.get(timeout=0) is None
    assert not channel.closed


def test_send_is_dropped_when_full():
    channel = ActivityChannel(2)
    assert channel.notify(State.EMPTY)
    assert channel.notify(State.EMPTY)
    assert not channel.notify(State.EMPTY)
    assert channel.dropped == 1
    assert len(channel) == 2


def test_terminal_state_closes_channel():
    channel = ActivityChannel(4)
    channel.notify(State.EMPTY)
    channel.notify(State.YELLOW)
    assert channel.closed
    assert list(channel) == [State.EMPTY, State.YELLOW]


def test_terminal_state_closes_even_when_dropped():
    channel = ActivityChannel(1)
    channel.notify(State.EMPTY)
    assert not channel.notify(State.STALE)
    assert channel.closed
    assert list(channel) == [State.EMPTY]


def test_exhausted_after_close_and_drain():
    channel = ActivityChannel(4)
    channel.notify(State.EMPTY)
    assert channel.get(timeout=0) == State.EMPTY
    # a timed out read is not the end of the stream
    assert channel.get(timeout=0) is None
    assert not channel.exhausted
    channel.notify(State.RED)
    assert not channel.exhausted
    assert channel.get(timeout=0) == State.RED
    assert channel.exhausted


def test_notify_after_close_is_ignored():
    channel = ActivityChannel(4)
    channel.notify(State.RED)
    assert not channel.notify(State.EMPTY)
    assert channel.dropped == 0
    assert list(channel) == [State.RED]


def test_closed_channel_reads_do_not_block():
    channel = ActivityChannel(4)
    channel.close()
    start = time.monotonic()
    assert channel.get() is None
    assert channel.get() is None
    assert time.monotonic() - start < 1


def test_get_times_out():
    channel = ActivityChannel(4)
    assert channel.get(timeout=0.01) is None


def test_invalid_capacity():
    with pytest.raises(ValueError):
        ActivityChannel(0)


def test_observer_thread_sees_every_state():
    channel = ActivityChannel(16)
    received = []

    def observe():
        for state in channel:
            received.append(state)

    observer = threading.Thread(target=observe)
    observer.start()
    for _ in range(5):
        channel.notify(State.EMPTY)
    channel.notify(State.GREEN)
    observer.join(timeout=5)

    assert not observer.is_alive()
    assert received == [State.EMPTY] * 5 + [State.GREEN]


def test_blocked_observer_is_released_by_close():
    channel = ActivityChannel(4)
    result = []
    observer = threading.Thread(target=lambda: result.append(channel.get()))
    observer.start()
    time.sleep(0.05)
    channel.close()
    observer.join(timeout=5)

    assert not observer.is_alive()
    assert result == [None]
