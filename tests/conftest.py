"""
Pytest configuration and shared fixtures for connectn tests.
"""

import sys
from pathlib import Path
from typing import Iterable, List

import pytest

# Make run.py importable from the tests
sys.path.insert(0, str(Path(__file__).parent.parent))

from connectn.game.rules import Game
from connectn.utils import State


def play(game: Game, columns: Iterable[int]) -> List[State]:
    """Play the columns in order, each by whoever's turn it is."""
    return [game.apply_move(game.current_player, col) for col in columns]


def assert_gravity(game: Game) -> None:
    """No empty cell below an occupied one in any column."""
    for col in range(game.columns):
        for row in range(game.rows - 1):
            if game.state(row, col) != State.EMPTY:
                assert game.state(row + 1, col) != State.EMPTY, (row, col)


@pytest.fixture
def game():
    """Classic 7x6 board, two players, four to win."""
    return Game(7, 6, 2, 4)


@pytest.fixture
def small_game():
    """3x2 board, two players, three to win: fills up without a winner."""
    return Game(3, 2, 2, 3)


# Columns played alternately by red and yellow
VERTICAL_WIN = [0, 1, 0, 1, 0, 1, 0]
HORIZONTAL_WIN = [0, 0, 1, 1, 2, 2, 3]
DIAGONAL_UP_WIN = [0, 1, 1, 2, 3, 2, 2, 3, 4, 3, 3]
DIAGONAL_DOWN_WIN = [3, 2, 2, 1, 0, 1, 1, 0, 6, 0, 0]
STALE_SMALL = [0, 1, 2, 0, 1, 2]
