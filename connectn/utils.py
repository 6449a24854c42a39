"""
utils.py - Constants, enumerations and helpers shared across connectn

This module provides the default game configuration, the cell/player State
enumeration with its fixed color palette, and the direction vectors used by
the win detection.
"""

from enum import Enum, IntEnum, auto
from typing import List, Tuple

# Default game configuration
DEFAULT_COLS = 7
DEFAULT_ROWS = 6
DEFAULT_N_PLAYERS = 2
DEFAULT_N_WIN = 4

# Notification channel buffer size
DEFAULT_ACTIVITY_CAPACITY = 32

# HTTP server defaults
DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 8080
# Seconds an /attach stream waits on the channel before checking its client
ATTACH_POLL_INTERVAL = 0.5

# Seconds per row for the terminal drop animation
DROP_DELAY = 0.05


class State(IntEnum):
    """Enumeration of cell values: empty, one of the player colors, or stale."""
    EMPTY = 0
    RED = 1
    YELLOW = 2
    GREEN = 3
    MAGENTA = 4
    BLUE = 5
    CYAN = 6
    BLACK = 7
    STALE = 8

    def is_player(self) -> bool:
        """Check if the state is one of the player colors."""
        return State.RED <= self <= State.BLACK

    def is_terminal(self) -> bool:
        """Check if the state ends a game (a winner or stale)."""
        return self != State.EMPTY

    def __str__(self) -> str:
        return self.name.lower()


# Ordered player colors; a game uses the first n_players of them
PALETTE: Tuple[State, ...] = (
    State.RED,
    State.YELLOW,
    State.GREEN,
    State.MAGENTA,
    State.BLUE,
    State.CYAN,
    State.BLACK,
)

MAX_PLAYERS = len(PALETTE)


class Direction(Enum):
    """Axis directions for win checking."""
    COLUMN = auto()         # down a column
    ROW = auto()            # along a row
    DIAGONAL_DOWN = auto()  # top-left to bottom-right
    DIAGONAL_UP = auto()    # bottom-left to top-right


# Direction vectors (row, col), in scanning order
DIRECTION_VECTORS = {
    Direction.COLUMN: (1, 0),
    Direction.ROW: (0, 1),
    Direction.DIAGONAL_DOWN: (1, 1),
    Direction.DIAGONAL_UP: (-1, 1),
}


def is_valid_position(row: int, col: int, rows: int, cols: int) -> bool:
    """
    Check if a position is within the board boundaries.

    Args:
        row: Row index
        col: Column index
        rows: Number of rows of the board
        cols: Number of columns of the board

    Returns:
        True if position is valid, False otherwise
    """
    return 0 <= row < rows and 0 <= col < cols


def active_players(n_players: int) -> List[State]:
    """Return the first n_players colors of the palette."""
    return list(PALETTE[:n_players])


def player_number(state: State) -> int:
    """1-based turn number of a player color (0 for non-players)."""
    return int(state) if state.is_player() else 0
