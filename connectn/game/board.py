"""
board.py - Grid representation and win detection for N-in-a-row

This module implements the Board class which holds the cell grid of a game,
drops pieces under gravity, and computes whether the grid holds a winning
run or is stale.
"""

from typing import List

import numpy as np

from connectn.debug import debug
from connectn.errors import ColumnFullError
from connectn.utils import DIRECTION_VECTORS, State, is_valid_position


class Board:
    """
    A rows x columns grid of State values.

    Row 0 is the top row, where pieces enter; pieces fall towards the last
    row. The board knows nothing about turns or players, only cells.
    """

    def __init__(self, columns: int, rows: int, n_win: int):
        """
        Initialize an empty board.

        Args:
            columns: Number of columns
            rows: Number of rows
            n_win: Length of the run needed to win
        """
        debug.debug(f"Initializing {columns}x{rows} board, {n_win} to win", "board")
        self.columns = columns
        self.rows = rows
        self.n_win = n_win
        self.grid = np.zeros((rows, columns), dtype=int)

    def state(self, row: int, col: int) -> State:
        """Return the state of the cell at row/col."""
        return State(int(self.grid[row, col]))

    def column_occupancy(self, col: int) -> int:
        """
        Count the occupied cells of a column.

        Args:
            col: The column to check (0-indexed)

        Returns:
            The number of pieces in the column
        """
        if not 0 <= col < self.columns:
            raise IndexError(f"column {col} out of range 0..{self.columns - 1}")
        return int(np.count_nonzero(self.grid[:, col] != State.EMPTY))

    def is_column_full(self, col: int) -> bool:
        """Check if the top cell of a column is taken."""
        return self.grid[0, col] != State.EMPTY

    def drop(self, col: int, state: State) -> int:
        """
        Drop a piece in a column.

        The piece falls from the top row until the cell below it is occupied
        or it reaches the bottom row.

        Args:
            col: The column to play (0-indexed)
            state: The color of the piece

        Returns:
            The row the piece landed on
        """
        row = 0
        while row < self.rows and self.grid[row, col] == State.EMPTY:
            row += 1
        row -= 1
        if row < 0:
            debug.error(f"No empty row left in column {col}", "board")
            raise ColumnFullError(col)

        debug.trace(f"Placing {state} at ({row}, {col})", "board")
        self.grid[row, col] = state
        return row

    def compute(self) -> State:
        """
        Compute the state of the grid.

        Returns:
            The winning color if any run of n_win exists, STALE if the grid
            is full, EMPTY otherwise
        """
        with debug.timed("win_check", "board"):
            winner = self._find_winner()
        if winner != State.EMPTY:
            return winner
        if self.is_stale():
            return State.STALE
        return State.EMPTY

    def _find_winner(self) -> State:
        # Row-major start cells, then direction order.
        for x in range(self.rows):
            for y in range(self.columns):
                for dx, dy in DIRECTION_VECTORS.values():
                    ret = self._check_direction(x, y, dx, dy)
                    if ret != State.EMPTY:
                        return ret
        return State.EMPTY

    def _check_direction(self, x: int, y: int, dx: int, dy: int) -> State:
        """
        Walk n_win cells from x/y along dx/dy looking for a run.

        dx and dy should be either 0, 1 or -1.
        """
        prev = self.grid[x, y]
        streak = 0
        for i in range(self.n_win):
            row, col = x + i * dx, y + i * dy
            if not is_valid_position(row, col, self.rows, self.columns):
                return State.EMPTY

            cur = self.grid[row, col]
            if cur != prev:
                streak = 1
            else:
                streak += 1
                if cur != State.EMPTY and streak >= self.n_win:
                    return State(int(cur))
            prev = cur
        return State.EMPTY

    def is_stale(self) -> bool:
        """
        Check if the grid is complete.

        Gravity keeps lower rows filled first, so a full top row means a
        full grid.
        """
        return bool(np.all(self.grid[0] != State.EMPTY))

    def to_lists(self) -> List[List[str]]:
        """Return the grid as nested lists of state names, row by row."""
        return [[str(State(int(cell))) for cell in row] for row in self.grid]


if __name__ == "__main__":
    from connectn.debug import DebugLevel
    debug.configure(level=DebugLevel.TRACE)

    board = Board(7, 6, 4)
    for col, color in [(0, State.RED), (1, State.YELLOW), (0, State.RED),
                       (1, State.YELLOW), (0, State.RED), (1, State.YELLOW),
                       (0, State.RED)]:
        board.drop(col, color)
        print(f"Dropped {color} in column {col}: {board.compute()}")
    print(board.grid)
