"""
text.py - Line-based text client for N-in-a-row

This module provides a runtime that prints the grid after every move and
reads 1-indexed column numbers from an input stream, so a game can be
played on any terminal or piped in from a file.
"""

import sys
from typing import Optional, TextIO, Union

from connectn.debug import debug
from connectn.errors import InvalidMoveError
from connectn.interfaces.base import Runtime
from connectn.interfaces.render import describe_player, describe_result, render_grid
from connectn.utils import State

# Special commands returned by read_move
QUIT = "quit"
RESTART = "restart"


class TextRuntime(Runtime):
    """Text client: one prompt per turn, moves typed as column numbers."""

    name = "text"

    def __init__(self, input_stream: Optional[TextIO] = None,
                 output: Optional[TextIO] = None,
                 errors: Optional[TextIO] = None,
                 color: Optional[bool] = None):
        super().__init__()
        self.input = input_stream if input_stream is not None else sys.stdin
        self.output = output if output is not None else sys.stdout
        self.errors = errors if errors is not None else sys.stderr
        if color is None:
            isatty = getattr(self.output, 'isatty', None)
            color = bool(isatty and isatty())
        self.color = color
        self._stopped = False

    def _print(self, message: str = "") -> None:
        print(message, file=self.output)

    def _error(self, message: str) -> None:
        print(message, file=self.errors)

    def dump(self) -> None:
        """Display the state of the grid."""
        self._print()
        self._print(render_grid(self.game, self.color))
        self._print()

    def read_move(self) -> Union[int, str, None]:
        """
        Read a move from the input stream.

        Returns:
            0-indexed column, QUIT or RESTART, or None on invalid input
        """
        line = self.input.readline()
        if not line:
            return QUIT

        user_input = line.strip().lower()
        if user_input == 'q':
            return QUIT
        if user_input == 'r':
            return RESTART

        try:
            col = int(user_input) - 1
        except ValueError:
            self._error(f"invalid input '{user_input}', enter a column number")
            return None
        if col < 0:
            self._error("invalid columns number")
            return None
        return col

    def run(self) -> Optional[State]:
        """
        Run the game loop until the game ends or the input is exhausted.

        Returns:
            The final state of the game, or None if it was abandoned
        """
        try:
            return self._loop()
        except KeyboardInterrupt:
            self._error("Interrupted.")
            return None

    def _loop(self) -> Optional[State]:
        while not self._stopped:
            self.dump()
            self._print(f"{describe_player(self.game.current_player, self.color)} "
                        f"turn, select column:")

            move = self.read_move()
            if move is None:
                continue
            if move == QUIT:
                debug.info("Text game abandoned", "text")
                return None
            if move == RESTART:
                self.game = self.game.reset()
                self._print("Game restarted.")
                continue

            try:
                ret = self.game.apply_move(self.game.current_player, move)
            except InvalidMoveError as e:
                self._error(str(e))
                continue

            if ret != State.EMPTY:
                self.dump()
                self._print(describe_result(ret, self.color))
                return ret
        return None

    def close(self) -> None:
        self._stopped = True
