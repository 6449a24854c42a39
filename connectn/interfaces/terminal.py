"""
terminal.py - Full-screen terminal client for N-in-a-row

The grid is drawn with curses; the arrow keys (or Ctrl-B / Ctrl-F) move the
column cursor and Space or Enter drops a piece, which falls down the column
before the result is shown.
"""

import curses
import time
from typing import Optional, Tuple

from connectn.debug import debug
from connectn.errors import InvalidMoveError
from connectn.interfaces.base import Runtime
from connectn.interfaces.render import DISC
from connectn.utils import DROP_DELAY, PALETTE, State, player_number

HEADER_HEIGHT = 2
CELL_WIDTH = 2

KEY_CTRL_B = 2
KEY_CTRL_F = 6
KEY_CTRL_L = 12
KEY_ESC = 27

LEFT_KEYS = (curses.KEY_LEFT, KEY_CTRL_B)
RIGHT_KEYS = (curses.KEY_RIGHT, KEY_CTRL_F)
DROP_KEYS = (ord(' '), ord('\n'), ord('\r'), curses.KEY_ENTER)
QUIT_KEYS = (ord('q'), KEY_ESC)
REDRAW_KEYS = (KEY_CTRL_L,)

CURSES_COLORS = {
    State.RED: curses.COLOR_RED,
    State.YELLOW: curses.COLOR_YELLOW,
    State.GREEN: curses.COLOR_GREEN,
    State.MAGENTA: curses.COLOR_MAGENTA,
    State.BLUE: curses.COLOR_BLUE,
    State.CYAN: curses.COLOR_CYAN,
    State.BLACK: curses.COLOR_BLACK,
}


class TerminalRuntime(Runtime):
    """Curses client: cursor driven column selection with a drop animation."""

    name = "terminal"

    def __init__(self, drop_delay: float = DROP_DELAY):
        super().__init__()
        self.drop_delay = drop_delay
        self.cursor_x = 0
        self.end = False
        self.running = False
        self.message = ""
        self._screen = None
        self._colors_enabled = False

    def init(self, game) -> None:
        super().init(game)
        self.cursor_x = 0
        self.end = False
        self.message = ""

    def header_text(self) -> str:
        """Text of the header line."""
        if self.end:
            return f"{self.message} (q or ESC to exit)"
        player = self.game.current_player
        return (f"Player {player_number(player)} ({player}) turn, "
                f"select column (Enter or Space)")

    def left(self) -> None:
        if self.cursor_x > 0:
            self.cursor_x -= 1

    def right(self) -> None:
        if self.cursor_x < self.game.columns - 1:
            self.cursor_x += 1

    def toggle(self) -> Optional[Tuple[int, int, State]]:
        """
        Play the column under the cursor.

        Returns:
            (row, column, color) of the landed piece, or None if nothing
            was played
        """
        if self.end:
            return None

        player = self.game.current_player
        col = self.cursor_x
        try:
            ret = self.game.apply_move(player, col)
        except InvalidMoveError as e:
            self.message = str(e)
            return None

        self.message = ""
        row = self.game.rows - self.game.column_occupancy(col)
        if ret != State.EMPTY:
            self.end = True
            if ret == State.STALE:
                self.message = "Stale, nobody wins!"
            else:
                self.message = f"Player {player_number(ret)} ({ret}) won!"
        return row, col, player

    def handle_key(self, key: int) -> Optional[Tuple[int, int, State]]:
        """
        Dispatch a key press.

        Returns:
            The landed piece when the key played a move
        """
        if key in LEFT_KEYS:
            self.left()
        elif key in RIGHT_KEYS:
            self.right()
        elif key in DROP_KEYS:
            return self.toggle()
        elif key in QUIT_KEYS:
            self.running = False
        elif key in REDRAW_KEYS:
            if self._screen is not None:
                self._screen.clear()
        return None

    def run(self) -> None:
        curses.wrapper(self._main)

    def _main(self, screen) -> None:
        self._screen = screen
        self._setup_colors()
        self.running = True
        debug.debug("Terminal runtime started", "terminal")

        while self.running:
            self.redraw()
            landed = self.handle_key(screen.getch())
            if landed is not None:
                self.animate_drop(*landed)

    def _setup_colors(self) -> None:
        if not curses.has_colors():
            return
        curses.start_color()
        try:
            curses.use_default_colors()
            background = -1
        except curses.error:
            background = curses.COLOR_BLACK
        for color in PALETTE:
            curses.init_pair(int(color), CURSES_COLORS[color], background)
        self._colors_enabled = True

    def _cell_position(self, row: int, col: int) -> Tuple[int, int]:
        return HEADER_HEIGHT + 1 + row, 1 + col * CELL_WIDTH

    def _draw_piece(self, row: int, col: int, state: State) -> None:
        y, x = self._cell_position(row, col)
        if state == State.EMPTY:
            self._screen.addstr(y, x, ".")
            return
        attr = curses.A_BOLD
        if self._colors_enabled:
            attr |= curses.color_pair(int(state))
        self._screen.addstr(y, x, DISC, attr)

    def redraw(self) -> None:
        """Draw the header, the grid and the cursor."""
        screen = self._screen
        screen.erase()
        screen.addstr(0, 0, self.header_text())
        if self.message and not self.end:
            screen.addstr(1, 0, self.message)

        for col in range(self.game.columns):
            _, x = self._cell_position(0, col)
            screen.addstr(HEADER_HEIGHT, x, "v" if col == self.cursor_x else " ")
        for row in range(self.game.rows):
            for col in range(self.game.columns):
                self._draw_piece(row, col, self.game.state(row, col))
        screen.refresh()

    def animate_drop(self, row: int, col: int, state: State) -> None:
        """Make the piece fall cell by cell down to its row."""
        for falling in range(row):
            self._draw_piece(falling, col, state)
            self._screen.refresh()
            time.sleep(self.drop_delay)
            self._draw_piece(falling, col, State.EMPTY)
        self._draw_piece(row, col, state)
        self._screen.refresh()

    def close(self) -> None:
        self.running = False
