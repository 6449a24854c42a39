"""
render.py - Text rendering of game states and grids

Color formatting lives here rather than in the engine: the engine only
stores State values, front ends decide how they look.
"""

from typing import List

from connectn.game.rules import Game
from connectn.utils import State, player_number

DISC = "●"
RESET = "\033[0m"
CELL_WIDTH = 4

# ANSI color codes per state
ANSI_COLORS = {
    State.RED: "\033[1;31m",
    State.YELLOW: "\033[1;33m",
    State.GREEN: "\033[1;32m",
    State.MAGENTA: "\033[1;35m",
    State.BLUE: "\033[1;34m",
    State.CYAN: "\033[1;36m",
    State.BLACK: "\033[1;30m",
}
DEFAULT_COLOR = "\033[1;37m"

# Plain-text symbols when colors are disabled
PLAIN_SYMBOLS = {
    State.EMPTY: ".",
    State.RED: "R",
    State.YELLOW: "Y",
    State.GREEN: "G",
    State.MAGENTA: "M",
    State.BLUE: "B",
    State.CYAN: "C",
    State.BLACK: "K",
    State.STALE: "#",
}


def format_state(state: State, color: bool = True) -> str:
    """
    Format a single cell.

    Args:
        state: The cell state
        color: Use an ANSI colored disc instead of a letter

    Returns:
        The formatted cell, one character wide when printed
    """
    if not color:
        return PLAIN_SYMBOLS[state]
    return f"{ANSI_COLORS.get(state, DEFAULT_COLOR)}{DISC}{RESET}"


def describe_player(state: State, color: bool = True) -> str:
    """Describe a player as 'Player N (disc)'."""
    return f"Player {player_number(state)} ({format_state(state, color)})"


def _bold(text: str, color: bool) -> str:
    return f"{DEFAULT_COLOR}{text}{RESET}" if color else text


def _pad(text: str, visible: int) -> str:
    return text + " " * (CELL_WIDTH - visible)


def render_grid(game: Game, color: bool = True) -> str:
    """
    Render the grid as text with 1-indexed column headers.

    Args:
        game: The game to render
        color: Use ANSI colors

    Returns:
        Multi-line string representation of the grid
    """
    lines: List[str] = []

    header = ""
    for col in range(game.columns):
        label = str(col + 1)
        header += _pad(_bold(label, color), len(label))
    lines.append(header.rstrip())

    lines.append("".join(_pad(_bold("---", color), 3) for _ in range(game.columns)).rstrip())

    for row in range(game.rows):
        line = "".join(_pad(format_state(game.state(row, col), color), 1)
                       for col in range(game.columns))
        lines.append(line.rstrip())

    return "\n".join(lines)


def describe_result(state: State, color: bool = True) -> str:
    """Final message for a finished game."""
    if state == State.STALE:
        return "Stale, nobody wins!"
    return f"{describe_player(state, color)} won!"
