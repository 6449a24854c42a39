"""Exception hierarchy for connectn."""

from typing import Optional

from connectn.utils import MAX_PLAYERS, State


class ConnectNError(Exception):
    """Base exception for all connectn errors."""

    pass


class ConfigError(ConnectNError):
    """Raised when a game cannot be created with the requested configuration."""

    pass


class InvalidGridSizeError(ConfigError):
    def __init__(self, columns: int, rows: int):
        self.columns = columns
        self.rows = rows
        super().__init__(f"invalid grid size: {columns}/{rows}")


class TooManyPlayersError(ConfigError):
    def __init__(self, n_players: int):
        self.n_players = n_players
        super().__init__(f"too many players: {n_players}. Max: {MAX_PLAYERS}")


class NotEnoughPlayersError(ConfigError):
    def __init__(self, n_players: int):
        self.n_players = n_players
        super().__init__(f"invalid player count: {n_players}, expected 2..{MAX_PLAYERS} "
                         f"players (1 for a single player game)")


class InvalidWinLengthError(ConfigError):
    def __init__(self, n_win: int):
        self.n_win = n_win
        super().__init__(f"invalid win number: {n_win}, minimum 2")


class GridTooSmallError(ConfigError):
    def __init__(self, columns: int, rows: int, n_win: int):
        self.columns = columns
        self.rows = rows
        self.n_win = n_win
        super().__init__(
            f"grid {columns}/{rows} too small for anyone to get {n_win} in a row")


class InvalidMoveError(ConnectNError):
    """
    Raised when a move is rejected: wrong turn, out of range column, full
    column or finished game. The game state is unchanged.
    """

    def __init__(self, column: int, player: State, reason: Optional[str] = None):
        self.column = column
        self.player = player
        self.reason = reason

        message = f"{column} is an invalid move for player {int(player)} ({player})"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(message)


class ColumnFullError(ConnectNError):
    """
    Raised when a validated move finds no empty row in its column.

    This is an internal invariant violation and deliberately not an
    InvalidMoveError.
    """

    def __init__(self, column: int):
        self.column = column
        super().__init__(f"column {column} has no empty row after validation")


class JoinError(ConnectNError):
    """Raised when a player cannot join a game."""

    pass


class GameFullError(JoinError):
    def __init__(self, capacity: int):
        self.capacity = capacity
        super().__init__(f"game is full ({capacity} players)")


class PlayerAlreadyJoinedError(JoinError):
    def __init__(self, name: str):
        self.name = name
        super().__init__(f"user '{name}' already joined")
