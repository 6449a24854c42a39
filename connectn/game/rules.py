"""
rules.py - Game state management for N-in-a-row

This module provides the Game class: it validates the configuration, owns
the Board, enforces turn order, records the final state of the game, keeps
the roster of joined players and notifies observers of every move.
"""

import threading
from typing import Any, Dict, List, Optional

from connectn.debug import debug
from connectn.errors import (GameFullError, GridTooSmallError, InvalidGridSizeError,
                             InvalidMoveError, InvalidWinLengthError,
                             NotEnoughPlayersError, PlayerAlreadyJoinedError, TooManyPlayersError)
from connectn.game.activity import ActivityChannel
from connectn.game.board import Board
from connectn.utils import (DEFAULT_ACTIVITY_CAPACITY, DEFAULT_COLS, DEFAULT_N_PLAYERS,
                            DEFAULT_N_WIN, DEFAULT_ROWS, MAX_PLAYERS, State,
                            active_players)


def validate_config(columns: int, rows: int, n_players: int, n_win: int) -> None:
    """
    Check a game configuration.

    Raises:
        ConfigError: one subclass per violated constraint
    """
    if columns < 2 or rows < 2:
        raise InvalidGridSizeError(columns, rows)
    if n_players < 1:
        raise NotEnoughPlayersError(n_players)
    if n_players > MAX_PLAYERS:
        raise TooManyPlayersError(n_players)
    if n_win < 2:
        raise InvalidWinLengthError(n_win)
    if max(columns, rows) < n_win:
        raise GridTooSmallError(columns, rows, n_win)


class Game:
    """
    A single N-in-a-row game.

    Moves must be serialized per game by the caller; the roster and the
    activity channel are safe to use from other threads.
    """

    def __init__(self, columns: int = DEFAULT_COLS, rows: int = DEFAULT_ROWS,
                 n_players: int = DEFAULT_N_PLAYERS, n_win: int = DEFAULT_N_WIN,
                 activity_capacity: int = DEFAULT_ACTIVITY_CAPACITY):
        """
        Create a new game.

        Args:
            columns: Number of columns of the grid
            rows: Number of rows of the grid
            n_players: Number of players, at most the palette size
            n_win: Number of consecutive pieces needed to win

        Raises:
            ConfigError: if the configuration can never produce a game
        """
        validate_config(columns, rows, n_players, n_win)
        debug.debug(f"Initializing game {columns}x{rows}, "
                    f"{n_players} players, {n_win} to win", "game")

        self.columns = columns
        self.rows = rows
        self.n_players = n_players
        self.n_win = n_win
        self.board = Board(columns, rows, n_win)
        self.available_players: List[State] = active_players(n_players)
        self.current_player_index = 0
        self.grid_state = State.EMPTY
        self.moves_made: List[int] = []
        self.activity = ActivityChannel(activity_capacity)

        self._players: Dict[State, str] = {}
        self._lock = threading.RLock()

    @property
    def current_player(self) -> State:
        return self.available_players[self.current_player_index]

    def state(self, row: int, col: int) -> State:
        """Return the state of the grid at the row/col position."""
        return self.board.state(row, col)

    def column_occupancy(self, col: int) -> int:
        """Return the count of occupied cells in the requested column."""
        return self.board.column_occupancy(col)

    def is_finished(self) -> bool:
        return self.grid_state != State.EMPTY

    def is_stale(self) -> bool:
        return self.grid_state == State.STALE

    @property
    def winner(self) -> Optional[State]:
        """The winning color, or None while playing or on a stale game."""
        if self.grid_state.is_player():
            return self.grid_state
        return None

    def validate_move(self, player: State, col: int) -> None:
        """
        Check if the given move is valid, without playing it.

        Args:
            player: The color attempting the move
            col: The column to play (0-indexed)

        Raises:
            InvalidMoveError: if the game is over, it is not the player's
                turn, the column is out of range or the column is full
        """
        reason = None
        if self.is_finished():
            reason = f"game is over ({self.grid_state})"
        elif player != self.current_player:
            reason = f"not your turn, waiting on {self.current_player}"
        elif not 0 <= col < self.columns:
            reason = f"column out of range 0..{self.columns - 1}"
        elif self.board.is_column_full(col):
            reason = "column is full"

        if reason is not None:
            debug.debug(f"Invalid move {col} for {player}: {reason}", "game")
            raise InvalidMoveError(col, player, reason)

    def apply_move(self, player: State, col: int) -> State:
        """
        Play a move for the given player.

        Args:
            player: The color playing; must be the current player
            col: The column to play (0-indexed)

        Returns:
            EMPTY if the game goes on, the winning color, or STALE

        Raises:
            InvalidMoveError: see validate_move; the game is left untouched
            ColumnFullError: if validation passed but the column had no room
        """
        self.validate_move(player, col)

        self.board.drop(col, self.current_player)
        self.moves_made.append(col)

        self.current_player_index = (self.current_player_index + 1) % self.n_players
        debug.debug(f"{player} played column {col}, "
                    f"next is {self.current_player}", "game")

        ret = self.board.compute()
        if ret != State.EMPTY:
            self.grid_state = ret
            if ret == State.STALE:
                debug.info("Game ends stale", "game")
            else:
                debug.info(f"Player {ret} wins after {len(self.moves_made)} moves", "game")

        self.activity.notify(ret)
        return ret

    def reset(self) -> 'Game':
        """Return a brand new game with the same configuration."""
        return Game(self.columns, self.rows, self.n_players, self.n_win,
                    self.activity.capacity)

    @property
    def players(self) -> Dict[State, str]:
        """Snapshot of the joined players, by color."""
        with self._lock:
            return dict(self._players)

    def join(self, name: str) -> State:
        """
        Add a named player to the game.

        Args:
            name: Display name, unique within the game

        Returns:
            The color assigned to the player

        Raises:
            GameFullError: if every seat is already taken
            PlayerAlreadyJoinedError: if the name is already in the game
        """
        with self._lock:
            if len(self._players) >= self.n_players:
                raise GameFullError(self.n_players)
            if name in self._players.values():
                raise PlayerAlreadyJoinedError(name)

            color = self.available_players[len(self._players)]
            self._players[color] = name

        debug.info(f"{name} joined as {color}", "game")
        return color

    def player_color(self, name: str) -> Optional[State]:
        """Return the color of a joined player, None if unknown."""
        with self._lock:
            for color, player_name in self._players.items():
                if player_name == name:
                    return color
        return None

    def is_ready(self) -> bool:
        """Check if every seat has been taken."""
        with self._lock:
            return len(self._players) == self.n_players

    def to_dict(self) -> Dict[str, Any]:
        """Serializable snapshot of the game."""
        return {
            'columns': self.columns,
            'rows': self.rows,
            'n_players': self.n_players,
            'n_win': self.n_win,
            'current_player': str(self.current_player),
            'current_player_index': self.current_player_index,
            'grid_state': str(self.grid_state),
            'grid': self.board.to_lists(),
            'players': {str(color): name for color, name in self.players.items()},
            'moves_made': len(self.moves_made),
        }
