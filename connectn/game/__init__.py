"""
connectn.game - Core game mechanics for N-in-a-row

This package contains the grid representation, the game rules and the
state change notification channel.
"""

from connectn.game.activity import ActivityChannel
from connectn.game.board import Board
from connectn.game.rules import Game, validate_config

__all__ = ['ActivityChannel', 'Board', 'Game', 'validate_config']
