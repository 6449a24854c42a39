"""Base class shared by the game runtimes."""

from typing import Optional

from connectn.game.rules import Game


class Runtime:
    """A front end that drives a game: init, run, close."""

    name = "runtime"

    def __init__(self):
        self.game: Optional[Game] = None

    def init(self, game: Game) -> None:
        """Attach the runtime to a game."""
        self.game = game

    def run(self) -> None:
        raise NotImplementedError

    def close(self) -> None:
        pass

    def __enter__(self) -> 'Runtime':
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
