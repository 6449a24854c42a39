"""
connectn.interfaces - Front ends driving the game engine

Each runtime (text, terminal, server) is initialized with a game, run until
it finishes, then closed. Runtimes are imported on demand so that a missing
terminal library does not prevent the others from starting.
"""

from typing import Tuple

from connectn.interfaces.base import Runtime

RUNTIME_NAMES: Tuple[str, ...] = ('text', 'terminal', 'server')


def get_runtime(mode: str, **options) -> Runtime:
    """
    Instantiate the runtime registered under ``mode``, passing ``options``
    to its constructor.

    Raises:
        ValueError: for an unknown mode
    """
    if mode == 'text':
        from connectn.interfaces.text import TextRuntime
        return TextRuntime(**options)
    if mode == 'terminal':
        from connectn.interfaces.terminal import TerminalRuntime
        return TerminalRuntime(**options)
    if mode == 'server':
        from connectn.interfaces.server import ServerRuntime
        return ServerRuntime(**options)
    raise ValueError(f"unknown runtime '{mode}', expected one of {', '.join(RUNTIME_NAMES)}")


__all__ = ['Runtime', 'RUNTIME_NAMES', 'get_runtime']
