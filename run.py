#!/usr/bin/env python3
"""
run.py - Main entry point for connectn

Creates a game from the command line configuration and hands it to the
selected runtime (text, terminal or server).
"""

import argparse
import sys
from typing import List, Optional

from connectn.debug import DebugLevel, debug
from connectn.errors import ConfigError
from connectn.game.rules import Game
from connectn.interfaces import RUNTIME_NAMES, get_runtime
from connectn.utils import (DEFAULT_COLS, DEFAULT_HOST, DEFAULT_N_PLAYERS, DEFAULT_N_WIN,
                            DEFAULT_PORT, DEFAULT_ROWS, MAX_PLAYERS)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description='N-in-a-row for any number of players')

    parser.add_argument('--cols', type=int, default=DEFAULT_COLS, help='number of columns')
    parser.add_argument('--rows', type=int, default=DEFAULT_ROWS, help='number of rows')
    parser.add_argument('-p', '--players', type=int, default=DEFAULT_N_PLAYERS,
                        help=f'number of players (max: {MAX_PLAYERS})')
    parser.add_argument('-w', '--win', type=int, default=DEFAULT_N_WIN,
                        help='number of consecutive pieces to win')
    parser.add_argument('-m', '--mode', choices=RUNTIME_NAMES, default='terminal',
                        help='game mode')

    # Server options
    parser.add_argument('--host', default=DEFAULT_HOST, help='server listen address')
    parser.add_argument('--port', type=int, default=DEFAULT_PORT, help='server listen port')

    # Debug options
    parser.add_argument('--debug', action='store_true', help='enable debug logging')
    parser.add_argument('--debug-level', default='warning',
                        choices=[level.name.lower() for level in DebugLevel],
                        help='logging level')
    parser.add_argument('--log-file', default=None, help='also log to this file')
    parser.add_argument('--components', default=None,
                        help='comma separated components to log (default: all)')
    return parser


def configure_debug(args) -> None:
    """Configure logging from args.debug / args.debug_level."""
    if args.debug:
        level = DebugLevel.DEBUG
    else:
        level = debug.level_from_string(args.debug_level)

    components = None
    if args.components:
        components = [c.strip() for c in args.components.split(',') if c.strip()]

    debug.configure(level=level, log_file=args.log_file, components=components)


def runtime_options(args) -> dict:
    if args.mode == 'server':
        return {'host': args.host, 'port': args.port}
    return {}


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_debug(args)

    try:
        game = Game(args.cols, args.rows, args.players, args.win)
    except ConfigError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    debug.debug(f"Starting {args.mode} runtime", "run")
    with get_runtime(args.mode, **runtime_options(args)) as runtime:
        runtime.init(game)
        runtime.run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
