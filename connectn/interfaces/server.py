"""
server.py - HTTP server letting remote players create, join and play games

Endpoints (all GET, parameters in the query string):
    /create  cols, rows, nplayers, nwin  -> JSON UUID of the new game
    /list                                -> JSON array of game summaries
    /join    game_id, player_name        -> color assigned to the player
    /play    game_id, player_name, col   -> resulting state of the move
    /attach  game_id                     -> newline delimited JSON stream,
                                            one game snapshot per change

The registry of games lives here; the engine knows nothing about game ids.
"""

import json
import threading
import uuid
from dataclasses import dataclass, field
from typing import AsyncIterator, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException, Query, Request, status
from fastapi.concurrency import run_in_threadpool
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, StreamingResponse
from pydantic import BaseModel, Field

from connectn import __version__
from connectn.debug import debug
from connectn.errors import (ColumnFullError, ConfigError, GameFullError,
                             InvalidMoveError, PlayerAlreadyJoinedError)
from connectn.game.rules import Game
from connectn.interfaces.base import Runtime
from connectn.utils import (ATTACH_POLL_INTERVAL, DEFAULT_COLS, DEFAULT_HOST, DEFAULT_N_PLAYERS,
                            DEFAULT_N_WIN, DEFAULT_PORT, DEFAULT_ROWS, State)


class ListGameResponse(BaseModel):
    """Summary of one game as returned by /list."""

    game_id: str
    player_count: int
    max_player_count: int
    game_state: str = Field(description="'pending', 'stale' or 'won by <name> <color>'")
    players: Dict[str, str] = Field(default_factory=dict)


class JoinGameResponse(BaseModel):
    game_id: str
    player_name: str
    color: str


class PlayMoveResponse(BaseModel):
    game_id: str
    player_name: str
    column: int
    game_state: str
    current_player: str


@dataclass
class GameEntry:
    """A registered game and the lock serializing its moves."""

    game: Game
    lock: threading.Lock = field(default_factory=threading.Lock)


class GameRegistry:
    """Process-wide map of game id to game, safe for concurrent handlers."""

    def __init__(self):
        self._games: Dict[str, GameEntry] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        with self._lock:
            return len(self._games)

    def add(self, game: Game) -> str:
        game_id = str(uuid.uuid4())
        with self._lock:
            self._games[game_id] = GameEntry(game)
        return game_id

    def get(self, game_id: str) -> Optional[GameEntry]:
        with self._lock:
            return self._games.get(game_id)

    def items(self) -> List:
        with self._lock:
            return list(self._games.items())


def summarize_state(game: Game) -> str:
    """Human readable state of a game for /list."""
    if game.grid_state == State.EMPTY:
        return "pending"
    if game.grid_state == State.STALE:
        return "stale"
    name = game.players.get(game.grid_state, "")
    return f"won by {name} {game.grid_state}"


def _bad_request(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


def _forbidden(detail: str) -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def _lookup(registry: GameRegistry, game_id: Optional[str]) -> GameEntry:
    if not game_id:
        raise _bad_request("missing game id")
    try:
        uuid.UUID(game_id)
    except ValueError:
        raise _bad_request("invalid game id format") from None

    entry = registry.get(game_id)
    if entry is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND,
                            detail=f"game '{game_id}' not found")
    return entry


def create_app(registry: Optional[GameRegistry] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        registry: Game registry to serve, a new empty one by default

    Returns:
        The configured application; the registry is on ``app.state.registry``
    """
    registry = registry if registry is not None else GameRegistry()
    app = FastAPI(title="connectn", version=__version__)
    app.state.registry = registry

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return JSONResponse(status_code=status.HTTP_400_BAD_REQUEST,
                            content={"detail": jsonable_encoder(exc.errors())})

    @app.get("/create")
    def create_game(cols: int = DEFAULT_COLS, rows: int = DEFAULT_ROWS,
                    nplayers: int = DEFAULT_N_PLAYERS, nwin: int = DEFAULT_N_WIN) -> str:
        try:
            game = Game(cols, rows, nplayers, nwin)
        except ConfigError as e:
            raise _bad_request(f"error instantiating new game: {e}") from e

        game_id = registry.add(game)
        debug.info(f"Created game {game_id} ({cols}x{rows}, "
                   f"{nplayers} players, {nwin} to win)", "server")
        return game_id

    @app.get("/list", response_model=List[ListGameResponse])
    def list_games() -> List[ListGameResponse]:
        ret = []
        for game_id, entry in registry.items():
            game = entry.game
            players = game.players
            ret.append(ListGameResponse(
                game_id=game_id,
                player_count=len(players),
                max_player_count=game.n_players,
                game_state=summarize_state(game),
                players={str(color): name for color, name in players.items()},
            ))
        return ret

    @app.get("/join", response_model=JoinGameResponse)
    def join_game(game_id: Optional[str] = Query(None),
                  player_name: Optional[str] = Query(None)) -> JoinGameResponse:
        if not player_name:
            raise _bad_request("missing player name")
        entry = _lookup(registry, game_id)

        try:
            color = entry.game.join(player_name)
        except GameFullError as e:
            raise _forbidden(f"game '{game_id}' is full") from e
        except PlayerAlreadyJoinedError as e:
            raise _forbidden(f"user '{player_name}' already joined game '{game_id}'") from e

        debug.info(f"{player_name} joined game {game_id} as {color}", "server")
        return JoinGameResponse(game_id=game_id, player_name=player_name, color=str(color))

    @app.get("/play", response_model=PlayMoveResponse)
    def play_move(game_id: Optional[str] = Query(None),
                  player_name: Optional[str] = Query(None),
                  col: Optional[int] = Query(None)) -> PlayMoveResponse:
        if col is None:
            raise _bad_request("missing column to be played")
        if not player_name:
            raise _bad_request("missing player name")
        entry = _lookup(registry, game_id)
        game = entry.game

        if not game.is_ready():
            raise _forbidden(f"game '{game_id}' is not ready, waiting on players")
        player = game.player_color(player_name)
        if player is None:
            raise _forbidden(f"player not found in game '{game_id}'")

        with entry.lock:
            try:
                game.validate_move(player, col)
            except InvalidMoveError as e:
                raise _forbidden(f"invalid move for player '{player_name}' "
                                 f"in game '{game_id}': {e}") from e
            try:
                ret = game.apply_move(player, col)
            except ColumnFullError as e:
                debug.error(f"Game {game_id} broke its column invariant: {e}", "server")
                raise HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                                    detail=f"an error occurred while playing a move: {e}") from e
            current = game.current_player

        return PlayMoveResponse(game_id=game_id, player_name=player_name, column=col,
                                game_state=str(ret), current_player=str(current))

    @app.get("/attach")
    def attach_game(request: Request, game_id: Optional[str] = Query(None)) -> StreamingResponse:
        entry = _lookup(registry, game_id)
        debug.debug(f"Observer attached to game {game_id}", "server")
        return StreamingResponse(_stream_game(request, entry), media_type="application/x-ndjson")

    return app


def _snapshot(entry: GameEntry) -> str:
    with entry.lock:
        return json.dumps(entry.game.to_dict()) + "\n"


async def _stream_game(request: Request, entry: GameEntry,
                       poll_interval: float = ATTACH_POLL_INTERVAL) -> AsyncIterator[str]:
    """
    Current snapshot first, then one per activity until the game ends.

    The channel is read in short waits so that a disconnected client stops
    consuming events and releases its worker thread.
    """
    yield _snapshot(entry)
    activity = entry.game.activity
    while True:
        if await request.is_disconnected():
            debug.debug("Observer disconnected", "server")
            return
        state = await run_in_threadpool(activity.get, poll_interval)
        if state is not None:
            yield _snapshot(entry)
        elif activity.exhausted:
            return


class ServerRuntime(Runtime):
    """Serves games over HTTP. The game given to init is not used."""

    name = "server"

    def __init__(self, host: str = DEFAULT_HOST, port: int = DEFAULT_PORT,
                 log_level: str = "info"):
        super().__init__()
        self.host = host
        self.port = port
        self.log_level = log_level
        self.app: Optional[FastAPI] = None

    def init(self, game: Game) -> None:
        super().init(game)
        self.app = create_app()

    def run(self) -> None:
        debug.info(f"Listening on {self.host}:{self.port}", "server")
        uvicorn.run(self.app, host=self.host, port=self.port, log_level=self.log_level)
