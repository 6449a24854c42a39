"""Tests for the HTTP server runtime."""

import asyncio
import json
import threading
import uuid

import pytest
from fastapi.testclient import TestClient

from conftest import VERTICAL_WIN
from connectn.game.rules import Game
from connectn.interfaces.server import GameRegistry, ServerRuntime, _stream_game, create_app
from connectn.utils import State


@pytest.fixture
def registry():
    return GameRegistry()


@pytest.fixture
def client(registry):
    return TestClient(create_app(registry))


def create(client, **params):
    response = client.get("/create", params=params)
    assert response.status_code == 200, response.text
    return response.json()


def join(client, game_id, name):
    return client.get("/join", params={"game_id": game_id, "player_name": name})


def play(client, game_id, name, col):
    return client.get("/play", params={"game_id": game_id, "player_name": name, "col": col})


@pytest.fixture
def ready_game(client):
    game_id = create(client)
    assert join(client, game_id, "alice").status_code == 200
    assert join(client, game_id, "bob").status_code == 200
    return game_id


class TestCreate:
    def test_create_default_game(self, client, registry):
        game_id = create(client)
        uuid.UUID(game_id)
        game = registry.get(game_id).game
        assert (game.columns, game.rows, game.n_players, game.n_win) == (7, 6, 2, 4)

    def test_create_custom_game(self, client, registry):
        game_id = create(client, cols=9, rows=8, nplayers=3, nwin=5)
        game = registry.get(game_id).game
        assert (game.columns, game.rows, game.n_players, game.n_win) == (9, 8, 3, 5)

    def test_grid_too_small(self, client, registry):
        response = client.get("/create", params={"cols": 2, "rows": 2, "nwin": 3})
        assert response.status_code == 400
        assert "too small" in response.json()["detail"]
        assert len(registry) == 0

    def test_non_integer_parameter(self, client):
        response = client.get("/create", params={"cols": "wide"})
        assert response.status_code == 400


class TestList:
    def test_empty(self, client):
        assert client.get("/list").json() == []

    def test_pending_game(self, client):
        game_id = create(client, nplayers=3)
        join(client, game_id, "alice")
        games = client.get("/list").json()
        assert games == [{
            "game_id": game_id,
            "player_count": 1,
            "max_player_count": 3,
            "game_state": "pending",
            "players": {"red": "alice"},
        }]

    def test_won_game(self, client, ready_game):
        for i, col in enumerate(VERTICAL_WIN):
            play(client, ready_game, "alice" if i % 2 == 0 else "bob", col)
        games = client.get("/list").json()
        assert games[0]["game_state"] == "won by alice red"


class TestJoin:
    def test_join_assigns_colors(self, client):
        game_id = create(client)
        assert join(client, game_id, "alice").json()["color"] == "red"
        assert join(client, game_id, "bob").json()["color"] == "yellow"

    def test_game_full(self, client, ready_game):
        response = join(client, ready_game, "carol")
        assert response.status_code == 403
        assert "full" in response.json()["detail"]

    def test_already_joined(self, client):
        game_id = create(client)
        join(client, game_id, "alice")
        response = join(client, game_id, "alice")
        assert response.status_code == 403
        assert "already joined" in response.json()["detail"]

    def test_unknown_game(self, client):
        response = join(client, str(uuid.uuid4()), "alice")
        assert response.status_code == 404

    def test_invalid_game_id(self, client):
        response = join(client, "not-a-uuid", "alice")
        assert response.status_code == 400

    def test_missing_player_name(self, client):
        game_id = create(client)
        response = client.get("/join", params={"game_id": game_id})
        assert response.status_code == 400


class TestPlay:
    def test_vertical_win(self, client, ready_game, registry):
        responses = [play(client, ready_game, "alice" if i % 2 == 0 else "bob", col)
                     for i, col in enumerate(VERTICAL_WIN)]
        assert all(r.status_code == 200 for r in responses)
        assert [r.json()["game_state"] for r in responses] == ["empty"] * 6 + ["red"]
        assert registry.get(ready_game).game.winner is not None

    def test_game_not_ready(self, client):
        game_id = create(client)
        join(client, game_id, "alice")
        response = play(client, game_id, "alice", 0)
        assert response.status_code == 403
        assert "not ready" in response.json()["detail"]

    def test_unknown_player(self, client, ready_game):
        response = play(client, ready_game, "mallory", 0)
        assert response.status_code == 403

    def test_out_of_turn(self, client, ready_game, registry):
        response = play(client, ready_game, "bob", 0)
        assert response.status_code == 403
        assert registry.get(ready_game).game.column_occupancy(0) == 0

    def test_out_of_range_column(self, client, ready_game):
        response = play(client, ready_game, "alice", 7)
        assert response.status_code == 403

    def test_missing_column(self, client, ready_game):
        response = client.get("/play", params={"game_id": ready_game, "player_name": "alice"})
        assert response.status_code == 400

    def test_finished_game_rejects_moves(self, client, ready_game):
        for i, col in enumerate(VERTICAL_WIN):
            play(client, ready_game, "alice" if i % 2 == 0 else "bob", col)
        response = play(client, ready_game, "bob", 3)
        assert response.status_code == 403


class TestAttach:
    def test_observer_follows_game_in_progress(self, client, ready_game, registry, monkeypatch):
        activity = registry.get(ready_game).game.activity
        waiting = threading.Event()
        get = activity.get

        def get_and_signal(timeout=None):
            waiting.set()
            return get(timeout)

        monkeypatch.setattr(activity, "get", get_and_signal)

        lines = []

        def observe():
            with client.stream("GET", "/attach", params={"game_id": ready_game}) as response:
                assert response.status_code == 200
                lines.extend(line for line in response.iter_lines() if line)

        observer = threading.Thread(target=observe)
        observer.start()
        assert waiting.wait(5)

        for i, col in enumerate(VERTICAL_WIN):
            assert play(client, ready_game, "alice" if i % 2 == 0 else "bob", col).status_code == 200

        # the stream ends on its own once the game is won
        observer.join(5)
        assert not observer.is_alive()
        snapshots = [json.loads(line) for line in lines]
        assert len(snapshots) == 1 + len(VERTICAL_WIN)
        assert snapshots[0]["moves_made"] == 0
        assert snapshots[0]["grid_state"] == "empty"
        assert snapshots[-1]["grid_state"] == "red"
        assert snapshots[-1]["moves_made"] == len(VERTICAL_WIN)

    def test_finished_game_stream(self, client, ready_game):
        for i, col in enumerate(VERTICAL_WIN):
            play(client, ready_game, "alice" if i % 2 == 0 else "bob", col)

        response = client.get("/attach", params={"game_id": ready_game})
        assert response.status_code == 200
        snapshots = [json.loads(line) for line in response.text.splitlines()]
        # current state, then one per buffered move
        assert len(snapshots) == 1 + len(VERTICAL_WIN)
        assert snapshots[-1]["grid_state"] == "red"
        assert snapshots[0]["players"] == {"red": "alice", "yellow": "bob"}

    def test_unknown_game(self, client):
        response = client.get("/attach", params={"game_id": str(uuid.uuid4())})
        assert response.status_code == 404

    @pytest.mark.parametrize("connected_checks", [0, 3])
    def test_disconnected_observer_stops_reading(self, registry, connected_checks):
        entry = registry.get(registry.add(Game()))
        request = DisconnectingRequest(connected_checks)

        async def _run():
            stream = _stream_game(request, entry, poll_interval=0.01)
            first = await stream.__anext__()
            rest = [chunk async for chunk in stream]
            return first, rest

        first, rest = asyncio.run(_run())
        assert json.loads(first)["grid_state"] == "empty"
        assert rest == []

        # nobody reads the channel any more, so the move stays buffered
        entry.game.apply_move(State.RED, 0)
        assert len(entry.game.activity) == 1


class DisconnectingRequest:
    """Stands in for a Request whose client goes away after a few checks."""

    def __init__(self, connected_checks: int):
        self.connected_checks = connected_checks

    async def is_disconnected(self) -> bool:
        if self.connected_checks == 0:
            return True
        self.connected_checks -= 1
        return False


def test_server_runtime_builds_app():
    runtime = ServerRuntime(host="127.0.0.1", port=0)
    runtime.init(None)
    assert runtime.app is not None
    assert TestClient(runtime.app).get("/list").json() == []
