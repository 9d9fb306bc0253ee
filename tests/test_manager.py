from uuid import uuid4

import pytest

from truthlie.games import create_game
from truthlie.manager import GameManager
from truthlie.messages import ErrorMessage, StartedGame
from truthlie.models import CreateGameSessionPayload
from truthlie.state import AppState


class Recorder:
    def __init__(self):
        self.received = []

    def deliver(self, message):
        self.received.append(message)


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def manager(state):
    return GameManager(state)


def test_connect_registers_players_in_order(manager):
    game_id = uuid4()
    first, second = uuid4(), uuid4()
    manager.connect(game_id, first, Recorder())
    manager.connect(game_id, second, Recorder())
    assert manager.players_in(game_id) == [first, second]


def test_players_in_unknown_game_is_empty(manager):
    assert manager.players_in(uuid4()) == []


def test_connect_twice_replaces_connection(manager):
    game_id, player = uuid4(), uuid4()
    manager.connect(game_id, player, Recorder())
    manager.connect(game_id, player, Recorder())
    assert manager.players_in(game_id) == [player]


def test_disconnect_removes_only_that_player(manager):
    game_id = uuid4()
    first, second = uuid4(), uuid4()
    manager.connect(game_id, first, Recorder())
    manager.connect(game_id, second, Recorder())
    manager.disconnect(game_id, first)
    assert manager.players_in(game_id) == [second]


def test_disconnect_unknown_player_leaves_others(manager):
    game_id, player = uuid4(), uuid4()
    manager.connect(game_id, player, Recorder())
    manager.disconnect(game_id, uuid4())
    manager.disconnect(uuid4(), player)
    assert manager.players_in(game_id) == [player]


def test_host_start_notifies_other_players(state, manager):
    host, guest = uuid4(), uuid4()
    game = create_game(state, CreateGameSessionPayload(host_id=host))
    host_conn, guest_conn = Recorder(), Recorder()
    manager.connect(game.id, host, host_conn)
    manager.connect(game.id, guest, guest_conn)

    manager.start_game(game.id, host)

    assert guest_conn.received == [StartedGame(game_id=str(game.id))]
    assert host_conn.received == []
    assert manager.sessions[game.id] == state.sessions[game.id]
    assert manager.sessions[game.id] is not state.sessions[game.id]


def test_non_host_start_sends_error(state, manager):
    host, guest = uuid4(), uuid4()
    game = create_game(state, CreateGameSessionPayload(host_id=host))
    host_conn, guest_conn = Recorder(), Recorder()
    manager.connect(game.id, host, host_conn)
    manager.connect(game.id, guest, guest_conn)

    manager.start_game(game.id, guest)

    assert host_conn.received == [ErrorMessage(message="Only the host can start a game")]
    assert guest_conn.received == []
    assert game.id not in manager.sessions


def test_start_of_missing_game_sends_error(manager):
    game_id, requester, other = uuid4(), uuid4(), uuid4()
    other_conn = Recorder()
    manager.connect(game_id, requester, Recorder())
    manager.connect(game_id, other, other_conn)

    manager.start_game(game_id, requester)

    assert other_conn.received == [ErrorMessage(message="Failed to find game session!")]
    assert manager.sessions == {}


def test_start_without_connections_still_records_session(state, manager):
    host = uuid4()
    game = create_game(state, CreateGameSessionPayload(host_id=host))
    manager.start_game(game.id, host)
    assert manager.sessions[game.id].host_id == host


def test_players_of_other_games_are_not_notified(state, manager):
    host = uuid4()
    game = create_game(state, CreateGameSessionPayload(host_id=host))
    bystander = Recorder()
    manager.connect(uuid4(), uuid4(), bystander)
    manager.start_game(game.id, host)
    assert bystander.received == []