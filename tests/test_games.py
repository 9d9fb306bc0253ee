import uuid

import pytest

from truthlie.errors import NotFoundError, UnauthorizedError, ValidationError
from truthlie.games import (
    create_game,
    create_player,
    join_game,
    list_games,
    list_players,
    start_game,
)
from truthlie.models import (
    CreateGameSessionPayload,
    CreatePlayerPayload,
    JoinGameSessionPayload,
)
from truthlie.state import AppState


@pytest.fixture
def state():
    return AppState()


@pytest.fixture
def host():
    return uuid.uuid4()


def _game(state, host, **kwargs):
    kwargs.setdefault("max_rounds", 4)
    return create_game(state, CreateGameSessionPayload(host_id=host, **kwargs))


def test_create_game_defaults(state, host):
    game = _game(state, host)
    assert game.name == "Truth or Lie"
    assert game.players == [host]
    assert game.host_id == host
    assert game.max_players == 2
    assert game.has_started is False
    assert game.current_round == 0
    assert game.created_at == game.updated_at
    assert state.sessions[game.id] == game


def test_default_rounds_not_multiple_of_default_players(state, host):
    with pytest.raises(ValidationError, match="multiple of the number of players"):
        create_game(state, CreateGameSessionPayload(host_id=host))
    assert state.sessions == {}


@pytest.mark.parametrize("amount", [None, 0])
def test_staking_needs_amount(state, host, amount):
    with pytest.raises(ValidationError, match="staking amount greater than 0"):
        _game(state, host, with_staking=True, stake_amount=amount)


def test_staking_with_amount(state, host):
    game = _game(state, host, with_staking=True, stake_amount=10, name="Fun")
    assert game.with_staking is True
    assert game.stake_amount == 10
    assert game.name == "Fun"


def test_zero_players_rejected(state, host):
    with pytest.raises(ValidationError):
        _game(state, host, max_players=0)


def test_join_game(state, host):
    game = _game(state, host)
    other = uuid.uuid4()
    joined = join_game(state, game.id, JoinGameSessionPayload(other))
    assert joined.players == [host, other]
    assert state.sessions[game.id].players == [host, other]


def test_join_full_lobby(state, host):
    game = _game(state, host)
    join_game(state, game.id, JoinGameSessionPayload(uuid.uuid4()))
    with pytest.raises(ValidationError, match="Game lobby full"):
        join_game(state, game.id, JoinGameSessionPayload(uuid.uuid4()))


def test_join_twice(state, host):
    game = _game(state, host, max_players=4)
    with pytest.raises(ValidationError, match="Player already in game"):
        join_game(state, game.id, JoinGameSessionPayload(host))


def test_join_started_game(state, host):
    game = _game(state, host, max_players=4)
    join_game(state, game.id, JoinGameSessionPayload(uuid.uuid4()))
    start_game(state, game.id, JoinGameSessionPayload(host))
    with pytest.raises(ValidationError, match="Game already started"):
        join_game(state, game.id, JoinGameSessionPayload(uuid.uuid4()))


def test_join_unknown_game(state):
    missing = uuid.uuid4()
    with pytest.raises(NotFoundError) as info:
        join_game(state, missing, JoinGameSessionPayload(uuid.uuid4()))
    assert info.value.detail == f"Game {missing} not found"


def test_start_game(state, host):
    game = _game(state, host)
    join_game(state, game.id, JoinGameSessionPayload(uuid.uuid4()))
    started = start_game(state, game.id, JoinGameSessionPayload(host))
    assert started.has_started is True
    assert started.current_round == 1
    assert state.sessions[game.id].has_started is True
    with pytest.raises(ValidationError, match="Game has already started!"):
        start_game(state, game.id, JoinGameSessionPayload(host))


def test_start_needs_players(state, host):
    game = _game(state, host)
    with pytest.raises(ValidationError, match="Game needs at least 2 players to start!"):
        start_game(state, game.id, JoinGameSessionPayload(host))


def test_only_host_starts(state, host):
    game = _game(state, host)
    other = uuid.uuid4()
    join_game(state, game.id, JoinGameSessionPayload(other))
    with pytest.raises(UnauthorizedError, match="Only host can start game!"):
        start_game(state, game.id, JoinGameSessionPayload(other))
    assert state.sessions[game.id].has_started is False


def test_list_games(state, host):
    first = _game(state, host)
    second = _game(state, uuid.uuid4())
    assert sorted(g.id for g in list_games(state)) == sorted([first.id, second.id])


def test_create_and_list_players(state):
    player = create_player(state, CreatePlayerPayload(name="Test Player"))
    assert player.name == "Test Player"
    assert player.rank == 0
    assert player.current_game_id is None
    assert list_players(state) == [player]


def test_returned_copies_are_independent(state, host):
    game = _game(state, host)
    game.players.append(uuid.uuid4())
    assert state.sessions[game.id].players == [host]