"""Operations on game sessions and players held in the application state."""

from __future__ import annotations

import copy
import logging
import uuid
from datetime import datetime, timezone
from uuid import UUID

from .errors import NotFoundError, UnauthorizedError, ValidationError
from .models import (
    MIN_PLAYERS,
    MIN_ROUNDS,
    CreateGameSessionPayload,
    CreatePlayerPayload,
    GameSession,
    JoinGameSessionPayload,
    Player,
)
from .state import AppState

log = logging.getLogger(__name__)

DEFAULT_GAME_NAME = "Truth or Lie"
JOINED_MESSAGE = "Joined game successfully"
STARTED_MESSAGE = "Started game successfully"


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()


def _as_uuid(game_id: UUID | str) -> UUID:
    if isinstance(game_id, UUID):
        return game_id
    try:
        return UUID(str(game_id))
    except ValueError:
        raise NotFoundError(f"Game {game_id} not found") from None


def _session(state: AppState, game_id: UUID | str) -> GameSession:
    key = _as_uuid(game_id)
    try:
        return state.sessions[key]
    except KeyError:
        raise NotFoundError(f"Game {key} not found") from None


def create_game(state: AppState, payload: CreateGameSessionPayload) -> GameSession:
    """Create a session hosted by ``payload.host_id`` and store it."""
    if payload.with_staking and not payload.stake_amount:
        raise ValidationError(
            "Must provide a staking amount greater than 0 when staking is enabled!"
        )

    max_rounds = MIN_ROUNDS if payload.max_rounds is None else payload.max_rounds
    max_players = MIN_PLAYERS if payload.max_players is None else payload.max_players
    if max_players == 0:
        raise ValidationError("Maximum number of players must be greater than 0")
    if max_rounds % max_players != 0:
        raise ValidationError(
            "Maximum number of rounds must be a multiple of the number of players. "
            "All players should have an equal number of rounds"
        )

    now = _now()
    session = GameSession(
        id=uuid.uuid4(),
        name=DEFAULT_GAME_NAME if payload.name is None else payload.name,
        rounds=[],
        players=[payload.host_id],
        host_id=payload.host_id,
        has_started=False,
        is_private=bool(payload.is_private),
        with_staking=bool(payload.with_staking),
        stake_amount=payload.stake_amount or 0,
        max_players=max_players,
        current_round=0,
        max_rounds=max_rounds,
        current_guesses=0,
        round_duration=0,
        created_at=now,
        updated_at=now,
    )
    state.sessions[session.id] = session
    return copy.deepcopy(session)


def join_game(
    state: AppState, game_id: UUID | str, payload: JoinGameSessionPayload
) -> GameSession:
    """Add a player to a lobby that is not full and has not started."""
    game = _session(state, game_id)
    if game.max_players == len(game.players):
        raise ValidationError("Game lobby full! Please join another game")
    if game.has_started:
        raise ValidationError("Game already started! Please join another game")
    if payload.player_id in game.players:
        raise ValidationError("Player already in game")
    game.players.append(payload.player_id)
    return copy.deepcopy(game)


def start_game(
    state: AppState, game_id: UUID | str, payload: JoinGameSessionPayload
) -> GameSession:
    """Start a game on behalf of its host."""
    game = _session(state, game_id)
    if len(game.players) < MIN_PLAYERS:
        raise ValidationError(f"Game needs at least {MIN_PLAYERS} players to start!")
    if game.has_started:
        raise ValidationError("Game has already started!")
    if game.host_id != payload.player_id:
        raise UnauthorizedError("Only host can start game!")
    game.has_started = True
    game.updated_at = _now()
    game.current_round = 1
    return copy.deepcopy(game)


def list_games(state: AppState) -> list[GameSession]:
    """Copies of every stored session."""
    return [copy.deepcopy(g) for g in state.sessions.values()]


def create_player(state: AppState, payload: CreatePlayerPayload) -> Player:
    """Register a new player with the given name."""
    player = Player(id=uuid.uuid4(), name=payload.name)
    state.players[player.id] = player
    log.info("Created player: %r", player)
    return copy.deepcopy(player)


def list_players(state: AppState) -> list[Player]:
    """Copies of every stored player."""
    return [copy.deepcopy(p) for p in state.players.values()]