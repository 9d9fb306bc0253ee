"""Live game coordination between connected players."""

from __future__ import annotations

import copy
import logging
from typing import Protocol
from uuid import UUID

from .messages import ErrorMessage, ServerMessage, StartedGame
from .models import GameSession
from .state import AppState

log = logging.getLogger(__name__)

HOST_ONLY_MESSAGE = "Only the host can start a game"
MISSING_GAME_MESSAGE = "Failed to find game session!"


class _Connection(Protocol):
    def deliver(self, message: ServerMessage) -> None: ...


class GameManager:
    """Tracks which players are connected to which game and relays game events.

    ``sessions`` holds the live state of games that have been started; it is
    settled back into the shared state once a game ends.
    """

    def __init__(self, state: AppState) -> None:
        self.state = state
        self.sessions: dict[UUID, GameSession] = {}
        self._games: dict[UUID, dict[UUID, _Connection]] = {}

    def connect(self, game_id: UUID, player_id: UUID, connection: _Connection) -> None:
        """Register ``connection`` as the channel to ``player_id`` in ``game_id``."""
        self._games.setdefault(game_id, {})[player_id] = connection
        log.info("Player %s joined game %s", player_id, game_id)

    def disconnect(self, game_id: UUID, player_id: UUID) -> None:
        """Forget the player's connection to the game, if there is one."""
        players = self._games.get(game_id)
        if players is not None and player_id in players:
            del players[player_id]
            log.info("Player %s left game %s", player_id, game_id)

    def start_game(self, game_id: UUID, player_id: UUID) -> None:
        """Handle a start request from ``player_id`` and notify the other players."""
        session = self.state.sessions.get(game_id)
        failure: str | None
        if session is None:
            failure = MISSING_GAME_MESSAGE
        elif session.host_id != player_id:
            failure = HOST_ONLY_MESSAGE
        else:
            failure = None
            self.sessions[game_id] = copy.deepcopy(session)

        for other_id, connection in self._games.get(game_id, {}).items():
            if other_id == player_id:
                continue
            message: ServerMessage
            if failure is None:
                message = StartedGame(game_id=str(game_id))
            else:
                message = ErrorMessage(message=failure)
            connection.deliver(message)

    def players_in(self, game_id: UUID) -> list[UUID]:
        """Ids of the players currently connected to the game."""
        return list(self._games.get(game_id, {}))