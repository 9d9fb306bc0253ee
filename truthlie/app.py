"""HTTP and websocket server for the Truth or Lie game."""

from __future__ import annotations

import argparse
import asyncio
import logging
import time
from typing import Any
from uuid import UUID

from aiohttp import WSMsgType, web

from . import games
from .errors import AppError, NotFoundError, ValidationError
from .manager import GameManager
from .messages import ServerMessage, encode_server_message, parse_client_message
from .models import CreateGameSessionPayload, CreatePlayerPayload, JoinGameSessionPayload
from .state import AppState

log = logging.getLogger(__name__)

WELCOME_MESSAGE = "Welcome to Truth or Lie API! May the best liar win!"
HEARTBEAT_INTERVAL = 5.0  # seconds between pings
CLIENT_TIMEOUT = 10.0  # seconds without a pong before the socket is closed

STATE_KEY = web.AppKey("state", AppState)
MANAGER_KEY = web.AppKey("manager", GameManager)


class PlayerConnection:
    """One player's websocket link to a game."""

    def __init__(self, player_id: UUID, game_id: UUID, manager: GameManager) -> None:
        self.player_id = player_id
        self.game_id = game_id
        self.manager = manager
        self.last_heartbeat = time.monotonic()
        self.outbox: asyncio.Queue[str] = asyncio.Queue()

    def deliver(self, message: ServerMessage) -> None:
        """Queue a server message to be sent to this player."""
        self.outbox.put_nowait(encode_server_message(message))

    def handle_text(self, text: str) -> None:
        """Act on a text frame from the player; malformed messages are logged and dropped."""
        log.info("Received message on server: %s", text)
        try:
            request = parse_client_message(text)
        except ValueError as exc:
            log.error("Invalid client message: %s", exc)
            return
        log.info("Starting game: %s...", request.game_id)
        try:
            game_id = UUID(request.game_id)
            player_id = UUID(request.player_id)
        except ValueError:
            log.error(
                "Invalid UUIDs in StartGame: %s, %s", request.game_id, request.player_id
            )
            return
        self.manager.start_game(game_id, player_id)

    def touch(self) -> None:
        """Record that the player answered a ping."""
        self.last_heartbeat = time.monotonic()

    def is_stale(self, now: float | None = None) -> bool:
        """Whether the player has been silent longer than the client timeout."""
        current = time.monotonic() if now is None else now
        return current - self.last_heartbeat > CLIENT_TIMEOUT

    async def _pump(self, ws: web.WebSocketResponse) -> None:
        while True:
            text = await self.outbox.get()
            try:
                await ws.send_str(text)
            except (ConnectionError, RuntimeError):
                return

    async def _watch(self, ws: web.WebSocketResponse) -> None:
        while not ws.closed:
            await asyncio.sleep(HEARTBEAT_INTERVAL)
            if self.is_stale():
                await ws.close()
                return
            try:
                await ws.ping(b"")
            except (ConnectionError, RuntimeError):
                return


@web.middleware
async def _error_middleware(request: web.Request, handler: Any) -> web.StreamResponse:
    try:
        return await handler(request)
    except AppError as err:
        return web.json_response(err.to_dict(), status=err.code)


async def _json_body(request: web.Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise ValidationError("request body is not valid JSON") from None


def _path_uuid(request: web.Request, name: str) -> UUID:
    value = request.match_info[name]
    try:
        return UUID(value)
    except ValueError:
        raise NotFoundError(f"invalid id in path: {value}") from None


async def _welcome(request: web.Request) -> web.Response:
    return web.json_response(WELCOME_MESSAGE)


async def _create_player(request: web.Request) -> web.Response:
    payload = CreatePlayerPayload.from_dict(await _json_body(request))
    player = games.create_player(request.app[STATE_KEY], payload)
    return web.json_response(player.to_dict(), status=201)


async def _list_players(request: web.Request) -> web.Response:
    players = games.list_players(request.app[STATE_KEY])
    return web.json_response([p.to_dict() for p in players])


async def _create_game(request: web.Request) -> web.Response:
    payload = CreateGameSessionPayload.from_dict(await _json_body(request))
    session = games.create_game(request.app[STATE_KEY], payload)
    return web.json_response(session.to_dict(), status=201)


async def _list_games(request: web.Request) -> web.Response:
    sessions = games.list_games(request.app[STATE_KEY])
    return web.json_response([s.to_dict() for s in sessions])


async def _join_game(request: web.Request) -> web.Response:
    game_id = _path_uuid(request, "game_id")
    payload = JoinGameSessionPayload.from_dict(await _json_body(request))
    session = games.join_game(request.app[STATE_KEY], game_id, payload)
    return web.json_response({"message": games.JOINED_MESSAGE, "body": session.to_dict()})


async def _start_game(request: web.Request) -> web.Response:
    game_id = _path_uuid(request, "game_id")
    payload = JoinGameSessionPayload.from_dict(await _json_body(request))
    session = games.start_game(request.app[STATE_KEY], game_id, payload)
    return web.json_response({"message": games.STARTED_MESSAGE, "body": session.to_dict()})


async def _player_ws(request: web.Request) -> web.WebSocketResponse:
    game_id = _path_uuid(request, "game_id")
    player_id = _path_uuid(request, "player_id")
    manager = request.app[MANAGER_KEY]
    connection = PlayerConnection(player_id, game_id, manager)
    ws = web.WebSocketResponse(autoping=False)
    manager.connect(game_id, player_id, connection)
    try:
        await ws.prepare(request)
        tasks = [
            asyncio.create_task(connection._pump(ws)),
            asyncio.create_task(connection._watch(ws)),
        ]
        try:
            async for msg in ws:
                if msg.type == WSMsgType.TEXT:
                    connection.handle_text(msg.data)
                elif msg.type == WSMsgType.PING:
                    await ws.pong(msg.data)
                elif msg.type == WSMsgType.PONG:
                    connection.touch()
                elif msg.type == WSMsgType.ERROR:
                    break
                else:
                    log.warning("Unhandled WS message: %r", msg)
        finally:
            for task in tasks:
                task.cancel()
            await asyncio.gather(*tasks, return_exceptions=True)
    finally:
        manager.disconnect(game_id, player_id)
    return ws


def create_app(state: AppState | None = None) -> web.Application:
    """Build the web application around ``state`` (a fresh one if not given)."""
    shared = AppState() if state is None else state
    app = web.Application(middlewares=[_error_middleware])
    app[STATE_KEY] = shared
    app[MANAGER_KEY] = GameManager(shared)
    app.router.add_get("/", _welcome)
    app.router.add_post("/players/", _create_player)
    app.router.add_get("/players/", _list_players)
    app.router.add_post("/games/", _create_game)
    app.router.add_get("/games/", _list_games)
    app.router.add_post("/games/{game_id}/join", _join_game)
    app.router.add_post("/games/{game_id}/start", _start_game)
    app.router.add_get("/ws/{game_id}/{player_id}", _player_ws)
    return app


def main(argv: list[str] | None = None) -> int:
    """Run the game server."""
    parser = argparse.ArgumentParser(prog="truthlie", description="Run the Truth or Lie game server.")
    parser.add_argument("--host", default="127.0.0.1", help="address to bind")
    parser.add_argument("--port", type=int, default=8080, help="port to listen on")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO)
    shown = "localhost" if args.host == "127.0.0.1" else args.host
    print(f"Starting API at http://{shown}:{args.port} ...")
    web.run_app(create_app(), host=args.host, port=args.port, print=None)
    return 0