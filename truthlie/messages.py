"""Messages exchanged with players over the websocket."""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any, Union


@dataclass(frozen=True)
class StartGameRequest:
    """A client's request to start a game; ids are the raw strings sent."""

    game_id: str
    player_id: str


@dataclass(frozen=True)
class StartedGame:
    game_id: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "StartedGame", "data": {"game_id": self.game_id}}


@dataclass(frozen=True)
class ErrorMessage:
    message: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": "Error", "data": {"message": self.message}}


ServerMessage = Union[StartedGame, ErrorMessage]


def parse_client_message(text: str) -> StartGameRequest:
    """Decode a client message; raise ValueError if it is not a known message."""
    decoded = json.loads(text)
    if not isinstance(decoded, dict):
        raise ValueError("client message must be a JSON object")
    if "type" not in decoded:
        raise ValueError("missing field `type`")
    kind = decoded["type"]
    if kind != "StartGame":
        raise ValueError(f"unknown message type: {kind!r}")
    if "data" not in decoded:
        raise ValueError("missing field `data`")
    data = decoded["data"]
    if not isinstance(data, dict):
        raise ValueError("field `data` must be a JSON object")
    values = {}
    for key in ("game_id", "player_id"):
        if key not in data:
            raise ValueError(f"missing field `{key}`")
        if not isinstance(data[key], str):
            raise ValueError(f"field `{key}` must be a string")
        values[key] = data[key]
    return StartGameRequest(**values)


def encode_server_message(message: ServerMessage) -> str:
    """The compact JSON text sent to a client for ``message``."""
    return json.dumps(message.to_dict(), separators=(",", ":"), sort_keys=True)