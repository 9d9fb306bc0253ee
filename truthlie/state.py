"""In-memory application state shared by the request handlers."""

from __future__ import annotations

from dataclasses import dataclass, field
from uuid import UUID

from .models import GameSession, Player


@dataclass
class AppState:
    """Game sessions and players, each keyed by id."""

    sessions: dict[UUID, GameSession] = field(default_factory=dict)
    players: dict[UUID, Player] = field(default_factory=dict)