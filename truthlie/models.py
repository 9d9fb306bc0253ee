"""Game, round and player records and the request payloads that create them."""

from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Any, TypeVar
from uuid import UUID

from .errors import ValidationError

MIN_PLAYERS = 2
MIN_ROUNDS = 3

_U32_MAX = 2**32 - 1
_T = TypeVar("_T")


def _require_mapping(data: Any) -> Mapping[str, Any]:
    if not isinstance(data, Mapping):
        raise ValidationError("expected a JSON object")
    return data


def _get(data: Mapping[str, Any], key: str) -> Any:
    if key not in data:
        raise ValidationError(f"missing field `{key}`")
    return data[key]


def _uuid(value: Any, key: str) -> UUID:
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str):
        raise ValidationError(f"field `{key}` must be a UUID string")
    try:
        return UUID(value)
    except ValueError:
        raise ValidationError(f"field `{key}` is not a valid UUID") from None


def _u32(value: Any, key: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValidationError(f"field `{key}` must be an unsigned integer")
    if not 0 <= value <= _U32_MAX:
        raise ValidationError(f"field `{key}` is out of range")
    return value


def _str(value: Any, key: str) -> str:
    if not isinstance(value, str):
        raise ValidationError(f"field `{key}` must be a string")
    return value


def _bool(value: Any, key: str) -> bool:
    if not isinstance(value, bool):
        raise ValidationError(f"field `{key}` must be a boolean")
    return value


def _list(value: Any, key: str) -> list[Any]:
    if not isinstance(value, list):
        raise ValidationError(f"field `{key}` must be a list")
    return value


def _required(data: Mapping[str, Any], key: str, check: Callable[[Any, str], _T]) -> _T:
    return check(_get(data, key), key)


def _optional(data: Mapping[str, Any], key: str, check: Callable[[Any, str], _T]) -> _T | None:
    value = data.get(key)
    return None if value is None else check(value, key)


def _uuid_list(data: Mapping[str, Any], key: str) -> list[UUID]:
    return [_uuid(item, key) for item in _required(data, key, _list)]


@dataclass
class Guess:
    player_id: UUID
    guess: bool  # True when the player picked the true statement

    def to_dict(self) -> dict[str, Any]:
        return {"player_id": str(self.player_id), "guess": self.guess}

    @classmethod
    def from_dict(cls, data: Any) -> Guess:
        data = _require_mapping(data)
        return cls(
            player_id=_required(data, "player_id", _uuid),
            guess=_required(data, "guess", _bool),
        )


@dataclass
class Round:
    id: UUID
    game_id: UUID
    round_number: int
    owner: UUID  # the player writing the statements
    true_statement: str
    false_statement: str
    guesses: list[Guess] = field(default_factory=list)
    started_at: str = ""
    ended_at: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "game_id": str(self.game_id),
            "round_number": self.round_number,
            "owner": str(self.owner),
            "true_statement": self.true_statement,
            "false_statement": self.false_statement,
            "guesses": [g.to_dict() for g in self.guesses],
            "started_at": self.started_at,
            "ended_at": self.ended_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Round:
        data = _require_mapping(data)
        return cls(
            id=_required(data, "id", _uuid),
            game_id=_required(data, "game_id", _uuid),
            round_number=_required(data, "round_number", _u32),
            owner=_required(data, "owner", _uuid),
            true_statement=_required(data, "true_statement", _str),
            false_statement=_required(data, "false_statement", _str),
            guesses=[Guess.from_dict(g) for g in _required(data, "guesses", _list)],
            started_at=_required(data, "started_at", _str),
            ended_at=_optional(data, "ended_at", _str),
        )


@dataclass
class Statements:
    id: UUID
    game_id: UUID
    creator: UUID
    true_statement: str
    false_statement: str
    right_guesses: list[UUID] = field(default_factory=list)
    wrong_guesses: list[UUID] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "game_id": str(self.game_id),
            "creator": str(self.creator),
            "true_statement": self.true_statement,
            "false_statement": self.false_statement,
            "right_guesses": [str(p) for p in self.right_guesses],
            "wrong_guesses": [str(p) for p in self.wrong_guesses],
        }

    @classmethod
    def from_dict(cls, data: Any) -> Statements:
        data = _require_mapping(data)
        return cls(
            id=_required(data, "id", _uuid),
            game_id=_required(data, "game_id", _uuid),
            creator=_required(data, "creator", _uuid),
            true_statement=_required(data, "true_statement", _str),
            false_statement=_required(data, "false_statement", _str),
            right_guesses=_uuid_list(data, "right_guesses"),
            wrong_guesses=_uuid_list(data, "wrong_guesses"),
        )


@dataclass
class GameSession:
    id: UUID
    name: str
    rounds: list[Round]
    players: list[UUID]
    host_id: UUID
    has_started: bool
    is_private: bool
    with_staking: bool
    stake_amount: int
    max_players: int
    current_round: int
    max_rounds: int
    current_guesses: int
    round_duration: int  # seconds
    created_at: str  # ISO 8601
    updated_at: str  # ISO 8601

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "rounds": [r.to_dict() for r in self.rounds],
            "players": [str(p) for p in self.players],
            "host_id": str(self.host_id),
            "has_started": self.has_started,
            "is_private": self.is_private,
            "with_staking": self.with_staking,
            "stake_amount": self.stake_amount,
            "max_players": self.max_players,
            "current_round": self.current_round,
            "max_rounds": self.max_rounds,
            "current_guesses": self.current_guesses,
            "round_duration": self.round_duration,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_dict(cls, data: Any) -> GameSession:
        data = _require_mapping(data)
        return cls(
            id=_required(data, "id", _uuid),
            name=_required(data, "name", _str),
            rounds=[Round.from_dict(r) for r in _required(data, "rounds", _list)],
            players=_uuid_list(data, "players"),
            host_id=_required(data, "host_id", _uuid),
            has_started=_required(data, "has_started", _bool),
            is_private=_required(data, "is_private", _bool),
            with_staking=_required(data, "with_staking", _bool),
            stake_amount=_required(data, "stake_amount", _u32),
            max_players=_required(data, "max_players", _u32),
            current_round=_required(data, "current_round", _u32),
            max_rounds=_required(data, "max_rounds", _u32),
            current_guesses=_required(data, "current_guesses", _u32),
            round_duration=_required(data, "round_duration", _u32),
            created_at=_required(data, "created_at", _str),
            updated_at=_required(data, "updated_at", _str),
        )


@dataclass
class Player:
    id: UUID
    name: str
    rank: int = 0
    correct_guesses: int = 0
    wrong_guesses: int = 0
    no_guesses: int = 0
    max_correct_guesses_in_game: int = 0
    wallet_address: str | None = None
    current_game_id: UUID | None = None
    games_played: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": str(self.id),
            "name": self.name,
            "rank": self.rank,
            "correct_guesses": self.correct_guesses,
            "wrong_guesses": self.wrong_guesses,
            "no_guesses": self.no_guesses,
            "max_correct_guesses_in_game": self.max_correct_guesses_in_game,
            "wallet_address": self.wallet_address,
            "current_game_id": None if self.current_game_id is None else str(self.current_game_id),
            "games_played": self.games_played,
        }

    @classmethod
    def from_dict(cls, data: Any) -> Player:
        data = _require_mapping(data)
        return cls(
            id=_required(data, "id", _uuid),
            name=_required(data, "name", _str),
            rank=_required(data, "rank", _u32),
            correct_guesses=_required(data, "correct_guesses", _u32),
            wrong_guesses=_required(data, "wrong_guesses", _u32),
            no_guesses=_required(data, "no_guesses", _u32),
            max_correct_guesses_in_game=_required(data, "max_correct_guesses_in_game", _u32),
            wallet_address=_optional(data, "wallet_address", _str),
            current_game_id=_optional(data, "current_game_id", _uuid),
            games_played=_required(data, "games_played", _u32),
        )


@dataclass
class CreateGameSessionPayload:
    host_id: UUID
    name: str | None = None
    is_private: bool | None = None
    with_staking: bool | None = None
    max_rounds: int | None = None
    max_players: int | None = None
    stake_amount: int | None = None

    @classmethod
    def from_dict(cls, data: Any) -> CreateGameSessionPayload:
        data = _require_mapping(data)
        return cls(
            host_id=_required(data, "host_id", _uuid),
            name=_optional(data, "name", _str),
            is_private=_optional(data, "is_private", _bool),
            with_staking=_optional(data, "with_staking", _bool),
            max_rounds=_optional(data, "max_rounds", _u32),
            max_players=_optional(data, "max_players", _u32),
            stake_amount=_optional(data, "stake_amount", _u32),
        )


@dataclass
class JoinGameSessionPayload:
    player_id: UUID

    @classmethod
    def from_dict(cls, data: Any) -> JoinGameSessionPayload:
        data = _require_mapping(data)
        return cls(player_id=_required(data, "player_id", _uuid))


@dataclass
class CreatePlayerPayload:
    name: str

    @classmethod
    def from_dict(cls, data: Any) -> CreatePlayerPayload:
        data = _require_mapping(data)
        return cls(name=_required(data, "name", _str))