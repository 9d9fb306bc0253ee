# truthlie

Backend server for **Truth or Lie**. This is a party game in which each player
writes one true statement and one false statement, and the other players guess
which one is true.

The server offers a JSON HTTP API for creating players and game lobbies. It
also offers a WebSocket channel that tells the players in a lobby when the
host starts the game.

## Installation

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
truthlie
```

By default the server listens on `http://127.0.0.1:8080`. Use `--host` and
`--port` to choose another address:

```
truthlie --host 0.0.0.0 --port 9000
```

## HTTP API

The collection routes end with a trailing slash, for example `/players/` and
`/games/`.

| Method | Path                        | Purpose                                      |
|--------|-----------------------------|----------------------------------------------|
| GET    | `/`                         | Welcome message                              |
| POST   | `/players/`                 | Create a player: `{"name": "..."}` (201)     |
| GET    | `/players/`                 | List all players                             |
| POST   | `/games/`                   | Create a game lobby (201)                    |
| GET    | `/games/`                   | List all games                               |
| POST   | `/games/{game_id}/join`     | Join a lobby: `{"player_id": "..."}`         |
| POST   | `/games/{game_id}/start`    | Host starts the game: `{"player_id": "..."}` |
| GET    | `/ws/{game_id}/{player_id}` | Open the player's WebSocket                  |

A successful join or start returns
`{"message": "...", "body": <game>}`.

### Creating a game

```json
{
  "host_id": "<player uuid>",
  "name": "Friday night",
  "is_private": false,
  "with_staking": true,
  "stake_amount": 10,
  "max_players": 2,
  "max_rounds": 4
}
```

Only `host_id` is required. The defaults are:

- name `Truth or Lie`;
- `max_players` 2 and `max_rounds` 3;
- no staking and no privacy.

The host is the first player in the lobby. The request is rejected with `400`
in these cases:

- staking is enabled but no stake amount above zero is given;
- `max_players` is 0;
- `max_rounds` is not a multiple of `max_players`, because every player must
  get the same number of rounds.

With the defaults, 3 rounds is not a multiple of 2 players. Give values for
`max_rounds` and `max_players` that fit each other.

### Joining and starting

A join is refused with `400` in these cases:

- the lobby is full;
- the game has already started;
- the player is already in the lobby.

A start is refused in these cases:

- with `400` when the lobby has fewer than 2 players;
- with `400` when the game has already started;
- with `401` when the request does not come from the host.

A successful start sets `current_round` to 1.

### Errors

Errors come back as JSON in the form `{"error": "...", "code": 400}`. The codes
are 400 (validation), 401 (unauthorized), 404 (not found) and 500 (internal).

A request returns 400 when its body is not valid JSON, or when it is missing a
field or has a field of the wrong type. An unknown game, or an id in the path
that is not a UUID, gives 404.

## WebSocket messages

Every message has a `type` field and a `data` field. A client asks to start
the game like this:

```json
{"type": "StartGame", "data": {"game_id": "<uuid>", "player_id": "<uuid>"}}
```

The server then sends a message to every other player connected to that game.
The sender itself receives nothing. When the start is accepted, the others get:

```json
{"type": "StartedGame", "data": {"game_id": "<uuid>"}}
```

When the game is unknown or the sender is not the host, the others get:

```json
{"type": "Error", "data": {"message": "Only the host can start a game"}}
```

The message for an unknown game reads `Failed to find game session!`. The
server logs malformed messages and messages with ids that are not UUIDs, and
otherwise ignores them.

The server answers pings with pongs. It sends its own ping every 5 seconds, and
it closes a connection that has gone more than 10 seconds without answering
with a pong.

## Using it as a library

```python
from aiohttp import web
from truthlie.app import create_app
from truthlie.state import AppState

web.run_app(create_app(AppState()), host="127.0.0.1", port=8080)
```

The game rules live in `truthlie.games`, in these functions:

- `create_game`
- `join_game`
- `start_game`
- `list_games`
- `create_player`
- `list_players`

Each one takes an `AppState` and raises the errors from `truthlie.errors`, so
you can use them without the web layer. For example:

```python
from truthlie import games
from truthlie.models import CreatePlayerPayload, CreateGameSessionPayload
from truthlie.state import AppState

state = AppState()
host = games.create_player(state, CreatePlayerPayload(name="Ada"))
game = games.create_game(
    state, CreateGameSessionPayload(host_id=host.id, max_players=2, max_rounds=4)
)
```

`truthlie.manager.GameManager` keeps track of which connections belong to
which game. `truthlie.messages` decodes the client's messages and encodes the
server's.

## What it does not do

- **No storage.** All players and games live in memory and are lost when the
  server stops.
- **No gameplay beyond starting a game.** The `Round`, `Guess` and
  `Statements` records in `truthlie.models` exist, but no endpoint submits
  statements, plays rounds, records guesses or ends a game.
- **Started games are not written back to the shared state.** When the host
  starts a game over the WebSocket, `GameManager` keeps a copy of the session
  in its `sessions`, but nothing ever copies it back.
- **No authentication.** A player is identified only by the id sent in the
  request.