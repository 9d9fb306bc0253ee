"""Truth or Lie game server: an HTTP API for players and lobbies, with WebSocket start notifications."""

__version__ = "0.1.0"