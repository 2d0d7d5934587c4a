"""Web admin surface: REST endpoints and status websocket."""
