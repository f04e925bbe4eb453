"""Network surface: the WebSocket relay listener and its session handlers."""
