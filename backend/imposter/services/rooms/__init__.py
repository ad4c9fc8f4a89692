"""Room domain services: registry, game state machine, reconnection.

This package holds the room logic imported by the Socket.IO handlers and
HTTP routes. Nothing in here talks to Flask or Socket.IO directly; the
realtime side is reached through the small transport object handed to
the room service.
"""
