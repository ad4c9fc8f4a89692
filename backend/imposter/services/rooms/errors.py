"""Recoverable room errors.

Each error carries the message that is sent back to the requesting
connection. ``Unauthorized`` is never reported to clients.
"""


class RoomError(Exception):
    message = 'Something went wrong.'

    def __init__(self, message=None):
        self.message = message or self.message
        super().__init__(self.message)


class InvalidName(RoomError):
    message = 'Enter your name first!'


class RoomNotFound(RoomError):
    message = 'Room not found. Check the code and try again.'


class InvalidState(RoomError):
    message = 'That is not possible right now.'


class Unauthorized(RoomError):
    message = 'Not allowed.'


class NameTaken(RoomError):
    message = 'That name is already taken. Pick a different name.'


class RoomFull(RoomError):
    message = 'Room is full.'

    def __init__(self, max_players=None):
        super().__init__(f'Room is full (max {max_players} players).' if max_players else None)


class InvalidCategory(RoomError):
    message = 'Invalid category.'


class InsufficientPlayers(RoomError):
    message = 'Need at least 2 players to start.'

    def __init__(self, min_players=None):
        super().__init__(f'Need at least {min_players} players to start.' if min_players else None)


class RejoinNotFound(RoomError):
    message = 'Could not rejoin, please re-enter the room.'
