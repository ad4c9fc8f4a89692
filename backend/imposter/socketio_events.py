from flask import current_app, request
from flask_socketio import emit, join_room

from imposter import socketio
from imposter.services.rooms.errors import RoomError, Unauthorized
from imposter.services.rooms.service import RoomService


class SocketIOTransport:
    """Room-scoped sends used outside of a request (timer expiry, seat release)."""

    def __init__(self, sio, namespace: str = '/'):
        self.sio = sio
        self.namespace = namespace

    def broadcast(self, event, data, room):
        self.sio.emit(event, data, to=room, namespace=self.namespace)

    def leave(self, sid, room):
        self.sio.server.leave_room(sid, room, namespace=self.namespace)


def _service() -> RoomService:
    return current_app.extensions['imposter']


def _payload(data) -> dict:
    return data if isinstance(data, dict) else {}


def _reply_error(exc: RoomError, event: str = 'game-error') -> None:
    # Privileged actions fail silently so probing reveals nothing
    if isinstance(exc, Unauthorized):
        return
    emit(event, {'message': exc.message})


def handle_connect(auth=None):
    current_app.logger.debug(f"[connect] sid={request.sid}")


def handle_disconnect(reason=None):
    if _service().disconnect(request.sid):
        current_app.logger.info(f"[disconnect] sid={request.sid} reason={reason}")


def handle_create_room(data=None):
    service = _service()
    data = _payload(data)
    try:
        with service.lock:
            room = service.create_room(request.sid, data.get('playerName'))
            join_room(room.code)
            emit('room-created', {
                'roomCode': room.code,
                'players': room.players_payload(),
                'categories': service.categories(),
            })
    except RoomError as exc:
        _reply_error(exc)


def handle_join_room(data=None):
    service = _service()
    data = _payload(data)
    try:
        with service.lock:
            room = service.join_room(request.sid, data.get('roomCode'), data.get('playerName'))
            join_room(room.code)
            players = room.players_payload()
            emit('room-joined', {
                'roomCode': room.code,
                'players': players,
                'categories': service.categories(),
            })
            emit('players-updated', {'players': players}, to=room.code, include_self=False)
    except RoomError as exc:
        _reply_error(exc)


def handle_start_game(data=None):
    service = _service()
    data = _payload(data)
    try:
        with service.lock:
            room = service.start_game(request.sid, data.get('category'))
            emit('game-started', {'category': room.category}, to=room.code)
    except RoomError as exc:
        _reply_error(exc)


def handle_get_my_role(data=None):
    role = _service().get_role(request.sid)
    if role is not None:
        emit('your-role', role.to_dict())


def handle_chat_message(data=None):
    message = _service().chat(request.sid, _payload(data).get('text'))
    if message is not None:
        room_code, payload = message
        emit('chat-message', payload, to=room_code)


def handle_end_game(data=None):
    service = _service()
    try:
        with service.lock:
            room, imposter_name = service.end_game(request.sid)
            emit('game-ended', {
                'secretWord': room.secret_word,
                'imposterName': imposter_name,
                'category': room.category,
            }, to=room.code)
    except RoomError as exc:
        _reply_error(exc)


def handle_play_again(data=None):
    service = _service()
    try:
        with service.lock:
            room = service.play_again(request.sid)
            emit('reset-game', {
                'players': room.players_payload(),
                'categories': service.categories(),
            }, to=room.code)
    except RoomError as exc:
        _reply_error(exc)


def handle_rejoin_room(data=None):
    service = _service()
    data = _payload(data)
    try:
        with service.lock:
            room = service.rejoin_room(request.sid, data.get('roomCode'), data.get('playerName'))
            join_room(room.code)
            players = room.players_payload()
            emit('rejoined-room', {
                'roomCode': room.code,
                'players': players,
                'categories': service.categories(),
                'gameState': room.game_state.value,
                'category': room.category,
            })
            emit('players-updated', {'players': players}, to=room.code)
    except RoomError as exc:
        _reply_error(exc, event='rejoin-failed')


def register_socketio_handlers(namespace: str = '/') -> None:
    """Register Socket.IO event handlers on ``namespace``."""
    socketio.on_event('connect', handle_connect, namespace=namespace)
    socketio.on_event('disconnect', handle_disconnect, namespace=namespace)
    socketio.on_event('create-room', handle_create_room, namespace=namespace)
    socketio.on_event('join-room', handle_join_room, namespace=namespace)
    socketio.on_event('start-game', handle_start_game, namespace=namespace)
    socketio.on_event('get-my-role', handle_get_my_role, namespace=namespace)
    socketio.on_event('chat-message', handle_chat_message, namespace=namespace)
    socketio.on_event('end-game', handle_end_game, namespace=namespace)
    socketio.on_event('play-again', handle_play_again, namespace=namespace)
    socketio.on_event('rejoin-room', handle_rejoin_room, namespace=namespace)
