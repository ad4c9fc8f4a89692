import logging
import random
import threading
from typing import Dict, Optional, Tuple

from imposter.catalog import CategoryCatalog
from imposter.models import ConnectionSession, GameState, RoleAssignment, Room
from .errors import InvalidName, InvalidState, RejoinNotFound, RoomNotFound, Unauthorized
from .reconnect import ReconnectionManager
from .registry import RoomRegistry, normalize_room_code


def clean_name(value) -> str:
    name = value.strip() if isinstance(value, str) else ''
    if not name:
        raise InvalidName()
    return name


class NullTransport:
    """Transport that drops everything; used when no realtime server is attached."""

    def broadcast(self, event, data, room):
        pass

    def leave(self, sid, room):
        pass


class RoomService:
    """Owns all room state for one server process.

    Every public method takes ``lock`` so handlers for different events,
    and timer expiries, never see a half-applied change. Handlers that need
    to build payloads from the returned room should hold ``lock`` too.
    """

    def __init__(
        self,
        catalog: Optional[CategoryCatalog] = None,
        transport=None,
        registry: Optional[RoomRegistry] = None,
        grace_sec: float = 10,
        min_players: int = 2,
        max_players: int = 12,
        chat_max_length: int = 200,
        rng=None,
        start_task=None,
        sleep=None,
        logger: Optional[logging.Logger] = None,
    ):
        self.lock = threading.RLock()
        self.catalog = catalog or CategoryCatalog()
        self.transport = transport or NullTransport()
        self.registry = registry or RoomRegistry()
        self.min_players = min_players
        self.max_players = max_players
        self.chat_max_length = chat_max_length
        self._rng = rng or random.SystemRandom()
        self.logger = logger or logging.getLogger(__name__)
        self.sessions: Dict[str, ConnectionSession] = {}
        self.reconnection = ReconnectionManager(
            grace_sec,
            on_expire=self.expire_player,
            start_task=start_task,
            sleep=sleep,
            lock=self.lock,
            logger=self.logger,
        )

    @classmethod
    def from_config(cls, config, **kwargs) -> 'RoomService':
        kwargs.setdefault('registry', RoomRegistry(code_length=int(config.get('ROOM_CODE_LENGTH', 6))))
        return cls(
            grace_sec=float(config.get('RECONNECT_GRACE_SEC', 10)),
            min_players=int(config.get('MIN_PLAYERS', 2)),
            max_players=int(config.get('MAX_PLAYERS', 12)),
            chat_max_length=int(config.get('CHAT_MAX_LENGTH', 200)),
            **kwargs,
        )

    def categories(self):
        return self.catalog.names()

    def session_for(self, sid: str) -> Optional[ConnectionSession]:
        return self.sessions.get(sid)

    def room_for(self, sid: str) -> Optional[Room]:
        session = self.sessions.get(sid)
        return self.registry.get_room(session.room_code) if session else None

    # ---- membership ----

    def create_room(self, sid: str, player_name) -> Room:
        name = clean_name(player_name)
        with self.lock:
            self._release_seat(sid)
            code, room = self.registry.create_room(sid, name)
            self.sessions[sid] = ConnectionSession(code, name)
        self.logger.info(f"[room-created] room={code} host={name}")
        return room

    def join_room(self, sid: str, room_code, player_name) -> Room:
        name = clean_name(player_name)
        with self.lock:
            room = self.registry.require_room(room_code)
            current = self.sessions.get(sid)
            if current is not None and current.room_code == room.code:
                raise InvalidState('You are already in this room.')
            room.check_can_join(name, self.max_players)
            # Only a seat in some other room is released here
            self._release_seat(sid)
            room.add_player(sid, name, self.max_players)
            self.sessions[sid] = ConnectionSession(room.code, name)
            count = len(room.players)
        self.logger.info(f"[room-joined] room={room.code} player={name} players={count}")
        return room

    def rejoin_room(self, sid: str, room_code, player_name) -> Room:
        name = player_name.strip() if isinstance(player_name, str) else ''
        with self.lock:
            room = self.registry.get_room(room_code)
            if room is None:
                raise RoomNotFound('Room no longer exists.')
            player = room.find_player_by_name(name)
            if player is None:
                raise RejoinNotFound()
            old_sid = player.id
            if old_sid != sid:
                # A seat can only be reclaimed once its connection is gone,
                # and never by a connection seated in the same room
                current = self.sessions.get(sid)
                if old_sid in self.sessions or (current is not None and current.room_code == room.code):
                    raise RejoinNotFound()
                self._release_seat(sid)
            self.reconnection.cancel(old_sid)
            room.migrate_identity(old_sid, sid)
            self.sessions[sid] = ConnectionSession(room.code, name)
        self.logger.info(f"[rejoin] room={room.code} player={name} old_sid={old_sid} sid={sid}")
        return room

    def disconnect(self, sid: str) -> bool:
        """Start the grace timer for ``sid``. Returns False if it had no room."""
        with self.lock:
            session = self.sessions.pop(sid, None)
            if session is None or session.room_code not in self.registry:
                return False
            room = self.registry.get_room(session.room_code)
            if room.find_player(sid) is None:
                return False
            self.reconnection.schedule(sid, room.code)
        return True

    def expire_player(self, sid: str, room_code: str) -> None:
        with self.lock:
            self._remove_player(sid, room_code)

    def _remove_player(self, sid: str, room_code: str) -> None:
        room = self.registry.get_room(room_code)
        if room is None:
            return
        was_host = room.is_host(sid)
        removed = room.remove_player(sid)
        if removed is None:
            return
        self.logger.info(f"[player-removed] room={room.code} player={removed.name}")
        if room.is_empty:
            self.registry.delete_room(room.code)
            self.logger.info(f"[room-deleted] room={room.code}")
            return
        if was_host:
            self.logger.info(f"[host-transfer] room={room.code} from={removed.name} to={room.players[0].name}")
        self.transport.broadcast('players-updated', {'players': room.players_payload()}, room.code)

    def _release_seat(self, sid: str) -> None:
        """Give up whatever seat this connection already holds."""
        session = self.sessions.pop(sid, None)
        if session is None:
            return
        self.transport.leave(sid, session.room_code)
        self._remove_player(sid, session.room_code)

    # ---- game flow ----

    def start_game(self, sid: str, category) -> Room:
        with self.lock:
            room = self._room_of(sid, 'Room not found. Please refresh and rejoin.')
            if not room.is_host(sid):
                raise Unauthorized()
            room.start(category, self.catalog, self.min_players, self._rng)
        self.logger.info(f"[game-started] room={room.code} category={category} players={len(room.players)}")
        return room

    def get_role(self, sid: str) -> Optional[RoleAssignment]:
        with self.lock:
            room = self.room_for(sid)
            return room.role_for(sid) if room else None

    def end_game(self, sid: str) -> Tuple[Room, str]:
        with self.lock:
            room = self._room_of(sid)
            if not (room.is_imposter(sid) or room.is_host(sid)):
                raise Unauthorized()
            imposter_name = room.end()
        self.logger.info(f"[game-ended] room={room.code}")
        return room, imposter_name

    def play_again(self, sid: str) -> Room:
        with self.lock:
            room = self._room_of(sid)
            if not room.is_host(sid):
                raise Unauthorized()
            room.reset()
        self.logger.info(f"[game-reset] room={room.code}")
        return room

    def chat(self, sid: str, text) -> Optional[Tuple[str, dict]]:
        """Returns (room_code, message) to broadcast, or None to drop it."""
        if text is None:
            return None
        cleaned = str(text).strip()[:self.chat_max_length]
        if not cleaned:
            return None
        with self.lock:
            session = self.sessions.get(sid)
            room = self.registry.get_room(session.room_code) if session else None
            if room is None or room.game_state is GameState.ENDED:
                return None
            return room.code, {'name': session.player_name, 'text': cleaned}

    def _room_of(self, sid: str, message: Optional[str] = None) -> Room:
        room = self.room_for(sid)
        if room is None:
            raise RoomNotFound(message)
        return room

    def public_summary(self, room_code) -> Optional[dict]:
        with self.lock:
            room = self.registry.get_room(normalize_room_code(room_code))
            return room.summary(self.max_players) if room else None

    def shutdown(self) -> None:
        with self.lock:
            self.reconnection.cancel_all()
            self.sessions.clear()
            self.registry.clear()
