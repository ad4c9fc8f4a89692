from dataclasses import dataclass
from enum import Enum
from typing import Dict, List, Optional

from imposter.services.rooms.errors import (
    InsufficientPlayers,
    InvalidState,
    NameTaken,
    RoomFull,
)


class GameState(str, Enum):
    LOBBY = 'lobby'
    PLAYING = 'playing'
    ENDED = 'ended'


# Only these transitions exist; anything else raises InvalidState.
_TRANSITIONS = {
    GameState.LOBBY: {GameState.PLAYING},
    GameState.PLAYING: {GameState.ENDED},
    GameState.ENDED: {GameState.LOBBY},
}


@dataclass
class Player:
    id: str
    name: str
    is_host: bool = False

    def to_dict(self):
        return {
            'id': self.id,
            'name': self.name,
            'isHost': self.is_host,
        }


@dataclass(frozen=True)
class RoleAssignment:
    is_imposter: bool
    word: Optional[str] = None

    def to_dict(self):
        return {
            'isImposter': self.is_imposter,
            'word': self.word,
        }


@dataclass
class ConnectionSession:
    """What a single connection is currently bound to."""
    room_code: str
    player_name: str


class Room:
    """A single game session.

    ``host``, ``imposter_id`` and the keys of ``roles`` all hold connection
    ids, so they must be rewritten together when a player reconnects; see
    :meth:`migrate_identity`.
    """

    def __init__(self, code: str, host_id: str, host_name: str):
        self.code = code
        self.host = host_id
        self.players: List[Player] = [Player(id=host_id, name=host_name, is_host=True)]
        self.game_state = GameState.LOBBY
        self.category: Optional[str] = None
        self.secret_word: Optional[str] = None
        self.imposter_id: Optional[str] = None
        self.roles: Dict[str, RoleAssignment] = {}

    # ---- membership ----

    @property
    def is_empty(self) -> bool:
        return not self.players

    def find_player(self, player_id: str) -> Optional[Player]:
        return next((p for p in self.players if p.id == player_id), None)

    def find_player_by_name(self, name: str) -> Optional[Player]:
        return next((p for p in self.players if p.name == name), None)

    def is_host(self, player_id: str) -> bool:
        return self.host == player_id

    def is_imposter(self, player_id: str) -> bool:
        return self.imposter_id is not None and self.imposter_id == player_id

    def check_can_join(self, name: str, max_players: int) -> None:
        if self.game_state is not GameState.LOBBY:
            raise InvalidState('A game is already in progress in this room.')
        if self.find_player_by_name(name):
            raise NameTaken()
        if len(self.players) >= max_players:
            raise RoomFull(max_players)

    def add_player(self, player_id: str, name: str, max_players: int) -> Player:
        self.check_can_join(name, max_players)
        player = Player(id=player_id, name=name, is_host=False)
        self.players.append(player)
        return player

    def remove_player(self, player_id: str) -> Optional[Player]:
        """Drop a player and their role; hand host to the earliest joiner left."""
        removed = self.find_player(player_id)
        if removed is None:
            return None
        self.players = [p for p in self.players if p.id != player_id]
        self.roles.pop(player_id, None)
        if self.host == player_id and self.players:
            successor = self.players[0]
            successor.is_host = True
            self.host = successor.id
        return removed

    # ---- state machine ----

    def _check_transition(self, target: GameState, message: str) -> None:
        if target not in _TRANSITIONS[self.game_state]:
            raise InvalidState(message)

    def _transition(self, target: GameState, message: str) -> None:
        self._check_transition(target, message)
        self.game_state = target

    def start(self, category: str, catalog, min_players: int, rng) -> None:
        """lobby -> playing: pick the word and the imposter, build every role at once."""
        self._check_transition(GameState.PLAYING, 'A game is already in progress.')
        words = catalog.words_for(category)
        if len(self.players) < min_players:
            raise InsufficientPlayers(min_players)
        secret_word = words[rng.randrange(len(words))]
        imposter = self.players[rng.randrange(len(self.players))]

        self.game_state = GameState.PLAYING
        self.category = category
        self.secret_word = secret_word
        self.imposter_id = imposter.id
        self.roles = {
            p.id: RoleAssignment(
                is_imposter=p.id == imposter.id,
                word=None if p.id == imposter.id else secret_word,
            )
            for p in self.players
        }

    def end(self) -> str:
        """playing -> ended. Returns the imposter's display name."""
        self._transition(GameState.ENDED, 'No game is in progress.')
        imposter = self.find_player(self.imposter_id) if self.imposter_id else None
        return imposter.name if imposter else 'Unknown'

    def reset(self) -> None:
        """ended -> lobby, discarding the round."""
        self._transition(GameState.LOBBY, 'The current game has not ended yet.')
        self.category = None
        self.secret_word = None
        self.imposter_id = None
        self.roles = {}

    def role_for(self, player_id: str) -> Optional[RoleAssignment]:
        return self.roles.get(player_id)

    # ---- reconnection ----

    def migrate_identity(self, old_id: str, new_id: str) -> None:
        """Move every reference to ``old_id`` over to ``new_id`` in one step."""
        if old_id == new_id:
            return
        player = self.find_player(old_id)
        if player is None:
            raise KeyError(old_id)
        player.id = new_id
        if self.host == old_id:
            self.host = new_id
        if self.imposter_id == old_id:
            self.imposter_id = new_id
        if old_id in self.roles:
            self.roles[new_id] = self.roles.pop(old_id)

    # ---- serialisation ----

    def players_payload(self) -> List[dict]:
        return [p.to_dict() for p in self.players]

    def summary(self, max_players: int) -> dict:
        """Public lobby info; never includes the word, imposter or roles."""
        return {
            'room_code': self.code,
            'game_state': self.game_state.value,
            'player_count': len(self.players),
            'max_players': max_players,
            'joinable': self.game_state is GameState.LOBBY and len(self.players) < max_players,
        }
