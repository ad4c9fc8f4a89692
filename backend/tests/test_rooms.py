import random

import pytest

from imposter.catalog import CategoryCatalog, DEFAULT_CATEGORIES
from imposter.models import GameState, Room
from imposter.services.rooms.errors import (
    InsufficientPlayers,
    InvalidCategory,
    InvalidName,
    InvalidState,
    NameTaken,
    RoomFull,
)
from imposter.services.rooms.registry import ROOM_CODE_ALPHABET, RoomRegistry, generate_room_code

SPORTS = CategoryCatalog({'Sports': ['Soccer'], 'Pair': ['Soccer', 'Tennis']})


def assert_single_host(room):
    hosts = [p for p in room.players if p.is_host]
    assert len(hosts) == 1
    assert room.host == hosts[0].id


def make_room(*names):
    room = Room('ABC234', 'sid-0', names[0] if names else 'Alice')
    for i, name in enumerate(names[1:], start=1):
        room.add_player(f'sid-{i}', name, 12)
    return room


def test_room_code_alphabet_is_unambiguous():
    for ch in '01OI':
        assert ch not in ROOM_CODE_ALPHABET
    code = generate_room_code(6)
    assert len(code) == 6
    assert set(code) <= set(ROOM_CODE_ALPHABET)


def test_registry_resamples_on_collision():
    class Scripted:
        def __init__(self, codes):
            self.chars = iter(''.join(codes))

        def choice(self, seq):
            return next(self.chars)

    registry = RoomRegistry(code_length=6, rng=Scripted(['AAAAAA', 'AAAAAA', 'BBBBBB']))
    first, _ = registry.create_room('s1', 'Alice')
    second, _ = registry.create_room('s2', 'Bob')
    assert first == 'AAAAAA'
    assert second == 'BBBBBB'
    assert len(registry) == 2


def test_registry_create_trims_and_rejects_empty_names():
    registry = RoomRegistry()
    code, room = registry.create_room('s1', '  Alice  ')
    assert room.players[0].name == 'Alice'
    assert room.game_state is GameState.LOBBY
    assert_single_host(room)
    assert registry.get_room(code.lower()) is room
    with pytest.raises(InvalidName):
        registry.create_room('s2', '   ')
    with pytest.raises(InvalidName):
        registry.create_room('s2', None)


def test_registry_delete():
    registry = RoomRegistry()
    code, _ = registry.create_room('s1', 'Alice')
    registry.delete_room(code)
    assert registry.get_room(code) is None
    assert code not in registry


def test_join_rules():
    room = make_room('Alice', 'Bob')
    with pytest.raises(NameTaken):
        room.add_player('sid-x', 'Bob', 12)
    # Names are case-sensitive
    room.add_player('sid-x', 'bob', 12)
    assert [p.name for p in room.players] == ['Alice', 'Bob', 'bob']
    assert_single_host(room)


def test_room_full_at_capacity():
    room = make_room(*[f'P{i}' for i in range(12)])
    with pytest.raises(RoomFull) as exc:
        room.add_player('sid-13', 'Late', 12)
    assert exc.value.message == 'Room is full (max 12 players).'
    assert len(room.players) == 12


def test_cannot_join_started_game():
    room = make_room('Alice', 'Bob')
    room.start('Sports', SPORTS, 2, random.Random(1))
    with pytest.raises(InvalidState):
        room.add_player('sid-x', 'Eve', 12)


def test_start_assigns_exactly_one_imposter():
    room = make_room('Alice', 'Bob', 'Cara', 'Dan')
    room.start('Pair', SPORTS, 2, random.Random(7))
    assert room.game_state is GameState.PLAYING
    assert set(room.roles) == {p.id for p in room.players}
    imposters = [pid for pid, role in room.roles.items() if role.is_imposter]
    assert imposters == [room.imposter_id]
    assert room.roles[room.imposter_id].word is None
    words = {role.word for pid, role in room.roles.items() if pid != room.imposter_id}
    assert words == {room.secret_word}
    assert room.secret_word in ('Soccer', 'Tennis')


def test_start_needs_enough_players():
    room = make_room('Alice')
    with pytest.raises(InsufficientPlayers):
        room.start('Sports', SPORTS, 2, random.Random(1))
    assert room.game_state is GameState.LOBBY
    assert room.roles == {}


def test_imposter_choice_is_roughly_uniform():
    rng = random.Random(1234)
    hits = 0
    trials = 2000
    for _ in range(trials):
        room = make_room('Alice', 'Bob')
        room.start('Sports', SPORTS, 2, rng)
        hits += room.imposter_id == 'sid-0'
    assert 0.45 < hits / trials < 0.55


def test_illegal_transitions_raise():
    room = make_room('Alice', 'Bob')
    with pytest.raises(InvalidState):
        room.end()
    with pytest.raises(InvalidState):
        room.reset()
    room.start('Sports', SPORTS, 2, random.Random(1))
    with pytest.raises(InvalidState):
        room.start('Sports', SPORTS, 2, random.Random(1))
    with pytest.raises(InvalidState):
        room.reset()


def test_end_then_reset_round_trip():
    room = make_room('Alice', 'Bob', 'Cara')
    before = room.players_payload()
    room.start('Sports', SPORTS, 2, random.Random(3))
    imposter = room.find_player(room.imposter_id)
    assert room.end() == imposter.name
    assert room.game_state is GameState.ENDED
    room.reset()
    assert room.game_state is GameState.LOBBY
    assert room.category is None
    assert room.secret_word is None
    assert room.imposter_id is None
    assert room.roles == {}
    assert room.players_payload() == before


def test_end_reports_unknown_when_imposter_left():
    room = make_room('Alice', 'Bob', 'Cara')
    room.start('Sports', SPORTS, 2, random.Random(3))
    room.remove_player(room.imposter_id)
    assert room.end() == 'Unknown'


def test_remove_host_promotes_earliest_joiner():
    room = make_room('Alice', 'Bob', 'Cara')
    removed = room.remove_player('sid-0')
    assert removed.name == 'Alice'
    assert room.players[0].name == 'Bob'
    assert room.players[0].is_host
    assert_single_host(room)


def test_remove_player_drops_role():
    room = make_room('Alice', 'Bob', 'Cara')
    room.start('Sports', SPORTS, 2, random.Random(3))
    room.remove_player('sid-2')
    assert 'sid-2' not in room.roles
    assert room.remove_player('sid-2') is None


def test_migrate_identity_moves_every_reference():
    room = make_room('Alice', 'Bob')
    room.start('Sports', SPORTS, 2, random.Random(0))
    old_imposter = room.imposter_id
    role = room.roles[old_imposter]
    room.migrate_identity(old_imposter, 'new-sid')
    assert room.imposter_id == 'new-sid'
    assert room.roles['new-sid'] is role
    assert old_imposter not in room.roles
    assert room.find_player('new-sid') is not None
    assert_single_host(room)

    room.migrate_identity(room.host, 'host-sid')
    assert room.host == 'host-sid'
    assert_single_host(room)


def test_summary_hides_secrets():
    room = make_room('Alice', 'Bob')
    room.start('Sports', SPORTS, 2, random.Random(0))
    summary = room.summary(12)
    assert summary == {
        'room_code': 'ABC234',
        'game_state': 'playing',
        'player_count': 2,
        'max_players': 12,
        'joinable': False,
    }


def test_catalog():
    catalog = CategoryCatalog()
    assert catalog.names() == list(DEFAULT_CATEGORIES)
    assert 'Sports' in catalog
    assert 'Nope' not in catalog
    assert None not in catalog
    with pytest.raises(InvalidCategory):
        catalog.words_for('Nope')
    with pytest.raises(ValueError):
        CategoryCatalog({'Empty': []})


def test_start_checks_state_before_category():
    room = make_room('Alice', 'Bob')
    room.start('Sports', SPORTS, 2, random.Random(1))
    with pytest.raises(InvalidState):
        room.start('Cooking', SPORTS, 2, random.Random(1))
    assert room.category == 'Sports'


def test_start_with_unknown_category_changes_nothing():
    room = make_room('Alice', 'Bob')
    with pytest.raises(InvalidCategory):
        room.start('Cooking', SPORTS, 2, random.Random(1))
    assert room.game_state is GameState.LOBBY
    assert room.roles == {}
