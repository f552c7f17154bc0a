import pytest

from wordrooms.errors import InputMissing, RoomConflict, RoomNotFound
from wordrooms.models import ROOM_CODE_ALPHABET
from wordrooms.services.rooms import lifecycle
from wordrooms.services.rooms.lifecycle import (
    create_room, join_room, leave_room, poll_room, start_room,
)
from wordrooms.services.rooms.store import room_store
from wordrooms.services.rooms.submissions import submit_words


def test_create_room_initial_state(flask_app):
    created = create_room('Alice', '12')
    assert created['boardCode'] == 12
    room_id = created['roomId']
    assert len(room_id) == 6
    assert set(room_id) <= set(ROOM_CODE_ALPHABET)

    room = room_store.get(room_id)
    assert room.players == ['Alice']
    assert room.status == 'waiting'
    assert room.submissions == {}
    assert room.start_time is None
    assert room.created_at > 0


@pytest.mark.parametrize('player, board', [(None, 7), ('', 7), ('Alice', None), ('Alice', ''), ('  ', 3)])
def test_create_room_missing_input(flask_app, player, board):
    with pytest.raises(InputMissing):
        create_room(player, board)


def test_create_room_rejects_non_numeric_board(flask_app):
    with pytest.raises(InputMissing):
        create_room('Alice', 'seven')


@pytest.mark.parametrize('board', [7.9, True, False, '7.9'])
def test_create_room_rejects_fractional_or_bool_board(flask_app, board):
    with pytest.raises(InputMissing):
        create_room('Alice', board)


@pytest.mark.parametrize('board, expected', [(7.0, 7), (' 7 ', 7), (0, 0)])
def test_create_room_accepts_integral_board(flask_app, board, expected):
    assert create_room('Alice', board)['boardCode'] == expected


def test_join_is_idempotent_on_same_name(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    join_room(room_id, 'Bob')
    first = join_room(room_id, 'Bob')
    assert first['players'] == ['Alice', 'Bob']
    assert room_store.get(room_id).players == ['Alice', 'Bob']


def test_join_matches_names_case_insensitively(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    res = join_room(room_id, 'ALICE')
    assert res['players'] == ['Alice']


def test_join_preserves_order(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    for name in ['Bob', 'Cara', 'Dan']:
        join_room(room_id, name)
    assert poll_room(room_id)['players'] == ['Alice', 'Bob', 'Cara', 'Dan']


def test_join_missing_room(flask_app):
    with pytest.raises(RoomNotFound):
        join_room('ABCDEF', 'Bob')


def test_join_missing_input(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    with pytest.raises(InputMissing):
        join_room(room_id, '')
    with pytest.raises(InputMissing):
        join_room('', 'Bob')


def test_join_rejected_once_playing(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    start_room(room_id)
    with pytest.raises(RoomConflict):
        join_room(room_id, 'Bob')


def test_start_sets_future_start_time(flask_app, monkeypatch):
    monkeypatch.setattr(lifecycle, 'now_ms', lambda: 1_000_000)
    room_id = create_room('Alice', 1)['roomId']
    res = start_room(room_id)
    assert res == {'success': True, 'startTime': 1_005_000}
    state = poll_room(room_id)
    assert state['status'] == 'playing'
    assert state['startTime'] == 1_005_000


def test_restart_resets_countdown(flask_app, monkeypatch):
    room_id = create_room('Alice', 1)['roomId']
    monkeypatch.setattr(lifecycle, 'now_ms', lambda: 1_000_000)
    start_room(room_id)
    monkeypatch.setattr(lifecycle, 'now_ms', lambda: 2_000_000)
    assert start_room(room_id)['startTime'] == 2_005_000
    assert poll_room(room_id)['status'] == 'playing'


def test_start_on_finished_room_keeps_status(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    started = start_room(room_id)
    submit_words(room_id, 'Alice', 'cat')
    assert poll_room(room_id)['status'] == 'finished'
    res = start_room(room_id)
    assert res['startTime'] == started['startTime']
    assert poll_room(room_id)['status'] == 'finished'


def test_start_missing_room(flask_app):
    with pytest.raises(RoomNotFound):
        start_room('ABCDEF')


def test_poll_missing_room(flask_app):
    with pytest.raises(RoomNotFound):
        poll_room('ABCDEF')


def test_poll_lists_submitted_players_by_display_name(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    join_room(room_id, 'Bob')
    start_room(room_id)
    submit_words(room_id, 'bob', 'tree')
    assert poll_room(room_id)['playersSubmitted'] == ['Bob']


def test_leave_removes_player(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    join_room(room_id, 'Bob')
    assert leave_room(room_id, 'Bob') == {'success': True}
    assert poll_room(room_id)['players'] == ['Alice']
    # leaving twice is harmless
    assert leave_room(room_id, 'Bob') == {'success': True}
    assert poll_room(room_id)['players'] == ['Alice']


def test_leave_last_player_deletes_room(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    leave_room(room_id, 'Alice')
    with pytest.raises(RoomNotFound):
        poll_room(room_id)


def test_leave_unknown_room_is_noop(flask_app):
    assert leave_room('ABCDEF', 'Alice') == {'success': True}


def test_leave_missing_input(flask_app):
    with pytest.raises(InputMissing):
        leave_room('', 'Alice')
    with pytest.raises(InputMissing):
        leave_room('ABCDEF', None)


def test_leave_drops_submission_and_can_finish_room(flask_app):
    room_id = create_room('Alice', 1)['roomId']
    join_room(room_id, 'Bob')
    join_room(room_id, 'Cara')
    start_room(room_id)
    submit_words(room_id, 'Alice', 'cat')
    submit_words(room_id, 'Bob', 'dog')
    leave_room(room_id, 'Bob')
    room = room_store.get(room_id)
    assert 'bob' not in room.submissions
    assert room.status == 'playing'

    leave_room(room_id, 'Cara')
    room = room_store.get(room_id)
    assert room.status == 'finished'
    assert set(room.submissions) == {p.lower() for p in room.players}
