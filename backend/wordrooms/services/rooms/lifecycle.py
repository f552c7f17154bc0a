"""Room lifecycle: create, join, start, poll and leave.

Status only moves forward, ``waiting -> playing -> finished``. Every write
happens under the room's lock as one full-record replace.
"""
from flask import current_app

from wordrooms.errors import InputMissing, RoomConflict, RoomIdTaken, RoomInternalError, RoomNotFound
from wordrooms.models import (
    FINISHED, PLAYING, WAITING, Room, fold, generate_room_code, normalize_room_id,
)
from .reaper import cleanup, now_ms
from .store import room_lock, room_store


def _config_int(key: str, default: int) -> int:
    try:
        return int(current_app.config.get(key, default))
    except (TypeError, ValueError):
        return default


def require_room_id(room_id) -> str:
    room_id = normalize_room_id(room_id)
    if not room_id:
        raise InputMissing('Missing roomId')
    return room_id


def _clean_name(player) -> str:
    return player.strip() if isinstance(player, str) else ''


def require_player(player) -> str:
    player = _clean_name(player)
    if not player:
        raise InputMissing('Missing player')
    return player


def _parse_board_code(value) -> int:
    """Accept ints and integral strings or floats; reject booleans and fractions."""
    if isinstance(value, bool):
        raise InputMissing('boardCode must be an integer')
    if isinstance(value, float):
        if not value.is_integer():
            raise InputMissing('boardCode must be an integer')
        return int(value)
    try:
        return int(value)
    except (TypeError, ValueError):
        raise InputMissing('boardCode must be an integer')


def create_room(player, board_code) -> dict:
    player = _clean_name(player)
    if not player or board_code in (None, ''):
        raise InputMissing('Missing player or boardCode')
    board_code = _parse_board_code(board_code)

    cleanup()

    length = _config_int('ROOM_CODE_LENGTH', 6)
    attempts = _config_int('ROOM_CODE_MAX_ATTEMPTS', 10)
    for attempt in range(1, attempts + 1):
        room = Room(
            room_id=generate_room_code(length),
            board_code=board_code,
            players=[player],
            status=WAITING,
            created_at=now_ms(),
        )
        try:
            room_store.create(room)
        except RoomIdTaken:
            current_app.logger.warning(f"[room-collision] room={room.room_id} attempt={attempt}")
            continue
        current_app.logger.info(f"[room-create] room={room.room_id} board={board_code} player={player!r}")
        return {'roomId': room.room_id, 'boardCode': board_code}

    current_app.logger.error(f"[room-create] no free room code after {attempts} attempts")
    raise RoomInternalError('Could not allocate a room code')


def join_room(room_id, player) -> dict:
    room_id = require_room_id(room_id)
    player = require_player(player)
    with room_lock(room_id):
        room = room_store.get(room_id)
        if room.status != WAITING:
            current_app.logger.warning(f"[room-join] room={room_id} rejected status={room.status}")
            raise RoomConflict('Game already started')
        if not room.has_player(player):
            room.players.append(player)
            room_store.replace(room)
            current_app.logger.info(f"[room-join] room={room_id} player={player!r} count={len(room.players)}")
    return {
        'success': True,
        'players': list(room.players),
        'boardCode': room.board_code,
    }


def start_room(room_id) -> dict:
    """Schedule the shared start instant.

    Re-starting a waiting or playing room resets the countdown; a finished
    room keeps its state and reports the start time it already had.
    """
    room_id = require_room_id(room_id)
    with room_lock(room_id):
        room = room_store.get(room_id)
        if room.status == FINISHED:
            current_app.logger.info(f"[room-start] room={room_id} already finished")
            return {'success': True, 'startTime': room.start_time}
        room.status = PLAYING
        room.start_time = now_ms() + _config_int('START_COUNTDOWN_MS', 5000)
        room_store.replace(room)
    current_app.logger.info(f"[room-start] room={room_id} start_time={room.start_time}")
    return {'success': True, 'startTime': room.start_time}


def poll_room(room_id) -> dict:
    room_id = require_room_id(room_id)
    room = room_store.get(room_id)
    return {
        'players': list(room.players),
        'status': room.status,
        'startTime': room.start_time,
        'playersSubmitted': room.submitted_players(),
    }


def leave_room(room_id, player) -> dict:
    room_id = normalize_room_id(room_id)
    player = _clean_name(player)
    if not room_id or not player:
        raise InputMissing('Missing roomId or player')

    key = fold(player)
    with room_lock(room_id):
        try:
            room = room_store.get(room_id)
        except RoomNotFound:
            # Leaving is always safe
            return {'success': True}

        remaining = [p for p in room.players if fold(p) != key]
        if len(remaining) == len(room.players):
            return {'success': True}

        if not remaining:
            room_store.delete(room_id)
            current_app.logger.info(f"[room-delete] room={room_id} last player {player!r} left")
            return {'success': True}

        room.players = remaining
        room.submissions.pop(key, None)
        if room.status != FINISHED and room.all_submitted():
            room.status = FINISHED
        room_store.replace(room)
    current_app.logger.info(
        f"[room-leave] room={room_id} player={player!r} count={len(room.players)} status={room.status}"
    )
    return {'success': True}
