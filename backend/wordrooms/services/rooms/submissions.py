from typing import List

from flask import current_app

from wordrooms.errors import RoomConflict
from wordrooms.models import FINISHED, fold
from .lifecycle import require_player, require_room_id
from .store import room_lock, room_store


def parse_words(words_csv) -> List[str]:
    """Split a comma separated submission into trimmed, lower-cased words.

    Empty tokens (``"cat,,dog,"``) are dropped.
    """
    if not words_csv:
        return []
    if isinstance(words_csv, (list, tuple)):
        words_csv = ','.join(str(w) for w in words_csv)
    return [w for w in (fold(token) for token in str(words_csv).split(',')) if w]


def submit_words(room_id, player, words_csv) -> dict:
    """Store a player's word list, replacing any earlier one.

    Once every player in the room has an entry the room is finished.
    """
    room_id = require_room_id(room_id)
    player = require_player(player)
    key = fold(player)
    words = parse_words(words_csv)

    with room_lock(room_id):
        room = room_store.get(room_id)
        if not room.has_player(player):
            current_app.logger.warning(f"[submit] room={room_id} unknown player={player!r}")
            raise RoomConflict('Player is not in this room')
        room.submissions[key] = words
        all_submitted = room.all_submitted()
        if all_submitted and room.status != FINISHED:
            room.status = FINISHED
        room_store.replace(room)

    submitted = sum(1 for k in room.player_keys() if k in room.submissions)
    current_app.logger.info(
        f"[submit] room={room_id} player={player!r} words={len(words)} "
        f"submitted={submitted}/{len(room.players)} status={room.status}"
    )
    return {
        'success': True,
        'allSubmitted': all_submitted,
        'submitted': submitted,
        'total': len(room.players),
    }
