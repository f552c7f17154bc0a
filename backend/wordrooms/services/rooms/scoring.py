import re
from collections import Counter
from typing import Dict, List

from flask import current_app

from wordrooms.models import fold
from .lifecycle import require_room_id
from .store import room_store

_QU = re.compile('qu', re.IGNORECASE)


def word_score(word: str) -> int:
    """Points for one word.

    "qu" counts as a single letter, so QUIET scores like a four letter word.
    """
    length = len(_QU.sub('q', word))
    if length <= 2:
        return 0
    if length <= 4:
        return 1
    if length == 5:
        return 2
    if length == 6:
        return 3
    if length == 7:
        return 5
    return 11


def _distinct(words: List[str]) -> List[str]:
    return list(dict.fromkeys(words))


def get_results(room_id) -> dict:
    """Score every player, dropping words that more than one player found.

    A player listing the same word twice still counts once toward its
    frequency. Players come back by score, highest first; ties keep join order.
    """
    room_id = require_room_id(room_id)
    room = room_store.get(room_id)

    per_player: Dict[str, List[str]] = {
        p: room.submissions.get(fold(p), []) for p in room.players
    }
    counts = Counter()
    for words in per_player.values():
        counts.update(_distinct(words))

    duplicates = [w for w in counts if counts[w] > 1]

    results = []
    for name, words in per_player.items():
        unique_words = [w for w in _distinct(words) if counts[w] == 1]
        results.append({
            'name': name,
            'words': list(words),
            'uniqueWords': unique_words,
            'score': sum(word_score(w) for w in unique_words),
        })
    # sorted() is stable
    results = sorted(results, key=lambda r: r['score'], reverse=True)

    current_app.logger.debug(
        f"[results] room={room_id} status={room.status} duplicates={len(duplicates)}"
    )
    return {
        'players': results,
        'duplicates': duplicates,
        'status': room.status,
    }
