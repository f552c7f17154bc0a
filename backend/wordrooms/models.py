from wordrooms import db
from dataclasses import dataclass, field
from typing import Dict, List, Optional
import json
import random

WAITING = 'waiting'
PLAYING = 'playing'
FINISHED = 'finished'

# Visually ambiguous characters (0, O, 1, I) are left out
ROOM_CODE_ALPHABET = 'ABCDEFGHJKLMNPQRSTUVWXYZ23456789'


def fold(value: str) -> str:
    """Canonical key for player names and words."""
    return value.strip().lower()


def normalize_room_id(room_id) -> str:
    return str(room_id or '').strip().upper()


def generate_room_code(length=6):
    """Generate a short room code. Uniqueness is checked by the store on insert."""
    return ''.join(random.choices(ROOM_CODE_ALPHABET, k=length))


@dataclass
class Room:
    room_id: str
    board_code: int
    players: List[str]
    status: str = WAITING
    submissions: Dict[str, List[str]] = field(default_factory=dict)
    start_time: Optional[int] = None
    created_at: int = 0
    version: int = 0

    def player_keys(self) -> List[str]:
        return [fold(p) for p in self.players]

    def has_player(self, name: str) -> bool:
        return fold(name) in self.player_keys()

    def submitted_players(self) -> List[str]:
        """Display names of players holding a submission entry, in room order."""
        return [p for p in self.players if fold(p) in self.submissions]

    def all_submitted(self) -> bool:
        return bool(self.players) and set(self.player_keys()).issubset(self.submissions)


class RoomRow(db.Model):
    __tablename__ = 'room'
    room_id = db.Column(db.String(16), primary_key=True)
    board_code = db.Column(db.Integer, nullable=False)
    players = db.Column(db.Text, nullable=False)  # JSON-encoded list of display names
    status = db.Column(db.String(16), nullable=False, default=WAITING)
    words = db.Column(db.Text, nullable=False)  # JSON-encoded {player key: [words]}
    start_time = db.Column(db.BigInteger, nullable=True)
    created_at = db.Column(db.BigInteger, nullable=False, index=True)
    version = db.Column(db.Integer, nullable=False, default=0)

    def to_room(self) -> Room:
        return Room(
            room_id=self.room_id,
            board_code=int(self.board_code),
            players=json.loads(self.players or '[]'),
            status=self.status,
            submissions=json.loads(self.words or '{}'),
            start_time=int(self.start_time) if self.start_time else None,
            created_at=int(self.created_at or 0),
            version=int(self.version or 0),
        )

    @staticmethod
    def column_values(room: Room) -> dict:
        return {
            'board_code': room.board_code,
            'players': json.dumps(room.players),
            'status': room.status,
            'words': json.dumps(room.submissions),
            'start_time': room.start_time,
            'created_at': room.created_at,
        }
