import threading
from contextlib import contextmanager
from typing import Dict, Iterator, List

from flask import current_app
from sqlalchemy import delete, insert, select, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from wordrooms import db
from wordrooms.errors import RoomConflict, RoomIdTaken, RoomInternalError, RoomNotFound
from wordrooms.models import Room, RoomRow


_locks_guard = threading.Lock()
# room id -> [lock, number of holders and waiters]
_room_locks: Dict[str, list] = {}


@contextmanager
def room_lock(room_id: str) -> Iterator[None]:
    """Serialize read-compute-write cycles on one room id.

    Different room ids get different locks and proceed in parallel. An entry
    lives only while someone holds or waits for it, so unknown ids leave
    nothing behind.
    """
    with _locks_guard:
        entry = _room_locks.setdefault(room_id, [threading.Lock(), 0])
        entry[1] += 1
    try:
        with entry[0]:
            yield
    finally:
        with _locks_guard:
            entry[1] -= 1
            if entry[1] == 0:
                _room_locks.pop(room_id, None)


class RoomStore:
    """Room records in the ``room`` table.

    Each call touches one record. ``replace`` rewrites every column in a single
    UPDATE guarded by the record's version stamp, so a write is either applied
    whole or rejected.
    """

    def get(self, room_id: str) -> Room:
        try:
            row = db.session.get(RoomRow, room_id, populate_existing=True)
        except SQLAlchemyError as exc:
            raise self._storage_error('get', room_id, exc)
        if row is None:
            raise RoomNotFound('Room not found')
        return row.to_room()

    def create(self, room: Room) -> str:
        values = RoomRow.column_values(room)
        try:
            db.session.execute(insert(RoomRow).values(room_id=room.room_id, version=0, **values))
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            raise RoomIdTaken(f'Room id {room.room_id} already exists')
        except SQLAlchemyError as exc:
            raise self._storage_error('create', room.room_id, exc)
        room.version = 0
        return room.room_id

    def replace(self, room: Room) -> None:
        values = RoomRow.column_values(room)
        try:
            result = db.session.execute(
                update(RoomRow)
                .where(RoomRow.room_id == room.room_id, RoomRow.version == room.version)
                .values(version=room.version + 1, **values)
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error('replace', room.room_id, exc)
        if result.rowcount == 0:
            # Either the row is gone or another writer bumped the version
            self.get(room.room_id)
            current_app.logger.warning(f"[store-stale] room={room.room_id} version={room.version}")
            raise RoomConflict('Room was modified concurrently, retry the request')
        room.version += 1

    def delete(self, room_id: str) -> None:
        try:
            db.session.execute(
                delete(RoomRow)
                .where(RoomRow.room_id == room_id)
                .execution_options(synchronize_session=False)
            )
            db.session.commit()
        except SQLAlchemyError as exc:
            raise self._storage_error('delete', room_id, exc)

    def scan_all(self) -> List[Room]:
        try:
            rows = db.session.execute(
                select(RoomRow).execution_options(populate_existing=True)
            ).scalars().all()
        except SQLAlchemyError as exc:
            raise self._storage_error('scan', None, exc)
        return [row.to_room() for row in rows]

    @staticmethod
    def _storage_error(op: str, room_id, exc: Exception) -> RoomInternalError:
        db.session.rollback()
        current_app.logger.error(f"[store-error] op={op} room={room_id} error={exc}")
        return RoomInternalError('Storage failure')


room_store = RoomStore()
