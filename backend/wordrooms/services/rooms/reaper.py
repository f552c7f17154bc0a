import threading
import time
from typing import Optional

from flask import current_app

from .store import room_lock, room_store


_reaper_started = False


def now_ms() -> int:
    return int(time.time() * 1000)


def cleanup(now: Optional[int] = None) -> int:
    """Delete rooms created more than ROOM_TTL_SEC ago. Returns how many went."""
    try:
        ttl_sec = int(current_app.config.get('ROOM_TTL_SEC', 3600))
    except (TypeError, ValueError):
        ttl_sec = 3600
    cutoff = (now if now is not None else now_ms()) - ttl_sec * 1000

    removed = 0
    for room in room_store.scan_all():
        if room.created_at and room.created_at < cutoff:
            with room_lock(room.room_id):
                room_store.delete(room.room_id)
            removed += 1
            current_app.logger.info(
                f"[reap] room={room.room_id} created_at={room.created_at} cutoff={cutoff}"
            )
    return removed


def start_reaper(app) -> None:
    """Run cleanup every REAPER_INTERVAL_SEC on a daemon thread.

    - No-ops in TESTING mode or when the interval is 0
    - Starts at most one worker per process
    """
    global _reaper_started
    if app.config.get('TESTING'):
        return
    try:
        interval = int(app.config.get('REAPER_INTERVAL_SEC', 0))
    except (TypeError, ValueError):
        interval = 0
    if interval <= 0 or _reaper_started:
        return
    _reaper_started = True

    def _worker():
        while True:
            time.sleep(interval)
            with app.app_context():
                try:
                    removed = cleanup()
                except Exception:
                    app.logger.exception("[reap-error] background cleanup failed")
                    continue
                if removed:
                    app.logger.info(f"[reap-tick] removed={removed}")

    threading.Thread(target=_worker, name='room-reaper', daemon=True).start()
    app.logger.info(f"[reap-start] interval={interval}s")
