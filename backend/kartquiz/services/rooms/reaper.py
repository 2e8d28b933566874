import time
from typing import List, Optional

from kartquiz import socketio
from .room import Room


def reap_idle_rooms(app, registry, now: Optional[float] = None) -> List[Room]:
    """Expire rooms idle longer than ROOM_IDLE_TTL_SEC and tell their members."""
    ttl = int(app.config.get('ROOM_IDLE_TTL_SEC', 0))
    namespace = app.config.get('SOCKETIO_NAMESPACE', '/')
    with registry.lock:
        expired = registry.reap_idle(ttl, now)
        for room in expired:
            socketio.emit('room-expired', {'roomCode': room.code}, to=room.code, namespace=namespace)
            socketio.close_room(room.code, namespace=namespace)
            app.logger.info(
                f"[room-expired] code={room.code} idle={int((now or time.time()) - room.last_activity)}s"
            )
    return expired


def start_room_reaper(app, registry) -> None:
    """Run reap_idle_rooms every ROOM_REAPER_INTERVAL_SEC in a Socket.IO background task.

    - No-ops in TESTING mode
    - No-ops when ROOM_IDLE_TTL_SEC is 0
    """
    if app.config.get('TESTING'):
        return
    ttl = int(app.config.get('ROOM_IDLE_TTL_SEC', 0))
    interval = max(1, int(app.config.get('ROOM_REAPER_INTERVAL_SEC', 60)))
    if ttl <= 0:
        app.logger.info("[reaper-off] ROOM_IDLE_TTL_SEC is 0")
        return

    def _worker():
        while True:
            socketio.sleep(interval)
            with app.app_context():
                try:
                    reap_idle_rooms(app, registry)
                except Exception:
                    # keep the loop alive; the next tick retries
                    app.logger.exception("[reaper-error]")

    app.logger.info(f"[reaper-start] ttl={ttl}s interval={interval}s")
    socketio.start_background_task(_worker)
