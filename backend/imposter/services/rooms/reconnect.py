import logging
import threading
import time
from typing import Callable, Dict, Optional


class PendingRemoval:
    __slots__ = ('sid', 'room_code', 'deadline')

    def __init__(self, sid: str, room_code: str, deadline: float):
        self.sid = sid
        self.room_code = room_code
        self.deadline = deadline


class ReconnectionManager:
    """Grace-period timers for disconnected connections.

    One pending removal per connection id. A timer that was cancelled or
    replaced before it fires does nothing; the expiry callback runs while
    holding ``lock`` so it never interleaves with other room handlers.
    """

    def __init__(
        self,
        grace_sec: float,
        on_expire: Callable[[str, str], None],
        start_task: Optional[Callable] = None,
        sleep: Optional[Callable[[float], None]] = None,
        clock: Callable[[], float] = time.time,
        lock=None,
        logger: Optional[logging.Logger] = None,
    ):
        self.grace_sec = grace_sec
        self._on_expire = on_expire
        self._start_task = start_task or _start_thread
        self._sleep = sleep or time.sleep
        self._clock = clock
        self._lock = lock or threading.RLock()
        self._logger = logger or logging.getLogger(__name__)
        self._pending: Dict[str, PendingRemoval] = {}

    def __contains__(self, sid) -> bool:
        return sid in self._pending

    def __len__(self) -> int:
        return len(self._pending)

    def schedule(self, sid: str, room_code: str) -> PendingRemoval:
        with self._lock:
            pending = PendingRemoval(sid, room_code, self._clock() + self.grace_sec)
            self._pending[sid] = pending
        self._logger.info(
            f"[disconnect-timer-set] room={room_code} sid={sid} grace={self.grace_sec}s"
        )
        self._start_task(self._runner, pending)
        return pending

    def cancel(self, sid: str) -> bool:
        with self._lock:
            pending = self._pending.pop(sid, None)
        if pending is None:
            return False
        self._logger.info(f"[disconnect-timer-cancel] room={pending.room_code} sid={sid}")
        return True

    def cancel_all(self) -> None:
        with self._lock:
            count = len(self._pending)
            self._pending.clear()
        if count:
            self._logger.info(f"[disconnect-timer-cancel-all] count={count}")

    def _runner(self, pending: PendingRemoval) -> None:
        sleep_for = max(0.0, pending.deadline - self._clock())
        if sleep_for:
            self._sleep(sleep_for)
        with self._lock:
            if self._pending.get(pending.sid) is not pending:
                self._logger.info(f"[disconnect-timer-abort] room={pending.room_code} sid={pending.sid}")
                return
            del self._pending[pending.sid]
            self._logger.info(f"[disconnect-timer-fire] room={pending.room_code} sid={pending.sid}")
            self._on_expire(pending.sid, pending.room_code)


def _start_thread(fn, *args):
    thread = threading.Thread(target=fn, args=args, daemon=True)
    thread.start()
    return thread
