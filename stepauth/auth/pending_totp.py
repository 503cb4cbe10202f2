"""Not yet confirmed TOTP secrets, held between the generate and verify steps.

Entries live only in this process. They are dropped on successful verification,
on cancellation, and when found expired on read. Concurrent generate calls for
the same user overwrite each other.
"""
import threading
import time
from datetime import timedelta
from typing import Callable, Dict, Optional, Tuple

from stepauth.core.config import PENDING_TOTP_EXPIRY


class PendingTotpSecrets:
    def __init__(self, expiry: timedelta = PENDING_TOTP_EXPIRY, clock: Callable[[], float] = time.monotonic):
        self._expiry = expiry.total_seconds()
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: Dict[int, Tuple[str, float]] = {}

    def put(self, user_id: int, secret: str) -> None:
        with self._lock:
            now = self._clock()
            self._prune_locked(now)
            self._entries[user_id] = (secret, now)

    def get(self, user_id: int) -> Optional[str]:
        with self._lock:
            entry = self._entries.get(user_id)
            if entry is None:
                return None
            secret, created = entry
            if self._clock() - created > self._expiry:
                del self._entries[user_id]
                return None
            return secret

    def discard(self, user_id: int) -> None:
        with self._lock:
            self._entries.pop(user_id, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()

    def prune(self) -> int:
        with self._lock:
            return self._prune_locked(self._clock())

    def _prune_locked(self, now: float) -> int:
        stale = [uid for uid, (_, created) in self._entries.items() if now - created > self._expiry]
        for uid in stale:
            del self._entries[uid]
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


pending_totp = PendingTotpSecrets()
