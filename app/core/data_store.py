import time
import uuid
import logging
import threading
from typing import Any, Callable, Dict, Optional, Tuple

from app.config import HANDOFF_TTL_SECONDS

logger = logging.getLogger(__name__)


class DataStore:
    """
    In-memory handoff store with expiration.
    Holds an uploaded backlog between the POST that receives it and the page
    load that reads it back by token. Nothing survives a restart.
    """

    def __init__(self, ttl_seconds: float = HANDOFF_TTL_SECONDS, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: Dict[str, Tuple[Any, float]] = {}
        self._lock = threading.Lock()

    def _expired(self, stored_at: float, now: float) -> bool:
        return now - stored_at > self.ttl_seconds

    def put(self, value: Any) -> str:
        token = str(uuid.uuid4())
        with self._lock:
            self._entries[token] = (value, self._clock())
        logger.info("[STORE] Stored payload %s (%d entries)", token, len(self._entries))
        return token

    def get(self, token: str) -> Optional[Any]:
        """Returns the stored value, or None if unknown or expired (expired entries are dropped)."""
        with self._lock:
            entry = self._entries.get(token)
            if entry is None:
                return None
            value, stored_at = entry
            if self._expired(stored_at, self._clock()):
                del self._entries[token]
                logger.info("[STORE] Payload %s expired", token)
                return None
            return value

    def sweep(self) -> int:
        """Drops every expired entry. Returns how many were removed."""
        now = self._clock()
        with self._lock:
            stale = [t for t, (_, stored_at) in self._entries.items() if self._expired(stored_at, now)]
            for token in stale:
                del self._entries[token]
        if stale:
            logger.info("[STORE] Swept %d expired payload(s)", len(stale))
        return len(stale)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)


_store: Optional[DataStore] = None
_store_lock = threading.Lock()


def get_data_store() -> DataStore:
    """Process-wide store, created on first use."""
    global _store
    with _store_lock:
        if _store is None:
            _store = DataStore()
        return _store
