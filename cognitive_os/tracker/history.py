"""
Session History

Capped index of finished sessions, persisted as a single record.
When full, the oldest entry is evicted together with its stored
session body.
"""

from collections import deque
from typing import Optional
import logging

from ..db.store import KeyValueStore, StorageError
from .models import SessionHistoryEntry

logger = logging.getLogger(__name__)

HISTORY_KEY = "session_history"


class SessionHistory:
    """
    FIFO index of the most recent sessions.

    Features:
    - Oldest-first eviction beyond max_entries
    - Evicted session bodies removed from the store
    - Per-game filtering without loading bodies
    """

    def __init__(
        self,
        store: KeyValueStore,
        max_entries: int = 100,
        storage_key: str = HISTORY_KEY,
    ):
        self.store = store
        self.max_entries = max_entries
        self.storage_key = storage_key
        self._entries: deque[SessionHistoryEntry] = deque()
        self.load()

    def __len__(self) -> int:
        return len(self._entries)

    def load(self):
        """Read the index from the store; a missing or unreadable index starts empty."""
        try:
            raw = self.store.get(self.storage_key) or []
        except StorageError as e:
            logger.warning("Failed to load session history: %s", e)
            return

        entries = deque()
        for item in raw:
            try:
                entries.append(SessionHistoryEntry.from_dict(item))
            except (KeyError, TypeError, ValueError):
                logger.warning("Skipping malformed history entry: %r", item)
        self._entries = entries

    def save(self) -> bool:
        try:
            self.store.set(self.storage_key, [e.to_dict() for e in self._entries])
            return True
        except StorageError as e:
            logger.warning("Failed to save session history: %s", e)
            return False

    def append(self, entry: SessionHistoryEntry) -> list[SessionHistoryEntry]:
        """Add an entry, evicting the oldest ones beyond the cap. Returns evicted entries."""
        self._entries.append(entry)

        evicted = []
        while len(self._entries) > self.max_entries:
            removed = self._entries.popleft()
            evicted.append(removed)
            try:
                self.store.remove(removed.storage_key)
            except StorageError as e:
                logger.warning("Failed to remove evicted session %s: %s", removed.storage_key, e)

        self.save()
        return evicted

    def contains(self, storage_key: str) -> bool:
        return any(e.storage_key == storage_key for e in self._entries)

    def entries(self, game_id: Optional[str] = None) -> list[SessionHistoryEntry]:
        """Entries oldest first, optionally for one game."""
        if game_id is None:
            return list(self._entries)
        return [e for e in self._entries if e.game_id == game_id]

    def clear(self) -> int:
        """Remove every indexed session body and the index itself."""
        count = len(self._entries)
        for entry in self._entries:
            try:
                self.store.remove(entry.storage_key)
            except StorageError as e:
                logger.warning("Failed to remove session %s: %s", entry.storage_key, e)
        self._entries.clear()
        try:
            self.store.remove(self.storage_key)
        except StorageError as e:
            logger.warning("Failed to remove session history: %s", e)
        return count
