"""ConversationHistoryCache: per-token buffer of recent chat turns.

The buffer lives in process memory only: it is empty after a restart and is
not shared between server processes, so a deployment running several workers
gives each worker its own (possibly diverging) view of a token's history. The
persisted ``conversations`` table remains the record of what was said.
"""

from __future__ import annotations

import threading
from dataclasses import dataclass

from config import settings


@dataclass(frozen=True)
class HistoryEntry:
    role: str  # "user" | "assistant"
    content: str


class ConversationHistoryCache:
    def __init__(self, max_entries: int = settings.HISTORY_MAX_ENTRIES):
        self._entries: dict[str, list[HistoryEntry]] = {}
        self._lock = threading.Lock()
        self._max_entries = max_entries

    def get_history(self, token: str) -> list[HistoryEntry]:
        """Entries for *token*, oldest first. Returns a copy."""
        with self._lock:
            return list(self._entries.get(token, ()))

    def append_turn(self, token: str, user_entry: HistoryEntry, assistant_entry: HistoryEntry) -> list[HistoryEntry]:
        with self._lock:
            entries = self._entries.get(token, []) + [user_entry, assistant_entry]
            entries = entries[-self._max_entries:]
            self._entries[token] = entries
            return list(entries)

    def discard(self, token: str) -> None:
        with self._lock:
            self._entries.pop(token, None)

    def clear(self) -> None:
        with self._lock:
            self._entries.clear()


history_cache = ConversationHistoryCache()


def get_history_cache() -> ConversationHistoryCache:
    """FastAPI dependency returning the process-wide history cache."""
    return history_cache
