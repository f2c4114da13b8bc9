"""
TokenPulse - Search History

Recently searched token addresses: most recent first, no duplicates,
capped at five entries. Storage is an injected ``HistoryStore``.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Protocol

from tokenpulse.logging import get_client_logger

logger = get_client_logger()

DEFAULT_HISTORY_LIMIT = 5


class HistoryStore(Protocol):
    """Ordered list persistence."""

    def read(self) -> list[str]: ...

    def write(self, entries: list[str]) -> None: ...


class InMemoryHistoryStore:
    """Process-local store, used by tests and ephemeral sessions."""

    def __init__(self, entries: list[str] | None = None) -> None:
        self._entries = list(entries or [])

    def read(self) -> list[str]:
        return list(self._entries)

    def write(self, entries: list[str]) -> None:
        self._entries = list(entries)


class JsonFileHistoryStore:
    """Store backed by a JSON array on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def read(self) -> list[str]:
        """Read entries; a missing or unreadable file counts as empty."""
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except FileNotFoundError:
            return []
        except (OSError, ValueError) as e:
            logger.warning("history_read_failed", path=str(self.path), error=str(e))
            return []

        if not isinstance(data, list):
            return []
        return [item for item in data if isinstance(item, str)]

    def write(self, entries: list[str]) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(entries), encoding="utf-8")


class SearchHistory:
    """Most-recent-first list of searched addresses."""

    def __init__(self, store: HistoryStore, limit: int = DEFAULT_HISTORY_LIMIT) -> None:
        self.store = store
        self.limit = limit

    def entries(self) -> list[str]:
        return self.store.read()[: self.limit]

    def record(self, address: str) -> list[str]:
        """
        Move an address to the front of the history.

        Returns:
            The updated history
        """
        updated = [address, *(item for item in self.store.read() if item != address)]
        updated = updated[: self.limit]
        self.store.write(updated)
        return updated

    def clear(self) -> None:
        self.store.write([])
