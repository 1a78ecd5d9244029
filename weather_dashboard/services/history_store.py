"""File-based persistence for the lookup history."""

import asyncio
import json
import logging
import os
import tempfile
from collections.abc import Sequence
from pathlib import Path

from pydantic import TypeAdapter, ValidationError

from ..exceptions import StorageError
from ..models.history import HistoryEntry

logger = logging.getLogger(__name__)

DEFAULT_HISTORY_PATH = "weather-history.json"
HISTORY_LIMIT = 12

_ENTRIES_ADAPTER = TypeAdapter(list[HistoryEntry])


def record_entry(
    history: Sequence[HistoryEntry],
    entry: HistoryEntry,
    limit: int = HISTORY_LIMIT,
) -> list[HistoryEntry]:
    """Return history with entry at the front.

    Any older entry for the same city is dropped first, and the result is cut
    to the most recent `limit` entries.
    """
    kept = [existing for existing in history if existing.city != entry.city]
    return [entry, *kept][:limit]


def sort_for_display(entries: Sequence[HistoryEntry]) -> list[HistoryEntry]:
    """Most recent first.

    Files written by this application are already in this order, because the
    loaded history is sorted before new entries are put at its front. Older
    files may not be.
    """
    return sorted(entries, key=lambda e: e.date, reverse=True)


class HistoryStore:
    """Reads and writes the history file as a JSON array."""

    def __init__(self, path: Path | str = DEFAULT_HISTORY_PATH):
        self.path = Path(path)

    def load(self) -> list[HistoryEntry]:
        """Load entries in stored order. A missing file is an empty history."""
        if not self.path.exists():
            logger.debug(f"No history file at {self.path}")
            return []

        try:
            with open(self.path, encoding="utf-8") as f:
                data = json.load(f)
            entries = _ENTRIES_ADAPTER.validate_python(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise StorageError(f"Failed to read history from {self.path}: {e}") from e

        logger.debug(f"Loaded {len(entries)} history entries")
        return entries

    def save(self, entries: Sequence[HistoryEntry]) -> None:
        """Write entries atomically: a temp file in the same directory is renamed over the target."""
        data = [entry.model_dump(mode="json") for entry in entries]
        directory = self.path.parent

        tmp_name = None
        try:
            directory.mkdir(parents=True, exist_ok=True)
            with tempfile.NamedTemporaryFile(
                "w",
                encoding="utf-8",
                dir=directory,
                prefix=f".{self.path.name}.",
                suffix=".tmp",
                delete=False,
            ) as f:
                tmp_name = f.name
                json.dump(data, f, indent=2)
            os.replace(tmp_name, self.path)
            tmp_name = None
        except (OSError, TypeError) as e:
            raise StorageError(f"Failed to write history to {self.path}: {e}") from e
        finally:
            if tmp_name is not None:
                Path(tmp_name).unlink(missing_ok=True)

        logger.debug(f"Saved {len(entries)} history entries")


class HistoryLog:
    """Async front for a HistoryStore that serialises writes."""

    def __init__(self, store: HistoryStore):
        self.store = store
        self._write_lock = asyncio.Lock()

    async def load(self) -> list[HistoryEntry]:
        """Entries sorted for display. Read failures yield an empty history."""
        try:
            entries = await asyncio.to_thread(self.store.load)
        except StorageError as e:
            logger.error(f"History load error: {e}")
            return []
        return sort_for_display(entries)

    async def save(self, entries: Sequence[HistoryEntry]) -> bool:
        """Persist entries. Returns False if the write failed (already logged)."""
        snapshot = list(entries)
        async with self._write_lock:
            try:
                await asyncio.to_thread(self.store.save, snapshot)
            except StorageError as e:
                logger.error(f"History save error: {e}")
                return False
        return True
