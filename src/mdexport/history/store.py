"""Recent-document history with deduplication and persistence.

The store keeps at most `max_items` documents, most recently committed
first. Committing content that is already stored moves that item to the
front (keeping its original timestamp) instead of adding a copy. The full
collection is rewritten on every mutation, and the latest committed text
is kept under a separate key for resuming the last session.
"""

import json
import threading
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, Optional

from pydantic import TypeAdapter, ValidationError

from mdexport.history.recent import RecentList
from mdexport.history.storage import FileStorage, StorageBackend
from mdexport.models.config import HistoryConfig
from mdexport.models.history import HistoryItem
from mdexport.services.exceptions import HistoryUnavailableError
from mdexport.utils.logging import get_logger

logger = get_logger(__name__)

HISTORY_KEY = "markdown_history"
LAST_SESSION_KEY = "last_session"
DEFAULT_MAX_ITEMS = 50

_ITEMS_ADAPTER = TypeAdapter(list[HistoryItem])


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _new_id() -> str:
    return str(uuid.uuid4())


class HistoryStore:
    """
    Bounded, deduplicating history of committed documents.

    Mutations are serialised with a lock, so one store may be shared by
    several threads.

    Example:
        >>> store = HistoryStore(MemoryStorage(), max_items=50)
        >>> item = store.commit("# Draft")
        >>> store.restore(item.id)
        '# Draft'
    """

    def __init__(
        self,
        storage: StorageBackend,
        max_items: int = DEFAULT_MAX_ITEMS,
        clock: Callable[[], datetime] = _utc_now,
        id_factory: Callable[[], str] = _new_id,
    ) -> None:
        """
        Initialize the store and load any persisted history.

        Malformed or unreadable persisted history is treated as empty.

        Args:
            storage: Key-value backend for durable state
            max_items: Maximum number of items kept
            clock: Source of creation timestamps
            id_factory: Source of new item identifiers
        """
        if max_items < 1:
            raise ValueError(f"max_items must be at least 1, got {max_items}")
        self._storage = storage
        self._max_items = max_items
        self._clock = clock
        self._id_factory = id_factory
        self._lock = threading.RLock()
        self._recent = RecentList(self._load_items())
        self._recent.truncate(max_items)

    @classmethod
    def from_config(cls, config: HistoryConfig) -> "HistoryStore":
        """Build a file-backed store from the history config section."""
        return cls(FileStorage(Path(config.storage_dir)), max_items=config.max_items)

    @property
    def max_items(self) -> int:
        return self._max_items

    @property
    def items(self) -> list[HistoryItem]:
        """Snapshot of items, most recent first."""
        with self._lock:
            return self._recent.items()

    def __len__(self) -> int:
        with self._lock:
            return len(self._recent)

    def get(self, item_id: str) -> Optional[HistoryItem]:
        with self._lock:
            return self._recent.get(item_id)

    def commit(self, content: str) -> Optional[HistoryItem]:
        """
        Record a document in history.

        Whitespace-only content is ignored. Content identical to an existing
        item moves that item to the front; otherwise a new item is prepended
        and the oldest items beyond the bound are dropped.

        Args:
            content: Full document text

        Returns:
            The item now at the front, or None for ignored content

        Raises:
            HistoryUnavailableError: If persisting failed (in-memory state
                is already updated)
        """
        if not content.strip():
            return None

        with self._lock:
            existing = self._recent.find_by_content(content)
            if existing is not None:
                item = self._recent.move_to_front(existing.id)
                logger.debug("history_item_moved_to_front", item_id=item.id)
            else:
                item = HistoryItem(id=self._id_factory(), content=content, timestamp=self._clock())
                self._recent.prepend(item)
                dropped = self._recent.truncate(self._max_items)
                logger.info(
                    "history_item_added",
                    item_id=item.id,
                    size=len(self._recent),
                    dropped=len(dropped),
                )

            self._persist(last_session=content)
            return item

    def restore(self, item_id: str) -> Optional[str]:
        """
        Return an item's content without reordering the history.

        Returns:
            The stored content, or None if the id is unknown
        """
        with self._lock:
            item = self._recent.get(item_id)
        if item is None:
            logger.warning("history_restore_unknown_id", item_id=item_id)
            return None
        return item.content

    def delete(self, item_id: str) -> bool:
        """
        Remove an item.

        Returns:
            True if removed, False if the id was unknown (nothing persisted)

        Raises:
            HistoryUnavailableError: If persisting failed
        """
        with self._lock:
            removed = self._recent.remove(item_id)
            if removed is None:
                logger.warning("history_delete_unknown_id", item_id=item_id)
                return False
            self._persist()
            return True

    def clear(self) -> None:
        """
        Remove every item. The last-session content is left untouched.

        Raises:
            HistoryUnavailableError: If persisting failed
        """
        with self._lock:
            self._recent.clear()
            logger.info("history_cleared")
            self._persist()

    def load_last_session(self) -> Optional[str]:
        """
        Return the most recently committed content, if any.

        Raises:
            HistoryUnavailableError: If storage could not be read
        """
        try:
            raw = self._storage.get(LAST_SESSION_KEY)
        except OSError as e:
            raise HistoryUnavailableError(LAST_SESSION_KEY, "Failed to read last session") from e

        if raw is None:
            return None
        try:
            value = json.loads(raw)
        except ValueError:
            logger.warning("last_session_malformed", key=LAST_SESSION_KEY)
            return None
        return value if isinstance(value, str) else None

    def resume(self) -> Optional[str]:
        """Content to open on cold start: last session, else newest item."""
        content = self.load_last_session()
        if content is not None:
            return content
        with self._lock:
            newest = self._recent.first()
        return newest.content if newest is not None else None

    def _load_items(self) -> list[HistoryItem]:
        try:
            raw = self._storage.get(HISTORY_KEY)
        except OSError as e:
            logger.error("history_load_failed", key=HISTORY_KEY, error=str(e))
            return []

        if raw is None:
            return []
        try:
            items = _ITEMS_ADAPTER.validate_json(raw)
        except ValidationError as e:
            logger.warning("history_malformed", key=HISTORY_KEY, errors=e.error_count())
            return []

        logger.debug("history_loaded", count=len(items))
        return items

    def _persist(self, last_session: Optional[str] = None) -> None:
        """Write the full collection (and optionally the last session)."""
        failures = []

        try:
            self._storage.set(HISTORY_KEY, _ITEMS_ADAPTER.dump_json(self._recent.items()))
        except OSError as e:
            logger.error("history_persist_failed", key=HISTORY_KEY, error=str(e))
            failures.append((HISTORY_KEY, e))

        if last_session is not None:
            try:
                self._storage.set(LAST_SESSION_KEY, json.dumps(last_session).encode("utf-8"))
            except OSError as e:
                logger.error("history_persist_failed", key=LAST_SESSION_KEY, error=str(e))
                failures.append((LAST_SESSION_KEY, e))

        if failures:
            key, error = failures[0]
            raise HistoryUnavailableError(key, "Failed to persist history") from error
