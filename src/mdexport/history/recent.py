"""Bounded, recency-ordered collection of history items."""

from typing import Dict, Iterator, Optional

from mdexport.models.history import HistoryItem


class RecentList:
    """
    Ordered sequence of HistoryItem, most recent first, with id and content indexes.

    Every operation keeps the three structures in step, so the dedup
    invariant (one item per distinct content) and the size bound are
    enforced here rather than by callers splicing lists.

    Example:
        >>> recent = RecentList()
        >>> recent.prepend(item_a)
        >>> recent.prepend(item_b)
        >>> recent.move_to_front(item_a.id)
        >>> [i.id for i in recent] == [item_a.id, item_b.id]
        True
    """

    def __init__(self, items: Optional[list[HistoryItem]] = None) -> None:
        self._order: list[str] = []
        self._by_id: Dict[str, HistoryItem] = {}
        self._by_content: Dict[str, str] = {}
        for item in items or []:
            # Later duplicates of a content or id are dropped
            if item.id in self._by_id or item.content in self._by_content:
                continue
            self._append(item)

    def __len__(self) -> int:
        return len(self._order)

    def __iter__(self) -> Iterator[HistoryItem]:
        return (self._by_id[item_id] for item_id in self._order)

    def __contains__(self, item_id: object) -> bool:
        return item_id in self._by_id

    def items(self) -> list[HistoryItem]:
        return list(self)

    def first(self) -> Optional[HistoryItem]:
        return self._by_id[self._order[0]] if self._order else None

    def get(self, item_id: str) -> Optional[HistoryItem]:
        return self._by_id.get(item_id)

    def find_by_content(self, content: str) -> Optional[HistoryItem]:
        item_id = self._by_content.get(content)
        return self._by_id[item_id] if item_id is not None else None

    def prepend(self, item: HistoryItem) -> None:
        """Insert a new item at the front.

        Raises:
            ValueError: If the id or content is already present
        """
        if item.id in self._by_id:
            raise ValueError(f"Duplicate history id: {item.id}")
        if item.content in self._by_content:
            raise ValueError("Duplicate history content")
        self._order.insert(0, item.id)
        self._index(item)

    def move_to_front(self, item_id: str) -> HistoryItem:
        """Move an existing item to the front without changing it.

        Raises:
            KeyError: If the id is unknown
        """
        item = self._by_id[item_id]
        self._order.remove(item_id)
        self._order.insert(0, item_id)
        return item

    def remove(self, item_id: str) -> Optional[HistoryItem]:
        """Remove an item; returns it, or None if the id was unknown."""
        item = self._by_id.pop(item_id, None)
        if item is None:
            return None
        self._order.remove(item_id)
        del self._by_content[item.content]
        return item

    def truncate(self, max_items: int) -> list[HistoryItem]:
        """Drop the oldest items beyond max_items; returns what was dropped."""
        dropped = []
        while len(self._order) > max_items:
            dropped.append(self.remove(self._order[-1]))
        return dropped

    def clear(self) -> None:
        self._order.clear()
        self._by_id.clear()
        self._by_content.clear()

    def _append(self, item: HistoryItem) -> None:
        self._order.append(item.id)
        self._index(item)

    def _index(self, item: HistoryItem) -> None:
        self._by_id[item.id] = item
        self._by_content[item.content] = item.id
