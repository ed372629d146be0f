"""Queries: ordered sets of keys and key ranges that a proof should cover."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .query_item import QueryItem


def _as_item(value: QueryItem | bytes) -> QueryItem:
    if isinstance(value, QueryItem):
        return value
    return QueryItem.key(value)


def _as_bytes(value: object, name: str) -> bytes:
    if isinstance(value, (int, str)):
        raise TypeError(f"{name} must be a bytes-like object, not {type(value).__name__}")
    return bytes(value)  # type: ignore[arg-type]


class Query:
    """One or more keys or key ranges to be resolved by a proof.

    Items are kept in key order and never overlap: inserting an item that
    collides with existing ones merges them into a single covering item.
    """

    def __init__(self, left_to_right: bool = True) -> None:
        self._items: list[QueryItem] = []
        self.subquery_key: bytes | None = None
        self.subquery: Query | None = None
        self.left_to_right = left_to_right

    @classmethod
    def from_items(cls, items: Iterable[QueryItem | bytes]) -> Query:
        """Build a query from items or raw keys without merging them.

        An item that collides with one already present is dropped.
        """
        query = cls()
        for value in items:
            query._insert_unmerged(_as_item(value))
        return query

    @property
    def items(self) -> tuple[QueryItem, ...]:
        """The query's items, in key order."""
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __iter__(self) -> Iterator[QueryItem]:
        return iter(list(self._items))

    def rev_iter(self) -> Iterator[QueryItem]:
        """Iterate over the items in reverse key order."""
        return reversed(list(self._items))

    def __repr__(self) -> str:
        return (
            f"Query(items={self._items!r}, subquery_key={self.subquery_key!r}, "
            f"subquery={self.subquery!r}, left_to_right={self.left_to_right})"
        )

    def set_subquery_key(self, key: bytes) -> None:
        """Subquery every result of this query to `key`."""
        self.subquery_key = _as_bytes(key, "key")

    def set_subquery(self, subquery: Query) -> None:
        """Subquery every result of this query with `subquery`."""
        if not isinstance(subquery, Query):
            raise TypeError(f"subquery must be a Query, not {type(subquery).__name__}")
        self.subquery = subquery

    def _find(self, item: QueryItem) -> tuple[int, bool]:
        """Return (index, found): a colliding item's index, or the insertion point."""
        lo, hi = 0, len(self._items)
        while lo < hi:
            mid = (lo + hi) // 2
            order = item.compare(self._items[mid])
            if order < 0:
                hi = mid
            elif order > 0:
                lo = mid + 1
            else:
                return mid, True
        return lo, False

    def _insert_unmerged(self, item: QueryItem) -> None:
        index, found = self._find(item)
        if not found:
            self._items.insert(index, item)

    def insert_key(self, key: bytes) -> None:
        """Add a single key; no effect if an existing item already covers it."""
        self._insert_unmerged(QueryItem.key(key))

    def insert_range(self, start: bytes, end: bytes) -> None:
        """Add keys from `start` (inclusive) to `end` (exclusive)."""
        self.insert_item(QueryItem.range(start, end))

    def insert_range_inclusive(self, start: bytes, end: bytes) -> None:
        """Add keys from `start` to `end`, both inclusive."""
        self.insert_item(QueryItem.range_inclusive(start, end))

    def insert_range_to_inclusive(self, end: bytes) -> None:
        """Add every key up to and including `end`."""
        self.insert_item(QueryItem.range_to_inclusive(end))

    def insert_range_from(self, start: bytes) -> None:
        """Add every key from `start` (inclusive) onwards."""
        self.insert_item(QueryItem.range_from(start))

    def insert_range_to(self, end: bytes) -> None:
        """Add every key below `end`."""
        self.insert_item(QueryItem.range_to(end))

    def insert_range_after(self, start: bytes) -> None:
        """Add every key strictly after `start`."""
        self.insert_item(QueryItem.range_after(start))

    def insert_range_after_to(self, start: bytes, end: bytes) -> None:
        """Add keys strictly after `start` and below `end`."""
        self.insert_item(QueryItem.range_after_to(start, end))

    def insert_range_after_to_inclusive(self, start: bytes, end: bytes) -> None:
        """Add keys strictly after `start`, up to and including `end`."""
        self.insert_item(QueryItem.range_after_to_inclusive(start, end))

    def insert_all(self) -> None:
        """Add every key; all other items are absorbed."""
        self.insert_item(QueryItem.range_full())

    def insert_item(self, item: QueryItem | bytes) -> None:
        """Add `item`, merging it with every item it collides with."""
        item = _as_item(item)
        while True:
            index, found = self._find(item)
            if not found:
                break
            item = item.merge(self._items.pop(index))
        index, _ = self._find(item)
        self._items.insert(index, item)