"""Keys and key ranges that a query asks a proof to cover."""

from __future__ import annotations

import enum
from dataclasses import dataclass


class QueryItemKind(enum.Enum):
    """The shape of a query item: a single key or one of the range forms."""

    KEY = "Key"
    RANGE = "Range"
    RANGE_INCLUSIVE = "RangeInclusive"
    RANGE_FULL = "RangeFull"
    RANGE_FROM = "RangeFrom"
    RANGE_TO = "RangeTo"
    RANGE_TO_INCLUSIVE = "RangeToInclusive"
    RANGE_AFTER = "RangeAfter"
    RANGE_AFTER_TO = "RangeAfterTo"
    RANGE_AFTER_TO_INCLUSIVE = "RangeAfterToInclusive"


_LOWER_UNBOUNDED = frozenset(
    {QueryItemKind.RANGE_FULL, QueryItemKind.RANGE_TO, QueryItemKind.RANGE_TO_INCLUSIVE}
)
_LOWER_EXCLUSIVE = frozenset(
    {
        QueryItemKind.RANGE_AFTER,
        QueryItemKind.RANGE_AFTER_TO,
        QueryItemKind.RANGE_AFTER_TO_INCLUSIVE,
    }
)
_UPPER_UNBOUNDED = frozenset(
    {QueryItemKind.RANGE_FULL, QueryItemKind.RANGE_FROM, QueryItemKind.RANGE_AFTER}
)
_UPPER_INCLUSIVE = frozenset(
    {
        QueryItemKind.KEY,
        QueryItemKind.RANGE_INCLUSIVE,
        QueryItemKind.RANGE_FULL,
        QueryItemKind.RANGE_FROM,
        QueryItemKind.RANGE_TO_INCLUSIVE,
        QueryItemKind.RANGE_AFTER,
        QueryItemKind.RANGE_AFTER_TO_INCLUSIVE,
    }
)


def _as_bytes(value: object, name: str) -> bytes:
    if isinstance(value, (int, str)):
        raise TypeError(f"{name} must be a bytes-like object, not {type(value).__name__}")
    return bytes(value)  # type: ignore[arg-type]


def _cmp(a: bytes, b: bytes) -> int:
    return (a > b) - (a < b)


@dataclass(frozen=True, eq=False)
class QueryItem:
    """A key or range of keys to be included in a proof.

    `start` is None when the item has no lower bound and `end` is None when
    it has no upper bound. Two items compare equal when they collide, that is
    when they share any part of the key space; items are ordered otherwise.
    """

    kind: QueryItemKind
    start: bytes | None = None
    end: bytes | None = None

    def __post_init__(self) -> None:
        if not isinstance(self.kind, QueryItemKind):
            raise TypeError(f"kind must be a QueryItemKind, not {type(self.kind).__name__}")
        if self.kind in _LOWER_UNBOUNDED:
            if self.start is not None:
                raise ValueError(f"{self.kind.value} has no start bound")
        else:
            if self.start is None:
                raise ValueError(f"{self.kind.value} requires a start bound")
            object.__setattr__(self, "start", _as_bytes(self.start, "start"))
        if self.kind in _UPPER_UNBOUNDED:
            if self.end is not None:
                raise ValueError(f"{self.kind.value} has no end bound")
        else:
            if self.end is None:
                raise ValueError(f"{self.kind.value} requires an end bound")
            object.__setattr__(self, "end", _as_bytes(self.end, "end"))
        if self.kind is QueryItemKind.KEY and self.start != self.end:
            raise ValueError("a key item must have equal start and end")

    # -- constructors -------------------------------------------------------

    @classmethod
    def key(cls, key: bytes) -> QueryItem:
        """A single key."""
        data = _as_bytes(key, "key")
        return cls(QueryItemKind.KEY, data, data)

    @classmethod
    def range(cls, start: bytes, end: bytes) -> QueryItem:
        """Keys from `start` (inclusive) to `end` (exclusive)."""
        return cls(QueryItemKind.RANGE, start, end)

    @classmethod
    def range_inclusive(cls, start: bytes, end: bytes) -> QueryItem:
        """Keys from `start` to `end`, both inclusive."""
        return cls(QueryItemKind.RANGE_INCLUSIVE, start, end)

    @classmethod
    def range_full(cls) -> QueryItem:
        """Every key."""
        return cls(QueryItemKind.RANGE_FULL)

    @classmethod
    def range_from(cls, start: bytes) -> QueryItem:
        """Keys from `start` (inclusive) onwards."""
        return cls(QueryItemKind.RANGE_FROM, start, None)

    @classmethod
    def range_to(cls, end: bytes) -> QueryItem:
        """Keys below `end` (exclusive)."""
        return cls(QueryItemKind.RANGE_TO, None, end)

    @classmethod
    def range_to_inclusive(cls, end: bytes) -> QueryItem:
        """Keys up to and including `end`."""
        return cls(QueryItemKind.RANGE_TO_INCLUSIVE, None, end)

    @classmethod
    def range_after(cls, start: bytes) -> QueryItem:
        """Keys strictly after `start`."""
        return cls(QueryItemKind.RANGE_AFTER, start, None)

    @classmethod
    def range_after_to(cls, start: bytes, end: bytes) -> QueryItem:
        """Keys strictly after `start` and below `end` (exclusive)."""
        return cls(QueryItemKind.RANGE_AFTER_TO, start, end)

    @classmethod
    def range_after_to_inclusive(cls, start: bytes, end: bytes) -> QueryItem:
        """Keys strictly after `start`, up to and including `end`."""
        return cls(QueryItemKind.RANGE_AFTER_TO_INCLUSIVE, start, end)

    # -- bounds -------------------------------------------------------------

    def lower_bound(self) -> tuple[bytes, bool]:
        """Return (lower bound, whether the bound is exclusive); b"" if unbounded."""
        start = b"" if self.start is None else self.start
        return start, self.kind in _LOWER_EXCLUSIVE

    def lower_unbounded(self) -> bool:
        """Whether the item has no lower bound."""
        return self.kind in _LOWER_UNBOUNDED

    def upper_bound(self) -> tuple[bytes, bool]:
        """Return (upper bound, whether the bound is inclusive); b"" if unbounded."""
        end = b"" if self.end is None else self.end
        return end, self.kind in _UPPER_INCLUSIVE

    def upper_unbounded(self) -> bool:
        """Whether the item has no upper bound."""
        return self.kind in _UPPER_UNBOUNDED

    def contains(self, key: bytes) -> bool:
        """Whether `key` lies within this item."""
        key = _as_bytes(key, "key")
        lower, lower_exclusive = self.lower_bound()
        upper, upper_inclusive = self.upper_bound()
        above_lower = (
            self.lower_unbounded()
            or key > lower
            or (key == lower and not lower_exclusive)
        )
        below_upper = (
            self.upper_unbounded()
            or key < upper
            or (key == upper and upper_inclusive)
        )
        return above_lower and below_upper

    def is_range(self) -> bool:
        """Whether the item is a range rather than a single key."""
        return self.kind is not QueryItemKind.KEY

    # -- combination --------------------------------------------------------

    def merge(self, other: QueryItem) -> QueryItem:
        """Return the smallest item covering both this item and `other`."""
        lower_unbounded = self.lower_unbounded() or other.lower_unbounded()
        upper_unbounded = self.upper_unbounded() or other.upper_unbounded()
        start, start_exclusive = min(self.lower_bound(), other.lower_bound())
        end, end_inclusive = max(self.upper_bound(), other.upper_bound())

        if start_exclusive:
            if upper_unbounded:
                return QueryItem.range_after(start)
            if end_inclusive:
                return QueryItem.range_after_to_inclusive(start, end)
            return QueryItem.range_after_to(start, end)

        if lower_unbounded:
            if upper_unbounded:
                return QueryItem.range_full()
            if end_inclusive:
                return QueryItem.range_to_inclusive(end)
            return QueryItem.range_to(end)

        if upper_unbounded:
            return QueryItem.range_from(start)
        if end_inclusive:
            return QueryItem.range_inclusive(start, end)
        return QueryItem.range(start, end)

    # -- ordering -----------------------------------------------------------

    def compare(self, other: QueryItem | bytes) -> int:
        """Return -1, 0 or 1; 0 means the two items collide.

        A bytes-like `other` is treated as a single key.
        """
        if not isinstance(other, QueryItem):
            other = QueryItem.key(other)

        if self.lower_unbounded():
            cmp_lu = 0 if other.lower_unbounded() else -1
        elif other.lower_unbounded():
            cmp_lu = 1
        else:
            cmp_lu = _cmp(self.lower_bound()[0], other.upper_bound()[0])

        if self.upper_unbounded():
            cmp_ul = 0 if other.upper_unbounded() else 1
        elif other.upper_unbounded():
            cmp_ul = -1
        else:
            cmp_ul = _cmp(self.upper_bound()[0], other.lower_bound()[0])

        self_inclusive = self.upper_bound()[1]
        other_inclusive = other.upper_bound()[1]

        if cmp_lu < 0:
            if cmp_ul < 0:
                return -1
            if cmp_ul == 0:
                return 0 if self_inclusive else -1
            return 0
        if cmp_lu == 0:
            return 0 if other_inclusive else 1
        return 1

    def _coerce(self, other: object) -> QueryItem | bytes | None:
        if isinstance(other, QueryItem):
            return other
        if isinstance(other, (bytes, bytearray, memoryview)):
            return bytes(other)
        return None

    def __eq__(self, other: object) -> bool:
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return self.compare(coerced) == 0

    def __ne__(self, other: object) -> bool:
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return self.compare(coerced) != 0

    def __lt__(self, other: object) -> bool:
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return self.compare(coerced) < 0

    def __le__(self, other: object) -> bool:
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return self.compare(coerced) <= 0

    def __gt__(self, other: object) -> bool:
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return self.compare(coerced) > 0

    def __ge__(self, other: object) -> bool:
        coerced = self._coerce(other)
        if coerced is None:
            return NotImplemented
        return self.compare(coerced) >= 0

    __hash__ = None  # type: ignore[assignment]

    def __repr__(self) -> str:
        if self.kind is QueryItemKind.KEY:
            return f"QueryItem.key({self.start!r})"
        args = ", ".join(repr(b) for b in (self.start, self.end) if b is not None)
        name = {
            QueryItemKind.RANGE: "range",
            QueryItemKind.RANGE_INCLUSIVE: "range_inclusive",
            QueryItemKind.RANGE_FULL: "range_full",
            QueryItemKind.RANGE_FROM: "range_from",
            QueryItemKind.RANGE_TO: "range_to",
            QueryItemKind.RANGE_TO_INCLUSIVE: "range_to_inclusive",
            QueryItemKind.RANGE_AFTER: "range_after",
            QueryItemKind.RANGE_AFTER_TO: "range_after_to",
            QueryItemKind.RANGE_AFTER_TO_INCLUSIVE: "range_after_to_inclusive",
        }[self.kind]
        return f"QueryItem.{name}({args})"