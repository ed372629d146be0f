"""Key/value data extracted from a verified proof, with gap-aware lookups."""

from __future__ import annotations

from bisect import bisect_left, bisect_right
from collections.abc import Iterator

from .ops import KVNode, Node, ProofError

_MISSING_DATA = "Proof is missing data for query"


def _as_key(value: object, name: str) -> bytes:
    if isinstance(value, (int, str)):
        raise TypeError(f"{name} must be a bytes-like object, not {type(value).__name__}")
    return bytes(value)  # type: ignore[arg-type]


class ProofMap:
    """Data taken from a proof already checked against a known root hash.

    Each entry remembers whether it was contiguous with the node pushed before
    it, so that lookups and ranges can tell a proven absence from a gap in
    the proof.
    """

    def __init__(self, entries: dict[bytes, tuple[bool, bytes]], right_edge: bool) -> None:
        self._entries = dict(entries)
        self._keys = sorted(self._entries)
        self._right_edge = right_edge

    @property
    def right_edge(self) -> bool:
        """Whether the proof reaches the right edge of the tree unabridged."""
        return self._right_edge

    def __len__(self) -> int:
        return len(self._keys)

    def __repr__(self) -> str:
        return f"ProofMap(entries={len(self._keys)}, right_edge={self._right_edge})"

    def get(self, key: bytes) -> bytes | None:
        """Return the value for `key`, or None if the proof shows it is absent.

        Raises ProofError if the proof neither contains the key nor proves
        its absence.
        """
        key = _as_key(key, "key")
        entry = self._entries.get(key)
        if entry is not None:
            return entry[1]
        for _, value in self.range(key, key, start_inclusive=True, end_inclusive=True):
            return value
        return None

    def all(self) -> Iterator[tuple[bytes, tuple[bool, bytes]]]:
        """Iterate over every entry as (key, (contiguous, value)), in key order."""
        for key in self._keys:
            yield key, self._entries[key]

    def range(
        self,
        start: bytes | None = None,
        end: bytes | None = None,
        *,
        start_inclusive: bool = True,
        end_inclusive: bool = False,
    ) -> Iterator[tuple[bytes, bytes]]:
        """Iterate over (key, value) pairs with keys between `start` and `end`.

        A bound of None is unbounded. Raises ProofError during iteration when
        the proof leaves out data that lies within the range.
        """
        start_key = None if start is None else _as_key(start, "start")
        end_key = None if end is None else _as_key(end, "end")

        if start_key is None:
            lo = 0
        elif start_inclusive:
            lo = bisect_left(self._keys, start_key)
        else:
            lo = bisect_right(self._keys, start_key)

        if end_key is None:
            hi = len(self._keys)
        elif end_inclusive:
            hi = bisect_right(self._keys, end_key)
        else:
            hi = bisect_left(self._keys, end_key)

        return self._iter_range(start_key, self._keys[lo:max(lo, hi)])

    def _iter_range(
        self, start_key: bytes | None, keys: list[bytes]
    ) -> Iterator[tuple[bytes, bytes]]:
        prev_key = start_key
        for key in keys:
            contiguous, value = self._entries[key]
            prev_key = key
            # an exact match on the lower bound needs no contiguity check
            if key != start_key and not contiguous:
                raise ProofError(_MISSING_DATA)
            yield key, value
        self._check_end_bound(prev_key)

    def _check_end_bound(self, prev_key: bytes | None) -> None:
        if prev_key is None:
            excluded = not self._right_edge
        else:
            index = bisect_right(self._keys, prev_key)
            if index == len(self._keys):
                excluded = not self._right_edge
            else:
                contiguous, _ = self._entries[self._keys[index]]
                excluded = not contiguous
        if excluded:
            raise ProofError(_MISSING_DATA)


class MapBuilder:
    """Builds a ProofMap from the nodes of a proof, inserted in key order."""

    def __init__(self) -> None:
        self._entries: dict[bytes, tuple[bool, bytes]] = {}
        self._last_key: bytes | None = None
        self._right_edge = True

    @property
    def right_edge(self) -> bool:
        """Whether the most recently inserted node was a key/value node."""
        return self._right_edge

    def insert(self, node: Node) -> None:
        """Record a KV node's data, or note a gap for an abridged node."""
        if isinstance(node, KVNode):
            if self._last_key is not None and node.key <= self._last_key:
                raise ProofError("Expected nodes to be in increasing key order")
            self._entries[node.key] = (self._right_edge, node.value)
            self._last_key = node.key
            self._right_edge = True
        elif isinstance(node, Node):
            self._right_edge = False
        else:
            raise TypeError(f"expected a Node, not {type(node).__name__}")

    def build(self) -> ProofMap:
        """Return the map of everything inserted so far."""
        return ProofMap(self._entries, self._right_edge)