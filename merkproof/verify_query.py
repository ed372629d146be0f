"""Verification of an encoded proof against a query and a known root hash."""

from __future__ import annotations

from collections import deque

from .encoding import decode_ops
from .ops import HASH_LENGTH, KVNode, Node, ProofError
from .query import Query
from .query_item import QueryItem
from .tree import Hasher, execute

_MISSING_DATA = "Proof is missing data for query"


def _as_hash(value: object) -> bytes:
    if isinstance(value, (int, str)):
        raise TypeError(f"expected_hash must be a bytes-like object, not {type(value).__name__}")
    digest = bytes(value)  # type: ignore[arg-type]
    if len(digest) != HASH_LENGTH:
        raise ValueError(f"expected_hash must be {HASH_LENGTH} bytes long, got {len(digest)}")
    return digest


class _QueryMatcher:
    """Walks the pushed nodes of a proof alongside the items of a query."""

    def __init__(self, items: deque[QueryItem]) -> None:
        self.pending = items
        self.output: list[tuple[bytes, bytes]] = []
        self.last_push: Node | None = None
        self.in_range = False

    def __call__(self, node: Node) -> None:
        if isinstance(node, KVNode):
            self._visit_kv(node)
        elif self.in_range:
            # an abridged node inside a queried range hides part of the range
            raise ProofError(_MISSING_DATA)
        self.last_push = node

    def _visit_kv(self, node: KVNode) -> None:
        key = node.key
        while self.pending:
            item = self.pending[0]
            if item.compare(key) > 0:
                # the next queried part of the tree lies further right
                break

            if not self.in_range:
                # first data seen for this item: its lower bound must be proven
                lower_proven = (
                    key == item.lower_bound()[0]
                    or self.last_push is None
                    or isinstance(self.last_push, KVNode)
                )
                if not lower_proven:
                    raise ProofError("Cannot verify lower bound of queried range")

            if key >= item.upper_bound()[0]:
                self.pending.popleft()
                self.in_range = False
            else:
                self.in_range = True

            if item.contains(key):
                self.output.append((key, node.value))
                break


def verify_query(
    data: bytes,
    query: Query,
    expected_hash: bytes,
    hasher: Hasher | None = None,
) -> list[tuple[bytes, bytes]]:
    """Verify an encoded proof for `query` and return the proven entries.

    Every item of the query must either have its data in the proof or have
    its absence proven. Returns the (key, value) pairs found, in key order.
    Raises ProofError if the proof is invalid, incomplete for the query, or
    does not hash to `expected_hash`.
    """
    expected = _as_hash(expected_hash)
    matcher = _QueryMatcher(deque(query))

    root = execute(decode_ops(data), True, matcher, hasher)

    # remaining items lie past the last pushed node: it must be a full node
    if matcher.pending and not isinstance(matcher.last_push, KVNode):
        raise ProofError(_MISSING_DATA)

    actual = root.hash()
    if actual != expected:
        raise ProofError(
            "Proof did not match expected hash\n"
            f"\tExpected: {expected.hex()}\n"
            f"\tActual: {actual.hex()}"
        )
    return matcher.output