"""Partial binary trees reconstructed from proofs, and proof execution."""

from __future__ import annotations

import hashlib
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass, field

from .ops import (
    HASH_LENGTH,
    NULL_HASH,
    Child,
    HashNode,
    KVHashNode,
    KVNode,
    Node,
    Op,
    Parent,
    ProofError,
    Push,
)


class Hasher:
    """Hashing scheme for tree nodes: BLAKE2b with 32-byte digests.

    Subclass and override `kv_hash` and `node_hash` to verify proofs built
    with another scheme.
    """

    @staticmethod
    def _digest(*parts: bytes) -> bytes:
        hasher = hashlib.blake2b(digest_size=HASH_LENGTH)
        for part in parts:
            hasher.update(part)
        return hasher.digest()

    def kv_hash(self, key: bytes, value: bytes) -> bytes:
        """Hash a key/value pair."""
        key, value = bytes(key), bytes(value)
        return self._digest(
            len(key).to_bytes(4, "big"), key, len(value).to_bytes(4, "big"), value
        )

    def node_hash(self, kv_hash: bytes, left: bytes, right: bytes) -> bytes:
        """Hash a node from its key/value hash and its children's hashes."""
        parts = (bytes(kv_hash), bytes(left), bytes(right))
        if any(len(part) != HASH_LENGTH for part in parts):
            raise ValueError(f"node hash inputs must each be {HASH_LENGTH} bytes long")
        return self._digest(*parts)


@dataclass
class ChildLink:
    """A child subtree together with its (always up-to-date) hash."""

    tree: ProofTree
    hash: bytes


@dataclass(eq=False)
class ProofTree:
    """A binary tree holding the subset of a tree that a proof reveals."""

    node: Node
    left: ChildLink | None = None
    right: ChildLink | None = None
    height: int = 1
    hasher: Hasher = field(default_factory=Hasher, repr=False)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ProofTree):
            return NotImplemented
        return self.hash() == other.hash()

    __hash__ = None  # type: ignore[assignment]

    def hash(self) -> bytes:
        """Return the hash of this tree node, computing it when needed."""
        node = self.node
        if isinstance(node, HashNode):
            return node.hash
        if isinstance(node, KVHashNode):
            kv = node.kv_hash
        elif isinstance(node, KVNode):
            kv = self.hasher.kv_hash(node.key, node.value)
        else:
            raise TypeError(f"unexpected node {node!r}")
        return self.hasher.node_hash(kv, self._child_hash(True), self._child_hash(False))

    def child(self, left: bool) -> ChildLink | None:
        """Return the child link on the given side, if any."""
        return self.left if left else self.right

    def _child_hash(self, left: bool) -> bytes:
        link = self.child(left)
        return NULL_HASH if link is None else link.hash

    def attach(self, left: bool, child: ProofTree) -> None:
        """Attach `child` on the given side, which must be empty."""
        if self.child(left) is not None:
            side = "left" if left else "right"
            raise ProofError(f"Tried to attach to {side} child, but it is already occupied")
        self.height = max(self.height, child.height + 1)
        link = ChildLink(child, child.hash())
        if left:
            self.left = link
        else:
            self.right = link

    def into_hash(self) -> ProofTree:
        """Return a childless tree holding only this tree's hash."""
        return ProofTree(HashNode(self.hash()), hasher=self.hasher)

    def layer(self, depth: int) -> Iterator[ProofTree]:
        """Iterate in order over the subtrees at the given depth."""
        node = self
        for _ in range(depth):
            if node.left is None:
                raise ProofError("Could not traverse to given layer")
            node = node.left.tree
        return self._layer_nodes(depth)

    def _layer_nodes(self, remaining: int) -> Iterator[ProofTree]:
        if remaining == 0:
            yield self
            return
        for link in (self.left, self.right):
            if link is None:
                raise ProofError("Could not traverse to given layer")
            yield from link.tree._layer_nodes(remaining - 1)

    def _in_order(self) -> Iterator[ProofTree]:
        if self.left is not None:
            yield from self.left.tree._in_order()
        yield self
        if self.right is not None:
            yield from self.right.tree._in_order()

    def visit_nodes(self, visit_node: Callable[[Node], object]) -> None:
        """Call `visit_node` with every node, in key order."""
        for tree in self._in_order():
            visit_node(tree.node)

    def visit_refs(self, visit_node: Callable[[ProofTree], object]) -> None:
        """Call `visit_node` with every subtree, in key order."""
        for tree in self._in_order():
            visit_node(tree)


def execute(
    ops: Iterable[Op],
    collapse: bool = False,
    visit_node: Callable[[Node], object] | None = None,
    hasher: Hasher | None = None,
) -> ProofTree:
    """Run proof operators on a stack and return the single resulting tree.

    With `collapse`, attached children are replaced by their hashes to keep
    memory low. `visit_node` is called for every pushed node, in key order;
    an exception it raises stops execution.
    """
    if hasher is None:
        hasher = Hasher()
    stack: list[ProofTree] = []
    last_key: bytes | None = None

    def pop() -> ProofTree:
        if not stack:
            raise ProofError("Stack underflow")
        return stack.pop()

    for op in ops:
        if isinstance(op, Parent):
            parent = pop()
            child = pop()
            parent.attach(True, child.into_hash() if collapse else child)
            stack.append(parent)
        elif isinstance(op, Child):
            child = pop()
            parent = pop()
            parent.attach(False, child.into_hash() if collapse else child)
            stack.append(parent)
        elif isinstance(op, Push):
            node = op.node
            if isinstance(node, KVNode):
                if last_key is not None and node.key <= last_key:
                    raise ProofError("Incorrect key ordering")
                last_key = node.key
            if visit_node is not None:
                visit_node(node)
            stack.append(ProofTree(node, hasher=hasher))
        else:
            raise TypeError(f"unexpected proof operator {op!r}")

    if len(stack) != 1:
        raise ProofError("Expected proof to result in exactly one stack item")
    return stack[0]