"""Proof operators and the tree nodes they push onto the verification stack."""

from __future__ import annotations

from dataclasses import dataclass

HASH_LENGTH = 32
NULL_HASH = bytes(HASH_LENGTH)


class ProofError(Exception):
    """Raised when a proof is malformed, inconsistent or fails verification."""


def _to_bytes(value: object, name: str) -> bytes:
    if isinstance(value, (int, str)):
        raise TypeError(f"{name} must be a bytes-like object, not {type(value).__name__}")
    return bytes(value)  # type: ignore[arg-type]


def _to_hash(value: object, name: str) -> bytes:
    data = _to_bytes(value, name)
    if len(data) != HASH_LENGTH:
        raise ValueError(f"{name} must be {HASH_LENGTH} bytes long, got {len(data)}")
    return data


class Node:
    """A selected piece of data about a single tree node, carried by a push."""

    __slots__ = ()


@dataclass(frozen=True)
class HashNode(Node):
    """The hash of a whole tree node."""

    hash: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "hash", _to_hash(self.hash, "hash"))


@dataclass(frozen=True)
class KVHashNode(Node):
    """The hash of the key/value pair of a tree node."""

    kv_hash: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "kv_hash", _to_hash(self.kv_hash, "kv_hash"))


@dataclass(frozen=True)
class KVNode(Node):
    """The key and value of a tree node."""

    key: bytes
    value: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "key", _to_bytes(self.key, "key"))
        object.__setattr__(self, "value", _to_bytes(self.value, "value"))


class Op:
    """A proof operator, executed to verify the data in a Merkle proof."""

    __slots__ = ()


@dataclass(frozen=True)
class Push(Op):
    """Pushes a node on the stack."""

    node: Node

    def __post_init__(self) -> None:
        if not isinstance(self.node, Node):
            raise TypeError(f"Push expects a Node, not {type(self.node).__name__}")


@dataclass(frozen=True)
class Parent(Op):
    """Pops a parent, then a child, attaches the child on the left, pushes the parent."""


@dataclass(frozen=True)
class Child(Op):
    """Pops a child, then a parent, attaches the child on the right, pushes the parent."""