"""Binary encoding of proof operators."""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .ops import (
    HASH_LENGTH,
    Child,
    HashNode,
    KVHashNode,
    KVNode,
    Op,
    Parent,
    ProofError,
    Push,
)

_TAG_HASH = 0x01
_TAG_KV_HASH = 0x02
_TAG_KV = 0x03
_TAG_PARENT = 0x10
_TAG_CHILD = 0x11

MAX_KEY_LENGTH = 0xFF
MAX_VALUE_LENGTH = 0xFFFF


def encode_op(op: Op) -> bytes:
    """Encode a single operator to bytes."""
    match op:
        case Push(node=HashNode(hash=digest)):
            return bytes([_TAG_HASH]) + digest
        case Push(node=KVHashNode(kv_hash=digest)):
            return bytes([_TAG_KV_HASH]) + digest
        case Push(node=KVNode(key=key, value=value)):
            if len(key) > MAX_KEY_LENGTH:
                raise ProofError(f"failed to encode a proof operator (key of {len(key)} bytes is too long)")
            if len(value) > MAX_VALUE_LENGTH:
                raise ProofError(
                    f"failed to encode a proof operator (value of {len(value)} bytes is too long)"
                )
            return bytes([_TAG_KV, len(key)]) + key + len(value).to_bytes(2, "big") + value
        case Parent():
            return bytes([_TAG_PARENT])
        case Child():
            return bytes([_TAG_CHILD])
    raise TypeError(f"cannot encode {op!r}")


def encoding_length(op: Op) -> int:
    """Return the number of bytes `op` occupies when encoded."""
    match op:
        case Push(node=HashNode()) | Push(node=KVHashNode()):
            return 1 + HASH_LENGTH
        case Push(node=KVNode(key=key, value=value)):
            return 4 + len(key) + len(value)
        case Parent() | Child():
            return 1
    raise TypeError(f"cannot measure {op!r}")


def _take(data: bytes, offset: int, count: int) -> bytes:
    end = offset + count
    if end > len(data):
        raise ProofError("failed to decode a proof operator (unexpected end of data)")
    return data[offset:end]


def _decode_at(data: bytes, offset: int) -> tuple[Op, int]:
    tag = _take(data, offset, 1)[0]
    offset += 1
    if tag in (_TAG_HASH, _TAG_KV_HASH):
        digest = _take(data, offset, HASH_LENGTH)
        node = HashNode(digest) if tag == _TAG_HASH else KVHashNode(digest)
        return Push(node), offset + HASH_LENGTH
    if tag == _TAG_KV:
        key_len = _take(data, offset, 1)[0]
        offset += 1
        key = _take(data, offset, key_len)
        offset += key_len
        value_len = int.from_bytes(_take(data, offset, 2), "big")
        offset += 2
        value = _take(data, offset, value_len)
        return Push(KVNode(key, value)), offset + value_len
    if tag == _TAG_PARENT:
        return Parent(), offset
    if tag == _TAG_CHILD:
        return Child(), offset
    raise ProofError("failed to decode a proof operator (Proof has unexpected value)")


def decode_op(data: bytes) -> Op:
    """Decode the operator at the start of `data`; trailing bytes are ignored."""
    op, _ = _decode_at(bytes(data), 0)
    return op


def encode_ops(ops: Iterable[Op]) -> bytes:
    """Encode a sequence of operators into one byte string."""
    return b"".join(encode_op(op) for op in ops)


def decode_ops(data: bytes) -> Iterator[Op]:
    """Lazily decode every operator in `data`, raising ProofError on bad input."""
    buffer = bytes(data)
    offset = 0
    while offset < len(buffer):
        op, offset = _decode_at(buffer, offset)
        yield op