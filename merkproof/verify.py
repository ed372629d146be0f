"""Verification of encoded proofs against a known root hash."""

from __future__ import annotations

from .encoding import decode_ops
from .ops import HASH_LENGTH, ProofError
from .proofmap import MapBuilder, ProofMap
from .tree import Hasher, execute


def _as_hash(value: object) -> bytes:
    if isinstance(value, (int, str)):
        raise TypeError(f"expected_hash must be a bytes-like object, not {type(value).__name__}")
    digest = bytes(value)  # type: ignore[arg-type]
    if len(digest) != HASH_LENGTH:
        raise ValueError(f"expected_hash must be {HASH_LENGTH} bytes long, got {len(digest)}")
    return digest


def execute_proof(data: bytes, hasher: Hasher | None = None) -> tuple[bytes, ProofMap]:
    """Run an encoded proof and return its root hash and the data it reveals.

    The root hash is not checked against anything; compare it with a trusted
    hash before relying on the returned map.
    """
    builder = MapBuilder()
    root = execute(decode_ops(data), True, builder.insert, hasher)
    return root.hash(), builder.build()


def verify(data: bytes, expected_hash: bytes, hasher: Hasher | None = None) -> ProofMap:
    """Run an encoded proof and check that it hashes to `expected_hash`.

    Returns the data the proof reveals. Raises ProofError if the proof is
    malformed or its root hash differs from the expected one.
    """
    expected = _as_hash(expected_hash)
    actual, proof_map = execute_proof(data, hasher)
    if actual != expected:
        raise ProofError(
            "Proof did not match expected hash\n"
            f"\tExpected: {expected.hex()}\n"
            f"\tActual: {actual.hex()}"
        )
    return proof_map