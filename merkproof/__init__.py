"""Merkle AVL tree proofs: operators, encoding, execution and query verification."""

__version__ = "0.1.0"

__all__ = [
    "encoding",
    "ops",
    "proofmap",
    "query",
    "query_item",
    "tree",
    "verify",
    "verify_query",
]