# merkproof

A library for checking proofs over a Merkle AVL tree. A proof is a short
program of stack operators that rebuilds the part of the tree a reader needs.
Running it yields a root hash to compare with a trusted one, along with the
key/value pairs the proof reveals. It can also tell a key that is proven
absent from a key the proof leaves out.

The package needs nothing beyond the standard library.

## Install

```
pip install .
```

To run the tests:

```
pip install ".[test]"
pytest
```

## Modules

- `merkproof.ops` defines the proof vocabulary. An `Op` is one of:
  - `Push(node)`, where the node is a `HashNode` (the hash of a whole
    subtree), a `KVHashNode` (the hash of a key/value pair) or a `KVNode`
    (a key and its value);
  - `Parent()`;
  - `Child()`.

  Every error in a proof raises `ProofError`. The module also defines
  `HASH_LENGTH` (32) and `NULL_HASH`.
- `merkproof.encoding` converts between operators and bytes with
  `encode_op`, `encoding_length`, `decode_op`, `encode_ops` and `decode_ops`.
  `decode_ops` is a lazy iterator. In a `KVNode`, keys may be at most 255
  bytes and values at most 65535 bytes.
- `merkproof.tree` provides:
  - `execute(ops, collapse, visit_node, hasher)`, which runs operators on a
    stack and returns the single `ProofTree` left at the end. It checks that
    keys rise strictly and that the stack neither underflows nor ends with
    more than one item.
  - `ProofTree`, which offers `hash()`, `child(left)`, `attach(left, child)`,
    `into_hash()`, `layer(depth)`, `visit_nodes(fn)` and `visit_refs(fn)`.
  - `Hasher`. By default it uses BLAKE2b with 32-byte digests. To check
    proofs from trees hashed another way, subclass it and override `kv_hash`
    and `node_hash`.
- `merkproof.proofmap` provides `MapBuilder` and `ProofMap`. They collect the
  pairs of a proof in key order. `ProofMap.get(key)` returns the value, or
  `None` when the proof shows the key is absent. `ProofMap.range(start, end,
  *, start_inclusive=True, end_inclusive=False)` yields `(key, value)` pairs.
  Both raise `ProofError` wherever the proof skips data they need.
  `ProofMap.all()` yields every entry as `(key, (contiguous, value))`.
- `merkproof.query_item` defines `QueryItem`, which is a key or any of nine
  kinds of range (`QueryItemKind`). Each kind has a constructor, such as
  `QueryItem.key`, `QueryItem.range` or `QueryItem.range_after_to_inclusive`.
  Two items compare equal when they overlap. `merge` returns the smallest
  item that covers both.
- `merkproof.query` defines `Query`, an ordered set of items. The
  `insert_range*`, `insert_all` and `insert_item` methods merge a new item
  with any items it overlaps. `insert_key` and `Query.from_items` ignore a
  new item that overlaps an existing one.
- `merkproof.verify` provides two functions:
  - `execute_proof(data, hasher=None)` returns the root hash and a
    `ProofMap`, without checking the hash;
  - `verify(data, expected_hash, hasher=None)` also checks the hash.
- `merkproof.verify_query` provides `verify_query(data, query, expected_hash,
  hasher=None)`. It checks that the proof covers every item of the query and
  returns the proven `(key, value)` pairs in key order.

## Example

```python
from merkproof.encoding import decode_ops, encode_ops
from merkproof.ops import Child, KVNode, Parent, Push
from merkproof.query import Query
from merkproof.verify import execute_proof, verify
from merkproof.verify_query import verify_query

proof = [
    Push(KVNode(b"\x03", b"\x03")),
    Push(KVNode(b"\x05", b"\x05")),
    Parent(),
    Push(KVNode(b"\x07", b"\x07")),
    Child(),
]
data = encode_ops(proof)
assert list(decode_ops(data)) == proof

root_hash, _ = execute_proof(data)   # in practice the root hash comes from a trusted source
proven = verify(data, root_hash)
assert proven.get(b"\x05") == b"\x05"
assert proven.get(b"\x06") is None   # proven absent

query = Query()
query.insert_key(b"\x05")
query.insert_key(b"\x06")
assert verify_query(data, query, root_hash) == [(b"\x05", b"\x05")]
```

## What it does not do

The package reads, encodes and verifies proofs. It does not build proofs from
a tree. It also does not store trees or key/value data, and it has no support
for splitting a tree into chunk proofs.