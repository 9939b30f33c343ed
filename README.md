# dicecore

The core of an in-memory key-value store, with no dependencies beyond the
standard library.

## Modules

- `dicecore.objects`: `Obj`, a stored value with a packed type/encoding byte
  and a last-access clock, and the helpers `get_type`, `get_encoding`,
  `extract_type_encoding`, `assert_type` and `assert_encoding` (the last two
  raise `TypeEncodingError`). Type and encoding constants such as
  `OBJ_TYPE_STRING` and `OBJ_ENCODING_INT` live here too.
- `dicecore.store`: `Store`, a thread-safe mapping of keys to objects.
  `new_obj` creates an object and, for a positive duration, sets its expiry
  in milliseconds. `put`, `get`, `delete` and `items` work on keys; `get`
  deletes keys whose expiry is due. `expire_sample` and `delete_expired_keys`
  remove expired keys actively by sampling 20 keys at a time until fewer than
  a quarter of a sample are expired. `add_watcher` / `remove_watcher` keep
  `watch_list`, and `update_db_stat` sets metrics in `keyspace_stat`.
  Every `put` and every deletion through `get` or `delete` puts a
  `WatchEvent` on the `watch_events` queue.
- `dicecore.queueint`: `QueueInt`, a FIFO queue that packs non-negative
  integers as varints into 256-byte chunks, and `QueueIntBasic`, the same
  interface over a deque. Removing from an empty queue raises
  `QueueEmptyError`.
- `dicecore.stackint`: `StackInt`, the LIFO counterpart; popping an empty
  stack raises `StackEmptyError`.
- `dicecore.queueref` and `dicecore.stackref`: `QueueRef` and `StackRef` hold
  references to keys of a `Store`. Only existing keys can be added; keys that
  have since disappeared are skipped by `remove` / `pop` and `iterate`, which
  return `QueueElement` / `StackElement` pairs of key and object.
- `dicecore.wildcard`: `wildcard_match(pattern, key)`, glob matching with `*`
  and `?`.
- `dicecore.executor`: `execute_query(query, store)` runs a `DSQLQuery` over a
  store: key-pattern filtering, an optional `WHERE` tree built from
  `ComparisonExpr`, `AndExpr`, `OrExpr`, `ColName` (`_key`, `_value`) and
  `SQLVal`, ordering by `$key` or `$value`, selection of keys and values, and
  a limit. Evaluation problems raise `QueryError`.
- `dicecore.resp`: `encode(value, is_simple)` and a streaming `RESPParser`
  (`decode_one`, `decode_multiple`) for the Redis serialization protocol.
  Malformed input raises `RESPProtocolError`; an empty stream raises
  `EOFError`.

## Installation

```
pip install .
```

## Example

```python
from dicecore.store import Store
from dicecore.executor import (
    DSQLQuery, QuerySelection, QueryOrder, ComparisonExpr, ColName,
    SQLVal, SQLValType, execute_query,
)
from dicecore.resp import encode

store = Store()
for key, value in [("k1", "v5"), ("k2", "v4"), ("k3", "v3")]:
    store.put(key, store.new_obj(value, -1, 0, 0))

query = DSQLQuery(
    key_regex="k*",
    selection=QuerySelection(key_selection=True, value_selection=True),
    order_by=QueryOrder(order_by="$value", order="asc"),
    where=ComparisonExpr(ColName("_value"), ">", SQLVal(SQLValType.STR, "v3")),
)
rows = execute_query(query, store)
print([(row.key, row.value.value) for row in rows])  # [('k2', 'v4'), ('k1', 'v5')]
print(encode(rows, False))
```

Decoding a RESP stream works on any binary reader with a `read` method:

```python
import io
from dicecore.resp import RESPParser

parser = RESPParser(io.BytesIO(b"*2\r\n$5\r\nhello\r\n:42\r\n"))
print(parser.decode_one())   # ['hello', 42]
```

## Watch events

`Store.watch_events` is a bounded `queue.Queue` (100 entries by default).
A `put` or delete waits while it is full, so whoever uses the store must
drain it, or create the store with `Store(watch_queue_size=0)` for an
unbounded queue.

## What the package does not do

There is no network server, no command evaluation and no command-line entry
point: the package provides the data structures, the query executor and the
wire codec, and leaves accepting connections and dispatching commands to the
application. Data is kept in memory only; nothing is written to disk.

## Running the tests

```
pip install .[test]
pytest
```