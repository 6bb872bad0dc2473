# minirel

`minirel` is a small relational storage engine for learning how a database
keeps its data on disk. It provides:

- **Paged files** (`minirel.dbfile`): files of 1024-byte pages with a header
  page (`HeaderPage`) and a free list. `PagedFile` allocates, disposes of,
  reads and writes pages; `Database` creates, destroys, opens and closes
  files and keeps count of how often each file is open.
- **A buffer pool** (`minirel.buffer`): `BufferManager` caches pages in a
  fixed number of frames, pins and unpins them, writes dirty pages back and
  chooses frames to reuse with the clock algorithm. Usage counters are kept
  in `BufferStats` (`accesses`, `diskreads`, `diskwrites`), and
  `BufferHashTable` maps (file, page) pairs to frames.
- **Catalog records** (`minirel.records`): `RelDesc` and `AttrDesc` with
  their fixed binary layout (`pack` / `unpack`), `AttrInfo`, record ids
  (`RID`), attribute types (`Datatype`) and comparison operators
  (`Operator`).
- **Join helpers** (`minirel.joinhash`): `JoinHashTable` maps join attribute
  values of inserted tuples to their record ids, and `compare_join_values`
  orders the join attributes of two records.
- **Errors** (`minirel.errors`): failures raise `MinirelError`, whose
  `status` is a `Status` member; `describe(status)` gives its message.
- **Sample data** (`minirel.testdata`): the soap-opera relations, the
  `rel500` / `rel1000` benchmark relations and shuffled unique integers.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Paged files and the buffer pool

```python
from minirel.buffer import BufferManager
from minirel.dbfile import Database
from minirel.errors import MinirelError, describe

with BufferManager(100) as buffers:
    db = Database(buffers)

    db.create_file("accounts")
    f = db.open_file("accounts")
    try:
        page_no, page = buffers.alloc_page(f)   # pinned, zero-filled bytearray
        page[:5] = b"hello"
        buffers.unpin_page(f, page_no, dirty=True)
        print("first data page:", f.first_page())
    finally:
        db.close_file(f)                        # flushes the file's pages

    try:
        db.create_file("accounts")
    except MinirelError as exc:
        print(describe(exc.status))             # file exists already

    print(buffers.stats)
```

`BufferManager.read_page(file, page_no)` pins a page and returns its buffer;
every pin must be released with `unpin_page`. `flush_file` writes back a
file's dirty pages and drops them from the pool (it raises
`MinirelError(Status.PAGEPINNED)` if one is still pinned), `flush_all`
writes back every dirty page, and leaving the `with` block calls
`flush_all`. When every frame is pinned, a new page cannot be brought in
and `Status.BUFFEREXCEEDED` is raised.

## Catalog records

```python
from minirel.records import AttrDesc, Datatype, RelDesc

raw = RelDesc("stars", 4).pack()
assert RelDesc.unpack(raw) == RelDesc("stars", 4)

attr = AttrDesc("stars", "soapid", 36, Datatype.INTEGER, 4)
assert AttrDesc.unpack(attr.pack()) == attr
```

Names of 32 bytes or more raise `MinirelError(Status.NAMETOOLONG)`.

## Join helpers

```python
from minirel.joinhash import JoinHashTable
from minirel.records import RID

table = JoinHashTable(101, attr)
table.insert(RID(1, 0), tuple_bytes)
matches = table.lookup(5)            # or the raw bytes of the inner value
```

## Command-line tools

Remove a database directory after confirming with `y`:

```
minirel-destroy mydb
```

Anything other than `y` or `Y` leaves the directory untouched.

Write or show the sample data files:

```
minirel-testdata soaps [directory]
minirel-testdata benchmark [directory] [--seed N]
minirel-testdata wi COUNT OUTPUT [--seed N]
minirel-testdata show FILE...
```

The sample records are also available from Python through
`soap_records()`, `star_records()`, `generate_wi_tuples()` and
`read_benchmark_relation()` in `minirel.testdata`.

## What this package does not do

`minirel` stops at paged files, the buffer pool and the record formats. It
has no slotted record pages, no heap files or scans, no stored relation or
attribute catalogs, no query language or interactive shell, no command to
create a database, and no join operator that reads relations and writes a
result: `JoinHashTable` and `compare_join_values` are building blocks for
one.