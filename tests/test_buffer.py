import pytest

from minirel.buffer import BufferHashTable, BufferManager, BufferStats
from minirel.dbfile import PAGE_SIZE, Database, PagedFile
from minirel.errors import MinirelError, Status


def _page(text: bytes) -> bytes:
    return text.ljust(PAGE_SIZE, b"\0")


@pytest.fixture
def setup(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)

    def make(frames):
        manager = BufferManager(frames)
        db = Database(manager)
        db.create_file("data")
        file = db.open_file("data")
        return manager, db, file

    return make


def test_hash_table_insert_lookup_remove():
    table = BufferHashTable(7)
    file = PagedFile("a")
    table.insert(file, 3, 5)
    assert table.lookup(file, 3) == 5
    assert (file, 3) in table
    table.remove(file, 3)
    with pytest.raises(MinirelError) as info:
        table.lookup(file, 3)
    assert info.value.status is Status.HASHNOTFOUND


def test_hash_table_duplicate_insert_fails():
    table = BufferHashTable(3)
    file = PagedFile("a")
    table.insert(file, 1, 0)
    with pytest.raises(MinirelError) as info:
        table.insert(file, 1, 2)
    assert info.value.status is Status.HASHTBLERROR
    assert len(table) == 1


def test_hash_table_remove_missing_fails():
    table = BufferHashTable(3)
    with pytest.raises(MinirelError) as info:
        table.remove(PagedFile("a"), 4)
    assert info.value.status is Status.HASHTBLERROR


def test_hash_table_distinguishes_files_and_pages():
    table = BufferHashTable(1)
    first, second = PagedFile("a"), PagedFile("b")
    table.insert(first, 1, 0)
    table.insert(second, 1, 1)
    table.insert(first, 2, 2)
    assert [table.lookup(first, 1), table.lookup(second, 1), table.lookup(first, 2)] == [0, 1, 2]


def test_stats_clear():
    stats = BufferStats(accesses=4, diskreads=2, diskwrites=1)
    stats.clear()
    assert stats == BufferStats()


def test_alloc_page_is_first_data_page_and_pinned(setup):
    manager, db, file = setup(3)
    page_no, page = manager.alloc_page(file)
    assert page_no == 1
    assert len(page) == PAGE_SIZE
    manager.unpin_page(file, page_no, False)
    with pytest.raises(MinirelError) as info:
        manager.unpin_page(file, page_no, False)
    assert info.value.status is Status.PAGENOTPINNED
    db.close_file(file)


def test_unpin_unknown_page(setup):
    manager, db, file = setup(2)
    with pytest.raises(MinirelError) as info:
        manager.unpin_page(file, 9, False)
    assert info.value.status is Status.HASHNOTFOUND
    db.close_file(file)


def test_flush_file_writes_dirty_pages(setup):
    manager, db, file = setup(3)
    page_no, page = manager.alloc_page(file)
    page[:] = _page(b"hello")
    manager.unpin_page(file, page_no, True)
    manager.flush_file(file)
    assert file.read_page(page_no) == _page(b"hello")
    db.close_file(file)


def test_flush_file_with_pinned_page_fails(setup):
    manager, db, file = setup(3)
    page_no, _ = manager.alloc_page(file)
    with pytest.raises(MinirelError) as info:
        manager.flush_file(file)
    assert info.value.status is Status.PAGEPINNED
    manager.unpin_page(file, page_no, False)
    db.close_file(file)


def test_pool_full_when_all_pinned(setup):
    manager, db, file = setup(2)
    first, _ = manager.alloc_page(file)
    second, _ = manager.alloc_page(file)
    with pytest.raises(MinirelError) as info:
        manager.alloc_page(file)
    assert info.value.status is Status.BUFFEREXCEEDED
    manager.unpin_page(file, first, False)
    manager.unpin_page(file, second, False)
    db.close_file(file)


def test_eviction_writes_back_and_reread(setup):
    manager, db, file = setup(1)
    first, page = manager.alloc_page(file)
    page[:] = _page(b"first")
    manager.unpin_page(file, first, True)
    second, _ = manager.alloc_page(file)
    assert manager.stats.diskwrites == 1
    manager.unpin_page(file, second, False)
    again = manager.read_page(file, first)
    assert bytes(again) == _page(b"first")
    assert manager.stats.diskreads == 1
    manager.unpin_page(file, first, False)
    db.close_file(file)


def test_read_hit_does_not_touch_disk(setup):
    manager, db, file = setup(2)
    page_no, page = manager.alloc_page(file)
    page[:] = _page(b"cached")
    again = manager.read_page(file, page_no)
    assert again is page
    assert manager.stats.diskreads == 0
    manager.unpin_page(file, page_no, True)
    manager.unpin_page(file, page_no, False)
    db.close_file(file)


def test_dispose_page_returns_it_to_free_list(setup):
    manager, db, file = setup(3)
    first, _ = manager.alloc_page(file)
    second, _ = manager.alloc_page(file)
    manager.unpin_page(file, first, False)
    manager.unpin_page(file, second, False)
    manager.dispose_page(file, second)
    reused, _ = manager.alloc_page(file)
    assert reused == second
    manager.unpin_page(file, reused, False)
    db.close_file(file)


def test_describe_lists_frames(setup):
    manager, db, file = setup(2)
    page_no, page = manager.alloc_page(file)
    page[:] = _page(b"abc")
    text = manager.describe()
    assert "Print buffer..." in text
    assert "abc\tpinCnt: 1\tvalid" in text
    manager.unpin_page(file, page_no, False)
    db.close_file(file)


def test_clear_stats(setup):
    manager, db, file = setup(1)
    first, _ = manager.alloc_page(file)
    manager.unpin_page(file, first, True)
    second, _ = manager.alloc_page(file)
    manager.unpin_page(file, second, False)
    assert manager.stats.diskwrites > 0
    manager.clear_stats()
    assert manager.stats == BufferStats()
    db.close_file(file)


def test_flush_all_writes_pinned_dirty_pages(setup):
    manager, db, file = setup(2)
    page_no, page = manager.alloc_page(file)
    page[:] = _page(b"kept")
    manager.unpin_page(file, page_no, True)
    manager.read_page(file, page_no)
    manager.flush_all()
    assert file.read_page(page_no) == _page(b"kept")
    manager.unpin_page(file, page_no, False)
    db.close_file(file)


def test_close_file_flushes_through_database(setup):
    manager, db, file = setup(2)
    page_no, page = manager.alloc_page(file)
    page[:] = _page(b"persist")
    manager.unpin_page(file, page_no, True)
    db.close_file(file)
    reopened = db.open_file("data")
    assert reopened.read_page(page_no) == _page(b"persist")
    db.close_file(reopened)


def test_invalid_pool_size():
    with pytest.raises(ValueError):
        BufferManager(0)