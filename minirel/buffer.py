"""Buffer pool manager with clock replacement over paged database files."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Hashable

from .dbfile import PAGE_SIZE, PagedFile
from .errors import MinirelError, Status


@dataclass
class BufferStats:
    """Buffer pool usage counters."""

    accesses: int = 0
    diskreads: int = 0
    diskwrites: int = 0

    def clear(self) -> None:
        """Reset every counter to zero."""
        self.accesses = 0
        self.diskreads = 0
        self.diskwrites = 0


class BufferHashTable:
    """Maps (file, page number) pairs to the frame that holds the page."""

    def __init__(self, size: int) -> None:
        if size < 1:
            raise ValueError("hash table size must be positive")
        self.size = size
        self._buckets: list[list[tuple[Hashable, int, int]]] = [[] for _ in range(size)]

    def _bucket(self, file: Hashable, page_no: int) -> list[tuple[Hashable, int, int]]:
        return self._buckets[(hash(file) + page_no) % self.size]

    def __len__(self) -> int:
        return sum(len(bucket) for bucket in self._buckets)

    def __contains__(self, key: tuple[Hashable, int]) -> bool:
        file, page_no = key
        return any(
            f is file and p == page_no for f, p, _ in self._bucket(file, page_no)
        )

    def insert(self, file: Hashable, page_no: int, frame_no: int) -> None:
        """Record that a page lives in a frame; the pair must not be present yet."""
        bucket = self._bucket(file, page_no)
        if any(f is file and p == page_no for f, p, _ in bucket):
            raise MinirelError(Status.HASHTBLERROR)
        bucket.insert(0, (file, page_no, frame_no))

    def lookup(self, file: Hashable, page_no: int) -> int:
        """Return the frame holding the page."""
        for f, p, frame_no in self._bucket(file, page_no):
            if f is file and p == page_no:
                return frame_no
        raise MinirelError(Status.HASHNOTFOUND)

    def remove(self, file: Hashable, page_no: int) -> None:
        """Forget the entry for the page."""
        bucket = self._bucket(file, page_no)
        for position, (f, p, _) in enumerate(bucket):
            if f is file and p == page_no:
                del bucket[position]
                return
        raise MinirelError(Status.HASHTBLERROR)


@dataclass
class _Frame:
    file: PagedFile | None = None
    page_no: int = -1
    pin_cnt: int = 0
    dirty: bool = False
    valid: bool = False
    refbit: bool = False

    def clear(self) -> None:
        self.file = None
        self.page_no = -1
        self.pin_cnt = 0
        self.dirty = False
        self.valid = False

    def assign(self, file: PagedFile, page_no: int) -> None:
        self.file = file
        self.page_no = page_no
        self.pin_cnt = 1
        self.dirty = False
        self.valid = True
        self.refbit = True


class BufferManager:
    """A fixed pool of page frames shared by all open files.

    Pages handed out by :meth:`read_page` and :meth:`alloc_page` are pinned
    mutable buffers; callers release them with :meth:`unpin_page`.
    """

    def __init__(self, num_buffers: int) -> None:
        if num_buffers < 1:
            raise ValueError("a buffer pool needs at least one frame")
        self.num_buffers = num_buffers
        self._frames = [_Frame() for _ in range(num_buffers)]
        self._pool = [bytearray(PAGE_SIZE) for _ in range(num_buffers)]
        self._table = BufferHashTable(int(num_buffers * 1.2) * 2 // 2 + 1)
        self._clock_hand = num_buffers - 1
        self.stats = BufferStats()

    def __enter__(self) -> BufferManager:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.flush_all()

    def _advance_clock(self) -> None:
        self._clock_hand = (self._clock_hand + 1) % self.num_buffers

    def _alloc_frame(self) -> int:
        for _ in range(2 * self.num_buffers):
            self._advance_clock()
            frame = self._frames[self._clock_hand]
            if not frame.valid:
                break
            if frame.refbit:
                self.stats.accesses += 1
                frame.refbit = False
            elif frame.pin_cnt == 0:
                try:
                    self._table.remove(frame.file, frame.page_no)
                except MinirelError:
                    pass
                break
        else:
            raise MinirelError(Status.BUFFEREXCEEDED)

        frame = self._frames[self._clock_hand]
        if frame.dirty and frame.file is not None:
            self.stats.diskwrites += 1
            frame.file.write_page(frame.page_no, self._pool[self._clock_hand])
        frame.clear()
        return self._clock_hand

    def read_page(self, file: PagedFile, page_no: int) -> bytearray:
        """Pin a page of the file in the pool and return its buffer."""
        try:
            frame_no = self._table.lookup(file, page_no)
        except MinirelError:
            pass
        else:
            frame = self._frames[frame_no]
            frame.refbit = True
            frame.pin_cnt += 1
            return self._pool[frame_no]

        frame_no = self._alloc_frame()
        self.stats.diskreads += 1
        self._pool[frame_no][:] = file.read_page(page_no)
        self._frames[frame_no].assign(file, page_no)
        self._table.insert(file, page_no, frame_no)
        return self._pool[frame_no]

    def unpin_page(self, file: PagedFile, page_no: int, dirty: bool) -> None:
        """Release one pin on a page, marking it dirty if it was changed."""
        frame = self._frames[self._table.lookup(file, page_no)]
        if dirty:
            frame.dirty = True
        if frame.pin_cnt == 0:
            raise MinirelError(Status.PAGENOTPINNED)
        frame.pin_cnt -= 1

    def alloc_page(self, file: PagedFile) -> tuple[int, bytearray]:
        """Allocate a new page in the file, pin it and return its number and buffer."""
        page_no = file.allocate_page()
        frame_no = self._alloc_frame()
        buffer = self._pool[frame_no]
        buffer[:] = bytes(PAGE_SIZE)
        self._frames[frame_no].assign(file, page_no)
        self._table.insert(file, page_no, frame_no)
        return page_no, buffer

    def flush_file(self, file: PagedFile) -> None:
        """Write out the file's dirty pages and drop all of its pages from the pool."""
        for frame_no, frame in enumerate(self._frames):
            if frame.file is not file:
                continue
            if not frame.valid:
                raise MinirelError(Status.BADBUFFER)
            if frame.pin_cnt > 0:
                raise MinirelError(Status.PAGEPINNED)
            if frame.dirty:
                file.write_page(frame.page_no, self._pool[frame_no])
                frame.dirty = False
            try:
                self._table.remove(file, frame.page_no)
            except MinirelError:
                pass
            frame.clear()

    def dispose_page(self, file: PagedFile, page_no: int) -> None:
        """Drop a page from the pool and return it to the file's free list."""
        try:
            frame_no = self._table.lookup(file, page_no)
        except MinirelError:
            pass
        else:
            self._frames[frame_no].clear()
            self._table.remove(file, page_no)
        file.dispose_page(page_no)

    def flush_all(self) -> None:
        """Write every valid dirty page back to its file."""
        for frame_no, frame in enumerate(self._frames):
            if frame.valid and frame.dirty and frame.file is not None:
                frame.file.write_page(frame.page_no, self._pool[frame_no])
                frame.dirty = False

    def describe(self) -> str:
        """Return a listing of every frame: its leading text and pin count."""
        lines = ["", "Print buffer..."]
        for frame_no, frame in enumerate(self._frames):
            text = bytes(self._pool[frame_no]).split(b"\0", 1)[0].decode("latin-1")
            line = f"{frame_no}\t{text}\tpinCnt: {frame.pin_cnt}"
            if frame.valid:
                line += "\tvalid"
            lines.append(line)
        return "\n".join(lines) + "\n"

    def clear_stats(self) -> None:
        """Reset the usage counters."""
        self.stats.clear()