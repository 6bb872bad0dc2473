"""Paged database files and the table of files that are currently open."""

from __future__ import annotations

import os
import struct
from dataclasses import dataclass
from typing import BinaryIO, Protocol

from .errors import MinirelError, Status

PAGE_SIZE = 1024
NO_PAGE = -1

_HEADER_FORMAT = struct.Struct("<iii")
_FREE_LINK_FORMAT = struct.Struct("<i")


class _Flusher(Protocol):
    def flush_file(self, file: PagedFile) -> None: ...


@dataclass
class HeaderPage:
    """Contents of page 0 of every database file."""

    next_free: int = NO_PAGE
    first_page: int = NO_PAGE
    num_pages: int = 1

    def pack(self) -> bytes:
        """Serialize to a full, zero-padded page."""
        raw = _HEADER_FORMAT.pack(self.next_free, self.first_page, self.num_pages)
        return raw.ljust(PAGE_SIZE, b"\0")

    @classmethod
    def unpack(cls, data: bytes) -> HeaderPage:
        """Read the header fields from the start of a page."""
        if len(data) < _HEADER_FORMAT.size:
            raise ValueError(
                f"header page needs at least {_HEADER_FORMAT.size} bytes, got {len(data)}"
            )
        return cls(*_HEADER_FORMAT.unpack_from(data))


class PagedFile:
    """A file of fixed-size pages with a header page and a free list.

    Instances are obtained from :meth:`Database.open_file`.
    """

    def __init__(self, name: str) -> None:
        self.name = name
        self.open_count = 0
        self._handle: BinaryIO | None = None

    def __repr__(self) -> str:
        return f"PagedFile({self.name!r}, open_count={self.open_count})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, PagedFile):
            return NotImplemented
        return self.name == other.name

    def __hash__(self) -> int:
        return hash(self.name)

    # -- creation and removal on disk -------------------------------------

    @staticmethod
    def _create(name: str) -> None:
        try:
            with open(name, "xb") as handle:
                handle.write(HeaderPage().pack())
        except FileExistsError:
            raise MinirelError(Status.FILEEXISTS) from None
        except OSError as exc:
            raise MinirelError(Status.UNIXERR) from exc

    @staticmethod
    def _destroy(name: str) -> None:
        try:
            os.remove(name)
        except OSError as exc:
            raise MinirelError(Status.UNIXERR) from exc

    # -- open / close ------------------------------------------------------

    def _open(self) -> None:
        if self.open_count == 0:
            try:
                self._handle = open(self.name, "r+b")
            except OSError as exc:
                raise MinirelError(Status.UNIXERR) from exc
        self.open_count += 1

    def _close(self, flusher: _Flusher | None) -> None:
        if self.open_count <= 0:
            raise MinirelError(Status.FILENOTOPEN)
        self.open_count -= 1
        if self.open_count > 0:
            return
        if flusher is not None:
            try:
                flusher.flush_file(self)
            except MinirelError:
                pass
        handle, self._handle = self._handle, None
        if handle is not None:
            try:
                handle.close()
            except OSError as exc:
                raise MinirelError(Status.UNIXERR) from exc

    # -- raw page I/O --------------------------------------------------------

    def _read(self, page_no: int) -> bytes:
        if self._handle is None:
            raise MinirelError(Status.UNIXERR)
        try:
            self._handle.seek(page_no * PAGE_SIZE)
            data = self._handle.read(PAGE_SIZE)
        except OSError as exc:
            raise MinirelError(Status.UNIXERR) from exc
        if len(data) != PAGE_SIZE:
            raise MinirelError(Status.UNIXERR)
        return data

    def _write(self, page_no: int, data: bytes) -> None:
        if self._handle is None:
            raise MinirelError(Status.UNIXERR)
        try:
            self._handle.seek(page_no * PAGE_SIZE)
            written = self._handle.write(data)
            self._handle.flush()
        except OSError as exc:
            raise MinirelError(Status.UNIXERR) from exc
        if written != PAGE_SIZE:
            raise MinirelError(Status.UNIXERR)

    def _header(self) -> HeaderPage:
        return HeaderPage.unpack(self._read(0))

    # -- public page operations ---------------------------------------------

    def allocate_page(self) -> int:
        """Take a page from the free list, or extend the file; return its number."""
        header = self._header()
        if header.next_free != NO_PAGE:
            page_no = header.next_free
            (header.next_free,) = _FREE_LINK_FORMAT.unpack_from(self._read(page_no))
        else:
            page_no = header.num_pages
            self._write(page_no, bytes(PAGE_SIZE))
            header.num_pages += 1
            if header.first_page == NO_PAGE:
                header.first_page = page_no
        self._write(0, header.pack())
        return page_no

    def dispose_page(self, page_no: int) -> None:
        """Put a page on the free list. The first data page cannot be disposed of."""
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        header = self._header()
        if header.first_page == page_no or page_no >= header.num_pages:
            raise MinirelError(Status.BADPAGENO)
        self._read(page_no)
        freed = _FREE_LINK_FORMAT.pack(header.next_free).ljust(PAGE_SIZE, b"\0")
        header.next_free = page_no
        self._write(page_no, freed)
        self._write(0, header.pack())

    def read_page(self, page_no: int) -> bytes:
        """Return the contents of a data page."""
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        return self._read(page_no)

    def write_page(self, page_no: int, data: bytes | bytearray | memoryview) -> None:
        """Store a full page of data at the given data page."""
        if data is None or len(data) != PAGE_SIZE:
            raise MinirelError(Status.BADPAGEPTR)
        if page_no < 1:
            raise MinirelError(Status.BADPAGENO)
        self._write(page_no, bytes(data))

    def first_page(self) -> int:
        """Return the number of the first data page, or -1 if there is none."""
        return self._header().first_page


class Database:
    """Creates, destroys, opens and closes database files."""

    def __init__(self, buffer_manager: _Flusher | None = None) -> None:
        self.buffer_manager = buffer_manager
        self._open_files: dict[str, PagedFile] = {}

    def is_open(self, name: str) -> bool:
        """Tell whether a file of this name is currently open."""
        return name in self._open_files

    def create_file(self, name: str) -> None:
        """Create a new file holding only a header page."""
        if not name:
            raise MinirelError(Status.BADFILE)
        if name in self._open_files:
            raise MinirelError(Status.FILEEXISTS)
        PagedFile._create(name)

    def destroy_file(self, name: str) -> None:
        """Remove a file that is not open."""
        if not name:
            raise MinirelError(Status.BADFILE)
        if name in self._open_files:
            raise MinirelError(Status.FILEOPEN)
        PagedFile._destroy(name)

    def open_file(self, name: str) -> PagedFile:
        """Open a file, or count one more opening of an already open file."""
        if not name:
            raise MinirelError(Status.BADFILE)
        file = self._open_files.get(name)
        if file is not None:
            file._open()
            return file
        file = PagedFile(name)
        file._open()
        self._open_files[name] = file
        return file

    def close_file(self, file: PagedFile) -> None:
        """Close one opening of a file; forget it when no openings remain."""
        if file is None:
            raise MinirelError(Status.BADFILEPTR)
        try:
            file._close(self.buffer_manager)
        except MinirelError:
            pass
        if file.open_count == 0:
            if self._open_files.get(file.name) is not file:
                raise MinirelError(Status.BADFILEPTR)
            del self._open_files[file.name]