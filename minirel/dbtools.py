"""Removal of a database directory after confirmation."""

from __future__ import annotations

import shutil
import sys
from typing import TextIO


def destroy_database(path: str, confirm: bool) -> bool:
    """Remove the database directory and all it holds if confirmed.

    Returns whether the directory was removed.
    """
    if not confirm:
        return False
    shutil.rmtree(path)
    return True


def _read_word(stream: TextIO) -> str | None:
    for line in stream:
        words = line.split()
        if words:
            return words[0]
    return None


def main(argv: list[str] | None = None) -> int:
    """Ask for confirmation on standard input, then destroy the named database."""
    args = sys.argv[1:] if argv is None else argv
    if not args:
        print("Usage: dbdestroy dbname", file=sys.stderr)
        return 1
    path = args[0]
    print(f"Enter y if you want to delete {path}/*")
    answer = _read_word(sys.stdin)
    if answer and answer[0] in "yY":
        print(f"Executing rm -r {path}")
        try:
            destroy_database(path, True)
        except OSError as exc:
            print(f"rm: {path}: {exc.strerror or exc}", file=sys.stderr)
            return 1
        return 0
    print("Database not destroyed.")
    return 0