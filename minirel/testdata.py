"""Sample relations used to load and exercise a database: soaps, stars and benchmark tuples."""

from __future__ import annotations

import argparse
import random
import struct
import sys
from dataclasses import dataclass
from pathlib import Path

_ENCODING = "latin-1"
_RANDOMIZE_PASSES = 10
_DEFAULT_SEED = 1

_SOAP_FORMAT = struct.Struct("<i28s4sf")
_STAR_FORMAT = struct.Struct("<i20s12si")
_ROW_FORMAT = struct.Struct("<iiii84s")
_INT_FORMAT = struct.Struct("<i")


def _encode(text: str, width: int, field: str) -> bytes:
    raw = text.encode(_ENCODING)
    if len(raw) >= width:
        raise ValueError(f"{field} {text!r} does not fit in {width} bytes")
    return raw


def _decode(raw: bytes) -> str:
    return raw.split(b"\0", 1)[0].decode(_ENCODING)


@dataclass(frozen=True)
class Soap:
    """A tuple of the soaps relation."""

    soapid: int
    sname: str
    network: str
    rating: float

    SIZE = _SOAP_FORMAT.size

    def pack(self) -> bytes:
        """Serialize to the fixed-width on-disk layout."""
        return _SOAP_FORMAT.pack(
            self.soapid,
            _encode(self.sname, 28, "soap name"),
            _encode(self.network, 4, "network"),
            self.rating,
        )

    @classmethod
    def unpack(cls, data: bytes) -> Soap:
        """Build a soap from its on-disk bytes."""
        soapid, sname, network, rating = _SOAP_FORMAT.unpack(data)
        return cls(soapid, _decode(sname), _decode(network), rating)


@dataclass(frozen=True)
class Star:
    """A tuple of the stars relation."""

    starid: int
    stname: str
    plays: str
    soapid: int

    SIZE = _STAR_FORMAT.size

    def pack(self) -> bytes:
        """Serialize to the fixed-width on-disk layout."""
        return _STAR_FORMAT.pack(
            self.starid,
            _encode(self.stname, 20, "star name"),
            _encode(self.plays, 12, "role"),
            self.soapid,
        )

    @classmethod
    def unpack(cls, data: bytes) -> Star:
        """Build a star from its on-disk bytes."""
        starid, stname, plays, soapid = _STAR_FORMAT.unpack(data)
        return cls(starid, _decode(stname), _decode(plays), soapid)


@dataclass(frozen=True)
class BenchmarkRow:
    """A tuple of the rel500 and rel1000 benchmark relations."""

    unique1: int
    unique2: int
    hundred1: int
    hundred2: int
    dummy: str

    SIZE = _ROW_FORMAT.size

    def pack(self) -> bytes:
        """Serialize: the label is NUL-terminated and the rest of the field is blanks."""
        label = _encode(self.dummy, 84, "dummy label") + b"\0"
        return _ROW_FORMAT.pack(
            self.unique1,
            self.unique2,
            self.hundred1,
            self.hundred2,
            label.ljust(84, b" "),
        )

    @classmethod
    def unpack(cls, data: bytes) -> BenchmarkRow:
        """Build a row from its on-disk bytes."""
        u1, u2, h1, h2, dummy = _ROW_FORMAT.unpack(data)
        return cls(u1, u2, h1, h2, _decode(dummy))

    def __str__(self) -> str:
        return f"{self.unique1}\t{self.unique2}\t{self.hundred1}\t{self.hundred2}\t{self.dummy}"


_SOAPS = (
    (0, "Days of Our Lives", "NBC", 7.02),
    (1, "General Hospital", "ABC", 9.81),
    (2, "Guiding Light", "CBS", 4.02),
    (3, "One Life to Live", "ABC", 2.31),
    (4, "Santa Barbara", "NBC", 6.44),
    (5, "The Young and the Restless", "CBS", 5.50),
    (6, "As the World Turns", "CBS", 7.00),
    (7, "Another World", "NBC", 1.97),
    (8, "All My Children", "ABC", 8.82),
)

_STARS = (
    (0, "Hayes, Kathryn", "Kim", 6),
    (1, "DeFreitas, Scott", "Andy", 6),
    (2, "Grahn, Nancy", "Julia", 4),
    (3, "Linder, Kate", "Esther", 5),
    (4, "Cooper, Jeanne", "Katherine", 5),
    (5, "Ehlers, Beth", "Harley", 2),
    (6, "Novak, John", "Keith", 4),
    (7, "Elliot, Patricia", "Renee", 3),
    (8, "Hutchinson, Fiona", "Gabrielle", 5),
    (9, "Carey, Phil", "Asa", 5),
    (10, "Walker, Nicholas", "Max", 3),
    (11, "Ross, Charlotte", "Eve", 0),
    (12, "Anthony, Eugene", "Stan", 8),
    (13, "Douglas, Jerry", "John", 5),
    (14, "Holbrook, Anna", "Sharlene", 7),
    (15, "Hammer, Jay", "Fletcher", 2),
    (16, "Sloan, Tina", "Lillian", 2),
    (17, "DuClos, Danielle", "Lisa", 3),
    (18, "Tuck, Jessica", "Megan", 3),
    (19, "Ashford, Matthew", "Jack", 0),
    (20, "Novak, John", "Keith", 4),
    (21, "Larson, Jill", "Opal", 8),
    (22, "McKinnon, Mary", "Denise", 7),
    (23, "Barr, Julia", "Brooke", 8),
    (24, "Borlenghi, Matt", "Brian", 8),
    (25, "Hughes, Finola", "Anna", 1),
    (26, "Rogers, Tristan", "Robert", 1),
    (27, "Richardson, Cheryl", "Jenny", 1),
    (28, "Evans, Mary Beth", "Kayla", 0),
)


def soap_records() -> list[Soap]:
    """Return the nine soaps of the sample database."""
    return [Soap(*fields) for fields in _SOAPS]


def star_records() -> list[Star]:
    """Return the twenty-nine stars of the sample database."""
    return [Star(*fields) for fields in _STARS]


def write_soaps_and_stars(directory: str | Path) -> tuple[Path, Path]:
    """Write soaps.data and stars.data into the directory; return their paths."""
    base = Path(directory)
    soaps_path = base / "soaps.data"
    stars_path = base / "stars.data"
    stars_path.write_bytes(b"".join(star.pack() for star in star_records()))
    soaps_path.write_bytes(b"".join(soap.pack() for soap in soap_records()))
    return soaps_path, stars_path


def generate_wi_tuples(count: int, rng: random.Random | None = None) -> list[int]:
    """Return the numbers 0..count-1 shuffled by repeated random swaps."""
    if count < 0:
        raise ValueError("tuple count must not be negative")
    rng = rng if rng is not None else random.Random()
    nums = list(range(count))
    for _ in range(_RANDOMIZE_PASSES):
        for i in range(count):
            new_pos = rng.randrange(count)
            nums[i], nums[new_pos] = nums[new_pos], nums[i]
    return nums


def write_wi_tuples(
    path: str | Path, count: int, rng: random.Random | None = None
) -> list[int]:
    """Write shuffled unique1 tuples as 4-byte integers; return the values written."""
    nums = generate_wi_tuples(count, rng)
    Path(path).write_bytes(b"".join(_INT_FORMAT.pack(n) for n in nums))
    return nums


def _benchmark_rows(name: str, count: int, rng: random.Random) -> list[BenchmarkRow]:
    return [
        BenchmarkRow(
            rng.randrange(count) + 1,
            rng.randrange(count) + 1,
            rng.randrange(100) + 1,
            rng.randrange(100) + 1,
            f"{name}.{i:3d}",
        )
        for i in range(count)
    ]


def write_benchmark_relations(
    directory: str | Path, rng: random.Random | None = None
) -> tuple[Path, Path]:
    """Write rel500.data and rel1000.data into the directory; return their paths."""
    rng = rng if rng is not None else random.Random(_DEFAULT_SEED)
    base = Path(directory)
    paths = []
    for name, count in (("rel500", 500), ("rel1000", 1000)):
        path = base / f"{name}.data"
        rows = _benchmark_rows(name, count, rng)
        path.write_bytes(b"".join(row.pack() for row in rows))
        paths.append(path)
    return paths[0], paths[1]


def read_benchmark_relation(path: str | Path) -> list[BenchmarkRow]:
    """Read every row of a benchmark relation file."""
    data = Path(path).read_bytes()
    if len(data) % BenchmarkRow.SIZE:
        raise ValueError(f"{path}: truncated row at end of file")
    return [
        BenchmarkRow.unpack(data[start : start + BenchmarkRow.SIZE])
        for start in range(0, len(data), BenchmarkRow.SIZE)
    ]


def main(argv: list[str] | None = None) -> int:
    """Generate or show sample data files."""
    parser = argparse.ArgumentParser(prog="minirel-testdata")
    commands = parser.add_subparsers(dest="command", required=True)

    soaps = commands.add_parser("soaps", help="write soaps.data and stars.data")
    soaps.add_argument("directory", nargs="?", default=".")

    bench = commands.add_parser("benchmark", help="write rel500.data and rel1000.data")
    bench.add_argument("directory", nargs="?", default=".")
    bench.add_argument("--seed", type=int, default=_DEFAULT_SEED)

    wi = commands.add_parser("wi", help="write shuffled unique1 tuples")
    wi.add_argument("count", type=int)
    wi.add_argument("output")
    wi.add_argument("--seed", type=int, default=None)

    show = commands.add_parser("show", help="print the rows of benchmark relations")
    show.add_argument("paths", nargs="+")

    args = parser.parse_args(argv)
    try:
        if args.command == "soaps":
            write_soaps_and_stars(args.directory)
        elif args.command == "benchmark":
            write_benchmark_relations(args.directory, random.Random(args.seed))
        elif args.command == "wi":
            write_wi_tuples(args.output, args.count, random.Random(args.seed))
            print("Done.")
        else:
            for path in args.paths:
                for row in read_benchmark_relation(path):
                    print(row)
    except (OSError, ValueError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1
    return 0