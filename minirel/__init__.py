"""A small storage engine: paged files, a clock buffer pool, catalog records, join helpers and sample data."""

__version__ = "0.1.0"

__all__ = ["buffer", "dbfile", "dbtools", "errors", "joinhash", "records", "testdata"]