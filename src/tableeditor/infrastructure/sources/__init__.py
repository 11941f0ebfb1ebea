from .http_source import HttpPageSource, SnapshotPageSource
from .memory_source import InMemoryPageSource, slice_page
from .records import normalize_record

__all__ = [
    "HttpPageSource",
    "InMemoryPageSource",
    "SnapshotPageSource",
    "normalize_record",
    "slice_page",
]
