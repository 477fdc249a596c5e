"""
kvstore: JSON Key/Value Store

An in-memory key/value store whose values are a single string or an
ordered list of strings, persisted as one flat JSON file.
"""

from .exceptions import KVStoreError, MalformedStoreError, StorageError
from .store.matching import compare, distance
from .store.store import KVStore
from .store.values import Multi, Single

__version__ = "0.8.1"

__all__ = [
    "KVStore",
    "KVStoreError",
    "MalformedStoreError",
    "Multi",
    "Single",
    "StorageError",
    "compare",
    "distance",
    "library_version",
]


def library_version() -> str:
    """Return the version of this library."""
    return __version__
