"""Store module for kvstore."""

from .matching import closest_key, compare, distance, sort_keys
from .store import KVStore
from .values import Multi, Single, Value

__all__ = [
    "KVStore",
    "Multi",
    "Single",
    "Value",
    "closest_key",
    "compare",
    "distance",
    "sort_keys",
]
