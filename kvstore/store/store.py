"""
Key-Value Store Module

This module implements the in-memory store and its persistence glue.

The store maps non-empty string keys to either a single string or an
ordered list of strings, and keeps three derived counters in step with
every mutation:

- count:     number of keys
- max_depth: largest number of values under any key (0 when empty)
- dirty:     whether memory differs from the last load/save
"""

import logging
from typing import Any, Dict, Iterator, List, Optional, Sequence, Tuple, Union

from ..config.settings import settings
from ..persistence import files
from ..persistence.codec import StoreCodec
from .matching import closest_key, sort_keys
from .values import Multi, Single, Value

logger = logging.getLogger(__name__)


class KVStore:
    """
    In-memory key/value store backed by a single JSON file.

    Values are Single (one string) or Multi (an ordered list of strings).
    All accessors return plain strings/lists built on demand, never the
    stored objects themselves.

    Invalid input (empty or None keys and values) is never an error:
    mutators ignore it and accessors return None. Only malformed data in
    the backing file raises, at load time.

    The store is not thread-safe. Callers sharing one instance between
    threads must serialize access themselves.

    Usage:
        store = KVStore("countries.kvs")
        store.set("FR", "France")
        store.append("FR", "Francia")
        store.get_all("FR")   # ["France", "Francia"]
        store.save()

    Attributes:
        filename: Path of the backing file (read-only)
    """

    def __init__(self, filename: str = None, codec: StoreCodec = None, autoload: bool = True):
        """
        Initialize the store.

        Args:
            filename: Backing file (default from settings.DEFAULT_FILENAME)
            codec: StoreCodec used for load/save and textual accessors
            autoload: Load the backing file if it exists

        Raises:
            MalformedStoreError: If the existing backing file is not valid
        """
        self._filename = filename if filename else settings.DEFAULT_FILENAME
        self._codec = codec if codec is not None else StoreCodec()

        self._table: Dict[str, Value] = {}
        self._key_count = 0
        self._max_depth = 0
        self._dirty = True

        if autoload and files.exists(self._filename):
            self.load()

    # -- Persistence --

    def load(self) -> bool:
        """
        Load the backing file into memory, replacing the current entries.

        Returns:
            True if a non-empty file was loaded. False if the file is
            missing or empty, in which case the store is reset to empty.

        Raises:
            MalformedStoreError: If the file content is not valid store data.
                The in-memory entries are left untouched.
            StorageError: If the file cannot be read
        """
        if files.size(self._filename) > 0:
            text = files.read_text(self._filename)
            table = self._codec.parse(text, source=self._filename)

            self._table = table
            self._key_count = len(table)
            self._recalculate_max_depth()
            self._dirty = False
            logger.info(f"Loaded {self._key_count} key(s) from {self._filename}")
            return True

        logger.debug(f"Nothing to load from {self._filename}, starting empty")
        self._reset()
        return False

    def save(self) -> None:
        """
        Write all entries to the backing file, overwriting it.

        Raises:
            StorageError: If the file cannot be written
        """
        files.write_text(self._filename, self._codec.serialize(self._table))
        self._dirty = False
        logger.info(f"Saved {self._key_count} key(s) to {self._filename}")

    def drop(self) -> bool:
        """
        Delete the backing file. Entries in memory are not affected.

        Returns:
            True if the file existed and was deleted, False otherwise
        """
        if files.remove(self._filename):
            self._dirty = True
            logger.info(f"Dropped {self._filename}")
            return True
        return False

    def clear(self) -> None:
        """Remove all entries from memory. The backing file is not affected."""
        self._reset()

    def clone(self, filename: str = None) -> "KVStore":
        """
        Copy this store, optionally bound to another backing file.

        Nothing is read from or written to disk. Saving the clone overwrites
        its backing file.

        Args:
            filename: Backing file of the copy (default: same as this store)

        Returns:
            A new KVStore with the same entries, counters and dirty flag
        """
        other = KVStore(filename or self._filename, codec=self._codec, autoload=False)
        other._table = dict(self._table)
        other._key_count = self._key_count
        other._max_depth = self._max_depth
        other._dirty = self._dirty
        return other

    # -- Read operations --

    def has_key(self, key: str) -> bool:
        """Check if key is stored. Empty or None keys are never stored."""
        if not key:
            return False
        return key in self._table

    def get(self, key: str) -> Optional[str]:
        """
        Retrieve the value stored for key as one string.

        Returns:
            The string itself for a single value, a compact JSON array for
            multiple values, or None if key is not stored
        """
        if not self.has_key(key):
            return None

        value = self._table[key]
        if isinstance(value, Single):
            return value.value
        return self._codec.encode_value(value)

    def get_first(self, key: str) -> Optional[str]:
        """Retrieve the first (or only) value stored for key, or None."""
        if not self.has_key(key):
            return None
        return self._table[key].first

    def get_all(self, key: str) -> Optional[List[str]]:
        """Retrieve every value stored for key as a new list, or None."""
        if not self.has_key(key):
            return None
        return self._table[key].to_list()

    def depth(self, key: str) -> int:
        """Number of values stored for key, 0 if key is not stored."""
        if not self.has_key(key):
            return 0
        return self._table[key].depth

    def entry(self, key: str) -> Optional[str]:
        """Entry for key as an unescaped ``{"key":value}`` JSON fragment, or None."""
        if not self.has_key(key):
            return None
        return self._codec.encode_entry(key, self._table[key])

    def tuple(self, key: str) -> Optional[List[str]]:
        """Entry for key flattened to ``[key, value, value, ...]``, or None."""
        if not self.has_key(key):
            return None
        return [key] + self._table[key].to_list()

    def keys(self) -> List[str]:
        """All keys in insertion order."""
        return list(self._table)

    def sorted_keys(self) -> List[str]:
        """All keys ordered by matching.compare()."""
        return sort_keys(self._table)

    # -- Write operations --

    def set(self, key: str, value: Union[str, Sequence[str]]) -> None:
        """
        Store value for key, replacing whatever was stored before.

        Args:
            key: The key to store (empty key is a no-op)
            value: A string, or a sequence of strings. For a sequence the
                first item replaces the current value and the rest are
                appended as with append().
        """
        if value is None:
            return
        if isinstance(value, str):
            self._set_one(key, value)
        else:
            self._set_many(key, list(value))

    def append(self, key: str, value: Union[str, Sequence[str]]) -> None:
        """
        Add value(s) to the list stored for key.

        A missing key is created. A key holding one value is promoted to
        a list of [old, new] (even if both are equal). A key already
        holding a list only gets values not yet in that list.

        Args:
            key: The key to append to (empty key is a no-op)
            value: A non-empty string, or a sequence of strings. A sequence
                for a missing key is stored as given.
        """
        if value is None:
            return
        if isinstance(value, str):
            self._append_one(key, value)
        else:
            self._append_many(key, list(value))

    def remove(self, key: str) -> None:
        """Remove the entry for key. No-op if key is not stored."""
        if not self.has_key(key):
            return

        removed = self._table.pop(key)
        self._key_count -= 1
        self._dirty = True

        if self._key_count == 0:
            self._max_depth = 0
            return
        if removed.depth == self._max_depth:
            self._recalculate_max_depth()

    def _set_one(self, key: str, value: str) -> None:
        if not key:
            return

        current = self._table.get(key)
        if current is not None:
            # Only a list holding the maximum depth can lower it
            shrinking = current.depth > 1 and current.depth == self._max_depth
            self._table[key] = Single(value)
            if shrinking:
                self._recalculate_max_depth()
        else:
            self._table[key] = Single(value)
            self._key_count += 1
            if self._max_depth < 1:
                self._max_depth = 1

        self._dirty = True

    def _set_many(self, key: str, values: List[str]) -> None:
        if not key or not values:
            return

        self._set_one(key, values[0])
        if len(values) > 1:
            self._append_many(key, values[1:])

    def _append_one(self, key: str, value: str) -> None:
        if not key or not value:
            return

        current = self._table.get(key)
        if current is None:
            self._set_one(key, value)
            return

        if isinstance(current, Multi):
            if value in current:
                return
            updated = current.appended(value)
        else:
            updated = Multi((current.value, value))

        self._table[key] = updated
        if updated.depth > self._max_depth:
            self._max_depth = updated.depth
        self._dirty = True

    def _append_many(self, key: str, values: List[str]) -> None:
        if not key or not values:
            return

        if key in self._table:
            for value in values:
                self._append_one(key, value)
            return
        if len(values) == 1:
            self._set_one(key, values[0])
            return

        self._table[key] = Multi(tuple(values))
        self._key_count += 1
        if len(values) > self._max_depth:
            self._max_depth = len(values)
        self._dirty = True

    # -- Swap operations --

    def swap(self, key: str, unique: bool = False) -> bool:
        """
        Exchange key and value of one entry.

        The old value becomes the new key and the old key its value. If the
        new key is already stored, the old key is appended to its values
        (raising its depth), unless unique is set, in which case nothing
        changes and the swap fails.

        An entry whose value equals its own key is left as it is and counts
        as swapped (failed with unique). Appending the key under itself and
        then removing it would delete the entry.

        Args:
            key: The entry to swap
            unique: Fail instead of appending to an existing key

        Returns:
            True on success. False if key is not stored, holds more than
            one value, holds an empty value, or (with unique) its value is
            already a key.
        """
        if not self.has_key(key):
            return False

        current = self._table[key]
        if current.depth > 1:
            return False

        value = current.first
        if not value:
            return False
        if value == key:
            return not unique

        if self.has_key(value):
            if unique:
                return False
            self._append_one(value, key)
            self.remove(key)
        else:
            # One key added and one removed, count and depth are unchanged
            self._table[value] = Single(key)
            del self._table[key]
            self._dirty = True

        return True

    def swap_all(self, unique: bool = False, atomic: bool = False) -> bool:
        """
        Exchange key and value of every entry.

        Only allowed while every entry holds a single value (max_depth <= 1).
        Keys are processed in insertion order. Swapping one entry can give
        another key a second value (when a value equals a key and unique is
        not set); that key then fails to swap when its turn comes.

        By default a failure aborts the pass WITHOUT undoing the entries
        already swapped, leaving a mix of swapped and unswapped entries.
        Pass atomic=True to restore the previous state on failure instead.

        Args:
            unique: Passed to swap() for every entry
            atomic: Roll back all changes if any entry fails to swap

        Returns:
            True if every entry was swapped (or the store is empty)
        """
        if self._key_count == 0:
            return True
        if self._max_depth > 1:
            logger.debug(f"swap_all refused: max depth is {self._max_depth}")
            return False

        snapshot = self._snapshot() if atomic else None

        for key in list(self._table):
            if not self.swap(key, unique):
                if snapshot is not None:
                    self._restore(snapshot)
                    logger.debug(f"swap_all rolled back after failing on '{key}'")
                else:
                    logger.warning(f"swap_all aborted on '{key}', store is partially swapped")
                return False

        return True

    # -- Matching --

    def closest(self, query: str, penalize_substitution: bool = False) -> Optional[str]:
        """
        Find the stored key most similar to query.

        An exact match is returned as is, and a store with one key always
        returns that key. Otherwise all keys are ranked by edit distance,
        then length difference, then the character distance at the first
        differing position (see matching.closest_key()).

        Args:
            query: The string to match
            penalize_substitution: Charge 2 instead of 1 for substitutions

        Returns:
            The closest key, or None if query is empty or the store is empty
        """
        if not query or self.empty:
            return None
        if self.has_key(query):
            return query
        if self._key_count == 1:
            return next(iter(self._table))

        return closest_key(query, self.sorted_keys(), penalize_substitution)

    # -- Properties --

    @property
    def filename(self) -> str:
        return self._filename

    @property
    def empty(self) -> bool:
        return self._key_count <= 0

    @property
    def count(self) -> int:
        return self._key_count

    @property
    def max_depth(self) -> int:
        return self._max_depth

    @property
    def is_dirty(self) -> bool:
        return self._dirty

    @property
    def is_clean(self) -> bool:
        return not self._dirty

    @property
    def size(self) -> int:
        """Size of the backing file in bytes, -1 if it does not exist."""
        return files.size(self._filename)

    def get_stats(self) -> Dict[str, Any]:
        """
        Get statistics about the store.

        Returns:
            Dictionary containing:
            - filename: Backing file path
            - count: Number of keys
            - max_depth: Largest number of values under one key
            - dirty: Whether memory differs from the backing file
            - file_size: Backing file size in bytes (-1 if absent)
        """
        return {
            "filename": self._filename,
            "count": self._key_count,
            "max_depth": self._max_depth,
            "dirty": self._dirty,
            "file_size": self.size,
        }

    # -- Internal helpers --

    def _reset(self) -> None:
        self._table = {}
        self._key_count = 0
        self._max_depth = 0
        self._dirty = True

    def _recalculate_max_depth(self) -> None:
        """Rescan all entries for the largest depth."""
        if not self._table:
            self._max_depth = 0
            return
        self._max_depth = max(value.depth for value in self._table.values())

    def _snapshot(self) -> Tuple[Dict[str, Value], int, int, bool]:
        return dict(self._table), self._key_count, self._max_depth, self._dirty

    def _restore(self, snapshot: Tuple[Dict[str, Value], int, int, bool]) -> None:
        self._table, self._key_count, self._max_depth, self._dirty = snapshot

    # -- Python protocols --

    def __len__(self) -> int:
        return self._key_count

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.has_key(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def __str__(self) -> str:
        """All entries as indented JSON without escaping."""
        return self._codec.serialize(self._table, pretty=True)

    def __repr__(self) -> str:
        return f"KVStore(filename={self._filename!r}, count={self._key_count})"
