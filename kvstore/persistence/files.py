"""
Backing File Helpers

Thin wrappers around the filesystem used by KVStore:

- read_text(): chunked read of the whole file
- write_text(): overwrite the whole file
- exists() / size() / remove(): existence, size and deletion queries

OSError is re-raised as StorageError and undecodable content as
MalformedStoreError, so callers only deal with the kvstore exceptions.
"""

import logging
import os

from ..config.settings import settings
from ..exceptions import MalformedStoreError, StorageError

logger = logging.getLogger(__name__)


def exists(path: str) -> bool:
    """Check whether path exists as a regular file."""
    return os.path.isfile(path)


def size(path: str) -> int:
    """
    Get the size of a file in bytes.

    Returns:
        The file size, or -1 if the file does not exist
    """
    if not exists(path):
        return -1
    try:
        return os.path.getsize(path)
    except OSError as exc:
        raise StorageError("size", path, str(exc)) from exc


def read_text(path: str, chunk_size: int = None, encoding: str = None) -> str:
    """
    Read a whole file in fixed-size chunks and decode it once.

    Args:
        path: File to read
        chunk_size: Bytes per read (default from settings.READ_CHUNK_SIZE)
        encoding: Text encoding (default from settings.ENCODING)

    Returns:
        The decoded file content

    Raises:
        StorageError: If the file cannot be opened or read
        MalformedStoreError: If the content is not valid in the encoding
    """
    chunk_size = chunk_size if chunk_size is not None else settings.READ_CHUNK_SIZE
    encoding = encoding if encoding is not None else settings.ENCODING

    chunks = []
    try:
        with open(path, "rb") as handle:
            while True:
                chunk = handle.read(chunk_size)
                if not chunk:
                    break
                chunks.append(chunk)
    except OSError as exc:
        raise StorageError("load", path, str(exc)) from exc

    data = b"".join(chunks)
    logger.debug(f"Read {len(data)} bytes in {len(chunks)} chunk(s) from {path}")

    try:
        return data.decode(encoding)
    except UnicodeDecodeError as exc:
        raise MalformedStoreError(f"cannot decode as {encoding}", path) from exc


def write_text(path: str, text: str, encoding: str = None) -> None:
    """
    Replace the content of path with text.

    Raises:
        StorageError: If the file cannot be written
    """
    encoding = encoding if encoding is not None else settings.ENCODING
    try:
        with open(path, "w", encoding=encoding) as handle:
            handle.write(text)
    except OSError as exc:
        raise StorageError("save", path, str(exc)) from exc


def remove(path: str) -> bool:
    """
    Delete a file if it exists.

    Returns:
        True if the file was deleted, False if it did not exist
    """
    if not exists(path):
        return False
    try:
        os.remove(path)
    except OSError as exc:
        raise StorageError("drop", path, str(exc)) from exc
    return True
