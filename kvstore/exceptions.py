"""Custom exceptions for the kvstore package."""

from typing import Optional


class KVStoreError(Exception):
    """Base exception for all kvstore errors."""


class MalformedStoreError(KVStoreError):
    """Raised when persisted text cannot be turned into an entry table."""

    def __init__(self, detail: str, source: Optional[str] = None) -> None:
        self.detail = detail
        self.source = source
        where = f" in '{source}'" if source else ""
        super().__init__(f"Malformed store data{where}: {detail}")


class StorageError(KVStoreError):
    """Raised when the backing file cannot be read, written or removed."""

    def __init__(self, operation: str, path: str, detail: str = "") -> None:
        self.operation = operation
        self.path = path
        msg = f"Storage error during '{operation}' on '{path}'"
        if detail:
            msg += f": {detail}"
        super().__init__(msg)
