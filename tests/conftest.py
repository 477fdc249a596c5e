"""
Pytest Configuration and Fixtures

This module provides shared fixtures and configuration for all tests.
"""

import os

import pytest

from kvstore.store.store import KVStore
from kvstore.persistence.codec import StoreCodec


# ============================================================================
# Backing File Fixtures
# ============================================================================

@pytest.fixture
def store_path(tmp_path) -> str:
    """Path of a backing file that does not exist yet."""
    return os.path.join(str(tmp_path), "unittest.kvs")


# ============================================================================
# KVStore Fixtures
# ============================================================================

@pytest.fixture
def store(store_path: str) -> KVStore:
    """Create a fresh, empty KVStore bound to a temporary file."""
    return KVStore(store_path)


@pytest.fixture
def populated_store(store: KVStore) -> KVStore:
    """
    Store with one scalar and two list entries.

    Contents:
        hello -> "world"
        head  -> ["shoulders", "knees", "and", "toes"]
        heap  -> ["one", "two", "three", "four", "five", "six", "seven"]
    """
    store.set("hello", "world")
    store.set("head", ["shoulders", "knees", "and", "toes"])
    store.set("heap", "one")
    store.append("heap", ["two", "three", "four", "five", "six", "seven"])
    return store


@pytest.fixture
def countries_store(store: KVStore) -> KVStore:
    """Store mapping country names to codes (plus one code to a name)."""
    store.set("United States of America", "US")
    store.set("Great Britain", "UK")
    store.set("Switzerland", "CH")
    store.set("FR", "France")
    store.set("Netherlands", "NL")
    store.set("Germany", "DE")
    store.set("Italy", "IT")
    return store


# ============================================================================
# Codec Fixtures
# ============================================================================

@pytest.fixture
def codec() -> StoreCodec:
    """Create a StoreCodec with explicit defaults."""
    return StoreCodec(indent=4, escape_non_ascii=True)


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Configure custom pytest markers."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line(
        "markers", "integration: marks tests as integration tests"
    )
