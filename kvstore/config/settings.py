"""
KVStore Configuration Settings

This module contains all configuration constants for the kvstore package.
Values marked with an environment variable can be overridden at import time.
"""

import os
from dataclasses import dataclass


@dataclass
class Settings:
    """Store configuration settings."""

    # Backing file settings
    DEFAULT_FILENAME: str = os.environ.get("KVSTORE_FILE", "default.kvs")
    READ_CHUNK_SIZE: int = int(os.environ.get("KVSTORE_READ_CHUNK_SIZE", "4096"))
    ENCODING: str = "utf-8"

    # Serialization settings
    PRETTY_INDENT: int = 4
    ESCAPE_NON_ASCII: bool = os.environ.get("KVSTORE_ESCAPE_NON_ASCII", "true").lower() == "true"

    # Logging settings
    DEBUG: bool = os.environ.get("KVSTORE_DEBUG", "false").lower() == "true"
    LOG_LEVEL: str = os.environ.get("KVSTORE_LOG_LEVEL", "INFO")


# Global settings instance
settings = Settings()
