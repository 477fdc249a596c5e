"""Persistence module for kvstore."""

from . import files
from .codec import StoreCodec

__all__ = ["StoreCodec", "files"]
