"""
Store Codec Module

This module converts between the in-memory entry table and its JSON text form.

Persisted Format:
    A flat JSON object. Each value is either a JSON string or a non-empty
    JSON array of strings:

        {"hello":["world","of","d"],"key":"value"}

    Any other value type, an empty array, an empty key or a top-level value
    that is not an object is rejected with MalformedStoreError.
"""

import json
import logging
from typing import Dict, Mapping, Optional

from ..config.settings import settings
from ..exceptions import MalformedStoreError
from ..store.values import Multi, Single, Value, to_plain

logger = logging.getLogger(__name__)

COMPACT_SEPARATORS = (",", ":")


class StoreCodec:
    """
    Encoder/decoder for the persisted store format.

    Two output modes are offered:
        - compact, optionally escaping non-ASCII characters (on-disk form)
        - pretty, indented and unescaped (display form)

    Attributes:
        indent: Indentation width used for pretty output
        escape_non_ascii: Default escaping for compact output
    """

    def __init__(self, indent: int = None, escape_non_ascii: bool = None):
        self.indent = indent if indent is not None else settings.PRETTY_INDENT
        self.escape_non_ascii = (
            escape_non_ascii if escape_non_ascii is not None else settings.ESCAPE_NON_ASCII
        )

    def serialize(self, table: Mapping[str, Value], pretty: bool = False) -> str:
        """
        Serialize an entry table.

        Args:
            table: Mapping of key to stored value
            pretty: Indent the output and leave non-ASCII characters as is

        Returns:
            JSON text with keys in table order
        """
        data = {key: to_plain(value) for key, value in table.items()}
        if pretty:
            return json.dumps(data, indent=self.indent, ensure_ascii=False)
        return json.dumps(
            data,
            separators=COMPACT_SEPARATORS,
            ensure_ascii=self.escape_non_ascii,
        )

    def encode_value(self, value: Value, escape_non_ascii: bool = None) -> str:
        """Compact JSON text of a single stored value."""
        if escape_non_ascii is None:
            escape_non_ascii = self.escape_non_ascii
        return json.dumps(
            to_plain(value),
            separators=COMPACT_SEPARATORS,
            ensure_ascii=escape_non_ascii,
        )

    def encode_entry(self, key: str, value: Value) -> str:
        """Compact, unescaped ``{"key":value}`` fragment for one entry."""
        return json.dumps(
            {key: to_plain(value)},
            separators=COMPACT_SEPARATORS,
            ensure_ascii=False,
        )

    def parse(self, text: str, source: Optional[str] = None) -> Dict[str, Value]:
        """
        Parse JSON text into an entry table.

        Args:
            text: The persisted JSON text
            source: Where the text came from, used in error messages

        Returns:
            Dict of key to Single/Multi in document order

        Raises:
            MalformedStoreError: If the text is not valid store data
        """
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            logger.debug(f"JSON decode failed for {source or '<text>'}: {exc}")
            raise MalformedStoreError(f"invalid JSON: {exc}", source) from exc

        if not isinstance(data, dict):
            raise MalformedStoreError(
                f"expected a JSON object, got {type(data).__name__}", source
            )

        table: Dict[str, Value] = {}
        for key, raw in data.items():
            if not key:
                raise MalformedStoreError("empty key", source)
            table[key] = self._parse_value(key, raw, source)
        return table

    def _parse_value(self, key: str, raw, source: Optional[str]) -> Value:
        """Validate one raw JSON value and wrap it."""
        if isinstance(raw, str):
            return Single(raw)

        if isinstance(raw, list):
            if not raw:
                raise MalformedStoreError(f"empty array for key '{key}'", source)
            if not all(isinstance(item, str) for item in raw):
                raise MalformedStoreError(
                    f"array for key '{key}' contains non-string items", source
                )
            return Multi(tuple(raw))

        raise MalformedStoreError(
            f"unsupported value type {type(raw).__name__} for key '{key}'", source
        )
