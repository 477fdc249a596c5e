"""
Stored Value Definitions

Every entry in the store holds exactly one of two value shapes:

- Single: one string
- Multi:  an ordered, non-empty sequence of strings

Both are immutable; mutators build a new value instead of editing one in
place, so a value handed to a caller can never change what the store holds.
"""

from dataclasses import dataclass
from typing import List, Tuple, Union


@dataclass(frozen=True)
class Single:
    """
    A scalar value.

    Attributes:
        value: The stored string
    """
    value: str

    @property
    def depth(self) -> int:
        return 1

    @property
    def first(self) -> str:
        return self.value

    def to_list(self) -> List[str]:
        return [self.value]


@dataclass(frozen=True)
class Multi:
    """
    An ordered list of values.

    Attributes:
        values: The stored strings in insertion order (never empty)
    """
    values: Tuple[str, ...]

    def __post_init__(self):
        """Normalize to a tuple and reject empty lists."""
        object.__setattr__(self, "values", tuple(self.values))
        if not self.values:
            raise ValueError("Multi requires at least one value")

    @property
    def depth(self) -> int:
        return len(self.values)

    @property
    def first(self) -> str:
        return self.values[0]

    def to_list(self) -> List[str]:
        return list(self.values)

    def __contains__(self, item: str) -> bool:
        return item in self.values

    def appended(self, value: str) -> "Multi":
        """Return a new Multi with value added at the end."""
        return Multi(self.values + (value,))


Value = Union[Single, Multi]


def to_plain(value: Value) -> Union[str, List[str]]:
    """Convert a stored value to plain JSON-compatible data."""
    if isinstance(value, Single):
        return value.value
    return value.to_list()
