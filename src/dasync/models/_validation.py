"""Shared validation helpers for frozen dataclass models.

Private module, not part of the public API. Used exclusively by
``__post_init__`` methods in sibling model modules to enforce runtime
type constraints so invalid instances never escape the constructor.
"""

from __future__ import annotations

import re
from typing import Any


_HEX_PATTERN = re.compile(r"^0x[0-9a-fA-F]*$")
_DECIMAL_PATTERN = re.compile(r"^-?[0-9]+$")


def validate_instance(value: Any, expected: type, name: str) -> None:
    """Raise ``TypeError`` if *value* is not an instance of *expected*."""
    if not isinstance(value, expected):
        article = "an" if expected.__name__[0] in "AEIOUaeiou" else "a"
        raise TypeError(f"{name} must be {article} {expected.__name__}, got {type(value).__name__}")


def validate_non_negative_int(value: Any, name: str) -> None:
    """Raise if *value* is not a non-negative ``int`` (``bool`` excluded)."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise TypeError(f"{name} must be an int, got {type(value).__name__}")
    if value < 0:
        raise ValueError(f"{name} must be non-negative")


def validate_optional_non_negative_int(value: Any, name: str) -> None:
    """Like ``validate_non_negative_int`` but accepts ``None``."""
    if value is not None:
        validate_non_negative_int(value, name)


def validate_str_no_null(value: Any, name: str) -> None:
    """Raise if *value* is not a ``str`` or contains null bytes."""
    if not isinstance(value, str):
        raise TypeError(f"{name} must be a str, got {type(value).__name__}")
    if "\x00" in value:
        raise ValueError(f"{name} contains null bytes")


def validate_hex_str(value: Any, name: str) -> None:
    """Raise if *value* is not a ``0x``-prefixed hexadecimal string."""
    validate_str_no_null(value, name)
    if not _HEX_PATTERN.match(value):
        raise ValueError(f"{name} must be a 0x-prefixed hex string, got {value!r}")


def validate_decimal_str(value: Any, name: str) -> None:
    """Raise if *value* is not a base-10 integer string."""
    validate_str_no_null(value, name)
    if not _DECIMAL_PATTERN.match(value):
        raise ValueError(f"{name} must be a decimal integer string, got {value!r}")
