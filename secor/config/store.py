"""Typed value store.

``ResolvedConfiguration`` is the immutable result of merging all layers. It
holds strings (and, when built programmatically, string arrays) and converts
them on read. Nothing mutates it after construction, so one instance can be
shared freely between readers.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping, Sequence
from types import MappingProxyType
from typing import Any

from .errors import ConfigTypeError, MissingKeyError
from .properties import LIST_DELIMITER, split_list

StoredValue = str | tuple[str, ...]

INT_MIN, INT_MAX = -(2**31), 2**31 - 1
LONG_MIN, LONG_MAX = -(2**63), 2**63 - 1

# Marks "no default supplied" so that None can be a legitimate default.
_MISSING: Any = object()

_DIGITS = {10: "0123456789", 16: "0123456789abcdefABCDEF"}


def _parse_integer(text: str) -> int:
    text = text.strip()
    sign = ""
    if text[:1] in ("-", "+"):
        sign, text = text[0], text[1:]
    base = 10
    if text[:2].lower() == "0x":
        base, text = 16, text[2:]
    # int() alone would also take non-ASCII digits and underscores
    if not text or any(char not in _DIGITS[base] for char in text):
        raise ValueError(f"invalid integer literal: {text!r}")
    return int(sign + text, base)


class ResolvedConfiguration:
    """
    Immutable key/value store with typed extraction.

    Usage:
        store = ResolvedConfiguration({"secor.consumer.threads": "7"})
        store.get_int("secor.consumer.threads")          # 7
        store.get_int("secor.generation", 1)             # 1 (absent)
        store.get_boolean("secor.upload.on.shutdown", False)
    """

    def __init__(self, values: Mapping[str, str | Sequence[str]] | None = None):
        frozen: dict[str, StoredValue] = {}
        for key, value in (values or {}).items():
            frozen[key] = value if isinstance(value, str) else tuple(str(v) for v in value)
        self._values: Mapping[str, StoredValue] = MappingProxyType(frozen)

    def __contains__(self, key: object) -> bool:
        return key in self._values

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ResolvedConfiguration):
            return NotImplemented
        return dict(self._values) == dict(other._values)

    def __repr__(self) -> str:
        return f"ResolvedConfiguration({len(self._values)} keys)"

    def contains(self, key: str) -> bool:
        """Check whether a key is defined by any layer."""
        return key in self._values

    def keys(self) -> list[str]:
        """All defined keys, sorted."""
        return sorted(self._values)

    def as_dict(self) -> dict[str, StoredValue]:
        """Return a plain copy of the stored values."""
        return dict(self._values)

    def require_key(self, key: str) -> None:
        """
        Fail fast if a required key is absent.

        Raises:
            MissingKeyError: If the key is not defined
        """
        if key not in self._values:
            raise MissingKeyError(key)

    def get_string(self, key: str, default: Any = _MISSING) -> Any:
        """
        Get a string value.

        Array values are presented joined with the list delimiter.

        Args:
            key: Configuration key
            default: Returned when the key is absent. If omitted the key is required.

        Raises:
            MissingKeyError: If the key is absent and no default was supplied
        """
        if key not in self._values:
            if default is _MISSING:
                raise MissingKeyError(key)
            return default
        value = self._values[key]
        if isinstance(value, tuple):
            return LIST_DELIMITER.join(value)
        return value

    def _get_integer(self, key: str, default: Any, low: int, high: int, expected: str) -> Any:
        if key not in self._values and default is not _MISSING:
            return default
        raw = self.get_string(key)
        try:
            value = _parse_integer(raw)
        except ValueError as e:
            raise ConfigTypeError(key, raw, expected) from e
        if not low <= value <= high:
            raise ConfigTypeError(key, raw, expected)
        return value

    def get_int(self, key: str, default: Any = _MISSING) -> int:
        """
        Get a 32-bit integer value.

        The default only covers absence; a malformed value always raises.

        Raises:
            MissingKeyError: If the key is absent and no default was supplied
            ConfigTypeError: If the value is not an integer in 32-bit range
        """
        return self._get_integer(key, default, INT_MIN, INT_MAX, "int")

    def get_long(self, key: str, default: Any = _MISSING) -> int:
        """Get a 64-bit integer value. Same contract as ``get_int``."""
        return self._get_integer(key, default, LONG_MIN, LONG_MAX, "long")

    def get_boolean(self, key: str, default: bool = False) -> bool:
        """Get a boolean value; absent or unparseable values fall back to the default."""
        value = self._values.get(key)
        if not isinstance(value, str):
            return default
        normalized = value.strip().lower()
        if normalized == "true":
            return True
        if normalized == "false":
            return False
        return default

    def get_string_array(self, key: str) -> list[str]:
        """Get an ordered list of strings; an absent key yields an empty list."""
        value = self._values.get(key)
        if value is None:
            return []
        if isinstance(value, tuple):
            return list(value)
        return split_list(value)
