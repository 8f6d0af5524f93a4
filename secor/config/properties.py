"""Properties file codec.

Reads the line-oriented ``key=value`` format used by Secor configuration files:

    # comment
    ! also a comment
    kafka.seed.broker.host = localhost
    zookeeper.quorum = zk1:2181,\\
                       zk2:2181
    include = secor.common.properties

Array values are a single string joined with ``LIST_DELIMITER``; splitting
happens at read time (see ``split_list``).
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterator
from pathlib import Path

from .errors import ConfigLoadError

logger = logging.getLogger(__name__)

LIST_DELIMITER = ","
INCLUDE_KEY = "include"

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
# Only CR, LF and CRLF end a line; \f and Unicode separators belong to the value
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def split_list(value: str, delimiter: str = LIST_DELIMITER) -> list[str]:
    """Split a delimiter-joined value into stripped elements.

    An empty (or all-whitespace) value yields an empty list.
    """
    if not value.strip():
        return []
    return [part.strip() for part in value.split(delimiter)]


def _ends_with_continuation(line: str) -> bool:
    trailing = len(line) - len(line.rstrip("\\"))
    return trailing % 2 == 1


def _logical_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield (line number, logical line) pairs with continuations joined."""
    pending: str | None = None
    start = 0
    for lineno, raw in enumerate(_LINE_BREAK.split(text), start=1):
        stripped = raw.lstrip(_WHITESPACE)
        if pending is None:
            if not stripped or stripped[0] in "#!":
                continue
            start = lineno
            current = stripped
        else:
            current = pending + stripped

        if _ends_with_continuation(current):
            pending = current[:-1]
            continue

        pending = None
        yield start, current

    if pending is not None:
        yield start, pending


def _unescape(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\":
            out.append(char)
            i += 1
            continue

        i += 1
        if i >= len(text):
            break
        char = text[i]
        if char == "u":
            digits = text[i + 1 : i + 5]
            if len(digits) != 4 or any(d not in "0123456789abcdefABCDEF" for d in digits):
                raise ValueError(f"Malformed \\uxxxx encoding: '\\u{digits}'")
            out.append(chr(int(digits, 16)))
            i += 5
            continue
        out.append(_ESCAPES.get(char, char))
        i += 1
    return "".join(out)


def _rstrip_unescaped(text: str) -> str:
    end = len(text)
    while end and text[end - 1] in _WHITESPACE:
        head = text[: end - 1]
        if (len(head) - len(head.rstrip("\\"))) % 2 == 1:
            break
        end -= 1
    return text[:end]


def _split_entry(line: str) -> tuple[str, str]:
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            break
        i += 1
    i = min(i, len(line))

    key = line[:i]
    rest = line[i:].lstrip(_WHITESPACE)
    if rest[:1] in ("=", ":"):
        rest = rest[1:].lstrip(_WHITESPACE)
    # Escaped whitespace such as "\n" or "\ " is part of the value, only raw whitespace is trimmed
    return _unescape(key), _unescape(_rstrip_unescaped(rest))


def iter_properties(text: str) -> Iterator[tuple[str, str]]:
    """
    Iterate over the (key, value) entries of properties text in file order.

    Duplicate keys are yielded every time they appear; ``include`` entries are
    yielded like any other key.

    Raises:
        ValueError: If an entry contains a malformed escape sequence
    """
    for lineno, line in _logical_lines(text):
        try:
            yield _split_entry(line)
        except ValueError as e:
            raise ValueError(f"line {lineno}: {e}") from e


def parse_properties(text: str) -> dict[str, str]:
    """Parse properties text into a dict, later definitions winning. Includes are not followed."""
    return dict(iter_properties(text))


def load_properties_file(path: str | Path, _chain: frozenset[Path] = frozenset()) -> dict[str, str]:
    """
    Load a properties file, following ``include`` directives.

    Included files are resolved relative to the including file's directory and
    are loaded at the point the directive appears, so definitions after the
    directive override the included ones.

    Args:
        path: Path to the properties file

    Returns:
        Mapping of key to raw string value

    Raises:
        ConfigLoadError: If the file (or an include) is missing, unreadable,
            malformed, or part of an include cycle
    """
    path = Path(path)
    resolved = path.resolve()
    if resolved in _chain:
        raise ConfigLoadError(f"Include cycle detected at {path}", str(path))
    if not path.is_file():
        raise ConfigLoadError(f"Configuration file not found: {path}", str(path))

    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as e:
        raise ConfigLoadError(f"Configuration file {path} is not valid UTF-8: {e}", str(path)) from e
    except OSError as e:
        raise ConfigLoadError(f"Error reading configuration file {path}: {e}", str(path)) from e

    chain = _chain | {resolved}
    values: dict[str, str] = {}
    try:
        for key, value in iter_properties(text):
            if key != INCLUDE_KEY:
                values[key] = value
                continue
            for name in split_list(value):
                include_path = Path(name)
                if not include_path.is_absolute():
                    include_path = path.parent / include_path
                logger.debug(f"Including {include_path} from {path}")
                values.update(load_properties_file(include_path, chain))
    except ValueError as e:
        raise ConfigLoadError(f"Error parsing configuration file {path}: {e}", str(path)) from e

    return values
