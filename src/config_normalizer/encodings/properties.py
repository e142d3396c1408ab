"""PropertiesEncoding: the line-oriented ``key=value`` properties format.

Output is one ``key=value`` line per entry, keys in code-point order, encoded
as UTF-8.  No timestamp comment is written, so equal mappings always encode
to identical bytes.

Escaping rules (applied to keys and values alike unless noted):

- ``\\``, ``=``, ``:``, ``#`` and ``!`` are prefixed with a backslash
- tab, newline, carriage return and form feed become ``\\t \\n \\r \\f``
- any other control character becomes ``\\uXXXX``
- a space is escaped everywhere in a key but only in first position in a
  value

``decode`` accepts the full line syntax: blank lines and ``#``/``!`` comment
lines are skipped, a line ending in an odd number of backslashes continues on
the next line, and the key ends at the first unescaped ``=``, ``:`` or
whitespace.
"""

from __future__ import annotations

import re
from collections.abc import Mapping

__all__ = ["PropertiesEncoding", "check_mapping"]

_CHAR_ESCAPES = {"\t": "\\t", "\n": "\\n", "\r": "\\r", "\f": "\\f"}
_CHAR_UNESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_SPECIAL = frozenset("\\=:#!")
_WHITESPACE = " \t\f"

# str.splitlines() would also break on \x1c-\x1e, U+2028 and the like.
_LINE_BREAK = re.compile(r"\r\n|\r|\n")
_ESCAPE_SEQUENCE = re.compile(r"\\(?:u([0-9a-fA-F]{4})|(.))", re.DOTALL)


def check_mapping(mapping: Mapping[str, str]) -> list[tuple[str, str]]:
    """Return the entries of ``mapping`` sorted by key.

    Raises:
        TypeError: If a key or value is not a ``str``.
    """
    for key, value in mapping.items():
        if not isinstance(key, str):
            msg = f"Property keys must be str, got {type(key).__name__}: {key!r}"
            raise TypeError(msg)
        if not isinstance(value, str):
            msg = (
                f"Property value for {key!r} must be str, "
                f"got {type(value).__name__}"
            )
            raise TypeError(msg)
    return sorted(mapping.items())


def _is_control(ch: str) -> bool:
    code = ord(ch)
    return code < 0x20 or 0x7F <= code <= 0x9F


def _escape(text: str, *, is_key: bool) -> str:
    out: list[str] = []
    for pos, ch in enumerate(text):
        if ch == " ":
            out.append("\\ " if is_key or pos == 0 else " ")
        elif ch in _CHAR_ESCAPES:
            out.append(_CHAR_ESCAPES[ch])
        elif ch in _SPECIAL:
            out.append("\\" + ch)
        elif _is_control(ch):
            out.append(f"\\u{ord(ch):04X}")
        else:
            out.append(ch)
    return "".join(out)


def _unescape(text: str) -> str:
    def _replace(match: re.Match[str]) -> str:
        hex_digits, char = match.groups()
        if hex_digits is not None:
            return chr(int(hex_digits, 16))
        if char == "u":
            msg = f"Malformed \\uXXXX escape in {text!r}"
            raise ValueError(msg)
        return _CHAR_UNESCAPES.get(char, char)

    return _ESCAPE_SEQUENCE.sub(_replace, text)


def _ends_escaped(line: str) -> bool:
    """True when ``line`` ends in an odd number of backslashes."""
    count = len(line) - len(line.rstrip("\\"))
    return count % 2 == 1


def _logical_lines(text: str) -> list[str]:
    lines: list[str] = []
    pending: str | None = None
    for raw in _LINE_BREAK.split(text):
        line = raw.lstrip(_WHITESPACE)
        if pending is None:
            if not line or line[0] in "#!":
                continue
        else:
            line = pending + line
        if _ends_escaped(line):
            pending = line[:-1]
            continue
        pending = None
        lines.append(line)
    if pending:
        lines.append(pending)
    return lines


def _split_entry(line: str) -> tuple[str, str]:
    key_end = value_start = len(line)
    i = 0
    while i < len(line):
        ch = line[i]
        if ch == "\\":
            i += 2
            continue
        if ch in "=:":
            key_end, value_start = i, i + 1
            break
        if ch in _WHITESPACE:
            key_end = i
            j = i
            while j < len(line) and line[j] in _WHITESPACE:
                j += 1
            if j < len(line) and line[j] in "=:":
                j += 1
            value_start = j
            break
        i += 1
    value = line[value_start:].lstrip(_WHITESPACE)
    return _unescape(line[:key_end]), _unescape(value)


class PropertiesEncoding:
    """Sorted ``key=value`` lines, UTF-8 encoded.  Registered as ``"standard"``."""

    name = "standard"

    def encode(self, mapping: Mapping[str, str]) -> bytes:
        lines = [
            f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}\n"
            for key, value in check_mapping(mapping)
        ]
        return "".join(lines).encode("utf-8")

    def decode(self, data: bytes) -> dict[str, str]:
        """Parse properties text; later duplicates of a key win."""
        text = data.decode("utf-8").removeprefix("\ufeff")
        result: dict[str, str] = {}
        for line in _logical_lines(text):
            key, value = _split_entry(line)
            result[key] = value
        return result

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
