"""Reader and writer for flat ``key=value`` property files.

Follows the ``java.util.Properties`` text format:

* lines whose first non-blank character is ``#`` or ``!`` are comments
* key and value are separated by ``=``, ``:`` or whitespace
* a line ending in an odd number of backslashes continues on the next line,
  whose leading whitespace is dropped
* ``\\t``, ``\\n``, ``\\r``, ``\\f`` and ``\\uXXXX`` escapes are decoded; any other
  escaped character stands for itself
"""

from __future__ import annotations

import re
from typing import Iterable, Iterator, Mapping

_WHITESPACE = " \t\f"
_SEPARATORS = "=:"
_ESCAPES = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}
_LINE_BREAK = re.compile(r"\r\n|\r|\n")


def _logical_lines(lines: Iterable[str]) -> Iterator[str]:
    pending: list[str] = []
    for line in lines:
        stripped = line.lstrip(_WHITESPACE)
        if not pending and (not stripped or stripped[0] in "#!"):
            continue

        trailing = len(stripped) - len(stripped.rstrip("\\"))
        if trailing % 2:
            pending.append(stripped[:-1])
            continue

        pending.append(stripped)
        yield "".join(pending)
        pending = []

    if pending:
        yield "".join(pending)


def _unescape(text: str) -> str:
    out: list[str] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char != "\\" or i + 1 == len(text):
            out.append(char)
            i += 1
            continue

        escaped = text[i + 1]
        if escaped == "u":
            digits = text[i + 2 : i + 6]
            if len(digits) != 4:
                raise ValueError(f"Malformed \\uxxxx encoding in {text!r}")
            try:
                out.append(chr(int(digits, 16)))
            except ValueError as exc:
                raise ValueError(f"Malformed \\uxxxx encoding in {text!r}") from exc
            i += 6
        else:
            out.append(_ESCAPES.get(escaped, escaped))
            i += 2
    return "".join(out)


def _split_entry(line: str) -> tuple[str, str]:
    key_end = len(line)
    i = 0
    while i < len(line):
        char = line[i]
        if char == "\\":
            i += 2
            continue
        if char in _SEPARATORS or char in _WHITESPACE:
            key_end = i
            break
        i += 1

    rest = line[key_end:].lstrip(_WHITESPACE)
    if rest and rest[0] in _SEPARATORS:
        rest = rest[1:].lstrip(_WHITESPACE)
    return line[:key_end], rest


def parse_properties(text: str) -> dict[str, str]:
    """Parse property-file *text* into a dict.

    Later entries for the same key replace earlier ones. Raises ``ValueError``
    for malformed ``\\u`` escapes.

    >>> parse_properties("a=1\\nb : two\\n# comment\\nc three")
    {'a': '1', 'b': 'two', 'c': 'three'}
    """
    entries: dict[str, str] = {}
    for line in _logical_lines(_LINE_BREAK.split(text)):
        raw_key, raw_value = _split_entry(line)
        entries[_unescape(raw_key)] = _unescape(raw_value)
    return entries


def _escape(text: str, *, is_key: bool) -> str:
    out: list[str] = []
    for index, char in enumerate(text):
        if char == "\\":
            out.append("\\\\")
        elif char in "\t\n\r\f":
            out.append("\\" + "tnrf"["\t\n\r\f".index(char)])
        elif char == " " and (is_key or index == 0):
            out.append("\\ ")
        elif is_key and char in "=:#!":
            out.append("\\" + char)
        elif not is_key and index == 0 and char in "#!":
            out.append("\\" + char)
        else:
            out.append(char)
    return "".join(out)


def format_entry(key: str, value: str) -> str:
    """Render one ``key=value`` line that ``parse_properties`` reads back.

    >>> format_entry("db.password", "ENC(abc=)")
    'db.password=ENC(abc=)'
    """
    return f"{_escape(key, is_key=True)}={_escape(value, is_key=False)}"


def dump_properties(entries: Mapping[str, str]) -> str:
    """Render *entries* as property-file text, one line per key."""
    return "".join(f"{format_entry(k, v)}\n" for k, v in entries.items())
