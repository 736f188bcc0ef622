"""Small JSON reader and writer used for settings and world metadata.

Values are plain Python objects: ``None``, ``bool``, ``int``, ``float``,
``str``, ``list`` and ``dict``. Integers are limited to the signed 64-bit
range. Strings are written as they are, without escaping.
"""

from __future__ import annotations

import math
import os
from typing import Any, Union

JSONValue = Union[None, bool, int, float, str, list, dict]

_WHITESPACE = frozenset(" \t\n\v\f\r")
_DIGITS = frozenset("0123456789")
_ESCAPES = {
    '"': '"',
    "\\": "\\",
    "/": "/",
    "b": "\b",
    "f": "\f",
    "n": "\n",
    "r": "\r",
    "t": "\t",
}
_INT_MIN = -(2**63)
_INT_MAX = 2**63 - 1


class JSONError(ValueError):
    """Raised for malformed JSON text or a value of an unexpected kind."""


def stringify(value: JSONValue) -> str:
    """Render a value as indented JSON text, object keys in sorted order."""
    parts: list[str] = []
    _write(value, parts, 1)
    return "".join(parts)


def _write(value: Any, out: list[str], level: int) -> None:
    indent = " " * (level * 4)
    closing = " " * ((level - 1) * 4)

    if value is None:
        out.append("null")
    elif isinstance(value, bool):
        out.append("true" if value else "false")
    elif isinstance(value, int):
        out.append(str(value))
    elif isinstance(value, float):
        out.append(format(value, "g"))
    elif isinstance(value, str):
        out.append(f'"{value}"')
    elif isinstance(value, (list, tuple)):
        out.append("[\n")
        for position, item in enumerate(value):
            if position:
                out.append(",\n")
            out.append(indent)
            _write(item, out, level + 1)
        out.append("\n" + closing + "]")
    elif isinstance(value, dict):
        out.append("{\n")
        for position, key in enumerate(sorted(value)):
            if position:
                out.append(",\n")
            out.append(f'{indent}"{key}": ')
            _write(value[key], out, level + 1)
        out.append("\n" + closing + "}")
    else:
        raise TypeError(f"Cannot represent {type(value).__name__} as JSON")


def parse(text: str) -> JSONValue:
    """Parse the first JSON value in ``text``; anything after it is ignored."""
    return _Parser(text).value()


def parse_file(path: str | os.PathLike) -> JSONValue:
    """Read a file and parse its JSON content."""
    try:
        with open(path, encoding="utf-8") as handle:
            text = handle.read()
    except OSError as exc:
        raise JSONError(f"Could not open file: {os.fspath(path)}") from exc
    return parse(text)


def get_as(value: Any, kind: type | None) -> Any:
    """Return ``value`` if it holds exactly the JSON kind ``kind``.

    ``bool`` and ``int`` are kept apart, and an integer is not a float.
    Pass ``None`` (or ``type(None)``) to expect null.
    """
    if kind is None:
        kind = type(None)
    if kind is bool:
        matches = isinstance(value, bool)
    elif kind is int:
        matches = isinstance(value, int) and not isinstance(value, bool)
    else:
        matches = isinstance(value, kind)
    if not matches:
        raise JSONError(
            f"Type mismatch: expected {kind.__name__}, got {type(value).__name__}"
        )
    return value


class _Parser:
    def __init__(self, text: str) -> None:
        self.text = text
        self.pos = 0

    def peek(self) -> str:
        return self.text[self.pos] if self.pos < len(self.text) else ""

    def skip_whitespace(self) -> None:
        while self.pos < len(self.text) and self.text[self.pos] in _WHITESPACE:
            self.pos += 1

    def expect(self, word: str) -> None:
        if self.text[self.pos : self.pos + len(word)] != word:
            raise JSONError(f"Expected '{word}' at position {self.pos}")
        self.pos += len(word)

    def value(self) -> JSONValue:
        self.skip_whitespace()
        if self.pos >= len(self.text):
            raise JSONError("Unexpected end of input")

        char = self.text[self.pos]
        if char == "n":
            self.expect("null")
            return None
        if char == "t":
            self.expect("true")
            return True
        if char == "f":
            self.expect("false")
            return False
        if char == '"':
            return self.string()
        if char == "[":
            return self.array()
        if char == "{":
            return self.object()
        if char in _DIGITS or char == "-":
            return self.number()
        raise JSONError(f"Invalid JSON value at position {self.pos}")

    def string(self) -> str:
        if self.peek() != '"':
            raise JSONError(f"Expected '\"' at position {self.pos}")
        self.pos += 1

        text = self.text
        chars: list[str] = []
        while self.pos < len(text) and text[self.pos] != '"':
            char = text[self.pos]
            if char == "\\":
                self.pos += 1
                if self.pos >= len(text):
                    raise JSONError("Unexpected end of input in string")
                try:
                    chars.append(_ESCAPES[text[self.pos]])
                except KeyError:
                    raise JSONError("Invalid escape character in string") from None
            else:
                chars.append(char)
            self.pos += 1

        if self.pos >= len(text):
            raise JSONError("Unterminated string")
        self.pos += 1
        return "".join(chars)

    def skip_digits(self) -> None:
        while self.peek() in _DIGITS:
            self.pos += 1

    def number(self) -> int | float:
        start = self.pos
        if self.peek() == "-":
            self.pos += 1
        self.skip_digits()

        is_integer = True
        if self.peek() == ".":
            is_integer = False
            self.pos += 1
            self.skip_digits()
        if self.peek() in ("e", "E"):
            is_integer = False
            self.pos += 1
            if self.peek() in ("+", "-"):
                self.pos += 1
            self.skip_digits()

        literal = self.text[start : self.pos]
        return _to_int(literal) if is_integer else _to_float(literal)

    def array(self) -> list:
        self.skip_whitespace()
        if self.peek() != "[":
            raise JSONError(f"Expected '[' at position {self.pos}")
        self.pos += 1

        items: list = []
        self.skip_whitespace()
        if self.peek() == "]":
            self.pos += 1
            return items

        while True:
            items.append(self.value())
            self.skip_whitespace()
            char = self.peek()
            if char == "]":
                self.pos += 1
                return items
            if char != ",":
                raise JSONError(f"Expected ',' or ']' at position {self.pos}")
            self.pos += 1

    def object(self) -> dict:
        self.skip_whitespace()
        if self.peek() != "{":
            raise JSONError(f"Expected '{{' at position {self.pos}")
        self.pos += 1

        members: dict = {}
        self.skip_whitespace()
        if self.peek() == "}":
            self.pos += 1
            return members

        while True:
            self.skip_whitespace()
            if self.peek() != '"':
                raise JSONError(f"Expected '\"' at position {self.pos}")
            key = self.string()

            self.skip_whitespace()
            if self.peek() != ":":
                raise JSONError(f"Expected ':' at position {self.pos}")
            self.pos += 1

            members[key] = self.value()
            self.skip_whitespace()
            char = self.peek()
            if char == "}":
                self.pos += 1
                return members
            if char != ",":
                raise JSONError(f"Expected ',' or '}}' at position {self.pos}")
            self.pos += 1


def _to_int(literal: str) -> int:
    if literal in ("", "-"):
        raise JSONError(f"Invalid number: {literal!r}")
    number = int(literal)
    if not _INT_MIN <= number <= _INT_MAX:
        raise JSONError(f"Integer value out of range: {literal}")
    return number


def _to_float(literal: str) -> float:
    # Like strtod, accept the longest prefix that forms a number.
    for end in range(len(literal), 0, -1):
        try:
            number = float(literal[:end])
        except ValueError:
            continue
        mantissa = literal[:end].split("e")[0].split("E")[0]
        if math.isinf(number) or (number == 0.0 and any(c in "123456789" for c in mantissa)):
            raise JSONError(f"Floating-point value out of range: {literal}")
        return number
    raise JSONError(f"Invalid number: {literal!r}")