#
# Copyright 2026 ABSA Group Limited
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.
#


"""NEON decoding / encoding for PHPStan configuration files.

Covers the subset PHPStan configs use:

- block mappings (``key: value`` / ``key:`` + indented block) and block
  sequences (``- item``), indented with tabs or spaces;
- ``- key: value`` items that open a mapping aligned after the dash;
- inline arrays ``[a, b]`` and ``{a: 1, b: 2}``, also spanning lines;
- ``#`` comments, ``'single'`` (``''`` escape) and ``"double"`` (JSON
  escapes) quoted strings;
- ``true``/``false``/``yes``/``no``/``on``/``off``, ``null``, integers and
  floats.

Entities (``Foo(arg)``) and multi-line ``'''`` strings raise
:class:`NeonError`. :func:`encode` writes block style with tab indentation.
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any


class NeonError(ValueError):
    def __init__(self, message: str, line: int | None = None):
        super().__init__(f"{message} on line {line}" if line else message)
        self.line = line


_TRUE = {"true", "True", "TRUE", "yes", "Yes", "YES", "on", "On", "ON"}
_FALSE = {"false", "False", "FALSE", "no", "No", "NO", "off", "Off", "OFF"}
_NULL = {"null", "Null", "NULL"}

_INT_RE = re.compile(r"[+-]?(?:0|[1-9][0-9]*)")
_PREFIXED_INT_RE = re.compile(r"[+-]?0(?:x[0-9a-fA-F]+|o[0-7]+|b[01]+)")
_FLOAT_RE = re.compile(r"[+-]?(?:[0-9]+\.[0-9]*|\.[0-9]+|[0-9]+)(?:[eE][+-]?[0-9]+)?")
_BARE_KEY_RE = re.compile(r"([^\s#\"',:=\[\]{}()-][^\n]*?|-[^\s\n][^\n]*?)[ \t]*:(?:[ \t]+|$)")
_BARE_STRING_RE = re.compile(r"[^\s#\"',:=\[\]{}()-][^\s#\"',:=\[\]{}()]*")

_NO_KEY = object()


def _scalar(raw: str) -> Any:
    if raw in _TRUE:
        return True
    if raw in _FALSE:
        return False
    if raw in _NULL:
        return None
    if _INT_RE.fullmatch(raw) or _PREFIXED_INT_RE.fullmatch(raw):
        return int(raw, 0)
    if ("." in raw or "e" in raw.lower()) and _FLOAT_RE.fullmatch(raw):
        return float(raw)
    return raw


# ---------------------------------------------------------------------------
# Decoding
# ---------------------------------------------------------------------------

@dataclass
class _Line:
    number: int
    indent: int
    text: str


def _strip_comment(raw: str, number: int) -> str:
    quote: str | None = None
    i = 0
    while i < len(raw):
        ch = raw[i]
        if quote:
            if quote == '"' and ch == "\\":
                i += 2
                continue
            if ch == quote:
                if quote == "'" and raw[i + 1:i + 2] == "'":
                    i += 2
                    continue
                quote = None
        elif ch in "'\"" and (i == 0 or raw[i - 1] in " \t[{(,:=-"):
            if raw.startswith(ch * 3, i):
                raise NeonError("Multi-line strings are not supported", number)
            quote = ch
        elif ch == "#" and (i == 0 or raw[i - 1] in " \t"):
            return raw[:i]
        i += 1
    if quote:
        raise NeonError("Unterminated string", number)
    return raw


def _tokenize(source: str) -> list[_Line]:
    lines: list[_Line] = []
    for number, raw in enumerate(source.splitlines(), start=1):
        stripped = _strip_comment(raw, number).rstrip()
        body = stripped.lstrip(" \t")
        if not body:
            continue
        lines.append(_Line(number, len(stripped) - len(body), body))
    return lines


def _is_item(text: str) -> bool:
    return text == "-" or text.startswith(("- ", "-\t"))


def _bracket_depth(text: str) -> int:
    depth = 0
    quote: str | None = None
    i = 0
    while i < len(text):
        ch = text[i]
        if quote:
            if quote == '"' and ch == "\\":
                i += 1
            elif ch == quote:
                quote = None
        elif ch in "'\"":
            quote = ch
        elif ch in "[{":
            depth += 1
        elif ch in "]}":
            depth -= 1
        i += 1
    return depth


class _InlineParser:
    """Parses a single inline value: scalar, quoted string, ``[..]`` or ``{..}``."""

    def __init__(self, text: str, number: int):
        self.text = text
        self.number = number
        self.i = 0

    def error(self, message: str) -> NeonError:
        return NeonError(message, self.number)

    def peek(self) -> str:
        return self.text[self.i] if self.i < len(self.text) else ""

    def skip_ws(self, newlines: bool = False) -> None:
        chars = " \t\n" if newlines else " \t"
        while self.i < len(self.text) and self.text[self.i] in chars:
            self.i += 1

    def parse(self) -> Any:
        self.skip_ws()
        value = self.value(inline=False)
        self.skip_ws(newlines=True)
        if self.i != len(self.text):
            raise self.error(f"Unexpected {self.text[self.i]!r}")
        return value

    def value(self, inline: bool) -> Any:
        ch = self.peek()
        if ch == "[":
            return self.collection("]")
        if ch == "{":
            return self.collection("}")
        if ch in ("'", '"'):
            return self.quoted()
        return self.literal(inline)

    def quoted(self) -> str:
        text, start = self.text, self.i
        q = text[start]
        if text.startswith(q * 3, start):
            raise self.error("Multi-line strings are not supported")

        if q == "'":
            parts: list[str] = []
            j = start + 1
            while True:
                k = text.find("'", j)
                if k == -1:
                    raise self.error("Unterminated string")
                if text[k + 1:k + 2] == "'":
                    parts.append(text[j:k + 1])
                    j = k + 2
                    continue
                parts.append(text[j:k])
                self.i = k + 1
                return "".join(parts)

        j = start + 1
        while j < len(text) and text[j] != '"':
            j += 2 if text[j] == "\\" else 1
        if j >= len(text):
            raise self.error("Unterminated string")
        try:
            value = json.loads(text[start:j + 1])
        except json.JSONDecodeError as exc:
            raise self.error(f"Invalid escape sequence in string: {exc.msg}") from exc
        self.i = j + 1
        return value

    def literal(self, inline: bool) -> Any:
        text, start = self.text, self.i
        while self.i < len(text):
            ch = text[self.i]
            if ch == "(":
                raise self.error("Entities are not supported")
            if inline:
                if ch in ",]})=\n":
                    break
                nxt = text[self.i + 1:self.i + 2]
                if ch == ":" and (nxt == "" or nxt in " \t\n,]}"):
                    break
            self.i += 1
        raw = text[start:self.i].rstrip(" \t")
        if not raw:
            raise self.error(f"Unexpected {self.peek()!r}" if self.peek() else "Unexpected end of value")
        return _scalar(raw)

    def collection(self, close: str) -> Any:
        self.i += 1
        items: list[tuple[Any, Any]] = []
        while True:
            self.skip_ws(newlines=True)
            ch = self.peek()
            if ch == close:
                self.i += 1
                break
            if ch == "":
                raise self.error("Unterminated array")

            value = self.value(inline=True)
            self.skip_ws()
            if self.peek() in (":", "="):
                self.i += 1
                self.skip_ws()
                if isinstance(value, (list, dict)) or value is None or isinstance(value, (bool, float)):
                    raise self.error("Invalid array key")
                if self.peek() in ("", ",", "\n", "]", "}"):
                    items.append((value, None))
                else:
                    items.append((value, self.value(inline=True)))
            else:
                items.append((_NO_KEY, value))

            self.skip_ws()
            if self.peek() in (",", "\n"):
                self.i += 1
            elif self.peek() != close:
                raise self.error(f"Expected ',' or {close!r}")
        if not items and close == "}":
            return {}
        return _assemble(items)


def _assemble(items: list[tuple[Any, Any]]) -> Any:
    if all(key is _NO_KEY for key, _ in items):
        return [value for _, value in items]
    result: dict[Any, Any] = {}
    next_index = 0
    for key, value in items:
        if key is _NO_KEY:
            key = next_index
        result[key] = value
        if isinstance(key, int):
            next_index = max(next_index, key + 1)
    return result


def _split_key(text: str, number: int) -> tuple[Any, str] | None:
    """Split ``key: rest`` into its parts; ``None`` if *text* is not a mapping entry."""
    if text[:1] in ("'", '"'):
        parser = _InlineParser(text, number)
        key = parser.quoted()
        rest = text[parser.i:].lstrip(" \t")
        if rest == ":" or rest.startswith((": ", ":\t")):
            return key, rest[1:].strip(" \t")
        return None
    match = _BARE_KEY_RE.match(text)
    if match is None:
        return None
    key = _scalar(match.group(1))
    return key if isinstance(key, int) else match.group(1), text[match.end():]


class _BlockParser:
    def __init__(self, lines: list[_Line]):
        self.lines = lines
        self.pos = 0

    def peek(self) -> _Line | None:
        return self.lines[self.pos] if self.pos < len(self.lines) else None

    def document(self) -> Any:
        first = self.peek()
        if first is None:
            return None
        value = self.block(first.indent)
        extra = self.peek()
        if extra is not None:
            raise NeonError("Bad indentation", extra.number)
        return value

    def block(self, indent: int) -> Any:
        line = self.peek()
        assert line is not None
        if _is_item(line.text):
            return self.sequence(indent)
        if _split_key(line.text, line.number) is not None:
            return self.mapping(indent)
        self.pos += 1
        return self.inline(line.text, line)

    def nested(self, indent: int) -> Any:
        nxt = self.peek()
        if nxt is None or nxt.indent <= indent:
            return None
        return self.block(nxt.indent)

    def no_deeper(self, indent: int) -> None:
        nxt = self.peek()
        if nxt is not None and nxt.indent > indent:
            raise NeonError("Bad indentation", nxt.number)

    def inline(self, text: str, line: _Line) -> Any:
        if text[:1] in "[{" and _bracket_depth(text) > 0:
            parts = [text]
            while _bracket_depth("\n".join(parts)) > 0:
                nxt = self.peek()
                if nxt is None:
                    raise NeonError("Unterminated array", line.number)
                parts.append(nxt.text)
                self.pos += 1
            text = "\n".join(parts)
        return _InlineParser(text, line.number).parse()

    def sequence(self, indent: int) -> list[Any]:
        items: list[Any] = []
        while (line := self.peek()) is not None and line.indent == indent and _is_item(line.text):
            rest = line.text[1:].lstrip(" \t")
            if not rest:
                self.pos += 1
                items.append(self.nested(indent))
                continue
            if rest[:1] not in "[{" and _split_key(rest, line.number) is not None:
                # "- key: value" opens a mapping aligned after the dash.
                inner = indent + len(line.text) - len(rest)
                self.lines[self.pos] = _Line(line.number, inner, rest)
                items.append(self.mapping(inner))
                continue
            self.pos += 1
            items.append(self.inline(rest, line))
            self.no_deeper(indent)
        return items

    def mapping(self, indent: int) -> dict[Any, Any]:
        result: dict[Any, Any] = {}
        while (line := self.peek()) is not None:
            if line.indent < indent:
                break
            if line.indent > indent:
                raise NeonError("Bad indentation", line.number)
            if _is_item(line.text):
                raise NeonError("Unexpected list item", line.number)
            split = _split_key(line.text, line.number)
            if split is None:
                raise NeonError("Expected 'key: value'", line.number)
            key, rest = split
            if key in result:
                raise NeonError(f"Duplicate key {key!r}", line.number)
            self.pos += 1

            if rest:
                result[key] = self.inline(rest, line)
                self.no_deeper(indent)
                continue
            nxt = self.peek()
            if nxt is not None and nxt.indent == indent and _is_item(nxt.text):
                result[key] = self.sequence(indent)
            else:
                result[key] = self.nested(indent)
        return result


def decode(source: str) -> Any:
    """Decode NEON *source*; an empty document decodes to ``None``."""
    return _BlockParser(_tokenize(source)).document()


def decode_file(path: str) -> Any:
    with open(path, encoding="utf-8") as fh:
        return decode(fh.read())


# ---------------------------------------------------------------------------
# Encoding
# ---------------------------------------------------------------------------

def _encode_string(value: str) -> str:
    if _BARE_STRING_RE.fullmatch(value) and _scalar(value) == value:
        return value
    if "'" not in value and "\n" not in value:
        return f"'{value}'"
    return json.dumps(value, ensure_ascii=False)


def _encode_inline(value: Any) -> str:
    if value is None:
        return "null"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if isinstance(value, (int, float)):
        return repr(value)
    if isinstance(value, str):
        return _encode_string(value)
    if isinstance(value, dict):
        if not value:
            return "{}"
        return "{" + ", ".join(f"{_encode_key(k)}: {_encode_inline(v)}" for k, v in value.items()) + "}"
    if isinstance(value, (list, tuple)):
        return "[" + ", ".join(_encode_inline(v) for v in value) + "]"
    raise NeonError(f"Cannot encode value of type {type(value).__name__}")


def _encode_key(key: Any) -> str:
    if isinstance(key, bool) or not isinstance(key, (str, int)):
        raise NeonError(f"Cannot encode key {key!r}")
    return str(key) if isinstance(key, int) else _encode_string(key)


def _is_block(value: Any) -> bool:
    return isinstance(value, (dict, list, tuple)) and len(value) > 0


def _encode_block(value: Any, depth: int, indent: str) -> list[str]:
    pad = indent * depth
    lines: list[str] = []
    if isinstance(value, dict):
        for key, item in value.items():
            if _is_block(item):
                lines.append(f"{pad}{_encode_key(key)}:")
                lines.extend(_encode_block(item, depth + 1, indent))
            else:
                lines.append(f"{pad}{_encode_key(key)}: {_encode_inline(item)}")
    elif isinstance(value, (list, tuple)):
        for item in value:
            if _is_block(item):
                lines.append(f"{pad}-")
                lines.extend(_encode_block(item, depth + 1, indent))
            else:
                lines.append(f"{pad}- {_encode_inline(item)}")
    else:
        lines.append(pad + _encode_inline(value))
    return lines


def encode(value: Any, indent: str = "\t") -> str:
    """Encode *value* as block-style NEON terminated by a newline."""
    if not _is_block(value):
        return _encode_inline(value) + "\n"
    return "\n".join(_encode_block(value, 0, indent)) + "\n"
