# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""String-to-value parsers used by the standard parameter descriptors."""

from __future__ import annotations

import os
import re
from pathlib import Path
from typing import Final

from ..errors import ConfigurationInvalidError

_WHITESPACE_RE: Final[re.Pattern[str]] = re.compile(r"\s+")
_COMMA_OR_SPACE_RE: Final[re.Pattern[str]] = re.compile(r"[,\s]+")
_KEY_TERMINATORS: Final[frozenset[str]] = frozenset("=: \t\f")
_SIMPLE_ESCAPES: Final[dict[str, str]] = {"t": "\t", "n": "\n", "r": "\r", "f": "\f"}


def parse_bool(raw: str | None) -> bool:
    """Return ``True`` only for a case-insensitive ``"true"``.

    Args:
        raw: Raw text supplied by the caller.

    Returns:
        bool: Parsed flag.
    """

    return raw is not None and raw.strip().lower() == "true"


def parse_verbose(raw: str | None) -> bool:
    """Parse a verbose flag where a bare or ``"null"`` value enables it.

    Args:
        raw: Raw text supplied by the caller.

    Returns:
        bool: Parsed flag.
    """

    if raw is None or raw.strip().lower() in {"", "null"}:
        return True
    return parse_bool(raw)


def parse_int(raw: str, *, key: str = "value") -> int:
    """Parse ``raw`` as a base-10 integer.

    Args:
        raw: Raw text supplied by the caller.
        key: Parameter id used in the error message.

    Returns:
        int: Parsed integer.

    Raises:
        ConfigurationInvalidError: If ``raw`` is not an integer.
    """

    try:
        return int(raw.strip())
    except ValueError as exc:
        raise ConfigurationInvalidError(
            f"Parameter {key} expects an integer but got {raw!r}",
            f"Pass a whole number for {key}.",
        ) from exc


def split_arguments(raw: str) -> list[str]:
    """Split ``raw`` on whitespace, keeping double-quoted runs together.

    Quote characters toggle the quoted state and are not kept. An explicitly
    quoted empty string yields an empty argument.

    Args:
        raw: Raw argument text.

    Returns:
        list[str]: Parsed arguments.
    """

    tokens: list[str] = []
    current: list[str] = []
    quoted = False
    pending = False
    for char in raw:
        if char == '"':
            quoted = not quoted
            pending = True
        elif not quoted and char.isspace():
            if pending or current:
                tokens.append("".join(current))
            current = []
            pending = False
        else:
            current.append(char)
    if pending or current:
        tokens.append("".join(current))
    return tokens


def split_whitespace(raw: str) -> list[str]:
    """Split ``raw`` on runs of whitespace, dropping empty tokens.

    Args:
        raw: Raw option text.

    Returns:
        list[str]: Parsed tokens.
    """

    return [token for token in _WHITESPACE_RE.split(raw) if token]


def split_comma_set(raw: str) -> set[str]:
    """Split ``raw`` on commas and whitespace into a set of names.

    Args:
        raw: Raw comma separated text.

    Returns:
        set[str]: Non-empty names.
    """

    return {token for token in _COMMA_OR_SPACE_RE.split(raw) if token}


def split_path_list(raw: str) -> list[Path]:
    """Split ``raw`` on :data:`os.pathsep` and newlines into paths.

    Surrounding double quotes on each entry are removed.

    Args:
        raw: Raw search-path text.

    Returns:
        list[Path]: Parsed paths in order.
    """

    entries: list[Path] = []
    for line in raw.splitlines():
        for token in line.split(os.pathsep):
            cleaned = token.strip().strip('"')
            if cleaned:
                entries.append(Path(cleaned))
    return entries


def _logical_lines(raw: str) -> list[str]:
    """Join backslash-continued lines of a properties document.

    Args:
        raw: Properties text.

    Returns:
        list[str]: Logical lines with continuation markers removed.
    """

    logical: list[str] = []
    buffer = ""
    continuing = False
    for physical in raw.splitlines():
        line = physical.lstrip() if continuing else physical
        if not continuing and line.lstrip()[:1] in {"#", "!"}:
            continue
        trailing = len(line) - len(line.rstrip("\\"))
        if trailing % 2 == 1:
            buffer += line[:-1]
            continuing = True
            continue
        logical.append(buffer + line)
        buffer = ""
        continuing = False
    if buffer:
        logical.append(buffer)
    return logical


def _unescape(text: str) -> str:
    """Resolve properties-style backslash escapes in ``text``.

    Args:
        text: Escaped key or value.

    Returns:
        str: Unescaped text.
    """

    result: list[str] = []
    index = 0
    while index < len(text):
        char = text[index]
        if char != "\\" or index + 1 >= len(text):
            result.append(char)
            index += 1
            continue
        marker = text[index + 1]
        if marker == "u" and index + 6 <= len(text):
            try:
                result.append(chr(int(text[index + 2 : index + 6], 16)))
            except ValueError:
                result.append(marker)
                index += 2
                continue
            index += 6
            continue
        result.append(_SIMPLE_ESCAPES.get(marker, marker))
        index += 2
    return "".join(result)


def _split_property(line: str) -> tuple[str, str]:
    """Split a logical properties line into key and value.

    Args:
        line: Logical line with leading whitespace allowed.

    Returns:
        tuple[str, str]: Escaped key and value text.
    """

    text = line.lstrip()
    index = 0
    while index < len(text):
        char = text[index]
        if char == "\\":
            index += 2
            continue
        if char in _KEY_TERMINATORS:
            break
        index += 1
    key = text[:index]
    rest = text[index:].lstrip(" \t\f")
    if rest[:1] in {"=", ":"}:
        rest = rest[1:].lstrip(" \t\f")
    return key, rest


def parse_properties(raw: str) -> dict[str, str]:
    """Parse Java-properties formatted text into an ordered mapping.

    Supports ``key=value``, ``key:value`` and ``key value`` forms, ``#`` and
    ``!`` comments, backslash escapes and line continuations.

    Args:
        raw: Properties text.

    Returns:
        dict[str, str]: Parsed properties in document order.
    """

    properties: dict[str, str] = {}
    for line in _logical_lines(raw):
        if not line.strip():
            continue
        key, value = _split_property(line)
        properties[_unescape(key)] = _unescape(value)
    return properties


__all__ = [
    "parse_bool",
    "parse_int",
    "parse_properties",
    "parse_verbose",
    "split_arguments",
    "split_comma_set",
    "split_path_list",
    "split_whitespace",
]
