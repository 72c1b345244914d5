# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the raw string parsers."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from appbundler.errors import ConfigurationInvalidError
from appbundler.params.parsers import (
    parse_bool,
    parse_int,
    parse_properties,
    parse_verbose,
    split_arguments,
    split_comma_set,
    split_path_list,
    split_whitespace,
)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [("true", True), ("TRUE ", True), ("yes", False), ("", False), (None, False)],
)
def test_parse_bool_only_accepts_true(raw: str | None, expected: bool) -> None:
    assert parse_bool(raw) is expected


def test_parse_verbose_treats_bare_flag_as_enabled() -> None:
    assert parse_verbose("") is True
    assert parse_verbose("null") is True
    assert parse_verbose("false") is False


def test_parse_int_reports_the_key() -> None:
    assert parse_int(" 8000 ") == 8000
    with pytest.raises(ConfigurationInvalidError, match="debugPort"):
        parse_int("eighty", key="debugPort")


def test_split_arguments_keeps_quoted_runs() -> None:
    assert split_arguments('a "b c" ""') == ["a", "b c", ""]
    assert split_arguments("  --flag   value ") == ["--flag", "value"]


def test_split_whitespace_and_comma_set() -> None:
    assert split_whitespace(" -Xmx1g\t-ea\n") == ["-Xmx1g", "-ea"]
    assert split_comma_set("java.sql, java.xml  java.desktop") == {"java.sql", "java.xml", "java.desktop"}


def test_split_path_list_handles_separators_and_quotes() -> None:
    raw = f"first{os.pathsep}second\n\n\"third\""

    assert split_path_list(raw) == [Path("first"), Path("second"), Path("third")]


def test_parse_properties_supports_the_properties_grammar() -> None:
    text = "\n".join(
        [
            "# comment",
            "! another comment",
            "a=1",
            "b: 2",
            "c 3",
            "d=multi \\",
            "   line",
            "e=\\u0041\\tB",
            "key\\=with\\=equals=value",
        ]
    )

    assert parse_properties(text) == {
        "a": "1",
        "b": "2",
        "c": "3",
        "d": "multi line",
        "e": "A\tB",
        "key=with=equals": "value",
    }
