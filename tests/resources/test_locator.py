# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for :mod:`appbundler.resources.locator`."""

from __future__ import annotations

from pathlib import Path

import pytest

from appbundler.resources.locator import fetch_resource, fetch_text, preprocess_text, write_resource


def test_builtin_template_is_the_fallback() -> None:
    text = fetch_text("demo.control", "DEB control file", "linux/template.control")

    assert "APPLICATION_PACKAGE" in text


def test_override_file_beats_the_builtin(tmp_path: Path) -> None:
    override = tmp_path / "control"
    override.write_text("override", encoding="utf-8")

    assert fetch_resource("demo.control", None, "linux/template.control", override_file=override) == b"override"


def test_drop_in_beats_the_override_file(tmp_path: Path) -> None:
    override = tmp_path / "control"
    override.write_text("override", encoding="utf-8")
    drop_in = tmp_path / "dropins"
    drop_in.mkdir()
    (drop_in / "demo.control").write_text("drop-in", encoding="utf-8")

    payload = fetch_resource(
        "demo.control",
        None,
        "linux/template.control",
        override_file=override,
        drop_in_root=drop_in,
    )

    assert payload == b"drop-in"


def test_missing_resource_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        fetch_resource("nothing", "missing", "linux/does-not-exist", drop_in_root=tmp_path)


def test_preprocess_replaces_literals_and_skips_none() -> None:
    template = "Package: APPLICATION_PACKAGE\nVersion: APPLICATION_VERSION\n"

    result = preprocess_text(template, {"APPLICATION_PACKAGE": "demo", "APPLICATION_VERSION": None})

    assert result == "Package: demo\nVersion: APPLICATION_VERSION\n"


def test_write_resource_expands_placeholders(tmp_path: Path) -> None:
    target = write_resource(
        tmp_path / "DEBIAN" / "control",
        "demo.control",
        "DEB control file",
        "linux/template.control",
        data={"APPLICATION_PACKAGE": "demo"},
    )

    assert target.read_text(encoding="utf-8").startswith("Package: demo\n")
