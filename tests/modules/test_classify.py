# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for :mod:`appbundler.modules.classify`."""

from __future__ import annotations

from pathlib import Path

import pytest

from appbundler.errors import ConfigurationInvalidError
from appbundler.modules.classify import ModuleClassifier, ModuleKind, classify_path, find_module_dir


def test_artifacts_are_classified_by_shape(tmp_path: Path, jar_factory) -> None:
    jmod = jar_factory(tmp_path / "java.base.jmod")
    modular = jar_factory(tmp_path / "com.example.app.jar", modular=True)
    plain = jar_factory(tmp_path / "plain.jar", {"Main-Class": "demo.Main"})
    broken = tmp_path / "broken.jar"
    broken.write_text("not a zip", encoding="utf-8")
    exploded = tmp_path / "com.example.exploded"
    exploded.mkdir()
    (exploded / "module-info.class").write_bytes(b"\xca\xfe")
    other = tmp_path / "readme.txt"
    other.write_text("hi", encoding="utf-8")

    assert classify_path(jmod) is ModuleKind.JMOD
    assert classify_path(modular) is ModuleKind.MODULAR_JAR
    assert classify_path(plain) is ModuleKind.UNNAMED_JAR
    assert classify_path(broken) is ModuleKind.UNKNOWN
    assert classify_path(exploded) is ModuleKind.EXPLODED_MODULE
    assert classify_path(other) is ModuleKind.UNKNOWN
    assert classify_path(tmp_path / "absent.jar") is ModuleKind.UNKNOWN


def test_classifier_caches_per_path(tmp_path: Path, jar_factory) -> None:
    jar = jar_factory(tmp_path / "lib.jar")
    classifier = ModuleClassifier()
    assert classifier.kind(jar) is ModuleKind.UNNAMED_JAR

    jar_factory(jar, modular=True)

    assert classifier.kind(jar) is ModuleKind.UNNAMED_JAR
    assert classify_path(jar) is ModuleKind.MODULAR_JAR
    classifier.clear()
    assert classifier.kind(jar) is ModuleKind.MODULAR_JAR


def test_scan_lists_named_modules_in_search_order(tmp_path: Path, jar_factory) -> None:
    first = tmp_path / "first"
    second = tmp_path / "second"
    jar_factory(first / "java.base.jmod")
    jar_factory(first / "plain.jar")
    jar_factory(second / "java.base.jmod")
    jar_factory(second / "com.example.app.jar", modular=True)

    names = ModuleClassifier().module_names([first, second])

    assert names == ["java.base", "com.example.app"]


def test_scan_rejects_missing_directories(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationInvalidError, match="does not exist"):
        ModuleClassifier().scan([tmp_path / "missing"])


def test_find_module_dir_returns_first_match(tmp_path: Path, jar_factory) -> None:
    jar_factory(tmp_path / "b" / "java.base.jmod")
    (tmp_path / "a").mkdir()

    assert find_module_dir([tmp_path / "a", tmp_path / "b"], "java.base.jmod") == tmp_path / "b"
    assert find_module_dir([tmp_path / "a"], "java.base.jmod") is None
