# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the standard descriptors and manifest sniffing."""

from __future__ import annotations

import os
from pathlib import Path

import pytest

from appbundler.errors import ConfigurationInvalidError
from appbundler.params import standard
from appbundler.params.manifest import parse_manifest, sniff_main_jar
from appbundler.params.resources import RelativeFileSet
from appbundler.params.store import ParameterStore


def _store_with_jar(tmp_path: Path, jar_factory, attributes: dict[str, str]) -> ParameterStore:
    jar_factory(tmp_path / "input" / "app.jar", attributes)
    resources = RelativeFileSet(tmp_path / "input", ["app.jar"])
    return ParameterStore({standard.APP_RESOURCES.id: resources})


def test_entry_point_is_sniffed_from_the_manifest(tmp_path: Path, jar_factory) -> None:
    store = _store_with_jar(tmp_path, jar_factory, {"Main-Class": "com.example.Hello", "Class-Path": "lib/a.jar"})

    assert standard.MAIN_CLASS.fetch(store) == "com.example.Hello"
    main_jar = standard.MAIN_JAR.fetch(store)
    assert main_jar is not None
    assert main_jar.included_files == ["app.jar"]
    assert standard.CLASSPATH.fetch(store) == "lib/a.jar"
    assert standard.APP_NAME.fetch(store) == "Hello"
    assert standard.IDENTIFIER.fetch(store) == "com.example"
    assert standard.PREFERENCES_ID.fetch(store) == "com/example"
    assert standard.USE_FX_PACKAGING.fetch(store) is False


def test_fx_application_class_wins_over_main_class(tmp_path: Path, jar_factory) -> None:
    store = _store_with_jar(
        tmp_path,
        jar_factory,
        {
            "Main-Class": "com.example.Launcher",
            "JavaFX-Application-Class": "com.example.FxApp",
            "JavaFX-Preloader-Class": "com.example.Splash",
        },
    )

    assert standard.MAIN_CLASS.fetch(store) == "com.example.FxApp"
    assert standard.PRELOADER_CLASS.fetch(store) == "com.example.Splash"
    assert standard.USE_FX_PACKAGING.fetch(store) is True


def test_declared_main_class_must_match_the_manifest(tmp_path: Path, jar_factory) -> None:
    store = _store_with_jar(tmp_path, jar_factory, {"Main-Class": "com.example.Hello"})
    store.set(standard.MAIN_CLASS, "com.example.Other")

    assert standard.MAIN_JAR_INFO.fetch(store) is None
    assert standard.MAIN_JAR.fetch(store) is None


def test_missing_entry_point_fails_validation(tmp_path: Path, jar_factory) -> None:
    store = _store_with_jar(tmp_path, jar_factory, {"Created-By": "test"})

    with pytest.raises(ConfigurationInvalidError, match="application class was not specified"):
        standard.validate_main_class_info(store)


def test_module_parameter_disables_sniffing(tmp_path: Path, jar_factory) -> None:
    store = _store_with_jar(tmp_path, jar_factory, {"Main-Class": "com.example.Hello"})
    store.set(standard.MODULE, "com.example/com.example.Main")

    assert standard.MAIN_JAR_INFO.fetch(store) is None
    assert standard.MAIN_CLASS.fetch(store) == "com.example.Main"
    assert standard.module_name_part(store) == "com.example"
    standard.validate_main_class_info(store)


def test_main_jar_override_is_resolved_against_resources(tmp_path: Path, jar_factory) -> None:
    store = _store_with_jar(tmp_path, jar_factory, {"Main-Class": "com.example.Hello"})
    store.set(standard.MAIN_JAR, "app.jar")

    main_jar = standard.MAIN_JAR.fetch(store)

    assert main_jar is not None
    assert main_jar.base_dir == tmp_path / "input"
    assert standard.main_jar_path(store) == tmp_path / "input" / "app.jar"
    assert standard.MAIN_CLASS.fetch(store) == "com.example.Hello"


def test_unknown_main_jar_override_is_rejected(tmp_path: Path, jar_factory) -> None:
    store = _store_with_jar(tmp_path, jar_factory, {"Main-Class": "com.example.Hello"})
    store.set(standard.MODULE_PATH, [])
    store.set(standard.MAIN_JAR, "missing.jar")

    with pytest.raises(ConfigurationInvalidError, match="main jar does not exist"):
        standard.MAIN_JAR.fetch(store)


def test_identity_defaults() -> None:
    store = ParameterStore({"name": "My Cool/App"})

    assert standard.APP_FS_NAME.fetch(store) == "MyCoolApp"
    assert standard.TITLE.fetch(store) == "My Cool/App"
    assert standard.DESCRIPTION.fetch(store) == "My Cool/App"
    assert standard.VENDOR.fetch(store) == "Unknown"
    assert standard.VERSION.fetch(store) == "1.0"
    assert standard.INSTALLER_NAME.fetch(store) == "MyCoolApp"


def test_source_dir_drops_trailing_separator() -> None:
    store = ParameterStore({"srcdir": f"input{os.sep}"})

    assert standard.SOURCE_DIR.fetch(store) == "input"


def test_resource_list_spec_is_parsed(tmp_path: Path) -> None:
    (tmp_path / "lib").mkdir()
    (tmp_path / "lib" / "a.jar").write_bytes(b"")
    (tmp_path / "lib" / "nested").mkdir()
    (tmp_path / "lib" / "nested" / "b.txt").write_text("b", encoding="utf-8")
    store = ParameterStore({"appResourcesList": f"{tmp_path / 'main.jar'};{tmp_path / 'lib'}/"})

    resource_sets = standard.APP_RESOURCES_LIST.fetch(store)

    assert resource_sets is not None
    assert [(entry.base_dir, entry.included_files) for entry in resource_sets] == [
        (tmp_path, ["main.jar"]),
        (tmp_path / "lib", ["a.jar", "nested/b.txt"]),
    ]


def test_debug_port_must_be_an_integer() -> None:
    store = ParameterStore({"-J-Xdebug": "port"})

    with pytest.raises(ConfigurationInvalidError):
        standard.DEBUG_PORT.fetch(store)


def test_parse_manifest_joins_continuation_lines() -> None:
    text = "Manifest-Version: 1.0\r\nClass-Path: lib/a.jar lib/\r\n b.jar\r\n\r\nName: ignored\r\n"

    assert parse_manifest(text) == {"Manifest-Version": "1.0", "Class-Path": "lib/a.jar lib/b.jar"}


def test_sniff_skips_non_jars_and_jars_without_entry_points(tmp_path: Path, jar_factory) -> None:
    jar_factory(tmp_path / "plain.jar", {"Created-By": "test"})
    jar_factory(tmp_path / "app.jar", {"Main-Class": "demo.Main"})
    (tmp_path / "notes.txt").write_text("hello", encoding="utf-8")

    info = sniff_main_jar([(tmp_path, "notes.txt"), (tmp_path, "plain.jar"), (tmp_path, "app.jar")])

    assert info is not None
    assert info.main_jar == tmp_path / "app.jar"
    assert info.main_class == "demo.Main"


def test_resources_given_as_text_are_parsed(tmp_path: Path, jar_factory) -> None:
    jar_factory(tmp_path / "input" / "app.jar", {"Main-Class": "com.example.Hello"})
    store = ParameterStore()
    store.add_argument(standard.APP_RESOURCES.id, str(tmp_path / "input" / "app.jar"))

    resources = standard.APP_RESOURCES.fetch(store)

    assert resources is not None
    assert resources.base_dir == tmp_path / "input"
    assert resources.included_files == ["app.jar"]
    assert standard.MAIN_CLASS.fetch(store) == "com.example.Hello"


def test_resources_text_from_several_directories_is_rejected(tmp_path: Path) -> None:
    text = f"{tmp_path / 'one' / 'a.jar'};{tmp_path / 'two' / 'b.jar'}"
    store = ParameterStore({standard.APP_RESOURCES.id: text})

    with pytest.raises(ConfigurationInvalidError, match="do not share one base directory"):
        standard.APP_RESOURCES.fetch(store)
