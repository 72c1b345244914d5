# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for :mod:`appbundler.image.launch_config`."""

from __future__ import annotations

import os
from pathlib import Path

from appbundler.image.launch_config import LaunchConfig, read_launch_config, split_entry
from appbundler.params import standard
from appbundler.params.resources import RelativeFileSet
from appbundler.params.store import ParameterStore


def test_equals_signs_survive_a_round_trip(tmp_path: Path) -> None:
    config = LaunchConfig(
        application={"app.name": "Demo", "app.classpath": "lib/a.jar"},
        jvm_options=["-Dkey=value", "-ea"],
        jvm_user_options={"-Dtheme=": "dark", "-Xmx": "512m"},
        arguments=["trailing=", "key=value", "plain"],
    )

    written = config.write(tmp_path / "app" / "Demo.cfg")

    assert read_launch_config(written) == config


def test_rendered_sections_escape_keys(tmp_path: Path) -> None:
    text = LaunchConfig(jvm_user_options={"-Dtheme=": "dark"}, arguments=["trailing="]).render()

    assert "[JVMUserOptions]\n-Dtheme\\==dark\n" in text
    assert "[ArgOptions]\ntrailing\\=\n" in text


def test_split_entry_uses_the_first_unescaped_equals() -> None:
    assert split_entry("a\\=b=c=d") == ("a=b", "c=d")
    assert split_entry("no-separator") == ("no-separator", None)
    assert split_entry("a\\\\=b") == ("a\\", "b")


def test_backslashes_in_keys_and_arguments_survive_a_round_trip(tmp_path: Path) -> None:
    config = LaunchConfig(
        jvm_user_options={"a\\": "b", "-Dpath=C:\\": "x", "-Dplain": "C:\\dir\\"},
        arguments=["C:\\dir\\", "ends\\=", "a\\=b"],
    )

    written = config.write(tmp_path / "Demo.cfg")

    assert "[JVMUserOptions]\na\\\\=b\n" in written.read_text(encoding="utf-8")
    assert read_launch_config(written) == config


def test_from_store_collects_launcher_settings() -> None:
    store = ParameterStore(
        {
            standard.APP_NAME.id: "Demo",
            standard.MODULE.id: "demo.app/com.example.Main",
            standard.JVM_OPTIONS.id: "-ea",
            standard.JVM_PROPERTIES.id: "colour=blue",
            standard.USER_JVM_OPTIONS.id: {"-Xmx": "512m"},
            standard.ARGUMENTS.id: '--mode "fast start"',
            standard.DEBUG_PORT.id: "5005",
            standard.SINGLETON.id: "true",
        }
    )

    config = LaunchConfig.from_store(store, "$APPDIR/runtime", java_version="21")

    assert config.application["app.name"] == "Demo"
    assert config.application["app.mainmodule"] == "demo.app/com.example.Main"
    assert "app.mainjar" not in config.application
    assert config.application["app.runtime"] == "$APPDIR/runtime"
    assert config.application["app.identifier"] == "com.example"
    assert config.application["app.preferences.id"] == "com/example"
    assert config.application["app.application.instance"] == "single"
    assert config.application["app.java.version"] == "21"
    assert config.application["app.debug"].endswith("address=localhost:5005")
    assert config.jvm_options == ["-ea", "-Dcolour=blue"]
    assert config.jvm_user_options == {"-Xmx": "512m"}
    assert config.arguments == ["--mode", "fast start"]


def test_classpath_launcher_uses_main_jar_and_slashed_class(tmp_path: Path, jar_factory) -> None:
    jar_factory(tmp_path / "app.jar", {"Main-Class": "com.example.Main", "Class-Path": "lib/a.jar lib/b.jar"})
    store = ParameterStore({standard.APP_RESOURCES.id: RelativeFileSet(tmp_path, ["app.jar"])})

    config = LaunchConfig.from_store(store, "$APPDIR/runtime")

    assert config.application["app.mainjar"] == "app.jar"
    assert config.application["app.mainclass"] == "com/example/Main"
    assert config.application["app.classpath"] == os.pathsep.join(["lib/a.jar", "lib/b.jar"])
    assert "app.java.version" not in config.application
