# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for loading bundling configuration documents."""

from __future__ import annotations

from pathlib import Path
from textwrap import dedent

import pytest

from appbundler.bundlers.driver import BundleType
from appbundler.config import BundleConfig, ConfigError, build_store, load_config
from appbundler.params import standard
from appbundler.params.store import EntryState


def _write(path: Path, text: str) -> Path:
    path.write_text(dedent(text), encoding="utf-8")
    return path


def test_load_standalone_document(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "bundle.toml",
        """
        [appbundler]
        output_dir = "dist"
        bundle_type = " installer "
        bundle_format = "deb"
        verbose = true

        [appbundler.params]
        name = "Demo App"
        appVersion = "2.0"
        """,
    )

    config = load_config(config_path)

    assert config.output_dir == tmp_path.resolve() / "dist"
    assert config.bundle_type is BundleType.INSTALLER
    assert config.bundle_format == "deb"
    assert config.verbose is True
    assert config.params == {"name": "Demo App", "appVersion": "2.0"}


def test_load_pyproject_tool_table(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "pyproject.toml",
        """
        [project]
        name = "demo"

        [tool.appbundler]
        bundle_format = "  "

        [tool.appbundler.params]
        mainJar = "demo.jar"
        """,
    )

    config = load_config(config_path)

    assert config.bundle_type is BundleType.NATIVE
    assert config.bundle_format is None
    assert config.output_dir == tmp_path.resolve()
    assert config.params == {"mainJar": "demo.jar"}


def test_absolute_output_dir_is_kept(tmp_path: Path) -> None:
    target = tmp_path / "elsewhere"
    config_path = _write(tmp_path / "bundle.toml", f'[appbundler]\noutput_dir = "{target.as_posix()}"\n')

    assert load_config(config_path).output_dir == target


def test_missing_file_raises(tmp_path: Path) -> None:
    with pytest.raises(ConfigError, match="does not exist"):
        load_config(tmp_path / "absent.toml")


def test_missing_table_raises(tmp_path: Path) -> None:
    standalone = _write(tmp_path / "bundle.toml", "[other]\nvalue = 1\n")
    pyproject = _write(tmp_path / "pyproject.toml", "[appbundler]\nverbose = true\n")

    with pytest.raises(ConfigError, match=r"has no \[appbundler\] table"):
        load_config(standalone)
    with pytest.raises(ConfigError, match=r"has no \[tool\.appbundler\] table"):
        load_config(pyproject)


def test_invalid_toml_raises(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "bundle.toml", "[appbundler\nverbose = \n")

    with pytest.raises(ConfigError, match="is not valid TOML"):
        load_config(config_path)


def test_unknown_keys_fail_validation(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "bundle.toml", "[appbundler]\nflavour = \"sweet\"\n")

    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(config_path)


def test_unknown_bundle_type_fails_validation(tmp_path: Path) -> None:
    config_path = _write(tmp_path / "bundle.toml", "[appbundler]\nbundle_type = \"archive\"\n")

    with pytest.raises(ConfigError, match="Invalid configuration"):
        load_config(config_path)


def test_environment_references_are_expanded(tmp_path: Path) -> None:
    config_path = _write(
        tmp_path / "bundle.toml",
        """
        [appbundler]
        output_dir = "${OUT_DIR}/bundles"

        [appbundler.params]
        vendor = "$VENDOR_NAME Inc"
        copyright = "$UNDEFINED_VARIABLE"
        arguments = ["--home=${APP_HOME}"]
        """,
    )
    env = {"OUT_DIR": "build", "VENDOR_NAME": "Acme", "APP_HOME": "/srv/demo"}

    config = load_config(config_path, env=env)

    assert config.output_dir == tmp_path.resolve() / "build" / "bundles"
    assert config.params["vendor"] == "Acme Inc"
    assert config.params["copyright"] == "$UNDEFINED_VARIABLE"
    assert config.params["arguments"] == ["--home=/srv/demo"]


def test_build_store_accumulates_multi_value_lists() -> None:
    config = BundleConfig(params={"arguments": ["--alpha", "--beta"], "name": "Demo App"})

    store = build_store(config)

    assert store.get_raw("arguments") == "--alpha\n\n--beta"
    assert standard.ARGUMENTS.fetch(store) == ["--alpha", "--beta"]
    assert standard.APP_NAME.fetch(store) == "Demo App"
    assert store.state("name") is EntryState.OVERRIDDEN


def test_build_store_keeps_structured_values() -> None:
    associations = [{"fileAssociation.extension": "demo"}]
    config = BundleConfig(params={"fileAssociations": associations, "serviceHint": True, "jvmProperties": {"a": "1"}})

    store = build_store(config)

    assert store.get_raw("fileAssociations") == associations
    assert standard.SERVICE_HINT.fetch(store) is True
    assert standard.JVM_PROPERTIES.fetch(store) == {"a": "1"}


def test_build_store_mirrors_verbose_flag() -> None:
    assert standard.VERBOSE.fetch(build_store(BundleConfig(verbose=True))) is True
    quiet = build_store(BundleConfig(verbose=True, params={"verbose": False}))
    assert standard.VERBOSE.fetch(quiet) is False
    assert "verbose" not in build_store(BundleConfig())
