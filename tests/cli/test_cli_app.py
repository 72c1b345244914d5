# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for the ``appbundler`` command line."""

from __future__ import annotations

import importlib
from pathlib import Path

import pytest
from typer.testing import CliRunner

from appbundler.bundlers.base import Bundler, BundlerKind
from appbundler.bundlers.registry import BundlerRegistry
from appbundler.cli.app import app
from appbundler.params import standard
from appbundler.params.store import ParameterStore
from appbundler.platform import current_platform

cli_app = importlib.import_module("appbundler.cli.app")
runner = CliRunner()


class _StubBundler(Bundler):
    def __init__(self, bundler_id: str, *, kind: BundlerKind = BundlerKind.IMAGE, fails: bool = False) -> None:
        self.id = bundler_id
        self.name = f"Stub {bundler_id}"
        self.bundle_type = kind
        self.platform = current_platform()
        self.fails = fails
        self.seen_names: list[str | None] = []

    def do_validate(self, store: ParameterStore) -> bool:
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        self.seen_names.append(standard.APP_NAME.fetch(store))
        if self.fails:
            raise RuntimeError("tool crashed")
        artifact = output_dir / f"{self.id}.out"
        artifact.parent.mkdir(parents=True, exist_ok=True)
        artifact.write_text(self.id, encoding="utf-8")
        return artifact


def _install_registry(monkeypatch: pytest.MonkeyPatch, *bundlers: Bundler) -> None:
    monkeypatch.setattr(cli_app, "default_registry", lambda: BundlerRegistry(bundlers))


def _bundle_args(tmp_path: Path, *extra: str) -> list[str]:
    return ["bundle", "--output", str(tmp_path / "out"), "-p", f"buildRoot={tmp_path / 'build'}", "--no-emoji", *extra]


def test_bundle_reports_artifacts(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    image = _StubBundler("stub.app")
    _install_registry(monkeypatch, image)

    result = runner.invoke(app, _bundle_args(tmp_path, "-p", "name=Demo App"))

    assert result.exit_code == 0, result.output
    assert str(tmp_path / "out" / "stub.app.out") in result.stdout
    assert image.seen_names == ["Demo App"]


def test_bundle_failure_sets_exit_code(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_registry(monkeypatch, _StubBundler("stub.app"), _StubBundler("broken", fails=True))

    result = runner.invoke(app, _bundle_args(tmp_path, "--type", "all"))

    assert result.exit_code == 1
    assert str(tmp_path / "out" / "stub.app.out") in result.stdout


def test_best_effort_ignores_failures(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_registry(monkeypatch, _StubBundler("broken", fails=True))

    result = runner.invoke(app, _bundle_args(tmp_path, "--best-effort"))

    assert result.exit_code == 0


def test_no_bundles_is_an_error_unless_none_requested(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_registry(monkeypatch, _StubBundler("stub.app"))

    missing = runner.invoke(app, _bundle_args(tmp_path, "--format", "absent"))
    nothing = runner.invoke(app, _bundle_args(tmp_path, "--type", "none"))

    assert missing.exit_code == 1
    assert nothing.exit_code == 0


def test_format_selects_one_bundler(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    image = _StubBundler("stub.app")
    installer = _StubBundler("stub.pkg", kind=BundlerKind.INSTALLER)
    _install_registry(monkeypatch, image, installer)

    result = runner.invoke(app, _bundle_args(tmp_path, "--format", "STUB.PKG"))

    assert result.exit_code == 0, result.output
    assert image.seen_names == []
    assert len(installer.seen_names) == 1


def test_config_file_feeds_the_store(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    image = _StubBundler("stub.app")
    _install_registry(monkeypatch, image)
    config_path = tmp_path / "bundle.toml"
    config_path.write_text('[appbundler]\noutput_dir = "dist"\n\n[appbundler.params]\nname = "From Config"\n')

    args = ["bundle", "--config", str(config_path), "-p", f"buildRoot={tmp_path / 'build'}", "--no-emoji"]

    result = runner.invoke(app, args)

    assert result.exit_code == 0, result.output
    assert image.seen_names == ["From Config"]
    assert (tmp_path / "dist" / "stub.app.out").is_file()


def test_malformed_param_exits_with_usage_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_registry(monkeypatch, _StubBundler("stub.app"))

    result = runner.invoke(app, _bundle_args(tmp_path, "-p", "no-separator"))

    assert result.exit_code == 2


def test_missing_config_exits_with_usage_error(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    _install_registry(monkeypatch, _StubBundler("stub.app"))

    result = runner.invoke(app, ["bundle", "--config", str(tmp_path / "absent.toml")])

    assert result.exit_code == 2


def test_bundlers_lists_the_registry() -> None:
    result = runner.invoke(app, ["bundlers", "--no-emoji"])

    assert result.exit_code == 0, result.output
    expected = ("linux.app", "mac.app", "windows.app", "windows.service", "deb", "dmg", "mac.daemon", "pkg", "exe")
    for bundler_id in expected:
        assert bundler_id in result.stdout
