# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for :mod:`appbundler.bundlers.deb`."""

from __future__ import annotations

import struct
from collections.abc import Sequence
from pathlib import Path

import pytest

from appbundler.bundlers import base as bundler_base
from appbundler.bundlers import deb as deb_module
from appbundler.bundlers.deb import (
    BUNDLE_NAME,
    MAINTAINER,
    XDG_FILE_PREFIX,
    DebBundler,
    deb_arch,
    square_png_size,
    validate_bundle_name,
)
from appbundler.errors import ConfigurationInvalidError, PlatformUnsupportedError
from appbundler.params import standard
from appbundler.params.store import ParameterStore
from appbundler.platform import Platform


@pytest.fixture
def linux_host(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(bundler_base, "current_platform", lambda: Platform.LINUX)
    monkeypatch.setattr(deb_module, "tool_available", lambda _tool: True)


def _make_store(tmp_path: Path, **overrides: object) -> ParameterStore:
    image = tmp_path / "prebuilt" / "DemoApp"
    (image / "bin").mkdir(parents=True, exist_ok=True)
    (image / "bin" / "DemoApp").write_text("#!/bin/sh\n", encoding="utf-8")
    values: dict[str, object] = {
        standard.APP_NAME.id: "Demo App",
        standard.IDENTIFIER.id: "com.example.demo",
        standard.PREDEFINED_APP_IMAGE.id: image,
        standard.BUILD_ROOT.id: tmp_path / "build",
        standard.DROP_IN_RESOURCES_ROOT.id: tmp_path / "dropins",
    }
    values.update(overrides)
    return ParameterStore(values)


def _png(path: Path, width: int, height: int) -> Path:
    header = b"\x89PNG\r\n\x1a\n" + struct.pack(">I", 13) + b"IHDR" + struct.pack(">II", width, height)
    path.write_bytes(header + b"\x08\x06\x00\x00\x00")
    return path


def test_valid_configuration_passes(tmp_path: Path, linux_host: None) -> None:
    store = _make_store(tmp_path)

    assert DebBundler().validate(store)
    assert BUNDLE_NAME.fetch(store) == "demo-app"


def test_requires_a_linux_host(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(bundler_base, "current_platform", lambda: Platform.WINDOWS)

    with pytest.raises(PlatformUnsupportedError):
        DebBundler().validate(_make_store(tmp_path))


def test_missing_packaging_tools_are_reported(
    tmp_path: Path, linux_host: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setattr(deb_module, "tool_available", lambda tool: tool != "fakeroot")

    with pytest.raises(ConfigurationInvalidError, match="Can not find fakeroot"):
        DebBundler().validate(_make_store(tmp_path))


def test_daemon_names_are_limited(tmp_path: Path, linux_host: None) -> None:
    store = _make_store(tmp_path, **{standard.APP_NAME.id: "A Rather Long Application", "serviceHint": "true"})

    with pytest.raises(ConfigurationInvalidError, match="too long for a daemon"):
        DebBundler().validate(store)


def test_per_user_daemons_are_rejected(tmp_path: Path, linux_host: None) -> None:
    store = _make_store(tmp_path, serviceHint="true", systemWide="false")

    with pytest.raises(ConfigurationInvalidError, match="per-user daemons"):
        DebBundler().validate(store)


@pytest.mark.parametrize(
    ("content_type", "message"),
    [("", "No MIME types"), ("text/x-a text/x-b", "More than one MIME types")],
)
def test_file_associations_need_exactly_one_mime_type(
    tmp_path: Path, linux_host: None, content_type: str, message: str
) -> None:
    association = {"fileAssociation.extension": "demo", "fileAssociation.contentType": content_type}
    store = _make_store(tmp_path, fileAssociations=[association])

    with pytest.raises(ConfigurationInvalidError, match=f"{message} .* number 0"):
        DebBundler().validate(store)


def test_invalid_package_name_is_rejected(tmp_path: Path, linux_host: None) -> None:
    store = _make_store(tmp_path, **{BUNDLE_NAME.id: "Demo_App"})

    with pytest.raises(ConfigurationInvalidError, match='Invalid value "Demo_App"'):
        DebBundler().validate(store)


@pytest.mark.parametrize("name", ["demo", "demo-app2", "lib.demo+extra"])
def test_valid_bundle_names(name: str) -> None:
    assert validate_bundle_name(name) == name


@pytest.mark.parametrize("name", [None, "d", "1demo", "Demo", "demo app"])
def test_invalid_bundle_names(name: str | None) -> None:
    with pytest.raises(ConfigurationInvalidError):
        validate_bundle_name(name)


def test_derived_package_metadata() -> None:
    store = ParameterStore({"name": "Demo App", "vendor": "Acme Corp", "email": "dev@acme.test"})

    assert MAINTAINER.fetch(store) == "Acme Corp <dev@acme.test>"
    assert XDG_FILE_PREFIX.fetch(store) == "AcmeCorp-DemoApp"
    assert XDG_FILE_PREFIX.fetch(ParameterStore({"name": "Demo App"})) == "appbundler-DemoApp"


def test_deb_arch_names() -> None:
    assert deb_arch("x86_64") == "amd64"
    assert deb_arch("i686") == "i386"
    assert deb_arch("arm64") == "arm64"


def test_square_png_size(tmp_path: Path) -> None:
    assert square_png_size(_png(tmp_path / "square.png", 48, 48)) == 48
    assert square_png_size(_png(tmp_path / "wide.png", 64, 32)) == 0
    (tmp_path / "text.png").write_text("nope", encoding="utf-8")
    assert square_png_size(tmp_path / "text.png") == 0


def test_execute_stages_package_and_invokes_dpkg(
    tmp_path: Path, linux_host: None, monkeypatch: pytest.MonkeyPatch
) -> None:
    captured: dict[str, object] = {}

    def _fake_run_tool(args: Sequence[str], *, cwd: Path | None = None, **_kwargs: object) -> int:
        assert cwd is not None
        staged = cwd / args[3]
        captured["args"] = list(args)
        captured["control"] = (staged / "DEBIAN" / "control").read_text(encoding="utf-8")
        captured["files"] = sorted(path.relative_to(staged).as_posix() for path in staged.rglob("*") if path.is_file())
        return 0

    monkeypatch.setattr(deb_module, "run_tool", _fake_run_tool)
    icon = _png(tmp_path / "demo.png", 32, 32)
    store = _make_store(
        tmp_path,
        appVersion="2.0",
        vendor="Acme",
        email="dev@acme.test",
        fileAssociations=[
            {
                "fileAssociation.extension": "demo",
                "fileAssociation.contentType": "application/x-demo",
                "fileAssociation.icon": str(icon),
            }
        ],
    )
    bundler = DebBundler()

    artifact = bundler.execute(store, tmp_path / "out")

    assert artifact == (tmp_path / "out" / "demo-app-2.0.deb").absolute()
    assert captured["args"] == ["fakeroot", "dpkg-deb", "-b", "demo-app-2.0", str(artifact)]
    control = captured["control"]
    assert isinstance(control, str)
    assert "Package: demo-app" in control
    assert "Version: 2.0" in control
    assert "Maintainer: Acme <dev@acme.test>" in control
    files = captured["files"]
    assert isinstance(files, list)
    assert "opt/DemoApp/bin/DemoApp" in files
    assert "opt/DemoApp/DemoApp.desktop" in files
    assert "opt/DemoApp/Acme-DemoApp-MimeInfo.xml" in files
    assert "opt/DemoApp/DemoApp_fa_demo.png" in files
    assert {"DEBIAN/preinst", "DEBIAN/prerm", "DEBIAN/postinst", "DEBIAN/postrm", "DEBIAN/copyright"} <= set(files)
    assert not bundler.image_dir(store).exists()
