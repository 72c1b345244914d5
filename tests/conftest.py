# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import zipfile
from collections.abc import Callable, Iterator, Mapping
from pathlib import Path

import pytest

from appbundler.core.logging import configure_logging, log_settings

JarFactory = Callable[..., Path]


@pytest.fixture(autouse=True)
def _quiet_logging() -> Iterator[None]:
    """Run each test with plain, non-verbose log output and restore afterwards."""

    settings = log_settings()
    saved = (settings.verbose, settings.debug, settings.use_emoji, settings.use_color)
    configure_logging(verbose=False, debug=False, use_emoji=False, use_color=False)
    yield
    configure_logging(verbose=saved[0], debug=saved[1], use_emoji=saved[2], use_color=saved[3])


def write_jar(
    path: Path,
    attributes: Mapping[str, str] | None = None,
    *,
    modular: bool = False,
    extra: Mapping[str, str] | None = None,
) -> Path:
    """Write a minimal jar at ``path``.

    Args:
        path: Destination jar.
        attributes: Main manifest attributes; no manifest when ``None``.
        modular: Add a root ``module-info.class`` entry.
        extra: Additional text entries keyed by archive name.

    Returns:
        Path: ``path``.
    """

    path.parent.mkdir(parents=True, exist_ok=True)
    with zipfile.ZipFile(path, "w") as archive:
        if attributes is not None:
            lines = ["Manifest-Version: 1.0", *(f"{key}: {value}" for key, value in attributes.items())]
            archive.writestr("META-INF/MANIFEST.MF", "\r\n".join(lines) + "\r\n\r\n")
        if modular:
            archive.writestr("module-info.class", b"\xca\xfe\xba\xbe")
        for name, text in (extra or {}).items():
            archive.writestr(name, text)
    return path


@pytest.fixture
def jar_factory() -> JarFactory:
    """Return :func:`write_jar` for tests that build jars."""

    return write_jar


@pytest.fixture
def jmods_dir(tmp_path: Path) -> Path:
    """Return a module directory holding ``java.base`` and ``java.logging`` jmods."""

    jmods = tmp_path / "jdk" / "jmods"
    for name in ("java.base", "java.logging"):
        write_jar(jmods / f"{name}.jmod", extra={"classes/module-info.class": "module"})
    (tmp_path / "jdk" / "release").write_text('JAVA_VERSION="21.0.2"\n', encoding="utf-8")
    return jmods
