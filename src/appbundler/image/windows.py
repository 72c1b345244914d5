# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Windows application image layout."""

from __future__ import annotations

from pathlib import Path

from ..params import standard
from ..params.store import ParameterStore
from .builder import AppImageBuilder, launcher_name


def launcher_suffix(store: ParameterStore) -> str:
    """Return ``.exe`` when a native launcher is supplied, ``.cmd`` otherwise."""

    return ".exe" if standard.LAUNCHER_EXECUTABLE.fetch(store) is not None else ".cmd"


class WindowsAppImageBuilder(AppImageBuilder):
    """Lay out ``<name>/`` with ``<name>.exe``, ``app/``, ``runtime/`` and ``<name>.ico``.

    Without a ``launcherExecutable`` the built-in batch launcher is installed
    as ``<name>.cmd``.
    """

    platform_name = "windows"
    launcher_template = "windows/launcher.cmd"
    runtime_location = "$APPDIR\\runtime"

    def create_launcher(self, store: ParameterStore) -> Path:
        name = launcher_name(store)
        executable = self.install_launcher_executable(store, self.root / f"{name}{launcher_suffix(store)}")
        self.write_launch_config(store, self.app_dir / f"{name}.cfg")
        return executable

    def prepare_application_files(self) -> None:
        self.app_dir.mkdir(parents=True, exist_ok=True)
        self.create_launcher(self.store)
        self.prepare_secondary_launchers()
        self.copy_app_resources()
        self.copy_icon(".ico", self.root / f"{launcher_name(self.store)}.ico")


__all__ = ["WindowsAppImageBuilder", "launcher_suffix"]
