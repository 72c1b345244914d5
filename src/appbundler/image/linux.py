# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Linux application image layout."""

from __future__ import annotations

from pathlib import Path

from ..params.store import ParameterStore
from .builder import AppImageBuilder, launcher_name


class LinuxAppImageBuilder(AppImageBuilder):
    """Lay out ``<name>/`` with the launcher, ``app/``, ``runtime/`` and an icon."""

    platform_name = "linux"
    launcher_template = "linux/launcher.sh"
    runtime_location = "$APPDIR/runtime"

    def create_launcher(self, store: ParameterStore) -> Path:
        name = launcher_name(store)
        executable = self.install_launcher_executable(store, self.root / name)
        self.write_launch_config(store, self.app_dir / f"{name}.cfg")
        return executable

    def prepare_application_files(self) -> None:
        self.app_dir.mkdir(parents=True, exist_ok=True)
        self.create_launcher(self.store)
        self.prepare_secondary_launchers()
        self.copy_app_resources()
        self.copy_icon(".png", self.root / f"{launcher_name(self.store)}.png")


__all__ = ["LinuxAppImageBuilder"]
