# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""macOS ``.app`` bundle layout."""

from __future__ import annotations

import re
from pathlib import Path
from typing import Final

from ..core.logging import verbose
from ..modules.classify import ModuleClassifier
from ..params import standard
from ..params.store import ParameterStore
from ..resources.locator import write_resource
from .builder import AppImageBuilder, launcher_name

PKG_INFO: Final[str] = "APPL????"
DEFAULT_CF_BUNDLE_VERSION: Final[str] = "100"
_MAX_BUNDLE_NAME: Final[int] = 16
_CF_BUNDLE_VERSION_RE: Final[re.Pattern[str]] = re.compile(r"^[1-9]\d*(\.\d+){0,2}$")


def valid_cf_bundle_version(version: str | None) -> bool:
    """Return ``True`` for one to three dot separated numbers, the first positive.

    Args:
        version: Candidate ``CFBundleVersion``.

    Returns:
        bool: Whether ``version`` is acceptable.
    """

    if version is None:
        return False
    if _CF_BUNDLE_VERSION_RE.match(version) is None:
        verbose(f"Version string {version!r} is not of the form 1, 1.2 or 1.2.3.")
        return False
    return True


def bundle_name(store: ParameterStore) -> str:
    """Return the ``CFBundleName``, at most sixteen characters long."""

    name = standard.APP_NAME.fetch(store) or launcher_name(store)
    if len(name) > _MAX_BUNDLE_NAME:
        verbose(f"Bundle name {name} is longer than {_MAX_BUNDLE_NAME} characters and is truncated.")
        name = name[:_MAX_BUNDLE_NAME]
    return name


class MacAppImageBuilder(AppImageBuilder):
    """Lay out ``<name>.app/Contents`` with the launcher, plists and runtime plug-in."""

    platform_name = "mac"
    launcher_template = "mac/launcher.sh"
    runtime_location = "$APPDIR/PlugIns/Java.runtime"

    def __init__(self, store: ParameterStore, image_dir: Path, *, classifier: ModuleClassifier | None = None) -> None:
        super().__init__(store, image_dir, classifier=classifier)
        self.root = self.image_dir / f"{launcher_name(store)}.app"
        self.contents_dir = self.root / "Contents"
        self.app_dir = self.contents_dir / "Java"
        self.macos_dir = self.contents_dir / "MacOS"
        self.resources_dir = self.contents_dir / "Resources"
        self.runtime_dir = self.contents_dir / "PlugIns" / "Java.runtime"
        self.runtime_root = self.runtime_dir / "Contents" / "Home"

    def create_launcher(self, store: ParameterStore) -> Path:
        name = launcher_name(store)
        executable = self.install_launcher_executable(store, self.macos_dir / name)
        self.write_launch_config(store, self.app_dir / f"{name}.cfg")
        return executable

    def prepare_application_files(self) -> None:
        for directory in (self.app_dir, self.macos_dir, self.resources_dir):
            directory.mkdir(parents=True, exist_ok=True)
        (self.contents_dir / "PkgInfo").write_text(PKG_INFO, encoding="ascii")
        self.create_launcher(self.store)
        self.prepare_secondary_launchers()
        self.copy_app_resources()
        self.copy_icon(".icns", self.resources_dir / f"{launcher_name(self.store)}.icns")
        self.write_info_plist(self.contents_dir / "Info.plist")
        self.write_runtime_info_plist(self.runtime_dir / "Contents" / "Info.plist")

    def write_info_plist(self, path: Path) -> Path:
        """Write the application ``Info.plist`` from its template.

        Args:
            path: Destination file.

        Returns:
            Path: Written file.
        """

        verbose(f"Preparing Info.plist: {path.absolute()}")
        version = standard.VERSION.fetch(self.store)
        data = {
            "DEPLOY_ICON_FILE": f"{launcher_name(self.store)}.icns",
            "DEPLOY_BUNDLE_IDENTIFIER": standard.IDENTIFIER.fetch(self.store),
            "DEPLOY_BUNDLE_NAME": bundle_name(self.store),
            "DEPLOY_BUNDLE_COPYRIGHT": standard.COPYRIGHT.fetch(self.store) or "Unknown",
            "DEPLOY_LAUNCHER_NAME": launcher_name(self.store),
            "DEPLOY_BUNDLE_SHORT_VERSION": version or "1.0.0",
            "DEPLOY_BUNDLE_CFBUNDLE_VERSION": (
                version if valid_cf_bundle_version(version) else DEFAULT_CF_BUNDLE_VERSION
            ),
            "DEPLOY_BUNDLE_CATEGORY": standard.CATEGORY.fetch(self.store),
        }
        return write_resource(
            path,
            "mac/Info.plist",
            "Application Info.plist",
            "mac/Info.plist.template",
            data=data,
            drop_in_root=standard.DROP_IN_RESOURCES_ROOT.fetch(self.store),
        )

    def write_runtime_info_plist(self, path: Path) -> Path:
        """Write the ``Info.plist`` of the embedded runtime plug-in.

        Args:
            path: Destination file.

        Returns:
            Path: Written file.
        """

        version = standard.VERSION.fetch(self.store)
        data = {
            "CF_BUNDLE_IDENTIFIER": f"com.oracle.java.{standard.IDENTIFIER.fetch(self.store)}",
            "CF_BUNDLE_NAME": "Java Runtime Image",
            "CF_BUNDLE_VERSION": version,
            "CF_BUNDLE_SHORT_VERSION_STRING": version,
        }
        return write_resource(
            path,
            "mac/Runtime-Info.plist",
            "Java Runtime Info.plist",
            "mac/Runtime-Info.plist.template",
            data=data,
            drop_in_root=standard.DROP_IN_RESOURCES_ROOT.fetch(self.store),
        )


__all__ = ["DEFAULT_CF_BUNDLE_VERSION", "MacAppImageBuilder", "PKG_INFO", "bundle_name", "valid_cf_bundle_version"]
