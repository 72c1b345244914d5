# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Platform-neutral application image assembly."""

from __future__ import annotations

import shutil
import stat
from abc import ABC, abstractmethod
from collections.abc import Mapping
from pathlib import Path
from typing import Final

from ..core.logging import info, verbose
from ..modules.assembler import DEFAULT_EXCLUDE_FILES, RuntimeImageAssembler
from ..modules.classify import ModuleClassifier
from ..modules.resolver import ModuleResolver
from ..params import standard
from ..params.store import ParameterStore
from ..resources.locator import write_resource
from .launch_config import LaunchConfig

EXECUTABLE_MODE: Final[int] = stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH


def launcher_name(store: ParameterStore) -> str:
    """Return the launcher file name stem for ``store``.

    Args:
        store: Parameter store for the launcher.

    Returns:
        str: File-system safe application name, falling back to the main class.
    """

    return standard.APP_FS_NAME.fetch(store) or standard.MAIN_CLASS.fetch(store) or "launcher"


def secondary_launcher_store(store: ParameterStore, overrides: Mapping[str, object]) -> ParameterStore:
    """Return a store describing one secondary launcher.

    Caller overrides of the primary launcher are inherited; every default is
    derived afresh so that names follow the secondary launcher's own values.

    Args:
        store: Store of the primary launcher.
        overrides: Parameters of the secondary launcher.

    Returns:
        ParameterStore: Independent store for the secondary launcher.
    """

    launcher_store = store.copy(overrides_only=True)
    if standard.APP_FS_NAME.id not in overrides:
        launcher_store.remove(standard.APP_FS_NAME)
    for key, value in overrides.items():
        launcher_store.set(key, value)
    return launcher_store


def make_executable(path: Path) -> None:
    """Set ``rwxr-xr-x`` permissions on ``path``."""

    path.chmod(EXECUTABLE_MODE)


class AppImageBuilder(ABC):
    """Assemble the directory tree of one runnable application.

    Subclasses set :attr:`root`, :attr:`app_dir` and :attr:`runtime_root` for
    their platform layout and implement :meth:`prepare_application_files`.

    Args:
        store: Parameter store for the run.
        image_dir: Directory the image root is created in.
        classifier: Classifier shared with the module resolver.
    """

    platform_name: str = ""
    launcher_template: str = ""
    runtime_location: str = ""

    def __init__(self, store: ParameterStore, image_dir: Path, *, classifier: ModuleClassifier | None = None) -> None:
        self.store = store
        self.image_dir = Path(image_dir)
        self.classifier = classifier or ModuleClassifier()
        self.root: Path = self.image_dir / launcher_name(store)
        self.app_dir: Path = self.root / "app"
        self.runtime_root: Path = self.root / "runtime"
        self.java_version: str = ""

    @property
    def exclude_file_list(self) -> list[str]:
        """Return glob patterns left out of the runtime image."""

        return list(DEFAULT_EXCLUDE_FILES)

    # -- Layout --------------------------------------------------------------

    @abstractmethod
    def prepare_application_files(self) -> None:
        """Populate the image with launchers, configuration and resources."""

        raise NotImplementedError

    @abstractmethod
    def create_launcher(self, store: ParameterStore) -> Path:
        """Install the launcher and its configuration for ``store``.

        Args:
            store: Parameter store for the launcher.

        Returns:
            Path: Installed launcher executable.
        """

        raise NotImplementedError

    def prepare_secondary_launchers(self) -> list[Path]:
        """Create a launcher for every entry of ``secondaryLaunchers``.

        Returns:
            list[Path]: Installed secondary launcher executables.
        """

        launchers: list[Path] = []
        for overrides in standard.SECONDARY_LAUNCHERS.fetch(self.store) or []:
            launchers.append(self.create_launcher(secondary_launcher_store(self.store, overrides)))
        return launchers

    def copy_app_resources(self, destination: Path | None = None) -> list[Path]:
        """Copy every application resource into ``destination``.

        Resource sets qualified for another host are skipped. Files missing
        under a set's base directory are looked up under ``srcdir``.

        Args:
            destination: Target directory; defaults to :attr:`app_dir`.

        Returns:
            list[Path]: Copied destination paths.
        """

        target_root = destination or self.app_dir
        source_dir = standard.SOURCE_DIR.fetch(self.store)
        copied: list[Path] = []
        for resource_set in standard.APP_RESOURCES_LIST.fetch(self.store) or []:
            if not resource_set.matches_host():
                verbose(f"Skipping resources for {resource_set.os} {resource_set.arch or ''}".rstrip())
                continue
            for relative in resource_set:
                source = resource_set.base_dir / relative
                if not source.exists() and source_dir is not None:
                    source = Path(source_dir, relative)
                target = target_root / relative
                target.parent.mkdir(parents=True, exist_ok=True)
                if source.is_dir():
                    shutil.copytree(source, target, dirs_exist_ok=True)
                else:
                    shutil.copy2(source, target)
                copied.append(target)
        return copied

    def write_launch_config(self, store: ParameterStore, path: Path, runtime_location: str | None = None) -> Path:
        """Write the launcher configuration for ``store`` to ``path``.

        Args:
            store: Parameter store for the launcher.
            path: Destination configuration file.
            runtime_location: Runtime directory relative to ``$APPDIR``.

        Returns:
            Path: Written configuration file.
        """

        config = LaunchConfig.from_store(
            store,
            runtime_location or self.runtime_location,
            classifier=self.classifier,
            java_version=self.java_version,
        )
        return config.write(path)

    def install_launcher_executable(self, store: ParameterStore, target: Path) -> Path:
        """Copy the launcher executable for ``store`` to ``target``.

        ``launcherExecutable`` replaces the built-in launcher when set.

        Args:
            store: Parameter store for the launcher.
            target: Destination file.

        Returns:
            Path: Installed executable.
        """

        custom = standard.LAUNCHER_EXECUTABLE.fetch(store)
        write_resource(
            target,
            f"{self.platform_name}/{target.name}",
            "launcher",
            self.launcher_template,
            override_file=custom,
            drop_in_root=standard.DROP_IN_RESOURCES_ROOT.fetch(store),
        )
        make_executable(target)
        return target

    def copy_icon(self, suffix: str, target: Path) -> Path | None:
        """Copy the ``icon`` parameter to ``target`` when it has ``suffix``.

        Args:
            suffix: Required file suffix, such as ``.png``.
            target: Destination file.

        Returns:
            Path | None: Copied icon, ``None`` when no usable icon is set.
        """

        icon = standard.ICON.fetch(self.store)
        if icon is None:
            return None
        if icon.suffix.lower() != suffix:
            info(
                f'The specified icon "{icon}" is not a {suffix[1:].upper()} file and will not be used. '
                "The default icon will be used in its place."
            )
            return None
        target.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(icon, target)
        return target

    # -- Build ---------------------------------------------------------------

    def build(self, resolver: ModuleResolver, assembler: RuntimeImageAssembler) -> Path:
        """Assemble the runtime and then the application files.

        Args:
            resolver: Resolver over the run's module path.
            assembler: Runtime image assembler.

        Returns:
            Path: Image root directory.
        """

        request = resolver.resolve_for_image(self.store, self.runtime_root, exclude_files=self.exclude_file_list)
        self.java_version = resolver.runtime_version()
        assembler.assemble(request)
        self.prepare_application_files()
        return self.root


__all__ = [
    "AppImageBuilder",
    "EXECUTABLE_MODE",
    "launcher_name",
    "make_executable",
    "secondary_launcher_store",
]
