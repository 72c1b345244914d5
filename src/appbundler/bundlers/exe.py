# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Windows installer bundler driving the Inno Setup compiler, and its service component."""

from __future__ import annotations

import os
import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from ..core.logging import info, is_debug, verbose
from ..core.runtime.process import run_tool
from ..errors import ConfigurationInvalidError
from ..image.builder import launcher_name, secondary_launcher_store
from ..image.windows import launcher_suffix
from ..params import standard
from ..params.descriptor import ParameterDescriptor, ValueType
from ..params.store import ParameterStore
from ..platform import current_arch
from ..resources.locator import write_resource
from .base import Bundler, BundlerKind, check_license_files, ensure_output_dir
from .image import ImageBundler, windows_image_bundler
from .installer import InstallerBundler, association_stores, installer_file_name

TOOL_INNO_SETUP_COMPILER: Final[str] = "iscc.exe"
INNO_SETUP_DIRS: Final[tuple[str, ...]] = (
    "C:\\Program Files (x86)\\Inno Setup 5",
    "C:\\Program Files\\Inno Setup 5",
    "C:\\Program Files (x86)\\Inno Setup 6",
    "C:\\Program Files\\Inno Setup 6",
)
SERVICE_LAUNCHER_SUFFIX: Final[str] = "Svc"
MAX_COPYRIGHT_LENGTH: Final[int] = 100
MAX_APP_IDENTIFIER_LENGTH: Final[int] = 126
CRLF: Final[str] = "\r\n"


def _find_iscc(_store: ParameterStore) -> str | None:
    search = [*os.environ.get("PATH", "").split(os.pathsep), *INNO_SETUP_DIRS]
    for directory in search:
        if not directory:
            continue
        candidate = Path(directory.replace('"', ""), TOOL_INNO_SETUP_COMPILER)
        if candidate.is_file():
            return str(candidate)
    return None


def _bool_value(raw: str, _store: ParameterStore) -> bool | None:
    return None if raw.strip().lower() in {"", "null"} else raw.strip().lower() == "true"


ISCC_EXECUTABLE: ParameterDescriptor[str] = ParameterDescriptor(
    "win.exe.iscc.exe",
    ValueType.STRING,
    _find_iscc,
    name="InnoSetup iscc.exe location",
    description="File path to iscc.exe from the InnoSetup tool.",
)
EXE_SYSTEM_WIDE: ParameterDescriptor[bool] = ParameterDescriptor(
    "win.exe.systemWide",
    ValueType.BOOLEAN,
    lambda store: bool(standard.SYSTEM_WIDE.fetch(store)) if store.is_overridden(standard.SYSTEM_WIDE) else False,
    _bool_value,
    name="System Wide",
    description="Install for every user instead of the current one. EXE installers default to per-user.",
)
MENU_GROUP: ParameterDescriptor[str] = ParameterDescriptor(
    "win.menuGroup",
    ValueType.STRING,
    standard.VENDOR.fetch,
    name="Menu Group",
    description="Start menu group holding the shortcuts.",
)
INSTALLDIR_CHOOSER: ParameterDescriptor[bool] = ParameterDescriptor(
    "installdirChooser",
    ValueType.BOOLEAN,
    lambda _store: False,
    _bool_value,
    name="Installation Directory Chooser",
)
BIT_ARCH_64: ParameterDescriptor[bool] = ParameterDescriptor(
    "win.64Bit",
    ValueType.BOOLEAN,
    lambda _store: current_arch() in {"x86_64", "arm64"},
    _bool_value,
    name="64 Bit",
)
SERVICE_LAUNCHER: ParameterDescriptor[Path] = ParameterDescriptor(
    "win.service.launcher",
    ValueType.PATH,
    string_parser=lambda raw, _store: Path(raw),
    name="Service Launcher",
    description="Native launcher that installs and runs the application as a Windows service.",
)

EXE_DESCRIPTORS: tuple[ParameterDescriptor[object], ...] = (
    ISCC_EXECUTABLE,
    EXE_SYSTEM_WIDE,
    MENU_GROUP,
    INSTALLDIR_CHOOSER,
    BIT_ARCH_64,
    standard.COPYRIGHT,
    standard.DESCRIPTION,
    standard.LICENSE_FILE,
    standard.MENU_HINT,
    standard.SHORTCUT_HINT,
    standard.TITLE,
    standard.VENDOR,
    standard.VERSION,
)  # type: ignore[assignment]

SERVICE_DESCRIPTORS: tuple[ParameterDescriptor[object], ...] = (
    standard.APP_NAME,
    standard.BUILD_ROOT,
    standard.SYSTEM_WIDE,
    SERVICE_LAUNCHER,
)  # type: ignore[assignment]

SINGLE_LINE_DESCRIPTORS: Final[tuple[ParameterDescriptor[str], ...]] = (
    standard.APP_NAME,
    standard.COPYRIGHT,
    standard.DESCRIPTION,
    MENU_GROUP,
    standard.TITLE,
    standard.VENDOR,
    standard.VERSION,
)


def innosetup_escape(value: str | None) -> str:
    """Quote ``value`` for an Inno Setup script when it needs it.

    Args:
        value: Raw value.

    Returns:
        str: ``value`` wrapped in double quotes, with embedded quotes doubled,
        when it contains a quote or surrounding whitespace.
    """

    text = value or ""
    if '"' in text or text.strip() != text:
        return '"' + text.replace('"', '""') + '"'
    return text


def _single_line(store: ParameterStore, descriptor: ParameterDescriptor[str]) -> str:
    value = descriptor.fetch(store) or ""
    if "\r" in value or "\n" in value:
        raise ConfigurationInvalidError(
            f"Parameter '{descriptor.id}' cannot contain a newline.",
            f"Change the value of '{descriptor.id}' so that it does not contain any newlines",
        )
    return innosetup_escape(value)


def _check(flag: bool | None) -> str:
    return "returnTrue" if flag else "returnFalse"


def service_name(store: ParameterStore) -> str:
    """Return the service launcher stem, ``<fs name>Svc``."""

    return f"{launcher_name(store)}{SERVICE_LAUNCHER_SUFFIX}"


class WinServiceBundler(Bundler):
    """Copy the native service launcher next to the application launcher.

    The service launcher registers the application with the Windows service
    manager. It shares the platform of the Windows image bundler it is built
    around; :class:`ExeBundler` runs it as a dependent task into the staged
    application folder when the service hint is set.

    Args:
        image_bundler: Windows image bundler the service belongs to.
    """

    id = "windows.service"
    name = "Windows Service Component"
    description = "Windows Service Component - contains native launcher for service app."
    bundle_type = BundlerKind.IMAGE

    def __init__(self, image_bundler: ImageBundler | None = None) -> None:
        self.image_bundler = image_bundler or windows_image_bundler()
        self.platform = self.image_bundler.platform

    def descriptors(self) -> Sequence[ParameterDescriptor[object]]:
        return SERVICE_DESCRIPTORS

    def do_validate(self, store: ParameterStore) -> bool:
        self.check_platform()
        launcher = SERVICE_LAUNCHER.fetch(store)
        if launcher is None or not launcher.is_file():
            raise ConfigurationInvalidError(
                f"Service launcher not found ({launcher}).",
                f"Set {SERVICE_LAUNCHER.id} to the service launcher executable.",
            )
        if standard.SYSTEM_WIDE.fetch(store) is False:
            raise ConfigurationInvalidError(
                "Bundler doesn't support per-user services.",
                "Make sure that the system wide hint is set to true.",
            )
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        ensure_output_dir(output_dir)
        launcher = SERVICE_LAUNCHER.fetch(store)
        if launcher is None:
            return None
        if not dependent_task:
            info(f"Creating service bundle: {service_name(store)} in {output_dir.absolute()}")
        target = output_dir / f"{service_name(store)}.exe"
        shutil.copyfile(launcher, target)
        target.chmod(0o755)
        if not dependent_task:
            info(f"Result service bundle: {output_dir.absolute()}")
        return target


class ExeBundler(InstallerBundler):
    """Build a Windows ``.exe`` installer with the Inno Setup compiler.

    Args:
        image_bundler: Bundler producing the application folder.
        service_bundler: Bundler adding the service launcher when the service
            hint is set.
    """

    id = "exe"
    name = "Windows EXE Installer"
    description = "Microsoft Windows EXE Installer, via InnoIDE."

    def __init__(
        self,
        image_bundler: ImageBundler | None = None,
        service_bundler: WinServiceBundler | None = None,
    ) -> None:
        super().__init__(image_bundler or windows_image_bundler())
        self.service_bundler = service_bundler or WinServiceBundler(self.image_bundler)

    def installer_descriptors(self) -> Sequence[ParameterDescriptor[object]]:
        return EXE_DESCRIPTORS

    def image_dir(self, store: ParameterStore) -> Path:
        """Return the staging directory the compiler runs in."""

        return self.build_root(store) / "win-exe.image"

    def project_file(self, store: ParameterStore) -> Path:
        """Return the generated ``<fs name>.iss`` script path."""

        return self.image_dir(store) / f"{launcher_name(store)}.iss"

    def do_validate(self, store: ParameterStore) -> bool:
        self.check_platform()
        self.validate_image(store)
        for descriptor in SINGLE_LINE_DESCRIPTORS:
            _single_line(store, descriptor)
        if len(standard.COPYRIGHT.fetch(store) or "") > MAX_COPYRIGHT_LENGTH:
            raise ConfigurationInvalidError(
                "The copyright string is too long for InnoSetup.",
                f"Provide a copyright string shorter than {MAX_COPYRIGHT_LENGTH} characters.",
            )
        check_license_files(store)
        if standard.SERVICE_HINT.fetch(store):
            self.service_bundler.do_validate(store)
        iscc = ISCC_EXECUTABLE.fetch(store)
        if iscc is None or not Path(iscc).is_file():
            raise ConfigurationInvalidError(
                "Can not find Inno Setup Compiler (iscc.exe).",
                "Download Inno Setup 5 or later from http://www.jrsoftware.org and add it to the PATH.",
            )
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        ensure_output_dir(output_dir)
        iscc = ISCC_EXECUTABLE.fetch(store)
        if iscc is None or not Path(iscc).is_file():
            info("Can not find Inno Setup Compiler (iscc.exe).")
            info(f"InnoSetup compiler set to {iscc}")
            return None
        image_dir = self.image_dir(store)
        try:
            image_dir.mkdir(parents=True, exist_ok=True)
            if not standard.MENU_HINT.fetch(store) and not standard.SHORTCUT_HINT.fetch(store):
                verbose("At least one type of shortcut is required. Enabling menu shortcut.")
                store.set(standard.MENU_HINT, True)
            image = self.prepare_image(store, image_dir)
            if image is None:
                return None
            app_root = image_dir / launcher_name(store)
            if image != app_root:
                shutil.copytree(image, app_root, dirs_exist_ok=True)
            if standard.SERVICE_HINT.fetch(store):
                self.service_bundler.execute(store, app_root, dependent_task=True)
            self.write_project_file(store)
            return self.build_exe(store, iscc, output_dir)
        finally:
            if is_debug():
                info(f"Kept working directory for debug: {image_dir.absolute()}")
            else:
                shutil.rmtree(image_dir, ignore_errors=True)

    # -- Project file ------------------------------------------------------------

    def replacement_data(self, store: ParameterStore) -> dict[str, str | None]:
        """Return the Inno Setup script placeholders for ``store``.

        Args:
            store: Parameter store for the run.

        Returns:
            dict[str, str | None]: Placeholder mapping.

        Raises:
            ConfigurationInvalidError: If a single-line parameter spans lines.
        """

        system_wide = bool(EXE_SYSTEM_WIDE.fetch(store))
        service = bool(standard.SERVICE_HINT.fetch(store))
        license_files = standard.LICENSE_FILE.fetch(store) or []
        name = launcher_name(store)
        identifier = (standard.IDENTIFIER.fetch(store) or name)[:MAX_APP_IDENTIFIER_LENGTH]
        return {
            "PRODUCT_APP_IDENTIFIER": innosetup_escape(identifier),
            "APPLICATION_NAME": _single_line(store, standard.APP_NAME),
            "APPLICATION_FS_NAME": innosetup_escape(name),
            "APPLICATION_VENDOR": _single_line(store, standard.VENDOR),
            "APPLICATION_VERSION": _single_line(store, standard.VERSION),
            "INSTALLER_FILE_NAME": innosetup_escape(installer_file_name(store)),
            "APPLICATION_LAUNCHER_EXECUTABLE": innosetup_escape(f"{name}{launcher_suffix(store)}"),
            "APPLICATION_LAUNCHER_FILENAME": innosetup_escape(name),
            "APPLICATION_DESKTOP_SHORTCUT": _check(standard.SHORTCUT_HINT.fetch(store)),
            "APPLICATION_MENU_SHORTCUT": _check(standard.MENU_HINT.fetch(store)),
            "APPLICATION_GROUP": _single_line(store, MENU_GROUP),
            "APPLICATION_COMMENTS": _single_line(store, standard.TITLE),
            "APPLICATION_COPYRIGHT": _single_line(store, standard.COPYRIGHT),
            "APPLICATION_LICENSE_FILE": innosetup_escape(f"{name}\\app\\{license_files[0]}" if license_files else ""),
            "DISABLE_DIR_PAGE": "No" if INSTALLDIR_CHOOSER.fetch(store) else "Yes",
            "APPLICATION_INSTALL_ROOT": "{pf}" if system_wide else "{localappdata}",
            "APPLICATION_INSTALL_PRIVILEGE": "admin" if system_wide else "lowest",
            "ARCHITECTURE_BIT_MODE": "x64" if BIT_ARCH_64.fetch(store) else "",
            "RUN_FILENAME": innosetup_escape(service_name(store) if service else name),
            "APPLICATION_DESCRIPTION": _single_line(store, standard.DESCRIPTION),
            "APPLICATION_SERVICE": _check(service),
            "START_ON_INSTALL": "-startOnInstall" if standard.START_ON_INSTALL.fetch(store) else "",
            "STOP_ON_UNINSTALL": "-stopOnUninstall" if standard.STOP_ON_UNINSTALL.fetch(store) else "",
            "RUN_AT_STARTUP": "-runAtStartup" if standard.RUN_AT_STARTUP.fetch(store) else "",
            "SECONDARY_LAUNCHERS": self.secondary_launcher_icons(store),
            "FILE_ASSOCIATIONS": self.file_association_entries(store, system_wide),
        }

    def secondary_launcher_icons(self, store: ParameterStore) -> str:
        """Return ``[Icons]`` lines for every secondary launcher."""

        lines: list[str] = []
        for overrides in standard.SECONDARY_LAUNCHERS.fetch(store) or []:
            launcher_store = secondary_launcher_store(store, overrides)
            name = launcher_name(launcher_store)
            executable = f"{name}{launcher_suffix(launcher_store)}"
            if standard.MENU_HINT.fetch(launcher_store):
                lines.append(
                    f'Name: "{{group}}\\{name}"; Filename: "{{app}}\\{executable}"; IconFilename: "{{app}}\\{name}.ico"'
                )
            if standard.SHORTCUT_HINT.fetch(launcher_store):
                lines.append(
                    f'Name: "{{commondesktop}}\\{name}"; Filename: "{{app}}\\{executable}"; '
                    f'IconFilename: "{{app}}\\{name}.ico"'
                )
        return "".join(f"{line}{CRLF}" for line in lines)

    def file_association_entries(self, store: ParameterStore, system_wide: bool) -> str:
        """Return the ``[Registry]`` section registering file associations.

        Args:
            store: Parameter store for the run.
            system_wide: Register under ``HKCR`` instead of the current user.

        Returns:
            str: Script text, empty without associations.
        """

        root = 'Root: HKCR; Subkey: "' if system_wide else 'Root: HKCU; Subkey: "Software\\Classes\\'
        registry_name = launcher_name(store).replace(" ", "")
        executable = f"{launcher_name(store)}{launcher_suffix(store)}"
        entries: list[str] = []
        for index, association in enumerate(association_stores(store)):
            entry_name = f"{registry_name}File" if index == 0 else f"{registry_name}File.{index}"
            extensions = standard.FA_EXTENSIONS.fetch(association)
            if extensions is None:
                info("Creating association with null extension.")
            for extension in extensions or []:
                entries.append(
                    f'{root}.{extension}"; ValueType: string; ValueName: ""; ValueData: "{entry_name}"; '
                    "Flags: uninsdeletevalue"
                )
            if extensions:
                for mime in standard.FA_CONTENT_TYPE.fetch(association) or []:
                    entries.append(
                        f'{root}Mime\\Database\\Content Type\\{mime}"; ValueType: string; ValueName: "Extension"; '
                        f'ValueData: ".{extensions[0]}"; Flags: uninsdeletevalue'
                    )
            description = standard.FA_DESCRIPTION.fetch(association)
            entries.append(
                f'{root}{entry_name}"; ValueType: string; ValueName: ""; ValueData: "{description}"; '
                "Flags: uninsdeletekey"
            )
            icon = standard.FA_ICON.fetch(association)
            if icon is not None and icon.exists():
                entries.append(
                    f'{root}{entry_name}\\DefaultIcon"; ValueType: string; ValueName: ""; '
                    f'ValueData: "{{app}}\\{icon.name}"'
                )
            entries.append(
                f'{root}{entry_name}\\shell\\open\\command"; ValueType: string; ValueName: ""; '
                f'ValueData: """{{app}}\\{executable}"" ""%1"""'
            )
        if not entries:
            return ""
        return f"ChangesAssociations=yes{CRLF}{CRLF}[Registry]{CRLF}" + "".join(f"{entry}{CRLF}" for entry in entries)

    def write_project_file(self, store: ParameterStore) -> Path:
        """Preprocess the Inno Setup template into :meth:`project_file`."""

        target = self.project_file(store)
        return write_resource(
            target,
            f"windows/{target.name}",
            "Inno Setup project file",
            "windows/template.iss",
            data=self.replacement_data(store),
            drop_in_root=standard.DROP_IN_RESOURCES_ROOT.fetch(store),
        )

    def build_exe(self, store: ParameterStore, iscc: str, output_dir: Path) -> Path | None:
        """Compile the project file and return the newest ``.exe`` produced.

        Args:
            store: Parameter store for the run.
            iscc: Path to ``iscc.exe``.
            output_dir: Directory receiving the installer.

        Returns:
            Path | None: Newest installer in ``output_dir``.
        """

        out_dir = output_dir.absolute()
        verbose(f"Generating EXE for installer to: {out_dir}")
        run_tool(
            [iscc, f"/o{out_dir}", str(self.project_file(store).absolute())],
            cwd=self.image_dir(store),
            verbose_output=bool(standard.VERBOSE.fetch(store)),
        )
        info(f"Installer (.exe) saved to: {out_dir}")
        candidates = [path for path in out_dir.glob("*.exe") if path.is_file()]
        return max(candidates, key=lambda path: path.stat().st_mtime, default=None)


__all__ = [
    "BIT_ARCH_64",
    "EXE_DESCRIPTORS",
    "EXE_SYSTEM_WIDE",
    "ExeBundler",
    "INSTALLDIR_CHOOSER",
    "ISCC_EXECUTABLE",
    "MENU_GROUP",
    "SERVICE_DESCRIPTORS",
    "SERVICE_LAUNCHER",
    "WinServiceBundler",
    "innosetup_escape",
    "service_name",
]
