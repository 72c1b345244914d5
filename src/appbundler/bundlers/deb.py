# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Debian package bundler."""

from __future__ import annotations

import re
import shutil
import struct
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from ..core.logging import info, is_debug, verbose
from ..core.runtime.process import run_tool
from ..errors import ConfigurationInvalidError
from ..image.builder import launcher_name, make_executable, secondary_launcher_store
from ..params import standard
from ..params.descriptor import ParameterDescriptor, ValueType
from ..params.store import ParameterStore
from ..platform import current_arch
from ..resources.locator import write_resource
from .base import check_license_files, ensure_output_dir
from .image import ImageBundler, linux_image_bundler
from .installer import InstallerBundler, association_stores, tool_available

TOOL_DPKG: Final[str] = "dpkg-deb"
TOOL_FAKEROOT: Final[str] = "fakeroot"
MAX_DAEMON_NAME: Final[int] = 16
DEB_BUNDLE_NAME_RE: Final[re.Pattern[str]] = re.compile(r"^[a-z][a-z\d\+\-\.]+")
_NAME_SEPARATORS_RE: Final[re.Pattern[str]] = re.compile(r"[ _]")
_PNG_SIGNATURE: Final[bytes] = b"\x89PNG\r\n\x1a\n"

_SCRIPTS: Final[tuple[str, ...]] = ("preinst", "prerm", "postinst", "postrm")


def _derive_bundle_name(store: ParameterStore) -> str | None:
    name = standard.APP_NAME.fetch(store)
    if name is None:
        return None
    return _NAME_SEPARATORS_RE.sub("-", name.lower())


def _derive_license_text(store: ParameterStore) -> str | None:
    license_files = standard.LICENSE_FILE.fetch(store) or []
    if license_files:
        for resource_set in standard.APP_RESOURCES_LIST.fetch(store) or []:
            if resource_set.contains(license_files[0]):
                path = resource_set.base_dir / license_files[0]
                try:
                    return path.read_text(encoding="utf-8")
                except OSError as exc:
                    verbose(f"Unable to read license file {path}: {exc}")
    return standard.LICENSE_TYPE.fetch(store)


def _derive_xdg_prefix(store: ParameterStore) -> str:
    vendor = standard.VENDOR.fetch(store) if standard.VENDOR.id in store else "appbundler"
    return re.sub(r"\s", "", f"{vendor}-{standard.APP_FS_NAME.fetch(store)}")


BUNDLE_NAME: ParameterDescriptor[str] = ParameterDescriptor(
    "linux.bundleName",
    ValueType.STRING,
    _derive_bundle_name,
    name="Bundle Name",
    description="Debian package name; lower case letters, digits, '+', '-' and '.'.",
)
FULL_PACKAGE_NAME: ParameterDescriptor[str] = ParameterDescriptor(
    "linux.deb.fullPackageName",
    ValueType.STRING,
    lambda store: f"{BUNDLE_NAME.fetch(store)}-{standard.VERSION.fetch(store)}",
    name="Full Package Name",
)
MAINTAINER: ParameterDescriptor[str] = ParameterDescriptor(
    "linux.deb.maintainer",
    ValueType.STRING,
    lambda store: f"{standard.VENDOR.fetch(store)} <{standard.EMAIL.fetch(store)}>",
    name="Maintainer",
)
LICENSE_TEXT: ParameterDescriptor[str] = ParameterDescriptor(
    "linux.deb.licenseText",
    ValueType.STRING,
    _derive_license_text,
    name="License Text",
)
XDG_FILE_PREFIX: ParameterDescriptor[str] = ParameterDescriptor(
    "linux.xdg-prefix",
    ValueType.STRING,
    _derive_xdg_prefix,
    name="Prefix for XDG files (mime, desktop)",
    description="Prefix for XDG MimeInfo and Desktop Files. Defaults to <vendor>-<appName>, with spaces dropped.",
)

DEB_DESCRIPTORS: tuple[ParameterDescriptor[object], ...] = (
    BUNDLE_NAME,
    FULL_PACKAGE_NAME,
    MAINTAINER,
    LICENSE_TEXT,
    XDG_FILE_PREFIX,
    standard.COPYRIGHT,
    standard.CATEGORY,
    standard.DESCRIPTION,
    standard.EMAIL,
    standard.ICON,
    standard.LICENSE_FILE,
    standard.LICENSE_TYPE,
    standard.TITLE,
    standard.VENDOR,
)  # type: ignore[assignment]


def validate_bundle_name(name: str | None) -> str:
    """Return ``name`` when it is a valid Debian package name.

    Args:
        name: Candidate package name.

    Returns:
        str: ``name`` unchanged.

    Raises:
        ConfigurationInvalidError: If ``name`` is missing or malformed.
    """

    if name is None or DEB_BUNDLE_NAME_RE.fullmatch(name) is None:
        raise ConfigurationInvalidError(
            f'Invalid value "{name}" for the package name.',
            f'Set the "{BUNDLE_NAME.id}" parameter to a valid Debian package name. Note that the package names '
            "must consist only of lower case letters (a-z), digits (0-9), plus (+) and minus (-) signs, and "
            "periods (.). They must be at least two characters long and must start with an alphanumeric character.",
        )
    return name


def deb_arch(machine: str | None = None) -> str:
    """Return the Debian architecture name for ``machine``.

    Args:
        machine: Normalised machine name; defaults to the host's.

    Returns:
        str: ``amd64`` for 64-bit x86, ``i386`` for 32-bit x86, otherwise ``machine``.
    """

    arch = machine or current_arch()
    if arch in {"x86_64", "amd64"}:
        return "amd64"
    if arch in {"i386", "i486", "i586", "i686", "x86"}:
        return "i386"
    return arch


def installed_size_kb(directory: Path) -> int:
    """Return the size of every regular file below ``directory`` in KiB."""

    return sum(path.stat().st_size >> 10 for path in directory.rglob("*") if path.is_file())


def square_png_size(path: Path) -> int:
    """Return the edge length of a square PNG, ``0`` otherwise.

    Args:
        path: Candidate icon file.

    Returns:
        int: Width when width equals height, else ``0``.
    """

    try:
        header = path.read_bytes()[:24]
    except OSError:
        return 0
    if len(header) < 24 or not header.startswith(_PNG_SIGNATURE):
        return 0
    width, height = struct.unpack(">II", header[16:24])
    return width if width == height else 0


class DebBundler(InstallerBundler):
    """Build ``.deb`` packages installing the application under ``/opt``."""

    id = "deb"
    name = "Linux DEB Installer"
    description = "Linux Debian Bundle."

    def __init__(self, image_bundler: ImageBundler | None = None) -> None:
        super().__init__(image_bundler or linux_image_bundler())

    def installer_descriptors(self) -> Sequence[ParameterDescriptor[object]]:
        return DEB_DESCRIPTORS

    # -- Layout ----------------------------------------------------------------

    def image_dir(self, store: ParameterStore) -> Path:
        """Return the package staging directory ``linux-deb.image/<full name>``."""

        return self.build_root(store) / "linux-deb.image" / (FULL_PACKAGE_NAME.fetch(store) or "package")

    def app_root(self, store: ParameterStore) -> Path:
        """Return the staged application directory ``opt/<fs name>``."""

        return self.image_dir(store) / "opt" / launcher_name(store)

    def config_dir(self, store: ParameterStore) -> Path:
        """Return the ``DEBIAN`` control directory."""

        return self.image_dir(store) / "DEBIAN"

    # -- Lifecycle -------------------------------------------------------------

    def do_validate(self, store: ParameterStore) -> bool:
        self.check_platform()
        self.validate_image(store)
        for tool in (TOOL_DPKG, TOOL_FAKEROOT):
            if not tool_available(tool):
                raise ConfigurationInvalidError(f"Can not find {tool}.", "Please install required packages.")
        if not check_license_files(store):
            info(
                "Debian packages should specify a license. The absence of a license will cause some linux "
                "distributions to complain about the quality of the application."
            )
        service_hint = bool(standard.SERVICE_HINT.fetch(store))
        bundle_name = BUNDLE_NAME.fetch(store) or ""
        if service_hint and len(bundle_name) > MAX_DAEMON_NAME:
            raise ConfigurationInvalidError(
                f'The bundle name "{bundle_name}" is too long for a daemon.',
                f'Set a bundler argument "{BUNDLE_NAME.id}" to a bundle name that is shorter than '
                f"{MAX_DAEMON_NAME} characters.",
            )
        system_wide = standard.SYSTEM_WIDE.fetch(store)
        if service_hint and system_wide is False:
            raise ConfigurationInvalidError(
                "Bundler doesn't support per-user daemons.",
                "Make sure that the system wide hint is set to true.",
            )
        for index, association in enumerate(association_stores(store)):
            mimes = standard.FA_CONTENT_TYPE.fetch(association) or []
            if not mimes:
                raise ConfigurationInvalidError(
                    f"No MIME types were specified for File Association number {index}.",
                    "For Linux Bundling specify one and only one MIME type for each file association.",
                )
            if len(mimes) > 1:
                raise ConfigurationInvalidError(
                    f"More than one MIME types was specified for File Association number {index}.",
                    "For Linux Bundling specify one and only one MIME type for each file association.",
                )
        validate_bundle_name(BUNDLE_NAME.fetch(store))
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        ensure_output_dir(output_dir)
        image_dir = self.image_dir(store)
        app_root = self.app_root(store)
        try:
            self.config_dir(store).mkdir(parents=True, exist_ok=True)
            app_root.parent.mkdir(parents=True, exist_ok=True)
            image = self.prepare_image(store, app_root.parent)
            if image is None:
                return None
            if image != app_root:
                shutil.copytree(image, app_root, symlinks=True, dirs_exist_ok=True)
            self.prepare_project_config(store, app_root)
            return self.build_deb(store, output_dir)
        finally:
            self.cleanup_image_dir(image_dir)

    def cleanup_image_dir(self, image_dir: Path) -> None:
        """Remove the staging directory unless debugging."""

        if not image_dir.exists():
            return
        if is_debug():
            info(f"Kept working directory for debug: {image_dir.absolute()}")
            return
        shutil.rmtree(image_dir, ignore_errors=True)

    # -- Package contents -------------------------------------------------------

    def replacement_data(self, store: ParameterStore, app_root: Path | None = None) -> dict[str, str | None]:
        """Return template placeholder values for ``store``.

        Args:
            store: Parameter store of the primary or a secondary launcher.
            app_root: Staged application directory used for the installed size.

        Returns:
            dict[str, str | None]: Placeholder mapping.
        """

        installed_size = installed_size_kb(app_root) if app_root is not None else 0
        return {
            "APPLICATION_FS_NAME": launcher_name(store),
            "APPLICATION_PACKAGE": BUNDLE_NAME.fetch(store),
            "APPLICATION_VENDOR": standard.VENDOR.fetch(store),
            "APPLICATION_MAINTAINER": MAINTAINER.fetch(store),
            "APPLICATION_VERSION": standard.VERSION.fetch(store),
            "APPLICATION_LAUNCHER_FILENAME": launcher_name(store),
            "APPLICATION_LICENSE_TYPE": standard.LICENSE_TYPE.fetch(store),
            "APPLICATION_LICENSE_TEXT": LICENSE_TEXT.fetch(store),
            "APPLICATION_DESCRIPTION": standard.DESCRIPTION.fetch(store),
            "APPLICATION_SUMMARY": standard.TITLE.fetch(store),
            "APPLICATION_COPYRIGHT": standard.COPYRIGHT.fetch(store),
            "APPLICATION_ARCH": deb_arch(),
            "APPLICATION_INSTALLED_SIZE": str(installed_size),
            "APPLICATION_NAME": standard.APP_NAME.fetch(store),
            "XDG_PREFIX": XDG_FILE_PREFIX.fetch(store),
            "DEPLOY_BUNDLE_CATEGORY": standard.CATEGORY.fetch(store),
            "SERVICE_HINT": _flag(standard.SERVICE_HINT.fetch(store)),
            "START_ON_INSTALL": _flag(standard.START_ON_INSTALL.fetch(store)),
            "STOP_ON_UNINSTALL": _flag(standard.STOP_ON_UNINSTALL.fetch(store)),
            "RUN_AT_STARTUP": _flag(standard.RUN_AT_STARTUP.fetch(store)),
        }

    def prepare_project_config(self, store: ParameterStore, app_root: Path) -> None:
        """Write the control files, scripts and desktop entries for the package.

        Args:
            store: Parameter store for the run.
            app_root: Staged application directory below ``opt``.
        """

        data = self.replacement_data(store, app_root)
        fs_name = data["APPLICATION_FS_NAME"]
        drop_in_root = standard.DROP_IN_RESOURCES_ROOT.fetch(store)

        install_lines: list[str] = []
        remove_lines: list[str] = []
        for overrides in standard.SECONDARY_LAUNCHERS.fetch(store) or []:
            launcher_store = secondary_launcher_store(store, overrides)
            launcher_data = self.replacement_data(launcher_store)
            launcher_data["APPLICATION_FS_NAME"] = fs_name
            launcher_data["DESKTOP_MIMES"] = ""
            desktop_file = app_root / f"{launcher_name(launcher_store)}.desktop"
            write_resource(
                desktop_file,
                f"linux/{desktop_file.name}",
                "Menu shortcut descriptor",
                "linux/template.desktop",
                data=launcher_data,
                drop_in_root=drop_in_root,
            )
            self.copy_menu_icon(launcher_store, app_root)
            desktop_path = f"/opt/{fs_name}/{launcher_name(launcher_store)}.desktop"
            install_lines.append(f"        xdg-desktop-menu install --novendor {desktop_path}\n")
            remove_lines.append(f"        xdg-desktop-menu uninstall --novendor {desktop_path}\n")
        data["SECONDARY_LAUNCHERS_INSTALL"] = "".join(install_lines)
        data["SECONDARY_LAUNCHERS_REMOVE"] = "".join(remove_lines)

        data.update(self.file_association_data(store, app_root, fs_name or ""))
        self.copy_menu_icon(store, app_root)

        write_resource(
            app_root / f"{fs_name}.desktop",
            f"linux/{fs_name}.desktop",
            "Menu shortcut descriptor",
            "linux/template.desktop",
            data=data,
            drop_in_root=drop_in_root,
        )
        config_dir = self.config_dir(store)
        write_resource(
            config_dir / "control",
            "linux/control",
            "DEB control file",
            "linux/template.control",
            data=data,
            drop_in_root=drop_in_root,
        )
        for script in _SCRIPTS:
            target = write_resource(
                config_dir / script,
                f"linux/{script}",
                f"DEB {script} script",
                f"linux/template.{script}",
                data=data,
                drop_in_root=drop_in_root,
            )
            make_executable(target)
        write_resource(
            config_dir / "copyright",
            "linux/copyright",
            "DEB copyright file",
            "linux/template.copyright",
            data=data,
            drop_in_root=drop_in_root,
        )
        if standard.SERVICE_HINT.fetch(store):
            init_script = write_resource(
                app_root / f"{data['APPLICATION_PACKAGE']}.init",
                f"linux/{data['APPLICATION_PACKAGE']}.init",
                "DEB init.d script",
                "linux/template.deb.init.script",
                data=data,
                drop_in_root=drop_in_root,
            )
            make_executable(init_script)

    def copy_menu_icon(self, store: ParameterStore, app_root: Path) -> Path | None:
        """Copy the launcher's PNG icon next to its desktop file."""

        icon = standard.ICON.fetch(store)
        if icon is None or not icon.exists() or icon.suffix.lower() != ".png":
            return None
        target = app_root / f"{launcher_name(store)}.png"
        if target.exists():
            return target
        shutil.copy2(icon, target)
        return target

    def file_association_data(self, store: ParameterStore, app_root: Path, fs_name: str) -> dict[str, str]:
        """Write the shared-mime-info file and return its install hooks.

        Args:
            store: Parameter store for the run.
            app_root: Staged application directory.
            fs_name: Installed directory name below ``/opt``.

        Returns:
            dict[str, str]: ``FILE_ASSOCIATION_INSTALL``, ``FILE_ASSOCIATION_REMOVE``
            and ``DESKTOP_MIMES`` placeholder values.
        """

        result = {"FILE_ASSOCIATION_INSTALL": "", "FILE_ASSOCIATION_REMOVE": "", "DESKTOP_MIMES": ""}
        mime_info_file = f"{XDG_FILE_PREFIX.fetch(store)}-MimeInfo.xml"
        mime_info = [
            "<?xml version=\"1.0\"?>\n"
            "<mime-info xmlns='http://www.freedesktop.org/standards/shared-mime-info'>\n",
        ]
        registrations: list[str] = []
        deregistrations: list[str] = []
        mimes: list[str] = []
        for association in association_stores(store):
            content_types = standard.FA_CONTENT_TYPE.fetch(association) or []
            if not content_types:
                continue
            mime = content_types[0]
            extensions = standard.FA_EXTENSIONS.fetch(association)
            if extensions is None:
                info("Creating association with null extension.")
            mime_info.append(f"  <mime-type type='{mime}'>\n")
            description = standard.FA_DESCRIPTION.fetch(association)
            if description:
                mime_info.append(f"    <comment>{description}</comment>\n")
            for extension in extensions or []:
                mime_info.append(f"    <glob pattern='*.{extension}'/>\n")
            mime_info.append("  </mime-type>\n")
            if not mimes:
                registrations.append(f"        xdg-mime install /opt/{fs_name}/{mime_info_file}\n")
                deregistrations.append(f"        xdg-mime uninstall /opt/{fs_name}/{mime_info_file}\n")
            mimes.append(mime)

            icon = standard.FA_ICON.fetch(association)
            size = square_png_size(icon) if icon is not None else 0
            if icon is not None and size > 0:
                target = app_root / f"{fs_name}_fa_{icon.name}"
                shutil.copy2(icon, target)
                dash_mime = mime.replace("/", "-")
                icon_args = f"--context mimetypes --size {size} /opt/{fs_name}/{target.name} {dash_mime}"
                registrations.append(f"        xdg-icon-resource install {icon_args}\n")
                deregistrations.append(f"        xdg-icon-resource uninstall {icon_args}\n")
        if not mimes:
            return result
        mime_info.append("</mime-info>")
        (app_root / mime_info_file).write_text("".join(mime_info), encoding="utf-8")
        result["FILE_ASSOCIATION_INSTALL"] = "".join(registrations)
        result["FILE_ASSOCIATION_REMOVE"] = "".join(deregistrations)
        result["DESKTOP_MIMES"] = "MimeType=" + ";".join(mimes)
        return result

    def build_deb(self, store: ParameterStore, output_dir: Path) -> Path:
        """Run ``fakeroot dpkg-deb`` over the staged package.

        Args:
            store: Parameter store for the run.
            output_dir: Directory receiving the package.

        Returns:
            Path: Built ``.deb`` file.
        """

        full_name = FULL_PACKAGE_NAME.fetch(store)
        out_file = (output_dir / f"{full_name}.deb").absolute()
        verbose(f"Generating DEB for installer to: {out_file}")
        out_file.parent.mkdir(parents=True, exist_ok=True)
        run_tool(
            [TOOL_FAKEROOT, TOOL_DPKG, "-b", str(full_name), str(out_file)],
            cwd=self.image_dir(store).parent,
            verbose_output=bool(standard.VERBOSE.fetch(store)),
        )
        info(f"Package (.deb) saved to: {out_file}")
        return out_file


def _flag(value: bool | None) -> str:
    return "true" if value else "false"


__all__ = [
    "BUNDLE_NAME",
    "DEB_BUNDLE_NAME_RE",
    "DEB_DESCRIPTORS",
    "DebBundler",
    "FULL_PACKAGE_NAME",
    "LICENSE_TEXT",
    "MAINTAINER",
    "XDG_FILE_PREFIX",
    "deb_arch",
    "installed_size_kb",
    "square_png_size",
    "validate_bundle_name",
]
