# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""macOS installer bundlers and the launchd daemon component they share."""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from pathlib import Path
from typing import Final

from ..core.logging import info, is_debug, verbose
from ..core.runtime.process import run_tool
from ..errors import ConfigurationInvalidError
from ..image.builder import launcher_name
from ..params import standard
from ..params.descriptor import ParameterDescriptor
from ..params.store import ParameterStore
from ..resources.locator import write_resource
from .base import check_license_files, ensure_output_dir
from .image import ImageBundler, mac_image_bundler
from .installer import InstallerBundler, installer_file_name

HDIUTIL: Final[str] = "hdiutil"
PKGBUILD: Final[str] = "pkgbuild"
PRODUCTBUILD: Final[str] = "productbuild"
SYSTEM_APPLICATIONS: Final[str] = "/Applications"
USER_APPLICATIONS: Final[str] = "~/Applications"
LAUNCH_DAEMONS_DIR: Final[str] = "Library/LaunchDaemons"


class MacInstallerBundler(InstallerBundler):
    """Common staging for installers that package a ``.app`` bundle."""

    def __init__(self, image_bundler: ImageBundler | None = None) -> None:
        super().__init__(image_bundler or mac_image_bundler())

    def images_root(self, store: ParameterStore) -> Path:
        """Return the directory holding the staged ``.app`` bundle."""

        return self.build_root(store) / "images"

    def validate_installer(self, store: ParameterStore) -> None:
        """Run the checks shared by every macOS installer.

        Args:
            store: Parameter store for the run.

        Raises:
            PlatformUnsupportedError: If the host is not macOS.
            ConfigurationInvalidError: If the image or license configuration is unusable.
        """

        self.check_platform()
        self.validate_image(store)
        check_license_files(store)

    def stage_image(self, store: ParameterStore) -> Path | None:
        """Return the ``.app`` bundle to package, assembling it when needed."""

        images_root = self.images_root(store)
        images_root.mkdir(parents=True, exist_ok=True)
        return self.prepare_image(store, images_root)


class DmgBundler(MacInstallerBundler):
    """Build a compressed ``.dmg`` disk image holding the ``.app`` bundle."""

    id = "dmg"
    name = "Mac DMG Installer"
    description = "Mac DMG Installer Bundle."

    def do_validate(self, store: ParameterStore) -> bool:
        self.validate_installer(store)
        if standard.SERVICE_HINT.fetch(store):
            raise ConfigurationInvalidError(
                "DMG bundler doesn't support services.",
                "Make sure that the service hint is set to false.",
            )
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        ensure_output_dir(output_dir)
        info(f"Building DMG package for {standard.APP_NAME.fetch(store)}")
        image = self.stage_image(store)
        if image is None:
            return None
        return self.build_dmg(store, image, output_dir)

    def build_dmg(self, store: ParameterStore, source: Path, output_dir: Path) -> Path:
        """Create a read-write image from ``source`` and compress it.

        Args:
            store: Parameter store for the run.
            source: Folder copied into the volume.
            output_dir: Directory receiving the ``.dmg``.

        Returns:
            Path: Compressed disk image.

        Raises:
            ConfigurationInvalidError: If an existing output file cannot be replaced.
        """

        fs_name = launcher_name(store)
        proto_dmg = (self.images_root(store) / f"{fs_name}-tmp.dmg").absolute()
        final_dmg = (output_dir / f"{installer_file_name(store)}.dmg").absolute()
        verbose(f"Creating DMG file: {final_dmg}")
        proto_dmg.unlink(missing_ok=True)
        try:
            final_dmg.unlink(missing_ok=True)
        except OSError as exc:
            raise ConfigurationInvalidError(
                f"Dmg file exists ({final_dmg}) and can not be removed.",
                "Remove the file or choose another output directory.",
            ) from exc
        proto_dmg.parent.mkdir(parents=True, exist_ok=True)

        verbose_output = bool(standard.VERBOSE.fetch(store))
        run_tool(
            [
                HDIUTIL,
                "create",
                str(proto_dmg),
                "-srcfolder",
                str(source.absolute()),
                "-volname",
                fs_name,
                "-ov",
                "-fs",
                "HFS+J",
                "-format",
                "UDRW",
            ],
            verbose_output=verbose_output,
        )
        run_tool(
            [HDIUTIL, "convert", str(proto_dmg), "-format", "UDZO", "-o", str(final_dmg)],
            verbose_output=verbose_output,
        )
        if not is_debug():
            proto_dmg.unlink(missing_ok=True)
        info(f"Result DMG installer for {standard.APP_NAME.fetch(store)}: {final_dmg}")
        return final_dmg


DAEMON_DESCRIPTORS: tuple[ParameterDescriptor[object], ...] = (
    standard.APP_NAME,
    standard.BUILD_ROOT,
    standard.IDENTIFIER,
    standard.START_ON_INSTALL,
    standard.RUN_AT_STARTUP,
    standard.SYSTEM_WIDE,
)  # type: ignore[assignment]


class MacDaemonBundler(MacInstallerBundler):
    """Write the launchd configuration that runs the installed ``.app`` as a daemon.

    The component is a directory tree rooted at ``<fs name>.daemon`` whose
    ``Library/LaunchDaemons`` folder holds ``<identifier>.launchd.plist``. The
    plist points at the launcher inside ``/Applications/<fs name>.app``.
    :class:`PkgBundler` packages it next to the application when the service
    hint is set.
    """

    id = "mac.daemon"
    name = "Mac Daemon Component"
    description = "Mac Daemon Component - contains configuration files describing daemons."

    def installer_descriptors(self) -> Sequence[ParameterDescriptor[object]]:
        return DAEMON_DESCRIPTORS

    def do_validate(self, store: ParameterStore) -> bool:
        self.check_platform()
        if standard.SYSTEM_WIDE.fetch(store) is False:
            raise ConfigurationInvalidError(
                "Bundler doesn't support per-user daemons.",
                "Make sure that the system wide hint is set to true.",
            )
        return True

    def daemon_identifier(self, store: ParameterStore) -> str:
        """Return the launchd label, ``<identifier>.daemon`` in lower case."""

        return f"{self.plist_stem(store)}.daemon"

    def plist_stem(self, store: ParameterStore) -> str:
        """Return the lower-cased application identifier."""

        return str(standard.IDENTIFIER.fetch(store) or launcher_name(store)).lower()

    def launcher_path(self, store: ParameterStore) -> str:
        """Return the absolute path of the launcher once the ``.app`` is installed."""

        name = launcher_name(store)
        return f"{SYSTEM_APPLICATIONS}/{name}.app/Contents/MacOS/{name}"

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        ensure_output_dir(output_dir)
        root = output_dir / f"{launcher_name(store)}.daemon"
        if root.exists():
            shutil.rmtree(root)
        if not dependent_task:
            info(f"Creating daemon component: {root.absolute()}")
        plist = root / LAUNCH_DAEMONS_DIR / f"{self.plist_stem(store)}.launchd.plist"
        verbose(f"Preparing launchd.plist: {plist.absolute()}")
        write_resource(
            plist,
            "mac/launchd.plist",
            "Bundle launchd config file",
            "mac/launchd.plist.template",
            data={
                "DEPLOY_DAEMON_IDENTIFIER": self.daemon_identifier(store),
                "DEPLOY_DAEMON_LAUNCHER_PATH": self.launcher_path(store),
                "DEPLOY_RUN_AT_LOAD": _plist_flag(standard.START_ON_INSTALL.fetch(store)),
                "DEPLOY_KEEP_ALIVE": _plist_flag(standard.RUN_AT_STARTUP.fetch(store)),
            },
            drop_in_root=standard.DROP_IN_RESOURCES_ROOT.fetch(store),
        )
        return root


def _plist_flag(value: bool | None) -> str:
    return "true" if value else "false"


class PkgBundler(MacInstallerBundler):
    """Build a flat ``.pkg`` installer with ``pkgbuild`` and ``productbuild``.

    With the service hint set, a second component package installs the
    launchd daemon from :class:`MacDaemonBundler` and both go into the product
    archive.

    Args:
        image_bundler: Bundler producing the ``.app``.
        daemon_bundler: Bundler producing the daemon component.
    """

    id = "pkg"
    name = "Mac PKG Installer"
    description = "Mac PKG Installer Bundle."

    def __init__(
        self,
        image_bundler: ImageBundler | None = None,
        daemon_bundler: MacDaemonBundler | None = None,
    ) -> None:
        super().__init__(image_bundler)
        self.daemon_bundler = daemon_bundler or MacDaemonBundler(self.image_bundler)

    def do_validate(self, store: ParameterStore) -> bool:
        self.validate_installer(store)
        if standard.SERVICE_HINT.fetch(store):
            self.daemon_bundler.do_validate(store)
        return True

    def install_location(self, store: ParameterStore) -> str:
        """Return ``/Applications``, or ``~/Applications`` for per-user installs."""

        return USER_APPLICATIONS if standard.SYSTEM_WIDE.fetch(store) is False else SYSTEM_APPLICATIONS

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        ensure_output_dir(output_dir)
        info(f"Building PKG package for {standard.APP_NAME.fetch(store)}")
        image = self.stage_image(store)
        if image is None:
            return None
        return self.build_pkg(store, image, output_dir)

    def build_pkg(self, store: ParameterStore, image: Path, output_dir: Path) -> Path:
        """Wrap ``image`` in a component package and a product archive.

        Args:
            store: Parameter store for the run.
            image: The ``.app`` bundle.
            output_dir: Directory receiving the ``.pkg``.

        Returns:
            Path: Product archive.
        """

        packages_root = self.build_root(store) / "packages"
        payload_root = self.build_root(store) / "payload"
        if payload_root.exists():
            shutil.rmtree(payload_root)
        payload_root.mkdir(parents=True)
        packages_root.mkdir(parents=True, exist_ok=True)
        shutil.copytree(image, payload_root / image.name, symlinks=True)

        app_pkg = (packages_root / f"{launcher_name(store)}-app.pkg").absolute()
        final_pkg = (output_dir / f"{installer_file_name(store)}.pkg").absolute()
        verbose_output = bool(standard.VERBOSE.fetch(store))
        run_tool(
            [
                PKGBUILD,
                "--root",
                str(payload_root.absolute()),
                "--install-location",
                self.install_location(store),
                "--identifier",
                str(standard.IDENTIFIER.fetch(store)),
                "--version",
                str(standard.VERSION.fetch(store)),
                str(app_pkg),
            ],
            verbose_output=verbose_output,
        )
        packages = [app_pkg]
        if standard.SERVICE_HINT.fetch(store):
            packages.append(self.build_daemon_pkg(store, packages_root, verbose_output=verbose_output))
        product = [PRODUCTBUILD]
        for package in packages:
            product.extend(["--package", str(package)])
        run_tool([*product, str(final_pkg)], verbose_output=verbose_output)
        info(f"Result PKG installer for {standard.APP_NAME.fetch(store)}: {final_pkg}")
        return final_pkg

    def build_daemon_pkg(self, store: ParameterStore, packages_root: Path, *, verbose_output: bool) -> Path:
        """Package the daemon component so it installs under ``/Library``.

        Args:
            store: Parameter store for the run.
            packages_root: Directory holding the component packages.
            verbose_output: Forward tool output at info level.

        Returns:
            Path: Daemon component package.
        """

        daemon_root = self.daemon_bundler.execute(store, self.build_root(store) / "daemon", dependent_task=True)
        assert daemon_root is not None
        daemon_pkg = (packages_root / f"{launcher_name(store)}-daemon.pkg").absolute()
        run_tool(
            [
                PKGBUILD,
                "--root",
                str(daemon_root.absolute()),
                "--install-location",
                "/",
                "--identifier",
                f"{launcher_name(store)}.daemon",
                "--version",
                str(standard.VERSION.fetch(store)),
                str(daemon_pkg),
            ],
            verbose_output=verbose_output,
        )
        return daemon_pkg


__all__ = ["DAEMON_DESCRIPTORS", "DmgBundler", "MacDaemonBundler", "MacInstallerBundler", "PkgBundler"]
