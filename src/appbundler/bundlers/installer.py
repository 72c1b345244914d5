# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared behaviour of installer bundlers layered on an application image."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path

from ..core.logging import verbose
from ..core.runtime.process import run_tool
from ..errors import ConfigurationInvalidError, ExternalToolError
from ..image.builder import launcher_name
from ..params import standard
from ..params.descriptor import ParameterDescriptor
from ..params.store import ParameterStore
from .base import Bundler, BundlerKind
from .image import ImageBundler


def association_stores(store: ParameterStore) -> list[ParameterStore]:
    """Return one store per ``fileAssociations`` entry.

    Each entry inherits nothing from ``store`` except what it sets itself, so
    its defaults derive from its own values.

    Args:
        store: Parameter store for the run.

    Returns:
        list[ParameterStore]: Stores in association order.
    """

    stores: list[ParameterStore] = []
    for association in standard.FILE_ASSOCIATIONS.fetch(store) or []:
        if not isinstance(association, Mapping):
            continue
        association_store = ParameterStore(association)
        if standard.APP_NAME.id not in association:
            association_store.set(standard.APP_NAME, standard.APP_NAME.fetch(store))
        stores.append(association_store)
    return stores


def tool_available(tool: str) -> bool:
    """Return ``True`` when ``tool --version`` can be started.

    Args:
        tool: Executable name.

    Returns:
        bool: Whether the tool is present.
    """

    try:
        run_tool([tool, "--version"], probe_only=True)
    except ExternalToolError as exc:
        verbose(f"Test for [{tool}]. Result: {exc}")
        return False
    return True


def installer_file_name(store: ParameterStore) -> str:
    """Return the installer file stem, ``<fs name>-<version>`` unless ``installerName`` is set."""

    if store.is_overridden(standard.INSTALLER_NAME):
        return standard.INSTALLER_NAME.fetch(store) or launcher_name(store)
    return f"{launcher_name(store)}-{standard.VERSION.fetch(store)}"


class InstallerBundler(Bundler):
    """Base for bundlers that wrap an application image into an installer.

    The image comes from ``predefinedAppImage`` when set, otherwise from
    :attr:`image_bundler` running as a dependent task.

    Args:
        image_bundler: Bundler producing the application image.
    """

    bundle_type = BundlerKind.INSTALLER

    def __init__(self, image_bundler: ImageBundler) -> None:
        self.image_bundler = image_bundler
        self.platform = image_bundler.platform

    def descriptors(self) -> Sequence[ParameterDescriptor[object]]:
        return (*self.image_bundler.descriptors(), *self.installer_descriptors())

    def installer_descriptors(self) -> Sequence[ParameterDescriptor[object]]:
        """Return the descriptors specific to this installer format."""

        return ()

    def predefined_image(self, store: ParameterStore) -> Path | None:
        """Return the ``predefinedAppImage`` path, if one was supplied."""

        return standard.PREDEFINED_APP_IMAGE.fetch(store)

    def validate_image(self, store: ParameterStore) -> None:
        """Validate the image source, skipping image checks for a predefined image.

        Args:
            store: Parameter store for the run.

        Raises:
            ConfigurationInvalidError: If the predefined image is unusable or
                the image bundler rejects the configuration.
        """

        predefined = self.predefined_image(store)
        if predefined is None:
            self.image_bundler.do_validate(store)
            return
        if not predefined.exists():
            raise ConfigurationInvalidError(
                f"Specified image directory {predefined} does not exist.",
                f"Confirm that the value for {standard.PREDEFINED_APP_IMAGE.id} exists.",
            )
        if standard.APP_NAME.fetch(store) is None:
            raise ConfigurationInvalidError(
                "When using an external app image you must specify the app name.",
                f"Set the {standard.APP_NAME.id} parameter.",
            )
        if standard.IDENTIFIER.fetch(store) is None:
            raise ConfigurationInvalidError(
                "When using an external app image you must specify the app identifier.",
                f"Set the {standard.IDENTIFIER.id} parameter.",
            )

    def prepare_image(self, store: ParameterStore, parent: Path) -> Path | None:
        """Return the application image to package.

        Args:
            store: Parameter store for the run.
            parent: Directory the image is assembled into when not predefined.

        Returns:
            Path | None: Image root, ``None`` when assembly produced nothing.
        """

        predefined = self.predefined_image(store)
        if predefined is not None:
            verbose(f"Using predefined app image {predefined}")
            return predefined
        return self.image_bundler.execute(store, parent, dependent_task=True)


__all__ = ["InstallerBundler", "association_stores", "installer_file_name", "tool_available"]
