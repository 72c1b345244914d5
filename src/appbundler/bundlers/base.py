# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bundler lifecycle: validate, execute and cleanup."""

from __future__ import annotations

import os
import shutil
from abc import ABC, abstractmethod
from collections.abc import Sequence
from enum import Enum
from pathlib import Path

from ..core.logging import debug, info, is_debug
from ..errors import BundlerError, ConfigurationInvalidError, PlatformUnsupportedError, UnexpectedFaultError
from ..params import standard
from ..params.descriptor import ParameterDescriptor
from ..params.store import ParameterStore
from ..platform import Platform, current_platform


class BundlerKind(str, Enum):
    """Enumerate the artifact families a bundler produces."""

    IMAGE = "IMAGE"
    INSTALLER = "INSTALLER"


class BundlerOutcome(str, Enum):
    """Enumerate how a bundler's run ended."""

    SUCCEEDED = "succeeded"
    SKIPPED = "skipped"
    FAILED = "failed"


class Bundler(ABC):
    """A named unit producing one kind of artifact.

    Subclasses implement :meth:`do_validate` and :meth:`execute`. The
    :meth:`validate` wrapper converts unexpected exceptions into
    :class:`~appbundler.errors.UnexpectedFaultError` so callers only see the
    pipeline's own error types.
    """

    id: str = ""
    name: str = ""
    description: str = ""
    bundle_type: BundlerKind = BundlerKind.IMAGE
    platform: Platform = Platform.UNKNOWN

    def descriptors(self) -> Sequence[ParameterDescriptor[object]]:
        """Return the descriptors this bundler reads.

        Returns:
            Sequence[ParameterDescriptor[object]]: Descriptors for listings.
        """

        return ()

    def supported(self, host: Platform | None = None) -> bool:
        """Return ``True`` when the bundler can run on ``host``.

        Args:
            host: Platform to test; defaults to the running platform.

        Returns:
            bool: Whether ``host`` matches :attr:`platform`.
        """

        return self.platform is (host or current_platform())

    def check_platform(self) -> None:
        """Raise when the running host is not :attr:`platform`.

        Raises:
            PlatformUnsupportedError: If the host does not match.
        """

        if not self.supported():
            raise PlatformUnsupportedError(f"Bundler {self.name} requires {self.platform.value}")

    def build_root(self, store: ParameterStore) -> Path:
        """Return this bundler's private temporary directory.

        Args:
            store: Parameter store for the run.

        Returns:
            Path: ``buildRoot/<bundler id>``.
        """

        return Path(standard.BUILD_ROOT.fetch(store) or ".") / self.id

    def validate(self, store: ParameterStore) -> bool:
        """Check that ``store`` describes a bundle this bundler can produce.

        Args:
            store: Parameter store for the run; fetching may derive defaults.

        Returns:
            bool: ``True`` when the configuration is usable.

        Raises:
            PlatformUnsupportedError: If the host platform is unsupported.
            ConfigurationInvalidError: If the configuration is unusable.
            UnexpectedFaultError: If validation failed for any other reason.
        """

        try:
            return self.do_validate(store)
        except BundlerError:
            raise
        except Exception as exc:
            raise UnexpectedFaultError(exc) from exc

    @abstractmethod
    def do_validate(self, store: ParameterStore) -> bool:
        """Run bundler specific validation; see :meth:`validate`."""

        raise NotImplementedError

    @abstractmethod
    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        """Produce the artifact.

        Args:
            store: Parameter store for the run.
            output_dir: Directory receiving the artifact.
            dependent_task: ``True`` when invoked by another bundler.

        Returns:
            Path | None: Produced artifact, ``None`` when nothing was produced.
        """

        raise NotImplementedError

    def cleanup(self, store: ParameterStore) -> None:
        """Remove the bundler's temporary directory.

        Failures are logged and never raised. In debug mode the directory is
        kept for inspection.

        Args:
            store: Parameter store for the run.
        """

        try:
            root = self.build_root(store)
            if not root.exists():
                return
            if is_debug():
                info(f"Kept working directory for debug: {root.absolute()}")
                return
            shutil.rmtree(root)
        except (OSError, BundlerError) as exc:
            debug(f"cleanup of {self.id} failed: {exc}")

    def __repr__(self) -> str:
        return f"{type(self).__name__}(id={self.id!r})"


def ensure_output_dir(output_dir: Path) -> Path:
    """Create ``output_dir`` when missing and check it is writable.

    Args:
        output_dir: Directory receiving artifacts.

    Returns:
        Path: ``output_dir``.

    Raises:
        ConfigurationInvalidError: If the directory cannot be used.
    """

    try:
        output_dir.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise ConfigurationInvalidError(
            f"Output directory {output_dir.absolute()} cannot be created.",
            "Choose an output directory that can be created.",
        ) from exc
    if not os.access(output_dir, os.W_OK):
        raise ConfigurationInvalidError(
            f"Output directory {output_dir.absolute()} is not writable.",
            "Choose a writable output directory.",
        )
    return output_dir


def check_license_files(store: ParameterStore) -> bool:
    """Ensure every ``licenseFile`` entry is part of the application resources.

    Args:
        store: Parameter store for the run.

    Returns:
        bool: ``True`` when a license was configured, ``False`` otherwise.

    Raises:
        ConfigurationInvalidError: If a license file is not among the resources.
    """

    if not store.is_overridden(standard.LICENSE_FILE):
        return False
    resource_sets = standard.APP_RESOURCES_LIST.fetch(store) or []
    for license_file in standard.LICENSE_FILE.fetch(store) or []:
        if not any(resource_set.contains(license_file) for resource_set in resource_sets):
            raise ConfigurationInvalidError(
                "Specified license file is missing.",
                f'Make sure that "{license_file}" references a file in the app resources, '
                "and that it is relative to the resource base directory.",
            )
    return True


__all__ = [
    "Bundler",
    "BundlerKind",
    "BundlerOutcome",
    "check_license_files",
    "ensure_output_dir",
]
