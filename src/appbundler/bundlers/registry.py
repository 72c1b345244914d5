# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bundler registry providing discovery by id or artifact kind."""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping

from ..modules.assembler import RuntimeImageAssembler
from .base import Bundler, BundlerKind
from .deb import DebBundler
from .exe import ExeBundler, WinServiceBundler
from .image import linux_image_bundler, mac_image_bundler, windows_image_bundler
from .mac import DmgBundler, MacDaemonBundler, PkgBundler

_KIND_ORDER: dict[BundlerKind, int] = {BundlerKind.IMAGE: 0, BundlerKind.INSTALLER: 1}


class BundlerRegistry(Mapping[str, Bundler]):
    """Central registry for bundlers.

    ``BundlerRegistry`` behaves like a read-only mapping whose keys are bundler
    ids. Iteration yields image bundlers before installer bundlers, each group
    in registration order.
    """

    def __init__(self, bundlers: Iterable[Bundler] = ()) -> None:
        """Initialise the registry, registering ``bundlers`` in order.

        Args:
            bundlers: Bundlers to register immediately.
        """

        self._bundlers: dict[str, Bundler] = {}
        self._ordered: tuple[str, ...] = ()
        for bundler in bundlers:
            self.register(bundler)

    def register(self, bundler: Bundler) -> None:
        """Register ``bundler`` enforcing uniqueness by id.

        Args:
            bundler: Bundler to insert.

        Raises:
            ValueError: If a bundler with the same id is already registered.
        """

        if bundler.id in self._bundlers:
            raise ValueError(f"Bundler '{bundler.id}' already registered")
        self._bundlers[bundler.id] = bundler
        self._ordered = tuple(
            sorted(self._bundlers, key=lambda key: _KIND_ORDER.get(self._bundlers[key].bundle_type, len(_KIND_ORDER)))
        )

    def try_get(self, bundler_id: str) -> Bundler | None:
        """Return the bundler registered as ``bundler_id``, otherwise ``None``."""

        return self._bundlers.get(bundler_id)

    def bundlers(self) -> tuple[Bundler, ...]:
        """Return every bundler, images first."""

        return tuple(self._bundlers[key] for key in self._ordered)

    def for_type(self, bundle_type: BundlerKind) -> tuple[Bundler, ...]:
        """Return the bundlers producing ``bundle_type`` artifacts.

        Args:
            bundle_type: Artifact kind to filter by.

        Returns:
            tuple[Bundler, ...]: Matching bundlers in registry order.
        """

        return tuple(bundler for bundler in self.bundlers() if bundler.bundle_type is bundle_type)

    def __len__(self) -> int:
        return len(self._bundlers)

    def __iter__(self) -> Iterator[str]:
        return iter(self._ordered)

    def __getitem__(self, bundler_id: str) -> Bundler:
        """Return the bundler identified by ``bundler_id``.

        Raises:
            KeyError: If ``bundler_id`` is not registered.
        """

        return self._bundlers[bundler_id]


def default_registry(assembler: RuntimeImageAssembler | None = None) -> BundlerRegistry:
    """Return a registry holding every built-in bundler.

    Installer bundlers share the image bundler of their platform; the pkg and
    exe installers also share the registered daemon and service components.

    Args:
        assembler: Runtime image assembler handed to the image bundlers;
            ``jlink`` when omitted.

    Returns:
        BundlerRegistry: Fresh registry.
    """

    linux_app = linux_image_bundler(assembler)
    mac_app = mac_image_bundler(assembler)
    windows_app = windows_image_bundler(assembler)
    mac_daemon = MacDaemonBundler(mac_app)
    windows_service = WinServiceBundler(windows_app)
    return BundlerRegistry(
        (
            linux_app,
            mac_app,
            windows_app,
            windows_service,
            DebBundler(linux_app),
            DmgBundler(mac_app),
            mac_daemon,
            PkgBundler(mac_app, mac_daemon),
            ExeBundler(windows_app, windows_service),
        )
    )


__all__ = ["BundlerRegistry", "default_registry"]
