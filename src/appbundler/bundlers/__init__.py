# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bundlers producing application images and installers, plus the driver running them."""

from __future__ import annotations

from .base import Bundler, BundlerKind, BundlerOutcome
from .deb import DebBundler
from .driver import BundleReport, BundleType, generate_bundles
from .exe import ExeBundler, WinServiceBundler
from .image import ImageBundler, linux_image_bundler, mac_image_bundler, windows_image_bundler
from .installer import InstallerBundler
from .mac import DmgBundler, MacDaemonBundler, PkgBundler
from .registry import BundlerRegistry, default_registry

__all__ = [
    "BundleReport",
    "BundleType",
    "Bundler",
    "BundlerKind",
    "BundlerOutcome",
    "BundlerRegistry",
    "DebBundler",
    "DmgBundler",
    "ExeBundler",
    "ImageBundler",
    "InstallerBundler",
    "MacDaemonBundler",
    "PkgBundler",
    "WinServiceBundler",
    "default_registry",
    "generate_bundles",
    "linux_image_bundler",
    "mac_image_bundler",
    "windows_image_bundler",
]
