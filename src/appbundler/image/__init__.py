# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Application image builders and the launcher configuration format."""

from __future__ import annotations

from .builder import AppImageBuilder, launcher_name
from .launch_config import LaunchConfig, read_launch_config
from .linux import LinuxAppImageBuilder
from .mac import MacAppImageBuilder
from .windows import WindowsAppImageBuilder

__all__ = [
    "AppImageBuilder",
    "LaunchConfig",
    "LinuxAppImageBuilder",
    "MacAppImageBuilder",
    "WindowsAppImageBuilder",
    "launcher_name",
    "read_launch_config",
]
