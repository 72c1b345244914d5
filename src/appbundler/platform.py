# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Host platform detection."""

from __future__ import annotations

import platform as _platform
import sys
from enum import Enum
from functools import lru_cache


class Platform(str, Enum):
    """Enumerate operating system families a bundler may target."""

    LINUX = "linux"
    MAC = "mac"
    WINDOWS = "windows"
    UNKNOWN = "unknown"

    @classmethod
    def from_sys(cls, value: str) -> Platform:
        """Return the platform matching a ``sys.platform`` style token.

        Args:
            value: Raw platform token such as ``"linux"`` or ``"darwin"``.

        Returns:
            Platform: Matching enum member, ``UNKNOWN`` when unrecognised.
        """

        lowered = value.lower()
        if lowered.startswith("linux"):
            return cls.LINUX
        if lowered.startswith("darwin") or lowered.startswith("mac"):
            return cls.MAC
        if lowered.startswith(("win", "cygwin")):
            return cls.WINDOWS
        return cls.UNKNOWN


@lru_cache(maxsize=1)
def current_platform() -> Platform:
    """Return the platform of the running interpreter.

    Returns:
        Platform: Detected host platform.
    """

    return Platform.from_sys(sys.platform)


def current_arch() -> str:
    """Return the normalised machine architecture of the host.

    Returns:
        str: Lower-case architecture name such as ``"x86_64"`` or ``"arm64"``.
    """

    machine = _platform.machine().lower()
    return {"amd64": "x86_64", "aarch64": "arm64"}.get(machine, machine)


__all__ = ["Platform", "current_arch", "current_platform"]
