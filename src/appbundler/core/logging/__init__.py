# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared logging helpers."""

from __future__ import annotations

from .public import (
    LogSettings,
    configure_logging,
    debug,
    fail,
    info,
    is_debug,
    is_verbose,
    log_settings,
    ok,
    section,
    verbose,
    warn,
)

__all__ = [
    "LogSettings",
    "configure_logging",
    "debug",
    "fail",
    "info",
    "is_debug",
    "is_verbose",
    "log_settings",
    "ok",
    "section",
    "verbose",
    "warn",
]
