# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""External process execution helpers."""

from __future__ import annotations

from .process import find_executable, run_tool

__all__ = ["find_executable", "run_tool"]
