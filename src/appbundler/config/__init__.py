# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models and loaders."""

from __future__ import annotations

from .loader import build_store, load_config
from .models import BundleConfig, ConfigError, ParamValue

__all__ = ["BundleConfig", "ConfigError", "ParamValue", "build_store", "load_config"]
