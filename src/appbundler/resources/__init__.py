# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Bundler resources: the locator, the template preprocessor and built-in templates."""

from __future__ import annotations

from .locator import TEMPLATE_PACKAGE, fetch_resource, fetch_text, preprocess_text, write_resource

__all__ = ["TEMPLATE_PACKAGE", "fetch_resource", "fetch_text", "preprocess_text", "write_resource"]
