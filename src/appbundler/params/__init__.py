# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parameter descriptors and the per-run parameter store."""

from __future__ import annotations

from .descriptor import ParameterDescriptor, ValueType
from .resources import RelativeFileSet
from .store import MULTI_VALUE_KEYS, EntryState, ParameterStore

__all__ = [
    "EntryState",
    "MULTI_VALUE_KEYS",
    "ParameterDescriptor",
    "ParameterStore",
    "RelativeFileSet",
    "ValueType",
]
