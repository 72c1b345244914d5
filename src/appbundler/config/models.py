# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models describing one bundling run."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeAlias

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ..bundlers.driver import BundleType

ParamValue: TypeAlias = str | bool | int | list[str] | dict[str, str] | list[dict[str, Any]]


class ConfigError(Exception):
    """Raised when configuration input is invalid."""


class BundleConfig(BaseModel):
    """Settings and bundle parameters for one run.

    Attributes:
        output_dir: Directory receiving the produced artifacts.
        bundle_type: Which family of bundlers to run.
        bundle_format: Optional bundler id narrowing the selection.
        verbose: Stream external tool output and verbose log lines.
        debug: Emit debug log lines and keep build directories.
        emoji: Prefix log lines with level glyphs.
        params: Bundle parameters keyed by descriptor id.
    """

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    output_dir: Path = Field(default_factory=lambda: Path("."))
    bundle_type: BundleType = BundleType.NATIVE
    bundle_format: str | None = None
    verbose: bool = False
    debug: bool = False
    emoji: bool = True
    params: dict[str, ParamValue] = Field(default_factory=dict)

    @field_validator("bundle_type", mode="before")
    @classmethod
    def _normalise_bundle_type(cls, value: object) -> object:
        if isinstance(value, str):
            return value.strip().upper()
        return value

    @field_validator("bundle_format")
    @classmethod
    def _blank_format_is_none(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return value.strip()


__all__ = ["BundleConfig", "ConfigError", "ParamValue"]
