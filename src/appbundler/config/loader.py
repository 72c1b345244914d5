# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Load :class:`BundleConfig` documents from TOML and seed parameter stores."""

from __future__ import annotations

import os
import re
import tomllib
from collections.abc import Mapping
from pathlib import Path
from typing import Any, Final

from pydantic import ValidationError

from ..core.logging import verbose
from ..params.store import MULTI_VALUE_KEYS, ParameterStore
from .models import BundleConfig, ConfigError

STANDALONE_SECTION_KEY: Final[str] = "appbundler"
PYPROJECT_TOOL_KEY: Final[str] = "tool"
PYPROJECT_FILENAME: Final[str] = "pyproject.toml"

_ENV_VAR_PATTERN: Final[re.Pattern[str]] = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def load_config(path: Path, *, env: Mapping[str, str] | None = None) -> BundleConfig:
    """Read and validate the bundling configuration stored at ``path``.

    ``pyproject.toml`` files are read from their ``[tool.appbundler]`` table;
    any other document must carry an ``[appbundler]`` table. ``$VAR`` and
    ``${VAR}`` references in string values are expanded from ``env``. A
    relative ``output_dir`` is resolved against the document's directory.

    Args:
        path: TOML document to read.
        env: Environment used for variable expansion; ``os.environ`` when omitted.

    Returns:
        BundleConfig: Validated configuration.

    Raises:
        ConfigError: If the file is missing, malformed, lacks the table or
            fails validation.
    """

    if not path.is_file():
        raise ConfigError(f"Configuration file {path} does not exist")
    resolved = path.resolve()
    try:
        with resolved.open("rb") as handle:
            document = tomllib.load(handle)
    except tomllib.TOMLDecodeError as exc:
        raise ConfigError(f"Configuration at {path} is not valid TOML: {exc}") from exc

    section = _select_section(document, is_pyproject=resolved.name == PYPROJECT_FILENAME)
    if section is None:
        table = (
            f"[{PYPROJECT_TOOL_KEY}.{STANDALONE_SECTION_KEY}]"
            if resolved.name == PYPROJECT_FILENAME
            else f"[{STANDALONE_SECTION_KEY}]"
        )
        raise ConfigError(f"Configuration at {path} has no {table} table")

    payload = _expand_env(section, os.environ if env is None else env)
    try:
        config = BundleConfig.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid configuration in {path}: {exc}") from exc
    if not config.output_dir.is_absolute():
        config.output_dir = resolved.parent / config.output_dir
    verbose(f"Loaded configuration from {resolved}")
    return config


def build_store(config: BundleConfig) -> ParameterStore:
    """Return a parameter store seeded from ``config``.

    String values go through :meth:`ParameterStore.add_argument` so they
    accumulate and parse lazily. String lists for multi-value keys are
    applied one item at a time the same way; every other structured value is
    recorded as an override unchanged. The run-level ``verbose`` flag is
    mirrored into the store unless the parameters already set it.

    Args:
        config: Validated configuration.

    Returns:
        ParameterStore: Store holding one override per configured parameter.
    """

    store = ParameterStore()
    for key, value in config.params.items():
        if isinstance(value, str):
            store.add_argument(key, value)
        elif key in MULTI_VALUE_KEYS and isinstance(value, list) and all(isinstance(item, str) for item in value):
            for item in value:
                store.add_argument(key, item)
        else:
            store.set(key, value)
    if config.verbose and "verbose" not in store:
        store.set("verbose", True)
    return store


def _select_section(document: Mapping[str, Any], *, is_pyproject: bool) -> Mapping[str, Any] | None:
    if is_pyproject:
        tool_section = document.get(PYPROJECT_TOOL_KEY)
        if not isinstance(tool_section, Mapping):
            return None
        section = tool_section.get(STANDALONE_SECTION_KEY)
    else:
        section = document.get(STANDALONE_SECTION_KEY)
    return section if isinstance(section, Mapping) else None


def _expand_env(value: Any, env: Mapping[str, str]) -> Any:
    if isinstance(value, str):
        return _ENV_VAR_PATTERN.sub(lambda match: env.get(match.group(1) or match.group(2), match.group(0)), value)
    if isinstance(value, Mapping):
        return {key: _expand_env(item, env) for key, item in value.items()}
    if isinstance(value, list):
        return [_expand_env(item, env) for item in value]
    return value


__all__ = ["build_store", "load_config"]
