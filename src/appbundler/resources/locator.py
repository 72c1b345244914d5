# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate customisable bundler resources and expand their placeholders."""

from __future__ import annotations

from collections.abc import Mapping
from importlib import resources
from pathlib import Path
from typing import Final

from ..core.logging import verbose

TEMPLATE_PACKAGE: Final[str] = "appbundler.resources.templates"


def _label(category: str | None) -> str:
    return f"[{category}] " if category else ""


def _builtin(default_name: str) -> bytes | None:
    """Return the packaged template ``default_name`` when it exists.

    Args:
        default_name: Slash separated path below the template package.

    Returns:
        bytes | None: Template payload, ``None`` when not packaged.
    """

    resource = resources.files(TEMPLATE_PACKAGE)
    for part in default_name.split("/"):
        resource = resource.joinpath(part)
    if not resource.is_file():
        return None
    return resource.read_bytes()


def fetch_resource(
    public_name: str | None,
    category: str | None = None,
    default_name: str | None = None,
    override_file: Path | None = None,
    drop_in_root: Path | None = None,
) -> bytes:
    """Return the bytes of a bundler resource.

    The drop-in directory wins over an explicit override file, which wins
    over the built-in template.

    Args:
        public_name: File name looked up in ``drop_in_root``.
        category: Human readable label used in log output.
        default_name: Built-in template path, for example ``linux/template.control``.
        override_file: Explicit replacement file supplied by the caller.
        drop_in_root: Directory of customised resources.

    Returns:
        bytes: Resource payload.

    Raises:
        FileNotFoundError: If no source provides the resource.
    """

    label = _label(category)
    if public_name is not None and drop_in_root is not None:
        candidate = Path(drop_in_root, public_name)
        if candidate.is_file():
            verbose(f"Using custom package resource {label}(loaded from {public_name})")
            return candidate.read_bytes()
    if override_file is not None and Path(override_file).is_file():
        verbose(f"Using custom package resource {label}(loaded from file {Path(override_file).absolute()})")
        return Path(override_file).read_bytes()
    if default_name is not None:
        payload = _builtin(default_name)
        if payload is not None:
            verbose(f"Using default package resource {label}(add {public_name} to the class path to customize)")
            return payload
    raise FileNotFoundError(f"Resource {label}{public_name or default_name} could not be located")


def fetch_text(
    public_name: str | None,
    category: str | None = None,
    default_name: str | None = None,
    override_file: Path | None = None,
    drop_in_root: Path | None = None,
) -> str:
    """Return :func:`fetch_resource` decoded as UTF-8."""

    return fetch_resource(public_name, category, default_name, override_file, drop_in_root).decode("utf-8")


def preprocess_text(template: str, data: Mapping[str, str | None]) -> str:
    """Replace every key of ``data`` found in ``template`` with its value.

    Replacement is literal; keys mapped to ``None`` are left untouched.

    Args:
        template: Template text.
        data: Placeholder to value mapping.

    Returns:
        str: Expanded text.
    """

    for key, value in data.items():
        if value is None:
            continue
        template = template.replace(key, value)
    return template


def write_resource(
    target: Path,
    public_name: str | None,
    category: str | None = None,
    default_name: str | None = None,
    *,
    data: Mapping[str, str | None] | None = None,
    drop_in_root: Path | None = None,
    override_file: Path | None = None,
) -> Path:
    """Fetch a resource, optionally preprocess it, and write it to ``target``.

    Args:
        target: Destination file.
        public_name: File name looked up in ``drop_in_root``.
        category: Human readable label used in log output.
        default_name: Built-in template path.
        data: Placeholder values; the payload is copied verbatim when omitted.
        drop_in_root: Directory of customised resources.
        override_file: Explicit replacement file.

    Returns:
        Path: ``target``.
    """

    payload = fetch_resource(public_name, category, default_name, override_file, drop_in_root)
    target.parent.mkdir(parents=True, exist_ok=True)
    if data is None:
        target.write_bytes(payload)
    else:
        target.write_text(preprocess_text(payload.decode("utf-8"), data), encoding="utf-8")
    return target


__all__ = ["TEMPLATE_PACKAGE", "fetch_resource", "fetch_text", "preprocess_text", "write_resource"]
