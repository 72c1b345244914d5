# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Application resource sets: ordered relative files under a base directory."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from pathlib import Path, PurePosixPath
from typing import Final

from ..platform import Platform, current_arch, current_platform

_SPEC_SEPARATOR_RE: Final[re.Pattern[str]] = re.compile(r"[:;]")
_WINDOWS_DRIVE_RE: Final[re.Pattern[str]] = re.compile(r"^[A-Za-z]$")


@dataclass(slots=True)
class RelativeFileSet:
    """Ordered collection of files expressed relative to ``base_dir``.

    Attributes:
        base_dir: Directory the included paths are relative to.
        included_files: Relative POSIX-style paths in insertion order.
        mode: Optional resource mode tag (for example ``"jre"``).
        os: Optional platform qualifier; the set is skipped on other hosts.
        arch: Optional architecture qualifier; the set is skipped on other hosts.
    """

    base_dir: Path
    included_files: list[str] = field(default_factory=list)
    mode: str | None = None
    os: Platform | None = None
    arch: str | None = None

    @classmethod
    def from_files(cls, base_dir: Path, files: Iterable[Path | str], **qualifiers: object) -> RelativeFileSet:
        """Build a set from absolute or base-relative ``files``.

        Args:
            base_dir: Directory the resulting set is relative to.
            files: File paths; absolute paths must live under ``base_dir``.
            **qualifiers: ``mode``, ``os`` or ``arch`` qualifiers.

        Returns:
            RelativeFileSet: Set with de-duplicated relative entries.

        Raises:
            ValueError: If an absolute file lies outside ``base_dir``.
        """

        base = Path(base_dir)
        included: list[str] = []
        for item in files:
            candidate = Path(item)
            if candidate.is_absolute():
                try:
                    candidate = candidate.relative_to(base)
                except ValueError as exc:
                    raise ValueError(f"{item} is not under {base}") from exc
            relative = PurePosixPath(*candidate.parts).as_posix()
            if relative not in included:
                included.append(relative)
        return cls(base, included, **qualifiers)  # type: ignore[arg-type]

    def __iter__(self) -> Iterator[str]:
        return iter(self.included_files)

    def __len__(self) -> int:
        return len(self.included_files)

    def contains(self, relative: str) -> bool:
        """Return ``True`` when ``relative`` is part of the set.

        Args:
            relative: Relative path to test.

        Returns:
            bool: Membership flag.
        """

        return PurePosixPath(relative).as_posix() in self.included_files

    def upshift(self, directory: str) -> RelativeFileSet:
        """Return a copy whose entries are prefixed with ``directory``.

        Args:
            directory: Relative directory prepended to each entry.

        Returns:
            RelativeFileSet: Re-rooted copy.
        """

        prefix = PurePosixPath(directory)
        return RelativeFileSet(
            self.base_dir,
            [(prefix / entry).as_posix() for entry in self.included_files],
            self.mode,
            self.os,
            self.arch,
        )

    def matches_host(self, platform: Platform | None = None, arch: str | None = None) -> bool:
        """Return ``True`` when the set applies to the given host.

        Args:
            platform: Host platform; defaults to the running platform.
            arch: Host architecture; defaults to the running architecture.

        Returns:
            bool: ``False`` when an ``os`` or ``arch`` qualifier does not match.
        """

        if self.os is not None and self.os is not (platform or current_platform()):
            return False
        return self.arch is None or self.arch == (arch or current_arch())

    def absolute_files(self) -> list[Path]:
        """Return the included files resolved against :attr:`base_dir`.

        Returns:
            list[Path]: Absolute file paths in order.
        """

        return [self.base_dir / entry for entry in self.included_files]

    @classmethod
    def list_from_spec(cls, spec: str) -> list[RelativeFileSet]:
        """Parse a ``:``/``;`` separated resource specification.

        Entries ending in ``*``, ``/`` or ``\\`` denote directories whose
        regular files are included recursively; any other entry names one
        file relative to its parent directory.

        Args:
            spec: Resource specification text.

        Returns:
            list[RelativeFileSet]: One set per entry, in order.
        """

        result: list[RelativeFileSet] = []
        for token in _split_spec(spec):
            path = Path(token)
            if path.name == "*" or token.endswith(("/", "\\")):
                root = path.parent if path.name == "*" else path
                files = sorted(candidate for candidate in root.rglob("*") if candidate.is_file())
                result.append(cls.from_files(root, files))
            else:
                result.append(cls(path.parent, [path.name]))
        return result


def _split_spec(spec: str) -> list[str]:
    """Split a resource specification, keeping Windows drive letters intact.

    Args:
        spec: Resource specification text.

    Returns:
        list[str]: Non-empty entries.
    """

    parts = _SPEC_SEPARATOR_RE.split(spec)
    merged: list[str] = []
    for part in parts:
        if merged and _WINDOWS_DRIVE_RE.match(merged[-1]) and part.startswith(("\\", "/")):
            merged[-1] = f"{merged[-1]}:{part}"
        else:
            merged.append(part)
    return [entry for entry in merged if entry]


__all__ = ["RelativeFileSet"]
