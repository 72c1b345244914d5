# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Runtime image assembly: the request model and the ``jlink`` assembler."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final, Protocol, runtime_checkable

from ..core.logging import info
from ..core.runtime.process import run_tool

DEFAULT_EXCLUDE_FILES: Final[tuple[str, ...]] = ("*.diz",)


@dataclass(frozen=True, slots=True)
class RuntimeImageRequest:
    """Inputs handed to a :class:`RuntimeImageAssembler`.

    Attributes:
        output_dir: Directory the runtime tree is written to.
        module_path: Ordered module search path.
        add_modules: Validated module names to embed.
        limit_modules: Limit set passed through without reconciliation.
        exclude_files: Glob patterns of files to leave out.
        strip_native_commands: Drop native launcher executables.
        user_options: Free-form extra options for the assembler.
    """

    output_dir: Path
    module_path: tuple[Path, ...]
    add_modules: frozenset[str]
    limit_modules: frozenset[str] = frozenset()
    exclude_files: tuple[str, ...] = DEFAULT_EXCLUDE_FILES
    strip_native_commands: bool = True
    user_options: Mapping[str, str] = field(default_factory=dict)


@runtime_checkable
class RuntimeImageAssembler(Protocol):
    """Produce a runtime subtree on disk from a :class:`RuntimeImageRequest`."""

    def assemble(self, request: RuntimeImageRequest) -> Path:
        """Build the runtime image described by ``request``.

        Args:
            request: Validated assembly inputs.

        Returns:
            Path: Root of the produced runtime tree.
        """
        ...


@dataclass(slots=True)
class JLinkAssembler:
    """Assemble runtime images by invoking the ``jlink`` tool.

    Attributes:
        executable: ``jlink`` executable name or path.
        verbose: Forward tool output at info level.
    """

    executable: str = "jlink"
    verbose: bool = False

    def command(self, request: RuntimeImageRequest) -> list[str]:
        """Return the ``jlink`` argument vector for ``request``.

        Args:
            request: Validated assembly inputs.

        Returns:
            list[str]: Command line, executable first.
        """

        args = [
            self.executable,
            "--output",
            str(request.output_dir),
            "--module-path",
            os.pathsep.join(str(entry) for entry in request.module_path),
            "--add-modules",
            ",".join(sorted(request.add_modules)),
        ]
        if request.limit_modules:
            args.extend(["--limit-modules", ",".join(sorted(request.limit_modules))])
        if request.strip_native_commands:
            args.append("--strip-native-commands")
        if request.exclude_files:
            args.append(f"--exclude-files={','.join(request.exclude_files)}")
        for key, value in request.user_options.items():
            args.append(f"--{key.lstrip('-')}")
            if value:
                args.append(value)
        return args

    def assemble(self, request: RuntimeImageRequest) -> Path:
        """Run ``jlink`` for ``request``.

        Args:
            request: Validated assembly inputs.

        Returns:
            Path: ``request.output_dir``.

        Raises:
            ExternalToolError: If ``jlink`` is missing or fails.
        """

        if self.verbose:
            info(
                f"Running jlink [ --output = {request.output_dir} --module-path = {list(request.module_path)} "
                f"--add-modules = {sorted(request.add_modules)} --limit-modules = {sorted(request.limit_modules)} "
                f"--exclude-files = {list(request.exclude_files)} "
                f"--strip-native-commands = {request.strip_native_commands} {dict(request.user_options)} ]"
            )
        request.output_dir.parent.mkdir(parents=True, exist_ok=True)
        run_tool(self.command(request), verbose_output=self.verbose)
        return request.output_dir


__all__ = ["DEFAULT_EXCLUDE_FILES", "JLinkAssembler", "RuntimeImageAssembler", "RuntimeImageRequest"]
