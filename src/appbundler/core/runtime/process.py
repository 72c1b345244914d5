# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution of external packaging tools."""

from __future__ import annotations

import shutil

# Bandit: subprocess usage is intentional; we provide a controlled wrapper around
# external tool execution with argument lists and ``shell=False``.
import subprocess  # nosec B404 suppression_valid: Shell-free subprocess wrapper enforces safe execution.
from collections import deque
from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Final

from ...errors import ExternalToolError
from ..logging import debug, info, verbose

_NOT_FOUND_EXIT: Final[int] = 127
_OUTPUT_TAIL_LINES: Final[int] = 20


def find_executable(name: str) -> str | None:
    """Return an absolute path to ``name`` when it exists or is on ``PATH``.

    Args:
        name: Executable name or path.

    Returns:
        str | None: Resolved executable path, ``None`` when not found.
    """

    candidate = Path(name)
    if candidate.is_absolute():
        return str(candidate) if candidate.exists() else None
    return shutil.which(name)


def _normalize_args(args: Sequence[str]) -> list[str]:
    """Normalise the subprocess argument sequence.

    Args:
        args: Raw command arguments supplied by the caller.

    Returns:
        list[str]: Argument list whose head is an absolute executable path.

    Raises:
        ValueError: If no arguments are provided.
        FileNotFoundError: If the executable cannot be located.
    """

    if not args:
        raise ValueError("subprocess command requires at least one argument")
    head, *rest = (str(arg) for arg in args)
    resolved = find_executable(head)
    if resolved is None:
        raise FileNotFoundError(f"Executable '{head}' was not found on PATH")
    return [resolved, *rest]


def run_tool(
    args: Sequence[str | Path],
    *,
    cwd: Path | None = None,
    env: Mapping[str, str] | None = None,
    verbose_output: bool = False,
    probe_only: bool = False,
) -> int:
    """Run an external packaging tool, streaming merged output line by line.

    Every output line is forwarded to the logger: at info level when
    ``verbose_output`` is set, at debug level otherwise. The call blocks until
    the process exits.

    Args:
        args: Command and argument sequence to execute.
        cwd: Optional working directory.
        env: Optional replacement environment.
        verbose_output: Forward tool output at info level.
        probe_only: Only treat a missing executable (exit code 127) as failure;
            used to test for the presence of a tool.

    Returns:
        int: Exit status reported by the process.

    Raises:
        ExternalToolError: If the tool cannot be started, or exits non-zero
            outside of probe mode.
    """

    command = [str(arg) for arg in args]
    try:
        normalized = _normalize_args(command)
    except FileNotFoundError as exc:
        raise ExternalToolError(command, _NOT_FOUND_EXIT, str(exc)) from exc

    where = f" in {cwd}" if cwd is not None else ""
    verbose(f"Running {normalized}{where}")
    tail: deque[str] = deque(maxlen=_OUTPUT_TAIL_LINES)
    try:
        # Bandit: argument lists come from bundler code, never from a shell string.
        with subprocess.Popen(  # nosec B603 - controlled arguments
            normalized,
            cwd=str(cwd) if cwd is not None else None,
            env=dict(env) if env is not None else None,
            stdout=subprocess.PIPE,
            stderr=subprocess.STDOUT,
            stdin=subprocess.DEVNULL,
            text=True,
            errors="replace",
        ) as process:
            assert process.stdout is not None
            for raw_line in process.stdout:
                line = raw_line.rstrip("\r\n")
                tail.append(line)
                if verbose_output:
                    info(line)
                else:
                    debug(line)
            returncode = process.wait()
    except OSError as exc:
        raise ExternalToolError(normalized, _NOT_FOUND_EXIT, str(exc)) from exc

    if returncode != 0 and not (probe_only and returncode != _NOT_FOUND_EXIT):
        raise ExternalToolError(normalized, returncode, "\n".join(tail) or None)
    return returncode


__all__ = [
    "find_executable",
    "run_tool",
]
