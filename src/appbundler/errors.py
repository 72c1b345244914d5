# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Error taxonomy shared by the parameter store, resolver and bundlers."""

from __future__ import annotations

from collections.abc import Sequence


class BundlerError(RuntimeError):
    """Base class for every error raised by the bundling pipeline."""


class PlatformUnsupportedError(BundlerError):
    """Raised when a bundler cannot run on the current host platform."""


class ConfigurationInvalidError(BundlerError):
    """Raised when a parameter is missing, malformed or contradictory."""

    def __init__(self, message: str, advice: str | None = None) -> None:
        """Initialise the error with a diagnostic and optional remediation hint.

        Args:
            message: Human-readable description of the configuration problem.
            advice: Optional suggestion describing how to fix the problem.
        """

        super().__init__(message)
        self.message = message
        self.advice = advice


class ParameterCycleError(ConfigurationInvalidError):
    """Raised when default derivation re-enters a descriptor already being derived."""

    def __init__(self, chain: Sequence[str]) -> None:
        """Initialise the error with the offending derivation chain.

        Args:
            chain: Descriptor identifiers in derivation order, ending with the
                identifier that closed the cycle.
        """

        self.chain = tuple(chain)
        super().__init__(
            f"Circular parameter derivation: {' -> '.join(self.chain)}",
            "Set one of the parameters in the chain explicitly.",
        )


class ExternalToolError(BundlerError):
    """Raised when an external packaging tool exits unsuccessfully or cannot start."""

    def __init__(self, command: Sequence[str], returncode: int, output: str | None = None) -> None:
        """Initialise the error with the failed command metadata.

        Args:
            command: Command sequence that was executed.
            returncode: Exit status reported by the process.
            output: Optional tail of the combined process output.
        """

        self.command = tuple(command)
        self.returncode = returncode
        self.output = output
        super().__init__(f"Exec failed with code {returncode} command [{' '.join(self.command)}]")


class UnexpectedFaultError(BundlerError):
    """Wrap an unanticipated exception raised inside a bundler phase."""

    def __init__(self, cause: BaseException) -> None:
        """Initialise the wrapper from ``cause``.

        Args:
            cause: Original exception; also attached as ``__cause__`` by callers
                using ``raise ... from``.
        """

        super().__init__(f"{type(cause).__name__}: {cause}")
        self.cause = cause


__all__ = [
    "BundlerError",
    "ConfigurationInvalidError",
    "ExternalToolError",
    "ParameterCycleError",
    "PlatformUnsupportedError",
    "UnexpectedFaultError",
]
