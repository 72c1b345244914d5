# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the selected bundlers over one parameter store."""

from __future__ import annotations

import shutil
from collections.abc import Sequence
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from ..core.logging import debug, info, is_debug, ok
from ..errors import ConfigurationInvalidError, PlatformUnsupportedError
from ..params import standard
from ..params.store import EntryState, ParameterStore
from .base import Bundler, BundlerKind, BundlerOutcome
from .registry import BundlerRegistry, default_registry


class BundleType(str, Enum):
    """Enumerate the bundle selections a run may request."""

    NONE = "NONE"
    ALL = "ALL"
    NATIVE = "NATIVE"
    IMAGE = "IMAGE"
    INSTALLER = "INSTALLER"


@dataclass(slots=True)
class BundleReport:
    """Outcome of a bundling run.

    Attributes:
        artifacts: Produced artifacts keyed by bundler id.
        outcomes: Outcome of every bundler that was attempted, keyed by id.
    """

    artifacts: dict[str, Path] = field(default_factory=dict)
    outcomes: dict[str, BundlerOutcome] = field(default_factory=dict)

    @property
    def failed(self) -> list[str]:
        """Return the ids of bundlers that failed."""

        return [key for key, outcome in self.outcomes.items() if outcome is BundlerOutcome.FAILED]

    @property
    def success(self) -> bool:
        """Return ``True`` when no bundler failed."""

        return not self.failed


def select_bundlers(
    registry: BundlerRegistry,
    bundle_type: BundleType,
    bundle_format: str | None = None,
) -> list[Bundler]:
    """Return the bundlers a run of ``bundle_type`` should attempt.

    Args:
        registry: Registry to select from.
        bundle_type: Requested selection.
        bundle_format: Optional bundler id; matched case-insensitively.

    Returns:
        list[Bundler]: Bundlers in execution order.
    """

    selected: Sequence[Bundler]
    if bundle_type is BundleType.NONE:
        selected = ()
    elif bundle_type is BundleType.IMAGE:
        selected = registry.for_type(BundlerKind.IMAGE)
    elif bundle_type is BundleType.INSTALLER:
        selected = registry.for_type(BundlerKind.INSTALLER)
    elif bundle_type is BundleType.NATIVE:
        selected = (*registry.for_type(BundlerKind.IMAGE), *registry.for_type(BundlerKind.INSTALLER))
    else:
        selected = registry.bundlers()
    if bundle_format is not None:
        wanted = bundle_format.lower()
        selected = [bundler for bundler in selected if bundler.id.lower() == wanted]
    return list(selected)


def run_bundler(bundler: Bundler, store: ParameterStore, output_dir: Path) -> tuple[BundlerOutcome, Path | None]:
    """Validate, execute and clean up one bundler.

    Errors never escape; each maps onto an outcome and a log line.

    Args:
        bundler: Bundler to run.
        store: Parameter store shared by the run.
        output_dir: Directory receiving artifacts.

    Returns:
        tuple[BundlerOutcome, Path | None]: Outcome and produced artifact.
    """

    try:
        bundler.validate(store)
        result = bundler.execute(store, output_dir)
    except PlatformUnsupportedError:
        debug(f"Bundler {bundler.name} skipped because the bundler does not support bundling on this platform.")
        return BundlerOutcome.SKIPPED, None
    except ConfigurationInvalidError as exc:
        debug(repr(exc))
        info(f"Bundler {bundler.name} skipped because of a configuration problem: {exc.message}")
        if exc.advice:
            info(f"  Advice to fix: {exc.advice}")
        return BundlerOutcome.SKIPPED, None
    except Exception as exc:  # noqa: BLE001
        info(f"Bundler {bundler.name} failed because of {exc}")
        debug(repr(exc))
        return BundlerOutcome.FAILED, None
    finally:
        bundler.cleanup(store)
    if result is None:
        info(f'Bundler "{bundler.name}" ({bundler.id}) failed to produce a bundle.')
        return BundlerOutcome.FAILED, None
    return BundlerOutcome.SUCCEEDED, result


def generate_bundles(
    store: ParameterStore,
    output_dir: Path,
    *,
    bundle_type: BundleType = BundleType.NATIVE,
    bundle_format: str | None = None,
    registry: BundlerRegistry | None = None,
) -> BundleReport:
    """Run every selected bundler and collect their artifacts.

    A bundler's failure never stops the bundlers after it. A build root the
    store created itself is removed once every bundler has run.

    Args:
        store: Parameter store shared by every bundler.
        output_dir: Directory receiving artifacts.
        bundle_type: Requested selection.
        bundle_format: Optional bundler id filter.
        registry: Registry to select from; :func:`default_registry` when omitted.

    Returns:
        BundleReport: Artifacts and per-bundler outcomes.
    """

    report = BundleReport()
    for bundler in select_bundlers(registry or default_registry(), bundle_type, bundle_format):
        outcome, artifact = run_bundler(bundler, store, output_dir)
        report.outcomes[bundler.id] = outcome
        if artifact is not None:
            report.artifacts[bundler.id] = artifact
            ok(f"{bundler.name}: {artifact}")
    remove_default_build_root(store)
    return report


def remove_default_build_root(store: ParameterStore) -> None:
    """Delete the temporary build root when ``store`` derived it.

    A caller-supplied build root is left alone, as is any build root while
    debug output is enabled.

    Args:
        store: Parameter store for the finished run.
    """

    if store.state(standard.BUILD_ROOT) is not EntryState.DEFAULTED:
        return
    root = standard.BUILD_ROOT.fetch(store)
    if root is None or not root.exists():
        return
    if is_debug():
        info(f"Kept build root for debug: {root.absolute()}")
        return
    try:
        shutil.rmtree(root)
    except OSError as exc:
        debug(f"removing build root {root} failed: {exc}")


__all__ = [
    "BundleReport",
    "BundleType",
    "generate_bundles",
    "remove_default_build_root",
    "run_bundler",
    "select_bundlers",
]
