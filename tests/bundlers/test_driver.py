# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for :mod:`appbundler.bundlers.driver`."""

from __future__ import annotations

from pathlib import Path

import pytest

from appbundler.bundlers.base import Bundler, BundlerKind, BundlerOutcome
from appbundler.bundlers.driver import BundleType, generate_bundles, run_bundler, select_bundlers
from appbundler.bundlers.registry import BundlerRegistry, default_registry
from appbundler.errors import ConfigurationInvalidError, PlatformUnsupportedError
from appbundler.params import standard
from appbundler.params.store import EntryState, ParameterStore
from appbundler.platform import current_platform


class _FakeBundler(Bundler):
    def __init__(
        self,
        bundler_id: str,
        *,
        kind: BundlerKind = BundlerKind.IMAGE,
        validate_error: Exception | None = None,
        execute_error: Exception | None = None,
        produces: bool = True,
    ) -> None:
        self.id = bundler_id
        self.name = f"Fake {bundler_id}"
        self.bundle_type = kind
        self.platform = current_platform()
        self.validate_error = validate_error
        self.execute_error = execute_error
        self.produces = produces
        self.events: list[str] = []

    def do_validate(self, store: ParameterStore) -> bool:
        self.events.append("validate")
        if self.validate_error is not None:
            raise self.validate_error
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        self.events.append("execute")
        if self.execute_error is not None:
            raise self.execute_error
        if not self.produces:
            return None
        artifact = output_dir / f"{self.id}.out"
        artifact.parent.mkdir(parents=True, exist_ok=True)
        artifact.write_text(self.id, encoding="utf-8")
        return artifact

    def cleanup(self, store: ParameterStore) -> None:
        self.events.append("cleanup")
        super().cleanup(store)


def _store(tmp_path: Path) -> ParameterStore:
    return ParameterStore({standard.BUILD_ROOT.id: tmp_path / "build"})


def test_one_failure_does_not_stop_later_bundlers(tmp_path: Path) -> None:
    failing = _FakeBundler("failing", execute_error=RuntimeError("disk full"))
    misconfigured = _FakeBundler("misconfigured", validate_error=ConfigurationInvalidError("bad", "fix it"))
    elsewhere = _FakeBundler("elsewhere", validate_error=PlatformUnsupportedError("not here"))
    working = _FakeBundler("working", kind=BundlerKind.INSTALLER)
    registry = BundlerRegistry([failing, misconfigured, elsewhere, working])

    report = generate_bundles(_store(tmp_path), tmp_path / "out", bundle_type=BundleType.ALL, registry=registry)

    assert report.artifacts == {"working": tmp_path / "out" / "working.out"}
    assert report.outcomes == {
        "failing": BundlerOutcome.FAILED,
        "misconfigured": BundlerOutcome.SKIPPED,
        "elsewhere": BundlerOutcome.SKIPPED,
        "working": BundlerOutcome.SUCCEEDED,
    }
    assert report.failed == ["failing"]
    assert not report.success


def test_cleanup_runs_after_every_outcome(tmp_path: Path) -> None:
    failing = _FakeBundler("failing", execute_error=RuntimeError("boom"))
    misconfigured = _FakeBundler("misconfigured", validate_error=ConfigurationInvalidError("bad"))
    working = _FakeBundler("working")

    for bundler in (failing, misconfigured, working):
        run_bundler(bundler, _store(tmp_path), tmp_path / "out")

    assert failing.events == ["validate", "execute", "cleanup"]
    assert misconfigured.events == ["validate", "cleanup"]
    assert working.events == ["validate", "execute", "cleanup"]


def test_unexpected_validation_error_counts_as_failure(tmp_path: Path) -> None:
    bundler = _FakeBundler("broken", validate_error=KeyError("missing"))

    outcome, artifact = run_bundler(bundler, _store(tmp_path), tmp_path / "out")

    assert outcome is BundlerOutcome.FAILED
    assert artifact is None


def test_no_artifact_is_a_failure(tmp_path: Path) -> None:
    outcome, artifact = run_bundler(_FakeBundler("empty", produces=False), _store(tmp_path), tmp_path / "out")

    assert outcome is BundlerOutcome.FAILED
    assert artifact is None


def test_store_is_shared_across_bundlers(tmp_path: Path) -> None:
    seen: list[int] = []

    class _Recording(_FakeBundler):
        def do_validate(self, store: ParameterStore) -> bool:
            seen.append(id(store))
            return True

    registry = BundlerRegistry([_Recording("first"), _Recording("second")])
    store = _store(tmp_path)

    generate_bundles(store, tmp_path / "out", bundle_type=BundleType.ALL, registry=registry)

    assert seen == [id(store), id(store)]


class _BuildRootUser(_FakeBundler):
    def __init__(self, bundler_id: str) -> None:
        super().__init__(bundler_id)
        self.roots: list[Path] = []

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        root = standard.BUILD_ROOT.fetch(store)
        assert root is not None
        (root / "shared").mkdir(parents=True, exist_ok=True)
        self.roots.append(root)
        return super().execute(store, output_dir, dependent_task=dependent_task)


def test_derived_build_root_is_removed_after_the_run(tmp_path: Path) -> None:
    bundler = _BuildRootUser("temp")
    store = ParameterStore()

    report = generate_bundles(store, tmp_path / "out", bundle_type=BundleType.ALL, registry=BundlerRegistry([bundler]))

    assert report.success
    assert store.state(standard.BUILD_ROOT) is EntryState.DEFAULTED
    assert len(bundler.roots) == 1
    assert not bundler.roots[0].exists()


def test_supplied_build_root_is_kept(tmp_path: Path) -> None:
    registry = BundlerRegistry([_BuildRootUser("kept")])

    generate_bundles(_store(tmp_path), tmp_path / "out", bundle_type=BundleType.ALL, registry=registry)

    assert (tmp_path / "build" / "shared").is_dir()


@pytest.mark.parametrize(
    ("bundle_type", "bundle_format", "expected"),
    [
        (BundleType.NONE, None, []),
        (BundleType.IMAGE, None, ["image"]),
        (BundleType.INSTALLER, None, ["installer"]),
        (BundleType.NATIVE, None, ["image", "installer"]),
        (BundleType.ALL, "INSTALLER", ["installer"]),
        (BundleType.ALL, "unknown", []),
    ],
)
def test_select_bundlers(bundle_type: BundleType, bundle_format: str | None, expected: list[str]) -> None:
    registry = BundlerRegistry(
        [_FakeBundler("installer", kind=BundlerKind.INSTALLER), _FakeBundler("image", kind=BundlerKind.IMAGE)]
    )

    selected = select_bundlers(registry, bundle_type, bundle_format)

    assert [bundler.id for bundler in selected] == expected


def test_registry_rejects_duplicates_and_orders_images_first() -> None:
    registry = default_registry()

    assert list(registry)[:3] == ["linux.app", "mac.app", "windows.app"]
    assert set(registry) == {
        "linux.app",
        "mac.app",
        "windows.app",
        "windows.service",
        "deb",
        "dmg",
        "mac.daemon",
        "pkg",
        "exe",
    }
    assert registry["deb"].image_bundler is registry["linux.app"]
    assert registry["pkg"].daemon_bundler is registry["mac.daemon"]
    assert registry["exe"].service_bundler is registry["windows.service"]
    assert registry["windows.service"].image_bundler is registry["windows.app"]
    assert registry.try_get("rpm") is None
    with pytest.raises(ValueError, match="already registered"):
        registry.register(_FakeBundler("deb"))
