# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Tests for installer bundlers layered on image bundlers."""

from __future__ import annotations

from pathlib import Path

import pytest

from appbundler.bundlers.base import BundlerKind
from appbundler.bundlers.image import ImageBundler
from appbundler.bundlers.installer import InstallerBundler, association_stores, installer_file_name
from appbundler.errors import ConfigurationInvalidError
from appbundler.params import standard
from appbundler.params.store import ParameterStore
from appbundler.platform import current_platform


class _SpyImageBundler(ImageBundler):
    def __init__(self) -> None:
        super().__init__(current_platform(), _unused_builder, bundler_id="test.app", name="Test Image")
        self.validated = 0
        self.executed = 0

    def do_validate(self, store: ParameterStore) -> bool:
        self.validated += 1
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        self.executed += 1
        image = output_dir / "Built"
        image.mkdir(parents=True, exist_ok=True)
        return image


def _unused_builder(*_args: object, **_kwargs: object) -> object:
    raise AssertionError("builder should not be created")


class _ArchiveBundler(InstallerBundler):
    id = "test.archive"
    name = "Test Archive"

    def do_validate(self, store: ParameterStore) -> bool:
        self.check_platform()
        self.validate_image(store)
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        image = self.prepare_image(store, self.build_root(store))
        if image is None:
            return None
        artifact = output_dir / f"{installer_file_name(store)}.txt"
        artifact.parent.mkdir(parents=True, exist_ok=True)
        artifact.write_text(str(image), encoding="utf-8")
        return artifact


def _make_installer() -> tuple[_SpyImageBundler, _ArchiveBundler]:
    image_bundler = _SpyImageBundler()
    return image_bundler, _ArchiveBundler(image_bundler)


def test_installer_inherits_platform_and_kind() -> None:
    image_bundler, installer = _make_installer()

    assert installer.platform is image_bundler.platform
    assert installer.bundle_type is BundlerKind.INSTALLER
    assert installer.supported()


def test_installer_builds_its_image_without_a_predefined_one(tmp_path: Path) -> None:
    image_bundler, installer = _make_installer()
    store = ParameterStore({standard.APP_NAME.id: "Demo", standard.BUILD_ROOT.id: tmp_path / "build"})

    assert installer.validate(store)
    artifact = installer.execute(store, tmp_path / "out")

    assert image_bundler.validated == 1
    assert image_bundler.executed == 1
    assert artifact == tmp_path / "out" / "Demo-1.0.txt"
    assert artifact.read_text(encoding="utf-8") == str(tmp_path / "build" / "test.archive" / "Built")


def test_predefined_image_is_reused_without_rebuilding(tmp_path: Path) -> None:
    predefined = tmp_path / "prebuilt" / "Demo"
    predefined.mkdir(parents=True)
    image_bundler, installer = _make_installer()
    store = ParameterStore(
        {
            standard.APP_NAME.id: "Demo",
            standard.IDENTIFIER.id: "com.example.demo",
            standard.PREDEFINED_APP_IMAGE.id: str(predefined),
            standard.INSTALLER_NAME.id: "demo-setup",
            standard.BUILD_ROOT.id: tmp_path / "build",
        }
    )

    installer.validate(store)
    artifact = installer.execute(store, tmp_path / "out")

    assert image_bundler.validated == 0
    assert image_bundler.executed == 0
    assert artifact == tmp_path / "out" / "demo-setup.txt"
    assert artifact.read_text(encoding="utf-8") == str(predefined)


def test_missing_predefined_image_is_a_configuration_error(tmp_path: Path) -> None:
    _, installer = _make_installer()
    store = ParameterStore({standard.APP_NAME.id: "Demo", standard.PREDEFINED_APP_IMAGE.id: tmp_path / "missing"})

    with pytest.raises(ConfigurationInvalidError, match="does not exist"):
        installer.validate(store)


def test_predefined_image_requires_an_app_name(tmp_path: Path) -> None:
    _, installer = _make_installer()
    store = ParameterStore({standard.PREDEFINED_APP_IMAGE.id: tmp_path})

    with pytest.raises(ConfigurationInvalidError, match="must specify the app name"):
        installer.validate(store)


def test_association_stores_inherit_only_the_app_name() -> None:
    store = ParameterStore(
        {
            standard.APP_NAME.id: "Demo",
            standard.VENDOR.id: "Acme",
            standard.FILE_ASSOCIATIONS.id: [
                {"fileAssociation.extension": "demo", "fileAssociation.contentType": "application/x-demo"},
            ],
        }
    )

    (association,) = association_stores(store)

    assert standard.FA_EXTENSIONS.fetch(association) == ["demo"]
    assert standard.FA_DESCRIPTION.fetch(association) == "Demo File"
    assert "vendor" not in association


def test_cleanup_removes_the_build_root(tmp_path: Path) -> None:
    _, installer = _make_installer()
    store = ParameterStore({standard.APP_NAME.id: "Demo", standard.BUILD_ROOT.id: tmp_path / "build"})
    installer.execute(store, tmp_path / "out")
    assert (tmp_path / "build" / "test.archive").exists()

    installer.cleanup(store)

    assert not (tmp_path / "build" / "test.archive").exists()
