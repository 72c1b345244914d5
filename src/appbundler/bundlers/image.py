# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Application image bundlers for every supported platform."""

from __future__ import annotations

import shutil
from collections.abc import Callable, Sequence
from pathlib import Path

from ..core.logging import info
from ..errors import ConfigurationInvalidError
from ..image.builder import AppImageBuilder
from ..image.linux import LinuxAppImageBuilder
from ..image.mac import MacAppImageBuilder
from ..image.windows import WindowsAppImageBuilder
from ..modules.assembler import JLinkAssembler, RuntimeImageAssembler
from ..modules.classify import ModuleClassifier
from ..modules.resolver import ModuleResolver
from ..params import standard
from ..params.descriptor import ParameterDescriptor
from ..params.store import ParameterStore
from ..platform import Platform
from .base import Bundler, BundlerKind, ensure_output_dir

BuilderFactory = Callable[..., AppImageBuilder]

APP_BUNDLE_DESCRIPTORS: tuple[ParameterDescriptor[object], ...] = (
    standard.APP_NAME,
    standard.APP_RESOURCES,
    standard.ARGUMENTS,
    standard.CLASSPATH,
    standard.JVM_OPTIONS,
    standard.JVM_PROPERTIES,
    standard.MAIN_CLASS,
    standard.MAIN_JAR,
    standard.MODULE,
    standard.MODULE_PATH,
    standard.ADD_MODULES,
    standard.LIMIT_MODULES,
    standard.PREFERENCES_ID,
    standard.PRELOADER_CLASS,
    standard.USER_JVM_OPTIONS,
    standard.VERSION,
)  # type: ignore[assignment]


def validate_image_parameters(store: ParameterStore) -> None:
    """Check the entry point and launcher options shared by every image.

    Args:
        store: Parameter store for the run.

    Raises:
        ConfigurationInvalidError: If the entry point or user JVM options are unusable.
    """

    standard.validate_main_class_info(store)
    for key, value in (standard.USER_JVM_OPTIONS.fetch(store) or {}).items():
        if not value:
            raise ConfigurationInvalidError(
                f"UserJvmOption key '{key}' has a null or empty value.",
                "Provide a value for the key or split the key into a key/value pair. "
                "Such as '-Xmx1G' into '-Xmx' and '1G'.",
            )
    has_main_jar = standard.MAIN_JAR.fetch(store) is not None
    has_main_module = standard.MODULE.fetch(store) is not None
    has_main_class = standard.MAIN_CLASS.fetch(store) is not None
    if not (has_main_jar or has_main_module or has_main_class):
        raise ConfigurationInvalidError(
            "Main application class is missing.",
            "Please specify main application class.",
        )


class ImageBundler(Bundler):
    """Produce a self-contained application image directory.

    Args:
        platform: Host platform the image targets.
        builder_factory: Callable ``(store, image_dir, *, classifier)``
            returning the platform's :class:`AppImageBuilder`.
        bundler_id: Registry id, for example ``linux.app``.
        name: Human readable bundler name.
        description: Longer explanation used in listings.
        assembler: Runtime image assembler; ``jlink`` when omitted.
    """

    bundle_type = BundlerKind.IMAGE

    def __init__(
        self,
        platform: Platform,
        builder_factory: BuilderFactory,
        *,
        bundler_id: str,
        name: str,
        description: str = "",
        assembler: RuntimeImageAssembler | None = None,
    ) -> None:
        self.platform = platform
        self.builder_factory = builder_factory
        self.id = bundler_id
        self.name = name
        self.description = description
        self.assembler = assembler
        self.classifier = ModuleClassifier()

    def descriptors(self) -> Sequence[ParameterDescriptor[object]]:
        return APP_BUNDLE_DESCRIPTORS

    def builder(self, store: ParameterStore, image_dir: Path) -> AppImageBuilder:
        """Return the platform builder rooted under ``image_dir``."""

        return self.builder_factory(store, image_dir, classifier=self.classifier)

    def image_root(self, store: ParameterStore, image_dir: Path) -> Path:
        """Return the directory :meth:`execute` creates under ``image_dir``."""

        return self.builder(store, image_dir).root

    def do_validate(self, store: ParameterStore) -> bool:
        self.check_platform()
        validate_image_parameters(store)
        return True

    def execute(self, store: ParameterStore, output_dir: Path, *, dependent_task: bool = False) -> Path | None:
        ensure_output_dir(output_dir)
        builder = self.builder(store, output_dir)
        if builder.root.exists():
            shutil.rmtree(builder.root)
        builder.root.mkdir(parents=True)
        if not dependent_task:
            info(f"Creating app bundle: {builder.root.absolute()}")
        resolver = ModuleResolver.for_store(store, classifier=self.classifier)
        assembler = self.assembler or JLinkAssembler(verbose=bool(standard.VERBOSE.fetch(store)))
        return builder.build(resolver, assembler)


def linux_image_bundler(assembler: RuntimeImageAssembler | None = None) -> ImageBundler:
    """Return the ``linux.app`` bundler."""

    return ImageBundler(
        Platform.LINUX,
        LinuxAppImageBuilder,
        bundler_id="linux.app",
        name="Linux Application Image",
        description="A directory based image of a Linux application with a co-bundled runtime. "
        "Used as a base for the installer bundlers.",
        assembler=assembler,
    )


def mac_image_bundler(assembler: RuntimeImageAssembler | None = None) -> ImageBundler:
    """Return the ``mac.app`` bundler."""

    return ImageBundler(
        Platform.MAC,
        MacAppImageBuilder,
        bundler_id="mac.app",
        name="Mac Application Image",
        description="A directory based image of a mac application with a co-bundled runtime. "
        "Used as a base for the installer bundlers.",
        assembler=assembler,
    )


def windows_image_bundler(assembler: RuntimeImageAssembler | None = None) -> ImageBundler:
    """Return the ``windows.app`` bundler."""

    return ImageBundler(
        Platform.WINDOWS,
        WindowsAppImageBuilder,
        bundler_id="windows.app",
        name="Windows Application Image",
        description="A directory based image of a Windows application with a co-bundled runtime. "
        "Used as a base for the installer bundlers.",
        assembler=assembler,
    )


__all__ = [
    "APP_BUNDLE_DESCRIPTORS",
    "BuilderFactory",
    "ImageBundler",
    "linux_image_bundler",
    "mac_image_bundler",
    "validate_image_parameters",
    "windows_image_bundler",
]
