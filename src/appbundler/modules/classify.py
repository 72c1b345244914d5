# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Classification of module artifacts found on a module search path."""

from __future__ import annotations

import zipfile
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Final

from ..errors import ConfigurationInvalidError

MODULE_DESCRIPTOR: Final[str] = "module-info.class"


class ModuleKind(str, Enum):
    """Enumerate the artifact kinds a module search path may contain."""

    UNKNOWN = "unknown"
    UNNAMED_JAR = "unnamed-jar"
    MODULAR_JAR = "modular-jar"
    JMOD = "jmod"
    EXPLODED_MODULE = "exploded-module"


NAMED_KINDS: Final[frozenset[ModuleKind]] = frozenset(
    {ModuleKind.MODULAR_JAR, ModuleKind.JMOD, ModuleKind.EXPLODED_MODULE}
)


@dataclass(frozen=True, slots=True)
class ModuleArtifact:
    """A classified file or directory.

    Attributes:
        path: Location of the artifact.
        kind: Classification result.
    """

    path: Path
    kind: ModuleKind

    @property
    def name(self) -> str:
        """Return the module name implied by the artifact's file name.

        Returns:
            str: Directory name for exploded modules, otherwise the file name
            without its last extension.
        """

        if self.kind is ModuleKind.EXPLODED_MODULE:
            return self.path.name
        return self.path.stem if self.path.suffix else self.path.name


def _jar_kind(path: Path) -> ModuleKind:
    """Return the jar classification of ``path``.

    Args:
        path: Jar file to inspect.

    Returns:
        ModuleKind: ``MODULAR_JAR`` when a root module descriptor exists,
        ``UNNAMED_JAR`` for other readable archives, ``UNKNOWN`` otherwise.
    """

    try:
        with zipfile.ZipFile(path) as archive:
            names = archive.namelist()
    except (OSError, zipfile.BadZipFile):
        return ModuleKind.UNKNOWN
    return ModuleKind.MODULAR_JAR if MODULE_DESCRIPTOR in names else ModuleKind.UNNAMED_JAR


def classify_path(path: Path) -> ModuleKind:
    """Classify ``path`` without caching.

    Args:
        path: File or directory to classify.

    Returns:
        ModuleKind: Classification of the artifact.
    """

    if path.is_file():
        if path.name.endswith(".jmod"):
            return ModuleKind.JMOD
        if path.name.endswith(".jar"):
            return _jar_kind(path)
        return ModuleKind.UNKNOWN
    if path.is_dir() and (path / MODULE_DESCRIPTOR).exists():
        return ModuleKind.EXPLODED_MODULE
    return ModuleKind.UNKNOWN


class ModuleClassifier:
    """Classify module artifacts, caching results per path for one run."""

    def __init__(self) -> None:
        """Initialise an empty classification cache."""

        self._cache: dict[Path, ModuleKind] = {}

    def classify(self, path: Path) -> ModuleArtifact:
        """Return the cached classification of ``path``.

        Args:
            path: File or directory to classify.

        Returns:
            ModuleArtifact: Classified artifact.
        """

        key = Path(path).absolute()
        kind = self._cache.get(key)
        if kind is None:
            kind = classify_path(key)
            self._cache[key] = kind
        return ModuleArtifact(Path(path), kind)

    def kind(self, path: Path) -> ModuleKind:
        """Return only the classification of ``path``.

        Args:
            path: File or directory to classify.

        Returns:
            ModuleKind: Classification result.
        """

        return self.classify(path).kind

    def scan(self, search_path: Sequence[Path], kinds: Iterable[ModuleKind] = NAMED_KINDS) -> list[ModuleArtifact]:
        """List artifacts of the requested ``kinds`` in every search directory.

        Args:
            search_path: Ordered directories to scan (not recursive).
            kinds: Artifact kinds to keep.

        Returns:
            list[ModuleArtifact]: Matching artifacts in search-path order.

        Raises:
            ConfigurationInvalidError: If a search directory does not exist.
        """

        wanted = frozenset(kinds)
        artifacts: list[ModuleArtifact] = []
        for directory in search_path:
            folder = Path(str(directory).strip('"'))
            if not folder.is_dir():
                raise ConfigurationInvalidError(
                    f"Can not get modules in directory: {folder} because it does not exist",
                    "Check that every module-path entry names an existing directory.",
                )
            for entry in sorted(folder.iterdir()):
                artifact = self.classify(entry)
                if artifact.kind in wanted:
                    artifacts.append(artifact)
        return artifacts

    def module_names(self, search_path: Sequence[Path]) -> list[str]:
        """Return the names of every named module on ``search_path``.

        Args:
            search_path: Ordered directories to scan.

        Returns:
            list[str]: Module names in discovery order, without duplicates.
        """

        names: list[str] = []
        for artifact in self.scan(search_path):
            if artifact.name not in names:
                names.append(artifact.name)
        return names

    def clear(self) -> None:
        """Forget every cached classification."""

        self._cache.clear()


def find_module_dir(search_path: Sequence[Path], file_name: str) -> Path | None:
    """Return the first search directory containing ``file_name``.

    Args:
        search_path: Ordered directories to probe.
        file_name: File or directory name, for example ``java.base.jmod``.

    Returns:
        Path | None: Directory holding ``file_name``, if any.
    """

    for directory in search_path:
        if (Path(directory) / file_name).exists():
            return Path(directory)
    return None


__all__ = [
    "MODULE_DESCRIPTOR",
    "ModuleArtifact",
    "ModuleClassifier",
    "ModuleKind",
    "NAMED_KINDS",
    "classify_path",
    "find_module_dir",
]
