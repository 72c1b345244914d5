# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Resolve the validated set of runtime modules to embed in an app image."""

from __future__ import annotations

import re
import zipfile
from collections.abc import Iterable, Sequence
from pathlib import Path
from typing import Final

from ..core.logging import debug, info, warn
from ..errors import ConfigurationInvalidError
from ..params import standard
from ..params.store import ParameterStore
from .assembler import DEFAULT_EXCLUDE_FILES, RuntimeImageRequest
from .classify import ModuleArtifact, ModuleClassifier, ModuleKind, find_module_dir

ALL_MODULE_PATH: Final[str] = "ALL-MODULE-PATH"
ALL_RUNTIME: Final[str] = "ALL-RUNTIME"
MACROS: Final[frozenset[str]] = frozenset({ALL_MODULE_PATH, ALL_RUNTIME})

MANIFEST_MODULE: Final[str] = "jdk.packager"
REDISTRIBUTABLE_MANIFEST: Final[str] = "com/sun/openjfx/tools/jre.list"
_JMOD_CLASSES_PREFIX: Final[str] = "classes/"
_JAVA_VERSION_RE: Final[re.Pattern[str]] = re.compile(r'^JAVA_VERSION="?([^"\s]+)"?\s*$', re.MULTILINE)


def strip_manifest_comment(line: str) -> str:
    """Return ``line`` without its ``;`` comment and surrounding whitespace.

    Args:
        line: Raw manifest line.

    Returns:
        str: Module name, or ``""`` for blank and comment-only lines.
    """

    return line.strip().partition(";")[0].strip()


def _reject_modular_resources(jars: Sequence[Path]) -> None:
    names = ", ".join(str(jar) for jar in jars)
    raise ConfigurationInvalidError(
        f"Modules are not allowed in srcfiles: [{names}].",
        "Place modular jars on the module path and name the main one with the module parameter.",
    )


class ModuleResolver:
    """Expand, union and prune requested module names against a search path.

    Args:
        search_path: Ordered directories holding module artifacts.
        classifier: Classifier shared for the run; a fresh one is created
            when omitted.
        manifest_module: Module on the search path carrying name manifests.
        manifest_entry: Entry holding the redistributable module list.
    """

    def __init__(
        self,
        search_path: Sequence[Path],
        *,
        classifier: ModuleClassifier | None = None,
        manifest_module: str = MANIFEST_MODULE,
        manifest_entry: str = REDISTRIBUTABLE_MANIFEST,
    ) -> None:
        self.search_path: tuple[Path, ...] = tuple(Path(entry) for entry in search_path)
        self.classifier = classifier or ModuleClassifier()
        self.manifest_module = manifest_module
        self.manifest_entry = manifest_entry
        self._available: dict[str, ModuleArtifact] | None = None

    # -- Search path ---------------------------------------------------------

    def available_modules(self) -> dict[str, ModuleArtifact]:
        """Return named modules on the search path keyed by module name.

        Earlier search-path directories win when a name repeats.

        Returns:
            dict[str, ModuleArtifact]: Modular jars, jmods and exploded modules.
        """

        if self._available is None:
            available: dict[str, ModuleArtifact] = {}
            for artifact in self.classifier.scan(self.search_path):
                available.setdefault(artifact.name, artifact)
            self._available = available
        return self._available

    def find_module_dir(self, file_name: str) -> Path | None:
        """Return the first search directory containing ``file_name``.

        Args:
            file_name: File or directory name to look for.

        Returns:
            Path | None: Matching directory, if any.
        """

        return find_module_dir(self.search_path, file_name)

    # -- Manifests -----------------------------------------------------------

    def _read_manifest_text(self, entry: str) -> str | None:
        """Return the text of ``entry`` inside the manifest module.

        Args:
            entry: Resource path inside the module.

        Returns:
            str | None: Decoded text, ``None`` when unavailable.
        """

        artifact = self.available_modules().get(self.manifest_module)
        if artifact is None:
            debug(f"manifest module={self.manifest_module} not found on module path")
            return None
        if artifact.kind is ModuleKind.EXPLODED_MODULE:
            target = artifact.path / entry
            return target.read_text(encoding="utf-8") if target.is_file() else None
        member = f"{_JMOD_CLASSES_PREFIX}{entry}" if artifact.kind is ModuleKind.JMOD else entry
        try:
            with zipfile.ZipFile(artifact.path) as archive:
                return archive.read(member).decode("utf-8")
        except KeyError:
            return None
        except (OSError, zipfile.BadZipFile) as exc:
            warn(f"Unable to read {member} from {artifact.path}: {exc}")
            return None

    def redistributable_modules(self, entry: str | None = None) -> set[str]:
        """Return the module names listed by a manifest entry.

        Args:
            entry: Manifest entry to read; defaults to the redistributable list.

        Returns:
            set[str]: Listed names, empty when the manifest is unavailable.
        """

        text = self._read_manifest_text(entry or self.manifest_entry)
        if text is None:
            return set()
        names = (strip_manifest_comment(line) for line in text.splitlines())
        return {name for name in names if name}

    # -- Resolution ------------------------------------------------------------

    def expand(self, requested: Iterable[str]) -> set[str]:
        """Replace macro tokens in ``requested`` with the names they denote.

        Args:
            requested: Raw requested names, possibly containing macros.

        Returns:
            set[str]: Expanded names; not yet validated.
        """

        tokens = set(requested)
        expanded = tokens - MACROS
        if ALL_MODULE_PATH in tokens:
            expanded.update(self.available_modules())
        if ALL_RUNTIME in tokens:
            expanded.update(self.redistributable_modules())
        return expanded

    def prune(self, names: Iterable[str]) -> set[str]:
        """Drop names that are not resolvable on the search path.

        Every dropped name is logged at info level.

        Args:
            names: Candidate module names.

        Returns:
            set[str]: Names present on the search path.
        """

        available = self.available_modules()
        kept: set[str] = set()
        for name in sorted(set(names)):
            if name in available:
                kept.add(name)
            else:
                info(f"Module {name} does not exist.")
        return kept

    def resolve(self, requested: Iterable[str]) -> set[str]:
        """Expand macros in ``requested`` and prune unresolvable names.

        Args:
            requested: Raw requested names.

        Returns:
            set[str]: Validated module set.
        """

        return self.prune(self.expand(requested))

    # -- Image support ---------------------------------------------------------

    def resource_jars(self, store: ParameterStore, kind: ModuleKind | None = None) -> list[Path]:
        """Return application resource jars, optionally filtered by ``kind``.

        Args:
            store: Parameter store for the run.
            kind: Jar classification to keep; ``None`` keeps all jars.

        Returns:
            list[Path]: Matching jar paths in resource order.
        """

        source_dir = standard.SOURCE_DIR.fetch(store)
        jars: list[Path] = []
        for resource_set in standard.APP_RESOURCES_LIST.fetch(store) or []:
            for relative in resource_set:
                if not relative.endswith(".jar"):
                    continue
                candidate = resource_set.base_dir / relative
                if not candidate.exists() and source_dir is not None:
                    candidate = Path(source_dir, relative)
                if kind is None or self.classifier.kind(candidate) is kind:
                    jars.append(candidate)
        return jars

    def resolve_for_image(
        self,
        store: ParameterStore,
        output_dir: Path,
        *,
        exclude_files: Sequence[str] = DEFAULT_EXCLUDE_FILES,
    ) -> RuntimeImageRequest:
        """Compute the runtime image request for the application in ``store``.

        Args:
            store: Parameter store for the run.
            output_dir: Directory the runtime tree will be written to.
            exclude_files: Glob patterns excluded from the runtime.

        Returns:
            RuntimeImageRequest: Inputs for the runtime image assembler.

        Raises:
            ConfigurationInvalidError: If more than one modular jar appears
                among the application resources, or one appears next to a
                modular entry point.
        """

        if self.find_module_dir(standard.JAVA_BASE_JMOD) is None:
            warn("Warning: No JDK Modules found.")

        requested = set(standard.ADD_MODULES.fetch(store) or ())
        limit_modules = frozenset(standard.LIMIT_MODULES.fetch(store) or ())
        main_jar = standard.main_jar_path(store)
        if main_jar is not None:
            main_kind = self.classifier.kind(main_jar)
        elif standard.MODULE.fetch(store) is None:
            main_kind = ModuleKind.UNNAMED_JAR
        else:
            main_kind = ModuleKind.UNKNOWN

        modular = self.resource_jars(store, ModuleKind.MODULAR_JAR)
        if len(modular) > 1:
            _reject_modular_resources(modular)
        if main_kind is ModuleKind.UNNAMED_JAR and not standard.DETECT_MODULES.fetch(store):
            requested.add(ALL_RUNTIME)
        elif main_kind in {ModuleKind.UNKNOWN, ModuleKind.MODULAR_JAR}:
            main_module = standard.module_name_part(store)
            if main_module is None and main_jar is not None:
                main_module = self.classifier.classify(main_jar).name
            if main_module:
                requested.add(main_module)
            main_resolved = main_jar.absolute() if main_jar is not None else None
            extra = [jar for jar in modular if jar.absolute() != main_resolved]
            if extra:
                _reject_modular_resources(extra)

        add_modules = self.resolve(requested)

        info(f"Adding modules: {sorted(add_modules)} to runtime image.")
        return RuntimeImageRequest(
            output_dir=output_dir,
            module_path=self.search_path,
            add_modules=frozenset(add_modules),
            limit_modules=limit_modules,
            exclude_files=tuple(exclude_files),
            strip_native_commands=bool(standard.STRIP_NATIVE_COMMANDS.fetch(store)),
            user_options=dict(standard.JLINK_OPTIONS.fetch(store) or {}),
        )

    def runtime_version(self) -> str:
        """Return the runtime version recorded next to ``java.base.jmod``.

        Returns:
            str: ``JAVA_VERSION`` from the runtime ``release`` file, or ``""``.
        """

        jmods = self.find_module_dir(standard.JAVA_BASE_JMOD)
        if jmods is None:
            return ""
        release = jmods.parent / "release"
        if not release.is_file():
            return ""
        match = _JAVA_VERSION_RE.search(release.read_text(encoding="utf-8", errors="replace"))
        return match.group(1) if match else ""

    @classmethod
    def for_store(cls, store: ParameterStore, *, classifier: ModuleClassifier | None = None) -> ModuleResolver:
        """Return a resolver over the ``module-path`` parameter of ``store``.

        Args:
            store: Parameter store for the run.
            classifier: Optional shared classifier.

        Returns:
            ModuleResolver: Resolver bound to the store's module path.
        """

        return cls(standard.MODULE_PATH.fetch(store) or [], classifier=classifier)


__all__ = [
    "ALL_MODULE_PATH",
    "ALL_RUNTIME",
    "MACROS",
    "MANIFEST_MODULE",
    "ModuleResolver",
    "REDISTRIBUTABLE_MANIFEST",
    "strip_manifest_comment",
]
