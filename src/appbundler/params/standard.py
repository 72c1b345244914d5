# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Standard parameter descriptors shared by every bundler."""

from __future__ import annotations

import os
import re
import tempfile
from collections.abc import Callable, Mapping
from datetime import datetime
from pathlib import Path
from typing import Final, TypeVar

from ..core.logging import warn
from ..errors import ConfigurationInvalidError
from ..modules.classify import find_module_dir
from .descriptor import DefaultDeriver, ParameterDescriptor, StringParser, ValueType
from .manifest import MainJarInfo, sniff_main_jar
from .parsers import (
    parse_bool,
    parse_int,
    parse_properties,
    parse_verbose,
    split_arguments,
    split_comma_set,
    split_path_list,
    split_whitespace,
)
from .resources import RelativeFileSet
from .store import ParameterStore

ValueT = TypeVar("ValueT")

JAVA_BASE_JMOD: Final[str] = "java.base.jmod"
_TO_FS_NAME_RE: Final[re.Pattern[str]] = re.compile(r"\s|[\\/?:*<>|]")
_LIST_SPLIT_RE: Final[re.Pattern[str]] = re.compile(r"[,\s]+")

STANDARD_DESCRIPTORS: list[ParameterDescriptor[object]] = []


def _register(
    id: str,
    value_type: ValueType,
    default: DefaultDeriver[ValueT] | None = None,
    parser: StringParser[ValueT] | None = None,
    *,
    name: str = "",
    description: str = "",
) -> ParameterDescriptor[ValueT]:
    """Create a descriptor and record it in :data:`STANDARD_DESCRIPTORS`.

    Args:
        id: Descriptor id.
        value_type: Semantic value type.
        default: Default deriver.
        parser: Raw string parser.
        name: Short label.
        description: Longer explanation.

    Returns:
        ParameterDescriptor[ValueT]: The registered descriptor.
    """

    descriptor: ParameterDescriptor[ValueT] = ParameterDescriptor(
        id=id,
        value_type=value_type,
        default_deriver=default,
        string_parser=parser,
        name=name,
        description=description,
    )
    STANDARD_DESCRIPTORS.append(descriptor)  # type: ignore[arg-type]
    return descriptor


def _constant(value: ValueT) -> DefaultDeriver[ValueT]:
    """Return a deriver producing ``value``.

    Args:
        value: Constant default.

    Returns:
        DefaultDeriver[ValueT]: Deriver ignoring the store.
    """

    return lambda _store: value


def _fresh(factory: Callable[[], ValueT]) -> DefaultDeriver[ValueT]:
    """Return a deriver producing a new mutable value per store.

    Args:
        factory: Zero-argument factory such as ``list`` or ``dict``.

    Returns:
        DefaultDeriver[ValueT]: Deriver calling ``factory``.
    """

    return lambda _store: factory()


def _bool_parser(raw: str, _store: ParameterStore) -> bool:
    return parse_bool(raw)


def _path_parser(raw: str, _store: ParameterStore) -> Path:
    return Path(raw)


def _text_parser(raw: str, _store: ParameterStore) -> str:
    return raw


# -- Resources -----------------------------------------------------------------

def _parse_resources(raw: str, _store: ParameterStore) -> RelativeFileSet | None:
    sets = RelativeFileSet.list_from_spec(raw)
    if not sets:
        return None
    base_dir = sets[0].base_dir
    if any(resource_set.base_dir != base_dir for resource_set in sets):
        raise ConfigurationInvalidError(
            f"Resources \"{raw}\" do not share one base directory.",
            "Use appResourcesList to supply files from several directories.",
        )
    included: list[str] = []
    for resource_set in sets:
        included.extend(entry for entry in resource_set if entry not in included)
    return RelativeFileSet(base_dir, included)


APP_RESOURCES: ParameterDescriptor[RelativeFileSet] = _register(
    "appResources",
    ValueType.OBJECT,
    parser=_parse_resources,
    name="Resources",
    description="All of the files to place in the resources directory, including needed jars.",
)


def _default_resources_list(store: ParameterStore) -> list[RelativeFileSet]:
    resources = APP_RESOURCES.fetch(store)
    return [resources] if resources is not None else []


APP_RESOURCES_LIST: ParameterDescriptor[list[RelativeFileSet]] = _register(
    "appResourcesList",
    ValueType.OBJECT,
    _default_resources_list,
    lambda raw, _store: RelativeFileSet.list_from_spec(raw),
    name="Resources List",
    description="Ordered resource sets; the first jar with an entry point wins.",
)


def _parse_source_dir(raw: str, _store: ParameterStore) -> str:
    return raw[:-1] if raw.endswith(os.sep) and len(raw) > 1 else raw


SOURCE_DIR: ParameterDescriptor[str] = _register(
    "srcdir",
    ValueType.STRING,
    parser=_parse_source_dir,
    name="Source Directory",
    description="Directory containing the files to be bundled.",
)

# -- Entry point ---------------------------------------------------------------

MODULE: ParameterDescriptor[str] = _register(
    "module",
    ValueType.STRING,
    name="Main Module",
    description="Main module, optionally followed by '/' and the main class.",
)


def _default_module_path() -> list[Path]:
    """Return the runtime's own module directory when one can be found.

    Returns:
        list[Path]: ``$JAVA_HOME/jmods`` or a developer-build fallback.
    """

    java_home = os.environ.get("JAVA_HOME")
    if java_home:
        jmods = Path(java_home, "jmods").absolute()
        if jmods.is_dir():
            return [jmods]
    jdk_home = os.environ.get("JDK_HOME")
    if jdk_home:
        jmods = Path(jdk_home, "..", "images", "jmods").absolute()
        if jmods.is_dir():
            return [jmods]
    return []


def _parse_module_path(raw: str, _store: ParameterStore) -> list[Path]:
    module_path = split_path_list(raw)
    if find_module_dir(module_path, JAVA_BASE_JMOD) is None:
        module_path.extend(entry for entry in _default_module_path() if entry not in module_path)
    if find_module_dir(module_path, JAVA_BASE_JMOD) is None:
        warn("Warning: No JDK Modules found.")
    return module_path


MODULE_PATH: ParameterDescriptor[list[Path]] = _register(
    "module-path",
    ValueType.PATH_LIST,
    lambda _store: _default_module_path(),
    _parse_module_path,
    name="Module Path",
    description="Directories searched for runtime modules.",
)


def _sniff_main_jar(store: ParameterStore) -> MainJarInfo | None:
    """Derive entry-point details from the application resources.

    Args:
        store: Parameter store for the run.

    Returns:
        MainJarInfo | None: First qualifying jar, ``None`` when nothing needs
        sniffing or no jar qualifies.
    """

    has_main_class = store.is_overridden(MAIN_CLASS)
    has_main_jar = store.is_overridden(MAIN_JAR)
    has_classpath = store.is_overridden(CLASSPATH)
    if (has_main_class and has_main_jar and has_classpath) or store.is_overridden(MODULE):
        return None

    candidates: list[tuple[Path, str]] = []
    if has_main_jar:
        main_jar = MAIN_JAR.fetch(store)
        if main_jar is not None:
            candidates = [(main_jar.base_dir, entry) for entry in main_jar]
    elif has_classpath:
        resources = APP_RESOURCES.fetch(store)
        if resources is not None:
            candidates = [(resources.base_dir, entry) for entry in (CLASSPATH.fetch(store) or "").split()]
    else:
        for resource_set in APP_RESOURCES_LIST.fetch(store) or []:
            candidates.extend((resource_set.base_dir, entry) for entry in resource_set)

    declared = MAIN_CLASS.fetch(store) if has_main_class else None
    return sniff_main_jar(candidates, declared_main_class=declared)


MAIN_JAR_INFO: ParameterDescriptor[MainJarInfo] = _register(
    "mainJarInfo",
    ValueType.OBJECT,
    _sniff_main_jar,
    name="Main Jar Info",
    description="Entry point details discovered from jar manifests.",
)


def _derive_main_jar(store: ParameterStore) -> RelativeFileSet | None:
    sniffed = MAIN_JAR_INFO.fetch(store)
    if sniffed is None:
        return None
    return RelativeFileSet.from_files(sniffed.base_dir, [sniffed.main_jar])


def _parse_main_jar(raw: str, store: ParameterStore) -> RelativeFileSet:
    """Locate the named main jar in the resources or on the module path.

    Args:
        raw: Jar name relative to the application resources.
        store: Parameter store for the run.

    Returns:
        RelativeFileSet: Single-entry set naming the jar.

    Raises:
        ConfigurationInvalidError: If the jar cannot be found.
    """

    for resource_set in APP_RESOURCES_LIST.fetch(store) or []:
        if (resource_set.base_dir / raw).exists():
            return RelativeFileSet(resource_set.base_dir, [Path(raw).as_posix()])
        module_dir = find_module_dir(MODULE_PATH.fetch(store) or [], raw)
        if module_dir is not None:
            return RelativeFileSet.from_files(module_dir, [module_dir / raw])
    raise ConfigurationInvalidError(
        f"The configured main jar does not exist {raw}",
        "The main jar must be specified relative to the app resources (not an absolute path), "
        "and must exist within those resources.",
    )


MAIN_JAR: ParameterDescriptor[RelativeFileSet] = _register(
    "mainJar",
    ValueType.OBJECT,
    _derive_main_jar,
    _parse_main_jar,
    name="Main Jar",
    description="Jar holding the main class, relative to the assembled application directory.",
)


def _derive_classpath(store: ParameterStore) -> str:
    sniffed = MAIN_JAR_INFO.fetch(store)
    return sniffed.classpath if sniffed is not None else ""


CLASSPATH: ParameterDescriptor[str] = _register(
    "classpath",
    ValueType.STRING,
    _derive_classpath,
    lambda raw, _store: raw.replace(os.pathsep, " "),
    name="Main Jar Classpath",
    description="Classpath of the main jar, relative to the assembled application directory.",
)


def module_name_part(store: ParameterStore) -> str | None:
    """Return the module portion of the ``module`` parameter.

    Args:
        store: Parameter store for the run.

    Returns:
        str | None: Text before ``/``, or ``None`` when no module is set.
    """

    module = MODULE.fetch(store)
    if module is None:
        return None
    name, _, _ = module.partition("/")
    return name or module


def module_class_part(store: ParameterStore) -> str | None:
    """Return the class portion of the ``module`` parameter.

    Args:
        store: Parameter store for the run.

    Returns:
        str | None: Text after ``/``, or ``None`` when absent.
    """

    module = MODULE.fetch(store)
    if module is None:
        return None
    head, sep, tail = module.partition("/")
    return tail if sep and head and tail else None


def _derive_main_class(store: ParameterStore) -> str | None:
    sniffed = MAIN_JAR_INFO.fetch(store)
    if sniffed is not None:
        return sniffed.main_class
    return module_class_part(store)


MAIN_CLASS: ParameterDescriptor[str] = _register(
    "applicationClass",
    ValueType.STRING,
    _derive_main_class,
    _text_parser,
    name="Main Class",
    description="Class with the main method, or the FX application class.",
)

PRELOADER_CLASS: ParameterDescriptor[str] = _register(
    "preloader",
    ValueType.STRING,
    lambda store: getattr(MAIN_JAR_INFO.fetch(store), "preloader", None),
    name="Preloader Class Name",
    description="Fully qualified preloader class, for FX applications only.",
)

USE_FX_PACKAGING: ParameterDescriptor[bool] = _register(
    "fxPackaging",
    ValueType.BOOLEAN,
    lambda store: bool(getattr(MAIN_JAR_INFO.fetch(store), "fx_application", False)),
    _bool_parser,
    name="FX Packaging",
    description="Whether the entry point is an FX application class.",
)

# -- Identity ------------------------------------------------------------------


def _derive_app_name(store: ParameterStore) -> str | None:
    main_class = MAIN_CLASS.fetch(store)
    if main_class is None:
        return None
    return main_class.rpartition(".")[2]


APP_NAME: ParameterDescriptor[str] = _register(
    "name",
    ValueType.STRING,
    _derive_app_name,
    _text_parser,
    name="App Name",
    description="The name of the application.",
)


def _derive_fs_name(store: ParameterStore) -> str | None:
    name = APP_NAME.fetch(store)
    return None if name is None else _TO_FS_NAME_RE.sub("", name)


APP_FS_NAME: ParameterDescriptor[str] = _register(
    "name.fs",
    ValueType.STRING,
    _derive_fs_name,
    _text_parser,
    name="App File System Name",
    description="Application name suitable for file names.",
)

ICON: ParameterDescriptor[Path] = _register(
    "icon", ValueType.PATH, parser=_path_parser, name="Icon", description="Main icon of the bundle."
)
VENDOR: ParameterDescriptor[str] = _register("vendor", ValueType.STRING, _constant("Unknown"), name="Vendor")
EMAIL: ParameterDescriptor[str] = _register("email", ValueType.STRING, _constant("Unknown"), name="Email")
CATEGORY: ParameterDescriptor[str] = _register("category", ValueType.STRING, _constant("Unknown"), name="Category")
DESCRIPTION: ParameterDescriptor[str] = _register(
    "description",
    ValueType.STRING,
    lambda store: APP_NAME.fetch(store) or "none",
    name="Description",
)
COPYRIGHT: ParameterDescriptor[str] = _register(
    "copyright",
    ValueType.STRING,
    lambda _store: f"Copyright (C) {datetime.now().year}",
    name="Copyright",
)
TITLE: ParameterDescriptor[str] = _register("title", ValueType.STRING, APP_NAME.fetch, name="Title")
VERSION: ParameterDescriptor[str] = _register("appVersion", ValueType.STRING, _constant("1.0"), name="Version")


def _derive_identifier(store: ParameterStore) -> str | None:
    main_class = MAIN_CLASS.fetch(store)
    if main_class is None:
        return None
    index = main_class.rfind(".")
    return main_class[:index] if index >= 1 else main_class


IDENTIFIER: ParameterDescriptor[str] = _register(
    "identifier",
    ValueType.STRING,
    _derive_identifier,
    name="Identifier",
    description="Reverse-DNS identifier such as com.example.app.",
)
PREFERENCES_ID: ParameterDescriptor[str] = _register(
    "preferencesID",
    ValueType.STRING,
    lambda store: (IDENTIFIER.fetch(store) or "").replace(".", "/"),
    name="Preferences ID",
    description="Slash separated preferences node searched for user JVM options.",
)
INSTALLER_NAME: ParameterDescriptor[str] = _register(
    "installerName",
    ValueType.STRING,
    APP_FS_NAME.fetch,
    name="Installer Name",
    description="Base file name of produced installers.",
)

# -- Launch options ------------------------------------------------------------

ARGUMENTS: ParameterDescriptor[list[str]] = _register(
    "arguments",
    ValueType.STRING_LIST,
    _fresh(list),
    lambda raw, _store: split_arguments(raw),
    name="Command Line Arguments",
)
JVM_OPTIONS: ParameterDescriptor[list[str]] = _register(
    "jvmOptions",
    ValueType.STRING_LIST,
    _fresh(list),
    lambda raw, _store: split_whitespace(raw),
    name="JVM Options",
)
JVM_PROPERTIES: ParameterDescriptor[Mapping[str, str]] = _register(
    "jvmProperties",
    ValueType.STRING_MAP,
    _fresh(dict),
    lambda raw, _store: parse_properties(raw),
    name="JVM System Properties",
)
USER_JVM_OPTIONS: ParameterDescriptor[Mapping[str, str]] = _register(
    "userJvmOptions",
    ValueType.STRING_MAP,
    _fresh(dict),
    lambda raw, _store: parse_properties(raw),
    name="User JVM Options",
    description="JVM options the user may override, with their default values.",
)
DEBUG_PORT: ParameterDescriptor[int] = _register(
    "-J-Xdebug",
    ValueType.INTEGER,
    parser=lambda raw, _store: parse_int(raw, key="-J-Xdebug"),
    name="Debug Port",
)
SINGLETON: ParameterDescriptor[bool] = _register(
    "singleton", ValueType.BOOLEAN, _constant(False), _bool_parser, name="Singleton"
)

# -- Install behaviour -----------------------------------------------------------

SYSTEM_WIDE: ParameterDescriptor[bool] = _register("systemWide", ValueType.BOOLEAN, parser=_bool_parser)
SERVICE_HINT: ParameterDescriptor[bool] = _register("serviceHint", ValueType.BOOLEAN, _constant(False), _bool_parser)
START_ON_INSTALL: ParameterDescriptor[bool] = _register(
    "startOnInstall", ValueType.BOOLEAN, _constant(False), _bool_parser
)
STOP_ON_UNINSTALL: ParameterDescriptor[bool] = _register(
    "stopOnUninstall", ValueType.BOOLEAN, _constant(True), _bool_parser
)
RUN_AT_STARTUP: ParameterDescriptor[bool] = _register("runAtStartup", ValueType.BOOLEAN, _constant(False), _bool_parser)
SIGN_BUNDLE: ParameterDescriptor[bool] = _register("signBundle", ValueType.BOOLEAN, parser=_bool_parser)
SHORTCUT_HINT: ParameterDescriptor[bool] = _register("shortcutHint", ValueType.BOOLEAN, _constant(False), _bool_parser)
MENU_HINT: ParameterDescriptor[bool] = _register("menuHint", ValueType.BOOLEAN, _constant(True), _bool_parser)
LICENSE_FILE: ParameterDescriptor[list[str]] = _register(
    "licenseFile",
    ValueType.STRING_LIST,
    _fresh(list),
    lambda raw, _store: [entry.strip() for entry in raw.split(",") if entry.strip()],
    name="License",
    description="License files, relative to the assembled application directory.",
)
LICENSE_TYPE: ParameterDescriptor[str] = _register("licenseType", ValueType.STRING, _constant("Unknown"))

# -- Build ---------------------------------------------------------------------

BUILD_ROOT: ParameterDescriptor[Path] = _register(
    "buildRoot",
    ValueType.PATH,
    lambda _store: Path(tempfile.mkdtemp(prefix="appbundler")),
    _path_parser,
    name="Build Root",
    description="Directory holding temporary files for every bundler.",
)
VERBOSE: ParameterDescriptor[bool] = _register(
    "verbose",
    ValueType.BOOLEAN,
    _constant(False),
    lambda raw, _store: parse_verbose(raw),
    name="Verbose",
)
DROP_IN_RESOURCES_ROOT: ParameterDescriptor[Path] = _register(
    "dropinResourcesRoot",
    ValueType.PATH,
    lambda _store: Path("."),
    _path_parser,
    name="Drop-In Resources Root",
    description="Directory searched first for customised bundler resources.",
)
SECONDARY_LAUNCHERS: ParameterDescriptor[list[Mapping[str, object]]] = _register(
    "secondaryLaunchers",
    ValueType.OBJECT,
    _fresh(list),
    name="Secondary Launchers",
    description="Parameter maps, one per additional launcher.",
)
FILE_ASSOCIATIONS: ParameterDescriptor[list[Mapping[str, object]]] = _register(
    "fileAssociations",
    ValueType.OBJECT,
    _fresh(list),
    name="File Associations",
)


def _split_list(raw: str, _store: ParameterStore) -> list[str]:
    return [token for token in _LIST_SPLIT_RE.split(raw) if token]


FA_EXTENSIONS: ParameterDescriptor[list[str]] = _register(
    "fileAssociation.extension",
    ValueType.STRING_LIST,
    parser=_split_list,
    name="File Association Extension",
    description="File extensions to associate, without dots.",
)
FA_CONTENT_TYPE: ParameterDescriptor[list[str]] = _register(
    "fileAssociation.contentType",
    ValueType.STRING_LIST,
    parser=_split_list,
    name="File Association Content Type",
    description="MIME types to associate, such as application/x-vnd.my-app.",
)
FA_DESCRIPTION: ParameterDescriptor[str] = _register(
    "fileAssociation.description",
    ValueType.STRING,
    lambda store: f"{APP_NAME.fetch(store)} File",
    name="File Association Description",
)
FA_ICON: ParameterDescriptor[Path] = _register(
    "fileAssociation.icon",
    ValueType.PATH,
    lambda store: ICON.fetch(store),
    _path_parser,
    name="File Association Icon",
)
PREDEFINED_APP_IMAGE: ParameterDescriptor[Path] = _register(
    "predefinedAppImage",
    ValueType.PATH,
    parser=_path_parser,
    name="Predefined App Image",
    description="Pre-built application image consumed by installer bundlers.",
)
LAUNCHER_EXECUTABLE: ParameterDescriptor[Path] = _register(
    "launcherExecutable",
    ValueType.PATH,
    parser=_path_parser,
    name="Launcher Executable",
    description="Native launcher copied into app images instead of the built-in one.",
)

# -- Runtime modules -------------------------------------------------------------

ADD_MODULES: ParameterDescriptor[set[str]] = _register(
    "add-modules",
    ValueType.STRING_SET,
    lambda _store: {"java.base"},
    lambda raw, _store: split_comma_set(raw),
    name="Add Modules",
)
LIMIT_MODULES: ParameterDescriptor[set[str]] = _register(
    "limit-modules",
    ValueType.STRING_SET,
    _fresh(set),
    lambda raw, _store: split_comma_set(raw),
    name="Limit Modules",
)
STRIP_NATIVE_COMMANDS: ParameterDescriptor[bool] = _register(
    "strip-native-commands", ValueType.BOOLEAN, _constant(True), _bool_parser
)
DETECT_MODULES: ParameterDescriptor[bool] = _register(
    "detect-modules", ValueType.BOOLEAN, _constant(False), _bool_parser
)
JLINK_OPTIONS: ParameterDescriptor[Mapping[str, str]] = _register(
    "jlinkOptions",
    ValueType.STRING_MAP,
    _fresh(dict),
    lambda raw, _store: parse_properties(raw),
    name="JLink Options",
)


# -- Helpers ---------------------------------------------------------------------


def main_jar_path(store: ParameterStore) -> Path | None:
    """Return the absolute path of the main jar, if one is known.

    Falls back to ``srcdir`` when the jar is missing under the resource base.

    Args:
        store: Parameter store for the run.

    Returns:
        Path | None: Main jar path.
    """

    main_jar = MAIN_JAR.fetch(store)
    if main_jar is None or not main_jar.included_files:
        return None
    relative = main_jar.included_files[0]
    candidate = main_jar.base_dir / relative
    if not candidate.exists():
        source_dir = SOURCE_DIR.fetch(store)
        if source_dir is not None:
            candidate = Path(source_dir, relative)
    return candidate


def main_class_for_launcher(store: ParameterStore) -> str:
    """Return the class a launcher should start.

    Args:
        store: Parameter store for the run.

    Returns:
        str: Class from ``module`` when set, else the main class when a main
        jar exists, else ``""``.
    """

    if MODULE.fetch(store) is not None:
        return module_class_part(store) or ""
    if MAIN_JAR.fetch(store) is not None:
        return MAIN_CLASS.fetch(store) or ""
    return ""


def validate_main_class_info(store: ParameterStore) -> None:
    """Ensure the run has an entry point, sniffing jar manifests if needed.

    Args:
        store: Parameter store for the run.

    Raises:
        ConfigurationInvalidError: If no main class was supplied or found.
    """

    has_main_class = store.is_overridden(MAIN_CLASS)
    has_main_jar = store.is_overridden(MAIN_JAR)
    has_classpath = store.is_overridden(CLASSPATH)
    if (has_main_class and has_main_jar and has_classpath) or store.is_overridden(MODULE):
        return
    if MAIN_CLASS.fetch(store) is not None:
        return
    if has_main_jar:
        main_jar = MAIN_JAR.fetch(store)
        raise ConfigurationInvalidError(
            f"An application class was not specified nor was one found in the jar {main_jar}",
            f"Please specify a applicationClass or ensure that the jar {main_jar} specifies one in the manifest.",
        )
    if has_classpath:
        raise ConfigurationInvalidError(
            "An application class was not specified nor was one found in the supplied classpath",
            "Please specify a applicationClass or ensure that the classpath has a jar containing one "
            "in the manifest.",
        )
    raise ConfigurationInvalidError(
        "An application class was not specified nor was one found in the supplied application resources",
        "Please specify a applicationClass or ensure that the appResources has a jar containing one "
        "in the manifest.",
    )


def descriptor_by_id(descriptor_id: str) -> ParameterDescriptor[object] | None:
    """Return the standard descriptor registered under ``descriptor_id``.

    Args:
        descriptor_id: Descriptor id to look up.

    Returns:
        ParameterDescriptor[object] | None: Matching descriptor, if any.
    """

    for descriptor in STANDARD_DESCRIPTORS:
        if descriptor.id == descriptor_id:
            return descriptor
    return None


__all__ = [
    "ADD_MODULES",
    "APP_FS_NAME",
    "APP_NAME",
    "APP_RESOURCES",
    "APP_RESOURCES_LIST",
    "ARGUMENTS",
    "BUILD_ROOT",
    "CATEGORY",
    "CLASSPATH",
    "COPYRIGHT",
    "DEBUG_PORT",
    "DESCRIPTION",
    "DETECT_MODULES",
    "DROP_IN_RESOURCES_ROOT",
    "EMAIL",
    "FA_CONTENT_TYPE",
    "FA_DESCRIPTION",
    "FA_EXTENSIONS",
    "FA_ICON",
    "FILE_ASSOCIATIONS",
    "ICON",
    "IDENTIFIER",
    "INSTALLER_NAME",
    "JAVA_BASE_JMOD",
    "JLINK_OPTIONS",
    "JVM_OPTIONS",
    "JVM_PROPERTIES",
    "LAUNCHER_EXECUTABLE",
    "LICENSE_FILE",
    "LICENSE_TYPE",
    "LIMIT_MODULES",
    "MAIN_CLASS",
    "MAIN_JAR",
    "MAIN_JAR_INFO",
    "MENU_HINT",
    "MODULE",
    "MODULE_PATH",
    "PREDEFINED_APP_IMAGE",
    "PREFERENCES_ID",
    "PRELOADER_CLASS",
    "RUN_AT_STARTUP",
    "SECONDARY_LAUNCHERS",
    "SERVICE_HINT",
    "SHORTCUT_HINT",
    "SIGN_BUNDLE",
    "SINGLETON",
    "SOURCE_DIR",
    "STANDARD_DESCRIPTORS",
    "START_ON_INSTALL",
    "STOP_ON_UNINSTALL",
    "STRIP_NATIVE_COMMANDS",
    "SYSTEM_WIDE",
    "TITLE",
    "USER_JVM_OPTIONS",
    "USE_FX_PACKAGING",
    "VENDOR",
    "VERBOSE",
    "VERSION",
    "descriptor_by_id",
    "main_class_for_launcher",
    "main_jar_path",
    "module_class_part",
    "module_name_part",
    "validate_main_class_info",
]
