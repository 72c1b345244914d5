# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Launcher configuration files written next to every application launcher."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from .. import __version__
from ..core.logging import info
from ..modules.classify import ModuleClassifier, ModuleKind
from ..params import standard
from ..params.store import ParameterStore

APPLICATION_SECTION: Final[str] = "Application"
JVM_OPTIONS_SECTION: Final[str] = "JVMOptions"
JVM_USER_OPTIONS_SECTION: Final[str] = "JVMUserOptions"
ARG_OPTIONS_SECTION: Final[str] = "ArgOptions"

_CLASSPATH_SPLIT_RE: Final[re.Pattern[str]] = re.compile(r"[ :;]")
_UNESCAPED_EQUALS_RE: Final[re.Pattern[str]] = re.compile(r"(?<!\\)(?:\\\\)*=")
_ESCAPED_CHAR_RE: Final[re.Pattern[str]] = re.compile(r"\\([\\=])")
_SECTION_RE: Final[re.Pattern[str]] = re.compile(r"^\[(?P<name>[^\]]+)\]$")
_DEBUG_AGENT: Final[str] = "-agentlib:jdwp=transport=dt_socket,server=y,suspend=y,address=localhost:"


def escape_key(key: str) -> str:
    """Return ``key`` with ``\\`` escaped as ``\\\\`` and ``=`` as ``\\=``."""

    return key.replace("\\", "\\\\").replace("=", "\\=")


def unescape(text: str) -> str:
    """Reverse :func:`escape_key`."""

    return _ESCAPED_CHAR_RE.sub(r"\1", text)


def split_entry(line: str) -> tuple[str, str | None]:
    """Split ``line`` on its first unescaped ``=``.

    An ``=`` is unescaped when an even number of backslashes precedes it.

    Args:
        line: Raw configuration line.

    Returns:
        tuple[str, str | None]: Unescaped key and the value, or ``None``
        when the line holds no unescaped ``=``.
    """

    match = _UNESCAPED_EQUALS_RE.search(line)
    if match is None:
        return unescape(line), None
    return unescape(line[: match.end() - 1]), line[match.end() :]


def _read_argument(line: str) -> str:
    if line.endswith("\\=") and line.count("=") == 1:
        return f"{line[:-2]}="
    return line


@dataclass(slots=True)
class LaunchConfig:
    """In-memory form of a launcher configuration file.

    Attributes:
        application: ``[Application]`` entries in write order.
        jvm_options: ``[JVMOptions]`` lines.
        jvm_user_options: ``[JVMUserOptions]`` key/value pairs.
        arguments: ``[ArgOptions]`` arguments.
    """

    application: dict[str, str] = field(default_factory=dict)
    jvm_options: list[str] = field(default_factory=list)
    jvm_user_options: dict[str, str] = field(default_factory=dict)
    arguments: list[str] = field(default_factory=list)

    @classmethod
    def from_store(
        cls,
        store: ParameterStore,
        runtime_location: str,
        *,
        classifier: ModuleClassifier | None = None,
        java_version: str = "",
    ) -> LaunchConfig:
        """Collect launcher settings for the application described by ``store``.

        Args:
            store: Parameter store for the launcher.
            runtime_location: Runtime directory relative to ``$APPDIR``.
            classifier: Classifier used to inspect the main jar.
            java_version: Runtime version; omitted from the file when empty.

        Returns:
            LaunchConfig: Populated configuration.
        """

        classifier = classifier or ModuleClassifier()
        main_jar = standard.main_jar_path(store)
        main_kind = classifier.kind(main_jar) if main_jar is not None else ModuleKind.UNKNOWN
        main_module = standard.MODULE.fetch(store)

        classpath_entries = _CLASSPATH_SPLIT_RE.split(standard.CLASSPATH.fetch(store) or "")
        application: dict[str, str] = {
            "app.name": str(standard.APP_NAME.fetch(store)),
            "app.version": str(standard.VERSION.fetch(store)),
            "app.preferences.id": str(standard.PREFERENCES_ID.fetch(store)),
            "app.runtime": runtime_location,
            "app.identifier": str(standard.IDENTIFIER.fetch(store)),
            "app.classpath": os.pathsep.join(entry for entry in classpath_entries if entry),
            "app.application.instance": "single" if standard.SINGLETON.fetch(store) else "multiple",
        }
        if main_module is not None and main_kind in {ModuleKind.UNKNOWN, ModuleKind.MODULAR_JAR}:
            application["app.mainmodule"] = main_module
        else:
            if main_jar is not None:
                application["app.mainjar"] = main_jar.name
            main_class = standard.main_class_for_launcher(store)
            if main_class:
                application["app.mainclass"] = main_class.replace(".", "/")
        if java_version:
            application["app.java.version"] = java_version
        application["packager.version"] = __version__
        port = standard.DEBUG_PORT.fetch(store)
        if port is not None:
            application["app.debug"] = f"{_DEBUG_AGENT}{port}"

        jvm_options = list(standard.JVM_OPTIONS.fetch(store) or [])
        for key, value in (standard.JVM_PROPERTIES.fetch(store) or {}).items():
            jvm_options.append(f"-D{key}={value}")
        preloader = standard.PRELOADER_CLASS.fetch(store)
        if preloader is not None:
            jvm_options.append(f"-Djavafx.preloader={preloader}")

        user_options: dict[str, str] = {}
        for key, value in (standard.USER_JVM_OPTIONS.fetch(store) or {}).items():
            if key is None or value is None:
                info("WARNING: a jvmuserarg has a null name or value.")
                continue
            user_options[key] = value

        return cls(
            application=application,
            jvm_options=jvm_options,
            jvm_user_options=user_options,
            arguments=list(standard.ARGUMENTS.fetch(store) or []),
        )

    def render(self) -> str:
        """Return the file contents.

        Returns:
            str: Configuration text with one blank line between sections.
        """

        lines = [f"[{APPLICATION_SECTION}]"]
        lines.extend(f"{key}={value}" for key, value in self.application.items())
        lines.extend(["", f"[{JVM_OPTIONS_SECTION}]", *self.jvm_options])
        lines.extend(["", f"[{JVM_USER_OPTIONS_SECTION}]"])
        lines.extend(f"{escape_key(key)}={value}" for key, value in self.jvm_user_options.items())
        lines.extend(["", f"[{ARG_OPTIONS_SECTION}]"])
        for argument in self.arguments:
            if argument.endswith("=") and argument.count("=") == 1:
                lines.append(f"{argument[:-1]}\\=")
            else:
                lines.append(argument)
        return "\n".join(lines) + "\n"

    def write(self, path: Path) -> Path:
        """Write :meth:`render` output to ``path``, replacing any existing file.

        Args:
            path: Destination file.

        Returns:
            Path: ``path``.
        """

        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(), encoding="utf-8")
        return path


def read_launch_config(path: Path) -> LaunchConfig:
    """Parse a file produced by :meth:`LaunchConfig.write`.

    Args:
        path: Configuration file.

    Returns:
        LaunchConfig: Parsed configuration. Unknown sections are ignored.
    """

    config = LaunchConfig()
    section: str | None = None
    for line in path.read_text(encoding="utf-8").splitlines():
        if not line:
            continue
        header = _SECTION_RE.match(line)
        if header is not None:
            section = header.group("name")
            continue
        if section == APPLICATION_SECTION:
            key, value = split_entry(line)
            config.application[key] = value or ""
        elif section == JVM_OPTIONS_SECTION:
            config.jvm_options.append(line)
        elif section == JVM_USER_OPTIONS_SECTION:
            key, value = split_entry(line)
            config.jvm_user_options[key] = value or ""
        elif section == ARG_OPTIONS_SECTION:
            config.arguments.append(_read_argument(line))
    return config


__all__ = [
    "APPLICATION_SECTION",
    "ARG_OPTIONS_SECTION",
    "JVM_OPTIONS_SECTION",
    "JVM_USER_OPTIONS_SECTION",
    "LaunchConfig",
    "escape_key",
    "read_launch_config",
    "split_entry",
    "unescape",
]
