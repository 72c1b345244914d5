# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Entry-point discovery from jar manifests."""

from __future__ import annotations

import zipfile
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..core.logging import info

MANIFEST_ENTRY: Final[str] = "META-INF/MANIFEST.MF"
MAIN_CLASS_ATTRIBUTE: Final[str] = "Main-Class"
FX_MAIN_ATTRIBUTE: Final[str] = "JavaFX-Application-Class"
PRELOADER_ATTRIBUTE: Final[str] = "JavaFX-Preloader-Class"
CLASS_PATH_ATTRIBUTE: Final[str] = "Class-Path"


@dataclass(frozen=True, slots=True)
class MainJarInfo:
    """Entry-point details sniffed from the first qualifying jar.

    Attributes:
        main_class: Fully qualified class to launch.
        main_jar: Jar providing ``main_class``.
        base_dir: Resource directory the jar was found under.
        classpath: Space separated ``Class-Path`` attribute, ``""`` when absent.
        preloader: Optional preloader class.
        fx_application: ``True`` when the class came from the FX attribute.
    """

    main_class: str
    main_jar: Path
    base_dir: Path
    classpath: str = ""
    preloader: str | None = None
    fx_application: bool = False


def parse_manifest(text: str) -> dict[str, str]:
    """Parse the main section of a manifest into attributes.

    Continuation lines start with a single space and extend the previous
    attribute value. Parsing stops at the first blank line.

    Args:
        text: Manifest text.

    Returns:
        dict[str, str]: Main-section attributes.
    """

    attributes: dict[str, str] = {}
    last_key: str | None = None
    for line in text.splitlines():
        if not line.strip():
            break
        if line.startswith(" ") and last_key is not None:
            attributes[last_key] += line[1:]
            continue
        key, sep, value = line.partition(":")
        if not sep:
            continue
        last_key = key.strip()
        attributes[last_key] = value.strip()
    return attributes


def read_manifest(jar: Path) -> dict[str, str] | None:
    """Return the main manifest attributes of ``jar``.

    Args:
        jar: Jar file to inspect.

    Returns:
        dict[str, str] | None: Attributes, or ``None`` when the jar has no
        manifest or cannot be read as a zip archive.
    """

    try:
        with zipfile.ZipFile(jar) as archive:
            try:
                payload = archive.read(MANIFEST_ENTRY)
            except KeyError:
                return None
    except (OSError, zipfile.BadZipFile):
        return None
    return parse_manifest(payload.decode("utf-8", errors="replace"))


def sniff_main_jar(
    candidates: Iterable[tuple[Path, str]],
    *,
    declared_main_class: str | None = None,
) -> MainJarInfo | None:
    """Return entry-point details from the first qualifying candidate jar.

    Args:
        candidates: ``(base_dir, relative_path)`` pairs in priority order.
            Entries that are not existing ``.jar`` files are ignored.
        declared_main_class: Main class supplied by the caller, if any. When
            set, a jar only qualifies when one of its entry attributes
            matches it.

    Returns:
        MainJarInfo | None: Details of the first match, ``None`` when no jar
        qualifies.
    """

    for base_dir, relative in candidates:
        if not relative.lower().endswith(".jar"):
            continue
        jar = base_dir / relative
        if not jar.is_file():
            continue
        attributes = read_manifest(jar)
        if attributes is None:
            continue
        main_class = attributes.get(MAIN_CLASS_ATTRIBUTE)
        fx_main = attributes.get(FX_MAIN_ATTRIBUTE)
        if declared_main_class is not None:
            if declared_main_class == fx_main:
                chosen, is_fx = declared_main_class, True
            elif declared_main_class == main_class:
                chosen, is_fx = declared_main_class, False
            else:
                if fx_main is not None:
                    info(
                        f"The jar {relative} has an FX Application class {fx_main} that does not match "
                        f"the declared main {declared_main_class}"
                    )
                if main_class is not None:
                    info(
                        f"The jar {relative} has a main class {main_class} that does not match "
                        f"the declared main {declared_main_class}"
                    )
                continue
        elif fx_main is not None:
            chosen, is_fx = fx_main, True
        elif main_class is not None:
            chosen, is_fx = main_class, False
        else:
            continue
        return MainJarInfo(
            main_class=chosen,
            main_jar=jar,
            base_dir=base_dir,
            classpath=attributes.get(CLASS_PATH_ATTRIBUTE, ""),
            preloader=attributes.get(PRELOADER_ATTRIBUTE),
            fx_application=is_fx,
        )
    return None


__all__ = ["MainJarInfo", "parse_manifest", "read_manifest", "sniff_main_jar"]
