# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Leveled, user-facing logging helpers backed by Rich consoles."""

from __future__ import annotations

from dataclasses import dataclass

from rich.rule import Rule
from rich.text import Text

from ...runtime.console.manager import detect_tty, get_console_manager


@dataclass(slots=True)
class LogSettings:
    """Process-wide switches controlling which log levels reach the console.

    Attributes:
        verbose: Emit :func:`verbose` messages.
        debug: Emit :func:`debug` messages (implies verbose output).
        use_emoji: Prefix messages with level glyphs.
        use_color: Explicit colour preference; ``None`` defers to TTY detection.
    """

    verbose: bool = False
    debug: bool = False
    use_emoji: bool = True
    use_color: bool | None = None


_SETTINGS = LogSettings()


def configure_logging(
    *,
    verbose: bool | None = None,
    debug: bool | None = None,
    use_emoji: bool | None = None,
    use_color: bool | None = None,
) -> LogSettings:
    """Update the shared :class:`LogSettings` and return them.

    Args:
        verbose: Optional replacement for the verbose flag.
        debug: Optional replacement for the debug flag.
        use_emoji: Optional replacement for the emoji flag.
        use_color: Optional explicit colour preference.

    Returns:
        LogSettings: The updated process-wide settings.
    """

    if verbose is not None:
        _SETTINGS.verbose = verbose
    if debug is not None:
        _SETTINGS.debug = debug
    if use_emoji is not None:
        _SETTINGS.use_emoji = use_emoji
    if use_color is not None:
        _SETTINGS.use_color = use_color
    return _SETTINGS


def log_settings() -> LogSettings:
    """Return the shared :class:`LogSettings` instance.

    Returns:
        LogSettings: Current process-wide logging settings.
    """

    return _SETTINGS


def is_verbose() -> bool:
    """Return ``True`` when verbose or debug output is enabled.

    Returns:
        bool: Whether :func:`verbose` messages are rendered.
    """

    return _SETTINGS.verbose or _SETTINGS.debug


def is_debug() -> bool:
    """Return ``True`` when debug output is enabled.

    Returns:
        bool: Whether :func:`debug` messages are rendered.
    """

    return _SETTINGS.debug


def _print_line(msg: str, *, glyph: str, style: str | None, stderr: bool = False) -> None:
    """Render ``msg`` to the console using the shared styling rules.

    Args:
        msg: Message text to print.
        glyph: Emoji prefix used when emoji output is enabled.
        style: Rich style applied when colour output is active.
        stderr: Route the message to standard error.
    """

    color_enabled = detect_tty() if _SETTINGS.use_color is None else _SETTINGS.use_color
    console = get_console_manager().get(color=color_enabled, emoji=_SETTINGS.use_emoji, stderr=stderr)
    prefix = glyph if _SETTINGS.use_emoji else ""
    text = Text(f"{prefix}{msg}")
    if style and color_enabled:
        text.stylize(style)
    console.print(text)


def section(title: str) -> None:
    """Render a section header to delineate console output blocks.

    Args:
        title: Section title displayed to the user.
    """

    color_enabled = detect_tty() if _SETTINGS.use_color is None else _SETTINGS.use_color
    console = get_console_manager().get(color=color_enabled, emoji=_SETTINGS.use_emoji)
    if color_enabled:
        console.print()
        console.print(Rule(title))
    else:
        console.print(f"\n--- {title} ---")


def info(msg: str) -> None:
    """Emit an informational message.

    Args:
        msg: Message text to display.
    """

    _print_line(msg, glyph="ℹ️ ", style="cyan")


def ok(msg: str) -> None:
    """Emit a success message.

    Args:
        msg: Message text to display.
    """

    _print_line(msg, glyph="✅ ", style="green")


def warn(msg: str) -> None:
    """Emit a warning message.

    Args:
        msg: Message text to display.
    """

    _print_line(msg, glyph="⚠️ ", style="yellow")


def fail(msg: str) -> None:
    """Emit an error message on standard error.

    Args:
        msg: Message text to display.
    """

    _print_line(msg, glyph="❌ ", style="red", stderr=True)


def verbose(msg: str) -> None:
    """Emit ``msg`` only when verbose output is enabled.

    Args:
        msg: Message text to display.
    """

    if is_verbose():
        _print_line(msg, glyph="", style="dim")


def debug(msg: str) -> None:
    """Emit ``msg`` only when debug output is enabled.

    Args:
        msg: Message text to display.
    """

    if _SETTINGS.debug:
        _print_line(f"[debug] {msg}", glyph="", style="bold cyan")


__all__ = [
    "LogSettings",
    "configure_logging",
    "debug",
    "fail",
    "info",
    "is_debug",
    "is_verbose",
    "log_settings",
    "ok",
    "section",
    "verbose",
    "warn",
]
