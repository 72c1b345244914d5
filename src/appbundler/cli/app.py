# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""CLI application entry point wiring the bundling commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich.table import Table

from ..bundlers.driver import BundleType, generate_bundles
from ..bundlers.registry import default_registry
from ..config import BundleConfig, ConfigError, build_store, load_config
from ..core.logging import configure_logging
from .shared import CLIError, build_cli_logger, parse_param

app = typer.Typer(
    name="appbundler",
    help="Build application images and native installers.",
    no_args_is_help=True,
    add_completion=False,
)


def _resolve_config(
    config_path: Path | None,
    *,
    output: Path | None,
    bundle_type: BundleType | None,
    bundle_format: str | None,
    verbose: bool,
    debug: bool,
    no_emoji: bool,
) -> BundleConfig:
    """Return the configuration for a run with command-line overrides applied.

    Raises:
        CLIError: If the configuration file cannot be loaded.
    """

    try:
        config = load_config(config_path) if config_path is not None else BundleConfig()
    except ConfigError as exc:
        raise CLIError(str(exc), exit_code=2) from exc
    if output is not None:
        config.output_dir = output
    if bundle_type is not None:
        config.bundle_type = bundle_type
    if bundle_format is not None:
        config.bundle_format = bundle_format
    config.verbose = config.verbose or verbose
    config.debug = config.debug or debug
    config.emoji = config.emoji and not no_emoji
    return config


@app.command("bundle", help="Run the selected bundlers and report their artifacts.")
def bundle(
    config_path: Annotated[
        Path | None,
        typer.Option("--config", "-c", help="TOML file holding an [appbundler] or [tool.appbundler] table."),
    ] = None,
    output: Annotated[Path | None, typer.Option("--output", "-o", help="Directory receiving artifacts.")] = None,
    bundle_type: Annotated[
        BundleType | None,
        typer.Option("--type", "-t", case_sensitive=False, help="Family of bundlers to run."),
    ] = None,
    bundle_format: Annotated[
        str | None, typer.Option("--format", "-f", help="Run only the bundler with this id.")
    ] = None,
    params: Annotated[
        list[str] | None,
        typer.Option("--param", "-p", help="Bundle parameter as KEY=VALUE; repeat to accumulate."),
    ] = None,
    verbose: Annotated[bool, typer.Option("--verbose", "-v", help="Show external tool output.")] = False,
    debug: Annotated[bool, typer.Option("--debug", help="Emit debug output and keep build directories.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in log output.")] = False,
    best_effort: Annotated[
        bool,
        typer.Option("--best-effort", help="Exit successfully even when some bundlers fail."),
    ] = False,
) -> None:
    """Execute the ``bundle`` command.

    Raises:
        typer.Exit: With status 1 when no artifact was produced or a bundler
            failed, or with the error's status for invalid input.
    """

    logger = build_cli_logger(emoji=not no_emoji, debug=debug)
    try:
        config = _resolve_config(
            config_path,
            output=output,
            bundle_type=bundle_type,
            bundle_format=bundle_format,
            verbose=verbose,
            debug=debug,
            no_emoji=no_emoji,
        )
        configure_logging(verbose=config.verbose, debug=config.debug, use_emoji=config.emoji)
        store = build_store(config)
        for raw in params or ():
            key, value = parse_param(raw)
            store.add_argument(key, value)
    except CLIError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    logger.debug(f"output={config.output_dir} type={config.bundle_type.value} format={config.bundle_format}")
    report = generate_bundles(
        store,
        config.output_dir,
        bundle_type=config.bundle_type,
        bundle_format=config.bundle_format,
        registry=default_registry(),
    )
    for artifact in report.artifacts.values():
        logger.echo(str(artifact))

    if report.failed:
        logger.fail(f"Failed bundlers: {', '.join(report.failed)}")
    if not report.artifacts and config.bundle_type is not BundleType.NONE:
        logger.fail("No bundles were produced.")
    if best_effort:
        raise typer.Exit(code=0)
    if report.failed or (not report.artifacts and config.bundle_type is not BundleType.NONE):
        raise typer.Exit(code=1)


@app.command("bundlers", help="List the registered bundlers.")
def list_bundlers(
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji in log output.")] = False,
) -> None:
    """Render the registered bundlers as a table."""

    logger = build_cli_logger(emoji=not no_emoji)
    table = Table(title="Bundlers")
    table.add_column("Id", style="bold")
    table.add_column("Type")
    table.add_column("Platform")
    table.add_column("Supported")
    for bundler in default_registry().bundlers():
        table.add_row(
            bundler.id,
            bundler.bundle_type.value,
            bundler.platform.value,
            "yes" if bundler.supported() else "no",
        )
    logger.console.print(table)


def main() -> None:
    """Invoke the Typer application."""

    app()


__all__ = ["app", "main"]
